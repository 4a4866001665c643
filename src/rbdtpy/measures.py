# -*- coding: utf-8 -*-
"""
rbdtpy.measures
===============

Attribute selection measures of the RBDT-1 algorithm (Abdelhalim, Traore and
Sayed, "RBDT-1: a new rule-based decision tree generation technique", ICMLA
2009).

The measures work on rules rather than on examples: they only look at which
values an attribute takes in which class, never at the frequency counts
attached to the rules.  Every function receives the rule subset it operates
on explicitly.

- Attribute Effectiveness (AE): share of rules in which the attribute is not
  don't-care.
- Attribute Disjointness (ADS): ordinal code for how the value sets of two
  classes relate for one attribute.
- Attribute Autonomy (AA): how uniquely an attribute separates the classes
  compared with the other candidate attributes.
- Minimum Value Distribution (MVD): number of distinct values of the
  attribute, i.e. the number of branches a split on it would create.
"""

from __future__ import annotations
from typing import Iterable, Sequence

from .exceptions import MeasureRangeError, PreconditionError
from .rules import DONT_CARE, Rule

# tolerance for rounding errors when checking measure bounds
EPSILON = 0.01

AE = "attribute effectiveness"
AA = "attribute autonomy"
MAX_ADS = "maximum attribute disjointness"
MVD = "minimum value distribution"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _check_measure(value: float, lb: float, ub: float, name: str) -> None:
    if value > ub + EPSILON or value < lb - EPSILON:
        raise MeasureRangeError(name, value, lb, ub)

def _classes_in(rules: Sequence[Rule]) -> list[str]:
    # order of first appearance
    return list(dict.fromkeys(r.decision_class for r in rules))

def _class_values(attribute: int, decision_class: str, rules: Sequence[Rule]) -> set[str]:
    return {r.value(attribute) for r in rules if r.decision_class == decision_class}

def attribute_values(attribute: int, rules: Sequence[Rule]) -> list[str]:
    """Sorted distinct values (``"DC"`` included) of ``attribute`` in ``rules``."""
    return sorted({r.value(attribute) for r in rules})

def partition_rules(attribute: int, rules: Sequence[Rule]) -> dict[str, list[Rule]]:
    """Group ``rules`` by their value for ``attribute``, keyed in sorted order.

    The relative order of the rules inside each group is preserved.
    """
    groups: dict[str, list[Rule]] = {v: [] for v in attribute_values(attribute, rules)}
    for r in rules:
        groups[r.value(attribute)].append(r)
    return groups


# -----------------------------------------------------------------------------
# Measures
# -----------------------------------------------------------------------------
def attribute_effectiveness(attribute: int, rules: Sequence[Rule]) -> float:
    """
    Attribute Effectiveness of ``attribute`` over ``rules``.

    .. math:: AE(a_j) = \\frac{m - \\sum_i C_{ij}(DC)}{m}

    where ``m`` is the number of rules and :math:`C_{ij}(DC)` the number of
    rules of class ``i`` whose value for :math:`a_j` is don't-care.

    Parameters
    ----------
    attribute : int
        Index of the attribute.
    rules : sequence of Rule
        Rule subset at the current node.

    Returns
    -------
    float
        Value in ``[0, 1]``.  1 means no rule ignores the attribute, 0 means
        every rule does.

    Raises
    ------
    PreconditionError
        If ``rules`` is empty.
    MeasureRangeError
        If the value falls outside ``[0, 1]``.
    """
    m = len(rules)
    if m == 0:
        raise PreconditionError("attribute effectiveness is undefined on an empty rule subset")
    dc = sum(1 for r in rules if r.value(attribute) == DONT_CARE)
    value = (m - dc) / m
    _check_measure(value, 0.0, 1.0, AE)
    return value


def attribute_disjointness(attribute: int, class_a: str, class_b: str,
                           rules: Sequence[Rule]) -> int:
    """
    Attribute Disjointness of ``attribute`` for a pair of classes.

    With :math:`V_a` and :math:`V_b` the sets of values the attribute takes in
    the rules of ``class_a`` and ``class_b``:

    - 0 if :math:`V_a \\subseteq V_b` (equal sets included),
    - 1 if :math:`V_b \\subseteq V_a`,
    - 3 if the sets share no value,
    - 2 otherwise (partial overlap).

    The code is ordinal, not a distance.
    """
    va = _class_values(attribute, class_a, rules)
    vb = _class_values(attribute, class_b, rules)
    if va <= vb:
        return 0
    if vb <= va:
        return 1
    if not (va & vb):
        return 3
    return 2


def attribute_autonomy_for_class(attribute: int, decision_class: str,
                                 candidates: Iterable[int],
                                 rules: Sequence[Rule]) -> float:
    """
    Autonomy of ``attribute`` with respect to one class, :math:`AA(a_j, i)`.

    ``max_ads`` is the largest disjointness between ``decision_class`` and any
    other class present in ``rules``.  For every other candidate attribute the
    disjointness against the same class pairs is summed.  Then

    - 0 if ``max_ads`` is 0 (the attribute does not separate the class),
    - 1 if only two candidates are compared or another candidate reaches
      ``max_ads`` too,
    - ``1 + (s - 1) * max_ads - sum(others)`` otherwise, ``s`` being the
      number of candidates.

    Raises
    ------
    MeasureRangeError
        If ``max_ads`` is outside ``[0, 3 m (m - 1)]``, ``m`` being the
        number of classes in ``rules``.
    """
    candidates = sorted(set(candidates))
    classes = _classes_in(rules)
    others = [c for c in classes if c != decision_class]

    max_ads = max((attribute_disjointness(attribute, decision_class, c, rules) for c in others),
                  default=0)
    m = len(classes)
    _check_measure(max_ads, 0, 3 * m * (m - 1), MAX_ADS)

    ads_others = [
        sum(attribute_disjointness(a_k, decision_class, c, rules) for c in others)
        for a_k in candidates if a_k != attribute
    ]
    s = len(candidates)

    if max_ads == 0:
        return 0.0
    if s == 2 or max_ads in ads_others:
        return 1.0
    return float(1 + (s - 1) * max_ads - sum(ads_others))


def attribute_autonomy(attribute: int, candidates: Iterable[int],
                       rules: Sequence[Rule]) -> float:
    """
    Attribute Autonomy :math:`AA(a_j) = 1 / \\sum_i AA(a_j, i)`.

    The sum runs over every class occurring in ``rules``; each term is
    computed on the whole subset by :func:`attribute_autonomy_for_class`.
    When every term is zero the attribute separates no class at all and its
    autonomy is 0.

    Raises
    ------
    PreconditionError
        If ``rules`` is empty.
    """
    if len(rules) == 0:
        raise PreconditionError("attribute autonomy is undefined on an empty rule subset")
    candidates = sorted(set(candidates))
    total = sum(attribute_autonomy_for_class(attribute, c, candidates, rules)
                for c in _classes_in(rules))
    if total == 0:
        return 0.0
    return 1.0 / total


def minimum_value_distribution(attribute: int, rules: Sequence[Rule]) -> int:
    """Number of distinct values of ``attribute`` in ``rules``, don't-care included."""
    return len({r.value(attribute) for r in rules})
