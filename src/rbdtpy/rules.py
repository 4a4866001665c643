# -*- coding: utf-8 -*-
"""
rbdtpy.rules
============

Rule representation used by the RBDT-1 induction together with the helpers
that turn rule records (as produced by association/classification rule
miners) into :class:`Rule` objects.

A rule states which categorical values of a subset of attributes imply a
class.  Attributes that do not appear in a rule's antecedent hold the
don't-care sentinel :data:`DONT_CARE`, so every rule covers the full attribute
range ``0..n_attributes-1``.
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from .exceptions import PreconditionError

DONT_CARE = "DC"


# -----------------------------------------------------------------------------
# Rule
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Rule:
    """A single classification rule with a total antecedent.

    Parameters
    ----------
    decision_class : str
        Consequent of the rule.
    antecedents : tuple[str, ...]
        Value of every attribute, indexed by attribute position.  Attributes
        absent from the source rule hold ``"DC"``.
    freq_antecedent : int, default=0
        Frequency of the antecedent values (all present at once) in the
        transactional dataset the rule was mined from.
    freq_class : int, default=0
        Frequency of the consequent value.
    freq_both : int, default=0
        Frequency of antecedent and consequent present together.

    Notes
    -----
    The frequencies are carried along for reference only; none of the
    attribute measures use them.
    """

    decision_class: str
    antecedents: tuple[str, ...]
    freq_antecedent: int = 0
    freq_class: int = 0
    freq_both: int = 0

    def __post_init__(self):
        object.__setattr__(self, "antecedents", tuple(str(v) for v in self.antecedents))
        for name in ("freq_antecedent", "freq_class", "freq_both"):
            v = getattr(self, name)
            if int(v) != v or v < 0:
                raise PreconditionError(f"{name} must be a non-negative integer, got {v!r}")
            object.__setattr__(self, name, int(v))

    @property
    def n_attributes(self) -> int:
        return len(self.antecedents)

    def value(self, attribute: int) -> str:
        return self.antecedents[attribute]

    def is_dont_care(self, attribute: int) -> bool:
        return self.antecedents[attribute] == DONT_CARE

    @classmethod
    def from_items(cls, decision_class: str, items: Mapping[int, str], n_attributes: int,
                   freq_antecedent: int = 0, freq_class: int = 0, freq_both: int = 0) -> "Rule":
        """Build a rule from a partial ``{attribute: value}`` mapping.

        Every attribute index missing from ``items`` is filled with
        ``"DC"``.  Indices outside ``0..n_attributes-1`` are rejected.
        """
        values = [DONT_CARE] * n_attributes
        for att, v in items.items():
            if not 0 <= att < n_attributes:
                raise PreconditionError(
                    f"attribute index {att} outside of [0, {n_attributes})"
                )
            values[att] = v
        return cls(decision_class, tuple(values), freq_antecedent, freq_class, freq_both)


# -----------------------------------------------------------------------------
# Ingestion helpers
# -----------------------------------------------------------------------------
def invert_value_map(attribute_values: Mapping[int, Iterable[str]]) -> dict[str, int]:
    """Map every categorical value to the attribute it belongs to.

    Parameters
    ----------
    attribute_values : dict[int, list[str]]
        Attribute index -> possible values of that attribute.

    Returns
    -------
    dict[str, int]
        Value -> attribute index.

    Raises
    ------
    PreconditionError
        If one value is listed under two different attributes; items in a
        rule would then be ambiguous.
    """
    inverted: dict[str, int] = {}
    for att, values in attribute_values.items():
        for v in values:
            if v in inverted and inverted[v] != att:
                raise PreconditionError(
                    f"value {v!r} belongs to both attribute {inverted[v]} and {att}"
                )
            inverted[v] = int(att)
    return inverted


def rules_from_records(records: Iterable[Mapping[str, Any]],
                       attribute_values: Mapping[int, Iterable[str]]) -> list[Rule]:
    """Convert raw rule records into :class:`Rule` objects.

    Each record follows the rule-miner output format::

        {"Y": "setosa", "itemsInX": ["1", "4"], "itemsInZ": [...],
         "freqX": 12, "freqY": 50, "freqZ": 12}

    Items of ``itemsInX`` are looked up in the inverted ``attribute_values``
    map to find the attribute they belong to.  ``itemsInZ`` is ignored.
    """
    value_to_att = invert_value_map(attribute_values)
    n_attributes = max(attribute_values) + 1 if attribute_values else 0
    rules: list[Rule] = []
    for rec in records:
        items: dict[int, str] = {}
        for item in rec.get("itemsInX") or []:
            if item not in value_to_att:
                raise PreconditionError(f"unknown antecedent value {item!r} in rule {rec!r}")
            items[value_to_att[item]] = item
        rules.append(Rule.from_items(
            rec["Y"], items, n_attributes,
            freq_antecedent=rec.get("freqX", 0),
            freq_class=rec.get("freqY", 0),
            freq_both=rec.get("freqZ", 0),
        ))
    return rules


def read_rules_json(path, attribute_values: Mapping[int, Iterable[str]]) -> list[Rule]:
    """Read a JSON list of rule records from ``path``; see :func:`rules_from_records`."""
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    return rules_from_records(records, attribute_values)


def rules_to_arrays(rules: Sequence[Rule]) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(X, y)``: antecedents as an object matrix and the classes."""
    if len(rules) == 0:
        return np.empty((0, 0), dtype=object), np.empty(0, dtype=object)
    X = np.array([r.antecedents for r in rules], dtype=object)
    y = np.array([r.decision_class for r in rules], dtype=object)
    return X, y
