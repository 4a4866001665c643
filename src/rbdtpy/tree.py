# -*- coding: utf-8 -*-
"""
rbdtpy.tree
===========

This module builds a decision tree from a set of classification rules with
the RBDT-1 algorithm.  Instead of splitting examples, every node splits the
*rules* that reach it: the attribute that best separates the classes of the
current rule subset is selected with the cascade

1. maximum Attribute Effectiveness (AE),
2. maximum Attribute Autonomy (AA) among the AE ties,
3. minimum Value Distribution (MVD) among the AA ties,
4. lowest attribute index among the remaining ties,

and one branch is grown for each value (``"DC"`` included) the attribute takes
in the subset.

The estimator :class:`RBDTClassifier` wraps the builder in a scikit‑learn–like
API and provides prediction, rule tracing, rule export, pretty printing and
Graphviz export of the learned tree.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from logging import Logger, getLogger
from types import MappingProxyType
from typing import ClassVar, Iterable, Mapping, Sequence, Union

import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin

from .exceptions import PreconditionError
from .measures import (attribute_autonomy, attribute_effectiveness,
                       minimum_value_distribution, partition_rules)
from .rules import DONT_CARE, Rule


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _isnan_scalar(v) -> bool:
    return (v is None) or (isinstance(v, float) and np.isnan(v))

def _as_value(v) -> str:
    return DONT_CARE if _isnan_scalar(v) else str(v)

def _class_distribution(rules: Sequence[Rule]) -> dict[str, int]:
    return dict(Counter(r.decision_class for r in rules))

def _majority_class(rules: Sequence[Rule]) -> str:
    # Counter.most_common keeps first-seen order among equal counts
    return Counter(r.decision_class for r in rules).most_common(1)[0][0]


# -----------------------------------------------------------------------------
# Nodes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class LeafNode:
    """Terminal node carrying the decision class.

    Attributes
    ----------
    decision_class : str
        Class predicted at this leaf.
    class_distribution : Mapping[str, int]
        Number of rules of each class that reached the leaf.  Empty for a
        leaf grown from an empty rule subset.
    """

    decision_class: str
    class_distribution: Mapping[str, int] = field(default_factory=dict)
    is_leaf: ClassVar[bool] = True

    def __post_init__(self):
        object.__setattr__(self, "class_distribution",
                           MappingProxyType(dict(self.class_distribution)))


@dataclass(frozen=True)
class InternalNode:
    """Node splitting on one attribute.

    Attributes
    ----------
    attribute : int
        Index of the attribute tested at this node.
    branches : Mapping[str, TreeNode]
        Attribute value -> child node, one entry per value observed in the
        rule subset.  Read-only.
    predicted_class : str
        Majority class of the rule subset; used when a value has no branch.
    class_distribution : Mapping[str, int]
        Number of rules of each class that reached the node.
    """

    attribute: int
    branches: Mapping[str, "TreeNode"]
    predicted_class: str
    class_distribution: Mapping[str, int] = field(default_factory=dict)
    is_leaf: ClassVar[bool] = False

    def __post_init__(self):
        object.__setattr__(self, "branches", MappingProxyType(dict(self.branches)))
        object.__setattr__(self, "class_distribution",
                           MappingProxyType(dict(self.class_distribution)))

    @property
    def label(self) -> str:
        return f"A_{self.attribute}"


TreeNode = Union[LeafNode, InternalNode]


def tree_depth(node: TreeNode) -> int:
    """Number of internal nodes on the longest root-to-leaf path."""
    if node.is_leaf:
        return 0
    return 1 + max(tree_depth(ch) for ch in node.branches.values())

def count_leaves(node: TreeNode) -> int:
    if node.is_leaf:
        return 1
    return sum(count_leaves(ch) for ch in node.branches.values())


# -----------------------------------------------------------------------------
# Attribute selection
# -----------------------------------------------------------------------------
def select_attribute(rules: Sequence[Rule], available: Iterable[int]) -> int:
    """
    Choose the attribute to split ``rules`` on.

    Parameters
    ----------
    rules : sequence of Rule
        Rule subset at the current node.
    available : iterable of int
        Attributes not used yet on the path from the root.

    Returns
    -------
    int
        Index of the selected attribute.  Ties surviving AE, AA and MVD are
        resolved by taking the lowest index.

    Raises
    ------
    PreconditionError
        If ``rules`` or ``available`` is empty.
    """
    if len(rules) == 0:
        raise PreconditionError("cannot select an attribute for an empty rule subset")
    candidates = np.array(sorted(set(available)), dtype=int)
    if candidates.size == 0:
        raise PreconditionError("no attribute available for selection")

    # exact ties, no tolerance
    ae = np.array([attribute_effectiveness(int(a), rules) for a in candidates])
    candidates = candidates[ae == ae.max()]
    if candidates.size == 1:
        return int(candidates[0])

    tied = [int(a) for a in candidates]
    aa = np.array([attribute_autonomy(a, tied, rules) for a in tied])
    candidates = candidates[aa == aa.max()]
    if candidates.size == 1:
        return int(candidates[0])

    mvd = np.array([minimum_value_distribution(int(a), rules) for a in candidates])
    candidates = candidates[mvd == mvd.min()]
    return int(candidates[0])


# -----------------------------------------------------------------------------
# Tree construction
# -----------------------------------------------------------------------------
class RBDTreeBuilder:
    """Recursive RBDT-1 tree builder.

    Parameters
    ----------
    n_attributes : int
        Number of attributes every rule is defined over.
    verbose : bool, default=False
        Enable the builder's logger.  Splits are logged at DEBUG level and
        the finished tree at INFO level.
    """

    def __init__(self, n_attributes: int, verbose: bool = False):
        if int(n_attributes) != n_attributes or n_attributes < 1:
            raise PreconditionError(f"n_attributes must be a positive integer, got {n_attributes!r}")
        self.n_attributes = int(n_attributes)
        self.logger: Logger = getLogger(self.__class__.__name__)
        self.logger.disabled = not verbose

    def build(self, rules: Iterable[Rule]) -> TreeNode:
        """Build the tree for ``rules`` using every attribute."""
        rules = list(rules)
        if not rules:
            raise PreconditionError("cannot build a tree from an empty rule list")
        for r in rules:
            if r.n_attributes != self.n_attributes:
                raise PreconditionError(
                    f"rule {r!r} has {r.n_attributes} antecedents, "
                    f"expected {self.n_attributes}"
                )
        available = frozenset(range(self.n_attributes))
        root = self._build_node(rules, available, parent_rules=None, depth=0)
        self.logger.info(
            "Built tree from %d rules: depth=%d, leaves=%d",
            len(rules), tree_depth(root), count_leaves(root),
        )
        return root

    def _build_node(self, rules: list[Rule], available: frozenset,
                    parent_rules: list[Rule] | None, depth: int) -> TreeNode:
        """
        Grow the subtree for ``rules``.

        An empty subset has no class of its own and takes the majority class
        of ``parent_rules``; at the root there is no parent and the call
        fails.  A subset of a single class, or one with no attribute left,
        becomes a leaf.  Anything else is split on the selected attribute and
        every child receives ``available`` minus that attribute.
        """
        if not rules:
            if not parent_rules:
                raise PreconditionError(
                    "empty rule subset without an enclosing subset to take a class from"
                )
            return LeafNode(_majority_class(parent_rules))

        dist = _class_distribution(rules)
        if len(dist) == 1:
            return LeafNode(rules[0].decision_class, dist)
        if not available:
            return LeafNode(_majority_class(rules), dist)

        att = select_attribute(rules, available)
        remaining = available - {att}
        groups = partition_rules(att, rules)
        self.logger.debug(
            "depth=%d: split %d rules on A_%d into %d branches",
            depth, len(rules), att, len(groups),
        )
        branches = {
            value: self._build_node(subset, remaining, rules, depth + 1)
            for value, subset in groups.items()
        }
        return InternalNode(att, branches, _majority_class(rules), dist)


def build_tree(rules: Iterable[Rule], n_attributes: int, *, verbose: bool = False) -> TreeNode:
    """Induce the RBDT-1 decision tree for ``rules`` and return its root."""
    return RBDTreeBuilder(n_attributes, verbose=verbose).build(rules)


# -----------------------------------------------------------------------------
# Classifier
# -----------------------------------------------------------------------------
class RBDTClassifier(BaseEstimator, ClassifierMixin):
    """
    Decision tree classifier induced from classification rules (RBDT-1).

    The tree is fitted on a list of :class:`~rbdtpy.rules.Rule` objects
    rather than on examples.  Prediction then works on ordinary rows of
    categorical attribute values.

    Parameters
    ----------
    feature_names : list[str] or None, default=None
        Optional names of the attributes used by rule/graph exports.  If
        omitted the labels ``A_0 .. A_{n-1}`` are used.
    verbose : int, default=0
        If non-zero the tree builder logs its splits through the
        ``RBDTreeBuilder`` logger.

    Attributes
    ----------
    tree_ : LeafNode or InternalNode
        Root of the fitted tree.
    classes_ : ndarray
        Sorted class labels found in the rules.
    n_features_ : int
        Number of attributes.
    feature_names_ : list[str]
        Attribute names used by the export helpers.

    Notes
    -----
    When predicting, a value with no branch at a node follows the ``"DC"``
    branch if there is one (a rule that does not care about the attribute
    matches any value); otherwise the node's majority class is returned.
    Missing values (``None`` or ``nan``) are read as ``"DC"``.
    """

    def __init__(self, *, feature_names: list[str] | None = None, verbose: int = 0):
        self.feature_names = feature_names
        self.verbose = int(verbose)

    def fit(self, rules, n_attributes: int | None = None):
        """
        Build the tree from ``rules``.

        Parameters
        ----------
        rules : iterable of Rule
            Rules with total antecedents.
        n_attributes : int or None, default=None
            Number of attributes.  Taken from the first rule when omitted.

        Returns
        -------
        self
        """
        rules = list(rules)
        if not rules:
            raise PreconditionError("cannot build a tree from an empty rule list")
        if n_attributes is None:
            n_attributes = rules[0].n_attributes
        if self.feature_names is not None:
            if len(self.feature_names) != n_attributes:
                raise ValueError("feature_names length must match n_attributes")
            self.feature_names_ = list(self.feature_names)
        else:
            self.feature_names_ = [f"A_{i}" for i in range(n_attributes)]

        self.tree_ = build_tree(rules, n_attributes, verbose=bool(self.verbose))
        self.classes_ = np.array(sorted({r.decision_class for r in rules}), dtype=object)
        self.n_features_ = int(n_attributes)
        return self

    def _check_fitted(self):
        if getattr(self, "tree_", None) is None:
            raise ValueError("Estimator not fitted. Call fit(...) first.")

    def _check_X(self, X) -> np.ndarray:
        X = np.asarray(X, dtype=object)
        if X.ndim != 2 or X.shape[1] != self.n_features_:
            raise ValueError(f"X must have shape (n_samples, {self.n_features_})")
        return X

    def predict(self, X):
        """
        Predict class labels for rows of attribute values.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_attributes)
            Categorical attribute values.  ``None``/``nan`` stand for
            don't-care.

        Returns
        -------
        ndarray of shape (n_samples,)
            Predicted class labels.

        Raises
        ------
        ValueError
            If the estimator has not been fitted or ``X`` has the wrong shape.
        """
        self._check_fitted()
        X = self._check_X(X)
        return np.array([self._predict_instance(x, self.tree_) for x in X], dtype=object)

    def predict_rule(self, X, feature_names=None):
        """
        Return the path (antecedent) followed by each row.

        Returns
        -------
        list[str]
            One conjunction of ``name = value`` conditions per row; rows that
            stop at the root give ``"<root>"``.
        """
        self._check_fitted()
        X = self._check_X(X)
        fn = feature_names if feature_names is not None else self.feature_names_
        return [self._trace_rule(x, self.tree_, fn) for x in X]

    def export_rules(self, *, feature_names=None) -> list[str]:
        """Export every root-to-leaf path as ``"<conditions> => <class>"``."""
        self._check_fitted()
        fn = feature_names if feature_names is not None else self.feature_names_
        rules: list[str] = []
        self._collect_rules(self.tree_, [], rules, fn)
        return rules

    def export_text(self, *, feature_names=None) -> str:
        """Render the tree as indented text, one node per line."""
        self._check_fitted()
        fn = feature_names if feature_names is not None else self.feature_names_
        lines: list[str] = []
        self._text_node(self.tree_, "", fn, lines)
        return "\n".join(lines)

    def print_tree(self, feature_names=None):
        """Pretty‑print the decision tree to ``stdout``."""
        print(self.export_text(feature_names=feature_names))

    def export_graphviz(self, filename: str | None = None, *, feature_names=None,
                        format: str = "png") -> str:
        """
        Export the tree structure in Graphviz format.

        Parameters
        ----------
        filename : str or None, default=None
            Basename of the output file.  If None, the DOT source is returned
            and no file is written.
        feature_names : list[str], optional
            Custom names for the attributes.
        format : str, default="png"
            Output format.  ``'dot'`` writes the DOT source without calling
            the external ``dot`` binary.

        Returns
        -------
        str
            Path to the written file, or the DOT source if filename is None.
        """
        self._check_fitted()
        try:
            import graphviz
        except ImportError:
            raise RuntimeError("Graphviz is required for export_graphviz but not installed.")
        fn = feature_names if feature_names is not None else self.feature_names_
        dot = graphviz.Digraph(format=format)
        self._add_graph_nodes(dot, self.tree_, "0", fn)

        if filename is None:
            return dot.source
        if format.lower() == "dot":
            path = f"{filename}.dot"
            dot.save(path)
            return path
        try:
            dot.render(filename, cleanup=True)
            return f"{filename}.{format}"
        except graphviz.ExecutableNotFound:
            fallback_path = f"{filename}.dot"
            dot.save(fallback_path)
            return fallback_path

    def get_depth(self) -> int:
        self._check_fitted()
        return tree_depth(self.tree_)

    def get_n_leaves(self) -> int:
        self._check_fitted()
        return count_leaves(self.tree_)

    # ------------------------------------------------------------------
    # Traversal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _next_branch(x, node: InternalNode) -> str | None:
        # exact value first, then the don't-care branch
        value = _as_value(x[node.attribute])
        if value in node.branches:
            return value
        if DONT_CARE in node.branches:
            return DONT_CARE
        return None

    def _predict_instance(self, x, node: TreeNode):
        if node.is_leaf:
            return node.decision_class
        value = self._next_branch(x, node)
        if value is None:
            return node.predicted_class
        return self._predict_instance(x, node.branches[value])

    def _trace_rule(self, x, node: TreeNode, fn, parts=None):
        parts = parts or []
        value = None if node.is_leaf else self._next_branch(x, node)
        if value is None:
            return " AND ".join(parts) if parts else "<root>"
        parts.append(f"{fn[node.attribute]} = {value}")
        return self._trace_rule(x, node.branches[value], fn, parts)

    def _collect_rules(self, node: TreeNode, parts, rules, fn):
        if node.is_leaf:
            body = " AND ".join(parts) if parts else "<root>"
            rules.append(f"{body} => {node.decision_class}")
            return
        name = fn[node.attribute]
        for value, child in node.branches.items():
            self._collect_rules(child, parts + [f"{name} = {value}"], rules, fn)

    def _text_node(self, node: TreeNode, indent, fn, lines):
        if node.is_leaf:
            lines.append(f"{indent}Predict {node.decision_class} | dist={dict(node.class_distribution)}")
            return
        name = fn[node.attribute]
        for value, child in node.branches.items():
            lines.append(f"{indent}if {name} = {value}:")
            self._text_node(child, indent + "  ", fn, lines)

    def _add_graph_nodes(self, dot, node: TreeNode, name: str, fn):
        if node.is_leaf:
            dot.node(name, f"class={node.decision_class}\n{dict(node.class_distribution)}",
                     shape="box", style="filled", color="lightgrey")
            return
        dot.node(name, fn[node.attribute], shape="ellipse", style="filled", color="lightblue")
        for i, (value, child) in enumerate(node.branches.items()):
            child_id = f"{name}_{i}"
            self._add_graph_nodes(dot, child, child_id, fn)
            dot.edge(name, child_id, label=str(value))
