# rbdtpy/__init__.py
"""
rbdtpy: rule-based decision tree induction (RBDT-1) in pure Python.

Exports:
    - RBDTClassifier
    - build_tree, select_attribute
    - Rule, DONT_CARE, read_rules_json, rules_from_records
    - MeasureRangeError, PreconditionError
"""
from .exceptions import MeasureRangeError, PreconditionError
from .rules import DONT_CARE, Rule, read_rules_json, rules_from_records
from .tree import InternalNode, LeafNode, RBDTClassifier, build_tree, select_attribute

__all__ = [
    "RBDTClassifier",
    "build_tree",
    "select_attribute",
    "LeafNode",
    "InternalNode",
    "Rule",
    "DONT_CARE",
    "read_rules_json",
    "rules_from_records",
    "MeasureRangeError",
    "PreconditionError",
]
__version__ = "0.1.0"
