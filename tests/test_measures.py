import pytest

from rbdtpy import MeasureRangeError, PreconditionError, Rule
from rbdtpy.measures import (AE, _check_measure, attribute_autonomy,
                             attribute_autonomy_for_class, attribute_disjointness,
                             attribute_effectiveness, attribute_values,
                             minimum_value_distribution, partition_rules)


def _mixed_rules():
    """Four rules over three attributes with don't-care values."""
    return [
        Rule("A", ("x", "p", "DC")),
        Rule("A", ("x", "q", "DC")),
        Rule("B", ("y", "p", "u")),
        Rule("B", ("y", "DC", "DC")),
    ]


def test_effectiveness_values():
    rules = _mixed_rules()
    assert attribute_effectiveness(0, rules) == 1.0
    assert attribute_effectiveness(1, rules) == 0.75
    assert attribute_effectiveness(2, rules) == 0.25


def test_effectiveness_zero_iff_all_dont_care():
    rules = [Rule("A", ("DC", "x")), Rule("B", ("DC", "y"))]
    assert attribute_effectiveness(0, rules) == 0.0
    assert attribute_effectiveness(1, rules) == 1.0


def test_effectiveness_empty_subset_raises():
    with pytest.raises(PreconditionError):
        attribute_effectiveness(0, [])


def test_disjointness_codes():
    rules = _mixed_rules()
    # {x} vs {y}: disjoint
    assert attribute_disjointness(0, "A", "B", rules) == 3
    # {p, q} vs {p, DC}: partial overlap
    assert attribute_disjointness(1, "A", "B", rules) == 2
    # {DC} is contained in {u, DC}
    assert attribute_disjointness(2, "A", "B", rules) == 0
    assert attribute_disjointness(2, "B", "A", rules) == 1


def test_disjointness_equal_sets_is_zero_both_ways():
    rules = [
        Rule("A", ("x",)), Rule("A", ("y",)),
        Rule("B", ("y",)), Rule("B", ("x",)),
    ]
    assert attribute_disjointness(0, "A", "B", rules) == 0
    assert attribute_disjointness(0, "B", "A", rules) == 0


def test_autonomy_for_class_two_candidates():
    rules = _mixed_rules()
    assert attribute_autonomy_for_class(0, "A", [0, 1], rules) == 1.0


def test_autonomy_for_class_formula():
    rules = _mixed_rules()
    # max_ads = 3, others sum to 2 (attr 1) and 0 (attr 2): 1 + 2*3 - 2
    assert attribute_autonomy_for_class(0, "A", [0, 1, 2], rules) == 5.0
    # for B the others sum to 2 and 1: 1 + 2*3 - 3
    assert attribute_autonomy_for_class(0, "B", [0, 1, 2], rules) == 4.0


def test_autonomy_for_class_other_candidate_reaches_max():
    rules = [
        Rule("A", ("x", "p", "m")),
        Rule("B", ("y", "q", "m")),
    ]
    # attr 1 separates the classes exactly as well as attr 0
    assert attribute_autonomy_for_class(0, "A", [0, 1, 2], rules) == 1.0


def test_autonomy_for_class_no_separation():
    rules = [Rule("A", ("DC", "x")), Rule("B", ("DC", "y"))]
    assert attribute_autonomy_for_class(0, "A", [0, 1], rules) == 0.0


def test_autonomy_aggregate():
    rules = _mixed_rules()
    assert attribute_autonomy(0, [0, 1, 2], rules) == pytest.approx(1.0 / 9.0)


def test_autonomy_sums_over_classes_not_values():
    # attr 1 takes three values (p, q, DC) while only two classes occur; the
    # aggregate runs over the classes, each evaluated on the whole subset.
    rules = _mixed_rules()
    assert minimum_value_distribution(1, rules) == 3
    assert attribute_autonomy_for_class(1, "A", [0, 1, 2], rules) == 2.0
    assert attribute_autonomy_for_class(1, "B", [0, 1, 2], rules) == 1.0
    assert attribute_autonomy(1, [0, 1, 2], rules) == pytest.approx(1.0 / 3.0)


def test_autonomy_three_classes_two_values():
    rules = [
        Rule("A", ("x", "p")),
        Rule("B", ("y", "p")),
        Rule("C", ("y", "q")),
    ]
    # attr 0 separates every class from at least one other and only two
    # candidates compete, so each class contributes 1
    assert attribute_autonomy(0, [0, 1], rules) == pytest.approx(1.0 / 3.0)


def test_autonomy_zero_sum_is_guarded():
    rules = [Rule("A", ("DC", "x")), Rule("B", ("DC", "y"))]
    assert attribute_autonomy(0, [0, 1], rules) == 0.0


def test_autonomy_empty_subset_raises():
    with pytest.raises(PreconditionError):
        attribute_autonomy(0, [0, 1], [])


def test_minimum_value_distribution_counts_dont_care():
    rules = _mixed_rules()
    assert minimum_value_distribution(0, rules) == 2
    assert minimum_value_distribution(2, rules) == 2


def test_partition_rules_sorted_and_stable():
    rules = _mixed_rules()
    groups = partition_rules(1, rules)
    assert list(groups) == ["DC", "p", "q"]
    assert groups["p"] == [rules[0], rules[2]]
    assert attribute_values(0, rules) == ["x", "y"]


def test_check_measure_tolerance():
    # within the rounding tolerance
    _check_measure(1.005, 0.0, 1.0, AE)
    with pytest.raises(MeasureRangeError) as exc:
        _check_measure(1.5, 0.0, 1.0, AE)
    assert exc.value.measure == AE
    assert isinstance(exc.value, ValueError)
