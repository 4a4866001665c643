"""Exceptions raised during rule-based tree induction."""


class MeasureRangeError(ValueError):
    """A computed attribute measure falls outside its theoretical bounds.

    Raised when a value exceeds the valid range by more than the rounding
    tolerance.  This points to malformed input rules or to a logic error in
    the measure itself; induction cannot continue safely.
    """

    def __init__(self, measure: str, value: float, lower: float, upper: float):
        self.measure = measure
        self.value = value
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"Illegal value for measure {measure}: value={value}, "
            f"should be between {lower} and {upper}"
        )


class PreconditionError(ValueError):
    """Input to the induction violates one of its preconditions.

    Examples are an empty rule subset where a class must be reported, rules
    whose antecedents do not cover the same attribute indices, or a division
    by zero inside a measure.
    """
