"""
Error types raised by the estimation engine.

Every error is a caller-input problem: nothing is partially computed
when one is raised, and resubmitting corrected input recovers.
"""


class EstimationError(ValueError):
    """Base class for all engine input errors."""

    pass


class InvalidInput(EstimationError):
    """A numeric input failed a range, positivity or integrality check."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid {field}: {message}")
        self.field = field


class UnknownEnumValue(EstimationError):
    """A selector string is not one of the recognized keys for its field."""

    def __init__(self, field: str, value: object, valid: list[str] | None = None):
        msg = f"Unknown {field.replace('_', ' ')}: {value!r}"
        if valid:
            msg += f". Valid values: {', '.join(valid)}"
        super().__init__(msg)
        self.field = field
        self.value = value


class UnknownLiftType(UnknownEnumValue):
    """The lift type is not bench_press, squat or deadlift."""

    def __init__(self, value: object, valid: list[str] | None = None):
        super().__init__("lift_type", value, valid)


class ModelConfigError(Exception):
    """Raised when model tables are missing keys or hold invalid values."""

    pass
