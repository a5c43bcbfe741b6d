"""
Currency Precision

Every monetary figure the engine stores goes through ``Precision.quantize``.
FLOAT keeps binary floats untouched; CENTS rounds to the nearest cent
(round-half-even) after each arithmetic step that produces a stored value.
"""

from enum import Enum

from .errors import ConfigurationError


class Precision(Enum):
    """Representation used for stored monetary amounts."""
    FLOAT = "float"
    CENTS = "cents"

    def quantize(self, amount: float) -> float:
        """Round ``amount`` to this precision."""
        if self is Precision.CENTS:
            # round() on the binary float: ties go to even, but 2.675 is stored
            # just below the tie and becomes 2.67
            return round(amount, 2) + 0.0
        return amount

    @classmethod
    def parse(cls, value) -> "Precision":
        """Accept an existing Precision or its string name ("float" / "cents")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown precision {value!r}; expected one of "
                f"{[p.value for p in cls]}"
            ) from None
