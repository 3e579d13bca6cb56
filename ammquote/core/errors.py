"""Error values for invalid usage.

Errors are frozen dataclasses, returned inside Err, never raised by domain
functions. A disabled quote is NOT an error: it is an Ok(Quote) carrying a
disabled_reason. Division by zero in fixed-point math is the one fatal
condition and surfaces as ZeroDivisionError from ammquote.core.fixed_point.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from ammquote.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class QuoteError:
    """Base error value. NOT @final -- has subclasses."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> QuoteError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A single argument or field that failed validation."""

    path: str  # e.g. "options.iterations"
    constraint: str  # e.g. "must be >= 1"
    actual_value: str  # e.g. "0"


@final
@dataclass(frozen=True, slots=True)
class InvalidArgumentError(QuoteError):
    """One or more arguments are unusable (bad iteration count, negative size, bad record)."""

    fields: tuple[FieldViolation, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **QuoteError.to_dict(self),
            "fields": [
                {"path": f.path, "constraint": f.constraint, "actual_value": f.actual_value}
                for f in self.fields
            ],
        }


@final
@dataclass(frozen=True, slots=True)
class PricingError(QuoteError):
    """A quote or reconstruction could not be produced for an instrument."""

    instrument: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {**QuoteError.to_dict(self), "instrument": self.instrument, "reason": self.reason}


def invalid_argument(
    source: str, code: str, *violations: FieldViolation,
) -> InvalidArgumentError:
    """Build an InvalidArgumentError whose message lists every violation."""
    message = "; ".join(f"{v.path} {v.constraint} (got {v.actual_value})" for v in violations)
    return InvalidArgumentError(
        message=message,
        code=code,
        timestamp=UtcDatetime.now(),
        source=source,
        fields=tuple(violations),
    )
