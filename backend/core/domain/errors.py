"""
Domain Errors

Exceptions raised by the shot-entry core. None of them leave the
ledger partially modified: every check runs before any mutation.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class FieldError:
    """A single rule violation, scoped to the offending field."""
    field: str
    reason: str

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason}


class ShotLogError(Exception):
    """Base class for all shot-entry errors."""


class FieldErrors(ShotLogError):
    """An error that carries one or more field-scoped violations."""

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or "; ".join(f"{e.field}: {e.reason}" for e in self.errors))

    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


class InvalidConfig(FieldErrors):
    """Round setup is outside the allowed values. Fatal to starting the round."""


class ShotValidationError(FieldErrors):
    """A candidate shot broke one or more rules. The user can correct and resubmit."""


class IncompleteRound(ShotLogError):
    """One or more holes have no holed shot, so the round cannot be submitted."""

    def __init__(self, missing_holes: List[int]):
        self.missing_holes = list(missing_holes)
        super().__init__(
            "Missing holed shots for holes: " + ", ".join(str(h) for h in self.missing_holes)
        )


class SubmissionFailure(ShotLogError):
    """The submission transport failed. Safe to retry."""


class SessionStateError(ShotLogError):
    """The operation is not allowed in the session's current lifecycle state."""
