"""
Domain Models

Pure data structures representing a round being recorded shot by shot.
No external dependencies - just Python dataclasses and enums.
"""

from .round import CourseDifficulty, Weather, Screen, Round, RoundConfig, SubmissionPayload
from .shot import Lie, DistanceUnit, PuttLeave, Shot, ShotPayload, ShotFormDefaults
from .errors import (
    FieldError,
    FieldErrors,
    ShotLogError,
    InvalidConfig,
    ShotValidationError,
    IncompleteRound,
    SubmissionFailure,
    SessionStateError,
)

__all__ = [
    "CourseDifficulty",
    "Weather",
    "Screen",
    "Round",
    "RoundConfig",
    "SubmissionPayload",
    "Lie",
    "DistanceUnit",
    "PuttLeave",
    "Shot",
    "ShotPayload",
    "ShotFormDefaults",
    "FieldError",
    "FieldErrors",
    "ShotLogError",
    "InvalidConfig",
    "ShotValidationError",
    "IncompleteRound",
    "SubmissionFailure",
    "SessionStateError",
]
