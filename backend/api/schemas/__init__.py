"""
API Schemas

Pydantic models for request/response validation.
"""

from .shot import (
    LieEnum,
    DistanceUnitEnum,
    PuttLeaveEnum,
    FieldErrorSchema,
    ShotPayloadSchema,
    ShotSchema,
    CursorSchema,
    ShotFormDefaultsSchema,
    EntryStateResponse,
    PreviewResponse,
    CommitShotResponse,
    NavigationResponse,
)

from .round import (
    CourseDifficultyEnum,
    WeatherEnum,
    ScreenEnum,
    StartRoundRequest,
    RoundResponse,
    HoleSummarySchema,
    ReviewResponse,
    SubmitResponse,
    HealthResponse,
)

__all__ = [
    # Shot schemas
    "LieEnum",
    "DistanceUnitEnum",
    "PuttLeaveEnum",
    "FieldErrorSchema",
    "ShotPayloadSchema",
    "ShotSchema",
    "CursorSchema",
    "ShotFormDefaultsSchema",
    "EntryStateResponse",
    "PreviewResponse",
    "CommitShotResponse",
    "NavigationResponse",
    # Round schemas
    "CourseDifficultyEnum",
    "WeatherEnum",
    "ScreenEnum",
    "StartRoundRequest",
    "RoundResponse",
    "HoleSummarySchema",
    "ReviewResponse",
    "SubmitResponse",
    "HealthResponse",
]
