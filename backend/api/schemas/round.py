"""
Round API Schemas

Pydantic models for round setup, review and submission.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum
from datetime import date, datetime

from core.services.validation import RoundDetails

from .shot import ShotSchema


class CourseDifficultyEnum(str, Enum):
    """Course difficulty for API."""
    GETABLE = "Getable"
    STANDARD = "Standard"
    HARD = "Hard"


class WeatherEnum(str, Enum):
    """Weather conditions for API."""
    NORMAL = "Normal"
    COLD = "Cold"
    WINDY = "Windy"
    COLD_AND_WINDY = "Cold and Windy"


class ScreenEnum(str, Enum):
    """Session lifecycle state for API."""
    ROUND_DETAILS = "round-details"
    SHOT_ENTRY = "shot-entry"
    REVIEW = "review"
    SUCCESS = "success"


class StartRoundRequest(RoundDetails):
    """
    Round setup form.

    player_name is 1-100 characters, course_name and tournament
    1-200, holes 9 or 18. Every bad field is reported in one 422.
    """

    class Config:
        json_schema_extra = {
            "example": {
                "player_name": "Alex Morgan",
                "date": "2024-06-01",
                "course_name": "Pine Valley",
                "tournament": "Club Championship",
                "holes": 18,
                "course_difficulty": "Standard",
                "weather": "Windy"
            }
        }


class RoundResponse(BaseModel):
    """
    A started round.
    """
    round_id: str = Field(..., description="Unique round ID")
    player_name: str
    date: date
    course_name: str
    tournament: str
    holes: int = Field(..., description="Hole count, fixed for the round")
    course_difficulty: CourseDifficultyEnum
    weather: WeatherEnum
    client_id: str = Field(..., description="Session ID used for de-duplication")
    app_version: str
    submitted_round_id: Optional[str] = Field(None, description="ID assigned on submission")
    submitted_at: Optional[datetime] = Field(None, description="When the round was submitted")
    screen: ScreenEnum = Field(..., description="Current lifecycle state")


class HoleSummarySchema(BaseModel):
    """
    One hole on the review scorecard.
    """
    hole_number: int
    strokes: int
    penalties: int
    holed: bool
    shots: List[ShotSchema] = Field(default_factory=list)


class ReviewResponse(BaseModel):
    """
    Review screen: per-hole scorecard and completeness.
    """
    scorecard: List[HoleSummarySchema]
    incomplete_holes: List[int] = Field(default_factory=list, description="Holes missing a holed shot")
    validation_errors: List[str] = Field(default_factory=list)
    submittable: bool
    total_score: int = Field(..., description="Raw count of all recorded shots")
    par_reference: int = Field(..., description="Reference par used for the +/- display")
    to_par: str = Field(..., description="Display only, e.g. '+5'")
    holes_played: int


class SubmitResponse(BaseModel):
    """
    Outcome of a successful submission.
    """
    ok: bool = True
    round_id: str = Field(..., description="Round ID assigned by the receiving side")
    submitted_at: datetime
    shots_inserted: Optional[int] = None


class HealthResponse(BaseModel):
    """
    Health check response.
    """
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    round_in_progress: bool = Field(..., description="Whether a round is being entered")
    demo_submission: bool = Field(..., description="True when no submission URL is configured")
