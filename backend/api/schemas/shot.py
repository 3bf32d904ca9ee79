"""
Shot API Schemas

Pydantic models for shot entry requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum


class LieEnum(str, Enum):
    """Lies for API."""
    TEE = "Tee"
    FAIRWAY = "Fairway"
    ROUGH = "Rough"
    SAND = "Sand"
    RECOVERY = "Recovery"
    GREEN = "Green"


class DistanceUnitEnum(str, Enum):
    """Distance units for API."""
    YARDS = "yards"
    FEET = "feet"


class PuttLeaveEnum(str, Enum):
    """Putt leave for API."""
    SHORT = "Short"
    LONG = "Long"


class FieldErrorSchema(BaseModel):
    """A rule violation scoped to one field."""
    field: str = Field(..., description="Offending field")
    reason: str = Field(..., description="Human-readable reason")


class ShotPayloadSchema(BaseModel):
    """
    Shot form values.

    Anything left out is filled from the entry context: start values
    of later shots are carried forward, a missing end lie is predicted.
    Distance limits are checked by the entry core so all problems are
    reported together.
    """
    starting_lie: Optional[LieEnum] = Field(None, description="Tee on a hole's first shot")
    starting_distance: Optional[float] = Field(None, description="Distance to the hole before the shot")
    starting_unit: Optional[DistanceUnitEnum] = None
    ending_lie: Optional[LieEnum] = None
    ending_distance: Optional[float] = Field(None, description="0 means holed")
    ending_unit: Optional[DistanceUnitEnum] = None
    penalty: bool = False
    holed: bool = False
    non_driver_tee_shot: Optional[bool] = Field(None, description="Tee shots of 250+ yards only")
    putt_leave: Optional[PuttLeaveEnum] = Field(None, description="First putt of 10+ feet only")

    class Config:
        json_schema_extra = {
            "example": {
                "starting_lie": "Tee",
                "starting_distance": 150,
                "ending_lie": "Green",
                "ending_distance": 10
            }
        }


class ShotSchema(BaseModel):
    """
    A recorded shot.
    """
    shot_id: str
    round_id: str
    hole_number: int
    shot_number: int
    starting_lie: LieEnum
    starting_distance: float
    starting_unit: DistanceUnitEnum
    ending_lie: LieEnum
    ending_distance: float
    ending_unit: DistanceUnitEnum
    penalty: bool
    holed: bool
    non_driver_tee_shot: Optional[bool] = None
    putt_leave: Optional[PuttLeaveEnum] = None


class CursorSchema(BaseModel):
    """
    Entry cursor position.
    """
    hole: int = Field(..., description="Current hole")
    shot_number: int = Field(..., description="1-based shot under the cursor")
    editing: bool = Field(..., description="True when a recorded shot is loaded")
    can_step_back: bool
    can_skip: bool


class ShotFormDefaultsSchema(BaseModel):
    """
    Defaults for the shot under the cursor.
    """
    starting_lie: LieEnum
    starting_distance: Optional[float] = None
    starting_unit: DistanceUnitEnum
    predicted_ending_lie: LieEnum
    predicted_ending_unit: DistanceUnitEnum
    editable_start_distance: bool
    show_non_driver_option: bool
    show_putt_leave: bool


class EntryStateResponse(BaseModel):
    """
    Everything the shot entry screen renders.
    """
    screen: str
    cursor: CursorSchema
    defaults: ShotFormDefaultsSchema
    form: ShotPayloadSchema
    hole_shots: List[ShotSchema] = Field(default_factory=list, description="Shots on the current hole")
    total_shots: int


class PreviewResponse(BaseModel):
    """
    Re-inferred form values for an in-progress shot.
    """
    form: ShotPayloadSchema
    errors: List[FieldErrorSchema] = Field(default_factory=list)


class CommitShotResponse(BaseModel):
    """
    Result of committing a shot.
    """
    shot: ShotSchema
    entry: EntryStateResponse


class NavigationResponse(BaseModel):
    """
    Result of a back/skip request.
    """
    moved: bool
    entry: EntryStateResponse
