"""
Shot Domain Models

Data structures for a single recorded stroke and for the
editable form state that becomes one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Lie(Enum):
    """Surface the ball rests on before (or after) a shot."""
    TEE = "Tee"
    FAIRWAY = "Fairway"
    ROUGH = "Rough"
    SAND = "Sand"
    RECOVERY = "Recovery"
    GREEN = "Green"


# Lies a non-first shot may start from
NON_TEE_LIES = (Lie.FAIRWAY, Lie.ROUGH, Lie.SAND, Lie.RECOVERY, Lie.GREEN)


class DistanceUnit(Enum):
    """Unit a distance is measured in."""
    YARDS = "yards"
    FEET = "feet"


class PuttLeave(Enum):
    """Where a missed first putt finished relative to the hole."""
    SHORT = "Short"
    LONG = "Long"


@dataclass
class ShotPayload:
    """
    Editable form state for one shot.

    Blank (None) values mean "not yet entered". Lies and units are
    filled in from the entry context; distances must be entered
    before the shot can be committed.
    """
    starting_lie: Optional[Lie] = None
    starting_distance: Optional[float] = None
    starting_unit: Optional[DistanceUnit] = None
    ending_lie: Optional[Lie] = None
    ending_distance: Optional[float] = None
    ending_unit: Optional[DistanceUnit] = None
    penalty: bool = False
    holed: bool = False
    non_driver_tee_shot: Optional[bool] = None
    putt_leave: Optional[PuttLeave] = None

    @property
    def is_putt(self) -> bool:
        return self.starting_lie == Lie.GREEN and self.ending_lie == Lie.GREEN


@dataclass
class Shot:
    """
    A committed stroke in the ledger.

    Attributes:
        shot_number: 1-based, dense within its hole
        holed: True only for the stroke that finished the hole
        non_driver_tee_shot: Long tee shot played with something other than driver
        putt_leave: Short/Long miss on the first putt of the hole
    """
    shot_id: str
    round_id: str
    hole_number: int
    shot_number: int
    starting_lie: Lie
    starting_distance: float
    starting_unit: DistanceUnit
    ending_lie: Lie
    ending_distance: float
    ending_unit: DistanceUnit
    penalty: bool = False
    holed: bool = False
    non_driver_tee_shot: Optional[bool] = None
    putt_leave: Optional[PuttLeave] = None

    def to_payload(self) -> ShotPayload:
        """Load the recorded values back into an editable form."""
        return ShotPayload(
            starting_lie=self.starting_lie,
            starting_distance=self.starting_distance,
            starting_unit=self.starting_unit,
            ending_lie=self.ending_lie,
            ending_distance=self.ending_distance,
            ending_unit=self.ending_unit,
            penalty=self.penalty,
            holed=self.holed,
            non_driver_tee_shot=self.non_driver_tee_shot,
            putt_leave=self.putt_leave,
        )

    def to_dict(self) -> dict:
        """Wire representation used in the submission payload."""
        data = {
            "shotId": self.shot_id,
            "roundId": self.round_id,
            "holeNumber": self.hole_number,
            "shotNumber": self.shot_number,
            "startLie": self.starting_lie.value,
            "startDistance": self.starting_distance,
            "startUnit": self.starting_unit.value,
            "endLie": self.ending_lie.value,
            "endDistance": self.ending_distance,
            "endUnit": self.ending_unit.value,
            "penalty": self.penalty,
            "holed": self.holed,
        }
        if self.non_driver_tee_shot is not None:
            data["nonDriverTeeShot"] = self.non_driver_tee_shot
        if self.putt_leave is not None:
            data["puttLeave"] = self.putt_leave.value
        return data


@dataclass
class ShotFormDefaults:
    """
    Defaults offered for the shot under the entry cursor.

    The UI uses the flags to decide which optional inputs to show.
    """
    hole_number: int
    shot_number: int
    starting_lie: Lie
    starting_distance: Optional[float]
    starting_unit: DistanceUnit
    predicted_ending_lie: Lie
    predicted_ending_unit: DistanceUnit
    editable_start_distance: bool
    show_non_driver_option: bool = False
    show_putt_leave: bool = False

    def to_payload(self) -> ShotPayload:
        return ShotPayload(
            starting_lie=self.starting_lie,
            starting_distance=self.starting_distance,
            starting_unit=self.starting_unit,
            ending_lie=self.predicted_ending_lie,
            ending_unit=self.predicted_ending_unit,
        )
