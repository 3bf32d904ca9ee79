"""
Round Domain Models

Round-level configuration fixed when a round is started,
plus the enumerations a round is described with.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union
from datetime import date, datetime

from .shot import Shot


APP_VERSION = "1.0.0"


class CourseDifficulty(Enum):
    """How hard the course played on the day."""
    GETABLE = "Getable"
    STANDARD = "Standard"
    HARD = "Hard"


class Weather(Enum):
    """Playing conditions for the round."""
    NORMAL = "Normal"
    COLD = "Cold"
    WINDY = "Windy"
    COLD_AND_WINDY = "Cold and Windy"


class Screen(Enum):
    """
    Lifecycle flag of an entry session.

    - ROUND_DETAILS: no round started yet
    - SHOT_ENTRY: recording shots
    - REVIEW: checking the scorecard before submitting
    - SUCCESS: round submitted, shots are frozen
    """
    ROUND_DETAILS = "round-details"
    SHOT_ENTRY = "shot-entry"
    REVIEW = "review"
    SUCCESS = "success"


@dataclass
class RoundConfig:
    """
    Raw round setup as entered by the player.

    Values are loose (strings for dates and enumerations); validation
    reports every bad field at once.
    """
    player_name: str
    date: Union[str, date]
    course_name: str
    tournament: str
    holes: int = 18
    course_difficulty: Union[str, CourseDifficulty] = CourseDifficulty.STANDARD
    weather: Union[str, Weather] = Weather.NORMAL


@dataclass(frozen=True)
class Round:
    """
    A started round.

    Immutable: patches produce a new Round (see RoundSession.update_round).
    hole numbers used anywhere else in the session lie in [1, holes].
    """
    round_id: str
    player_name: str
    date: date
    course_name: str
    tournament: str
    holes: int
    course_difficulty: CourseDifficulty
    weather: Weather
    client_id: str
    app_version: str = APP_VERSION
    submitted_round_id: Optional[str] = None
    submitted_at: Optional[datetime] = None

    @property
    def hole_numbers(self) -> range:
        return range(1, self.holes + 1)

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None

    def to_dict(self) -> dict:
        """Wire representation used in the submission payload."""
        data = {
            "roundId": self.round_id,
            "playerName": self.player_name,
            "date": self.date.isoformat(),
            "courseName": self.course_name,
            "tournament": self.tournament,
            "holes": self.holes,
            "courseDifficulty": self.course_difficulty.value,
            "weather": self.weather.value,
            "clientId": self.client_id,
            "appVersion": self.app_version,
        }
        if self.submitted_at is not None:
            data["submittedAt"] = self.submitted_at.isoformat()
        return data


# Fields a caller may never patch on a started round
IDENTIFYING_FIELDS = frozenset({"round_id", "client_id", "holes", "app_version"})

# Set once by a successful submission
LATE_BOUND_FIELDS = frozenset({"submitted_round_id", "submitted_at"})


@dataclass
class SubmissionPayload:
    """The combined record handed to the submission transport."""
    round: Round
    shots: List[Shot] = field(default_factory=list)
    replace_existing: bool = False

    def to_dict(self) -> dict:
        return {
            "round": self.round.to_dict(),
            "shots": [shot.to_dict() for shot in self.shots],
            "replaceExisting": self.replace_existing,
        }
