"""
Shot Ledger Service

Ordered, per-hole collection of recorded shots.

The ledger is the source of truth for shot counts, for whether
a hole is finished, and for shot numbering after edits.
Insertion order within a hole is stroke order.
"""

import uuid
import logging
from dataclasses import replace
from typing import Dict, List, Optional

from ..domain.shot import Lie, DistanceUnit, Shot, ShotPayload
from .inference import default_unit, is_holed_distance

logger = logging.getLogger(__name__)


# Fields that identify a shot and are never patched
PROTECTED_FIELDS = frozenset({"shot_id", "round_id", "hole_number", "shot_number"})


def normalize_holed(payload: ShotPayload) -> ShotPayload:
    """
    Apply the holed rule to a form payload.

    An ending distance of 0 marks the shot holed and forces the
    ending lie to GREEN and the ending unit to FEET, whatever the
    form held before. Any other payload is returned unchanged.
    """
    if not is_holed_distance(payload.ending_distance):
        return replace(payload)
    return replace(
        payload,
        holed=True,
        ending_lie=Lie.GREEN,
        ending_unit=DistanceUnit.FEET,
    )


class ShotLedger:
    """
    Mapping of hole number -> ordered list of Shots.

    All mutations are synchronous and complete before returning;
    validation happens upstream, so append never fails.

    Usage:
        ledger = ShotLedger()
        shot = ledger.append(1, payload, round_id="r1")
        ledger.hole_shot_count(1)   # 1
        ledger.delete(shot.shot_id)
    """

    def __init__(self):
        self._shots: Dict[int, List[Shot]] = {}

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def append(self, hole_number: int, payload: ShotPayload, round_id: str) -> Shot:
        """
        Record the next stroke on a hole.

        Args:
            hole_number: Hole the shot was played on
            payload: Validated form data
            round_id: Owning round

        Returns:
            The stored Shot, numbered count + 1 for its hole
        """
        payload = normalize_holed(payload)
        shot = Shot(
            shot_id=str(uuid.uuid4()),
            round_id=round_id,
            hole_number=hole_number,
            shot_number=self.next_shot_number(hole_number),
            starting_lie=payload.starting_lie,
            starting_distance=payload.starting_distance if payload.starting_distance is not None else 0,
            starting_unit=payload.starting_unit or default_unit(payload.starting_lie),
            ending_lie=payload.ending_lie,
            ending_distance=payload.ending_distance if payload.ending_distance is not None else 0,
            ending_unit=payload.ending_unit or default_unit(payload.ending_lie),
            penalty=payload.penalty,
            holed=payload.holed,
            non_driver_tee_shot=payload.non_driver_tee_shot,
            putt_leave=payload.putt_leave,
        )
        self._shots.setdefault(hole_number, []).append(shot)
        logger.debug(f"Hole {hole_number}: recorded shot {shot.shot_number} ({shot.shot_id})")
        return shot

    def update(self, shot_id: str, patch: dict) -> Optional[Shot]:
        """
        Patch a shot in place.

        Returns:
            The updated Shot, or None if no shot has that id
        """
        bad = set(patch) & PROTECTED_FIELDS
        if bad:
            raise ValueError(f"Cannot patch identifying fields: {sorted(bad)}")

        shot = self.find(shot_id)
        if shot is None:
            return None

        for name, value in patch.items():
            if not hasattr(shot, name):
                raise ValueError(f"Unknown shot field: {name}")
            setattr(shot, name, value)
        return shot

    def delete(self, shot_id: str) -> Optional[Shot]:
        """
        Remove a shot and renumber the later shots on its hole.

        Returns:
            The removed Shot, or None if no shot has that id
        """
        for hole_number, hole_shots in self._shots.items():
            for index, shot in enumerate(hole_shots):
                if shot.shot_id != shot_id:
                    continue
                del hole_shots[index]
                for number, remaining in enumerate(hole_shots, start=1):
                    remaining.shot_number = number
                logger.debug(f"Hole {hole_number}: deleted shot {shot_id}, {len(hole_shots)} left")
                return shot
        return None

    def clear(self) -> None:
        self._shots = {}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find(self, shot_id: str) -> Optional[Shot]:
        for hole_shots in self._shots.values():
            for shot in hole_shots:
                if shot.shot_id == shot_id:
                    return shot
        return None

    def shots_for_hole(self, hole_number: int) -> List[Shot]:
        """Shots on a hole in stroke order (a copy of the list)."""
        return list(self._shots.get(hole_number, []))

    def next_shot_number(self, hole_number: int) -> int:
        return self.hole_shot_count(hole_number) + 1

    def hole_shot_count(self, hole_number: int) -> int:
        return len(self._shots.get(hole_number, []))

    def total_shot_count(self) -> int:
        return sum(len(hole_shots) for hole_shots in self._shots.values())

    def has_holed_shot(self, hole_number: int) -> bool:
        return any(shot.holed for shot in self._shots.get(hole_number, []))

    def all_shots(self) -> List[Shot]:
        """Every shot, ordered by hole then shot number."""
        return [
            shot
            for hole_number in sorted(self._shots)
            for shot in self._shots[hole_number]
        ]

