"""
Navigation Service

Maintains the entry cursor - which hole and which shot position
the player is entering - and moves it forward and backward.

Position is the 0-based index of the shot under the cursor:
position == shots on the hole means a new shot is being entered,
anything lower means a recorded shot is being edited.
Navigation never changes the ledger.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..domain.shot import Shot
from .shot_ledger import ShotLedger

logger = logging.getLogger(__name__)


@dataclass
class EntryCursor:
    """Transient (hole, position) pair. Not part of the submitted record."""
    hole: int = 1
    position: int = 0

    @property
    def shot_number(self) -> int:
        return self.position + 1


class Navigator:
    """
    Moves the entry cursor through a round.

    All transitions are synchronous and only happen on an explicit
    commit or navigation request; nothing advances on its own.

    Usage:
        nav = Navigator(total_holes=18)
        nav.after_commit(shot, ledger)   # next shot, or next hole if holed
        nav.step_back(ledger)            # returns the shot to load, if any
    """

    def __init__(self, total_holes: int):
        self.total_holes = total_holes
        self.cursor = EntryCursor()

    def reset(self) -> None:
        self.cursor = EntryCursor()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def is_last_hole(self) -> bool:
        return self.cursor.hole >= self.total_holes

    def is_editing(self, ledger: ShotLedger) -> bool:
        """True when the cursor sits on an already recorded shot."""
        return self.cursor.position < ledger.hole_shot_count(self.cursor.hole)

    def shot_under_cursor(self, ledger: ShotLedger) -> Optional[Shot]:
        hole_shots = ledger.shots_for_hole(self.cursor.hole)
        if self.cursor.position < len(hole_shots):
            return hole_shots[self.cursor.position]
        return None

    def previous_shot(self, ledger: ShotLedger) -> Optional[Shot]:
        """The shot before the cursor on the same hole."""
        if self.cursor.position == 0:
            return None
        hole_shots = ledger.shots_for_hole(self.cursor.hole)
        index = min(self.cursor.position, len(hole_shots)) - 1
        return hole_shots[index] if index >= 0 else None

    def can_skip(self) -> bool:
        return not self.is_last_hole

    def can_step_back(self, ledger: ShotLedger) -> bool:
        if self.cursor.position > 0:
            return True
        return self.cursor.hole > 1 and ledger.hole_shot_count(self.cursor.hole - 1) > 0

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def after_commit(self, shot: Shot, ledger: ShotLedger) -> bool:
        """
        Move the cursor after a shot was committed.

        Args:
            shot: The shot just stored (appended or edited)
            ledger: Ledger holding it

        Returns:
            True if the round's last hole was just holed out
            (the session should move to review)
        """
        if not shot.holed:
            self.cursor.position = shot.shot_number
            return False

        if self.is_last_hole:
            # Nothing left to enter; review takes over from here
            self.cursor.position = shot.shot_number
            logger.info(f"Hole {shot.hole_number} holed out - last hole, round ready for review")
            return True

        self.cursor = EntryCursor(hole=self.cursor.hole + 1, position=0)
        logger.info(f"Hole {shot.hole_number} holed in {ledger.hole_shot_count(shot.hole_number)}")
        return False

    def skip_to_next_hole(self) -> bool:
        """
        Move to the next hole without holing out the current one.

        Returns:
            False if already on the last hole (cursor unchanged)
        """
        if not self.can_skip():
            return False
        logger.info(f"Skipping from hole {self.cursor.hole} to {self.cursor.hole + 1}")
        self.cursor = EntryCursor(hole=self.cursor.hole + 1, position=0)
        return True

    def step_back(self, ledger: ShotLedger) -> Optional[Shot]:
        """
        Move to the previous recorded shot.

        Within a hole this steps one position back; from the first
        position it jumps to the last recorded shot of the previous
        hole. If the previous hole has no shots nothing happens.

        Returns:
            The shot now under the cursor, or None if the cursor didn't move
        """
        if self.cursor.position > 0:
            hole_shots = ledger.shots_for_hole(self.cursor.hole)
            position = min(self.cursor.position, len(hole_shots)) - 1
            if position < 0:
                return None
            self.cursor.position = position
            return hole_shots[position]

        if self.cursor.hole <= 1:
            return None

        previous_hole = self.cursor.hole - 1
        previous_shots = ledger.shots_for_hole(previous_hole)
        if not previous_shots:
            return None

        self.cursor = EntryCursor(hole=previous_hole, position=len(previous_shots) - 1)
        return previous_shots[-1]
