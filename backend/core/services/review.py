"""
Review Service

End-of-round checks: which holes are finished, the per-hole
scorecard, and the total with a simple +/- display.
"""

from dataclasses import dataclass, field
from typing import List

from ..domain.errors import IncompleteRound
from ..domain.shot import Shot
from .shot_ledger import ShotLedger


# Reference par used only for the +/- display, never submitted
PAR_REFERENCE = {9: 36, 18: 72}


@dataclass
class HoleSummary:
    """One row of the review scorecard."""
    hole_number: int
    strokes: int
    penalties: int
    holed: bool
    shots: List[Shot] = field(default_factory=list)


@dataclass
class ReviewState:
    """Everything the review screen needs."""
    scorecard: List[HoleSummary]
    incomplete_holes: List[int]
    total_score: int
    par_reference: int
    to_par: str
    holes_played: int

    @property
    def is_submittable(self) -> bool:
        return not self.incomplete_holes

    @property
    def validation_errors(self) -> List[str]:
        if not self.incomplete_holes:
            return []
        return [str(IncompleteRound(self.incomplete_holes))]


def holed_holes(ledger: ShotLedger, total_holes: int) -> List[int]:
    """Holes in [1, total_holes] with a holed shot."""
    return [h for h in range(1, total_holes + 1) if ledger.has_holed_shot(h)]


def incomplete_holes(ledger: ShotLedger, total_holes: int) -> List[int]:
    """Holes in [1, total_holes] still missing a holed shot."""
    done = set(holed_holes(ledger, total_holes))
    return [h for h in range(1, total_holes + 1) if h not in done]


def check_completeness(ledger: ShotLedger, total_holes: int) -> None:
    """
    Block submission of an unfinished round.

    Raises:
        IncompleteRound: Listing every hole without a holed shot
    """
    missing = incomplete_holes(ledger, total_holes)
    if missing:
        raise IncompleteRound(missing)


def format_to_par(total_score: int, par_reference: int) -> str:
    """Display string like '+5', 'E' or '-2'."""
    diff = total_score - par_reference
    if diff == 0:
        return "E"
    return f"+{diff}" if diff > 0 else str(diff)


def build_scorecard(ledger: ShotLedger, total_holes: int) -> List[HoleSummary]:
    scorecard = []
    for hole_number in range(1, total_holes + 1):
        hole_shots = ledger.shots_for_hole(hole_number)
        scorecard.append(HoleSummary(
            hole_number=hole_number,
            strokes=len(hole_shots),
            penalties=sum(1 for s in hole_shots if s.penalty),
            holed=any(s.holed for s in hole_shots),
            shots=hole_shots,
        ))
    return scorecard


def build_review(ledger: ShotLedger, total_holes: int) -> ReviewState:
    """
    Build the review state for a round.

    Total score is the raw count of recorded shots; no handicap or
    par adjustment is applied beyond the display string.
    """
    total = ledger.total_shot_count()
    par = PAR_REFERENCE.get(total_holes, 4 * total_holes)
    scorecard = build_scorecard(ledger, total_holes)
    return ReviewState(
        scorecard=scorecard,
        incomplete_holes=incomplete_holes(ledger, total_holes),
        total_score=total,
        par_reference=par,
        to_par=format_to_par(total, par),
        holes_played=sum(1 for row in scorecard if row.strokes > 0),
    )
