"""
Inference Service

Predicts sensible defaults for the shot being entered:
the most likely ending lie and the unit a lie is measured in.

Pure functions - no state, no side effects. They are re-run
whenever the starting lie/distance change and whenever the
entry cursor moves to a new shot.
"""

from dataclasses import replace
from typing import Optional

from ..domain.shot import Lie, DistanceUnit, ShotPayload


# Tee shots at or under this distance are expected to find the green
GREEN_REACHABLE_FROM_TEE = 225


def predict_ending_lie(starting_lie: Lie, starting_distance: Optional[float]) -> Lie:
    """
    Predict where a shot is likely to finish.

    A simple heuristic, not a guarantee - the player can override it.

    Args:
        starting_lie: Lie the shot is played from
        starting_distance: Distance to the hole, None if not entered yet

    Returns:
        GREEN for putts, short tee shots and any approach;
        FAIRWAY for tee shots longer than 225
    """
    if starting_lie == Lie.GREEN:
        return Lie.GREEN
    if starting_lie == Lie.TEE:
        distance = starting_distance or 0
        return Lie.GREEN if distance <= GREEN_REACHABLE_FROM_TEE else Lie.FAIRWAY
    return Lie.GREEN


def default_unit(lie: Lie) -> DistanceUnit:
    """Distances on the green are paced in feet, everything else in yards."""
    return DistanceUnit.FEET if lie == Lie.GREEN else DistanceUnit.YARDS


def is_holed_distance(ending_distance: Optional[float]) -> bool:
    """An ending distance of exactly 0 is the only trigger for 'holed'."""
    return ending_distance is not None and ending_distance == 0


def apply_prediction(payload: ShotPayload) -> ShotPayload:
    """
    Return a copy of the form with predicted ending lie/unit filled in.

    A starting unit already on the form is kept; a blank one follows
    the starting lie.

    Holed forms (ending distance 0) are left alone: their ending
    lie and unit are forced by the holed normalization instead.
    """
    if is_holed_distance(payload.ending_distance):
        return replace(payload)

    predicted = predict_ending_lie(payload.starting_lie, payload.starting_distance)
    return replace(
        payload,
        starting_unit=payload.starting_unit or default_unit(payload.starting_lie),
        ending_lie=predicted,
        ending_unit=default_unit(predicted),
    )
