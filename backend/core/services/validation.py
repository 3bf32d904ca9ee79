"""
Validation Service

Builds the rule set for "the next shot to be entered" and checks
candidate shots and round setups against it.

A rule set is an explicit list of named predicates built from the
entry context (hole, shot position, shots already on the hole).
Every rule is evaluated; violations are collected, never
short-circuited, so the player sees all problems at once.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Callable, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from ..domain.errors import FieldError, InvalidConfig, ShotValidationError
from ..domain.round import CourseDifficulty, Weather, RoundConfig
from ..domain.shot import DistanceUnit, Lie, NON_TEE_LIES, ShotPayload

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Limits
# -----------------------------------------------------------------------------

MIN_DISTANCE = 0
MAX_DISTANCE = 500

NON_DRIVER_MIN_DISTANCE = 250     # yards, tee shots only
PUTT_LEAVE_MIN_DISTANCE = 10      # feet, first putt only

MAX_PLAYER_NAME_LENGTH = 100
MAX_COURSE_NAME_LENGTH = 200
MAX_TOURNAMENT_LENGTH = 200


# =============================================================================
# Shot rules
# =============================================================================

@dataclass(frozen=True)
class ShotContext:
    """
    Where in the round the candidate shot sits.

    Captured when the rule set is built. Rules read these values,
    never the live ledger.

    Attributes:
        existing_shots_for_hole: Shots recorded on the hole before this one
        previous_ending_lie: Ending lie of the preceding shot on the hole
        previous_ending_distance: Ending distance of the preceding shot
        previous_ending_unit: Ending unit of the preceding shot
        hole_has_other_holed_shot: Another shot on the hole is already holed
        has_later_shots: Recorded shots follow this one on the hole
        previous_shot_holed: The preceding shot already finished the hole
    """
    hole_number: int
    shot_number: int
    is_first_shot: bool
    total_holes: int
    existing_shots_for_hole: int
    previous_ending_lie: Optional[Lie] = None
    previous_ending_distance: Optional[float] = None
    previous_ending_unit: Optional[DistanceUnit] = None
    hole_has_other_holed_shot: bool = False
    has_later_shots: bool = False
    previous_shot_holed: bool = False


@dataclass(frozen=True)
class ShotRule:
    """
    A named predicate over a shot payload.

    `check` returns True when the payload passes. Commit-only rules
    are skipped while a form is still being edited.
    """
    name: str
    field: str
    reason: str
    check: Callable[[ShotPayload], bool]
    commit_only: bool = False

    def evaluate(self, payload: ShotPayload) -> Optional[FieldError]:
        if self.check(payload):
            return None
        return FieldError(field=self.field, reason=self.reason)


def _distance_rules(field: str, label: str, getter: Callable[[ShotPayload], Optional[float]]) -> List[ShotRule]:
    return [
        ShotRule(
            name=f"{field}_required",
            field=field,
            reason=f"{label} is required",
            check=lambda p: getter(p) is not None,
            commit_only=True,
        ),
        ShotRule(
            name=f"{field}_min",
            field=field,
            reason="Distance must be positive",
            check=lambda p: getter(p) is None or getter(p) >= MIN_DISTANCE,
        ),
        ShotRule(
            name=f"{field}_max",
            field=field,
            reason="Distance seems too large",
            check=lambda p: getter(p) is None or getter(p) <= MAX_DISTANCE,
        ),
    ]


def build_shot_rules(context: ShotContext) -> List[ShotRule]:
    """
    Build the rule set for the shot at `context`.

    Args:
        context: Hole, shot position and hole history at build time

    Returns:
        Ordered list of rules; evaluate with validate_shot()
    """
    rules: List[ShotRule] = []

    rules.append(ShotRule(
        name="hole_in_round",
        field="hole_number",
        reason=f"Hole must be between 1 and {context.total_holes}",
        check=lambda p: 1 <= context.hole_number <= context.total_holes,
    ))

    # Starting lie is strict: Tee exactly on the first shot of a hole
    if context.is_first_shot:
        rules.append(ShotRule(
            name="first_shot_from_tee",
            field="starting_lie",
            reason="First shot must start from Tee",
            check=lambda p: p.starting_lie == Lie.TEE,
        ))
    else:
        rules.append(ShotRule(
            name="starting_lie_valid",
            field="starting_lie",
            reason="Please select a valid lie",
            check=lambda p: p.starting_lie in NON_TEE_LIES,
        ))

    rules.extend(_distance_rules("starting_distance", "Start distance", lambda p: p.starting_distance))
    rules.extend(_distance_rules("ending_distance", "End distance", lambda p: p.ending_distance))

    # Carry-forward: a later shot starts where the previous one finished
    if not context.is_first_shot and context.previous_ending_lie is not None:
        rules.append(ShotRule(
            name="carry_forward_lie",
            field="starting_lie",
            reason="Start lie must match the previous shot's end lie",
            check=lambda p: p.starting_lie == context.previous_ending_lie,
        ))
        rules.append(ShotRule(
            name="carry_forward_distance",
            field="starting_distance",
            reason="Start distance must match the previous shot's end distance",
            check=lambda p: p.starting_distance is None
            or p.starting_distance == context.previous_ending_distance,
        ))

    # Holed shots
    rules.append(ShotRule(
        name="holed_on_green",
        field="ending_lie",
        reason="Holed shots must end on the Green",
        check=lambda p: not p.holed or p.ending_lie == Lie.GREEN,
    ))
    rules.append(ShotRule(
        name="holed_zero_distance",
        field="ending_distance",
        reason="Holed shots must have 0 distance",
        check=lambda p: not p.holed or p.ending_distance == 0,
    ))
    rules.append(ShotRule(
        name="single_holed_shot",
        field="holed",
        reason="This hole already has a holed shot",
        check=lambda p: not p.holed or not context.hole_has_other_holed_shot,
    ))
    rules.append(ShotRule(
        name="holed_is_last",
        field="holed",
        reason="Only the last shot on a hole can be holed",
        check=lambda p: not p.holed or not context.has_later_shots,
    ))
    rules.append(ShotRule(
        name="hole_still_open",
        field="hole_number",
        reason=f"Hole {context.hole_number} is already holed out",
        check=lambda p: not context.previous_shot_holed,
    ))
    rules.append(ShotRule(
        name="followed_shot_off_tee",
        field="ending_lie",
        reason="A shot followed by another cannot end on the Tee",
        check=lambda p: p.ending_lie != Lie.TEE or not context.has_later_shots,
    ))

    # Non-driver off the tee: two independent checks
    rules.append(ShotRule(
        name="non_driver_from_tee",
        field="non_driver_tee_shot",
        reason="Non-driver option only applies to Tee shots",
        check=lambda p: not p.non_driver_tee_shot or p.starting_lie == Lie.TEE,
    ))
    rules.append(ShotRule(
        name="non_driver_long_shot",
        field="non_driver_tee_shot",
        reason=f"Non-driver option only for shots {NON_DRIVER_MIN_DISTANCE}+ yards",
        check=lambda p: not p.non_driver_tee_shot
        or (p.starting_distance or 0) >= NON_DRIVER_MIN_DISTANCE,
    ))

    # Putt leave: first putt of the hole, long enough to matter
    rules.append(ShotRule(
        name="putt_leave_on_putt",
        field="putt_leave",
        reason="Putt leave only applies to putts",
        check=lambda p: p.putt_leave is None or p.is_putt,
    ))
    rules.append(ShotRule(
        name="putt_leave_first_putt",
        field="putt_leave",
        reason="Putt leave only applies to first putt",
        check=lambda p: p.putt_leave is None or context.existing_shots_for_hole == 0,
    ))
    rules.append(ShotRule(
        name="putt_leave_long_putt",
        field="putt_leave",
        reason=f"Putt leave only for putts {PUTT_LEAVE_MIN_DISTANCE}+ feet",
        check=lambda p: p.putt_leave is None
        or (p.starting_distance or 0) >= PUTT_LEAVE_MIN_DISTANCE,
    ))

    return rules


def validate_shot(rules: List[ShotRule], payload: ShotPayload, committing: bool = True) -> List[FieldError]:
    """
    Evaluate every rule against a payload.

    Args:
        rules: Rule set from build_shot_rules()
        payload: Candidate shot
        committing: False while the form is still being edited;
            missing distances are then allowed

    Returns:
        All violations, in rule order (empty list if valid)
    """
    errors = []
    for rule in rules:
        if rule.commit_only and not committing:
            continue
        error = rule.evaluate(payload)
        if error is not None:
            errors.append(error)
    return errors


def check_shot(rules: List[ShotRule], payload: ShotPayload) -> None:
    """Raise ShotValidationError if the payload cannot be committed."""
    errors = validate_shot(rules, payload, committing=True)
    if errors:
        logger.info(f"Shot rejected: {[e.field for e in errors]}")
        raise ShotValidationError(errors)


# =============================================================================
# Round setup
# =============================================================================

class RoundDetails(BaseModel):
    """
    Round setup as accepted at round start.

    Every field is checked in one pass, so a rejected setup lists all
    of its bad fields.
    """
    player_name: str = Field(..., min_length=1, max_length=MAX_PLAYER_NAME_LENGTH)
    date: date
    course_name: str = Field(..., min_length=1, max_length=MAX_COURSE_NAME_LENGTH)
    tournament: str = Field(..., min_length=1, max_length=MAX_TOURNAMENT_LENGTH)
    holes: Literal[9, 18]
    course_difficulty: CourseDifficulty
    weather: Weather

    class Config:
        str_strip_whitespace = True


# Player-facing wording for setup errors
FIELD_LABELS = {
    "player_name": "Player name",
    "date": "Date",
    "course_name": "Course name",
    "tournament": "Tournament name",
}

CHOICE_REASONS = {
    "holes": "Please select 9 or 18 holes",
    "course_difficulty": "Please select course difficulty",
    "weather": "Please select weather condition",
}


def _setup_error(error: dict) -> FieldError:
    """Turn one pydantic error into a FieldError with the form's wording."""
    field = str(error["loc"][-1])
    kind = error["type"]

    if field in CHOICE_REASONS:
        return FieldError(field, CHOICE_REASONS[field])

    label = FIELD_LABELS.get(field)
    if label is None:
        return FieldError(field, error["msg"])
    if kind in ("missing", "string_too_short") or error.get("input") in (None, ""):
        return FieldError(field, f"{label} is required")
    if kind == "string_too_long":
        return FieldError(field, f"{label} must be less than {error['ctx']['max_length']} characters")
    if field == "date":
        return FieldError(field, "Date must be in yyyy-mm-dd format")
    return FieldError(field, error["msg"])


def parse_round_details(data: dict) -> dict:
    """
    Validate raw setup values and return them normalized.

    Raises:
        InvalidConfig: Listing every invalid field
    """
    try:
        details = RoundDetails.model_validate(data)
    except ValidationError as e:
        errors = [_setup_error(error) for error in e.errors()]
        logger.info(f"Round setup rejected: {[err.field for err in errors]}")
        raise InvalidConfig(errors) from e
    return details.model_dump()


def parse_round_config(config: RoundConfig) -> dict:
    """
    Validate a round setup and return its normalized values.

    Raises:
        InvalidConfig: If any field is invalid
    """
    return parse_round_details(asdict(config))


def validate_round_config(config: RoundConfig) -> List[FieldError]:
    """Field errors for every invalid setup value (empty list if valid)."""
    try:
        parse_round_config(config)
    except InvalidConfig as e:
        return e.errors
    return []
