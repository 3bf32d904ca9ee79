"""
Round Session Service

High-level service that owns one round being entered: the Round,
its Shot Ledger and the entry cursor. This is the main entry point
the screen flow talks to.

There is a single writer - the player's event stream - and every
operation runs to completion before the next one starts. All
validation happens before any mutation, so a rejected operation
leaves the session exactly as it was.
"""

import uuid
import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from ..domain.errors import FieldError, SessionStateError
from ..domain.round import (
    IDENTIFYING_FIELDS,
    LATE_BOUND_FIELDS,
    Round,
    RoundConfig,
    Screen,
    SubmissionPayload,
)
from ..domain.shot import Lie, Shot, ShotFormDefaults, ShotPayload
from .inference import apply_prediction, default_unit, predict_ending_lie
from .navigator import EntryCursor, Navigator
from .review import ReviewState, build_review, check_completeness
from .shot_ledger import ShotLedger, normalize_holed
from .validation import (
    NON_DRIVER_MIN_DISTANCE,
    PUTT_LEAVE_MIN_DISTANCE,
    RoundDetails,
    ShotContext,
    build_shot_rules,
    check_shot,
    parse_round_config,
    parse_round_details,
    validate_shot,
)

logger = logging.getLogger(__name__)


class RoundSession:
    """
    One player's round, from setup to submission.

    Usage:
        session = RoundSession()
        session.start_round(RoundConfig(player_name="Ann", date="2024-06-01",
                                        course_name="Links", tournament="Club",
                                        holes=9))
        session.current_defaults()        # tee, blank distance
        session.commit_shot(ShotPayload(starting_distance=150,
                                        ending_lie=Lie.GREEN, ending_distance=10))
        session.review_state().incomplete_holes
        payload = session.build_submission_payload()
    """

    def __init__(self):
        self.round: Optional[Round] = None
        self.ledger = ShotLedger()
        self.navigator: Optional[Navigator] = None
        self.screen = Screen.ROUND_DETAILS
        self.form: Optional[ShotPayload] = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start_round(self, config: RoundConfig) -> Round:
        """
        Start a new round, discarding any previous one.

        Raises:
            InvalidConfig: If the setup has invalid fields
        """
        values = parse_round_config(config)

        self.round = Round(
            round_id=str(uuid.uuid4()),
            client_id=str(uuid.uuid4()),
            **values,
        )
        self.ledger = ShotLedger()
        self.navigator = Navigator(total_holes=self.round.holes)
        self.screen = Screen.SHOT_ENTRY
        self.form = self._form_for_cursor()

        logger.info(
            f"Round {self.round.round_id} started: {self.round.player_name} at "
            f"{self.round.course_name}, {self.round.holes} holes"
        )
        return self.round

    def reset(self) -> None:
        """Abandon the round. Round, ledger and cursor go together."""
        if self.round is not None:
            logger.info(f"Round {self.round.round_id} discarded")
        self.round = None
        self.ledger = ShotLedger()
        self.navigator = None
        self.screen = Screen.ROUND_DETAILS
        self.form = None

    def update_round(self, **changes) -> Round:
        """
        Patch non-identifying round fields.

        The patched setup is validated as a whole, the same way as at
        round start.

        Raises:
            ValueError: If an identifying, late-bound or unknown field is patched
            InvalidConfig: If a patched value is invalid
        """
        self._require_round()
        bad = set(changes) & (IDENTIFYING_FIELDS | LATE_BOUND_FIELDS)
        if bad:
            raise ValueError(f"Cannot patch identifying round fields: {sorted(bad)}")
        unknown = [name for name in changes if name not in RoundDetails.model_fields]
        if unknown:
            raise ValueError(f"Unknown round fields: {unknown}")

        current = {name: getattr(self.round, name) for name in RoundDetails.model_fields}
        values = parse_round_details({**current, **changes})
        self.round = replace(self.round, **values)
        return self.round

    @property
    def is_started(self) -> bool:
        return self.round is not None

    @property
    def cursor(self) -> EntryCursor:
        self._require_round()
        return self.navigator.cursor

    # -------------------------------------------------------------------------
    # Defaults & form state
    # -------------------------------------------------------------------------

    def current_defaults(self) -> ShotFormDefaults:
        """
        Defaults for the shot position under the cursor.

        The first shot of a hole starts on the tee with a blank
        distance; later shots start where the previous one ended.
        """
        self._require_round()
        cursor = self.navigator.cursor
        previous = self.navigator.previous_shot(self.ledger)

        if previous is None:
            starting_lie = Lie.TEE
            starting_distance = None
            starting_unit = default_unit(Lie.TEE)
        else:
            starting_lie = previous.ending_lie
            starting_distance = previous.ending_distance
            starting_unit = previous.ending_unit

        predicted = predict_ending_lie(starting_lie, starting_distance)
        distance = starting_distance or 0
        return ShotFormDefaults(
            hole_number=cursor.hole,
            shot_number=cursor.shot_number,
            starting_lie=starting_lie,
            starting_distance=starting_distance,
            starting_unit=starting_unit,
            predicted_ending_lie=predicted,
            predicted_ending_unit=default_unit(predicted),
            editable_start_distance=cursor.position == 0,
            show_non_driver_option=starting_lie == Lie.TEE and distance >= NON_DRIVER_MIN_DISTANCE,
            show_putt_leave=(
                starting_lie == Lie.GREEN
                and cursor.position == 0
                and distance >= PUTT_LEAVE_MIN_DISTANCE
            ),
        )

    def form_state(self) -> ShotPayload:
        """The editable values currently loaded for the cursor position."""
        self._require_round()
        return self.form

    def preview(self, payload: ShotPayload) -> ShotPayload:
        """
        Re-run inference for an in-progress form.

        Called whenever the starting lie or distance changes.
        Carried-forward start values and the holed rule are applied,
        then the result becomes the session's form state.
        """
        self._require_round()
        payload = apply_prediction(self._prepare(payload))
        self.form = payload
        return payload

    def form_errors(self, payload: ShotPayload) -> List[FieldError]:
        """Violations of an in-progress form; blank distances are allowed."""
        self._require_round()
        prepared = self._prepare(payload)
        return validate_shot(build_shot_rules(self._context()), prepared, committing=False)

    # -------------------------------------------------------------------------
    # Shot entry
    # -------------------------------------------------------------------------

    def commit_shot(self, payload: ShotPayload) -> Shot:
        """
        Commit the shot under the cursor and move on.

        A new shot is appended; when the cursor sits on a recorded
        shot (after stepping back) that shot is updated in place.
        Holed shots advance to the next hole, or to review on the
        last hole.

        Raises:
            ShotValidationError: If any rule is broken (nothing is stored)
            SessionStateError: If no round is in progress
        """
        self._require_open_round()
        context = self._context()
        prepared = self._prepare(payload)
        check_shot(build_shot_rules(context), prepared)

        editing = self.navigator.shot_under_cursor(self.ledger)
        if editing is not None:
            shot = self._apply_edit(editing, prepared)
        else:
            shot = self.ledger.append(context.hole_number, prepared, self.round.round_id)
            logger.info(
                f"Hole {shot.hole_number} shot {shot.shot_number}: "
                f"{shot.starting_lie.value} {shot.starting_distance} -> "
                f"{'HOLED' if shot.holed else shot.ending_lie.value + ' ' + str(shot.ending_distance)}"
            )

        if self.navigator.after_commit(shot, self.ledger):
            self.screen = Screen.REVIEW
        else:
            self.screen = Screen.SHOT_ENTRY
        self.form = self._form_for_cursor()
        return shot

    def update_shot(self, shot_id: str, payload: ShotPayload) -> Optional[Shot]:
        """
        Replace a recorded shot's values, validated at its own position.

        Returns:
            The updated Shot, or None if no shot has that id

        Raises:
            ShotValidationError: If the new values break a rule
        """
        self._require_open_round()
        shot = self.ledger.find(shot_id)
        if shot is None:
            return None

        context = self._context(shot.hole_number, shot.shot_number - 1)
        prepared = self._prepare(payload, context)
        check_shot(build_shot_rules(context), prepared)

        shot = self._apply_edit(shot, prepared)
        self.form = self._form_for_cursor()
        return shot

    def delete_shot(self, shot_id: str) -> Optional[Shot]:
        """
        Remove a recorded shot.

        Later shots on the hole are renumbered, and the shot that
        moves into the gap starts where the deleted one started,
        so the hole still reads as a continuous sequence.

        Returns:
            The deleted Shot, or None if no shot has that id
        """
        self._require_open_round()
        shot = self.ledger.find(shot_id)
        if shot is None:
            return None

        index = shot.shot_number - 1
        self.ledger.delete(shot_id)

        hole_shots = self.ledger.shots_for_hole(shot.hole_number)
        if index < len(hole_shots):
            follower = hole_shots[index]
            patch = {
                "starting_lie": shot.starting_lie,
                "starting_distance": shot.starting_distance,
                "starting_unit": shot.starting_unit,
            }
            if shot.starting_lie != Lie.TEE:
                patch["non_driver_tee_shot"] = None
            self.ledger.update(follower.shot_id, patch)

        cursor = self.navigator.cursor
        if cursor.hole == shot.hole_number and cursor.position > index:
            cursor.position -= 1

        logger.info(f"Hole {shot.hole_number}: deleted shot {shot.shot_number}")
        self.form = self._form_for_cursor()
        return shot

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def navigate_back(self) -> Optional[Shot]:
        """
        Step back to the previous recorded shot and load it verbatim.

        Returns:
            The shot now loaded for editing, or None if there was
            nowhere to go back to
        """
        self._require_open_round()
        shot = self.navigator.step_back(self.ledger)
        if shot is None:
            return None
        self.screen = Screen.SHOT_ENTRY
        self.form = shot.to_payload()
        return shot

    def skip_to_next_hole(self) -> bool:
        """Move to the next hole without holing out. False on the last hole."""
        self._require_open_round()
        if not self.navigator.skip_to_next_hole():
            return False
        self.form = self._form_for_cursor()
        return True

    def can_navigate_back(self) -> bool:
        self._require_round()
        return self.navigator.can_step_back(self.ledger)

    def can_skip(self) -> bool:
        self._require_round()
        return self.navigator.can_skip()

    # -------------------------------------------------------------------------
    # Review & submission
    # -------------------------------------------------------------------------

    def go_to_review(self) -> ReviewState:
        self._require_round()
        if self.screen != Screen.SUCCESS:
            self.screen = Screen.REVIEW
        return self.review_state()

    def return_to_entry(self) -> None:
        self._require_open_round()
        self.screen = Screen.SHOT_ENTRY

    def review_state(self) -> ReviewState:
        self._require_round()
        return build_review(self.ledger, self.round.holes)

    def check_completeness(self) -> None:
        """
        Raises:
            IncompleteRound: If any hole is missing a holed shot
        """
        self._require_round()
        check_completeness(self.ledger, self.round.holes)

    def build_submission_payload(self) -> SubmissionPayload:
        """The Round paired with every shot in hole-then-shot order."""
        self._require_round()
        return SubmissionPayload(round=self.round, shots=self.ledger.all_shots())

    def mark_submitted(self, server_round_id: Optional[str] = None) -> Round:
        """
        Record a successful submission. Shots are frozen from here on.

        Args:
            server_round_id: Identifier assigned by the receiving side, if any
        """
        self._require_round()
        self.round = replace(
            self.round,
            submitted_round_id=server_round_id or self.round.round_id,
            submitted_at=datetime.now(),
        )
        self.screen = Screen.SUCCESS
        logger.info(f"Round {self.round.round_id} submitted as {self.round.submitted_round_id}")
        return self.round

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_round(self) -> None:
        if self.round is None:
            raise SessionStateError("No round in progress")

    def _require_open_round(self) -> None:
        self._require_round()
        if self.round.is_submitted:
            raise SessionStateError("Round already submitted - shots can no longer change")

    def _context(self, hole: Optional[int] = None, position: Optional[int] = None) -> ShotContext:
        """Capture the rule-set context for a shot position."""
        cursor = self.navigator.cursor
        hole = cursor.hole if hole is None else hole
        position = cursor.position if position is None else position

        hole_shots = self.ledger.shots_for_hole(hole)
        position = min(position, len(hole_shots))
        previous = hole_shots[position - 1] if position > 0 else None
        others_holed = any(s.holed for i, s in enumerate(hole_shots) if i != position)

        return ShotContext(
            hole_number=hole,
            shot_number=position + 1,
            is_first_shot=position == 0,
            total_holes=self.round.holes,
            existing_shots_for_hole=position,
            previous_ending_lie=previous.ending_lie if previous else None,
            previous_ending_distance=previous.ending_distance if previous else None,
            previous_ending_unit=previous.ending_unit if previous else None,
            hole_has_other_holed_shot=others_holed,
            has_later_shots=position + 1 < len(hole_shots),
            previous_shot_holed=bool(previous and previous.holed),
        )

    def _prepare(self, payload: ShotPayload, context: Optional[ShotContext] = None) -> ShotPayload:
        """
        Fill blank form values from the entry context.

        Start lie, distance and unit of a later shot come from the
        previous shot, a blank ending lie gets the prediction, other
        blank units follow their lie. The holed rule is applied last.
        """
        context = context or self._context()
        prepared = replace(payload)

        if prepared.starting_lie is None:
            prepared.starting_lie = Lie.TEE if context.is_first_shot else context.previous_ending_lie
        if prepared.starting_distance is None and not context.is_first_shot:
            prepared.starting_distance = context.previous_ending_distance
        if prepared.ending_lie is None and prepared.starting_lie is not None:
            prepared.ending_lie = predict_ending_lie(prepared.starting_lie, prepared.starting_distance)
        if prepared.starting_unit is None and not context.is_first_shot:
            prepared.starting_unit = context.previous_ending_unit
        if prepared.starting_unit is None and prepared.starting_lie is not None:
            prepared.starting_unit = default_unit(prepared.starting_lie)
        if prepared.ending_unit is None and prepared.ending_lie is not None:
            prepared.ending_unit = default_unit(prepared.ending_lie)

        return normalize_holed(prepared)

    def _apply_edit(self, shot: Shot, payload: ShotPayload) -> Shot:
        """Overwrite a recorded shot and keep the next shot's start in step."""
        self.ledger.update(shot.shot_id, {
            "starting_lie": payload.starting_lie,
            "starting_distance": payload.starting_distance,
            "starting_unit": payload.starting_unit or default_unit(payload.starting_lie),
            "ending_lie": payload.ending_lie,
            "ending_distance": payload.ending_distance,
            "ending_unit": payload.ending_unit or default_unit(payload.ending_lie),
            "penalty": payload.penalty,
            "holed": payload.holed,
            "non_driver_tee_shot": payload.non_driver_tee_shot,
            "putt_leave": payload.putt_leave,
        })

        hole_shots = self.ledger.shots_for_hole(shot.hole_number)
        if shot.shot_number < len(hole_shots):
            follower = hole_shots[shot.shot_number]
            self.ledger.update(follower.shot_id, {
                "starting_lie": shot.ending_lie,
                "starting_distance": shot.ending_distance,
                "starting_unit": shot.ending_unit,
            })

        logger.info(f"Hole {shot.hole_number} shot {shot.shot_number} edited")
        return shot

    def _form_for_cursor(self) -> ShotPayload:
        recorded = self.navigator.shot_under_cursor(self.ledger)
        if recorded is not None:
            return recorded.to_payload()
        return self.current_defaults().to_payload()
