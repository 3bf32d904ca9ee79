"""
REST API Routes

FastAPI routes for shot-by-shot round entry.
This is the screen-flow shell around the entry core: it turns
HTTP requests into RoundSession calls and domain errors into
HTTP responses.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from .schemas import (
    FieldErrorSchema,
    ShotPayloadSchema,
    ShotSchema,
    CursorSchema,
    ShotFormDefaultsSchema,
    EntryStateResponse,
    PreviewResponse,
    CommitShotResponse,
    NavigationResponse,
    StartRoundRequest,
    RoundResponse,
    HoleSummarySchema,
    ReviewResponse,
    SubmitResponse,
    HealthResponse,
    LieEnum,
    DistanceUnitEnum,
    PuttLeaveEnum,
)
from core.domain import (
    DistanceUnit,
    FieldError,
    FieldErrors,
    IncompleteRound,
    Lie,
    PuttLeave,
    RoundConfig,
    SessionStateError,
    Shot,
    ShotPayload,
    SubmissionFailure,
)
from core.domain.round import APP_VERSION
from core.services import RoundSession, SubmissionClient
from core.services.review import ReviewState

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


# =============================================================================
# Dependencies
# =============================================================================

def get_session(request: Request) -> RoundSession:
    """The single entry session owned by the application."""
    return request.app.state.session


def get_submission_client(request: Request) -> SubmissionClient:
    return request.app.state.submission_client


def _field_error_response(status_code: int, error: FieldErrors) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "message": str(error),
            "errors": [e.to_dict() for e in error.errors],
        },
    )


def _state_error(error: SessionStateError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(error))


# =============================================================================
# Health Check
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check(
    session: RoundSession = Depends(get_session),
    client: SubmissionClient = Depends(get_submission_client),
) -> HealthResponse:
    """
    Check if the API is running.

    Returns:
        Health status, version and whether submissions are simulated
    """
    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        round_in_progress=session.is_started,
        demo_submission=client.demo_mode,
    )


# =============================================================================
# Round
# =============================================================================

@router.post(
    "/rounds",
    response_model=RoundResponse,
    tags=["Round"],
    summary="Start a new round"
)
async def start_round(
    request: StartRoundRequest,
    session: RoundSession = Depends(get_session),
) -> RoundResponse:
    """
    Start a round. Any round in progress is discarded.

    Returns 422 listing every invalid field if the setup is rejected.
    """
    try:
        session.start_round(RoundConfig(**request.model_dump()))
    except FieldErrors as e:
        raise _field_error_response(422, e)

    return _convert_round(session)


@router.get(
    "/rounds/current",
    response_model=RoundResponse,
    tags=["Round"],
    summary="Get the round in progress"
)
async def get_round(session: RoundSession = Depends(get_session)) -> RoundResponse:
    if not session.is_started:
        raise HTTPException(status_code=404, detail="No round in progress")
    return _convert_round(session)


@router.delete(
    "/rounds/current",
    status_code=204,
    tags=["Round"],
    summary="Abandon the round in progress"
)
async def reset_round(session: RoundSession = Depends(get_session)) -> None:
    """Discard round, shots and cursor together."""
    session.reset()


# =============================================================================
# Shot Entry
# =============================================================================

@router.get(
    "/entry",
    response_model=EntryStateResponse,
    tags=["Shot Entry"],
    summary="Current cursor, defaults and form"
)
async def get_entry(session: RoundSession = Depends(get_session)) -> EntryStateResponse:
    try:
        return _convert_entry(session)
    except SessionStateError as e:
        raise _state_error(e)


@router.post(
    "/entry/preview",
    response_model=PreviewResponse,
    tags=["Shot Entry"],
    summary="Re-infer defaults for an in-progress shot"
)
async def preview_shot(
    payload: ShotPayloadSchema,
    session: RoundSession = Depends(get_session),
) -> PreviewResponse:
    """
    Send the form whenever the starting lie or distance changes.

    Returns the form with the predicted end lie/unit filled in, plus
    any rule violations so far (blank distances are not reported).
    """
    try:
        domain_payload = _to_domain_payload(payload)
        errors = session.form_errors(domain_payload)
        form = session.preview(domain_payload)
    except SessionStateError as e:
        raise _state_error(e)

    return PreviewResponse(
        form=_convert_payload(form),
        errors=[_convert_field_error(e) for e in errors],
    )


@router.post(
    "/entry/back",
    response_model=NavigationResponse,
    tags=["Shot Entry"],
    summary="Step back to the previous recorded shot"
)
async def navigate_back(session: RoundSession = Depends(get_session)) -> NavigationResponse:
    try:
        shot = session.navigate_back()
        return NavigationResponse(moved=shot is not None, entry=_convert_entry(session))
    except SessionStateError as e:
        raise _state_error(e)


@router.post(
    "/entry/skip",
    response_model=NavigationResponse,
    tags=["Shot Entry"],
    summary="Skip to the next hole"
)
async def skip_to_next_hole(session: RoundSession = Depends(get_session)) -> NavigationResponse:
    try:
        moved = session.skip_to_next_hole()
        return NavigationResponse(moved=moved, entry=_convert_entry(session))
    except SessionStateError as e:
        raise _state_error(e)


@router.post(
    "/shots",
    response_model=CommitShotResponse,
    tags=["Shot Entry"],
    summary="Commit the shot under the cursor"
)
async def commit_shot(
    payload: ShotPayloadSchema,
    session: RoundSession = Depends(get_session),
) -> CommitShotResponse:
    """
    Commit a shot.

    An end distance of 0 marks the shot holed and moves to the next
    hole (or to review after the last hole). Returns 422 with every
    violated rule if the shot is rejected; nothing is stored then.
    """
    try:
        shot = session.commit_shot(_to_domain_payload(payload))
    except FieldErrors as e:
        raise _field_error_response(422, e)
    except SessionStateError as e:
        raise _state_error(e)

    return CommitShotResponse(shot=_convert_shot(shot), entry=_convert_entry(session))


@router.get(
    "/shots",
    response_model=List[ShotSchema],
    tags=["Shot Entry"],
    summary="List recorded shots"
)
async def list_shots(
    hole: Optional[int] = Query(None, ge=1, description="Only shots on this hole"),
    session: RoundSession = Depends(get_session),
) -> List[ShotSchema]:
    if not session.is_started:
        raise HTTPException(status_code=409, detail="No round in progress")
    if hole is not None and hole > session.round.holes:
        raise HTTPException(
            status_code=422,
            detail=f"Hole must be between 1 and {session.round.holes}",
        )
    shots = session.ledger.shots_for_hole(hole) if hole else session.ledger.all_shots()
    return [_convert_shot(s) for s in shots]


@router.patch(
    "/shots/{shot_id}",
    response_model=ShotSchema,
    tags=["Shot Entry"],
    summary="Edit a recorded shot"
)
async def update_shot(
    shot_id: str,
    payload: ShotPayloadSchema,
    session: RoundSession = Depends(get_session),
) -> ShotSchema:
    try:
        shot = session.update_shot(shot_id, _to_domain_payload(payload))
    except FieldErrors as e:
        raise _field_error_response(422, e)
    except SessionStateError as e:
        raise _state_error(e)

    if shot is None:
        raise HTTPException(status_code=404, detail=f"Shot {shot_id} not found")
    return _convert_shot(shot)


@router.delete(
    "/shots/{shot_id}",
    status_code=204,
    tags=["Shot Entry"],
    summary="Delete a recorded shot"
)
async def delete_shot(shot_id: str, session: RoundSession = Depends(get_session)) -> None:
    try:
        shot = session.delete_shot(shot_id)
    except SessionStateError as e:
        raise _state_error(e)

    if shot is None:
        raise HTTPException(status_code=404, detail=f"Shot {shot_id} not found")


# =============================================================================
# Review & Submission
# =============================================================================

@router.get(
    "/review",
    response_model=ReviewResponse,
    tags=["Review"],
    summary="Scorecard and completeness check"
)
async def get_review(session: RoundSession = Depends(get_session)) -> ReviewResponse:
    """Read-only; the screen is left as it is."""
    try:
        return _convert_review(session.review_state())
    except SessionStateError as e:
        raise _state_error(e)


@router.post(
    "/review",
    response_model=ReviewResponse,
    tags=["Review"],
    summary="Move to the review screen"
)
async def open_review(session: RoundSession = Depends(get_session)) -> ReviewResponse:
    try:
        return _convert_review(session.go_to_review())
    except SessionStateError as e:
        raise _state_error(e)


@router.post(
    "/review/return",
    response_model=EntryStateResponse,
    tags=["Review"],
    summary="Go back from review to shot entry"
)
async def return_to_entry(session: RoundSession = Depends(get_session)) -> EntryStateResponse:
    try:
        session.return_to_entry()
        return _convert_entry(session)
    except SessionStateError as e:
        raise _state_error(e)


@router.get(
    "/submission",
    tags=["Review"],
    summary="Payload that would be submitted"
)
async def get_submission_payload(session: RoundSession = Depends(get_session)) -> dict:
    try:
        return session.build_submission_payload().to_dict()
    except SessionStateError as e:
        raise _state_error(e)


@router.post(
    "/submission",
    response_model=SubmitResponse,
    tags=["Review"],
    summary="Submit the round"
)
def submit_round(
    session: RoundSession = Depends(get_session),
    client: SubmissionClient = Depends(get_submission_client),
) -> SubmitResponse:
    """
    Submit a complete round.

    409 if holes are missing a holed shot, 502 if the receiving side
    failed or rejected the round. Retrying after a failure is safe.

    A plain def: the submission call blocks, so FastAPI runs this
    handler in its threadpool.
    """
    try:
        session.check_completeness()
        payload = session.build_submission_payload()
    except IncompleteRound as e:
        raise HTTPException(
            status_code=409,
            detail={"message": str(e), "incomplete_holes": e.missing_holes},
        )
    except SessionStateError as e:
        raise _state_error(e)

    try:
        result = client.submit(payload)
    except SubmissionFailure as e:
        logger.error(f"Submission failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    if not result.ok:
        logger.error(f"Submission rejected: {result.error}")
        raise HTTPException(status_code=502, detail=result.error or "Failed to submit round")

    round_ = session.mark_submitted(result.round_id)
    return SubmitResponse(
        ok=True,
        round_id=round_.submitted_round_id,
        submitted_at=round_.submitted_at,
        shots_inserted=result.shots_inserted,
    )


# =============================================================================
# Helper Functions
# =============================================================================

def _to_domain_payload(payload: ShotPayloadSchema) -> ShotPayload:
    """Convert API shot form to the domain payload."""
    return ShotPayload(
        starting_lie=Lie(payload.starting_lie.value) if payload.starting_lie else None,
        starting_distance=payload.starting_distance,
        starting_unit=DistanceUnit(payload.starting_unit.value) if payload.starting_unit else None,
        ending_lie=Lie(payload.ending_lie.value) if payload.ending_lie else None,
        ending_distance=payload.ending_distance,
        ending_unit=DistanceUnit(payload.ending_unit.value) if payload.ending_unit else None,
        penalty=payload.penalty,
        holed=payload.holed,
        non_driver_tee_shot=payload.non_driver_tee_shot,
        putt_leave=PuttLeave(payload.putt_leave.value) if payload.putt_leave else None,
    )


def _convert_payload(payload: ShotPayload) -> ShotPayloadSchema:
    return ShotPayloadSchema(
        starting_lie=LieEnum(payload.starting_lie.value) if payload.starting_lie else None,
        starting_distance=payload.starting_distance,
        starting_unit=DistanceUnitEnum(payload.starting_unit.value) if payload.starting_unit else None,
        ending_lie=LieEnum(payload.ending_lie.value) if payload.ending_lie else None,
        ending_distance=payload.ending_distance,
        ending_unit=DistanceUnitEnum(payload.ending_unit.value) if payload.ending_unit else None,
        penalty=payload.penalty,
        holed=payload.holed,
        non_driver_tee_shot=payload.non_driver_tee_shot,
        putt_leave=PuttLeaveEnum(payload.putt_leave.value) if payload.putt_leave else None,
    )


def _convert_shot(shot: Shot) -> ShotSchema:
    """Convert domain Shot to API response schema."""
    return ShotSchema(
        shot_id=shot.shot_id,
        round_id=shot.round_id,
        hole_number=shot.hole_number,
        shot_number=shot.shot_number,
        starting_lie=LieEnum(shot.starting_lie.value),
        starting_distance=shot.starting_distance,
        starting_unit=DistanceUnitEnum(shot.starting_unit.value),
        ending_lie=LieEnum(shot.ending_lie.value),
        ending_distance=shot.ending_distance,
        ending_unit=DistanceUnitEnum(shot.ending_unit.value),
        penalty=shot.penalty,
        holed=shot.holed,
        non_driver_tee_shot=shot.non_driver_tee_shot,
        putt_leave=PuttLeaveEnum(shot.putt_leave.value) if shot.putt_leave else None,
    )


def _convert_field_error(error: FieldError) -> FieldErrorSchema:
    return FieldErrorSchema(field=error.field, reason=error.reason)


def _convert_review(review: ReviewState) -> ReviewResponse:
    return ReviewResponse(
        scorecard=[
            HoleSummarySchema(
                hole_number=row.hole_number,
                strokes=row.strokes,
                penalties=row.penalties,
                holed=row.holed,
                shots=[_convert_shot(s) for s in row.shots],
            )
            for row in review.scorecard
        ],
        incomplete_holes=review.incomplete_holes,
        validation_errors=review.validation_errors,
        submittable=review.is_submittable,
        total_score=review.total_score,
        par_reference=review.par_reference,
        to_par=review.to_par,
        holes_played=review.holes_played,
    )


def _convert_round(session: RoundSession) -> RoundResponse:
    round_ = session.round
    return RoundResponse(
        round_id=round_.round_id,
        player_name=round_.player_name,
        date=round_.date,
        course_name=round_.course_name,
        tournament=round_.tournament,
        holes=round_.holes,
        course_difficulty=round_.course_difficulty.value,
        weather=round_.weather.value,
        client_id=round_.client_id,
        app_version=round_.app_version,
        submitted_round_id=round_.submitted_round_id,
        submitted_at=round_.submitted_at,
        screen=session.screen.value,
    )


def _convert_entry(session: RoundSession) -> EntryStateResponse:
    """Snapshot of the entry screen for the cursor position."""
    cursor = session.cursor
    defaults = session.current_defaults()
    hole_shots = session.ledger.shots_for_hole(cursor.hole)

    return EntryStateResponse(
        screen=session.screen.value,
        cursor=CursorSchema(
            hole=cursor.hole,
            shot_number=cursor.shot_number,
            editing=cursor.position < len(hole_shots),
            can_step_back=session.can_navigate_back(),
            can_skip=session.can_skip(),
        ),
        defaults=ShotFormDefaultsSchema(
            starting_lie=LieEnum(defaults.starting_lie.value),
            starting_distance=defaults.starting_distance,
            starting_unit=DistanceUnitEnum(defaults.starting_unit.value),
            predicted_ending_lie=LieEnum(defaults.predicted_ending_lie.value),
            predicted_ending_unit=DistanceUnitEnum(defaults.predicted_ending_unit.value),
            editable_start_distance=defaults.editable_start_distance,
            show_non_driver_option=defaults.show_non_driver_option,
            show_putt_leave=defaults.show_putt_leave,
        ),
        form=_convert_payload(session.form_state()),
        hole_shots=[_convert_shot(s) for s in hole_shots],
        total_shots=session.ledger.total_shot_count(),
    )
