import pytest

from core.domain import InvalidConfig, Lie, PuttLeave, ShotPayload, ShotValidationError
from core.services.validation import (
    ShotContext,
    build_shot_rules,
    check_shot,
    parse_round_config,
    validate_round_config,
    validate_shot,
)


def _context(**overrides) -> ShotContext:
    values = dict(
        hole_number=1,
        shot_number=1,
        is_first_shot=True,
        total_holes=18,
        existing_shots_for_hole=0,
    )
    values.update(overrides)
    return ShotContext(**values)


def _later_context(**overrides) -> ShotContext:
    values = dict(
        shot_number=2,
        is_first_shot=False,
        existing_shots_for_hole=1,
        previous_ending_lie=Lie.GREEN,
        previous_ending_distance=12,
    )
    values.update(overrides)
    return _context(**values)


def _errors(context, payload, committing=True):
    return validate_shot(build_shot_rules(context), payload, committing=committing)


def _fields(errors):
    return [e.field for e in errors]


def _reasons(errors):
    return [e.reason for e in errors]


def test_valid_tee_shot_passes():
    payload = ShotPayload(
        starting_lie=Lie.TEE, starting_distance=380, ending_lie=Lie.FAIRWAY, ending_distance=150
    )
    assert _errors(_context(), payload) == []


@pytest.mark.parametrize("lie", [Lie.FAIRWAY, Lie.ROUGH, Lie.SAND, Lie.RECOVERY, Lie.GREEN])
def test_first_shot_must_start_from_tee(lie):
    payload = ShotPayload(starting_lie=lie, starting_distance=150, ending_lie=Lie.GREEN, ending_distance=10)
    errors = _errors(_context(), payload)
    assert _fields(errors) == ["starting_lie"]
    assert _reasons(errors) == ["First shot must start from Tee"]


def test_later_shot_cannot_start_from_tee():
    payload = ShotPayload(starting_lie=Lie.TEE, starting_distance=12, ending_lie=Lie.GREEN, ending_distance=2)
    errors = _errors(_later_context(), payload)
    assert "Please select a valid lie" in _reasons(errors)
    assert "starting_lie" in _fields(errors)


@pytest.mark.parametrize(
    "distance, reason",
    [(-1, "Distance must be positive"), (501, "Distance seems too large")],
)
def test_distance_limits(distance, reason):
    payload = ShotPayload(
        starting_lie=Lie.TEE, starting_distance=distance, ending_lie=Lie.FAIRWAY, ending_distance=100
    )
    errors = _errors(_context(), payload)
    assert [(e.field, e.reason) for e in errors] == [("starting_distance", reason)]


def test_distance_limits_are_inclusive():
    payload = ShotPayload(starting_lie=Lie.TEE, starting_distance=500, ending_lie=Lie.FAIRWAY, ending_distance=0.5)
    assert _errors(_context(), payload) == []


def test_blank_distances_allowed_while_editing_but_not_on_commit():
    payload = ShotPayload(starting_lie=Lie.TEE, ending_lie=Lie.FAIRWAY)

    assert _errors(_context(), payload, committing=False) == []

    errors = _errors(_context(), payload, committing=True)
    assert _fields(errors) == ["starting_distance", "ending_distance"]
    assert _reasons(errors) == ["Start distance is required", "End distance is required"]


def test_holed_requires_green_and_zero():
    payload = ShotPayload(
        starting_lie=Lie.GREEN,
        starting_distance=12,
        ending_lie=Lie.FAIRWAY,
        ending_distance=3,
        holed=True,
    )
    errors = _errors(_later_context(), payload)
    assert ("ending_lie", "Holed shots must end on the Green") in [(e.field, e.reason) for e in errors]
    assert ("ending_distance", "Holed shots must have 0 distance") in [(e.field, e.reason) for e in errors]


def test_second_holed_shot_on_a_hole_is_rejected():
    payload = ShotPayload(
        starting_lie=Lie.GREEN, starting_distance=12, ending_lie=Lie.GREEN, ending_distance=0, holed=True
    )
    errors = _errors(_later_context(hole_has_other_holed_shot=True), payload)
    assert _fields(errors) == ["holed"]


def test_no_shot_after_a_holed_shot():
    payload = ShotPayload(
        starting_lie=Lie.GREEN, starting_distance=12, ending_lie=Lie.GREEN, ending_distance=2
    )
    errors = _errors(_later_context(previous_shot_holed=True), payload)
    assert _reasons(errors) == ["Hole 1 is already holed out"]


@pytest.mark.parametrize(
    "lie, distance, reasons",
    [
        (Lie.TEE, 260, []),
        (Lie.TEE, 250, []),
        (Lie.TEE, 249, ["Non-driver option only for shots 250+ yards"]),
    ],
)
def test_non_driver_tee_shot(lie, distance, reasons):
    payload = ShotPayload(
        starting_lie=lie,
        starting_distance=distance,
        ending_lie=Lie.FAIRWAY,
        ending_distance=120,
        non_driver_tee_shot=True,
    )
    assert _reasons(_errors(_context(), payload)) == reasons


def test_non_driver_off_the_fairway_is_rejected():
    payload = ShotPayload(
        starting_lie=Lie.FAIRWAY,
        starting_distance=260,
        ending_lie=Lie.GREEN,
        ending_distance=30,
        non_driver_tee_shot=True,
    )
    context = _later_context(previous_ending_lie=Lie.FAIRWAY, previous_ending_distance=260)
    errors = _errors(context, payload)
    assert [(e.field, e.reason) for e in errors] == [
        ("non_driver_tee_shot", "Non-driver option only applies to Tee shots"),
    ]


def test_non_driver_unset_or_false_is_ignored():
    for flag in (None, False):
        payload = ShotPayload(
            starting_lie=Lie.TEE, starting_distance=100, ending_lie=Lie.GREEN,
            ending_distance=20, non_driver_tee_shot=flag,
        )
        assert _errors(_context(), payload) == []


def _putt(start=12, leave=PuttLeave.SHORT, start_lie=Lie.GREEN, end_lie=Lie.GREEN):
    return ShotPayload(
        starting_lie=start_lie,
        starting_distance=start,
        ending_lie=end_lie,
        ending_distance=2,
        putt_leave=leave,
    )


def test_putt_leave_accepted_on_first_long_putt():
    context = _later_context(existing_shots_for_hole=0)
    assert _errors(context, _putt()) == []


def test_putt_leave_rejected_on_second_putt():
    errors = _errors(_later_context(existing_shots_for_hole=1), _putt(leave=PuttLeave.LONG))
    assert [(e.field, e.reason) for e in errors] == [
        ("putt_leave", "Putt leave only applies to first putt"),
    ]


def test_putt_leave_rejected_on_short_putt():
    context = _later_context(existing_shots_for_hole=0, previous_ending_distance=8)
    errors = _errors(context, _putt(start=8))
    assert _reasons(errors) == ["Putt leave only for putts 10+ feet"]


def test_putt_leave_rejected_when_not_a_putt():
    context = _later_context(
        existing_shots_for_hole=0, previous_ending_lie=Lie.FAIRWAY, previous_ending_distance=12
    )
    errors = _errors(context, _putt(start_lie=Lie.FAIRWAY))
    assert _reasons(errors) == ["Putt leave only applies to putts"]


def test_putt_leave_uses_count_captured_at_build_time():
    context = _later_context(existing_shots_for_hole=0)
    rules = build_shot_rules(context)
    assert validate_shot(rules, _putt()) == []


def test_violations_accumulate():
    payload = ShotPayload(
        starting_lie=Lie.FAIRWAY,
        starting_distance=100,
        ending_lie=Lie.ROUGH,
        ending_distance=600,
        holed=True,
        non_driver_tee_shot=True,
        putt_leave=PuttLeave.LONG,
    )
    fields = _fields(_errors(_context(), payload))
    assert fields.count("starting_lie") == 1
    assert "ending_distance" in fields
    assert "ending_lie" in fields
    assert fields.count("non_driver_tee_shot") == 2
    assert fields.count("putt_leave") == 1


def test_carry_forward_mismatch_is_rejected():
    payload = ShotPayload(starting_lie=Lie.ROUGH, starting_distance=40, ending_lie=Lie.GREEN, ending_distance=5)
    errors = _errors(_later_context(), payload)
    assert set(_fields(errors)) == {"starting_lie", "starting_distance"}


def test_check_shot_raises_with_all_errors():
    payload = ShotPayload(starting_lie=Lie.SAND, ending_lie=Lie.GREEN)
    with pytest.raises(ShotValidationError) as exc_info:
        check_shot(build_shot_rules(_context()), payload)
    assert exc_info.value.fields() == ["starting_lie", "starting_distance", "ending_distance"]


def test_hole_outside_round_is_rejected():
    payload = ShotPayload(starting_lie=Lie.TEE, starting_distance=150, ending_lie=Lie.GREEN, ending_distance=10)
    errors = _errors(_context(hole_number=10, total_holes=9), payload)
    assert _fields(errors) == ["hole_number"]


# -----------------------------------------------------------------------------
# Round setup
# -----------------------------------------------------------------------------

def test_valid_round_config(config_factory):
    assert validate_round_config(config_factory()) == []
    values = parse_round_config(config_factory(holes=18, weather="Cold and Windy"))
    assert values["holes"] == 18
    assert values["weather"].value == "Cold and Windy"
    assert values["date"].isoformat() == "2024-06-01"


def test_invalid_round_config_reports_every_field(config_factory):
    config = config_factory(
        player_name="",
        date="06/01/2024",
        course_name="   ",
        tournament="x" * 201,
        holes=10,
        course_difficulty="Easy",
        weather="Sunny",
    )
    errors = validate_round_config(config)
    assert [e.field for e in errors] == [
        "player_name",
        "date",
        "course_name",
        "tournament",
        "holes",
        "course_difficulty",
        "weather",
    ]


def test_impossible_date_is_rejected(config_factory):
    errors = validate_round_config(config_factory(date="2024-02-30"))
    assert [(e.field, e.reason) for e in errors] == [("date", "Date must be in yyyy-mm-dd format")]


def test_parse_round_config_raises_invalid_config(config_factory):
    with pytest.raises(InvalidConfig) as exc_info:
        parse_round_config(config_factory(holes=27))
    assert exc_info.value.fields() == ["holes"]


def test_setup_text_is_stripped_and_required(config_factory):
    values = parse_round_config(config_factory(player_name="  Alex Morgan  "))
    assert values["player_name"] == "Alex Morgan"

    errors = validate_round_config(config_factory(player_name="   ", course_name=None))
    assert [(e.field, e.reason) for e in errors] == [
        ("player_name", "Player name is required"),
        ("course_name", "Course name is required"),
    ]


def test_setup_length_limits(config_factory):
    assert validate_round_config(config_factory(player_name="x" * 100)) == []

    errors = validate_round_config(config_factory(player_name="x" * 101, tournament="y" * 201))
    assert [(e.field, e.reason) for e in errors] == [
        ("player_name", "Player name must be less than 100 characters"),
        ("tournament", "Tournament name must be less than 200 characters"),
    ]


def test_setup_choices_use_form_wording(config_factory):
    errors = validate_round_config(config_factory(holes=10, course_difficulty="Easy", weather="Sunny"))
    assert [e.reason for e in errors] == [
        "Please select 9 or 18 holes",
        "Please select course difficulty",
        "Please select weather condition",
    ]
