import pytest

from core.domain import DistanceUnit, Lie, ShotPayload
from core.services import ShotLedger
from core.services.shot_ledger import normalize_holed


def _payload(start_lie=Lie.TEE, start=150, end_lie=Lie.GREEN, end=10):
    return ShotPayload(
        starting_lie=start_lie,
        starting_distance=start,
        ending_lie=end_lie,
        ending_distance=end,
    )


def test_append_numbers_shots_per_hole():
    ledger = ShotLedger()
    first = ledger.append(1, _payload(), round_id="r1")
    second = ledger.append(1, _payload(Lie.GREEN, 10, Lie.GREEN, 2), round_id="r1")
    other_hole = ledger.append(2, _payload(), round_id="r1")

    assert (first.shot_number, second.shot_number, other_hole.shot_number) == (1, 2, 1)
    assert ledger.hole_shot_count(1) == 2
    assert ledger.total_shot_count() == 3
    assert first.shot_id != second.shot_id


def test_append_fills_units_from_lies():
    shot = ShotLedger().append(1, _payload(), round_id="r1")
    assert shot.starting_unit == DistanceUnit.YARDS
    assert shot.ending_unit == DistanceUnit.FEET


def test_zero_ending_distance_forces_holed_green_feet():
    payload = ShotPayload(
        starting_lie=Lie.FAIRWAY,
        starting_distance=90,
        ending_lie=Lie.ROUGH,
        ending_distance=0,
        ending_unit=DistanceUnit.YARDS,
    )
    shot = ShotLedger().append(3, payload, round_id="r1")

    assert shot.holed is True
    assert shot.ending_lie == Lie.GREEN
    assert shot.ending_unit == DistanceUnit.FEET


def test_normalize_holed_leaves_other_payloads_unchanged():
    payload = _payload(end=12)
    assert normalize_holed(payload) == payload
    assert normalize_holed(payload) is not payload


def test_has_holed_shot():
    ledger = ShotLedger()
    ledger.append(1, _payload(), round_id="r1")
    assert not ledger.has_holed_shot(1)
    ledger.append(1, _payload(Lie.GREEN, 10, Lie.GREEN, 0), round_id="r1")
    assert ledger.has_holed_shot(1)
    assert not ledger.has_holed_shot(2)


def test_update_patches_in_place():
    ledger = ShotLedger()
    shot = ledger.append(1, _payload(), round_id="r1")

    updated = ledger.update(shot.shot_id, {"penalty": True, "ending_distance": 25})

    assert updated is shot
    assert ledger.shots_for_hole(1)[0].penalty is True
    assert ledger.shots_for_hole(1)[0].ending_distance == 25


def test_update_unknown_shot_is_a_no_op():
    ledger = ShotLedger()
    ledger.append(1, _payload(), round_id="r1")
    assert ledger.update("missing", {"penalty": True}) is None
    assert ledger.shots_for_hole(1)[0].penalty is False


def test_update_rejects_identifying_fields():
    ledger = ShotLedger()
    shot = ledger.append(1, _payload(), round_id="r1")
    with pytest.raises(ValueError):
        ledger.update(shot.shot_id, {"shot_number": 4})


def test_delete_renumbers_remaining_shots():
    ledger = ShotLedger()
    shots = [ledger.append(1, _payload(), round_id="r1") for _ in range(4)]

    removed = ledger.delete(shots[1].shot_id)

    assert removed is shots[1]
    remaining = ledger.shots_for_hole(1)
    assert [s.shot_number for s in remaining] == [1, 2, 3]
    assert [s.shot_id for s in remaining] == [shots[0].shot_id, shots[2].shot_id, shots[3].shot_id]


def test_delete_first_and_last_keep_numbers_dense():
    ledger = ShotLedger()
    shots = [ledger.append(5, _payload(), round_id="r1") for _ in range(3)]

    ledger.delete(shots[0].shot_id)
    ledger.delete(shots[2].shot_id)

    assert [s.shot_number for s in ledger.shots_for_hole(5)] == [1]


def test_delete_unknown_shot_is_a_no_op():
    ledger = ShotLedger()
    ledger.append(1, _payload(), round_id="r1")
    assert ledger.delete("missing") is None
    assert ledger.total_shot_count() == 1


def test_all_shots_orders_by_hole_then_shot():
    ledger = ShotLedger()
    ledger.append(2, _payload(), round_id="r1")
    ledger.append(1, _payload(), round_id="r1")
    ledger.append(1, _payload(Lie.GREEN, 10, Lie.GREEN, 0), round_id="r1")

    order = [(s.hole_number, s.shot_number) for s in ledger.all_shots()]
    assert order == [(1, 1), (1, 2), (2, 1)]


def test_shots_for_hole_returns_a_copy():
    ledger = ShotLedger()
    ledger.append(1, _payload(), round_id="r1")
    ledger.shots_for_hole(1).clear()
    assert ledger.hole_shot_count(1) == 1
