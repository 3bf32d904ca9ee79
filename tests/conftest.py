import pytest

from core.domain import Lie, RoundConfig, ShotPayload
from core.services import RoundSession


def make_config(**overrides) -> RoundConfig:
    values = dict(
        player_name="Alex Morgan",
        date="2024-06-01",
        course_name="Pine Valley",
        tournament="Club Championship",
        holes=9,
        course_difficulty="Standard",
        weather="Normal",
    )
    values.update(overrides)
    return RoundConfig(**values)


def play_two_putt_hole(session: RoundSession, tee_distance: float = 150) -> None:
    """Tee shot onto the green at 10 ft, then hole the putt."""
    session.commit_shot(ShotPayload(
        starting_lie=Lie.TEE,
        starting_distance=tee_distance,
        ending_lie=Lie.GREEN,
        ending_distance=10,
    ))
    session.commit_shot(ShotPayload(starting_distance=10, ending_distance=0))


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def session() -> RoundSession:
    """A started 9-hole round with no shots."""
    s = RoundSession()
    s.start_round(make_config())
    return s


@pytest.fixture
def session_18() -> RoundSession:
    s = RoundSession()
    s.start_round(make_config(holes=18))
    return s


@pytest.fixture
def play_hole():
    return play_two_putt_hole
