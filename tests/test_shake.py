import pytest

from torus_chase.config import ShakeConfig
from torus_chase.shake import ScreenShake


@pytest.fixture
def shake():
    return ScreenShake(ShakeConfig(decay_rate=0.5, cutoff=0.05))


def test_no_trauma_no_offset(shake):
    assert shake.update(0.1) == (0.0, 0.0)
    assert shake.elapsed == 0.0


def test_trauma_accumulates(shake):
    shake.add_trauma(2.0)
    shake.add_trauma(3.0)
    shake.add_trauma(-1.0)
    assert shake.trauma == 5.0


def test_trauma_decays_per_tick_regardless_of_dt(shake):
    shake.add_trauma(8.0)
    shake.update(0.001)
    assert shake.trauma == pytest.approx(4.0)
    shake.update(10.0)
    assert shake.trauma == pytest.approx(2.0)


def test_offset_amplitude_tracks_trauma(shake):
    shake.add_trauma(8.0)
    for _ in range(5):
        x, y = shake.update(1 / 60)
        assert abs(x) <= shake.trauma
        assert abs(y) <= shake.trauma
    assert shake.elapsed == pytest.approx(5 / 60)


def test_elapsed_resets_when_trauma_dies_out(shake):
    shake.add_trauma(1.0)
    for _ in range(20):
        shake.update(1 / 60)

    assert shake.trauma == 0.0
    assert shake.elapsed == 0.0
    assert shake.update(1 / 60) == (0.0, 0.0)
