import pytest

from robotctl.pid import Mode
from robotctl.pid_pair import PidPair


class FakeClock:
    def __init__(self, now: int = 10_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_manual_mode_keeps_outputs(clock):
    pair = PidPair(clock=clock)
    pair.set_setpoints(100, 100)
    pair.set_inputs(0, 0)
    assert pair.compute() == (0, 0)
    assert pair.left.mode == Mode.MANUAL


def test_automatic_mode_first_step(clock):
    pair = PidPair(clock=clock)
    pair.set_mode(True)
    pair.set_setpoints(100, 100)
    pair.set_inputs(0, 0)
    assert pair.compute() == (52, 52)


def test_sides_are_independent_and_symmetric(clock):
    pair = PidPair(clock=clock)
    pair.set_mode(True)
    pair.set_setpoints(100, -100)
    pair.set_inputs(0, 0)
    left, right = pair.compute()
    assert left == -right
    assert left > 0


def test_outputs_clamped_to_limits(clock):
    pair = PidPair(clock=clock)
    pair.set_mode(True)
    pair.set_setpoints(1_000_000, -1_000_000)
    pair.set_inputs(0, 0)
    assert pair.compute() == (1000, -1000)


def test_no_new_output_before_sample_time(clock):
    pair = PidPair(clock=clock)
    pair.set_mode(True)
    pair.set_setpoints(100, 100)
    pair.set_inputs(0, 0)
    first = pair.compute()
    pair.set_setpoints(500, 500)
    assert pair.compute() == first
    clock.now += 100
    assert pair.compute() != first


def test_switch_back_to_manual(clock):
    pair = PidPair(clock=clock)
    pair.set_mode(True)
    pair.set_mode(False)
    assert pair.right.mode == Mode.MANUAL
    assert pair.left.mode == Mode.MANUAL


def test_custom_gains_are_kept(clock):
    pair = PidPair(kp=1.0, ki=0.0, kd=0.0, clock=clock)
    assert (pair.left.kp, pair.left.ki, pair.left.kd) == (1.0, 0.0, 0.0)
    pair.set_mode(True)
    pair.set_setpoints(300, 40)
    pair.set_inputs(0, 0)
    assert pair.compute() == (300, 40)