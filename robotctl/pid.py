"""Sampled PID controller with bumpless manual/automatic transfer."""

from __future__ import annotations

import time
from enum import IntEnum
from typing import Callable, Optional

_ULONG_MASK = 0xFFFFFFFF


class Mode(IntEnum):
    """Controller operating mode."""

    MANUAL = 0
    AUTOMATIC = 1


class Direction(IntEnum):
    """Action of the controlled process."""

    DIRECT = 0
    REVERSE = 1


class ProportionalOn(IntEnum):
    """Whether the proportional term acts on measurement or on error."""

    MEASUREMENT = 0
    ERROR = 1


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def _clamp(value: float, low: float, high: float) -> float:
    if value > high:
        return high
    if value < low:
        return low
    return value


class PID:
    """PID controller reading ``input`` and ``setpoint`` and writing ``output``.

    The clock is a callable returning the current time in milliseconds.
    """

    def __init__(
        self,
        kp: float,
        ki: float,
        kd: float,
        direction: int = Direction.DIRECT,
        proportional_on: int = ProportionalOn.ERROR,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        if kp < 0 or ki < 0 or kd < 0:
            raise ValueError("tuning parameters must not be negative")
        self.input = 0.0
        self.output = 0.0
        self.setpoint = 0.0
        self._clock = clock if clock is not None else _monotonic_ms
        self._in_auto = False
        self._output_sum = 0.0
        self._last_input = 0.0
        self._out_min = 0.0
        self._out_max = 255.0
        self.set_output_limits(0.0, 255.0)
        self._sample_time = 100
        self._direction = Direction(direction)
        self._kp = self._ki = self._kd = 0.0
        self._disp_kp = self._disp_ki = self._disp_kd = 0.0
        self._p_on = ProportionalOn(proportional_on)
        self._p_on_e = self._p_on == ProportionalOn.ERROR
        self.set_controller_direction(direction)
        self.set_tunings(kp, ki, kd, proportional_on)
        self._last_time = self._clock() - self._sample_time

    @property
    def kp(self) -> float:
        """Proportional gain as entered by the user."""
        return self._disp_kp

    @property
    def ki(self) -> float:
        """Integral gain as entered by the user."""
        return self._disp_ki

    @property
    def kd(self) -> float:
        """Derivative gain as entered by the user."""
        return self._disp_kd

    @property
    def mode(self) -> Mode:
        return Mode.AUTOMATIC if self._in_auto else Mode.MANUAL

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def sample_time(self) -> int:
        """Sample period in milliseconds."""
        return self._sample_time

    def compute(self) -> bool:
        """Compute a new output if in automatic mode and a sample period has passed."""
        if not self._in_auto:
            return False
        now = self._clock()
        time_change = (now - self._last_time) & _ULONG_MASK
        if time_change < self._sample_time:
            return False

        value = self.input
        error = self.setpoint - value
        d_input = value - self._last_input
        self._output_sum += self._ki * error
        if not self._p_on_e:
            self._output_sum -= self._kp * d_input
        self._output_sum = _clamp(self._output_sum, self._out_min, self._out_max)

        output = self._kp * error if self._p_on_e else 0.0
        output += self._output_sum - self._kd * d_input
        self.output = _clamp(output, self._out_min, self._out_max)

        self._last_input = value
        self._last_time = now
        return True

    def set_mode(self, mode: int) -> None:
        """Switch between manual and automatic; entering automatic reinitialises."""
        new_auto = mode == Mode.AUTOMATIC
        if new_auto and not self._in_auto:
            self._initialize()
        self._in_auto = new_auto

    def set_output_limits(self, minimum: float, maximum: float) -> None:
        """Clamp the output range; ignored unless minimum < maximum."""
        if minimum >= maximum:
            return
        self._out_min = minimum
        self._out_max = maximum
        if self._in_auto:
            self.output = _clamp(self.output, minimum, maximum)
            self._output_sum = _clamp(self._output_sum, minimum, maximum)

    def set_tunings(
        self,
        kp: float,
        ki: float,
        kd: float,
        proportional_on: Optional[int] = None,
    ) -> None:
        """Change the gains; negative gains are ignored."""
        if kp < 0 or ki < 0 or kd < 0:
            return
        if proportional_on is None:
            proportional_on = self._p_on
        self._p_on = ProportionalOn(proportional_on)
        self._p_on_e = self._p_on == ProportionalOn.ERROR

        self._disp_kp, self._disp_ki, self._disp_kd = kp, ki, kd

        seconds = self._sample_time / 1000
        self._kp = kp
        self._ki = ki * seconds
        self._kd = kd / seconds
        if self._direction == Direction.REVERSE:
            self._kp, self._ki, self._kd = -self._kp, -self._ki, -self._kd

    def set_controller_direction(self, direction: int) -> None:
        """Set whether positive output raises (DIRECT) or lowers (REVERSE) the input."""
        direction = Direction(direction)
        if self._in_auto and direction != self._direction:
            self._kp, self._ki, self._kd = -self._kp, -self._ki, -self._kd
        self._direction = direction

    def set_sample_time(self, sample_time_ms: int) -> None:
        """Set the sample period in milliseconds; non-positive values are ignored."""
        if sample_time_ms > 0:
            ratio = sample_time_ms / self._sample_time
            self._ki *= ratio
            self._kd /= ratio
            self._sample_time = int(sample_time_ms)

    def _initialize(self) -> None:
        self._output_sum = _clamp(self.output, self._out_min, self._out_max)
        self._last_input = self.input