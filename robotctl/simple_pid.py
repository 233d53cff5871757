"""Minimal PID step with an accumulated error and an upper output cap."""

from __future__ import annotations

OUTPUT_CAP = 255.0


class IncrementalPid:
    """PID whose state is carried between calls to :meth:`update`.

    Only the upper bound of the output is capped; negative outputs pass through.
    """

    def __init__(self, kp: float = 0.0, ki: float = 0.0, kd: float = 0.0) -> None:
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.last_error = 0.0
        self.last_input = 0.0

    def update(self, desired: float, value: float) -> float:
        """Return the controller output for ``value`` against the integer target ``desired``."""
        error = int(desired) - value
        d_input = value - self.last_input
        i_error = self.last_error + error
        output = self.kp * error + self.ki * i_error + self.kd * d_input
        if output > OUTPUT_CAP:
            output = OUTPUT_CAP
        self.last_input = value
        self.last_error = i_error
        return output