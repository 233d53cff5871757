"""A pair of PID controllers driving the left and right wheels."""

from __future__ import annotations

from typing import Callable, Optional

from robotctl.pid import PID, Direction, Mode

DEFAULT_KP = 0.5
DEFAULT_KI = 0.2
DEFAULT_KD = 0.2
OUTPUT_LIMIT = 1000.0


class PidPair:
    """Two identically tuned controllers for the left and right side.

    Outputs are limited to -1000..1000 and reported as truncated integers.
    """

    def __init__(
        self,
        kp: float = DEFAULT_KP,
        ki: float = DEFAULT_KI,
        kd: float = DEFAULT_KD,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.left = PID(kp, ki, kd, Direction.DIRECT, clock=clock)
        self.right = PID(kp, ki, kd, Direction.DIRECT, clock=clock)
        for controller in (self.left, self.right):
            controller.set_output_limits(-OUTPUT_LIMIT, OUTPUT_LIMIT)

    def set_mode(self, automatic: bool) -> None:
        """Put both controllers in automatic or manual mode."""
        mode = Mode.AUTOMATIC if automatic else Mode.MANUAL
        self.left.set_mode(mode)
        self.right.set_mode(mode)

    def set_setpoints(self, left: int, right: int) -> None:
        """Set the target value of each side."""
        self.left.setpoint = float(left)
        self.right.setpoint = float(right)

    def set_inputs(self, left: int, right: int) -> None:
        """Feed the latest measurement of each side."""
        self.left.input = float(left)
        self.right.input = float(right)

    def compute(self) -> tuple[int, int]:
        """Run both controllers and return their outputs truncated to integers."""
        self.left.compute()
        self.right.compute()
        return int(self.left.output), int(self.right.output)