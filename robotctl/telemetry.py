"""Wheel encoder bookkeeping: positions, velocities and the last user command."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

_ULONG_MASK = 0xFFFFFFFF

DEFAULT_INTERVAL_MS = 500
SPEED_INTERVAL_MS = 100


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass
class RobotStats:
    """Latest measured and target state of both wheels."""

    target_left_vel: int = 0
    target_right_vel: int = 0
    left_vel: int = 0
    right_vel: int = 0
    left_pos: int = 0
    right_pos: int = 0
    last_calc_time: int = 0

    def describe(self, prefix: str) -> str:
        """Return a one-line tab-separated summary starting with ``prefix``."""
        return (
            f"{prefix}\tTargetVel: {self.target_left_vel}"
            f"\tTargetVel: {self.target_right_vel}"
            f"\tleftPos: {self.left_pos}\trightPos: {self.right_pos}"
            f"\tleftVel: {self.left_vel}\trightVel: {self.right_vel}"
            f"\tlastCalc: {self.last_calc_time}"
        )


@dataclass
class UserCommand:
    """The most recent command received from a client."""

    user_id: int = 0
    command: str = ""
    p1: int = 0
    p2: int = 0
    ts: int = 0


class EncoderTracker:
    """Turns raw encoder counts into per-second wheel velocities.

    Velocities are recomputed at most once per ``interval_ms`` milliseconds,
    in counts per second truncated toward zero.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], int]] = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._clock = clock if clock is not None else _monotonic_ms
        self.interval_ms = interval_ms
        self.stats = RobotStats(last_calc_time=self._clock())

    def update(self, command: UserCommand, left_count: int, right_count: int) -> RobotStats:
        """Record new counts if an interval has elapsed and return the stats."""
        now = self._clock()
        stats = self.stats
        dt = (now - stats.last_calc_time) & _ULONG_MASK
        if dt >= self.interval_ms:
            stats.target_left_vel = command.p1
            stats.target_right_vel = command.p2
            prev_left, prev_right = stats.left_pos, stats.right_pos
            stats.left_pos = int(left_count)
            stats.right_pos = int(right_count)
            delta_left = (stats.left_pos - prev_left) * 1000
            delta_right = (stats.right_pos - prev_right) * 1000
            stats.left_vel = int(delta_left / dt)
            stats.right_vel = int(delta_right / dt)
            stats.last_calc_time = now
        return stats


class SpeedTracker:
    """Tracks unsigned wheel speeds in counts per millisecond."""

    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock = clock if clock is not None else _monotonic_ms
        self.current_a = 0
        self.current_b = 0
        self.prev_a = 0
        self.prev_b = 0
        self.speed_a = 0.0
        self.speed_b = 0.0
        self.last_interval_time = 0

    def update(self, count_a: int, count_b: int) -> tuple[float, float]:
        """Take new counts; refresh speeds once 100 ms have passed. Return the speeds."""
        self.current_a = int(count_a)
        self.current_b = int(count_b)
        delta_a = abs(self.current_a - self.prev_a)
        delta_b = abs(self.current_b - self.prev_b)
        now = self._clock()
        dt = now - self.last_interval_time
        if dt >= SPEED_INTERVAL_MS:
            self.speed_a = delta_a / dt
            self.speed_b = delta_b / dt
            self.prev_a = self.current_a
            self.prev_b = self.current_b
            self.last_interval_time = now
        return self.speed_a, self.speed_b