"""Text command protocol between a controlling client and the robot."""

from __future__ import annotations

import logging
import math
import re
import struct
import time
from enum import IntEnum
from typing import Callable, Optional

from robotctl.telemetry import RobotStats, SpeedTracker, UserCommand
from robotctl.utilstring import atoi, tokenize

_log = logging.getLogger(__name__)

_ULONG_MASK = 0xFFFFFFFF
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

TURN_AMOUNT_MAX = 100
COMMAND_EXPIRY_MS = 1000
CONNECTION_TIMEOUT_MS = 10000
STOP_COMMAND = "M"

Send = Callable[[int, str], None]


class TurnDirection(IntEnum):
    """Which way the robot is asked to turn."""

    NONE = 0
    LEFT = 1
    RIGHT = 2


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def _divide(numerator: float, denominator: float) -> float:
    """Floating division giving inf or nan on a zero denominator."""
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _float32(value: float) -> float:
    if math.isinf(value) or math.isnan(value):
        return value
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _to_int(text: str) -> int:
    """Parse a leading integer after optional whitespace; 0 if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _check_prefix(prefix: str) -> None:
    if len(prefix) != 1:
        raise ValueError("prefix must be a single character")


def parse_command(text: str, timestamp: int) -> UserCommand:
    """Parse ``<letter><p1>,<p2>`` into a command stamped with ``timestamp``."""
    if not text:
        raise ValueError("command text is empty")
    first, second = tokenize(text[1:], ",")
    return UserCommand(command=text[0], p1=atoi(first), p2=atoi(second), ts=timestamp)


def format_pair(prefix: str, left: int, right: int) -> str:
    """Format two integers as ``<prefix>:<left>,<right>``."""
    _check_prefix(prefix)
    return f"{prefix}:{int(left)},{int(right)}"


def format_ratio(prefix: str, left: float, right: float) -> str:
    """Format two numbers with three decimals as ``<prefix>:<left>,<right>``."""
    _check_prefix(prefix)
    return f"{prefix}:{left:.3f},{right:.3f}"


def display_messages(stats: RobotStats) -> list[str]:
    """Messages reporting ratios, targets, velocities and positions, in that order."""
    ratio_left = _float32(_divide(float(stats.target_left_vel), float(stats.left_vel)))
    ratio_right = _float32(_divide(float(stats.target_right_vel), float(stats.right_vel)))
    return [
        format_ratio("R", ratio_left, ratio_right),
        format_pair("S", stats.target_left_vel, stats.target_right_vel),
        format_pair("E", stats.left_vel, stats.right_vel),
        format_pair("P", stats.left_pos, stats.right_pos),
    ]


class CommandSession:
    """Keeps the last command of the connected client and reports stats to it.

    ``send`` is called with the client id and a text message.
    """

    def __init__(self, send: Send, clock: Optional[Callable[[], int]] = None) -> None:
        self._send = send
        self._clock = clock if clock is not None else _monotonic_ms
        self.command = UserCommand()

    def connect(self, client_id: int) -> None:
        """Remember the client that messages are addressed to."""
        self.command.user_id = client_id

    def handle_text(self, text: str) -> bool:
        """Update the last command from ``text``; texts of one character or less are ignored."""
        _log.debug("command = <%s>", text)
        if len(text) <= 1:
            return False
        parsed = parse_command(text, self._clock())
        self.command.command = parsed.command
        self.command.p1 = parsed.p1
        self.command.p2 = parsed.p2
        self.command.ts = parsed.ts
        return True

    def send_message(self, message: str) -> None:
        """Send a text message to the current client."""
        self._send(self.command.user_id, message)

    def update_display(self, stats: RobotStats) -> None:
        """Send the display messages for ``stats`` to the current client."""
        for message in display_messages(stats):
            self.send_message(message)

    def check_expiry(self) -> bool:
        """Replace a stale command with a stop command; return True if it did."""
        now = self._clock()
        if (now - self.command.ts) & _ULONG_MASK > CONNECTION_TIMEOUT_MS:
            self.command.command = STOP_COMMAND
            self.command.p1 = 0
            self.command.p2 = 0
            self.command.ts = now
            _log.warning("Connection Lost")
            return True
        return False


class DriveSession:
    """Velocity and turn commands (``V<n>``, ``T<n>``) with speed feedback."""

    def __init__(self, send: Send, clock: Optional[Callable[[], int]] = None) -> None:
        self._send = send
        self._clock = clock if clock is not None else _monotonic_ms
        self.client_id = 0
        self.velocity = 0
        self.turn_direction = TurnDirection.NONE
        self.turn_amount = 0
        self.time_of_last_command = 0
        self.speeds = SpeedTracker(self._clock)

    def handle_text(self, text: str) -> bool:
        """Apply a command and send feedback; return False if the text is too short."""
        self.time_of_last_command = self._clock()
        if len(text) < 2:
            _log.warning("Command too short.")
            return False
        command, data = text[0], text[1:]
        if command == "V":
            self.velocity = _to_int(data)
        elif command == "T":
            turn = _to_int(data)
            if turn < 0:
                self.turn_direction = TurnDirection.LEFT
            elif turn > 0:
                self.turn_direction = TurnDirection.RIGHT
            else:
                self.turn_direction = TurnDirection.NONE
            self.turn_amount = abs(turn)
        for message in self.display_messages(data, self.speeds):
            self._send(self.client_id, message)
        return True

    def display_messages(self, speed_text: str, stats: SpeedTracker) -> list[str]:
        """Messages reporting speeds, positions, the command value and speed ratios."""
        requested = _to_int(speed_text)
        ratio_a = _divide(float(requested), stats.speed_a)
        ratio_b = _divide(float(requested), stats.speed_b)
        _log.debug("Ratio a %s. Ratio b %s.", ratio_a, ratio_b)
        return [
            f"E:{stats.speed_a:.2f},{stats.speed_b:.2f}",
            f"P:{stats.current_a},{stats.current_b}",
            speed_text,
            f"R:{ratio_a:.2f},{ratio_b:.2f}",
        ]