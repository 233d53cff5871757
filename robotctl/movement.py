"""Motor driver control: pin setup, direction, standby and PWM speed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from robotctl.protocol import TURN_AMOUNT_MAX, TurnDirection
from robotctl.utilmath import interpolate

_log = logging.getLogger(__name__)

AIN1_PIN = 14
AIN2_PIN = 12
PWMA_PIN = 27
PWMA_CHANNEL = 0

BIN1_PIN = 33
BIN2_PIN = 25
PWMB_PIN = 32
PWMB_CHANNEL = 1

STBY_PIN = 26

PWM_FREQ = 5000
PWM_RESOLUTION = 10
MAX_DUTY_CYCLE = 2**PWM_RESOLUTION - 1

OUTPUT = "output"

CALIBRATION_X = (-1000, -500, -300, -200, -100, -1, 0, 1, 100, 200, 300, 500, 1000)
CALIBRATION_YA = (-232, -130, -85, -64, -41, -30, 30, 0, 34, 55, 75, 118, 223)
CALIBRATION_YB = (-227, -118, -76, -55, -34, -16, 0, 25, 33, 55, 75, 119, 225)


class MotorBackend(Protocol):
    """The pin and PWM operations the motor controllers need."""

    def pin_mode(self, pin: int, mode: str) -> None: ...

    def digital_write(self, pin: int, level: int) -> None: ...

    def pwm_setup(self, channel: int, frequency: int, resolution: int) -> None: ...

    def pwm_attach(self, pin: int, channel: int) -> None: ...

    def pwm_write(self, channel: int, duty: int) -> None: ...


@dataclass
class RecordingBackend:
    """Backend that keeps every call and the resulting pin and channel state."""

    calls: list[tuple] = field(default_factory=list)
    modes: dict[int, str] = field(default_factory=dict)
    levels: dict[int, int] = field(default_factory=dict)
    channels: dict[int, tuple[int, int]] = field(default_factory=dict)
    attached: dict[int, int] = field(default_factory=dict)
    duties: dict[int, int] = field(default_factory=dict)

    def pin_mode(self, pin: int, mode: str) -> None:
        self.calls.append(("pin_mode", pin, mode))
        self.modes[pin] = mode

    def digital_write(self, pin: int, level: int) -> None:
        self.calls.append(("digital_write", pin, level))
        self.levels[pin] = level

    def pwm_setup(self, channel: int, frequency: int, resolution: int) -> None:
        self.calls.append(("pwm_setup", channel, frequency, resolution))
        self.channels[channel] = (frequency, resolution)

    def pwm_attach(self, pin: int, channel: int) -> None:
        self.calls.append(("pwm_attach", pin, channel))
        self.attached[pin] = channel

    def pwm_write(self, channel: int, duty: int) -> None:
        self.calls.append(("pwm_write", channel, duty))
        self.duties[channel] = duty


def lookup_power_input(
    velocity: int,
    xs: Sequence[int],
    ys: Sequence[int],
    inclusive: bool = True,
) -> int:
    """Map a velocity to a PWM duty using a calibration table.

    Beyond the ends of the table the end value is returned as is; inside it the
    absolute value of the linear interpolation. With ``inclusive`` false the
    end values apply only strictly beyond the ends.
    """
    if len(xs) != len(ys):
        raise ValueError("calibration tables must have the same length")
    if len(xs) < 2:
        raise ValueError("calibration tables need at least two points")

    if inclusive:
        if velocity >= xs[-1]:
            return ys[-1]
        if velocity <= xs[0]:
            return ys[0]
    else:
        if velocity > xs[-1]:
            return ys[-1]
        if velocity < xs[0]:
            return ys[0]

    segments = zip(xs[:-1], ys[:-1], xs[1:], ys[1:])
    for x0, y0, x1, y1 in reversed(list(segments)):
        if x0 < velocity:
            return abs(interpolate(x0, y0, x1, y1, velocity))
    return 0


def motor_a_power(velocity: int) -> int:
    """PWM duty for motor A at the requested velocity."""
    return lookup_power_input(velocity, CALIBRATION_X, CALIBRATION_YA)


def motor_b_power(velocity: int) -> int:
    """PWM duty for motor B at the requested velocity."""
    return lookup_power_input(velocity, CALIBRATION_X, CALIBRATION_YB)


def _setup_pins(backend: MotorBackend) -> None:
    for pin in (AIN1_PIN, AIN2_PIN, BIN1_PIN, BIN2_PIN, STBY_PIN):
        backend.pin_mode(pin, OUTPUT)
    for pin, channel in ((PWMA_PIN, PWMA_CHANNEL), (PWMB_PIN, PWMB_CHANNEL)):
        backend.pwm_setup(channel, PWM_FREQ, PWM_RESOLUTION)
        backend.pwm_attach(pin, channel)


def _standby(backend: MotorBackend, should_standby: bool) -> None:
    # The standby line is active low.
    backend.digital_write(STBY_PIN, 0 if should_standby else 1)


class MotorController:
    """Drives two motors, using calibrated power for velocity moves."""

    def __init__(self, backend: MotorBackend) -> None:
        self.backend = backend
        self.last_left_velocity = 0
        self.last_right_velocity = 0

    def setup_pins(self) -> None:
        """Configure direction and standby pins as outputs and attach PWM channels."""
        _setup_pins(self.backend)

    def standby(self, should_standby: bool) -> None:
        """Put the driver in standby, or release it so the motors can turn."""
        _standby(self.backend, should_standby)

    def set_direction(self, left_forward: bool, right_forward: bool) -> None:
        """Set the spin direction of each motor."""
        if left_forward:
            self.backend.digital_write(AIN1_PIN, 0)
            self.backend.digital_write(AIN2_PIN, 1)
        else:
            self.backend.digital_write(AIN1_PIN, 1)
            self.backend.digital_write(AIN2_PIN, 0)
        if right_forward:
            self.backend.digital_write(BIN1_PIN, 0)
            self.backend.digital_write(BIN2_PIN, 1)
        else:
            self.backend.digital_write(BIN1_PIN, 1)
            self.backend.digital_write(BIN2_PIN, 0)

    def move(self, left_velocity: int, right_velocity: int) -> None:
        """Run each wheel at a velocity; outputs change only when the request does."""
        self.standby(left_velocity == 0 and right_velocity == 0)
        if (left_velocity, right_velocity) == (
            self.last_left_velocity,
            self.last_right_velocity,
        ):
            return
        self.set_direction(left_velocity > 0, right_velocity > 0)
        left_duty = motor_a_power(left_velocity)
        self.backend.pwm_write(PWMA_CHANNEL, left_duty)
        _log.debug("Move: leftVel: %d\tAdj: %d", left_velocity, left_duty)
        self.backend.pwm_write(PWMB_CHANNEL, motor_b_power(right_velocity))
        self.last_left_velocity = left_velocity
        self.last_right_velocity = right_velocity

    def drive(self, velocity: int) -> None:
        """Run both motors with the raw duty ``abs(velocity)`` in the sign's direction."""
        self.standby(velocity == 0)
        self.set_direction(velocity > 0, velocity > 0)
        speed = abs(velocity)
        self.backend.pwm_write(PWMA_CHANNEL, speed)
        self.backend.pwm_write(PWMB_CHANNEL, speed)


class TurningDrive:
    """Drives forward or backward, slowing one side to turn."""

    def __init__(self, backend: MotorBackend) -> None:
        self.backend = backend
        self.target_speed_a = 0
        self.target_speed_b = 0

    def setup_pins(self) -> None:
        """Configure direction and standby pins as outputs and attach PWM channels."""
        _setup_pins(self.backend)

    def standby(self, should_standby: bool) -> None:
        """Put the driver in standby, or release it so the motors can turn."""
        _standby(self.backend, should_standby)

    def _set_direction(self, forward: bool) -> None:
        high_first = 1 if forward else 0
        for in1, in2 in ((AIN1_PIN, AIN2_PIN), (BIN1_PIN, BIN2_PIN)):
            self.backend.digital_write(in1, high_first)
            self.backend.digital_write(in2, 1 - high_first)

    def drive(
        self,
        velocity: int,
        turn_direction: int = TurnDirection.NONE,
        turn_amount: int = 0,
    ) -> tuple[int, int]:
        """Drive at ``velocity``; the inner side slows by ``turn_amount`` percent.

        Returns the duties written to motor A and motor B.
        """
        self.standby(velocity == 0)
        clamped = min(TURN_AMOUNT_MAX, abs(turn_amount))
        speed = abs(velocity)
        slow = speed * (TURN_AMOUNT_MAX - clamped) // TURN_AMOUNT_MAX
        fast = speed

        if turn_direction == TurnDirection.LEFT:
            self.target_speed_a, self.target_speed_b = slow, fast
        elif turn_direction == TurnDirection.RIGHT:
            self.target_speed_a, self.target_speed_b = fast, slow
        else:
            self.target_speed_a, self.target_speed_b = speed, speed

        self._set_direction(velocity >= 0)
        self.backend.pwm_write(PWMA_CHANNEL, self.target_speed_a)
        self.backend.pwm_write(PWMB_CHANNEL, self.target_speed_b)
        return self.target_speed_a, self.target_speed_b