# robotctl

Control logic for a small two-wheeled robot. None of it touches hardware, so
it runs and tests anywhere. Pin writes and PWM output go through a backend
object you supply. Time comes from a clock callable that returns
milliseconds. When no clock is given, a monotonic millisecond clock is used.

## Modules

### `robotctl.pid`

`PID` is a sample-timed PID controller. You set its `input` and `setpoint`
attributes. When `compute()` produces a new value, it writes it to `output`.

- `compute()` does nothing and returns `False` unless the controller is in
  automatic mode and at least one sample period has passed. The sample period
  is 100 ms by default.
- `set_mode(Mode.AUTOMATIC)` switches from manual without a bump: the
  integral term is seeded from the current `output`.
- `set_output_limits(minimum, maximum)` sets the output range. The default is
  0 to 255. The call is ignored unless `minimum < maximum`.
- `set_tunings(kp, ki, kd, proportional_on=None)` changes the gains. Negative
  gains are ignored here. The constructor, however, raises `ValueError` for
  negative gains.
- `set_controller_direction(Direction.REVERSE)` makes the controller act in
  reverse.
- `set_sample_time(ms)` changes the sample period and rescales the integral
  and derivative gains.
- The read-only properties `kp`, `ki`, `kd`, `mode`, `direction` and
  `sample_time` report the settings.
- The proportional term acts on the error (`ProportionalOn.ERROR`) or on the
  measurement (`ProportionalOn.MEASUREMENT`).

### `robotctl.pid_pair`

`PidPair` holds two `PID` controllers, `left` and `right`, that share one set
of gains.

- The default gains are 0.5, 0.2 and 0.2.
- Outputs are limited to -1000 to 1000.
- `compute()` returns both outputs truncated to integers.

### `robotctl.simple_pid`

`IncrementalPid` keeps the accumulated error and the last input between calls
to `update(desired, value)`.

- `desired` is truncated to an integer.
- The output is capped at 255 from above only.

### `robotctl.telemetry`

- `RobotStats` holds target velocities, measured velocities, positions and
  the time of the last calculation. `describe(prefix)` returns it as one
  tab-separated line.
- `UserCommand` holds the last client command: `user_id`, `command`, `p1`,
  `p2` and `ts`.
- `EncoderTracker.update(command, left_count, right_count)` turns encoder
  counts into velocities in counts per second. It recomputes at most once per
  `interval_ms`, which is 500 by default. It also copies the command's `p1`
  and `p2` into the target velocities.
- `SpeedTracker.update(count_a, count_b)` gives unsigned speeds in counts per
  millisecond. It refreshes them once 100 ms have passed.

### `robotctl.protocol`

- `parse_command("M100,-50", timestamp)` returns a `UserCommand` with
  command `"M"`, `p1=100` and `p2=-50`.
- `format_pair` and `format_ratio` build `X:left,right` status lines.
  `format_ratio` uses three decimals.
- `display_messages(stats)` returns the `R:`, `S:`, `E:` and `P:` lines for a
  `RobotStats`.
- `CommandSession(send, clock)` tracks the connected client's last command.
  - `connect(client_id)` sets the client that messages are addressed to.
  - `handle_text(text)` updates the last command. Texts of one character or
    less are ignored.
  - `update_display(stats)` sends the status lines through
    `send(client_id, message)`.
  - `check_expiry()` replaces a command older than 10 seconds with a stop
    command, `M` with both parameters 0.
- `DriveSession(send, clock)` handles `V<n>` (velocity) and `T<n>` (turn)
  commands.
  - A negative turn is left and a positive turn is right
    (`TurnDirection`).
  - After each command it sends speed, position, the command value and ratio
    lines, built from its `SpeedTracker`.

### `robotctl.movement`

- `MotorBackend` is the protocol a hardware layer implements:
  - `pin_mode`
  - `digital_write`
  - `pwm_setup`
  - `pwm_attach`
  - `pwm_write`
- `RecordingBackend` implements it by recording every call and the resulting
  pin and channel state.
- `MotorController` drives two motors through a backend.
  - `setup_pins()` configures the pins.
  - `standby(flag)` puts the driver in standby or releases it.
  - `set_direction(left_forward, right_forward)` sets the spin direction of
    each motor.
  - `move(left_velocity, right_velocity)` sets calibrated power. Outputs are
    only rewritten when the request changes.
  - `drive(velocity)` writes the raw duty `abs(velocity)` to both motors.
- `TurningDrive.drive(velocity, turn_direction, turn_amount)` slows the
  inner wheel by `turn_amount` percent, capped at 100. It returns the two
  duties it wrote.
- `lookup_power_input(velocity, xs, ys, inclusive=True)`, `motor_a_power` and
  `motor_b_power` map a velocity to a PWM duty by linear interpolation in
  calibration tables.

### `robotctl.utilmath` and `robotctl.utilstring`

- `interpolate(x0, y0, x1, y1, x)` does linear interpolation.
- `index_of(text, char)` finds a character.
- `tokenize(text, separator)` returns two parts: the text before the first
  separator and the text after the last one.
- `atoi(text)` is a lenient integer parse that reads leading signs and
  digits.

## Examples

```python
from robotctl.pid import PID, Direction, Mode, ProportionalOn

now = 0
pid = PID(0.5, 0.2, 0.2, Direction.DIRECT, ProportionalOn.ERROR, lambda: now)
pid.set_output_limits(-1000.0, 1000.0)
pid.set_mode(Mode.AUTOMATIC)
pid.setpoint = 100.0
pid.input = 20.0
now = 100
if pid.compute():
    print(pid.output)
```

```python
from robotctl.movement import MotorController, RecordingBackend

backend = RecordingBackend()
motors = MotorController(backend)
motors.setup_pins()
motors.move(200, 200)
print(backend.duties)
```

```python
from robotctl.protocol import CommandSession

sent = []
session = CommandSession(lambda client, text: sent.append((client, text)), clock=lambda: 0)
session.connect(3)
session.handle_text("M100,-50")
print(session.command)
```

## What it does not do

The package has no network layer, no hardware access and no command-line
program:

- It does not open a WebSocket server or join a Wi-Fi network. You deliver
  incoming text to `CommandSession.handle_text` or `DriveSession.handle_text`
  yourself, and you pass a `send` callable to carry messages back.
- It does not read encoders. You pass counts to `EncoderTracker` or
  `SpeedTracker`.
- It does not drive pins. A `MotorBackend` you provide does that.

## Tests

Install with the `test` extra and run `pytest`.