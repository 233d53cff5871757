import pytest

from robotctl.movement import (
    AIN1_PIN,
    AIN2_PIN,
    BIN1_PIN,
    BIN2_PIN,
    CALIBRATION_X,
    CALIBRATION_YA,
    CALIBRATION_YB,
    MAX_DUTY_CYCLE,
    OUTPUT,
    PWM_FREQ,
    PWM_RESOLUTION,
    PWMA_CHANNEL,
    PWMA_PIN,
    PWMB_CHANNEL,
    PWMB_PIN,
    STBY_PIN,
    MotorController,
    RecordingBackend,
    TurningDrive,
    lookup_power_input,
    motor_a_power,
    motor_b_power,
)
from robotctl.protocol import TurnDirection


@pytest.fixture
def backend():
    return RecordingBackend()


def test_drive_at_max_duty_cycle(backend):
    MotorController(backend).drive(MAX_DUTY_CYCLE)
    assert backend.duties == {PWMA_CHANNEL: 1023, PWMB_CHANNEL: 1023}
    assert backend.levels[STBY_PIN] == 1


@pytest.mark.parametrize("velocity", [1000, 5000])
def test_power_above_table_is_last_entry(velocity):
    assert motor_a_power(velocity) == 223
    assert motor_b_power(velocity) == 225


def test_power_below_table_is_first_entry_unsigned():
    assert motor_a_power(-1000) == -232
    assert motor_b_power(-3000) == -227


def test_power_at_interior_table_points():
    assert motor_a_power(500) == 118
    assert motor_b_power(500) == 119
    assert motor_a_power(0) == 30


@pytest.mark.parametrize("velocity", range(-999, 1000, 37))
def test_interior_power_is_non_negative_and_bounded(velocity):
    for duty, table in ((motor_a_power(velocity), CALIBRATION_YA),
                        (motor_b_power(velocity), CALIBRATION_YB)):
        assert 0 <= duty <= max(abs(v) for v in table)


def test_exclusive_lookup_edges():
    assert lookup_power_input(1000, CALIBRATION_X, CALIBRATION_YA, inclusive=False) == 223
    assert lookup_power_input(-1000, CALIBRATION_X, CALIBRATION_YA, inclusive=False) == 0
    assert lookup_power_input(1001, CALIBRATION_X, CALIBRATION_YA, inclusive=False) == 223


def test_lookup_rejects_mismatched_tables():
    with pytest.raises(ValueError):
        lookup_power_input(0, [0, 1, 2], [0, 1])


def test_lookup_rejects_short_tables():
    with pytest.raises(ValueError):
        lookup_power_input(0, [0], [0])


def test_setup_pins(backend):
    MotorController(backend).setup_pins()
    for pin in (AIN1_PIN, AIN2_PIN, BIN1_PIN, BIN2_PIN, STBY_PIN):
        assert backend.modes[pin] == OUTPUT
    assert backend.channels == {
        PWMA_CHANNEL: (PWM_FREQ, PWM_RESOLUTION),
        PWMB_CHANNEL: (PWM_FREQ, PWM_RESOLUTION),
    }
    assert backend.attached == {PWMA_PIN: PWMA_CHANNEL, PWMB_PIN: PWMB_CHANNEL}


def test_standby_is_active_low(backend):
    controller = MotorController(backend)
    controller.standby(True)
    assert backend.levels[STBY_PIN] == 0
    controller.standby(False)
    assert backend.levels[STBY_PIN] == 1


def test_set_direction(backend):
    MotorController(backend).set_direction(True, False)
    assert (backend.levels[AIN1_PIN], backend.levels[AIN2_PIN]) == (0, 1)
    assert (backend.levels[BIN1_PIN], backend.levels[BIN2_PIN]) == (1, 0)


def test_drive_backward_uses_raw_speed(backend):
    MotorController(backend).drive(-300)
    assert backend.levels[STBY_PIN] == 1
    assert (backend.levels[AIN1_PIN], backend.levels[AIN2_PIN]) == (1, 0)
    assert (backend.levels[BIN1_PIN], backend.levels[BIN2_PIN]) == (1, 0)
    assert backend.duties == {PWMA_CHANNEL: 300, PWMB_CHANNEL: 300}


def test_drive_zero_enters_standby(backend):
    MotorController(backend).drive(0)
    assert backend.levels[STBY_PIN] == 0
    assert backend.duties == {PWMA_CHANNEL: 0, PWMB_CHANNEL: 0}


def test_move_to_rest_from_rest_writes_no_pwm(backend):
    MotorController(backend).move(0, 0)
    assert backend.levels[STBY_PIN] == 0
    assert backend.duties == {}


def test_move_uses_calibrated_power(backend):
    controller = MotorController(backend)
    controller.move(100, -100)
    assert backend.levels[STBY_PIN] == 1
    assert (backend.levels[AIN1_PIN], backend.levels[AIN2_PIN]) == (0, 1)
    assert (backend.levels[BIN1_PIN], backend.levels[BIN2_PIN]) == (1, 0)
    assert backend.duties[PWMA_CHANNEL] == motor_a_power(100)
    assert backend.duties[PWMB_CHANNEL] == motor_b_power(-100)
    assert (controller.last_left_velocity, controller.last_right_velocity) == (100, -100)


def test_move_repeated_request_writes_once(backend):
    controller = MotorController(backend)
    controller.move(200, 200)
    controller.move(200, 200)
    writes = [call for call in backend.calls if call[0] == "pwm_write"]
    assert len(writes) == 2


def test_turning_drive_straight(backend):
    drive = TurningDrive(backend)
    assert drive.drive(200) == (200, 200)
    assert (backend.levels[AIN1_PIN], backend.levels[AIN2_PIN]) == (1, 0)
    assert (backend.levels[BIN1_PIN], backend.levels[BIN2_PIN]) == (1, 0)
    assert backend.levels[STBY_PIN] == 1


def test_turning_drive_left_slows_motor_a(backend):
    drive = TurningDrive(backend)
    a, b = drive.drive(200, TurnDirection.LEFT, 50)
    assert b == 200
    assert a == 100
    assert backend.duties == {PWMA_CHANNEL: a, PWMB_CHANNEL: b}


def test_turning_drive_right_clamps_turn_amount(backend):
    drive = TurningDrive(backend)
    assert drive.drive(200, TurnDirection.RIGHT, 150) == (200, 0)


def test_turning_drive_backward(backend):
    drive = TurningDrive(backend)
    assert drive.drive(-200, TurnDirection.NONE, 30) == (200, 200)
    assert (backend.levels[AIN1_PIN], backend.levels[AIN2_PIN]) == (0, 1)
    assert (backend.levels[BIN1_PIN], backend.levels[BIN2_PIN]) == (0, 1)


@pytest.mark.parametrize("amount", [0, 10, 33, 99, 100, -40])
def test_turning_slow_side_never_exceeds_fast(amount):
    drive = TurningDrive(RecordingBackend())
    a, b = drive.drive(150, TurnDirection.RIGHT, amount)
    assert a == 150
    assert 0 <= b <= a


def test_turning_drive_zero_velocity_enters_standby(backend):
    drive = TurningDrive(backend)
    assert drive.drive(0, TurnDirection.LEFT, 20) == (0, 0)
    assert backend.levels[STBY_PIN] == 0