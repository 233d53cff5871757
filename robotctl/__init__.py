"""Hardware-free control logic for a two-wheeled robot: PID, telemetry, motor drive and command protocol."""

__version__ = "0.1.0"