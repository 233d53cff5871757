"""Small numeric helpers."""

import logging

_log = logging.getLogger(__name__)


def interpolate(x0: int, y0: int, x1: int, y1: int, x: int) -> int:
    """Linearly interpolate y at x between (x0, y0) and (x1, y1), rounded half up toward zero."""
    y = int((y1 - y0) / (x1 - x0) * (x - x0) + y0 + 0.5)
    _log.debug("(%d, %d) (%d, %d) => (%d, %d)", x0, y0, x1, y1, x, y)
    return y