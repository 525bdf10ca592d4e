"""Wall-clock access in milliseconds.

Every throttle component reads time through a ``Clock`` so tests can drive
expiry with a simulated clock instead of sleeping.
"""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def now_ms() -> float:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return time.time() * 1000.0
