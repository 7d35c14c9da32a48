__all__ = ["Clock", "Time"]


import time
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], float]
"""Returns the current time as epoch seconds."""


class Time:
    @staticmethod
    def now() -> float:
        return time.time()

    @staticmethod
    def to_datetime(timestamp: float) -> datetime:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
