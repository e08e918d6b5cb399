from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_now(clock: Clock = utc_now) -> str:
    return clock().isoformat()


def millis(clock: Clock = utc_now) -> int:
    return int(clock().timestamp() * 1000)
