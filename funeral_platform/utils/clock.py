"""
Time helpers

Tenant timestamps are stored as epoch milliseconds, resource timestamps as
ISO-8601 UTC strings.
"""

import time
from datetime import datetime, timezone


def now_ms() -> int:
    return int(time.time() * 1000)


def utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def minutes_ms(minutes: int) -> int:
    return minutes * 60 * 1000


def days_ms(days: int) -> int:
    return days * 24 * 60 * 60 * 1000
