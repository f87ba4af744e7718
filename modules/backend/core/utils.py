"""
Core Utilities.

Shared helpers used across the backend.
"""

import secrets
import string
import uuid
from datetime import datetime, timedelta, timezone

_ALPHANUMERIC = string.ascii_letters + string.digits


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and assumed
    to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def next_timestamp(previous: datetime | None) -> datetime:
    """
    Current UTC time, nudged past `previous` if the clock has not moved.

    Guarantees that successive writes to the same row get strictly
    increasing timestamps even on coarse clocks.
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def generate_id() -> str:
    """New primary key value (uuid4 string)."""
    return str(uuid.uuid4())


def random_alphanumeric(length: int) -> str:
    """Random string of ASCII letters and digits."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))
