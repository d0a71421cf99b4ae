"""Node id factories and the clock type."""

import itertools
import secrets
import uuid
from typing import Callable

IdFactory = Callable[[], str]
"""Zero-argument callable returning a fresh, never-reused node id."""

Clock = Callable[[], float]
"""Zero-argument callable returning the current time in seconds."""


def uuid_ids() -> IdFactory:
    """Random UUID4 ids (32 hex chars)."""
    return lambda: uuid.uuid4().hex


def counter_ids(prefix: str = "v") -> IdFactory:
    """Monotonic counter plus a random suffix, e.g. ``v3-9f1c02ab``.

    The counter keeps ids readable and ordered within one factory;
    the suffix keeps two factories from colliding.
    """
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}-{secrets.token_hex(4)}"
