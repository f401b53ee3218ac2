"""
Identifier generation

Entity ids are UUIDv7-style strings: the leading 48 bits hold a Unix
millisecond timestamp, so ids sort by creation time and repositories can
fall back to id order for deterministic listings.
"""

import itertools
import secrets
import time
from typing import Protocol


class IdFactory(Protocol):
    """Protocol for id generation strategies"""

    def generate(self) -> str:
        """Return a new unique id"""
        ...


def generate_id() -> str:
    """
    Generate a time-ordered UUIDv7-style identifier

    Returns:
        36-character hyphenated hex string, e.g. "01908e9a-3b87-7abc-8def-0123456789ab"
    """
    timestamp_ms = int(time.time() * 1000) & 0xFFFFFFFFFFFF
    rand_a = secrets.randbits(12)
    rand_b = secrets.randbits(62)

    value = (timestamp_ms << 80) | (0x7 << 76) | (rand_a << 64) | (0b10 << 62) | rand_b
    hex_value = f"{value:032x}"
    return (
        f"{hex_value[0:8]}-{hex_value[8:12]}-{hex_value[12:16]}-"
        f"{hex_value[16:20]}-{hex_value[20:32]}"
    )


class DefaultIdFactory:
    """Production id factory"""

    def generate(self) -> str:
        return generate_id()


class SequentialIdFactory:
    """
    Predictable ids for tests: "<prefix>-0001", "<prefix>-0002", ...

    Sequential ids also sort in creation order, matching the ordering
    guarantee of generated ids.
    """

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self._counter = itertools.count(1)

    def generate(self) -> str:
        return f"{self.prefix}-{next(self._counter):04d}"


default_id_factory = DefaultIdFactory()
