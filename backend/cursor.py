"""Chunked read-cursor arithmetic for narrating a result list.

``read`` is the number of items already narrated. After a forward read it sits
on a chunk boundary (or the end of the list); the helpers below recover which
chunk was shown last and where back-navigation should land.
"""

from __future__ import annotations

from typing import Tuple

CHUNK_SIZE = 5


class PositionOutOfRange(ValueError):
    """A spoken list position does not name an item of the last chunk."""


def window_start(read: int, chunk_size: int = CHUNK_SIZE) -> int:
    """Index where the chunk ending at ``read`` began."""
    if read <= 0:
        return 0
    return chunk_size * ((read - 1) // chunk_size)


def advance(read: int, length: int, chunk_size: int = CHUNK_SIZE) -> Tuple[int, int]:
    """Move forward one chunk. Returns ``(new_read, count)``."""
    new_read = min(read + chunk_size, length)
    return new_read, new_read - read


def rewind_one_chunk(read: int, chunk_size: int = CHUNK_SIZE) -> int:
    return max(window_start(read, chunk_size) - chunk_size, 0)


def resolve_position(read: int, index_in_chunk: int, length: int, chunk_size: int = CHUNK_SIZE) -> int:
    """Map a 1-based position within the last narrated chunk to an absolute index."""
    if not 1 <= index_in_chunk <= chunk_size:
        raise PositionOutOfRange(f"position {index_in_chunk} outside 1..{chunk_size}")
    index = window_start(read, chunk_size) + (index_in_chunk - 1)
    if not 0 <= index < length:
        raise PositionOutOfRange(f"index {index} outside list of {length}")
    return index


__all__ = [
    "CHUNK_SIZE",
    "PositionOutOfRange",
    "window_start",
    "advance",
    "rewind_one_chunk",
    "resolve_position",
]
