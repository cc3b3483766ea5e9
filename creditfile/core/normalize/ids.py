"""Identifier generation.

Two flavours: content ids (``addr:1f3a...``) derived from a hash of the
entity's identifying parts, and sequential ids (``tl:1``) drawn from counters
owned by a single run. Both are deterministic for identical input.
"""

from __future__ import annotations

import hashlib
import re
from collections import defaultdict
from typing import Any

ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]+$")

_HASH_LEN = 12


def content_id(prefix: str, *parts: Any) -> str:
    joined = "|".join("" if part is None else str(part) for part in parts)
    digest = hashlib.sha256(joined.encode("utf-8")).hexdigest()[:_HASH_LEN]
    return f"{prefix}:{digest}"


def sequential_id(prefix: str, counter: int) -> str:
    return f"{prefix}:{counter}"


class IdCounters:
    """Per-run sequential counters, one per prefix."""

    def __init__(self) -> None:
        self._counts: defaultdict[str, int] = defaultdict(int)

    def next(self, prefix: str) -> str:
        self._counts[prefix] += 1
        return sequential_id(prefix, self._counts[prefix])

    def peek(self, prefix: str) -> int:
        return self._counts[prefix]


__all__ = ["ID_PATTERN", "IdCounters", "content_id", "sequential_id"]
