"""Canonicalize-a-key, merge-under-matching-keys.

Tradeline field grouping and address/organisation deduplication are the same
operation with different key functions and merge policies; both go through
:class:`KeyedRegistry`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from creditfile.core.models.raw import RawField, RawSection

T = TypeVar("T")
V = TypeVar("V")


class KeyedRegistry(Generic[T, V]):
    """Insertion-ordered registry keyed by a canonical key.

    The first item under a key creates the entry via ``create``; later items
    under the same key are folded in with ``merge`` (or ignored when no merge
    policy is given).
    """

    def __init__(
        self,
        key_fn: Callable[[T], Hashable],
        create: Callable[[T], V],
        merge: Optional[Callable[[V, T], None]] = None,
    ) -> None:
        self._key_fn = key_fn
        self._create = create
        self._merge = merge
        self._entries: Dict[Hashable, V] = {}

    def add(self, item: T) -> Tuple[V, bool]:
        """Register ``item``; return ``(entry, created)``."""

        key = self._key_fn(item)
        existing = self._entries.get(key)
        if existing is not None:
            if self._merge is not None:
                self._merge(existing, item)
            return existing, False
        entry = self._create(item)
        self._entries[key] = entry
        return entry, True

    def get(self, key: Hashable) -> Optional[V]:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[V]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def values(self) -> List[V]:
        return list(self._entries.values())


def merge_by_key(
    items: Iterable[T],
    key_fn: Callable[[T], Hashable],
    create: Callable[[T], V],
    merge: Optional[Callable[[V, T], None]] = None,
) -> List[V]:
    registry: KeyedRegistry[T, V] = KeyedRegistry(key_fn, create, merge)
    for item in items:
        registry.add(item)
    return registry.values()


@dataclass
class FieldGroup:
    """All raw fields describing one entity instance within one source."""

    group_key: str
    source_system: Optional[str]
    section_index: int
    fields: Dict[str, RawField] = field(default_factory=dict)

    def add(self, raw: RawField) -> None:
        # last value wins; dict keeps first-seen position
        self.fields[raw.name] = raw

    def value(self, *names: str) -> Optional[str]:
        """First non-blank value among ``names``, stripped."""

        for name in names:
            raw = self.fields.get(name)
            if raw is not None and raw.value.strip():
                return raw.value.strip()
        return None

    def table_index(self) -> Optional[int]:
        for raw in self.fields.values():
            if raw.table_index is not None:
                return raw.table_index
        return None


UNGROUPED_PREFIX = "__section_"


def group_fields(
    sections: Iterable[Tuple[int, RawSection, Optional[str]]],
    *,
    keep_ungrouped: bool = True,
) -> Tuple[List[FieldGroup], int]:
    """Group fields by ``(source_system, group_key)``.

    ``sections`` yields ``(section_index, section, canonical_source)``. Fields
    without a group key form one group per section and table row when
    ``keep_ungrouped`` is set, otherwise they are dropped. Returns the groups in first-seen order and
    the number of dropped fields.
    """

    dropped = 0

    def _items() -> Iterator[Tuple[Tuple[Optional[str], str], int, RawField]]:
        nonlocal dropped
        for index, section, source in sections:
            for raw in section.fields:
                key = raw.group_key
                if key is None:
                    if not keep_ungrouped:
                        dropped += 1
                        continue
                    key = f"{UNGROUPED_PREFIX}{index}"
                    if raw.table_index is not None:
                        key = f"{key}_{raw.table_index}"
                yield (source, key), index, raw

    def _create(item: Tuple[Tuple[Optional[str], str], int, RawField]) -> FieldGroup:
        (source, key), index, raw = item
        group = FieldGroup(group_key=key, source_system=source, section_index=index)
        group.add(raw)
        return group

    def _merge(group: FieldGroup, item: Tuple[Tuple[Optional[str], str], int, RawField]) -> None:
        group.add(item[2])

    groups = merge_by_key(_items(), lambda item: item[0], _create, _merge)
    return groups, dropped


def is_ungrouped(group: FieldGroup) -> bool:
    return group.group_key.startswith(UNGROUPED_PREFIX)


__all__ = [
    "FieldGroup",
    "KeyedRegistry",
    "group_fields",
    "is_ungrouped",
    "merge_by_key",
]
