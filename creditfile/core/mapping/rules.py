"""Load the raw-wording -> canonical-vocabulary tables from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml

from creditfile.config import mapping_rules_path
from creditfile.core.taxonomy import VOCABULARIES

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).with_name("normalization_rules.yaml")


class MappingRulesError(RuntimeError):
    """Raised when the mapping table file is unreadable or malformed."""

    def __init__(self, path: str | Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)


def fold_key(text: Any) -> str:
    """Trim, collapse internal whitespace and case-fold ``text``."""

    return " ".join(str(text).split()).casefold()


@dataclass(frozen=True)
class MappingTable:
    name: str
    vocabulary: str | None
    default: Any
    sources: Dict[str, Dict[str, Any]]
    folded: Dict[str, Dict[str, Any]] = field(repr=False)

    def exact(self, source: str, raw: str) -> Any | None:
        entries = self.sources.get(source) or {}
        return entries.get(raw.strip())


@dataclass(frozen=True)
class ScoreRange:
    name: str
    minimum: int
    maximum: int


@dataclass(frozen=True)
class MappingRules:
    version: str
    source_order: Tuple[str, ...]
    tables: Dict[str, MappingTable]
    score_ranges: Dict[str, ScoreRange]
    path: str

    def table(self, name: str) -> MappingTable:
        try:
            return self.tables[name]
        except KeyError:
            raise MappingRulesError(self.path, f"missing table {name!r}") from None

    def scan_order(self, home: str | None) -> Tuple[str, ...]:
        """Return table sources to try, ``home`` first, then the fixed order."""

        if not home:
            return self.source_order
        return (home,) + tuple(s for s in self.source_order if s != home)


def _check_value(path: str, table: str, vocabulary: str | None, key: str, value: Any) -> None:
    if vocabulary is None:
        if not isinstance(value, str) or not value:
            raise MappingRulesError(path, f"{table}[{key!r}] must map to a non-empty string")
        return

    if vocabulary == "search_type":
        if not isinstance(value, Mapping):
            raise MappingRulesError(path, f"{table}[{key!r}] must map to search_type/visibility")
        _check_value(path, table, "search_type_value", key, value.get("search_type"))
        _check_value(path, table, "search_visibility", key, value.get("visibility"))
        return

    allowed = VOCABULARIES["search_type" if vocabulary == "search_type_value" else vocabulary]
    if value not in allowed:
        raise MappingRulesError(
            path, f"{table}[{key!r}] -> {value!r} is not in vocabulary {vocabulary!r}"
        )


def _build_table(path: str, name: str, definition: Any) -> MappingTable:
    if not isinstance(definition, Mapping):
        raise MappingRulesError(path, f"table {name!r} must be a mapping")

    vocabulary = definition.get("vocabulary")
    if vocabulary is not None and vocabulary not in VOCABULARIES:
        raise MappingRulesError(path, f"table {name!r} names unknown vocabulary {vocabulary!r}")

    raw_sources = definition.get("sources")
    if not isinstance(raw_sources, Mapping) or not raw_sources:
        raise MappingRulesError(path, f"table {name!r} has no sources")

    sources: Dict[str, Dict[str, Any]] = {}
    folded: Dict[str, Dict[str, Any]] = {}
    for source, entries in raw_sources.items():
        if not isinstance(entries, Mapping):
            raise MappingRulesError(path, f"table {name!r} source {source!r} must be a mapping")
        exact: Dict[str, Any] = {}
        lowered: Dict[str, Any] = {}
        for key, value in entries.items():
            _check_value(path, name, vocabulary, str(key), value)
            exact[str(key)] = value
            # first entry wins when two keys fold together
            lowered.setdefault(fold_key(key), value)
        sources[str(source)] = exact
        folded[str(source)] = lowered

    default = definition.get("default")
    if default is not None:
        _check_value(path, name, vocabulary, "<default>", default)

    return MappingTable(
        name=name,
        vocabulary=vocabulary,
        default=default,
        sources=sources,
        folded=folded,
    )


def _build_score_ranges(path: str, raw: Any) -> Dict[str, ScoreRange]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise MappingRulesError(path, "score_ranges must be a mapping")
    ranges: Dict[str, ScoreRange] = {}
    for provider, definition in raw.items():
        try:
            ranges[str(provider)] = ScoreRange(
                name=str(definition["name"]),
                minimum=int(definition["min"]),
                maximum=int(definition["max"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MappingRulesError(path, f"invalid score range for {provider!r}: {exc}") from exc
    return ranges


@lru_cache(maxsize=8)
def _load_rules_from(path: str) -> MappingRules:
    try:
        with open(path, encoding="utf-8") as fh:
            document = yaml.safe_load(fh) or {}
    except OSError as exc:
        logger.error("MAPPING_RULES_LOAD_FAILED path=%s error=%s", path, exc)
        raise MappingRulesError(path, f"cannot read mapping rules: {exc}") from exc
    except yaml.YAMLError as exc:
        logger.error("MAPPING_RULES_LOAD_FAILED path=%s error=%s", path, exc)
        raise MappingRulesError(path, f"invalid YAML: {exc}") from exc

    if not isinstance(document, Mapping):
        raise MappingRulesError(path, "top level must be a mapping")

    raw_tables = document.get("tables")
    if not isinstance(raw_tables, Mapping):
        raise MappingRulesError(path, "missing 'tables' mapping")

    source_order = document.get("source_order") or []
    if not isinstance(source_order, list) or not all(isinstance(s, str) for s in source_order):
        raise MappingRulesError(path, "source_order must be a list of strings")

    tables = {
        str(name): _build_table(path, str(name), definition)
        for name, definition in raw_tables.items()
    }
    rules = MappingRules(
        version=str(document.get("version") or "0"),
        source_order=tuple(source_order),
        tables=tables,
        score_ranges=_build_score_ranges(path, document.get("score_ranges")),
        path=path,
    )
    logger.info("MAPPING_RULES_LOADED path=%s tables=%d", path, len(tables))
    return rules


def load_mapping_rules(path: str | Path | None = None) -> MappingRules:
    """Return the parsed mapping rules.

    ``path`` wins over ``CREDITFILE_MAPPING_RULES_PATH``, which wins over the
    bundled ``normalization_rules.yaml``. Parsed rules are cached per path.
    """

    resolved = path or mapping_rules_path() or DEFAULT_RULES_PATH
    return _load_rules_from(str(Path(resolved)))


def clear_mapping_rules_cache() -> None:
    _load_rules_from.cache_clear()


__all__ = [
    "DEFAULT_RULES_PATH",
    "MappingRules",
    "MappingRulesError",
    "MappingTable",
    "ScoreRange",
    "clear_mapping_rules_cache",
    "fold_key",
    "load_mapping_rules",
]
