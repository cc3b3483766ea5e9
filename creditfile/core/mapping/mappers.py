"""Field mappers: raw CRA wording -> canonical vocabulary.

Every mapper follows the same discipline:

1. trim and case-fold the raw text, look it up in the owning source's table;
2. otherwise scan the remaining source tables in ``source_order``;
3. otherwise return the field class's own default plus a
   :class:`NormalizationWarning` carrying the raw value and source system.

Mappers never raise for unrecognised input. Defaults differ per field class:
``other`` marks a value we could not classify, ``unknown`` marks missing data,
and account status keeps the raw text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, Tuple, TypeVar

from creditfile.core.mapping.rules import MappingRules, MappingTable, fold_key, load_mapping_rules
from creditfile.core.models.result import NormalizationWarning
from creditfile.core.taxonomy import clamp_source_system

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Mapped(Generic[T]):
    value: T
    warning: Optional[NormalizationWarning] = None


@dataclass(frozen=True)
class SearchClass:
    search_type: str
    visibility: str


def _warning(
    domain: str,
    field: str,
    raw: Any,
    source: str | None,
    message: str,
    severity: str = "warning",
) -> NormalizationWarning:
    logger.debug("MAPPING_DEFAULT_USED domain=%s field=%s raw=%r source=%s", domain, field, raw, source)
    return NormalizationWarning(
        domain=domain,
        field=field,
        message=message,
        severity=severity,
        raw_value=None if raw is None else str(raw),
        source_system=source,
    )


def _home(source: str | None) -> str | None:
    if not source:
        return None
    return source.strip().lower() or None


def _scan(table: MappingTable, rules: MappingRules, source: str | None) -> Iterable[Tuple[str, dict]]:
    for name in rules.scan_order(_home(source)):
        entries = table.folded.get(name)
        if entries:
            yield name, entries


def lookup(table_name: str, raw: Any, source: str | None, rules: MappingRules | None = None) -> Any | None:
    """Return the canonical value for ``raw`` or ``None`` when no table knows it."""

    rules = rules or load_mapping_rules()
    key = fold_key(raw) if raw is not None else ""
    if not key:
        return None
    table = rules.table(table_name)
    for _, entries in _scan(table, rules, source):
        if key in entries:
            return entries[key]
    return None


def _map_with_default(
    table_name: str,
    raw: Any,
    source: str | None,
    *,
    domain: str,
    field: str,
    label: str,
) -> Mapped[str]:
    rules = load_mapping_rules()
    table = rules.table(table_name)
    value = lookup(table_name, raw, source, rules)
    if value is not None:
        return Mapped(value)
    default = table.default
    return Mapped(
        default,
        _warning(
            domain,
            field,
            raw,
            source,
            f'Unknown {label} "{raw}" for {source or "composite"}, defaulting to "{default}"',
        ),
    )


def map_account_type(raw: str, source: str | None) -> Mapped[str]:
    return _map_with_default(
        "account_type", raw, source, domain="tradelines", field="account_type", label="account type"
    )


# Word-start fallbacks tried before giving up on an account status
# ("Defaulted" hits "default", "Inactive" does not hit "active").
_STATUS_HINTS: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bdefault", re.IGNORECASE), "defaulted"),
    (re.compile(r"\b(?:settled|closed)", re.IGNORECASE), "settled"),
    (re.compile(r"\binactive", re.IGNORECASE), "inactive"),
    (re.compile(r"\b(?:active|up to date)", re.IGNORECASE), "up_to_date"),
)


def map_account_status(raw: str, source: str | None) -> Mapped[Optional[str]]:
    """Map free-text account status.

    Unmatched text is passed through unchanged with a warning, since
    ``status_current`` is a free-text field.
    """

    text = (raw or "").strip()
    if not text:
        return Mapped(None)
    value = lookup("account_status", text, source)
    if value is not None:
        return Mapped(value)

    for pattern, status in _STATUS_HINTS:
        if pattern.search(text):
            return Mapped(status)

    return Mapped(
        text,
        _warning(
            "tradelines",
            "status",
            raw,
            source,
            f'Unknown account status "{raw}" for {source or "composite"}, preserving raw text',
        ),
    )


def map_payment_code(code: str, source: str | None) -> Mapped[str]:
    """Map a CRA payment-history code (``0``, ``D``, ``UC`` ...)."""

    return _map_with_default(
        "payment_code", code, source, domain="tradelines", field="payment_status", label="payment code"
    )


def map_payment_text(text: str) -> Mapped[str]:
    """Map broker-site descriptive payment history text (``Clean Payment``).

    Exact phrase first, then the case-folded phrase, then the code tables.
    """

    rules = load_mapping_rules()
    table = rules.table("payment_status_text")
    stripped = (text or "").strip()
    for name in rules.scan_order(None):
        value = table.exact(name, stripped)
        if value is not None:
            return Mapped(value)

    value = lookup("payment_status_text", stripped, None, rules)
    if value is None:
        value = lookup("payment_code", stripped, None, rules)
    if value is not None:
        return Mapped(value)

    return Mapped(
        table.default,
        _warning(
            "tradelines",
            "payment_status",
            text,
            None,
            f'Unknown payment status text "{text}", defaulting to "{table.default}"',
        ),
    )


def _as_search_class(value: Any) -> SearchClass:
    return SearchClass(search_type=value["search_type"], visibility=value["visibility"])


def map_search_type(raw: str, source: str | None) -> Mapped[SearchClass]:
    rules = load_mapping_rules()
    table = rules.table("search_type")
    value = lookup("search_type", raw, source, rules)
    if value is not None:
        return Mapped(_as_search_class(value))
    default = _as_search_class(table.default)
    return Mapped(
        default,
        _warning(
            "searches",
            "search_type",
            raw,
            source,
            f'Unknown search purpose "{raw}" for {source or "composite"}, '
            f'defaulting to "{default.search_type}"',
        ),
    )


def map_search_section(kind: str, source: str | None = None) -> Mapped[SearchClass]:
    """Classify a search from the hard/soft section it was listed under.

    The real purpose is not known, so an ``info`` note is always attached.
    """

    section = "hard" if kind == "hard" else "soft"
    rules = load_mapping_rules()
    value = _as_search_class(rules.table("search_type").sources["generic"][section])
    return Mapped(
        value,
        _warning(
            "searches",
            "search_type",
            section,
            source,
            f'Search type set to "{value.search_type}" from {section} search section; '
            "actual type may differ",
            severity="info",
        ),
    )


def map_address_role(
    heading: str | None,
    source: str | None,
    position: int,
    *,
    explicit: bool = False,
) -> Mapped[str]:
    """Map a heading such as ``Current Address`` to an association role.

    Exact lookup first, then substring matching against every table key. With
    no match the first address (``position == 0``) is ``current`` and the rest
    ``previous``. Only an explicit heading that fails to match is reported.
    """

    positional = "current" if position == 0 else "previous"
    if not heading or not heading.strip():
        return Mapped(positional)

    rules = load_mapping_rules()
    value = lookup("address_role", heading, source, rules)
    if value is not None:
        return Mapped(value)

    folded = fold_key(heading)
    table = rules.table("address_role")
    for _, entries in _scan(table, rules, source):
        for key, role in entries.items():
            if key in folded:
                return Mapped(role)

    if not explicit:
        return Mapped(positional)
    return Mapped(
        positional,
        _warning(
            "addresses",
            "role",
            heading,
            source,
            f'Unknown address heading "{heading}" for {source or "composite"}, '
            f'using position to infer "{positional}"',
        ),
    )


def map_electoral_change_type(raw: str, source: str | None = None) -> Mapped[str]:
    rules = load_mapping_rules()
    value = lookup("electoral_change_type", raw, source, rules)
    if value is not None:
        return Mapped(value)

    folded = fold_key(raw or "")
    table = rules.table("electoral_change_type")
    for _, entries in _scan(table, rules, source):
        for key, change in entries.items():
            if key in folded:
                return Mapped(change)
    if "registered" in folded:
        return Mapped("added")

    return Mapped(
        table.default,
        _warning(
            "electoral_roll",
            "change_type",
            raw,
            source,
            f'Unknown electoral roll status "{raw}", defaulting to "{table.default}"',
        ),
    )


def map_source_system(raw: str | None) -> Mapped[str]:
    """Map a CRA name as written on the page (``Equifax Ltd``) to the enum."""

    value = lookup("source_system", raw, None)
    if value is not None:
        return Mapped(value)
    clamped = clamp_source_system(raw)
    if clamped != "other":
        return Mapped(clamped)
    return Mapped(
        "other",
        _warning(
            "imports",
            "source_system",
            raw,
            None,
            f'Unknown source system "{raw}", defaulting to "other"',
        ),
    )


def map_public_record_type(raw: str, source: str | None) -> Mapped[str]:
    return _map_with_default(
        "public_record_type", raw, source, domain="public_records", field="record_type", label="public record type"
    )


def map_public_record_status(raw: str, source: str | None) -> Mapped[str]:
    return _map_with_default(
        "public_record_status", raw, source, domain="public_records", field="status", label="public record status"
    )


def map_fraud_scheme(raw: str, source: str | None) -> Mapped[str]:
    return _map_with_default(
        "fraud_scheme", raw, source, domain="fraud_markers", field="scheme", label="fraud scheme"
    )


def map_fraud_marker_type(raw: str, source: str | None) -> Mapped[str]:
    return _map_with_default(
        "fraud_marker_type", raw, source, domain="fraud_markers", field="marker_type", label="fraud marker type"
    )


def map_fraud_address_scope(raw: str, source: str | None) -> Mapped[str]:
    return _map_with_default(
        "fraud_address_scope", raw, source, domain="fraud_markers", field="address_scope", label="fraud address scope"
    )


__all__ = [
    "Mapped",
    "SearchClass",
    "lookup",
    "map_account_status",
    "map_account_type",
    "map_address_role",
    "map_electoral_change_type",
    "map_fraud_address_scope",
    "map_fraud_marker_type",
    "map_fraud_scheme",
    "map_payment_code",
    "map_payment_text",
    "map_public_record_status",
    "map_public_record_type",
    "map_search_section",
    "map_search_type",
    "map_source_system",
]
