"""Parsers for raw amounts and dates.

All parsers return ``None`` for anything they cannot read; callers turn that
into a warning and omit the field.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

_MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}
_MONTHS.update({name[:3]: num for name, num in list(_MONTHS.items())})
_MONTHS["sept"] = 9

_LONG_DATE_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?,?\s+(\d{4})$")
_SLASH_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_AMOUNT_RE = re.compile(r"^(-)?\s*[£$€]?\s*(-)?\s*(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d{1,2}))?$")
_INT_RE = re.compile(r"^\s*(\d+)")


def _iso(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_long_date(text: str | None) -> Optional[str]:
    """``"20 August 2024"`` / ``"9 Jul 1986"`` -> ``"2024-08-20"``."""

    if not text:
        return None
    match = _LONG_DATE_RE.match(text.strip())
    if not match:
        return None
    day, month_name, year = match.groups()
    month = _MONTHS.get(month_name.lower())
    if month is None:
        return None
    return _iso(int(year), month, int(day))


def parse_slash_date(text: str | None) -> Optional[str]:
    """``"09/09/2025"`` (DD/MM/YYYY) -> ``"2025-09-09"``."""

    if not text:
        return None
    match = _SLASH_DATE_RE.match(text.strip())
    if not match:
        return None
    day, month, year = match.groups()
    return _iso(int(year), int(month), int(day))


def parse_date(text: str | None) -> Optional[str]:
    return parse_long_date(text) or parse_slash_date(text)


def parse_amount(text: str | None) -> Optional[int]:
    """Parse a money value into integer minor units.

    ``"£1,234.56"`` -> ``123456``; ``"-£20"`` -> ``-2000``. Returns ``None``
    for anything with a non-numeric remainder.
    """

    if text is None:
        return None
    match = _AMOUNT_RE.match(text.strip())
    if not match:
        return None
    sign_before, sign_after, whole, fraction = match.groups()
    if sign_before and sign_after:
        return None
    minor = int(whole.replace(",", "")) * 100 + int((fraction or "0").ljust(2, "0"))
    return -minor if (sign_before or sign_after) else minor


def parse_int(text: str | None) -> Optional[int]:
    """Leading integer of ``text`` (``"36 months"`` -> ``36``)."""

    if not text:
        return None
    match = _INT_RE.match(text)
    if not match:
        return None
    return int(match.group(1))


__all__ = [
    "parse_amount",
    "parse_date",
    "parse_int",
    "parse_long_date",
    "parse_slash_date",
]
