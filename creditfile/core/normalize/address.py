from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_UK_POSTCODE_RE = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}$", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedAddress:
    line_1: str
    line_2: Optional[str]
    town_city: Optional[str]
    postcode: Optional[str]
    country_code: str
    normalized_single_line: str


def normalize_line(text: str) -> str:
    """Upper-case and collapse whitespace; the address dedup key."""

    return " ".join(text.split()).upper()


def format_postcode(text: str) -> str:
    compact = re.sub(r"\s+", "", text).upper()
    return f"{compact[:-3]} {compact[-3:]}"


def parse_uk_address(raw: str) -> ParsedAddress:
    """Split a comma-separated UK address into lines, town and postcode.

    The postcode is searched from the end; the part before it is the town.
    Without a postcode the last part is taken as the town when there is more
    than one part.
    """

    parts: List[str] = [p.strip() for p in raw.split(",") if p.strip()]

    postcode: Optional[str] = None
    postcode_index = -1
    for index in range(len(parts) - 1, -1, -1):
        if _UK_POSTCODE_RE.match(parts[index]):
            postcode = format_postcode(parts[index])
            postcode_index = index
            break

    town: Optional[str] = None
    lines: List[str]
    if postcode_index > 0:
        town = parts[postcode_index - 1]
        lines = parts[: postcode_index - 1]
    elif postcode_index == 0:
        lines = parts[1:]
    elif len(parts) > 1:
        town = parts[-1]
        lines = parts[:-1]
    else:
        lines = list(parts)

    line_1 = lines[0] if lines else raw.strip()
    line_2 = ", ".join(lines[1:]) if len(lines) > 1 else None

    single = ", ".join(p for p in (line_1, line_2, town, postcode) if p)
    return ParsedAddress(
        line_1=line_1,
        line_2=line_2,
        town_city=town,
        postcode=postcode,
        country_code="GB",
        normalized_single_line=normalize_line(single),
    )


__all__ = ["ParsedAddress", "format_postcode", "normalize_line", "parse_uk_address"]
