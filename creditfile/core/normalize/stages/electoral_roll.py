from __future__ import annotations

import re
from typing import Optional

from creditfile.core.mapping.mappers import map_electoral_change_type
from creditfile.core.models.credit_file import ElectoralRollEntry
from creditfile.core.normalize.context import NormalizationContext

_OPTED_IN_RE = re.compile(r"\b(?:not opted out|opted in)\b", re.IGNORECASE)
_OPTED_OUT_RE = re.compile(r"\b(?:opted out|no|removed)\b", re.IGNORECASE)


def _marketing_opt_out(raw: Optional[str]) -> Optional[bool]:
    """``None`` when the status says neither way ("Unknown", "Not known")."""

    if raw is None:
        return None
    if _OPTED_IN_RE.search(raw):
        return False
    if _OPTED_OUT_RE.search(raw):
        return True
    return None


def build_electoral_roll(ctx: NormalizationContext) -> None:
    """Electoral roll entries; the address must already be on file."""

    for group in ctx.groups("electoral_roll"):
        status = group.value("electoral-roll", "electoral_roll", "status")
        if not status:
            continue
        source = group.source_system

        address_id = None
        raw_address = group.value("address")
        if raw_address:
            address_id = ctx.find_address(raw_address)
            if address_id is None:
                ctx.warn(
                    "electoral_roll",
                    "address_id",
                    f'Electoral roll address "{raw_address}" not found among reported addresses',
                    severity="info",
                    raw_value=raw_address,
                    source_system=source,
                )

        change = map_electoral_change_type(status, source)
        ctx.add_warning(change.warning)

        ctx.electoral_roll_entries.append(
            ElectoralRollEntry(
                electoral_entry_id=ctx.next_id("er"),
                address_id=address_id,
                name_on_register=group.value("name") or ctx.page_info.subject_name,
                change_type=change.value,
                marketing_opt_out=_marketing_opt_out(group.value("marketing-status", "marketing_status")),
                source_import_id=ctx.import_id_for(source),
            )
        )
