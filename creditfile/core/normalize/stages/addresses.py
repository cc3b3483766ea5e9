"""Addresses, their per-import associations and address links.

Addresses are deduplicated across every source by normalized line; each
mention adds an association to the originating import batch instead. A linked
address is recorded as an AddressLink only.
"""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, Optional, Set, Tuple

from creditfile.core.mapping.mappers import map_address_role
from creditfile.core.models.credit_file import AddressLink
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.grouping import FieldGroup, is_ungrouped

_ADDRESS_FIELDS = ("address", "full_address")
_HEADING_FIELDS = ("heading", "address_type", "address-type")
_LINKED_FIELDS = ("linked-address", "linked_address")


def _role_context(group: FieldGroup) -> Tuple[Optional[str], bool]:
    heading = group.value(*_HEADING_FIELDS)
    if heading:
        return heading, True
    if is_ungrouped(group):
        return None, False
    return group.group_key, False


def build_addresses(ctx: NormalizationContext) -> None:
    ordinals: DefaultDict[Optional[str], int] = defaultdict(int)
    seen_links: Set[Tuple[str, str, str]] = set()

    for group in ctx.groups("addresses"):
        raw = group.value(*_ADDRESS_FIELDS)
        if not raw:
            continue

        source = group.source_system
        import_id = ctx.import_id_for(source)
        address_id = ctx.register_address(raw)

        position = group.table_index()
        if position is None:
            position = ordinals[source]
        ordinals[source] += 1

        context, explicit = _role_context(group)
        role = map_address_role(context, source, position, explicit=explicit)
        ctx.add_warning(role.warning)
        ctx.associate_address(address_id, import_id, role.value)

        linked_raw = group.value(*_LINKED_FIELDS)
        if linked_raw:
            linked_id = ctx.register_address(linked_raw)
            key = (address_id, linked_id, import_id)
            if linked_id != address_id and key not in seen_links:
                seen_links.add(key)
                ctx.address_links.append(
                    AddressLink(
                        address_link_id=ctx.next_id("addr-link"),
                        from_address_id=address_id,
                        to_address_id=linked_id,
                        source_import_id=import_id,
                    )
                )
