"""Public records (CCJs, bankruptcies, IVAs, DROs) and notices of correction."""

from __future__ import annotations

from typing import Optional

from creditfile.core.mapping.mappers import map_public_record_status, map_public_record_type
from creditfile.core.models.credit_file import NoticeOfCorrection, PublicRecord
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.grouping import FieldGroup
from creditfile.core.normalize.parsers import parse_amount, parse_date
from creditfile.core.taxonomy.vocabulary import NOTICE_SCOPES


def _date(ctx: NormalizationContext, group: FieldGroup, domain: str, field_name: str, *names: str) -> Optional[str]:
    raw = group.value(*names)
    if raw is None:
        return None
    parsed = parse_date(raw)
    if parsed is None:
        ctx.warn(
            domain,
            field_name,
            f'Could not parse {field_name} date "{raw}"',
            raw_value=raw,
            source_system=group.source_system,
        )
    return parsed


def build_public_records(ctx: NormalizationContext) -> None:
    for group in ctx.groups("public_records"):
        raw_type = group.value("record_type", "type")
        if raw_type is None and group.value("court", "amount") is None:
            continue
        source = group.source_system
        import_id = ctx.import_id_for(source)

        record_type = map_public_record_type(raw_type or "", source)
        ctx.add_warning(record_type.warning)

        status = None
        raw_status = group.value("status")
        if raw_status:
            mapped_status = map_public_record_status(raw_status, source)
            ctx.add_warning(mapped_status.warning)
            status = mapped_status.value

        amount = None
        raw_amount = group.value("amount")
        if raw_amount:
            amount = parse_amount(raw_amount)
            if amount is None:
                ctx.warn(
                    "public_records",
                    "amount",
                    f'Could not parse amount "{raw_amount}"',
                    raw_value=raw_amount,
                    source_system=source,
                )

        address_id = None
        raw_address = group.value("address")
        if raw_address:
            address_id = ctx.register_address(raw_address)
            ctx.associate_address(address_id, import_id, "other")

        ctx.public_records.append(
            PublicRecord(
                public_record_id=ctx.next_id("pr"),
                record_type=record_type.value,
                court_or_register=group.value("court", "court_or_register"),
                amount=amount,
                recorded_at=_date(ctx, group, "public_records", "recorded_at", "recorded_at", "date"),
                satisfied_at=_date(ctx, group, "public_records", "satisfied_at", "satisfied_at", "date_satisfied"),
                status=status,
                address_id=address_id,
                source_import_id=import_id,
            )
        )


def build_notices(ctx: NormalizationContext) -> None:
    for group in ctx.groups("notices_of_correction"):
        text = group.value("text", "notice")
        if not text:
            continue
        scope = (group.value("scope") or "file").lower()
        if scope not in NOTICE_SCOPES:
            scope = "file"
        ctx.notices_of_correction.append(
            NoticeOfCorrection(
                notice_id=ctx.next_id("noc"),
                text=text,
                created_at=_date(ctx, group, "notices_of_correction", "created_at", "created_at", "date"),
                scope=scope,
                source_import_id=ctx.import_id_for(group.source_system),
            )
        )
