from __future__ import annotations

from creditfile.core.models.credit_file import FinancialAssociate
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.parsers import parse_date
from creditfile.core.taxonomy.vocabulary import FINANCIAL_ASSOCIATE_STATUSES


def build_financial_associates(ctx: NormalizationContext) -> None:
    for group in ctx.groups("financial_associates"):
        name = group.value("associated-to", "associate_name", "name")
        if not name:
            continue
        source = group.source_system

        confirmed_at = None
        raw_date = group.value("last-confirmed", "created-on", "confirmed_at")
        if raw_date:
            confirmed_at = parse_date(raw_date)
            if confirmed_at is None:
                ctx.warn(
                    "financial_associates",
                    "confirmed_at",
                    f'Could not parse confirmation date "{raw_date}"',
                    raw_value=raw_date,
                    source_system=source,
                )

        status = (group.value("status") or "active").lower()
        if status not in FINANCIAL_ASSOCIATE_STATUSES:
            status = "unknown"

        ctx.financial_associates.append(
            FinancialAssociate(
                associate_id=ctx.next_id("fa"),
                associate_name=name,
                relationship_basis="other",
                status=status,
                confirmed_at=confirmed_at,
                source_import_id=ctx.import_id_for(source),
            )
        )
