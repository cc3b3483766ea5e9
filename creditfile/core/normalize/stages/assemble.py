from __future__ import annotations

from typing import Dict

from creditfile.core.models.credit_file import ENTITY_COLLECTIONS, CreditFile, Subject
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.ids import content_id
from creditfile.core.normalize.stages.imports import EPOCH


def assemble_credit_file(ctx: NormalizationContext) -> CreditFile:
    metadata = ctx.metadata
    subject_id = ctx.subject_id or ctx.config.default_subject_id
    return CreditFile(
        schema_version=ctx.config.schema_version,
        file_id=content_id(
            "file",
            metadata.adapter_id,
            metadata.extracted_at,
            metadata.page_url or metadata.source_filename or "",
        ),
        subject_id=subject_id,
        created_at=metadata.extracted_at or EPOCH,
        currency_code=ctx.config.currency_code,
        imports=list(ctx.imports.values()),
        subject=Subject(
            subject_id=subject_id,
            names=ctx.names or None,
            dates_of_birth=ctx.dates_of_birth or None,
        ),
        organisations=ctx.organisation_registry.values(),
        addresses=ctx.address_registry.values(),
        address_associations=ctx.association_registry.values(),
        address_links=list(ctx.address_links),
        financial_associates=list(ctx.financial_associates),
        electoral_roll_entries=list(ctx.electoral_roll_entries),
        tradelines=list(ctx.tradelines),
        searches=list(ctx.searches),
        credit_scores=list(ctx.credit_scores),
        public_records=list(ctx.public_records),
        notices_of_correction=list(ctx.notices_of_correction),
        fraud_markers=list(ctx.fraud_markers),
    )


def summarize(credit_file: CreditFile | None) -> Dict[str, int]:
    """Entity kind -> count; all zero when there is no file."""

    summary = {"person_names": 0}
    summary.update({name: 0 for name in ENTITY_COLLECTIONS})
    if credit_file is None:
        return summary
    summary["person_names"] = len(credit_file.subject.names or [])
    for name in ENTITY_COLLECTIONS:
        summary[name] = len(getattr(credit_file, name))
    return summary
