"""Import batches: one per source system seen in the run, plus composite."""

from __future__ import annotations

import logging
from typing import List, Optional

from creditfile.core.mapping.mappers import map_source_system
from creditfile.core.models.credit_file import ImportBatch, RawArtifact
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.ids import content_id
from creditfile.core.taxonomy import COMPOSITE_KEY
from creditfile.core.taxonomy.vocabulary import RAW_ARTIFACT_TYPES

logger = logging.getLogger(__name__)

SOURCE_WRAPPERS = {
    "checkmyfile": "CheckMyFile",
    "equifax-pdf": "Equifax",
}

EPOCH = "1970-01-01T00:00:00Z"


def _artifact_type(raw: Optional[str]) -> str:
    if not raw:
        return "html"
    lowered = raw.strip().lower()
    return lowered if lowered in RAW_ARTIFACT_TYPES else "other"


def _declared_sources(ctx: NormalizationContext) -> List[str]:
    """Canonical sources in declaration order, metadata first, then sections."""

    ordered: List[str] = []
    raw_names = list(ctx.metadata.source_systems_found)
    raw_names.extend(s.source_system for s in ctx.sections if s.source_system is not None)
    for raw in raw_names:
        tag = raw.strip().lower()
        if not tag:
            continue
        if tag not in ctx.source_tags:
            mapped = map_source_system(raw)
            ctx.add_warning(mapped.warning)
            ctx.source_tags[tag] = mapped.value
        canonical = ctx.source_tags[tag]
        if canonical not in ordered:
            ordered.append(canonical)
    return ordered


def build_import_batches(ctx: NormalizationContext) -> None:
    metadata = ctx.metadata
    imported_at = metadata.extracted_at or EPOCH
    if not metadata.extracted_at:
        ctx.warn(
            "input",
            "metadata.extracted_at",
            "Extraction timestamp missing; using epoch for imported_at/created_at",
        )

    acquisition = "pdf_upload" if (metadata.artifact_type or "").lower() == "pdf" else "html_scrape"
    wrapper = SOURCE_WRAPPERS.get(metadata.adapter_id, metadata.adapter_id)
    mapping_version = f"{metadata.adapter_id}-{metadata.adapter_version}"

    artifacts = None
    if metadata.html_hash:
        artifacts = [
            RawArtifact(
                artifact_id=content_id("artifact", metadata.html_hash),
                artifact_type=_artifact_type(metadata.artifact_type),
                sha256=metadata.html_hash,
                uri=metadata.page_url or metadata.source_filename or "",
            )
        ]

    def _batch(key: str, source_system: str, raw_artifacts) -> ImportBatch:
        return ImportBatch(
            import_id=content_id("imp", key, metadata.extracted_at, metadata.adapter_id),
            imported_at=imported_at,
            currency_code=ctx.config.currency_code,
            source_system=source_system,
            source_wrapper=wrapper,
            acquisition_method=acquisition,
            mapping_version=mapping_version,
            raw_artifacts=raw_artifacts,
        )

    for source in _declared_sources(ctx):
        ctx.imports[source] = _batch(source, source, artifacts)
    # composite carries subject/site data and no per-CRA artifact
    ctx.imports[COMPOSITE_KEY] = _batch(COMPOSITE_KEY, "other", None)

    logger.debug(
        "NORMALIZE_IMPORTS_BUILT sources=%s",
        ",".join(key for key in ctx.imports),
    )
