"""Normalization engine: raw extracted sections -> CreditFile.

The run is a pure transform. Malformed input degrades to warnings; only an
internal fault inside a stage stops a CreditFile from being produced.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from creditfile.config import NormalizerConfig, coerce_config
from creditfile.core.mapping.rules import load_mapping_rules
from creditfile.core.models.raw import ExtractionMetadata, PageInfo, RawExtractedData, RawSection
from creditfile.core.models.result import NormalizationResult, NormalizationWarning
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.stages import STAGES, assemble_credit_file, summarize
from creditfile.core.normalize.stages.imports import SOURCE_WRAPPERS
from creditfile.core.taxonomy import DATA_DOMAINS

logger = logging.getLogger(__name__)


def _input_error(field: str, message: str) -> NormalizationWarning:
    return NormalizationWarning(domain="input", field=field, message=message, severity="error")


def coerce_raw_data(raw_data: Any, warnings: List[NormalizationWarning]) -> RawExtractedData:
    """Validate ``raw_data`` piecewise, dropping what cannot be read.

    Accepts a :class:`RawExtractedData` or its JSON-shaped mapping. Invalid
    metadata is replaced by empty metadata and invalid sections are dropped,
    each with an ``error`` warning.
    """

    if isinstance(raw_data, RawExtractedData):
        return raw_data
    if not isinstance(raw_data, Mapping):
        warnings.append(
            _input_error("raw_data", f"Expected an object, got {type(raw_data).__name__}")
        )
        return RawExtractedData()

    try:
        metadata = ExtractionMetadata.model_validate(raw_data.get("metadata") or {})
    except ValidationError as exc:
        warnings.append(
            _input_error("metadata", f"Invalid extraction metadata ({exc.error_count()} error(s))")
        )
        metadata = ExtractionMetadata()

    raw_sections = raw_data.get("sections") or []
    if not isinstance(raw_sections, list):
        warnings.append(_input_error("sections", "Expected a list of sections"))
        raw_sections = []

    sections: List[RawSection] = []
    for index, raw_section in enumerate(raw_sections):
        try:
            sections.append(RawSection.model_validate(raw_section))
        except ValidationError as exc:
            warnings.append(
                _input_error(
                    f"sections[{index}]",
                    f"Section {index} dropped ({exc.error_count()} validation error(s))",
                )
            )
    return RawExtractedData(metadata=metadata, sections=sections)


def _first_personal_value(sections: Iterable[RawSection], *names: str) -> Optional[str]:
    for section in sections:
        if section.domain != "personal_info":
            continue
        for raw in section.fields:
            if raw.name in names and raw.value.strip():
                return raw.value.strip()
    return None


def infer_page_info(data: RawExtractedData) -> PageInfo:
    """Page info for callers that did not supply one."""

    adapter_id = data.metadata.adapter_id
    return PageInfo(
        site_name=SOURCE_WRAPPERS.get(adapter_id, adapter_id),
        subject_name=_first_personal_value(data.sections, "subject-name", "name"),
        report_date=_first_personal_value(data.sections, "report-date", "report_date"),
        providers=list(data.metadata.source_systems_found),
    )


def _coerce_page_info(
    page_info: PageInfo | Mapping[str, Any] | None,
    data: RawExtractedData,
    warnings: List[NormalizationWarning],
) -> PageInfo:
    if isinstance(page_info, PageInfo):
        return page_info
    if page_info is None:
        return infer_page_info(data)
    try:
        return PageInfo.model_validate(page_info)
    except ValidationError as exc:
        warnings.append(
            NormalizationWarning(
                domain="input",
                field="page_info",
                message=f"Invalid page info ignored ({exc.error_count()} error(s)); inferred from raw data",
            )
        )
        return infer_page_info(data)


def _split(warnings: Iterable[NormalizationWarning]) -> tuple[list, list]:
    errors = [w for w in warnings if w.is_error()]
    rest = [w for w in warnings if not w.is_error()]
    return errors, rest


def normalize(
    raw_data: RawExtractedData | Mapping[str, Any],
    config: NormalizerConfig | Mapping[str, Any] | None = None,
    page_info: PageInfo | Mapping[str, Any] | None = None,
) -> NormalizationResult:
    """Turn raw extracted data into a :class:`NormalizationResult`.

    ``success`` is true when no ``error``-severity warning was recorded.
    Validators are not run here; see :mod:`creditfile.validation`.
    """

    input_warnings: List[NormalizationWarning] = []
    data = coerce_raw_data(raw_data, input_warnings)
    rejected: List[tuple[str, object]] = []
    settings = coerce_config(config, rejected)
    for key, raw_value in rejected:
        input_warnings.append(
            NormalizationWarning(
                domain="input",
                field=f"config.{key}",
                message=f"Invalid config value for {key} ignored; default used",
                raw_value=str(raw_value),
            )
        )
    info = _coerce_page_info(page_info, data, input_warnings)

    ctx = NormalizationContext(
        config=settings,
        metadata=data.metadata,
        page_info=info,
        rules=load_mapping_rules(),
        sections=list(data.sections),
    )
    ctx.warnings.extend(input_warnings)

    for index, section in enumerate(ctx.sections):
        if section.domain not in DATA_DOMAINS:
            ctx.warn(
                "input",
                f"sections[{index}].domain",
                f'Unsupported domain "{section.domain}" ignored',
                severity="info",
                raw_value=section.domain,
            )

    logger.info(
        "NORMALIZE_START adapter=%s sections=%d",
        data.metadata.adapter_id,
        len(ctx.sections),
    )

    stage = "start"
    try:
        for stage, builder in STAGES:
            builder(ctx)
        stage = "assemble"
        credit_file = assemble_credit_file(ctx)
    except Exception as exc:
        logger.exception("NORMALIZE_STAGE_FAILED stage=%s", stage)
        errors, rest = _split(ctx.warnings)
        errors.append(
            NormalizationWarning(
                domain="system",
                field=stage,
                message=f"Normalization failed in stage {stage}: {exc}",
                severity="error",
            )
        )
        return NormalizationResult(
            success=False,
            credit_file=None,
            summary=summarize(None),
            errors=errors,
            warnings=rest,
        )

    errors, rest = _split(ctx.warnings)
    result = NormalizationResult(
        success=not errors,
        credit_file=credit_file,
        summary=summarize(credit_file),
        errors=errors,
        warnings=rest,
    )
    logger.info(
        "NORMALIZE_DONE success=%s errors=%d warnings=%d",
        result.success,
        len(errors),
        len(rest),
    )
    return result


__all__ = ["coerce_raw_data", "infer_page_info", "normalize"]
