"""Raw extraction records handed over by site adapters.

Adapters emit camelCase JSON (``sourceSystem``, ``groupKey``, ``tableIndex``);
every model here accepts those wire names as well as the snake_case field
names.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from creditfile.core.taxonomy.vocabulary import CONFIDENCE_LEVELS

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
    extra="ignore",
)


class RawField(BaseModel):
    name: str
    value: str = ""
    group_key: Optional[str] = None
    confidence: Optional[str] = None
    table_index: Optional[int] = None

    model_config = _WIRE_CONFIG

    @field_validator("value", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("group_key", mode="before")
    @classmethod
    def _blank_group_key(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return None
        lowered = value.strip().lower()
        return lowered if lowered in CONFIDENCE_LEVELS else None


class RawSection(BaseModel):
    domain: str
    source_system: Optional[str] = None
    fields: List[RawField] = Field(default_factory=list)

    model_config = _WIRE_CONFIG

    @field_validator("source_system", mode="before")
    @classmethod
    def _blank_source(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ExtractionMetadata(BaseModel):
    adapter_id: str = "unknown"
    adapter_version: str = "0.0.0"
    extracted_at: str = ""
    page_url: Optional[str] = None
    source_filename: Optional[str] = None
    html_hash: Optional[str] = None
    artifact_type: Optional[str] = None
    source_systems_found: List[str] = Field(default_factory=list)

    model_config = _WIRE_CONFIG


class RawExtractedData(BaseModel):
    metadata: ExtractionMetadata = Field(default_factory=ExtractionMetadata)
    sections: List[RawSection] = Field(default_factory=list)

    model_config = _WIRE_CONFIG


class PageInfo(BaseModel):
    """Page-level facts shown before extraction (site, subject, report date)."""

    site_name: str = ""
    subject_name: Optional[str] = None
    report_date: Optional[str] = None
    providers: List[str] = Field(default_factory=list)

    model_config = _WIRE_CONFIG


__all__ = [
    "ExtractionMetadata",
    "PageInfo",
    "RawExtractedData",
    "RawField",
    "RawSection",
]
