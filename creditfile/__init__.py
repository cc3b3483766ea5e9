"""Credit file normalization and entity resolution."""

from __future__ import annotations

from creditfile.config import InvalidConfigError, NormalizerConfig, load_normalizer_config
from creditfile.core.mapping.rules import MappingRulesError, load_mapping_rules
from creditfile.core.models import (
    CreditFile,
    ExtractionMetadata,
    NormalizationResult,
    NormalizationWarning,
    PageInfo,
    RawExtractedData,
    RawField,
    RawSection,
)
from creditfile.core.normalize import normalize
from creditfile.validation import (
    validate_all,
    validate_referential_integrity,
    validate_schema,
)

__all__ = [
    "CreditFile",
    "ExtractionMetadata",
    "InvalidConfigError",
    "MappingRulesError",
    "NormalizationResult",
    "NormalizationWarning",
    "NormalizerConfig",
    "PageInfo",
    "RawExtractedData",
    "RawField",
    "RawSection",
    "load_mapping_rules",
    "load_normalizer_config",
    "normalize",
    "validate_all",
    "validate_referential_integrity",
    "validate_schema",
]
