"""Quality gates over a finished CreditFile.

Both validators are pure and independent; callers choose which to run.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from creditfile.core.models.credit_file import CreditFile
from creditfile.core.models.result import NormalizationResult, NormalizationWarning

from .referential import validate_referential_integrity
from .schema import CREDIT_FILE_SCHEMA, validate_schema


def validate_all(credit_file: CreditFile | Mapping[str, Any]) -> List[NormalizationWarning]:
    """Schema errors followed by referential-integrity errors."""

    return validate_schema(credit_file) + validate_referential_integrity(credit_file)


def apply_validation(result: NormalizationResult) -> NormalizationResult:
    """Return a copy of ``result`` with validator findings merged into ``errors``."""

    if result.credit_file is None:
        return result
    findings = validate_all(result.credit_file)
    if not findings:
        return result
    return result.model_copy(
        update={"errors": list(result.errors) + findings, "success": False}
    )


__all__ = [
    "CREDIT_FILE_SCHEMA",
    "apply_validation",
    "validate_all",
    "validate_referential_integrity",
    "validate_schema",
]
