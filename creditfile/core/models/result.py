from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from creditfile.core.models.credit_file import CreditFile
from creditfile.core.taxonomy.vocabulary import Severity


class NormalizationWarning(BaseModel):
    """A diagnostic attached when a value cannot be canonicalized confidently.

    Validators reuse the same record with ``severity="error"``.
    """

    domain: str
    field: Optional[str] = None
    message: str
    severity: Severity = "warning"
    raw_value: Optional[str] = None
    source_system: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def is_error(self) -> bool:
        return self.severity == "error"


class NormalizationResult(BaseModel):
    success: bool
    credit_file: Optional[CreditFile] = None
    summary: Dict[str, int] = Field(default_factory=dict)
    errors: List[NormalizationWarning] = Field(default_factory=list)
    warnings: List[NormalizationWarning] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude_none=True)
        if self.credit_file is None:
            payload["credit_file"] = None
        return payload


__all__ = ["NormalizationResult", "NormalizationWarning"]
