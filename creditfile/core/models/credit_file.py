"""CreditFile document models.

Enum-valued fields are typed ``str`` on purpose so a document carrying an
out-of-vocabulary value can still be loaded and reported on by
:mod:`creditfile.validation`. Cross-entity references are plain id strings.
Amounts are integer minor currency units; dates are ``YYYY-MM-DD``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RawArtifact(BaseModel):
    artifact_id: str
    artifact_type: str
    sha256: Optional[str] = None
    uri: Optional[str] = None


class ImportBatch(BaseModel):
    import_id: str
    imported_at: str
    currency_code: Optional[str] = None
    source_system: str
    source_wrapper: Optional[str] = None
    acquisition_method: str
    mapping_version: Optional[str] = None
    raw_artifacts: Optional[List[RawArtifact]] = None


class PersonName(BaseModel):
    name_id: str
    full_name: Optional[str] = None
    name_type: Optional[str] = None
    source_import_id: str


class DateOfBirthRecord(BaseModel):
    dob: str
    source_import_id: str


class Subject(BaseModel):
    subject_id: str
    names: Optional[List[PersonName]] = None
    dates_of_birth: Optional[List[DateOfBirthRecord]] = None


class Organisation(BaseModel):
    organisation_id: str
    name: str
    roles: List[str] = Field(default_factory=list)
    source_import_id: Optional[str] = None


class Address(BaseModel):
    address_id: str
    line_1: Optional[str] = None
    line_2: Optional[str] = None
    town_city: Optional[str] = None
    postcode: Optional[str] = None
    country_code: Optional[str] = None
    normalized_single_line: Optional[str] = None


class AddressAssociation(BaseModel):
    association_id: str
    address_id: str
    role: Optional[str] = None
    source_import_id: str


class AddressLink(BaseModel):
    address_link_id: str
    from_address_id: str
    to_address_id: str
    source_import_id: str


class TradelineIdentifier(BaseModel):
    identifier_id: str
    identifier_type: str
    value: str
    source_import_id: str


class TradelineTerms(BaseModel):
    terms_id: str
    term_type: Optional[str] = None
    term_count: Optional[int] = None
    term_payment_amount: Optional[int] = None
    source_import_id: str


class TradelineSnapshot(BaseModel):
    snapshot_id: str
    as_of_date: Optional[str] = None
    status_current: Optional[str] = None
    current_balance: Optional[int] = None
    opening_balance: Optional[int] = None
    credit_limit: Optional[int] = None
    source_import_id: str


class TradelineMonthlyMetric(BaseModel):
    monthly_metric_id: str
    period: str
    metric_type: str
    value_numeric: Optional[int] = None
    value_text: Optional[str] = None
    canonical_status: Optional[str] = None
    raw_status_code: Optional[str] = None
    source_import_id: str


class TradelineEvent(BaseModel):
    event_id: str
    event_type: str
    event_date: str
    amount: Optional[int] = None
    source_import_id: str


class Tradeline(BaseModel):
    tradeline_id: str
    canonical_id: Optional[str] = None
    furnisher_organisation_id: Optional[str] = None
    furnisher_name_raw: Optional[str] = None
    account_type: Optional[str] = None
    opened_at: Optional[str] = None
    closed_at: Optional[str] = None
    status_current: Optional[str] = None
    regular_payment_amount: Optional[int] = None
    identifiers: Optional[List[TradelineIdentifier]] = None
    terms: Optional[TradelineTerms] = None
    snapshots: Optional[List[TradelineSnapshot]] = None
    monthly_metrics: Optional[List[TradelineMonthlyMetric]] = None
    events: Optional[List[TradelineEvent]] = None
    source_import_id: str


class SearchRecord(BaseModel):
    search_id: str
    searched_at: Optional[str] = None
    organisation_id: Optional[str] = None
    organisation_name_raw: Optional[str] = None
    search_type: Optional[str] = None
    visibility: Optional[str] = None
    input_name: Optional[str] = None
    input_address_id: Optional[str] = None
    purpose_text: Optional[str] = None
    source_import_id: str


class CreditScore(BaseModel):
    score_id: str
    score_type: Optional[str] = None
    score_name: Optional[str] = None
    score_value: Optional[int] = None
    score_min: Optional[int] = None
    score_max: Optional[int] = None
    calculated_at: Optional[str] = None
    source_import_id: str


class ElectoralRollEntry(BaseModel):
    electoral_entry_id: str
    address_id: Optional[str] = None
    name_on_register: Optional[str] = None
    change_type: Optional[str] = None
    marketing_opt_out: Optional[bool] = None
    source_import_id: str


class FinancialAssociate(BaseModel):
    associate_id: str
    associate_name: Optional[str] = None
    relationship_basis: Optional[str] = None
    status: Optional[str] = None
    confirmed_at: Optional[str] = None
    source_import_id: str


class PublicRecord(BaseModel):
    public_record_id: str
    record_type: Optional[str] = None
    court_or_register: Optional[str] = None
    amount: Optional[int] = None
    recorded_at: Optional[str] = None
    satisfied_at: Optional[str] = None
    status: Optional[str] = None
    address_id: Optional[str] = None
    source_import_id: str


class NoticeOfCorrection(BaseModel):
    notice_id: str
    text: Optional[str] = None
    created_at: Optional[str] = None
    scope: Optional[str] = None
    source_import_id: str


class FraudMarker(BaseModel):
    fraud_marker_id: str
    scheme: Optional[str] = None
    marker_type: Optional[str] = None
    placed_at: Optional[str] = None
    expires_at: Optional[str] = None
    address_scope: Optional[str] = None
    address_id: Optional[str] = None
    source_import_id: str


class CreditFile(BaseModel):
    schema_version: str
    file_id: str
    subject_id: str
    created_at: str
    currency_code: Optional[str] = None
    imports: List[ImportBatch] = Field(default_factory=list)
    subject: Subject
    organisations: List[Organisation] = Field(default_factory=list)
    addresses: List[Address] = Field(default_factory=list)
    address_associations: List[AddressAssociation] = Field(default_factory=list)
    address_links: List[AddressLink] = Field(default_factory=list)
    financial_associates: List[FinancialAssociate] = Field(default_factory=list)
    electoral_roll_entries: List[ElectoralRollEntry] = Field(default_factory=list)
    tradelines: List[Tradeline] = Field(default_factory=list)
    searches: List[SearchRecord] = Field(default_factory=list)
    credit_scores: List[CreditScore] = Field(default_factory=list)
    public_records: List[PublicRecord] = Field(default_factory=list)
    notices_of_correction: List[NoticeOfCorrection] = Field(default_factory=list)
    fraud_markers: List[FraudMarker] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize without ``None`` fields (the wire form)."""

        return self.model_dump(mode="json", exclude_none=True)


# Collection attribute -> summary key.
ENTITY_COLLECTIONS = (
    "addresses",
    "address_associations",
    "address_links",
    "organisations",
    "tradelines",
    "searches",
    "credit_scores",
    "public_records",
    "electoral_roll_entries",
    "financial_associates",
    "fraud_markers",
    "notices_of_correction",
)


__all__ = [
    "Address",
    "AddressAssociation",
    "AddressLink",
    "CreditFile",
    "CreditScore",
    "DateOfBirthRecord",
    "ENTITY_COLLECTIONS",
    "ElectoralRollEntry",
    "FinancialAssociate",
    "FraudMarker",
    "ImportBatch",
    "NoticeOfCorrection",
    "Organisation",
    "PersonName",
    "PublicRecord",
    "RawArtifact",
    "SearchRecord",
    "Subject",
    "Tradeline",
    "TradelineEvent",
    "TradelineIdentifier",
    "TradelineMonthlyMetric",
    "TradelineSnapshot",
    "TradelineTerms",
]
