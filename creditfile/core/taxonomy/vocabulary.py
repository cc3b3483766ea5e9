"""Canonical vocabulary for the CreditFile document.

Single source of truth for every enum-typed field. Mapping tables, mappers and
the schema validator all derive their allowed values from the tuples below.
"""

from __future__ import annotations

from typing import Dict, Literal, Tuple, get_args

SourceSystem = Literal["equifax", "transunion", "experian", "other"]
AcquisitionMethod = Literal["pdf_upload", "html_scrape", "api", "image", "other"]
ConfidenceLevel = Literal["low", "medium", "high"]
NameType = Literal["legal", "alias", "historical", "other"]
AddressAssociationRole = Literal[
    "current", "previous", "linked", "on_agreement", "search_input", "other"
]
FinancialAssociateRelationship = Literal["joint_account", "joint_application", "other"]
FinancialAssociateStatus = Literal["active", "disputed", "removed", "unknown"]
ElectoralChangeType = Literal["added", "amended", "deleted", "none", "unknown"]
OrganisationRole = Literal["furnisher", "searcher", "court_source", "fraud_agency", "other"]

TradelineAccountType = Literal[
    "credit_card",
    "mortgage",
    "secured_loan",
    "unsecured_loan",
    "current_account",
    "telecom",
    "utility",
    "rental",
    "budget_account",
    "insurance",
    "other",
    "unknown",
]
TradelineIdentifierType = Literal["masked_account_number", "provider_reference", "other"]
TradelineTermType = Literal["revolving", "installment", "mortgage", "rental", "other"]
TradelineMetricType = Literal[
    "payment_status", "balance", "credit_limit", "statement_balance", "payment_amount", "other"
]
CanonicalPaymentStatus = Literal[
    "up_to_date",
    "in_arrears",
    "arrangement",
    "settled",
    "default",
    "query",
    "gone_away",
    "no_update",
    "inactive",
    "written_off",
    "transferred",
    "repossession",
    "unknown",
]
TradelineEventType = Literal[
    "default",
    "delinquency",
    "satisfied",
    "settled",
    "arrangement_to_pay",
    "query",
    "gone_away",
    "written_off",
    "repossession",
    "other",
]

SearchType = Literal[
    "credit_application",
    "debt_collection",
    "quotation",
    "identity_check",
    "consumer_enquiry",
    "aml",
    "insurance_quote",
    "other",
]
SearchVisibility = Literal["hard", "soft", "unknown"]

PublicRecordType = Literal[
    "ccj", "judgment", "bankruptcy", "iva", "dro", "administration_order", "other"
]
PublicRecordStatus = Literal["active", "satisfied", "set_aside", "discharged", "unknown"]
NoticeScope = Literal["file", "address", "entity"]
FraudScheme = Literal["cifas", "other"]
FraudMarkerType = Literal["protective_registration", "victim_of_impersonation", "other"]
FraudAddressScope = Literal["current", "previous", "linked", "file", "unknown"]
CreditScoreType = Literal["credit_score", "affordability", "stability", "custom", "other"]
RawArtifactType = Literal["pdf", "html", "json", "image", "text", "other"]

Severity = Literal["info", "warning", "error"]

DataDomain = Literal[
    "personal_info",
    "addresses",
    "tradelines",
    "searches",
    "credit_scores",
    "public_records",
    "electoral_roll",
    "financial_associates",
    "fraud_markers",
    "notices_of_correction",
]

SOURCE_SYSTEMS: Tuple[str, ...] = get_args(SourceSystem)
ACQUISITION_METHODS: Tuple[str, ...] = get_args(AcquisitionMethod)
CONFIDENCE_LEVELS: Tuple[str, ...] = get_args(ConfidenceLevel)
NAME_TYPES: Tuple[str, ...] = get_args(NameType)
ADDRESS_ASSOCIATION_ROLES: Tuple[str, ...] = get_args(AddressAssociationRole)
FINANCIAL_ASSOCIATE_RELATIONSHIPS: Tuple[str, ...] = get_args(FinancialAssociateRelationship)
FINANCIAL_ASSOCIATE_STATUSES: Tuple[str, ...] = get_args(FinancialAssociateStatus)
ELECTORAL_CHANGE_TYPES: Tuple[str, ...] = get_args(ElectoralChangeType)
ORGANISATION_ROLES: Tuple[str, ...] = get_args(OrganisationRole)
TRADELINE_ACCOUNT_TYPES: Tuple[str, ...] = get_args(TradelineAccountType)
TRADELINE_IDENTIFIER_TYPES: Tuple[str, ...] = get_args(TradelineIdentifierType)
TRADELINE_TERM_TYPES: Tuple[str, ...] = get_args(TradelineTermType)
TRADELINE_METRIC_TYPES: Tuple[str, ...] = get_args(TradelineMetricType)
CANONICAL_PAYMENT_STATUSES: Tuple[str, ...] = get_args(CanonicalPaymentStatus)
TRADELINE_EVENT_TYPES: Tuple[str, ...] = get_args(TradelineEventType)
SEARCH_TYPES: Tuple[str, ...] = get_args(SearchType)
SEARCH_VISIBILITIES: Tuple[str, ...] = get_args(SearchVisibility)
PUBLIC_RECORD_TYPES: Tuple[str, ...] = get_args(PublicRecordType)
PUBLIC_RECORD_STATUSES: Tuple[str, ...] = get_args(PublicRecordStatus)
NOTICE_SCOPES: Tuple[str, ...] = get_args(NoticeScope)
FRAUD_SCHEMES: Tuple[str, ...] = get_args(FraudScheme)
FRAUD_MARKER_TYPES: Tuple[str, ...] = get_args(FraudMarkerType)
FRAUD_ADDRESS_SCOPES: Tuple[str, ...] = get_args(FraudAddressScope)
CREDIT_SCORE_TYPES: Tuple[str, ...] = get_args(CreditScoreType)
RAW_ARTIFACT_TYPES: Tuple[str, ...] = get_args(RawArtifactType)
SEVERITIES: Tuple[str, ...] = get_args(Severity)
DATA_DOMAINS: Tuple[str, ...] = get_args(DataDomain)

COMPOSITE_KEY = "composite"

# Vocabulary name -> allowed values; used to check mapping tables.
VOCABULARIES: Dict[str, Tuple[str, ...]] = {
    "source_system": SOURCE_SYSTEMS,
    "account_type": TRADELINE_ACCOUNT_TYPES,
    "payment_status": CANONICAL_PAYMENT_STATUSES,
    "search_type": SEARCH_TYPES,
    "search_visibility": SEARCH_VISIBILITIES,
    "address_role": ADDRESS_ASSOCIATION_ROLES,
    "electoral_change_type": ELECTORAL_CHANGE_TYPES,
    "public_record_type": PUBLIC_RECORD_TYPES,
    "public_record_status": PUBLIC_RECORD_STATUSES,
    "fraud_scheme": FRAUD_SCHEMES,
    "fraud_marker_type": FRAUD_MARKER_TYPES,
    "fraud_address_scope": FRAUD_ADDRESS_SCOPES,
}


def clamp_source_system(value: str | None) -> str:
    """Coerce a free-form source system tag into the canonical enum.

    Any unknown value resolves to ``"other"``.
    """

    if not isinstance(value, str):
        return "other"
    key = value.strip().lower()
    if key in SOURCE_SYSTEMS:
        return key
    return "other"
