from .credit_file import (
    ENTITY_COLLECTIONS,
    Address,
    AddressAssociation,
    AddressLink,
    CreditFile,
    CreditScore,
    DateOfBirthRecord,
    ElectoralRollEntry,
    FinancialAssociate,
    FraudMarker,
    ImportBatch,
    NoticeOfCorrection,
    Organisation,
    PersonName,
    PublicRecord,
    RawArtifact,
    SearchRecord,
    Subject,
    Tradeline,
    TradelineEvent,
    TradelineIdentifier,
    TradelineMonthlyMetric,
    TradelineSnapshot,
    TradelineTerms,
)
from .raw import ExtractionMetadata, PageInfo, RawExtractedData, RawField, RawSection
from .result import NormalizationResult, NormalizationWarning

__all__ = [
    "ENTITY_COLLECTIONS",
    "Address",
    "AddressAssociation",
    "AddressLink",
    "CreditFile",
    "CreditScore",
    "DateOfBirthRecord",
    "ElectoralRollEntry",
    "ExtractionMetadata",
    "FinancialAssociate",
    "FraudMarker",
    "ImportBatch",
    "NormalizationResult",
    "NormalizationWarning",
    "NoticeOfCorrection",
    "Organisation",
    "PageInfo",
    "PersonName",
    "PublicRecord",
    "RawArtifact",
    "RawExtractedData",
    "RawField",
    "RawSection",
    "SearchRecord",
    "Subject",
    "Tradeline",
    "TradelineEvent",
    "TradelineIdentifier",
    "TradelineMonthlyMetric",
    "TradelineSnapshot",
    "TradelineTerms",
]
