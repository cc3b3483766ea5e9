"""JSON schema for the CreditFile document and a validator built on it."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from jsonschema import Draft7Validator

from creditfile.core.models.credit_file import CreditFile
from creditfile.core.models.result import NormalizationWarning
from creditfile.core.normalize.ids import ID_PATTERN
from creditfile.core.taxonomy.vocabulary import (
    ACQUISITION_METHODS,
    ADDRESS_ASSOCIATION_ROLES,
    CANONICAL_PAYMENT_STATUSES,
    CREDIT_SCORE_TYPES,
    ELECTORAL_CHANGE_TYPES,
    FINANCIAL_ASSOCIATE_RELATIONSHIPS,
    FINANCIAL_ASSOCIATE_STATUSES,
    FRAUD_ADDRESS_SCOPES,
    FRAUD_MARKER_TYPES,
    FRAUD_SCHEMES,
    NAME_TYPES,
    NOTICE_SCOPES,
    ORGANISATION_ROLES,
    PUBLIC_RECORD_STATUSES,
    PUBLIC_RECORD_TYPES,
    RAW_ARTIFACT_TYPES,
    SEARCH_TYPES,
    SEARCH_VISIBILITIES,
    SOURCE_SYSTEMS,
    TRADELINE_ACCOUNT_TYPES,
    TRADELINE_EVENT_TYPES,
    TRADELINE_IDENTIFIER_TYPES,
    TRADELINE_METRIC_TYPES,
    TRADELINE_TERM_TYPES,
)

_ID: Dict[str, Any] = {"type": "string", "pattern": ID_PATTERN.pattern}
_DATE: Dict[str, Any] = {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}$"}
_MONTH: Dict[str, Any] = {"type": "string", "pattern": r"^\d{4}-(0[1-9]|1[0-2])$"}
_TEXT: Dict[str, Any] = {"type": "string"}
_NON_EMPTY: Dict[str, Any] = {"type": "string", "minLength": 1}
_AMOUNT: Dict[str, Any] = {"type": "integer"}


def _enum(values: Sequence[str]) -> Dict[str, Any]:
    return {"enum": list(values)}


def _entity(required: List[str], properties: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "required": required, "properties": properties}
    schema.update(extra)
    return schema


def _array(items: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "array", "items": items}
    schema.update(extra)
    return schema


def _one_of_present(*keys: str) -> List[Dict[str, Any]]:
    return [{"required": [key]} for key in keys]


_IMPORT = _entity(
    ["import_id", "imported_at", "source_system", "acquisition_method"],
    {
        "import_id": _ID,
        "imported_at": _NON_EMPTY,
        "currency_code": {"type": "string", "pattern": r"^[A-Z]{3}$"},
        "source_system": _enum(SOURCE_SYSTEMS),
        "source_wrapper": _TEXT,
        "acquisition_method": _enum(ACQUISITION_METHODS),
        "mapping_version": _TEXT,
        "raw_artifacts": _array(
            _entity(
                ["artifact_id", "artifact_type"],
                {
                    "artifact_id": _ID,
                    "artifact_type": _enum(RAW_ARTIFACT_TYPES),
                    "sha256": _TEXT,
                    "uri": _TEXT,
                },
            )
        ),
    },
)

_SUBJECT = _entity(
    ["subject_id"],
    {
        "subject_id": _ID,
        "names": _array(
            _entity(
                ["name_id", "source_import_id"],
                {
                    "name_id": _ID,
                    "full_name": _TEXT,
                    "name_type": _enum(NAME_TYPES),
                    "source_import_id": _ID,
                },
            )
        ),
        "dates_of_birth": _array(
            _entity(["dob", "source_import_id"], {"dob": _DATE, "source_import_id": _ID})
        ),
    },
)

_ORGANISATION = _entity(
    ["organisation_id", "name"],
    {
        "organisation_id": _ID,
        "name": _NON_EMPTY,
        "roles": _array(_enum(ORGANISATION_ROLES)),
        "source_import_id": _ID,
    },
)

_ADDRESS = _entity(
    ["address_id"],
    {
        "address_id": _ID,
        "line_1": _TEXT,
        "line_2": _TEXT,
        "town_city": _TEXT,
        "postcode": _TEXT,
        "country_code": {"type": "string", "pattern": r"^[A-Z]{2}$"},
        "normalized_single_line": _TEXT,
    },
)

_ASSOCIATION = _entity(
    ["association_id", "address_id", "source_import_id"],
    {
        "association_id": _ID,
        "address_id": _ID,
        "role": _enum(ADDRESS_ASSOCIATION_ROLES),
        "source_import_id": _ID,
    },
)

_LINK = _entity(
    ["address_link_id", "from_address_id", "to_address_id", "source_import_id"],
    {
        "address_link_id": _ID,
        "from_address_id": _ID,
        "to_address_id": _ID,
        "source_import_id": _ID,
    },
)

_TRADELINE = _entity(
    ["tradeline_id", "source_import_id"],
    {
        "tradeline_id": _ID,
        "canonical_id": _TEXT,
        "furnisher_organisation_id": _ID,
        "furnisher_name_raw": _NON_EMPTY,
        "account_type": _enum(TRADELINE_ACCOUNT_TYPES),
        "opened_at": _DATE,
        "closed_at": _DATE,
        "status_current": _TEXT,
        "regular_payment_amount": _AMOUNT,
        "identifiers": _array(
            _entity(
                ["identifier_id", "identifier_type", "value", "source_import_id"],
                {
                    "identifier_id": _ID,
                    "identifier_type": _enum(TRADELINE_IDENTIFIER_TYPES),
                    "value": _NON_EMPTY,
                    "source_import_id": _ID,
                },
            )
        ),
        "terms": _entity(
            ["terms_id", "source_import_id"],
            {
                "terms_id": _ID,
                "term_type": _enum(TRADELINE_TERM_TYPES),
                "term_count": {"type": "integer", "minimum": 0},
                "term_payment_amount": _AMOUNT,
                "source_import_id": _ID,
            },
        ),
        "snapshots": _array(
            _entity(
                ["snapshot_id", "source_import_id"],
                {
                    "snapshot_id": _ID,
                    "as_of_date": _DATE,
                    "status_current": _TEXT,
                    "current_balance": _AMOUNT,
                    "opening_balance": _AMOUNT,
                    "credit_limit": _AMOUNT,
                    "source_import_id": _ID,
                },
            )
        ),
        "monthly_metrics": _array(
            _entity(
                ["monthly_metric_id", "period", "metric_type", "source_import_id"],
                {
                    "monthly_metric_id": _ID,
                    "period": _MONTH,
                    "metric_type": _enum(TRADELINE_METRIC_TYPES),
                    "value_numeric": _AMOUNT,
                    "value_text": _TEXT,
                    "canonical_status": _enum(CANONICAL_PAYMENT_STATUSES),
                    "raw_status_code": _TEXT,
                    "source_import_id": _ID,
                },
                anyOf=_one_of_present("value_numeric", "value_text", "raw_status_code"),
            )
        ),
        "events": _array(
            _entity(
                ["event_id", "event_type", "event_date", "source_import_id"],
                {
                    "event_id": _ID,
                    "event_type": _enum(TRADELINE_EVENT_TYPES),
                    "event_date": _DATE,
                    "amount": _AMOUNT,
                    "source_import_id": _ID,
                },
            )
        ),
        "source_import_id": _ID,
    },
    anyOf=_one_of_present("furnisher_organisation_id", "furnisher_name_raw"),
)

_SEARCH = _entity(
    ["search_id", "source_import_id"],
    {
        "search_id": _ID,
        "searched_at": _DATE,
        "organisation_id": _ID,
        "organisation_name_raw": _NON_EMPTY,
        "search_type": _enum(SEARCH_TYPES),
        "visibility": _enum(SEARCH_VISIBILITIES),
        "input_name": _TEXT,
        "input_address_id": _ID,
        "purpose_text": _TEXT,
        "source_import_id": _ID,
    },
    anyOf=_one_of_present("organisation_id", "organisation_name_raw"),
)

_SCORE = _entity(
    ["score_id", "source_import_id"],
    {
        "score_id": _ID,
        "score_type": _enum(CREDIT_SCORE_TYPES),
        "score_name": _TEXT,
        "score_value": {"type": "integer"},
        "score_min": {"type": "integer"},
        "score_max": {"type": "integer"},
        "calculated_at": _DATE,
        "source_import_id": _ID,
    },
)

_ELECTORAL = _entity(
    ["electoral_entry_id", "source_import_id"],
    {
        "electoral_entry_id": _ID,
        "address_id": _ID,
        "name_on_register": _TEXT,
        "change_type": _enum(ELECTORAL_CHANGE_TYPES),
        "marketing_opt_out": {"type": ["boolean", "null"]},
        "source_import_id": _ID,
    },
)

_ASSOCIATE = _entity(
    ["associate_id", "source_import_id"],
    {
        "associate_id": _ID,
        "associate_name": _TEXT,
        "relationship_basis": _enum(FINANCIAL_ASSOCIATE_RELATIONSHIPS),
        "status": _enum(FINANCIAL_ASSOCIATE_STATUSES),
        "confirmed_at": _DATE,
        "source_import_id": _ID,
    },
)

_PUBLIC_RECORD = _entity(
    ["public_record_id", "source_import_id"],
    {
        "public_record_id": _ID,
        "record_type": _enum(PUBLIC_RECORD_TYPES),
        "court_or_register": _TEXT,
        "amount": _AMOUNT,
        "recorded_at": _DATE,
        "satisfied_at": _DATE,
        "status": _enum(PUBLIC_RECORD_STATUSES),
        "address_id": _ID,
        "source_import_id": _ID,
    },
)

_NOTICE = _entity(
    ["notice_id", "source_import_id"],
    {
        "notice_id": _ID,
        "text": _TEXT,
        "created_at": _DATE,
        "scope": _enum(NOTICE_SCOPES),
        "source_import_id": _ID,
    },
)

_FRAUD_MARKER = _entity(
    ["fraud_marker_id", "source_import_id"],
    {
        "fraud_marker_id": _ID,
        "scheme": _enum(FRAUD_SCHEMES),
        "marker_type": _enum(FRAUD_MARKER_TYPES),
        "placed_at": _DATE,
        "expires_at": _DATE,
        "address_scope": _enum(FRAUD_ADDRESS_SCOPES),
        "address_id": _ID,
        "source_import_id": _ID,
    },
)

CREDIT_FILE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["schema_version", "file_id", "subject_id", "created_at", "imports", "subject"],
    "properties": {
        "schema_version": _NON_EMPTY,
        "file_id": _ID,
        "subject_id": _ID,
        "created_at": _NON_EMPTY,
        "currency_code": {"type": "string", "pattern": r"^[A-Z]{3}$"},
        "imports": _array(_IMPORT, minItems=1),
        "subject": _SUBJECT,
        "organisations": _array(_ORGANISATION),
        "addresses": _array(_ADDRESS),
        "address_associations": _array(_ASSOCIATION),
        "address_links": _array(_LINK),
        "financial_associates": _array(_ASSOCIATE),
        "electoral_roll_entries": _array(_ELECTORAL),
        "tradelines": _array(_TRADELINE),
        "searches": _array(_SEARCH),
        "credit_scores": _array(_SCORE),
        "public_records": _array(_PUBLIC_RECORD),
        "notices_of_correction": _array(_NOTICE),
        "fraud_markers": _array(_FRAUD_MARKER),
    },
}

_VALIDATOR = Draft7Validator(CREDIT_FILE_SCHEMA)


def as_document(credit_file: CreditFile | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(credit_file, CreditFile):
        return credit_file.model_dump(mode="json", exclude_none=True)
    return credit_file


def _path(parts: Sequence[Any]) -> str:
    text = ""
    for part in parts:
        if isinstance(part, int):
            text += f"[{part}]"
        else:
            text += f".{part}" if text else str(part)
    return text or "$"


def _message(error: Any) -> str:
    if error.validator == "anyOf":
        keys = [next(iter(option["required"])) for option in error.validator_value]
        return f"one of {', '.join(keys)} is required"
    return error.message


def validate_schema(credit_file: CreditFile | Mapping[str, Any]) -> List[NormalizationWarning]:
    """Check required fields, id/date formats and enum membership.

    Cross-entity references are not checked here.
    """

    document = as_document(credit_file)
    found = sorted(
        _VALIDATOR.iter_errors(document),
        key=lambda err: [str(p) for p in err.absolute_path],
    )
    errors: List[NormalizationWarning] = []
    for error in found:
        parts = list(error.absolute_path)
        domain = str(parts[0]) if parts else "root"
        errors.append(
            NormalizationWarning(
                domain=domain,
                field=_path(parts),
                message=_message(error),
                severity="error",
            )
        )
    return errors


__all__ = ["CREDIT_FILE_SCHEMA", "as_document", "validate_schema"]
