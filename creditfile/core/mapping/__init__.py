"""Mapping tables and field mappers."""

from .mappers import (
    Mapped,
    SearchClass,
    map_account_status,
    map_account_type,
    map_address_role,
    map_electoral_change_type,
    map_fraud_address_scope,
    map_fraud_marker_type,
    map_fraud_scheme,
    map_payment_code,
    map_payment_text,
    map_public_record_status,
    map_public_record_type,
    map_search_section,
    map_search_type,
    map_source_system,
)
from .rules import MappingRules, MappingRulesError, load_mapping_rules

__all__ = [
    "Mapped",
    "MappingRules",
    "MappingRulesError",
    "SearchClass",
    "load_mapping_rules",
    "map_account_status",
    "map_account_type",
    "map_address_role",
    "map_electoral_change_type",
    "map_fraud_address_scope",
    "map_fraud_marker_type",
    "map_fraud_scheme",
    "map_payment_code",
    "map_payment_text",
    "map_public_record_status",
    "map_public_record_type",
    "map_search_section",
    "map_search_type",
    "map_source_system",
]
