import pytest

from creditfile.core.mapping.mappers import (
    lookup,
    map_account_status,
    map_account_type,
    map_address_role,
    map_electoral_change_type,
    map_fraud_address_scope,
    map_fraud_marker_type,
    map_payment_code,
    map_payment_text,
    map_public_record_status,
    map_public_record_type,
    map_search_section,
    map_search_type,
    map_source_system,
)


def test_account_type_uses_owning_source_table():
    mapped = map_account_type("Budget Card / Revolving Credit", "equifax")
    assert mapped.value == "budget_account"
    assert mapped.warning is None


def test_account_type_falls_back_to_other_sources():
    # "Hire Purchase" only appears in the TransUnion table
    mapped = map_account_type("hire purchase", "equifax")
    assert mapped.value == "secured_loan"
    assert mapped.warning is None


def test_unknown_account_type_defaults_to_other_with_warning():
    mapped = map_account_type("Spaceship Lease", "experian")

    assert mapped.value == "other"
    assert mapped.warning is not None
    assert mapped.warning.raw_value == "Spaceship Lease"
    assert mapped.warning.source_system == "experian"
    assert mapped.warning.domain == "tradelines"


def test_account_status_table_hint_and_passthrough():
    assert map_account_status("Up to date with payments", "equifax").value == "up_to_date"
    assert map_account_status("Account closed - settled", "equifax").value == "settled"
    assert map_account_status("Inactive", "equifax").value == "inactive"
    assert map_account_status("Account inactive", "transunion").value == "inactive"
    assert map_account_status("Active", "equifax").value == "up_to_date"

    odd = map_account_status("Something odd", "experian")
    assert odd.value == "Something odd"
    assert odd.warning is not None

    assert map_account_status("   ", "equifax").value is None


@pytest.mark.parametrize(
    "code, source, expected",
    [
        ("0", "equifax", "up_to_date"),
        ("D", "equifax", "default"),
        ("UC", "transunion", "no_update"),
        ("uc", "transunion", "no_update"),
        ("W", "transunion", "written_off"),
    ],
)
def test_payment_codes(code, source, expected):
    mapped = map_payment_code(code, source)
    assert mapped.value == expected
    assert mapped.warning is None


def test_unknown_payment_code_is_unknown_with_warning():
    mapped = map_payment_code("Z9", "equifax")
    assert mapped.value == "unknown"
    assert mapped.warning.raw_value == "Z9"


def test_payment_text_exact_and_folded():
    assert map_payment_text("Clean Payment").value == "up_to_date"
    assert map_payment_text("  clean   payment ").value == "up_to_date"
    assert map_payment_text("Late Payment").value == "in_arrears"


def test_unrecognised_payment_text_is_unknown_and_keeps_raw_text():
    mapped = map_payment_text("Something Weird")

    assert mapped.value == "unknown"
    assert mapped.warning is not None
    assert mapped.warning.raw_value == "Something Weird"
    assert "Something Weird" in mapped.warning.message


def test_search_type_purpose_mapping():
    mapped = map_search_type("Credit Application", "equifax")
    assert (mapped.value.search_type, mapped.value.visibility) == ("credit_application", "hard")

    coded = map_search_type("AF", "transunion")
    assert coded.value.search_type == "credit_application"

    unknown = map_search_type("Spurious", "experian")
    assert (unknown.value.search_type, unknown.value.visibility) == ("other", "unknown")
    assert unknown.warning is not None


def test_search_section_is_always_reported_as_info():
    hard = map_search_section("hard", "equifax")
    soft = map_search_section("soft")

    assert (hard.value.search_type, hard.value.visibility) == ("credit_application", "hard")
    assert (soft.value.search_type, soft.value.visibility) == ("other", "soft")
    assert hard.warning.severity == "info"
    assert soft.warning.severity == "info"


def test_address_role_lookup_substring_and_position():
    assert map_address_role("Current Address", "equifax", 3).value == "current"
    assert map_address_role("Address history - previous", "experian", 0).value == "previous"
    assert map_address_role(None, None, 0).value == "current"
    assert map_address_role(None, None, 2).value == "previous"

    silent = map_address_role("addr-7", "equifax", 1)
    assert silent.value == "previous"
    assert silent.warning is None

    explicit = map_address_role("Mystery", None, 0, explicit=True)
    assert explicit.value == "current"
    assert explicit.warning is not None


def test_electoral_change_type():
    assert map_electoral_change_type("Added at the address").value == "added"
    assert map_electoral_change_type("Registered").value == "added"
    assert map_electoral_change_type("N/A").value == "none"

    unknown = map_electoral_change_type("Queried")
    assert unknown.value == "unknown"
    assert unknown.warning is not None


def test_source_system_mapping():
    assert map_source_system("Equifax Ltd").value == "equifax"
    assert map_source_system("Callcredit").value == "transunion"
    assert map_source_system("EXPERIAN").value == "experian"

    unknown = map_source_system("Crediva")
    assert unknown.value == "other"
    assert unknown.warning.raw_value == "Crediva"


def test_public_record_and_fraud_mappers():
    assert map_public_record_type("County Court Judgment", None).value == "ccj"
    assert map_public_record_status("Satisfied", None).value == "satisfied"
    assert map_public_record_type("Parking fine", None).value == "other"
    assert map_fraud_marker_type("Protective Registration", None).value == "protective_registration"
    assert map_fraud_address_scope("Whole file", None).value == "file"


def test_lookup_returns_none_for_blank_or_unknown():
    assert lookup("account_type", "", "equifax") is None
    assert lookup("account_type", None, "equifax") is None
    assert lookup("account_type", "nothing like it", "equifax") is None
