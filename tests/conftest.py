import copy

import pytest

from creditfile.core.mapping.rules import clear_mapping_rules_cache

EXTRACTED_AT = "2025-09-09T10:00:00Z"


def raw_field(name, value, group_key=None, table_index=None):
    payload = {"name": name, "value": value}
    if group_key is not None:
        payload["groupKey"] = group_key
    if table_index is not None:
        payload["tableIndex"] = table_index
    return payload


def raw_section(domain, fields, source_system=None):
    payload = {"domain": domain, "fields": list(fields)}
    if source_system is not None:
        payload["sourceSystem"] = source_system
    return payload


def raw_document(sections, **metadata):
    meta = {
        "adapterId": "checkmyfile",
        "adapterVersion": "2.1.0",
        "extractedAt": EXTRACTED_AT,
        "pageUrl": "https://www.checkmyfile.com/report",
        "htmlHash": "5f2b9c0e",
        "artifactType": "html",
    }
    meta.update(metadata)
    return {"metadata": meta, "sections": list(sections)}


def grouped(group_key, **values):
    """Fields sharing one group key."""

    return [raw_field(name, value, group_key=group_key) for name, value in values.items()]


_BARCLAYCARD = "BARCLAYCARD - Credit Card - Ending 1234"

_MULTI_CRA = raw_document(
    [
        raw_section(
            "personal_info",
            [
                raw_field("subject-name", "Jane Smith"),
                raw_field("date-of-birth", "9 July 1986"),
            ],
        ),
        raw_section(
            "addresses",
            grouped("addr-0", address="1 High Street, Leeds, LS1 1AA", heading="Current Address")
            + grouped("addr-1", address="2 Low Road, York, YO1 7HH", heading="Previous Address"),
            source_system="Equifax",
        ),
        raw_section(
            "addresses",
            grouped("addr-0", address="1 high street,  leeds, ls1 1aa", heading="Current Address"),
            source_system="TransUnion",
        ),
        raw_section(
            "electoral_roll",
            [
                raw_field("electoral-roll", "Registered"),
                raw_field("address", "1 High Street, Leeds, LS1 1AA"),
            ],
            source_system="Equifax",
        ),
        raw_section(
            "tradelines",
            grouped(
                _BARCLAYCARD,
                balance="£500",
                limit="£1,200",
                opened="20 August 2020",
                status="Up to date with payments",
                payment_history_2025_07="Clean Payment",
                payment_history_2025_08="Clean Payment",
            ),
            source_system="Equifax",
        ),
        raw_section(
            "tradelines",
            grouped(
                _BARCLAYCARD,
                balance="£510",
                opened="20/08/2020",
                status="Up to date",
            ),
            source_system="TransUnion",
        ),
        raw_section(
            "searches",
            grouped(
                "hard-search-1",
                companyName="Tesco Bank",
                date="1 May 2025",
                purpose="Credit Application",
            ),
            source_system="Equifax",
        ),
        raw_section(
            "searches",
            grouped("soft-search-1", companyName="ClearScore Ltd", date="3 June 2025"),
            source_system="Experian",
        ),
        raw_section("credit_scores", [raw_field("score", "950")], source_system="Equifax"),
        raw_section("credit_scores", [raw_field("score", "800")]),
    ],
    sourceSystemsFound=["Equifax", "TransUnion", "Experian"],
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    for key in (
        "CREDITFILE_DEFAULT_SUBJECT_ID",
        "CREDITFILE_CURRENCY_CODE",
        "CREDITFILE_SCHEMA_VERSION",
        "CREDITFILE_MAPPING_RULES_PATH",
    ):
        monkeypatch.delenv(key, raising=False)
    clear_mapping_rules_cache()
    yield
    clear_mapping_rules_cache()


@pytest.fixture
def multi_cra_raw():
    return copy.deepcopy(_MULTI_CRA)


@pytest.fixture
def barclaycard_key():
    return _BARCLAYCARD


@pytest.fixture
def make_field():
    return raw_field


@pytest.fixture
def make_section():
    return raw_section


@pytest.fixture
def make_document():
    return raw_document


@pytest.fixture
def make_group():
    return grouped
