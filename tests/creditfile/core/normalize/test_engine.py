import logging

import creditfile.core.normalize.engine as engine
from creditfile.core.models.raw import PageInfo, RawExtractedData
from creditfile.core.normalize import normalize
from creditfile.validation import validate_all


def _by_source(credit_file):
    return {batch.source_system: batch.import_id for batch in credit_file.imports}


def test_empty_input_produces_minimal_file():
    result = normalize({})

    assert result.success is True
    assert result.errors == []
    credit_file = result.credit_file
    assert credit_file is not None
    assert [batch.source_system for batch in credit_file.imports] == ["other"]
    assert credit_file.created_at == "1970-01-01T00:00:00Z"
    assert credit_file.subject_id == "subject:default"
    assert credit_file.tradelines == []
    assert all(count == 0 for count in result.summary.values())
    assert any(w.field == "metadata.extracted_at" for w in result.warnings)
    assert validate_all(credit_file) == []


def test_model_input_is_accepted():
    result = normalize(RawExtractedData())
    assert result.success is True


def test_multi_cra_report(multi_cra_raw):
    result = normalize(multi_cra_raw)

    assert result.success is True
    assert result.errors == []
    credit_file = result.credit_file
    imports = _by_source(credit_file)
    assert list(imports) == ["equifax", "transunion", "experian", "other"]

    assert result.summary["searches"] == 2
    assert result.summary["tradelines"] == 2
    assert result.summary["addresses"] == 2
    assert result.summary["address_associations"] == 3
    assert result.summary["organisations"] == 3
    assert result.summary["credit_scores"] == 2
    assert result.summary["electoral_roll_entries"] == 1
    assert result.summary["person_names"] == 1

    assert validate_all(credit_file) == []


def test_balance_is_minor_units_and_attributed_to_its_cra(multi_cra_raw):
    credit_file = normalize(multi_cra_raw).credit_file
    equifax_import = _by_source(credit_file)["equifax"]

    tradeline = credit_file.tradelines[0]
    assert tradeline.source_import_id == equifax_import
    assert tradeline.snapshots[0].current_balance == 50000
    assert tradeline.snapshots[0].credit_limit == 120000
    assert tradeline.snapshots[0].source_import_id == equifax_import


def test_same_account_from_two_cras_is_never_merged(multi_cra_raw):
    credit_file = normalize(multi_cra_raw).credit_file
    imports = _by_source(credit_file)

    equifax, transunion = credit_file.tradelines
    assert equifax.source_import_id == imports["equifax"]
    assert transunion.source_import_id == imports["transunion"]
    assert equifax.tradeline_id != transunion.tradeline_id
    assert equifax.canonical_id == transunion.canonical_id
    assert equifax.furnisher_organisation_id == transunion.furnisher_organisation_id


def test_address_seen_by_two_cras_is_one_address_with_two_associations(multi_cra_raw):
    credit_file = normalize(multi_cra_raw).credit_file
    imports = _by_source(credit_file)

    high_street = next(a for a in credit_file.addresses if a.postcode == "LS1 1AA")
    associations = [
        a for a in credit_file.address_associations if a.address_id == high_street.address_id
    ]
    assert sorted(a.source_import_id for a in associations) == sorted(
        [imports["equifax"], imports["transunion"]]
    )
    assert {a.role for a in associations} == {"current"}


def test_normalization_is_idempotent(multi_cra_raw):
    first = normalize(multi_cra_raw)
    second = normalize(multi_cra_raw)

    assert first.to_dict() == second.to_dict()


def test_descriptive_payment_history(make_document, make_section, make_group):
    raw = make_document(
        [
            make_section(
                "tradelines",
                make_group(
                    "HALIFAX - Loan - Ending 9876",
                    payment_history_2025_01="Clean Payment",
                    payment_history_2025_02="Something Weird",
                ),
                source_system="Equifax",
            )
        ]
    )

    result = normalize(raw)
    metrics = result.credit_file.tradelines[0].monthly_metrics

    assert [(m.period, m.canonical_status) for m in metrics] == [
        ("2025-01", "up_to_date"),
        ("2025-02", "unknown"),
    ]
    assert metrics[1].value_text == "Something Weird"
    weird = [w for w in result.warnings if w.raw_value == "Something Weird"]
    assert len(weird) == 1
    assert result.success is True


def test_malformed_sections_are_dropped_with_errors(make_document, make_section, make_field):
    raw = make_document(
        [
            {"domain": "tradelines", "fields": "not-a-list"},
            {"fields": []},
            make_section("credit_scores", [make_field("score", 612)], source_system="Experian"),
        ]
    )

    result = normalize(raw)

    assert result.success is False
    assert result.credit_file is not None
    assert [e.field for e in result.errors] == ["sections[0]", "sections[1]"]
    assert all(e.domain == "input" for e in result.errors)
    assert result.credit_file.credit_scores[0].score_value == 612


def test_non_mapping_input_is_an_input_error():
    result = normalize(["not", "an", "object"])

    assert result.success is False
    assert result.credit_file is not None
    assert result.errors[0].field == "raw_data"


def test_unsupported_domain_is_noted(make_document, make_section, make_field):
    raw = make_document([make_section("horoscope", [make_field("sign", "Leo")])])

    result = normalize(raw)

    assert result.success is True
    notes = [w for w in result.warnings if w.raw_value == "horoscope"]
    assert len(notes) == 1
    assert notes[0].severity == "info"


def test_internal_fault_returns_no_file(monkeypatch, caplog, multi_cra_raw):
    def _explode(ctx):
        raise RuntimeError("boom")

    stages = list(engine.STAGES)
    stages.insert(2, ("exploding", _explode))
    monkeypatch.setattr(engine, "STAGES", stages)

    with caplog.at_level(logging.ERROR, logger="creditfile.core.normalize.engine"):
        result = normalize(multi_cra_raw)

    assert result.success is False
    assert result.credit_file is None
    assert result.errors[-1].domain == "system"
    assert result.errors[-1].field == "exploding"
    assert "boom" in result.errors[-1].message
    assert all(count == 0 for count in result.summary.values())
    assert any("NORMALIZE_STAGE_FAILED" in r.getMessage() for r in caplog.records)
    assert result.to_dict()["credit_file"] is None


def test_config_and_page_info_overrides(multi_cra_raw):
    result = normalize(
        multi_cra_raw,
        config={"defaultSubjectId": "subj-7", "currencyCode": "EUR"},
        page_info=PageInfo(site_name="CheckMyFile", subject_name="J. Smith", report_date="9 September 2025"),
    )
    credit_file = result.credit_file

    assert credit_file.subject_id == "subj-7"
    assert credit_file.currency_code == "EUR"
    assert {batch.currency_code for batch in credit_file.imports} == {"EUR"}
    assert credit_file.subject.names[0].full_name == "J. Smith"
    assert {s.calculated_at for s in credit_file.credit_scores} == {"2025-09-09"}


def test_page_info_is_inferred_from_raw_data(multi_cra_raw):
    info = engine.infer_page_info(RawExtractedData.model_validate(multi_cra_raw))

    assert info.site_name == "CheckMyFile"
    assert info.subject_name == "Jane Smith"
    assert info.providers == ["Equifax", "TransUnion", "Experian"]


def test_invalid_config_values_fall_back_with_input_warnings(make_document):
    result = normalize(make_document([]), config={"defaultSubjectId": "s", "currencyCode": "pounds"})

    assert result.success is True
    assert result.credit_file.subject_id == "s"
    assert result.credit_file.currency_code == "GBP"
    (warning,) = [w for w in result.warnings if w.domain == "input"]
    assert warning.field == "config.currency_code"
    assert warning.raw_value == "pounds"

    blank = normalize(make_document([]), config={"defaultSubjectId": ""})
    assert blank.credit_file.subject_id == "subject:default"
    assert any(w.field == "config.default_subject_id" for w in blank.warnings)


def test_single_equifax_tradeline_with_prefixed_group_key(make_document, make_section, make_group):
    raw = make_document(
        [
            make_section(
                "tradelines",
                make_group(
                    "equifax:Test Bank - Credit Card - Ending 1234",
                    balance="£500",
                    limit="£1,000",
                    opened="20 August 2020",
                    status="Up to date with payments",
                    account_number="****1234",
                    **{"reported-until": "1 August 2025"},
                ),
                source_system="equifax",
            )
        ]
    )

    result = normalize(raw)
    credit_file = result.credit_file

    assert result.errors == []
    (tradeline,) = credit_file.tradelines
    assert tradeline.source_import_id == _by_source(credit_file)["equifax"]
    assert tradeline.snapshots[0].current_balance == 50000
    assert tradeline.furnisher_name_raw == "Test Bank"
    assert tradeline.account_type == "credit_card"
    assert "1234" in [i.value for i in tradeline.identifiers]
    assert validate_all(credit_file) == []
