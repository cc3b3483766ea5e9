from creditfile.core.normalize import normalize


def test_batches_follow_declaration_order_and_carry_provenance(multi_cra_raw):
    credit_file = normalize(multi_cra_raw).credit_file

    equifax, transunion, experian, composite = credit_file.imports
    assert [b.source_system for b in (equifax, transunion, experian)] == [
        "equifax",
        "transunion",
        "experian",
    ]
    assert composite.source_system == "other"
    assert composite.raw_artifacts is None

    assert equifax.imported_at == "2025-09-09T10:00:00Z"
    assert equifax.acquisition_method == "html_scrape"
    assert equifax.source_wrapper == "CheckMyFile"
    assert equifax.mapping_version == "checkmyfile-2.1.0"
    assert equifax.currency_code == "GBP"
    (artifact,) = equifax.raw_artifacts
    assert artifact.artifact_type == "html"
    assert artifact.sha256 == "5f2b9c0e"
    assert artifact.uri == "https://www.checkmyfile.com/report"

    assert len({b.import_id for b in credit_file.imports}) == 4
    assert credit_file.created_at == "2025-09-09T10:00:00Z"


def test_pdf_artifact_is_a_pdf_upload(make_document, make_section, make_field):
    raw = make_document(
        [make_section("credit_scores", [make_field("score", "420")], source_system="Equifax")],
        adapterId="equifax-pdf",
        artifactType="PDF",
        pageUrl=None,
        sourceFilename="equifax-report.pdf",
    )

    credit_file = normalize(raw).credit_file
    equifax = credit_file.imports[0]

    assert equifax.acquisition_method == "pdf_upload"
    assert equifax.source_wrapper == "Equifax"
    assert equifax.raw_artifacts[0].artifact_type == "pdf"
    assert equifax.raw_artifacts[0].uri == "equifax-report.pdf"


def test_unknown_source_tag_maps_to_other_with_warning(make_document, make_section, make_field):
    raw = make_document(
        [make_section("credit_scores", [make_field("score", "420")], source_system="Crediva")]
    )

    result = normalize(raw)

    assert [b.source_system for b in result.credit_file.imports] == ["other", "other"]
    assert any(w.domain == "imports" and w.raw_value == "Crediva" for w in result.warnings)


def test_missing_timestamp_uses_epoch_with_warning(make_document):
    result = normalize(make_document([], extractedAt=""))

    assert result.credit_file.imports[0].imported_at == "1970-01-01T00:00:00Z"
    assert result.credit_file.created_at == "1970-01-01T00:00:00Z"
    assert any(w.field == "metadata.extracted_at" for w in result.warnings)
