from creditfile.core.models import (
    CreditFile,
    NormalizationResult,
    NormalizationWarning,
    RawExtractedData,
    Subject,
)


def test_wire_names_and_coercions():
    data = RawExtractedData.model_validate(
        {
            "metadata": {"adapterId": "checkmyfile", "sourceSystemsFound": ["Equifax"], "unknownKey": 1},
            "sections": [
                {
                    "domain": "credit_scores",
                    "sourceSystem": "  ",
                    "fields": [
                        {"name": "score", "value": 950, "groupKey": " ", "confidence": "HIGH"},
                        {"name": "note", "value": None, "confidence": "certain", "tableIndex": 2},
                    ],
                }
            ],
        }
    )

    assert data.metadata.adapter_id == "checkmyfile"
    assert data.metadata.adapter_version == "0.0.0"
    section = data.sections[0]
    assert section.source_system is None
    score, note = section.fields
    assert score.value == "950"
    assert score.group_key is None
    assert score.confidence == "high"
    assert note.value == ""
    assert note.confidence is None
    assert note.table_index == 2


def test_credit_file_wire_form_drops_none():
    credit_file = CreditFile(
        schema_version="1.0.0",
        file_id="file:1",
        subject_id="subject:default",
        created_at="1970-01-01T00:00:00Z",
        subject=Subject(subject_id="subject:default"),
    )

    document = credit_file.to_dict()

    assert "currency_code" not in document
    assert document["subject"] == {"subject_id": "subject:default"}
    assert document["tradelines"] == []


def test_result_serialization_keeps_null_file():
    result = NormalizationResult(
        success=False,
        errors=[NormalizationWarning(domain="system", message="failed", severity="error")],
    )

    payload = result.to_dict()

    assert payload["credit_file"] is None
    assert payload["errors"][0]["severity"] == "error"
    assert result.errors[0].is_error() is True
