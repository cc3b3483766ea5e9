import json

import pytest

from creditfile import cli


def _write(tmp_path, payload, name="input.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_writes_result_and_exits_zero(tmp_path, multi_cra_raw):
    source = _write(tmp_path, multi_cra_raw)
    output = tmp_path / "result.json"

    code = cli.main([str(source), "--validate", "--output", str(output), "--subject-id", "subj-1"])

    assert code == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["success"] is True
    assert payload["credit_file"]["subject_id"] == "subj-1"
    assert payload["summary"]["tradelines"] == 2


def test_cli_prints_to_stdout(tmp_path, capsys, make_document):
    source = _write(tmp_path, make_document([]))

    code = cli.main([str(source), "--currency", "eur"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["credit_file"]["currency_code"] == "EUR"


def test_cli_unsuccessful_result_exits_one(tmp_path, make_document):
    source = _write(tmp_path, make_document([{"domain": "tradelines", "fields": 3}]))
    output = tmp_path / "result.json"

    code = cli.main([str(source), "--output", str(output)])

    assert code == 1
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["success"] is False
    assert payload["errors"][0]["domain"] == "input"


def test_cli_usage_errors_exit_two(tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.json")]) == 2

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert cli.main([str(broken)]) == 2

    source = _write(tmp_path, {})
    assert cli.main([str(source), "--currency", "euro"]) == 2
    assert "configuration error" in capsys.readouterr().err

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2
