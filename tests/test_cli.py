"""Tests for the deck-planner command line."""

import json

import pytest

from deck_planner.cli import main

TEMPLATE = {
    "key": "qr",
    "title": "Quarterly Report",
    "sections": [
        {
            "id": "header",
            "title": "Header",
            "fields": [
                {"id": "quarter", "label": "Quarter", "type": "text"},
                {"id": "preparedBy", "label": "Prepared By", "type": "text"},
            ],
        },
        {
            "id": "financial",
            "title": "Financial",
            "fields": [{"id": "t", "label": "Ledger", "type": "table", "columns": ["Item", "Amount"]}],
        },
    ],
}

DATA = {
    "header": {"quarter": "Q1 2025", "preparedBy": "Jane Doe"},
    "financial": {"t": [{"Item": "Tithe", "Amount": "$10"}]},
}


@pytest.fixture
def files(tmp_path):
    template_path = tmp_path / "template.json"
    template_path.write_text(json.dumps(TEMPLATE), encoding="utf-8")
    data_path = tmp_path / "data.json"
    data_path.write_text(json.dumps(DATA), encoding="utf-8")
    return template_path, data_path


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "deck-planner" in capsys.readouterr().out


def test_resolve_to_stdout(files, capsys):
    template_path, data_path = files
    assert main(["resolve", str(template_path), str(data_path)]) == 0
    plan = json.loads(capsys.readouterr().out)
    assert [s["id"] for s in plan["slides"]] == ["title-qr", "financial-table-0", "financial-chart-0"]
    assert plan["slides"][0]["data"] == {"subtitle": "Q1 2025", "author": "Jane Doe"}


def test_resolve_to_file(files, tmp_path, capsys):
    template_path, data_path = files
    output = tmp_path / "plan.json"
    assert main(["resolve", str(template_path), str(data_path), "--output", str(output)]) == 0
    assert "Resolved 3 slides" in capsys.readouterr().out
    assert len(json.loads(output.read_text(encoding="utf-8"))["slides"]) == 3


def test_resolve_with_config(files, tmp_path, capsys):
    template_path, data_path = files
    config_path = tmp_path / "planner.yaml"
    config_path.write_text("title_pattern: '{{quarter}} Report'\n", encoding="utf-8")
    assert main(["resolve", str(template_path), str(data_path), "-c", str(config_path)]) == 0
    plan = json.loads(capsys.readouterr().out)
    assert plan["slides"][0]["title"] == "Q1 2025 Report"


def test_resolve_missing_file(files, capsys):
    template_path, _ = files
    assert main(["resolve", str(template_path), "/nonexistent/data.json"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_diagnose_json(files, capsys):
    template_path, _ = files
    assert main(["diagnose", str(template_path), "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["template_key"] == "qr"
    assert report["issues"] == []


def test_diagnose_strict_fails_on_errors(tmp_path, capsys):
    template = {"key": "x", "title": "X", "sections": [{"id": "a", "fields": []}, {"id": "a", "fields": []}]}
    path = tmp_path / "template.json"
    path.write_text(json.dumps(template), encoding="utf-8")
    assert main(["diagnose", str(path), "--strict"]) == 1
    assert "TPL-001" in capsys.readouterr().out


def test_validate(files, tmp_path, capsys):
    template_path, _ = files
    assert main(["validate", str(template_path)]) == 0
    assert "valid" in capsys.readouterr().out

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"key": "x"}), encoding="utf-8")
    assert main(["validate", str(bad)]) == 1
    assert "problem" in capsys.readouterr().out
