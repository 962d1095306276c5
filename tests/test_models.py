"""Tests for template and slide models, serialization and schema validation."""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from deck_planner.models import (
    BulletField,
    ChartData,
    ChartSeries,
    ChartSlideData,
    ChartType,
    FieldType,
    ListData,
    OriginalLayout,
    PhotosField,
    ReportTemplate,
    ResolvedSlide,
    ScalarField,
    SlideLayoutType,
    SuggestedChart,
    TableField,
    TableRow,
    UnsupportedField,
    load_form_data,
    load_template,
    save_slides,
    validate_template_json,
)


def _template_dict():
    return {
        "key": "treasury",
        "name": "Treasury",
        "title": "Treasury Report",
        "sections": [
            {
                "id": "financial",
                "title": "Financial Summary",
                "fields": [
                    {"id": "notes", "label": "Notes", "type": "textarea", "placeholder": "..."},
                    {
                        "id": "receipts",
                        "label": "Receipts",
                        "type": "table",
                        "columns": ["Category", "Amount"],
                        "hasPhotoUploads": True,
                        "rows": [{"Category": "Tithe", "Amount": ""}],
                    },
                    {"id": "highlights", "label": "Highlights", "type": "bullet-list"},
                    {"id": "gallery", "label": "Gallery", "type": "photo-collection"},
                ],
            },
        ],
    }


# ============================================================
# TEMPLATE MODELS
# ============================================================

def test_field_type_enum_values():
    expected = {"text", "textarea", "number", "date", "table", "bullet", "signature", "photos"}
    assert {ft.value for ft in FieldType} == expected


def test_template_fields_become_tagged_variants():
    template = ReportTemplate.model_validate(_template_dict())
    fields = template.sections[0].fields

    assert isinstance(fields[0], ScalarField)
    assert isinstance(fields[1], TableField)
    assert isinstance(fields[2], BulletField)
    assert isinstance(fields[3], PhotosField)
    assert [f.field_type for f in fields] == [
        FieldType.textarea, FieldType.table, FieldType.bullet, FieldType.photos,
    ]


def test_table_field_aliases():
    template = ReportTemplate.model_validate(_template_dict())
    table = template.sections[0].fields[1]
    assert table.columns == ["Category", "Amount"]
    assert table.has_photo_uploads is True
    assert table.editable_first_column is False


def test_unknown_field_type_becomes_unsupported():
    data = _template_dict()
    data["sections"][0]["fields"].append({"id": "x", "label": "Pick", "type": "Select"})
    field = ReportTemplate.model_validate(data).sections[0].fields[-1]
    assert isinstance(field, UnsupportedField)
    assert field.declared_type == "select"
    assert field.field_type is None


def test_malformed_field_entries_are_dropped():
    data = _template_dict()
    data["sections"][0]["fields"] = ["oops", {"label": "no id", "type": "text"}, {"id": "ok", "type": "text", "label": None}]
    fields = ReportTemplate.model_validate(data).sections[0].fields
    assert [f.id for f in fields] == ["ok"]
    assert fields[0].label == ""


def test_table_columns_are_coerced():
    data = _template_dict()
    data["sections"][0]["fields"] = [
        {"id": "a", "type": "table", "columns": None},
        {"id": "b", "type": "table", "columns": ["Item", 2025, None]},
        {"id": "c", "type": "table", "columns": "Item"},
    ]
    fields = ReportTemplate.model_validate(data).sections[0].fields
    assert [f.columns for f in fields] == [[], ["Item", "2025", ""], []]


def test_missing_template_title_is_rejected():
    with pytest.raises(ValidationError):
        ReportTemplate.model_validate({"key": "x", "sections": []})


def test_field_type_is_case_insensitive():
    data = _template_dict()
    data["sections"][0]["fields"] = [{"id": "x", "type": "TEXT"}]
    template = ReportTemplate.model_validate(data)
    assert template.sections[0].fields[0].field_type == FieldType.text


def test_section_lookup():
    template = ReportTemplate.model_validate(_template_dict())
    assert template.section("financial").title == "Financial Summary"
    assert template.section("missing") is None


# ============================================================
# TABLE ROWS
# ============================================================

def test_table_row_lifts_reserved_keys():
    row = TableRow.from_raw({
        "tooltips": {"Amount": "In GHS"},
        "Category": "Tithe",
        "photos": ["a.png", "", None],
        "Amount": "$5",
    })
    assert list(row.cells) == ["Category", "Amount"]
    assert row.photos == ("a.png",)
    assert row.tooltips == {"Amount": "In GHS"}


def test_table_row_from_non_mapping():
    assert TableRow.from_raw(["a", "b"]) == TableRow()
    assert TableRow.from_raw(None).cells == {}


def test_table_row_ignores_malformed_extras():
    row = TableRow.from_raw({"Item": "x", "photos": "a.png", "tooltips": "help"})
    assert row.photos == ()
    assert row.tooltips == {}


# ============================================================
# SLIDE SERIALIZATION
# ============================================================

def _chart_slide():
    chart = ChartData(
        chart_type=ChartType.bar,
        data=ChartSeries(labels=("A", "B"), values=(1.0, 2.0)),
    )
    return ResolvedSlide(
        id="financial-chart-0",
        title="Receipts - Chart",
        layout=SlideLayoutType.chart_full,
        data=ChartSlideData(chart=chart),
        original_layout=OriginalLayout(
            generative_icon_prompt="A bar chart icon representing data visualization",
            suggested_chart=SuggestedChart(chart_type=ChartType.bar, data_path="$.financial.receipts"),
        ),
    )


def test_slide_to_dict_uses_wire_names():
    data = _chart_slide().to_dict()
    assert data == {
        "id": "financial-chart-0",
        "title": "Receipts - Chart",
        "layout": "chartFull",
        "data": {
            "chart": {
                "chartType": "bar",
                "data": {"labels": ["A", "B"], "values": [1.0, 2.0]},
            },
        },
        "originalLayout": {
            "generativeIconPrompt": "A bar chart icon representing data visualization",
            "suggestedChart": {"chartType": "bar", "dataPath": "$.financial.receipts"},
        },
    }


def test_list_slide_to_dict_omits_missing_image():
    slide = ResolvedSlide(
        id="s-bullet-0",
        title="Highlights",
        layout=SlideLayoutType.image_left_text_right,
        data=ListData(items=("One", "Two")),
    )
    assert slide.to_dict() == {
        "id": "s-bullet-0",
        "title": "Highlights",
        "layout": "imageLeftTextRight",
        "data": {"list": ["One", "Two"]},
        "originalLayout": {},
    }


def test_save_slides_writes_json(tmp_path):
    path = tmp_path / "plan.json"
    save_slides([_chart_slide()], path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data["slides"]) == 1
    assert data["slides"][0]["layout"] == "chartFull"


# ============================================================
# LOADING AND VALIDATION
# ============================================================

def test_load_template_and_form_data(tmp_path):
    template_path = tmp_path / "template.json"
    template_path.write_text(json.dumps(_template_dict()), encoding="utf-8")
    data_path = tmp_path / "data.json"
    data_path.write_text(json.dumps({"financial": {"notes": "ok"}}), encoding="utf-8")

    template = load_template(template_path)
    assert template.key == "treasury"
    assert load_form_data(data_path) == {"financial": {"notes": "ok"}}


def test_load_form_data_rejects_non_object(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        load_form_data(path)


def test_validate_template_json_valid(tmp_path):
    path = tmp_path / "template.json"
    path.write_text(json.dumps(_template_dict()), encoding="utf-8")
    assert validate_template_json(path) == []


def test_validate_template_json_invalid(tmp_path):
    path = tmp_path / "template.json"
    path.write_text(json.dumps({"key": "x", "sections": [{"fields": []}]}), encoding="utf-8")
    errors = validate_template_json(path)
    assert len(errors) >= 2
    assert any("title" in e for e in errors)


def test_validate_template_json_not_json():
    with tempfile.NamedTemporaryFile(suffix=".json", delete=False, mode="w") as f:
        f.write("not json at all {{{")
        temp_path = f.name

    try:
        errors = validate_template_json(temp_path)
        assert len(errors) == 1
        assert "Invalid JSON" in errors[0]
    finally:
        Path(temp_path).unlink()


def test_validate_template_json_missing_file():
    errors = validate_template_json("/nonexistent/template.json")
    assert len(errors) == 1
    assert "File not found" in errors[0]
