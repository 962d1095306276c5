"""
Report and Slide Models

Pydantic v2 models for the two sides of slide planning: the report template
(sections and typed fields) the user fills in, and the resolved slide
descriptors handed to renderers. Mirrors the JSON Schema in
schemas/template.schema.json.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)

RESERVED_ROW_KEYS = ("photos", "tooltips")


class FieldType(str, Enum):
    """Declared type of a template field."""
    text = "text"
    textarea = "textarea"
    number = "number"
    date = "date"
    table = "table"
    bullet = "bullet"
    signature = "signature"
    photos = "photos"


# Spellings used by older templates
FIELD_TYPE_ALIASES: Dict[str, str] = {
    "bullet-list": FieldType.bullet.value,
    "bullet_list": FieldType.bullet.value,
    "photo-collection": FieldType.photos.value,
    "photo_collection": FieldType.photos.value,
}

SCALAR_FIELD_TYPES = (FieldType.text, FieldType.textarea, FieldType.number, FieldType.date)
KNOWN_FIELD_TYPES = frozenset(ft.value for ft in FieldType)


# ============================================================
# TEMPLATE MODELS
# ============================================================

class _FieldBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    label: str = ""
    placeholder: str = ""
    tooltip: str = ""

    @property
    def field_type(self) -> Optional[FieldType]:
        """Declared FieldType, or None for an unsupported field."""
        if self.type in KNOWN_FIELD_TYPES:
            return FieldType(self.type)
        return None


class ScalarField(_FieldBase):
    """Single-value field (text, textarea, number or date)."""
    type: Literal["text", "textarea", "number", "date"]
    default_value: Any = Field(None, alias="defaultValue")


class TableField(_FieldBase):
    """Table field with declared column headers."""
    type: Literal["table"]
    columns: List[str] = Field(default_factory=list)
    has_photo_uploads: bool = Field(False, alias="hasPhotoUploads")
    editable_first_column: bool = Field(False, alias="editableFirstColumn")

    @field_validator("columns", mode="before")
    @classmethod
    def coerce_columns(cls, v: Any) -> Any:
        if not isinstance(v, (list, tuple)):
            return []
        return ["" if h is None else str(h) for h in v]


class BulletField(_FieldBase):
    """Ordered list of free-text bullets."""
    type: Literal["bullet"]


class PhotosField(_FieldBase):
    """Ordered collection of image references."""
    type: Literal["photos"]


class SignatureField(_FieldBase):
    """Name and date sign-off block."""
    type: Literal["signature"]


class UnsupportedField(_FieldBase):
    """A field whose declared type this version does not know; never rendered."""
    type: Literal["unsupported"]
    declared_type: str = ""


FormField = Annotated[
    Union[ScalarField, TableField, BulletField, PhotosField, SignatureField, UnsupportedField],
    Field(discriminator="type"),
]


class FormSection(BaseModel):
    """A titled group of fields."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    fields: List[FormField] = Field(default_factory=list)

    @field_validator("fields", mode="before")
    @classmethod
    def normalize_field_types(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        normalized = []
        for item in v:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                logger.debug("Dropping malformed field entry %r", item)
                continue
            item = {k: val for k, val in item.items() if val is not None or k == "columns"}
            raw_type = str(item.get("type", "")).strip().lower()
            field_type = FIELD_TYPE_ALIASES.get(raw_type, raw_type)
            if field_type not in KNOWN_FIELD_TYPES:
                logger.debug("Field %r has unsupported type %r", item["id"], raw_type)
                item = {**item, "type": "unsupported", "declared_type": raw_type}
            else:
                item = {**item, "type": field_type}
            normalized.append(item)
        return normalized


class ReportTemplate(BaseModel):
    """Top-level report template."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str = ""
    title: str
    sections: List[FormSection] = Field(default_factory=list)

    def section(self, section_id: str) -> Optional[FormSection]:
        """Return the section with the given id, or None."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None


class TableRow(BaseModel):
    """One table row: declared-column cells plus the reserved per-row extras."""
    model_config = ConfigDict(frozen=True)

    cells: Dict[str, Any] = Field(default_factory=dict)
    photos: Tuple[str, ...] = ()
    tooltips: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> "TableRow":
        """Split a stored row mapping into cells, photos and tooltips.

        Cell keys keep their stored order. Anything that is not a mapping
        becomes an empty row.
        """
        if isinstance(raw, TableRow):
            return raw
        if not isinstance(raw, Mapping):
            return cls()

        cells = {str(k): v for k, v in raw.items() if k not in RESERVED_ROW_KEYS}

        photos = raw.get("photos")
        if isinstance(photos, (list, tuple)):
            photos = tuple(p for p in photos if isinstance(p, str) and p)
        else:
            photos = ()

        tooltips = raw.get("tooltips")
        if isinstance(tooltips, Mapping):
            tooltips = {str(k): str(v) for k, v in tooltips.items()}
        else:
            tooltips = {}

        return cls(cells=cells, photos=photos, tooltips=tooltips)


# ============================================================
# SLIDE MODELS
# ============================================================

class SlideLayoutType(str, Enum):
    """Layout tag a renderer maps to a visual template."""
    title = "title"
    two_column = "twoColumn"
    image_left_text_right = "imageLeftTextRight"
    summary = "summary"
    photo_grid = "photoGrid"
    chart_full = "chartFull"


class ChartType(str, Enum):
    bar = "bar"
    pie = "pie"
    line = "line"


class _SlideModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TitleData(_SlideModel):
    subtitle: str = ""
    author: str = ""


class TableData(_SlideModel):
    headers: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()


class TableSlideData(_SlideModel):
    table: TableData


class ListData(_SlideModel):
    items: Tuple[str, ...] = Field((), alias="list")
    image: Optional[str] = None


class Kpi(_SlideModel):
    value: float
    label: str


class SummaryData(_SlideModel):
    kpis: Tuple[Kpi, ...] = ()


class ImagesData(_SlideModel):
    images: Tuple[str, ...] = ()


class ChartSeries(_SlideModel):
    labels: Tuple[str, ...] = ()
    values: Tuple[float, ...] = ()


class ChartData(_SlideModel):
    chart_type: ChartType = Field(alias="chartType")
    data: ChartSeries


class ChartSlideData(_SlideModel):
    chart: ChartData


SlideData = Union[TitleData, TableSlideData, ListData, SummaryData, ImagesData, ChartSlideData]


class SuggestedChart(_SlideModel):
    chart_type: ChartType = Field(alias="chartType")
    data_path: str = Field(alias="dataPath")


class OriginalLayout(_SlideModel):
    generative_icon_prompt: Optional[str] = Field(None, alias="generativeIconPrompt")
    suggested_chart: Optional[SuggestedChart] = Field(None, alias="suggestedChart")


class ResolvedSlide(_SlideModel):
    """A renderer-agnostic slide descriptor."""
    id: str
    title: str
    layout: SlideLayoutType
    data: SlideData
    original_layout: OriginalLayout = Field(default_factory=OriginalLayout, alias="originalLayout")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the renderer's camelCase keys, omitting unset extras."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================
# SERIALIZATION
# ============================================================

def slides_to_dicts(slides: Sequence[ResolvedSlide]) -> List[Dict[str, Any]]:
    """Convert resolved slides to plain JSON-ready dicts."""
    return [slide.to_dict() for slide in slides]


def save_slides(slides: Sequence[ResolvedSlide], path: Union[str, Path]) -> None:
    """Save a slide plan to a JSON file."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"slides": slides_to_dicts(slides)}, f, indent=2, ensure_ascii=False)


def load_template(path: Union[str, Path]) -> ReportTemplate:
    """Load a ReportTemplate from a JSON file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return ReportTemplate.model_validate(data)


def load_form_data(path: Union[str, Path]) -> Dict[str, Any]:
    """Load form data (section id -> field id -> value) from a JSON file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Form data must be a JSON object, got {type(data).__name__}")
    return data


# ============================================================
# VALIDATION
# ============================================================

def validate_template_json(path: Union[str, Path]) -> List[str]:
    """Validate a template JSON file and return a list of error strings.

    Runs the JSON Schema first, then the pydantic models for the checks
    the schema cannot express. Returns an empty list when the template is valid.
    """
    import jsonschema
    from .schemas import get_template_schema_path

    path = Path(path)
    errors: List[str] = []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        return [f"Invalid JSON: {exc}"]
    except FileNotFoundError:
        return [f"File not found: {path}"]

    with open(get_template_schema_path(), "r", encoding="utf-8") as f:
        schema = json.load(f)

    validator = jsonschema.Draft202012Validator(schema)
    for error in validator.iter_errors(data):
        json_path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "(root)"
        errors.append(f"{json_path}: {error.message}")
    if errors:
        return errors

    try:
        ReportTemplate.model_validate(data)
    except ValidationError as exc:
        errors.append(str(exc))

    return errors
