"""
Slide Plan Resolver

Walks any report template together with the user's form data and produces
an ordered list of slide descriptors:

1. A title slide built from the template title and the ``header`` section.
2. Per section, in declared order: table slides (each followed by an optional
   chart slide and paginated row-photo slides), bullet slides, photo-grid
   slides, and one combined slide for the scalar fields.
3. An executive summary slide when enough total/surplus/deficit rows carry
   numbers.

Resolution is a pure function of its inputs and never raises on sparse or
malformed form data; anything that cannot produce meaningful content simply
produces no slide. It is cheap enough to rerun on every form edit.
"""

import logging
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .charts import derive_chart
from .columns import column_value, display_value, format_scalar, resolve_table
from .config import ResolverConfig
from .icons import SUMMARY_ICON_PROMPT, chart_icon_prompt, icon_prompt_for
from .models import (
    BulletField,
    ChartSlideData,
    FormSection,
    ImagesData,
    Kpi,
    ListData,
    OriginalLayout,
    PhotosField,
    ReportTemplate,
    ResolvedSlide,
    ScalarField,
    SignatureField,
    SlideLayoutType,
    SuggestedChart,
    SummaryData,
    TableData,
    TableField,
    TableRow,
    TableSlideData,
    TitleData,
    UnsupportedField,
)
from .numeric import normalize_number

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\{\{\s*([A-Za-z0-9_.-]+)\s*\}\}")


# ============================================================
# HELPERS
# ============================================================

def render_title(text: str, context: Mapping[str, Any]) -> str:
    """Replace ``{{name}}`` tokens from ``context``. Unknown tokens are left as-is."""
    def _sub(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in context and context[key] is not None:
            return str(context[key])
        return match.group(0)

    return _TOKEN.sub(_sub, text or "")


def paginate(items: Sequence[str], page_size: int) -> List[Tuple[str, ...]]:
    """Split ``items`` into consecutive pages of at most ``page_size``."""
    return [tuple(items[i:i + page_size]) for i in range(0, len(items), page_size)]


def page_suffix(page_num: int, total_pages: int) -> str:
    """' (n/N)' for multi-page runs, '' for a single page."""
    if total_pages > 1:
        return f" ({page_num}/{total_pages})"
    return ""


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0 or math.isnan(value)
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _non_empty_strings(value: Any) -> List[str]:
    return [format_scalar(item) for item in _as_list(value) if not _is_blank(item)]


# ============================================================
# RESOLVER
# ============================================================

class SlidePlanResolver:
    """Generates slides for any template by analyzing its structure and data."""

    def __init__(
        self,
        template: Union[ReportTemplate, Mapping[str, Any]],
        form_data: Optional[Mapping[str, Any]],
        config: Optional[ResolverConfig] = None,
    ):
        if not isinstance(template, ReportTemplate):
            template = ReportTemplate.model_validate(template)
        self.template = template
        self.form_data = form_data if isinstance(form_data, Mapping) else {}
        self.config = config or ResolverConfig()

    def resolve(self) -> List[ResolvedSlide]:
        """Generate all slides for the template, in presentation order."""
        slides: List[ResolvedSlide] = [self._title_slide()]

        for section in self._content_sections():
            try:
                slides.extend(self._section_slides(section))
            except Exception:
                logger.warning("Section %r produced no slides", section.id, exc_info=True)

        summary = self._summary_slide()
        if summary is not None:
            slides.append(summary)

        logger.debug("Resolved %d slides for template %r", len(slides), self.template.key)
        return slides

    # -- data access ---------------------------------------------

    def _content_sections(self) -> List[FormSection]:
        skipped = set(self.config.skipped_section_ids)
        return [s for s in self.template.sections if s.id not in skipped]

    def _section_data(self, section_id: str) -> Mapping[str, Any]:
        data = self.form_data.get(section_id)
        return data if isinstance(data, Mapping) else {}

    def _table_rows(self, section_data: Mapping[str, Any], field: TableField) -> List[TableRow]:
        return [TableRow.from_raw(raw) for raw in _as_list(section_data.get(field.id))]

    # -- title ---------------------------------------------------

    def _header_value(self, header: Mapping[str, Any], aliases: Sequence[str]) -> str:
        for alias in aliases:
            value = header.get(alias)
            if not _is_blank(value) and not isinstance(value, (list, tuple, dict)):
                return format_scalar(value).strip()
        return ""

    def _title_context(self, header: Mapping[str, Any]) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            k: format_scalar(v) for k, v in header.items() if isinstance(v, (str, int, float))
        }
        context.update(name=self.template.name, key=self.template.key)
        # The template title may carry its own header tokens
        context["title"] = render_title(self.template.title, context)
        return context

    def _title_slide(self) -> ResolvedSlide:
        header = self._section_data(self.config.header_section_id)
        return ResolvedSlide(
            id=f"title-{self.template.key}",
            title=render_title(self.config.title_pattern, self._title_context(header)),
            layout=SlideLayoutType.title,
            data=TitleData(
                subtitle=self._header_value(header, self.config.subtitle_aliases),
                author=self._header_value(header, self.config.author_aliases),
            ),
        )

    # -- sections ------------------------------------------------

    def _section_slides(self, section: FormSection) -> List[ResolvedSlide]:
        section_data = self._section_data(section.id)

        tables: List[TableField] = []
        bullets: List[BulletField] = []
        photos: List[PhotosField] = []
        scalars: List[ScalarField] = []
        for field in section.fields:
            if isinstance(field, TableField):
                tables.append(field)
            elif isinstance(field, BulletField):
                bullets.append(field)
            elif isinstance(field, PhotosField):
                photos.append(field)
            elif isinstance(field, ScalarField):
                scalars.append(field)
            elif isinstance(field, (SignatureField, UnsupportedField)):
                continue
            else:
                raise TypeError(f"Unhandled field type: {type(field).__name__}")

        slides: List[ResolvedSlide] = []
        icon_prompt = icon_prompt_for(section.title)

        for idx, field in enumerate(tables):
            slides.extend(self._table_slides(section, field, idx, section_data, icon_prompt))

        for idx, field in enumerate(bullets):
            items = _non_empty_strings(section_data.get(field.id))
            if not items:
                continue
            slides.append(ResolvedSlide(
                id=f"{section.id}-bullet-{idx}",
                title=field.label or section.title,
                layout=SlideLayoutType.image_left_text_right,
                data=ListData(items=tuple(items), image=None),
                original_layout=OriginalLayout(generative_icon_prompt=icon_prompt),
            ))

        for idx, field in enumerate(photos):
            images = _non_empty_strings(section_data.get(field.id))
            pages = paginate(images, self.config.photos_per_page)
            for page_num, page in enumerate(pages, start=1):
                slides.append(ResolvedSlide(
                    id=f"{section.id}-photos-{idx}-page{page_num}",
                    title=f"{field.label or section.title}{page_suffix(page_num, len(pages))}",
                    layout=SlideLayoutType.photo_grid,
                    data=ImagesData(images=page),
                ))

        text_list = []
        for field in scalars:
            value = section_data.get(field.id)
            if _is_blank(value) or isinstance(value, (list, tuple, dict)):
                continue
            text_list.append(f"{field.label}: {format_scalar(value)}")
        if text_list:
            slides.append(ResolvedSlide(
                id=f"{section.id}-text-summary",
                title=section.title,
                layout=SlideLayoutType.image_left_text_right,
                data=ListData(items=tuple(text_list), image=None),
                original_layout=OriginalLayout(generative_icon_prompt=icon_prompt),
            ))

        return slides

    def _table_slides(
        self,
        section: FormSection,
        field: TableField,
        idx: int,
        section_data: Mapping[str, Any],
        icon_prompt: str,
    ) -> List[ResolvedSlide]:
        rows = self._table_rows(section_data, field)
        if not rows:
            logger.debug("Table %s.%s is empty", section.id, field.id)
            return []

        headers = list(field.columns)
        title = field.label or section.title
        slides = [ResolvedSlide(
            id=f"{section.id}-table-{idx}",
            title=title,
            layout=SlideLayoutType.two_column,
            data=TableSlideData(table=TableData(
                headers=tuple(headers),
                rows=tuple(tuple(r) for r in resolve_table(rows, headers)),
            )),
            original_layout=OriginalLayout(generative_icon_prompt=icon_prompt),
        )]

        chart = derive_chart(headers, rows, self.config)
        if chart is not None:
            slides.append(ResolvedSlide(
                id=f"{section.id}-chart-{idx}",
                title=f"{title} - Chart",
                layout=SlideLayoutType.chart_full,
                data=ChartSlideData(chart=chart),
                original_layout=OriginalLayout(
                    generative_icon_prompt=chart_icon_prompt(chart.chart_type),
                    suggested_chart=SuggestedChart(
                        chart_type=chart.chart_type,
                        data_path=f"$.{section.id}.{field.id}",
                    ),
                ),
            ))

        row_photos = [photo for row in rows for photo in row.photos]
        pages = paginate(row_photos, self.config.photos_per_page)
        for page_num, page in enumerate(pages, start=1):
            slides.append(ResolvedSlide(
                id=f"{section.id}-table-photos-{idx}-page{page_num}",
                title=f"{title} - Photos{page_suffix(page_num, len(pages))}",
                layout=SlideLayoutType.photo_grid,
                data=ImagesData(images=page),
            ))

        return slides

    # -- executive summary ---------------------------------------

    def _table_kpi(self, field: TableField, rows: Sequence[TableRow]) -> Optional[Kpi]:
        headers = field.columns
        markers = [m.lower() for m in self.config.kpi_row_markers]

        for row in rows:
            label = display_value(row, headers[0], 0).lower()
            if any(marker in label for marker in markers):
                break
        else:
            return None

        for i in range(1, len(headers)):
            value = normalize_number(column_value(row, headers[i], i))
            if not math.isnan(value):
                return Kpi(value=value, label=field.label or headers[i])
        return None

    def collect_kpis(self) -> List[Kpi]:
        """All KPI candidates in discovery order, one per qualifying table at most."""
        kpis: List[Kpi] = []
        for section in self._content_sections():
            section_data = self._section_data(section.id)
            for field in section.fields:
                if not isinstance(field, TableField) or not field.columns:
                    continue
                try:
                    kpi = self._table_kpi(field, self._table_rows(section_data, field))
                except Exception:
                    logger.warning(
                        "KPI scan failed for %s.%s", section.id, field.id, exc_info=True
                    )
                    continue
                if kpi is not None:
                    kpis.append(kpi)
        return kpis

    def _summary_slide(self) -> Optional[ResolvedSlide]:
        kpis = self.collect_kpis()
        if len(kpis) < self.config.min_kpis:
            logger.debug("Summary slide skipped: %d KPI(s) found", len(kpis))
            return None

        return ResolvedSlide(
            id=f"summary-{self.template.key}",
            title=self.config.summary_title,
            layout=SlideLayoutType.summary,
            data=SummaryData(kpis=tuple(kpis[:self.config.max_kpis])),
            original_layout=OriginalLayout(generative_icon_prompt=SUMMARY_ICON_PROMPT),
        )


def get_resolved_slides(
    template: Union[ReportTemplate, Mapping[str, Any]],
    form_data: Optional[Mapping[str, Any]],
    config: Optional[ResolverConfig] = None,
) -> List[ResolvedSlide]:
    """Get resolved slides for a template."""
    return SlidePlanResolver(template, form_data, config).resolve()
