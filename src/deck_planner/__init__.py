"""
Deck Planner

Turns a filled-in quarterly report form into an ordered, renderer-agnostic
slide plan: title, tables, charts, bullets, photo grids and an executive
summary, derived generically from any report template.
"""

__version__ = "0.1.0"

from .config import (
    ConfigError,
    ResolverConfig,
    load_config,
    save_config,
)

from .models import (
    FieldType,
    ReportTemplate,
    FormSection,
    TableRow,
    ResolvedSlide,
    SlideLayoutType,
    ChartType,
    load_template,
    load_form_data,
    save_slides,
    slides_to_dicts,
    validate_template_json,
)

from .numeric import (
    normalize_number,
    is_number,
)

from .columns import (
    column_value,
    display_value,
    format_scalar,
    resolve_table,
)

from .icons import (
    icon_prompt_for,
)

from .charts import (
    derive_chart,
)

from .resolver import (
    SlidePlanResolver,
    get_resolved_slides,
)

from .diagnose import (
    diagnose_template,
    DiagnosticReport,
)

__all__ = [
    # Config
    'ConfigError',
    'ResolverConfig',
    'load_config',
    'save_config',
    # Models
    'FieldType',
    'ReportTemplate',
    'FormSection',
    'TableRow',
    'ResolvedSlide',
    'SlideLayoutType',
    'ChartType',
    'load_template',
    'load_form_data',
    'save_slides',
    'slides_to_dicts',
    'validate_template_json',
    # Table data
    'normalize_number',
    'is_number',
    'column_value',
    'display_value',
    'format_scalar',
    'resolve_table',
    # Slide planning
    'icon_prompt_for',
    'derive_chart',
    'SlidePlanResolver',
    'get_resolved_slides',
    # Diagnostics
    'diagnose_template',
    'DiagnosticReport',
]
