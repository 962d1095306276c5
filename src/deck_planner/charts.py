"""
Chart Derivation

Decides whether a table is worth charting and, if so, extracts the
label/value series and picks a chart type.
"""

import logging
import math
from typing import Optional, Sequence

from .columns import RowLike, column_value, display_value
from .config import ResolverConfig
from .models import ChartData, ChartSeries, ChartType
from .numeric import is_number, normalize_number

logger = logging.getLogger(__name__)


def choose_chart_type(point_count: int, config: ResolverConfig) -> ChartType:
    """Pie for short series, bar once slices would get too thin."""
    if point_count > config.pie_max_points:
        return ChartType.bar
    return ChartType.pie


def find_value_column(rows: Sequence[RowLike], headers: Sequence[str]) -> int:
    """Index of the first column after the label column holding any number, or -1."""
    for idx in range(1, len(headers)):
        header = headers[idx]
        if any(is_number(column_value(row, header, idx)) for row in rows):
            return idx
    return -1


def derive_chart(
    headers: Sequence[str],
    rows: Sequence[RowLike],
    config: Optional[ResolverConfig] = None,
) -> Optional[ChartData]:
    """Build chart data from a table, or None when nothing chartable remains.

    Column 0 supplies labels; the first column with a numeric cell supplies
    values. Rows with empty labels, unparseable values or aggregate labels
    ("Total", "Grand Total", ...) are dropped. An all-zero series is not charted.
    """
    config = config or ResolverConfig()

    if len(headers) < 2:
        return None

    value_idx = find_value_column(rows, headers)
    if value_idx == -1:
        logger.debug("No numeric column in table %r", list(headers))
        return None

    markers = {m.lower() for m in config.aggregate_markers}
    labels = []
    values = []
    for row in rows:
        label = display_value(row, headers[0], 0)
        value = normalize_number(column_value(row, headers[value_idx], value_idx))
        if not label or math.isnan(value) or label.lower() in markers:
            continue
        labels.append(label)
        values.append(value)

    if not values or all(v == 0 for v in values):
        logger.debug("Table %r has no non-zero chart points", list(headers))
        return None

    return ChartData(
        chart_type=choose_chart_type(len(values), config),
        data=ChartSeries(labels=tuple(labels), values=tuple(values)),
    )
