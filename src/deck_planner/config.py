"""
Resolver Configuration

Tunable constants for slide planning (page sizes, chart thresholds, KPI
gating, reserved section ids and header aliases). Loadable from YAML or JSON.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator


class ConfigError(ValueError):
    """Raised when a resolver configuration file is invalid."""

    def __init__(self, issues: List[str]):
        self.issues = [str(i).strip() for i in issues if str(i).strip()]
        if not self.issues:
            self.issues = ["Invalid configuration"]
        super().__init__(self._format())

    def _format(self) -> str:
        lines = ["Configuration validation failed:"]
        for issue in self.issues:
            lines.append(f"- {issue}")
        return "\n".join(lines)


class ResolverConfig(BaseModel):
    """Settings consumed by the slide plan resolver."""
    photos_per_page: int = 4
    pie_max_points: int = 5
    min_kpis: int = 2
    max_kpis: int = 4

    header_section_id: str = "header"
    skipped_section_ids: List[str] = Field(default_factory=lambda: ["header", "signatures"])
    subtitle_aliases: List[str] = Field(default_factory=lambda: ["quarter", "reportingQuarter"])
    author_aliases: List[str] = Field(default_factory=lambda: ["preparedBy", "reportingLeader"])

    # Row labels compared whole (case-insensitive) when excluding chart points
    aggregate_markers: List[str] = Field(
        default_factory=lambda: ["total", "net surplus / (deficit)", "grand total"]
    )
    # Substrings marking a KPI row in the executive summary scan
    kpi_row_markers: List[str] = Field(default_factory=lambda: ["total", "surplus", "deficit"])

    # {{token}} names: title, name, key, plus any header field id
    title_pattern: str = "{{title}}"
    summary_title: str = "Executive Summary"

    @model_validator(mode="after")
    def check_ranges(self) -> "ResolverConfig":
        if self.photos_per_page < 1:
            raise ValueError(f"photos_per_page must be at least 1, got {self.photos_per_page}")
        if self.pie_max_points < 0:
            raise ValueError(f"pie_max_points must not be negative, got {self.pie_max_points}")
        if self.min_kpis < 1:
            raise ValueError(f"min_kpis must be at least 1, got {self.min_kpis}")
        if self.max_kpis < self.min_kpis:
            raise ValueError(
                f"max_kpis ({self.max_kpis}) must not be less than min_kpis ({self.min_kpis})"
            )
        return self


def _read_config_file(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    return data or {}


def load_config(path: Optional[Union[str, Path]] = None) -> ResolverConfig:
    """Load a ResolverConfig from YAML or JSON. No path returns the defaults."""
    if path is None:
        return ResolverConfig()

    path = Path(path)
    try:
        data = _read_config_file(path)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError([f"{path}: could not parse ({exc})"]) from exc

    if not isinstance(data, dict):
        raise ConfigError([f"{path}: top level must be a mapping"])

    try:
        return ResolverConfig.model_validate(data)
    except ValidationError as exc:
        issues = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err["loc"]) or "(root)"
            issues.append(f"{loc}: {err['msg']}")
        raise ConfigError(issues) from exc


def save_config(config: ResolverConfig, path: Union[str, Path]) -> None:
    """Write a ResolverConfig as YAML or JSON, chosen by file suffix."""
    path = Path(path)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            yaml.safe_dump(data, f, sort_keys=False)
        else:
            json.dump(data, f, indent=2)
