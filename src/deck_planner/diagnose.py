"""
Template Diagnostics

Pre-flight checks that catch template problems before a deck is planned.
The resolver itself degrades silently on these; diagnostics make them visible.
Checks for duplicate ids, tables without usable columns, missing header data, etc.
"""

import sys
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import ResolverConfig
from .models import ReportTemplate, TableField, UnsupportedField


class Severity(str, Enum):
    """Severity of a diagnostic issue."""
    error = "error"
    warning = "warning"
    info = "info"


@dataclass
class DiagnosticIssue:
    """A single diagnostic finding."""
    code: str
    severity: Severity
    message: str
    section_id: Optional[str] = None
    field_id: Optional[str] = None
    category: str = ""
    detail: str = ""


@dataclass
class DiagnosticReport:
    """Aggregated diagnostic results."""
    template_key: str = ""
    issues: List[DiagnosticIssue] = field(default_factory=list)
    section_count: int = 0
    field_count: int = 0
    table_count: int = 0

    @property
    def errors(self) -> List[DiagnosticIssue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> List[DiagnosticIssue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    @property
    def has_blocking_issues(self) -> bool:
        return len(self.errors) > 0

    def print_report(self, file=None) -> None:
        """Print a human-readable diagnostic report."""
        out = file or sys.stdout

        print("=" * 60, file=out)
        print(f"TEMPLATE DIAGNOSTIC REPORT: {self.template_key}", file=out)
        print("=" * 60, file=out)
        print(f"Sections: {self.section_count}  |  Fields: {self.field_count}  |  Tables: {self.table_count}", file=out)
        print(f"Issues: {len(self.errors)} errors, {len(self.warnings)} warnings, "
              f"{len(self.issues) - len(self.errors) - len(self.warnings)} info", file=out)
        print("-" * 60, file=out)

        for issue in self.issues:
            prefix = {
                Severity.error: "ERROR  ",
                Severity.warning: "WARN   ",
                Severity.info: "INFO   ",
            }[issue.severity]

            where = ".".join(p for p in (issue.section_id, issue.field_id) if p)
            where_str = f" [{where}]" if where else ""
            print(f"  {prefix} {issue.code}{where_str}: {issue.message}", file=out)
            if issue.detail:
                print(f"         {issue.detail}", file=out)

        print("-" * 60, file=out)
        if self.has_blocking_issues:
            print("RESULT: BLOCKING errors found. Slide ids may collide.", file=out)
        elif self.warnings:
            print("RESULT: Warnings found. Some content will be left out of the deck.", file=out)
        else:
            print("RESULT: Template looks good!", file=out)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "template_key": self.template_key,
            "section_count": self.section_count,
            "field_count": self.field_count,
            "table_count": self.table_count,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "has_blocking_issues": self.has_blocking_issues,
            "issues": [
                {
                    "code": i.code,
                    "severity": i.severity.value,
                    "message": i.message,
                    "section_id": i.section_id,
                    "field_id": i.field_id,
                    "category": i.category,
                    "detail": i.detail,
                }
                for i in self.issues
            ],
        }


# ============================================================
# DIAGNOSTIC CHECKS
# ============================================================

def _check_section_ids(template: ReportTemplate, report: DiagnosticReport) -> None:
    """TPL-001: Section ids must be unique."""
    counts = Counter(s.id for s in template.sections)
    for section_id, count in counts.items():
        if count > 1:
            report.issues.append(DiagnosticIssue(
                code="TPL-001",
                severity=Severity.error,
                message=f"Section id used {count} times",
                section_id=section_id,
                category="structure",
            ))


def _check_field_ids(template: ReportTemplate, report: DiagnosticReport) -> None:
    """TPL-002: Field ids must be unique within a section."""
    for section in template.sections:
        counts = Counter(f.id for f in section.fields)
        for field_id, count in counts.items():
            if count > 1:
                report.issues.append(DiagnosticIssue(
                    code="TPL-002",
                    severity=Severity.error,
                    message=f"Field id used {count} times in section",
                    section_id=section.id,
                    field_id=field_id,
                    category="structure",
                ))


def _check_table_columns(template: ReportTemplate, report: DiagnosticReport) -> None:
    """TPL-010/011: Tables need columns, and two or more to be chartable."""
    for section in template.sections:
        for f in section.fields:
            if not isinstance(f, TableField):
                continue
            if not f.columns:
                report.issues.append(DiagnosticIssue(
                    code="TPL-010",
                    severity=Severity.warning,
                    message="Table has no declared columns",
                    section_id=section.id,
                    field_id=f.id,
                    category="table",
                    detail="Table slide will be empty; no chart or summary KPI is possible.",
                ))
            elif len(f.columns) == 1:
                report.issues.append(DiagnosticIssue(
                    code="TPL-011",
                    severity=Severity.info,
                    message="Table has a single column",
                    section_id=section.id,
                    field_id=f.id,
                    category="table",
                    detail="Charts and summary KPIs need a label column plus a value column.",
                ))


def _check_header_section(
    template: ReportTemplate, config: ResolverConfig, report: DiagnosticReport
) -> None:
    """TPL-020: Title slide subtitle and author come from the header section."""
    header = template.section(config.header_section_id)
    if header is None:
        report.issues.append(DiagnosticIssue(
            code="TPL-020",
            severity=Severity.info,
            message=f"No '{config.header_section_id}' section",
            category="header",
            detail="Title slide will have no subtitle or author.",
        ))
        return

    field_ids = {f.id for f in header.fields}
    for role, aliases in (("subtitle", config.subtitle_aliases), ("author", config.author_aliases)):
        if not field_ids.intersection(aliases):
            report.issues.append(DiagnosticIssue(
                code="TPL-021",
                severity=Severity.info,
                message=f"Header has no {role} field",
                section_id=header.id,
                category="header",
                detail=f"Recognized ids: {', '.join(aliases)}",
            ))


def _check_labels(
    template: ReportTemplate, config: ResolverConfig, report: DiagnosticReport
) -> None:
    """TPL-030: Unlabeled fields fall back to the section title."""
    skipped = set(config.skipped_section_ids)
    for section in template.sections:
        if section.id in skipped:
            continue
        for f in section.fields:
            if not f.label.strip():
                report.issues.append(DiagnosticIssue(
                    code="TPL-030",
                    severity=Severity.info,
                    message="Field has no label",
                    section_id=section.id,
                    field_id=f.id,
                    category="label",
                    detail=f"Slides will be titled '{section.title}'.",
                ))


def _check_field_types(template: ReportTemplate, report: DiagnosticReport) -> None:
    """TPL-040: Fields with an unknown type are left out of the deck."""
    for section in template.sections:
        for f in section.fields:
            if isinstance(f, UnsupportedField):
                report.issues.append(DiagnosticIssue(
                    code="TPL-040",
                    severity=Severity.warning,
                    message=f"Unsupported field type '{f.declared_type}'",
                    section_id=section.id,
                    field_id=f.id,
                    category="structure",
                    detail="Field will not appear in any slide.",
                ))


# ============================================================
# MAIN ENTRY POINT
# ============================================================

def diagnose_template(
    template: Union[ReportTemplate, Mapping[str, Any]],
    config: Optional[ResolverConfig] = None,
) -> DiagnosticReport:
    """Run all diagnostic checks on a report template.

    Args:
        template: A ReportTemplate or its raw JSON mapping
        config: Optional ResolverConfig (reserved ids and header aliases)

    Returns:
        DiagnosticReport with all findings
    """
    if not isinstance(template, ReportTemplate):
        template = ReportTemplate.model_validate(template)
    config = config or ResolverConfig()

    report = DiagnosticReport(
        template_key=template.key,
        section_count=len(template.sections),
        field_count=sum(len(s.fields) for s in template.sections),
        table_count=sum(
            1 for s in template.sections for f in s.fields if isinstance(f, TableField)
        ),
    )

    _check_section_ids(template, report)
    _check_field_ids(template, report)
    _check_table_columns(template, report)
    _check_field_types(template, report)
    _check_header_section(template, config, report)
    _check_labels(template, config, report)

    return report
