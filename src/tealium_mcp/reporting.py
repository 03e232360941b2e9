import json
from typing import Any, List

import pandas as pd

from tealium_mcp.models import DebugResult, TrackingSpec, ValidationResult

SEVERITY_HEADINGS = (
    ("error", "### 🔴 Errors", "Fix"),
    ("warning", "### 🟡 Warnings", "Suggestion"),
    ("info", "### 🔵 Info", None),
)


def to_json(result: Any) -> str:
    """Wire-shaped JSON for any result model."""
    return json.dumps(result.to_wire(), indent=2, ensure_ascii=False, default=str)


def issues_frame(result: DebugResult) -> pd.DataFrame:
    rows = [
        {
            "severity": i.severity,
            "path": i.path,
            "issue": i.issue,
            "recommendation": i.recommendation,
        }
        for i in result.issues
    ]
    return pd.DataFrame(rows, columns=["severity", "path", "issue", "recommendation"])


def format_validation_result(result: ValidationResult) -> str:
    lines: List[str] = []
    lines.append(f"## Validation Result: {'✅ VALID' if result.is_valid else '❌ INVALID'}")
    lines.append("")
    lines.append(result.summary)
    lines.append("")

    if result.errors:
        lines.append("### Errors")
        for error in result.errors:
            lines.append(f"- **{error.path}**: {error.message}")
            if error.expected:
                lines.append(f"  - Expected: {error.expected}")
        lines.append("")

    if result.warnings:
        lines.append("### Warnings")
        for warning in result.warnings:
            lines.append(f"- **{warning.path}**: {warning.message}")
            if warning.suggestion:
                lines.append(f"  - Suggestion: {warning.suggestion}")
        lines.append("")

    if result.suggestions:
        lines.append("### Suggestions")
        for suggestion in result.suggestions:
            lines.append(f"- {suggestion}")

    return "\n".join(lines)


def format_debug_result(result: DebugResult) -> str:
    lines: List[str] = ["# Data Layer Debug Report", ""]

    lines.append("## Summary")
    lines.append(f"- 🔴 Errors: {result.count('error')}")
    lines.append(f"- 🟡 Warnings: {result.count('warning')}")
    lines.append(f"- 🔵 Info: {result.count('info')}")
    lines.append(f"- Missing variables: {len(result.missing_variables)}")
    lines.append(f"- Type mismatches: {len(result.type_mismatches)}")
    lines.append("")

    if result.issues:
        lines.append("## Issues")
        lines.append("")
        for severity, heading, label in SEVERITY_HEADINGS:
            group = [i for i in result.issues if i.severity == severity]
            if not group:
                continue
            lines.append(heading)
            for issue in group:
                lines.append(f"- **{issue.path}**: {issue.issue}")
                if label:
                    lines.append(f"  - {label}: {issue.recommendation}")
            lines.append("")

    if result.missing_variables:
        lines.append("## Missing Variables")
        for variable in result.missing_variables:
            lines.append(f"- `{variable}`")
        lines.append("")

    if result.type_mismatches:
        lines.append("## Type Mismatches")
        for m in result.type_mismatches:
            lines.append(f"- `{m.path}`: expected **{m.expected}**, got **{m.actual}**")
        lines.append("")

    if result.recommendations:
        lines.append("## Recommendations")
        for rec in result.recommendations:
            lines.append(f"- {rec}")

    return "\n".join(lines)


def format_parsed_spec(spec: TrackingSpec) -> str:
    lines: List[str] = [f"# {spec.name}"]
    if spec.version is not None:
        lines.append(f"**Version:** {spec.version}")
    if spec.description is not None:
        lines.append(f"\n{spec.description}")
    lines.append("")

    lines.append(f"## Variables ({len(spec.variables)})")
    lines.append("")
    if spec.variables:
        lines.append("| Variable | Type | Required | Description |")
        lines.append("|----------|------|----------|-------------|")
        for v in spec.variables:
            lines.append(f"| `{v.name}` | {v.type} | {'✅' if v.required else '❌'} | {v.description} |")

    if spec.events:
        lines.append("")
        lines.append(f"## Events ({len(spec.events)})")
        lines.append("")
        for event in spec.events:
            lines.append(f"### {event.name}")
            lines.append(f"- **Trigger:** {event.trigger}")
            lines.append(f"- **Variables:** {len(event.variables)}")
            lines.append("")

    return "\n".join(lines)
