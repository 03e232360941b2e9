"""
TypeScript / JavaScript scaffolding for a Tealium data layer.

Code is generated either from a tracking spec (typed section interfaces,
an EventName union and one tracking function per event) or, failing that,
from a sample data layer whose current values seed the initialization.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from tealium_mcp.guards import is_array, is_record, is_tracking_spec
from tealium_mcp.models import GeneratedCode, TrackingEvent, TrackingSpec, TrackingVariable
from tealium_mcp.naming import to_camel_case
from tealium_mcp.parse_spec import normalize_spec

logger = logging.getLogger(__name__)

TS_TYPES = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "array": "unknown[]",
    "object": "Record<string, unknown>",
}

WINDOW_DECLARATION = [
    "declare global {",
    "  interface Window {",
    "    utag_data: DataLayer;",
    "    utag?: {",
    "      link: (data: Record<string, unknown>) => void;",
    "      view: (data: Record<string, unknown>) => void;",
    "    };",
    "  }",
    "}",
    "",
]


def _filename(language: str) -> str:
    return "data-layer.ts" if language == "typescript" else "data-layer.js"


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def _prop_name(variable: TrackingVariable) -> str:
    return variable.name.split(".")[-1]


def to_ts_type(type_name: str) -> str:
    return TS_TYPES.get(type_name, "unknown")


def infer_ts_type(value: Any) -> str:
    if value is None:
        return "null"
    if is_array(value):
        return f"{infer_ts_type(value[0])}[]" if value else "unknown[]"
    if is_record(value):
        return "Record<string, unknown>"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "string"


def group_by_section(variables: List[TrackingVariable]) -> Dict[str, List[TrackingVariable]]:
    sections: Dict[str, List[TrackingVariable]] = {}
    for variable in variables:
        sections.setdefault(variable.name.split(".")[0], []).append(variable)
    return sections


def event_function_name(event_name: str) -> str:
    """`booking.completed` -> `trackBookingCompleted`."""
    return to_camel_case(("track_" + event_name.replace(".", "_")).lower())


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def spec_helpers(language: str, has_events: bool) -> str:
    lines = ["// Helper functions", ""]
    if language == "typescript":
        event_type = "EventName" if has_events else "string"
        lines += [
            "export function trackEvent(",
            f"  eventName: {event_type},",
            "  eventData?: Record<string, unknown>",
            "): void {",
        ]
    else:
        lines.append("function trackEvent(eventName, eventData) {")
    lines += [
        "  const payload = {",
        "    event: {",
        "      eventName,",
        "      ...eventData,",
        "    },",
        "    ...window.utag_data,",
        "  };",
        "",
        "  if (window.utag?.link) {",
        "    window.utag.link(payload);",
        "  } else {",
        "    console.warn('Tealium not loaded, event queued:', eventName);",
        "  }",
        "}",
        "",
    ]

    if language == "typescript":
        lines.append("export function updateDataLayer(updates: Partial<DataLayer>): void {")
    else:
        lines.append("function updateDataLayer(updates) {")
    lines += [
        "  window.utag_data = {",
        "    ...window.utag_data,",
        "    ...updates,",
        "  };",
        "}",
        "",
    ]
    return "\n".join(lines)


def basic_helpers(language: str) -> str:
    lines = ["// Helper functions", ""]
    if language == "typescript":
        lines += [
            "export function trackEvent(",
            "  eventName: string,",
            "  eventData?: Record<string, unknown>",
            "): void {",
        ]
    else:
        lines.append("function trackEvent(eventName, eventData) {")
    lines += [
        "  if (window.utag?.link) {",
        "    window.utag.link({",
        "      event: { eventName, ...eventData },",
        "      ...window.utag_data,",
        "    });",
        "  }",
        "}",
    ]
    return "\n".join(lines)


def event_function(event: TrackingEvent, language: str) -> str:
    name = event_function_name(event.name)
    typed = language == "typescript"
    lines = ["/**", f" * {event.description}", f" * Trigger: {event.trigger}", " */"]

    if typed and event.variables:
        lines.append(f"export function {name}(params: {{")
        ordered = [v for v in event.variables if v.required] + [v for v in event.variables if not v.required]
        for v in ordered:
            optional = "" if v.required else "?"
            lines.append(f"  {_prop_name(v)}{optional}: {to_ts_type(v.type)};")
        lines.append("}): void {")
    elif event.variables:
        lines.append(f"function {name}(params) {{")
    else:
        lines.append(f"function {name}(){': void' if typed else ''} {{")

    params = ", params" if event.variables else ""
    lines.append(f"  trackEvent('{event.name}'{params});")
    lines.append("}")
    return "\n".join(lines)


# ------------------------------------------------------------------
# Generators
# ------------------------------------------------------------------

def code_from_spec(spec: TrackingSpec, language: str, include_helpers: bool) -> GeneratedCode:
    lines: List[str] = []

    if language == "typescript":
        lines += ["// Auto-generated TypeScript interfaces", f"// Generated from: {spec.name}", ""]
        sections = group_by_section(spec.variables)
        for section, variables in sections.items():
            lines.append(f"export interface {_capitalize(section)}Data {{")
            for v in variables:
                optional = "" if v.required else "?"
                lines.append(f"  /** {v.description} */")
                lines.append(f"  {_prop_name(v)}{optional}: {to_ts_type(v.type)};")
            lines += ["}", ""]

        lines.append("export interface DataLayer {")
        lines += [f"  {section}?: {_capitalize(section)}Data;" for section in sections]
        lines += ["}", ""]

        if spec.events:
            union = " | ".join(f"'{e.name}'" for e in spec.events)
            lines += ["// Event types", f"export type EventName = {union};", ""]

    lines.append("// Data layer initialization")
    if language == "typescript":
        lines += WINDOW_DECLARATION
    lines += ["window.utag_data = window.utag_data || {};", ""]

    if include_helpers:
        lines.append(spec_helpers(language, bool(spec.events)))

    if spec.events:
        lines += ["// Event tracking functions", ""]
        for event in spec.events:
            lines += [event_function(event, language), ""]

    return GeneratedCode(code="\n".join(lines), language=language, imports=[], filename=_filename(language))


def code_from_data_layer(data_layer: Dict[str, Any], language: str, include_helpers: bool) -> GeneratedCode:
    lines: List[str] = []

    if language == "typescript":
        lines += ["// Auto-generated TypeScript interfaces from data layer", ""]
        for key, value in data_layer.items():
            if not is_record(value):
                continue
            lines.append(f"export interface {_capitalize(key)}Data {{")
            lines += [f"  {k}?: {infer_ts_type(v)};" for k, v in value.items()]
            lines += ["}", ""]

        # non-record sections keep their inferred primitive type
        lines.append("export interface DataLayer {")
        for key, value in data_layer.items():
            ts_type = f"{_capitalize(key)}Data" if is_record(value) else infer_ts_type(value)
            lines.append(f"  {key}?: {ts_type};")
        lines += ["}", ""]

    lines.append("// Data layer initialization")
    lines.append(f"window.utag_data = {json.dumps(data_layer, indent=2, ensure_ascii=False, default=str)};")
    lines.append("")

    if include_helpers:
        lines.append(basic_helpers(language))

    return GeneratedCode(code="\n".join(lines), language=language, filename=_filename(language))


def generate_code(
    spec: Optional[Any] = None,
    data_layer: Optional[Any] = None,
    language: str = "typescript",
    include_helpers: bool = True,
) -> GeneratedCode:
    if isinstance(spec, TrackingSpec):
        return code_from_spec(spec, language, include_helpers)
    if spec is not None and is_tracking_spec(spec):
        return code_from_spec(normalize_spec(spec), language, include_helpers)
    if spec is not None:
        logger.debug("Spec is not a tracking specification, falling back to data layer")

    if data_layer is not None and is_record(data_layer):
        return code_from_data_layer(data_layer, language, include_helpers)

    return GeneratedCode(code="// No specification or data layer provided", language=language)
