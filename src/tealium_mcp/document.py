import json
import logging
from typing import Any, Dict, List, Optional, Union

from tealium_mcp.guards import data_layer_shape_error, is_array, is_boolean, is_number, is_record, is_string
from tealium_mcp.models import TrackingSpec, TrackingVariable
from tealium_mcp.parse_spec import normalize_spec
from tealium_mcp.utils import format_number, json_type

logger = logging.getLogger(__name__)

DRAFT_07 = "http://json-schema.org/draft-07/schema#"
MAX_VALUE_WIDTH = 30
NOTHING_TO_DOCUMENT = "No data layer or specification provided"


def _variable_row(variable: TrackingVariable) -> str:
    required = "✅" if variable.required else "❌"
    return f"| `{variable.name}` | {variable.type} | {required} | {variable.description} |"


def format_value(value: Any) -> str:
    """Short table rendering of a current value."""
    if value is None:
        return "*empty*"
    if is_string(value):
        return f'"{value[:MAX_VALUE_WIDTH]}..."' if len(value) > MAX_VALUE_WIDTH else f'"{value}"'
    if is_record(value) or is_array(value):
        return "*object*"
    if is_boolean(value):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    return str(value)


# ------------------------------------------------------------------
# From a tracking spec
# ------------------------------------------------------------------

def markdown_from_spec(spec: TrackingSpec) -> str:
    lines: List[str] = [f"# {spec.name}"]
    if spec.version:
        lines.append(f"**Version:** {spec.version}")
    if spec.description:
        lines.append(f"\n{spec.description}")
    lines.append("")

    if spec.variables:
        lines += ["## Data Layer Variables", ""]
        lines.append("| Variable | Type | Required | Description |")
        lines.append("|----------|------|----------|-------------|")
        lines += [_variable_row(v) for v in spec.variables]
        lines.append("")

        lines += ["### Variable Details", ""]
        for v in spec.variables:
            lines.append(f"#### `{v.name}`")
            lines.append(f"- **Type:** {v.type}")
            lines.append(f"- **Required:** {'Yes' if v.required else 'No'}")
            lines.append(f"- **Description:** {v.description}")
            if v.example is not None:
                lines.append(f"- **Example:** `{json.dumps(v.example, ensure_ascii=False)}`")
            if v.allowed_values:
                lines.append("- **Allowed values:** " + ", ".join(f"`{a}`" for a in v.allowed_values))
            if v.format:
                lines.append(f"- **Format:** {v.format}")
            lines.append("")

    if spec.events:
        lines += ["## Events", ""]
        for event in spec.events:
            lines.append(f"### {event.name}")
            lines.append(f"**Trigger:** {event.trigger}")
            lines.append("")
            lines.append(event.description)
            lines.append("")
            if event.variables:
                lines.append("#### Variables")
                lines.append("| Variable | Type | Required | Description |")
                lines.append("|----------|------|----------|-------------|")
                lines += [_variable_row(v) for v in event.variables]
                lines.append("")

    return "\n".join(lines)


def json_schema_from_spec(spec: TrackingSpec) -> Dict[str, Any]:
    """Draft-07 schema; dotted variable names become nested object properties."""
    schema: Dict[str, Any] = {
        "$schema": DRAFT_07,
        "title": spec.name,
        "type": "object",
        "properties": {},
        "required": [],
    }
    if spec.description:
        schema["description"] = spec.description

    for variable in spec.variables:
        *parents, leaf = variable.name.split(".")
        current = schema["properties"]
        for part in parents:
            node = current.setdefault(part, {"type": "object", "properties": {}})
            current = node.setdefault("properties", {})

        prop: Dict[str, Any] = {"type": variable.type, "description": variable.description}
        if variable.allowed_values:
            prop["enum"] = list(variable.allowed_values)
        current[leaf] = prop

        # only top-level names are listed as required
        if variable.required and not parents:
            schema["required"].append(variable.name)

    return schema


# ------------------------------------------------------------------
# From a data layer
# ------------------------------------------------------------------

def markdown_from_data_layer(data_layer: Dict[str, Any]) -> str:
    lines: List[str] = ["# Data Layer Documentation", "", "*Auto-generated from data layer structure*", ""]

    broken = data_layer_shape_error(data_layer)
    if broken is not None:
        lines.append(f"> **Note:** section `{broken}` does not match the expected Tealium shape.")
        lines.append("")

    for section, value in data_layer.items():
        if not is_record(value):
            continue
        lines.append(f"## {section[:1].upper() + section[1:]} Data")
        lines.append("")
        lines.append("| Variable | Type | Current Value |")
        lines.append("|----------|------|---------------|")
        for key, val in value.items():
            lines.append(f"| `{section}.{key}` | {json_type(val)} | {format_value(val)} |")
        lines.append("")

    lines += ["## Example Data Layer", "", "```javascript"]
    lines.append("window.utag_data = " + json.dumps(data_layer, indent=2, ensure_ascii=False, default=str) + ";")
    lines.append("```")
    return "\n".join(lines)


def infer_schema(value: Any, title: str = "Data Layer") -> Dict[str, Any]:
    if value is None:
        return {"type": "null"}
    if is_array(value):
        return {"type": "array", "items": infer_schema(value[0], "item") if value else {}}
    if is_record(value):
        return {
            "type": "object",
            "title": title,
            "properties": {k: infer_schema(v, k) for k, v in value.items()},
        }
    return {"type": json_type(value)}


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------

def generate_documentation(
    data_layer: Optional[Dict[str, Any]] = None,
    spec: Optional[Union[TrackingSpec, Dict[str, Any]]] = None,
    format: str = "markdown",
) -> str:
    """
    Document a tracking spec (preferred when both are given) or a sample
    data layer, as Markdown or as a draft-07 JSON Schema string.
    """
    if spec is not None:
        if not isinstance(spec, TrackingSpec):
            spec = normalize_spec(spec)
        logger.debug("Documenting spec %r as %s", spec.name, format)
        if format == "markdown":
            return markdown_from_spec(spec)
        return json.dumps(json_schema_from_spec(spec), indent=2, ensure_ascii=False)

    if data_layer is not None:
        logger.debug("Documenting data layer as %s", format)
        if format == "markdown":
            return markdown_from_data_layer(data_layer)
        return json.dumps(infer_schema(data_layer), indent=2, ensure_ascii=False, default=str)

    return NOTHING_TO_DOCUMENT
