import io
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from tealium_mcp.errors import ParseError
from tealium_mcp.guards import is_array, is_boolean, is_number, is_record, is_string
from tealium_mcp.models import TrackingEvent, TrackingSpec, TrackingVariable
from tealium_mcp.utils import join_path

logger = logging.getLogger(__name__)

# spreadsheet exports name their columns in many ways
HEADER_ALIASES = {
    "name": ("name", "variable", "variable_name", "variablename", "field", "property"),
    "description": ("description", "desc", "definition", "notes", "comment"),
    "type": ("type", "datatype", "data_type", "format"),
    "required": ("required", "mandatory", "is_required", "isrequired"),
    "example": ("example", "sample", "sample_value", "samplevalue"),
    "allowed_values": ("allowed_values", "allowedvalues", "values", "enum", "options"),
    "event": ("event", "event_name", "eventname", "trigger"),
}

TYPE_ALIASES = {
    "string": ("string", "text", "varchar", "char"),
    "number": ("number", "int", "integer", "float", "double", "decimal", "numeric"),
    "boolean": ("boolean", "bool", "bit"),
    "array": ("array", "list", "collection"),
    "object": ("object", "json", "map", "dict"),
}

REQUIRED_TRUE = ("true", "yes", "1", "required")
DELIMITERS = (",", ";", "\t")


def detect_format(content: str) -> str:
    return "json" if content.strip().startswith(("{", "[")) else "csv"


def normalize_type(type_name: str) -> str:
    lower = type_name.strip().lower()
    for canonical, aliases in TYPE_ALIASES.items():
        if lower in aliases:
            return canonical
    return "string"


def _as_text(value: Any) -> str:
    if is_boolean(value):
        return "true" if value else "false"
    return str(value)


def parse_allowed_values(raw: Optional[str]) -> Optional[List[str]]:
    """JSON array, pipe-separated or comma-separated list of values."""
    if not raw or not raw.strip():
        return None
    text = raw.strip()
    if text.startswith("["):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            parsed = None
        if is_array(parsed):
            return [_as_text(v) for v in parsed]
    if "|" in text:
        return [v.strip() for v in text.split("|")]
    if "," in text:
        return [v.strip() for v in text.split(",")]
    return [text]


# ------------------------------------------------------------------
# JSON
# ------------------------------------------------------------------

def normalize_variable(raw: Dict[str, Any]) -> TrackingVariable:
    fields: Dict[str, Any] = {
        "name": raw["name"] if is_string(raw.get("name")) else "",
        "description": raw["description"] if is_string(raw.get("description")) else "",
        "type": normalize_type(raw["type"]) if is_string(raw.get("type")) else "string",
        "required": raw.get("required") is True,
    }
    example = raw.get("example")
    if is_string(example) or is_boolean(example) or is_number(example):
        fields["example"] = example
    if is_array(raw.get("allowedValues")):
        fields["allowed_values"] = [
            v if is_number(v) else _as_text(v) for v in raw["allowedValues"]
        ]
    if is_string(raw.get("format")):
        fields["format"] = raw["format"]
    return TrackingVariable(**fields)


def normalize_event(raw: Dict[str, Any]) -> TrackingEvent:
    variables = raw.get("variables") if is_array(raw.get("variables")) else []
    return TrackingEvent(
        name=raw["name"] if is_string(raw.get("name")) else "",
        description=raw["description"] if is_string(raw.get("description")) else "",
        trigger=raw["trigger"] if is_string(raw.get("trigger")) else "",
        variables=[normalize_variable(v if is_record(v) else {}) for v in variables],
    )


def normalize_spec(raw: Dict[str, Any]) -> TrackingSpec:
    variables = raw.get("variables") if is_array(raw.get("variables")) else []
    events = raw.get("events") if is_array(raw.get("events")) else []
    fields: Dict[str, Any] = {
        "name": raw["name"] if is_string(raw.get("name")) else "Unnamed Specification",
        "variables": [normalize_variable(v if is_record(v) else {}) for v in variables],
        "events": [normalize_event(e if is_record(e) else {}) for e in events],
    }
    if is_string(raw.get("version")):
        fields["version"] = raw["version"]
    if is_string(raw.get("description")):
        fields["description"] = raw["description"]
    return TrackingSpec(**fields)


def infer_type(value: Any) -> str:
    if is_array(value):
        return "array"
    if is_boolean(value):
        return "boolean"
    if is_number(value):
        return "number"
    if is_record(value):
        return "object"
    return "string"


def extract_variables(obj: Dict[str, Any], path: str = "") -> List[TrackingVariable]:
    """One variable per leaf of a sample data layer, named by its dotted path."""
    variables: List[TrackingVariable] = []
    for key, value in obj.items():
        current = join_path(path, key)
        if is_record(value):
            variables.extend(extract_variables(value, current))
            continue
        fields: Dict[str, Any] = {
            "name": current,
            "description": "Inferred from data layer",
            "type": infer_type(value),
            "required": False,
        }
        if is_string(value) or is_boolean(value) or is_number(value):
            fields["example"] = value
        variables.append(TrackingVariable(**fields))
    return variables


def infer_spec_from_data_layer(data_layer: Dict[str, Any]) -> TrackingSpec:
    return TrackingSpec(
        name="Inferred Specification",
        description="Auto-generated from data layer structure",
        variables=extract_variables(data_layer),
        events=[],
    )


def parse_json_spec(content: str) -> TrackingSpec:
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse JSON: {e}", "json") from e

    if is_record(parsed) and is_string(parsed.get("name")) and ("variables" in parsed or "events" in parsed):
        return normalize_spec(parsed)
    if is_array(parsed):
        return TrackingSpec(
            name="Imported Specification",
            variables=[normalize_variable(item if is_record(item) else {}) for item in parsed],
            events=[],
        )
    if is_record(parsed):
        return infer_spec_from_data_layer(parsed)
    raise ParseError("Invalid JSON structure", "json")


# ------------------------------------------------------------------
# CSV
# ------------------------------------------------------------------

def detect_delimiter(line: str) -> str:
    """Most frequent of `,` `;` tab outside quotes; comma on a tie or none."""
    counts = {d: 0 for d in DELIMITERS}
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif not in_quotes and ch in counts:
            counts[ch] += 1
    best = max(DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def count_fields(line: str, sep: str) -> int:
    """Number of cells on one line, separators inside quotes excluded."""
    fields = 1
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == sep and not in_quotes:
            fields += 1
    return fields


def read_csv_frame(content: str) -> Tuple[pd.DataFrame, List[int]]:
    """
    Read every non-blank line as a row, header included, as strings.

    Rows may be ragged: the frame is as wide as the widest line and short
    rows are padded with "". The second value holds each row's own cell count.
    """
    lines = [line for line in content.splitlines() if line.strip()]
    if not lines:
        raise ParseError("CSV content is empty", "csv")
    sep = detect_delimiter(lines[0])
    widths = [count_fields(line, sep) for line in lines]
    logger.debug("Reading CSV spec with delimiter %r, %d line(s)", sep, len(lines))
    try:
        df = pd.read_csv(
            io.StringIO("\n".join(lines)),
            sep=sep,
            header=None,
            names=range(max(widths)),
            engine="python",
            dtype=str,
            index_col=False,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ParseError(f"Failed to parse CSV: {e}", "csv") from e
    if len(widths) != len(df):
        # a quoted cell spanned lines; fall back to the padded width
        widths = [len(df.columns)] * len(df)
    return df.fillna(""), widths


def map_headers(columns) -> Dict[str, int]:
    header_map: Dict[str, int] = {}
    for i, column in enumerate(columns):
        normalized = str(column).strip().lower()
        for key, aliases in HEADER_ALIASES.items():
            if normalized in aliases:
                header_map[key] = i
                break
    return header_map


def _cell(values: List[str], header_map: Dict[str, int], key: str) -> Optional[str]:
    i = header_map.get(key)
    if i is None or i >= len(values):
        return None
    return values[i].strip()


def variable_from_row(values: List[str], header_map: Dict[str, int]) -> Optional[TrackingVariable]:
    name = _cell(values, header_map, "name") if "name" in header_map else (values[0].strip() if values else "")
    if not name:
        return None

    fields: Dict[str, Any] = {
        "name": name,
        "description": _cell(values, header_map, "description") or "",
        "type": normalize_type(_cell(values, header_map, "type") or "string"),
        "required": (_cell(values, header_map, "required") or "").lower() in REQUIRED_TRUE,
    }
    example = _cell(values, header_map, "example")
    if example:
        fields["example"] = example
    allowed = parse_allowed_values(_cell(values, header_map, "allowed_values"))
    if allowed is not None:
        fields["allowed_values"] = allowed
    return TrackingVariable(**fields)


def parse_csv_spec(content: str, has_header: bool = True) -> TrackingSpec:
    df, widths = read_csv_frame(content)
    rows = [[str(v) for v in row][:width] for row, width in zip(df.itertuples(index=False), widths)]
    variables: List[TrackingVariable] = []
    events: Dict[str, TrackingEvent] = {}

    if has_header:
        # cells beyond the header row are ignored
        header_map = map_headers(rows[0])
        for values in rows[1:]:
            variable = variable_from_row(values, header_map)
            if variable is None:
                continue
            variables.append(variable)

            event_name = _cell(values, header_map, "event")
            if event_name:
                event = events.setdefault(
                    event_name,
                    TrackingEvent(name=event_name, description=f"Event: {event_name}", trigger="User action"),
                )
                event.variables.append(variable)
    else:
        # no header: name, type, required, description; single-cell rows are skipped
        header_map = {"name": 0, "type": 1, "required": 2, "description": 3}
        for values in rows:
            if len(values) < 2:
                continue
            variable = variable_from_row(values, header_map)
            if variable is not None:
                variables.append(variable)

    return TrackingSpec(
        name="Imported Tracking Specification",
        variables=variables,
        events=list(events.values()),
    )


def parse_tracking_spec(content: str, format: str = "auto", has_header: bool = True) -> TrackingSpec:
    """
    Parse a tracking spec exported from a spreadsheet (CSV) or written as JSON.

    Raises ParseError when the content cannot be read in the chosen format.
    """
    if content is None or not content.strip():
        raise ParseError("content is required", format)
    detected = detect_format(content) if format == "auto" else format
    logger.debug("Parsing tracking spec as %s", detected)
    if detected == "json":
        return parse_json_spec(content)
    return parse_csv_spec(content, has_header)
