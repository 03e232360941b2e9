import math
import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from tealium_mcp.guards import UNDEFINED

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
_FLOAT_PREFIX_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def safe_get(d: Dict, *keys, default=None):
    """Nested dict safe getter: safe_get(obj, 'a', 'b') -> obj.get('a',{}).get('b')"""
    cur = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k, default)
    return cur


def join_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def render_path(parts) -> str:
    """Render a sequence of keys/indices as `a.b[0].c`; the root is `/`."""
    out = ""
    for part in parts:
        if isinstance(part, int):
            out = index_path(out, part)
        else:
            out = join_path(out, str(part))
    return out or "/"


def json_type(value: Any) -> str:
    """JSON type name of a decoded value (bool is never a number)."""
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def parse_float_prefix(text: str) -> float:
    """Leading numeric prefix of `text` as a float; 0 when there is none."""
    m = _FLOAT_PREFIX_RE.match(text)
    if not m:
        return 0.0
    value = float(m.group(0))
    return 0.0 if math.isnan(value) else value


def format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_calendar_date(value: Any) -> Optional[date]:
    """Parse `YYYY-MM-DD` (or a full ISO timestamp) into a date, else None."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        if ISO_DATE_RE.fullmatch(text):
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None
