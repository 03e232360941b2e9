import re
from typing import Any, Dict, List

from tealium_mcp.guards import is_record
from tealium_mcp.models import ValidationWarning
from tealium_mcp.utils import join_path

CAMEL_CASE_RE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
_SEPARATOR_RE = re.compile(r"[-_\s]+(.)?")

KNOWN_PREFIXES = (
    "page", "user", "event", "product", "transaction",
    "search", "hotel", "room", "booking", "guest",
)

RESERVED_WORDS = ("undefined", "null", "true", "false", "function", "object")


def is_camel_case(name: str) -> bool:
    return CAMEL_CASE_RE.fullmatch(name) is not None


def to_camel_case(name: str) -> str:
    """`Hotel_Name` -> `hotelName`: drop separators, upper the next char, lower the first."""
    out = _SEPARATOR_RE.sub(lambda m: (m.group(1) or "").upper(), name)
    return out[:1].lower() + out[1:]


def check_key(key: str, path: str) -> List[ValidationWarning]:
    """All naming warnings for a single key; the checks are independent."""
    warnings: List[ValidationWarning] = []

    if not is_camel_case(key) and key not in KNOWN_PREFIXES:
        warnings.append(
            ValidationWarning(
                path=path,
                message=f'Variable name "{key}" is not in camelCase',
                suggestion=f'Consider renaming to "{to_camel_case(key)}"',
            )
        )

    if key.lower() in RESERVED_WORDS:
        warnings.append(
            ValidationWarning(
                path=path,
                message=f'"{key}" is a reserved word and should not be used as a variable name',
                suggestion="Use a more descriptive name",
            )
        )

    if len(key) == 1:
        warnings.append(
            ValidationWarning(
                path=path,
                message=f'Variable name "{key}" is too short',
                suggestion="Use a more descriptive name",
            )
        )

    if len(key) <= 3 and key == key.upper() and key != "id":
        warnings.append(
            ValidationWarning(
                path=path,
                message=f'Variable name "{key}" appears to be an abbreviation',
                suggestion="Use full words for better clarity",
            )
        )

    return warnings


def check_naming_conventions(document: Dict[str, Any], path: str = "") -> List[ValidationWarning]:
    """Walk every nested record (arrays are not entered) and check each key."""
    warnings: List[ValidationWarning] = []
    for key, value in document.items():
        key = str(key)
        current = join_path(path, key)
        warnings.extend(check_key(key, current))
        if is_record(value):
            warnings.extend(check_naming_conventions(value, current))
    return warnings
