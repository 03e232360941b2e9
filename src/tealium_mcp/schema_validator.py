import json
import logging
from typing import Any, Dict, List

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError as JsonSchemaDefinitionError
from jsonschema.exceptions import ValidationError as JsonSchemaError

from tealium_mcp.errors import SchemaError
from tealium_mcp.models import ValidationError, ValidationResult
from tealium_mcp.schemas import DEFAULT_SCHEMA_URI, SCHEMAS, resolve_schema_uri, schema_ids
from tealium_mcp.utils import json_type, render_path

logger = logging.getLogger(__name__)


def build_validator(uri: str, schema: Dict[str, Any]) -> Draft7Validator:
    try:
        Draft7Validator.check_schema(schema)
    except JsonSchemaDefinitionError as e:
        raise SchemaError(f"Invalid schema definition: {e.message}", uri) from e
    return Draft7Validator(schema, format_checker=FormatChecker())


VALIDATORS: Dict[str, Draft7Validator] = {
    uri: build_validator(uri, schema) for uri, schema in SCHEMAS.items()
}


def _render_constraint(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, (dict, bool)) or value is None:
        return json.dumps(value)
    return str(value)


def format_violation(error: JsonSchemaError) -> str:
    """One human-readable message per violated keyword."""
    keyword = error.validator
    constraint = error.validator_value

    if keyword == "required":
        return f"Missing required property: {_render_constraint(constraint)}"
    if keyword == "type":
        return f"Expected {_render_constraint(constraint)}, got {json_type(error.instance)}"
    if keyword == "enum":
        return f"Value must be one of: {_render_constraint(constraint)}"
    if keyword == "minLength":
        return f"String is too short (minimum {constraint} characters)"
    if keyword == "pattern":
        return f"Value does not match pattern: {constraint}"
    if keyword == "minimum":
        return f"Value must be >= {constraint}"
    if keyword == "maximum":
        return f"Value must be <= {constraint}"
    return error.message or "Validation error"


def _iter_violations(validator: Draft7Validator, document: Any) -> List[JsonSchemaError]:
    """Flatten every violation; `required` gives one error per missing key."""
    out: List[JsonSchemaError] = []
    seen_required = set()
    for error in validator.iter_errors(document):
        if error.validator == "required" and isinstance(error.instance, dict):
            # the engine repeats the whole required list on each missing key
            key = tuple(error.absolute_path)
            if key in seen_required:
                continue
            seen_required.add(key)
            for name in error.validator_value:
                if name not in error.instance:
                    single = JsonSchemaError(
                        f"{name!r} is a required property",
                        validator="required",
                        path=error.absolute_path,
                        instance=error.instance,
                        validator_value=[name],
                    )
                    out.append(single)
            continue
        out.append(error)
    return out


def validate_against_schema(document: Any, schema_uri: str = DEFAULT_SCHEMA_URI) -> ValidationResult:
    """
    Validate `document` against one of the fixed schemas.

    Every violation is reported (the engine does not stop at the first one).
    An unknown schema id yields an invalid result, never an exception.
    """
    uri = resolve_schema_uri(schema_uri)
    validator = VALIDATORS.get(uri)

    if validator is None:
        logger.warning("Schema not found: %s", schema_uri)
        return ValidationResult(
            is_valid=False,
            errors=[
                ValidationError(
                    path="/",
                    message=f"Schema not found: {schema_uri}",
                    value=schema_uri,
                )
            ],
            warnings=[],
            suggestions=[f"Available schemas: {', '.join(schema_ids())}"],
            summary=f'Validation failed: Schema "{schema_uri}" not found',
        )

    errors = [
        ValidationError(
            path=render_path(v.absolute_path),
            message=format_violation(v),
            value=v.instance,
            expected=_render_constraint(v.validator_value),
        )
        for v in _iter_violations(validator, document)
    ]

    is_valid = not errors
    return ValidationResult(
        is_valid=is_valid,
        errors=errors,
        warnings=[],
        suggestions=[],
        summary="Data layer is valid" if is_valid else f"Found {len(errors)} error(s) in data layer",
    )
