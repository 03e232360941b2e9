import logging
from typing import Any, List, Optional

from tealium_mcp.guards import is_record
from tealium_mcp.models import RuleFindings, ValidationError, ValidationResult, ValidationWarning
from tealium_mcp.naming import check_naming_conventions
from tealium_mcp.rules import validate_tealium_rules
from tealium_mcp.schema_validator import validate_against_schema
from tealium_mcp.schemas import DEFAULT_SCHEMA_URI

logger = logging.getLogger(__name__)


def promote_warnings(warnings: List[ValidationWarning]) -> List[ValidationError]:
    """Strict mode: each warning becomes an error, its suggestion kept as `expected`."""
    promoted = []
    for warning in warnings:
        error = ValidationError(path=warning.path, message=warning.message)
        if warning.suggestion is not None:
            error.expected = warning.suggestion
        promoted.append(error)
    return promoted


def summarize(is_valid: bool, error_count: int, warning_count: int) -> str:
    if is_valid and warning_count == 0:
        return "Data layer is valid with no warnings"
    if is_valid:
        return f"Data layer is valid with {warning_count} warning(s)"
    return f"Found {error_count} error(s) and {warning_count} warning(s)"


def validate_data_layer(
    data_layer: Any,
    schema_uri: Optional[str] = DEFAULT_SCHEMA_URI,
    strict_mode: bool = False,
) -> ValidationResult:
    """
    Validate a data layer against a schema, the Tealium rules and naming conventions.

    Ordering of the merged lists is fixed: schema errors, then rule errors,
    then (strict mode only) promoted warnings. Warnings list rule findings
    before naming findings.
    """
    if not is_record(data_layer):
        return ValidationResult(
            is_valid=False,
            errors=[
                ValidationError(
                    path="/",
                    message="Data layer must be a JSON object",
                    value=data_layer,
                    expected="object",
                )
            ],
            warnings=[],
            suggestions=["Provide the data layer as a JSON object, e.g. utag_data"],
            summary="Validation failed: data layer is not an object",
        )

    schema_result = validate_against_schema(data_layer, schema_uri or DEFAULT_SCHEMA_URI)
    rule_findings: RuleFindings = validate_tealium_rules(data_layer)
    naming_warnings = check_naming_conventions(data_layer)

    errors = schema_result.errors + rule_findings.errors
    warnings = schema_result.warnings + rule_findings.warnings + naming_warnings
    suggestions = schema_result.suggestions + rule_findings.suggestions

    if strict_mode:
        errors = errors + promote_warnings(warnings)

    is_valid = not errors
    summary = summarize(is_valid, len(errors), len(warnings))
    logger.info("Validated data layer against %s: %s", schema_uri, summary)

    return ValidationResult(
        is_valid=is_valid,
        errors=errors,
        warnings=[] if strict_mode else warnings,
        suggestions=suggestions,
        summary=summary,
    )
