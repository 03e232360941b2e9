from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

class ValidationError(WireModel):
    path: str
    message: str
    value: Any = None
    expected: Optional[str] = None


class ValidationWarning(WireModel):
    path: str
    message: str
    suggestion: Optional[str] = None


class RuleFindings(WireModel):
    errors: List[ValidationError] = Field(default_factory=list)
    warnings: List[ValidationWarning] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class ValidationResult(WireModel):
    is_valid: bool
    errors: List[ValidationError] = Field(default_factory=list)
    warnings: List[ValidationWarning] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    summary: str = ""


# ------------------------------------------------------------------
# Debug
# ------------------------------------------------------------------

Severity = Literal["error", "warning", "info"]


class DebugIssue(WireModel):
    severity: Severity
    path: str
    issue: str
    recommendation: str


class TypeMismatch(WireModel):
    path: str
    expected: str
    actual: str


class DebugResult(WireModel):
    snapshot: Dict[str, Any] = Field(default_factory=dict)
    issues: List[DebugIssue] = Field(default_factory=list)
    missing_variables: List[str] = Field(default_factory=list)
    type_mismatches: List[TypeMismatch] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    def count(self, severity: str) -> int:
        return sum(1 for i in self.issues if i.severity == severity)


# ------------------------------------------------------------------
# Tracking specs and generated code
# ------------------------------------------------------------------

VariableType = Literal["string", "number", "boolean", "array", "object"]


class TrackingVariable(WireModel):
    name: str
    description: str = ""
    type: VariableType = "string"
    required: bool = False
    example: Optional[Union[bool, int, float, str]] = None
    allowed_values: Optional[List[Union[int, float, str]]] = None
    format: Optional[str] = None


class TrackingEvent(WireModel):
    name: str
    description: str = ""
    trigger: str = ""
    variables: List[TrackingVariable] = Field(default_factory=list)


class TrackingSpec(WireModel):
    name: str
    version: Optional[str] = None
    description: Optional[str] = None
    variables: List[TrackingVariable] = Field(default_factory=list)
    events: List[TrackingEvent] = Field(default_factory=list)


class GeneratedCode(WireModel):
    code: str
    language: Literal["typescript", "javascript"]
    imports: Optional[List[str]] = None
    filename: Optional[str] = None
