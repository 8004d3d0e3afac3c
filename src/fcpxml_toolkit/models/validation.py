"""
Validation result models.

Validators never raise for problems found in a document; they return
these values so callers can enumerate every problem at once.
"""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ValidationErrorType(str, Enum):
    """Kinds of problems that make a document invalid."""
    MISSING_ASSET_REFERENCE = "missing_asset_reference"
    MISSING_REQUIRED_ELEMENT = "missing_required_element"
    INVALID_VERSION = "invalid_version"
    DTD_VALIDATION = "dtd_validation"
    SCHEMA_UNAVAILABLE = "schema_unavailable"
    INVALID_TIME_VALUE = "invalid_time_value"


class ValidationWarningType(str, Enum):
    """Kinds of suspicious but tolerated data."""
    NEGATIVE_TIME_ATTRIBUTE = "negative_time_attribute"
    INVALID_TIME_VALUE = "invalid_time_value"


class ValidationError(BaseModel):
    """A problem that invalidates a document."""
    type: ValidationErrorType = Field(..., description="Error kind")
    message: str = Field(..., description="Human readable description")
    context: Dict[str, str] = Field(default_factory=dict, description="Offending ids, elements, lines")

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.message}"


class ValidationWarning(BaseModel):
    """A non-fatal finding."""
    type: ValidationWarningType = Field(..., description="Warning kind")
    message: str = Field(..., description="Human readable description")
    context: Dict[str, str] = Field(default_factory=dict, description="Offending attribute and element")

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.message}"


class ValidationResult(BaseModel):
    """Errors and warnings from one validation pass."""
    errors: List[ValidationError] = Field(default_factory=list, description="Fatal findings")
    warnings: List[ValidationWarning] = Field(default_factory=list, description="Non-fatal findings")

    @property
    def is_valid(self) -> bool:
        """A result is valid when it has no errors; warnings don't count."""
        return not self.errors

    @property
    def summary(self) -> str:
        if self.is_valid:
            if self.warnings:
                return f"Validation passed with {len(self.warnings)} warning(s)"
            return "Validation passed"
        return (
            f"Validation failed with {len(self.errors)} error(s) "
            f"and {len(self.warnings)} warning(s)"
        )

    @property
    def detailed_description(self) -> str:
        lines = [self.summary]
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  - {error}" for error in self.errors)
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)
        return "\n".join(lines)

    def errors_of_type(self, error_type: ValidationErrorType) -> List[ValidationError]:
        return [error for error in self.errors if error.type == error_type]

    def warnings_of_type(self, warning_type: ValidationWarningType) -> List[ValidationWarning]:
        return [warning for warning in self.warnings if warning.type == warning_type]

    def merged(self, other: "ValidationResult") -> "ValidationResult":
        """Combine two results, keeping order."""
        return ValidationResult(
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def of_error(
        cls,
        error_type: ValidationErrorType,
        message: str,
        context: Optional[Dict[str, str]] = None,
    ) -> "ValidationResult":
        """Result holding a single error."""
        return cls(errors=[ValidationError(type=error_type, message=message, context=context or {})])


class DocumentValidationReport(BaseModel):
    """Semantic and DTD results for one document, kept separately inspectable."""
    semantic: ValidationResult = Field(default_factory=ValidationResult, description="Reference graph pass")
    dtd: ValidationResult = Field(default_factory=ValidationResult, description="Grammar pass")

    @property
    def is_valid(self) -> bool:
        """Valid only when both passes report no errors."""
        return self.semantic.is_valid and self.dtd.is_valid

    @property
    def errors(self) -> List[ValidationError]:
        return self.semantic.errors + self.dtd.errors

    @property
    def warnings(self) -> List[ValidationWarning]:
        return self.semantic.warnings + self.dtd.warnings

    @property
    def summary(self) -> str:
        status = "valid" if self.is_valid else "invalid"
        return (
            f"Document is {status} (semantic: {self.semantic.summary}; "
            f"DTD: {self.dtd.summary})"
        )

    @property
    def detailed_description(self) -> str:
        return "\n".join([
            self.summary,
            "Semantic validation:",
            self.semantic.detailed_description,
            "DTD validation:",
            self.dtd.detailed_description,
        ])
