"""Unit tests for validation result models."""

from fcpxml_toolkit.models.validation import (
    DocumentValidationReport,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    ValidationWarning,
    ValidationWarningType,
)


def _warning():
    return ValidationWarning(
        type=ValidationWarningType.NEGATIVE_TIME_ATTRIBUTE,
        message="offset is negative",
        context={"attribute": "offset", "element": "asset-clip"},
    )


class TestValidationResult:
    """Test ValidationResult properties."""

    def test_empty_result_is_valid(self):
        """Test the success constructor."""
        result = ValidationResult.success()

        assert result.is_valid
        assert result.summary == "Validation passed"

    def test_warnings_do_not_invalidate(self):
        """Test validity only depends on errors."""
        result = ValidationResult(warnings=[_warning()])

        assert result.is_valid
        assert result.summary == "Validation passed with 1 warning(s)"

    def test_errors_invalidate(self):
        """Test an error makes the result invalid."""
        result = ValidationResult.of_error(
            ValidationErrorType.MISSING_ASSET_REFERENCE,
            "Reference 'r99' has no matching id",
            {"ref": "r99"},
        )

        assert not result.is_valid
        assert result.summary == "Validation failed with 1 error(s) and 0 warning(s)"
        assert result.errors[0].context == {"ref": "r99"}

    def test_detailed_description_lists_everything(self):
        """Test the multi-line rendering."""
        result = ValidationResult(
            errors=[ValidationError(type=ValidationErrorType.INVALID_VERSION, message="bad version")],
            warnings=[_warning()],
        )

        description = result.detailed_description

        assert "[invalid_version] bad version" in description
        assert "[negative_time_attribute] offset is negative" in description
        assert description.splitlines()[0] == result.summary

    def test_filters_by_type(self):
        """Test errors_of_type and warnings_of_type."""
        result = ValidationResult(
            errors=[
                ValidationError(type=ValidationErrorType.DTD_VALIDATION, message="a"),
                ValidationError(type=ValidationErrorType.MISSING_ASSET_REFERENCE, message="b"),
                ValidationError(type=ValidationErrorType.DTD_VALIDATION, message="c"),
            ],
            warnings=[_warning()],
        )

        assert [e.message for e in result.errors_of_type(ValidationErrorType.DTD_VALIDATION)] == ["a", "c"]
        assert len(result.warnings_of_type(ValidationWarningType.NEGATIVE_TIME_ATTRIBUTE)) == 1
        assert result.warnings_of_type(ValidationWarningType.INVALID_TIME_VALUE) == []

    def test_merged_keeps_order(self):
        """Test merging two results."""
        first = ValidationResult.of_error(ValidationErrorType.DTD_VALIDATION, "first")
        second = ValidationResult(
            errors=[ValidationError(type=ValidationErrorType.DTD_VALIDATION, message="second")],
            warnings=[_warning()],
        )

        merged = first.merged(second)

        assert [e.message for e in merged.errors] == ["first", "second"]
        assert len(merged.warnings) == 1
        assert len(first.errors) == 1


class TestDocumentValidationReport:
    """Test the combined semantic and DTD report."""

    def test_valid_when_both_pass(self):
        report = DocumentValidationReport()

        assert report.is_valid
        assert report.summary.startswith("Document is valid")

    def test_dtd_failure_invalidates(self):
        """Test either pass failing makes the report invalid."""
        report = DocumentValidationReport(
            dtd=ValidationResult.of_error(ValidationErrorType.DTD_VALIDATION, "Element foo not declared"),
        )

        assert not report.is_valid
        assert report.semantic.is_valid
        assert len(report.errors) == 1
        assert "Element foo not declared" in report.detailed_description

    def test_collects_warnings_from_both(self):
        report = DocumentValidationReport(
            semantic=ValidationResult(warnings=[_warning()]),
            dtd=ValidationResult(warnings=[_warning()]),
        )

        assert report.is_valid
        assert len(report.warnings) == 2
