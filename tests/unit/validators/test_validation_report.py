"""
Unit tests for ValidationReport.
"""

import pytest

from tripbudget.exceptions import ValidationError
from tripbudget.validators import ValidationReport, ValidationSeverity


class TestValidationReport:
    """Test ValidationReport collection and formatting."""

    def test_empty_report_is_valid(self):
        report = ValidationReport()

        assert report.is_valid()
        assert report.summary() == "No issues found"
        assert report.format() == "Validation successful - no issues found"
        report.raise_if_invalid("Should not raise")

    def test_warnings_do_not_invalidate(self):
        report = ValidationReport()
        report.add_warning("nights", "ignored", 3)

        assert report.is_valid()
        assert report.warning_count == 1
        assert report.get_warnings()[0].severity == ValidationSeverity.WARNING

    def test_errors_and_summary(self):
        report = ValidationReport()
        report.add_error("lodging_name", "Lodging name is required")
        report.add_error("total_cost", "Total cost is required")
        report.add_warning("nights", "ignored")

        assert not report.is_valid()
        assert report.summary() == "2 error(s), 1 warning(s)"

    def test_format_lists_errors_first(self):
        report = ValidationReport()
        report.add_warning("nights", "ignored")
        report.add_error("total_cost", "missing")

        lines = report.format().splitlines()

        assert lines[1] == "  - [ERROR] total_cost: missing"
        assert lines[2] == "  - [WARNING] nights: ignored"

    def test_merge(self):
        first, second = ValidationReport(), ValidationReport()
        first.add_error("a", "bad a")
        second.add_error("b", "bad b")

        first.merge(second)

        assert first.error_count == 2

    def test_raise_if_invalid_carries_report(self):
        report = ValidationReport()
        report.add_error("total_cost", "Total cost is required")

        with pytest.raises(ValidationError) as exc_info:
            report.raise_if_invalid("Invalid lodging booking")

        assert exc_info.value.message == (
            "Invalid lodging booking: Total cost is required"
        )
        assert exc_info.value.report is report
