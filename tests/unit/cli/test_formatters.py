"""Unit tests for CLI output formatters."""

from decimal import Decimal

import click

from tripbudget.cli.utils.formatters import (
    format_error,
    format_info,
    format_money,
    format_success,
    format_table,
    format_warning,
)


class TestMessageFormatters:
    """Test colored message helpers."""

    def test_symbols(self):
        assert click.unstyle(format_success("Saved")) == "✓ Saved"
        assert click.unstyle(format_error("Failed")) == "✗ Failed"
        assert click.unstyle(format_warning("Careful")) == "⚠ Careful"
        assert click.unstyle(format_info("Note")) == "ℹ Note"

    def test_success_is_green(self):
        assert "\x1b[32m" in format_success("Saved")


class TestFormatMoney:
    """Test money formatting."""

    def test_two_decimals_with_separators(self):
        assert format_money(Decimal("1234.5")) == "1,234.50"

    def test_none(self):
        assert format_money(None) == "-"


class TestFormatTable:
    """Test table formatting."""

    def test_table_layout(self):
        table = format_table(["Day", "Lodging"], [[1, "Hotel Lisboa"], [2, "Hostel"]])

        lines = table.splitlines()
        assert lines[0] == "+-----+--------------+"
        assert lines[1] == "| Day | Lodging      |"
        assert lines[3] == "| 1   | Hotel Lisboa |"
        assert lines[-1] == lines[0]

    def test_truncates_wide_cells(self):
        table = format_table(["Name"], [["x" * 50]], max_width=10)

        assert "| xxxxxxxxxx |" in table

    def test_headers_only(self):
        assert len(format_table(["A"], []).splitlines()) == 3

    def test_no_headers(self):
        assert format_table([], [[1]]) == ""
