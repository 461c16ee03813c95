"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import List, Optional, Sequence

import click


def format_success(message: str) -> str:
    """Green, bold success line."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Red, bold error line."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Yellow, bold warning line."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Blue info line."""
    return click.style(f"ℹ {message}", fg="blue")


def format_money(amount: Optional[Decimal]) -> str:
    """Amount with two decimals and thousands separators, or '-' when unset.

    Example:
        >>> format_money(Decimal("1234.5"))
        '1,234.50'
    """
    if amount is None:
        return "-"
    return f"{amount:,.2f}"


def format_table(
    headers: List[str], rows: Sequence[Sequence[object]], max_width: int = 40
) -> str:
    """Format rows as a bordered text table.

    Args:
        headers: Column headers
        rows: Data rows; cells are converted with str()
        max_width: Cells wider than this are truncated

    Returns:
        The table, or an empty string when there are no headers
    """
    if not headers:
        return ""

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(headers)]):
            col_widths[i] = max(col_widths[i], len(str(cell)))
    col_widths = [min(w, max_width) for w in col_widths]

    def render(cells: Sequence[object]) -> str:
        return (
            "|"
            + "|".join(
                f" {str(cell)[: col_widths[i]]:<{col_widths[i]}} "
                for i, cell in enumerate(cells[: len(headers)])
            )
            + "|"
        )

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"

    lines = [separator, render(headers), separator]
    if rows:
        lines.extend(render(row) for row in rows)
        lines.append(separator)
    return "\n".join(lines)
