"""
Utility functions for formatting text-based reports and tables.

Used for the sync run report: one row per replayed entry, then the outcome
counts. Cell text longer than its column is cut with an ellipsis so that long
entry labels never break the alignment.
"""

from typing import Any, List, Mapping


class Column:
    """Column definition for table formatting."""

    def __init__(self, name: str, width: int, align: str = "<"):
        """
        Args:
            name: Column header name
            width: Column width in characters
            align: Alignment ('<' left, '>' right, '^' center)
        """
        self.name = name
        self.width = width
        self.align = align

    def format_header(self) -> str:
        return f"{self.name:{self.align}{self.width}}"

    def format_value(self, value: Any) -> str:
        """Format a cell, truncating text that does not fit the column."""
        text = str(value)
        if len(text) > self.width:
            text = text[: self.width - 1] + "…"
        return f"{text:{self.align}{self.width}}"


class TableFormatter:
    """
    Builder for formatted text tables with aligned columns.

    Every add_* method returns self for chaining:

        table.add_section_header("Sync report").add_table_header().add_separator()
    """

    def __init__(self, columns: List[Column], total_width: int = 80):
        """
        Args:
            columns: List of Column definitions
            total_width: Total report width for separators
        """
        self.columns = columns
        self.total_width = total_width
        self.lines: List[str] = []

    def add_section_header(self, title: str) -> "TableFormatter":
        self.lines.append("=" * self.total_width)
        self.lines.append(title)
        self.lines.append("=" * self.total_width)
        return self

    def add_table_header(self) -> "TableFormatter":
        header_parts = [col.format_header() for col in self.columns]
        self.lines.append(" ".join(header_parts))
        return self

    def add_separator(self, char: str = "-") -> "TableFormatter":
        self.lines.append(char * self.total_width)
        return self

    def add_row(self, values: List[Any]) -> "TableFormatter":
        """
        Add data row with column values.

        Args:
            values: List of values (one per column)

        Raises:
            ValueError: If number of values doesn't match columns
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")

        row_parts = [col.format_value(val) for col, val in zip(self.columns, values)]
        self.lines.append(" ".join(row_parts))
        return self

    def add_counts(self, counts: Mapping[str, int], empty_text: str = "Nothing counted") -> "TableFormatter":
        """
        Add one "label  count (share)" line per count, after a blank line.

        Args:
            counts: Label → count, in display order; shares are of their sum
            empty_text: Line shown instead when there are no counts

        Example:
            add_counts({"applied": 3, "save_timed_out": 1})
            # applied          3 (75.0%)
            # save_timed_out   1 (25.0%)
        """
        total = sum(counts.values())
        width = max((len(label) for label in counts), default=0)
        lines = [
            f"{label:<{width}} {count:>4} ({format_percentage(count, total)})"
            for label, count in counts.items()
        ]
        return self.add_summary("\n".join(lines) or empty_text)

    def add_summary(self, text: str) -> "TableFormatter":
        self.lines.append(f"\n{text}")
        return self

    def render(self) -> str:
        return "\n".join(self.lines)


def format_percentage(count: int, total: int, decimal_places: int = 1) -> str:
    """
    Format count as percentage of total.

    Returns:
        Formatted percentage string (e.g., "75.0%"); "0.0%" for an empty total
    """
    if total == 0:
        return "0.0%"
    percent = (count / total) * 100
    return f"{percent:.{decimal_places}f}%"
