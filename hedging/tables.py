"""
Markdown-style text tables for console display.
"""
from typing import Any, List


class MarkdownTable:
    """
    Fixed set of columns, rows added one at a time, rendered as a
    Markdown table with every column padded to its widest cell.

    Example:
        | Instrument | Close  |
        |------------|--------|
        | AAPL.O     | 132.05 |
    """

    def __init__(self, *columns: str):
        self.columns = [str(c) for c in columns]
        self.rows: List[List[str]] = []

    def add_row(self, *values: Any):
        """Add a row. Missing trailing cells are left blank, None renders blank."""
        if len(values) > len(self.columns):
            raise ValueError(f"Row has {len(values)} values but table has {len(self.columns)} columns")
        cells = ['' if v is None else str(v) for v in values]
        cells.extend([''] * (len(self.columns) - len(cells)))
        self.rows.append(cells)
        return self

    def _widths(self) -> List[int]:
        widths = [len(c) for c in self.columns]
        for row in self.rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))
        return widths

    def render(self) -> str:
        widths = self._widths()

        def line(cells: List[str]) -> str:
            return "| " + " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)) + " |"

        lines = [
            line(self.columns),
            "|" + "|".join("-" * (w + 2) for w in widths) + "|",
        ]
        lines.extend(line(row) for row in self.rows)
        return "\n".join(lines)

    def write(self):
        print(self.render())
        print()

    def __len__(self) -> int:
        return len(self.rows)

    def __str__(self) -> str:
        return self.render()
