"""
Unit tests for Markdown table rendering.
"""
import pytest

from hedging.tables import MarkdownTable


def test_render_pads_columns():
    table = MarkdownTable("Instrument", "Close")
    table.add_row("AAPL.O", 132.05)

    assert table.render().splitlines() == [
        "| Instrument | Close  |",
        "|------------|--------|",
        "| AAPL.O     | 132.05 |",
    ]


def test_missing_and_none_cells_blank():
    table = MarkdownTable("A", "B", "C")
    table.add_row("x", None)

    assert table.render().splitlines()[2] == "| x |   |   |"
    assert len(table) == 1


def test_too_many_values():
    with pytest.raises(ValueError):
        MarkdownTable("A").add_row(1, 2)


def test_write(capsys):
    MarkdownTable("Net Position Delta").add_row(-10).write()

    assert capsys.readouterr().out == (
        "| Net Position Delta |\n"
        "|--------------------|\n"
        "| -10                |\n"
        "\n"
    )
