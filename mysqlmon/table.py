from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import click
import tabulate as tabulate_module
from tabulate import tabulate

from mysqlmon.mysql.native import Column, Row
from mysqlmon.values import MISSING, render

HEADER_STYLE = {"fg": "bright_cyan"}
LABEL_STYLE = {"fg": "blue"}

TABLE_FORMAT = "simple_outline"
PROPERTIES_FORMAT = "plain"

# Cells arrive already padded to their column width, tabulate only draws
# the borders around them.
tabulate_module.PRESERVE_WHITESPACE = True
tabulate_module.MIN_PADDING = 0


@dataclass(frozen=True)
class Table:
    """
    A fully rendered result set. ``header`` and ``body`` hold cells that are
    already styled and padded to ``widths``, so the borders can be drawn
    around them without measuring again.
    ``row_count`` is the number of data rows, the header is not counted.
    """

    header: Optional[Sequence[str]]
    body: Sequence[Sequence[str]]
    widths: Sequence[int]
    row_count: int


def _cell(row: Row, index: int) -> Any:
    return row[index] if index < len(row) else MISSING


def _pad(display: str, length: int, width: int) -> str:
    # padding is based on the unstyled length, escape sequences take no room
    return display + " " * (width - length)


def column_widths(columns: Sequence[Column], rows: Sequence[Row]) -> List[int]:
    widths = [len(column.name) for column in columns]
    for row in rows:
        for index in range(len(columns)):
            widths[index] = max(widths[index], len(render(_cell(row, index)).text))
    return widths


def format_header(name: str, color_enabled: bool) -> str:
    # Headers stay bold without colors. click.echo drops the escape when
    # stdout is not a terminal, so piped output is plain text.
    if color_enabled:
        return click.style(name, bold=True, **HEADER_STYLE)
    return click.style(name, bold=True)


def build_table(
    columns: Sequence[Column], rows: Sequence[Row], color_enabled: bool
) -> Table:
    # The full result set is needed up front: no row can be padded before
    # the widest value of its column is known.
    widths = column_widths(columns, rows)

    header = [
        _pad(format_header(column.name, color_enabled), len(column.name), width)
        for column, width in zip(columns, widths)
    ]

    body: List[List[str]] = []
    for row in rows:
        cells: List[str] = []
        for index, width in enumerate(widths):
            rendered = render(_cell(row, index))
            cells.append(
                _pad(rendered.display(color_enabled), len(rendered.text), width)
            )
        body.append(cells)

    return Table(header=header, body=body, widths=widths, row_count=len(body))


def build_properties_table(
    properties: Sequence[Tuple[str, Any]], color_enabled: bool
) -> Table:
    """
    Two column label/value table without a header, used for the status
    report.
    """
    rendered = [(label, render(value)) for label, value in properties]
    label_width = max((len(label) for label, _ in rendered), default=0)
    value_width = max((len(value.text) for _, value in rendered), default=0)

    body: List[List[str]] = []
    for label, value in rendered:
        styled_label = click.style(label, **LABEL_STYLE) if color_enabled else label
        body.append(
            [
                _pad(styled_label, len(label), label_width),
                _pad(value.text, len(value.text), value_width),
            ]
        )

    return Table(
        header=None,
        body=body,
        widths=[label_width, value_width],
        row_count=len(body),
    )


def format_table(table: Table) -> str:
    if table.header is None:
        return tabulate(table.body, tablefmt=PROPERTIES_FORMAT, disable_numparse=True)
    return tabulate(
        table.body,
        headers=table.header,
        tablefmt=TABLE_FORMAT,
        disable_numparse=True,
    )


def pluralize_rows(count: int) -> str:
    return "row" if count == 1 else "rows"


def format_summary(row_count: int, elapsed: float) -> str:
    return f"{row_count} {pluralize_rows(row_count)} in set ({elapsed:.2f} sec)"


def format_affected(affected_rows: int, elapsed: float) -> str:
    return f"Query OK, {affected_rows} {pluralize_rows(affected_rows)} affected ({elapsed:.2f} sec)"
