"""Materialize positioned tables as canvas boxes.

The box layout is the one the table parser reads back: a frame per table
holding a `Title` bar, a `Header Row` and one `Row: <field>` per field,
each row made of `Cell` frames wrapping a text box.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .canvas import Box, BoxKind
from .config import DEFAULT_TABLE_CONFIG, TableConfig
from .models import TableColumn, TableFrame, TableRow

REQUIRED_MARK = '●'

TITLE_COLOR = {'r': 0.827, 'g': 0.024, 'b': 0.267}
COLUMN_HEADER_COLOR = {'r': 0.851, 'g': 0.851, 'b': 0.851}
DATA_ROW_COLOR = {'r': 0.961, 'g': 0.984, 'b': 0.710}


def solid_fill(color: Dict[str, float]) -> Dict[str, Any]:
    return {'type': 'SOLID', 'color': dict(color)}


def _cell_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def cell_text(row: TableRow, column: str) -> str:
    """Text a data row shows under `column`."""
    if column == 'Field':
        return row.field
    if column == 'Type':
        return row.type
    if column in ('Required', 'Mandatory'):
        return REQUIRED_MARK if row.required else ''
    if column == 'Description':
        return row.description or ''
    if column == 'Example':
        return _cell_value(row.example)
    if column == 'Default':
        return _cell_value(row.default)
    return row.extra.get(column, '')


def _text_box(text: str, x: float, y: float, width: float, height: float) -> Box:
    return Box(kind=BoxKind.TEXT, name=text, x=x, y=y, width=width, height=height, text=text)


def _cell_box(text: str, x: float, y: float, width: float, height: float) -> Box:
    return Box(
        kind=BoxKind.FRAME,
        name='Cell',
        x=x,
        y=y,
        width=width,
        height=height,
        children=[_text_box(text, x + 12, y + 10, max(width - 24, 0), max(height - 20, 0))],
    )


def _row_box(
    name: str,
    values: List[str],
    columns: List[TableColumn],
    x: float,
    y: float,
    width: float,
    height: float,
    fill: Dict[str, float],
) -> Box:
    cells: List[Box] = []
    cell_x = x
    for column, value in zip(columns, values):
        cells.append(_cell_box(value, cell_x, y, column.width, height))
        cell_x += column.width
    return Box(
        kind=BoxKind.FRAME,
        name=name,
        x=x,
        y=y,
        width=width,
        height=height,
        children=cells,
        fills=[solid_fill(fill)],
    )


def build_table_box(table: TableFrame, config: TableConfig = DEFAULT_TABLE_CONFIG) -> Box:
    x, y = table.position.x, table.position.y
    width = table.size.width
    row_height = config.row_height
    columns = sorted(table.columns, key=lambda c: c.index)

    children: List[Box] = []
    current_y = y
    if table.title:
        title_bar = Box(
            kind=BoxKind.FRAME,
            name='Title',
            x=x,
            y=current_y,
            width=width,
            height=row_height,
            children=[_text_box(table.title, x + 12, current_y + 10, max(width - 24, 0), 20)],
            fills=[solid_fill(TITLE_COLOR)],
        )
        children.append(title_bar)
        current_y += row_height

    children.append(_row_box(
        'Header Row', [c.name for c in columns], columns, x, current_y, width, row_height, COLUMN_HEADER_COLOR,
    ))
    current_y += row_height

    for row in table.rows:
        children.append(_row_box(
            f"Row: {row.field}",
            [cell_text(row, c.name) for c in columns],
            columns,
            x,
            current_y,
            width,
            row_height,
            DATA_ROW_COLOR,
        ))
        current_y += row_height

    return Box(
        kind=BoxKind.FRAME,
        name=table.title or 'Table',
        x=x,
        y=y,
        width=width,
        height=max(table.size.height, current_y - y),
        children=children,
        id=table.id,
    )


def build_table_boxes(tables: List[TableFrame], config: TableConfig = DEFAULT_TABLE_CONFIG) -> List[Box]:
    return [build_table_box(table, config) for table in tables]


def build_canvas(
    tables: List[TableFrame],
    name: Optional[str] = None,
    config: TableConfig = DEFAULT_TABLE_CONFIG,
) -> Box:
    """A section holding one frame per table, sized to fit them all."""
    boxes = build_table_boxes(tables, config)
    if not boxes:
        return Box(kind=BoxKind.SECTION, name=name or 'Tables')

    left = min(b.x for b in boxes)
    top = min(b.y for b in boxes)
    right = max(b.x + b.width for b in boxes)
    bottom = max(b.y + b.height for b in boxes)
    return Box(
        kind=BoxKind.SECTION,
        name=name or tables[0].title or 'Tables',
        x=left,
        y=top,
        width=right - left,
        height=bottom - top,
        children=boxes,
    )
