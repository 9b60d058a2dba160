"""Reconstruct tables from positioned canvas boxes.

There is no explicit header or cell marker on the canvas, so rows come from
sorting children by y, cells from sorting by x, and the header is the row
with the most cells.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from .canvas import Box, BoxKind
from .config import DEFAULT_COLUMNS, column_width
from .logging_utils import create_logger
from .models import EndpointInfo, Position, Size, TableColumn, TableFrame, TableRow
from .type_mapper import normalize_http_method, parse_required_value

logger = create_logger(__name__)

ENDPOINT_RE = re.compile(r'\[(\w+)\]\s+(\/[^\s]*)')
TITLE_BOX_NAME = 'Title'
PLACEHOLDER_FRAME_NAME = 'Frame'
KNOWN_ROW_KEYS = {'field', 'type', 'required', 'mandatory', 'description', 'example', 'default'}


def is_row_or_cell_name(name: str) -> bool:
    lowered = name.lower()
    return (
        name.startswith('Row:')
        or name.startswith('.Row')
        or name == 'Header Row'
        or name.startswith('Cell')
        or 'row ' in lowered
        or lowered == 'row'
    )


def is_table_box(box: Box) -> bool:
    if box.kind is not BoxKind.FRAME:
        return False

    # row / cell frames are never tables
    if is_row_or_cell_name(box.name):
        return False

    # header + at least one data row
    return len(box.children) >= 2


def extract_text(box: Box) -> Optional[str]:
    """First text found depth-first under `box`."""
    if box.is_text:
        return box.text
    for child in box.children:
        text = extract_text(child)
        if text:
            return text
    return None


def extract_title(box: Box) -> Optional[str]:
    if box.name and box.name != PLACEHOLDER_FRAME_NAME:
        return box.name
    for child in box.children:
        if child.is_text:
            return child.text
    return None


def extract_endpoint(title: Optional[str]) -> Optional[EndpointInfo]:
    """`[POST] /users` -> EndpointInfo('POST', '/users')."""
    if not title:
        return None
    match = ENDPOINT_RE.search(title)
    if not match:
        return None
    try:
        return EndpointInfo(method=normalize_http_method(match.group(1)), path=match.group(2))
    except ValueError as exc:
        logger.debug(f"Ignoring endpoint in title {title!r}: {exc}")
        return None


def _is_row_candidate(child: Box) -> bool:
    if child.name == TITLE_BOX_NAME:
        return False
    if not child.children:
        return False
    # a lone non-text child is a wrapper, not a row of cells
    if len(child.children) == 1 and not child.children[0].is_text:
        return False
    return True


def _sorted_by_y(box: Box) -> List[Box]:
    return sorted(box.children, key=lambda c: c.y)


def find_header_row(box: Box) -> Optional[Box]:
    header = None
    max_cells = 0
    for child in _sorted_by_y(box):
        if not _is_row_candidate(child):
            continue
        if len(child.children) > max_cells:
            header = child
            max_cells = len(child.children)
    return header


def default_columns() -> List[TableColumn]:
    return [TableColumn(name=name, width=column_width(name), index=i) for i, name in enumerate(DEFAULT_COLUMNS)]


def parse_columns(box: Box) -> List[TableColumn]:
    header = find_header_row(box)
    if header is None:
        return default_columns()

    columns: List[TableColumn] = []
    for index, cell in enumerate(sorted(header.children, key=lambda c: c.x)):
        text = extract_text(cell)
        if text:
            columns.append(TableColumn(name=text.strip(), width=cell.width or 100, index=index))
    return columns if columns else default_columns()


def _lookup(values: Dict[str, str], name: str) -> Optional[str]:
    return values.get(name.capitalize()) or values.get(name)


def parse_row_cells(cells: Iterable[Box], columns: List[TableColumn]) -> Optional[TableRow]:
    """Zip cells (already sorted by x) against columns by position."""
    values: Dict[str, str] = {}
    for index, cell in enumerate(cells):
        text = extract_text(cell)
        if text and index < len(columns):
            values[columns[index].name] = text

    field = _lookup(values, 'field')
    type_token = _lookup(values, 'type')
    if not field or not type_token:
        logger.debug(f"Skipping row without field/type: {values}")
        return None

    required_raw = _lookup(values, 'required') or _lookup(values, 'mandatory') or ''
    extra = {k: v for k, v in values.items() if k.lower() not in KNOWN_ROW_KEYS}

    return TableRow(
        field=field.strip(),
        type=type_token.strip(),
        required=parse_required_value(required_raw),
        description=(_lookup(values, 'description') or '').strip(),
        example=_lookup(values, 'example'),
        default=_lookup(values, 'default'),
        extra=extra,
    )


def parse_rows(box: Box, columns: List[TableColumn]) -> List[TableRow]:
    header = find_header_row(box)
    rows: List[TableRow] = []
    for child in _sorted_by_y(box):
        if not _is_row_candidate(child) or child is header:
            continue
        row = parse_row_cells(sorted(child.children, key=lambda c: c.x), columns)
        if row:
            rows.append(row)
    return rows


def parse_table_frame(box: Box) -> Optional[TableFrame]:
    try:
        title = extract_title(box)
        endpoint = extract_endpoint(title)

        columns = parse_columns(box)
        if not columns:
            logger.warning(f"No columns found in table {box.name!r}")
            return None

        return TableFrame(
            id=box.id or _box_id(box),
            title=title,
            is_root=endpoint is not None,
            depth=0,
            endpoint=endpoint,
            columns=columns,
            rows=parse_rows(box, columns),
            position=Position(box.x, box.y),
            size=Size(box.width, box.height),
        )
    except Exception as e:
        logger.error(f"Failed to parse table frame {box.name!r}: {e}")
        return None


def _box_id(box: Box) -> str:
    # dumps without node ids: name + position identifies a table on one canvas
    return f"{box.name or 'table'}@{box.x:g},{box.y:g}"


def find_all_table_frames(container: Box) -> List[TableFrame]:
    tables: List[TableFrame] = []
    for box in container.walk():
        if is_table_box(box):
            table = parse_table_frame(box)
            if table:
                tables.append(table)
    return tables


def collect_tables_from_selection(selection: Iterable[Box]) -> List[TableFrame]:
    """Tables in the selected frames/sections, the selected frames themselves included."""
    tables: List[TableFrame] = []
    seen = set()
    for node in selection:
        if not node.is_container:
            continue
        for table in find_all_table_frames(node):
            if table.id not in seen:
                seen.add(table.id)
                tables.append(table)
    return tables
