from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Set

from .config import DEFAULT_SCHEMA_VERSION
from .logging_utils import create_logger
from .models import TableFrame, TableHierarchy, TableRow
from .type_mapper import has_array_suffix, map_type, strip_array_suffix

logger = create_logger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"Not a JSON literal: {name}")


def parse_literal(text: str) -> Any:
    """JSON-decode a cell value, falling back to the raw string."""
    if not isinstance(text, str):
        return text
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def build_json_schema(
    hierarchy: TableHierarchy,
    include_examples: bool = True,
    schema_version: Optional[str] = None,
) -> Dict[str, Any]:
    schema: Dict[str, Any] = {
        '$schema': schema_version or DEFAULT_SCHEMA_VERSION,
        'type': 'object',
    }
    if hierarchy.root.title:
        schema['title'] = hierarchy.root.title
    schema.update(_table_body(hierarchy.root, hierarchy, include_examples, {hierarchy.root.id}))
    return schema


def build_schema_for_section(
    table: TableFrame,
    hierarchy: TableHierarchy,
    include_examples: bool = True,
) -> Dict[str, Any]:
    """Object schema for a single table (used for request/response bodies)."""
    schema: Dict[str, Any] = {'type': 'object'}
    schema.update(_table_body(table, hierarchy, include_examples, {table.id}))
    return schema


def _table_body(
    table: TableFrame,
    hierarchy: TableHierarchy,
    include_examples: bool,
    visiting: Set[str],
) -> Dict[str, Any]:
    """`{required?, properties}` for a table; `required` goes first and only when non-empty."""
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for row in table.rows:
        properties[row.field] = _row_schema(row, hierarchy, include_examples, visiting)
        if row.required:
            required.append(row.field)

    body: Dict[str, Any] = {}
    if required:
        body['required'] = required
    body['properties'] = properties
    return body


def _element_schema(row_type: str) -> Dict[str, Any]:
    """Items schema for a primitive array row such as `string[]`."""
    if not has_array_suffix(row_type):
        # bare `array` / `list`: element type unknown
        return {}
    mapping = map_type(strip_array_suffix(row_type).lower())
    items: Dict[str, Any] = {'type': mapping.type}
    if mapping.format:
        items['format'] = mapping.format
    if mapping.type == 'object':
        items['properties'] = {}
    elif mapping.type == 'array':
        items['items'] = {}
    return items


def _row_schema(
    row: TableRow,
    hierarchy: TableHierarchy,
    include_examples: bool,
    visiting: Set[str],
) -> Dict[str, Any]:
    mapping = map_type(row.type)
    schema: Dict[str, Any] = {'type': mapping.type}
    if mapping.format:
        schema['format'] = mapping.format
    if row.description:
        schema['description'] = row.description

    child = hierarchy.tables.get(row.child_table_id) if row.has_child_table and row.child_table_id else None
    if child is not None and child.id in visiting:
        logger.warning(f"Circular reference {row.field!r} -> {child.title!r}; not expanded")
        child = None

    if child is not None:
        body = _table_body(child, hierarchy, include_examples, visiting | {child.id})
        if mapping.type == 'object':
            schema.update(body)
        elif mapping.type == 'array':
            items: Dict[str, Any] = {'type': 'object'}
            items.update(body)
            schema['items'] = items
    elif mapping.type == 'array':
        schema['items'] = _element_schema(row.type)
    elif mapping.type == 'object':
        schema['properties'] = {}

    if row.default:
        schema['default'] = parse_literal(row.default)
    if row.example and include_examples:
        schema['examples'] = [parse_literal(row.example)]
    return schema
