"""Schema tree -> positioned tables (the inverse of the table parser)."""
from __future__ import annotations

import itertools
import json
from typing import Any, Dict, Iterator, List, Optional, Set

from .config import DEFAULT_TABLE_CONFIG, TableConfig, column_width
from .logging_utils import create_logger
from .models import (
    EndpointInfo,
    Position,
    SchemaType,
    Size,
    TableColumn,
    TableFrame,
    TableRow,
    array_object_items,
    is_object_node,
    schema_type_of,
)
from .naming import to_pascal_case
from .table_parser import PLACEHOLDER_FRAME_NAME, is_row_or_cell_name
from .type_mapper import TYPE_MAP, is_expandable_type

logger = create_logger(__name__)

TABLE_ID_PREFIX = 'generated-table-'

# string formats written back as the token the type mapper reads them from
FORMAT_TOKENS = {
    'date-time': 'datetime',
    'date': 'date',
    'email': 'email',
    'uri': 'url',
    'uuid': 'uuid',
}


def _columns(config: TableConfig) -> List[TableColumn]:
    return [TableColumn(name=name, width=column_width(name), index=i) for i, name in enumerate(config.columns)]


def _display(value: Any) -> Optional[str]:
    """Cell text for an example/default value."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def _primitive_token(schema: Dict[str, Any]) -> str:
    schema_type = schema_type_of(schema)
    fmt = schema.get('format')
    if schema_type is SchemaType.STRING and isinstance(fmt, str) and fmt in FORMAT_TOKENS:
        return FORMAT_TOKENS[fmt]
    return schema_type.value


def _first_example(schema: Dict[str, Any]) -> Any:
    examples = schema.get('examples')
    if isinstance(examples, list) and examples:
        return examples[0]
    return None


def _required_names(schema: Dict[str, Any]) -> Set[str]:
    required = schema.get('required')
    if not isinstance(required, list):
        return set()
    return {str(name) for name in required}


def _child_title(field_name: str, used_titles: Set[str]) -> str:
    """Title for a nested field's table, unique within one run.

    The title is also the row's type token, so it must read back as a
    reference: never a primitive type name, never a row/cell name.
    """
    title = to_pascal_case(field_name) or 'Field'
    if title.lower() in TYPE_MAP:
        title = f"{title}Object"
    if not is_expandable_type(title) or is_row_or_cell_name(title) or title == PLACEHOLDER_FRAME_NAME:
        title = f"Field{title}"

    candidate = title
    suffix = 2
    while candidate in used_titles:
        candidate = f"{title}{suffix}"
        suffix += 1
    used_titles.add(candidate)
    return candidate


def _new_table(
    table_id: str,
    title: str,
    depth: int,
    config: TableConfig,
    parent_table_id: Optional[str] = None,
    parent_field_name: Optional[str] = None,
    parent_field_type: Optional[str] = None,
) -> TableFrame:
    return TableFrame(
        id=table_id,
        title=title,
        is_root=False,
        depth=depth,
        columns=_columns(config),
        size=Size(config.table_width, 100),
        parent_table_id=parent_table_id,
        parent_field_name=parent_field_name,
        parent_field_type=parent_field_type,
    )


def _flatten_properties(
    properties: Dict[Any, Any],
    required: Set[str],
    parent: TableFrame,
    ids: Iterator[int],
    tables: List[TableFrame],
    used_titles: Set[str],
    config: TableConfig,
) -> List[TableRow]:
    """Rows for `properties`; child tables are appended to `tables` in pre-order."""
    rows: List[TableRow] = []
    for key, field_schema in properties.items():
        # YAML keys such as `200:` or `on:` load as int/bool
        field_name = str(key)
        if not isinstance(field_schema, dict):
            logger.warning(f"Skipping property {field_name!r}: schema is not an object")
            continue

        is_required = field_name in required
        description = _display(field_schema.get('description'))
        example = _display(_first_example(field_schema))
        default = _display(field_schema.get('default'))

        obj = field_schema if is_object_node(field_schema) else array_object_items(field_schema)
        if obj is not None:
            parent_field_type = 'object' if obj is field_schema else 'array'
            type_name = _child_title(field_name, used_titles)
            child = _new_table(
                f"{TABLE_ID_PREFIX}{next(ids)}",
                type_name,
                parent.depth + 1,
                config,
                parent_table_id=parent.id,
                parent_field_name=field_name,
                parent_field_type=parent_field_type,
            )
            rows.append(TableRow(
                field=field_name,
                type=type_name if parent_field_type == 'object' else f"{type_name}[]",
                required=is_required,
                description=description,
                example=example,
                default=default,
                has_child_table=True,
                child_table_id=child.id,
            ))
            tables.append(child)
            child.rows = _flatten_properties(
                obj['properties'], _required_names(obj), child, ids, tables, used_titles, config,
            )
            continue

        if schema_type_of(field_schema) is SchemaType.ARRAY:
            items = field_schema.get('items')
            if isinstance(items, dict):
                type_token = f"{_primitive_token(items)}[]"
                if example is None and items.get('examples'):
                    example = _display(items['examples'])
                if default is None and 'default' in items:
                    default = _display(items['default'])
            else:
                type_token = 'array'
            rows.append(TableRow(
                field=field_name,
                type=type_token,
                required=is_required,
                description=description,
                example=example,
                default=default,
            ))
            continue

        rows.append(TableRow(
            field=field_name,
            type=_primitive_token(field_schema),
            required=is_required,
            description=description,
            example=example,
            default=default,
        ))
    return rows


def generate_tables_from_schema(
    schema: Dict[str, Any],
    endpoint: Optional[EndpointInfo] = None,
    title: Optional[str] = None,
    config: TableConfig = DEFAULT_TABLE_CONFIG,
) -> List[TableFrame]:
    """Tables for an object schema: the root first, then child tables in pre-order.

    Returns an empty list when the schema is not an object with properties.
    Positions are left at the origin; run `calculate_table_layout` next.
    """
    if not is_object_node(schema):
        logger.warning("Schema root is not an object with properties; no tables generated")
        return []

    ids = itertools.count()
    root_title = str(title or schema.get('title') or 'Schema')
    root = _new_table(f"{TABLE_ID_PREFIX}{next(ids)}", root_title, 0, config)
    root.is_root = True
    root.endpoint = endpoint

    tables = [root]
    root.rows = _flatten_properties(
        schema['properties'], _required_names(schema), root, ids, tables, {root_title}, config,
    )

    logger.debug(f"Generated {len(tables)} tables: {[(t.title, t.depth, t.parent_table_id) for t in tables]}")
    return tables


def _direct_children(table: TableFrame, tables: List[TableFrame]) -> List[TableFrame]:
    return [t for t in tables if t.parent_table_id == table.id and t.id != table.id]


def find_all_descendants(
    table: TableFrame,
    tables: List[TableFrame],
    visited: Optional[Set[str]] = None,
) -> List[TableFrame]:
    if visited is None:
        visited = {table.id}
    descendants: List[TableFrame] = []
    for child in _direct_children(table, tables):
        if child.id in visited:
            continue
        visited.add(child.id)
        descendants.append(child)
        descendants.extend(find_all_descendants(child, tables, visited))
    return descendants


def get_subtree_bottom(table: TableFrame, tables: List[TableFrame]) -> float:
    """Lowest y edge of `table` and everything below it."""
    return max([table.bottom] + [d.bottom for d in find_all_descendants(table, tables)])


def _layout_children(
    parent: TableFrame,
    tables: List[TableFrame],
    config: TableConfig,
    placed: Set[str],
) -> None:
    children = [c for c in _direct_children(parent, tables) if c.id not in placed]
    if not children:
        return

    child_x = parent.right + config.horizontal_gap
    next_available_y = parent.position.y

    for child in children:
        placed.add(child.id)
        row_index = next((i for i, r in enumerate(parent.rows) if r.child_table_id == child.id), None)
        if row_index is None:
            child.position = Position(child_x, next_available_y)
        else:
            # top of the child lines up with its row when there is room
            row_y = parent.position.y + config.header_height + row_index * config.row_height
            child.position = Position(child_x, max(row_y, next_available_y))

        _layout_children(child, tables, config, placed)
        next_available_y = get_subtree_bottom(child, tables) + config.vertical_gap


def calculate_table_layout(tables: List[TableFrame], config: TableConfig = DEFAULT_TABLE_CONFIG) -> None:
    """Size every table and place the tree left to right, in place.

    Each child sits one column to the right of its parent, level with the
    row that references it unless an earlier sibling's subtree reaches
    lower, in which case it is pushed below that subtree.
    """
    for table in tables:
        table.size = Size(
            width=sum(col.width for col in table.columns),
            height=config.header_height + len(table.rows) * config.row_height,
        )

    root = next((t for t in tables if t.is_root), None)
    if root is None:
        return

    root.position = Position(0, 0)
    _layout_children(root, tables, config, {root.id})


def offset_tables(tables: List[TableFrame], base_x: float, base_y: float) -> None:
    """Shift a computed layout so its origin lands on (base_x, base_y)."""
    for table in tables:
        table.position = Position(table.position.x + base_x, table.position.y + base_y)
