from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

HTTP_METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'HEAD', 'OPTIONS')


class SchemaType(str, Enum):
    STRING = 'string'
    NUMBER = 'number'
    INTEGER = 'integer'
    BOOLEAN = 'boolean'
    NULL = 'null'
    OBJECT = 'object'
    ARRAY = 'array'


def schema_type_of(node: Dict[str, Any]) -> SchemaType:
    """Resolve the `type` of a schema node; missing or unknown types read as string."""
    raw = node.get('type') if isinstance(node, dict) else None
    if isinstance(raw, list):
        raw = next((t for t in raw if t != 'null'), 'null')
    try:
        return SchemaType(raw)
    except ValueError:
        return SchemaType.STRING


def is_object_node(node: Any) -> bool:
    return isinstance(node, dict) and schema_type_of(node) is SchemaType.OBJECT and isinstance(node.get('properties'), dict)


def array_object_items(node: Any) -> Optional[Dict[str, Any]]:
    """Return the items schema when `node` is an array of objects, else None."""
    if not isinstance(node, dict) or schema_type_of(node) is not SchemaType.ARRAY:
        return None
    items = node.get('items')
    if is_object_node(items):
        return items
    return None


@dataclass
class Position:
    x: float = 0
    y: float = 0


@dataclass
class Size:
    width: float = 0
    height: float = 0


@dataclass(frozen=True)
class EndpointInfo:
    method: str
    path: str


@dataclass
class TableColumn:
    name: str
    width: float
    index: int


@dataclass
class TableRow:
    field: str
    type: str
    required: bool = False
    description: Optional[str] = None
    example: Optional[str] = None
    default: Optional[str] = None
    has_child_table: bool = False
    child_table_id: Optional[str] = None
    # cells of custom columns, keyed by header text
    extra: Dict[str, str] = field(default_factory=dict)


@dataclass
class TableFrame:
    id: str
    title: Optional[str] = None
    is_root: bool = False
    depth: int = 0
    endpoint: Optional[EndpointInfo] = None
    section: Optional[str] = None
    columns: List[TableColumn] = field(default_factory=list)
    rows: List[TableRow] = field(default_factory=list)
    position: Position = field(default_factory=Position)
    size: Size = field(default_factory=Size)
    parent_table_id: Optional[str] = None
    parent_field_name: Optional[str] = None
    parent_field_type: Optional[str] = None

    @property
    def bottom(self) -> float:
        return self.position.y + self.size.height

    @property
    def right(self) -> float:
        return self.position.x + self.size.width


@dataclass(frozen=True)
class TableEdge:
    from_table_id: str
    from_field: str
    to_table_id: str


@dataclass
class TableHierarchy:
    root: TableFrame
    tables: Dict[str, TableFrame]
    edges: List[TableEdge]


def table_to_dict(table: TableFrame) -> Dict[str, Any]:
    """Plain-dict view of a table for previews and JSON export."""
    out: Dict[str, Any] = {
        'id': table.id,
        'title': table.title,
        'isRoot': table.is_root,
        'depth': table.depth,
    }
    if table.endpoint:
        out['endpoint'] = {'method': table.endpoint.method, 'path': table.endpoint.path}
    out['position'] = {'x': table.position.x, 'y': table.position.y}
    out['size'] = {'width': table.size.width, 'height': table.size.height}
    if table.parent_table_id:
        out['parentTableId'] = table.parent_table_id
        out['parentFieldName'] = table.parent_field_name
        out['parentFieldType'] = table.parent_field_type
    out['rows'] = [
        {
            'field': row.field,
            'type': row.type,
            'required': row.required,
            'description': row.description,
            'hasChildTable': row.has_child_table,
            'childTableId': row.child_table_id,
        }
        for row in table.rows
    ]
    return out
