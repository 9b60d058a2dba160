from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .models import SchemaType, array_object_items, is_object_node, schema_type_of
from .naming import to_pascal_case
from .nested_types import NestedType, check_type_map, collect_nested_types

TS_TYPES = check_type_map({
    SchemaType.STRING: 'string',
    SchemaType.NUMBER: 'number',
    SchemaType.INTEGER: 'number',
    SchemaType.BOOLEAN: 'boolean',
    SchemaType.NULL: 'null',
    SchemaType.ARRAY: 'any[]',
    SchemaType.OBJECT: 'Record<string, any>',
}, 'TypeScript')


def _js(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))


def typescript_type(field_name: str, schema: Dict[str, Any]) -> str:
    if is_object_node(schema):
        return to_pascal_case(field_name)
    if schema_type_of(schema) is SchemaType.ARRAY and isinstance(schema.get('items'), dict):
        if array_object_items(schema) is not None:
            return f"{to_pascal_case(field_name)}[]"
        return f"{TS_TYPES[schema_type_of(schema['items'])]}[]"
    return TS_TYPES[schema_type_of(schema)]


def _field_doc(schema: Dict[str, Any]) -> List[str]:
    lines = ['', '  /**']
    if schema.get('description'):
        lines.append(f"   * {schema['description']}")
    if schema.get('examples'):
        lines.append(f"   * @example {_js(schema['examples'][0])}")
    if 'default' in schema:
        lines.append(f"   * @default {_js(schema['default'])}")
    lines.append('   */')
    return lines


def render_interface(name: str, schema: Dict[str, Any], include_comments: bool, export: bool) -> str:
    lines: List[str] = []
    if include_comments and schema.get('description'):
        lines.extend(['/**', f" * {schema['description']}", ' */'])

    lines.append(f"{'export ' if export else ''}interface {name} {{")
    if is_object_node(schema):
        required = schema.get('required') or []
        for field_name, field_schema in schema['properties'].items():
            if include_comments and (
                field_schema.get('description') or field_schema.get('examples') or 'default' in field_schema
            ):
                lines.extend(_field_doc(field_schema))
            optional = '' if field_name in required else '?'
            lines.append(f"  {field_name}{optional}: {typescript_type(field_name, field_schema)};")
    lines.append('}')
    return '\n'.join(lines)


def generate_typescript_from_schema(
    schema: Dict[str, Any],
    interface_name: Optional[str] = None,
    include_comments: bool = True,
    export_interfaces: bool = True,
) -> str:
    """TypeScript interfaces for `schema`: nested types first, the main interface last."""
    name = interface_name or to_pascal_case(schema.get('title') or 'Root')
    nested: List[NestedType] = collect_nested_types(schema.get('properties') or {}, set(), [])

    blocks = [render_interface(type_name, obj, include_comments, export_interfaces) for type_name, obj in nested]
    blocks.append(render_interface(name, schema, include_comments, export_interfaces))
    return '\n\n'.join(blocks)
