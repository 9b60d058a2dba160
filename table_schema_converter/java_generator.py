from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from .models import SchemaType, array_object_items, is_object_node, schema_type_of
from .naming import to_camel_case, to_pascal_case
from .nested_types import NestedType, check_type_map, collect_nested_types

JAVA_TYPES = check_type_map({
    SchemaType.STRING: 'String',
    SchemaType.NUMBER: 'Double',
    SchemaType.INTEGER: 'Long',
    SchemaType.BOOLEAN: 'Boolean',
    SchemaType.NULL: 'Object',
    SchemaType.ARRAY: 'List<Object>',
    SchemaType.OBJECT: 'Map<String, Object>',
}, 'Java')

LOMBOK_ANNOTATIONS = ('@Data', '@NoArgsConstructor', '@AllArgsConstructor')


def java_type(field_name: str, schema: Dict[str, Any]) -> str:
    if is_object_node(schema):
        return to_pascal_case(field_name)
    if schema_type_of(schema) is SchemaType.ARRAY and isinstance(schema.get('items'), dict):
        if array_object_items(schema) is not None:
            return f"List<{to_pascal_case(field_name)}>"
        return f"List<{JAVA_TYPES[schema_type_of(schema['items'])]}>"
    return JAVA_TYPES[schema_type_of(schema)]


def _field_doc(schema: Dict[str, Any]) -> List[str]:
    lines = ['', '    /**']
    if schema.get('description'):
        lines.append(f"     * {schema['description']}")
    if schema.get('examples'):
        lines.append(f"     * Example: {json.dumps(schema['examples'][0], ensure_ascii=False)}")
    if 'default' in schema:
        lines.append(f"     * Default: {json.dumps(schema['default'], ensure_ascii=False)}")
    lines.append('     */')
    return lines


def _accessors(fields: List[Tuple[str, str]]) -> List[str]:
    lines: List[str] = []
    for java_name, type_name in fields:
        suffix = java_name[:1].upper() + java_name[1:]
        lines.extend([
            '',
            f"    public {type_name} get{suffix}() {{",
            f"        return {java_name};",
            '    }',
            '',
            f"    public void set{suffix}({type_name} {java_name}) {{",
            f"        this.{java_name} = {java_name};",
            '    }',
        ])
    return lines


def render_class(name: str, schema: Dict[str, Any], include_comments: bool, use_lombok: bool) -> str:
    lines: List[str] = []
    if include_comments and schema.get('description'):
        lines.extend(['/**', f" * {schema['description']}", ' */'])
    if use_lombok:
        lines.extend(LOMBOK_ANNOTATIONS)
    lines.append(f"public class {name} {{")

    fields: List[Tuple[str, str]] = []
    if is_object_node(schema):
        for field_name, field_schema in schema['properties'].items():
            if include_comments and (
                field_schema.get('description') or field_schema.get('examples') or 'default' in field_schema
            ):
                lines.extend(_field_doc(field_schema))
            java_name = to_camel_case(field_name)
            type_name = java_type(field_name, field_schema)
            fields.append((java_name, type_name))
            lines.append(f"    private {type_name} {java_name};")

    if not use_lombok:
        lines.extend(_accessors(fields))
    lines.append('}')
    return '\n'.join(lines)


def _imports(body: str, use_lombok: bool) -> List[str]:
    imports = []
    if 'List<' in body:
        imports.append('import java.util.List;')
    if 'Map<' in body:
        imports.append('import java.util.Map;')
    if use_lombok:
        imports.extend([
            'import lombok.AllArgsConstructor;',
            'import lombok.Data;',
            'import lombok.NoArgsConstructor;',
        ])
    return imports


def generate_java_from_schema(
    schema: Dict[str, Any],
    class_name: Optional[str] = None,
    include_comments: bool = True,
    use_lombok: bool = True,
) -> str:
    """Java classes for `schema`: nested classes first, the main class last."""
    name = class_name or to_pascal_case(schema.get('title') or 'Root')
    nested: List[NestedType] = collect_nested_types(schema.get('properties') or {}, set(), [])

    blocks = [render_class(type_name, obj, include_comments, use_lombok) for type_name, obj in nested]
    blocks.append(render_class(name, schema, include_comments, use_lombok))
    body = '\n\n'.join(blocks)

    imports = _imports(body, use_lombok)
    if imports:
        return '\n'.join(imports) + '\n\n' + body
    return body
