"""Hoist nested object types out of a schema tree for code generators."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .models import SchemaType, array_object_items, is_object_node
from .naming import to_pascal_case

NestedType = Tuple[str, Dict[str, Any]]


def nested_object_schema(field_schema: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """The object schema a field defines: itself, or its items for arrays of objects."""
    if is_object_node(field_schema):
        return field_schema
    return array_object_items(field_schema)


def collect_nested_types(
    properties: Dict[str, Any],
    visited: Set[str],
    collected: List[NestedType],
    name_for: Callable[[str], str] = to_pascal_case,
) -> List[NestedType]:
    """Append `(type_name, object_schema)` for every nested object under `properties`.

    Children are appended before the type that contains them. A name already
    in `visited` is skipped along with its subtree, so the first definition
    of a name wins.
    """
    for field_name, field_schema in (properties or {}).items():
        obj = nested_object_schema(field_schema)
        if obj is None:
            continue
        type_name = name_for(field_name)
        if type_name in visited:
            continue
        visited.add(type_name)
        collect_nested_types(obj.get('properties') or {}, visited, collected, name_for)
        collected.append((type_name, obj))
    return collected


def check_type_map(type_map: Dict[SchemaType, Any], target: str) -> Dict[SchemaType, Any]:
    """Fail at import time when a generator's type map misses a schema type."""
    missing = [t.value for t in SchemaType if t not in type_map]
    if missing:
        raise RuntimeError(f"{target} type map is missing: {', '.join(missing)}")
    return type_map
