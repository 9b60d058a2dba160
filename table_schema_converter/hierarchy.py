"""Infer the parent/child structure of a set of tables.

Tables are linked only by name: a row whose type is `Address` or
`Address[]` expands into the table titled `Address`. Missing or misspelled
titles leave the row as a plain field; colliding titles resolve to the last
table carrying that title.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from .errors import TableStructureError
from .logging_utils import create_logger
from .models import TableEdge, TableFrame, TableHierarchy
from .type_mapper import is_expandable_type, map_type, strip_array_suffix

logger = create_logger(__name__)


def identify_root_table(tables: List[TableFrame]) -> Optional[TableFrame]:
    """The table with endpoint metadata, else the leftmost one."""
    for table in tables:
        if table.endpoint:
            return table
    if not tables:
        return None
    return min(tables, key=lambda t: t.position.x)


def index_tables_by_title(tables: Iterable[TableFrame]) -> Dict[str, TableFrame]:
    by_title: Dict[str, TableFrame] = {}
    for table in tables:
        if table.title:
            by_title[table.title] = table
    return by_title


def resolve_child_table(row_type: str, by_title: Dict[str, TableFrame]) -> Optional[TableFrame]:
    if not is_expandable_type(row_type):
        return None
    return by_title.get(strip_array_suffix(row_type))


def build_hierarchy(tables: List[TableFrame]) -> Optional[TableHierarchy]:
    """Link `tables` into a tree rooted at the endpoint (or leftmost) table.

    Rows and tables are annotated in place: rows get `has_child_table` and
    `child_table_id`, child tables get depth and parent pointers. Tables
    that cannot be reached from the root are left out of the result.
    """
    if not tables:
        return None

    root = identify_root_table(tables)
    if root is None:
        raise TableStructureError("No root table found.")

    by_title = index_tables_by_title(tables)
    root.is_root = True
    root.depth = 0
    root.parent_table_id = None
    root.parent_field_name = None
    root.parent_field_type = None

    placed: Dict[str, TableFrame] = {root.id: root}
    edges: List[TableEdge] = []
    queue = deque([root])

    # breadth-first so every parent has its final depth before its children
    while queue:
        parent = queue.popleft()
        for row in parent.rows:
            child = resolve_child_table(row.type, by_title)
            if child is None:
                if is_expandable_type(row.type):
                    logger.debug(f"No table titled {strip_array_suffix(row.type)!r}; {parent.title}.{row.field} stays a leaf")
                continue
            if child.id == parent.id:
                continue

            row.has_child_table = True
            row.child_table_id = child.id

            if child.id in placed:
                # second reference to an already linked table: shares its definition, no new edge
                continue

            edges.append(TableEdge(from_table_id=parent.id, from_field=row.field, to_table_id=child.id))
            child.is_root = False
            child.depth = parent.depth + 1
            child.parent_table_id = parent.id
            child.parent_field_name = row.field
            child.parent_field_type = 'array' if map_type(row.type).type == 'array' else 'object'
            placed[child.id] = child
            queue.append(child)

    skipped = [t.title or t.id for t in tables if t.id not in placed]
    if skipped:
        logger.debug(f"Tables not reachable from {root.title!r}: {skipped}")

    # keep the caller's table order
    ordered = {t.id: t for t in tables if t.id in placed}
    return TableHierarchy(root=root, tables=ordered, edges=edges)


def find_children(table_id: str, hierarchy: TableHierarchy) -> List[TableFrame]:
    children: List[TableFrame] = []
    seen: Set[str] = set()
    for edge in hierarchy.edges:
        if edge.from_table_id != table_id or edge.to_table_id in seen:
            continue
        child = hierarchy.tables.get(edge.to_table_id)
        if child:
            seen.add(child.id)
            children.append(child)
    return children


def find_descendants(table_id: str, hierarchy: TableHierarchy, visited: Optional[Set[str]] = None) -> List[TableFrame]:
    """All tables below `table_id`, depth-first, each listed once."""
    if visited is None:
        visited = {table_id}
    descendants: List[TableFrame] = []
    for child in find_children(table_id, hierarchy):
        if child.id in visited:
            continue
        visited.add(child.id)
        descendants.append(child)
        descendants.extend(find_descendants(child.id, hierarchy, visited))
    return descendants


def find_related_tables(root: TableFrame, all_tables: List[TableFrame]) -> List[TableFrame]:
    """`root` plus every table reachable from it through type-name references."""
    by_title = index_tables_by_title(all_tables)
    related: List[TableFrame] = []
    seen: Set[str] = set()
    stack = [root]
    while stack:
        table = stack.pop()
        if table.id in seen:
            continue
        seen.add(table.id)
        related.append(table)
        # reversed so rows are visited in declaration order
        for row in reversed(table.rows):
            child = resolve_child_table(row.type, by_title)
            if child is not None and child.id not in seen:
                stack.append(child)
    return related
