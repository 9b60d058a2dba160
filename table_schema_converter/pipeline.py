"""Request-level operations: canvas in, text out, and back.

Each function runs one request from start to finish on request-local data.
Structural problems (no tables, no root, no endpoint tables) are raised as
TableStructureError for the UI to show; everything else propagates.
"""
from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from .canvas import Box
from .errors import TableStructureError
from .frame_builder import build_canvas
from .hierarchy import build_hierarchy, find_related_tables, identify_root_table
from .io_utils import parse_structured_text
from .java_generator import generate_java_from_schema
from .json_schema_builder import build_json_schema
from .logging_utils import create_logger
from .models import EndpointInfo, TableFrame, TableHierarchy
from .openapi_builder import build_openapi_document
from .sql_generator import MYSQL, ORACLE, POSTGRES, generate_sql_from_schema
from .table_generator import calculate_table_layout, generate_tables_from_schema, offset_tables
from .table_parser import collect_tables_from_selection
from .type_mapper import normalize_http_method
from .typescript_generator import generate_typescript_from_schema

logger = create_logger(__name__)

JSON_SCHEMA = 'json-schema'
TYPESCRIPT = 'typescript'
JAVA = 'java'
OUTPUT_TARGETS = (JSON_SCHEMA, TYPESCRIPT, JAVA, MYSQL, POSTGRES, ORACLE)

FILE_EXTENSIONS = {
    TYPESCRIPT: '.ts',
    JAVA: '.java',
    MYSQL: '.sql',
    POSTGRES: '.sql',
    ORACLE: '.sql',
}


@dataclass
class OutputOptions:
    format: str = 'json'
    include_examples: bool = True
    include_comments: bool = True
    schema_version: Optional[str] = None
    name: Optional[str] = None
    export_interfaces: bool = True
    use_lombok: bool = True
    engine: str = 'InnoDB'
    charset: str = 'utf8mb4'


def output_extension(target: str, fmt: str = 'json') -> str:
    if target in FILE_EXTENSIONS:
        return FILE_EXTENSIONS[target]
    return '.yaml' if fmt == 'yaml' else '.json'


def render_schema(document: Dict[str, Any], fmt: str = 'json') -> str:
    if fmt == 'yaml':
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, width=float('inf'))
    return json.dumps(document, indent=2, ensure_ascii=False)


def collect_tables(boxes: Iterable[Box]) -> List[TableFrame]:
    tables = collect_tables_from_selection(boxes)
    if not tables:
        raise TableStructureError("No tables found. Upload a canvas with frames or sections that contain tables.")
    logger.info(f"Found {len(tables)} tables: {[(t.title or 'Untitled', len(t.rows)) for t in tables]}")
    return tables


def pick_root_table(tables: List[TableFrame]) -> TableFrame:
    root = identify_root_table(tables)
    if root is None:
        raise TableStructureError("No root table found.")
    if root.endpoint is None:
        logger.info(f"No endpoint found, using leftmost table as root: {root.title}")
    return root


def hierarchy_from_tables(tables: List[TableFrame]) -> TableHierarchy:
    root = pick_root_table(tables)
    related = find_related_tables(root, tables)
    hierarchy = build_hierarchy(related)
    if hierarchy is None:
        raise TableStructureError("Could not build a table hierarchy.")
    return hierarchy


def schema_from_canvas(
    boxes: Iterable[Box],
    include_examples: bool = True,
    schema_version: Optional[str] = None,
) -> Dict[str, Any]:
    hierarchy = hierarchy_from_tables(collect_tables(boxes))
    return build_json_schema(hierarchy, include_examples=include_examples, schema_version=schema_version)


def render_schema_output(schema: Dict[str, Any], target: str, options: OutputOptions) -> str:
    """Text for one output target from an already built schema."""
    if target == JSON_SCHEMA:
        return render_schema(schema, options.format)
    if target == TYPESCRIPT:
        return generate_typescript_from_schema(
            schema,
            interface_name=options.name,
            include_comments=options.include_comments,
            export_interfaces=options.export_interfaces,
        )
    if target == JAVA:
        return generate_java_from_schema(
            schema,
            class_name=options.name,
            include_comments=options.include_comments,
            use_lombok=options.use_lombok,
        )
    if target in (MYSQL, POSTGRES, ORACLE):
        return generate_sql_from_schema(
            schema,
            target,
            table_name=options.name,
            include_comments=options.include_comments,
            engine=options.engine,
            charset=options.charset,
        )
    raise ValueError(f"Unsupported output target: {target}")


def generate_output(boxes: Iterable[Box], target: str, options: Optional[OutputOptions] = None) -> str:
    if target not in OUTPUT_TARGETS:
        raise ValueError(f"Unsupported output target: {target}")
    options = options or OutputOptions()
    # code generators always see the examples so they can document them
    include_examples = options.include_examples if target == JSON_SCHEMA else True
    schema = schema_from_canvas(boxes, include_examples=include_examples, schema_version=options.schema_version)
    return render_schema_output(schema, target, options)


def openapi_from_canvas(
    boxes: Iterable[Box],
    title: Optional[str] = None,
    version: Optional[str] = None,
    description: Optional[str] = None,
    server_url: Optional[str] = None,
) -> Dict[str, Any]:
    """One operation per endpoint table, each with the tables it references."""
    tables = collect_tables(boxes)
    endpoint_tables = [t for t in tables if t.endpoint]
    if not endpoint_tables:
        raise TableStructureError("No tables with endpoint info found. Title a table like '[GET] /users'.")

    hierarchies: List[TableHierarchy] = []
    for endpoint_table in endpoint_tables:
        # hierarchies annotate their tables; give each one its own copy
        related = copy.deepcopy(find_related_tables(endpoint_table, tables))
        hierarchy = build_hierarchy(related)
        if hierarchy is not None:
            hierarchies.append(hierarchy)

    return build_openapi_document(
        hierarchies,
        title=title,
        version=version,
        description=description,
        server_url=server_url,
    )


def parse_endpoint(method: Optional[str], path: Optional[str]) -> Optional[EndpointInfo]:
    """Endpoint from UI inputs; None when no path is given."""
    if not path or not path.strip():
        return None
    path = path.strip()
    if not path.startswith('/'):
        path = '/' + path
    return EndpointInfo(method=normalize_http_method(method or 'GET'), path=path)


def parse_schema_text(text: str) -> Dict[str, Any]:
    schema = parse_structured_text(text)
    if not isinstance(schema, dict):
        raise ValueError("Schema must be a JSON/YAML object.")
    return schema


def tables_from_schema(
    schema: Dict[str, Any],
    title: Optional[str] = None,
    endpoint: Optional[EndpointInfo] = None,
    base_x: float = 0,
    base_y: float = 0,
) -> List[TableFrame]:
    tables = generate_tables_from_schema(schema, endpoint=endpoint, title=title or None)
    if not tables:
        raise TableStructureError("Schema root must be an object with properties.")
    calculate_table_layout(tables)
    if base_x or base_y:
        offset_tables(tables, base_x, base_y)
    return tables


def tables_from_schema_text(
    text: str,
    title: Optional[str] = None,
    endpoint: Optional[EndpointInfo] = None,
    base_x: float = 0,
    base_y: float = 0,
) -> List[TableFrame]:
    """Parse JSON/YAML schema text and lay out the tables it describes."""
    return tables_from_schema(parse_schema_text(text), title, endpoint, base_x, base_y)


def canvas_from_schema_text(
    text: str,
    title: Optional[str] = None,
    endpoint: Optional[EndpointInfo] = None,
    base_x: float = 0,
    base_y: float = 0,
) -> Tuple[List[TableFrame], Box]:
    tables = tables_from_schema_text(text, title, endpoint, base_x, base_y)
    canvas = build_canvas(tables)
    logger.info(f"Generated {len(tables)} tables for {tables[0].title!r}")
    return tables, canvas
