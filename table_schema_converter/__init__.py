"""Core logic for the Table ⇄ Schema Converter.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- parse table layouts out of a canvas box tree
- link tables into a hierarchy by type name
- build JSON Schema and OpenAPI documents from that hierarchy
- generate TypeScript, Java and SQL DDL from a schema
- lay a schema back out as tables
"""
from table_schema_converter.hierarchy import build_hierarchy
from table_schema_converter.json_schema_builder import build_json_schema
from table_schema_converter.openapi_builder import build_openapi_document
from table_schema_converter.table_generator import calculate_table_layout, generate_tables_from_schema
from table_schema_converter.type_mapper import map_type

__all__ = [
    'build_hierarchy',
    'build_json_schema',
    'build_openapi_document',
    'calculate_table_layout',
    'generate_tables_from_schema',
    'map_type',
]
