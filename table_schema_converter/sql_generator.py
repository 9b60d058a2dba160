"""SQL DDL from a schema tree.

Every structural type becomes a table with a synthetic auto-increment `id`
primary key. A nested object becomes a `<field>_id` column plus its own
table. An array of objects becomes its own table; the row does not get a
column linking it back to the parent. Primitive arrays are stored in a
single JSON column.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .models import SchemaType, array_object_items, is_object_node, schema_type_of
from .naming import to_snake_case
from .nested_types import NestedType, check_type_map, collect_nested_types

MYSQL = 'mysql'
POSTGRES = 'postgres'
ORACLE = 'oracle'


@dataclass(frozen=True)
class Column:
    name: str
    type: str
    nullable: str = ''
    default: str = ''
    comment: str = ''


@dataclass(frozen=True)
class SqlDialect:
    name: str
    quote: Callable[[str], str]
    id_type: str
    fk_type: str
    json_type: str
    base_types: Dict[SchemaType, str]
    date_type: str
    datetime_type: str
    varchar: str
    varchar_limit: int
    long_text: str
    format_default: Callable[[Any, SchemaType], Optional[str]]
    inline_column_comments: bool = False


def _quote_string(value: Any, escape: str) -> str:
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return "'" + text.replace("'", escape) + "'"


def _format_default_postgres(value: Any, schema_type: SchemaType) -> Optional[str]:
    if value is None:
        return 'NULL'
    if schema_type is SchemaType.STRING:
        return _quote_string(value, "\\'")
    if schema_type in (SchemaType.NUMBER, SchemaType.INTEGER):
        return str(value)
    if schema_type is SchemaType.BOOLEAN:
        # rendered as 1/0 although the column is BOOLEAN
        return '1' if value else '0'
    return None


def _format_default_mysql(value: Any, schema_type: SchemaType) -> Optional[str]:
    if value is None:
        return 'NULL'
    if schema_type is SchemaType.STRING:
        return _quote_string(value, "\\'")
    if schema_type in (SchemaType.NUMBER, SchemaType.INTEGER):
        return str(value)
    if schema_type is SchemaType.BOOLEAN:
        return 'TRUE' if value else 'FALSE'
    return None


def _format_default_oracle(value: Any, schema_type: SchemaType) -> Optional[str]:
    if value is None:
        return 'NULL'
    if schema_type is SchemaType.STRING:
        return _quote_string(value, "''")
    if schema_type in (SchemaType.NUMBER, SchemaType.INTEGER):
        return str(value)
    if schema_type is SchemaType.BOOLEAN:
        return '1' if value else '0'
    return None


DIALECTS: Dict[str, SqlDialect] = {
    MYSQL: SqlDialect(
        name=MYSQL,
        quote=lambda name: f"`{name}`",
        id_type='BIGINT AUTO_INCREMENT',
        fk_type='BIGINT',
        json_type='JSON',
        base_types=check_type_map({
            SchemaType.STRING: 'TEXT',
            SchemaType.NUMBER: 'DOUBLE',
            SchemaType.INTEGER: 'BIGINT',
            SchemaType.BOOLEAN: 'TINYINT(1)',
            SchemaType.NULL: 'TEXT',
            SchemaType.ARRAY: 'JSON',
            SchemaType.OBJECT: 'JSON',
        }, 'MySQL'),
        date_type='DATE',
        datetime_type='DATETIME',
        varchar='VARCHAR',
        varchar_limit=255,
        long_text='TEXT',
        format_default=_format_default_mysql,
        inline_column_comments=True,
    ),
    POSTGRES: SqlDialect(
        name=POSTGRES,
        quote=lambda name: f'"{name}"',
        id_type='BIGSERIAL',
        fk_type='BIGINT',
        json_type='JSONB',
        base_types=check_type_map({
            SchemaType.STRING: 'TEXT',
            SchemaType.NUMBER: 'DOUBLE PRECISION',
            SchemaType.INTEGER: 'BIGINT',
            SchemaType.BOOLEAN: 'BOOLEAN',
            SchemaType.NULL: 'TEXT',
            SchemaType.ARRAY: 'JSONB',
            SchemaType.OBJECT: 'JSONB',
        }, 'PostgreSQL'),
        date_type='DATE',
        datetime_type='TIMESTAMP',
        varchar='VARCHAR',
        varchar_limit=255,
        long_text='TEXT',
        format_default=_format_default_postgres,
    ),
    ORACLE: SqlDialect(
        name=ORACLE,
        quote=lambda name: f'"{name.upper()}"',
        id_type='NUMBER(19) GENERATED BY DEFAULT AS IDENTITY',
        fk_type='NUMBER(19)',
        json_type='CLOB',
        base_types=check_type_map({
            SchemaType.STRING: 'CLOB',
            SchemaType.NUMBER: 'BINARY_DOUBLE',
            SchemaType.INTEGER: 'NUMBER(19)',
            SchemaType.BOOLEAN: 'NUMBER(1)',
            SchemaType.NULL: 'CLOB',
            SchemaType.ARRAY: 'CLOB',
            SchemaType.OBJECT: 'CLOB',
        }, 'Oracle'),
        date_type='DATE',
        datetime_type='TIMESTAMP',
        varchar='VARCHAR2',
        varchar_limit=4000,
        long_text='CLOB',
        format_default=_format_default_oracle,
    ),
}


def get_dialect(name: str) -> SqlDialect:
    key = (name or '').strip().lower()
    if key in ('postgresql', 'pg'):
        key = POSTGRES
    if key not in DIALECTS:
        raise ValueError(f"Unsupported SQL dialect: {name}")
    return DIALECTS[key]


def column_type(schema: Dict[str, Any], dialect: SqlDialect) -> str:
    schema_type = schema_type_of(schema)
    if schema_type is not SchemaType.STRING:
        return dialect.base_types[schema_type]

    fmt = schema.get('format')
    if fmt == 'date':
        return dialect.date_type
    if fmt == 'date-time':
        return dialect.datetime_type
    if fmt == 'email':
        return f"{dialect.varchar}(255)"
    if fmt in ('uri', 'url'):
        return f"{dialect.varchar}(2048)"
    max_length = schema.get('maxLength')
    if isinstance(max_length, int) and 0 < max_length <= dialect.varchar_limit:
        return f"{dialect.varchar}({max_length})"
    return dialect.long_text


def table_columns(schema: Dict[str, Any], dialect: SqlDialect) -> List[Column]:
    columns = [Column(name=dialect.quote('id'), type=dialect.id_type)]
    required = schema.get('required') or []

    for field_name, field_schema in (schema.get('properties') or {}).items():
        column_name = to_snake_case(field_name)
        nullable = 'NOT NULL' if field_name in required else 'NULL'
        comment = field_schema.get('description') or ''

        if is_object_node(field_schema):
            columns.append(Column(dialect.quote(f"{column_name}_id"), dialect.fk_type, nullable, comment=comment))
        elif schema_type_of(field_schema) is SchemaType.ARRAY:
            if array_object_items(field_schema) is not None:
                # child table only; no parent link column
                continue
            columns.append(Column(dialect.quote(column_name), dialect.json_type, comment=comment))
        else:
            default = ''
            if 'default' in field_schema:
                formatted = dialect.format_default(field_schema['default'], schema_type_of(field_schema))
                if formatted is not None:
                    default = f"DEFAULT {formatted}"
            columns.append(Column(dialect.quote(column_name), column_type(field_schema, dialect), nullable, default, comment))
    return columns


def _escape_comment(text: str) -> str:
    return text.replace("'", "''")


def render_table(
    table_name: str,
    schema: Dict[str, Any],
    dialect: SqlDialect,
    include_comments: bool = True,
    engine: str = 'InnoDB',
    charset: str = 'utf8mb4',
) -> str:
    columns = table_columns(schema, dialect)
    quoted_table = dialect.quote(table_name)
    description = schema.get('description') if include_comments else None

    lines: List[str] = []
    if description and dialect.name != MYSQL:
        lines.append(f"-- {description}")
    lines.append(f"CREATE TABLE {quoted_table}")
    lines.append('(')

    name_w = max(len(c.name) for c in columns)
    type_w = max(len(c.type) for c in columns)
    null_w = max(len(c.nullable) for c in columns)
    default_w = max(len(c.default) for c in columns)

    for col in columns:
        parts = ['    ' + col.name.ljust(name_w), col.type.ljust(type_w)]
        if col.nullable:
            parts.append(col.nullable.ljust(null_w))
        if col.default:
            parts.append(col.default.ljust(default_w))
        if include_comments and dialect.inline_column_comments and col.comment:
            parts.append(f"COMMENT '{_escape_comment(col.comment)}'")
        lines.append(' '.join(parts).rstrip() + ',')
    lines.append(f"    PRIMARY KEY ({dialect.quote('id')})")

    if dialect.name == MYSQL:
        suffix = f") ENGINE={engine} DEFAULT CHARSET={charset}"
        if description:
            suffix += f" COMMENT='{_escape_comment(description)}'"
        lines.append(suffix + ';')
    else:
        lines.append(');')

    if include_comments and not dialect.inline_column_comments:
        for col in columns:
            if col.comment:
                lines.append(f"COMMENT ON COLUMN {quoted_table}.{col.name} IS '{_escape_comment(col.comment)}';")

    return '\n'.join(lines)


def generate_sql_from_schema(
    schema: Dict[str, Any],
    dialect: str = POSTGRES,
    table_name: Optional[str] = None,
    include_comments: bool = True,
    engine: str = 'InnoDB',
    charset: str = 'utf8mb4',
) -> str:
    """CREATE TABLE statements for `schema`: nested tables first, the main table last."""
    sql_dialect = get_dialect(dialect)
    if not is_object_node(schema):
        return ''

    main_name = table_name or to_snake_case(schema.get('title') or 'root_table')
    nested: List[NestedType] = collect_nested_types(schema['properties'], {main_name}, [], to_snake_case)

    # referenced tables are created before the tables that point at them
    tables = nested + [(main_name, schema)]
    return '\n\n'.join(
        render_table(name, obj, sql_dialect, include_comments, engine, charset) for name, obj in tables
    )


def generate_mysql_from_schema(
    schema: Dict[str, Any],
    table_name: Optional[str] = None,
    include_comments: bool = True,
    engine: str = 'InnoDB',
    charset: str = 'utf8mb4',
) -> str:
    return generate_sql_from_schema(schema, MYSQL, table_name, include_comments, engine, charset)


def generate_postgresql_from_schema(
    schema: Dict[str, Any],
    table_name: Optional[str] = None,
    include_comments: bool = True,
) -> str:
    return generate_sql_from_schema(schema, POSTGRES, table_name, include_comments)


def generate_oracle_from_schema(
    schema: Dict[str, Any],
    table_name: Optional[str] = None,
    include_comments: bool = True,
) -> str:
    return generate_sql_from_schema(schema, ORACLE, table_name, include_comments)
