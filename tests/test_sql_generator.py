import pytest

from table_schema_converter.sql_generator import (
    generate_mysql_from_schema,
    generate_oracle_from_schema,
    generate_postgresql_from_schema,
    generate_sql_from_schema,
    get_dialect,
)

SCHEMA = {
    'title': 'UserAccount',
    'type': 'object',
    'description': 'Accounts',
    'required': ['email'],
    'properties': {
        'email': {'type': 'string', 'format': 'email', 'description': 'Login email'},
        'nickname': {'type': 'string', 'maxLength': 50},
        'bio': {'type': 'string'},
        'homepage': {'type': 'string', 'format': 'uri'},
        'age': {'type': 'integer', 'default': 18},
        'active': {'type': 'boolean', 'default': True},
        'createdAt': {'type': 'string', 'format': 'date-time'},
        'birthday': {'type': 'string', 'format': 'date'},
        'score': {'type': 'number'},
        'motto': {'type': 'string', 'default': "it's fine"},
        'tags': {'type': 'array', 'items': {'type': 'string'}},
        'profile': {'type': 'object', 'properties': {'city': {'type': 'string'}}},
        'orders': {'type': 'array', 'items': {'type': 'object', 'properties': {'total': {'type': 'number'}}}},
    },
}


def line_for(sql, column):
    return next(line for line in sql.splitlines() if line.strip().startswith(column))


def table_block(sql, name):
    return next(block for block in sql.split('\n\n') if f"CREATE TABLE {name}\n" in block)


class TestPostgres:

    def test_tables_and_order(self):
        sql = generate_postgresql_from_schema(SCHEMA)
        assert sql.split('\n\n')[-1].startswith('-- Accounts\nCREATE TABLE "user_account"\n(')
        assert sql.index('CREATE TABLE "profile"') < sql.index('CREATE TABLE "orders"') < sql.index('CREATE TABLE "user_account"')

    def test_column_types(self):
        sql = generate_postgresql_from_schema(SCHEMA)
        assert 'BIGSERIAL' in line_for(sql, '"id"')
        assert 'VARCHAR(255)' in line_for(sql, '"email"')
        assert 'NOT NULL' in line_for(sql, '"email"')
        assert 'VARCHAR(50)' in line_for(sql, '"nickname"')
        assert 'TEXT' in line_for(sql, '"bio"')
        assert 'VARCHAR(2048)' in line_for(sql, '"homepage"')
        assert 'TIMESTAMP' in line_for(sql, '"created_at"')
        assert 'DATE' in line_for(sql, '"birthday"')
        assert 'DOUBLE PRECISION' in line_for(sql, '"score"')
        assert 'JSONB' in line_for(sql, '"tags"')
        assert 'BIGINT' in line_for(sql, '"profile_id"')

    def test_defaults(self):
        sql = generate_postgresql_from_schema(SCHEMA)
        assert line_for(sql, '"age"').endswith('DEFAULT 18,')
        # boolean defaults are written as 1/0
        assert line_for(sql, '"active"').endswith('DEFAULT 1,')
        assert "DEFAULT 'it\\'s fine'" in line_for(sql, '"motto"')

    def test_array_of_objects_has_no_link_column(self):
        sql = generate_postgresql_from_schema(SCHEMA)
        main_table = table_block(sql, '"user_account"')
        orders_table = table_block(sql, '"orders"')
        assert '"orders"' not in main_table
        assert 'user_account_id' not in orders_table
        assert '"total"' in orders_table

    def test_primary_key_and_commas(self):
        sql = generate_postgresql_from_schema(SCHEMA)
        main_table = table_block(sql, '"user_account"').splitlines()
        assert '    PRIMARY KEY ("id")' in main_table
        pk_index = main_table.index('    PRIMARY KEY ("id")')
        column_lines = main_table[3:pk_index]
        assert column_lines and all(line.endswith(',') for line in column_lines)
        assert main_table[pk_index + 1] == ');'

    def test_columns_are_aligned(self):
        main_table = table_block(generate_postgresql_from_schema(SCHEMA), '"user_account"')
        assert line_for(main_table, '"id"').index('BIGSERIAL') == line_for(main_table, '"email"').index('VARCHAR(255)')

    def test_column_comments(self):
        sql = generate_postgresql_from_schema(SCHEMA)
        assert 'COMMENT ON COLUMN "user_account"."email" IS \'Login email\';' in sql.splitlines()

    def test_without_comments(self):
        sql = generate_postgresql_from_schema(SCHEMA, include_comments=False)
        assert '--' not in sql
        assert 'COMMENT' not in sql

    def test_table_name_option(self):
        assert 'CREATE TABLE "accounts"' in generate_postgresql_from_schema(SCHEMA, table_name='accounts')


class TestMysql:

    def test_types_and_table_options(self):
        sql = generate_mysql_from_schema(SCHEMA)
        assert 'BIGINT AUTO_INCREMENT' in line_for(sql, '`id`')
        assert 'DATETIME' in line_for(sql, '`created_at`')
        assert 'TINYINT(1)' in line_for(sql, '`active`')
        assert 'DEFAULT TRUE' in line_for(sql, '`active`')
        assert 'JSON' in line_for(sql, '`tags`')
        assert 'DOUBLE' in line_for(sql, '`score`')
        assert "COMMENT 'Login email'" in line_for(sql, '`email`')
        assert ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='Accounts';" in sql.splitlines()
        assert '    PRIMARY KEY (`id`)' in sql.splitlines()

    def test_engine_and_charset(self):
        sql = generate_mysql_from_schema(SCHEMA, engine='MyISAM', charset='latin1', include_comments=False)
        assert ') ENGINE=MyISAM DEFAULT CHARSET=latin1;' in sql.splitlines()


class TestOracle:

    def test_types(self):
        sql = generate_oracle_from_schema(SCHEMA)
        assert 'CREATE TABLE "USER_ACCOUNT"' in sql
        assert 'NUMBER(19) GENERATED BY DEFAULT AS IDENTITY' in line_for(sql, '"ID"')
        assert 'VARCHAR2(255)' in line_for(sql, '"EMAIL"')
        assert 'CLOB' in line_for(sql, '"BIO"')
        assert 'BINARY_DOUBLE' in line_for(sql, '"SCORE"')
        assert 'NUMBER(1)' in line_for(sql, '"ACTIVE"')
        assert 'DEFAULT 1' in line_for(sql, '"ACTIVE"')
        assert 'NUMBER(19)' in line_for(sql, '"PROFILE_ID"')
        assert "DEFAULT 'it''s fine'" in line_for(sql, '"MOTTO"')
        assert '    PRIMARY KEY ("ID")' in sql.splitlines()


class TestDialects:

    def test_aliases(self):
        assert get_dialect('PostgreSQL').name == 'postgres'
        assert get_dialect('pg').name == 'postgres'
        assert get_dialect('MySQL').name == 'mysql'

    def test_unknown_dialect(self):
        with pytest.raises(ValueError):
            generate_sql_from_schema(SCHEMA, 'sqlite')

    def test_non_object_schema(self):
        assert generate_sql_from_schema({'type': 'string'}, 'postgres') == ''

    def test_nested_table_named_like_main_table_is_skipped(self):
        schema = {'title': 'profile', 'type': 'object', 'properties': {
            'profile': {'type': 'object', 'properties': {'city': {'type': 'string'}}},
        }}
        sql = generate_sql_from_schema(schema, 'postgres')
        assert sql.count('CREATE TABLE') == 1
