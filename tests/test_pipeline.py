import json

import pytest
import yaml

from table_schema_converter.canvas import Box, BoxKind
from table_schema_converter.errors import TableStructureError
from table_schema_converter.frame_builder import build_canvas
from table_schema_converter.models import EndpointInfo, Position, Size, TableColumn, TableFrame, TableRow
from table_schema_converter.pipeline import (
    OutputOptions,
    canvas_from_schema_text,
    collect_tables,
    generate_output,
    openapi_from_canvas,
    output_extension,
    parse_endpoint,
    pick_root_table,
    render_schema,
    schema_from_canvas,
    tables_from_schema_text,
)

COLUMNS = [TableColumn(name, 100, i) for i, name in enumerate(['Required', 'Field', 'Type', 'Description'])]


def table(table_id, title, rows, x=0, y=0):
    return TableFrame(
        id=table_id,
        title=title,
        columns=COLUMNS,
        rows=rows,
        position=Position(x, y),
        size=Size(400, 72 + 36 * len(rows)),
    )


def api_canvas():
    """Two endpoints sharing an Address table, plus an unrelated table."""
    return build_canvas([
        table('get', '[GET] /users', [TableRow('id', 'string', required=True), TableRow('address', 'Address')]),
        table('post', '[POST] /users', [TableRow('name', 'string', required=True), TableRow('address', 'Address')], y=400),
        table('addr', 'Address', [TableRow('city', 'string')], x=600),
        table('misc', 'Notes', [TableRow('text', 'string')], x=600, y=800),
    ])


class TestCollectTables:

    def test_no_tables(self):
        with pytest.raises(TableStructureError):
            collect_tables([Box(kind=BoxKind.TEXT, text='hello')])
        with pytest.raises(TableStructureError):
            collect_tables([])

    def test_tables_in_canvas(self):
        assert [t.id for t in collect_tables([api_canvas()])] == ['get', 'post', 'addr', 'misc']

    def test_root_prefers_endpoint(self):
        tables = collect_tables([api_canvas()])
        assert pick_root_table(tables).id == 'get'


class TestSchemaFromCanvas:

    def test_only_related_tables(self):
        schema = schema_from_canvas([api_canvas()])
        assert schema['title'] == '[GET] /users'
        assert list(schema['properties']) == ['id', 'address']
        assert schema['properties']['address']['properties'] == {'city': {'type': 'string'}}

    @pytest.mark.parametrize('target,marker', [
        ('typescript', 'export interface'),
        ('java', 'public class'),
        ('mysql', 'ENGINE=InnoDB'),
        ('postgres', 'BIGSERIAL'),
        ('oracle', 'GENERATED BY DEFAULT AS IDENTITY'),
    ])
    def test_generate_output_targets(self, target, marker):
        assert marker in generate_output([api_canvas()], target)

    def test_json_schema_as_yaml(self):
        text = generate_output([api_canvas()], 'json-schema', OutputOptions(format='yaml'))
        assert yaml.safe_load(text)['properties']['address']['type'] == 'object'

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            generate_output([api_canvas()], 'cobol')


class TestOpenapiFromCanvas:

    def test_one_operation_per_endpoint_table(self):
        doc = openapi_from_canvas([api_canvas()], title='Users')
        assert doc['info']['title'] == 'Users'
        operations = doc['paths']['/users']
        assert list(operations) == ['get', 'post']
        post_schema = operations['post']['requestBody']['content']['application/json']['schema']
        assert post_schema['properties']['address']['properties'] == {'city': {'type': 'string'}}

    def test_requires_endpoint_tables(self):
        canvas = build_canvas([table('a', 'Plain', [TableRow('id', 'string')])])
        with pytest.raises(TableStructureError):
            openapi_from_canvas([canvas])


class TestSchemaText:

    def test_yaml_schema(self):
        text = "title: Pet\ntype: object\nproperties:\n  name:\n    type: string\n  owner:\n    type: object\n    properties:\n      id:\n        type: integer\n"
        tables = tables_from_schema_text(text)
        assert [t.title for t in tables] == ['Pet', 'Owner']
        assert tables[1].position.x == 1200

    def test_offset(self):
        tables = tables_from_schema_text('{"type": "object", "properties": {"id": {"type": "string"}}}', base_x=50, base_y=60)
        assert tables[0].position == Position(50, 60)

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            tables_from_schema_text('[1, 2]')
        with pytest.raises(TableStructureError):
            tables_from_schema_text('{"type": "string"}')

    def test_malformed(self):
        with pytest.raises(ValueError):
            tables_from_schema_text('{"type": "object", "properties": {')

    def test_canvas_from_schema_text(self):
        tables, canvas = canvas_from_schema_text(
            '{"type": "object", "properties": {"id": {"type": "string"}}}',
            title='Thing',
            endpoint=EndpointInfo('GET', '/things'),
        )
        assert canvas.kind is BoxKind.SECTION
        assert [child.name for child in canvas.children] == ['Thing']
        assert tables[0].endpoint == EndpointInfo('GET', '/things')


class TestHelpers:

    def test_parse_endpoint(self):
        assert parse_endpoint('post', 'users') == EndpointInfo('POST', '/users')
        assert parse_endpoint('GET', '  ') is None
        with pytest.raises(ValueError):
            parse_endpoint('FETCH', '/users')

    def test_render_schema(self):
        document = {'$schema': 'x', 'title': 'Düsseldorf ●', 'properties': {'b': {}, 'a': {}}}
        text = render_schema(document)
        assert json.loads(text) == document
        assert 'Düsseldorf ●' in text
        assert text.startswith('{\n  "$schema"')

        as_yaml = render_schema(document, 'yaml')
        assert list(yaml.safe_load(as_yaml)) == ['$schema', 'title', 'properties']
        assert list(yaml.safe_load(as_yaml)['properties']) == ['b', 'a']

    def test_output_extension(self):
        assert output_extension('typescript') == '.ts'
        assert output_extension('java') == '.java'
        assert output_extension('oracle') == '.sql'
        assert output_extension('json-schema', 'yaml') == '.yaml'
        assert output_extension('json-schema') == '.json'
