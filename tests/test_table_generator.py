import itertools

from table_schema_converter.models import EndpointInfo, Position, Size, TableFrame, TableRow
from table_schema_converter.samples import SAMPLE_SCHEMA
from table_schema_converter.table_generator import (
    calculate_table_layout,
    find_all_descendants,
    generate_tables_from_schema,
    get_subtree_bottom,
    offset_tables,
)


def obj(properties, required=None):
    schema = {'type': 'object', 'properties': properties}
    if required:
        schema['required'] = required
    return schema


def string():
    return {'type': 'string'}


class TestGenerateTables:

    def test_flat_schema(self):
        schema = obj({'id': string(), 'name': string(), 'tags': {'type': 'array', 'items': string()}}, ['id', 'name'])
        tables = generate_tables_from_schema(schema)

        assert len(tables) == 1
        assert [(r.field, r.type, r.required, r.has_child_table) for r in tables[0].rows] == [
            ('id', 'string', True, False),
            ('name', 'string', True, False),
            ('tags', 'string[]', False, False),
        ]

    def test_nested_object(self):
        tables = generate_tables_from_schema(obj({'profile': obj({'city': string()})}))

        assert len(tables) == 2
        root, child = tables
        assert [(r.field, r.type, r.has_child_table) for r in root.rows] == [('profile', 'Profile', True)]
        assert root.rows[0].child_table_id == child.id
        assert child.title == 'Profile'
        assert [r.field for r in child.rows] == ['city']
        assert child.depth == 1
        assert child.parent_table_id == root.id
        assert child.parent_field_name == 'profile'
        assert child.parent_field_type == 'object'

    def test_array_of_objects(self):
        tables = generate_tables_from_schema(obj({'user_roles': {'type': 'array', 'items': obj({'name': string()})}}))
        root, child = tables
        assert root.rows[0].type == 'UserRoles[]'
        assert child.title == 'UserRoles'
        assert child.parent_field_type == 'array'

    def test_ids_and_parents_in_pre_order(self):
        schema = obj({
            'a': obj({'b': obj({'c': string()})}),
            'd': obj({'e': string()}),
        })
        tables = generate_tables_from_schema(schema)
        assert [t.id for t in tables] == [f"generated-table-{i}" for i in range(4)]
        assert [t.title for t in tables] == ['Schema', 'A', 'B', 'D']
        assert [t.parent_table_id for t in tables] == [None, 'generated-table-0', 'generated-table-1', 'generated-table-0']
        assert [t.depth for t in tables] == [0, 1, 2, 1]

    def test_title_and_endpoint(self):
        schema = dict(obj({'id': string()}), title='From Schema')
        assert generate_tables_from_schema(schema)[0].title == 'From Schema'
        assert generate_tables_from_schema(schema, title='Override')[0].title == 'Override'

        root = generate_tables_from_schema(schema, endpoint=EndpointInfo('GET', '/users'))[0]
        assert root.is_root
        assert root.endpoint == EndpointInfo('GET', '/users')

    def test_cell_values_are_text(self):
        schema = obj({
            'age': {'type': 'integer', 'default': 5, 'examples': [7]},
            'active': {'type': 'boolean', 'default': False},
            'name': {'type': 'string', 'examples': ['Kim']},
            'actions': {'type': 'array', 'items': {'type': 'string', 'examples': ['read', 'write']}},
        })
        rows = {r.field: r for r in generate_tables_from_schema(schema)[0].rows}
        assert (rows['age'].default, rows['age'].example) == ('5', '7')
        assert rows['active'].default == 'false'
        assert rows['name'].example == 'Kim'
        assert rows['actions'].example == '["read", "write"]'

    def test_formats_become_type_tokens(self):
        schema = obj({
            'created': {'type': 'string', 'format': 'date-time'},
            'email': {'type': 'string', 'format': 'email'},
            'link': {'type': 'string', 'format': 'uri'},
            'ids': {'type': 'array', 'items': {'type': 'string', 'format': 'uuid'}},
        })
        assert [r.type for r in generate_tables_from_schema(schema)[0].rows] == ['datetime', 'email', 'url', 'uuid[]']

    def test_child_titles_are_unique_references(self):
        schema = obj({
            'email': obj({'v': string()}),
            'home': obj({'address': obj({'city': string()})}),
            'work': obj({'address': obj({'zip': string()})}),
            'schema': obj({'w': string()}),
            'cells': {'type': 'array', 'items': obj({'x': string()})},
        })
        tables = generate_tables_from_schema(schema)
        assert [t.title for t in tables] == [
            'Schema', 'EmailObject', 'Home', 'Address', 'Work', 'Address2', 'Schema2', 'FieldCells',
        ]
        assert [r.type for r in tables[0].rows] == ['EmailObject', 'Home', 'Work', 'Schema2', 'FieldCells[]']

    def test_non_object_schema(self):
        assert generate_tables_from_schema({'type': 'string'}) == []
        assert generate_tables_from_schema({'type': 'object'}) == []


class TestLayout:

    def test_sizes(self):
        tables = generate_tables_from_schema(obj({'id': string(), 'name': string()}))
        calculate_table_layout(tables)
        assert tables[0].size == Size(1100, 72 + 2 * 36)
        assert tables[0].position == Position(0, 0)

    def test_children_to_the_right_and_below_sibling_subtrees(self):
        schema = obj({
            'a': obj({'x': string(), 'y': string(), 'c': obj({'z': string()})}),
            'b': obj({'w': string()}),
        })
        tables = generate_tables_from_schema(schema)
        calculate_table_layout(tables)
        by_title = {t.title: t for t in tables}

        # level with the referencing row: 0 + 72 + 0 * 36
        assert by_title['A'].position == Position(1200, 72)
        # row 2 of A: 72 + 72 + 2 * 36
        assert by_title['C'].position == Position(2400, 216)
        # below A's subtree (C ends at 216 + 108) plus the gap
        assert by_title['B'].position == Position(1200, 374)

    def test_same_column_tables_never_overlap(self):
        tables = generate_tables_from_schema(SAMPLE_SCHEMA)
        calculate_table_layout(tables)

        for a, b in itertools.combinations(tables, 2):
            if a.position.x != b.position.x:
                continue
            assert a.bottom <= b.position.y or b.bottom <= a.position.y, (a.title, b.title)

    def test_every_child_is_right_of_its_parent(self):
        tables = generate_tables_from_schema(SAMPLE_SCHEMA)
        calculate_table_layout(tables)
        by_id = {t.id: t for t in tables}
        for table in tables:
            if table.parent_table_id:
                assert table.position.x == by_id[table.parent_table_id].right + 100

    def test_child_without_row_goes_to_next_free_slot(self):
        root = TableFrame(id='r', title='Root', is_root=True, rows=[TableRow('id', 'string')])
        orphan = TableFrame(id='o', title='Loose', parent_table_id='r')
        calculate_table_layout([root, orphan])
        assert orphan.position == Position(100, 0)

    def test_no_root(self):
        table = TableFrame(id='t', position=Position(5, 5))
        calculate_table_layout([table])
        assert table.position == Position(5, 5)


class TestSubtreeHelpers:

    def test_descendants_and_bottom(self):
        tables = generate_tables_from_schema(obj({'a': obj({'b': obj({'c': string()})}), 'd': obj({'e': string()})}))
        calculate_table_layout(tables)
        root, a, b, d = tables

        assert find_all_descendants(root, tables) == [a, b, d]
        assert find_all_descendants(a, tables) == [b]
        assert get_subtree_bottom(a, tables) == max(a.bottom, b.bottom)

    def test_offset_tables(self):
        tables = generate_tables_from_schema(obj({'a': obj({'b': string()})}))
        calculate_table_layout(tables)
        offset_tables(tables, 500, 40)
        assert tables[0].position == Position(500, 40)
        assert tables[1].position == Position(1700, 112)
