from unittest.mock import MagicMock

import pytest

from table_schema_converter import type_mapper
from table_schema_converter.type_mapper import (
    TypeMapping,
    is_expandable_type,
    map_type,
    normalize_http_method,
    parse_required_value,
    strip_array_suffix,
)

SCHEMA_TYPES = {'string', 'number', 'integer', 'boolean', 'object', 'array', 'null'}


class TestMapType:
    """Type tokens from table cells."""

    def test_synonyms(self):
        assert map_type('int') == TypeMapping('integer')
        assert map_type('Long') == TypeMapping('integer')
        assert map_type(' bool ') == TypeMapping('boolean')
        assert map_type('double') == TypeMapping('number')
        assert map_type('list') == TypeMapping('array')

    def test_formats(self):
        assert map_type('datetime') == TypeMapping('string', 'date-time')
        assert map_type('email') == TypeMapping('string', 'email')
        assert map_type('url') == TypeMapping('string', 'uri')
        assert map_type('uuid') == TypeMapping('string', 'uuid')

    def test_known_names_win_over_capitalization(self):
        """'Date' is the date synonym, not a reference to a table named Date."""
        assert map_type('Date') == TypeMapping('string', 'date-time')

    def test_custom_types(self):
        assert map_type('Foo[]') == TypeMapping('array')
        assert map_type('Address') == TypeMapping('object')
        assert map_type('string[]') == TypeMapping('array')

    def test_unknown_token_falls_back_to_string_with_warning(self, monkeypatch):
        mock_logger = MagicMock()
        monkeypatch.setattr(type_mapper, 'logger', mock_logger)

        assert map_type('randomjunk') == TypeMapping('string')
        assert mock_logger.warning.called

    @pytest.mark.parametrize('token', ['', '   ', None, '[]', 'string[][]', '日本語', '123', '{}', 'ñ[]'])
    def test_never_raises_and_stays_in_vocabulary(self, token):
        assert map_type(token).type in SCHEMA_TYPES


class TestExpandableTypes:

    def test_expandable(self):
        assert is_expandable_type('object')
        assert is_expandable_type('array')
        assert is_expandable_type('Address')
        assert is_expandable_type('Permission[]')

    def test_not_expandable(self):
        assert not is_expandable_type('string[]')
        assert not is_expandable_type('int')
        assert not is_expandable_type('')

    def test_strip_array_suffix(self):
        assert strip_array_suffix('Permission[]') == 'Permission'
        assert strip_array_suffix(' string [] ') == 'string'
        assert strip_array_suffix('Plain') == 'Plain'


class TestRequiredMarkers:

    @pytest.mark.parametrize('value', ['●', 'Y', ' yes ', 'true', 'O', '✓', '1', 'Required', True])
    def test_true_markers(self, value):
        assert parse_required_value(value) is True

    @pytest.mark.parametrize('value', ['', 'no', 'x', '○', 'optional', 'null', '0', None, False, 'maybe'])
    def test_false_and_unknown_markers(self, value):
        assert parse_required_value(value) is False


class TestHttpMethod:

    def test_normalizes_case(self):
        assert normalize_http_method('post') == 'POST'
        assert normalize_http_method(' Delete ') == 'DELETE'

    def test_invalid_method_raises(self):
        with pytest.raises(ValueError):
            normalize_http_method('FETCH')
