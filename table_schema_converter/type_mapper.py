"""Map free-text type tokens from table cells onto JSON Schema types."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .logging_utils import create_logger
from .models import HTTP_METHODS

logger = create_logger(__name__)

_ARRAY_SUFFIX_RE = re.compile(r'\[\]$')
_UPPER_START_RE = re.compile(r'[A-Z]')


@dataclass(frozen=True)
class TypeMapping:
    type: str
    format: Optional[str] = None


TYPE_MAP: Dict[str, TypeMapping] = {
    'string': TypeMapping('string'),
    'str': TypeMapping('string'),
    'text': TypeMapping('string'),

    'number': TypeMapping('number'),
    'num': TypeMapping('number'),
    'float': TypeMapping('number'),
    'double': TypeMapping('number'),

    'integer': TypeMapping('integer'),
    'int': TypeMapping('integer'),
    'long': TypeMapping('integer'),

    'boolean': TypeMapping('boolean'),
    'bool': TypeMapping('boolean'),

    'object': TypeMapping('object'),
    'obj': TypeMapping('object'),

    'array': TypeMapping('array'),
    'arr': TypeMapping('array'),
    'list': TypeMapping('array'),

    'date': TypeMapping('string', 'date-time'),
    'datetime': TypeMapping('string', 'date-time'),
    'timestamp': TypeMapping('string', 'date-time'),

    'email': TypeMapping('string', 'email'),
    'uri': TypeMapping('string', 'uri'),
    'url': TypeMapping('string', 'uri'),
    'uuid': TypeMapping('string', 'uuid'),

    'null': TypeMapping('null'),
}

TRUE_MARKERS = frozenset(['true', 'yes', 'y', 'o', '✓', '✔', '●', '⬤', '•', '1', 'required'])
FALSE_MARKERS = frozenset(['false', 'no', 'n', 'x', '✗', '✘', '○', '◯', '0', 'optional', 'null', ''])


def strip_array_suffix(token: str) -> str:
    """'Permission[]' -> 'Permission', 'string[]' -> 'string'."""
    return _ARRAY_SUFFIX_RE.sub('', (token or '').strip()).strip()


def has_array_suffix(token: str) -> bool:
    return (token or '').strip().endswith('[]')


def _starts_upper(token: str) -> bool:
    return bool(_UPPER_START_RE.match(token or ''))


def map_type(token: str) -> TypeMapping:
    """Map a type token to `TypeMapping(type, format)`.

    Never raises. Unknown tokens fall back to string with a warning.
    """
    trimmed = (token or '').strip()
    mapping = TYPE_MAP.get(trimmed.lower())
    if mapping:
        return mapping

    base = strip_array_suffix(trimmed)
    is_array = has_array_suffix(trimmed)

    # string[] -> array; the element type is resolved by the caller
    if is_array and base.lower() in TYPE_MAP:
        return TypeMapping('array')

    # PascalCase custom type -> reference to another table
    if _starts_upper(base):
        return TypeMapping('array') if is_array else TypeMapping('object')

    logger.warning(f"Unknown type: {token!r}, falling back to 'string'")
    return TypeMapping('string')


def is_expandable_type(token: str) -> bool:
    """True when a row with this type may expand into a child table."""
    normalized = (token or '').strip().lower()
    if normalized in ('object', 'array'):
        return True
    return _starts_upper(strip_array_suffix(token))


def parse_required_value(value: Union[str, bool, None]) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    normalized = str(value).strip().lower()
    if normalized in TRUE_MARKERS:
        return True
    if normalized in FALSE_MARKERS:
        return False
    return False


def normalize_http_method(method: str) -> str:
    normalized = (method or '').strip().upper()
    if normalized in HTTP_METHODS:
        return normalized
    raise ValueError(f"Invalid HTTP method: {method}")
