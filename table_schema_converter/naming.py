from __future__ import annotations

import re

_CAMEL_BOUNDARY_RE = re.compile(r'([a-z])([A-Z])')
_ACRONYM_BOUNDARY_RE = re.compile(r'([A-Z])([A-Z][a-z])')
_SEPARATOR_RE = re.compile(r'[_\-\s]+')


def to_pascal_case(text: str) -> str:
    """'user_profile' / 'userProfile' / 'user-profile' -> 'UserProfile'."""
    spaced = _CAMEL_BOUNDARY_RE.sub(r'\1 \2', text or '')
    words = [w for w in _SEPARATOR_RE.sub(' ', spaced).split(' ') if w]
    return ''.join(w[0].upper() + w[1:].lower() for w in words)


def to_camel_case(text: str) -> str:
    pascal = to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def to_snake_case(text: str) -> str:
    """'postalCode' -> 'postal_code', 'HTTPServer' -> 'http_server'."""
    out = re.sub(r'\s+', '_', (text or '').strip())
    out = _CAMEL_BOUNDARY_RE.sub(r'\1_\2', out)
    out = _ACRONYM_BOUNDARY_RE.sub(r'\1_\2', out)
    out = re.sub(r'[_\-]+', '_', out)
    return out.strip('_').lower()
