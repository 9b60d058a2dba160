from __future__ import annotations

from typing import Any, Dict, List, Optional

from .json_schema_builder import build_schema_for_section
from .logging_utils import create_logger
from .models import TableHierarchy

logger = create_logger(__name__)

OPENAPI_VERSION = '3.0.0'
BODY_METHODS = ('POST', 'PUT', 'PATCH')
JSON_MEDIA_TYPE = 'application/json'


def build_operation(hierarchy: TableHierarchy) -> Dict[str, Any]:
    root = hierarchy.root
    endpoint = root.endpoint
    operation: Dict[str, Any] = {'summary': root.title or f"{endpoint.method} {endpoint.path}"}

    if endpoint.method in BODY_METHODS:
        operation['requestBody'] = {
            'required': True,
            'content': {JSON_MEDIA_TYPE: {'schema': build_schema_for_section(root, hierarchy)}},
        }

    operation['responses'] = {
        '200': {
            'description': 'Successful response',
            'content': {JSON_MEDIA_TYPE: {'schema': build_schema_for_section(root, hierarchy)}},
        }
    }
    return operation


def build_path_item(hierarchy: TableHierarchy) -> Dict[str, Any]:
    endpoint = hierarchy.root.endpoint
    if endpoint is None:
        raise ValueError("Root table must have endpoint info")
    return {endpoint.method.lower(): build_operation(hierarchy)}


def build_openapi_document(
    hierarchies: List[TableHierarchy],
    title: Optional[str] = None,
    version: Optional[str] = None,
    description: Optional[str] = None,
    server_url: Optional[str] = None,
) -> Dict[str, Any]:
    """OpenAPI 3.0.0 document with one operation per endpoint hierarchy.

    Hierarchies without endpoint metadata are skipped. Endpoints sharing a
    path are merged under their lower-case method keys.
    """
    paths: Dict[str, Dict[str, Any]] = {}
    for hierarchy in hierarchies:
        endpoint = hierarchy.root.endpoint
        if endpoint is None:
            logger.warning(f"Hierarchy root {hierarchy.root.title!r} has no endpoint info, skipping")
            continue
        paths.setdefault(endpoint.path, {}).update(build_path_item(hierarchy))

    info: Dict[str, Any] = {
        'title': title or 'API Documentation',
        'version': version or '1.0.0',
    }
    if description:
        info['description'] = description

    doc: Dict[str, Any] = {'openapi': OPENAPI_VERSION, 'info': info}
    if server_url:
        doc['servers'] = [{'url': server_url}]
    doc['paths'] = paths
    return doc
