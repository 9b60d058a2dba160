from __future__ import annotations

import json
import os
import tempfile
from typing import Any

import yaml


def read_text_content(file_obj) -> str:
    """Read text from an uploaded file or file path."""
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return content

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_structured_text(text: str) -> Any:
    """Parse JSON, or YAML when the text is not JSON.

    Raises ValueError for empty or malformed input.
    """
    if text is None or not text.strip():
        raise ValueError("Input is empty.")
    try:
        return json.loads(text)
    except ValueError as json_error:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as yaml_error:
            raise ValueError(f"Not valid JSON ({json_error}) or YAML ({yaml_error})") from yaml_error


def read_structured_content(file_obj) -> Any:
    """Read a JSON/YAML upload (schema text or canvas dump)."""
    return parse_structured_text(read_text_content(file_obj))


def write_output_file(content: str, file_name: str, ext: str) -> str:
    """Write `content` to the temp dir for download and return the path."""
    if not file_name or not file_name.strip():
        file_name = "output"
    file_name = file_name.strip()

    ext = ext if ext.startswith('.') else f".{ext}"
    if not file_name.lower().endswith(ext.lower()):
        file_name += ext

    path = os.path.join(tempfile.gettempdir(), file_name)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    return path
