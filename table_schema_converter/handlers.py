from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import gradio as gr

from .canvas import box_to_dict, boxes_from_payload
from .errors import TableStructureError
from .frame_builder import build_canvas
from .io_utils import read_structured_content, write_output_file
from .logging_utils import create_logger
from .models import table_to_dict
from .pipeline import (
    JAVA,
    JSON_SCHEMA,
    TYPESCRIPT,
    OutputOptions,
    collect_tables,
    openapi_from_canvas,
    output_extension,
    parse_endpoint,
    render_schema,
    render_schema_output,
    schema_from_canvas,
    tables_from_schema_text,
)
from .samples import sample_schema_text
from .session import (
    EditorSession,
    anchor_position,
    apply_live_edit,
    enter_live_editor,
    exit_live_editor,
    remember_schema_title,
    remember_selection,
)
from .sql_generator import MYSQL, ORACLE, POSTGRES

logger = create_logger(__name__)

OPENAPI = 'openapi'

# dropdown label -> (target, serialization, code highlighting)
OUTPUT_FORMATS: Dict[str, Tuple[str, str, Optional[str]]] = {
    "JSON Schema (JSON)": (JSON_SCHEMA, 'json', 'json'),
    "JSON Schema (YAML)": (JSON_SCHEMA, 'yaml', 'yaml'),
    "TypeScript": (TYPESCRIPT, 'json', 'typescript'),
    "Java": (JAVA, 'json', None),
    "MySQL": (MYSQL, 'json', 'sql'),
    "PostgreSQL": (POSTGRES, 'json', 'sql'),
    "Oracle": (ORACLE, 'json', 'sql'),
    "OpenAPI (JSON)": (OPENAPI, 'json', 'json'),
    "OpenAPI (YAML)": (OPENAPI, 'yaml', 'yaml'),
}
DEFAULT_OUTPUT_FORMAT = "JSON Schema (JSON)"


def _session(session: Optional[EditorSession]) -> EditorSession:
    return session if isinstance(session, EditorSession) else EditorSession()


def _table_summaries(tables) -> List[Dict[str, Any]]:
    summaries = []
    for t in tables:
        summary: Dict[str, Any] = {'id': t.id, 'title': t.title, 'rowCount': len(t.rows)}
        if t.endpoint:
            summary['endpoint'] = f"[{t.endpoint.method}] {t.endpoint.path}"
        summaries.append(summary)
    return summaries


def load_canvas_handler(file_obj, session):
    """Upload of a canvas dump: remember it as the selection and list its tables."""
    session = _session(session)
    if file_obj is None:
        return session, None, "No file uploaded."

    try:
        payload = read_structured_content(file_obj)
        boxes = boxes_from_payload(payload)
    except Exception as e:
        return session, None, f"Error reading canvas: {str(e)}"

    session = remember_selection(session, [box_to_dict(box) for box in boxes])
    try:
        tables = collect_tables(boxes)
    except TableStructureError as e:
        return session, None, str(e)

    return session, _table_summaries(tables), f"Found {len(tables)} tables."


def generate_handler(
    session,
    output_format: str,
    include_comments: bool,
    include_examples: bool,
    api_title: str,
    api_version: str,
    api_description: str,
    server_url: str,
    file_name: str,
):
    """Generate the selected output from the uploaded canvas."""
    session = _session(session)
    if not session.saved_selection:
        return session, gr.update(value=""), None, "No canvas loaded."
    if output_format not in OUTPUT_FORMATS:
        return session, gr.update(value=""), None, f"Unknown output format: {output_format}"

    target, fmt, language = OUTPUT_FORMATS[output_format]
    boxes = boxes_from_payload(session.saved_selection)

    try:
        if target == OPENAPI:
            document = openapi_from_canvas(
                boxes,
                title=api_title or None,
                version=api_version or None,
                description=api_description or None,
                server_url=server_url or None,
            )
            result = render_schema(document, fmt)
            ext = output_extension(JSON_SCHEMA, fmt)
        else:
            options = OutputOptions(
                format=fmt,
                include_examples=include_examples if target == JSON_SCHEMA else True,
                include_comments=include_comments,
            )
            schema = schema_from_canvas(boxes, include_examples=options.include_examples)
            session = remember_schema_title(session, schema.get('title'))
            result = render_schema_output(schema, target, options)
            ext = output_extension(target, fmt)
    except TableStructureError as e:
        return session, gr.update(value=""), None, str(e)
    except Exception as e:
        logger.error(f"Generation failed for {output_format}: {e}")
        return session, gr.update(value=""), None, f"Error generating output: {str(e)}"

    try:
        path = write_output_file(result, file_name or target, ext)
    except Exception as e:
        return session, gr.update(value=result, language=language), None, f"Error during export: {str(e)}"

    return session, gr.update(value=result, language=language), path, f"Generated {output_format}. Saved to {path}"


def load_sample_schema():
    return sample_schema_text()


def import_schema_handler(session, schema_text: str, title: str, method: str, path: str):
    """Schema text -> laid out tables plus a canvas dump to download."""
    session = _session(session)
    try:
        endpoint = parse_endpoint(method, path)
    except ValueError as e:
        return session, None, None, str(e)

    try:
        base_x, base_y = anchor_position(session)
        tables = tables_from_schema_text(schema_text, title or None, endpoint, base_x, base_y)
    except TableStructureError as e:
        return session, None, None, str(e)
    except ValueError as e:
        return session, None, None, f"Invalid schema: {str(e)}"
    except Exception as e:
        logger.error(f"Table generation failed: {e}")
        return session, None, None, f"Error generating tables: {str(e)}"

    session = remember_schema_title(session, tables[0].title)
    canvas = build_canvas(tables)
    try:
        dump_path = write_output_file(json.dumps(box_to_dict(canvas), indent=2, ensure_ascii=False), 'tables_canvas', '.json')
    except Exception as e:
        return session, [table_to_dict(t) for t in tables], None, f"Error during export: {str(e)}"

    return session, [table_to_dict(t) for t in tables], dump_path, f"Generated {len(tables)} tables."


def start_live_editor_handler(session, current_output: str, output_format: str):
    """Open the live editor on the last generated JSON Schema."""
    session = _session(session)
    target, fmt, _ = OUTPUT_FORMATS.get(output_format, (None, 'json', None))
    if target != JSON_SCHEMA:
        return session, gr.update(), "Live editing is available for JSON Schema output only."
    session = enter_live_editor(session, fmt)
    return session, gr.update(value=current_output or ""), f"Live editing ({fmt.upper()})."


def stop_live_editor_handler(session):
    return exit_live_editor(_session(session)), "Live editor closed."


def live_edit_handler(session, text: str):
    """Re-generate tables on every edit; unparsable text keeps the previous output."""
    session = _session(session)
    try:
        session, result = apply_live_edit(session, text)
    except Exception as e:
        logger.error(f"Live edit failed: {e}")
        return session, gr.update(), gr.update()
    if result is None:
        return session, gr.update(), gr.update()
    return session, [table_to_dict(t) for t in result.tables], box_to_dict(result.canvas)
