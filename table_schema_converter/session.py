"""Per-browser-session editor state.

Gradio keeps one EditorSession per user in `gr.State`; handlers receive it,
return an updated copy, and never touch module-level state.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .canvas import Box, box_from_dict
from .frame_builder import build_canvas
from .logging_utils import create_logger
from .models import EndpointInfo, TableFrame
from .pipeline import parse_schema_text, tables_from_schema

logger = create_logger(__name__)

LIVE_EDITOR_LANGUAGES = ('json', 'yaml')
# gap between a selected node and tables generated next to it
ANCHOR_GAP = 100


@dataclass
class EditorSession:
    last_schema_title: Optional[str] = None
    # box dicts of the last uploaded canvas, used to anchor generated tables
    saved_selection: List[Dict[str, Any]] = field(default_factory=list)
    live_editor_mode: bool = False
    live_editor_language: str = 'json'


@dataclass
class LiveEditResult:
    tables: List[TableFrame]
    canvas: Box


def remember_selection(session: EditorSession, selection: List[Dict[str, Any]]) -> EditorSession:
    return replace(session, saved_selection=list(selection or []))


def remember_schema_title(session: EditorSession, title: Optional[str]) -> EditorSession:
    if not title:
        return session
    return replace(session, last_schema_title=title)


def anchor_position(session: EditorSession) -> Tuple[float, float]:
    """Where generated tables go: inside a selected frame/section, else beside the selected node."""
    if not session.saved_selection:
        return 0, 0
    node = box_from_dict(session.saved_selection[0])
    if node.is_container:
        return node.x, node.y
    return node.x + node.width + ANCHOR_GAP, node.y


def enter_live_editor(session: EditorSession, language: str = 'json') -> EditorSession:
    language = (language or 'json').lower()
    if language not in LIVE_EDITOR_LANGUAGES:
        raise ValueError(f"Live editing supports JSON or YAML schemas, not {language!r}")
    return replace(session, live_editor_mode=True, live_editor_language=language)


def exit_live_editor(session: EditorSession) -> EditorSession:
    return replace(session, live_editor_mode=False)


def apply_live_edit(
    session: EditorSession,
    text: str,
    title: Optional[str] = None,
    endpoint: Optional[EndpointInfo] = None,
) -> Tuple[EditorSession, Optional[LiveEditResult]]:
    """Re-run schema -> tables for the editor text.

    Text that does not parse yet (mid-edit) yields no result and leaves the
    session unchanged.
    """
    if not session.live_editor_mode:
        return session, None

    try:
        schema = parse_schema_text(text)
        resolved_title = title or schema.get('title') or session.last_schema_title
        base_x, base_y = anchor_position(session)
        tables = tables_from_schema(schema, resolved_title, endpoint, base_x, base_y)
    except ValueError as e:
        logger.debug(f"Live edit skipped: {e}")
        return session, None

    return remember_schema_title(session, resolved_title), LiveEditResult(tables=tables, canvas=build_canvas(tables))
