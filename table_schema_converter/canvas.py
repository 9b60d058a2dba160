"""Canvas box tree.

A canvas is a tree of positioned boxes, the way a design tool exposes its
scene: frames and sections hold children, text boxes hold characters.
Coordinates are absolute. Dumps use Figma-like keys so exported node trees
can be loaded directly:

    {"type": "FRAME", "name": "User", "x": 0, "y": 0, "width": 1100,
     "height": 144, "children": [...]}
    {"type": "TEXT", "name": "Cell", "characters": "id", ...}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class BoxKind(str, Enum):
    FRAME = 'frame'
    SECTION = 'section'
    TEXT = 'text'


@dataclass
class Box:
    kind: BoxKind
    name: str = ''
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    children: List['Box'] = field(default_factory=list)
    text: Optional[str] = None
    fills: List[Dict[str, Any]] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def is_container(self) -> bool:
        return self.kind in (BoxKind.FRAME, BoxKind.SECTION)

    @property
    def is_text(self) -> bool:
        return self.kind is BoxKind.TEXT

    def walk(self) -> Iterator['Box']:
        """Depth-first, pre-order iteration over this box and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()


def _parse_kind(raw: Any) -> BoxKind:
    value = str(raw or 'frame').strip().lower()
    if value in ('group', 'component', 'instance', 'rectangle'):
        return BoxKind.FRAME
    try:
        return BoxKind(value)
    except ValueError:
        raise ValueError(f"Unknown box type: {raw}")


def box_from_dict(data: Dict[str, Any]) -> Box:
    if not isinstance(data, dict):
        raise ValueError("Canvas node must be an object.")
    kind = _parse_kind(data.get('type'))
    text = data.get('characters', data.get('text'))
    return Box(
        kind=kind,
        name=str(data.get('name') or ''),
        x=float(data.get('x') or 0),
        y=float(data.get('y') or 0),
        width=float(data.get('width') or 0),
        height=float(data.get('height') or 0),
        children=[box_from_dict(child) for child in data.get('children') or []],
        text=None if text is None else str(text),
        fills=list(data.get('fills') or []),
        id=None if data.get('id') is None else str(data['id']),
    )


def box_to_dict(box: Box) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if box.id:
        out['id'] = box.id
    out.update({
        'type': box.kind.value.upper(),
        'name': box.name,
        'x': box.x,
        'y': box.y,
        'width': box.width,
        'height': box.height,
    })
    if box.fills:
        out['fills'] = box.fills
    if box.is_text:
        out['characters'] = box.text or ''
    else:
        out['children'] = [box_to_dict(child) for child in box.children]
    return out


def boxes_from_payload(payload: Any) -> List[Box]:
    """Accept a single node, a list of nodes, or `{"selection": [...]}` / `{"nodes": [...]}`."""
    if payload is None:
        return []
    if isinstance(payload, dict):
        for key in ('selection', 'nodes'):
            if isinstance(payload.get(key), list):
                return [box_from_dict(node) for node in payload[key]]
        return [box_from_dict(payload)]
    if isinstance(payload, list):
        return [box_from_dict(node) for node in payload]
    raise ValueError("Canvas dump must be a node object or a list of nodes.")
