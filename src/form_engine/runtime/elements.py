"""Minimal element model shared by render units.

Render units are plain callables invoked as ``unit(*children, **props)``.
They return elements, strings, numbers, lists of those, or ``None``.
Elements whose type is itself a callable are expanded lazily by
``render_to_tree`` which produces a JSON-serializable tree.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

FRAGMENT = "fragment"
Fragment = FRAGMENT

# Guards against definitions that render themselves recursively
MAX_RENDER_DEPTH = 200


@dataclass
class Element:
    """A node in a rendered tree."""

    type: Any
    props: Dict[str, Any] = field(default_factory=dict)
    children: List[Any] = field(default_factory=list)

    @property
    def is_component(self) -> bool:
        return callable(self.type)


def create_element(type_: Any, props: Dict[str, Any] | None = None, *children: Any) -> Element:
    """Build an element; component types are expanded at render time."""
    return Element(type=type_, props=dict(props or {}), children=list(children))


class RenderDepthError(RecursionError):
    """Raised when expansion exceeds MAX_RENDER_DEPTH."""
    pass


def _plain_props(props: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in props.items() if not callable(v)}


def _render_children(children: List[Any], depth: int) -> List[Any]:
    rendered_children = []
    for child in children:
        rendered = render_to_tree(child, _depth=depth + 1)
        if rendered is None:
            continue
        if isinstance(rendered, list):
            rendered_children.extend(rendered)
        else:
            rendered_children.append(rendered)
    return rendered_children


def render_to_tree(node: Any, _depth: int = 0) -> Any:
    """Expand a render result into plain data.

    Args:
        node: Element, primitive, or (nested) list of those.

    Returns:
        ``None`` for empty nodes, primitives unchanged, lists for fragments
        and sequences, and ``{"type", "props", "children"}`` dicts for
        host elements.

    Raises:
        RenderDepthError: If component expansion nests too deeply.
    """
    if _depth > MAX_RENDER_DEPTH:
        raise RenderDepthError(f"Render depth exceeded {MAX_RENDER_DEPTH}")

    if node is None or isinstance(node, bool):
        return None
    if isinstance(node, (str, int, float)):
        return node
    if isinstance(node, (list, tuple)):
        return _render_children(list(node), _depth)
    if isinstance(node, Element):
        if node.type == FRAGMENT:
            return _render_children(node.children, _depth)
        if node.is_component:
            return render_to_tree(node.type(*node.children, **node.props), _depth=_depth + 1)
        return {
            "type": str(node.type),
            "props": _plain_props(node.props),
            "children": _render_children(node.children, _depth),
        }
    return str(node)
