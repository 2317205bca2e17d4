"""Element model and render helpers."""

from form_engine.runtime.elements import (
    FRAGMENT,
    Element,
    Fragment,
    RenderDepthError,
    create_element,
    render_to_tree,
)

__all__ = [
    "FRAGMENT",
    "Element",
    "Fragment",
    "RenderDepthError",
    "create_element",
    "render_to_tree",
]
