"""Live preview rendering.

Renders a single piece of definition text to a plain tree, the way an
editor preview pane does: the text becomes a render unit, is optionally
wrapped in a layout and a provider wrapper, and is rendered behind an
error boundary so a failing render shows an error element instead of
propagating.
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from form_engine.loader.registry import ComponentRegistry, get_default_registry
from form_engine.runtime.elements import Element, create_element, render_to_tree
from form_engine.scope.placeholder import create_error_unit
from form_engine.transformer.code_transformer import TransformOptions, create_component_from_code

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong"


def render_safely(node: Any, *children: Any, **props: Any) -> Any:
    """Render a unit or element, converting render failures into an error tree.

    Callables are invoked with ``children`` and ``props`` first; anything
    else is rendered as is.
    """
    try:
        if callable(node) and not isinstance(node, Element):
            node = node(*children, **props)
        return render_to_tree(node)
    except Exception as e:
        logger.warning(f"Render failed: {type(e).__name__}: {e}")
        message = str(e) or DEFAULT_ERROR_MESSAGE
        return render_to_tree(create_error_unit(f"Error: {message}")())


def render_preview(
    text: str,
    options: Optional[TransformOptions] = None,
    wrapper: Optional[Callable[..., Any]] = None,
    layout: Optional[Callable[..., Any]] = None,
    registry: Optional[ComponentRegistry] = None,
) -> Any:
    """
    Render definition text for preview.

    The registry's initial-data slot is reset before loading; a form
    definition's initial data is then stored there unless the options
    carry their own callback.

    Args:
        text: Definition text, snippet or prose
        options: Transform options
        wrapper: Outermost unit, e.g. a data provider
        layout: Unit the content is placed into
        registry: Store whose initial-data slot is used

    Returns:
        Rendered tree (see ``render_to_tree``)
    """
    if registry is None:
        registry = get_default_registry()
    options = options or TransformOptions()
    if options.on_initial_data is None:
        options = replace(options, on_initial_data=registry.set_initial_data)
    registry.set_initial_data({})

    unit = create_component_from_code(text, options)
    node = create_element(unit)
    if layout is not None:
        node = create_element(layout, None, node)
    if wrapper is not None:
        node = create_element(wrapper, None, node)
    return render_safely(node)
