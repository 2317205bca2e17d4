"""Inert stand-in render units.

A ``Placeholder`` replaces any name the scope cannot resolve. It renders a
``display: contents`` box tagged with the missing name and passes its
children through, so the surrounding composition still renders. An
``ErrorUnit`` replaces a definition that failed to load.
"""

from typing import Any, List

from form_engine.runtime.elements import Element

PLACEHOLDER_STYLE = {"display": "contents"}
ERROR_CLASS = "error-message"


def _collect_children(children: tuple, props: dict) -> List[Any]:
    collected = list(children)
    nested = props.get("children")
    if nested is not None:
        if isinstance(nested, (list, tuple)):
            collected.extend(nested)
        else:
            collected.append(nested)
    return collected


class Placeholder:
    """Render unit standing in for an unresolved name."""

    def __init__(self, name: str):
        self.missing_name = name
        self.display_name = f"Placeholder_{name}"

    def __call__(self, *children: Any, **props: Any) -> Element:
        return Element(
            type="div",
            props={"data-missing": self.missing_name, "style": dict(PLACEHOLDER_STYLE)},
            children=_collect_children(children, props),
        )

    def __getattr__(self, attr: str) -> "Placeholder":
        # Namespace access on a missing name (Mois.Section) degrades too
        if attr.startswith("_"):
            raise AttributeError(attr)
        return Placeholder(f"{self.missing_name}.{attr}")

    def _propagate(self, *args: Any) -> "Placeholder":
        return self

    # Expressions over a missing name (B + 1, -B, 2 * B) stay placeholders
    __add__ = __radd__ = __sub__ = __rsub__ = _propagate
    __mul__ = __rmul__ = __truediv__ = __rtruediv__ = _propagate
    __floordiv__ = __rfloordiv__ = __mod__ = __rmod__ = _propagate
    __pow__ = __rpow__ = __neg__ = __pos__ = _propagate

    def __str__(self) -> str:
        return ""

    def __format__(self, format_spec: str) -> str:
        return ""

    def __repr__(self) -> str:
        return f"<{self.display_name}>"


class ErrorUnit:
    """Render unit that displays a load error message."""

    def __init__(self, message: str):
        self.message = message
        self.display_name = "ErrorUnit"

    def __call__(self, *children: Any, **props: Any) -> Element:
        return Element(type="div", props={"className": ERROR_CLASS}, children=[self.message])

    def __repr__(self) -> str:
        return f"<ErrorUnit {self.message!r}>"


class TextUnit:
    """Render unit for definition text that is prose rather than code."""

    def __init__(self, text: str, style: dict | None = None):
        self.text = text
        self.style = style or {"fontStyle": "italic", "color": "#605e5c", "padding": "8px"}
        self.display_name = "TextUnit"

    def __call__(self, *children: Any, **props: Any) -> Element:
        return Element(type="div", props={"style": dict(self.style)}, children=[self.text])


def create_placeholder(name: str) -> Placeholder:
    return Placeholder(name)


def create_error_unit(message: str) -> ErrorUnit:
    return ErrorUnit(message)


def is_placeholder(value: Any) -> bool:
    return isinstance(value, Placeholder)
