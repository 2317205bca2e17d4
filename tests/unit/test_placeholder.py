"""Unit tests for placeholder, error and text units."""

import pytest

from form_engine.runtime.elements import Element, render_to_tree
from form_engine.scope.placeholder import (
    ErrorUnit,
    Placeholder,
    TextUnit,
    create_error_unit,
    create_placeholder,
    is_placeholder,
)


class TestPlaceholder:
    def test_tagged_and_inert(self):
        placeholder = create_placeholder("Scale5")
        element = placeholder()
        assert isinstance(element, Element)
        assert element.props["data-missing"] == "Scale5"
        assert element.props["style"] == {"display": "contents"}
        assert placeholder.display_name == "Placeholder_Scale5"

    def test_children_pass_through(self):
        tree = render_to_tree(create_placeholder("Section")("a", "b", children=["c"]))
        assert tree["children"] == ["a", "b", "c"]

    def test_attribute_access_degrades(self):
        nested = Placeholder("Mois").Section
        assert is_placeholder(nested)
        assert nested.missing_name == "Mois.Section"

    def test_private_attribute_raises(self):
        with pytest.raises(AttributeError):
            Placeholder("Mois")._private

    def test_is_placeholder(self):
        assert is_placeholder(Placeholder("x"))
        assert not is_placeholder(lambda: None)

    @pytest.mark.parametrize(
        "expression",
        [
            lambda b: b + 1,
            lambda b: 1 + b,
            lambda b: b - 2,
            lambda b: 3 * b,
            lambda b: b / 4,
            lambda b: b // 4,
            lambda b: b % 2,
            lambda b: b ** 2,
            lambda b: -b,
            lambda b: "Score: " + b,
        ],
    )
    def test_expressions_stay_placeholders(self, expression):
        placeholder = Placeholder("B")
        assert expression(placeholder) is placeholder

    def test_string_coercion_is_empty(self):
        placeholder = Placeholder("B")
        assert str(placeholder) == ""
        assert f"Total: {placeholder}" == "Total: "
        assert f"{placeholder:>5}" == ""


class TestErrorUnit:
    def test_renders_message(self):
        tree = render_to_tree(create_error_unit("SyntaxError: bad")())
        assert tree == {
            "type": "div",
            "props": {"className": "error-message"},
            "children": ["SyntaxError: bad"],
        }

    def test_type(self):
        assert isinstance(create_error_unit("x"), ErrorUnit)


class TestTextUnit:
    def test_renders_text(self):
        tree = render_to_tree(TextUnit("Plain words")())
        assert tree["children"] == ["Plain words"]
        assert tree["props"]["style"]["fontStyle"] == "italic"
