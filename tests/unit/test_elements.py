"""Unit tests for the element model."""

import pytest

from form_engine.runtime.elements import Fragment, RenderDepthError, create_element, render_to_tree


class TestRenderToTree:
    def test_primitives(self):
        assert render_to_tree("text") == "text"
        assert render_to_tree(3) == 3
        assert render_to_tree(None) is None
        assert render_to_tree(True) is None

    def test_host_element(self):
        tree = render_to_tree(create_element("div", {"id": "a"}, "x", None, 1))
        assert tree == {"type": "div", "props": {"id": "a"}, "children": ["x", 1]}

    def test_callable_props_dropped(self):
        tree = render_to_tree(create_element("button", {"onClick": lambda: None, "label": "Go"}))
        assert tree["props"] == {"label": "Go"}

    def test_fragment_and_lists_flatten(self):
        node = create_element("ul", None, create_element(Fragment, None, "a", ["b", "c"]))
        assert render_to_tree(node)["children"] == ["a", "b", "c"]

    def test_component_expanded_with_props_and_children(self):
        def Card(*children, title=""):
            return create_element("section", {"title": title}, *children)

        tree = render_to_tree(create_element(Card, {"title": "T"}, "body"))
        assert tree == {"type": "section", "props": {"title": "T"}, "children": ["body"]}

    def test_other_values_stringified(self):
        assert render_to_tree(2.5) == 2.5
        assert render_to_tree({"a": 1}) == "{'a': 1}"

    def test_recursive_component_bounded(self):
        def Loop():
            return create_element(Loop)

        with pytest.raises(RenderDepthError):
            render_to_tree(create_element(Loop))
