"""Unit tests for the two-pass loader."""

import pytest
from pydantic import ValidationError

from form_engine.config.settings import EngineSettings
from form_engine.errors import CompileError, LoadErrorCode
from form_engine.loader.loader import LoaderConfig, load_batch, load_one
from form_engine.loader.registry import get_default_registry, get_registry_snapshot
from form_engine.runtime.elements import render_to_tree
from form_engine.scope.builder import BaseScopeBuilder
from form_engine.scope.placeholder import ErrorUnit, Placeholder
from form_engine.transformer.compiler import CompileResult


@pytest.fixture
def config(registry, collector):
    return LoaderConfig(registry=registry, diagnostics=collector)


class TestLoaderConfig:
    def test_defaults(self):
        config = LoaderConfig()
        assert config.cross_references_enabled() is True
        assert config.resolved_registry() is get_default_registry()

    def test_explicit_cross_reference_flag_wins(self):
        config = LoaderConfig(settings=EngineSettings(enable_cross_references=True), enable_cross_references=False)
        assert config.cross_references_enabled() is False

    def test_rejects_compiler_without_compile(self):
        with pytest.raises(ValidationError):
            LoaderConfig(compiler=object())

    def test_rejects_scope_builder_without_build_scope(self):
        with pytest.raises(ValidationError):
            LoaderConfig(scope_builder=object())

    def test_duck_typed_compiler_accepted(self):
        class Passthrough:
            def compile(self, text, options):
                return CompileResult(code=text)

        config = LoaderConfig(compiler=Passthrough())
        assert isinstance(config.compiler, Passthrough)


class TestLoadOne:
    def test_success(self, make_source, config, registry):
        result = load_one(make_source("Greeting", "render = lambda: 'hello'"), config)
        assert result.ok
        assert result.entry_points.render() == "hello"
        assert len(registry) == 0

    def test_peers_from_registry(self, make_source, config, registry):
        load_batch([make_source("Scale5", "render = lambda: 'scale'")], config)
        result = load_one(make_source("Question", "render = lambda: Scale5()"), config)
        assert result.entry_points.render() == "scale"

    def test_initial_data_delivered(self, make_source, registry, collector):
        received = []
        config = LoaderConfig(registry=registry, diagnostics=collector, on_initial_data=received.append)
        load_one(make_source("Form", "initial_data = {'a': 1}\nrender = lambda: None"), config)
        assert received == [{"a": 1}]

    def test_initial_data_defaults_to_empty(self, make_source, registry, collector):
        received = []
        config = LoaderConfig(registry=registry, diagnostics=collector, on_initial_data=received.append)
        load_one(make_source("Form", "render = lambda: None"), config)
        assert received == [{}]

    def test_default_callback_sets_registry_slot(self, make_source, config, registry):
        load_one(make_source("Form", "initial_data = {'b': 2}\nrender = lambda: None"), config)
        assert registry.get_initial_data() == {"b": 2}

    def test_compile_error_contained(self, make_source, config, collector):
        result = load_one(make_source("Broken", "render = ("), config)
        assert not result.ok
        assert isinstance(result.error, CompileError)
        assert result.error.definition == "Broken"
        assert isinstance(result.entry_points.render, ErrorUnit)
        assert collector.load_errors[0].startswith("load error: Broken: SyntaxError:")

    def test_no_callback_on_failure(self, make_source, registry, collector):
        received = []
        config = LoaderConfig(registry=registry, diagnostics=collector, on_initial_data=received.append)
        load_one(make_source("Broken", "initial_data = {}\nraise RuntimeError('x')"), config)
        assert received == []

    def test_additional_scope(self, make_source, registry, collector):
        config = LoaderConfig(registry=registry, diagnostics=collector, additional_scope={"greeting": "hi"})
        result = load_one(make_source("Form", "render = lambda: greeting"), config)
        assert result.entry_points.render() == "hi"

    def test_additional_scope_overrides_builder(self, make_source, registry, collector):
        config = LoaderConfig(
            scope_builder=BaseScopeBuilder(utilities={"greeting": "builder"}),
            registry=registry,
            diagnostics=collector,
            additional_scope={"greeting": "call site"},
        )
        result = load_one(make_source("Form", "render = lambda: greeting"), config)
        assert result.entry_points.render() == "call site"

    def test_injected_compiler_errors_wrapped(self, make_source, registry, collector):
        class FailingCompiler:
            def compile(self, text, options):
                raise RuntimeError("compiler offline")

        config = LoaderConfig(compiler=FailingCompiler(), registry=registry, diagnostics=collector)
        result = load_one(make_source("Form", "render = lambda: 1"), config)
        assert result.error.code == LoadErrorCode.COMPILE_ERROR
        assert result.error.message == "RuntimeError: compiler offline"


class TestLoadBatch:
    def test_forward_reference_resolved(self, make_source, config):
        sources = [
            make_source("A", "render = lambda: B()"),
            make_source("B", "def render():\n    return 'from B'"),
        ]
        result = load_batch(sources, config)
        assert result.components["A"].render() == "from B"

    def test_pass_one_only_does_not_see_later_peer(self, make_source, registry, collector):
        config = LoaderConfig(registry=registry, diagnostics=collector, enable_cross_references=False)
        sources = [
            make_source("A", "render = lambda: B()"),
            make_source("B", "render = lambda: 'from B'"),
        ]
        result = load_batch(sources, config)
        tree = render_to_tree(result.components["A"].render())
        assert tree["props"]["data-missing"] == "B"
        assert collector.missing_names == ["B"]

    def test_pass_one_misses_not_reported_when_resolved(self, make_source, config, collector):
        sources = [
            make_source("A", "x = B\nrender = lambda: x()"),
            make_source("B", "render = lambda: 'from B'"),
        ]
        result = load_batch(sources, config)
        assert result.components["A"].render() == "from B"
        assert collector.messages == []

    def test_registry_updated(self, make_source, config, registry):
        load_batch([make_source("A", "render = lambda: 1")], config)
        assert registry.get("A").render() == 1

    def test_earlier_batches_visible_in_second_pass(self, make_source, config):
        load_batch([make_source("Shared", "render = lambda: 'shared'")], config)
        result = load_batch([make_source("A", "render = lambda: Shared()")], config)
        assert result.components["A"].render() == "shared"

    def test_default_registry_used(self, make_source, collector):
        load_batch([make_source("A", "render = lambda: 1")], LoaderConfig(diagnostics=collector))
        assert "A" in get_registry_snapshot()

    def test_malformed_member_isolated(self, make_source, config, registry, collector):
        sources = [
            make_source("Good", "render = lambda: 'good'"),
            make_source("Bad", "render = ("),
            make_source("AlsoGood", "render = lambda: Good()"),
        ]
        result = load_batch(sources, config)

        assert sorted(result.components) == ["AlsoGood", "Good"]
        assert list(result.errors) == ["Bad"]
        assert result.errors["Bad"].code == LoadErrorCode.COMPILE_ERROR
        assert "Bad" not in registry
        assert result.components["AlsoGood"].render() == "good"
        assert len(collector.load_errors) == 1
        assert collector.load_errors[0].startswith("load error: Bad:")

    def test_error_cleared_when_second_pass_succeeds(self, make_source, config, collector):
        sources = [
            make_source("A", "value = B().upper()\nrender = lambda: value"),
            make_source("B", "render = lambda: 'b'"),
        ]
        result = load_batch(sources, config)
        assert "A" not in result.errors
        assert result.components["A"].render() == "B"
        assert collector.load_errors == []

    def test_success_retracted_when_second_pass_fails(self, make_source, registry, collector):
        received = []
        config = LoaderConfig(registry=registry, diagnostics=collector, on_initial_data=received.append)
        sources = [
            make_source("A", "initial_data = {'a': 1}\nvalue = B.upper()\nrender = lambda: value"),
            make_source("B", "render = lambda: 'b'"),
        ]
        result = load_batch(sources, config)

        assert sorted(result.components) == ["B"]
        assert result.errors["A"].message.startswith("AttributeError")
        assert "A" in registry
        assert received == [{}]
        assert len(collector.load_errors) == 1

    def test_first_error_kept(self, make_source, config, collector):
        result = load_batch([make_source("A", "raise ValueError('first')")], config)
        assert result.errors["A"].message == "ValueError: first"
        assert collector.load_errors == ["load error: A: ValueError: first"]

    def test_metadata_from_identity(self, make_source, config):
        from form_engine.schemas.definition import ComponentIdentity

        identity = ComponentIdentity(name="A", title="Form A")
        result = load_batch([make_source("A", "render = lambda: 1", identity=identity)], config)
        assert result.metadata == {"A": identity}

    def test_initial_data_once_per_success_in_order(self, make_source, registry, collector):
        received = []
        config = LoaderConfig(registry=registry, diagnostics=collector, on_initial_data=received.append)
        sources = [
            make_source("A", "initial_data = {'a': 1}\nrender = lambda: 1"),
            make_source("Bad", "raise RuntimeError('x')"),
            make_source("C", "render = lambda: 1"),
        ]
        load_batch(sources, config)
        assert received == [{"a": 1}, {}]

    def test_missing_name_reported_once_per_unit(self, make_source, config, collector):
        result = load_batch([make_source("A", "render = lambda: (Widget(), Widget())")], config)
        result.components["A"].render()
        result.components["A"].render()
        assert collector.missing_names == ["Widget"]

    def test_optional_names_silent(self, make_source, config, collector):
        result = load_batch([make_source("A", "render = lambda: schema")], config)
        assert isinstance(result.components["A"].render(), Placeholder)
        assert collector.messages == []

    def test_empty_batch(self, config):
        result = load_batch([], config)
        assert result.components == {}
        assert result.ok
