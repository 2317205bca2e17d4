"""
Turn a single piece of definition text into a render unit.

Used by previews and editors where text arrives one piece at a time and
may be a full form definition, a short snippet, or plain prose:

- empty text renders a "No code to display" notice;
- text that assigns or defines the render entry point is loaded as a
  form definition (same path as the loader);
- code snippets are executed and their trailing expression becomes the
  rendered content;
- anything that does not look like code is rendered as text.

No call here raises for problems in the text itself; failures become
error units.
"""

import ast
import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from form_engine.config.settings import EngineSettings, get_engine_settings
from form_engine.diagnostics import DiagnosticsSink, format_load_error
from form_engine.errors import CompileError, EvaluationError, FormEngineError
from form_engine.runtime.sandbox import build_namespace, run_unit_safely
from form_engine.scope.builder import BaseScopeBuilder
from form_engine.scope.form_scope import FormScopeBuilder
from form_engine.scope.placeholder import TextUnit, create_error_unit
from form_engine.scope.resolution import ScopeResolver
from form_engine.transformer.compiler import CompileOptions, ICompiler, PythonCompiler
from form_engine.transformer.local_bindings import find_local_bindings
from form_engine.transformer.preprocessor import preprocess

logger = logging.getLogger(__name__)

EMPTY_TEXT_MESSAGE = "No code to display"
EMPTY_TEXT_STYLE = {"color": "#797775", "fontStyle": "italic", "padding": "16px"}
SNIPPET_NAME = "snippet"

# Leading tokens that mark text as code rather than prose
_CODE_MARKERS = re.compile(
    r"^\s*(?:#|[(\[{\"']|def\b|class\b|import\b|from\b|lambda\b|return\b|if\b|for\b|with\b|[A-Za-z_][\w.]*\s*\()"
)
_ASSIGNMENT_LINE = re.compile(r"^\s*[A-Za-z_][\w.]*(?:\s*:[^=\n]+)?\s*=(?!=)", re.MULTILINE)


@dataclass
class TransformOptions:
    """Options for ``create_component_from_code``.

    Attributes:
        scope_builder: Capability scope builder; form scope when omitted.
        compiler: Compiler used for the text.
        settings: Naming conventions.
        peers: Peer render units resolvable by name.
        on_initial_data: Receives initial data from form definitions.
        diagnostics: Sink for misses and load errors.
        filename: Name used in compile error messages.
    """

    scope_builder: BaseScopeBuilder = field(default_factory=FormScopeBuilder)
    compiler: ICompiler = field(default_factory=PythonCompiler)
    settings: EngineSettings = field(default_factory=get_engine_settings)
    peers: Mapping[str, Any] = field(default_factory=dict)
    on_initial_data: Optional[Callable[[Any], None]] = None
    diagnostics: Optional[DiagnosticsSink] = None
    filename: str = "preview.py"


def is_form_code(text: str, render_name: str = "render") -> bool:
    """Whether text defines the render entry point itself."""
    name = re.escape(render_name)
    pattern = rf"(?<![\w.])(?:{name}\s*(?::[^=\n]+)?=(?!=)|def\s+{name}\s*\()"
    return re.search(pattern, text) is not None


def looks_like_code(text: str) -> bool:
    """Heuristic split between code snippets and prose."""
    return bool(_CODE_MARKERS.match(text) or _ASSIGNMENT_LINE.search(text))


def _resolver(code: str, options: TransformOptions) -> ScopeResolver:
    return ScopeResolver(
        MappingProxyType(dict(options.scope_builder.build_scope())),
        registry=options.peers,
        local_names=find_local_bindings(code),
        diagnostics=options.diagnostics,
        optional_names=options.settings.optional_names,
    )


def _report(options: TransformOptions, name: str, error: FormEngineError) -> None:
    if options.diagnostics is not None:
        options.diagnostics(format_load_error(name, error.message))


def _compile(text: str, options: TransformOptions) -> str:
    try:
        return options.compiler.compile(text, CompileOptions(filename=options.filename)).code
    except FormEngineError:
        raise
    except Exception as e:
        # Injected compilers may raise their own exception types
        raise CompileError(f"{type(e).__name__}: {e}") from e


def _parse(code: str, options: TransformOptions) -> ast.Module:
    """Parse compiled snippet code; output of an injected compiler may not be Python."""
    try:
        return ast.parse(code, filename=options.filename)
    except (SyntaxError, ValueError) as e:
        raise CompileError(f"{type(e).__name__}: {e}") from e


def _create_form_component(text: str, options: TransformOptions) -> Callable[..., Any]:
    name = options.filename.rsplit(".", 1)[0] or "preview"
    try:
        code = _compile(text, options)
    except FormEngineError as e:
        _report(options, name, e)
        return create_error_unit(e.message)

    entry_points, error = run_unit_safely(
        code, _resolver(code, options), name=name, settings=options.settings
    )
    if error is not None:
        _report(options, name, error)
        return entry_points.render

    if options.on_initial_data is not None:
        data = entry_points.initial_data
        options.on_initial_data(data if data is not None else {})
    return entry_points.render


def _create_snippet_component(text: str, options: TransformOptions) -> Callable[..., Any]:
    if not looks_like_code(text):
        return TextUnit(text)

    try:
        code = _compile(text, options)
        tree = _parse(code, options)
    except FormEngineError as e:
        _report(options, SNIPPET_NAME, e)
        return create_error_unit(e.message)

    body = list(tree.body)
    trailing = body.pop() if body and isinstance(body[-1], ast.Expr) else None

    namespace = build_namespace(_resolver(code, options), SNIPPET_NAME)
    try:
        exec(compile(ast.Module(body=body, type_ignores=[]), options.filename, "exec"), namespace)
        result = None
        if trailing is not None:
            expression = ast.Expression(body=trailing.value)
            result = eval(compile(expression, options.filename, "eval"), namespace)
    except (Exception, SystemExit) as e:
        error = EvaluationError(f"{type(e).__name__}: {e}", definition=SNIPPET_NAME, cause=e)
        logger.debug(f"Snippet failed: {error.message}")
        _report(options, SNIPPET_NAME, error)
        return create_error_unit(error.message)

    def snippet_unit(*children: Any, **props: Any) -> Any:
        return result

    return snippet_unit


def create_component_from_code(text: str, options: Optional[TransformOptions] = None) -> Callable[..., Any]:
    """
    Build a render unit from one piece of text.

    Args:
        text: Definition text, snippet or prose
        options: Transform options (defaults when omitted)

    Returns:
        A render unit; an error unit when the text fails to load
    """
    options = options or TransformOptions()
    cleaned = preprocess(text or "")
    if not cleaned:
        return TextUnit(EMPTY_TEXT_MESSAGE, style=EMPTY_TEXT_STYLE)

    if is_form_code(cleaned, options.settings.render_name):
        return _create_form_component(cleaned, options)
    return _create_snippet_component(cleaned, options)
