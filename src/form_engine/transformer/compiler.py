"""Compiler boundary.

The engine treats the compiler as opaque: anything implementing
``ICompiler.compile(text, options) -> CompileResult`` can be injected
through the loader configuration. ``PythonCompiler`` is the default; it
validates definition text as Python and returns a normalized rendition.
"""

import ast
from abc import ABC, abstractmethod
from dataclasses import dataclass

from form_engine.errors import CompileError


@dataclass(frozen=True)
class CompileOptions:
    """Options passed to the compiler for one definition."""

    filename: str = "definition.py"
    # Re-emit source from the syntax tree (one statement shape per line)
    normalize: bool = True


@dataclass(frozen=True)
class CompileResult:
    """Compiled text handed to the binding analyzer and the sandbox."""

    code: str


class ICompiler(ABC):
    """Abstract interface for definition compilers."""

    @abstractmethod
    def compile(self, text: str, options: CompileOptions) -> CompileResult:
        """
        Compile definition text.

        Args:
            text: Preprocessed definition text
            options: Per-definition compile options

        Returns:
            CompileResult whose code is Python source

        Raises:
            CompileError: If the text is rejected
        """
        pass


class PythonCompiler(ICompiler):
    """Default compiler: definitions are written in Python."""

    def compile(self, text: str, options: CompileOptions) -> CompileResult:
        try:
            tree = ast.parse(text, filename=options.filename, mode="exec")
        except SyntaxError as e:
            location = f"line {e.lineno}" if e.lineno else "unknown line"
            raise CompileError(f"SyntaxError: {e.msg} ({options.filename}, {location})")
        except ValueError as e:
            # Null bytes and similar input the tokenizer refuses
            raise CompileError(f"{e} ({options.filename})")

        if not options.normalize:
            return CompileResult(code=text)
        return CompileResult(code=ast.unparse(tree))
