"""Definition text handling: preprocessing, compilation and binding analysis."""

from form_engine.transformer.compiler import CompileOptions, CompileResult, ICompiler, PythonCompiler
from form_engine.transformer.local_bindings import find_local_bindings
from form_engine.transformer.preprocessor import preprocess

__all__ = [
    "CompileOptions",
    "CompileResult",
    "ICompiler",
    "PythonCompiler",
    "find_local_bindings",
    "preprocess",
]
