"""Find the names a compiled unit declares for itself.

The scan is pattern-based over compiled text, not a parse. It reports
module-level and nested declarations alike, so a name assigned inside a
function body also counts as unit-local, and a line inside a multi-line
string that looks like an assignment is reported too. ``for`` and ``as``
targets are scanned with string literal contents blanked, so prose such as
``"Record the value as Title"`` declares nothing. Text that does not
tokenize is scanned as-is.
"""

import io
import keyword
import re
import tokenize
from typing import Iterable, Set

_IDENT = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\b")

# x = ..., x: T = ..., a, (b, *c) = ...
_ASSIGNMENT = re.compile(
    r"^[ \t]*([A-Za-z_(\[*][\w, \t()\[\]*]*?)[ \t]*(?::[^=\n]+)?=(?!=)",
    re.MULTILINE,
)
# x: T  (declaration without value)
_ANNOTATION = re.compile(r"^[ \t]*([A-Za-z_]\w*)[ \t]*:[ \t]*[^=\n]+$", re.MULTILINE)
_FUNCTION = re.compile(r"\b(?:async[ \t]+)?def[ \t]+([A-Za-z_]\w*)[ \t]*\(")
_CLASS = re.compile(r"\bclass[ \t]+([A-Za-z_]\w*)")
_FOR_TARGET = re.compile(r"\bfor[ \t]+([\w, \t()\[\]*]+?)[ \t]+in\b")
# with ... as x, except E as x, import a as x
_AS_TARGET = re.compile(r"\bas[ \t]+([A-Za-z_]\w*)")
_WALRUS = re.compile(r"\b([A-Za-z_]\w*)[ \t]*:=")
_GLOBAL_DECL = re.compile(r"^[ \t]*(?:global|nonlocal)[ \t]+([\w, \t]+)$", re.MULTILINE)
_IMPORT = re.compile(r"^[ \t]*import[ \t]+(.+)$", re.MULTILINE)
_FROM_IMPORT = re.compile(r"^[ \t]*from[ \t]+[\w.]+[ \t]+import[ \t]+\(?([^)\n]+)\)?[ \t]*$", re.MULTILINE)

# Target text containing a call or subscript is not a declaration (f(a=1), x[0] = 1)
_NOT_A_TARGET = re.compile(r"\w[ \t]*[(\[]|\.")


_STRING_TOKENS = {
    getattr(tokenize, token_name)
    for token_name in ("STRING", "FSTRING_MIDDLE", "TSTRING_MIDDLE")
    if hasattr(tokenize, token_name)
}


def _blank_strings(code: str) -> str:
    """Replace string literal contents with spaces, keeping line layout."""
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(code).readline))
    except (tokenize.TokenError, SyntaxError):
        return code

    offsets = [0]
    for line in io.StringIO(code).readlines():
        offsets.append(offsets[-1] + len(line))

    chars = list(code)
    for token in tokens:
        if token.type not in _STRING_TOKENS:
            continue
        start = offsets[token.start[0] - 1] + token.start[1]
        end = offsets[token.end[0] - 1] + token.end[1]
        for i in range(start, min(end, len(chars))):
            if chars[i] != "\n":
                chars[i] = " "
    return "".join(chars)


def _identifiers(fragment: str) -> Iterable[str]:
    for match in _IDENT.finditer(fragment):
        yield match.group(1)


def _import_items(clause: str) -> Iterable[str]:
    """Plain imported names; aliased items are picked up by the 'as' pattern."""
    for item in clause.split(","):
        item = item.strip()
        if not item or item == "*" or re.search(r"\bas\b", item):
            continue
        yield item.split(".")[0].strip()


def find_local_bindings(code: str) -> Set[str]:
    """
    Return the set of identifiers the unit declares itself.

    Args:
        code: Compiled unit text

    Returns:
        Set of declared names, keywords excluded

    Example:
        >>> sorted(find_local_bindings("from Fluent import Stack as S\\nx, y = 1, 2"))
        ['S', 'x', 'y']
    """
    names: Set[str] = set()

    for match in _ASSIGNMENT.finditer(code):
        target = match.group(1)
        if _NOT_A_TARGET.search(target):
            continue
        names.update(_identifiers(target))

    for match in _ANNOTATION.finditer(code):
        names.add(match.group(1))

    for pattern in (_FUNCTION, _CLASS, _WALRUS):
        for match in pattern.finditer(code):
            names.add(match.group(1))

    code_only = _blank_strings(code)
    for match in _AS_TARGET.finditer(code_only):
        names.add(match.group(1))

    for match in _FOR_TARGET.finditer(code_only):
        names.update(_identifiers(match.group(1)))

    for match in _GLOBAL_DECL.finditer(code):
        names.update(_identifiers(match.group(1)))

    for pattern in (_IMPORT, _FROM_IMPORT):
        for match in pattern.finditer(code):
            names.update(_import_items(match.group(1)))

    return {name for name in names if not keyword.iskeyword(name)}
