"""Normalize raw definition text before compilation.

Repairs a known class of malformed input: pasted text with Windows line
endings, tab indentation or a common indentation prefix, and render calls
written with HTML attribute names (``rowspan=``, ``class=``).
"""

import re
import textwrap

# HTML attribute -> camelCase prop name used by render primitives
HTML_TO_PROP_ATTRS = {
    "rowspan": "rowSpan",
    "colspan": "colSpan",
    "cellpadding": "cellPadding",
    "cellspacing": "cellSpacing",
    "tabindex": "tabIndex",
    "readonly": "readOnly",
    "maxlength": "maxLength",
    "minlength": "minLength",
    "autocomplete": "autoComplete",
    "autofocus": "autoFocus",
    "contenteditable": "contentEditable",
    "crossorigin": "crossOrigin",
    "datetime": "dateTime",
    "enctype": "encType",
    "formaction": "formAction",
    "formenctype": "formEncType",
    "formmethod": "formMethod",
    "formnovalidate": "formNoValidate",
    "formtarget": "formTarget",
    "frameborder": "frameBorder",
    "hreflang": "hrefLang",
    "inputmode": "inputMode",
    "srcdoc": "srcDoc",
    "srcset": "srcSet",
    "usemap": "useMap",
    # Reserved words in Python, a SyntaxError as keyword arguments
    "class": "className",
    "for": "htmlFor",
}

TAB_WIDTH = 4

_LEADING_WS = re.compile(r"^[ \t]+", re.MULTILINE)


def _attr_pattern(attr: str) -> re.Pattern:
    # Only in argument position: after "(" or "," and followed by a single "="
    return re.compile(rf"([(,]\s*){attr}(\s*=)(?!=)", re.IGNORECASE)


_ATTR_PATTERNS = [(_attr_pattern(html), prop) for html, prop in HTML_TO_PROP_ATTRS.items()]


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def expand_leading_tabs(text: str) -> str:
    """Replace tabs in indentation with spaces; tabs elsewhere are kept."""
    return _LEADING_WS.sub(lambda m: m.group(0).replace("\t", " " * TAB_WIDTH), text)


def repair_html_attributes(text: str) -> str:
    """Rename HTML attribute keyword arguments to prop names."""
    result = text
    for pattern, prop in _ATTR_PATTERNS:
        result = pattern.sub(lambda m, p=prop: f"{m.group(1)}{p}{m.group(2)}", result)
    return result


def preprocess(text: str) -> str:
    """Normalize raw definition text.

    Args:
        text: Text as authored.

    Returns:
        Cleaned text, possibly empty.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    cleaned = normalize_line_endings(text)
    cleaned = expand_leading_tabs(cleaned)
    cleaned = textwrap.dedent(cleaned).strip()
    return repair_html_attributes(cleaned)
