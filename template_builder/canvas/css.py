"""
Inline style serialization shared by the canvas surface and the compiler.
"""

import html
import re
from typing import Dict, Iterable

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9]|(?=[A-Z]))([A-Z])")

# Render-time hints that never leave the editor
EDITOR_ONLY_STYLES = ("minWidth", "minHeight")


def css_property(key: str) -> str:
    """camelCase style key to kebab-case CSS property."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", key).lower()


def style_string(styles: Dict[str, str], exclude: Iterable[str] = EDITOR_ONLY_STYLES) -> str:
    """``key: value;`` pairs joined by single spaces, in mapping order."""
    skipped = set(exclude)
    return " ".join(
        f"{css_property(key)}: {value};"
        for key, value in styles.items()
        if key not in skipped
    )


def attr(value: str) -> str:
    """Escape a value for a double-quoted HTML attribute."""
    return html.escape(value, quote=True)
