"""Turn a rendered code block into the text written to a file."""

from __future__ import annotations

import copy

from bs4 import Tag

from codesaver.utils.text import clean_code_text

DECORATION_CLASS_MARKERS = ("copy", "line-num")


def _is_decoration(tag: Tag) -> bool:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    joined = " ".join(classes).lower()
    return any(marker in joined for marker in DECORATION_CLASS_MARKERS)


def extract_clean_code(container: Tag) -> str:
    """Return the cleaned text of a code-block container.

    Copy buttons and line-number gutters are removed from a detached copy,
    so the document the container belongs to is left untouched.
    """
    code = container.find("code")
    target = code if isinstance(code, Tag) else container
    clone = copy.copy(target)

    for decoration in clone.find_all(_is_decoration):
        if not decoration.decomposed:
            decoration.decompose()
    for line_break in clone.find_all("br"):
        line_break.replace_with("\n")

    return clean_code_text(clone.get_text())
