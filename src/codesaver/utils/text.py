"""Text helpers for extracted code and human-readable sizes."""

from __future__ import annotations

import re

# Leftovers of copy buttons that render as a line of their own.
_ARTIFACT_LINE_RE = re.compile(r"^[^\S\n]*(?:::after|Copy|Copied!)[^\S\n]*(?:\n|$)", re.MULTILINE)
# Four or more line feeds are three or more blank lines.
_BLANK_RUN_RE = re.compile(r"\n{4,}")

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def clean_code_text(text: str) -> str:
    """Normalize text extracted from a code block into file content.

    Trims the text, turns non-breaking spaces into spaces, converts every
    line ending to ``\\n``, drops copy-button leftovers that sit on their own
    line (indented or not) and caps blank runs at two lines. Applying it
    twice changes nothing.
    """
    text = text.strip()
    text = text.replace("\u00a0", " ")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _ARTIFACT_LINE_RE.sub("", text)
    text = _BLANK_RUN_RE.sub("\n\n\n", text)
    return text.strip()


def format_file_size(size: int) -> str:
    """Format a byte count as ``"1.5 KB"`` style text."""
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    number = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{number} {_SIZE_UNITS[unit]}"
