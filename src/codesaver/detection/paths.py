"""Heading text to relative file path."""

from __future__ import annotations

import re

# "1. ", "1、", "1) ", "1: ", "(1) ", "Step 1: ", "文件1："
ORDINAL_PREFIX_RE = re.compile(
    r"^(?:\d+[.、):：]|\(\d+\)|Step\s+\d+[:：]|文件\d+[:：])\s*",
    re.IGNORECASE,
)
# "File: ", "Path: ", "代码："
LABEL_PREFIX_RE = re.compile(r"^(?:文件|File|Path|代码|Code)[:：]\s*", re.IGNORECASE)
FILE_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9_]{1,6}$")


def extract_file_path(heading_text: str) -> str | None:
    """Return the file path a heading names, or ``None`` for ordinary prose.

    A trailing extension is the only signal that a heading denotes a file.
    Directory separators are returned as written, backslashes included.
    """
    text = heading_text.strip()
    text = ORDINAL_PREFIX_RE.sub("", text, count=1)
    text = LABEL_PREFIX_RE.sub("", text, count=1)
    text = text.strip()

    if not FILE_EXTENSION_RE.search(text):
        return None
    return text
