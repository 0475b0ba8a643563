"""Content type and display icon lookup by file extension."""

from __future__ import annotations

DEFAULT_MIME_TYPE = "text/plain"
DEFAULT_ICON = "📄"

MIME_TYPES = {
    "js": "text/javascript",
    "mjs": "text/javascript",
    "ts": "text/typescript",
    "jsx": "text/javascript",
    "tsx": "text/typescript",
    "json": "application/json",
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "scss": "text/x-scss",
    "md": "text/markdown",
    "txt": "text/plain",
    "py": "text/x-python",
    "java": "text/x-java",
    "cpp": "text/x-c++src",
    "c": "text/x-csrc",
    "h": "text/x-chdr",
    "go": "text/x-go",
    "rs": "text/x-rustsrc",
    "php": "text/x-php",
    "rb": "text/x-ruby",
    "sh": "text/x-shellscript",
    "sql": "application/sql",
    "toml": "application/toml",
    "xml": "application/xml",
    "yaml": "text/yaml",
    "yml": "text/yaml",
}

ICONS = {
    "js": "📜",
    "ts": "📘",
    "jsx": "⚛️",
    "tsx": "⚛️",
    "json": "📋",
    "html": "🌐",
    "css": "🎨",
    "md": "📝",
    "txt": "📄",
    "py": "🐍",
    "java": "☕",
    "cpp": "⚙️",
    "c": "⚙️",
    "go": "🐹",
    "rs": "🦀",
    "php": "🐘",
    "rb": "💎",
    "sh": "🐚",
    "xml": "📰",
    "yaml": "⚙️",
    "yml": "⚙️",
}


def file_extension(path: str) -> str:
    """Return the lower-cased text after the last dot of ``path``."""
    return path.rsplit(".", 1)[-1].lower()


def get_mime_type(path: str) -> str:
    return MIME_TYPES.get(file_extension(path), DEFAULT_MIME_TYPE)


def get_file_icon(path: str) -> str:
    return ICONS.get(file_extension(path), DEFAULT_ICON)
