"""codesaver - save every code block of a document as a file tree."""

__version__ = "0.1.0"
