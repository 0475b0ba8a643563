"""Errors raised while building and saving archives.

Headings that are not files, headings without a code block and empty blocks
are ordinary detection outcomes and never raise.
"""

from __future__ import annotations


class CodeSaverError(Exception):
    """Base class for user-visible codesaver failures."""


class CompressionUnavailable(CodeSaverError):
    """The compression collaborator is missing or cannot run."""


class CompressionFailure(CodeSaverError):
    """Archive assembly failed part way through."""


class DownloadFailure(CodeSaverError):
    """The save collaborator could not store the artifact."""


class UnsafeArchivePath(CodeSaverError):
    """A selected path would be extracted outside the archive folder."""
