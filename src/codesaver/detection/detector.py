"""Detection pipeline: document tree to ordered file records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from bs4 import BeautifulSoup, Tag

from codesaver.detection.cleaner import extract_clean_code
from codesaver.detection.locator import DEFAULT_SEARCH_BUDGET, locate_code_block
from codesaver.detection.paths import extract_file_path
from codesaver.models import FileRecord, SourceAnchor

LOGGER = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4"]


def load_document(markup: str | bytes) -> BeautifulSoup:
    """Parse HTML markup into a document tree."""
    return BeautifulSoup(markup, "lxml")


class Detector:
    """Finds heading/code-block pairs that describe files."""

    def __init__(self, *, search_budget: int = DEFAULT_SEARCH_BUDGET) -> None:
        self.search_budget = search_budget

    def detect(self, root: Tag) -> List[FileRecord]:
        """Return one record per file-like heading, in document order."""
        records: List[FileRecord] = []
        for index, heading in enumerate(root.find_all(HEADING_TAGS)):
            record = self._detect_heading(index, heading)
            if record is not None:
                records.append(record)
        LOGGER.debug("Detected %d files", len(records))
        return records

    def _detect_heading(self, index: int, heading: Tag) -> FileRecord | None:
        heading_text = heading.get_text().strip()
        path = extract_file_path(heading_text)
        if path is None:
            return None

        container = locate_code_block(heading, search_budget=self.search_budget)
        if container is None:
            LOGGER.debug("No code block found for heading %r", heading_text)
            return None

        content = extract_clean_code(container)
        if not content.strip():
            LOGGER.debug("Empty code block for heading %r", heading_text)
            return None

        return FileRecord(
            path=path,
            content=content,
            source_anchor=SourceAnchor(heading_index=index, heading_text=heading_text),
        )

    def detect_markup(self, markup: str | bytes) -> List[FileRecord]:
        return self.detect(load_document(markup))

    def detect_file(self, path: Path) -> List[FileRecord]:
        """Read an HTML document from disk and detect its files."""
        markup = path.read_bytes()
        records = self.detect_markup(markup)
        LOGGER.info("Found %d files in %s", len(records), path)
        return records


def detect(root: Tag, *, search_budget: int = DEFAULT_SEARCH_BUDGET) -> List[FileRecord]:
    return Detector(search_budget=search_budget).detect(root)
