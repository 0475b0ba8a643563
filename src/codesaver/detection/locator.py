"""Find the code block that belongs to a heading."""

from __future__ import annotations

from bs4 import Comment, NavigableString, Tag

CODE_BLOCK_TAG = "pre"
GENERIC_CONTAINER_TAGS = frozenset({"div", "section", "figure", "article"})
DEFAULT_SEARCH_BUDGET = 5


def is_code_block(node: object) -> bool:
    return isinstance(node, Tag) and node.name == CODE_BLOCK_TAG


def _first_code_block_in(node: Tag) -> Tag | None:
    if is_code_block(node):
        return node
    return node.find(CODE_BLOCK_TAG)


def _next_significant_sibling(heading: Tag):
    """Next sibling node, skipping whitespace-only text and comments."""
    for sibling in heading.next_siblings:
        if isinstance(sibling, Comment):
            continue
        if isinstance(sibling, NavigableString) and not sibling.strip():
            continue
        return sibling
    return None


def locate_code_block(heading: Tag, *, search_budget: int = DEFAULT_SEARCH_BUDGET) -> Tag | None:
    """Return the ``<pre>`` container for ``heading`` or ``None``.

    The directly following sibling wins, either as a code block itself or as
    a generic wrapper around one. Otherwise up to ``search_budget`` element
    siblings are inspected in order, so prose between a heading and its code
    is tolerated. Later headings do not end the walk.
    """
    sibling = _next_significant_sibling(heading)
    if isinstance(sibling, Tag):
        if is_code_block(sibling):
            return sibling
        if sibling.name in GENERIC_CONTAINER_TAGS:
            found = sibling.find(CODE_BLOCK_TAG)
            if found is not None:
                return found

    elements = (node for node in heading.next_siblings if isinstance(node, Tag))
    for attempt, element in enumerate(elements):
        if attempt >= search_budget:
            break
        found = _first_code_block_in(element)
        if found is not None:
            return found
    return None
