"""Heading extraction for the table of contents"""

from blogkit.core.extract.text import text_content
from blogkit.core.models import BlockNode, BlockType, DocumentLike, Heading, as_document
from blogkit.core.utils.slug import anchor_id


DEFAULT_HEADING_LEVEL = 2


def heading_level(node: BlockNode) -> int:
    """Return attrs.level when it is an int (or digit string) in 1-6, else the default (2)."""
    level = node.attr('level')
    if isinstance(level, str) and level.isdigit():
        level = int(level)
    if isinstance(level, int) and not isinstance(level, bool) and 1 <= level <= 6:
        return level
    return DEFAULT_HEADING_LEVEL


def heading_id(node: BlockNode) -> str:
    """Anchor id shared by the renderer's id attribute and the TOC entries."""
    return anchor_id(text_content(node))


def extract_headings(doc: DocumentLike) -> list[Heading]:
    """Collect every heading node, pre-order, as Heading(id, text, level)."""
    headings: list[Heading] = []

    def _walk(node: BlockNode) -> None:
        if node.type == BlockType.heading.value:
            headings.append(Heading(id=heading_id(node), text=text_content(node), level=heading_level(node)))
        for child in node.content or []:
            _walk(child)

    for node in as_document(doc).content:
        _walk(node)
    return headings
