"""Plain-text extraction: the canonical text for search, word count, and excerpts"""

from blogkit.core.models import BlockNode, DocumentLike, as_document


def text_content(node: BlockNode) -> str:
    """Concatenate a node's own text, or its descendants' text, with no separator."""
    if node.text:
        return node.text
    if not node.content:
        return ''
    return ''.join(text_content(child) for child in node.content)


def _collect(node: BlockNode, parts: list[str]) -> None:
    if node.text is not None:
        parts.append(node.text)
    for child in node.content or []:
        _collect(child, parts)


def extract_text(doc: DocumentLike) -> str:
    """Every text string in pre-order (the renderer's order), joined by single spaces."""
    parts: list[str] = []
    for node in as_document(doc).content:
        _collect(node, parts)
    return ' '.join(parts)
