"""FAQ extraction for FAQPage structured data"""

import logging

from blogkit.core.extract.text import text_content
from blogkit.core.models import BlockNode, BlockType, DocumentLike, FAQItem, as_document
from blogkit.core.render import render_nodes


logger = logging.getLogger(__name__)


def _first(nodes: list[BlockNode], block_type: BlockType) -> BlockNode | None:
    return next((n for n in nodes if n.type == block_type.value), None)


def extract_faq_items(doc: DocumentLike) -> list[FAQItem]:
    """Collect (question text, answer HTML) for every complete faqItem, pre-order.

    Question and answer may appear in either order; an item missing either
    part is skipped. Children are still walked, so nested FAQs are found.
    """
    items: list[FAQItem] = []

    def _walk(node: BlockNode) -> None:
        if node.type == BlockType.faq_item.value and node.content:
            question = _first(node.content, BlockType.faq_question)
            answer = _first(node.content, BlockType.faq_answer)
            if question and answer:
                items.append(FAQItem(question=text_content(question), answer=render_nodes(answer.content)))
            else:
                logger.debug("Skipping incomplete faqItem (question=%s, answer=%s)", bool(question), bool(answer))
        for child in node.content or []:
            _walk(child)

    for node in as_document(doc).content:
        _walk(node)
    return items
