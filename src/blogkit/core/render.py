"""Block tree to semantic HTML.

Each known node type has one renderer in RENDERERS, keyed by BlockType value.
Unknown types never raise: a node with children renders its children, a node
with text renders the escaped text, anything else renders as ''.
"""

import logging
from typing import Callable, Optional

from blogkit.core.extract.headings import heading_id, heading_level
from blogkit.core.extract.text import text_content
from blogkit.core.models import BlockNode, BlockType, DocumentLike, as_document
from blogkit.core.utils.markup import escape_html


logger = logging.getLogger(__name__)

CALLOUT_ICONS: dict[str, str] = {
    'info':    'ℹ️',
    'warning': '⚠️',
    'tip':     '💡',
    'danger':  '🚨',
}

MARK_TAGS: dict[str, str] = {
    'bold':      'strong',
    'italic':    'em',
    'strike':    's',
    'code':      'code',
    'underline': 'u',
    'highlight': 'mark',
}


def render(doc: DocumentLike) -> str:
    """Render a whole document to an HTML string."""
    return render_nodes(as_document(doc).content)


def render_nodes(nodes: Optional[list[BlockNode]]) -> str:
    return ''.join(render_node(n) for n in nodes or [])


def render_node(node: BlockNode) -> str:
    renderer = RENDERERS.get(node.type)
    if renderer is not None:
        return renderer(node)
    logger.debug("No renderer for block type %r; falling back to passthrough", node.type)
    if node.content is not None:
        return render_nodes(node.content)
    if node.text:
        return escape_html(node.text)
    return ''


def _wrap(tag: str) -> Callable[[BlockNode], str]:
    """Renderer that wraps the node's rendered children in a bare tag."""
    def _render(node: BlockNode) -> str:
        return f'<{tag}>{render_nodes(node.content)}</{tag}>'
    return _render


def _heading(node: BlockNode) -> str:
    level = heading_level(node)
    return f'<h{level} id="{escape_html(heading_id(node))}">{render_nodes(node.content)}</h{level}>'


def _task_list(node: BlockNode) -> str:
    return f'<ul class="nbk-task-list">{render_nodes(node.content)}</ul>'


def _task_item(node: BlockNode) -> str:
    checked = 'checked' if node.attr('checked') else ''
    return (
        f'<li class="nbk-task-item" data-checked="{checked}">'
        f'<input type="checkbox" {checked} disabled />{render_nodes(node.content)}</li>'
    )


def _code_block(node: BlockNode) -> str:
    lang = node.attr('language') or 'plaintext'
    filename = node.attr('filename')
    header = f'<div class="nbk-code-header">{escape_html(str(filename))}</div>' if filename else ''
    code = escape_html(text_content(node))
    return f'{header}<pre><code class="language-{escape_html(str(lang))}">{code}</code></pre>'


def _image(node: BlockNode) -> str:
    src = str(node.attr('src') or '')
    alt = str(node.attr('alt') or '')
    img = f'<img src="{escape_html(src)}" alt="{escape_html(alt)}"'
    for dim in ('width', 'height'):
        value = node.attr(dim)
        if value:
            img += f' {dim}="{escape_html(str(value))}"'
    img += ' loading="lazy" />'
    caption = node.attr('caption')
    if caption:
        return f'<figure>{img}<figcaption>{escape_html(str(caption))}</figcaption></figure>'
    return img


def _callout(node: BlockNode) -> str:
    kind = str(node.attr('type') or 'info')
    icon = CALLOUT_ICONS.get(kind, '')
    return (
        f'<div class="nbk-callout nbk-callout-{escape_html(kind)}">'
        f'<span class="nbk-callout-icon">{icon}</span>'
        f'<div class="nbk-callout-content">{render_nodes(node.content)}</div></div>'
    )


def _faq(node: BlockNode) -> str:
    return f'<div class="nbk-faq" itemscope itemtype="https://schema.org/FAQPage">{render_nodes(node.content)}</div>'


def _faq_item(node: BlockNode) -> str:
    return (
        '<div class="nbk-faq-item" itemscope itemprop="mainEntity" itemtype="https://schema.org/Question">'
        f'{render_nodes(node.content)}</div>'
    )


def _faq_question(node: BlockNode) -> str:
    return f'<h3 itemprop="name">{render_nodes(node.content)}</h3>'


def _faq_answer(node: BlockNode) -> str:
    return (
        '<div itemprop="acceptedAnswer" itemscope itemtype="https://schema.org/Answer">'
        f'<div itemprop="text">{render_nodes(node.content)}</div></div>'
    )


def _table_of_contents(node: BlockNode) -> str:
    return '<div data-toc="true" class="nbk-toc"></div>'


def _raw_html(node: BlockNode) -> str:
    # Trusted pass-through: authors inserting raw HTML own its safety.
    return text_content(node)


def _embed(node: BlockNode) -> str:
    src = str(node.attr('src') or '')
    return (
        f'<div class="nbk-embed"><iframe src="{escape_html(src)}" '
        'frameborder="0" allowfullscreen loading="lazy"></iframe></div>'
    )


def _text(node: BlockNode) -> str:
    """Escaped text; each mark wraps the result of the previous one."""
    out = escape_html(node.text or '')
    for mark in node.marks or []:
        tag = MARK_TAGS.get(mark.type)
        if tag:
            out = f'<{tag}>{out}</{tag}>'
        elif mark.type == 'link':
            href = str((mark.attrs or {}).get('href') or '')
            target = ' target="_blank" rel="noopener noreferrer"' if href.startswith('http') else ''
            out = f'<a href="{escape_html(href)}"{target}>{out}</a>'
    return out


RENDERERS: dict[str, Callable[[BlockNode], str]] = {
    BlockType.paragraph.value:         _wrap('p'),
    BlockType.heading.value:           _heading,
    BlockType.bullet_list.value:       _wrap('ul'),
    BlockType.ordered_list.value:      _wrap('ol'),
    BlockType.list_item.value:         _wrap('li'),
    BlockType.task_list.value:         _task_list,
    BlockType.task_item.value:         _task_item,
    BlockType.blockquote.value:        _wrap('blockquote'),
    BlockType.code_block.value:        _code_block,
    BlockType.image.value:             _image,
    BlockType.horizontal_rule.value:   lambda node: '<hr />',
    BlockType.table.value:             _wrap('table'),
    BlockType.table_row.value:         _wrap('tr'),
    BlockType.table_header.value:      _wrap('th'),
    BlockType.table_cell.value:        _wrap('td'),
    BlockType.callout.value:           _callout,
    BlockType.faq.value:               _faq,
    BlockType.faq_item.value:          _faq_item,
    BlockType.faq_question.value:      _faq_question,
    BlockType.faq_answer.value:        _faq_answer,
    BlockType.table_of_contents.value: _table_of_contents,
    BlockType.html.value:              _raw_html,
    BlockType.embed.value:             _embed,
    BlockType.text.value:              _text,
    BlockType.hard_break.value:        lambda node: '<br />',
}
