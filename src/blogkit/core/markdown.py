"""markdown-it token stream to block tree conversion"""

from markdown_it import MarkdownIt

from blogkit.core.models import BlockNode, BlockType, Mark


# token name (without _open/_close) -> container block type; thead/tbody are transparent
CONTAINER_MAP: dict[str, BlockType] = {
    'paragraph':    BlockType.paragraph,
    'heading':      BlockType.heading,
    'bullet_list':  BlockType.bullet_list,
    'ordered_list': BlockType.ordered_list,
    'list_item':    BlockType.list_item,
    'blockquote':   BlockType.blockquote,
    'table':        BlockType.table,
    'tr':           BlockType.table_row,
    'th':           BlockType.table_header,
    'td':           BlockType.table_cell,
}

INLINE_MARKS: dict[str, str] = {
    'strong': 'bold',
    'em':     'italic',
    's':      'strike',
    'link':   'link',
}

BODY_HEADING_LEVELS = (2, 4)


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _text(text: str, marks: list[Mark]) -> BlockNode:
    # marks apply innermost-first, so the most recently opened mark goes first
    return BlockNode(type=BlockType.text.value, text=text, marks=list(reversed(marks)) or None)


def _inline(children: list) -> list[BlockNode]:
    """Convert an inline token's children to text/hardBreak/image/html nodes."""
    nodes: list[BlockNode] = []
    marks: list[Mark] = []

    for tok in children or []:
        name = tok.type.rsplit('_', 1)[0]
        if tok.type == 'text':
            if tok.content:
                nodes.append(_text(tok.content, marks))
        elif tok.type == 'softbreak':
            nodes.append(_text(' ', marks))
        elif tok.type == 'hardbreak':
            nodes.append(BlockNode(type=BlockType.hard_break.value))
        elif tok.type == 'code_inline':
            nodes.append(_text(tok.content, [*marks, Mark(type='code')]))
        elif tok.type == 'image':
            attrs = {'src': tok.attrGet('src') or '', 'alt': tok.content or ''}
            if tok.attrGet('title'):
                attrs['caption'] = tok.attrGet('title')
            nodes.append(BlockNode(type=BlockType.image.value, attrs=attrs))
        elif tok.type == 'html_inline':
            nodes.append(BlockNode(type=BlockType.html.value, text=tok.content))
        elif tok.nesting == 1 and name in INLINE_MARKS:
            attrs = {'href': tok.attrGet('href') or ''} if name == 'link' else None
            marks.append(Mark(type=INLINE_MARKS[name], attrs=attrs))
        elif tok.nesting == -1 and name in INLINE_MARKS:
            kind = INLINE_MARKS[name]
            for i in range(len(marks) - 1, -1, -1):
                if marks[i].type == kind:
                    del marks[i]
                    break
    return nodes


def _open_attrs(tok) -> dict | None:
    if tok.type == 'heading_open':
        # h1 belongs to the post title; body headings stay within h2-h4
        low, high = BODY_HEADING_LEVELS
        return {'level': min(max(int(tok.tag[1:]), low), high)}
    if tok.type == 'ordered_list_open' and tok.attrGet('start'):
        return {'start': int(tok.attrGet('start'))}
    return None


def _leaf(tok) -> BlockNode | None:
    """Convert self-contained block tokens (fences, rules, raw HTML)."""
    if tok.type in ('fence', 'code_block'):
        lang = tok.info.split()[0] if tok.info.strip() else None
        code = tok.content.rstrip('\n')
        return BlockNode(
            type=BlockType.code_block.value,
            attrs={'language': lang} if lang else None,
            content=[BlockNode(type=BlockType.text.value, text=code)] if code else [],
        )
    if tok.type == 'hr':
        return BlockNode(type=BlockType.horizontal_rule.value)
    if tok.type == 'html_block':
        return BlockNode(type=BlockType.html.value, text=tok.content.rstrip('\n'))
    return None


def tokens_to_blocks(tokens: list) -> list[BlockNode]:
    """Fold a flat markdown-it token stream into a nested block tree."""
    root = BlockNode(type='doc', content=[])
    stack = [root]

    for tok in tokens:
        if tok.type == 'inline':
            stack[-1].content.extend(_inline(tok.children))
        elif tok.nesting == 1:
            block_type = CONTAINER_MAP.get(tok.type[:-len('_open')])
            if block_type is None:
                continue
            node = BlockNode(type=block_type.value, attrs=_open_attrs(tok), content=[])
            stack[-1].content.append(node)
            stack.append(node)
        elif tok.nesting == -1:
            if tok.type[:-len('_close')] not in CONTAINER_MAP:
                continue
            node = stack.pop()
            # a paragraph holding only an image becomes the image block itself
            if node.type == BlockType.paragraph.value and len(node.content) == 1 \
                    and node.content[0].type == BlockType.image.value:
                stack[-1].content[-1] = node.content[0]
        else:
            leaf = _leaf(tok)
            if leaf is not None:
                stack[-1].content.append(leaf)

    return root.content


def markdown_to_blocks(markdown: str, preset: str = 'gfm-like') -> list[BlockNode]:
    """Parse markdown text into a list of top-level block nodes."""
    return tokens_to_blocks(make_parser(preset).parse(markdown))


def split_title(markdown: str, preset: str = 'gfm-like') -> tuple[BlockNode | None, list[BlockNode]]:
    """Parse markdown, lifting a leading H1 out as the title heading.

    Returns (title_heading, body_blocks); title_heading is None when the
    document does not open with an H1.
    """
    tokens = make_parser(preset).parse(markdown)
    if len(tokens) >= 3 and tokens[0].type == 'heading_open' and tokens[0].tag == 'h1':
        title = BlockNode(type=BlockType.heading.value, attrs={'level': 1}, content=_inline(tokens[1].children))
        return title, tokens_to_blocks(tokens[3:])
    return None, tokens_to_blocks(tokens)
