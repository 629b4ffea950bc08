"""One render -> extract -> measure run over a post's block tree, and the post view built from it"""

from typing import Optional

from blogkit.core.extract.text import extract_text
from blogkit.core.metrics import EXCERPT_LENGTH, count_words, make_excerpt, reading_time
from blogkit.core.models import Author, DocumentLike, PipelineResult, PostInput, PostView, as_document
from blogkit.core.render import render
from blogkit.core.utils.slug import slugify


def process_content(
    content: DocumentLike,
    excerpt: Optional[str] = None,
    excerpt_length: int = EXCERPT_LENGTH,
    ) -> PipelineResult:
    """Derive HTML, plain text, word count, reading time, and excerpt from a block tree.

    The excerpt is generated from the plain text only when none is given.
    """
    doc = as_document(content)
    text = extract_text(doc)
    return PipelineResult(
        content=doc.content,
        content_html=render(doc),
        content_text=text,
        word_count=count_words(text),
        reading_time=reading_time(text),
        excerpt=excerpt or make_excerpt(text, excerpt_length),
    )


def assemble_post(
    data: PostInput,
    result: Optional[PipelineResult] = None,
    excerpt_length: int = EXCERPT_LENGTH,
    ) -> PostView:
    """Build the scorer/generator view of an unsaved post, running the pipeline if needed."""
    result = result or process_content(data.content, data.excerpt, excerpt_length)
    return PostView.model_validate({
        **data.model_dump(exclude={'content', 'excerpt', 'author'}),
        'slug': data.slug or slugify(data.title),
        'excerpt': result.excerpt,
        'content_html': result.content_html,
        'content_text': result.content_text,
        'word_count': result.word_count,
        'reading_time': result.reading_time,
        'author': data.author or Author(),
        'categories': [s for s in (slugify(c) for c in data.categories) if s],
    })
