"""Reading metrics over plain text: word count, reading time, excerpt"""

import math
import re


WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160

_TRAILING_PARTIAL_WORD_RE = re.compile(r'\s+\S*\Z')
_SCRIPT_STYLE_RE = re.compile(r'<(script|style)[^>]*>.*?</\1>', re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r'<[^>]+>')
_ENTITIES = (
    ('&nbsp;', ' '),
    ('&amp;', '&'),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&#39;', "'"),
)


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens; 0 for empty or whitespace-only text."""
    if not text or not text.strip():
        return 0
    return len(text.split())


def reading_time(text: str) -> int:
    """Minutes to read at 200 wpm, never less than 1 (an empty post is still '1 min read')."""
    return max(1, math.ceil(count_words(text) / WORDS_PER_MINUTE))


def make_excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    """First `length` chars, trimmed back to the last whole word, plus '...'."""
    return _TRAILING_PARTIAL_WORD_RE.sub('', text[:length], count=1) + '...'


def extract_text_from_html(html: str) -> str:
    """Strip script/style blocks and tags, decode basic entities, collapse whitespace."""
    text = _SCRIPT_STYLE_RE.sub('', html)
    text = _TAG_RE.sub(' ', text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return re.sub(r'\s+', ' ', text).strip()
