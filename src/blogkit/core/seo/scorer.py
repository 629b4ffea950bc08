"""SEO rule table scored over an assembled post's HTML, plain text, and metadata.

Every rule is evaluated independently and returns one SEOCheck, or None when
its precondition (a focus keyword, some content text) is not met. The scorer
never raises: absent inputs map to a specific warn or fail.
"""

import re
from dataclasses import dataclass
from html import unescape
from typing import Callable, Optional

from blogkit.core.models import CheckStatus, PostView, SEOCheck, SEOScore, Verdict
from blogkit.core.utils.markup import strip_tags


PASS, WARN, FAIL = CheckStatus.passed, CheckStatus.warned, CheckStatus.failed

FIRST_PARAGRAPH_WORDS = 150
DENSITY_RANGE = (0.5, 2.5)
TITLE_IDEAL = (50, 60)
TITLE_MIN = 30
TITLE_MAX = 70
META_DESCRIPTION_IDEAL = (150, 160)
META_DESCRIPTION_MIN = 120
META_DESCRIPTION_MAX = 170
SLUG_MAX = 75
MIN_WORDS = 300
PARAGRAPH_MAX_WORDS = 300
SENTENCE_IDEAL = 20
SENTENCE_MAX = 25
POOR_FAILS = 3
OK_WARNS = 5

H2_RE = re.compile(r'<h2[^>]*>(.*?)</h2>', re.IGNORECASE | re.DOTALL)
HEADING_TAG_RE = re.compile(r'<h([2-6])[^>]*>', re.IGNORECASE)
IMG_RE = re.compile(r'<img[^>]*>', re.IGNORECASE)
INTERNAL_LINK_RE = re.compile(r'''href=["']/[^"']*["']''', re.IGNORECASE)
EXTERNAL_LINK_RE = re.compile(r'''href=["']https?://[^"']*["']''', re.IGNORECASE)
PARAGRAPH_END_RE = re.compile(r'</p>', re.IGNORECASE)
SENTENCE_END_RE = re.compile(r'[.!?]+')
WHITESPACE_RE = re.compile(r'\s+')


@dataclass(frozen=True)
class ScoringInput:
    """Lowercased/normalized views of a post, computed once per score."""
    post: PostView
    keyword: str
    title: str
    slug: str
    description: str
    text: str
    html: str


def _check(id: str, status: CheckStatus, message: str) -> SEOCheck:
    return SEOCheck(id=id, status=status, message=message)


def _words(text: str) -> list[str]:
    # Leading whitespace yields an empty first token, so counts match a plain regex split.
    return WHITESPACE_RE.split(text)


def _keyword_in(id: str, haystack: str, needle: str, where: str, si: ScoringInput) -> SEOCheck:
    if not si.keyword:
        return _check(id, WARN, 'No focus keyword set')
    if needle in haystack:
        return _check(id, PASS, f'Focus keyword appears in {where}')
    return _check(id, FAIL, f'Focus keyword not found in {where}')


def keyword_in_title(si: ScoringInput) -> SEOCheck:
    return _keyword_in('focus-keyword-in-title', si.title, si.keyword, 'title', si)


def keyword_in_slug(si: ScoringInput) -> SEOCheck:
    hyphenated = WHITESPACE_RE.sub('-', si.keyword)
    return _keyword_in('focus-keyword-in-slug', si.slug, hyphenated, 'URL slug', si)


def keyword_in_excerpt(si: ScoringInput) -> SEOCheck:
    return _keyword_in('focus-keyword-in-excerpt', si.description, si.keyword, 'meta description', si)


def keyword_in_h2(si: ScoringInput) -> Optional[SEOCheck]:
    if not si.keyword:
        return None
    if any(si.keyword in unescape(strip_tags(h2)).lower() for h2 in H2_RE.findall(si.html)):
        return _check('focus-keyword-in-h2', PASS, 'Focus keyword found in a subheading')
    return _check('focus-keyword-in-h2', WARN, 'Focus keyword not found in any H2 subheading')


def keyword_in_first_paragraph(si: ScoringInput) -> Optional[SEOCheck]:
    if not (si.keyword and si.text):
        return None
    opening = ' '.join(_words(si.text)[:FIRST_PARAGRAPH_WORDS])
    if si.keyword in opening:
        return _check('focus-keyword-in-first-paragraph', PASS, 'Focus keyword appears early in content')
    return _check('focus-keyword-in-first-paragraph', WARN, 'Focus keyword not found in the first paragraph')


def keyword_density(si: ScoringInput) -> Optional[SEOCheck]:
    if not (si.keyword and si.text):
        return None
    density = si.text.count(si.keyword) / len(_words(si.text)) * 100
    low, high = DENSITY_RANGE
    if low <= density <= high:
        return _check('focus-keyword-density', PASS, f'Keyword density is {density:.1f}% (ideal)')
    if density < low:
        return _check('focus-keyword-density', WARN, f'Keyword density is {density:.1f}% (too low, aim for 0.5-2.5%)')
    return _check('focus-keyword-density', WARN, f'Keyword density is {density:.1f}% (too high, aim for 0.5-2.5%)')


def title_length(si: ScoringInput) -> SEOCheck:
    n = len(si.post.seo.meta_title or si.post.title)
    low, high = TITLE_IDEAL
    if low <= n <= high:
        return _check('title-length', PASS, f'Title is {n} characters (ideal)')
    if n < TITLE_MIN:
        return _check('title-length', FAIL, f'Title is {n} characters (too short, aim for 50-60)')
    if n > TITLE_MAX:
        return _check('title-length', WARN, f'Title is {n} characters (too long, aim for 50-60)')
    return _check('title-length', WARN, f'Title is {n} characters (aim for 50-60)')


def meta_description_length(si: ScoringInput) -> SEOCheck:
    n = len(si.post.seo.meta_description or si.post.excerpt or '')
    low, high = META_DESCRIPTION_IDEAL
    if low <= n <= high:
        return _check('meta-description-length', PASS, f'Meta description is {n} characters (ideal)')
    if n < META_DESCRIPTION_MIN:
        return _check('meta-description-length', WARN, f'Meta description is {n} characters (too short, aim for 150-160)')
    if n > META_DESCRIPTION_MAX:
        return _check('meta-description-length', WARN, f'Meta description is {n} characters (too long, may be truncated)')
    return _check('meta-description-length', PASS, f'Meta description is {n} characters')


def slug_length(si: ScoringInput) -> SEOCheck:
    n = len(si.post.slug)
    if n <= SLUG_MAX:
        return _check('slug-length', PASS, f'URL slug is {n} characters')
    return _check('slug-length', WARN, f'URL slug is {n} characters (should be under 75)')


def content_length(si: ScoringInput) -> SEOCheck:
    n = si.post.word_count
    if n >= MIN_WORDS:
        return _check('content-length', PASS, f'Content is {n} words')
    return _check('content-length', FAIL, f'Content is only {n} words (aim for 300+)')


def heading_hierarchy(si: ScoringInput) -> SEOCheck:
    levels = [int(m) for m in HEADING_TAG_RE.findall(si.html)]
    if not levels:
        return _check('heading-hierarchy', WARN, 'No subheadings found, add H2s to structure content')
    if all(cur <= prev + 1 for prev, cur in zip(levels, levels[1:])):
        return _check('heading-hierarchy', PASS, 'Heading hierarchy is correct')
    return _check('heading-hierarchy', WARN, 'Heading levels are skipped (e.g., H2 -> H4)')


def image_alt_text(si: ScoringInput) -> SEOCheck:
    images = IMG_RE.findall(si.html)
    missing = [img for img in images if 'alt=' not in img or 'alt=""' in img]
    if not images:
        return _check('image-alt-text', WARN, 'No images found in content')
    if not missing:
        return _check('image-alt-text', PASS, 'All images have alt text')
    return _check('image-alt-text', FAIL, f'{len(missing)} image(s) missing alt text')


def internal_links(si: ScoringInput) -> SEOCheck:
    n = len(INTERNAL_LINK_RE.findall(si.html))
    if n:
        return _check('internal-links', PASS, f'{n} internal link(s) found')
    return _check('internal-links', WARN, 'No internal links found, add links to related content')


def external_links(si: ScoringInput) -> SEOCheck:
    n = len(EXTERNAL_LINK_RE.findall(si.html))
    if n:
        return _check('external-links', PASS, f'{n} external link(s) found')
    return _check('external-links', WARN, 'No external links found')


def paragraph_length(si: ScoringInput) -> SEOCheck:
    chunks = [c for c in PARAGRAPH_END_RE.split(si.html) if c.strip()]
    long = [c for c in chunks if len(_words(strip_tags(c))) > PARAGRAPH_MAX_WORDS]
    if not long:
        return _check('paragraph-length', PASS, 'All paragraphs are a reasonable length')
    return _check('paragraph-length', WARN, f'{len(long)} paragraph(s) exceed 300 words')


def cover_image(si: ScoringInput) -> SEOCheck:
    if si.post.cover_image and si.post.cover_image.url:
        return _check('cover-image', PASS, 'Post has a cover image')
    return _check('cover-image', WARN, 'No cover image set, social shares may look plain')


def readability(si: ScoringInput) -> Optional[SEOCheck]:
    if not si.text:
        return None
    sentences = [s for s in SENTENCE_END_RE.split(si.text) if s.strip()]
    avg = len(_words(si.text)) / len(sentences) if sentences else 0
    if avg <= SENTENCE_IDEAL:
        return _check('readability-score', PASS, f'Average sentence length: {avg:.0f} words')
    if avg <= SENTENCE_MAX:
        return _check('readability-score', WARN, f'Average sentence length: {avg:.0f} words (try to keep under 20)')
    return _check('readability-score', FAIL, f'Average sentence length: {avg:.0f} words (too long, aim for under 20)')


RULES: list[Callable[[ScoringInput], Optional[SEOCheck]]] = [
    keyword_in_title,
    keyword_in_slug,
    keyword_in_excerpt,
    keyword_in_h2,
    keyword_in_first_paragraph,
    keyword_density,
    title_length,
    meta_description_length,
    slug_length,
    content_length,
    heading_hierarchy,
    image_alt_text,
    internal_links,
    external_links,
    paragraph_length,
    cover_image,
    readability,
]


def overall_verdict(checks: list[SEOCheck]) -> Verdict:
    """poor at 3+ fails; ok at 1+ fails or 5+ warns; good otherwise."""
    fails = sum(1 for c in checks if c.status == FAIL)
    warns = sum(1 for c in checks if c.status == WARN)
    if fails >= POOR_FAILS:
        return Verdict.poor
    if fails >= 1 or warns >= OK_WARNS:
        return Verdict.ok
    return Verdict.good


def score_post(post: PostView) -> SEOScore:
    """Run every rule in order and derive the overall verdict."""
    seo = post.seo
    si = ScoringInput(
        post=post,
        keyword=(seo.focus_keyword or '').lower(),
        title=post.title.lower(),
        slug=post.slug.lower(),
        description=(seo.meta_description or post.excerpt or '').lower(),
        text=(post.content_text or '').lower(),
        html=post.content_html or '',
    )
    checks = [c for c in (rule(si) for rule in RULES) if c is not None]
    return SEOScore(overall=overall_verdict(checks), checks=checks)
