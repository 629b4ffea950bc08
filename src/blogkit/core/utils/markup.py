"""Entity escaping and tag stripping for HTML and XML output"""

import re


TAG_RE = re.compile(r'<[^>]+>')


def escape_html(text: str) -> str:
    """Escape &, <, > and " for text and attribute contexts (& first)."""
    return (
        text.replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
    )


def escape_xml(text: str) -> str:
    """escape_html plus the apostrophe, for feed and sitemap documents."""
    return escape_html(text).replace("'", '&apos;')


def strip_tags(html: str) -> str:
    return TAG_RE.sub('', html)
