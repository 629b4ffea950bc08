"""Slug generation for heading anchors and post/category identifiers"""

import re


def anchor_id(text: str) -> str:
    """Heading anchor id: lowercase, trimmed, hyphen-separated. Edge hyphens are kept."""
    text = text.lower().strip()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text)


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    return anchor_id(text).strip('-')
