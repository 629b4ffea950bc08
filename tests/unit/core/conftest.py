"""Shared fixtures for core unit tests"""

import pytest

from blogkit.config import Settings
from blogkit.core.models import Document, PostView


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.

## Heading 2

- item one
- item two

```python
print("hello")
```

---

Footer paragraph.
"""

SAMPLE_FM_MD = """\
---
title: Test Post
slug: test-post
tags: [a, b]
categories: [Guides]
status: published
publishedAt: 2024-03-01
---

# Ignored Title

Body content.
"""


def text(value: str, *marks: str) -> dict:
    node = {"type": "text", "text": value}
    if marks:
        node["marks"] = [{"type": m} for m in marks]
    return node


def para(*children) -> dict:
    return {"type": "paragraph", "content": list(children)}


def heading(value: str, level: int = 2) -> dict:
    return {"type": "heading", "attrs": {"level": level}, "content": [text(value)]}


def faq_item(question: str = None, answer: str = None) -> dict:
    content = []
    if question is not None:
        content.append({"type": "faqQuestion", "content": [text(question)]})
    if answer is not None:
        content.append({"type": "faqAnswer", "content": [para(text(answer))]})
    return {"type": "faqItem", "content": content}


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(site_url="https://example.com", site_name="Example")


@pytest.fixture(name="sample_doc")
def sample_doc_fixture():
    """A document touching the common block types."""
    return Document.model_validate({
        "type": "doc",
        "content": [
            heading("Getting Started"),
            para(text("Hello "), text("world", "bold"), text("!")),
            heading("Details & Notes", 3),
            {"type": "bulletList", "content": [
                {"type": "listItem", "content": [para(text("one"))]},
                {"type": "listItem", "content": [para(text("two"))]},
            ]},
            {"type": "faq", "content": [faq_item("What is it?", "A test.")]},
        ],
    })


@pytest.fixture(name="make_view")
def make_view_fixture():
    """Factory for PostView with sensible defaults; keyword args override."""
    def _make(**overrides) -> PostView:
        data = {
            "title": "A Practical Guide to Writing Blog Posts That Rank",
            "slug": "practical-guide-blog-posts",
            "excerpt": "Short excerpt.",
            "content_html": "<p>Body.</p>",
            "content_text": "Body.",
            "word_count": 1,
            "reading_time": 1,
        }
        data.update(overrides)
        return PostView.model_validate(data)
    return _make


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="sample_fm_md")
def sample_fm_md_fixture():
    return SAMPLE_FM_MD
