"""Fixtures for pipeline integration tests: a file-backed database and a source tree"""

import json

import pytest

from blogkit.config import Settings
from blogkit.crud.database import init_db, make_engine


FAQ_POST = {
    "title": "Frequently Asked Questions About Blogging",
    "slug": "blogging-faq",
    "status": "published",
    "publishedAt": "2024-01-10T08:00:00",
    "categories": ["Guides"],
    "seo": {"focusKeyword": "blogging"},
    "content": [
        {"type": "heading", "attrs": {"level": 2}, "content": [{"type": "text", "text": "Blogging Basics"}]},
        {"type": "paragraph", "content": [{"type": "text", "text": "Blogging is writing in public."}]},
        {"type": "faq", "content": [{"type": "faqItem", "content": [
            {"type": "faqQuestion", "content": [{"type": "text", "text": "How often?"}]},
            {"type": "faqAnswer", "content": [
                {"type": "paragraph", "content": [{"type": "text", "text": "Weekly."}]},
            ]},
        ]}]},
    ],
}

MD_POST = """\
---
status: published
publishedAt: 2024-02-01
tags: [intro]
---

# Hello Markdown

Some **bold** text and a [link](/blog/blogging-faq).
"""


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    return Settings(site_url="https://example.com", site_name="Example", output_dir=str(tmp_path / "dist"))


@pytest.fixture(name="engine")
def engine_fixture(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path}/pipeline.db")
    init_db(engine)
    return engine


@pytest.fixture(name="sources")
def sources_fixture(tmp_path):
    src = tmp_path / "posts"
    src.mkdir()
    (src / "faq.json").write_text(json.dumps(FAQ_POST))
    (src / "hello-markdown.md").write_text(MD_POST)
    (src / "README.txt").write_text("not a post")
    return src
