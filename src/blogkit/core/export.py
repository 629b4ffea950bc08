"""Export: per-post HTML fragment and sidecar JSON, plus rss.xml and sitemap.xml"""

import json
import logging
from pathlib import Path

from sqlmodel import Session

from blogkit.config import Settings
from blogkit.core.extract.faq import extract_faq_items
from blogkit.core.extract.headings import extract_headings
from blogkit.core.feeds import generate_rss, generate_sitemap
from blogkit.core.models import PostView, as_document
from blogkit.core.seo.meta import (
    generate_breadcrumbs,
    generate_faq_structured_data,
    generate_meta_tags,
    generate_structured_data,
)
from blogkit.core.seo.scorer import score_post
from blogkit.crud.categories import get_category_by_slug, list_categories
from blogkit.crud.models import Post
from blogkit.crud.posts import get_published, to_view


logger = logging.getLogger(__name__)

RSS_FILE = "rss.xml"
SITEMAP_FILE = "sitemap.xml"


def build_sidecar(post: Post, view: PostView, settings: Settings, category_name: str = None) -> dict:
    """Everything a page template needs besides the HTML body.

    Custom structured data on the post's SEO settings replaces the generated
    BlogPosting object.
    """
    doc = as_document(post.content or [])
    faq_items = extract_faq_items(doc)
    return {
        "slug": post.slug,
        "title": post.title,
        "status": post.status.value if post.status else None,
        "version": post.version,
        "committed_at": post.committed_at.isoformat() if post.committed_at else None,
        "excerpt": view.excerpt,
        "word_count": view.word_count,
        "reading_time": view.reading_time,
        "categories": view.categories,
        "tags": view.tags,
        "toc": [h.model_dump() for h in extract_headings(doc)],
        "faq": [item.model_dump() for item in faq_items],
        "meta": generate_meta_tags(view, settings),
        "structured_data": view.seo.structured_data or generate_structured_data(view, settings),
        "faq_structured_data": generate_faq_structured_data(faq_items),
        "breadcrumbs": generate_breadcrumbs(view, settings, category_name),
        "seo_score": score_post(view).model_dump(mode="json"),
    }


def write_post(post: Post, session: Session, output_dir: Path, settings: Settings) -> tuple[Path, Path]:
    """Write {slug}.html and {slug}.json for one post. Returns (html_path, json_path)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    view = to_view(post)
    category = get_category_by_slug(session, post.categories[0]) if post.categories else None

    html_path = output_dir / f"{post.slug}.html"
    json_path = output_dir / f"{post.slug}.json"
    html_path.write_text(post.content_html, encoding="utf-8")
    json_path.write_text(
        json.dumps(build_sidecar(post, view, settings, category.name if category else None), indent=2, default=str),
        encoding="utf-8",
    )
    return html_path, json_path


def write_feeds(session: Session, output_dir: Path, settings: Settings) -> tuple[Path, Path]:
    """Write rss.xml (newest rss_limit published posts) and sitemap.xml. Returns both paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    recent = [to_view(p) for p in get_published(session, settings.rss_limit)]
    published = [to_view(p) for p in get_published(session)]
    category_slugs = [c.slug for c in list_categories(session)]

    rss_path = output_dir / RSS_FILE
    sitemap_path = output_dir / SITEMAP_FILE
    rss_path.write_text(generate_rss(recent, settings, settings.rss_full_content), encoding="utf-8")
    sitemap_path.write_text(generate_sitemap(published, category_slugs, settings), encoding="utf-8")
    logger.info("Wrote feeds: %d RSS item(s), %d post URL(s)", len(recent), len(published))
    return rss_path, sitemap_path
