"""Meta tags and schema.org JSON-LD for a post"""

from typing import Any, Optional

from blogkit.config import Settings
from blogkit.core.models import FAQItem, PostView


SCHEMA_CONTEXT = "https://schema.org"
OG_IMAGE_WIDTH = 1200
OG_IMAGE_HEIGHT = 630


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop None values, recursing into nested dicts."""
    return {k: _compact(v) if isinstance(v, dict) else v for k, v in data.items() if v is not None}


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None


def generate_meta_tags(post: PostView, settings: Settings) -> dict[str, Any]:
    """Title, description, canonical, Open Graph, Twitter, and robots for a post page."""
    post_url = settings.post_url(post.slug)
    title = post.seo.meta_title or post.title
    description = post.seo.meta_description or post.excerpt
    og_image = post.seo.og_image or (post.cover_image.url if post.cover_image else None)

    return _compact({
        "title": f"{title} | {settings.site_name}",
        "description": description,
        "canonical": post.seo.canonical_url or post_url,
        "openGraph": {
            "title": title,
            "description": description,
            "url": post_url,
            "siteName": settings.site_name,
            "type": post.seo.og_type or "article",
            "images": [
                {"url": og_image, "width": OG_IMAGE_WIDTH, "height": OG_IMAGE_HEIGHT, "alt": title}
            ] if og_image else [],
            "article": {
                "publishedTime": _iso(post.published_at) or "",
                "modifiedTime": _iso(post.updated_at) or "",
                "section": post.categories[0] if post.categories else None,
                "tags": post.tags,
            },
        },
        "twitter": {
            "card": "summary_large_image",
            "title": title,
            "description": description,
            "images": [og_image] if og_image else [],
        },
        "robots": "noindex, nofollow" if post.seo.no_index else None,
    })


def generate_structured_data(post: PostView, settings: Settings) -> dict[str, Any]:
    """BlogPosting JSON-LD."""
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "BlogPosting",
        "headline": post.title,
        "description": post.excerpt,
        "image": (post.cover_image.url if post.cover_image else None) or post.seo.og_image,
        "datePublished": _iso(post.published_at),
        "dateModified": _iso(post.updated_at),
        "author": {"@type": "Person", "name": post.author.name, "url": post.author.url},
        "publisher": {"@type": "Organization", "name": settings.site_name},
        "mainEntityOfPage": {"@type": "WebPage", "@id": settings.post_url(post.slug)},
        "wordCount": post.word_count,
        "articleSection": post.categories[0] if post.categories else None,
    })


def generate_faq_structured_data(items: list[FAQItem]) -> Optional[dict[str, Any]]:
    """FAQPage JSON-LD, or None when there are no FAQ items."""
    if not items:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": item.question,
                "acceptedAnswer": {"@type": "Answer", "text": item.answer},
            }
            for item in items
        ],
    }


def generate_breadcrumbs(post: PostView, settings: Settings, category_name: str = None) -> dict[str, Any]:
    """Home > Blog > [Category >] Title as a BreadcrumbList."""
    blog_url = f"{settings.site_url}{settings.base_path}"
    crumbs = [("Home", settings.site_url), ("Blog", blog_url)]
    if category_name and post.categories:
        crumbs.append((category_name, f"{blog_url}/category/{post.categories[0]}"))
    crumbs.append((post.title, None))

    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            _compact({"@type": "ListItem", "position": i, "name": name, "item": item})
            for i, (name, item) in enumerate(crumbs, start=1)
        ],
    }
