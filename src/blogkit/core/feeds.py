"""RSS 2.0 and sitemap XML generation"""

import math
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional

from blogkit.config import Settings
from blogkit.core.models import PostView
from blogkit.core.utils.markup import escape_xml


def _utc(dt: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)


def _rfc822(dt: datetime) -> str:
    return format_datetime(_utc(dt), usegmt=True)


def _cdata(text: str) -> str:
    # a literal "]]>" would close the section early
    return f"<![CDATA[{text.replace(']]>', ']]]]><![CDATA[>')}]]>"


def _rss_item(post: PostView, settings: Settings, full_content: bool, now: datetime) -> str:
    url = escape_xml(settings.post_url(post.slug))
    body = post.content_html if full_content else post.excerpt
    pub_date = _rfc822(post.published_at or post.created_at or now)
    lines = [
        "    <item>",
        f"      <title>{escape_xml(post.title)}</title>",
        f"      <link>{url}</link>",
        f'      <guid isPermaLink="true">{url}</guid>',
        f"      <description>{_cdata(body or '')}</description>",
        f"      <pubDate>{pub_date}</pubDate>",
    ]
    if post.cover_image and post.cover_image.url:
        lines.append(f'      <enclosure url="{escape_xml(post.cover_image.url)}" type="image/jpeg" />')
    lines.extend(f"      <category>{escape_xml(c)}</category>" for c in post.categories)
    lines.append("    </item>")
    return "\n".join(lines)


def generate_rss(
    posts: list[PostView],
    settings: Settings,
    full_content: bool = False,
    now: Optional[datetime] = None,
    ) -> str:
    """Build an RSS 2.0 document for posts (already filtered and ordered by the caller)."""
    now = now or datetime.now(timezone.utc)
    site_name = escape_xml(settings.site_name)
    site_url = escape_xml(settings.site_url)
    items = "\n".join(_rss_item(p, settings, full_content, now) for p in posts)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>{site_name} Blog</title>
    <link>{site_url}{escape_xml(settings.base_path)}</link>
    <description>Latest posts from {site_name}</description>
    <language>en</language>
    <lastBuildDate>{_rfc822(now)}</lastBuildDate>
    <atom:link href="{site_url}/api/blog/rss.xml" rel="self" type="application/rss+xml" />
{items}
  </channel>
</rss>"""


def _changefreq(lastmod: Optional[datetime], now: datetime) -> str:
    """daily under a week old, weekly under a month, else monthly."""
    days = (_utc(now) - _utc(lastmod)).days if lastmod else 0
    if days < 7:
        return "daily"
    if days < 30:
        return "weekly"
    return "monthly"


def _url_entry(loc: str, lastmod: str = None, changefreq: str = None, priority: str = None) -> str:
    lines = ["  <url>", f"    <loc>{escape_xml(loc)}</loc>"]
    if lastmod:
        lines.append(f"    <lastmod>{lastmod}</lastmod>")
    if changefreq:
        lines.append(f"    <changefreq>{changefreq}</changefreq>")
    if priority:
        lines.append(f"    <priority>{priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def generate_sitemap(
    posts: list[PostView],
    category_slugs: list[str],
    settings: Settings,
    now: Optional[datetime] = None,
    ) -> str:
    """Sitemap of the listing page, each post, each category, and listing pages 2..N."""
    now = now or datetime.now(timezone.utc)
    blog_url = f"{settings.site_url}{settings.base_path}"
    entries = [_url_entry(blog_url, changefreq="daily", priority="0.9")]

    for post in posts:
        lastmod = post.updated_at or post.published_at
        entries.append(_url_entry(
            f"{blog_url}/{post.slug}",
            lastmod=_utc(lastmod).date().isoformat() if lastmod else None,
            changefreq=_changefreq(lastmod, now),
            priority="0.8",
        ))

    for slug in category_slugs:
        entries.append(_url_entry(f"{blog_url}/category/{slug}", changefreq="weekly", priority="0.6"))

    total_pages = math.ceil(len(posts) / settings.posts_per_page)
    for page in range(2, total_pages + 1):
        entries.append(_url_entry(f"{blog_url}?page={page}", changefreq="weekly", priority="0.5"))

    urls = "\n".join(entries)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{urls}
</urlset>"""
