"""Unit tests for core/feeds.py"""

from datetime import datetime, timezone
from xml.dom.minidom import parseString

from blogkit.core.feeds import generate_rss, generate_sitemap


NOW = datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_rss_channel(settings):
    xml = generate_rss([], settings, now=NOW)
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<title>Example Blog</title>" in xml
    assert "<link>https://example.com/blog</link>" in xml
    assert "<lastBuildDate>Thu, 01 Feb 2024 00:00:00 GMT</lastBuildDate>" in xml
    assert '<atom:link href="https://example.com/api/blog/rss.xml" rel="self" type="application/rss+xml" />' in xml
    assert "<item>" not in xml


def test_rss_item(make_view, settings):
    view = make_view(
        title="Fish & Chips",
        slug="fish-chips",
        excerpt="Tasty <b>excerpt</b>",
        content_html="<p>Full</p>",
        categories=["food"],
        cover_image={"url": "https://cdn.example.com/c.jpg"},
        published_at=datetime(2024, 1, 1, 12, 0),
    )
    xml = generate_rss([view], settings, now=NOW)
    assert "<title>Fish &amp; Chips</title>" in xml
    assert "<link>https://example.com/blog/fish-chips</link>" in xml
    assert '<guid isPermaLink="true">https://example.com/blog/fish-chips</guid>' in xml
    assert "<description><![CDATA[Tasty <b>excerpt</b>]]></description>" in xml
    assert "<pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>" in xml
    assert '<enclosure url="https://cdn.example.com/c.jpg" type="image/jpeg" />' in xml
    assert "<category>food</category>" in xml


def test_rss_full_content(make_view, settings):
    xml = generate_rss([make_view(content_html="<p>Full</p>")], settings, full_content=True, now=NOW)
    assert "<description><![CDATA[<p>Full</p>]]></description>" in xml


def test_rss_description_with_cdata_terminator_stays_well_formed(make_view, settings):
    xml = generate_rss([make_view(excerpt="close with ]]> here")], settings, now=NOW)
    desc = parseString(xml).getElementsByTagName("description")[1]
    assert "".join(n.data for n in desc.childNodes) == "close with ]]> here"


def test_rss_full_content_with_raw_html_terminator(make_view, settings):
    view = make_view(content_html="<p>a</p><!-- ]]> -->")
    xml = generate_rss([view], settings, full_content=True, now=NOW)
    desc = parseString(xml).getElementsByTagName("description")[1]
    assert "".join(n.data for n in desc.childNodes) == "<p>a</p><!-- ]]> -->"


def test_rss_items_keep_caller_order(make_view, settings):
    xml = generate_rss([make_view(slug="second"), make_view(slug="first")], settings, now=NOW)
    assert xml.index("/blog/second") < xml.index("/blog/first")


def test_sitemap_changefreq_by_age(make_view, settings):
    posts = [
        make_view(slug="fresh", updated_at=datetime(2024, 1, 30)),
        make_view(slug="recent", updated_at=datetime(2024, 1, 15)),
        make_view(slug="old", updated_at=datetime(2023, 12, 1)),
    ]
    xml = generate_sitemap(posts, [], settings, now=NOW)
    assert (
        "<loc>https://example.com/blog/fresh</loc>\n"
        "    <lastmod>2024-01-30</lastmod>\n"
        "    <changefreq>daily</changefreq>\n"
        "    <priority>0.8</priority>"
    ) in xml
    assert "<lastmod>2024-01-15</lastmod>\n    <changefreq>weekly</changefreq>" in xml
    assert "<lastmod>2023-12-01</lastmod>\n    <changefreq>monthly</changefreq>" in xml


def test_sitemap_listing_categories_and_pages(make_view, settings):
    settings.posts_per_page = 1
    posts = [make_view(slug=f"p{i}", updated_at=datetime(2024, 1, 30)) for i in range(3)]
    xml = generate_sitemap(posts, ["guides"], settings, now=NOW)
    assert "<loc>https://example.com/blog</loc>\n    <changefreq>daily</changefreq>\n    <priority>0.9</priority>" in xml
    assert "<loc>https://example.com/blog/category/guides</loc>" in xml
    assert "<loc>https://example.com/blog?page=2</loc>" in xml
    assert "<loc>https://example.com/blog?page=3</loc>" in xml
    assert "page=4" not in xml
    assert "page=1" not in xml


def test_sitemap_empty(settings):
    xml = generate_sitemap([], [], settings, now=NOW)
    assert xml.count("<url>") == 1
    assert xml.rstrip().endswith("</urlset>")
