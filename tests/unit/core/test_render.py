"""Unit tests for core/render.py"""

import pytest

from blogkit.core.extract.headings import extract_headings
from blogkit.core.models import BlockNode, BlockType, Document
from blogkit.core.render import RENDERERS, render, render_node


def _node(data: dict) -> BlockNode:
    return BlockNode.model_validate(data)


def _text(value: str, *marks) -> dict:
    node = {"type": "text", "text": value}
    if marks:
        node["marks"] = list(marks)
    return node


# --- dispatch ---

def test_every_block_type_has_a_renderer():
    """The dispatch table covers the whole known vocabulary."""
    assert set(RENDERERS) == {t.value for t in BlockType}


def test_render_is_idempotent(sample_doc):
    assert render(sample_doc) == render(sample_doc)


def test_render_accepts_raw_mapping_and_list():
    """Documents may arrive as a Document, a doc mapping, or a bare block list."""
    blocks = [{"type": "paragraph", "content": [_text("x")]}]
    assert render({"type": "doc", "content": blocks}) == "<p>x</p>"
    assert render(blocks) == "<p>x</p>"
    assert render(Document(content=blocks)) == "<p>x</p>"


def test_render_empty_document():
    assert render({"type": "doc", "content": []}) == ""
    assert render({"type": "doc"}) == ""


# --- unknown types ---

def test_unknown_type_renders_children():
    assert render([{"type": "futureBlock", "content": [_text("x")]}]) == "x"


def test_unknown_type_with_text_renders_escaped_text():
    assert render_node(_node({"type": "mystery", "text": "a<b"})) == "a&lt;b"


def test_unknown_type_without_content_or_text_is_empty():
    assert render_node(_node({"type": "mystery", "attrs": {"x": 1}})) == ""


# --- text and marks ---

def test_text_is_escaped():
    html = render_node(_node(_text('<script>alert(1)</script> & "quotes"')))
    assert html == "&lt;script&gt;alert(1)&lt;/script&gt; &amp; &quot;quotes&quot;"
    assert "<script>" not in html


def test_marks_wrap_in_array_order():
    """Each mark wraps the previous result, so the last mark is outermost."""
    node = _node(_text("hi", {"type": "bold"}, {"type": "italic"}))
    assert render_node(node) == "<em><strong>hi</strong></em>"


@pytest.mark.parametrize("mark,tag", [
    ("strike", "s"), ("code", "code"), ("underline", "u"), ("highlight", "mark"),
])
def test_simple_marks(mark, tag):
    assert render_node(_node(_text("x", {"type": mark}))) == f"<{tag}>x</{tag}>"


def test_external_link_opens_in_new_tab():
    node = _node(_text("site", {"type": "link", "attrs": {"href": "https://example.com"}}))
    assert render_node(node) == '<a href="https://example.com" target="_blank" rel="noopener noreferrer">site</a>'


def test_internal_link_has_no_target():
    node = _node(_text("post", {"type": "link", "attrs": {"href": "/blog/other"}}))
    assert render_node(node) == '<a href="/blog/other">post</a>'


def test_unknown_mark_is_ignored():
    assert render_node(_node(_text("x", {"type": "sparkle"}))) == "x"


def test_text_node_with_empty_text():
    assert render_node(_node({"type": "text"})) == ""


# --- blocks ---

def test_paragraph_and_hard_break():
    html = render([{"type": "paragraph", "content": [_text("a"), {"type": "hardBreak"}, _text("b")]}])
    assert html == "<p>a<br />b</p>"


def test_empty_paragraph():
    assert render([{"type": "paragraph"}]) == "<p></p>"


def test_heading_with_id():
    html = render([{"type": "heading", "attrs": {"level": 3}, "content": [_text("Hello World!")]}])
    assert html == '<h3 id="hello-world">Hello World!</h3>'


@pytest.mark.parametrize("attrs", [None, {}, {"level": 9}, {"level": "x"}, {"level": True}])
def test_heading_invalid_level_defaults_to_h2(attrs):
    html = render([{"type": "heading", "attrs": attrs, "content": [_text("T")]}])
    assert html == '<h2 id="t">T</h2>'


def test_heading_numeric_string_level():
    html = render([{"type": "heading", "attrs": {"level": "3"}, "content": [_text("T")]}])
    assert html == '<h3 id="t">T</h3>'


def test_heading_id_matches_extracted_heading():
    doc = {"type": "doc", "content": [
        {"type": "heading", "attrs": {"level": 2}, "content": [_text("Hello World!")]},
    ]}
    assert 'id="hello-world"' in render(doc)
    assert extract_headings(doc)[0].id == "hello-world"


def test_heading_ids_agree_for_special_characters():
    """Ids come from raw text, never from escaped HTML."""
    doc = [{"type": "heading", "content": [_text("Q&A <tips>")]}]
    heading_id = extract_headings(doc)[0].id
    assert f'id="{heading_id}"' in render(doc)
    assert heading_id == "qa-tips"


def test_lists():
    html = render([
        {"type": "bulletList", "content": [{"type": "listItem", "content": [_text("a")]}]},
        {"type": "orderedList", "content": [{"type": "listItem", "content": [_text("b")]}]},
    ])
    assert html == "<ul><li>a</li></ul><ol><li>b</li></ol>"


def test_task_list():
    html = render([{"type": "taskList", "content": [
        {"type": "taskItem", "attrs": {"checked": True}, "content": [_text("done")]},
        {"type": "taskItem", "attrs": {"checked": False}, "content": [_text("todo")]},
    ]}])
    assert html == (
        '<ul class="nbk-task-list">'
        '<li class="nbk-task-item" data-checked="checked"><input type="checkbox" checked disabled />done</li>'
        '<li class="nbk-task-item" data-checked=""><input type="checkbox"  disabled />todo</li>'
        '</ul>'
    )


def test_blockquote():
    assert render([{"type": "blockquote", "content": [{"type": "paragraph", "content": [_text("q")]}]}]) \
        == "<blockquote><p>q</p></blockquote>"


def test_code_block_escapes_and_defaults_language():
    html = render([{"type": "codeBlock", "content": [_text("a < b")]}])
    assert html == '<pre><code class="language-plaintext">a &lt; b</code></pre>'


def test_code_block_with_filename():
    html = render([{"type": "codeBlock", "attrs": {"language": "python", "filename": "app.py"},
                    "content": [_text("x = 1")]}])
    assert html == '<div class="nbk-code-header">app.py</div><pre><code class="language-python">x = 1</code></pre>'


def test_image_plain():
    html = render([{"type": "image", "attrs": {"src": "/a.png", "alt": "An image"}}])
    assert html == '<img src="/a.png" alt="An image" loading="lazy" />'


def test_image_with_dimensions_and_caption():
    html = render([{"type": "image", "attrs": {
        "src": "/a.png", "alt": 'say "hi"', "width": 640, "height": 480, "caption": "Fig & 1",
    }}])
    assert html == (
        '<figure><img src="/a.png" alt="say &quot;hi&quot;" width="640" height="480" loading="lazy" />'
        '<figcaption>Fig &amp; 1</figcaption></figure>'
    )


def test_image_missing_attrs():
    assert render([{"type": "image"}]) == '<img src="" alt="" loading="lazy" />'


def test_horizontal_rule():
    assert render([{"type": "horizontalRule"}]) == "<hr />"


def test_table():
    html = render([{"type": "table", "content": [
        {"type": "tableRow", "content": [{"type": "tableHeader", "content": [_text("H")]}]},
        {"type": "tableRow", "content": [{"type": "tableCell", "content": [_text("C")]}]},
    ]}])
    assert html == "<table><tr><th>H</th></tr><tr><td>C</td></tr></table>"


@pytest.mark.parametrize("kind,icon", [("info", "ℹ️"), ("warning", "⚠️"), ("tip", "💡"), ("danger", "🚨")])
def test_callout_icons(kind, icon):
    html = render([{"type": "callout", "attrs": {"type": kind}, "content": [_text("c")]}])
    assert html == (
        f'<div class="nbk-callout nbk-callout-{kind}"><span class="nbk-callout-icon">{icon}</span>'
        '<div class="nbk-callout-content">c</div></div>'
    )


def test_callout_defaults_to_info():
    assert "nbk-callout-info" in render([{"type": "callout", "content": []}])


def test_callout_unknown_kind_has_no_icon():
    assert '<span class="nbk-callout-icon"></span>' in render([{"type": "callout", "attrs": {"type": "note"}}])


def test_faq_markup():
    html = render([{"type": "faq", "content": [{"type": "faqItem", "content": [
        {"type": "faqQuestion", "content": [_text("Why?")]},
        {"type": "faqAnswer", "content": [{"type": "paragraph", "content": [_text("Because.")]}]},
    ]}]}])
    assert html == (
        '<div class="nbk-faq" itemscope itemtype="https://schema.org/FAQPage">'
        '<div class="nbk-faq-item" itemscope itemprop="mainEntity" itemtype="https://schema.org/Question">'
        '<h3 itemprop="name">Why?</h3>'
        '<div itemprop="acceptedAnswer" itemscope itemtype="https://schema.org/Answer">'
        '<div itemprop="text"><p>Because.</p></div></div>'
        '</div></div>'
    )


def test_table_of_contents_placeholder():
    assert render([{"type": "tableOfContents"}]) == '<div data-toc="true" class="nbk-toc"></div>'


def test_raw_html_passes_through():
    assert render([{"type": "html", "content": [_text("<b>raw</b>")]}]) == "<b>raw</b>"


def test_embed():
    html = render([{"type": "embed", "attrs": {"src": "https://youtube.com/embed/x"}}])
    assert html == (
        '<div class="nbk-embed"><iframe src="https://youtube.com/embed/x" '
        'frameborder="0" allowfullscreen loading="lazy"></iframe></div>'
    )


def test_extra_keys_are_preserved_on_nodes():
    node = _node({"type": "paragraph", "content": [], "uid": "abc"})
    assert node.model_dump()["uid"] == "abc"
