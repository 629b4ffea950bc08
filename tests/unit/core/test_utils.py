"""Unit tests for core/utils hashing, markup, and diff helpers"""

from blogkit.core.utils.diff import unified_diff
from blogkit.core.utils.hashing import sha256, sha256_json
from blogkit.core.utils.markup import escape_html, escape_xml, strip_tags


def test_sha256_is_hex_digest():
    digest = sha256("hello")
    assert len(digest) == 64
    assert digest == sha256("hello")
    assert digest != sha256("hello!")


def test_sha256_json_ignores_key_order():
    assert sha256_json({"a": 1, "b": [1, 2]}) == sha256_json({"b": [1, 2], "a": 1})


def test_escape_html_ampersand_first():
    assert escape_html('&lt; "x"') == "&amp;lt; &quot;x&quot;"


def test_escape_xml_escapes_apostrophe():
    assert escape_xml("Tom's <b>") == "Tom&apos;s &lt;b&gt;"
    assert escape_html("Tom's") == "Tom's"


def test_strip_tags():
    assert strip_tags('<h2 id="x">Title <em>here</em></h2>') == "Title here"


def test_unified_diff_identical_is_empty():
    assert unified_diff("a\nb\n", "a\nb\n") == []


def test_unified_diff_labels_and_changes():
    lines = unified_diff("a\nb\n", "a\nc\n", "v1", "v2")
    assert lines[0] == "--- v1\n"
    assert lines[1] == "+++ v2\n"
    assert "-b\n" in lines
    assert "+c\n" in lines
