"""Unit tests for core/metrics.py"""

import pytest

from blogkit.core.metrics import count_words, extract_text_from_html, make_excerpt, reading_time


@pytest.mark.parametrize("text,expected", [
    ("", 0),
    ("   \n\t", 0),
    ("one", 1),
    ("  one   two\nthree ", 3),
])
def test_count_words(text, expected):
    assert count_words(text) == expected


def test_reading_time_floor_is_one_minute():
    assert reading_time("") == 1


def test_reading_time_rounds_up():
    assert reading_time(" ".join(["word"] * 200)) == 1
    assert reading_time(" ".join(["word"] * 201)) == 2
    assert reading_time(" ".join(["word"] * 1000)) == 5


def test_excerpt_without_spaces_keeps_full_prefix():
    excerpt = make_excerpt("a" * 200)
    assert excerpt == "a" * 160 + "..."
    assert len(excerpt) == 163


def test_excerpt_trims_trailing_partial_word():
    text = "word " * 40                       # 200 chars; char 160 falls after a full word
    excerpt = make_excerpt(text)
    assert excerpt.endswith("word...")
    assert len(excerpt) <= 163


def test_excerpt_cuts_mid_word_back_to_boundary():
    assert make_excerpt("hello wonderful world", 10) == "hello..."


def test_excerpt_short_text_still_gets_ellipsis():
    assert make_excerpt("Short post") == "Short..."
    assert make_excerpt("") == "..."


def test_extract_text_from_html():
    html = "<style>p{}</style><p>Fish &amp; chips</p><script>x()</script><p>&lt;tag&gt;&nbsp;ok</p>"
    assert extract_text_from_html(html) == "Fish & chips <tag> ok"
