import pytest

from rss_aggregator.text_normalizer import (
    characteristics,
    clean,
    estimate_reading_time,
    smart_truncate,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("<![CDATA[Hello <b>world</b>&amp;you]]>", "Hello world you"),
        ("<![CDATA[line one\nline two]]>", "line one line two"),
        ("<![CDATA[first]]> and <![CDATA[second]]>", "first and second"),
        ("<p>Paragraph</p><br/>text", "Paragraphtext"),
        ("Fish &#38; chips &nbsp;today", "Fish chips today"),
        ("  spaced \t\n  out  ", "spaced out"),
        ("", ""),
        (None, ""),
    ]
)
def test_clean(text, expected):
    assert clean(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "<![CDATA[<![CDATA[nested]]>]]>",
        "<a<b>c> &a&b;; text",
        "&am<i>p; entity split by a tag",
        "unclosed <tag and > stray",
        "<![CDATA[Hello <b>world</b>&amp;you]]>",
    ]
)
def test_clean_is_idempotent(text):
    once = clean(text)
    assert clean(once) == once


def test_smart_truncate_short_text_unchanged():
    text = "Short text. Really."
    assert smart_truncate(text) == text
    assert smart_truncate("x" * 200) == "x" * 200


def test_smart_truncate_at_sentence_boundary():
    # ". " starts at index 180
    text = "a" * 180 + ". " + "b" * 218
    assert len(text) == 400

    truncated = smart_truncate(text, 200)

    assert truncated == text[:182]
    assert truncated.endswith(". ")
    assert not truncated.endswith("...")


@pytest.mark.parametrize("mark", ["? ", "! "])
def test_smart_truncate_question_and_exclamation(mark):
    text = "a" * 150 + mark + "b" * 300
    assert smart_truncate(text, 200) == text[:152]


def test_smart_truncate_early_sentence_boundary_falls_back_to_words():
    # Boundary at 50 is not past 60% of the window
    text = "a" * 50 + ". " + "word " * 100
    truncated = smart_truncate(text, 200)

    assert truncated.endswith("...")
    assert len(truncated) <= 200
    assert text.startswith(truncated[:-3])
    assert text[len(truncated) - 3] == " "


def test_smart_truncate_word_fallback():
    text = ("aaaa bbbb cccc dddd " * 25)[:500]
    assert len(text) == 500

    truncated = smart_truncate(text, 200)

    body = truncated[:-3]
    assert truncated.endswith("...")
    assert len(truncated) <= 200
    assert text.startswith(body)
    # Cut right before a space, at the last one that leaves room for the ellipsis
    assert text[len(body)] == " "
    assert " " not in text[len(body) + 1:198]


def test_smart_truncate_without_spaces_cuts_hard():
    text = "x" * 500
    truncated = smart_truncate(text, 200)
    assert truncated == "x" * 197 + "..."
    assert len(truncated) == 200


@pytest.mark.parametrize(
    "text",
    [
        "a" * 180 + ". " + "b" * 218,
        ("aaaa bbbb cccc dddd " * 25)[:500],
        "x" * 500,
        "word " * 300,
    ]
)
def test_smart_truncate_is_idempotent(text):
    once = smart_truncate(text, 200)
    assert smart_truncate(once, 200) == once
    assert len(once) <= 200


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 1),
        (None, 1),
        ("one", 1),
        (" ".join(["word"] * 200), 1),
        (" ".join(["word"] * 201), 2),
        (" ".join(["word"] * 1000), 5),
        (" ".join(["word"] * 5000), 10),
    ]
)
def test_estimate_reading_time(text, expected):
    assert estimate_reading_time(text) == expected


def test_characteristics_scenario():
    tags = characteristics("Breaking: AI startup raises 50M (25%)", "")
    assert "breaking" in tags
    assert "data" in tags
    assert "tech" in tags
    assert "longread" not in tags


@pytest.mark.parametrize(
    "title, description, expected",
    [
        ("Quiet day", "", []),
        ("Revenue up 5%", "", ["data"]),
        ("Top 10 lists", "", ["data"]),
        ("Version 1 of 2", "", []),
        ("URGENT notice", "", ["breaking"]),
        ("Just in: snow", "", ["breaking"]),
        ("Garden news", "x" * 301, ["longread"]),
        ("Garden news", "x" * 300, []),
        ("Garden news", "New programming language", ["tech"]),
        ("Snow update", "", ["breaking"]),
    ]
)
def test_characteristics(title, description, expected):
    assert characteristics(title, description) == expected


def test_characteristics_only_known_tags():
    tags = characteristics("Breaking 2024 tech update 99%", "software " * 100)
    assert tags == ["data", "breaking", "longread", "tech"]
