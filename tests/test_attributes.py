"""Tests for attribute projection."""

from subtext.core.address import Slashlink, SlashlinkURL, Slug
from subtext.core.attributes import (
    DEFAULT_PARAGRAPH_SPACING,
    AttributeRenderer,
    effective_attributes,
    project_attributes,
)
from subtext.core.model import Document


def _triples(ranges):
    return [(a.span.text, a.name, a.value) for a in ranges]


def test_document_defaults_come_first():
    doc = Document.parse("# Heading\ntext")
    ranges = project_attributes(doc)
    assert [a.name for a in ranges[:3]] == ["font", "paragraph_spacing", "foreground"]
    for attr in ranges[:3]:
        assert (attr.span.start, attr.span.end) == (0, len(doc.base))
    assert ranges[1].value == DEFAULT_PARAGRAPH_SPACING


def test_heading_and_quote_styles():
    ranges = project_attributes(Document.parse("# Heading\n> Quote"))
    assert ("# Heading", "font", "bold") in _triples(ranges)
    assert ("> Quote", "font", "italic") in _triples(ranges)


def test_inline_styles():
    ranges = project_attributes(Document.parse("*b* _i_ `c`"))
    triples = _triples(ranges)
    assert ("*b*", "font", "bold") in triples
    assert ("_i_", "font", "italic") in triples
    assert ("`c`", "background", "code") in triples


def test_wikilink_default_target():
    """Test wikilinks dim the brackets and link the text."""
    ranges = project_attributes(Document.parse("[[Some Title]]"))
    triples = _triples(ranges[3:])
    url = "sub://slashlink?slashlink=%2Fsome-title&text=Some+Title"
    assert triples == [
        ("[[Some Title]]", "foreground", "muted"),
        ("Some Title", "link", url),
    ]
    target = SlashlinkURL.from_url(url)
    assert target.slashlink == Slashlink(Slug("some-title"))
    assert target.text == "Some Title"


def test_slashlink_and_urls_default_targets():
    ranges = project_attributes(Document.parse("/cats https://x.com <https://y.com>"))
    assert _triples(ranges[3:]) == [
        ("/cats", "link", "sub://slashlink?slashlink=%2Fcats"),
        ("https://x.com", "link", "https://x.com"),
        ("<https://y.com>", "foreground", "muted"),
        ("https://y.com", "link", "https://y.com"),
    ]


def test_unresolvable_targets_get_no_link():
    ranges = project_attributes(Document.parse("http:// and [[!!!]] / x"))
    assert all(a.name != "link" for a in ranges)


def test_custom_resolver_receives_address_text():
    seen = []

    def resolver(text):
        seen.append(text)
        return None

    doc = Document.parse("/cats [[Dogs]] https://x.com <https://y.com>")
    ranges = project_attributes(doc, resolver=resolver)
    assert seen == ["/cats", "Dogs", "https://x.com", "https://y.com"]
    assert all(a.name != "link" for a in ranges)


def test_custom_resolver_target_used():
    renderer = AttributeRenderer(resolver=lambda text: ("memo", text), paragraph_spacing=8.0)
    ranges = renderer.render(Document.parse("see /cats"))
    assert ranges[1].value == 8.0
    assert ("/cats", "link", ("memo", "/cats")) in _triples(ranges)


def test_later_ranges_override():
    """Test effective attributes replay ranges in order."""
    ranges = project_attributes(Document.parse("> *x*"))
    assert effective_attributes(ranges, 3) == {
        "font": "bold",
        "paragraph_spacing": DEFAULT_PARAGRAPH_SPACING,
        "foreground": "text",
    }
    assert effective_attributes(ranges, 0)["font"] == "italic"
