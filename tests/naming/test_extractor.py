"""Tests for sitepub.naming.extractor."""

from __future__ import annotations

import pytest

from sitepub.models import ExtractedFields, SourceKind
from sitepub.naming.extractor import clean_title, extract, extract_description, extract_title


def test_extract_title_from_h1() -> None:
    fields = extract("<div><h1>Cool Viz</h1></div>", SourceKind.TSX)
    assert fields.title == "Cool Viz"


def test_extract_title_strips_nested_tags_and_attributes() -> None:
    content = '<h1 className="text-4xl font-black">Data <span>Flow</span> Explorer</h1>'
    assert extract_title(content, SourceKind.TSX) == "Data Flow Explorer"


def test_first_h1_wins() -> None:
    content = "<h1>First Heading</h1>\n<h1>Second Heading</h1>"
    assert extract_title(content, SourceKind.HTML) == "First Heading"


def test_empty_h1_falls_through_to_later_rules() -> None:
    content = "<h1>   </h1>\nconst meta = { title: 'Fallback Title' };"
    assert extract_title(content, SourceKind.TSX) == "Fallback Title"


def test_h1_beats_title_tag_for_html() -> None:
    content = "<html><head><title>Page Title</title></head><body><h1>Heading</h1></body></html>"
    assert extract_title(content, SourceKind.HTML) == "Heading"


def test_title_tag_only_used_for_html() -> None:
    content = "<title>Document Title</title>"
    assert extract_title(content, SourceKind.HTML) == "Document Title"
    assert extract_title(content, SourceKind.TSX) is None


@pytest.mark.parametrize(
    "content",
    [
        'const config = { title: "Sorting Algorithms" };',
        "const config = { title: 'Sorting Algorithms' };",
    ],
)
def test_title_literal_accepts_both_quote_styles(content: str) -> None:
    assert extract_title(content, SourceKind.TSX) == "Sorting Algorithms"


def test_title_literal_preferred_over_name_literal() -> None:
    content = "const a = { name: 'Name Value' };\nconst b = { title: 'Title Value' };"
    assert extract_title(content, SourceKind.TSX) == "Title Value"


def test_name_literal_used_when_no_title() -> None:
    content = "export const meta = { name: 'graph walker' };"
    assert extract_title(content, SourceKind.TSX) == "Graph Walker"


def test_subtitle_literal_is_not_a_title() -> None:
    content = "const hero = { subtitle: 'Only a subtitle' };"
    assert extract_title(content, SourceKind.TSX) is None


def test_no_title_sources_returns_none() -> None:
    assert extract("export default () => null;", SourceKind.TSX) == ExtractedFields(None, None)


def test_radical_timeline_heading_is_title_cased_and_keeps_punctuation() -> None:
    content = "<h1 className='title'>RADICAL PROGRAMMING TIMELINE!</h1>"
    assert extract_title(content, SourceKind.TSX) == "Radical Programming Timeline!"


def test_multiline_jsx_heading_with_style_object() -> None:
    content = """
      <h1 className="text-6xl" style={{
        fontFamily: 'Comic Sans MS, cursive',
        textShadow: '0 0 30px rgba(0,255,0,0.5)'
      }}>
        RADICAL PROGRAMMING TIMELINE!
      </h1>
    """
    assert extract_title(content, SourceKind.TSX) == "Radical Programming Timeline!"


def test_symbols_after_trailing_punctuation_drop_the_punctuation() -> None:
    assert clean_title("Launch Day! 🚀") == "Launch Day"


def test_heading_entities_are_decoded_before_cleaning() -> None:
    assert extract_title("<h1>Tom &amp; Jerry</h1>", SourceKind.HTML) == "Tom Jerry"
    assert extract_title("<title>Rock &#38; Roll</title>", SourceKind.HTML) == "Rock Roll"


def test_subheadline_entities_are_decoded_once() -> None:
    content = '<p class="subheadline">Escaped &amp;lt;tags&amp;gt; stay escaped</p>'
    assert extract_description(content, SourceKind.HTML) == "Escaped &lt;tags&gt; stay escaped"


def test_emoji_only_heading_is_not_a_title() -> None:
    content = "<h1>⚡⚡</h1><title>Real Title</title>"
    assert extract_title(content, SourceKind.HTML) == "Real Title"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("iOS Tips", "iOS Tips"),
        ("API Guide", "API Guide"),
        ("intro to CSS grid", "Intro To CSS Grid"),
        ("3D graphics with WebGL", "3D Graphics With WebGL"),
        ("⚡ Lightning Talks ⚡", "Lightning Talks"),
        ("what is this?!", "What Is This?!"),
        ("NASA missions", "NASA Missions"),
        ("GRAPHQL explained", "Graphql Explained"),
        ("hello,   world.", "Hello World."),
    ],
)
def test_clean_title_casing_rules(raw: str, expected: str) -> None:
    assert clean_title(raw) == expected


def test_clean_title_of_symbols_only_is_empty() -> None:
    assert clean_title("✨✨") == ""


def test_description_from_subheadline() -> None:
    content = (
        '<p className="headline">Overview: the headline</p>\n'
        '<p className="subheadline">A tour of <b>sixty</b> years of languages</p>'
    )
    assert extract_description(content, SourceKind.TSX) == "A tour of sixty years of languages"


def test_description_from_headline_strips_label_prefix() -> None:
    content = '<div class="headline">Summary: how packets find their way</div>'
    assert extract_description(content, SourceKind.HTML) == "how packets find their way"


def test_headline_without_label_is_used_verbatim() -> None:
    content = '<div class="headline">Packets on the move</div>'
    assert extract_description(content, SourceKind.HTML) == "Packets on the move"


def test_class_must_match_exactly() -> None:
    content = '<p class="subheadline large">Not exact</p>'
    assert extract_description(content, SourceKind.HTML) is None


def test_description_from_meta_tag_in_any_attribute_order() -> None:
    content = '<meta content="Visual guide to B-trees" name="description">'
    assert extract_description(content, SourceKind.HTML) == "Visual guide to B-trees"


def test_meta_description_unescapes_entities() -> None:
    content = '<meta name="description" content="Maps &amp; territories">'
    assert extract_description(content, SourceKind.HTML) == "Maps & territories"


def test_description_literal_beats_subtitle_literal() -> None:
    content = "const a = { subtitle: 'sub' };\nconst b = { description: 'desc' };"
    assert extract_description(content, SourceKind.TSX) == "desc"


def test_subtitle_literal_is_last_description_rule() -> None:
    content = "const hero = { subtitle: 'From punch cards to prompts' };"
    assert extract_description(content, SourceKind.TSX) == "From punch cards to prompts"


def test_unterminated_markup_does_not_match() -> None:
    content = "<h1>Never closed\n<p class=\"subheadline\">also open"
    assert extract(content, SourceKind.HTML) == ExtractedFields(None, None)
