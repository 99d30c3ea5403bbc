"""
Tests unitarios para la transformacion de markup de WordPress.

Cada etapa se prueba aislada y luego el pipeline completo.
"""
from __future__ import annotations

import pytest

from horrorsite.application.services.content_transformer import (
    CONTENT_STAGES,
    EXCERPT_MARKER,
    TITLE_STAGES,
    ContentTransformer,
    TransformStage,
    collapse_whitespace,
    convert_blockquotes,
    convert_emphasis,
    convert_headings,
    convert_list_items,
    convert_paragraphs,
    decode_entities,
    strip_tags,
    strip_wordpress_blocks,
)
from horrorsite.shared.exceptions.sync import TransformError


@pytest.fixture
def transformer() -> ContentTransformer:
    return ContentTransformer(excerpt_length=200, words_per_minute=200)


def test_stage_order_is_fixed() -> None:
    assert [stage.name for stage in CONTENT_STAGES] == [
        "strip_wordpress_blocks",
        "headings",
        "emphasis",
        "list_items",
        "blockquotes",
        "paragraphs",
        "strip_tags",
        "decode_entities",
        "collapse_whitespace",
    ]
    assert [stage.name for stage in TITLE_STAGES] == ["strip_tags", "decode_entities", "collapse_whitespace"]


# ---------------------------------------------------------------------------
# Etapas individuales
# ---------------------------------------------------------------------------

def test_strip_wordpress_block_comments() -> None:
    markup = "<!-- wp:paragraph -->\n<p>Hi</p>\n<!-- /wp:paragraph -->"
    assert strip_wordpress_blocks(markup) == "\n<p>Hi</p>\n"


def test_strip_wordpress_block_wrappers_with_content() -> None:
    markup = '<div class="wp-block-image"><img src="a.png"></div>Text<ul class="wp-block-gallery"><li>x</li></ul>'
    assert strip_wordpress_blocks(markup) == "Text"


def test_strip_media_shortcodes_keeps_plain_brackets() -> None:
    markup = (
        'Before [caption id="a"]<img src="x">Caption[/caption] after '
        '[embed]https://youtu.be/x[/embed][video src="a.mp4"] [Part 2]'
    )
    assert strip_wordpress_blocks(markup) == "Before  after  [Part 2]"


def test_headings_use_hash_per_level() -> None:
    assert convert_headings("<h2>The Door</h2>") == "\n\n## The Door\n\n"
    assert convert_headings('<h4 class="x"> Deep </h4>') == "\n\n#### Deep\n\n"


def test_emphasis_markers() -> None:
    markup = "<em>dark</em> and <strong>cold</strong> <i>x</i> <b>y</b>"
    assert convert_emphasis(markup) == "_dark_ and **cold** _x_ **y**"


def test_emphasis_does_not_touch_similar_tags() -> None:
    markup = '<img src="a.png"><br><blockquote>q</blockquote>'
    assert convert_emphasis(markup) == markup


def test_list_items() -> None:
    assert convert_list_items("<ul><li>One</li><li> Two </li></ul>") == "<ul>- One\n- Two\n</ul>"


def test_blockquote_prefixes_each_non_empty_line() -> None:
    markup = "<blockquote><p>Line one</p><p>Line two</p></blockquote>"
    assert convert_blockquotes(markup) == "\n\n> Line one\n> Line two\n\n"


def test_paragraphs_and_line_breaks() -> None:
    assert convert_paragraphs("a<br>b<br/>c<BR />d") == "a\nb\nc\nd"
    assert convert_paragraphs('<p class="intro">x</p>') == "\n\nx\n\n"


def test_paragraph_rule_ignores_pre_and_param() -> None:
    assert convert_paragraphs("<pre>code</pre><param>") == "<pre>code</pre><param>"


def test_strip_tags_removes_comments_and_tags() -> None:
    assert strip_tags('<div class="x">text</div><!-- note --> tail') == "text tail"


def test_strip_tags_keeps_bare_angle_brackets() -> None:
    assert strip_tags("3 < 5 and 7 > 2") == "3 < 5 and 7 > 2"


def test_strip_tags_keeps_text_after_unterminated_tag() -> None:
    text = "intro <span class=\"x\"\n\nThe rest of the story survives."
    assert strip_tags(text).endswith("The rest of the story survives.")


def test_decode_named_and_numeric_entities() -> None:
    assert decode_entities("Tom &amp; Jerry") == "Tom & Jerry"
    assert decode_entities("&lt;3 &gt; &quot;q&quot; &#039;s &apos;") == "<3 > \"q\" 's '"
    assert decode_entities("&#8220;hi&#8221; &#8216;x&#8217;") == "\"hi\" 'x'"
    assert decode_entities("&#8211; &#8212; &#8230;") == "– — …"
    assert decode_entities("&ndash; &mdash; &hellip; &ldquo;a&rdquo;") == "– — … \"a\""
    assert decode_entities("a&nbsp;b") == "a b"
    assert decode_entities("&#65;&#x42;") == "AB"


def test_decode_is_single_pass() -> None:
    assert decode_entities("&amp;lt;") == "&lt;"


def test_decode_leaves_invalid_entities_untouched() -> None:
    assert decode_entities("&#99999999;") == "&#99999999;"
    assert decode_entities("&#0;") == "&#0;"
    assert decode_entities("&#55296;") == "&#55296;"
    assert decode_entities("&bogus;") == "&bogus;"


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  a \t b  \n\n\n\n  c  ") == "a b\n\nc"
    assert collapse_whitespace("x\r\ny") == "x\ny"


# ---------------------------------------------------------------------------
# Pipeline completo
# ---------------------------------------------------------------------------

def test_full_pipeline_heading_and_paragraph(transformer: ContentTransformer) -> None:
    assert transformer.transform("<h2>The Door</h2><p>It opened.</p>") == "## The Door\n\nIt opened."


def test_full_pipeline_list(transformer: ContentTransformer) -> None:
    assert transformer.transform("<ul><li>One</li><li>Two</li></ul>") == "- One\n- Two"


def test_full_pipeline_blockquote(transformer: ContentTransformer) -> None:
    markup = "<p>He said:</p><blockquote><p>Line one</p><p>Line two</p></blockquote>"
    assert transformer.transform(markup) == "He said:\n\n> Line one\n> Line two"


def test_full_pipeline_wordpress_story(transformer: ContentTransformer) -> None:
    markup = (
        "<!-- wp:paragraph -->\n"
        "<p>The <em>house</em> was &#8220;empty&#8221;&#8230;</p>\n"
        "<!-- /wp:paragraph -->\n"
        '<div class="wp-block-buttons"><a href="/next">Next</a></div>\n'
        "<p>Nobody <strong>ever</strong> came&nbsp;back.</p>"
    )
    assert transformer.transform(markup) == 'The _house_ was "empty"…\n\nNobody **ever** came back.'


def test_malformed_markup_does_not_raise(transformer: ContentTransformer) -> None:
    assert transformer.transform("<p>Unclosed <em>tag") == "Unclosed tag"
    assert isinstance(transformer.transform("<<<>>> </p <div"), str)


@pytest.mark.parametrize("markup", [None, ""])
def test_empty_markup_yields_empty_string(transformer: ContentTransformer, markup) -> None:
    assert transformer.transform(markup) == ""


def test_non_string_markup_raises_transform_error_with_stage(transformer: ContentTransformer) -> None:
    with pytest.raises(TransformError) as exc_info:
        transformer.transform(12345)
    assert exc_info.value.stage == "strip_wordpress_blocks"
    assert exc_info.value.error_code == "TRANSFORM_ERROR"


def test_failing_stage_is_reported_by_name() -> None:
    def _explode(text: str) -> str:
        raise RuntimeError("boom")

    custom = ContentTransformer(stages=(TransformStage("explode", _explode),))
    with pytest.raises(TransformError) as exc_info:
        custom.transform("<p>x</p>")
    assert exc_info.value.stage == "explode"


def test_clean_title(transformer: ContentTransformer) -> None:
    assert transformer.clean_title("Night &amp; Fog <em>II</em>") == "Night & Fog II"
    assert transformer.clean_title("&#8220;Hello&#8221;") == '"Hello"'


# ---------------------------------------------------------------------------
# Extracto y tiempo de lectura
# ---------------------------------------------------------------------------

def test_excerpt_not_truncated_when_within_limit() -> None:
    t = ContentTransformer(excerpt_length=10)
    assert t.truncate_excerpt("abcdefghij") == "abcdefghij"


def test_excerpt_truncated_at_fixed_offset() -> None:
    t = ContentTransformer(excerpt_length=10)
    assert t.truncate_excerpt("abcde fghijkl") == "abcde fghi..."
    assert t.truncate_excerpt("abcd      xyz") == "abcd..."


def test_excerpt_length_bound() -> None:
    t = ContentTransformer(excerpt_length=25)
    text = "word " * 100
    assert len(t.truncate_excerpt(text)) <= 25 + len(EXCERPT_MARKER)


def test_excerpt_prefers_source_excerpt(transformer: ContentTransformer) -> None:
    assert transformer.build_excerpt("<p>Short hook</p>", "Long body") == "Short hook"


def test_excerpt_falls_back_to_content(transformer: ContentTransformer) -> None:
    assert transformer.build_excerpt("", "Long body") == "Long body"
    assert transformer.build_excerpt("<p> </p>", "Long body") == "Long body"


@pytest.mark.parametrize(
    "words,expected",
    [(0, 1), (1, 1), (200, 1), (201, 2), (1000, 5)],
)
def test_reading_time_floor_and_ceiling(transformer: ContentTransformer, words: int, expected: int) -> None:
    assert transformer.estimate_reading_time(" ".join(["w"] * words)) == expected


def test_transform_record(transformer: ContentTransformer) -> None:
    fields = transformer.transform_record(
        "The &amp; Title",
        "<p>" + " ".join(["scream"] * 250) + "</p>",
        "",
    )
    assert fields.title == "The & Title"
    assert fields.word_count == 250
    assert fields.reading_time_minutes == 2
    assert fields.excerpt.endswith(EXCERPT_MARKER)
    assert len(fields.excerpt) <= 200 + len(EXCERPT_MARKER)


def test_transform_record_uses_reading_time_estimate() -> None:
    class _SlowReader(ContentTransformer):
        def estimate_reading_time(self, text: str) -> int:
            return 42

    fields = _SlowReader().transform_record("Title", "<p>one two three</p>", "")
    assert fields.reading_time_minutes == 42
