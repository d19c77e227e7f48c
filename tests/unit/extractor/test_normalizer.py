"""
Unit tests for TextNormalizer and the text helpers.
"""

import pytest

from clearpage.config import NormalizerConfig
from clearpage.extractor.models import ContentBlock
from clearpage.extractor.normalizer import (
    TextNormalizer,
    clean_text,
    collapse_whitespace,
    decode_entities,
)
from clearpage.observability import METRICS
from tests.helpers import metric_delta


@pytest.fixture
def normalizer():
    return TextNormalizer()


def inline(text, **flags):
    return ContentBlock.paragraph(text, flags, inline=True)


class TestTextHelpers:
    """Tests for entity decoding and whitespace collapse."""

    def test_decode_entities(self):
        assert decode_entities("a &amp; b&nbsp;c &#8217; &lt;x&gt;") == "a & b c ’ <x>"

    def test_collapse_whitespace(self):
        assert collapse_whitespace("  one\n\t two   three ") == "one two three"

    def test_clean_text(self):
        assert clean_text(" Tom &amp;\n  Jerry ") == "Tom & Jerry"


class TestJoinFragments:
    """Tests for merging inline fragments."""

    def test_run_becomes_one_paragraph(self, normalizer):
        blocks = [inline("Hello "), inline("world", bold=True), ContentBlock.line_break(), inline("next line")]
        assert normalizer.join_fragments(blocks) == [
            ContentBlock.paragraph("Hello world", {"bold": True}),
            ContentBlock.paragraph("next line"),
        ]

    def test_punctuation_spacing(self, normalizer):
        blocks = [inline("Read"), inline("this"), inline(".")]
        assert normalizer.join_fragments(blocks)[0].content == "Read this."

    def test_block_elements_split_runs(self, normalizer):
        heading = ContentBlock.heading(2, "Part")
        blocks = [inline("before"), heading, inline("after")]
        assert [block.content for block in normalizer.join_fragments(blocks)] == ["before", "Part", "after"]

    def test_breaks_are_dropped(self, normalizer):
        blocks = [ContentBlock.line_break(), ContentBlock.paragraph("x"), ContentBlock.line_break()]
        assert normalizer.join_fragments(blocks) == [ContentBlock.paragraph("x")]

    def test_joined_blocks_are_not_inline(self, normalizer):
        (block,) = normalizer.join_fragments([inline("a"), inline("b")])
        assert not block.inline


class TestClean:
    """Tests for per-block clean-up."""

    def test_text_blocks(self, normalizer):
        blocks = [ContentBlock.paragraph("  a &amp;  b \n"), ContentBlock.heading(3, "Tom&nbsp;&amp; Jerry")]
        assert normalizer.clean(blocks) == [ContentBlock.paragraph("a & b"), ContentBlock.heading(3, "Tom & Jerry")]

    def test_blank_blocks_are_dropped(self, normalizer):
        assert normalizer.clean([ContentBlock.paragraph("  \n "), ContentBlock.quote("&nbsp;")]) == []

    def test_code_keeps_raw_text(self, normalizer):
        (block,) = normalizer.clean([ContentBlock.code("\nif x &lt; 1:\n    y()\n\n\n\nz()\n")])
        assert block.content == "\nif x < 1:\n    y()\n\n\n\nz()\n"

    def test_blank_code_is_dropped(self, normalizer):
        assert normalizer.clean([ContentBlock.code(" \n\n ")]) == []

    def test_image_alt(self, normalizer):
        (block,) = normalizer.clean([ContentBlock.image(" /a.png ", "A &amp;  B")])
        assert block == ContentBlock.image("/a.png", "A & B")

    def test_metadata_is_preserved(self, normalizer):
        (block,) = normalizer.clean([ContentBlock.paragraph(" x ", {"bold": True})])
        assert block.metadata == {"bold": True}


class TestFilters:
    """Tests for boilerplate, duplicate and title filtering."""

    @pytest.mark.parametrize(
        "text",
        [
            "Subscribe now",
            "SHARE THIS POST",
            "Copyright 2025 Example Inc.",
            "All rights reserved.",
            "Read our Privacy Policy",
            "5 min read",
            "Menu",
            " search ",
            "<div>",
        ],
    )
    def test_boilerplate(self, normalizer, text):
        assert normalizer.is_boilerplate(text)

    @pytest.mark.parametrize("text", ["The river runs deep.", "Main menu of the restaurant", "Searching for meaning"])
    def test_not_boilerplate(self, normalizer, text):
        assert not normalizer.is_boilerplate(text)

    def test_custom_phrases(self):
        normalizer = TextNormalizer(NormalizerConfig(boilerplate_phrases=["Advertisement"]))
        assert normalizer.is_boilerplate("advertisement")
        assert not normalizer.is_boilerplate("Subscribe")

    def test_images_are_never_boilerplate(self, normalizer):
        image = ContentBlock.image("/subscribe.png", "Subscribe")
        assert normalizer.filter_boilerplate([image]) == [image]

    def test_duplicates_keep_first(self, normalizer):
        blocks = [
            ContentBlock.paragraph("Same text"),
            ContentBlock.paragraph("Other"),
            ContentBlock.heading(2, "Same text"),
            ContentBlock.paragraph("Same text"),
        ]
        assert normalizer.suppress_duplicates(blocks) == blocks[:2]

    def test_title_heading_is_dropped_once(self, normalizer):
        blocks = [
            ContentBlock.heading(1, "Title"),
            ContentBlock.paragraph("Title"),
            ContentBlock.heading(2, "Title"),
        ]
        assert normalizer.drop_title_heading(blocks, "Title") == blocks[1:]

    def test_title_not_present(self, normalizer):
        blocks = [ContentBlock.heading(1, "Other")]
        assert normalizer.drop_title_heading(blocks, "Title") == blocks


class TestNormalize:
    """Tests for the full normalization pipeline."""

    def test_pipeline(self, normalizer):
        blocks = [
            ContentBlock.heading(1, "My Title"),
            inline("Body "),
            inline("text", emphasis=True),
            ContentBlock.line_break(),
            ContentBlock.paragraph("Subscribe to the newsletter"),
            ContentBlock.paragraph("Body   text"),
            ContentBlock.list_item("Point", ordered=False),
        ]
        assert normalizer.normalize(blocks, "My Title") == [
            ContentBlock.paragraph("Body text", {"emphasis": True}),
            ContentBlock.list_item("Point", ordered=False),
        ]

    def test_idempotent(self, normalizer):
        blocks = [inline("a  &amp; b"), ContentBlock.paragraph("a & b"), ContentBlock.quote("Menu")]
        once = normalizer.normalize(blocks)
        assert normalizer.normalize(once) == once

    def test_records_dropped_blocks(self, normalizer):
        blocks = [ContentBlock.paragraph("Keep"), ContentBlock.paragraph("Privacy Policy")]
        with metric_delta(METRICS["blocks_dropped"], reason="boilerplate"):
            normalizer.normalize(blocks)
        with metric_delta(METRICS["blocks_dropped"], 2, reason="duplicate"):
            normalizer.normalize(blocks + [ContentBlock.paragraph("Keep"), ContentBlock.quote("Keep")])


class TestReadingTime:
    """Tests for word counts and reading time."""

    def test_word_count_skips_images(self, normalizer):
        blocks = [ContentBlock.paragraph("one two three"), ContentBlock.image("/a.png", "four five")]
        assert normalizer.word_count(blocks) == 3

    def test_reading_seconds(self, normalizer):
        blocks = [ContentBlock.paragraph(" ".join(["word"] * 250))]
        assert normalizer.reading_seconds(blocks) == pytest.approx(60.0)

    def test_reading_speed_is_configurable(self):
        normalizer = TextNormalizer(NormalizerConfig(words_per_minute=100))
        assert normalizer.reading_seconds([ContentBlock.paragraph("a b c d e")]) == pytest.approx(3.0)

    def test_empty(self, normalizer):
        assert normalizer.reading_seconds([]) == 0
