"""
Unit tests for ContentBlock and ExtractedArticle.
"""

import pytest

from clearpage.extractor.models import BlockType, ContentBlock, ExtractedArticle


def article(blocks=(), seconds=0.0, **kwargs):
    return ExtractedArticle(title=kwargs.pop("title", "Title"), blocks=tuple(blocks), estimated_reading_seconds=seconds, **kwargs)


class TestContentBlock:
    """Tests for block construction and validation."""

    def test_constructors(self):
        assert ContentBlock.heading(2, "h").level == 2
        assert ContentBlock.list_item("x", True).ordered is True
        assert ContentBlock.image("/a.png", "alt").alt == "alt"
        assert ContentBlock.code("x").type is BlockType.CODE

    @pytest.mark.parametrize("level", [0, 7, None])
    def test_heading_level_range(self, level):
        with pytest.raises(ValueError):
            ContentBlock(BlockType.HEADING, "h", level=level)

    def test_list_needs_ordered(self):
        with pytest.raises(ValueError):
            ContentBlock(BlockType.LIST, "x")

    def test_empty_content(self):
        with pytest.raises(ValueError):
            ContentBlock.paragraph("")
        assert ContentBlock.image("").content == ""

    def test_frozen(self):
        block = ContentBlock.paragraph("x")
        with pytest.raises(AttributeError):
            block.content = "y"

    def test_metadata_is_copied(self):
        flags = {"bold": True}
        block = ContentBlock.paragraph("x", flags)
        flags["bold"] = False
        assert block.metadata == {"bold": True}

    def test_inline_does_not_affect_equality(self):
        assert ContentBlock.paragraph("x", inline=True) == ContentBlock.paragraph("x")

    def test_line_break(self):
        block = ContentBlock.line_break()
        assert block.is_break
        assert not ContentBlock.paragraph("x").is_break

    def test_with_content(self):
        block = ContentBlock.heading(3, "old", {"bold": True}).with_content("new")
        assert block == ContentBlock.heading(3, "new", {"bold": True})

    def test_to_text(self):
        assert ContentBlock.heading(2, "Head").to_text() == "\nHead\n"
        assert ContentBlock.quote("Said").to_text() == '"Said"'
        assert ContentBlock.list_item("Item", False).to_text() == "• Item"
        assert ContentBlock.image("/a.png", "Alt").to_text() == "Alt"
        assert ContentBlock.image("/a.png").to_text() == ""

    def test_to_dict(self):
        assert ContentBlock.heading(2, "Head", {"bold": True}).to_dict() == {
            "type": "heading",
            "content": "Head",
            "level": 2,
            "metadata": {"bold": True},
        }
        assert ContentBlock.image("/a.png").to_dict() == {"type": "image", "content": "/a.png", "alt": None}
        assert ContentBlock.list_item("x", True).to_dict() == {"type": "list", "content": "x", "ordered": True}


class TestExtractedArticle:
    """Tests for the article result."""

    def test_validation(self):
        with pytest.raises(ValueError):
            article(title="")
        with pytest.raises(ValueError):
            article(seconds=-1)

    def test_word_count_skips_images(self):
        blocks = [ContentBlock.paragraph("one two"), ContentBlock.image("/a.png", "three four"), ContentBlock.code("x = 1")]
        assert article(blocks).word_count == 5

    @pytest.mark.parametrize("seconds,minutes", [(0, 1), (30, 1), (60, 1), (61, 2), (600, 10)])
    def test_reading_minutes(self, seconds, minutes):
        assert article(seconds=seconds).reading_minutes == minutes

    def test_text_content(self):
        blocks = [
            ContentBlock.paragraph("Intro"),
            ContentBlock.heading(2, "Part"),
            ContentBlock.list_item("Item", False),
        ]
        assert article(blocks).text_content == "Intro\n\nPart\n\n• Item"

    def test_to_dict(self):
        data = article([ContentBlock.paragraph("x")], 1.5, author="A", source_url="https://e.com").to_dict()
        assert data["title"] == "Title"
        assert data["author"] == "A"
        assert data["site_name"] is None
        assert data["estimated_reading_seconds"] == 1.5
        assert data["blocks"] == [{"type": "paragraph", "content": "x"}]
