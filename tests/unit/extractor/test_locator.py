"""
Unit tests for MainContentLocator.
"""

import pytest

from clearpage.config import ScoringConfig
from clearpage.errors import NoContentFoundError
from clearpage.extractor.dom import parse, text_content
from clearpage.extractor.locator import MainContentLocator
from clearpage.extractor.models import LocatorStage
from clearpage.extractor.scorer import ContentScorer
from clearpage.extractor.selectors import query_selector
from tests.helpers import link_farm, page, prose

URL = "https://example.com/posts/1"


@pytest.fixture
def locator():
    return MainContentLocator()


class TestSemanticStage:
    """Tests for semantic selector matching."""

    def test_article_is_chosen(self, locator):
        document = parse(page(f"<nav>{link_farm(5)}</nav><article><p>{prose(40)}</p></article>"))
        result = locator.locate(document, URL)
        assert result.stage is LocatorStage.SEMANTIC
        assert result.node.tag == "article"
        assert result.document is document
        assert result.confident

    def test_invalid_match_is_skipped(self, locator):
        html = page(f"<article>{link_farm(10)}</article><main><p>{prose(40)}</p></main>")
        result = locator.locate(parse(html), URL)
        assert result.stage is LocatorStage.SEMANTIC
        assert result.node.tag == "main"

    def test_class_selector(self, locator):
        html = page(f'<div class="entry-content"><p>{prose(40)}</p></div><div>{prose(3)}</div>')
        result = locator.locate(parse(html), URL)
        assert result.node.get("class") == "entry-content"


class TestDensityStage:
    """Tests for the score-based fallback."""

    def test_highest_scoring_div(self, locator):
        html = page(f'<div id="a">{link_farm(3)}</div><div id="b"><p>{prose(60, 1)}</p><p>{prose(60, 2)}</p></div>')
        result = locator.locate(parse(html), URL)
        assert result.stage is LocatorStage.DENSITY
        assert result.node.element_id == "b"
        assert not result.confident

    def test_ties_keep_the_first(self):
        scorer = ContentScorer(ScoringConfig(other_tag_bonus=-100))
        locator = MainContentLocator(scorer)
        document = parse(f'<section><div id="x">{prose(20, 1)}</div><div id="y">{prose(20, 2)}</div></section>')
        winner = locator.by_density(query_selector(document.root, "section"))
        assert winner.element_id == "x"

    def test_nothing_scores(self, locator):
        document = parse(f"<div>{prose(2)}</div>")
        assert locator.by_density(document.root) is None


class TestDynamicStage:
    """Tests for dynamic-content detection."""

    def test_used_when_density_winner_is_small(self, locator):
        html = page(
            f'<section data-content="1">{prose(28, 1)}</section>'
            f"<div><p>{prose(6, 2)}</p><p>{prose(6, 3)}</p></div>"
            f"<nav>{link_farm(20)}</nav>"
        )
        result = locator.locate(parse(html), URL)
        assert result.stage is LocatorStage.DYNAMIC
        assert result.node.tag == "section"

    def test_long_elements_are_candidates(self, locator):
        long_text = " ".join(prose(12, seed) for seed in range(20))
        document = parse(f"<body><span>{long_text}</span></body>")
        node = locator.by_dynamic_content(document)
        assert node is not None
        assert len(text_content(node)) > 1000


class TestFallbacks:
    """Tests for best-effort results and failure."""

    def test_first_semantic_match(self, locator):
        document = parse(page("<article><h1>T</h1><p>A</p><p>B</p></article>"))
        result = locator.locate(document, URL)
        assert result.stage is LocatorStage.BEST_EFFORT
        assert result.node.tag == "article"

    def test_body(self, locator):
        result = locator.locate(parse(page("<div>short text</div>")), URL)
        assert result.stage is LocatorStage.BEST_EFFORT
        assert result.node.tag == "body"

    def test_empty_body_raises(self, locator):
        with pytest.raises(NoContentFoundError) as exc_info:
            locator.locate(parse(page("<div><img src='a.png'></div>")), URL)
        assert exc_info.value.url == URL


class TestSiteRuleStage:
    """Tests for site-rule precedence and stripping."""

    def test_rule_beats_valid_semantic_match(self, locator):
        html = page(
            f"<article><p>{prose(50, 1)}</p></article>"
            f'<table><tr><td><img src="nav.gif"></td><td><font face="Verdana">{prose(5, 2)}</font></td></tr></table>'
        )
        result = locator.locate(parse(html), "http://www.paulgraham.com/essay.html")
        assert result.stage is LocatorStage.SITE_RULE
        assert result.rule.name == "paulgraham"
        assert result.node.tag == "font"
        assert text_content(result.node) == prose(5, 2)

    def test_strip_selectors_prune_a_copy(self, locator):
        html = page(f"<article><nav>{link_farm(3)}</nav><p>{prose(30)}</p><button>Next</button></article>")
        document = parse(html)
        result = locator.locate(document, "https://stripe.press/books/1")
        assert result.stage is LocatorStage.SITE_RULE
        assert result.document is not document
        assert text_content(result.node) == prose(30)
        assert "Related story" in text_content(query_selector(document.root, "article"))

    def test_rule_without_match_falls_through(self, locator):
        html = page(f'<div class="content"><p>{prose(40)}</p></div>')
        result = locator.locate(parse(html), "https://gwern.net/essay")
        assert result.stage is LocatorStage.SEMANTIC
        assert result.rule.name == "gwern"
