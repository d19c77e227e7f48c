"""
Main-content detection.

Stages, in order, stopping at the first that yields a node:

1. site rule for the URL host (trusted, no validity gates)
2. semantic selectors, first match passing ``is_valid_candidate``
3. highest-scoring element under ``<body>``
4. dynamic-content candidates, tried when the stage 3 winner is implausibly small

When nothing validates, the stage 3 winner is used, then the first non-empty
semantic match, then ``<body>`` itself. An empty body raises
:class:`NoContentFoundError`.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import structlog

from ..config.config import ValidationConfig
from ..errors import NoContentFoundError
from .dom import HtmlDocument, HtmlNode, iter_elements, text_content
from .models import LocatorResult, LocatorStage
from .scorer import ContentScorer
from .selectors import query_selector_all
from .site_rules import SITE_RULES, SiteRule, find_rule

logger = structlog.get_logger(__name__)

SEMANTIC_SELECTORS = (
    "article",
    "[role=article]",
    "[role=main]",
    "main",
    ".post-content",
    ".article-content",
    ".entry-content",
    "#article-content",
    "#post-content",
    ".content",
)

DYNAMIC_SELECTORS = (
    "[data-content]",
    "[data-text-content]",
    "[data-article]",
    ".dynamic-content",
    ".lazy-content",
)


class MainContentLocator:
    """Picks the subtree holding the article body."""

    def __init__(
        self,
        scorer: Optional[ContentScorer] = None,
        rules: Sequence[SiteRule] = SITE_RULES,
        validation: Optional[ValidationConfig] = None,
    ) -> None:
        self.scorer = scorer or ContentScorer(validation=validation)
        self.validation = validation or self.scorer.validation
        self.rules = rules
        self.logger = logger.bind(component="MainContentLocator")

    def locate(self, document: HtmlDocument, url: str) -> LocatorResult:
        rule = find_rule(url, self.rules)
        if rule is not None:
            result = self.by_site_rule(document, rule)
            if result is not None:
                return result
            self.logger.debug("Site rule matched no content", rule=rule.name, url=url)

        node, first_match = self.by_semantic_selectors(document)
        if node is not None:
            return LocatorResult(node, document, LocatorStage.SEMANTIC, rule)

        body = document.body or document.root
        winner = self.by_density(body)
        if winner is None or len(text_content(winner)) < self.validation.min_text_length:
            dynamic = self.by_dynamic_content(document)
            if dynamic is not None:
                return LocatorResult(dynamic, document, LocatorStage.DYNAMIC, rule)

        if winner is not None:
            return LocatorResult(winner, document, LocatorStage.DENSITY, rule)
        if first_match is not None:
            return LocatorResult(first_match, document, LocatorStage.BEST_EFFORT, rule)
        if text_content(body):
            return LocatorResult(body, document, LocatorStage.BEST_EFFORT, rule)

        raise NoContentFoundError("Document body holds no content", url=url)

    # --- Stages ---

    def by_site_rule(self, document: HtmlDocument, rule: SiteRule) -> Optional[LocatorResult]:
        for selector in rule.content_selectors:
            for node in query_selector_all(document.root, selector):
                if not text_content(node):
                    continue
                stripped = self._strip_matches(node, rule.strip_selectors)
                clone = document.clone(node, exclude=stripped)
                self.logger.debug(
                    "Site rule selector matched", rule=rule.name, selector=selector, stripped=len(stripped)
                )
                return LocatorResult(clone.root, clone, LocatorStage.SITE_RULE, rule)
        return None

    def by_semantic_selectors(self, document: HtmlDocument) -> Tuple[Optional[HtmlNode], Optional[HtmlNode]]:
        """Return the first valid semantic match and the first non-empty one."""
        first_match = None
        for selector in SEMANTIC_SELECTORS:
            for node in query_selector_all(document.root, selector):
                if first_match is None and text_content(node):
                    first_match = node
                if self.scorer.is_valid_candidate(node):
                    self.logger.debug("Semantic selector matched", selector=selector)
                    return node, first_match
        return None, first_match

    def by_density(self, body: HtmlNode) -> Optional[HtmlNode]:
        best: Optional[HtmlNode] = None
        best_score = 0.0
        for element in iter_elements(body):
            score = self.scorer.score(element)
            if score > best_score:
                best, best_score = element, score
        if best is not None:
            self.logger.debug("Density winner", tag=best.tag, score=best_score)
        return best

    def by_dynamic_content(self, document: HtmlDocument) -> Optional[HtmlNode]:
        candidates: List[HtmlNode] = []
        seen = set()
        for selector in DYNAMIC_SELECTORS:
            for node in query_selector_all(document.root, selector):
                if node.node_id not in seen:
                    seen.add(node.node_id)
                    candidates.append(node)
        for node in iter_elements(document.root, include_self=False):
            if node.node_id not in seen and len(text_content(node)) > self.validation.dynamic_min_text_length:
                seen.add(node.node_id)
                candidates.append(node)

        for node in candidates:
            if self.scorer.is_valid_candidate(node):
                self.logger.debug("Dynamic content matched", tag=node.tag)
                return node
        return None

    @staticmethod
    def _strip_matches(node: HtmlNode, selectors: Sequence[str]) -> List[HtmlNode]:
        stripped: List[HtmlNode] = []
        for selector in selectors:
            stripped.extend(match for match in query_selector_all(node, selector) if match is not node)
        return stripped
