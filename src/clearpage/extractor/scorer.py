"""
Article-likelihood scoring for candidate subtrees.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config.config import ScoringConfig, ValidationConfig
from .dom import HtmlNode, inner_html, iter_elements, text_content

HEADER_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


@dataclass(frozen=True, slots=True)
class NodeStats:
    """Measurements of one subtree, gathered in a single walk."""

    text_length: int
    word_count: int
    paragraph_count: int
    header_count: int
    link_count: int
    link_text_length: int
    markup_length: int

    @property
    def text_density(self) -> float:
        if self.markup_length == 0:
            return 0.0
        return self.text_length / self.markup_length

    @property
    def link_ratio(self) -> float:
        if self.text_length == 0:
            return 0.0
        return self.link_text_length / self.text_length


class ContentScorer:
    """
    Scores subtrees by how much they look like article body text.

    ``score = words + 30*paragraphs + 20*headers - 5*links + tag bonus``, with
    subtrees of at most ``min_words`` words scoring 0. Scores are only
    meaningful relative to each other and may be negative.

    ``is_valid_candidate`` applies three gates (length, text density, link
    ratio) that are independent of the score.
    """

    def __init__(
        self,
        scoring: Optional[ScoringConfig] = None,
        validation: Optional[ValidationConfig] = None,
    ) -> None:
        self.scoring = scoring or ScoringConfig()
        self.validation = validation or ValidationConfig()

    def stats(self, node: HtmlNode) -> NodeStats:
        text = text_content(node)
        paragraphs = headers = links = link_text = 0
        for element in iter_elements(node):
            if element.tag == "p":
                paragraphs += 1
            elif element.tag in HEADER_TAGS:
                headers += 1
            elif element.tag == "a":
                links += 1
                link_text += len(text_content(element))
        return NodeStats(
            text_length=len(text),
            word_count=len(text.split()),
            paragraph_count=paragraphs,
            header_count=headers,
            link_count=links,
            link_text_length=link_text,
            markup_length=len(inner_html(node)),
        )

    def tag_bonus(self, tag: Optional[str]) -> float:
        return self.scoring.tag_bonus.get(tag or "", self.scoring.other_tag_bonus)

    def score(self, node: HtmlNode) -> float:
        if node.tag is None:
            return 0.0
        text = text_content(node)
        words = len(text.split())
        if words <= self.scoring.min_words:
            return 0.0

        paragraphs = headers = links = 0
        for element in iter_elements(node):
            if element.tag == "p":
                paragraphs += 1
            elif element.tag in HEADER_TAGS:
                headers += 1
            elif element.tag == "a":
                links += 1

        return (
            words * self.scoring.word_weight
            + paragraphs * self.scoring.paragraph_weight
            + headers * self.scoring.header_weight
            - links * self.scoring.link_penalty
            + self.tag_bonus(node.tag)
        )

    def is_valid_candidate(self, node: HtmlNode) -> bool:
        if node.tag is None:
            return False
        stats = self.stats(node)
        if stats.text_length < self.validation.min_text_length:
            return False
        if stats.text_density < self.validation.min_text_density:
            return False
        return stats.link_ratio <= self.validation.max_link_ratio
