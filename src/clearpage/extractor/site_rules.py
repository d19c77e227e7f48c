"""
Site-specific overrides for main-content detection.

Adding a site is a data change: append a :class:`SiteRule` to ``SITE_RULES``.
Rules are trusted, so a rule match skips the generic validity gates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from urllib.parse import urlparse


@dataclass(frozen=True)
class SiteRule:
    """Content selectors, strip selectors and fixed metadata for one site."""

    name: str
    hosts: Tuple[str, ...]
    content_selectors: Tuple[str, ...]
    strip_selectors: Tuple[str, ...] = ()
    author: Optional[str] = None
    site_name: Optional[str] = None

    def matches_host(self, host: str) -> bool:
        host = host.lower().rstrip(".")
        return any(host == suffix or host.endswith("." + suffix) for suffix in self.hosts)


SITE_RULES: Tuple[SiteRule, ...] = (
    SiteRule(
        name="paulgraham",
        hosts=("paulgraham.com",),
        # Essays sit in a <font> inside the layout table; the first cells hold navigation images.
        content_selectors=("font[face*=verdana]", "font", "td"),
        author="Paul Graham",
        site_name="Paul Graham",
    ),
    SiteRule(
        name="stripe_press",
        hosts=("stripe.press",),
        content_selectors=(
            ".chapter-content",
            ".content-section",
            ".text-content",
            ".chapter-text",
            ".chapter",
            "article",
            "main",
        ),
        strip_selectors=("nav", "footer", "button"),
        site_name="Stripe Press",
    ),
    SiteRule(
        name="substack",
        hosts=("substack.com", "latent.space"),
        content_selectors=(
            ".available-content",
            ".body.markup",
            ".substack-post-content",
            ".post-content",
            "article.post",
        ),
        strip_selectors=(
            "div[class*=share]",
            "button",
            "div[class*=subscription]",
            "div[class*=subscribe]",
            "div[class*=comment]",
            "div.author-bio",
            "div[class*=footer]",
            "div[class*=social]",
        ),
    ),
    SiteRule(
        name="gwern",
        hosts=("gwern.net",),
        content_selectors=("#markdownBody", ".markdownBody", "article", "main"),
        strip_selectors=("#sidebar", "#footer", "nav"),
        author="Gwern Branwen",
        site_name="Gwern.net",
    ),
)


def host_of(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def find_rule(url: str, rules: Sequence[SiteRule] = SITE_RULES) -> Optional[SiteRule]:
    """Return the first rule whose hosts match the host of ``url``."""
    host = host_of(url)
    if not host:
        return None
    for rule in rules:
        if rule.matches_host(host):
            return rule
    return None
