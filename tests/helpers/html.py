"""
Builders for HTML test documents.
"""

from typing import Optional

# Neutral vocabulary: nothing here may contain a boilerplate phrase
WORDS = (
    "river",
    "stone",
    "garden",
    "lantern",
    "harbor",
    "meadow",
    "violet",
    "copper",
    "window",
    "orchard",
    "falcon",
)


def prose(count: int, seed: int = 0) -> str:
    """A sentence of ``count`` words; different seeds give different sentences."""
    words = [WORDS[(i * (seed + 1) + seed) % len(WORDS)] for i in range(count)]
    return f"Note {seed} " + " ".join(words) + "."


def link_farm(count: int) -> str:
    return "".join(f'<a href="/page/{i}">Related story number {i}</a> ' for i in range(count))


def page(body: str, head: str = "", title: Optional[str] = "Page Title") -> str:
    title_tag = f"<title>{title}</title>" if title is not None else ""
    return f"<!DOCTYPE html><html><head>{title_tag}{head}</head><body>{body}</body></html>"
