"""
Conversion of a main-content subtree into an ordered list of typed blocks.
"""

from __future__ import annotations

from typing import Dict, List, Optional
from urllib.parse import urljoin

from .dom import HtmlDocument, HtmlNode, iter_elements, raw_text, text_content
from .models import ContentBlock

HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
BOLD_TAGS = frozenset({"strong", "b"})
EMPHASIS_TAGS = frozenset({"em", "i"})
CODE_TAGS = frozenset({"pre", "code"})
# Never rendered, so never content
SKIPPED_TAGS = frozenset({"head", "title", "noscript", "template", "svg", "iframe", "canvas", "select", "textarea"})

# Phrasing elements: text inside them continues the surrounding line
INLINE_TAGS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "cite",
        "data",
        "dfn",
        "em",
        "font",
        "i",
        "kbd",
        "label",
        "mark",
        "q",
        "s",
        "samp",
        "small",
        "span",
        "strike",
        "strong",
        "sub",
        "sup",
        "time",
        "tt",
        "u",
        "var",
    }
)


def formatting_flags(node: HtmlNode) -> Dict[str, bool]:
    """``bold``/``emphasis`` flags for a block element, from its descendants."""
    flags: Dict[str, bool] = {}
    for element in iter_elements(node, include_self=False):
        if element.tag in BOLD_TAGS:
            flags["bold"] = True
        elif element.tag in EMPHASIS_TAGS:
            flags["emphasis"] = True
    return flags


class BlockExtractor:
    """
    Walks a subtree in document order and emits content blocks.

    Headings, paragraphs, quotes, list items, code and images become their
    own blocks. Structural wrappers and unknown elements are descended into.
    Bare text runs are emitted as inline paragraph fragments carrying the
    formatting of their ancestors; ``<br>`` and block-level boundaries emit
    line-break markers so the normalizer can re-join fragments that belong to
    the same line.
    """

    def __init__(self, document: HtmlDocument, base_url: Optional[str] = None) -> None:
        self.document = document
        self.base_url = base_url

    def extract(self, node: HtmlNode) -> List[ContentBlock]:
        blocks: List[ContentBlock] = []
        if node.tag is None:
            self._emit_text(node, node, blocks)
            return blocks

        # Iterative pre-order walk; None marks the end of a block-level container
        stack: List[Optional[HtmlNode]] = list(reversed(node.children))
        while stack:
            current = stack.pop()
            if current is None:
                self._end_line(blocks)
            elif current.tag is None:
                self._emit_text(current, node, blocks)
            elif current.tag in INLINE_TAGS:
                stack.extend(reversed(current.children))
            elif not self._emit_block(current, blocks):
                # Block-level container, including structural wrappers such as
                # <section class="chapter">: descend, keeping its text off the neighbours' lines
                self._end_line(blocks)
                stack.append(None)
                stack.extend(reversed(current.children))
        return blocks

    def _emit_block(self, element: HtmlNode, blocks: List[ContentBlock]) -> bool:
        """Emit the blocks of a leaf block element; False for containers to descend into."""
        tag = element.tag

        if tag in SKIPPED_TAGS:
            return True

        if tag == "br":
            blocks.append(ContentBlock.line_break())
            return True

        if tag in HEADING_LEVELS:
            text = text_content(element)
            if text:
                blocks.append(ContentBlock.heading(HEADING_LEVELS[tag], text, formatting_flags(element)))
            return True

        if tag == "p":
            text = text_content(element)
            if text:
                blocks.append(ContentBlock.paragraph(text, formatting_flags(element)))
            self._emit_images(element, blocks)
            return True

        if tag == "blockquote":
            text = text_content(element)
            if text:
                blocks.append(ContentBlock.quote(text, formatting_flags(element)))
            return True

        if tag in ("ul", "ol"):
            for item in element.children:
                if item.tag != "li":
                    continue
                text = text_content(item)
                if text:
                    blocks.append(ContentBlock.list_item(text, tag == "ol", formatting_flags(item)))
            return True

        if tag in CODE_TAGS:
            text = raw_text(element)
            if text.strip():
                blocks.append(ContentBlock.code(text))
            return True

        if tag == "img":
            self._emit_image(element, blocks)
            return True

        return False

    # --- Emitters ---

    def _emit_text(self, node: HtmlNode, scope: HtmlNode, blocks: List[ContentBlock]) -> None:
        if not node.text.strip():
            return
        blocks.append(ContentBlock.paragraph(node.text, self._inherited_flags(node, scope), inline=True))

    def _emit_images(self, element: HtmlNode, blocks: List[ContentBlock]) -> None:
        for image in iter_elements(element, include_self=False):
            if image.tag == "img":
                self._emit_image(image, blocks)

    def _emit_image(self, element: HtmlNode, blocks: List[ContentBlock]) -> None:
        src = (element.get("src") or element.get("data-src") or "").strip()
        if not src:
            return
        if self.base_url and not src.startswith(("http://", "https://", "data:")):
            src = urljoin(self.base_url, src)
        blocks.append(ContentBlock.image(src, element.get("alt")))

    @staticmethod
    def _end_line(blocks: List[ContentBlock]) -> None:
        if blocks and blocks[-1].inline:
            blocks.append(ContentBlock.line_break())

    def _inherited_flags(self, node: HtmlNode, scope: HtmlNode) -> Dict[str, bool]:
        """Formatting of a text run, from its ancestors up to the extraction root."""
        flags: Dict[str, bool] = {}
        for ancestor in self.document.ancestors(node):
            if ancestor.tag in BOLD_TAGS:
                flags["bold"] = True
            elif ancestor.tag in EMPHASIS_TAGS:
                flags["emphasis"] = True
            if ancestor is scope:
                break
        return flags

