"""
A small CSS-like selector language over :mod:`clearpage.extractor.dom` trees.

Supported forms, combinable into one compound selector:

* ``tag`` or ``*``
* ``.class``  - some class token contains ``class`` as a substring
* ``#id``     - exact id
* ``[attr]``, ``[attr=value]``, ``[attr*=value]`` (``*=`` ignores case)

A comma-separated list is the union of its parts. Combinators (descendant,
child, sibling) and pseudo-classes are not supported and raise ``ValueError``.
Matching never mutates the tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

from .dom import HtmlNode, iter_elements

_TAG_RE = re.compile(r"\*|[A-Za-z][A-Za-z0-9_-]*")
_CLASS_RE = re.compile(r"\.([A-Za-z0-9_-]+)")
_ID_RE = re.compile(r"#([A-Za-z0-9_:-]+)")
_ATTR_RE = re.compile(
    r"""\[\s*([A-Za-z_:][A-Za-z0-9_:.-]*)\s*(?:(\*?=)\s*(?:"([^"]*)"|'([^']*)'|([^\]\s]*))\s*)?\]"""
)


@dataclass(frozen=True)
class AttributeCondition:
    name: str
    operator: Optional[str] = None
    value: str = ""

    def matches(self, node: HtmlNode) -> bool:
        actual = node.attributes.get(self.name)
        if actual is None:
            return False
        if self.operator is None:
            return True
        if self.operator == "=":
            return actual == self.value
        return self.value.lower() in actual.lower()


@dataclass(frozen=True)
class SimpleSelector:
    """One compound selector such as ``div.post-content[role=main]``."""

    tag: Optional[str] = None
    classes: Tuple[str, ...] = ()
    element_id: Optional[str] = None
    attributes: Tuple[AttributeCondition, ...] = ()

    def matches(self, node: HtmlNode) -> bool:
        if node.tag is None or node.tag.startswith("#"):
            return False
        if self.tag is not None and self.tag != "*" and node.tag != self.tag:
            return False
        if self.element_id is not None and node.attributes.get("id") != self.element_id:
            return False
        if self.classes:
            tokens = node.classes
            for wanted in self.classes:
                if not any(wanted in token for token in tokens):
                    return False
        return all(condition.matches(node) for condition in self.attributes)


def _parse_compound(source: str, full: str) -> SimpleSelector:
    position = 0
    tag = None
    match = _TAG_RE.match(source)
    if match:
        tag = match.group(0).lower()
        position = match.end()

    classes: List[str] = []
    element_id = None
    attributes: List[AttributeCondition] = []
    while position < len(source):
        if match := _CLASS_RE.match(source, position):
            classes.append(match.group(1))
        elif match := _ID_RE.match(source, position):
            element_id = match.group(1)
        elif match := _ATTR_RE.match(source, position):
            value = next((g for g in match.group(3, 4, 5) if g is not None), "")
            attributes.append(AttributeCondition(match.group(1).lower(), match.group(2), value))
        else:
            raise ValueError(f"Unsupported selector: {full!r}")
        position = match.end()

    return SimpleSelector(tag, tuple(classes), element_id, tuple(attributes))


@lru_cache(maxsize=256)
def parse_selector(selector: str) -> Tuple[SimpleSelector, ...]:
    """Parse a comma-separated selector list."""
    parts = [part.strip() for part in selector.split(",")]
    if not parts or any(not part for part in parts):
        raise ValueError(f"Empty selector in {selector!r}")
    return tuple(_parse_compound(part, selector) for part in parts)


def matches(node: HtmlNode, selector: str) -> bool:
    return any(simple.matches(node) for simple in parse_selector(selector))


def query_selector_all(root: HtmlNode, selector: str) -> List[HtmlNode]:
    """All elements under ``root`` (inclusive) matching ``selector``, in document order."""
    compiled = parse_selector(selector)
    return [node for node in iter_elements(root) if any(simple.matches(node) for simple in compiled)]


def query_selector(root: HtmlNode, selector: str) -> Optional[HtmlNode]:
    """First element under ``root`` (inclusive) matching ``selector``, in document order."""
    compiled = parse_selector(selector)
    for node in iter_elements(root):
        if any(simple.matches(node) for simple in compiled):
            return node
    return None
