"""
Minimal HTML tree model.

The parser makes a single left-to-right pass over the markup after script,
style and comment sections have been cut out. It never fails on unbalanced or
missing closing tags; those are normal on the web. Nodes are stored in an
arena owned by :class:`HtmlDocument`; a node refers to its parent only by
index, so the tree has no reference cycles.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Collection, Dict, Iterator, List, Optional

import structlog

from ..errors import InputTooLargeError, MalformedInputError

logger = structlog.get_logger(__name__)

ROOT_TAG = "#document"

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose body is never content and is removed before tokenizing
RAW_TEXT_ELEMENTS = ("script", "style")

# Elements inside which whitespace-only text runs are significant
PREFORMATTED_ELEMENTS = frozenset({"pre", "textarea"})

_TAG_RE = re.compile(r"""<(/?)([A-Za-z][A-Za-z0-9:_-]*)((?:[^>"']|"[^"]*"|'[^']*')*)>""")
# Fallback for tags with an unbalanced quote inside
_LOOSE_TAG_RE = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9:_-]*)([^>]*)>")
_ATTR_RE = re.compile(r"""([^\s"'=<>/`]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?""")
_TAG_NAME_END = frozenset(" \t\n\r\f/>")

_NO_SPACE_BEFORE = frozenset(".,;:!?)]}%")
_NO_SPACE_AFTER = frozenset("([{$")


@dataclass(eq=False)
class HtmlNode:
    """A node of the parsed tree: an element (``tag`` set) or a text run (``tag`` is None)."""

    node_id: int
    tag: Optional[str] = None
    text: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[HtmlNode] = field(default_factory=list)
    parent_id: Optional[int] = None
    depth: int = 0

    @property
    def is_element(self) -> bool:
        return self.tag is not None

    @property
    def is_text(self) -> bool:
        return self.tag is None

    @property
    def classes(self) -> List[str]:
        return self.attributes.get("class", "").split()

    @property
    def element_id(self) -> Optional[str]:
        return self.attributes.get("id")

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def element_children(self) -> List[HtmlNode]:
        return [child for child in self.children if child.tag is not None]

    def __repr__(self) -> str:
        if self.tag is None:
            preview = self.text.strip()[:30]
            return f"<HtmlNode #{self.node_id} text={preview!r}>"
        return f"<HtmlNode #{self.node_id} {self.tag} attrs={self.attributes!r}>"


class HtmlDocument:
    """Arena owning every node of one parsed document."""

    def __init__(self, root: HtmlNode, nodes: List[HtmlNode]) -> None:
        self.root = root
        self._nodes = nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, node_id: int) -> HtmlNode:
        return self._nodes[node_id]

    def parent(self, node: HtmlNode) -> Optional[HtmlNode]:
        if node.parent_id is None:
            return None
        return self._nodes[node.parent_id]

    def ancestors(self, node: HtmlNode) -> Iterator[HtmlNode]:
        """Yield the parent chain of ``node``, nearest first."""
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    @property
    def body(self) -> Optional[HtmlNode]:
        for node in iter_elements(self.root):
            if node.tag == "body":
                return node
        return None

    def clone(self, node: HtmlNode, exclude: Collection[HtmlNode] = ()) -> HtmlDocument:
        """Deep-copy the subtree under ``node`` into a new document, leaving out ``exclude`` subtrees.

        ``node`` itself is always copied, even when it appears in ``exclude``.
        """
        excluded = {id(n) for n in exclude if n is not node}
        nodes: List[HtmlNode] = []

        def copy(source: HtmlNode, parent_id: Optional[int], depth: int) -> HtmlNode:
            duplicate = HtmlNode(
                node_id=len(nodes),
                tag=source.tag,
                text=source.text,
                attributes=dict(source.attributes),
                parent_id=parent_id,
                depth=depth,
            )
            nodes.append(duplicate)
            return duplicate

        root = copy(node, None, 0)
        stack = [(node, root)]
        while stack:
            source, target = stack.pop()
            for child in source.children:
                if id(child) in excluded:
                    continue
                duplicate = copy(child, target.node_id, target.depth + 1)
                target.children.append(duplicate)
                stack.append((child, duplicate))
        return HtmlDocument(root, nodes)


# --- Traversal helpers ---


def iter_nodes(node: HtmlNode, include_self: bool = True) -> Iterator[HtmlNode]:
    """Pre-order traversal without recursion."""
    stack = [node] if include_self else list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        if current.children:
            stack.extend(reversed(current.children))


def iter_elements(node: HtmlNode, include_self: bool = True) -> Iterator[HtmlNode]:
    for current in iter_nodes(node, include_self):
        if current.tag is not None:
            yield current


def join_text(pieces: List[str]) -> str:
    """Join text runs the way a reader would see them.

    Whitespace-only runs are dropped while parsing, so adjacent runs get a
    separating space unless punctuation makes it wrong.
    """
    parts: List[str] = []
    previous = ""
    for piece in pieces:
        if not piece:
            continue
        if parts and not previous[-1:].isspace() and not piece[:1].isspace():
            if piece[0] not in _NO_SPACE_BEFORE and previous[-1] not in _NO_SPACE_AFTER:
                parts.append(" ")
        parts.append(piece)
        previous = piece
    return "".join(parts)


def text_content(node: HtmlNode) -> str:
    """Visible text of the subtree with whitespace collapsed."""
    if node.tag is None:
        return " ".join(node.text.split())
    pieces = [n.text for n in iter_nodes(node) if n.tag is None]
    return " ".join(join_text(pieces).split())


def raw_text(node: HtmlNode) -> str:
    """Text of the subtree exactly as written, for preformatted content."""
    return "".join(n.text for n in iter_nodes(node) if n.tag is None)


def _serialize_start(node: HtmlNode) -> str:
    attrs = "".join(f' {name}="{value}"' for name, value in node.attributes.items())
    return f"<{node.tag}{attrs}>"


def inner_html(node: HtmlNode) -> str:
    """Serialize the children of ``node`` back to markup."""
    out: List[str] = []
    stack: List[tuple[HtmlNode, bool]] = [(child, False) for child in reversed(node.children)]
    while stack:
        current, closing = stack.pop()
        if closing:
            out.append(f"</{current.tag}>")
            continue
        if current.tag is None:
            out.append(current.text)
            continue
        out.append(_serialize_start(current))
        if current.tag in VOID_ELEMENTS:
            continue
        stack.append((current, True))
        stack.extend((child, False) for child in reversed(current.children))
    return "".join(out)


# --- Pre-tokenizing clean-up ---


def _find_tag_end(html: str, start: int) -> int:
    match = _TAG_RE.match(html, start) or _LOOSE_TAG_RE.match(html, start)
    if match:
        return match.end()
    end = html.find(">", start)
    return -1 if end == -1 else end + 1


def _raw_text_element_at(lowered: str, index: int) -> Optional[str]:
    for name in RAW_TEXT_ELEMENTS:
        if lowered.startswith(name, index + 1):
            after = index + 1 + len(name)
            if after >= len(lowered) or lowered[after] in _TAG_NAME_END:
                return name
    return None


def _find_closing_tag(lowered: str, name: str, start: int) -> int:
    """Return the index just past ``</name>`` at or after ``start``, or the end of input."""
    closing = "</" + name
    position = start
    while True:
        found = lowered.find(closing, position)
        if found == -1:
            return len(lowered)
        after = found + len(closing)
        if after >= len(lowered) or lowered[after] in _TAG_NAME_END:
            end = lowered.find(">", after)
            return len(lowered) if end == -1 else end + 1
        position = after


def strip_non_content(html: str) -> str:
    """Remove comments and ``<script>``/``<style>`` sections.

    Each section ends at the literal closing-tag text, so markup inside a
    script string (``"</div>"``, ``"<!--"``) never confuses the tokenizer. An
    unterminated section swallows the rest of the input.
    """
    lowered = html.lower()
    out: List[str] = []
    position = 0
    length = len(html)

    while position < length:
        lt = html.find("<", position)
        if lt == -1:
            out.append(html[position:])
            break
        out.append(html[position:lt])

        if html.startswith("<!--", lt):
            end = html.find("-->", lt + 4)
            position = length if end == -1 else end + 3
            continue

        name = _raw_text_element_at(lowered, lt)
        if name is not None:
            open_end = _find_tag_end(html, lt)
            if open_end == -1:
                position = length
            elif html[lt:open_end].rstrip(">").rstrip().endswith("/"):
                position = open_end
            else:
                position = _find_closing_tag(lowered, name, open_end)
            continue

        out.append("<")
        position = lt + 1

    return "".join(out)


# --- Parser ---


def parse_attributes(source: str) -> Dict[str, str]:
    """Parse ``key="value"``/``key='value'`` pairs; unparseable fragments are skipped."""
    attributes: Dict[str, str] = {}
    for match in _ATTR_RE.finditer(source):
        name = match.group(1).lower()
        if name in attributes:
            continue
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attributes[name] = value
    return attributes


class HtmlTreeBuilder:
    """Builds an :class:`HtmlDocument` from markup, enforcing node and depth caps."""

    def __init__(self, max_nodes: int = 5_000, max_depth: int = 500) -> None:
        self.max_nodes = max_nodes
        self.max_depth = max_depth

    def parse(self, html: str) -> HtmlDocument:
        cleaned = strip_non_content(html)
        if not cleaned.strip():
            raise MalformedInputError("HTML is empty after removing scripts, styles and comments")

        nodes: List[HtmlNode] = []
        root = HtmlNode(node_id=0, tag=ROOT_TAG)
        nodes.append(root)
        stack: List[HtmlNode] = [root]
        pending: List[str] = []
        preformatted = 0

        def new_node(**kwargs) -> HtmlNode:
            if len(nodes) >= self.max_nodes:
                raise InputTooLargeError(
                    f"Document has more than {self.max_nodes} nodes", limit=self.max_nodes
                )
            parent = stack[-1]
            node = HtmlNode(node_id=len(nodes), parent_id=parent.node_id, depth=parent.depth + 1, **kwargs)
            nodes.append(node)
            parent.children.append(node)
            return node

        def flush_text() -> None:
            if not pending:
                return
            text = "".join(pending)
            pending.clear()
            if text.strip() or (preformatted and text):
                new_node(text=text)

        position = 0
        length = len(cleaned)
        while position < length:
            lt = cleaned.find("<", position)
            if lt == -1:
                pending.append(cleaned[position:])
                break
            if lt > position:
                pending.append(cleaned[position:lt])

            match = _TAG_RE.match(cleaned, lt) or _LOOSE_TAG_RE.match(cleaned, lt)
            if match is None:
                if cleaned.startswith("<!", lt) or cleaned.startswith("<?", lt):
                    # Doctype, CDATA marker or processing instruction
                    end = cleaned.find(">", lt)
                    position = length if end == -1 else end + 1
                else:
                    pending.append("<")
                    position = lt + 1
                continue

            flush_text()
            position = match.end()
            closing, name, attr_source = match.group(1), match.group(2).lower(), match.group(3)

            if closing:
                for index in range(len(stack) - 1, 0, -1):
                    if stack[index].tag == name:
                        for popped in stack[index:]:
                            if popped.tag in PREFORMATTED_ELEMENTS:
                                preformatted -= 1
                        del stack[index:]
                        break
                # A closer with no matching open element is ignored
                continue

            self_closing = attr_source.rstrip().endswith("/")
            if self_closing:
                attr_source = attr_source.rstrip()[:-1]
            node = new_node(tag=name, attributes=parse_attributes(attr_source))
            if name in VOID_ELEMENTS or self_closing:
                continue
            if len(stack) > self.max_depth:
                raise InputTooLargeError(
                    f"Document nesting exceeds {self.max_depth} levels", limit=self.max_depth
                )
            stack.append(node)
            if name in PREFORMATTED_ELEMENTS:
                preformatted += 1

        flush_text()
        logger.debug("Parsed HTML", nodes=len(nodes), input_length=len(html))
        return HtmlDocument(root, nodes)


def parse(html: str, max_nodes: int = 5_000, max_depth: int = 500) -> HtmlDocument:
    """Parse ``html`` into a document tree."""
    return HtmlTreeBuilder(max_nodes=max_nodes, max_depth=max_depth).parse(html)
