"""DomNode, ComputedStyle and BoundingBox dataclasses plus the Document container.

Rules only touch the capability surface described by ``ElementLike``; any host
document model exposing the same methods can be scanned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Protocol, Union, runtime_checkable


@dataclass(frozen=True)
class ComputedStyle:
    # Values are kept in the string form a browser's getComputedStyle() reports.
    display: str = "inline"
    visibility: str = "visible"
    opacity: str = "1"
    background_color: str = "rgba(0, 0, 0, 0)"
    color: str = "rgb(0, 0, 0)"
    font_size: str = "16px"
    font_weight: str = "400"
    text_decoration: str = "none"
    cursor: str = "auto"
    border_style: str = "none"
    border_width: str = "0px"

    @property
    def has_border(self) -> bool:
        if self.border_style in ("", "none", "hidden"):
            return False
        return _px(self.border_width) > 0


@dataclass(frozen=True)
class BoundingBox:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


def _px(value: str) -> float:
    try:
        return float(value.strip().removesuffix("px") or 0)
    except ValueError:
        return 0.0


@runtime_checkable
class ElementLike(Protocol):
    """Capability interface the detection rules rely on."""

    tag: str
    attrs: dict[str, str]
    style: ComputedStyle
    box: BoundingBox

    @property
    def parent(self) -> "ElementLike | None": ...

    @property
    def text_content(self) -> str: ...

    def attr(self, name: str) -> str: ...

    def has_attr(self, name: str) -> bool: ...

    def descendants(self) -> Iterator["ElementLike"]: ...

    def contains(self, other: "ElementLike") -> bool: ...


@dataclass(eq=False)
class DomNode:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    style: ComputedStyle = field(default_factory=ComputedStyle)
    box: BoundingBox = field(default_factory=BoundingBox)
    # Text fragments and child elements, in document order
    content: list[Union[str, "DomNode"]] = field(default_factory=list)
    parent: DomNode | None = field(default=None, repr=False)

    # ── Tree construction ──────────────────────────────────────────────

    def append(self, item: str | DomNode) -> None:
        if isinstance(item, DomNode):
            item.parent = self
        self.content.append(item)

    # ── Attributes ─────────────────────────────────────────────────────

    def attr(self, name: str) -> str:
        """Attribute value, or "" when absent."""
        return self.attrs.get(name, "") or ""

    def has_attr(self, name: str) -> bool:
        return name in self.attrs

    @property
    def classes(self) -> list[str]:
        return self.attr("class").split()

    # ── Text ───────────────────────────────────────────────────────────

    @property
    def text_content(self) -> str:
        parts: list[str] = []
        for item in self.content:
            if isinstance(item, str):
                parts.append(item)
            else:
                parts.append(item.text_content)
        return "".join(parts)

    # ── Traversal ──────────────────────────────────────────────────────

    @property
    def children(self) -> list[DomNode]:
        return [item for item in self.content if isinstance(item, DomNode)]

    def descendants(self) -> Iterator[DomNode]:
        """Depth-first, document-order walk excluding self."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, pred: Callable[[DomNode], bool]) -> list[DomNode]:
        return [n for n in self.descendants() if pred(n)]

    def ancestors(self) -> Iterator[DomNode]:
        cur = self.parent
        while cur is not None:
            yield cur
            cur = cur.parent

    def closest(self, tag: str) -> DomNode | None:
        """Nearest inclusive ancestor with the given tag name."""
        if self.tag == tag:
            return self
        for anc in self.ancestors():
            if anc.tag == tag:
                return anc
        return None

    def contains(self, other: DomNode) -> bool:
        """True if other is self or lies in self's subtree."""
        if other is self:
            return True
        return any(anc is self for anc in other.ancestors())

    @property
    def next_element_sibling(self) -> DomNode | None:
        return self._sibling(1)

    @property
    def previous_element_sibling(self) -> DomNode | None:
        return self._sibling(-1)

    def _sibling(self, step: int) -> DomNode | None:
        if self.parent is None:
            return None
        siblings = self.parent.children
        for i, node in enumerate(siblings):
            if node is self:
                j = i + step
                return siblings[j] if 0 <= j < len(siblings) else None
        return None

    def __repr__(self) -> str:
        ident = f"#{self.attrs['id']}" if self.attrs.get("id") else ""
        cls = "".join(f".{c}" for c in self.classes)
        return f"<{self.tag}{ident}{cls}>"


class Document:
    """A parsed page: root <html> node, <body> and the source URL."""

    def __init__(self, root: DomNode, url: str = "") -> None:
        self.root = root
        self.url = url
        body = root if root.tag == "body" else next(
            (n for n in root.descendants() if n.tag == "body"), None,
        )
        self.body = body if body is not None else root

    def query(self, pred: Callable[[DomNode], bool]) -> list[DomNode]:
        """All elements under <html> matching the predicate, in document order."""
        return self.root.find_all(pred)

    def __len__(self) -> int:
        return sum(1 for _ in self.root.descendants()) + 1
