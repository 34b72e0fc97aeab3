"""
HeadNode protocol and its BeautifulSoup adapter.

The reorderer only needs six capabilities from a DOM element: its tag
name, attribute presence and value, an ordered snapshot of its element
children, appending a child, and clearing all children. Any tree that can
provide these (bs4, lxml, a test double) can be reordered.
"""

from typing import Optional, Protocol, runtime_checkable
from bs4 import Tag


@runtime_checkable
class HeadNode(Protocol):
    """Capability set the reorderer relies on."""

    @property
    def tag_name(self) -> str:
        """Uppercase tag name, e.g. "META"."""
        ...

    def has_attribute(self, name: str) -> bool:
        ...

    def get_attribute(self, name: str) -> Optional[str]:
        ...

    def children(self) -> list["HeadNode"]:
        """Element children in document order (a snapshot, not a live view)."""
        ...

    def append_child(self, child: "HeadNode") -> None:
        ...

    def clear_children(self) -> None:
        ...


class SoupHeadNode:
    """
    Wraps a bs4 Tag so it satisfies HeadNode.

    Each wrapper holds one Tag. Wrappers for children are created once per
    children() call and keep the underlying Tag alive, so identity checks on
    the wrappers are stable for the duration of a reorder pass.
    """

    def __init__(self, tag: Tag):
        self.tag = tag

    def __repr__(self) -> str:
        return f"SoupHeadNode(<{self.tag.name}>)"

    @property
    def tag_name(self) -> str:
        return (self.tag.name or "").upper()

    def has_attribute(self, name: str) -> bool:
        return self.tag.has_attr(name)

    def get_attribute(self, name: str) -> Optional[str]:
        value = self.tag.get(name)
        if value is None:
            return None
        # Multi-valued attributes (rel, class) come back as lists unless the
        # soup was built with multi_valued_attributes=None. Rejoin them so
        # callers always see a single string.
        if isinstance(value, list):
            return " ".join(value)
        return value

    def children(self) -> list["SoupHeadNode"]:
        # Text nodes, comments and doctypes are not children for our purposes
        return [SoupHeadNode(child) for child in self.tag.children if isinstance(child, Tag)]

    def append_child(self, child: "SoupHeadNode") -> None:
        # bs4 detaches a node from its current parent before appending it
        self.tag.append(child.tag)

    def clear_children(self) -> None:
        self.tag.clear()
