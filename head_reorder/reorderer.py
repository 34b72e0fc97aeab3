"""
Canonical ordering for the children of an AMP document's <head>.

Reorders head like so:
  (1)  <meta charset>
  (2)  <link rel=stylesheet> for the AMP runtime CSS (.../v0.css)
  (3)  <style amp-runtime>
  (4)  remaining <meta> tags
  (5)  AMP runtime .js <script>
  (6)  AMP viewer runtime .js <script>
  (7)  Gmail AMP viewer runtime .js <script>
  (8)  <script> tags for render delaying extensions
  (9)  <script> tags for remaining extensions
  (10) <link> tags for favicons
  (11) <link> tags for resource hints
  (12) <link rel=stylesheet> tags seen before <style amp-custom>
  (13) <style amp-custom>
  (14) any other tags allowed in <head>
  (15) <style amp-boilerplate> / <style amp4ads-boilerplate>
  (16) <noscript>

Two passes: classify() buckets every direct child of head in document
order, then emit() clears head and appends the buckets in HEAD_ORDER.
Nothing below head's direct children is inspected or moved.
"""

from enum import Enum
from typing import Optional

from .nodes import HeadNode
from .schemas import ReorderOptions, ReorderReport, DroppedElement
from .exceptions import InvalidHeadError
from .logger import get_module_logger

logger = get_module_logger("reorderer")


AMP_CDN_PREFIX = "https://cdn.ampproject.org/"

AMP_ENGINE_SUFFIXES = ("/v0.js", "/v0.js.br", "/amp4ads-v0.js", "/amp4ads-v0.js.br")
GMAIL_VIEWER_PREFIX = "https://cdn.ampproject.org/v0/amp-viewer-integration-gmail-"
VIEWER_PREFIX = "https://cdn.ampproject.org/v0/amp-viewer-integration-"
GOOGLE_VIEWER_PREFIX = "https://cdn.ampproject.org/viewer/google/v"
RUNTIME_CSS_SUFFIX = "/v0.css"

# Any of these attributes marks a <script> as an extension script
EXTENSION_ATTRIBUTES = ("custom-element", "custom-template", "host-service")

# Extensions that must load before first render
RENDER_DELAYING_EXTENSIONS = ("amp-story", "amp-experiment", "amp-dynamic-css-classes")

BOILERPLATE_ATTRIBUTES = ("amp-boilerplate", "amp4ads-boilerplate")

# rel values are compared as literal strings, not as token sets
ICON_RELS = ("icon", "icon shortcut", "shortcut icon")
RESOURCE_HINT_REL = "dns-prefetch preconnect"


class SlotKind(Enum):
    """Whether a bucket holds at most one node or an ordered list."""
    SINGLE = "single"
    LIST = "list"


# Emission order. emit() walks this table; nothing else encodes the order.
HEAD_ORDER = [
    ("meta_charset", SlotKind.SINGLE),
    ("link_stylesheet_runtime_css", SlotKind.SINGLE),
    ("style_amp_runtime", SlotKind.SINGLE),
    ("meta_other", SlotKind.LIST),
    ("script_amp_engine", SlotKind.SINGLE),
    ("script_amp_viewer", SlotKind.SINGLE),
    ("script_gmail_amp_viewer", SlotKind.SINGLE),
    ("script_render_delaying_extensions", SlotKind.LIST),
    ("script_non_render_delaying_extensions", SlotKind.LIST),
    ("link_icons", SlotKind.LIST),
    ("link_resource_hints", SlotKind.LIST),
    ("link_stylesheet_before_amp_custom", SlotKind.LIST),
    ("style_amp_custom", SlotKind.SINGLE),
    ("other", SlotKind.LIST),
    ("style_amp_boilerplate", SlotKind.SINGLE),
    ("noscript", SlotKind.SINGLE),
]

SINGLE_SLOTS = tuple(name for name, kind in HEAD_ORDER if kind is SlotKind.SINGLE)
LIST_SLOTS = tuple(name for name, kind in HEAD_ORDER if kind is SlotKind.LIST)


def add_once_ordered(nodes: list, seen: set, node) -> bool:
    """
    Append node to nodes unless that same object is already there.

    Membership is by identity (id()), not equality: two <meta> tags with
    identical attributes are still two nodes. Returns True if appended.
    """
    if id(node) in seen:
        return False
    seen.add(id(node))
    nodes.append(node)
    return True


def _starts_with(value: Optional[str], prefix: str) -> bool:
    return value is not None and value.startswith(prefix)


def _ends_with(value: Optional[str], suffixes) -> bool:
    return value is not None and value.endswith(suffixes)


def _describe(node: HeadNode) -> Optional[str]:
    """Short attribute summary used in drop records and debug logs."""
    for attr in ("charset", "href", "src", "rel", "name"):
        value = node.get_attribute(attr)
        if value:
            return f"{attr}={value}"
    return None


class BucketRegistry:
    """
    Per-call classification state.

    Single slots are plain attributes holding a node or None; list slots
    are lists fed only through add(). Built fresh by classify() and thrown
    away after emit().
    """

    def __init__(self):
        for name in SINGLE_SLOTS:
            setattr(self, name, None)
        for name in LIST_SLOTS:
            setattr(self, name, [])
        # One identity set per list slot, backing add_once_ordered()
        self._seen = {name: set() for name in LIST_SLOTS}
        self.input_count = 0
        self.dropped: list[DroppedElement] = []
        self.warnings: list[str] = []

    def add(self, slot: str, node: HeadNode) -> bool:
        """Append node to a list slot, suppressing identity duplicates."""
        return add_once_ordered(getattr(self, slot), self._seen[slot], node)

    def assign(self, slot: str, node: HeadNode) -> None:
        """Put node in a single slot, replacing any earlier occupant."""
        previous = getattr(self, slot)
        replaced = previous is not None and previous is not node
        if replaced and id(previous) not in self._seen["other"]:
            # The earlier occupant has nowhere else to go
            self.drop(previous, f"replaced_in_{slot}")
        setattr(self, slot, node)

    def drop(self, node: HeadNode, reason: str) -> None:
        detail = _describe(node)
        logger.debug(f"Dropping <{node.tag_name.lower()}> ({reason}) {detail or ''}".rstrip())
        self.dropped.append(DroppedElement(tag=node.tag_name.lower(), reason=reason, detail=detail))

    def slot(self, name: str):
        return getattr(self, name)

    def ordered_nodes(self) -> list:
        """Every retained node in emission order (may repeat in legacy noscript mode)."""
        nodes = []
        for name, kind in HEAD_ORDER:
            value = getattr(self, name)
            if kind is SlotKind.SINGLE:
                if value is not None:
                    nodes.append(value)
            else:
                nodes.extend(value)
        return nodes

    def report(self, output_count: Optional[int] = None) -> ReorderReport:
        buckets = {}
        for name, kind in HEAD_ORDER:
            value = getattr(self, name)
            if kind is SlotKind.SINGLE:
                buckets[name] = 0 if value is None else 1
            else:
                buckets[name] = len(value)

        if output_count is None:
            output_count = len({id(node) for node in self.ordered_nodes()})

        return ReorderReport(
            input_count=self.input_count,
            output_count=output_count,
            buckets=buckets,
            dropped=list(self.dropped),
            warnings=list(self.warnings)
        )


class HeadReorderer:
    """Classifies head children and re-emits them in HEAD_ORDER."""

    def __init__(self, options: Optional[ReorderOptions] = None):
        self.options = options or ReorderOptions()

    def reorder_head(self, head: HeadNode) -> HeadNode:
        """
        Reorder head's children in place and return head.

        Raises InvalidHeadError for a None head, before touching anything.
        Running it again on its own output changes nothing.
        """
        if head is None:
            raise InvalidHeadError("Cannot reorder a missing <head> element")

        registry = self.classify(head)
        self.emit(head, registry)
        return head

    # --- Classification ---

    def classify(self, head: Optional[HeadNode]) -> BucketRegistry:
        """
        Bucket every direct child of head, in document order.

        A None head yields an empty registry. Decisions for later children
        can depend on earlier ones (stylesheets after <style amp-custom>),
        so this is one sequential pass.
        """
        registry = BucketRegistry()
        if head is None:
            return registry

        for child in head.children():
            registry.input_count += 1
            tag = child.tag_name.upper()

            if tag == "META":
                self._register_meta(registry, child)
            elif tag == "SCRIPT":
                self._register_script(registry, child)
            elif tag == "STYLE":
                self._register_style(registry, child)
            elif tag == "LINK":
                self._register_link(registry, child)
            elif tag == "NOSCRIPT":
                registry.assign("noscript", child)
                if self.options.noscript_fallthrough:
                    registry.add("other", child)
            else:
                registry.add("other", child)

        logger.debug(f"Classified {registry.input_count} head children")
        return registry

    def _register_meta(self, registry: BucketRegistry, element: HeadNode) -> None:
        if element.has_attribute("charset"):
            if registry.meta_charset is None:
                registry.meta_charset = element
            else:
                registry.drop(element, "duplicate_meta_charset")
                registry.warnings.append("Multiple <meta charset> tags; kept the first")
            return
        registry.add("meta_other", element)

    def _register_script(self, registry: BucketRegistry, element: HeadNode) -> None:
        src = element.get_attribute("src")
        is_async = element.has_attribute("async")

        # 1. Extension scripts, whatever their src
        if any(element.has_attribute(attr) for attr in EXTENSION_ATTRIBUTES):
            if element.get_attribute("custom-element") in RENDER_DELAYING_EXTENSIONS:
                registry.add("script_render_delaying_extensions", element)
            else:
                registry.add("script_non_render_delaying_extensions", element)
            return

        if not is_async:
            registry.add("other", element)
            return

        # 2. AMP runtime (regular or amp4ads, optionally brotli)
        if _starts_with(src, AMP_CDN_PREFIX) and _ends_with(src, AMP_ENGINE_SUFFIXES):
            registry.assign("script_amp_engine", element)
            return

        # 3. Gmail viewer integration; must be tested before the generic viewer prefix
        if _starts_with(src, GMAIL_VIEWER_PREFIX) and _ends_with(src, ".js"):
            registry.assign("script_gmail_amp_viewer", element)
            return

        # 4. Any other viewer integration
        if _starts_with(src, VIEWER_PREFIX) or (
            _starts_with(src, GOOGLE_VIEWER_PREFIX) and _ends_with(src, ".js")
        ):
            registry.assign("script_amp_viewer", element)
            return

        registry.add("other", element)

    def _register_style(self, registry: BucketRegistry, element: HeadNode) -> None:
        if element.has_attribute("amp-runtime"):
            registry.assign("style_amp_runtime", element)
        elif element.has_attribute("amp-custom"):
            registry.assign("style_amp_custom", element)
        elif any(element.has_attribute(attr) for attr in BOILERPLATE_ATTRIBUTES):
            registry.assign("style_amp_boilerplate", element)
        else:
            registry.add("other", element)

    def _register_link(self, registry: BucketRegistry, element: HeadNode) -> None:
        rel = element.get_attribute("rel")

        if rel == "stylesheet":
            href = element.get_attribute("href")
            if _starts_with(href, AMP_CDN_PREFIX) and _ends_with(href, RUNTIME_CSS_SUFFIX):
                registry.assign("link_stylesheet_runtime_css", element)
            elif registry.style_amp_custom is None:
                registry.add("link_stylesheet_before_amp_custom", element)
            else:
                # A stylesheet after <style amp-custom> would override it; discard
                registry.drop(element, "stylesheet_after_amp_custom")
            return

        if rel in ICON_RELS:
            registry.add("link_icons", element)
        elif rel == RESOURCE_HINT_REL:
            registry.add("link_resource_hints", element)
        else:
            registry.add("other", element)

    # --- Re-assembly ---

    def emit(self, head: HeadNode, registry: BucketRegistry) -> HeadNode:
        """Replace head's children with the registry contents in HEAD_ORDER."""
        if head is None:
            raise InvalidHeadError("Cannot emit into a missing <head> element")

        head.clear_children()
        for node in registry.ordered_nodes():
            head.append_child(node)
        return head


def reorder_head(head: HeadNode, options: Optional[ReorderOptions] = None) -> HeadNode:
    """Convenience function to reorder a head node in place."""
    return HeadReorderer(options).reorder_head(head)
