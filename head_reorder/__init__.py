"""
AMP Head Reorderer

Rewrites the <head> of an AMP document into a fixed, deterministic order.
- Reorderer: classifies head children into buckets and re-emits them
- Document helpers: charset sniffing, parsing, serialization (BeautifulSoup)
- HeadNormalizer: end-to-end string/file → reordered HTML

Public API surface:
  Core            — HeadReorderer, reorder_head, BucketRegistry, HEAD_ORDER
  Node protocol   — HeadNode, SoupHeadNode
  Orchestration   — HeadNormalizer, reorder_html, reorder_html_file
  Data models     — ReorderOptions, ReorderReport, NormalizeResult
  Error types     — HeadReorderError, InvalidHeadError, DocumentParseError
"""

# --- Core ---
from .reorderer import HeadReorderer, reorder_head, BucketRegistry, HEAD_ORDER, SlotKind

# --- Node protocol and bs4 adapter ---
from .nodes import HeadNode, SoupHeadNode

# --- Orchestration ---
from .main import HeadNormalizer, reorder_html, reorder_html_file

# --- Data models ---
from .schemas import ReorderOptions, ReorderReport, NormalizeResult

# --- Exceptions ---
from .exceptions import HeadReorderError, InvalidHeadError, DocumentParseError

__version__ = "0.1.0"
__all__ = [
    "HeadReorderer",
    "reorder_head",
    "BucketRegistry",
    "HEAD_ORDER",
    "SlotKind",
    "HeadNode",
    "SoupHeadNode",
    "HeadNormalizer",
    "reorder_html",
    "reorder_html_file",
    "ReorderOptions",
    "ReorderReport",
    "NormalizeResult",
    "HeadReorderError",
    "InvalidHeadError",
    "DocumentParseError",
]
