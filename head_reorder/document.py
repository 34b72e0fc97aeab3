"""
Document helpers: bytes → tree → <head>, and back to a string.

The reorderer works on any HeadNode. This module supplies the usual one:
a BeautifulSoup tree whose <head> is wrapped in SoupHeadNode.

Design principle: parse anything. html5lib implements the WHATWG parsing
algorithm and copes with the worst markup; lxml and html.parser are
fallbacks if it is missing or fails.
"""

import re
from pathlib import Path
from bs4 import BeautifulSoup

from .nodes import SoupHeadNode
from .schemas import SUPPORTED_PARSERS
from .exceptions import DocumentParseError, InvalidHeadError
from .logger import get_module_logger

logger = get_module_logger("document")


# WHATWG encoding spec: browsers silently remap these labels.
# https://encoding.spec.whatwg.org/#names-and-labels
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'iso88591': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
    'iso-8859-9': 'windows-1254',
    'iso-8859-11': 'windows-874',
}

META_CHARSET_PATTERN = re.compile(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', re.IGNORECASE)
META_CONTENT_TYPE_PATTERN = re.compile(
    r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)', re.IGNORECASE
)


def detect_charset_from_bytes(raw_bytes: bytes) -> str:
    """
    Find the charset a page declares in its first 2048 bytes.

    Looks for <meta charset=...> first, then the legacy
    <meta http-equiv="Content-Type" content="...; charset=...">, and maps
    the label the way browsers do. Returns 'utf-8' when nothing is declared.
    """
    # Declarations must appear in the first 1024 bytes; scan 2048
    head_str = raw_bytes[:2048].decode('ascii', errors='ignore')

    charset = None
    m = META_CHARSET_PATTERN.search(head_str)
    if m:
        charset = m.group(1).strip().lower()

    if not charset:
        m = META_CONTENT_TYPE_PATTERN.search(head_str)
        if m:
            charset = m.group(1).strip().lower()

    if not charset:
        return 'utf-8'

    return WHATWG_CHARSET_MAP.get(charset, charset)


def _parser_chain(preferred: str) -> list[str]:
    chain = [preferred]
    chain.extend(p for p in SUPPORTED_PARSERS if p != preferred)
    return chain


def parse_document(html: str, parser: str = "html5lib") -> BeautifulSoup:
    """
    Parse HTML into a BeautifulSoup tree.

    Tries `parser` first, then the remaining supported parsers. Attribute
    values are kept as the literal strings from the markup (no splitting of
    rel/class into token lists), which the rel rules depend on.

    Raises:
        DocumentParseError: if every parser fails
    """
    tried = []
    errors = {}

    for name in _parser_chain(parser):
        tried.append(name)
        try:
            return BeautifulSoup(html, name, multi_valued_attributes=None)
        except Exception as e:
            logger.warning(f"{name} parsing failed: {e}")
            errors[name] = str(e)

    raise DocumentParseError(
        "Could not parse HTML with any available parser",
        parsers_tried=tried,
        details=errors
    )


def find_head(soup: BeautifulSoup) -> SoupHeadNode:
    """
    Return the document's <head> as a HeadNode.

    Raises:
        InvalidHeadError: if the tree has no <head> (possible with the
        non-WHATWG fallback parsers on fragments)
    """
    head = soup.find('head')
    if head is None:
        raise InvalidHeadError("Document has no <head> element")
    return SoupHeadNode(head)


def serialize_document(soup: BeautifulSoup) -> str:
    """Serialize the whole tree back to HTML."""
    return str(soup)


def load_html_file(path) -> tuple[str, str]:
    """
    Read an HTML file as bytes and decode it with its declared charset.

    Returns:
        Tuple of (html text, charset used)
    """
    raw_bytes = Path(path).read_bytes()
    charset = detect_charset_from_bytes(raw_bytes)
    try:
        html = raw_bytes.decode(charset, errors='replace')
    except LookupError:
        # Unknown label in the page; fall back to UTF-8
        logger.warning(f"Unknown charset '{charset}' in {path}, decoding as utf-8")
        charset = 'utf-8'
        html = raw_bytes.decode(charset, errors='replace')
    return html, charset
