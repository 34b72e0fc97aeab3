"""
Main orchestrator for the head reorderer.

Wires the document helpers and the reorderer together:
parse → find <head> → classify → emit → serialize.
"""

from pathlib import Path
from typing import Optional, Union

from .document import parse_document, find_head, serialize_document, load_html_file
from .reorderer import HeadReorderer
from .schemas import ReorderOptions, NormalizeResult
from .logger import get_module_logger, setup_logger

logger = get_module_logger("main")


class HeadNormalizer:
    """
    Reorders the <head> of whole HTML documents.

    1. Parse the markup (html5lib → lxml → html.parser)
    2. Reorder the head's children in place
    3. Serialize the tree and report what moved or was dropped
    """

    def __init__(
        self,
        options: Optional[ReorderOptions] = None,
        log_level: int = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        self.options = options or ReorderOptions()
        self.reorderer = HeadReorderer(self.options)

    def normalize(self, html: str, encoding: str = "utf-8") -> NormalizeResult:
        """
        Reorder the head of an HTML document.

        Args:
            html: HTML document as a string
            encoding: Charset the string was decoded from (reported back)

        Returns:
            NormalizeResult with the reordered HTML and a ReorderReport

        Raises:
            DocumentParseError: if no parser accepts the markup
            InvalidHeadError: if the parsed tree has no <head>
        """
        soup = parse_document(html, parser=self.options.parser)
        head = find_head(soup)

        # Classify fully before mutating, so a failure leaves the tree intact
        registry = self.reorderer.classify(head)
        self.reorderer.emit(head, registry)

        report = registry.report(output_count=len(head.children()))
        if report.dropped:
            logger.info(f"Dropped {len(report.dropped)} head element(s)")
        logger.info(f"Reordered head: {report.input_count} in, {report.output_count} out")

        return NormalizeResult(
            html=serialize_document(soup),
            encoding=encoding,
            report=report
        )

    def normalize_file(self, file_path: Union[str, Path]) -> NormalizeResult:
        """Reorder the head of an HTML file, decoding with its declared charset."""
        html, charset = load_html_file(file_path)
        logger.info(f"Processing {Path(file_path).name} ({charset})")
        return self.normalize(html, encoding=charset)


def reorder_html(html: str, options: Optional[ReorderOptions] = None) -> str:
    """Convenience function: reordered HTML for an HTML string."""
    return HeadNormalizer(options).normalize(html).html


def reorder_html_file(file_path: Union[str, Path], options: Optional[ReorderOptions] = None) -> str:
    """Convenience function: reordered HTML for an HTML file."""
    return HeadNormalizer(options).normalize_file(file_path).html
