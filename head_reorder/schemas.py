"""
Pydantic schemas for options and results.

ReorderOptions: tunables read by the reorderer and the document helpers
ReorderReport:  what one reorder call did to a head
NormalizeResult: output of the HeadNormalizer (reordered HTML + report)
"""

import os
from typing import Optional
from pydantic import BaseModel, Field


# Parsers accepted by BeautifulSoup for HTML input
SUPPORTED_PARSERS = ("html5lib", "lxml", "html.parser")

_TRUE_VALUES = ("1", "true", "yes", "on")


class ReorderOptions(BaseModel):
    """Behaviour switches for a reorder run."""
    # Legacy mode: a <noscript> is also queued into the "other" bucket
    noscript_fallthrough: bool = False
    # First parser in the fallback chain (html5lib → lxml → html.parser)
    parser: str = "html5lib"

    @classmethod
    def from_env(cls, **overrides) -> "ReorderOptions":
        """
        Build options from HEAD_REORDER_* environment variables.

        Explicit keyword overrides win over the environment.
        """
        values = {}

        fallthrough = os.getenv("HEAD_REORDER_NOSCRIPT_FALLTHROUGH")
        if fallthrough is not None:
            values["noscript_fallthrough"] = fallthrough.strip().lower() in _TRUE_VALUES

        parser = os.getenv("HEAD_REORDER_PARSER")
        if parser:
            values["parser"] = parser.strip()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class DroppedElement(BaseModel):
    """A head child that classification silently discarded."""
    tag: str
    # duplicate_meta_charset, stylesheet_after_amp_custom or replaced_in_<slot>
    reason: str
    detail: Optional[str] = None     # href / charset value, for auditing


class ReorderReport(BaseModel):
    """Summary of one classify + emit pass."""
    input_count: int = 0
    output_count: int = 0
    # Slot name → number of occupants (0/1 for single slots)
    buckets: dict[str, int] = Field(default_factory=dict)
    dropped: list[DroppedElement] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class NormalizeResult(BaseModel):
    """Output of HeadNormalizer.normalize()."""
    html: str
    encoding: str = "utf-8"
    report: ReorderReport = Field(default_factory=ReorderReport)
