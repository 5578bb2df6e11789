"""Data models for token-budgeted context bundles."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docgraph.graph.models import ARTIFACT_VERSION, utc_timestamp


class Bundle(BaseModel):
    """One context bundle, built for a single token budget tier."""

    model_config = ConfigDict(frozen=True)

    filename: str
    size_tokens: int  # requested budget
    actual_tokens: int = 0
    document_count: int = 0
    total_documents: int = 0
    included_documents: list[str] = Field(default_factory=list)
    sections_included: list[str] = Field(default_factory=list)
    content: str = ""
    truncated: bool = False

    def summary(self) -> BundleSummary:
        return BundleSummary(
            filename=self.filename,
            size_tokens=self.size_tokens,
            actual_tokens=self.actual_tokens,
            document_count=self.document_count,
            sections_included=list(self.sections_included),
            truncated=self.truncated,
        )


class BundleSummary(BaseModel):
    """Per-tier entry of the bundle manifest (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    filename: str
    size_tokens: int
    actual_tokens: int
    document_count: int
    sections_included: list[str] = Field(default_factory=list)
    truncated: bool = False


class BundleManifest(BaseModel):
    """The persisted bundle metadata artifact (bundles.meta.json)."""

    version: str = ARTIFACT_VERSION
    generated_at: str = Field(default_factory=utc_timestamp)
    bundles: list[BundleSummary] = Field(default_factory=list)

    @classmethod
    def from_bundles(cls, bundles: list[Bundle]) -> BundleManifest:
        return cls(bundles=[b.summary() for b in bundles])

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TokenEstimator:
    """Estimate token counts for Markdown text."""

    # Rough heuristic: 1 token ≈ 4 characters
    CHARS_PER_TOKEN = 4

    @classmethod
    def estimate(cls, text: str) -> int:
        """Estimate token count for a string (0 for empty text)."""
        if not text:
            return 0
        return math.ceil(len(text) / cls.CHARS_PER_TOKEN)


def format_size(tokens: int) -> str:
    """Human-readable tier label: 2000 -> '2k', 32000 -> '32k', 500 -> '500'."""
    if tokens >= 1000:
        return f"{math.floor(tokens / 1000 + 0.5)}k"
    return str(tokens)


def bundle_filename(tokens: int) -> str:
    return f"llms-ctx-{format_size(tokens)}.txt"
