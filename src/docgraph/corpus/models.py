"""Data models for Markdown documents and corpus metadata."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field

ROOT_SECTION = "root"


class DocumentMetadata(BaseModel):
    """Front matter of a document.

    Only the fields docgraph reads are named; any other keys found in the
    front matter are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    description: str | None = None
    notes: str | None = None


class Document(BaseModel):
    """A Markdown document, keyed by its forward-slash relative path."""

    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str = ""
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    modified_time: datetime | None = None

    @property
    def title(self) -> str:
        """Front-matter title, falling back to one derived from the filename."""
        return self.metadata.title or title_from_path(self.relative_path)

    @property
    def summary(self) -> str:
        """Short description: front-matter notes, then description."""
        return self.metadata.notes or self.metadata.description or ""

    @property
    def section(self) -> str:
        return section_of(self.relative_path)

    @property
    def filename(self) -> str:
        return PurePosixPath(self.relative_path).name


class CorpusInfo(BaseModel):
    """Top-level corpus metadata rendered at the head of every bundle."""

    title: str = "Documentation"
    description: str = ""
    instructions: str | None = None


def title_from_path(relative_path: str) -> str:
    """Derive a display title: 'getting-started.md' -> 'getting started'."""
    filename = relative_path.split("/")[-1]
    return re.sub(r"[-_]", " ", re.sub(r"\.[^.]+$", "", filename))


def section_of(relative_path: str) -> str:
    """First path segment, or 'root' for top-level documents."""
    parts = relative_path.split("/")
    return parts[0] if len(parts) > 1 else ROOT_SECTION
