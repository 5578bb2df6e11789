"""Shared test fixtures for docgraph."""

from __future__ import annotations

from pathlib import Path

import pytest

from docgraph.corpus.models import Document, DocumentMetadata

# Link layout of the sample corpus:
#   index.md          -> guide.md, api/index.md, guide.md#install (+1 external)
#   guide.md          -> index.md, api/endpoints.md (reference-style)
#   api/index.md      -> api/endpoints.md (+1 dangling link)
#   api/endpoints.md  -> itself (#endpoints)
#   notes/orphan.md   -> nothing
SAMPLE_CORPUS: dict[str, str] = {
    "index.md": """---
title: Home
description: Landing page
---
# Welcome

Start with the [guide](guide.md), then read the [API reference](api/).
Installation is covered in [install notes](guide.md#install).
Project site: [example](https://example.com).
""",
    "guide.md": """# Guide

## Install

### Requirements

Python 3.10 or newer.

## Usage

Back to [home](index.md). The [endpoints][ep] page lists every route.

[ep]: api/endpoints.md
""",
    "api/index.md": """# API

See [Endpoints](endpoints) and the [old page](nope.md).
""",
    "api/endpoints.md": """# Endpoints

```
# not a heading
```

[Back to top](#endpoints)
""",
    "notes/orphan.md": """# Orphan

Nobody links here.
""",
}


@pytest.fixture
def tmp_docs(tmp_path: Path) -> Path:
    """Create a temporary documentation tree with the sample corpus."""
    for rel_path, text in SAMPLE_CORPUS.items():
        target = tmp_path / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text)
    return tmp_path


@pytest.fixture
def sample_docs() -> list[Document]:
    """The sample corpus as in-memory documents, front matter already split."""
    docs = []
    for rel_path, text in SAMPLE_CORPUS.items():
        metadata = DocumentMetadata()
        if text.startswith("---\n"):
            _, front, text = text.split("---\n", 2)
            fields = dict(line.split(": ", 1) for line in front.strip().splitlines())
            metadata = DocumentMetadata(**fields)
        docs.append(Document(relative_path=rel_path, content=text, metadata=metadata))
    return docs
