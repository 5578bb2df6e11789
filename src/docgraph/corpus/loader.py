"""Load Markdown documents (and their YAML front matter) from a directory."""

from __future__ import annotations

import fnmatch
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pydantic import ValidationError

from docgraph.config import LoaderConfig
from docgraph.corpus.models import Document, DocumentMetadata
from docgraph.exceptions import CorpusError

logger = logging.getLogger("docgraph.corpus")

_FRONT_MATTER_DELIMITER = "---"


def load_documents(
    root: str | Path,
    config: LoaderConfig | None = None,
    progress_callback: callable | None = None,
) -> list[Document]:
    """Read every Markdown file under `root` into a Document.

    Args:
        root: Directory to scan.
        config: Loader configuration for extensions and exclusions.
        progress_callback: Optional callback(file_path, current, total).

    Returns:
        Documents sorted by relative path.
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise CorpusError(f"Document directory does not exist: {root}")
    if config is None:
        config = LoaderConfig()

    files = collect_files(root, config)

    documents = []
    total = len(files)
    for i, full_path in enumerate(files):
        rel_path = full_path.relative_to(root).as_posix()
        if progress_callback:
            progress_callback(rel_path, i + 1, total)
        try:
            text = full_path.read_text(encoding="utf-8", errors="replace")
            mtime = full_path.stat().st_mtime
        except OSError as e:
            logger.warning("Skipping unreadable document %s: %s", rel_path, e)
            continue

        metadata, content = split_front_matter(text, rel_path)
        documents.append(
            Document(
                relative_path=rel_path,
                content=content,
                metadata=metadata,
                modified_time=datetime.fromtimestamp(mtime, tz=timezone.utc),
            )
        )

    logger.info("Loaded %d documents from %s", len(documents), root)
    return documents


def collect_files(root: Path, config: LoaderConfig) -> list[Path]:
    """Collect all Markdown files, respecting exclusion patterns."""
    files = []
    max_size = config.max_file_size_kb * 1024
    extensions = {ext.lower() for ext in config.extensions}

    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)

        dirnames[:] = [
            d
            for d in dirnames
            if not _should_exclude(
                os.path.join(rel_dir, d) if rel_dir != "." else d,
                config.exclude_patterns,
            )
        ]

        for filename in filenames:
            rel_path = os.path.join(rel_dir, filename) if rel_dir != "." else filename
            if _should_exclude(rel_path, config.exclude_patterns):
                continue
            if Path(filename).suffix.lower() not in extensions:
                continue

            full_path = Path(dirpath) / filename
            try:
                if full_path.stat().st_size > max_size:
                    logger.debug("Skipping oversized document %s", rel_path)
                    continue
            except OSError:
                continue

            files.append(full_path)

    return sorted(files)


def split_front_matter(text: str, rel_path: str = "") -> tuple[DocumentMetadata, str]:
    """Split a leading '---' YAML block off the document body.

    Malformed front matter is logged and the text is returned untouched.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != _FRONT_MATTER_DELIMITER:
        return DocumentMetadata(), text

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONT_MATTER_DELIMITER:
            break
    else:
        return DocumentMetadata(), text

    raw = "".join(lines[1:end])
    body = "".join(lines[end + 1:])
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed front matter in %s: %s", rel_path, e)
        return DocumentMetadata(), text
    if not isinstance(data, dict):
        logger.warning("Ignoring non-mapping front matter in %s", rel_path)
        return DocumentMetadata(), text

    # Scalars such as 'title: 2024' must still become strings.
    for key in ("title", "description", "notes"):
        if data.get(key) is not None and not isinstance(data[key], str):
            data[key] = str(data[key])
    try:
        metadata = DocumentMetadata(**{str(k): v for k, v in data.items()})
    except ValidationError as e:
        logger.warning("Ignoring invalid front matter in %s: %s", rel_path, e)
        return DocumentMetadata(), text
    return metadata, body


def _should_exclude(path: str, patterns: list[str]) -> bool:
    """Check if a path matches any exclusion pattern."""
    path_parts = Path(path).parts
    for pattern in patterns:
        if fnmatch.fnmatch(path, pattern):
            return True
        for part in path_parts:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False
