"""Extract and resolve Markdown links from a document.

Handles inline links (`[text](target)`, optionally with a quoted title) and
reference-style links (`[text][ref]` / `[ref][]` against `[ref]: target`
definitions). Internal targets are resolved against the set of known
document paths; anything that does not resolve is dropped without error.
"""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Collection
from dataclasses import dataclass, field

from docgraph.corpus.models import Document
from docgraph.graph.models import Edge, EdgeType

logger = logging.getLogger("docgraph.graph")

_INLINE_LINK = re.compile(r'\[([^\]]*)\]\(([^)\s]+)(?:\s+"[^"]*")?\)')
_REFERENCE_DEF = re.compile(r"^\[([^\]]+)\]:\s*(\S+)", re.MULTILINE)
_REFERENCE_USE = re.compile(r"\[([^\]]+)\]\[([^\]]*)\]")

_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "//")


@dataclass
class ExtractedLinks:
    """Links found in one document."""

    internal: list[Edge] = field(default_factory=list)
    external: list[Edge] = field(default_factory=list)
    dropped: int = 0  # internal targets that matched no document


def is_external_link(url: str) -> bool:
    return url.startswith(_EXTERNAL_PREFIXES)


def extract_links(doc: Document, doc_paths: Collection[str]) -> ExtractedLinks:
    """Extract internal and external edges from a single document.

    Inline links come first, then reference-style links, each in the order
    they appear in the text.
    """
    content = doc.content or ""
    source = doc.relative_path
    result = ExtractedLinks()

    for m in _INLINE_LINK.finditer(content):
        _add_link(result, source, m.group(2), m.group(1), doc_paths)

    definitions = {m.group(1).lower(): m.group(2) for m in _REFERENCE_DEF.finditer(content)}
    if definitions:
        for m in _REFERENCE_USE.finditer(content):
            text = m.group(1)
            ref = (m.group(2) or m.group(1)).lower()
            url = definitions.get(ref)
            if url:
                _add_link(result, source, url, text, doc_paths)

    if result.dropped:
        logger.debug("%s: %d unresolved internal link(s) dropped", source, result.dropped)
    return result


def _add_link(
    result: ExtractedLinks,
    source: str,
    url: str,
    text: str,
    doc_paths: Collection[str],
) -> None:
    if url.startswith("#"):
        result.internal.append(
            Edge(
                source=source,
                target=source,
                anchor=url[1:] or None,
                text=text,
                type=EdgeType.INTERNAL_ANCHOR,
            )
        )
        return

    if is_external_link(url):
        result.external.append(
            Edge(source=source, target=url, text=text, type=EdgeType.EXTERNAL)
        )
        return

    resolved = resolve_link(url, source, doc_paths)
    if resolved is None:
        result.dropped += 1
        return

    target, _, anchor = resolved.partition("#")
    result.internal.append(
        Edge(
            source=source,
            target=target,
            anchor=anchor or None,
            text=text,
            type=EdgeType.INTERNAL_ANCHOR if anchor else EdgeType.INTERNAL,
        )
    )


def resolve_link(url: str, source_path: str, doc_paths: Collection[str]) -> str | None:
    """Resolve a relative link to a known document path.

    Every link, including one with a leading `/`, is taken relative to the
    source document's directory. Normalizing the joined path removes `.`
    and `..` segments (so a leading `./` never reaches the lookup), then
    tries, in order: the exact path, the path with `.md` appended, and the
    path as a directory containing `index.md`. Any `#anchor` on the URL is
    re-attached to the result.

    Returns:
        `path` or `path#anchor`, or None when no document matches.
    """
    path, has_anchor, anchor = url.partition("#")
    clean_path = path.split("?")[0]
    if not clean_path:
        return None

    source_dir = posixpath.dirname(source_path)
    relative = clean_path.replace("\\", "/").lstrip("/")
    resolved = posixpath.normpath(posixpath.join(source_dir, relative))

    candidates = (resolved, resolved + ".md", resolved + "/index.md")
    for candidate in candidates:
        if candidate in doc_paths:
            return f"{candidate}#{anchor}" if has_anchor else candidate
    return None
