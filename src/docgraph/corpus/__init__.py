"""Markdown corpus: document models and directory loading."""

from docgraph.corpus.loader import load_documents
from docgraph.corpus.models import CorpusInfo, Document, DocumentMetadata

__all__ = ["CorpusInfo", "Document", "DocumentMetadata", "load_documents"]
