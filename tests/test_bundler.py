"""Tests for token-budgeted context bundles."""

from __future__ import annotations

import pytest

from docgraph.config import BundlerConfig
from docgraph.context.bundler import ContextBundler
from docgraph.context.models import BundleManifest, TokenEstimator, bundle_filename, format_size
from docgraph.corpus.models import CorpusInfo, Document, DocumentMetadata
from docgraph.exceptions import ConfigError
from docgraph.graph.builder import GraphBuilder

CORPUS = CorpusInfo(title="T")


def _doc(path: str, content: str, **metadata) -> Document:
    return Document(
        relative_path=path, content=content, metadata=DocumentMetadata(**metadata)
    )


def _entry_doc(path: str, tokens: int) -> Document:
    """A root-level document whose rendered entry costs exactly `tokens`."""
    title = path.rsplit(".", 1)[0]
    overhead = len(f"## {title}\n*Source: {path}*\n\n\n\n---\n\n")
    return Document(relative_path=path, content="x" * (tokens * 4 - overhead))


class TestTokenEstimator:
    def test_estimate(self):
        assert TokenEstimator.estimate("") == 0
        assert TokenEstimator.estimate("abcd") == 1
        assert TokenEstimator.estimate("abcde") == 2
        assert TokenEstimator.estimate("x" * 4000) == 1000


class TestFormatSize:
    @pytest.mark.parametrize(
        "tokens, label",
        [
            (500, "500"),
            (999, "999"),
            (1000, "1k"),
            (1500, "2k"),
            (2000, "2k"),
            (2400, "2k"),
            (128000, "128k"),
        ],
    )
    def test_labels(self, tokens: int, label: str):
        assert format_size(tokens) == label

    def test_filename(self):
        assert bundle_filename(32000) == "llms-ctx-32k.txt"
        assert bundle_filename(750) == "llms-ctx-750.txt"


class TestContextBundler:
    def test_everything_fits(self, sample_docs):
        bundler = ContextBundler(BundlerConfig(bundle_sizes=[128000]))
        bundle = bundler.pack(sample_docs, CORPUS)[0]

        assert bundle.filename == "llms-ctx-128k.txt"
        assert bundle.document_count == bundle.total_documents == 5
        assert not bundle.truncated
        assert "Context truncated" not in bundle.content
        assert bundle.content.startswith("# T\n\n")
        assert bundle.actual_tokens <= 128000

    def test_entry_format(self):
        doc = _doc("guide.md", "Body text.", title="The Guide")
        entry = ContextBundler().build_entry(doc)
        assert entry == "## The Guide\n*Source: guide.md*\n\nBody text.\n\n---\n\n"

    def test_header_with_description_and_instructions(self):
        corpus = CorpusInfo(title="Docs", description="All of it", instructions="Read carefully.")
        header = ContextBundler().build_header(corpus)
        assert header == "# Docs\n\n> All of it\n\nRead carefully.\n\n"

    def test_tiers_sorted_and_deduplicated(self, sample_docs):
        bundles = ContextBundler().pack(sample_docs, CORPUS, sizes=[8000, 2000, 8000])
        assert [b.filename for b in bundles] == ["llms-ctx-2k.txt", "llms-ctx-8k.txt"]
        assert [b.size_tokens for b in bundles] == [2000, 8000]

    def test_default_sizes(self, sample_docs):
        bundles = ContextBundler().pack(sample_docs, CORPUS)
        assert len(bundles) == 7
        assert bundles[0].filename == "llms-ctx-2k.txt"
        assert bundles[-1].filename == "llms-ctx-128k.txt"

    def test_skips_documents_that_do_not_fit(self):
        docs = [_entry_doc("index.md", 1000), _entry_doc("notes.md", 10)]
        config = BundlerConfig(include_references=False)
        bundle = ContextBundler(config).pack(docs, CORPUS, sizes=[200])[0]

        assert bundle.included_documents == ["notes.md"]
        assert bundle.truncated
        assert "*Source: index.md*" not in bundle.content
        assert bundle.content.endswith(
            "\n---\n*Context truncated. 1 additional documents available.*\n"
        )
        assert bundle.actual_tokens <= 200

    def test_references_for_skipped_documents(self):
        docs = [
            _entry_doc("index.md", 1000),
            _doc("notes.md", "short", description="Release notes"),
        ]
        config = BundlerConfig(base_url="https://docs.example.com/")
        bundle = ContextBundler(config).pack(docs, CORPUS, sizes=[200])[0]

        assert "- [index](https://docs.example.com/index.md)\n" in bundle.content
        assert bundle.included_documents == ["notes.md"]
        assert bundle.actual_tokens <= 200

    def test_reference_includes_summary(self):
        doc = _doc("a.md", "", description="Desc", notes="Notes win")
        assert ContextBundler().build_reference(doc) == "- [a](a.md): Notes win\n"

    def test_budgets_respected(self, sample_docs):
        sizes = [60, 80, 120, 200, 400, 1000]
        bundles = ContextBundler().pack(sample_docs, CORPUS, sizes=sizes)

        for bundle in bundles:
            assert bundle.actual_tokens <= bundle.size_tokens
            assert bundle.document_count == len(bundle.included_documents)
            assert bundle.total_documents == 5
            assert bundle.truncated == (bundle.document_count < 5)

    def test_document_count_monotonic(self, sample_docs):
        sizes = [60, 80, 120, 200, 400, 1000]
        bundles = ContextBundler().pack(sample_docs, CORPUS, sizes=sizes)
        counts = [b.document_count for b in bundles]

        assert counts == sorted(counts)
        for smaller, larger in zip(bundles, bundles[1:]):
            assert set(smaller.included_documents) <= set(larger.included_documents)

    def test_larger_tier_keeps_smaller_selection(self):
        # A small tier skips the big first document and packs two small ones;
        # the next tier must not trade them for the big one.
        docs = [
            _entry_doc("a.md", 20),
            _entry_doc("b.md", 8),
            _entry_doc("c.md", 8),
            _entry_doc("d.md", 8),
        ]
        config = BundlerConfig(footer_reserve=0, include_references=False)
        small, large = ContextBundler(config).pack(docs, CORPUS, sizes=[21, 24])

        assert small.included_documents == ["b.md", "c.md"]
        assert large.included_documents == ["b.md", "c.md"]

    def test_tiny_budget(self, sample_docs):
        bundle = ContextBundler().pack(sample_docs, CORPUS, sizes=[10])[0]

        assert bundle.document_count == 0
        assert bundle.truncated
        assert bundle.actual_tokens <= 10
        assert bundle.content == (
            "\n---\n*Context truncated. 5 additional documents available.*\n"
        )

    def test_budget_smaller_than_notice(self):
        docs = [_doc("a.md", "x" * 400)]
        bundle = ContextBundler().pack(docs, CORPUS, sizes=[1])[0]

        assert bundle.actual_tokens <= 1
        assert bundle.truncated
        assert "Context truncated. 1 additional documents" in bundle.content

    def test_notice_not_counted(self):
        docs = [_entry_doc("index.md", 1000), _entry_doc("notes.md", 10)]
        config = BundlerConfig(include_references=False)
        bundle = ContextBundler(config).pack(docs, CORPUS, sizes=[200])[0]

        # header (2) + notes.md entry (10)
        assert bundle.actual_tokens == 12

    @pytest.mark.parametrize("sizes", [[0], [2000, -100], [0, -100]])
    def test_non_positive_budgets_rejected(self, sample_docs, sizes):
        with pytest.raises(ConfigError, match="positive"):
            ContextBundler().pack(sample_docs, CORPUS, sizes=sizes)

    def test_empty_corpus(self):
        bundle = ContextBundler().pack([], CORPUS, sizes=[2000])[0]

        assert bundle.document_count == 0
        assert bundle.total_documents == 0
        assert not bundle.truncated
        assert bundle.content == "# T\n\n"

    def test_sections_in_inclusion_order(self, sample_docs):
        bundle = ContextBundler().pack(sample_docs, CORPUS, sizes=[128000])[0]
        # api/index.md ranks first (index + api pattern)
        assert bundle.sections_included == ["api", "root", "notes"]

    def test_graph_importance_changes_order(self):
        docs = [
            _doc("notes/one.md", "See [two](two.md)."),
            _doc("notes/two.md", "Nothing here."),
        ]
        bundler = ContextBundler(BundlerConfig(bundle_sizes=[8000]))

        plain = bundler.pack(docs, CORPUS)[0]
        ranked = bundler.pack(docs, CORPUS, graph=GraphBuilder().build(docs))[0]

        assert plain.included_documents == ["notes/one.md", "notes/two.md"]
        assert ranked.included_documents == ["notes/two.md", "notes/one.md"]

    def test_usage_metrics_change_order(self):
        docs = [_doc("notes/one.md", "a"), _doc("notes/two.md", "b")]
        bundle = ContextBundler().pack(
            docs, CORPUS, usage_metrics={"notes/two.md": {"score": 5}}, sizes=[8000]
        )[0]
        assert bundle.included_documents == ["notes/two.md", "notes/one.md"]


class TestManifest:
    def test_camel_case_keys(self, sample_docs):
        bundles = ContextBundler().pack(sample_docs, CORPUS, sizes=[2000])
        data = BundleManifest.from_bundles(bundles).to_dict()

        assert data["version"] == "1.0.0"
        entry = data["bundles"][0]
        assert set(entry) == {
            "filename",
            "sizeTokens",
            "actualTokens",
            "documentCount",
            "sectionsIncluded",
            "truncated",
        }
        assert entry["sizeTokens"] == 2000
        assert entry["documentCount"] == 5
