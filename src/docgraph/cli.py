"""Command-line interface for docgraph."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.logging import RichHandler

from docgraph import __version__
from docgraph.config import (
    BUNDLE_META_FILE,
    GRAPH_FILE,
    SECTION_GRAPH_FILE,
    ProjectConfig,
    find_project_root,
    load_config,
    resolve_dir,
    save_config,
    set_config_value,
)
from docgraph.exceptions import DocGraphError
from docgraph.ui.console import Console

console = Console()


def _get_project_root(path: str | None = None) -> Path:
    """Find the project root or error.

    An explicit --path is used as-is, with or without a .docgraph directory.
    """
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root

    root = find_project_root()
    if root is None:
        console.error(
            "No docgraph project found. Run 'docgraph init' first, "
            "or specify a path with --path."
        )
        sys.exit(1)
    return root


def _load_documents(root: Path, config: ProjectConfig, quiet: bool = False):
    """Read the corpus, with a progress bar unless `quiet`."""
    from docgraph.corpus.loader import load_documents

    docs_dir = resolve_dir(root, config.docs_dir)
    if quiet:
        return load_documents(docs_dir, config.loader)

    with console.loading_progress() as progress:
        task = progress.add_task("Reading documents...", total=None)

        def on_progress(file_path: str, current: int, total: int):
            progress.update(
                task, total=total, completed=current,
                description=f"Reading {file_path}",
            )

        documents = load_documents(docs_dir, config.loader, on_progress)

    if not documents:
        console.warning(f"No Markdown documents found under {docs_dir}")
    return documents


def _output_store(root: Path, config: ProjectConfig, output: str | None):
    from docgraph.store import ArtifactStore

    return ArtifactStore(resolve_dir(root, output or config.output_dir))


@click.group()
@click.version_option(version=__version__, prog_name="docgraph")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """docgraph - link graphs and token-budgeted context bundles for Markdown docs."""
    if verbose:
        logger = logging.getLogger("docgraph")
        logger.setLevel(logging.DEBUG)
        # Reset handlers to avoid duplicate output when invoked multiple times.
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.addHandler(RichHandler(console=console.console, show_path=False))


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--docs", "-d", default=None, help="Documents directory, relative to the root.")
@click.option("--title", default=None, help="Corpus title used in bundle headers.")
@click.option("--description", default=None, help="Corpus description for bundle headers.")
def init(path: str | None, docs: str | None, title: str | None, description: str | None):
    """Initialize docgraph for a documentation directory."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing docgraph for: {root}")

    config = load_config(root)
    config.name = root.name
    config.root_path = str(root)
    if docs:
        config.docs_dir = docs
    if title:
        config.corpus.title = title
    elif not config.corpus.title or config.corpus.title == "Documentation":
        config.corpus.title = root.name
    if description:
        config.corpus.description = description

    save_config(root, config)
    console.success("Configuration saved to .docgraph/config.json")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--output", "-o", default=None, help="Output directory for artifacts.")
@click.option("--budget", "-b", "budgets", multiple=True, type=click.IntRange(min=1),
              help="Token budget tier (repeatable). Defaults to the configured sizes.")
@click.option("--no-graph", is_flag=True, help="Skip graph.json.")
@click.option("--no-sections", is_flag=True, help="Skip graph-sections.json.")
@click.option("--no-bundles", is_flag=True, help="Skip the context bundles.")
def build(
    path: str | None, output: str | None, budgets: tuple[int, ...],
    no_graph: bool, no_sections: bool, no_bundles: bool,
):
    """Build the link graph, section graph and context bundles.

    Examples:

        docgraph build

        docgraph build --budget 4000 --budget 16000 --no-sections
    """
    from docgraph.pipeline import run_pipeline

    root = _get_project_root(path)
    config = load_config(root)
    store = _output_store(root, config, output)

    try:
        documents = _load_documents(root, config)
        result = run_pipeline(
            documents,
            config,
            store,
            graph=not no_graph,
            sections=False if no_sections else None,
            bundles=not no_bundles,
            budgets=list(budgets) or None,
        )
    except (DocGraphError, ValidationError) as e:
        console.error(str(e))
        sys.exit(1)

    console.success(
        f"Processed {len(documents)} documents in {result.elapsed_ms / 1000:.1f}s"
    )
    if result.graph is not None:
        console.success(
            f"{GRAPH_FILE} ({len(result.graph.nodes)} nodes, {len(result.graph.edges)} edges)"
        )
    if result.section_graph is not None:
        console.success(
            f"{SECTION_GRAPH_FILE} "
            f"({result.section_graph.statistics.total_sections} sections)"
        )
    if result.bundles:
        console.success(f"Context bundles generated ({len(result.bundles)} sizes)")
        console.show_bundles(
            [b.summary().model_dump(by_alias=True) for b in result.bundles]
        )
    console.info(f"Artifacts written to {store.output_dir}")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--top", "-n", default=None, type=int, help="Entries per ranking table.")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis as JSON.")
def graph(path: str | None, top: int | None, as_json: bool):
    """Analyze the link graph without writing artifacts."""
    from docgraph.graph.builder import GraphBuilder

    root = _get_project_root(path)
    config = load_config(root)
    if top is not None:
        config.graph.top_n = top

    try:
        documents = _load_documents(root, config, quiet=as_json)
    except DocGraphError as e:
        console.error(str(e))
        sys.exit(1)
    builder = GraphBuilder(config.graph)
    link_graph = builder.build(documents)
    analysis = link_graph.analysis.model_dump(mode="json")

    if as_json:
        click.echo(json.dumps(analysis, indent=2))
        return

    console.show_stats(builder.get_stats())
    console.show_analysis(analysis)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--output", "-o", default=None, help="Output directory for artifacts.")
@click.option("--budget", "-b", "budgets", multiple=True, type=click.IntRange(min=1),
              help="Token budget tier (repeatable).")
@click.option("--no-graph", is_flag=True, help="Rank without link-graph importance.")
def bundle(path: str | None, output: str | None, budgets: tuple[int, ...], no_graph: bool):
    """Generate context bundles only (graph.json is not rewritten).

    Example:

        docgraph bundle --budget 8000 --budget 32000
    """
    from docgraph.context.bundler import ContextBundler
    from docgraph.context.models import BundleManifest
    from docgraph.graph.builder import GraphBuilder
    from docgraph.pipeline import corpus_info

    root = _get_project_root(path)
    config = load_config(root)
    store = _output_store(root, config, output)

    try:
        documents = _load_documents(root, config)
        link_graph = None if no_graph else GraphBuilder(config.graph).build(documents)
        bundles = ContextBundler(config.bundler).pack(
            documents, corpus_info(config), graph=link_graph,
            sizes=list(budgets) or None,
        )
        for b in bundles:
            store.write_text(b.filename, b.content)
        store.write_json(BUNDLE_META_FILE, BundleManifest.from_bundles(bundles).to_dict())
    except (DocGraphError, ValidationError) as e:
        console.error(str(e))
        sys.exit(1)

    console.show_bundles([b.summary().model_dump(by_alias=True) for b in bundles])
    console.success(f"Wrote {len(bundles)} bundle(s) to {store.output_dir}")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--output", "-o", default=None, help="Output directory for artifacts.")
def status(path: str | None, output: str | None):
    """Show statistics from previously generated artifacts."""
    root = _get_project_root(path)
    config = load_config(root)
    store = _output_store(root, config, output)

    graph_data = store.read_json(GRAPH_FILE)
    meta = store.read_json(BUNDLE_META_FILE)
    if graph_data is None and meta is None:
        console.error("No artifacts found. Run 'docgraph build' first.")
        sys.exit(1)

    console.banner()
    console.info(f"Project: {config.name or root.name}")
    if graph_data is not None:
        console.info(f"Graph generated at {graph_data.get('generated_at', '?')}")
        console.show_analysis(graph_data.get("analysis", {}))
    sections = store.read_json(SECTION_GRAPH_FILE)
    if sections is not None:
        stats = sections.get("statistics", {})
        console.info(
            f"Section graph: {stats.get('total_sections', 0)} sections, "
            f"{stats.get('total_section_edges', 0)} edges"
        )
    if meta is not None:
        console.show_bundles(meta.get("bundles", []))


@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage docgraph configuration."""
    root = _get_project_root(path)
    config = load_config(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: docgraph config get <key>")
            sys.exit(1)
        data = config.model_dump()
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: docgraph config set <key> <value>")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except ValidationError as e:
            console.error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
            sys.exit(1)


if __name__ == "__main__":
    main()
