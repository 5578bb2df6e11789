"""Rich-powered console output for docgraph."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from docgraph import __version__


class Console:
    """Terminal output for docgraph using Rich."""

    def __init__(self) -> None:
        self.console = RichConsole()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]docgraph[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Link graphs and context bundles for your docs[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def loading_progress(self) -> Progress:
        """Create a progress bar for reading documents."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=self.console,
        )

    def show_stats(self, stats: dict) -> None:
        """Display link graph statistics."""
        table = Table(title="Link Graph Statistics", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right", style="cyan")

        table.add_row("Documents", str(stats.get("total_nodes", 0)))
        table.add_row("Internal Links", str(stats.get("total_edges", 0)))
        table.add_row("Same-page Links", str(stats.get("self_links", 0)))
        table.add_row("Components", str(stats.get("components", 0)))
        table.add_row("Dropped Links", str(stats.get("dropped_links", 0)))

        edge_types = stats.get("edge_types", {})
        if edge_types:
            table.add_section()
            for kind, count in sorted(edge_types.items(), key=lambda x: -x[1]):
                table.add_row(f"  {kind} links", str(count))

        self.console.print(table)

    def show_analysis(self, analysis: dict) -> None:
        """Display hubs, authorities, most important docs and orphans."""
        self.console.print(
            f"[bold]{analysis.get('total_nodes', 0)}[/bold] documents, "
            f"[bold]{analysis.get('total_edges', 0)}[/bold] links "
            f"([dim]{analysis.get('average_links_per_doc', 0):.2f} per document[/dim])"
        )

        for title, key, column in (
            ("Most Important", "most_important", "importance"),
            ("Hubs", "hubs", "out_links"),
            ("Authorities", "authorities", "in_links"),
        ):
            rows = analysis.get(key, [])
            if not rows:
                continue
            table = Table(title=title, border_style="cyan")
            table.add_column("Document", style="bold")
            table.add_column(column, justify="right", style="cyan")
            for row in rows:
                table.add_row(row["path"], str(row[column]))
            self.console.print(table)

        orphans = analysis.get("orphans", [])
        if orphans:
            self.console.print(f"\n[bold]Isolated documents ({len(orphans)}):[/bold]")
            for path in orphans:
                self.console.print(f"  [yellow]{path}[/yellow]")

    def show_bundles(self, bundles: list[dict]) -> None:
        """Display the per-tier bundle summary."""
        table = Table(title="Context Bundles", border_style="cyan")
        table.add_column("File", style="bold")
        table.add_column("Budget", justify="right")
        table.add_column("Tokens", justify="right", style="cyan")
        table.add_column("Docs", justify="right")
        table.add_column("Sections")
        table.add_column("Truncated", justify="center")

        for b in bundles:
            table.add_row(
                b["filename"],
                f"{b['sizeTokens']:,}",
                f"{b['actualTokens']:,}",
                str(b["documentCount"]),
                ", ".join(b.get("sectionsIncluded", [])),
                "yes" if b.get("truncated") else "",
            )

        self.console.print(table)
