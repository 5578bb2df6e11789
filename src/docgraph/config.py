"""Configuration management for docgraph."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DOCGRAPH_DIR = ".docgraph"
CONFIG_FILE = "config.json"

GRAPH_FILE = "graph.json"
SECTION_GRAPH_FILE = "graph-sections.json"
BUNDLE_META_FILE = "bundles.meta.json"

DEFAULT_BUNDLE_SIZES = [2000, 4000, 8000, 16000, 32000, 64000, 128000]


class CorpusConfig(BaseModel):
    """Top-level corpus metadata used for bundle headers."""

    title: str = "Documentation"
    description: str = ""
    instructions: str | None = None


class LoaderConfig(BaseModel):
    """Which files are read as documents."""

    extensions: list[str] = Field(default_factory=lambda: [".md", ".mdx"])
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "node_modules",
            ".git",
            ".docgraph",
            "dist",
            "build",
            ".venv",
            "venv",
            "__pycache__",
        ]
    )
    max_file_size_kb: int = 1024


class GraphConfig(BaseModel):
    """Link graph and importance ranking configuration."""

    damping_factor: float = 0.85
    iterations: int = 20
    include_section_graph: bool = True
    include_external_links: bool = False
    hub_threshold: int = 5
    authority_threshold: int = 3
    top_n: int = 10

    @field_validator("damping_factor")
    @classmethod
    def _check_damping(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("damping_factor must be between 0 and 1")
        return value

    @field_validator("iterations")
    @classmethod
    def _check_iterations(cls, value: int) -> int:
        if value < 0:
            raise ValueError("iterations must not be negative")
        return value


class BundlerConfig(BaseModel):
    """Context bundle configuration."""

    bundle_sizes: list[int] = Field(default_factory=lambda: list(DEFAULT_BUNDLE_SIZES))
    base_url: str | None = None
    priority_weights: dict[str, float] = Field(default_factory=dict)  # overrides only
    long_document_chars: int = 10_000
    footer_reserve: int = 50
    include_references: bool = True

    @field_validator("bundle_sizes")
    @classmethod
    def _check_sizes(cls, value: list[int]) -> list[int]:
        if any(size <= 0 for size in value):
            raise ValueError("bundle sizes must be positive token counts")
        return value


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    docs_dir: str = "."
    output_dir: str = "llms"
    corpus: CorpusConfig = Field(default_factory=CorpusConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    bundler: BundlerConfig = Field(default_factory=BundlerConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .docgraph directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / DOCGRAPH_DIR).is_dir():
            return current
        current = current.parent
    if (current / DOCGRAPH_DIR).is_dir():
        return current
    return None


def get_docgraph_dir(root: Path) -> Path:
    """Get the .docgraph directory for a project root."""
    return root / DOCGRAPH_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .docgraph/config.json."""
    config_path = get_docgraph_dir(root) / CONFIG_FILE
    if config_path.exists():
        data = json.loads(config_path.read_text())
        return ProjectConfig(**data)
    return ProjectConfig(name=root.name, root_path=str(root))


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .docgraph/config.json."""
    dg_dir = get_docgraph_dir(root)
    dg_dir.mkdir(parents=True, exist_ok=True)
    config_path = dg_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'graph.iterations').

    Keys under ``bundler.priority_weights`` may be new, since that mapping
    only holds overrides.
    """
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    open_mapping = parts[:-1] == ["bundler", "priority_weights"]
    if parts[-1] not in target and not open_mapping:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    return ProjectConfig(**data)


def resolve_dir(root: Path, value: str) -> Path:
    """Resolve a configured directory relative to the project root."""
    path = Path(value)
    return path if path.is_absolute() else root / path
