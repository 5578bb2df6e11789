"""Write and read generated artifacts in an output directory.

Each artifact is a single scoped write. A failed write raises
ArtifactWriteError; artifacts already written by the same run are left in
place for the caller to retry or clean up.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from docgraph.exceptions import ArtifactWriteError

logger = logging.getLogger("docgraph.store")


class ArtifactStore:
    """Persists graph and bundle artifacts as files under one directory."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    def path_for(self, name: str) -> Path:
        return self.output_dir / name

    def write_text(self, name: str, text: str) -> Path:
        path = self.path_for(name)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise ArtifactWriteError(str(path), e.strerror or str(e)) from e
        logger.debug("Wrote %s (%d chars)", path, len(text))
        return path

    def write_json(self, name: str, data: Any) -> Path:
        return self.write_text(name, json.dumps(data, indent=2, ensure_ascii=False))

    def read_json(self, name: str) -> Any | None:
        """Load a JSON artifact, or None if it has not been generated."""
        path = self.path_for(name)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()
