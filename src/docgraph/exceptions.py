"""Custom exceptions for docgraph."""


class DocGraphError(Exception):
    """Base exception for all docgraph errors."""


class ConfigError(DocGraphError):
    """Configuration-related errors."""


class CorpusError(DocGraphError):
    """Document loading errors."""


class ArtifactWriteError(DocGraphError):
    """Raised when an output artifact cannot be written."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not write artifact '{path}': {reason}")
        self.path = path
