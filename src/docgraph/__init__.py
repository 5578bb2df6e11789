"""docgraph - link graphs and token-budgeted context bundles for Markdown docs."""

__version__ = "0.1.0"
