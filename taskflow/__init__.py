"""Throttled channels, futures, DAG-based task flows and small helpers."""

__version__ = "0.1.0"
__all__ = [
    "channel",
    "config",
    "constants",
    "dataset",
    "definition",
    "example",
    "future",
    "graph",
    "naming",
    "operation",
    "runner",
]