"""
Registry snapshot exporter.

Walks a host's block-state and item registries, runs feature extractors over
every record and writes the results as deterministic JSON snapshots.
"""

from .host import BlockState, Host, Item, StaticHost
from .lifecycle import ExportLifecycle
from .registry import ExtractorRegistry
from .snapshot import SnapshotBuilder
from .writer import SnapshotWriter, render

__all__ = [
    "BlockState",
    "Host",
    "Item",
    "StaticHost",
    "ExportLifecycle",
    "ExtractorRegistry",
    "SnapshotBuilder",
    "SnapshotWriter",
    "render",
]
