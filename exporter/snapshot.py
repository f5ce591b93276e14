"""
Snapshot assembly: one feature map per enumerated record.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Union

from tqdm import tqdm

from exporter.errors import SnapshotError
from exporter.registry import ExtractorRegistry

logger = logging.getLogger(__name__)

Snapshot = Union[List[Dict[str, Any]], Dict[str, Dict[str, Any]]]

LAYOUTS = ("array", "mapping")


class SnapshotBuilder:
    """Drives record enumeration and runs the registered extractors per record."""

    def __init__(self, registry: ExtractorRegistry, show_progress: bool = False):
        self.registry = registry
        self.show_progress = show_progress

    def build(self, kind: str, records: Iterable[Any], layout: str = "array") -> Snapshot:
        """
        Consume ``records`` eagerly and assemble the snapshot.

        Args:
            kind: Record kind, selects the extractor list
            records: Finite iterable of records with a stable ``key``
            layout: ``"array"`` for a list in enumeration order, ``"mapping"``
                for a dict keyed by record key

        Returns:
            List or dict of feature maps

        Raises:
            ExtractionError: If an extractor fails on any record
            SnapshotError: If the layout is unknown or a mapping key repeats
        """
        if layout not in LAYOUTS:
            raise SnapshotError(f"Unknown snapshot layout: {layout}")

        start_time = time.time()
        iterator = tqdm(records, desc=f"Exporting {kind}", disable=not self.show_progress)

        if layout == "array":
            snapshot: Snapshot = [self.registry.run_all(kind, record) for record in iterator]
        else:
            snapshot = {}
            for record in iterator:
                key = str(record.key)
                if key in snapshot:
                    raise SnapshotError(f"Duplicate record key in {kind}: {key}")
                snapshot[key] = self.registry.run_all(kind, record)

        elapsed = time.time() - start_time
        logger.info(f"Built {kind} snapshot: {len(snapshot)} records in {elapsed:.2f}s")
        return snapshot
