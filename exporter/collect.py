"""
Collect exported snapshots into a versioned output tree.

``blocks.json`` is sharded into one file per block under its namespace;
``items.json`` is copied as-is:

    <output_root>/<version>/blocks/<namespace>/<path>.json
    <output_root>/<version>/items/items.json
"""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Tuple

from exporter.errors import CollectError, ExportWriteError, SnapshotError
from exporter.writer import SnapshotWriter

logger = logging.getLogger(__name__)


def split_block_id(block_id: str) -> Tuple[str, str]:
    """Split ``namespace:path``; ids without a namespace belong to ``minecraft``."""
    namespace, sep, path = block_id.partition(":")
    if not sep:
        return "minecraft", namespace
    return namespace, path


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise CollectError(f"Generator output not found at {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise CollectError(f"Failed to read {path}: {e}") from e


def group_states(records: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Group state records by block id, dropping the id from each state."""
    by_block: Dict[str, List[Dict[str, Any]]] = {}
    for record in records:
        if "block_id" not in record:
            raise CollectError(f"Block state record without block_id: {record!r}")
        slim = {k: v for k, v in record.items() if k != "block_id"}
        by_block.setdefault(record["block_id"], []).append(slim)
    return by_block


def shard_blocks(blocks_file: Path, out_root: Path) -> int:
    """
    Write one ``{"block_id", "states"}`` file per block.

    Returns:
        Number of block files written
    """
    records = _read_json(blocks_file)
    if not isinstance(records, list):
        raise CollectError(f"Expected a JSON array in {blocks_file}")

    by_block = group_states(records)
    for block_id in sorted(by_block):
        namespace, path = split_block_id(block_id)
        # Paths may contain '/', keep them as subdirectories.
        target = out_root / namespace / f"{path}.json"
        SnapshotWriter(target.parent).write(
            target.name, {"block_id": block_id, "states": by_block[block_id]}
        )

    logger.info(f"Sharded {len(records)} states into {len(by_block)} block files under {out_root}")
    return len(by_block)


def copy_file(source: Path, target: Path) -> Path:
    """
    Copy ``source`` byte-for-byte to ``target`` through a temp file and rename.

    Raises:
        CollectError: If the source is missing or the copy fails
    """
    if not source.exists():
        raise CollectError(f"Generator output not found at {source}")

    tmp_path = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_path = Path(tmp.name)
        shutil.copyfile(source, tmp_path)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, target)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise CollectError(f"Failed to copy {source} to {target}: {e}") from e

    logger.info(f"Copied {source} to {target}")
    return target


def collect_output(run_output_dir: Path, output_root: Path, version: str) -> Path:
    """
    Collect one export run's files into ``output_root / version``.

    Args:
        run_output_dir: Directory holding ``blocks.json`` and ``items.json``
        output_root: Root of the versioned output tree
        version: Host version label, e.g. "1.21.1"

    Returns:
        The version directory

    Raises:
        CollectError: If an input file is missing or unreadable, or output
            cannot be written
    """
    run_output_dir = Path(run_output_dir)
    version_dir = Path(output_root) / version

    try:
        shard_blocks(run_output_dir / "blocks.json", version_dir / "blocks")
    except (ExportWriteError, SnapshotError) as e:
        raise CollectError(f"Failed to collect output for {version}: {e}") from e
    copy_file(run_output_dir / "items.json", version_dir / "items" / "items.json")

    logger.info(f"Collected output for {version} into {version_dir}")
    return version_dir
