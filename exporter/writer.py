"""
Canonical JSON rendering and atomic file output for snapshots.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from exporter.errors import ExportWriteError, SnapshotError

logger = logging.getLogger(__name__)

INDENT = 2


def _to_builtin(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def render(snapshot: Any) -> str:
    """
    Render a snapshot as pretty-printed JSON text.

    Non-ASCII characters and ``<``, ``>``, ``&`` are written literally. Floats
    use Python's shortest round-trip representation.

    Raises:
        SnapshotError: If the snapshot holds NaN or infinite floats, which
            have no JSON representation
    """
    try:
        text = json.dumps(
            snapshot, indent=INDENT, ensure_ascii=False, allow_nan=False, default=_to_builtin
        )
    except ValueError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    return text + "\n"


class SnapshotWriter:
    """Writes rendered snapshots into one output directory."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def write(self, filename: str, snapshot: Any) -> Path:
        """
        Atomically write ``snapshot`` to ``output_dir / filename``.

        The text is rendered first, written to a temporary file in the target
        directory and renamed over the target, so the target is either absent,
        the previous version, or the complete new document.

        Returns:
            Path of the written file

        Raises:
            SnapshotError: If the snapshot cannot be rendered
            ExportWriteError: If the directory cannot be created or the file
                cannot be written
        """
        return self.write_all([(filename, snapshot)])[0]

    def write_all(self, documents: Sequence[Tuple[str, Any]]) -> List[Path]:
        """
        Write several snapshots so that either all of them land or none do.

        Every document is rendered and staged to a temporary file before any
        target is touched. If a rename fails, targets already replaced get
        their previous contents back and the staged files are removed.

        Args:
            documents: ``(filename, snapshot)`` pairs

        Returns:
            Paths of the written files, in input order

        Raises:
            SnapshotError: If a snapshot cannot be rendered
            ExportWriteError: If the directory cannot be created or a file
                cannot be written
        """
        rendered = [
            (self.output_dir / filename, render(snapshot)) for filename, snapshot in documents
        ]

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create output directory {self.output_dir}: {e}")
            raise ExportWriteError(f"Cannot create output directory {self.output_dir}: {e}") from e

        staged: List[Tuple[Path, Path]] = []
        backups: List[Tuple[Path, Optional[Path]]] = []
        target = None
        try:
            for target, text in rendered:
                logger.info(f"Writing {target.resolve()}")
                staged.append((self._stage(target, text), target))

            for tmp_path, target in staged:
                backup = None
                if target.exists():
                    backup = target.with_name(f"{tmp_path.name}.bak")
                    os.replace(target, backup)
                backups.append((target, backup))
                os.replace(tmp_path, target)
        except OSError as e:
            self._roll_back(staged, backups)
            raise ExportWriteError(f"Failed to write {target}: {e}") from e

        for _, backup in backups:
            if backup is not None:
                try:
                    backup.unlink()
                except OSError as e:
                    logger.warning(f"Could not remove backup {backup}: {e}")
        return [target for target, _ in rendered]

    def _stage(self, target: Path, text: str) -> Path:
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.output_dir,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_path, 0o644)
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise
        return tmp_path

    @staticmethod
    def _roll_back(
        staged: List[Tuple[Path, Path]], backups: List[Tuple[Path, Optional[Path]]]
    ) -> None:
        for target, backup in reversed(backups):
            try:
                if backup is not None and backup.exists():
                    os.replace(backup, target)
                elif backup is None and target.exists():
                    target.unlink()
            except OSError as e:
                logger.error(f"Could not restore {target}: {e}")
        for tmp_path, _ in staged:
            if tmp_path.exists():
                tmp_path.unlink()
