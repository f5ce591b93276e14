"""
One-shot export driver hooked to the host's "server started" lifecycle point.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from exporter.config import EXPORT_DEFAULTS
from exporter.errors import ExportError
from exporter.host import Host
from exporter.profiles import ExportProfile, build_registry, get_profile
from exporter.snapshot import Snapshot, SnapshotBuilder
from exporter.writer import SnapshotWriter

logger = logging.getLogger(__name__)


class ExportLifecycle:
    """
    Runs the configured export profile once, then asks the host to stop.

    Failures are logged, never raised: the host is shut down whether or not
    the export succeeded.
    """

    def __init__(self, host: Host, config: Optional[Dict[str, Any]] = None):
        self.host = host
        self.config = {**EXPORT_DEFAULTS, **(config or {})}
        self.has_run = False
        self.written = []

        logger.info(f"ExportLifecycle initialized: profile={self.config['profile']}")

    @property
    def profile(self) -> ExportProfile:
        """
        The configured export profile.

        Raises:
            ConfigError: If the profile name is unknown
        """
        return get_profile(self.config["profile"])

    @property
    def output_dir(self) -> Path:
        return Path(self.host.run_directory) / self.profile.output_subdir

    def on_server_started(self) -> bool:
        """
        Export every job of the profile and stop the host.

        Returns:
            True if all files were written, False otherwise
        """
        if self.has_run:
            logger.warning("Export already ran in this process, ignoring repeated start event")
            return False
        self.has_run = True

        success = False
        try:
            self.export_all()
            success = True
        except ExportError as e:
            logger.error(f"Failed to dump data: {e}", exc_info=True)
        except Exception as e:
            logger.error(f"Unexpected error during export: {e}", exc_info=True)
        finally:
            logger.info("Stopping server after export")
            self.host.stop()

        return success

    def export_all(self) -> None:
        """
        Build every snapshot of the profile, then write them as one unit.

        Either every file of the profile is replaced or none is.
        """
        start_time = time.time()
        profile = self.profile
        self.check_disk_space()

        registry = build_registry(profile, self.host)
        builder = SnapshotBuilder(registry, show_progress=self.config["show_progress"])

        snapshots: List[Snapshot] = [
            builder.build(job.kind, job.records(self.host), layout=job.layout) for job in profile.jobs
        ]

        writer = SnapshotWriter(self.output_dir)
        paths = writer.write_all(
            [(job.filename, snapshot) for job, snapshot in zip(profile.jobs, snapshots)]
        )
        for job, snapshot, path in zip(profile.jobs, snapshots, paths):
            self.written.append(path)
            logger.info(f"Finished writing {len(snapshot)} {job.kind} to {path}")

        logger.info(f"Export completed in {time.time() - start_time:.1f}s")

    def check_disk_space(self) -> bool:
        """Warn when the filesystem holding the output directory is nearly full."""
        existing = self.output_dir
        while not existing.exists() and existing != existing.parent:
            existing = existing.parent

        free_mb = psutil.disk_usage(str(existing)).free / (1024**2)
        min_free_mb = float(self.config["min_free_disk_mb"])
        if free_mb < min_free_mb:
            logger.warning(
                f"Low disk space: {free_mb:.1f}MB free under {existing}, {min_free_mb:.0f}MB recommended"
            )
            return False
        return True
