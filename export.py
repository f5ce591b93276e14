#!/usr/bin/env python3
"""
Registry Snapshot Export - batch entry point

This script runs the export pipeline against a static registry description:
1. Load the host registries (block states, items)
2. Run the configured export profile once and stop the host
3. Collect the written files into the versioned output tree

Usage:
    python export.py --config config.yaml --action [export|collect|all]
    python export.py --help
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict

from exporter.collect import collect_output
from exporter.config import collect_settings, export_settings, load_config
from exporter.host import StaticHost
from exporter.lifecycle import ExportLifecycle
from exporter.profiles import get_profile


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the export pipeline."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(), logging.FileHandler("export.log")],
    )


def run_export(config: Dict[str, Any]) -> bool:
    """Load the host described by the config and run its export lifecycle."""
    settings = export_settings(config)
    host = StaticHost.from_file(settings["host_data"], run_directory=settings["run_directory"])
    lifecycle = ExportLifecycle(host, settings)
    return lifecycle.on_server_started()


def run_collect(config: Dict[str, Any]) -> Path:
    """Collect the configured profile's output into the versioned output tree."""
    settings = export_settings(config)
    collect = collect_settings(config)
    run_output_dir = settings["run_directory"] / get_profile(settings["profile"]).output_subdir
    return collect_output(run_output_dir, collect["output_dir"], collect["version"])


def main():
    """Main entry point for the export pipeline."""
    parser = argparse.ArgumentParser(description="Registry Snapshot Export")
    parser.add_argument(
        "--config", type=Path, default="config.yaml", help="Path to config YAML file"
    )
    parser.add_argument(
        "--action",
        choices=["export", "collect", "all"],
        default="export",
        help="Action to perform",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
        logger.info(f"Loaded configuration from {args.config}")
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1

    try:
        if args.action in ("export", "all"):
            if not run_export(config):
                logger.error("Export failed, see errors above")
                return 1
        if args.action in ("collect", "all"):
            version_dir = run_collect(config)
            logger.info(f"Collected output into {version_dir}")
    except Exception as e:
        logger.error(f"Action '{args.action}' failed: {e}", exc_info=True)
        return 1

    logger.info(f"Action '{args.action}' completed successfully!")
    return 0


if __name__ == "__main__":
    exit(main())
