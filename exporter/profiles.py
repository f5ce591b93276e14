"""
Export profiles.

A profile names the output directory under the host's run directory and the
export jobs to run there. ``collision`` covers block geometry only; ``data``
adds tag semantics to every block state and exports the item registry.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Tuple

from exporter.errors import ConfigError
from exporter.extractors.blocks import register_geometry_extractors, register_tag_extractors
from exporter.extractors.items import register_item_extractors
from exporter.host import Host
from exporter.registry import ExtractorRegistry


@dataclass(frozen=True)
class ExportJob:
    kind: str
    filename: str
    layout: str
    records: Callable[[Host], Iterator]


@dataclass(frozen=True)
class ExportProfile:
    name: str
    output_subdir: str
    jobs: Tuple[ExportJob, ...]
    tag_semantics: bool = False


BLOCKS_JOB = ExportJob("blocks", "blocks.json", "array", lambda host: host.block_states())
ITEMS_JOB = ExportJob("items", "items.json", "mapping", lambda host: host.items())

PROFILES: Dict[str, ExportProfile] = {
    "collision": ExportProfile("collision", "collision-data", (BLOCKS_JOB,)),
    "data": ExportProfile("data", "data", (BLOCKS_JOB, ITEMS_JOB), tag_semantics=True),
}


def get_profile(name: str) -> ExportProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ConfigError(f"Unknown export profile: {name}") from None


def build_registry(profile: ExportProfile, host: Host) -> ExtractorRegistry:
    """Wire the extractors a profile needs, in output field order."""
    registry = ExtractorRegistry()
    kinds = {job.kind for job in profile.jobs}

    if "blocks" in kinds:
        register_geometry_extractors(registry)
        if profile.tag_semantics:
            register_tag_extractors(registry)
    if "items" in kinds:
        register_item_extractors(registry, host)

    return registry
