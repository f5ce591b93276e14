"""
Block shape lookup over collected per-block snapshot files.

Loads ``<namespace>/<block>.json`` files written by the collect step into a
map from (block id, properties) to the state's shape and semantic flags.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, NamedTuple, Tuple

import numpy as np

from exporter.host import make_props_key
from exporter.shapes import Box

logger = logging.getLogger(__name__)

FLAGS = (
    "air",
    "opaque",
    "solid_block",
    "replaceable",
    "blocks_movement",
    "climbable",
    "door_like",
    "fence_like",
    "slab",
    "stair",
    "log_or_leaf",
    "water",
    "lava",
    "fluid",
)


class StateKey(NamedTuple):
    """Block id plus normalized properties, see ``make_props_key``."""

    block_id: str
    props_key: str


@dataclass(frozen=True)
class ShapeInfo:
    collision: Tuple[Box, ...] = ()
    outline: Tuple[Box, ...] = ()
    air: bool = False
    opaque: bool = False
    solid_block: bool = False
    replaceable: bool = False
    blocks_movement: bool = False
    climbable: bool = False
    door_like: bool = False
    fence_like: bool = False
    slab: bool = False
    stair: bool = False
    log_or_leaf: bool = False
    water: bool = False
    lava: bool = False
    fluid: bool = False

    def is_passable(self) -> bool:
        """Passable for entity movement; based on collision, not outline."""
        return self.air or not self.blocks_movement

    def standing_surface(self) -> float:
        """Highest collision top in block-local y, 0.0 without collision."""
        if not self.collision:
            return 0.0
        return max(0.0, float(np.max([box.max[1] for box in self.collision])))

    def can_see_through(self) -> bool:
        return self.air or not self.opaque

    def world_collision_boxes_at(self, x: int, y: int, z: int) -> np.ndarray:
        """
        Collision boxes translated to world coordinates at block (x, y, z).

        Returns:
            Array of shape (N, 2, 3): per box its min and max corner
        """
        if not self.collision:
            return np.zeros((0, 2, 3), dtype=np.float64)
        boxes = np.array([[box.min, box.max] for box in self.collision], dtype=np.float64)
        return boxes + np.array([x, y, z], dtype=np.float64)


def shape_info_from_state(state: Dict) -> ShapeInfo:
    return ShapeInfo(
        collision=tuple(Box.from_json(b) for b in state.get("collision_boxes", [])),
        outline=tuple(Box.from_json(b) for b in state.get("outline_boxes", [])),
        **{flag: bool(state.get(flag, False)) for flag in FLAGS},
    )


def load_blocks_file(path: Path) -> Dict[StateKey, ShapeInfo]:
    """
    Load one per-block file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't a per-block snapshot
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Block file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or "block_id" not in data:
        raise ValueError(f"Not a per-block snapshot file: {path}")

    block_id = data["block_id"]
    out = {}
    for state in data.get("states", []):
        key = StateKey(block_id, make_props_key(state.get("properties") or {}))
        out[key] = shape_info_from_state(state)
    return out


def merge_blocks_maps(*maps: Dict[StateKey, ShapeInfo]) -> Dict[StateKey, ShapeInfo]:
    """Merge maps; later maps win on colliding keys."""
    out: Dict[StateKey, ShapeInfo] = {}
    for m in maps:
        out.update(m)
    return out


def load_blocks_dir(root: Path) -> Dict[StateKey, ShapeInfo]:
    """Load every ``*.json`` below ``root``, in sorted path order."""
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Blocks directory not found: {root}")

    logger.info(f"Loading blocks from {root}")
    out: Dict[StateKey, ShapeInfo] = {}
    for path in sorted(root.rglob("*.json")):
        try:
            out = merge_blocks_maps(out, load_blocks_file(path))
        except ValueError as e:
            raise ValueError(f"Failed to load file {path}: {e}") from e
    logger.info(f"Loaded {len(out)} block states")
    return out
