"""
Block-state feature extractors.

Geometry fields describe collision and outline shapes plus the basic material
flags. Tag semantic fields classify the state by block and fluid tag membership.
"""

from typing import Callable, Dict, Tuple

from exporter.host import BlockState
from exporter.registry import ExtractorRegistry
from exporter.shapes import serialize_shape

KIND = "blocks"

BlockPredicate = Callable[[BlockState], bool]


def in_any_tag(*tags: str) -> BlockPredicate:
    """Predicate true when the state is in at least one of the block tags."""

    def predicate(state: BlockState) -> bool:
        return any(state.is_in(tag) for tag in tags)

    return predicate


def in_fluid_tag(tag: str) -> BlockPredicate:
    def predicate(state: BlockState) -> bool:
        return state.fluid_is_in(tag)

    return predicate


def has_fluid(state: BlockState) -> bool:
    return state.fluid is not None and state.fluid != "minecraft:empty"


def blocks_movement(state: BlockState) -> bool:
    return len(state.collision_shape) > 0


GEOMETRY_FIELDS: Tuple[Tuple[str, Callable[[BlockState], object]], ...] = (
    ("block_id", lambda s: s.block_id),
    ("properties", lambda s: s.property_map()),
    ("collision_boxes", lambda s: serialize_shape(s.collision_shape)),
    ("outline_boxes", lambda s: serialize_shape(s.outline_shape)),
    ("air", lambda s: s.air),
    ("opaque", lambda s: s.opaque),
    ("solid_block", lambda s: s.solid_block),
    ("replaceable", lambda s: s.replaceable),
    ("blocks_movement", blocks_movement),
)

# Field order is the output order.
TAG_RULES: Dict[str, BlockPredicate] = {
    "climbable": in_any_tag("minecraft:climbable"),
    "door_like": in_any_tag("minecraft:doors", "minecraft:trapdoors", "minecraft:fence_gates"),
    "fence_like": in_any_tag("minecraft:fences", "minecraft:walls"),
    "slab": in_any_tag("minecraft:slabs"),
    "stair": in_any_tag("minecraft:stairs"),
    "log_or_leaf": in_any_tag("minecraft:logs", "minecraft:leaves"),
    "water": in_fluid_tag("minecraft:water"),
    "lava": in_fluid_tag("minecraft:lava"),
    "fluid": has_fluid,
}


def register_geometry_extractors(registry: ExtractorRegistry) -> None:
    for name, func in GEOMETRY_FIELDS:
        registry.register(KIND, name, func)


def register_tag_extractors(registry: ExtractorRegistry) -> None:
    for name, predicate in TAG_RULES.items():
        registry.register(KIND, name, predicate)
