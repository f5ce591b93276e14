"""
Item semantics derived from exported item records.

Combines the exporter's own flags with tag and component heuristics into one
set of categories per item (tool, weapon, food, block item, ingredient, ...).
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple

logger = logging.getLogger(__name__)

USABLE_ANIMATIONS = frozenset({"EAT", "DRINK", "BLOCK", "BOW", "SPEAR"})


class Tag(NamedTuple):
    namespace: str
    path: str


def parse_tag(raw: str) -> Tag:
    """Split ``ns:path``; a raw string without namespace keeps an empty namespace."""
    namespace, sep, path = raw.partition(":")
    if not sep:
        return Tag("", raw)
    return Tag(namespace, path.lstrip("/"))


class TagSet:
    """Tags grouped by namespace for path and prefix lookups."""

    def __init__(self, raw: Iterable[str]):
        self.all: List[Tag] = [parse_tag(r) for r in raw]
        self.by_ns: Dict[str, List[Tag]] = {}
        for tag in self.all:
            self.by_ns.setdefault(tag.namespace, []).append(tag)

    def has_path(self, ns: str, path: str) -> bool:
        return any(t.path == path for t in self.by_ns.get(ns, []))

    def has_path_prefix(self, ns: str, prefix: str) -> bool:
        return any(t.path.startswith(prefix) for t in self.by_ns.get(ns, []))

    def has_substr(self, substr: str) -> bool:
        return any(substr in f"{t.namespace}:{t.path}" for t in self.all)


@dataclass
class ItemSemantics:
    # Combat / tools
    is_tool: bool = False
    is_weapon: bool = False
    is_melee_weapon: bool = False
    is_ranged_weapon: bool = False
    is_armor: bool = False
    is_shield: bool = False

    # Consumables / usage
    is_food: bool = False
    is_potion: bool = False
    is_throwable: bool = False
    is_projectile: bool = False
    is_usable: bool = False

    is_block_item: bool = False

    # Resources / crafting
    is_ingredient: bool = False
    is_food_ingredient: bool = False
    is_crop_product: bool = False

    # Misc categories
    is_music_disc: bool = False
    is_banner_pattern: bool = False
    is_spawn_egg: bool = False
    is_boat: bool = False
    is_minecart: bool = False

    source_tags: List[str] = field(default_factory=list)
    source_components: Dict[str, Any] = field(default_factory=dict)


def derive_semantics(record: Mapping[str, Any]) -> ItemSemantics:
    """
    Derive semantics from one exported item record.

    Args:
        record: One value of ``items.json``

    Returns:
        ItemSemantics with every applicable category set
    """
    raw_tags = list(record.get("tags", []))
    components = dict(record.get("components") or {})
    tags = TagSet(raw_tags)

    s = ItemSemantics(source_tags=raw_tags, source_components=components)

    # Seed with what the exporter already decided
    s.is_weapon = bool(record.get("is_weapon", False))
    s.is_food = bool(record.get("is_food", False))
    s.is_tool = bool(components.get("is_tool", False))

    apply_tag_rules(s, record, tags)
    apply_component_rules(s, record, components)
    post_process(s)
    return s


def apply_tag_rules(s: ItemSemantics, record: Mapping[str, Any], tags: TagSet) -> None:
    if tags.has_path("c", "tools") or tags.has_path_prefix("c", "tools/"):
        s.is_tool = True

    if (
        tags.has_path("c", "tools/melee_weapon")
        or tags.has_path("c", "tools/melee_weapons")
        or tags.has_path("minecraft", "swords")
    ):
        s.is_weapon = True
        s.is_melee_weapon = True

    if (
        tags.has_path("minecraft", "enchantable/weapon")
        or tags.has_path("minecraft", "enchantable/sword")
        or tags.has_path("minecraft", "enchantable/sharp_weapon")
    ):
        s.is_weapon = True

    if (
        tags.has_path_prefix("minecraft", "food")
        or tags.has_path_prefix("minecraft", "fishes")
        or tags.has_path("minecraft", "cat_food")
        or tags.has_path("minecraft", "ocelot_food")
        or tags.has_path_prefix("c", "foods")
    ):
        s.is_food = True

    # Animal food, not necessarily edible by players
    if tags.has_path("c", "animal_foods"):
        s.is_food_ingredient = True

    if tags.has_path("c", "stones") or tags.has_path_prefix("c", "ore_bearing_ground/"):
        s.is_block_item = True
        s.is_ingredient = True

    if str(record.get("translation_key", "")).startswith("block."):
        s.is_block_item = True

    if (
        tags.has_path_prefix("c", "ingots")
        or tags.has_path_prefix("c", "ores")
        or tags.has_path_prefix("c", "dusts")
    ):
        s.is_ingredient = True


def apply_component_rules(
    s: ItemSemantics, record: Mapping[str, Any], components: Mapping[str, Any]
) -> None:
    """
    Set flags from the exported components and use animation.

    The use animation is matched case-insensitively, so hand-written records
    with ``"eat"`` count as usable the same as exporter output with ``"EAT"``.
    """
    if "food" in components:
        s.is_food = True

    if components.get("is_tool"):
        s.is_tool = True

    if str(record.get("use_animation", "")).upper() in USABLE_ANIMATIONS:
        s.is_usable = True


def post_process(s: ItemSemantics) -> None:
    if s.is_melee_weapon or s.is_ranged_weapon:
        s.is_weapon = True

    # Building blocks count as ingredients too.
    if s.is_block_item:
        s.is_ingredient = True


def load_items_file(path: Path) -> Dict[str, ItemSemantics]:
    """
    Load an exported ``items.json`` and derive semantics for every item.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't a JSON object keyed by item id
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Items file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object keyed by item id in {path}")

    semantics = {item_id: derive_semantics(record) for item_id, record in data.items()}
    logger.info(f"Derived semantics for {len(semantics)} items from {path}")
    return semantics
