"""
Item feature extractors and item classification predicates.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from exporter.host import Host, Item
from exporter.registry import ExtractorRegistry

KIND = "items"

FIRE_RESISTANT = "fire_resistant"

WEAPON_TAGS = frozenset({"minecraft:swords", "minecraft:axes", "minecraft:weapons"})


def is_weapon(tags: Iterable[str], components: Mapping[str, Any]) -> bool:
    """Tag heuristic; ``components`` is accepted so rules can grow to use it."""
    return any(tag in WEAPON_TAGS for tag in tags)


def is_food(components: Mapping[str, Any]) -> bool:
    return "food" in components


def item_rarity(item: Item) -> Optional[str]:
    rarity = item.get("rarity")
    if rarity is None:
        return None
    return str(rarity).upper()


def item_tags(item: Item) -> List[str]:
    return list(item.tags)


def item_components(item: Item) -> Dict[str, Any]:
    """Summarise the data components of the item's default stack."""
    components: Dict[str, Any] = {}

    food = item.get("food")
    if food is not None:
        components["food"] = {
            "nutrition": int(food.get("nutrition", 0)),
            "saturation": float(food.get("saturation", 0.0)),
            "can_always_eat": bool(food.get("can_always_eat", False)),
        }

    max_damage = item.get("max_damage")
    if max_damage is not None:
        # Same component read from the stack and from its prototype.
        components["max_damage"] = int(max_damage)
        components["max_damage_stack"] = int(max_damage)

    damage = item.get("damage")
    if damage is not None:
        components["damage"] = int(damage)

    enchantments = item.get("enchantments")
    if enchantments is not None:
        components["enchantments"] = {str(k): int(v) for k, v in enchantments.items()}

    if item.get("tool") is not None:
        components["is_tool"] = True

    return components


def fireproof_extractor(host: Host):
    """
    Build the ``fireproof`` extractor for a host.

    Hosts that predate the fire resistance component report it absent, and
    every item is then exported as not fireproof.
    """
    supported = host.has_component(FIRE_RESISTANT)

    def fireproof(item: Item) -> bool:
        return supported and item.get(FIRE_RESISTANT) is not None

    return fireproof


def register_item_extractors(registry: ExtractorRegistry, host: Host) -> None:
    registry.register(KIND, "id", lambda i: i.id)
    registry.register(KIND, "max_stack_size", lambda i: int(i.max_stack_size))
    registry.register(KIND, "translation_key", lambda i: i.translation_key)
    registry.register(KIND, "rarity", item_rarity)
    registry.register(KIND, "fireproof", fireproof_extractor(host))
    registry.register(KIND, "use_animation", lambda i: i.use_animation)
    registry.register(KIND, "tags", item_tags)
    registry.register(KIND, "components", item_components)
    registry.register(KIND, "is_weapon", lambda i: is_weapon(i.tags, item_components(i)))
    registry.register(KIND, "is_food", lambda i: is_food(item_components(i)))
