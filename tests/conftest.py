# Automatically add the project root to sys.path for pytest discovery of exporter/ and loader/
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from exporter.host import BlockState, Item, StaticHost  # noqa: E402
from exporter.shapes import FULL_CUBE  # noqa: E402


@pytest.fixture
def air_state():
    return BlockState(block_id="minecraft:air", air=True, replaceable=True)


@pytest.fixture
def stone_state():
    return BlockState(
        block_id="minecraft:stone",
        collision_shape=FULL_CUBE,
        outline_shape=FULL_CUBE,
        opaque=True,
        solid_block=True,
    )


@pytest.fixture
def apple_item():
    return Item(
        id="minecraft:apple",
        translation_key="item.minecraft.apple",
        use_animation="EAT",
        components={
            "rarity": "common",
            "food": {"nutrition": 4, "saturation": 2.4, "can_always_eat": False},
        },
    )


@pytest.fixture
def sword_item():
    return Item(
        id="minecraft:iron_sword",
        max_stack_size=1,
        translation_key="item.minecraft.iron_sword",
        tags=("minecraft:swords", "minecraft:enchantable/sword"),
        components={"rarity": "common", "max_damage": 250, "damage": 0, "tool": {}},
    )


@pytest.fixture
def static_host(tmp_path, air_state, stone_state, apple_item, sword_item):
    return StaticHost(
        block_states=[air_state, stone_state],
        items=[apple_item, sword_item],
        capabilities=["fire_resistant"],
        run_directory=tmp_path / "run",
    )
