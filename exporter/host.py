"""
Host data model for the export pipeline.

The host environment (a running game server, or a static registry description
in tests and offline runs) supplies the block-state and item registries the
exporter walks. Records are immutable for the duration of an export.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

import yaml

from exporter.shapes import Box, parse_shape

logger = logging.getLogger(__name__)


def make_props_key(props: Mapping[str, str]) -> str:
    """Deterministically encode block-state properties as ``k1=v1,k2=v2``."""
    if not props:
        return ""
    return ",".join(f"{k}={props[k]}" for k in sorted(props))


def default_translation_key(item_id: str, prefix: str = "item") -> str:
    namespace, _, path = item_id.partition(":")
    if not path:
        namespace, path = "minecraft", namespace
    return f"{prefix}.{namespace}.{path.replace('/', '.')}"


@dataclass(frozen=True)
class BlockState:
    """One state of one block, as seen at the world origin with no entity context."""

    block_id: str
    properties: Tuple[Tuple[str, str], ...] = ()
    collision_shape: Tuple[Box, ...] = ()
    outline_shape: Tuple[Box, ...] = ()
    air: bool = False
    opaque: bool = False
    solid_block: bool = False
    replaceable: bool = False
    tags: FrozenSet[str] = frozenset()
    fluid: Optional[str] = None
    fluid_tags: FrozenSet[str] = frozenset()

    @property
    def key(self) -> str:
        return f"{self.block_id}[{make_props_key(dict(self.properties))}]"

    def property_map(self) -> Dict[str, str]:
        return dict(self.properties)

    def is_in(self, tag: str) -> bool:
        return tag in self.tags

    def fluid_is_in(self, tag: str) -> bool:
        return tag in self.fluid_tags


@dataclass(frozen=True)
class Item:
    """One item definition together with the components of its default stack."""

    id: str
    max_stack_size: int = 64
    translation_key: str = ""
    use_animation: str = "NONE"
    tags: Tuple[str, ...] = ()
    components: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "components", MappingProxyType(dict(self.components)))

    def __hash__(self) -> int:
        # Component values are nested dicts; an item is identified by its id.
        return hash(self.id)

    @property
    def key(self) -> str:
        return self.id

    def get(self, component: str) -> Any:
        return self.components.get(component)


class Host:
    """
    Interface the exporter needs from its host environment.

    Subclasses provide the registries; ``stop`` is the shutdown request made
    once the export run is over.
    """

    run_directory: Path

    def block_states(self) -> Iterator[BlockState]:
        raise NotImplementedError

    def items(self) -> Iterator[Item]:
        raise NotImplementedError

    def has_component(self, name: str) -> bool:
        """Whether this host version knows the named optional item component."""
        return False

    def stop(self) -> None:
        raise NotImplementedError


class StaticHost(Host):
    """Host backed by an in-memory registry description."""

    def __init__(
        self,
        block_states: Iterable[BlockState] = (),
        items: Iterable[Item] = (),
        capabilities: Iterable[str] = (),
        run_directory: Optional[Path] = None,
    ):
        self._block_states = list(block_states)
        self._items = list(items)
        self.capabilities = frozenset(capabilities)
        self.run_directory = Path(run_directory) if run_directory is not None else Path("run")
        self.stopped = False

    def block_states(self) -> Iterator[BlockState]:
        return iter(self._block_states)

    def items(self) -> Iterator[Item]:
        return iter(self._items)

    def has_component(self, name: str) -> bool:
        return name in self.capabilities

    def stop(self) -> None:
        logger.info("Host shutdown requested")
        self.stopped = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any], run_directory: Optional[Path] = None) -> "StaticHost":
        """
        Build a host from a registry description.

        Args:
            data: Mapping with optional ``blocks``, ``items`` and ``capabilities`` lists
            run_directory: Base directory the exporter writes under

        Returns:
            StaticHost enumerating the described records in file order
        """
        data = data or {}
        states: List[BlockState] = []
        for block in data.get("blocks", []):
            states.extend(_parse_block(block))
        items = [_parse_item(item) for item in data.get("items", [])]
        host = cls(
            block_states=states,
            items=items,
            capabilities=data.get("capabilities", []),
            run_directory=run_directory,
        )
        logger.info(f"StaticHost loaded: {len(states)} block states, {len(items)} items")
        return host

    @classmethod
    def from_file(cls, path: Path, run_directory: Optional[Path] = None) -> "StaticHost":
        """Load a registry description from a YAML (or JSON) file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Registry description not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data, run_directory=run_directory)


_STATE_FLAGS = ("air", "opaque", "solid_block", "replaceable")


def _parse_block(block: Dict[str, Any]) -> List[BlockState]:
    block_id = block["id"]
    defaults = {k: v for k, v in block.items() if k not in ("id", "states")}
    raw_states = block.get("states") or [{}]

    states = []
    for raw in raw_states:
        merged = {**defaults, **raw}
        collision = parse_shape(merged.get("collision", "empty"))
        outline = parse_shape(merged["outline"]) if "outline" in merged else collision
        properties = merged.get("properties") or {}
        states.append(
            BlockState(
                block_id=block_id,
                properties=tuple((str(k), str(v)) for k, v in properties.items()),
                collision_shape=collision,
                outline_shape=outline,
                tags=frozenset(merged.get("tags", [])),
                fluid=merged.get("fluid"),
                fluid_tags=frozenset(merged.get("fluid_tags", [])),
                **{flag: bool(merged.get(flag, False)) for flag in _STATE_FLAGS},
            )
        )
    return states


def _parse_item(item: Dict[str, Any]) -> Item:
    item_id = item["id"]
    return Item(
        id=item_id,
        max_stack_size=int(item.get("max_stack_size", 64)),
        translation_key=item.get("translation_key") or default_translation_key(item_id),
        use_animation=str(item.get("use_animation", "NONE")).upper(),
        tags=tuple(item.get("tags", [])),
        components=dict(item.get("components") or {}),
    )
