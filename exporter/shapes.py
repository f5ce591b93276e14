"""
Axis-aligned box geometry for collision and outline shapes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Box:
    """Single AABB in block-local coordinates (usually 0..1)."""

    min: Vec3
    max: Vec3

    @classmethod
    def from_json(cls, data: Dict[str, Sequence[float]]) -> "Box":
        return cls(min=_vec3(data["min"]), max=_vec3(data["max"]))

    def to_json(self) -> Dict[str, List[float]]:
        return {"min": list(self.min), "max": list(self.max)}


def _vec3(values: Sequence[Any]) -> Vec3:
    if len(values) != 3:
        raise ValueError(f"Expected 3 coordinates, got {len(values)}: {values!r}")
    x, y, z = (float(v) for v in values)
    return (x, y, z)


FULL_CUBE = (Box(min=(0.0, 0.0, 0.0), max=(1.0, 1.0, 1.0)),)
EMPTY = ()


def parse_shape(raw: Any) -> Tuple[Box, ...]:
    """
    Build a shape from its description.

    Accepts the names ``"full"``/``"empty"`` or a list of box mappings.
    """
    if raw is None or raw == "empty":
        return EMPTY
    if raw == "full":
        return FULL_CUBE
    if isinstance(raw, str):
        raise ValueError(f"Unknown shape name: {raw}")
    return tuple(box if isinstance(box, Box) else Box.from_json(box) for box in raw)


def serialize_shape(shape: Iterable[Box]) -> List[Dict[str, List[float]]]:
    return [box.to_json() for box in shape]
