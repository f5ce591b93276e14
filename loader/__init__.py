"""
Readers for collected snapshots: block shape lookup and item semantics.
"""

from .blocks import ShapeInfo, StateKey, load_blocks_dir, load_blocks_file, merge_blocks_maps
from .items import ItemSemantics, derive_semantics, load_items_file

__all__ = [
    "ShapeInfo",
    "StateKey",
    "load_blocks_dir",
    "load_blocks_file",
    "merge_blocks_maps",
    "ItemSemantics",
    "derive_semantics",
    "load_items_file",
]
