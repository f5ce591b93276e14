"""
Feature extractors for block states and items.
"""

from .blocks import register_geometry_extractors, register_tag_extractors
from .items import is_food, is_weapon, register_item_extractors

__all__ = [
    "register_geometry_extractors",
    "register_tag_extractors",
    "register_item_extractors",
    "is_food",
    "is_weapon",
]
