"""
SpineLib - 2D Skeletal Animation Runtime

Loads skeleton documents (bones, slots, skins, keyframed animations) and
computes, for any point in time, the sprites a renderer must draw with their
transforms and tint colors.
"""

# Animation
from .animation import (
    AnimationController,
    AnimationRunner,
    DocumentError,
    NotFound,
    Skeleton,
    SkeletonError,
    SkinAnimation,
    Sprite,
    Transform2D,
    build_skeleton,
)

# Loaders
from .loaders import Atlas, AtlasLoader, SkeletonLoader, parse_atlas

__version__ = "0.1.0"
__all__ = [
    # Animation
    "Skeleton",
    "SkinAnimation",
    "AnimationRunner",
    "AnimationController",
    "Sprite",
    "Transform2D",
    "build_skeleton",
    # Errors
    "SkeletonError",
    "DocumentError",
    "NotFound",
    # Loaders
    "SkeletonLoader",
    "Atlas",
    "AtlasLoader",
    "parse_atlas",
]
