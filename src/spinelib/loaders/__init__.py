"""Loader utilities for skeleton documents and texture atlases."""

from .skeleton_loader import SkeletonLoader
from .atlas_loader import Atlas, AtlasPage, AtlasRegion, AtlasLoader, parse_atlas

__all__ = ['SkeletonLoader', 'Atlas', 'AtlasPage', 'AtlasRegion', 'AtlasLoader', 'parse_atlas']
