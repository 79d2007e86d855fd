"""
Atlas Loader

Parses texture atlas descriptions (.atlas text files) listing where each
attachment image sits inside the atlas pages. Only metadata is read; page
images are left to the renderer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..animation.errors import AtlasError
from ..config.settings import PROJECT_ROOT

logger = logging.getLogger(__name__)

_INT_PAIRS = {"xy", "size", "orig", "offset"}


@dataclass
class AtlasRegion:
    """Rectangle of a page holding one attachment image."""

    name: str
    page: str
    rotate: bool = False
    xy: Tuple[int, int] = (0, 0)
    size: Tuple[int, int] = (0, 0)
    orig: Tuple[int, int] = (0, 0)
    offset: Tuple[int, int] = (0, 0)
    index: int = -1
    extras: Dict[str, str] = field(default_factory=dict)


@dataclass
class AtlasPage:
    """One texture image of the atlas."""

    name: str
    size: Tuple[int, int] = (0, 0)
    format: str = "RGBA8888"
    filter: Tuple[str, str] = ("Nearest", "Nearest")
    repeat: str = "none"
    regions: List[AtlasRegion] = field(default_factory=list)


@dataclass
class Atlas:
    """Parsed atlas: pages and their regions."""

    pages: List[AtlasPage] = field(default_factory=list)

    @property
    def regions(self) -> List[AtlasRegion]:
        return [region for page in self.pages for region in page.regions]

    def find(self, name: str, index: int = -1) -> Optional[AtlasRegion]:
        """
        Find a region by attachment image name.

        Args:
            name: Image name (Sprite.attachment)
            index: Frame index for image sequences (-1 for single images)

        Returns:
            AtlasRegion if found, None otherwise
        """
        for region in self.regions:
            if region.name == name and region.index == index:
                return region
        return None

    def names(self) -> List[str]:
        return sorted({region.name for region in self.regions})


def _int_tuple(value: str, count: int, line_number: int) -> Tuple[int, ...]:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != count:
        raise AtlasError(f"line {line_number}: expected {count} values, got '{value}'")
    try:
        return tuple(int(part) for part in parts)
    except ValueError:
        raise AtlasError(f"line {line_number}: expected integers, got '{value}'") from None


def _apply_region_field(region: AtlasRegion, key: str, value: str, line_number: int):
    if key == "rotate":
        region.rotate = value.lower() not in ("false", "0")
    elif key in _INT_PAIRS:
        setattr(region, key, _int_tuple(value, 2, line_number))
    elif key == "bounds":
        x, y, w, h = _int_tuple(value, 4, line_number)
        region.xy, region.size = (x, y), (w, h)
        if region.orig == (0, 0):
            region.orig = (w, h)
    elif key == "index":
        region.index = _int_tuple(value, 1, line_number)[0]
    else:
        region.extras[key] = value


def _apply_page_field(page: AtlasPage, key: str, value: str, line_number: int):
    if key == "size":
        page.size = _int_tuple(value, 2, line_number)
    elif key == "format":
        page.format = value
    elif key == "filter":
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 2:
            raise AtlasError(f"line {line_number}: expected 2 filters, got '{value}'")
        page.filter = (parts[0], parts[1])
    elif key == "repeat":
        page.repeat = value
    elif key != "pma":
        raise AtlasError(f"line {line_number}: unknown page field '{key}'")


def parse_atlas(text: str) -> Atlas:
    """
    Parse atlas text.

    Layout: a page name line followed by ``key: value`` page fields, then
    region name lines each followed by their fields. A blank line ends a page.

    Raises:
        AtlasError: On malformed lines or values
    """
    atlas = Atlas()
    page: Optional[AtlasPage] = None
    region: Optional[AtlasRegion] = None

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            page, region = None, None
            continue

        if ":" not in line:
            if page is None:
                page = AtlasPage(name=line)
                atlas.pages.append(page)
            else:
                region = AtlasRegion(name=line, page=page.name)
                page.regions.append(region)
            continue

        if page is None:
            raise AtlasError(f"line {line_number}: field outside of a page: '{line}'")
        key, value = (part.strip() for part in line.split(":", 1))
        if region is not None:
            _apply_region_field(region, key, value, line_number)
        else:
            _apply_page_field(page, key, value, line_number)

    return atlas


class AtlasLoader:
    """Load atlases from disk."""

    def load(self, path: Path | str) -> Atlas:
        """Load an atlas file."""

        atlas_path = Path(path)
        if not atlas_path.is_absolute():
            atlas_path = PROJECT_ROOT / atlas_path
        atlas_path = atlas_path.resolve()

        if not atlas_path.exists():
            raise FileNotFoundError(f"Atlas file not found: {atlas_path}")

        atlas = parse_atlas(atlas_path.read_text(encoding="utf-8"))
        logger.info("Loaded atlas %s: %d pages, %d regions",
                    atlas_path.name, len(atlas.pages), len(atlas.regions))
        return atlas
