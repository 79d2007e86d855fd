"""
Skeleton

Bone hierarchy, slots, skins and animations loaded from a skeleton document.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..config import settings
from ..config.settings import DEFAULT_SKIN_NAME, DEFAULT_SLOT_COLOR
from .animation import Animation, Event
from .errors import DocumentError, NotFound
from .fields import (
    flag,
    integer,
    number,
    optional_mapping,
    optional_str,
    parse_color,
    require_list,
    require_mapping,
    require_str,
)
from .skin import Skin
from .skin_animation import SkinAnimation
from .transform import Transform2D

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bone:
    """
    Single bone of the hierarchy.

    ``parent`` is the index of the parent bone in the skeleton's bone table
    (None for roots); parents always precede their children. A bone that does
    not inherit rotation or scale still follows its parent's position.
    """

    index: int
    name: str
    parent: Optional[int] = None
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0  # Degrees
    scale_x: float = 1.0
    scale_y: float = 1.0
    shear_x: float = 0.0
    shear_y: float = 0.0
    length: float = 0.0
    inherit_rotation: bool = True
    inherit_scale: bool = True
    transform: Transform2D = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "transform", Transform2D.from_srt(
            self.x, self.y, self.rotation, self.scale_x, self.scale_y, self.shear_x, self.shear_y
        ))

    def local_transform(
        self,
        rotation: Optional[float] = None,
        translation: Optional[Tuple[float, float]] = None,
        scale: Optional[Tuple[float, float]] = None,
        additive: Optional[bool] = None,
    ) -> Transform2D:
        """
        Local transform with animated components applied to the bind pose.

        Args:
            rotation: Sampled rotation in degrees (None keeps the bind value)
            translation: Sampled (x, y) (None keeps the bind value)
            scale: Sampled (x, y) scale (None keeps the bind value)
            additive: Apply the values on top of the bind pose instead of
                replacing it (None reads ADDITIVE_BONE_TIMELINES)

        Returns:
            Transform relative to the parent bone
        """
        if rotation is None and translation is None and scale is None:
            return self.transform

        if additive is None:
            additive = settings.ADDITIVE_BONE_TIMELINES

        x, y, angle = self.x, self.y, self.rotation
        scale_x, scale_y = self.scale_x, self.scale_y
        if additive:
            if translation is not None:
                x, y = x + translation[0], y + translation[1]
            if rotation is not None:
                angle += rotation
            if scale is not None:
                scale_x, scale_y = scale_x * scale[0], scale_y * scale[1]
        else:
            if translation is not None:
                x, y = translation
            if rotation is not None:
                angle = rotation
            if scale is not None:
                scale_x, scale_y = scale
        return Transform2D.from_srt(x, y, angle, scale_x, scale_y, self.shear_x, self.shear_y)

    def world_transform(self, local: Transform2D, parent_world: Transform2D) -> Transform2D:
        """Place a local transform of this bone inside its parent's world transform."""
        return local.compose_partial(parent_world, self.inherit_rotation, self.inherit_scale)


@dataclass(frozen=True)
class Slot:
    """Draw layer attached to a bone, holding an attachment and a tint."""

    index: int
    name: str
    bone: int
    color: Tuple[float, float, float, float] = DEFAULT_SLOT_COLOR
    attachment: Optional[str] = None


class Skeleton:
    """
    Immutable skeleton data shared by every SkinAnimation.

    Provides:
    - Bone and slot tables (slots in bind draw order)
    - Skin and animation lookup by name
    - Name listings for asset preloading
    """

    def __init__(
        self,
        bones: Iterable[Bone],
        slots: Iterable[Slot],
        skins: Optional[Mapping[str, Skin]] = None,
        animations: Optional[Mapping[str, Animation]] = None,
        events: Optional[Mapping[str, Event]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialize skeleton.

        Args:
            bones: Bone table, parents before children
            slots: Slot table in bind draw order
            skins: Skin name -> Skin
            animations: Animation name -> Animation
            events: Event definitions by name
            metadata: Free-form document metadata

        Raises:
            DocumentError: If the tables are inconsistent
        """
        self.bones: Tuple[Bone, ...] = tuple(bones)
        self.slots: Tuple[Slot, ...] = tuple(slots)
        self.skins: Mapping[str, Skin] = MappingProxyType(dict(skins or {}))
        self.animations: Mapping[str, Animation] = MappingProxyType(dict(animations or {}))
        self.events: Mapping[str, Event] = MappingProxyType(dict(events or {}))
        self.metadata: Mapping[str, Any] = MappingProxyType(dict(metadata or {}))

        for i, bone in enumerate(self.bones):
            if bone.index != i:
                raise DocumentError(f"Bone '{bone.name}' has index {bone.index}, expected {i}")
            if bone.parent is not None and not 0 <= bone.parent < i:
                raise DocumentError(f"Bone '{bone.name}' must come after its parent")
        for i, slot in enumerate(self.slots):
            if slot.index != i:
                raise DocumentError(f"Slot '{slot.name}' has index {slot.index}, expected {i}")
            if not 0 <= slot.bone < len(self.bones):
                raise DocumentError(f"Slot '{slot.name}' references missing bone {slot.bone}")

        self._bone_by_name: Dict[str, Bone] = {bone.name: bone for bone in self.bones}
        self._slot_by_name: Dict[str, Slot] = {slot.name: slot for slot in self.slots}

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> "Skeleton":
        """Build a skeleton from a decoded document tree."""
        return build_skeleton(document)

    def skin_names(self) -> List[str]:
        """Names of all skins in this skeleton."""
        return list(self.skins.keys())

    def animation_names(self) -> List[str]:
        """Names of all animations in this skeleton."""
        return list(self.animations.keys())

    def attachment_names(self) -> List[str]:
        """
        Image names of every drawable attachment in any skin.

        The purpose of this list is to allow preloading textures.

        Returns:
            Sorted names without duplicates
        """
        names = {
            attachment.path
            for skin in self.skins.values()
            for _, attachment in skin.iter_attachments()
            if attachment.drawable
        }
        return sorted(names)

    def has_skin(self, name: str) -> bool:
        return name in self.skins

    def has_animation(self, name: str) -> bool:
        return name in self.animations

    def get_skin(self, name: str) -> Skin:
        """
        Find a skin by name.

        Raises:
            NotFound: If no skin has this name
        """
        try:
            return self.skins[name]
        except KeyError:
            raise NotFound("skin", name) from None

    def get_animation(self, name: str) -> Animation:
        """
        Find an animation by name.

        Raises:
            NotFound: If no animation has this name
        """
        try:
            return self.animations[name]
        except KeyError:
            raise NotFound("animation", name) from None

    def animation_duration(self, name: str) -> float:
        """Duration of an animation in seconds (NotFound if unknown)."""
        return self.get_animation(name).duration

    @property
    def default_skin(self) -> Optional[Skin]:
        return self.skins.get(DEFAULT_SKIN_NAME)

    def get_bone(self, name: str) -> Optional[Bone]:
        return self._bone_by_name.get(name)

    def get_slot(self, name: str) -> Optional[Slot]:
        return self._slot_by_name.get(name)

    def bind(self, skin: str, animation: Optional[str] = None) -> SkinAnimation:
        """
        Bind a skin and an optional animation for sprite queries.

        Raises:
            NotFound: If the skin or animation does not exist
        """
        return SkinAnimation(self, skin, animation)

    def __repr__(self):
        return (f"Skeleton(bones={len(self.bones)}, slots={len(self.slots)}, "
                f"skins={len(self.skins)}, animations={len(self.animations)})")


# ----------------------------------------------------------------------------
# Document construction
# ----------------------------------------------------------------------------

def _build_bones(entries) -> List[Bone]:
    bones: List[Bone] = []
    indices: Dict[str, int] = {}
    for i, entry in enumerate(require_list(entries, "bones")):
        path = f"bones[{i}]"
        entry = require_mapping(entry, path)
        name = require_str(entry, "name", path)
        if name in indices:
            raise DocumentError(f"Duplicate bone '{name}'", path)

        parent = None
        parent_name = optional_str(entry, "parent", path)
        if parent_name is not None:
            if parent_name not in indices:
                raise DocumentError(f"Parent bone '{parent_name}' is not defined before '{name}'", path)
            parent = indices[parent_name]

        bones.append(Bone(
            index=i,
            name=name,
            parent=parent,
            x=number(entry, "x", 0.0, path),
            y=number(entry, "y", 0.0, path),
            rotation=number(entry, "rotation", 0.0, path),
            scale_x=number(entry, "scaleX", 1.0, path),
            scale_y=number(entry, "scaleY", 1.0, path),
            shear_x=number(entry, "shearX", 0.0, path),
            shear_y=number(entry, "shearY", 0.0, path),
            length=number(entry, "length", 0.0, path),
            inherit_rotation=flag(entry, "inheritRotation", True, path),
            inherit_scale=flag(entry, "inheritScale", True, path),
        ))
        indices[name] = i
    return bones


def _build_slots(entries, bone_indices: Dict[str, int]) -> List[Slot]:
    slots: List[Slot] = []
    seen = set()
    for i, entry in enumerate(require_list(entries, "slots")):
        path = f"slots[{i}]"
        entry = require_mapping(entry, path)
        name = require_str(entry, "name", path)
        if name in seen:
            raise DocumentError(f"Duplicate slot '{name}'", path)
        bone_name = require_str(entry, "bone", path)
        if bone_name not in bone_indices:
            raise DocumentError(f"Unknown bone '{bone_name}'", path)

        color = entry.get("color")
        slots.append(Slot(
            index=i,
            name=name,
            bone=bone_indices[bone_name],
            color=parse_color(color, f"{path}.color") if color is not None else DEFAULT_SLOT_COLOR,
            attachment=optional_str(entry, "attachment", path),
        ))
        seen.add(name)
    return slots


def _build_skins(entries, slot_indices: Dict[str, int]) -> Dict[str, Skin]:
    """Skins as ``{name: {slot: {...}}}`` or ``[{name, attachments}]``."""
    if isinstance(entries, (list, tuple)):
        skins = {}
        for i, entry in enumerate(entries):
            path = f"skins[{i}]"
            entry = require_mapping(entry, path)
            name = require_str(entry, "name", path)
            if name in skins:
                raise DocumentError(f"Duplicate skin '{name}'", path)
            skins[name] = Skin.from_dict(name, optional_mapping(entry, "attachments", path), slot_indices)
        return skins

    return {
        name: Skin.from_dict(name, slots, slot_indices)
        for name, slots in require_mapping(entries, "skins").items()
    }


def _build_events(entries) -> Dict[str, Event]:
    events = {}
    for name, entry in require_mapping(entries, "events").items():
        path = f"events.{name}"
        entry = require_mapping(entry if entry is not None else {}, path)
        events[name] = Event(
            name=name,
            int_value=integer(entry, "int", 0, path),
            float_value=number(entry, "float", 0.0, path),
            string_value=optional_str(entry, "string", path),
        )
    return events


def build_skeleton(document: Dict[str, Any]) -> Skeleton:
    """
    Build a Skeleton from a decoded skeleton document.

    Construction is all-or-nothing: any error aborts before a Skeleton
    exists.

    Args:
        document: Tree of dicts, lists and scalars (e.g. from json.load)

    Returns:
        Immutable Skeleton

    Raises:
        DocumentError: On missing fields, unresolved references or unknown
            attachment/curve types
    """
    document = require_mapping(document, "document")

    bones = _build_bones(document.get("bones") or [])
    bone_indices = {bone.name: bone.index for bone in bones}

    slots = _build_slots(document.get("slots") or [], bone_indices)
    slot_indices = {slot.name: slot.index for slot in slots}

    skins = _build_skins(document.get("skins") or {}, slot_indices)
    events = _build_events(document.get("events") or {})

    animations = {
        name: Animation.from_dict(name, data, bone_indices, slot_indices, events)
        for name, data in optional_mapping(document, "animations", "").items()
    }

    skeleton = Skeleton(
        bones,
        slots,
        skins=skins,
        animations=animations,
        events=events,
        metadata=optional_mapping(document, "skeleton", ""),
    )
    logger.debug(
        "Built skeleton: %d bones, %d slots, %d skins, %d animations",
        len(bones), len(slots), len(skins), len(animations),
    )
    return skeleton
