"""
Skin Animation

Binds a skin and an animation to a skeleton and produces the sprites to
draw at a given time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

import numpy as np
from pyrr import Matrix44

from ..config import settings
from .animation import Animation, Event
from .skin import Attachment
from .transform import Transform2D

if TYPE_CHECKING:
    from .skeleton import Skeleton, Slot


@dataclass(frozen=True)
class Sprite:
    """
    Drawable element of one frame.

    ``attachment`` is the image name the renderer looks its texture up by;
    ``transform`` places the attachment's centre in world space.
    """

    slot: str
    attachment: str
    transform: Transform2D
    color: Tuple[float, float, float, float]
    width: float = 0.0
    height: float = 0.0

    # Transform2D compares by value and is unhashable
    __hash__ = None

    @property
    def position(self) -> Tuple[float, float]:
        return self.transform.position

    @property
    def rotation(self) -> float:
        return self.transform.rotation

    @property
    def scale(self) -> Tuple[float, float]:
        return self.transform.scale

    def quad_transform(self) -> Transform2D:
        """Transform mapping the unit quad (-1, -1)..(1, 1) onto the sprite."""
        return self.transform.scaled(self.width / 2.0, self.height / 2.0)

    def to_matrix3(self) -> np.ndarray:
        """
        3x3 placement matrix of the unit quad.

        Row-vector layout: combine with a camera matrix C as ``M @ C``
        (``C * M`` in column-vector notation).
        """
        return self.quad_transform().to_matrix3()

    def to_matrix4(self) -> Matrix44:
        """4x4 placement matrix of the unit quad (see :meth:`to_matrix3`)."""
        return self.quad_transform().to_matrix4()

    def corners(self) -> List[Tuple[float, float]]:
        """World corners: top-left, top-right, bottom-right, bottom-left."""
        quad = self.quad_transform()
        return [quad.apply(p) for p in ((-1.0, 1.0), (1.0, 1.0), (1.0, -1.0), (-1.0, -1.0))]


class SkinAnimation:
    """
    Skeleton + skin + optional animation, queryable at any time.

    Holds no mutable state: every query recomputes from the shared
    skeleton, so one instance can serve any number of callers.
    """

    def __init__(self, skeleton: Skeleton, skin: str, animation: Optional[str] = None):
        """
        Initialize skin animation.

        Args:
            skeleton: Shared skeleton data
            skin: Name of the skin to draw
            animation: Name of the animation to play (None for bind pose)

        Raises:
            NotFound: If the skin or animation does not exist
        """
        self.skeleton = skeleton
        self.skin = skeleton.get_skin(skin)
        self.animation: Optional[Animation] = (
            skeleton.get_animation(animation) if animation is not None else None
        )
        default_skin = skeleton.default_skin
        self._fallback_skin = default_skin if default_skin is not self.skin else None
        self._additive = settings.ADDITIVE_BONE_TIMELINES

    @property
    def duration(self) -> float:
        """Duration of the bound animation (0 for bind pose)."""
        return self.animation.duration if self.animation is not None else 0.0

    def bone_transforms(self, time: float) -> List[Transform2D]:
        """
        World transform of every bone at a given time.

        Walks the bone table once; parents precede children so each parent's
        world transform is ready when its children are reached.

        Args:
            time: Time in seconds

        Returns:
            Transforms indexed like the skeleton's bone table
        """
        bone_tracks = self.animation.bones if self.animation is not None else {}
        world: List[Transform2D] = []
        for bone in self.skeleton.bones:
            tracks = bone_tracks.get(bone.index)
            if tracks is None:
                local = bone.transform
            else:
                local = bone.local_transform(
                    rotation=_sample(tracks.rotate, time),
                    translation=_sample(tracks.translate, time),
                    scale=_sample(tracks.scale, time),
                    additive=self._additive,
                )

            if bone.parent is None:
                world.append(local)
            else:
                world.append(bone.world_transform(local, world[bone.parent]))
        return world

    def draw_order(self, time: float) -> Tuple[int, ...]:
        """Slot indices in draw order (back to front) at a given time."""
        order = None
        if self.animation is not None and self.animation.draw_order is not None:
            order = self.animation.draw_order.sample(time)
        if order is None:
            return tuple(range(len(self.skeleton.slots)))
        return order

    def find_attachment(self, slot_index: int, name: str) -> Optional[Attachment]:
        """Look an attachment up in the bound skin, then in the default skin."""
        attachment = self.skin.find(slot_index, name)
        if attachment is None and self._fallback_skin is not None:
            attachment = self._fallback_skin.find(slot_index, name)
        return attachment

    def _slot_state(self, slot: Slot, time: float):
        """Active attachment name and color of a slot."""
        name, color = slot.attachment, slot.color
        if self.animation is not None:
            tracks = self.animation.slots.get(slot.index)
            if tracks is not None:
                if tracks.attachment is not None and len(tracks.attachment):
                    name = tracks.attachment.sample(time)
                sampled = _sample(tracks.color, time)
                if sampled is not None:
                    color = sampled
        return name, color

    def interpolate(self, time: float) -> List[Sprite]:
        """
        Compute the sprites to draw at a given time.

        Args:
            time: Time in seconds (clamped to the animation's keyframes)

        Returns:
            Sprites sorted back to front; each may cover the previous ones
        """
        bones = self.bone_transforms(time)
        sprites = []
        for slot_index in self.draw_order(time):
            slot = self.skeleton.slots[slot_index]
            name, color = self._slot_state(slot, time)
            if name is None:
                continue
            attachment = self.find_attachment(slot_index, name)
            if attachment is None or not attachment.drawable:
                continue

            sprites.append(Sprite(
                slot=slot.name,
                attachment=attachment.path,
                transform=attachment.transform.compose(bones[slot.bone]),
                color=tuple(color),
                width=attachment.width,
                height=attachment.height,
            ))
        return sprites

    def events(self, start: float, end: float) -> List[Event]:
        """Events fired in the window (start, end]."""
        if self.animation is None or self.animation.events is None:
            return []
        return self.animation.events.fired(start, end)

    def run(self, period: float) -> AnimationRunner:
        """
        Iterate frames at a fixed period, looping over the animation.

        Args:
            period: Seconds between frames

        Returns:
            Endless iterator of sprite lists
        """
        return AnimationRunner(self, period)

    def __repr__(self):
        animation = self.animation.name if self.animation is not None else None
        return f"SkinAnimation(skin='{self.skin.name}', animation={animation!r})"


class AnimationRunner:
    """
    Endless frame iterator over a SkinAnimation.

    Frame n is ``interpolate((n * period) % duration)``; the cursor is the
    frame count, so the elapsed time never accumulates rounding error.
    """

    def __init__(self, skin_animation: SkinAnimation, period: float):
        if period <= 0.0:
            raise ValueError(f"Frame period must be positive, got {period}")
        self.skin_animation = skin_animation
        self.period = period
        self.frame = 0

    @property
    def time(self) -> float:
        """Animation time of the next frame."""
        duration = self.skin_animation.duration
        if duration <= 0.0:
            return 0.0
        return (self.frame * self.period) % duration

    def reset(self):
        """Restart from frame 0."""
        self.frame = 0

    def __iter__(self) -> Iterator[List[Sprite]]:
        return self

    def __next__(self) -> List[Sprite]:
        time = self.time
        self.frame += 1
        return self.skin_animation.interpolate(time)

    def __repr__(self):
        return f"AnimationRunner(period={self.period}, frame={self.frame})"


def _sample(timeline, time: float):
    return timeline.sample(time) if timeline is not None else None
