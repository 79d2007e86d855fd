"""
Animation

Keyframe timelines and the animations that own them.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .curves import LINEAR, STEPPED, Curve
from .errors import DocumentError
from .fields import (
    integer,
    number,
    optional_mapping,
    optional_str,
    parse_color,
    require_list,
    require_mapping,
    require_str,
)


@dataclass(frozen=True)
class Keyframe:
    """
    Single keyframe of a timeline.

    ``curve`` shapes the segment from this keyframe to the next one.
    """

    time: float
    value: Any
    curve: Curve = LINEAR


class Timeline:
    """
    Time-ordered keyframes driving one property.

    The base class holds its value until the next keyframe; subclasses
    override :meth:`interpolate` to blend values.
    """

    def __init__(self, keyframes: Iterable[Keyframe]):
        """
        Initialize timeline.

        Args:
            keyframes: Keyframes with strictly increasing times

        Raises:
            DocumentError: If keyframe times are not strictly increasing
        """
        self.keyframes: Tuple[Keyframe, ...] = tuple(keyframes)
        self._times = [kf.time for kf in self.keyframes]
        for previous, current in zip(self._times, self._times[1:]):
            if current <= previous:
                raise DocumentError(
                    f"Keyframe times must increase strictly ({previous} then {current})"
                )

    @property
    def end_time(self) -> float:
        return self._times[-1] if self._times else 0.0

    def __len__(self):
        return len(self.keyframes)

    def sample(self, time: float):
        """
        Sample the timeline at a given time.

        Times before the first keyframe clamp to the first value, times at or
        after the last keyframe clamp to the last value.

        Args:
            time: Time in seconds

        Returns:
            Interpolated value, or None if the timeline has no keyframes
        """
        if not self.keyframes:
            return None

        index = bisect_right(self._times, time) - 1
        if index < 0:
            return self.keyframes[0].value
        if index >= len(self.keyframes) - 1:
            return self.keyframes[-1].value

        k0 = self.keyframes[index]
        k1 = self.keyframes[index + 1]
        fraction = (time - k0.time) / (k1.time - k0.time)
        return self.interpolate(k0.value, k1.value, k0.curve.remap(fraction))

    def interpolate(self, v0, v1, factor: float):
        return v0

    def __repr__(self):
        return f"{type(self).__name__}(keyframes={len(self.keyframes)}, end={self.end_time:.3f}s)"


class VectorTimeline(Timeline):
    """Timeline over tuples of floats, blended component-wise."""

    def interpolate(self, v0, v1, factor: float):
        a = np.asarray(v0, dtype='f8')
        b = np.asarray(v1, dtype='f8')
        return tuple((a + (b - a) * factor).tolist())


class TranslateTimeline(VectorTimeline):
    """Bone translation (x, y)."""


class ScaleTimeline(VectorTimeline):
    """Bone scale (x, y)."""


class ColorTimeline(VectorTimeline):
    """Slot tint (r, g, b, a), channels in [0, 1]."""


class RotateTimeline(Timeline):
    """Bone rotation in degrees, interpolated along the shortest arc."""

    def interpolate(self, v0, v1, factor: float):
        # Wrap the delta into (-180, 180]
        delta = 180.0 - (180.0 - (v1 - v0)) % 360.0
        return v0 + delta * factor


class AttachmentTimeline(Timeline):
    """Active attachment name per slot (or None); always stepped."""


class DrawOrderTimeline(Timeline):
    """
    Slot draw order.

    Each keyframe value is a full permutation of slot indices, or None for
    the bind order.
    """

    def sample(self, time: float):
        if not self.keyframes or time < self.keyframes[0].time:
            return None
        return super().sample(time)


@dataclass(frozen=True)
class Event:
    """Named event fired by an animation."""

    name: str
    time: float = 0.0
    int_value: int = 0
    float_value: float = 0.0
    string_value: Optional[str] = None


class EventTimeline:
    """Events sorted by time; several events may share a time."""

    def __init__(self, events: Iterable[Event]):
        self.events: Tuple[Event, ...] = tuple(events)
        for previous, current in zip(self.events, self.events[1:]):
            if current.time < previous.time:
                raise DocumentError(
                    f"Event times must not decrease ({previous.time} then {current.time})"
                )

    @property
    def end_time(self) -> float:
        return self.events[-1].time if self.events else 0.0

    def __len__(self):
        return len(self.events)

    def fired(self, start: float, end: float) -> List[Event]:
        """
        Events in the half-open window (start, end].

        Pass a negative ``start`` to include events at time 0.
        """
        return [event for event in self.events if start < event.time <= end]


@dataclass(frozen=True)
class BoneTimelines:
    """Rotation, translation and scale tracks of one bone."""

    rotate: Optional[RotateTimeline] = None
    translate: Optional[TranslateTimeline] = None
    scale: Optional[ScaleTimeline] = None

    @property
    def end_time(self) -> float:
        return max((t.end_time for t in (self.rotate, self.translate, self.scale) if t), default=0.0)


@dataclass(frozen=True)
class SlotTimelines:
    """Color and attachment tracks of one slot."""

    color: Optional[ColorTimeline] = None
    attachment: Optional[AttachmentTimeline] = None

    @property
    def end_time(self) -> float:
        return max((t.end_time for t in (self.color, self.attachment) if t), default=0.0)


class Animation:
    """
    Complete animation with per-bone and per-slot timelines.

    Bone and slot timelines are keyed by index into the skeleton's tables.
    """

    def __init__(
        self,
        name: str,
        bones: Optional[Dict[int, BoneTimelines]] = None,
        slots: Optional[Dict[int, SlotTimelines]] = None,
        draw_order: Optional[DrawOrderTimeline] = None,
        events: Optional[EventTimeline] = None,
    ):
        """
        Initialize animation.

        Args:
            name: Animation name
            bones: Bone index -> timelines
            slots: Slot index -> timelines
            draw_order: Draw order timeline, if any
            events: Event timeline, if any
        """
        self.name = name
        self.bones: Dict[int, BoneTimelines] = dict(bones or {})
        self.slots: Dict[int, SlotTimelines] = dict(slots or {})
        self.draw_order = draw_order
        self.events = events

        # Duration is the last keyframe of any timeline
        ends = [t.end_time for t in self.bones.values()]
        ends += [t.end_time for t in self.slots.values()]
        ends += [t.end_time for t in (draw_order, events) if t is not None]
        self.duration: float = max(ends, default=0.0)

    @classmethod
    def from_dict(
        cls,
        name: str,
        data: Dict[str, Any],
        bone_indices: Dict[str, int],
        slot_indices: Dict[str, int],
        event_defaults: Optional[Dict[str, Event]] = None,
    ) -> "Animation":
        """
        Create an animation from document data.

        Args:
            name: Animation name
            data: Animation mapping (bones/slots/drawOrder/events)
            bone_indices: Bone name -> index
            slot_indices: Slot name -> index
            event_defaults: Document-level event definitions

        Raises:
            DocumentError: On unknown bones/slots or malformed keyframes
        """
        path = f"animations.{name}"
        data = require_mapping(data, path)

        bones = {}
        for bone_name, tracks in optional_mapping(data, "bones", path).items():
            bone_path = f"{path}.bones.{bone_name}"
            if bone_name not in bone_indices:
                raise DocumentError(f"Unknown bone '{bone_name}'", bone_path)
            tracks = require_mapping(tracks, bone_path)
            bones[bone_indices[bone_name]] = BoneTimelines(
                rotate=_timeline(RotateTimeline, tracks, "rotate", bone_path, _rotate_value),
                translate=_timeline(TranslateTimeline, tracks, "translate", bone_path, _xy_value(0.0)),
                scale=_timeline(ScaleTimeline, tracks, "scale", bone_path, _xy_value(1.0)),
            )

        slots = {}
        for slot_name, tracks in optional_mapping(data, "slots", path).items():
            slot_path = f"{path}.slots.{slot_name}"
            if slot_name not in slot_indices:
                raise DocumentError(f"Unknown slot '{slot_name}'", slot_path)
            tracks = require_mapping(tracks, slot_path)
            slots[slot_indices[slot_name]] = SlotTimelines(
                color=_timeline(ColorTimeline, tracks, "color", slot_path, _color_value),
                attachment=_timeline(AttachmentTimeline, tracks, "attachment", slot_path,
                                     _attachment_value, stepped=True),
            )

        draw_order = None
        draw_order_key = "drawOrder" if "drawOrder" in data else "draworder"
        if data.get(draw_order_key) is not None:
            draw_order = _draw_order_timeline(
                data[draw_order_key], slot_indices, f"{path}.{draw_order_key}"
            )

        events = None
        if data.get("events") is not None:
            events = _event_timeline(data["events"], event_defaults or {}, f"{path}.events")

        return cls(name, bones=bones, slots=slots, draw_order=draw_order, events=events)

    def __repr__(self):
        return (f"Animation(name='{self.name}', duration={self.duration:.2f}s, "
                f"bones={len(self.bones)}, slots={len(self.slots)})")


# ----------------------------------------------------------------------------
# Keyframe parsing
# ----------------------------------------------------------------------------

def _rotate_value(data: Dict[str, Any], path: str) -> float:
    key = "angle" if "angle" in data else "value"
    return number(data, key, 0.0, path)


def _xy_value(default: float) -> Callable[[Dict[str, Any], str], Tuple[float, float]]:
    def read(data: Dict[str, Any], path: str) -> Tuple[float, float]:
        return number(data, "x", default, path), number(data, "y", default, path)
    return read


def _color_value(data: Dict[str, Any], path: str) -> Tuple[float, float, float, float]:
    return parse_color(data.get("color", "FFFFFFFF"), path)


def _attachment_value(data: Dict[str, Any], path: str) -> Optional[str]:
    return optional_str(data, "name", path)


def _timeline(timeline_cls, tracks: Dict[str, Any], key: str, path: str,
              read_value, stepped: bool = False):
    """Build one timeline from ``tracks[key]``, None when absent."""
    entries = tracks.get(key)
    if entries is None:
        return None
    track_path = f"{path}.{key}"
    keyframes = []
    for i, entry in enumerate(require_list(entries, track_path)):
        entry_path = f"{track_path}[{i}]"
        entry = require_mapping(entry, entry_path)
        curve = STEPPED if stepped else Curve.from_keyframe(entry, entry_path)
        keyframes.append(Keyframe(
            time=number(entry, "time", 0.0, entry_path),
            value=read_value(entry, entry_path),
            curve=curve,
        ))
    try:
        return timeline_cls(keyframes)
    except DocumentError as exc:
        raise DocumentError(str(exc), track_path) from None


def draw_order_from_offsets(
    offsets: Sequence[Tuple[int, int]], slot_count: int, path: str = ""
) -> Tuple[int, ...]:
    """
    Expand (slot index, offset) pairs into a full draw order.

    Slots without an offset keep their relative bind order and fill the
    positions left free by the moved slots.

    Returns:
        Permutation of range(slot_count); position i holds the slot drawn i-th

    Raises:
        DocumentError: If the offsets do not describe a permutation
    """
    order = [-1] * slot_count
    unchanged: List[int] = []
    original = 0
    seen = set()
    for slot_index, offset in sorted(offsets):
        if slot_index in seen:
            raise DocumentError(f"Slot index {slot_index} has several offsets", path)
        seen.add(slot_index)
        while original != slot_index:
            unchanged.append(original)
            original += 1
        target = original + offset
        if not 0 <= target < slot_count or order[target] != -1:
            raise DocumentError(f"Offset {offset} of slot index {slot_index} is out of place", path)
        order[target] = original
        original += 1
    unchanged.extend(range(original, slot_count))

    for i in range(slot_count - 1, -1, -1):
        if order[i] == -1:
            order[i] = unchanged.pop()
    return tuple(order)


def _draw_order_timeline(entries, slot_indices: Dict[str, int], path: str) -> DrawOrderTimeline:
    keyframes = []
    for i, entry in enumerate(require_list(entries, path)):
        entry_path = f"{path}[{i}]"
        entry = require_mapping(entry, entry_path)
        raw_offsets = entry.get("offsets")
        order = None
        if raw_offsets:
            offsets = []
            for j, raw in enumerate(require_list(raw_offsets, f"{entry_path}.offsets")):
                offset_path = f"{entry_path}.offsets[{j}]"
                raw = require_mapping(raw, offset_path)
                slot_name = require_str(raw, "slot", offset_path)
                if slot_name not in slot_indices:
                    raise DocumentError(f"Unknown slot '{slot_name}'", offset_path)
                offsets.append((slot_indices[slot_name], integer(raw, "offset", 0, offset_path)))
            order = draw_order_from_offsets(offsets, len(slot_indices), entry_path)
        keyframes.append(Keyframe(number(entry, "time", 0.0, entry_path), order, STEPPED))
    try:
        return DrawOrderTimeline(keyframes)
    except DocumentError as exc:
        raise DocumentError(str(exc), path) from None


def _event_timeline(entries, defaults: Dict[str, Event], path: str) -> EventTimeline:
    events = []
    for i, entry in enumerate(require_list(entries, path)):
        entry_path = f"{path}[{i}]"
        entry = require_mapping(entry, entry_path)
        name = require_str(entry, "name", entry_path)
        base = defaults.get(name, Event(name))
        events.append(Event(
            name=name,
            time=number(entry, "time", 0.0, entry_path),
            int_value=integer(entry, "int", base.int_value, entry_path),
            float_value=number(entry, "float", base.float_value, entry_path),
            string_value=optional_str(entry, "string", entry_path) or base.string_value,
        ))
    try:
        return EventTimeline(events)
    except DocumentError as exc:
        raise DocumentError(str(exc), path) from None
