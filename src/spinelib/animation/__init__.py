"""
Animation System

Skeleton documents, keyframe timelines, bone composition and sprite output.
"""

from .errors import SkeletonError, DocumentError, NotFound, AtlasError
from .transform import Transform2D
from .curves import Curve, CurveType
from .animation import (
    Keyframe,
    Timeline,
    RotateTimeline,
    TranslateTimeline,
    ScaleTimeline,
    ColorTimeline,
    AttachmentTimeline,
    DrawOrderTimeline,
    Event,
    EventTimeline,
    BoneTimelines,
    SlotTimelines,
    Animation,
)
from .skin import RegionAttachment, RegionSequenceAttachment, BoundingBoxAttachment, Skin
from .skin_animation import Sprite, SkinAnimation, AnimationRunner
from .skeleton import Bone, Slot, Skeleton, build_skeleton
from .animation_controller import AnimationController

__all__ = [
    'SkeletonError',
    'DocumentError',
    'NotFound',
    'AtlasError',
    'Transform2D',
    'Curve',
    'CurveType',
    'Keyframe',
    'Timeline',
    'RotateTimeline',
    'TranslateTimeline',
    'ScaleTimeline',
    'ColorTimeline',
    'AttachmentTimeline',
    'DrawOrderTimeline',
    'Event',
    'EventTimeline',
    'BoneTimelines',
    'SlotTimelines',
    'Animation',
    'RegionAttachment',
    'RegionSequenceAttachment',
    'BoundingBoxAttachment',
    'Skin',
    'Sprite',
    'SkinAnimation',
    'AnimationRunner',
    'Bone',
    'Slot',
    'Skeleton',
    'build_skeleton',
    'AnimationController',
]
