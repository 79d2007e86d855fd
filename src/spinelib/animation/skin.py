"""
Skin

Attachments and the skins selecting them per slot.
"""

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple, Union

from ..config.settings import DEFAULT_ATTACHMENT_TYPE
from .errors import DocumentError
from .fields import number, optional_str, require_list, require_mapping
from .transform import Transform2D


@dataclass(frozen=True)
class RegionAttachment:
    """
    Textured quad placed relative to its slot's bone.

    ``path`` names the source image; several attachments may reuse one image.
    """

    name: str
    path: str
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    width: float = 0.0
    height: float = 0.0
    transform: Transform2D = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Frozen dataclass: cache the local transform once
        object.__setattr__(self, "transform", Transform2D.from_srt(
            self.x, self.y, self.rotation, self.scale_x, self.scale_y
        ))

    @property
    def drawable(self) -> bool:
        return True

    def corners(self) -> List[Tuple[float, float]]:
        """Quad corners in bone space: top-left, top-right, bottom-right, bottom-left."""
        w2, h2 = self.width / 2.0, self.height / 2.0
        return [self.transform.apply(p) for p in ((-w2, h2), (w2, h2), (w2, -h2), (-w2, -h2))]


@dataclass(frozen=True)
class RegionSequenceAttachment(RegionAttachment):
    """
    Region drawn from a numbered image sequence.

    Frames are drawn as the base region; ``fps`` and ``mode`` are kept for
    renderers that step through the sequence themselves.
    """

    fps: Optional[float] = None
    mode: Union[str, float, None] = None


@dataclass(frozen=True)
class BoundingBoxAttachment:
    """Polygon used for hit testing; never drawn."""

    name: str
    vertices: Tuple[float, ...] = ()

    @property
    def drawable(self) -> bool:
        return False


Attachment = Union[RegionAttachment, RegionSequenceAttachment, BoundingBoxAttachment]


def attachment_from_dict(name: str, data: Dict[str, Any], path: str) -> Attachment:
    """
    Create an attachment from document data.

    Args:
        name: Attachment name (key within the skin slot)
        data: Attachment fields
        path: Document path for error messages

    Raises:
        DocumentError: On unknown attachment types or mistyped fields
    """
    data = require_mapping(data, path)
    kind = data.get("type", DEFAULT_ATTACHMENT_TYPE)

    if kind in ("region", "regionsequence"):
        image = optional_str(data, "path", path) or optional_str(data, "name", path) or name
        fields = dict(
            name=name,
            path=image,
            x=number(data, "x", 0.0, path),
            y=number(data, "y", 0.0, path),
            rotation=number(data, "rotation", 0.0, path),
            scale_x=number(data, "scaleX", 1.0, path),
            scale_y=number(data, "scaleY", 1.0, path),
            width=number(data, "width", 0.0, path),
            height=number(data, "height", 0.0, path),
        )
        if kind == "region":
            return RegionAttachment(**fields)
        mode = data.get("mode")
        if mode is not None and (isinstance(mode, bool) or not isinstance(mode, (str, Real))):
            raise DocumentError(f"Field 'mode' must be a string or number, got {mode!r}", path)
        return RegionSequenceAttachment(
            fps=number(data, "fps", None, path),
            mode=float(mode) if isinstance(mode, Real) else mode,
            **fields,
        )
    if kind == "boundingbox":
        vertices = require_list(data.get("vertices", []), f"{path}.vertices")
        if not all(isinstance(v, Real) and not isinstance(v, bool) for v in vertices):
            raise DocumentError("Bounding box vertices must be numbers", f"{path}.vertices")
        return BoundingBoxAttachment(name=name, vertices=tuple(float(v) for v in vertices))

    raise DocumentError(f"Unknown attachment type '{kind}'", path)


class Skin:
    """
    Named selection of attachments per slot.

    Attachments are keyed by slot index, then attachment name.
    """

    def __init__(self, name: str, attachments: Optional[Dict[int, Dict[str, Attachment]]] = None):
        """
        Initialize skin.

        Args:
            name: Skin name
            attachments: Slot index -> attachment name -> Attachment
        """
        self.name = name
        self.attachments: Dict[int, Dict[str, Attachment]] = {
            slot: dict(entries) for slot, entries in (attachments or {}).items()
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any], slot_indices: Dict[str, int]) -> "Skin":
        """
        Create a skin from a ``slot name -> attachment name -> fields`` mapping.

        Raises:
            DocumentError: If a slot is unknown or an attachment is invalid
        """
        path = f"skins.{name}"
        attachments = {}
        for slot_name, entries in require_mapping(data, path).items():
            slot_path = f"{path}.{slot_name}"
            if slot_name not in slot_indices:
                raise DocumentError(f"Unknown slot '{slot_name}'", slot_path)
            attachments[slot_indices[slot_name]] = {
                attachment_name: attachment_from_dict(
                    attachment_name, fields, f"{slot_path}.{attachment_name}"
                )
                for attachment_name, fields in require_mapping(entries, slot_path).items()
            }
        return cls(name, attachments)

    def find(self, slot_index: int, attachment_name: str) -> Optional[Attachment]:
        """
        Find an attachment.

        Args:
            slot_index: Index of the slot
            attachment_name: Attachment name within the slot

        Returns:
            Attachment if found, None otherwise
        """
        return self.attachments.get(slot_index, {}).get(attachment_name)

    def iter_attachments(self):
        """Yield (slot index, attachment) pairs."""
        for slot_index, entries in self.attachments.items():
            for attachment in entries.values():
                yield slot_index, attachment

    def __repr__(self):
        count = sum(len(entries) for entries in self.attachments.values())
        return f"Skin(name='{self.name}', slots={len(self.attachments)}, attachments={count})"
