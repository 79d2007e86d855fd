"""
Curves

Keyframe-to-keyframe easing: linear, stepped and cubic bezier.
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Dict, Optional, Tuple

from ..config.settings import BEZIER_MAX_ITERATIONS, BEZIER_TOLERANCE
from .errors import DocumentError


class CurveType(Enum):
    """Segment interpolation kinds."""
    LINEAR = "linear"
    STEPPED = "stepped"
    BEZIER = "bezier"


def _bezier(s: float, p1: float, p2: float) -> float:
    """One coordinate of a cubic bezier from 0 to 1 with inner points p1, p2."""
    inv = 1.0 - s
    return 3.0 * inv * inv * s * p1 + 3.0 * inv * s * s * p2 + s * s * s


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class Curve:
    """
    Easing applied to the segment starting at a keyframe.

    Bezier curves run from (0, 0) to (1, 1); ``points`` holds the two inner
    control points (cx1, cy1, cx2, cy2). x is the fraction of elapsed time
    between the keyframes, y the fraction of the value change.
    """

    kind: CurveType = CurveType.LINEAR
    points: Optional[Tuple[float, float, float, float]] = None

    @classmethod
    def bezier(cls, cx1: float, cy1: float, cx2: float, cy2: float) -> "Curve":
        """Create a bezier curve; time control points are clamped to [0, 1]."""
        cx1 = min(max(float(cx1), 0.0), 1.0)
        cx2 = min(max(float(cx2), 0.0), 1.0)
        return cls(CurveType.BEZIER, (cx1, float(cy1), cx2, float(cy2)))

    @classmethod
    def from_keyframe(cls, data: Dict[str, Any], path: str = "") -> "Curve":
        """
        Read the curve descriptor of a keyframe.

        Accepted forms:
        - missing or "linear"
        - "stepped"
        - [cx1, cy1, cx2, cy2]
        - cx1 as "curve" with cy1/cx2/cy2 in "c2"/"c3"/"c4"

        Raises:
            DocumentError: If the descriptor is not recognized
        """
        value = data.get("curve")
        if value is None:
            return LINEAR
        if isinstance(value, str):
            if value == CurveType.LINEAR.value:
                return LINEAR
            if value == CurveType.STEPPED.value:
                return STEPPED
            raise DocumentError(f"Unknown curve type '{value}'", path)
        if isinstance(value, (list, tuple)):
            if len(value) != 4 or not all(_is_number(v) for v in value):
                raise DocumentError(f"Bezier curve needs 4 numbers, got {value!r}", path)
            return cls.bezier(*value)
        if _is_number(value):
            extra = (data.get("c2", 0.0), data.get("c3", 1.0), data.get("c4", 1.0))
            if not all(_is_number(v) for v in extra):
                raise DocumentError(f"Bezier curve needs numeric c2/c3/c4, got {extra!r}", path)
            return cls.bezier(value, *extra)
        raise DocumentError(f"Unsupported curve descriptor {value!r}", path)

    def remap(self, fraction: float) -> float:
        """
        Map a time fraction in [0, 1] to a value fraction.

        Args:
            fraction: Elapsed fraction of the segment

        Returns:
            Interpolation factor (0 for stepped segments)
        """
        if self.kind is CurveType.LINEAR:
            return fraction
        if self.kind is CurveType.STEPPED:
            return 0.0
        if fraction <= 0.0:
            return 0.0
        if fraction >= 1.0:
            return 1.0

        cx1, cy1, cx2, cy2 = self.points
        # x(s) is monotonic for cx in [0, 1]; bisect for s where x(s) == fraction
        low, high = 0.0, 1.0
        s = fraction
        for _ in range(BEZIER_MAX_ITERATIONS):
            s = (low + high) * 0.5
            x = _bezier(s, cx1, cx2)
            if abs(x - fraction) < BEZIER_TOLERANCE:
                break
            if x < fraction:
                low = s
            else:
                high = s
        return _bezier(s, cy1, cy2)


LINEAR = Curve(CurveType.LINEAR)
STEPPED = Curve(CurveType.STEPPED)
