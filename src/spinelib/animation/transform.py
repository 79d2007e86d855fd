"""
Transform2D

2D affine transform used for bones, attachments and sprites.
Built from scale, rotation, shear and translation (SRT) components and stored
as a 3x3 matrix.
"""

import math
from typing import Iterable, Tuple

import numpy as np
from pyrr import Matrix44


class Transform2D:
    """
    Immutable 2D affine transform.

    The matrix uses the row-vector layout of pyrr and OpenGL uploads: a point
    is transformed as ``[x, y, 1] @ matrix``.

    Matrix form:
    [ cos(r+shx)*sx   sin(r+shx)*sx   0 ]
    [ -sin(r+shy)*sy  cos(r+shy)*sy   0 ]
    [       x               y         1 ]

    Where:
    - sx, sy = scale_x, scale_y
    - r = rotation, shx/shy = shear_x/shear_y (degrees)
    - x, y = translation
    """

    __slots__ = ("matrix",)

    def __init__(self, matrix=None):
        """
        Initialize transform.

        Args:
            matrix: 3x3 matrix in row-vector layout (identity if None)
        """
        if matrix is None:
            matrix = np.identity(3, dtype='f8')
        else:
            matrix = np.array(matrix, dtype='f8')
            if matrix.shape != (3, 3):
                raise ValueError(f"Expected a 3x3 matrix, got shape {matrix.shape}")
        matrix.flags.writeable = False
        self.matrix = matrix

    @classmethod
    def from_srt(
        cls,
        x: float = 0.0,
        y: float = 0.0,
        rotation: float = 0.0,
        scale_x: float = 1.0,
        scale_y: float = 1.0,
        shear_x: float = 0.0,
        shear_y: float = 0.0,
    ) -> "Transform2D":
        """
        Build a transform from SRT components.

        Args:
            x, y: Translation
            rotation: Rotation in degrees (counter-clockwise)
            scale_x, scale_y: Scale factors
            shear_x, shear_y: Shear angles in degrees

        Returns:
            Transform2D scaling, then rotating, then translating
        """
        rx = math.radians(rotation + shear_x)
        ry = math.radians(rotation + shear_y)
        return cls([
            [math.cos(rx) * scale_x, math.sin(rx) * scale_x, 0.0],
            [-math.sin(ry) * scale_y, math.cos(ry) * scale_y, 0.0],
            [x, y, 1.0],
        ])

    @staticmethod
    def identity() -> "Transform2D":
        """Create an identity transform."""
        return Transform2D()

    def compose(self, parent: "Transform2D") -> "Transform2D":
        """
        Place this transform inside a parent space.

        Args:
            parent: Transform of the parent space

        Returns:
            Transform applying self first, then parent
        """
        return Transform2D(self.matrix @ parent.matrix)

    def compose_partial(
        self, parent: "Transform2D", rotation: bool = True, scale: bool = True
    ) -> "Transform2D":
        """
        Place this transform inside a parent space, optionally ignoring the
        parent's rotation or scale.

        The origin always follows the full parent transform; only the axes
        drop the components that are not inherited.

        Args:
            parent: Transform of the parent space
            rotation: Inherit the parent's rotation
            scale: Inherit the parent's scale

        Returns:
            Transform applying self first, then the inherited parent components
        """
        if rotation and scale:
            return self.compose(parent)

        scale_x, scale_y = parent.scale if scale else (1.0, 1.0)
        angle = parent.rotation if rotation else 0.0
        basis = Transform2D.from_srt(rotation=angle, scale_x=scale_x, scale_y=scale_y)

        matrix = self.matrix @ basis.matrix
        matrix[2, :2] = parent.apply(self.position)
        return Transform2D(matrix)

    def scaled(self, scale_x: float, scale_y: float) -> "Transform2D":
        """Return a transform that scales local coordinates before applying self."""
        scale = np.diag([scale_x, scale_y, 1.0])
        return Transform2D(scale @ self.matrix)

    def apply(self, point: Iterable[float]) -> Tuple[float, float]:
        """Transform a 2D point."""
        px, py = point
        result = np.array([px, py, 1.0]) @ self.matrix
        return float(result[0]), float(result[1])

    @property
    def position(self) -> Tuple[float, float]:
        """Translation component."""
        return float(self.matrix[2, 0]), float(self.matrix[2, 1])

    @property
    def rotation(self) -> float:
        """Rotation of the x axis, in degrees within (-180, 180]."""
        return math.degrees(math.atan2(self.matrix[0, 1], self.matrix[0, 0]))

    @property
    def scale(self) -> Tuple[float, float]:
        """
        Scale along the x axis and perpendicular to it.

        The y scale is negative for mirrored transforms.
        """
        (a, c), (b, d) = self.matrix[0, :2], self.matrix[1, :2]
        scale_x = math.hypot(a, c)
        if scale_x < 1e-12:
            return 0.0, math.hypot(b, d)
        return scale_x, (a * d - b * c) / scale_x

    def to_matrix3(self) -> np.ndarray:
        """
        Get the 3x3 transformation matrix.

        Returns:
            3x3 numpy array (row-vector layout, ready for OpenGL)
        """
        return np.array(self.matrix)

    def to_matrix4(self) -> Matrix44:
        """
        Get the equivalent 4x4 transformation matrix (z untouched).

        Returns:
            Matrix44 with the 2D transform in the xy plane
        """
        m = self.matrix
        return Matrix44([
            [m[0, 0], m[0, 1], 0.0, 0.0],
            [m[1, 0], m[1, 1], 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [m[2, 0], m[2, 1], 0.0, 1.0],
        ])

    def isclose(self, other: "Transform2D", atol: float = 1e-6) -> bool:
        """Compare two transforms within an absolute tolerance."""
        return bool(np.allclose(self.matrix, other.matrix, atol=atol))

    def __eq__(self, other):
        if not isinstance(other, Transform2D):
            return NotImplemented
        return bool(np.array_equal(self.matrix, other.matrix))

    __hash__ = None

    def __repr__(self):
        x, y = self.position
        sx, sy = self.scale
        return (f"Transform2D(position=({x:.3f}, {y:.3f}), "
                f"rotation={self.rotation:.3f}, scale=({sx:.3f}, {sy:.3f}))")
