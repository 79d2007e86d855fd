"""Tests for Transform2D"""

import numpy as np
import pytest
from pyrr import Matrix44

from spinelib.animation import Transform2D


def test_transform_identity():
    """Test identity transform leaves points untouched"""
    t = Transform2D.identity()

    assert t.apply((3.0, -2.0)) == pytest.approx((3.0, -2.0))
    assert t.position == (0.0, 0.0)
    assert t.rotation == 0.0
    assert t.scale == pytest.approx((1.0, 1.0))


def test_transform_from_srt_rotation():
    """Test a 90 degree rotation maps x onto y"""
    t = Transform2D.from_srt(rotation=90.0)

    assert t.apply((1.0, 0.0)) == pytest.approx((0.0, 1.0), abs=1e-9)
    assert t.rotation == pytest.approx(90.0)


def test_transform_scale_then_rotate_then_translate():
    """Test SRT order: scale, rotate, translate"""
    t = Transform2D.from_srt(x=10.0, y=5.0, rotation=90.0, scale_x=2.0)

    # (1, 0) -> scale (2, 0) -> rotate (0, 2) -> translate (10, 7)
    assert t.apply((1.0, 0.0)) == pytest.approx((10.0, 7.0), abs=1e-9)
    assert t.scale == pytest.approx((2.0, 1.0))


def test_transform_compose_child_in_parent_space():
    """Test composition applies child first, then parent"""
    parent = Transform2D.from_srt(y=10.0, rotation=90.0)
    child = Transform2D.from_srt(x=5.0, rotation=30.0)

    world = child.compose(parent)

    assert world.position == pytest.approx((0.0, 15.0), abs=1e-9)
    assert world.rotation == pytest.approx(120.0)
    assert world.apply((1.0, 0.0)) == pytest.approx(parent.apply(child.apply((1.0, 0.0))))


def test_transform_mirrored_scale():
    """Test negative y scale survives decomposition"""
    t = Transform2D.from_srt(scale_x=2.0, scale_y=-3.0, rotation=45.0)

    assert t.scale == pytest.approx((2.0, -3.0))
    assert t.rotation == pytest.approx(45.0)


def test_transform_shear():
    """Test shear tilts the y axis only"""
    t = Transform2D.from_srt(shear_y=45.0)

    assert t.apply((1.0, 0.0)) == pytest.approx((1.0, 0.0))
    assert t.apply((0.0, 1.0)) == pytest.approx((-np.sqrt(0.5), np.sqrt(0.5)))


def test_transform_matrix4_layout():
    """Test 4x4 export keeps translation in the last row"""
    t = Transform2D.from_srt(x=1.0, y=2.0, rotation=30.0)

    m4 = t.to_matrix4()

    assert isinstance(m4, Matrix44)
    assert m4.shape == (4, 4)
    assert m4[3, 0] == pytest.approx(1.0)
    assert m4[3, 1] == pytest.approx(2.0)
    assert m4[2, 2] == 1.0
    assert np.allclose(m4[:2, :2], t.to_matrix3()[:2, :2])


def test_transform_is_immutable():
    """Test the stored matrix cannot be modified in place"""
    t = Transform2D.from_srt(x=1.0)

    with pytest.raises(ValueError):
        t.matrix[2, 0] = 5.0

    copy = t.to_matrix3()
    copy[2, 0] = 5.0
    assert t.position == (1.0, 0.0)


def test_transform_scaled_applies_before_self():
    """Test scaled() scales local coordinates first"""
    t = Transform2D.from_srt(x=3.0, rotation=90.0).scaled(2.0, 1.0)

    assert t.apply((1.0, 0.0)) == pytest.approx((3.0, 2.0), abs=1e-9)


def test_transform_rejects_bad_shape():
    """Test non 3x3 matrices are rejected"""
    with pytest.raises(ValueError):
        Transform2D(np.identity(4))


def test_transform_compose_partial_full_matches_compose():
    """Test inheriting everything is plain composition"""
    parent = Transform2D.from_srt(x=2.0, rotation=45.0, scale_x=3.0)
    child = Transform2D.from_srt(x=1.0, rotation=10.0)

    assert child.compose_partial(parent) == child.compose(parent)


def test_transform_compose_partial_without_rotation():
    """Test the origin follows the parent while the axes ignore its rotation"""
    parent = Transform2D.from_srt(rotation=90.0, scale_x=2.0, scale_y=2.0)
    child = Transform2D.from_srt(x=1.0)

    world = child.compose_partial(parent, rotation=False)

    assert world.position == pytest.approx((0.0, 2.0), abs=1e-9)
    assert world.rotation == pytest.approx(0.0, abs=1e-9)
    assert world.scale == pytest.approx((2.0, 2.0))


def test_transform_compose_partial_without_scale():
    """Test the axes keep the parent rotation but not its scale"""
    parent = Transform2D.from_srt(rotation=90.0, scale_x=2.0)
    child = Transform2D.from_srt(x=1.0, scale_x=3.0)

    world = child.compose_partial(parent, scale=False)

    assert world.position == pytest.approx((0.0, 2.0), abs=1e-9)
    assert world.rotation == pytest.approx(90.0)
    assert world.scale == pytest.approx((3.0, 1.0))
