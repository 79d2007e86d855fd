"""Tests for AnimationController playback"""

import pytest

from spinelib.animation import AnimationController, NotFound


def test_controller_initial_state(skeleton):
    """Test a new controller shows the bind pose"""
    controller = AnimationController(skeleton, "default")

    assert controller.current_animation is None
    assert not controller.is_playing
    assert controller.sprites() == skeleton.bind("default").interpolate(0.0)


def test_controller_play_and_update(skeleton):
    """Test update advances playback time"""
    controller = AnimationController(skeleton, "default")
    controller.play("wave")

    sprites = controller.update(0.5)

    assert controller.current_animation == "wave"
    assert controller.current_time == pytest.approx(0.5)
    assert sprites == skeleton.bind("default", "wave").interpolate(0.5)


def test_controller_loops(skeleton):
    """Test looping wraps time past the duration"""
    controller = AnimationController(skeleton, "default")
    controller.play("wave", loop=True)

    controller.update(1.25)

    assert controller.is_playing
    assert controller.current_time == pytest.approx(0.25)


def test_controller_clamps_without_loop(skeleton):
    """Test non-looping playback stops on the last frame"""
    controller = AnimationController(skeleton, "default")
    controller.play("wave", loop=False)

    controller.update(3.0)

    assert not controller.is_playing
    assert controller.current_time == 1.0


def test_controller_playback_speed(skeleton):
    """Test playback speed scales elapsed time"""
    controller = AnimationController(skeleton, "default")
    controller.playback_speed = 0.5
    controller.play("wave")

    controller.update(0.5)

    assert controller.current_time == pytest.approx(0.25)


def test_controller_pause_resume(skeleton):
    """Test pause freezes time until resume"""
    controller = AnimationController(skeleton, "default")
    controller.play("wave")
    controller.update(0.25)

    controller.pause()
    controller.update(0.5)
    assert controller.current_time == pytest.approx(0.25)

    controller.resume()
    controller.update(0.5)
    assert controller.current_time == pytest.approx(0.75)


def test_controller_stop_returns_to_bind_pose(skeleton):
    """Test stop resets to the bind pose"""
    controller = AnimationController(skeleton, "default")
    controller.play("wave")
    controller.update(0.5)

    controller.stop()

    assert controller.current_animation is None
    assert controller.current_time == 0.0
    assert controller.update(0.5) == skeleton.bind("default").interpolate(0.0)


def test_controller_empty_animation(skeleton):
    """Test a zero-length animation stops instead of looping"""
    controller = AnimationController(skeleton, "default")
    controller.play("idle")

    controller.update(0.1)

    assert not controller.is_playing
    assert controller.current_time == 0.0


def test_controller_unknown_names(skeleton):
    """Test unknown skins and animations raise NotFound"""
    with pytest.raises(NotFound):
        AnimationController(skeleton, "blue")

    controller = AnimationController(skeleton, "default")
    with pytest.raises(NotFound):
        controller.play("crawl")
