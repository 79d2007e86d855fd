"""
Animation Controller

Manages animation playback state for one skin of a skeleton.
"""

from typing import List, Optional

from .skeleton import Skeleton
from .skin_animation import SkinAnimation, Sprite


class AnimationController:
    """
    Controls animation playback for a skeleton.

    Manages:
    - Current animation and playback time
    - Play/pause/loop states
    - Producing the sprites of the current frame
    """

    def __init__(self, skeleton: Skeleton, skin: str):
        """
        Initialize animation controller.

        Args:
            skeleton: Skeleton to animate
            skin: Name of the skin to draw

        Raises:
            NotFound: If the skin does not exist
        """
        self.skeleton = skeleton
        self.skin = skin
        self.bind_pose = SkinAnimation(skeleton, skin)
        self.current: Optional[SkinAnimation] = None
        self.current_time: float = 0.0
        self.is_playing: bool = False
        self.loop: bool = True
        self.playback_speed: float = 1.0

    @property
    def current_animation(self) -> Optional[str]:
        if self.current is None or self.current.animation is None:
            return None
        return self.current.animation.name

    def play(self, animation: str, loop: bool = True):
        """
        Start playing an animation.

        Args:
            animation: Name of the animation to play
            loop: Whether to loop the animation

        Raises:
            NotFound: If the animation does not exist
        """
        self.current = SkinAnimation(self.skeleton, self.skin, animation)
        self.current_time = 0.0
        self.is_playing = True
        self.loop = loop

    def pause(self):
        """Pause animation playback."""
        self.is_playing = False

    def resume(self):
        """Resume animation playback."""
        if self.current is not None:
            self.is_playing = True

    def stop(self):
        """Stop animation and reset to bind pose."""
        self.is_playing = False
        self.current = None
        self.current_time = 0.0

    def update(self, delta_time: float) -> List[Sprite]:
        """
        Advance playback and return the sprites of the new frame.

        Args:
            delta_time: Time elapsed since last frame (seconds)

        Returns:
            Sprites at the updated playback time
        """
        if self.is_playing and self.current is not None:
            self.current_time += delta_time * self.playback_speed
            duration = self.current.duration

            # Handle looping
            if self.current_time >= duration:
                if self.loop and duration > 0.0:
                    self.current_time = self.current_time % duration
                else:
                    self.current_time = duration
                    self.is_playing = False

        return self.sprites()

    def sprites(self) -> List[Sprite]:
        """Sprites at the current playback time, without advancing."""
        active = self.current if self.current is not None else self.bind_pose
        return active.interpolate(self.current_time)

    def __repr__(self):
        return (f"AnimationController(animation={self.current_animation!r}, "
                f"time={self.current_time:.2f}s, playing={self.is_playing})")
