#!/usr/bin/env python3
"""
Print Frames Example

Loads a skeleton document and prints the sprite list of each frame of one
animation. A renderer would draw each sprite's unit quad with
``sprite.to_matrix4()`` and look its image up in the atlas.

Usage:
    python examples/print_frames.py tests/samples/simple.json default nod
"""

import argparse
import itertools
import logging

from spinelib import SkeletonLoader

logger = logging.getLogger(__name__)


def main():
    p = argparse.ArgumentParser(description="Print the sprites of each animation frame")
    p.add_argument('skeleton', help='Skeleton JSON document')
    p.add_argument('skin', help='Skin to draw')
    p.add_argument('animation', nargs='?', default=None, help='Animation to play (bind pose if omitted)')
    p.add_argument('--fps', type=float, default=10.0, help='Frames per second')

    args = p.parse_args()
    if args.fps <= 0:
        p.error("--fps must be positive")
    period = 1.0 / args.fps

    skeleton = SkeletonLoader().load(args.skeleton)
    bound = skeleton.bind(args.skin, args.animation)
    frame_count = max(1, round(bound.duration / period))
    logger.info("Playing %s over %d frames", args.animation or "bind pose", frame_count)

    for frame, sprites in enumerate(itertools.islice(bound.run(period), frame_count)):
        print(f"frame {frame} (t={frame * period:.2f}s)")
        for sprite in sprites:
            x, y = sprite.position
            print(f"  {sprite.slot:<12} {sprite.attachment:<16} "
                  f"pos=({x:7.2f}, {y:7.2f}) rot={sprite.rotation:7.2f}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
