from __future__ import annotations

import copy
from pathlib import Path

import pytest

from spinelib.animation import Skeleton, build_skeleton

SAMPLES_DIR = Path(__file__).parent / "samples"

# Root at the origin, torso 10 units up, arm 5 units along the torso.
# Slots in bind draw order: body, arm, hand, box.
DOCUMENT = {
    "skeleton": {"spine": "3.8.99", "width": 40, "height": 60},
    "bones": [
        {"name": "root"},
        {"name": "torso", "parent": "root", "y": 10},
        {"name": "arm", "parent": "torso", "x": 5, "length": 12},
    ],
    "slots": [
        {"name": "body", "bone": "torso", "attachment": "body"},
        {"name": "arm", "bone": "arm", "attachment": "arm", "color": "FF000080"},
        {"name": "hand", "bone": "arm"},
        {"name": "box", "bone": "root", "attachment": "hitbox"},
    ],
    "skins": {
        "default": {
            "body": {"body": {"width": 20, "height": 40}},
            "arm": {
                "arm": {"x": 2, "width": 10, "height": 4},
                "arm-alt": {"path": "arm2", "width": 10, "height": 4},
            },
            "hand": {"hand": {"x": 12, "width": 4, "height": 4}},
            "box": {"hitbox": {"type": "boundingbox", "vertices": [0, 0, 1, 0, 1, 1]}},
        },
        "red": {
            "arm": {"arm": {"path": "arm-red", "x": 2, "width": 10, "height": 4}},
        },
    },
    "events": {
        "footstep": {"int": 1, "string": "step"},
    },
    "animations": {
        "idle": {},
        "wave": {
            "bones": {
                "arm": {
                    "rotate": [
                        {"time": 0, "angle": 0},
                        {"time": 1, "angle": 90},
                    ],
                },
            },
            "slots": {
                "arm": {
                    "color": [
                        {"time": 0, "color": "FFFFFFFF"},
                        {"time": 1, "color": "00000000"},
                    ],
                },
                "hand": {
                    "attachment": [
                        {"time": 0, "name": None},
                        {"time": 0.5, "name": "hand"},
                    ],
                },
            },
            "drawOrder": [
                {"time": 0.5, "offsets": [{"slot": "body", "offset": 1}]},
            ],
            "events": [
                {"time": 0.5, "name": "footstep"},
                {"time": 0.75, "name": "footstep", "int": 2},
            ],
        },
    },
}


@pytest.fixture
def document() -> dict:
    """Fresh copy of the shared test document, safe to mutate."""
    return copy.deepcopy(DOCUMENT)


@pytest.fixture
def skeleton(document) -> Skeleton:
    return build_skeleton(document)


@pytest.fixture
def sample_dir() -> Path:
    return SAMPLES_DIR
