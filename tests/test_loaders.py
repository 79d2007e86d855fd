"""Tests for skeleton and atlas loaders"""

import io
import json

import pytest

from spinelib.animation import AtlasError, DocumentError
from spinelib.loaders import AtlasLoader, SkeletonLoader, parse_atlas


ATLAS_TEXT = """
hero.png
size: 256, 128
format: RGBA8888
filter: Linear, Linear
repeat: none
head
  rotate: false
  xy: 2, 2
  size: 16, 16
  orig: 16, 16
  offset: 0, 0
  index: -1
arm
  rotate: true
  bounds: 20, 2, 10, 4

hero2.png
size: 64, 64
head2
  xy: 0, 0
  size: 16, 16
  index: 3
"""


def test_skeleton_loader_from_file(sample_dir):
    """Test loading a skeleton document from disk"""
    skeleton = SkeletonLoader().load(sample_dir / "simple.json")

    assert skeleton.skin_names() == ["default"]
    assert skeleton.animation_names() == ["nod"]
    assert skeleton.animation_duration("nod") == 1.0
    assert skeleton.attachment_names() == ["head", "head2"]
    assert skeleton.metadata["hash"] == "simple"


def test_skeleton_loader_sample_animates(sample_dir):
    """Test the loaded sample blinks halfway through its animation"""
    skeleton = SkeletonLoader().load(sample_dir / "simple.json")
    nod = skeleton.bind("default", "nod")

    assert [s.attachment for s in nod.interpolate(0.0)] == ["head"]
    assert [s.attachment for s in nod.interpolate(0.5)] == ["head2"]
    assert nod.interpolate(0.5)[0].rotation == pytest.approx(-20.0)
    assert nod.interpolate(0.5)[0].position == pytest.approx((0.0, 20.0))


def test_skeleton_loader_missing_file(tmp_path):
    """Test a missing file raises FileNotFoundError"""
    with pytest.raises(FileNotFoundError):
        SkeletonLoader().load(tmp_path / "missing.json")


def test_skeleton_loader_stream(document):
    """Test loading from an open text stream"""
    skeleton = SkeletonLoader().load_stream(io.StringIO(json.dumps(document)))

    assert skeleton.has_animation("wave")


def test_skeleton_loader_invalid_json():
    """Test malformed JSON is reported as a DocumentError"""
    with pytest.raises(DocumentError):
        SkeletonLoader().load_string("{\"bones\": [")


def test_skeleton_loader_invalid_document_file(tmp_path):
    """Test a structurally invalid file raises DocumentError"""
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"bones": [{"name": "a", "parent": "b"}]}), encoding="utf-8")

    with pytest.raises(DocumentError):
        SkeletonLoader().load(path)


def test_parse_atlas_pages():
    """Test page headers and fields"""
    atlas = parse_atlas(ATLAS_TEXT)

    assert [page.name for page in atlas.pages] == ["hero.png", "hero2.png"]
    hero = atlas.pages[0]
    assert hero.size == (256, 128)
    assert hero.filter == ("Linear", "Linear")
    assert hero.repeat == "none"
    assert atlas.pages[1].format == "RGBA8888"


def test_parse_atlas_regions():
    """Test region fields including the bounds shorthand"""
    atlas = parse_atlas(ATLAS_TEXT)

    head = atlas.find("head")
    assert head.page == "hero.png"
    assert not head.rotate
    assert head.xy == (2, 2)
    assert head.size == (16, 16)

    arm = atlas.find("arm")
    assert arm.rotate
    assert arm.xy == (20, 2)
    assert arm.size == (10, 4)
    assert arm.orig == (10, 4)

    assert atlas.find("head2") is None
    assert atlas.find("head2", index=3).page == "hero2.png"
    assert atlas.names() == ["arm", "head", "head2"]


def test_atlas_covers_skeleton_images(sample_dir):
    """Test every sample attachment image has an atlas region"""
    skeleton = SkeletonLoader().load(sample_dir / "simple.json")
    atlas = parse_atlas(ATLAS_TEXT)

    assert set(skeleton.attachment_names()) <= set(atlas.names())


@pytest.mark.parametrize("text", [
    "size: 10, 10\n",
    "page.png\nsize: 10\n",
    "page.png\nsize: 10, ten\n",
    "page.png\nwobble: yes\n",
    "page.png\nregion\n  bounds: 1, 2, 3\n",
])
def test_parse_atlas_rejects_malformed(text):
    """Test malformed atlas text raises AtlasError"""
    with pytest.raises(AtlasError):
        parse_atlas(text)


def test_atlas_error_is_document_error():
    """Test atlas errors share the document error hierarchy"""
    with pytest.raises(DocumentError):
        parse_atlas("filter: Linear, Linear\n")


def test_atlas_loader_from_file(tmp_path):
    """Test loading an atlas from disk"""
    path = tmp_path / "hero.atlas"
    path.write_text(ATLAS_TEXT, encoding="utf-8")

    atlas = AtlasLoader().load(path)

    assert len(atlas.regions) == 3


def test_atlas_loader_missing_file(tmp_path):
    """Test a missing atlas raises FileNotFoundError"""
    with pytest.raises(FileNotFoundError):
        AtlasLoader().load(tmp_path / "missing.atlas")
