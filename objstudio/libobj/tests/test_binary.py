import struct

import pytest

from libobj import (
    Camera,
    ObjFormatError,
    ObjIOError,
    ObjMagicError,
    Scene,
    diff_scenes,
    load_obj,
    load_objbin,
    save_objbin,
)
from libobj.config import BIN_MAGIC
from libobj.model import IDENTITY_XFORM


@pytest.fixture
def dump_path(tmp_path):
    return str(tmp_path / "scene.objbin")


def test_empty_scene(dump_path):
    save_objbin(dump_path, Scene())
    data = open(dump_path, "rb").read()
    assert data == struct.pack("<Iiiii", BIN_MAGIC, 0, 0, 0, 0)
    assert load_objbin(dump_path) == Scene()


def test_string_layout(dump_path):
    scene = Scene(cameras=[Camera(name="ab")])
    save_objbin(dump_path, scene)
    data = open(dump_path, "rb").read()
    # camera count, then name length including the NUL, then the bytes
    assert data[4:15] == struct.pack("<ii", 1, 3) + b"ab\0"


def test_round_trip(full_scene_path, dump_path):
    first = load_obj(full_scene_path)
    save_objbin(dump_path, first)
    second = load_objbin(dump_path)

    # transforms are not part of the dump
    assert not any(s.xformed for s in second.shapes)
    for shape in first.shapes:
        shape.xformed, shape.xform = False, IDENTITY_XFORM
    assert diff_scenes(first, second) == []
    assert [s.matid for s in second.shapes] == [0, 1, -1, -1]
    assert second.environments[0].matid == 2


def test_extensions_off(full_scene_path, dump_path):
    scene = load_obj(full_scene_path)
    save_objbin(dump_path, scene)
    plain = load_objbin(dump_path, extensions=False)
    assert plain.cameras == [] and plain.environments == []
    assert all(not s.color and not s.radius for s in plain.shapes)

    save_objbin(dump_path, scene, extensions=False)
    again = load_objbin(dump_path)
    assert again.cameras == []
    assert again.shapes[3].color == []
    assert again.shapes[3].pos == plain.shapes[3].pos


@pytest.mark.parametrize("data", [b"", b"\x01\x02", struct.pack("<Ii", 0x12345678, 0)])
def test_bad_magic(dump_path, data):
    with open(dump_path, "wb") as f:
        f.write(data)
    with pytest.raises(ObjMagicError, match="bad magic"):
        load_objbin(dump_path)


def test_truncated(full_scene_path, dump_path):
    save_objbin(dump_path, load_obj(full_scene_path))
    data = open(dump_path, "rb").read()
    with open(dump_path, "wb") as f:
        f.write(data[:-6])
    with pytest.raises(ObjFormatError, match="Unexpected EOF") as info:
        load_objbin(dump_path)
    assert info.value.path == dump_path


def test_missing(tmp_path):
    with pytest.raises(ObjIOError):
        load_objbin(str(tmp_path / "none.objbin"))


def test_value_outside_float32_range(write, dump_path):
    scene = load_obj(write("huge.obj", "v 1e300 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n"))
    with pytest.raises(ObjFormatError, match="does not fit") as info:
        save_objbin(dump_path, scene)
    assert info.value.path == dump_path
