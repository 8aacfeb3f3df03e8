"""libobj.binary

Binary scene dump (.objbin) reader and writer.

The dump is a direct image of the Scene, written field by field with no
deduplication or compaction, so reloading it skips all OBJ parsing. Layout
(little endian):

    u32  magic (BIN_MAGIC)
    i32  camera count,      then per camera:      str name, 3f from, 3f to,
                                                  3f up, f width, f height,
                                                  f aperture
    i32  environment count, then per environment: str name, str matname,
                                                  3f from, 3f to, 3f up
    i32  material count,    then per material:    str name, i32 illum,
                                                  6 x 3f (ke ka kd ks kr kt),
                                                  f ns, f ior, f op,
                                                  11 x str texture paths
    i32  shape count,       then per shape:       str name, str groupname,
                                                  str matname, i32 nelems,
                                                  vec<i32> elem, i32 etype,
                                                  i32 nverts, vec<3f> pos,
                                                  vec<3f> norm, vec<2f> texcoord,
                                                  vec<3f> color, vec<f> radius

    str    = i32 byte length including a trailing NUL, then the bytes
    vec<T> = i32 element count, then the raw values

Only the magic is checked; beyond it the data is trusted.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import List, Tuple

from .config import BIN_MAGIC
from .errors import ObjFormatError, ObjIOError, ObjMagicError
from .model import TEXTURE_SLOTS, Camera, ElementType, Environment, Material, Scene, Shape

logger = logging.getLogger(__name__)

_COLOR_FIELDS = ("ke", "ka", "kd", "ks", "kr", "kt")


@dataclass
class _Bin:
    data: bytes
    ofs: int = 0

    def read(self, n: int) -> bytes:
        b = self.data[self.ofs : self.ofs + n]
        if len(b) != n:
            raise ObjFormatError(f"Unexpected EOF at {self.ofs}, need {n}")
        self.ofs += n
        return b

    def u32(self) -> int:
        return struct.unpack("<I", self.read(4))[0]

    def s32(self) -> int:
        return struct.unpack("<i", self.read(4))[0]

    def f32(self) -> float:
        return struct.unpack("<f", self.read(4))[0]

    def count(self) -> int:
        n = self.s32()
        if n < 0:
            raise ObjFormatError(f"Negative count {n} at {self.ofs - 4}")
        return n

    def vec3(self) -> Tuple[float, float, float]:
        return struct.unpack("<3f", self.read(12))

    def string(self) -> str:
        n = self.count()
        raw = self.read(n)
        return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")

    def ints(self) -> List[int]:
        n = self.count()
        return list(struct.unpack(f"<{n}i", self.read(4 * n)))

    def floats(self, width: int) -> list:
        """Vector of ``width``-float tuples (plain floats for width 1)."""
        n = self.count()
        flat = struct.unpack(f"<{n * width}f", self.read(4 * n * width))
        if width == 1:
            return list(flat)
        return [tuple(flat[i : i + width]) for i in range(0, len(flat), width)]


class _BinWriter:
    def __init__(self) -> None:
        self.buf = bytearray()

    def u32(self, v: int) -> None:
        self.buf += struct.pack("<I", v)

    def s32(self, v: int) -> None:
        self.buf += struct.pack("<i", v)

    def f32(self, v: float) -> None:
        self.buf += struct.pack("<f", v)

    def vec3(self, v) -> None:
        self.buf += struct.pack("<3f", *v)

    def string(self, s: str) -> None:
        raw = s.encode("utf-8") + b"\0"
        self.s32(len(raw))
        self.buf += raw

    def ints(self, values: List[int]) -> None:
        self.s32(len(values))
        self.buf += struct.pack(f"<{len(values)}i", *values)

    def floats(self, values: list, width: int) -> None:
        self.s32(len(values))
        if width == 1:
            flat = values
        else:
            flat = [x for v in values for x in v]
        self.buf += struct.pack(f"<{len(flat)}f", *flat)


# -----------------------------
# reading
# -----------------------------

def _read_camera(b: _Bin) -> Camera:
    cam = Camera(name=b.string())
    cam.from_ = b.vec3()
    cam.to = b.vec3()
    cam.up = b.vec3()
    cam.width = b.f32()
    cam.height = b.f32()
    cam.aperture = b.f32()
    return cam


def _read_environment(b: _Bin) -> Environment:
    env = Environment(name=b.string(), matname=b.string())
    env.from_ = b.vec3()
    env.to = b.vec3()
    env.up = b.vec3()
    return env


def _read_material(b: _Bin, scene: Scene) -> Material:
    mat = Material(name=b.string())
    mat.illum = b.s32()
    for name in _COLOR_FIELDS:
        setattr(mat, name, b.vec3())
    mat.ns = b.f32()
    mat.ior = b.f32()
    mat.op = b.f32()
    for slot in TEXTURE_SLOTS:
        mat.set_texture(slot, b.string(), -1)
    scene.register_textures(mat)
    return mat


def _read_shape(b: _Bin) -> Shape:
    shape = Shape(name=b.string(), groupname=b.string(), matname=b.string())
    shape.nelems = b.s32()
    shape.elem = b.ints()
    etype = b.s32()
    try:
        shape.etype = ElementType(etype)
    except ValueError:
        raise ObjFormatError(f"Unknown element type {etype} in shape {shape.name!r}") from None
    _ = b.s32()  # nverts, derived from the vertex arrays
    shape.pos = b.floats(3)
    shape.norm = b.floats(3)
    shape.texcoord = b.floats(2)
    shape.color = b.floats(3)
    shape.radius = b.floats(1)
    return shape


def _parse(b: _Bin, extensions: bool) -> Scene:
    if len(b.data) < 4 or b.u32() != BIN_MAGIC:
        raise ObjMagicError("Not an objbin dump (bad magic)")

    scene = Scene()
    scene.cameras = [_read_camera(b) for _ in range(b.count())]
    scene.environments = [_read_environment(b) for _ in range(b.count())]
    if not extensions:
        scene.cameras = []
        scene.environments = []

    scene.materials = [_read_material(b, scene) for _ in range(b.count())]
    scene.shapes = [_read_shape(b) for _ in range(b.count())]

    for shape in scene.shapes:
        if not extensions:
            shape.color = []
            shape.radius = []
        shape.matid = scene.find_material(shape.matname)
    for env in scene.environments:
        env.matid = scene.find_material(env.matname)
    return scene


def load_objbin(path: str, extensions: bool = True) -> Scene:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ObjIOError(f"cannot read {path}: {e}") from e

    try:
        scene = _parse(_Bin(data), extensions)
    except ObjFormatError as e:
        e.path = path
        raise
    except ObjMagicError as e:
        raise ObjMagicError(f"{path}: {e}") from None
    logger.info("Loaded %s: %d shapes, %d materials", path, len(scene.shapes), len(scene.materials))
    return scene


# -----------------------------
# writing
# -----------------------------

def _dump(scene: Scene, extensions: bool) -> bytes:
    w = _BinWriter()
    w.u32(BIN_MAGIC)

    if extensions:
        w.s32(len(scene.cameras))
        for cam in scene.cameras:
            w.string(cam.name)
            w.vec3(cam.from_)
            w.vec3(cam.to)
            w.vec3(cam.up)
            w.f32(cam.width)
            w.f32(cam.height)
            w.f32(cam.aperture)
        w.s32(len(scene.environments))
        for env in scene.environments:
            w.string(env.name)
            w.string(env.matname)
            w.vec3(env.from_)
            w.vec3(env.to)
            w.vec3(env.up)
    else:
        w.s32(0)
        w.s32(0)

    w.s32(len(scene.materials))
    for mat in scene.materials:
        w.string(mat.name)
        w.s32(mat.illum)
        for name in _COLOR_FIELDS:
            w.vec3(getattr(mat, name))
        w.f32(mat.ns)
        w.f32(mat.ior)
        w.f32(mat.op)
        for slot in TEXTURE_SLOTS:
            w.string(mat.texture_path(slot))

    w.s32(len(scene.shapes))
    for shape in scene.shapes:
        w.string(shape.name)
        w.string(shape.groupname)
        w.string(shape.matname)
        w.s32(shape.nelems)
        w.ints(shape.elem)
        w.s32(int(shape.etype))
        w.s32(shape.nverts)
        w.floats(shape.pos, 3)
        w.floats(shape.norm, 3)
        w.floats(shape.texcoord, 2)
        w.floats(shape.color if extensions else [], 3)
        w.floats(shape.radius if extensions else [], 1)

    return bytes(w.buf)


def save_objbin(path: str, scene: Scene, extensions: bool = True) -> None:
    # floats are stored as float32; larger magnitudes cannot be packed
    try:
        data = _dump(scene, extensions)
    except (struct.error, OverflowError) as e:
        raise ObjFormatError(f"value does not fit the dump: {e}", path=path) from e
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ObjIOError(f"cannot write {path}: {e}") from e
    logger.info("Wrote %s: %d bytes", path, len(data))
