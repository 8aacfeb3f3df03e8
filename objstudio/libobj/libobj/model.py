from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from .config import DEFAULT_UP


Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
# 3x4 affine transform, column major: three axis columns then translation.
Affine3 = Tuple[float, float, float, float, float, float, float, float, float, float, float, float]

ZERO3: Vec3 = (0.0, 0.0, 0.0)
IDENTITY_XFORM: Affine3 = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0)


# -----------------------------
# High-level, stable DTOs used by summarize_scene
# -----------------------------

@dataclass
class ShapeInfo:
    name: str
    groupname: str
    matname: str
    matid: int
    etype: str
    nelems: int
    nverts: int
    attributes: str  # e.g. "pos,norm,texcoord"
    xformed: bool


@dataclass
class SceneSummary:
    path: str
    file_size: int
    shapes: List[ShapeInfo]
    material_names: List[str]
    texture_paths: List[str]
    camera_names: List[str]
    environment_names: List[str]
    total_vertices: int
    total_elements: int


# -----------------------------
# Scene model shared by the text loader/writer and the binary dump
# -----------------------------


class ElementType(IntEnum):
    # Fixed types use their stride as value; the binary dump stores these ints.
    POINT = 1
    LINE = 2
    TRIANGLE = 3
    POLYLINE = 12
    POLYGON = 13

    @property
    def is_fixed(self) -> bool:
        return self.value <= 3

    @property
    def stride(self) -> int:
        """Indices per element for fixed types, 0 for run-length encoded ones."""
        return self.value if self.is_fixed else 0


class VertexRef(NamedTuple):
    """Resolved 0-based attribute indices of one OBJ vertex; -1 when absent."""

    pos: int
    texcoord: int
    norm: int
    color: int
    radius: int


@dataclass
class Shape:
    name: str = ""
    groupname: str = ""
    matname: str = ""
    matid: int = -1

    etype: ElementType = ElementType.TRIANGLE
    nelems: int = 0
    elem: List[int] = field(default_factory=list)

    pos: List[Vec3] = field(default_factory=list)
    norm: List[Vec3] = field(default_factory=list)
    texcoord: List[Vec2] = field(default_factory=list)
    color: List[Vec3] = field(default_factory=list)
    radius: List[float] = field(default_factory=list)

    xformed: bool = False
    xform: Affine3 = IDENTITY_XFORM

    @property
    def nverts(self) -> int:
        for values in (self.pos, self.norm, self.texcoord, self.color, self.radius):
            if values:
                return len(values)
        return 0

    def elements(self) -> Iterator[Tuple[int, ...]]:
        """Yield the local vertex ids of every element."""
        from .compactor import iter_elements

        return iter_elements(self.etype, self.elem)


# Texture slots in declaration order; Material carries <slot>_txt and <slot>_txtid.
TEXTURE_SLOTS = ("ke", "ka", "kd", "ks", "kr", "kt", "ns", "op", "ior", "bump", "disp")


@dataclass
class Material:
    name: str = ""
    illum: int = 0

    ke: Vec3 = ZERO3  # emission
    ka: Vec3 = ZERO3  # ambient
    kd: Vec3 = ZERO3  # diffuse
    ks: Vec3 = ZERO3  # specular
    kr: Vec3 = ZERO3  # reflection
    kt: Vec3 = ZERO3  # transmission
    ns: float = 1.0   # phong exponent
    ior: float = 1.0
    op: float = 1.0   # opacity

    ke_txt: str = ""
    ka_txt: str = ""
    kd_txt: str = ""
    ks_txt: str = ""
    kr_txt: str = ""
    kt_txt: str = ""
    ns_txt: str = ""
    op_txt: str = ""
    ior_txt: str = ""
    bump_txt: str = ""
    disp_txt: str = ""

    ke_txtid: int = -1
    ka_txtid: int = -1
    kd_txtid: int = -1
    ks_txtid: int = -1
    kr_txtid: int = -1
    kt_txtid: int = -1
    ns_txtid: int = -1
    op_txtid: int = -1
    ior_txtid: int = -1
    bump_txtid: int = -1
    disp_txtid: int = -1

    def texture_path(self, slot: str) -> str:
        return getattr(self, f"{slot}_txt")

    def set_texture(self, slot: str, path: str, txtid: int) -> None:
        setattr(self, f"{slot}_txt", path)
        setattr(self, f"{slot}_txtid", txtid)


@dataclass
class Texture:
    path: str
    width: int = 0
    height: int = 0
    ncomp: int = 0
    # Flat float32 buffer (height * width * ncomp), rows bottom to top.
    pixels: Optional[np.ndarray] = field(default=None, compare=False, repr=False)

    @property
    def loaded(self) -> bool:
        return self.pixels is not None


@dataclass
class Camera:
    name: str = ""
    from_: Vec3 = ZERO3
    to: Vec3 = (0.0, 0.0, 1.0)
    up: Vec3 = DEFAULT_UP
    width: float = 1.0
    height: float = 1.0
    aperture: float = 0.0


@dataclass
class Environment:
    name: str = ""
    matname: str = ""  # only ke / ke_txt of the material are meaningful
    matid: int = -1
    from_: Vec3 = ZERO3
    to: Vec3 = (0.0, 0.0, 1.0)
    up: Vec3 = DEFAULT_UP


@dataclass
class Scene:
    shapes: List[Shape] = field(default_factory=list)
    materials: List[Material] = field(default_factory=list)
    textures: List[Texture] = field(default_factory=list)
    cameras: List[Camera] = field(default_factory=list)
    environments: List[Environment] = field(default_factory=list)

    def find_material(self, name: str) -> int:
        """Index of the first material whose name matches ignoring case, or -1."""
        key = name.lower()
        for i, mat in enumerate(self.materials):
            if mat.name.lower() == key:
                return i
        return -1

    def add_texture(self, path: str) -> int:
        if not path:
            return -1
        for i, tex in enumerate(self.textures):
            if tex.path == path:
                return i
        self.textures.append(Texture(path=path))
        return len(self.textures) - 1

    def register_textures(self, mat: Material) -> None:
        """Resolve every texture slot of ``mat``, adding new paths in slot order.

        MTL and binary loading both go through here, so a scene gets the same
        texture list whichever way it was loaded.
        """
        for slot in TEXTURE_SLOTS:
            path = mat.texture_path(slot)
            mat.set_texture(slot, path, self.add_texture(path))
