"""libobj.assembler

Turns OBJ records into shapes.

The assembler keeps one pending shape: its name, group, material and
transform plus the element and vertex buffers filled by p/l/f records. A
shape is emitted ("flushed") whenever one of those properties changes or the
element type of the incoming record differs from the pending one:

    o / g / usemtl      flush, then change name / group / material
    p / l / f           flush if the element type changes, then append
    c / e               flush, then emit a camera / environment
    end of input        flush

Flushing an empty pending shape does nothing, so consecutive boundary
records never produce empty shapes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .compactor import compact_elements
from .config import DEFAULT_UP
from .errors import ObjFormatError
from .model import (
    IDENTITY_XFORM,
    Affine3,
    Camera,
    ElementType,
    Environment,
    Scene,
    Shape,
    Vec2,
    Vec3,
    VertexRef,
)
from .pools import AttributePools, VertexBuffers
from .vhash import VertexTable

logger = logging.getLogger(__name__)


@dataclass
class PendingShape:
    name: str = ""
    matname: str = ""
    groupname: str = ""
    xform: Affine3 = IDENTITY_XFORM

    etype: Optional[ElementType] = None
    elem: List[int] = field(default_factory=list)
    verts: VertexBuffers = field(default_factory=VertexBuffers)


class ShapeAssembler:
    def __init__(self, scene: Scene, triangulate: bool = False, extensions: bool = True):
        self.scene = scene
        self.triangulate = triangulate
        self.extensions = extensions
        self.pools = AttributePools()
        # Without extensions only the p/t/n part of a reference is honoured.
        self.table = VertexTable(nattrs=5 if extensions else 3)
        self.pending = PendingShape()

    # -----------------------------
    # attribute records
    # -----------------------------

    def add_position(self, value: Vec3) -> None:
        self.pools.pos.append(value)

    def add_texcoord(self, value: Vec2) -> None:
        self.pools.texcoord.append(value)

    def add_normal(self, value: Vec3) -> None:
        self.pools.norm.append(value)

    def add_color(self, value: Vec3) -> None:
        self.pools.color.append(value)

    def add_radius(self, value: float) -> None:
        self.pools.radius.append(value)

    def set_transform(self, xform: Affine3) -> None:
        self.pending.xform = xform

    # -----------------------------
    # shape boundaries
    # -----------------------------

    def begin_object(self, name: str) -> None:
        self.flush()
        self.pending.name = name
        self.pending.matname = ""
        self.pending.groupname = ""
        self.pending.xform = IDENTITY_XFORM

    def begin_group(self, name: str) -> None:
        self.flush()
        self.pending.groupname = name

    def use_material(self, name: str) -> None:
        self.flush()
        self.pending.matname = name

    # -----------------------------
    # elements
    # -----------------------------

    def _start(self, etype: ElementType) -> None:
        if self.pending.etype != etype:
            self.flush()
        self.pending.etype = etype

    def _vertex(self, token: str) -> int:
        ref, vid = self.table.resolve(token, self.pools)
        verts = self.pending.verts
        if vid >= len(verts):
            verts.append(ref, self.pools)
        return vid

    def add_points(self, tokens: Sequence[str]) -> None:
        if not tokens:
            raise ObjFormatError("'p' without vertices")
        self._start(ElementType.POINT)
        elem = self.pending.elem
        for tok in tokens:
            elem.append(self._vertex(tok))

    def add_line(self, tokens: Sequence[str]) -> None:
        if self.triangulate:
            if len(tokens) < 2:
                raise ObjFormatError(f"'l' needs at least 2 vertices, got {len(tokens)}")
            self._start(ElementType.LINE)
            elem = self.pending.elem
            for k, tok in enumerate(tokens):
                vid = self._vertex(tok)
                if k >= 2:
                    elem.append(elem[-1])
                elem.append(vid)
            return

        if not tokens:
            raise ObjFormatError("'l' without vertices")
        self._start(ElementType.POLYLINE)
        elem = self.pending.elem
        elem.append(len(tokens))
        for tok in tokens:
            elem.append(self._vertex(tok))

    def add_face(self, tokens: Sequence[str]) -> None:
        if self.triangulate:
            if len(tokens) < 3:
                raise ObjFormatError(f"'f' needs at least 3 vertices, got {len(tokens)}")
            self._start(ElementType.TRIANGLE)
            elem = self.pending.elem
            first = -1
            for k, tok in enumerate(tokens):
                vid = self._vertex(tok)
                if k == 0:
                    first = vid
                if k >= 3:
                    # fan around the first vertex: (first, previous, current)
                    previous = elem[-1]
                    elem.append(first)
                    elem.append(previous)
                elem.append(vid)
            return

        if not tokens:
            raise ObjFormatError("'f' without vertices")
        self._start(ElementType.POLYGON)
        elem = self.pending.elem
        elem.append(len(tokens))
        for tok in tokens:
            elem.append(self._vertex(tok))

    # -----------------------------
    # cameras and environments (extension)
    # -----------------------------

    def _look_at(self, tokens: Sequence[str], keyword: str) -> Tuple[VertexRef, VertexRef]:
        if len(tokens) != 2:
            raise ObjFormatError(f"'{keyword}' needs 2 vertices (from, to), got {len(tokens)}")
        self.flush()
        self.table.clear()
        frm, _ = self.table.resolve(tokens[0], self.pools)
        to, _ = self.table.resolve(tokens[1], self.pools)
        self.table.clear()
        return frm, to

    def _end_look_at(self) -> None:
        self.pending.name = ""
        self.pending.matname = ""
        self.pending.xform = IDENTITY_XFORM

    def add_camera(self, tokens: Sequence[str]) -> Camera:
        frm, to = self._look_at(tokens, "c")
        pools = self.pools
        cam = Camera(
            name=self.pending.name,
            from_=pools.pos[frm.pos],
            to=pools.pos[to.pos],
            up=pools.norm[frm.norm] if frm.norm >= 0 else DEFAULT_UP,
        )
        if to.texcoord >= 0:
            cam.width, cam.height = pools.texcoord[to.texcoord]
        if frm.texcoord >= 0:
            cam.aperture = pools.texcoord[frm.texcoord][0]
        self.scene.cameras.append(cam)
        self._end_look_at()
        return cam

    def add_environment(self, tokens: Sequence[str]) -> Environment:
        frm, to = self._look_at(tokens, "e")
        pools = self.pools
        env = Environment(
            name=self.pending.name,
            matname=self.pending.matname,
            matid=self.scene.find_material(self.pending.matname),
            from_=pools.pos[frm.pos],
            to=pools.pos[to.pos],
            up=pools.norm[frm.norm] if frm.norm >= 0 else DEFAULT_UP,
        )
        self.scene.environments.append(env)
        self._end_look_at()
        return env

    # -----------------------------
    # flush
    # -----------------------------

    def flush(self) -> Optional[Shape]:
        p = self.pending
        if not p.elem:
            return None

        ragged = p.verts.ragged()
        if ragged:
            raise ObjFormatError(
                f"shape {p.name!r} mixes vertices with and without {', '.join(ragged)}"
            )

        etype, nelems, elem = compact_elements(p.etype, p.elem)
        verts = p.verts
        shape = Shape(
            name=p.name,
            groupname=p.groupname,
            matname=p.matname,
            matid=self.scene.find_material(p.matname),
            etype=etype,
            nelems=nelems,
            elem=elem,
            pos=verts.pos,
            norm=verts.norm,
            texcoord=verts.texcoord,
            color=verts.color,
            radius=verts.radius,
            xformed=p.xform != IDENTITY_XFORM,
            xform=p.xform,
        )
        self.scene.shapes.append(shape)
        logger.debug(
            "shape %r: %d %s elements, %d vertices",
            shape.name, nelems, etype.name.lower(), shape.nverts,
        )

        # the shape owns the buffers now; start fresh ones
        self.table.clear()
        verts.clear()
        p.elem = []
        p.etype = None
        return shape

    def finish(self) -> Scene:
        self.flush()
        return self.scene
