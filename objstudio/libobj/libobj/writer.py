"""libobj.writer

Wavefront OBJ writer, the structural inverse of libobj.reader.

Every shape writes its own vertices, so element records reference them
through running per-attribute offsets (1-based, OBJ convention) that grow by
the shape's vertex count after the shape is written. Reading the output back
gives the same shapes: each shape starts with an ``o`` record, and the
vertices come out in the order their first reference sees them.

Cameras and environments are stored as two-vertex ``c`` / ``e`` records:

    v <from>          vn <up>    vt <aperture> <aperture>
    v <to>            vn <up>    vt <width> <height>
    c 1/1/1 2/2/2
"""

from __future__ import annotations

import logging
import os
from typing import IO, List, Sequence

from .config import MTL_SUFFIX
from .errors import ObjFormatError, ObjIOError
from .model import ElementType, Scene, Shape
from .mtl import save_mtl
from .tokenizer import format_floats

logger = logging.getLogger(__name__)

# Record keyword per fixed element type value.
_FIXED_LABELS = {1: "p", 2: "l", 3: "f"}


class _Offsets:
    """Running 1-based offsets into the written pos/texcoord/norm/color/radius."""

    def __init__(self) -> None:
        self.values: List[int] = [1, 1, 1, 1, 1]

    def advance(self, active: Sequence[bool], n: int) -> None:
        for i, on in enumerate(active):
            if on:
                self.values[i] += n


def _vertex_refs(ids: Sequence[int], offsets: _Offsets, active: Sequence[bool]) -> str:
    # Components after the last active one are omitted: "3", "3/3", "3//3".
    last = max(i for i, on in enumerate(active) if on)
    out = []
    for vid in ids:
        parts = []
        for i in range(last + 1):
            parts.append(str(offsets.values[i] + vid) if active[i] else "")
        out.append("/".join(parts))
    return " ".join(out)


def _write_look_at(f: IO[str], keyword: str, offsets: _Offsets, frm, to, up, tex_from, tex_to) -> None:
    f.write(f"v {format_floats(frm)}\n")
    f.write(f"v {format_floats(to)}\n")
    f.write(f"vn {format_floats(up)}\n")
    f.write(f"vn {format_floats(up)}\n")
    f.write(f"vt {format_floats(tex_from)}\n")
    f.write(f"vt {format_floats(tex_to)}\n")
    active = (True, True, True, False, False)
    f.write(f"{keyword} {_vertex_refs((0, 1), offsets, active)}\n")
    offsets.advance(active, 2)


def _write_shape(f: IO[str], shape: Shape, offsets: _Offsets, extensions: bool) -> None:
    f.write(f"o {shape.name}\n" if shape.name else "o\n")
    if shape.groupname:
        f.write(f"g {shape.groupname}\n")
    if shape.matname:
        f.write(f"usemtl {shape.matname}\n")
    if extensions and shape.xformed:
        f.write(f"xf {format_floats(shape.xform)}\n")

    n = len(shape.pos)
    if not n:
        return
    active = (
        True,
        bool(shape.texcoord),
        bool(shape.norm),
        extensions and bool(shape.color),
        extensions and bool(shape.radius),
    )
    for j in range(n):
        f.write(f"v {format_floats(shape.pos[j])}\n")
        if active[2]:
            f.write(f"vn {format_floats(shape.norm[j])}\n")
        if active[1]:
            f.write(f"vt {format_floats(shape.texcoord[j])}\n")
        if active[3]:
            f.write(f"vc {format_floats(shape.color[j])}\n")
        if active[4]:
            f.write(f"vr {format_floats((shape.radius[j],))}\n")

    if shape.etype.is_fixed:
        label = _FIXED_LABELS[shape.etype.value]
    else:
        label = "l" if shape.etype == ElementType.POLYLINE else "f"
    for ids in shape.elements():
        f.write(f"{label} {_vertex_refs(ids, offsets, active)}\n")

    offsets.advance(active, n)


def save_obj(path: str, scene: Scene, extensions: bool = True) -> None:
    """Write ``scene`` to ``path``; materials go to ``<stem>.mtl`` beside it."""
    dirname = os.path.dirname(path)
    mtl_name = os.path.splitext(os.path.basename(path))[0] + MTL_SUFFIX

    if scene.materials:
        save_mtl(os.path.join(dirname, mtl_name), scene)

    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            if scene.materials:
                f.write(f"mtllib {mtl_name}\n")

            offsets = _Offsets()
            if extensions:
                for cam in scene.cameras:
                    f.write(f"o {cam.name}\n" if cam.name else "o\n")
                    _write_look_at(
                        f, "c", offsets, cam.from_, cam.to, cam.up,
                        (cam.aperture, cam.aperture), (cam.width, cam.height),
                    )
                for env in scene.environments:
                    f.write(f"o {env.name}\n" if env.name else "o\n")
                    if env.matname:
                        f.write(f"usemtl {env.matname}\n")
                    _write_look_at(f, "e", offsets, env.from_, env.to, env.up, (0.0, 0.0), (0.0, 0.0))

            for shape in scene.shapes:
                if shape.nelems and not shape.pos:
                    raise ObjFormatError(f"shape {shape.name!r} has elements but no positions", path=path)
                _write_shape(f, shape, offsets, extensions)
    except OSError as e:
        raise ObjIOError(f"cannot write {path}: {e}") from e

    logger.info("Wrote %s: %d shapes", path, len(scene.shapes))
