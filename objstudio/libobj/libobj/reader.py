"""libobj.reader

Wavefront OBJ reader.

The file is read as a strict left-to-right fold over its records:

- Attribute records (v, vt, vn and the vc, vr extensions) grow the pools.
- Element records (p, l, f) are assembled into the pending shape, with
  vertices deduplicated per shape.
- o, g, usemtl and the c, e extensions close the pending shape.
- mtllib pulls materials and texture paths from side files.

Unknown keywords are skipped so newer files still load. Any malformed record
aborts the whole load with an ObjFormatError pointing at the offending line.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, List

from .assembler import ShapeAssembler
from .errors import ObjFormatError, ObjIOError
from .model import Scene
from .mtl import load_mtl
from .tokenizer import iter_records, parse_floats

logger = logging.getLogger(__name__)

Handler = Callable[[ShapeAssembler, List[str]], None]


def _name(args: List[str]) -> str:
    return args[0] if args else ""


def _v(asm: ShapeAssembler, args: List[str]) -> None:
    asm.add_position(parse_floats(args, 3, "v"))


def _vt(asm: ShapeAssembler, args: List[str]) -> None:
    asm.add_texcoord(parse_floats(args, 2, "vt", optional=1))


def _vn(asm: ShapeAssembler, args: List[str]) -> None:
    asm.add_normal(parse_floats(args, 3, "vn"))


def _vc(asm: ShapeAssembler, args: List[str]) -> None:
    asm.add_color(parse_floats(args, 3, "vc"))


def _vr(asm: ShapeAssembler, args: List[str]) -> None:
    asm.add_radius(parse_floats(args, 1, "vr")[0])


def _xf(asm: ShapeAssembler, args: List[str]) -> None:
    asm.set_transform(parse_floats(args, 12, "xf"))


# keyword -> handler; these are always recognised
_RECORDS: Dict[str, Handler] = {
    "v": _v,
    "vt": _vt,
    "vn": _vn,
    "p": lambda asm, args: asm.add_points(args),
    "l": lambda asm, args: asm.add_line(args),
    "f": lambda asm, args: asm.add_face(args),
    "o": lambda asm, args: asm.begin_object(_name(args)),
    "g": lambda asm, args: asm.begin_group(_name(args)),
    "usemtl": lambda asm, args: asm.use_material(_name(args)),
}

# only recognised when extensions are enabled
_EXT_RECORDS: Dict[str, Handler] = {
    "vc": _vc,
    "vr": _vr,
    "xf": _xf,
    "c": lambda asm, args: asm.add_camera(args),
    "e": lambda asm, args: asm.add_environment(args),
}


def _load_libraries(asm: ShapeAssembler, args: List[str], obj_path: str) -> None:
    if not args:
        raise ObjFormatError("'mtllib' without a file name")
    dirname = os.path.dirname(obj_path)
    for name in args:
        load_mtl(os.path.join(dirname, name), asm.scene)


def load_obj(path: str, triangulate: bool = False, extensions: bool = True) -> Scene:
    """Load an OBJ file into a new Scene.

    ``triangulate`` fan-splits faces into triangles and polylines into
    segments while reading. ``extensions`` enables the vc, vr, xf, c and e
    records and the color/radius parts of vertex references.
    """
    scene = Scene()
    asm = ShapeAssembler(scene, triangulate=triangulate, extensions=extensions)
    handlers = dict(_RECORDS)
    if extensions:
        handlers.update(_EXT_RECORDS)

    skipped: Dict[str, int] = {}
    lineno = 0
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for lineno, tok in iter_records(f):
                key, args = tok[0], tok[1:]
                if key == "mtllib":
                    _load_libraries(asm, args, path)
                    continue
                fn = handlers.get(key)
                if fn is None:
                    skipped[key] = skipped.get(key, 0) + 1
                    continue
                fn(asm, args)
        lineno = 0
        asm.finish()
    except OSError as e:
        raise ObjIOError(f"cannot read {path}: {e}") from e
    except ObjFormatError as e:
        if e.path is None:
            e.path = path
        if e.line is None:
            e.line = lineno or None
        raise

    for key, n in sorted(skipped.items()):
        logger.debug("%s: ignored %d '%s' records", path, n, key)
    logger.info(
        "Loaded %s: %d shapes, %d materials, %d textures, %d cameras, %d environments",
        path, len(scene.shapes), len(scene.materials), len(scene.textures),
        len(scene.cameras), len(scene.environments),
    )
    return scene
