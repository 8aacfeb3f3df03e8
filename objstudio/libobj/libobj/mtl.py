"""libobj.mtl

MTL material library scanner and writer.

Each line is either ``newmtl <name>``, which starts a material, or
``<key> <values...>`` assigning one property of the current material. Keys
not in the tables below are skipped. Once a material is complete its texture
paths are registered on the scene (deduplicated by path, in slot order).
"""

from __future__ import annotations

import logging
from typing import IO, Optional

from .errors import ObjFormatError, ObjIOError
from .model import TEXTURE_SLOTS, Material, Scene
from .tokenizer import format_floats, iter_records, parse_floats, parse_int

logger = logging.getLogger(__name__)

_COLOR_KEYS = {
    "Ke": "ke",
    "Ka": "ka",
    "Kd": "kd",
    "Ks": "ks",
    "Kr": "kr",
    "Kt": "kt",
    "Tf": "kt",
}

_SCALAR_KEYS = {
    "Ns": "ns",
    "d": "op",
    "Ni": "ior",
}

_MAP_KEYS = {
    "map_Ke": "ke",
    "map_Ka": "ka",
    "map_Kd": "kd",
    "map_Ks": "ks",
    "map_Kr": "kr",
    "map_Kt": "kt",
    "map_Tr": "kt",
    "map_Ns": "ns",
    "map_d": "op",
    "map_Ni": "ior",
    "map_bump": "bump",
    "bump": "bump",
    "map_disp": "disp",
    "disp": "disp",
}

# Writer spelling of each texture slot.
_MAP_OUT = {
    "ke": "map_Ke",
    "ka": "map_Ka",
    "kd": "map_Kd",
    "ks": "map_Ks",
    "kr": "map_Kr",
    "kt": "map_Kt",
    "ns": "map_Ns",
    "op": "map_d",
    "ior": "map_Ni",
    "bump": "map_bump",
    "disp": "map_disp",
}


def _apply(mat: Material, key: str, args) -> bool:
    """Set one property on ``mat``; False when the key is unknown."""
    if key == "illum":
        if not args:
            raise ObjFormatError("'illum' needs a value")
        mat.illum = parse_int(args[0], key)
    elif key in _COLOR_KEYS:
        setattr(mat, _COLOR_KEYS[key], parse_floats(args, 3, key))
    elif key in _SCALAR_KEYS:
        setattr(mat, _SCALAR_KEYS[key], parse_floats(args, 1, key)[0])
    elif key == "Tr":
        # three values: transmission color; one value: transparency = 1 - d
        if len(args) >= 3:
            mat.kt = parse_floats(args, 3, key)
        else:
            mat.op = 1.0 - parse_floats(args, 1, key)[0]
    elif key in _MAP_KEYS:
        if not args:
            raise ObjFormatError(f"'{key}' needs a texture path")
        # options such as "-bm 0.5" precede the path
        mat.set_texture(_MAP_KEYS[key], args[-1], -1)
    else:
        return False
    return True


def _scan(f: IO[str], path: str, scene: Scene) -> int:
    mat: Optional[Material] = None
    count = 0
    for lineno, tok in iter_records(f):
        key, args = tok[0], tok[1:]
        try:
            if key == "newmtl":
                if mat is not None:
                    scene.register_textures(mat)
                mat = Material(name=args[0] if args else "")
                scene.materials.append(mat)
                count += 1
                continue
            if mat is None:
                if key in _COLOR_KEYS or key in _SCALAR_KEYS or key in _MAP_KEYS or key in ("illum", "Tr"):
                    raise ObjFormatError(f"'{key}' before any 'newmtl'")
                continue
            if not _apply(mat, key, args):
                logger.debug("%s:%d: ignoring '%s'", path, lineno, key)
        except ObjFormatError as e:
            if e.path is None:
                e.path, e.line = path, lineno
            raise
    if mat is not None:
        scene.register_textures(mat)
    return count


def load_mtl(path: str, scene: Scene) -> int:
    """Append the materials of ``path`` to ``scene``; returns how many."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            count = _scan(f, path, scene)
    except OSError as e:
        raise ObjIOError(f"cannot read material library {path}: {e}") from e
    except ObjFormatError as e:
        if e.path is None:
            e.path = path
        raise
    logger.info("Loaded %d materials from %s", count, path)
    return count


def save_mtl(path: str, scene: Scene) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for mat in scene.materials:
                f.write(f"newmtl {mat.name}\n")
                f.write(f"  illum {mat.illum}\n")
                f.write(f"  Ke {format_floats(mat.ke)}\n")
                f.write(f"  Ka {format_floats(mat.ka)}\n")
                f.write(f"  Kd {format_floats(mat.kd)}\n")
                f.write(f"  Ks {format_floats(mat.ks)}\n")
                f.write(f"  Kr {format_floats(mat.kr)}\n")
                f.write(f"  Kt {format_floats(mat.kt)}\n")
                f.write(f"  Ns {format_floats((mat.ns,))}\n")
                f.write(f"  d {format_floats((mat.op,))}\n")
                f.write(f"  Ni {format_floats((mat.ior,))}\n")
                for slot in TEXTURE_SLOTS:
                    txt = mat.texture_path(slot)
                    if txt:
                        f.write(f"  {_MAP_OUT[slot]} {txt}\n")
                f.write("\n")
    except OSError as e:
        raise ObjIOError(f"cannot write material library {path}: {e}") from e
    logger.info("Wrote %d materials to %s", len(scene.materials), path)
