from __future__ import annotations

import os

from .binary import load_objbin, save_objbin
from .config import BIN_SUFFIX
from .model import Scene
from .reader import load_obj
from .writer import save_obj


def is_objbin(path: str) -> bool:
    return os.path.splitext(path)[1].lower() == BIN_SUFFIX


def load_scene(path: str, triangulate: bool = False, extensions: bool = True) -> Scene:
    """Load OBJ text or an objbin dump, picked by file suffix.

    ``triangulate`` only applies to OBJ text; a dump holds elements as saved.
    """
    if is_objbin(path):
        return load_objbin(path, extensions=extensions)
    return load_obj(path, triangulate=triangulate, extensions=extensions)


def save_scene(path: str, scene: Scene, extensions: bool = True) -> None:
    if is_objbin(path):
        save_objbin(path, scene, extensions=extensions)
    else:
        save_obj(path, scene, extensions=extensions)
