"""libobj: Wavefront OBJ/MTL scene loading, saving and binary dumps."""

from .binary import load_objbin, save_objbin
from .compare import diff_scenes
from .errors import ObjError, ObjFormatError, ObjIOError, ObjMagicError
from .formats import load_scene, save_scene
from .model import (
    Camera,
    ElementType,
    Environment,
    Material,
    Scene,
    Shape,
    Texture,
)
from .mtl import load_mtl, save_mtl
from .reader import load_obj
from .textures import load_textures
from .writer import save_obj

__all__ = [
    "Camera",
    "ElementType",
    "Environment",
    "Material",
    "ObjError",
    "ObjFormatError",
    "ObjIOError",
    "ObjMagicError",
    "Scene",
    "Shape",
    "Texture",
    "diff_scenes",
    "load_mtl",
    "load_obj",
    "load_objbin",
    "load_scene",
    "load_textures",
    "save_mtl",
    "save_obj",
    "save_objbin",
    "save_scene",
]
