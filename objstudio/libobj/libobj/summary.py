from __future__ import annotations

import os

from .formats import load_scene
from .model import SceneSummary, Shape, ShapeInfo


def _attributes(shape: Shape) -> str:
    names = [n for n in ("pos", "norm", "texcoord", "color", "radius") if getattr(shape, n)]
    return ",".join(names) or "-"


def summarize_scene(path: str, triangulate: bool = False, extensions: bool = True) -> SceneSummary:
    scene = load_scene(path, triangulate=triangulate, extensions=extensions)

    shapes = [
        ShapeInfo(
            name=s.name,
            groupname=s.groupname,
            matname=s.matname,
            matid=s.matid,
            etype=s.etype.name.lower(),
            nelems=s.nelems,
            nverts=s.nverts,
            attributes=_attributes(s),
            xformed=s.xformed,
        )
        for s in scene.shapes
    ]

    return SceneSummary(
        path=path,
        file_size=os.path.getsize(path),
        shapes=shapes,
        material_names=[m.name for m in scene.materials],
        texture_paths=[t.path for t in scene.textures],
        camera_names=[c.name for c in scene.cameras],
        environment_names=[e.name for e in scene.environments],
        total_vertices=sum(s.nverts for s in shapes),
        total_elements=sum(s.nelems for s in shapes),
    )
