from __future__ import annotations

import textwrap

import pytest
from PIL import Image

FULL_MTL = """
newmtl Red
Kd 1 0 0
map_Kd red.png
newmtl Glass
Kd 0.9 0.9 0.9
d 0.3
newmtl Sky
Ke 1 1 1
map_Ke sky.png
"""

# One of everything: camera, environment, mixed polygons, triangles with a
# transform, polylines, points with color and radius.
FULL_OBJ = """
mtllib scene.mtl
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
v 0.5 0.5 1
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vn 0 0 1
vn 0 0 -1
vc 1 0 0
vr 0.25
o cam
c 1/1/1 3/3/1
o dome
usemtl Sky
e 1 5
o box
g top
usemtl Red
f 1/1/1 2/2/1 3/3/1 4/4/1
f 1/1/2 2/2/2 5/3/2
g side
usemtl Glass
xf 2 0 0 0 2 0 0 0 2 1 2 3
f 1 2 5
f 2 3 5
o wire
l 1 2 3 4 1
l 4 5
o cloud
p 1///1/1 2///1/1 3///1/1
"""


@pytest.fixture
def write(tmp_path):
    """Write dedented text under tmp_path and return the path as str."""

    def _write(name: str, text: str) -> str:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
        return str(p)

    return _write


@pytest.fixture
def full_scene_path(tmp_path, write):
    write("scene.mtl", FULL_MTL)
    Image.new("RGB", (2, 2), (255, 0, 0)).save(tmp_path / "red.png")
    Image.new("RGB", (4, 2), (255, 255, 255)).save(tmp_path / "sky.png")
    return write("scene.obj", FULL_OBJ)


@pytest.fixture
def quad_path(write):
    return write(
        "quad.obj",
        """
        v 0 0 0
        v 1 0 0
        v 1 1 0
        v 0 1 0
        f 1 2 3 4
        """,
    )
