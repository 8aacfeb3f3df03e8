import pytest

from libobj import ElementType, ObjFormatError, ObjIOError, load_obj
from libobj.config import DEFAULT_UP
from libobj.model import IDENTITY_XFORM

TRI = """
v 0 0 0
v 1 0 0
v 0 1 0
"""


def test_quad_stays_polygon(quad_path):
    scene = load_obj(quad_path)
    (shape,) = scene.shapes
    assert shape.etype == ElementType.POLYGON
    assert shape.nelems == 1
    assert shape.elem == [4, 0, 1, 2, 3]
    assert shape.pos == [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    assert shape.norm == [] and shape.texcoord == []


def test_quad_triangulates_as_fan(quad_path):
    (shape,) = load_obj(quad_path, triangulate=True).shapes
    assert shape.etype == ElementType.TRIANGLE
    assert shape.nelems == 2
    assert shape.elem == [0, 1, 2, 0, 2, 3]


def test_ngon_fans_into_n_minus_2_triangles(write):
    path = write("hex.obj", "v 0 0 0\n" * 6 + "f 1 2 3 4 5 6\n")
    # identical positions under distinct indices are distinct vertices
    (shape,) = load_obj(path, triangulate=True).shapes
    assert shape.nelems == 4
    assert list(shape.elements()) == [(0, 1, 2), (0, 2, 3), (0, 3, 4), (0, 4, 5)]


def test_shared_vertices_are_deduplicated(write):
    path = write(
        "dedup.obj",
        """
        v 0 0 0
        v 1 0 0
        v 1 1 0
        v 0 1 0
        vt 0 0
        vn 0 0 1
        f 1/1/1 2/1/1 3/1/1
        f 1/1/1 3/1/1 4/1/1
        """,
    )
    (shape,) = load_obj(path).shapes
    assert shape.etype == ElementType.TRIANGLE
    assert shape.elem == [0, 1, 2, 0, 2, 3]
    assert shape.nverts == 4
    assert shape.norm == [(0, 0, 1)] * 4
    assert shape.texcoord == [(0, 0)] * 4


def test_same_position_with_other_normal_is_new_vertex(write):
    path = write(
        "split.obj",
        """
        v 0 0 0
        v 1 0 0
        v 1 1 0
        v 0 1 0
        vn 0 0 1
        vn 0 0 -1
        f 1//1 2//1 3//1
        f 1//2 3//1 4//1
        """,
    )
    (shape,) = load_obj(path).shapes
    assert shape.elem == [0, 1, 2, 3, 2, 4]
    assert shape.norm[3] == (0, 0, -1)
    assert shape.pos[3] == shape.pos[0]


def test_relative_indices(write):
    path = write(
        "rel.obj",
        """
        v 0 0 0
        v 1 0 0
        v 1 1 0
        f -3 -2 -1
        v 0 1 0
        f -4 -2 -1
        """,
    )
    (shape,) = load_obj(path).shapes
    assert shape.elem == [0, 1, 2, 0, 2, 3]
    assert shape.pos[3] == (0, 1, 0)


def test_shape_boundaries(write):
    path = write(
        "bounds.obj",
        TRI
        + """
o a
f 1 2 3
g grp
f 1 2 3
usemtl m
f 1 2 3
o b
o c
usemtl x
o d
f 1 2 3
""",
    )
    scene = load_obj(path)
    assert [(s.name, s.groupname, s.matname) for s in scene.shapes] == [
        ("a", "", ""),
        ("a", "grp", ""),
        ("a", "grp", "m"),
        ("d", "", ""),
    ]
    for shape in scene.shapes:
        assert shape.elem == [0, 1, 2]
        assert shape.nverts == 3
        assert shape.matid == -1


def test_element_type_change_starts_new_shape(write):
    path = write("kinds.obj", TRI + "f 1 2 3\nl 1 2\np 1\np 2\n")
    scene = load_obj(path)
    assert [s.etype for s in scene.shapes] == [ElementType.TRIANGLE, ElementType.LINE, ElementType.POINT]
    points = scene.shapes[2]
    assert points.nelems == 2
    assert points.elem == [0, 1]
    assert points.pos == [(0, 0, 0), (1, 0, 0)]


def test_polylines(write):
    path = write("lines.obj", TRI + "v 1 1 0\nl 1 2 3 4\n")
    (shape,) = load_obj(path).shapes
    assert shape.etype == ElementType.POLYLINE
    assert shape.elem == [4, 0, 1, 2, 3]

    (shape,) = load_obj(path, triangulate=True).shapes
    assert shape.etype == ElementType.LINE
    assert shape.nelems == 3
    assert shape.elem == [0, 1, 1, 2, 2, 3]


def test_segments_compact_to_lines(write):
    path = write("segs.obj", TRI + "l 1 2\nl 2 3\n")
    (shape,) = load_obj(path).shapes
    assert shape.etype == ElementType.LINE
    assert shape.elem == [0, 1, 1, 2]


def test_mixed_polygons_keep_counts(write):
    path = write("mixed.obj", TRI + "v 1 1 0\nf 1 2 3\nf 1 2 3 4\n")
    (shape,) = load_obj(path).shapes
    assert shape.etype == ElementType.POLYGON
    assert shape.nelems == 2
    assert shape.elem == [3, 0, 1, 2, 4, 0, 1, 2, 3]


def test_materials_resolve_case_insensitively(write):
    write(
        "mats.mtl",
        """
        newmtl Red
        Kd 1 0 0
        map_Kd red.png
        newmtl Blue
        map_Ks blue.png
        map_Kd red.png
        """,
    )
    path = write("mats.obj", "mtllib mats.mtl\n" + TRI + "usemtl red\nf 1 2 3\nusemtl green\nf 1 2 3\n")
    scene = load_obj(path)
    assert [m.name for m in scene.materials] == ["Red", "Blue"]
    assert [t.path for t in scene.textures] == ["red.png", "blue.png"]
    assert scene.materials[1].kd_txtid == 0
    assert scene.materials[1].ks_txtid == 1
    red, green = scene.shapes
    assert red.matname == "red" and red.matid == 0
    assert green.matname == "green" and green.matid == -1


def test_several_libraries_on_one_line(write):
    write("a.mtl", "newmtl A\n")
    write("b.mtl", "newmtl B\n")
    path = write("two.obj", "mtllib a.mtl b.mtl\n")
    assert [m.name for m in load_obj(path).materials] == ["A", "B"]


def test_camera(write):
    path = write(
        "cam.obj",
        """
        v 0 0 0
        v 0 0 -1
        vn 0 1 0
        vt 0.5 0.5
        vt 2 1
        o cam
        c 1/1/1 2/2/1
        """,
    )
    scene = load_obj(path)
    assert scene.shapes == []
    (cam,) = scene.cameras
    assert cam.name == "cam"
    assert cam.from_ == (0, 0, 0)
    assert cam.to == (0, 0, -1)
    assert cam.up == (0, 1, 0)
    assert (cam.width, cam.height, cam.aperture) == (2.0, 1.0, 0.5)

    assert load_obj(path, extensions=False).cameras == []


def test_environment(write):
    write("sky.mtl", "newmtl Sky\nKe 1 1 1\nmap_Ke sky.hdr\n")
    path = write(
        "env.obj",
        """
        mtllib sky.mtl
        v 0 0 0
        v 0 0 1
        o dome
        usemtl sky
        e 1 2
        f 1 2 2
        """,
    )
    scene = load_obj(path)
    (env,) = scene.environments
    assert (env.name, env.matname, env.matid) == ("dome", "sky", 0)
    assert env.to == (0, 0, 1)
    assert env.up == DEFAULT_UP
    assert [t.path for t in scene.textures] == ["sky.hdr"]
    # name and material do not carry over to following shapes
    (shape,) = scene.shapes
    assert (shape.name, shape.matname) == ("", "")


def test_color_and_radius(write):
    path = write(
        "color.obj",
        TRI
        + """
vc 1 0 0
vc 0 1 0
vc 0 0 1
vr 0.5
f 1///1/1 2///2/1 3///3/1
""",
    )
    (shape,) = load_obj(path).shapes
    assert shape.color == [(1, 0, 0), (0, 1, 0), (0, 0, 1)]
    assert shape.radius == [0.5, 0.5, 0.5]

    (plain,) = load_obj(path, extensions=False).shapes
    assert plain.color == [] and plain.radius == []
    assert plain.elem == [0, 1, 2]


def test_transform_applies_until_next_object(write):
    path = write("xf.obj", TRI + "xf 1 0 0 0 1 0 0 0 1 5 6 7\nf 1 2 3\ng other\nf 1 2 3\no next\nf 1 2 3\n")
    first, second, third = load_obj(path).shapes
    assert first.xformed and first.xform[9:] == (5, 6, 7)
    assert second.xformed
    assert not third.xformed and third.xform == IDENTITY_XFORM


def test_tolerated_input(write):
    path = write(
        "misc.obj",
        """
        # exported by hand
        s 1
        v 0 0 0 1  # w is dropped
        v 1 0 0
        v 0 1 0
        vt 0.25
        vp 0.1 0.2
        cstype bspline
        f 1/1 2/1 3/1
        """,
    )
    (shape,) = load_obj(path).shapes
    assert shape.pos[0] == (0, 0, 0)
    assert shape.texcoord == [(0.25, 0.0)] * 3


@pytest.mark.parametrize(
    "body, line, message",
    [
        ("v 1 2\n", 1, "needs 3 values"),
        ("v 0 0 0\nf 1 2 9\n", 2, "out of range"),
        ("v 0 0 0\nf 1 0 1\n", 2, "index 0"),
        ("v 0 0 0\nv x 0 0\n", 2, "bad float"),
        ("f\n", 1, "without vertices"),
        ("v 0 0 0\nc 1\n", 2, "needs 2 vertices"),
    ],
)
def test_format_errors_point_at_line(write, body, line, message):
    path = write("bad.obj", body)
    with pytest.raises(ObjFormatError, match=message) as info:
        load_obj(path)
    assert info.value.path == path
    assert info.value.line == line
    assert str(info.value).startswith(f"{path}:{line}: ")


def test_triangulate_requires_full_elements(write):
    path = write("short.obj", TRI + "f 1 2\n")
    assert load_obj(path).shapes[0].etype == ElementType.LINE
    with pytest.raises(ObjFormatError, match="at least 3"):
        load_obj(path, triangulate=True)


def test_mixed_attribute_layout_is_rejected(write):
    path = write("ragged.obj", TRI + "vn 0 0 1\nf 1//1 2//1 3\n")
    with pytest.raises(ObjFormatError, match="mixes vertices"):
        load_obj(path)


def test_missing_files(tmp_path, write):
    with pytest.raises(ObjIOError):
        load_obj(str(tmp_path / "nope.obj"))
    path = write("lib.obj", "mtllib nope.mtl\n")
    with pytest.raises(ObjIOError, match="nope.mtl"):
        load_obj(path)


def test_full_scene(full_scene_path):
    scene = load_obj(full_scene_path)
    assert [c.name for c in scene.cameras] == ["cam"]
    assert [e.name for e in scene.environments] == ["dome"]
    assert [(s.name, s.groupname, s.etype) for s in scene.shapes] == [
        ("box", "top", ElementType.POLYGON),
        ("box", "side", ElementType.TRIANGLE),
        ("wire", "", ElementType.POLYLINE),
        ("cloud", "", ElementType.POINT),
    ]
    assert [s.matid for s in scene.shapes] == [0, 1, -1, -1]
    wire = scene.shapes[2]
    assert wire.elem == [5, 0, 1, 2, 3, 0, 2, 3, 4]


def test_long_comment_line(write):
    path = write("notes.obj", "# " + "word " * 1100 + "\n" + TRI + "f 1 2 3\n")
    (shape,) = load_obj(path).shapes
    assert shape.elem == [0, 1, 2]
