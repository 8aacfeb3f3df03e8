import logging
import os

from objcli.main import main


def test_summary(full_scene_path, capsys):
    assert main(["summary", full_scene_path]) == 0
    out = capsys.readouterr().out
    assert "Shapes" in out
    assert "cloud" in out


def test_convert_and_back(full_scene_path, tmp_path):
    dump = str(tmp_path / "out" / "scene.objbin")
    assert main(["convert", full_scene_path, dump]) == 0
    assert os.path.exists(dump)
    assert main(["convert", "--triangulate", dump, str(tmp_path / "back.obj")]) == 0
    assert main(["summary", dump]) == 0


def test_verify_roundtrip(full_scene_path, capsys):
    assert main(["verify-roundtrip", full_scene_path]) == 0
    assert "IDENTICAL" in capsys.readouterr().out
    assert main(["verify-roundtrip", "--triangulate", full_scene_path]) == 0


def test_textures(full_scene_path):
    assert main(["textures", "--workers", "2", full_scene_path]) == 0


def test_errors_exit_2(tmp_path, write):
    assert main(["summary", str(tmp_path / "missing.obj")]) == 2
    bad = write("bad.obj", "v 1 2\n")
    assert main(["convert", bad, str(tmp_path / "bad.objbin")]) == 2


def test_log_file(full_scene_path, tmp_path):
    log_path = str(tmp_path / "objcli.log")
    try:
        assert main(["-v", "--log-file", log_path, "summary", full_scene_path]) == 0
    finally:
        logger = logging.getLogger("libobj")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    text = open(log_path, encoding="utf-8").read()
    assert "libobj.reader - INFO - Loaded" in text


def test_convert_out_of_range_exits_2(tmp_path, write):
    src = write("huge.obj", "v 1e300 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")
    assert main(["convert", src, str(tmp_path / "huge.objbin")]) == 2
