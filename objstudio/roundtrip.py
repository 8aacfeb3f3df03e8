#!/usr/bin/env python3
"""Round-trip an OBJ file through libobj reader/writer.

Usage:
  python objstudio/roundtrip.py path/to/file.obj

Writes:
  <input>.roundtrip/<name>   (save of the loaded scene)
  <input>.roundtrip2/<name>  (save of that file, loaded again)

The two written files must be byte-identical and the reloaded scene must
match the first load field for field.
"""

from __future__ import annotations

import hashlib
import os
import sys

# Allow running from repo root without installation
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LIBOBJ_ROOT = os.path.join(REPO_ROOT, "objstudio", "libobj")
if LIBOBJ_ROOT not in sys.path:
    sys.path.insert(0, LIBOBJ_ROOT)

from libobj.compare import diff_scenes  # type: ignore
from libobj.reader import load_obj  # type: ignore
from libobj.writer import save_obj  # type: ignore


def _sha256(p: str) -> str:
    h = hashlib.sha256()
    with open(p, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print("Usage: python objstudio/roundtrip.py <file.obj>")
        return 2

    inp = os.path.abspath(argv[1])
    if not os.path.exists(inp):
        print(f"File not found: {inp}")
        return 2

    base, name = os.path.splitext(inp)[0], os.path.basename(inp)
    # same file name in both directories so the mtllib records match
    out1 = os.path.join(base + ".roundtrip", name)
    out2 = os.path.join(base + ".roundtrip2", name)
    os.makedirs(os.path.dirname(out1), exist_ok=True)
    os.makedirs(os.path.dirname(out2), exist_ok=True)

    first = load_obj(inp)
    save_obj(out1, first)
    second = load_obj(out1)
    save_obj(out2, second)

    diffs = diff_scenes(first, second)
    for d in diffs:
        print(f"  {d}")

    a = _sha256(out1)
    b = _sha256(out2)
    print(f"OUT1: {out1}\n      sha256={a}")
    print(f"OUT2: {out2}\n      sha256={b}")
    ok = a == b and not diffs
    print("IDENTICAL" if ok else "DIFF")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
