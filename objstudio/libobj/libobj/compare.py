"""libobj.compare

Field-by-field scene comparison used to verify round trips.

Text output and the float32 binary dump both round floats, so float fields
compare with an absolute tolerance while names, indices and element buffers
must match exactly. Texture pixels are not compared.
"""

from __future__ import annotations

import math
from dataclasses import fields
from typing import Any, List

from .model import Scene

DEFAULT_TOL = 1e-5


def _close(a: Any, b: Any, tol: float) -> bool:
    if isinstance(a, float) or isinstance(b, float):
        try:
            return math.isclose(float(a), float(b), rel_tol=tol, abs_tol=tol)
        except (TypeError, ValueError):
            return False
    if isinstance(a, (tuple, list)) and isinstance(b, (tuple, list)):
        return len(a) == len(b) and all(_close(x, y, tol) for x, y in zip(a, b))
    return a == b


def _diff_objects(kind: str, index: int, a: Any, b: Any, tol: float, out: List[str]) -> None:
    for f in fields(a):
        if not f.compare:
            continue
        va, vb = getattr(a, f.name), getattr(b, f.name)
        if not _close(va, vb, tol):
            if isinstance(va, list) and isinstance(vb, list) and len(va) != len(vb):
                out.append(f"{kind}[{index}].{f.name}: length {len(va)} != {len(vb)}")
            else:
                out.append(f"{kind}[{index}].{f.name}: {_short(va)} != {_short(vb)}")


def _short(v: Any) -> str:
    text = repr(v)
    return text if len(text) <= 60 else text[:57] + "..."


def diff_scenes(a: Scene, b: Scene, tol: float = DEFAULT_TOL) -> List[str]:
    """Human-readable differences between two scenes; empty when equal."""
    out: List[str] = []
    for kind in ("shapes", "materials", "textures", "cameras", "environments"):
        la, lb = getattr(a, kind), getattr(b, kind)
        if len(la) != len(lb):
            out.append(f"{kind}: count {len(la)} != {len(lb)}")
        for i, (x, y) in enumerate(zip(la, lb)):
            _diff_objects(kind, i, x, y, tol, out)
    return out
