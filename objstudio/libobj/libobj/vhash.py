"""libobj.vhash

Per-shape vertex deduplication.

OBJ faces reference attributes through ``p/t/n`` triplets (``p/t/n/c/r`` with
extensions). Every distinct resolved 5-tuple becomes one local vertex of the
shape being built; a repeated tuple maps back to the id it was given first.
The table is cleared whenever a shape is flushed, so ids always count from 0
inside a shape.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .errors import ObjFormatError
from .model import VertexRef
from .pools import AttributePools

_ATTR_NAMES = ("position", "texcoord", "normal", "color", "radius")


def parse_vertex_ref(token: str, pools: AttributePools, nattrs: int = 5) -> VertexRef:
    """Resolve a ``p/t/n/c/r`` token against the current pool sizes.

    Empty components are absent. Positive indices are 1-based, negative ones
    count back from the end of the pool as it stands before this record.
    Components past ``nattrs`` are ignored.
    """
    parts = token.split("/")
    if len(parts) > 5:
        raise ObjFormatError(f"vertex reference {token!r} has more than 5 components")

    sizes = pools.lengths()
    out: List[int] = [-1, -1, -1, -1, -1]
    for i, part in enumerate(parts[:nattrs]):
        if not part:
            continue
        try:
            raw = int(part)
        except ValueError:
            raise ObjFormatError(f"bad {_ATTR_NAMES[i]} index {part!r} in {token!r}") from None
        if raw == 0:
            raise ObjFormatError(f"{_ATTR_NAMES[i]} index 0 in {token!r}")
        idx = sizes[i] + raw if raw < 0 else raw - 1
        if not 0 <= idx < sizes[i]:
            raise ObjFormatError(
                f"{_ATTR_NAMES[i]} index {raw} in {token!r} out of range ({sizes[i]} defined)"
            )
        out[i] = idx

    if out[0] < 0:
        raise ObjFormatError(f"vertex reference {token!r} has no position")
    return VertexRef(*out)


class VertexTable:
    """Maps resolved vertex references to local ids in insertion order."""

    def __init__(self, nattrs: int = 5):
        self.nattrs = nattrs
        self._ids: Dict[VertexRef, int] = {}

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, ref: VertexRef) -> bool:
        return ref in self._ids

    def clear(self) -> None:
        self._ids.clear()

    def insert(self, ref: VertexRef) -> int:
        vid = self._ids.get(ref)
        if vid is None:
            vid = len(self._ids)
            self._ids[ref] = vid
        return vid

    def resolve(self, token: str, pools: AttributePools) -> Tuple[VertexRef, int]:
        ref = parse_vertex_ref(token, pools, self.nattrs)
        return ref, self.insert(ref)
