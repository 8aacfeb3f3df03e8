from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .model import Vec2, Vec3, VertexRef


@dataclass
class AttributePools:
    """Raw OBJ attribute records in file order.

    Face/line/point records address these by (1-based or relative) index;
    the pools only ever grow while a file is parsed.
    """

    pos: List[Vec3] = field(default_factory=list)
    texcoord: List[Vec2] = field(default_factory=list)
    norm: List[Vec3] = field(default_factory=list)
    color: List[Vec3] = field(default_factory=list)
    radius: List[float] = field(default_factory=list)

    def lengths(self) -> Tuple[int, int, int, int, int]:
        # Same order as VertexRef fields.
        return (len(self.pos), len(self.texcoord), len(self.norm), len(self.color), len(self.radius))


@dataclass
class VertexBuffers:
    """Per-vertex attribute lists of the shape being assembled."""

    pos: List[Vec3] = field(default_factory=list)
    norm: List[Vec3] = field(default_factory=list)
    texcoord: List[Vec2] = field(default_factory=list)
    color: List[Vec3] = field(default_factory=list)
    radius: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pos)

    def append(self, ref: VertexRef, pools: AttributePools) -> None:
        """Copy the attributes referenced by ``ref`` out of the pools."""
        if ref.pos >= 0:
            self.pos.append(pools.pos[ref.pos])
        if ref.norm >= 0:
            self.norm.append(pools.norm[ref.norm])
        if ref.texcoord >= 0:
            self.texcoord.append(pools.texcoord[ref.texcoord])
        if ref.color >= 0:
            self.color.append(pools.color[ref.color])
        if ref.radius >= 0:
            self.radius.append(pools.radius[ref.radius])

    def ragged(self) -> List[str]:
        """Names of attribute lists that are neither empty nor full length."""
        n = len(self.pos)
        out = []
        for name in ("norm", "texcoord", "color", "radius"):
            values = getattr(self, name)
            if values and len(values) != n:
                out.append(name)
        return out

    def clear(self) -> None:
        self.pos = []
        self.norm = []
        self.texcoord = []
        self.color = []
        self.radius = []
