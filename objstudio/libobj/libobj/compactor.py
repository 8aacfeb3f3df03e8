"""libobj.compactor

Element buffer normalisation for flushed shapes.

Polygons and polylines are assembled as runs ``[count, id0 .. id(count-1)]``.
When every run has the same small size the counts carry no information, so
the buffer is rewritten as a fixed-stride point/line/triangle list:

    [3, 0, 1, 2, 3, 0, 2, 3]  ->  TRIANGLE, [0, 1, 2, 0, 2, 3]

Mixed sizes keep the run-length form untouched.
"""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

from .errors import ObjFormatError
from .model import ElementType

# Largest common run length that still collapses to a fixed type. A polyline
# of three points is not a triangle, so polylines stop at segments.
_MAX_FIXED = {ElementType.POLYGON: 3, ElementType.POLYLINE: 2}


def _scan_runs(elem: Sequence[int]) -> Tuple[int, int, int]:
    """Return (run count, min run length, max run length)."""
    n = len(elem)
    nruns = 0
    minf, maxf = 0, 0
    i = 0
    while i < n:
        count = elem[i]
        if count <= 0:
            raise ObjFormatError(f"element run {nruns} has length {count}")
        if i + 1 + count > n:
            raise ObjFormatError(f"element run {nruns} truncated: needs {count} ids, {n - i - 1} left")
        if nruns == 0:
            minf = maxf = count
        else:
            minf = min(minf, count)
            maxf = max(maxf, count)
        nruns += 1
        i += count + 1
    return nruns, minf, maxf


def compact_elements(etype: ElementType, elem: Sequence[int]) -> Tuple[ElementType, int, List[int]]:
    """Return ``(etype, nelems, elem)`` in the most compact representation."""
    if etype.is_fixed:
        stride = etype.stride
        if len(elem) % stride:
            raise ObjFormatError(f"{etype.name.lower()} buffer of {len(elem)} ids is not a multiple of {stride}")
        return etype, len(elem) // stride, list(elem)

    nruns, minf, maxf = _scan_runs(elem)
    if nruns and minf == maxf and maxf <= _MAX_FIXED[etype]:
        out: List[int] = []
        for e in range(nruns):
            start = e * (maxf + 1) + 1
            out.extend(elem[start:start + maxf])
        return ElementType(maxf), nruns, out
    return etype, nruns, list(elem)


def iter_elements(etype: ElementType, elem: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Walk an element buffer, yielding the vertex ids of each element."""
    if etype.is_fixed:
        stride = etype.stride
        for i in range(0, len(elem) - stride + 1, stride):
            yield tuple(elem[i:i + stride])
        return

    i = 0
    while i < len(elem):
        count = elem[i]
        if count <= 0:
            raise ObjFormatError(f"element run at offset {i} has length {count}")
        yield tuple(elem[i + 1:i + 1 + count])
        i += count + 1
