"""libobj.tokenizer

Line splitting and number parsing/formatting shared by the OBJ and MTL
readers and writers.

Tokens are plain ``str.split()`` slices: whitespace runs collapse, leading and
trailing whitespace disappear. A token starting with '#' ends the record
(inline comment); the token limit applies to what is left.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Tuple

from .config import MAX_TOKENS
from .errors import ObjFormatError


def split_tokens(line: str, max_tokens: int = MAX_TOKENS) -> List[str]:
    tokens = line.split()
    for i, tok in enumerate(tokens):
        if tok.startswith("#"):
            del tokens[i:]
            break
    if len(tokens) > max_tokens:
        raise ObjFormatError(f"record has {len(tokens)} tokens, limit is {max_tokens}")
    return tokens


def iter_records(lines: Iterable[str], max_tokens: int = MAX_TOKENS) -> Iterator[Tuple[int, List[str]]]:
    """Yield ``(lineno, tokens)`` for every non-empty, non-comment line."""
    for lineno, line in enumerate(lines, start=1):
        try:
            tokens = split_tokens(line, max_tokens)
        except ObjFormatError as e:
            e.line = lineno
            raise
        if tokens:
            yield lineno, tokens


def parse_floats(args: Sequence[str], count: int, keyword: str, optional: int = 0) -> Tuple[float, ...]:
    """Parse ``count`` leading floats; the last ``optional`` ones default to 0.

    Trailing extra values (e.g. the w of ``v x y z w``) are ignored.
    """
    if len(args) < count - optional:
        raise ObjFormatError(f"'{keyword}' needs {count - optional} values, got {len(args)}")
    out = []
    for i in range(count):
        if i >= len(args):
            out.append(0.0)
            continue
        try:
            out.append(float(args[i]))
        except ValueError:
            raise ObjFormatError(f"bad float {args[i]!r} in '{keyword}'") from None
    return tuple(out)


def parse_int(arg: str, keyword: str) -> int:
    try:
        return int(arg)
    except ValueError:
        raise ObjFormatError(f"bad integer {arg!r} in '{keyword}'") from None


def format_floats(values: Sequence[float]) -> str:
    """Space-joined shortest round-trip text of each value."""
    return " ".join(repr(float(v)) for v in values)
