"""libobj.errors

Every failure raised by libobj derives from ObjError, so callers can catch a
single type. A load or save either completes or raises; no partial scene is
ever handed back.
"""

from __future__ import annotations

from typing import Optional


class ObjError(RuntimeError):
    pass


class ObjIOError(ObjError):
    """A file could not be opened, read or written."""


class ObjFormatError(ObjError):
    """A record could not be parsed.

    The reader fills in ``path`` and ``line`` when the error escapes a record
    handler, so messages read like ``scene.obj:12: bad float 'x' in 'v'``.
    """

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self) -> str:
        if self.path is not None and self.line is not None:
            return f"{self.path}:{self.line}: {self.message}"
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


class ObjMagicError(ObjError):
    """Binary dump does not start with the expected magic number."""
