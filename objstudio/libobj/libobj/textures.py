"""libobj.textures

Pixel loading for the textures referenced by a scene's materials.

Paths are resolved against the directory of the scene file. Images are
decoded with Pillow, flipped so the first row is the bottom one (OBJ texcoord
convention), and stored as flat float32 buffers in [0, 1] with the color
channels linearized; alpha stays as stored. 16-bit grayscale images are
scaled by 65535 so they keep their precision.

A texture that fails to decode is logged and left unloaded, the rest still
load. Pass strict=True to stop at the first failure instead.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

import numpy as np
from PIL import Image

from .config import GAMMA
from .errors import ObjIOError
from .model import Scene, Texture

logger = logging.getLogger(__name__)

# Pillow mode per requested component count.
_MODES = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}

# Integer grayscale modes holding 16-bit samples; scaled by 65535, not 255.
_WIDE_MODES = ("I", "I;16", "I;16L", "I;16B")


def _natural_mode(im: Image.Image) -> str:
    if im.mode in ("1", "L", "F") or im.mode in _WIDE_MODES:
        return "L"
    if im.mode in ("LA", "La"):
        return "LA"
    if im.mode in ("RGBA", "RGBa", "PA"):
        return "RGBA"
    if im.mode == "P" and "transparency" in im.info:
        return "RGBA"
    return "RGB"


def _wide_gray(im: Image.Image, mode: str) -> np.ndarray:
    """Expand 16-bit grayscale to ``mode`` without dropping to 8 bits first."""
    gray = np.asarray(im.transpose(Image.Transpose.FLIP_TOP_BOTTOM), dtype=np.float32)
    gray = np.clip(gray / 65535.0, 0.0, 1.0)
    channels = [gray] * (3 if mode in ("RGB", "RGBA") else 1)
    if mode in ("LA", "RGBA"):
        channels.append(np.ones_like(gray))
    return np.stack(channels, axis=-1)


def decode_image(path: str, req_comp: int = 0) -> np.ndarray:
    """Decode ``path`` into a (height, width, ncomp) float32 array."""
    with Image.open(path) as im:
        mode = _MODES[req_comp] if req_comp else _natural_mode(im)
        if im.mode in _WIDE_MODES:
            arr = _wide_gray(im, mode)
        else:
            im = im.convert(mode).transpose(Image.Transpose.FLIP_TOP_BOTTOM)
            arr = np.asarray(im, dtype=np.float32) / 255.0
    if arr.ndim == 2:
        arr = arr[:, :, np.newaxis]
    ncolor = 3 if arr.shape[2] >= 3 else 1
    arr[:, :, :ncolor] **= GAMMA
    return arr


def _load_one(tex: Texture, dirname: str, req_comp: int) -> None:
    arr = decode_image(os.path.join(dirname, tex.path), req_comp)
    tex.height, tex.width, tex.ncomp = arr.shape
    tex.pixels = arr.reshape(-1)


def load_textures(
    scene: Scene,
    base_path: str,
    req_comp: int = 0,
    workers: int = 1,
    strict: bool = False,
) -> int:
    """Decode every texture of ``scene``; returns how many loaded.

    ``req_comp`` forces 1-4 components per pixel (0 keeps the image's own).
    ``workers`` > 1 decodes on a thread pool; each texture is written by
    exactly one worker.
    """
    if req_comp not in (0, 1, 2, 3, 4):
        raise ValueError(f"req_comp must be 0-4, got {req_comp}")
    dirname = os.path.dirname(base_path)

    def run(tex: Texture) -> Optional[Exception]:
        try:
            _load_one(tex, dirname, req_comp)
        except (OSError, ValueError) as e:
            if strict:
                raise ObjIOError(f"cannot load texture {tex.path}: {e}") from e
            logger.warning("Skipping texture %s: %s", tex.path, e)
            return e
        logger.debug("Loaded texture %s (%dx%d, %d comp)", tex.path, tex.width, tex.height, tex.ncomp)
        return None

    failed = 0
    if workers > 1 and len(scene.textures) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(run, tex) for tex in scene.textures]
            for future in as_completed(futures):
                if future.result() is not None:
                    failed += 1
    else:
        for tex in scene.textures:
            if run(tex) is not None:
                failed += 1

    loaded = len(scene.textures) - failed
    logger.info("Loaded %d/%d textures", loaded, len(scene.textures))
    return loaded
