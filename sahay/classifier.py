"""Average-colour plant heuristic: is the picture mostly green?"""

import logging
from typing import Optional

import numpy as np
from PIL import Image

from . import config

logger = logging.getLogger(__name__)


def _as_pixel_rows(pixels, width: Optional[int] = None, height: Optional[int] = None) -> np.ndarray:
    """
    Normalise a pixel buffer to an ``N x C`` int array (C is 3 or 4).

    Accepts a flat RGBA/RGB buffer (canvas style), a sequence of
    ``(r, g, b[, a])`` tuples, or an ``H x W x C`` array.
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(pixels, dtype=np.uint8)
    else:
        arr = np.asarray(pixels)
    count = None if width is None or height is None else int(width) * int(height)

    if arr.size == 0:
        return np.zeros((0, 4), dtype=np.int16)

    if arr.ndim == 1:
        if count is None:
            channels = 4
        elif count == 0:
            raise ValueError(f"{arr.size} samples given for a 0-pixel image")
        else:
            channels, rem = divmod(arr.size, count)
            if rem or channels not in (3, 4):
                raise ValueError(
                    f"Buffer of {arr.size} samples does not fit {width}x{height} RGB/RGBA pixels"
                )
        if arr.size % channels:
            raise ValueError(f"Buffer length {arr.size} is not a multiple of {channels}")
        rows = arr.reshape(-1, channels)
    elif arr.ndim in (2, 3):
        rows = arr.reshape(-1, arr.shape[-1])
        if count is not None and rows.shape[0] != count:
            raise ValueError(f"Got {rows.shape[0]} pixels, expected {width}x{height}={count}")
    else:
        raise ValueError(f"Unsupported pixel array shape {arr.shape}")

    if rows.shape[1] < 3:
        raise ValueError(f"Pixels need at least 3 channels, got {rows.shape[1]}")
    # int16 so that "channel + margin" cannot wrap around like uint8 would
    return rows.astype(np.int16, copy=False)


def green_ratio(pixels, width: Optional[int] = None, height: Optional[int] = None) -> float:
    """Fraction of pixels whose green channel beats red and blue by the configured margin"""
    rows = _as_pixel_rows(pixels, width, height)
    total = rows.shape[0]
    if total == 0:
        return 0.0
    r, g, b = rows[:, 0], rows[:, 1], rows[:, 2]
    margin = config.GREEN_MARGIN
    greenish = np.count_nonzero((g > r + margin) & (g > b + margin))
    return float(greenish) / total


def classify(pixels, width: Optional[int] = None, height: Optional[int] = None) -> bool:
    """True when the image looks plant-like. An empty image never does."""
    ratio = green_ratio(pixels, width, height)
    logger.debug(f"Green-dominant ratio {ratio:.3f}")
    return bool(ratio > config.GREEN_RATIO_THRESHOLD)


def classify_image(image) -> bool:
    """Classify an image file path or a Pillow image"""
    if not isinstance(image, Image.Image):
        with Image.open(image) as opened:
            return classify_image(opened)
    with image.convert("RGB") as rgb:
        width, height = rgb.size
        return classify(np.asarray(rgb), width, height)
