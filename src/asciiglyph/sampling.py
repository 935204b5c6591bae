import logging
from collections.abc import Iterator
from pathlib import Path
from typing import NamedTuple

import numpy as np
from PIL import Image

from asciiglyph.errors import ResampleError, SamplingError
from asciiglyph.planner import GridSize

log = logging.getLogger(__name__)

# Modes Pillow can resize with LANCZOS directly
_RESAMPLE_MODES = {"L", "LA", "RGB", "RGBA"}


class PixelSample(NamedTuple):
    red: int
    green: int
    blue: int


def load_image(source: Image.Image | str | Path) -> Image.Image:
    """Open ``source`` if it is a path and force the pixel data to decode."""
    if source is None:
        raise SamplingError("No image given")
    if isinstance(source, Image.Image):
        return source
    try:
        image = Image.open(source)
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise SamplingError(f"Cannot read image {source}: {e}") from e
    return image


def resample(image: Image.Image, size: GridSize) -> Image.Image:
    """Resize ``image`` to exactly one pixel per grid cell."""
    try:
        if image.mode not in _RESAMPLE_MODES:
            image = image.convert("RGBA" if image.mode in ("P", "PA") else "RGB")
        resized = image.resize((size.width, size.height), Image.LANCZOS)
    except (OSError, ValueError) as e:
        raise ResampleError(f"Cannot resize {image.mode} image to {size.width}x{size.height}: {e}") from e
    if resized.size != (size.width, size.height):
        raise ResampleError(f"Resize produced {resized.size}, expected {(size.width, size.height)}")
    return resized


def sample_pixels(raster: Image.Image, size: GridSize | None = None) -> np.ndarray:
    """Read one RGB triple per pixel. Returns uint8 array of shape (rows, cols, 3).

    Any alpha channel is discarded rather than composited.
    """
    try:
        arr = np.asarray(raster.convert("RGB"), dtype=np.uint8)
    except (OSError, ValueError, AttributeError) as e:
        raise SamplingError(f"Cannot read pixel data: {e}") from e

    if arr.ndim != 3 or arr.shape[2] != 3:
        raise SamplingError(f"Unexpected pixel buffer shape {arr.shape}")
    if size is not None and arr.shape[:2] != (size.height, size.width):
        raise SamplingError(f"Pixel buffer is {arr.shape[1]}x{arr.shape[0]}, expected {size.width}x{size.height}")
    log.debug("Sampled %dx%d pixels", arr.shape[1], arr.shape[0])
    return arr


def iter_samples(pixels: np.ndarray) -> Iterator[PixelSample]:
    """Yield samples row by row, left to right."""
    for row in pixels:
        for r, g, b in row:
            yield PixelSample(int(r), int(g), int(b))
