import logging

import numpy as np
import pytest
from PIL import Image

from asciiglyph import fonts


@pytest.fixture(autouse=True)
def _fresh_font_cache():
    fonts._resolve.cache_clear()
    yield
    fonts._resolve.cache_clear()


@pytest.fixture
def gradient_image():
    """200x100 RGB image fading from black on the left to white on the right."""
    row = np.linspace(0, 255, 200).astype(np.uint8)
    arr = np.repeat(np.repeat(row[None, :, None], 100, axis=0), 3, axis=2)
    return Image.fromarray(arr, "RGB")


@pytest.fixture
def red_image():
    return Image.new("RGB", (100, 100), (255, 0, 0))


@pytest.fixture(autouse=True)
def _reset_logging():
    logger = logging.getLogger("asciiglyph")
    handlers, level = logger.handlers[:], logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
