import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from PIL import Image

from asciiglyph.config import Configuration
from asciiglyph.errors import ConversionError
from asciiglyph.glyphs import GlyphGrid, map_glyphs
from asciiglyph.markup import render_html
from asciiglyph.planner import plan_dimensions
from asciiglyph.sampling import load_image, resample, sample_pixels
from asciiglyph.styled import StyledText, render_styled

log = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _default_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=min(4, os.cpu_count() or 1), thread_name_prefix="asciiglyph")
    return _executor


def convert(
    image: Image.Image | str | Path,
    precision: float,
    configuration: Configuration | None = None,
) -> GlyphGrid:
    """Run the conversion pipeline, raising a ConversionError subclass on failure."""
    configuration = configuration or Configuration()
    image = load_image(image)

    size = plan_dimensions(image.width, image.height, precision, configuration.character_aspect_ratio)
    log.debug("Planned %dx%d grid for %dx%d image", size.width, size.height, image.width, image.height)

    resized = resample(image, size)
    pixels = sample_pixels(resized, size)
    return map_glyphs(pixels)


def generate(
    image: Image.Image | str | Path,
    precision: float,
    configuration: Configuration | None = None,
) -> StyledText | None:
    """Convert an image to styled text, or None if the conversion failed."""
    configuration = configuration or Configuration()
    try:
        grid = convert(image, precision, configuration)
    except ConversionError as e:
        log.warning("ASCII conversion failed: %s", e)
        return None
    return render_styled(grid, configuration)


def generate_html(
    image: Image.Image | str | Path,
    precision: float,
    configuration: Configuration | None = None,
) -> str | None:
    """Convert an image to an HTML fragment, or None if the conversion failed."""
    configuration = configuration or Configuration()
    try:
        grid = convert(image, precision, configuration)
    except ConversionError as e:
        log.warning("ASCII conversion failed: %s", e)
        return None
    return render_html(grid, configuration)


def generate_async(
    image: Image.Image | str | Path,
    precision: float,
    configuration: Configuration | None = None,
    on_complete: Callable[[StyledText | None], object] | None = None,
    *,
    executor: ThreadPoolExecutor | None = None,
    deliver: Callable[..., object] | None = None,
) -> "Future[StyledText | None]":
    """Run :func:`generate` on a worker thread.

    The returned future resolves to the same value ``generate`` would return.
    If ``on_complete`` is given it is called with that value, either directly
    on the worker thread or as ``deliver(on_complete, result)``, so that e.g.
    ``loop.call_soon_threadsafe`` hands it to an event loop.
    """
    future = (executor or _default_executor()).submit(generate, image, precision, configuration)
    if on_complete is not None:

        def _done(f: Future) -> None:
            error = f.exception()
            if error is not None:
                log.error("ASCII conversion crashed: %s", error, exc_info=error)
            result = None if error is not None else f.result()
            if deliver is None:
                on_complete(result)
            else:
                deliver(on_complete, result)

        future.add_done_callback(_done)
    return future
