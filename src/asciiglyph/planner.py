import math
from typing import NamedTuple

from asciiglyph.config import MAX_WIDTH, MIN_WIDTH
from asciiglyph.errors import DimensionError


class GridSize(NamedTuple):
    width: int
    height: int


def plan_dimensions(
    source_width: float,
    source_height: float,
    precision: float,
    character_aspect_ratio: float,
    min_width: float = MIN_WIDTH,
    max_width: float = MAX_WIDTH,
) -> GridSize:
    """Size of the character grid for an image, one glyph per grid cell.

    Width follows the source width scaled by ``precision`` (clamped to 0-1),
    bounded to ``[min_width, max_width]``. Height keeps the source aspect
    ratio, divided by ``character_aspect_ratio`` because glyph cells are
    taller than they are wide. Height is not bounded.
    """
    if source_width <= 0 or source_height <= 0:
        raise DimensionError(f"Image has no area: {source_width}x{source_height}")
    if not character_aspect_ratio > 0:
        raise DimensionError(f"Invalid character aspect ratio: {character_aspect_ratio}")
    if math.isnan(precision):
        raise DimensionError("Precision is NaN")

    precision = max(0.0, min(1.0, precision))
    aspect_ratio = source_width / source_height
    width = max(min_width, min(max_width, source_width * precision))
    height = width / (aspect_ratio * character_aspect_ratio)

    if not math.isfinite(height) or height < 1:
        raise DimensionError(f"Planned grid height is unusable: {height}")
    return GridSize(int(width), int(height))
