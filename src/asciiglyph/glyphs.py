from dataclasses import dataclass

import numpy as np

from asciiglyph.charsets import GLYPH_RAMP
from asciiglyph.sampling import PixelSample

_RAMP = np.array(list(GLYPH_RAMP))


@dataclass
class GlyphGrid:
    chars: list[str]  # one string per row
    luminance: np.ndarray  # (rows, cols) float64, 0-255
    colours: np.ndarray  # (rows, cols, 3) uint8

    @property
    def width(self) -> int:
        return self.colours.shape[1]

    @property
    def height(self) -> int:
        return self.colours.shape[0]

    def rows(self):
        """Yield one list of (glyph, luminance, (r, g, b)) per row, top to bottom."""
        for y, line in enumerate(self.chars):
            yield [
                (char, float(self.luminance[y, x]), tuple(int(c) for c in self.colours[y, x]))
                for x, char in enumerate(line)
            ]


def luminance(red, green, blue):
    """Perceptual brightness (Rec. 601 luma) on the 0-255 scale.

    Accepts plain numbers or numpy arrays. Weights are applied as integer
    per-mille factors so pure white comes out at exactly 255.0. Triples whose
    luma lands exactly on a bucket edge (85, 170) round up to the sparser glyph.
    """
    return (299 * red + 587 * green + 114 * blue) / 1000


def ramp_index(lum):
    """Position in GLYPH_RAMP for a luminance, 0 for black up to the last for white."""
    top = len(GLYPH_RAMP) - 1
    return np.clip(np.floor(lum / 255.0 * top), 0, top).astype(np.intp)


def glyph_for(sample: PixelSample) -> str:
    return GLYPH_RAMP[int(ramp_index(luminance(*sample)))]


def map_glyphs(pixels: np.ndarray) -> GlyphGrid:
    """Map a (rows, cols, 3) uint8 pixel array to ramp glyphs."""
    channels = pixels.astype(np.float64)
    lum = luminance(channels[..., 0], channels[..., 1], channels[..., 2])
    glyphs = _RAMP[ramp_index(lum)]
    chars = ["".join(row) for row in glyphs]
    return GlyphGrid(chars=chars, luminance=lum, colours=pixels.astype(np.uint8, copy=False))
