from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import NamedTuple

from asciiglyph.config import Configuration
from asciiglyph.fonts import FontDescriptor, resolve_font
from asciiglyph.glyphs import GlyphGrid


def hex_colour(red: int, green: int, blue: int) -> str:
    return "#%02X%02X%02X" % (red, green, blue)


class Colour(NamedTuple):
    """Opaque RGB colour with float components in 0-1."""

    red: float
    green: float
    blue: float

    @classmethod
    def from_rgb8(cls, red: int, green: int, blue: int) -> "Colour":
        return cls(red / 255.0, green / 255.0, blue / 255.0)

    @classmethod
    def gray(cls, white: float) -> "Colour":
        return cls(white, white, white)

    def to_rgb8(self) -> tuple[int, int, int]:
        return tuple(max(0, min(255, int(round(c * 255)))) for c in self)

    @property
    def hex(self) -> str:
        return hex_colour(*self.to_rgb8())


@dataclass(frozen=True)
class StyledRun:
    text: str
    font: FontDescriptor | None = None
    colour: Colour | None = None


@dataclass
class StyledText:
    runs: list[StyledRun] = field(default_factory=list)

    def __iter__(self) -> Iterator[StyledRun]:
        return iter(self.runs)

    def __len__(self) -> int:
        return len(self.runs)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    def lines(self) -> list[list[StyledRun]]:
        """Runs grouped by row, without the line breaks."""
        rows: list[list[StyledRun]] = [[]]
        for run in self.runs:
            if run.text == "\n":
                rows.append([])
            else:
                rows[-1].append(run)
        if not rows[-1]:
            rows.pop()
        return rows

    def to_ansi(self) -> str:
        """Render with 24-bit ANSI foreground colours, one line per row."""
        out = []
        for row in self.lines():
            parts = []
            for run in row:
                if run.colour is None:
                    parts.append(run.text)
                else:
                    r, g, b = run.colour.to_rgb8()
                    parts.append(f"\033[38;2;{r};{g};{b}m{run.text}")
            parts.append("\033[0m")
            out.append("".join(parts))
        return "\n".join(out)


def render_styled(grid: GlyphGrid, configuration: Configuration) -> StyledText:
    """One run per cell in row-major order, with a line-break run after each row."""
    font = resolve_font(configuration)
    runs = []
    for row in grid.rows():
        for char, lum, rgb in row:
            if configuration.is_colored:
                colour = Colour.from_rgb8(*rgb)
            else:
                colour = Colour.gray(lum / 255.0)
            runs.append(StyledRun(char, font, colour))
        runs.append(StyledRun("\n"))
    return StyledText(runs)
