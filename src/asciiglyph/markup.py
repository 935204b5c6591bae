import html

from asciiglyph.config import Configuration
from asciiglyph.glyphs import GlyphGrid
from asciiglyph.styled import hex_colour


def _div_open(configuration: Configuration) -> str:
    return (
        f'<div style="font-family: {html.escape(configuration.font_name)}; '
        f"font-size: {configuration.font_size}px; "
        f"line-height: {configuration.line_height}px; "
        f"letter-spacing: {configuration.letter_spacing}px; "
        'white-space: pre; background-color: black; color: white;">'
    )


def render_html(grid: GlyphGrid, configuration: Configuration) -> str:
    """Render a glyph grid as a single preformatted ``<div>``.

    Coloured output wraps every glyph in its own ``<span>``. Rows end with a
    literal newline, which ``white-space: pre`` keeps as a line break.
    """
    out = [_div_open(configuration)]
    for row in grid.rows():
        for char, _, rgb in row:
            if configuration.is_colored:
                out.append(f'<span style="color: {hex_colour(*rgb)};">{char}</span>')
            else:
                out.append(char)
        out.append("\n")
    out.append("</div>")
    return "".join(out)
