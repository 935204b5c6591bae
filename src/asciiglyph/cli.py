import argparse
import logging
import sys
from pathlib import Path

from asciiglyph.config import Configuration
from asciiglyph.converter import generate, generate_html


def setup_logging(debug: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger = logging.getLogger("asciiglyph")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    defaults = Configuration()
    parser = argparse.ArgumentParser(description="Render an image as ASCII art")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-p",
        "--precision",
        type=float,
        default=1.0,
        help="Output width as a fraction of the image width, 0-1 (default: 1.0)",
    )
    parser.add_argument("--html", action="store_true", default=False, help="Emit an HTML fragment")
    parser.add_argument("--no-colour", action="store_true", default=False, help="Grayscale output")
    parser.add_argument(
        "--proportional", action="store_true", default=False, help="Use the system font instead of a monospaced one"
    )
    parser.add_argument("--font", default=defaults.font_name, help=f"Font name (default: {defaults.font_name})")
    parser.add_argument("--font-size", type=float, default=defaults.font_size)
    parser.add_argument(
        "-a",
        "--aspect",
        type=float,
        default=defaults.character_aspect_ratio,
        help="Character cell height/width correction (default: %(default)s)",
    )
    parser.add_argument("--line-height", type=float, default=defaults.line_height)
    parser.add_argument("--letter-spacing", type=float, default=defaults.letter_spacing)
    parser.add_argument("--debug", action="store_true", default=False, help="Verbose logging on stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        return 1

    try:
        configuration = Configuration(
            is_colored=not args.no_colour,
            use_monospaced_font=not args.proportional,
            font_size=args.font_size,
            font_name=args.font,
            character_aspect_ratio=args.aspect,
            line_height=args.line_height,
            letter_spacing=args.letter_spacing,
        )
    except ValueError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        return 1

    if args.html:
        output = generate_html(image_path, args.precision, configuration)
    else:
        styled = generate(image_path, args.precision, configuration)
        if styled is None:
            output = None
        elif configuration.is_colored:
            output = styled.to_ansi()
        else:
            output = styled.text.rstrip("\n")

    if output is None:
        print(f"Could not convert {image_path}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
