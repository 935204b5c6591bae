import functools
import logging
import subprocess
from dataclasses import dataclass

from PIL import ImageFont

from asciiglyph.config import Configuration
from asciiglyph.errors import FontResolutionFailure

log = logging.getLogger(__name__)

SYSTEM_MONOSPACED = "monospace"
SYSTEM_FONT = "sans-serif"
FC_MATCH_TIMEOUT = 5.0  # seconds


@dataclass(frozen=True)
class FontDescriptor:
    family: str
    size: float
    path: str | None = None  # font file, when one could be located
    monospaced: bool = True


def _find_system_font(pattern: str) -> str | None:
    """Ask fontconfig which file provides a generic family."""
    try:
        result = subprocess.run(
            ["fc-match", "-f", "%{file}", pattern], capture_output=True, text=True, timeout=FC_MATCH_TIMEOUT
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return None


def _load_named_font(name: str, size: float) -> str:
    """Locate an installed font by file or family name. Returns its path."""
    try:
        font = ImageFont.truetype(name, size)
    except (OSError, ValueError) as e:
        raise FontResolutionFailure(f"Font not available: {name}") from e
    return font.path


@functools.lru_cache(maxsize=32)
def _resolve(name: str, size: float, monospaced: bool) -> FontDescriptor:
    if not monospaced:
        return FontDescriptor(SYSTEM_FONT, size, _find_system_font(SYSTEM_FONT), monospaced=False)
    try:
        return FontDescriptor(name, size, _load_named_font(name, size))
    except FontResolutionFailure as e:
        log.debug("%s, using %s", e, SYSTEM_MONOSPACED)
    return FontDescriptor(SYSTEM_MONOSPACED, size, _find_system_font(SYSTEM_MONOSPACED))


def resolve_font(configuration: Configuration) -> FontDescriptor:
    """Font for styled output: the named monospaced font, else a system fallback."""
    return _resolve(configuration.font_name, configuration.font_size, configuration.use_monospaced_font)
