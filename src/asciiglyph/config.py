import dataclasses
import math
from dataclasses import dataclass

MIN_WIDTH = 10
MAX_WIDTH = 200


@dataclass(frozen=True)
class Configuration:
    is_colored: bool = True
    use_monospaced_font: bool = True
    font_size: float = 6.0
    font_name: str = "Menlo"
    character_aspect_ratio: float = 1.0
    line_height: float = 6.0
    letter_spacing: float = 2.5

    def __post_init__(self):
        ratio = self.character_aspect_ratio
        if not math.isfinite(ratio) or ratio <= 0:
            raise ValueError(f"character_aspect_ratio must be positive and finite, got {ratio!r}")
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size!r}")

    def replace(self, **changes) -> "Configuration":
        return dataclasses.replace(self, **changes)
