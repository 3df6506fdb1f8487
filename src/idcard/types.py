"""Type aliases used across the idcard package."""

from typing import Callable, Literal, Tuple

# Color types
RGBColor = Tuple[int, int, int]  # RGB color in 0-255 range
Color = str  # Any color string Pillow's ImageColor understands ("#2563eb", "white", ...)

# Font weights available to the drawing surface
FontWeight = Literal["regular", "semibold", "bold"]

# Text width measurement: (text, font size in logical px) -> width in logical px
MeasureFunc = Callable[[str, float], float]
