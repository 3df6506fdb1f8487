"""Card state, styling configuration, loading and validation."""

import re
import tomllib
from pathlib import Path

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from idcard.types import Color, RGBColor

PREVIEW_SCALE_MIN = 0.5
PREVIEW_SCALE_MAX = 1.2

DEFAULT_EXPORT_STEM = "id-card"


def parse_color(value: Color) -> RGBColor:
    """
    Parse a color string into an RGB tuple.

    Args:
        value: Color string ("#2563eb", "#fff", "rgb(1,2,3)", "white", ...).

    Returns:
        Tuple of (r, g, b) in 0-255 range.

    Raises:
        ValueError: If Pillow cannot parse the color.
    """
    rgb = ImageColor.getrgb(value)
    return (rgb[0], rgb[1], rgb[2])


class CardState(BaseModel):
    """
    User-editable card fields.

    Assignments are validated, so `state.header_color = "nope"` raises.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = ""
    """Participant name. Empty falls back to CardStyle.default_name when drawn."""

    event_title: str = ""
    """Event title shown in the header band. Empty falls back to CardStyle.default_event_title."""

    header_color: Color = "#2563eb"
    """Header band fill color."""

    card_background: Color = "#ffffff"
    """Card background fill color."""

    preview_scale: float = Field(default=1.0, ge=PREVIEW_SCALE_MIN, le=PREVIEW_SCALE_MAX)
    """On-screen preview scale. Does not affect the rendered buffer."""

    @field_validator("header_color", "card_background")
    @classmethod
    def _validate_color(cls, value: str) -> str:
        try:
            parse_color(value)
        except ValueError as e:
            raise ValueError(f"Invalid color {value!r}: {e}") from e
        return value


class CardStyle(BaseModel):
    """
    Non-geometric styling: default strings, text colors and fonts.

    Geometry is fixed (see idcard.utils.dimensions); everything here may be
    overridden from the [style] table of a config file.
    """

    # ========================================================================
    # Default strings
    # ========================================================================
    default_event_title: str = "Event Name"
    default_name: str = "Participant Name"
    caption: str = "Role: Guest"
    footer: str = "Generated by Eventrra"

    # ========================================================================
    # Colors
    # ========================================================================
    header_text_color: Color = "#ffffff"
    name_color: Color = "#0f172a"
    caption_color: Color = "#374151"
    footer_color: Color = "#6b7280"
    border_color: Color = "#e6e9ef"
    placeholder_color: Color = "#f3f4f6"

    # ========================================================================
    # Fonts
    # ========================================================================
    font_path: Path | None = None
    """Regular-weight TTF/OTF file. Overrides Google Fonts and the bundled default."""

    semibold_font_path: Path | None = None
    """Semibold TTF/OTF file (caption). Falls back to font_path."""

    bold_font_path: Path | None = None
    """Bold TTF/OTF file (header title, name). Falls back to font_path."""

    google_font: str | None = None
    """Google Fonts family (e.g. "Inter"). Auto-downloaded and cached."""

    @field_validator(
        "header_text_color",
        "name_color",
        "caption_color",
        "footer_color",
        "border_color",
        "placeholder_color",
    )
    @classmethod
    def _validate_color(cls, value: str) -> str:
        try:
            parse_color(value)
        except ValueError as e:
            raise ValueError(f"Invalid color {value!r}: {e}") from e
        return value


class Config(BaseModel):
    """Root configuration: initial card fields and styling."""

    card: CardState = Field(default_factory=CardState)
    style: CardStyle = Field(default_factory=CardStyle)


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, looks for idcard.toml in the
            current directory and returns defaults when it is absent.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / "idcard.toml"
        if not config_path.exists():
            return Config()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            config_dict = tomllib.load(f)
        return Config(**config_dict)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path}: {e}") from e
    except ValidationError as e:
        raise ValueError(f"Invalid config in {config_path}: {e}") from e


def export_filename(name: str, extension: str) -> str:
    """
    Build the download filename for an exported card.

    Whitespace runs become underscores; an empty name falls back to "id-card".

    Args:
        name: Participant name.
        extension: File extension without the dot ("png", "pdf").

    Returns:
        Filename such as "Ada_Lovelace.png".
    """
    stem = re.sub(r"\s+", "_", name or DEFAULT_EXPORT_STEM)
    return f"{stem}.{extension}"
