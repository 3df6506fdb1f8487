"""CLI interface for the ID card engine."""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from idcard import __version__
from idcard.config import load_config
from idcard.crop import ZOOM_MAX, ZOOM_MIN
from idcard.engine import CardEngine
from idcard.interaction import DEFAULT_PREVIEW_SIZE


def _parse_center(value: str) -> tuple[float, float]:
    """
    Parse "x,y" into a center fraction pair.

    Raises:
        click.BadParameter: If the value is not two numbers in [0, 1].
    """
    parts = value.split(",")
    if len(parts) != 2:
        raise click.BadParameter(f"Expected 'x,y', got '{value}'")
    try:
        cx, cy = float(parts[0].strip()), float(parts[1].strip())
    except ValueError as e:
        raise click.BadParameter(f"Invalid center '{value}': {e}") from e
    if not (0.0 <= cx <= 1.0 and 0.0 <= cy <= 1.0):
        raise click.BadParameter(f"Center values must be between 0 and 1, got '{value}'")
    return (cx, cy)


def _build_engine(
    config: Path | None,
    name: str | None,
    event: str | None,
    header_color: str | None,
    background: str | None,
    photo: Path | None,
    zoom: float | None,
    center: str | None,
    dpr: float,
    viewer=None,
) -> CardEngine:
    cfg = load_config(config)
    engine = CardEngine(card=cfg.card, style=cfg.style, device_pixel_ratio=dpr, viewer=viewer)
    engine.set_card_fields(
        name=name,
        event_title=event,
        header_color=header_color,
        card_background=background,
    )

    if photo is not None:
        if not engine.load_image(photo.read_bytes()):
            click.echo(f"Warning: could not decode {photo}, using placeholder avatar.", err=True)
        else:
            if center is not None:
                engine.set_crop(center=_parse_center(center))
            if zoom is not None:
                engine.set_zoom(zoom)

    return engine


def _card_options(func):
    """Options shared by commands that build a card."""
    options = [
        click.option(
            "--config",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="Path to a TOML config file. Defaults to ./idcard.toml when present.",
        ),
        click.option("--name", type=str, help="Participant name."),
        click.option("--event", type=str, help="Event title shown in the header."),
        click.option("--header-color", type=str, help="Header band color (e.g. '#2563eb')."),
        click.option("--background", type=str, help="Card background color (e.g. '#ffffff')."),
        click.option(
            "--photo",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="Photo for the avatar circle.",
        ),
        click.option(
            "--zoom",
            type=click.FloatRange(ZOOM_MIN, ZOOM_MAX),
            help=f"Photo zoom ({ZOOM_MIN:g}-{ZOOM_MAX:g}). Default: 1.2.",
        ),
        click.option(
            "--center",
            type=str,
            help="Crop center as 'x,y' fractions of the photo. Default: '0.5,0.5'.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Compose identity cards and export them as PNG or PDF."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@_card_options
@click.option(
    "--dpr",
    type=click.FloatRange(0.25, 8.0),
    default=1.0,
    show_default=True,
    help="Device pixel ratio of the PNG (the PDF page size does not change).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["png", "pdf", "both"], case_sensitive=False),
    default="both",
    show_default=True,
    help="Which files to export.",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for the exported files.",
)
@click.option(
    "--show-fallback",
    is_flag=True,
    help="Open the PNG in an image viewer if PDF export fails.",
)
def render(
    config: Path | None,
    name: str | None,
    event: str | None,
    header_color: str | None,
    background: str | None,
    photo: Path | None,
    zoom: float | None,
    center: str | None,
    dpr: float,
    output_format: str,
    output_dir: Path,
    show_fallback: bool,
) -> None:
    """Render a card and export it as PNG and/or PDF."""
    try:
        viewer = (lambda image: image.show()) if show_fallback else None
        with _build_engine(
            config, name, event, header_color, background, photo, zoom, center, dpr, viewer
        ) as engine:
            output_format = output_format.lower()

            if output_format in ("png", "both"):
                path = engine.export_raster().save(output_dir)
                click.echo(f"✓ PNG saved to: {path}")

            if output_format in ("pdf", "both"):
                exported = engine.export_document()
                path = exported.save(output_dir)
                if exported.degraded:
                    click.echo(f"Warning: PDF export failed, saved PNG instead: {path}", err=True)
                else:
                    click.echo(f"✓ PDF saved to: {path}")

    except click.BadParameter:
        raise
    except (FileNotFoundError, ValueError, ValidationError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command()
@_card_options
@click.option(
    "--size",
    type=click.IntRange(16, 2048),
    default=DEFAULT_PREVIEW_SIZE,
    show_default=True,
    help="Side of the square preview, in pixels.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("crop-preview.png"),
    show_default=True,
    help="Output PNG path.",
)
def preview(
    config: Path | None,
    name: str | None,
    event: str | None,
    header_color: str | None,
    background: str | None,
    photo: Path | None,
    zoom: float | None,
    center: str | None,
    size: int,
    output: Path,
) -> None:
    """Write the square pan/zoom crop preview of a photo."""
    try:
        with _build_engine(config, name, event, header_color, background, photo, zoom, center, 1.0) as engine:
            image = engine.crop_preview(size)
            output.parent.mkdir(parents=True, exist_ok=True)
            image.save(output, format="PNG")
            click.echo(f"✓ Crop preview saved to: {output}")

    except click.BadParameter:
        raise
    except (FileNotFoundError, ValueError, ValidationError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
