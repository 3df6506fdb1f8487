"""Google Fonts download cache for card text."""

import logging
import re
from pathlib import Path
from typing import Optional

import requests

logger = logging.getLogger(__name__)

CACHE_DIR = Path.home() / ".cache" / "idcard" / "fonts"

CSS_API_URL = "https://fonts.googleapis.com/css"

# The CSS API picks the font format from the User-Agent; a bare client gets TrueType
USER_AGENT = "idcard-font-fetcher"

_TTF_SRC_PATTERN = re.compile(r"src:\s*url\((https://[^)]+\.ttf)\)")
_TTF_ANY_PATTERN = re.compile(r"(https://[^\s'\"]+\.ttf)")


def cached_font_path(family: str, weight: int, cache_dir: Path | None = None) -> Path:
    """
    Location of a cached font file, e.g. ~/.cache/idcard/fonts/Inter-700.ttf.

    Args:
        family: Font family name.
        weight: Font weight (100-900).
        cache_dir: Override for the cache directory.

    Returns:
        Path (which may not exist yet).
    """
    return (cache_dir or CACHE_DIR) / f"{family.replace(' ', '')}-{weight}.ttf"


def get_google_font(family: str, weight: int = 400, cache_dir: Path | None = None) -> Optional[Path]:
    """
    Return a cached TTF for a Google Fonts family, downloading it on first use.

    Args:
        family: Font family name (e.g., "Inter").
        weight: Font weight (400 regular, 600 semibold, 700 bold).
        cache_dir: Override for the cache directory.

    Returns:
        Path to the TTF file, or None if it could not be downloaded.
    """
    path = cached_font_path(family, weight, cache_dir)
    if path.exists():
        logger.debug(f"Using cached Google Font: {path.name}")
        return path

    logger.info(f"Downloading Google Font: {family} (weight {weight})")
    try:
        with requests.Session() as session:
            session.headers["User-Agent"] = USER_AGENT
            css = session.get(
                CSS_API_URL,
                params={"family": f"{family}:{weight}", "display": "swap"},
                timeout=10,
            )
            css.raise_for_status()

            font_url = _extract_font_url_from_css(css.text)
            if not font_url:
                logger.error(f"No TrueType source in Google Fonts CSS for {family}")
                return None

            font = session.get(font_url, timeout=30)
            font.raise_for_status()

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(font.content)
    except requests.RequestException as e:
        logger.error(f"Failed to download Google Font {family} (weight {weight}): {e}")
        return None
    except OSError as e:
        logger.error(f"Failed to cache Google Font {family} at {path}: {e}")
        return None

    logger.info(f"Cached Google Font: {path}")
    return path


def _extract_font_url_from_css(css_content: str) -> Optional[str]:
    """
    Find the TTF URL in an @font-face rule.

    Args:
        css_content: CSS returned by the Google Fonts API.

    Returns:
        Font file URL, or None if the CSS has no TTF source.
    """
    match = _TTF_SRC_PATTERN.search(css_content) or _TTF_ANY_PATTERN.search(css_content)
    return match.group(1) if match else None
