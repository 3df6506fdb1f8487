#!/usr/bin/env python3
"""
Simple Example: One Card, PNG and PDF

This is the simplest way to compose an ID card programmatically.
"""

import io
from pathlib import Path

from PIL import Image

from idcard import CardEngine

# Build a stand-in photo (use Path("photo.jpg").read_bytes() for a real one)
photo = Image.new("RGB", (800, 600))
pixels = photo.load()
for y in range(600):
    for x in range(800):
        pixels[x, y] = (int(x / 800 * 200), int(y / 600 * 150), 180)
buffer = io.BytesIO()
photo.save(buffer, format="PNG")

with CardEngine(device_pixel_ratio=2) as engine:
    engine.set_card_fields(
        name="Alexandra Constantinopoulos",
        event_title="Open Source Summit",
        header_color="#111827",
    )
    engine.load_image(buffer.getvalue())

    # Zoom in and drag the crop window a quarter of the preview to the left
    engine.set_zoom(1.6)
    engine.begin_drag(80, 80)
    engine.drag_to(40, 80)
    engine.end_drag()

    out = Path("cards")
    print(f"✓ PNG saved to: {engine.export_raster().save(out)}")

    document = engine.export_document()
    print(f"{'!' if document.degraded else '✓'} {'PNG fallback' if document.degraded else 'PDF'} saved to: {document.save(out)}")
