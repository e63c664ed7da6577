"""Encode stencils as data URLs or image files.

Only formats that keep an alpha channel are accepted, since the stencil is
carried entirely in alpha.
"""

from __future__ import annotations

import base64
import io
from pathlib import Path

from PIL import Image

# Output suffix -> Pillow format name
ALPHA_FORMATS = {
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
}


def _pillow_format(fmt: str) -> str:
    key = fmt.lower().lstrip(".")
    if key not in ALPHA_FORMATS:
        raise ValueError(f"Unsupported output format: {fmt}")
    return ALPHA_FORMATS[key]


def encode_image(image: Image.Image, fmt: str = "png") -> bytes:
    """Encode an RGBA image to bytes in the given format."""
    pil_fmt = _pillow_format(fmt)
    out = io.BytesIO()
    if pil_fmt == "WEBP":
        image.save(out, format=pil_fmt, lossless=True)
    else:
        image.save(out, format=pil_fmt)
    return out.getvalue()


def to_data_url(image: Image.Image, fmt: str = "png") -> str:
    """Return ``data:image/<fmt>;base64,...`` for the encoded image."""
    payload = base64.b64encode(encode_image(image, fmt)).decode("ascii")
    mime = _pillow_format(fmt).lower()
    return f"data:image/{mime};base64,{payload}"


def save_stencil(image: Image.Image, output_path: Path) -> None:
    """Save a stencil in the format determined by the output file extension."""
    data = encode_image(image, output_path.suffix)
    output_path.write_bytes(data)
