"""Image acquisition.

Decodes still images from disk into fully loaded RGBA Pillow images, ready
to be turned into pixel buffers. Animated inputs contribute their first frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from sierra_stencil.core.pixels import EmptyBuffer

SUPPORTED_SUFFIXES = {
    ".png": "png",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".gif": "gif",
    ".bmp": "bmp",
    ".webp": "webp",
    ".tif": "tiff",
    ".tiff": "tiff",
}


@dataclass
class SourceImage:
    """A decoded input image."""

    image: Image.Image  # RGBA PIL image
    path: Path
    format: str

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


def detect_format(path: Path) -> str:
    """Detect image format from file extension."""
    suffix = path.suffix.lower()
    if suffix in SUPPORTED_SUFFIXES:
        return SUPPORTED_SUFFIXES[suffix]
    raise ValueError(f"Unsupported format: {suffix}")


def open_image(path: str | Path) -> SourceImage:
    """Open and fully decode an image file.

    Raises:
        FileNotFoundError: if the path does not exist.
        ValueError: for unsupported extensions.
        EmptyBuffer: if the image has no pixels.
        OSError: if Pillow cannot decode the file.
    """
    local_path = Path(path)
    if not local_path.exists():
        raise FileNotFoundError(f"File not found: {local_path}")

    fmt = detect_format(local_path)
    with Image.open(local_path) as img:
        img.seek(0)
        # convert() forces a full decode
        rgba = img.convert("RGBA")

    if rgba.width == 0 or rgba.height == 0:
        raise EmptyBuffer(f"Image has no dimensions: {local_path}")

    return SourceImage(image=rgba, path=local_path, format=fmt)
