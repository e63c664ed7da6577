"""Sierra error diffusion dithering to a black/transparent stencil."""

from __future__ import annotations

import numpy as np

from sierra_stencil.core.pixels import PixelBuffer

# Luminance below this (0-255 scale) becomes opaque black.
THRESHOLD = 60.0

KERNEL_DIVISOR = 32

# (row offset, column offset, weight numerator over KERNEL_DIVISOR)
SIERRA_KERNEL: tuple[tuple[int, int, int], ...] = (
    (0, 2, 5),
    (0, 3, 3),
    (1, -2, 2),
    (1, -1, 4),
    (1, 0, 5),
    (1, 1, 4),
    (1, 2, 2),
    (2, -1, 2),
    (2, 0, 3),
    (2, 1, 2),
)

BLACK = 0
WHITE = 255


def to_luminance(buffer: PixelBuffer) -> np.ndarray:
    """Convert an RGBA buffer to a (height, width) float32 luminance array.

    Uses 0.299 R + 0.587 G + 0.114 B; alpha is ignored.
    """
    rgba = buffer.view().astype(np.float64)
    gray = 0.299 * rgba[..., 0] + 0.587 * rgba[..., 1] + 0.114 * rgba[..., 2]
    return gray.astype(np.float32)


def classify(old: float, threshold: float = THRESHOLD) -> int:
    """Quantize a luminance value to BLACK (strictly below threshold) or WHITE."""
    return BLACK if old < threshold else WHITE


def diffuse_error(gray: np.ndarray, x: int, y: int, error: float) -> None:
    """Spread ``error`` from (x, y) onto later pixels of ``gray`` in place.

    Contributions that would land outside the array are dropped, so near the
    right and bottom edges less than the full error is passed on.
    """
    h, w = gray.shape
    for dy, dx, weight in SIERRA_KERNEL:
        ty = y + dy
        tx = x + dx
        if 0 <= tx < w and ty < h:
            gray[ty, tx] += error * weight / KERNEL_DIVISOR


class SierraDither:
    """Binarize RGBA buffers into alpha stencils.

    Every output pixel has R = G = B = 0; alpha is 255 where the diffused
    luminance fell below the threshold and 0 elsewhere.

    Running the engine on its own output is not expected to reproduce that
    output: the stencil's color channels are all zero, so every pixel of a
    re-dithered stencil comes out black.
    """

    def __init__(self, threshold: float = THRESHOLD) -> None:
        self.threshold = threshold

    def process(self, buffer: PixelBuffer) -> PixelBuffer:
        """Dither ``buffer`` in place and return it.

        Raises:
            InvalidDimensions, EmptyBuffer: before any pixel is touched.
        """
        buffer.validate()
        if not isinstance(buffer.data, bytearray):
            buffer.data = bytearray(buffer.data)

        gray = to_luminance(buffer)
        black = self.scan(gray)

        out = buffer.view()
        out[..., :3] = 0
        out[..., 3] = np.where(black, 255, 0)
        return buffer

    def scan(self, gray: np.ndarray) -> np.ndarray:
        """Run the row-major diffusion pass over ``gray``.

        ``gray`` is modified as error accumulates. Returns a boolean mask,
        True where the pixel quantized to black.
        """
        h, w = gray.shape
        black = np.zeros((h, w), dtype=bool)

        for y in range(h):
            for x in range(w):
                old = float(gray[y, x])
                new = classify(old, self.threshold)
                black[y, x] = new == BLACK
                diffuse_error(gray, x, y, old - new)

        return black


def dither_image_buffer(buffer: PixelBuffer, threshold: float = THRESHOLD) -> PixelBuffer:
    """Convenience wrapper around ``SierraDither(threshold).process``."""
    return SierraDither(threshold).process(buffer)
