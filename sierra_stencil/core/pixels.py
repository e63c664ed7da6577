"""RGBA pixel buffers and input validation.

A PixelBuffer is the hand-off format between image acquisition and the
dithering engine: width x height pixels, 4 bytes each (R, G, B, A), row-major.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

CHANNELS = 4


class StencilError(ValueError):
    """Base class for rejected dithering input."""


class InvalidDimensions(StencilError):
    """Width/height are not usable or don't match the data length."""


class EmptyBuffer(StencilError):
    """Zero-sized input. Rejected rather than treated as a no-op."""


@dataclass
class PixelBuffer:
    """A mutable RGBA buffer owned by the caller."""

    width: int
    height: int
    data: bytearray

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelBuffer:
        rgba = img if img.mode == "RGBA" else img.convert("RGBA")
        return cls(width=rgba.width, height=rgba.height, data=bytearray(rgba.tobytes()))

    def validate(self) -> None:
        """Raise if this buffer can't be dithered.

        Raises:
            InvalidDimensions: non-integer or negative dimensions, or a data
                length other than width * height * 4.
            EmptyBuffer: a zero width, zero height or empty data.
        """
        for name, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidDimensions(f"{name} must be positive, got {value}")

        if self.width == 0 or self.height == 0 or len(self.data) == 0:
            raise EmptyBuffer(
                f"Empty buffer: {self.width}x{self.height}, {len(self.data)} bytes"
            )

        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise InvalidDimensions(
                f"Buffer length {len(self.data)} does not match "
                f"{self.width}x{self.height}x{CHANNELS} = {expected}"
            )

    def view(self) -> np.ndarray:
        """Writable (height, width, 4) uint8 view onto ``data``."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        )

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))
