"""Tests for RGBA pixel buffers."""

import numpy as np
import pytest
from PIL import Image

from sierra_stencil.core.pixels import (
    EmptyBuffer,
    InvalidDimensions,
    PixelBuffer,
    StencilError,
)


class TestValidate:
    def test_valid_buffer(self):
        PixelBuffer(width=3, height=2, data=bytearray(24)).validate()

    def test_zero_height_is_empty(self):
        with pytest.raises(EmptyBuffer):
            PixelBuffer(width=4, height=0, data=bytearray()).validate()

    def test_negative_width(self):
        with pytest.raises(InvalidDimensions, match="width must be positive"):
            PixelBuffer(width=-2, height=2, data=bytearray(16)).validate()

    def test_non_integer_width(self):
        with pytest.raises(InvalidDimensions, match="integer"):
            PixelBuffer(width=2.0, height=2, data=bytearray(16)).validate()

    def test_length_too_long(self):
        with pytest.raises(InvalidDimensions, match="20"):
            PixelBuffer(width=2, height=2, data=bytearray(20)).validate()

    def test_hierarchy(self):
        assert issubclass(EmptyBuffer, StencilError)
        assert issubclass(InvalidDimensions, StencilError)
        assert issubclass(StencilError, ValueError)


class TestImageBridge:
    def test_from_rgb_image(self):
        img = Image.new("RGB", (5, 3), (10, 20, 30))
        buf = PixelBuffer.from_image(img)
        assert (buf.width, buf.height) == (5, 3)
        assert len(buf.data) == 5 * 3 * 4
        assert tuple(buf.data[:4]) == (10, 20, 30, 255)

    def test_round_trip_image(self):
        img = Image.new("RGBA", (4, 4), (1, 2, 3, 4))
        out = PixelBuffer.from_image(img).to_image()
        assert out.mode == "RGBA"
        assert out.size == (4, 4)
        assert out.getpixel((3, 3)) == (1, 2, 3, 4)

    def test_view_is_writable(self):
        buf = PixelBuffer(width=2, height=2, data=bytearray(16))
        view = buf.view()
        assert view.shape == (2, 2, 4)
        view[1, 0, 3] = 255
        # row 1, column 0 -> pixel index 2 -> alpha byte 11
        assert buf.data[11] == 255

    def test_view_row_major(self):
        data = bytearray(np.arange(24, dtype=np.uint8).tobytes())
        buf = PixelBuffer(width=3, height=2, data=data)
        assert list(buf.view()[0, 1]) == [4, 5, 6, 7]
        assert list(buf.view()[1, 0]) == [12, 13, 14, 15]
