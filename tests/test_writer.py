"""Tests for stencil encoding."""

import base64
import io

import pytest
from PIL import Image

from sierra_stencil.core.writer import encode_image, save_stencil, to_data_url


def _stencil(width=8, height=4):
    img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    img.putpixel((0, 0), (0, 0, 0, 255))
    return img


class TestDataUrl:
    def test_png_prefix(self):
        url = to_data_url(_stencil())
        assert url.startswith("data:image/png;base64,")

    def test_decodes_back_to_same_pixels(self):
        url = to_data_url(_stencil())
        payload = base64.b64decode(url.split(",", 1)[1])
        img = Image.open(io.BytesIO(payload))
        assert img.format == "PNG"
        assert img.mode == "RGBA"
        assert img.getpixel((0, 0)) == (0, 0, 0, 255)
        assert img.getpixel((1, 0)) == (0, 0, 0, 0)

    def test_webp(self):
        assert to_data_url(_stencil(), "webp").startswith("data:image/webp;base64,")

    def test_jpeg_rejected(self):
        with pytest.raises(ValueError, match="Unsupported output format"):
            to_data_url(_stencil(), "jpeg")


class TestSaveStencil:
    def test_save_png(self, tmp_path):
        output = tmp_path / "card_dithered.png"
        save_stencil(_stencil(), output)

        assert output.exists()
        img = Image.open(str(output))
        assert img.format == "PNG"
        assert img.size == (8, 4)

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported output format"):
            save_stencil(_stencil(), tmp_path / "card.jpg")
        assert not (tmp_path / "card.jpg").exists()

    def test_encode_image_bytes(self):
        data = encode_image(_stencil(), ".png")
        assert data[:8] == b"\x89PNG\r\n\x1a\n"
