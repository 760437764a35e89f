"""Tests for image assets and their wire form."""

from __future__ import annotations

import base64

import pytest

from studio_genai.assets import ImageAsset, to_wire_asset


class TestImageAsset:
    def test_from_bytes_sniffs_png(self, png_bytes: bytes) -> None:
        asset = ImageAsset.from_bytes(png_bytes, label="subject")
        assert asset.mime_type == "image/png"
        assert asset.data == png_bytes
        assert asset.label == "subject"

    def test_from_bytes_rejects_non_image(self) -> None:
        with pytest.raises(ValueError, match="not a recognizable image"):
            ImageAsset.from_bytes(b"definitely not an image")

    def test_from_data_uri(self) -> None:
        payload = base64.b64encode(b"\x89PNG...").decode()
        asset = ImageAsset.from_data_uri(f"data:image/png;base64,{payload}")
        assert asset.mime_type == "image/png"
        assert asset.data == b"\x89PNG..."

    def test_from_data_uri_rejects_plain_url(self) -> None:
        with pytest.raises(ValueError):
            ImageAsset.from_data_uri("https://example.com/cat.png")

    def test_is_immutable(self, subject: ImageAsset) -> None:
        with pytest.raises(AttributeError):
            subject.mime_type = "image/jpeg"  # type: ignore[misc]


class TestToWireAsset:
    def test_inline_data_shape(self, subject: ImageAsset) -> None:
        assert to_wire_asset(subject) == {
            "inline_data": {"data": b"subject-bytes", "mime_type": "image/png"},
        }

    def test_missing_mime_type(self) -> None:
        with pytest.raises(ValueError):
            to_wire_asset(ImageAsset(data=b"x", mime_type=""))
