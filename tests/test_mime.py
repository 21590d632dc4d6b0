"""Tests for MIME type detection."""

import pytest

from picmeta.services import mime
from picmeta.services.mime import DEFAULT_MIME_TYPE, detect_mime_type


@pytest.fixture
def no_file_command(monkeypatch):
    """Pretend the ``file`` binary is not installed."""
    monkeypatch.setattr(mime.shutil, "which", lambda name: None)


class TestDetectMimeType:
    """Tests for detect_mime_type."""

    def test_extension_lookup(self, tmp_path):
        path = tmp_path / "photo.png"
        path.write_bytes(b"not really a png")

        assert detect_mime_type(str(path)) == "image/png"

    def test_png_signature_without_extension(self, tmp_path, no_file_command):
        path = tmp_path / "upload"
        path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)

        assert detect_mime_type(str(path)) == "image/png"

    def test_webp_signature_without_extension(self, tmp_path, no_file_command):
        path = tmp_path / "upload"
        path.write_bytes(b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 16)

        assert detect_mime_type(str(path)) == "image/webp"

    def test_image_header_inspection(self, tmp_path, no_file_command, monkeypatch):
        """Pillow identifies images the earlier steps miss."""
        from PIL import Image

        path = tmp_path / "upload"
        Image.new("RGB", (4, 4), color="red").save(path, format="PNG")
        monkeypatch.setattr(
            mime,
            "_DETECTORS",
            tuple(entry for entry in mime._DETECTORS if entry[0] != "signature"),
        )

        assert detect_mime_type(str(path)) == "image/png"

    def test_default_when_everything_fails(self, tmp_path, no_file_command):
        path = tmp_path / "upload"
        path.write_bytes(b"\x01\x02\x03 garbage")

        assert detect_mime_type(str(path)) == DEFAULT_MIME_TYPE

    def test_missing_file_falls_back_to_extension(self, tmp_path, no_file_command):
        """Unreadable files still get a type from the name."""
        assert detect_mime_type(str(tmp_path / "missing.jpeg")) == "image/jpeg"
