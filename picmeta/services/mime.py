"""MIME type detection for image files sent to vision models."""

import logging
import mimetypes
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional, Tuple

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

EXTENSION_TO_MIME = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    "ico": "image/x-icon",
}

# (offset, signature, mime type)
_SIGNATURES: Tuple[Tuple[int, bytes, str], ...] = (
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (8, b"WEBP", "image/webp"),
    (0, b"BM", "image/bmp"),
    (0, b"II*\x00", "image/tiff"),
    (0, b"MM\x00*", "image/tiff"),
    (0, b"\x00\x00\x01\x00", "image/x-icon"),
)


def _from_extension(path: Path) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type


def _from_signature(path: Path) -> Optional[str]:
    with path.open("rb") as f:
        head = f.read(16)
    for offset, signature, mime_type in _SIGNATURES:
        if head[offset : offset + len(signature)] == signature:
            if mime_type == "image/webp" and not head.startswith(b"RIFF"):
                continue
            return mime_type
    return None


def _from_file_command(path: Path) -> Optional[str]:
    file_cmd = shutil.which("file")
    if not file_cmd:
        return None
    result = subprocess.run(
        [file_cmd, "--brief", "--mime-type", str(path)],
        capture_output=True,
        text=True,
        timeout=5,
        check=False,
    )
    mime_type = result.stdout.strip()
    if result.returncode != 0 or not mime_type or mime_type == "application/octet-stream":
        return None
    return mime_type


def _from_image_header(path: Path) -> Optional[str]:
    with Image.open(path) as img:
        return img.get_format_mimetype()


def _from_extension_table(path: Path) -> Optional[str]:
    return EXTENSION_TO_MIME.get(path.suffix.lower().lstrip("."))


_DETECTORS: Tuple[Tuple[str, Callable[[Path], Optional[str]]], ...] = (
    ("extension lookup", _from_extension),
    ("signature", _from_signature),
    ("file command", _from_file_command),
    ("image header", _from_image_header),
    ("extension table", _from_extension_table),
)


def detect_mime_type(file_path: str) -> str:
    """Detect the MIME type of an image file.

    Tries, in order: extension lookup, magic-byte signature, the ``file``
    command, Pillow header inspection and a static extension table. The
    first non-empty result wins.

    Args:
        file_path: Path to the image file.

    Returns:
        MIME type, ``image/jpeg`` if every method fails.
    """
    path = Path(file_path)
    for name, detector in _DETECTORS:
        try:
            mime_type = detector(path)
        except (OSError, ValueError, UnidentifiedImageError, subprocess.SubprocessError) as e:
            logger.debug(f"[MIME] {name} failed for {path.name}: {e}")
            continue
        if mime_type:
            logger.debug(f"[MIME] {name} detected: {mime_type}")
            return mime_type

    logger.warning(f"[MIME] Could not detect MIME type for {path.name}, using {DEFAULT_MIME_TYPE}")
    return DEFAULT_MIME_TYPE
