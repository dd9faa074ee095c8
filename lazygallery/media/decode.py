"""Default media-decoding collaborator: data URLs and video frames on demand."""

from __future__ import annotations

import asyncio
import base64
import os

from ..errors import MediaLoadFailure
from .kinds import HEIC_EXTENSIONS, PDF_EXTENSIONS, extension_of

MAX_DATA_URL_SIZE = 8 * 1024 * 1024
MAX_AUDIO_DATA_URL_SIZE = 32 * 1024 * 1024
FALLBACK_MIME_TYPE = "application/octet-stream"

DISPLAY_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    "ico": "image/x-icon",
    "svg": "image/svg+xml",
    "mp4": "video/mp4",
    "m4v": "video/mp4",
    "mov": "video/quicktime",
    "webm": "video/webm",
    "mkv": "video/x-matroska",
    "avi": "video/x-msvideo",
    "wmv": "video/x-ms-wmv",
}

AUDIO_MIME_TYPES = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
    "aac": "audio/aac",
    "flac": "audio/flac",
    "wma": "audio/x-ms-wma",
    "opus": "audio/opus",
    "webm": "audio/webm",
}


def _encode_data_url(mime: str, payload: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def _read_bounded(path: str, max_bytes: int, too_large_message: str) -> bytes:
    try:
        if os.path.isdir(path):
            raise MediaLoadFailure(path, "Path is a directory.")
        size = os.path.getsize(path)
        if size > max_bytes:
            raise MediaLoadFailure(path, too_large_message)
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as exc:
        raise MediaLoadFailure(path, str(exc)) from exc


def read_file_as_data_url(path: str) -> str:
    """Return a ``data:`` URL for an image or video file (at most 8 MiB).

    HEIC/HEIF and PDF are refused: they are never displayed inline.
    """
    ext = extension_of(path)
    if ext in HEIC_EXTENSIONS:
        raise MediaLoadFailure(path, "HEIC/HEIF is not supported")
    if ext in PDF_EXTENSIONS:
        raise MediaLoadFailure(path, "PDF cannot be displayed")
    payload = _read_bounded(path, MAX_DATA_URL_SIZE, "File too large for preview")
    return _encode_data_url(DISPLAY_MIME_TYPES.get(ext, FALLBACK_MIME_TYPE), payload)


def read_file_as_audio_url(path: str) -> str:
    """Return a playable ``data:`` URL for an audio file (at most 32 MiB)."""
    payload = _read_bounded(path, MAX_AUDIO_DATA_URL_SIZE, "File too large for playback (max 32MB).")
    return _encode_data_url(AUDIO_MIME_TYPES.get(extension_of(path), FALLBACK_MIME_TYPE), payload)


class FileMediaDecoder:
    """``MediaDecoder`` reading local files; ``ffmpeg`` extracts video frames."""

    def __init__(self, ffmpeg: str = "ffmpeg", thumbnail_offset_seconds: int = 1) -> None:
        self.ffmpeg = ffmpeg
        self.thumbnail_offset_seconds = thumbnail_offset_seconds

    async def read_file_as_data_url(self, path: str) -> str:
        return await asyncio.to_thread(read_file_as_data_url, path)

    async def read_file_as_audio_url(self, path: str) -> str:
        return await asyncio.to_thread(read_file_as_audio_url, path)

    async def video_thumbnail_data_url(self, path: str) -> str:
        """Extract one PNG frame (skipping the black intro) as a ``data:`` URL."""
        if not os.path.isfile(path):
            raise MediaLoadFailure(path, "File not found.")
        try:
            process = await asyncio.create_subprocess_exec(
                self.ffmpeg,
                "-y",
                "-loglevel",
                "error",
                "-ss",
                str(self.thumbnail_offset_seconds),
                "-i",
                path,
                "-vframes",
                "1",
                "-f",
                "image2",
                "-vcodec",
                "png",
                "pipe:1",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise MediaLoadFailure(path, "ffmpeg not found. Install ffmpeg and add it to PATH.") from exc
        except OSError as exc:
            raise MediaLoadFailure(path, str(exc)) from exc

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise MediaLoadFailure(path, f"ffmpeg failed: {detail}")
        if not stdout:
            raise MediaLoadFailure(path, "No frame produced.")
        return _encode_data_url("image/png", stdout)


__all__ = [
    "MAX_DATA_URL_SIZE",
    "MAX_AUDIO_DATA_URL_SIZE",
    "DISPLAY_MIME_TYPES",
    "AUDIO_MIME_TYPES",
    "read_file_as_data_url",
    "read_file_as_audio_url",
    "FileMediaDecoder",
]
