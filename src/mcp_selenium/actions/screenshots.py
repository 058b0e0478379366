"""Screenshot capture and storage."""

import asyncio
import base64
from pathlib import Path

from ..errors import ActionFailed, ScreenshotWriteError


async def capture_png(handle) -> bytes:
    try:
        return await asyncio.to_thread(handle.screenshot)
    except Exception as e:
        raise ActionFailed("take_screenshot", e) from e


async def save_png(png_bytes: bytes, output_path: str) -> str:
    """Write the image to output_path (parent directories must exist)."""
    path = Path(output_path).expanduser()
    try:
        await asyncio.to_thread(path.write_bytes, png_bytes)
    except OSError as e:
        raise ScreenshotWriteError(str(path), e) from e
    return str(path)


def encode_png(png_bytes: bytes) -> str:
    return base64.b64encode(png_bytes).decode("utf-8")


__all__ = ["capture_png", "save_png", "encode_png"]
