"""
Image processing utilities for the Screenshot Service.

This module turns raw screenshot bytes into the PNG data URI returned to the
feedback UI, optionally shrinking oversized captures.
"""

import base64
import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from errors import CaptureFailedError

DATA_URI_PREFIX = "data:image/png;base64,"


@dataclass
class EncodedImage:
    data_uri: str
    size_bytes: int
    width: int
    height: int


def encode_png_data_uri(screenshot_bytes: bytes, max_dimension: int = 0) -> EncodedImage:
    """
    Encode a PNG screenshot as a base64 data URI.

    The bytes are decoded with Pillow first so a truncated or corrupt capture
    fails here instead of reaching the client.

    Args:
        screenshot_bytes: PNG bytes from page.screenshot()
        max_dimension: Maximum width/height in pixels (0 keeps the original size)

    Returns:
        EncodedImage with the data URI, encoded size and pixel dimensions

    Raises:
        CaptureFailedError: If the bytes are empty or not a decodable image
    """
    if not screenshot_bytes:
        raise CaptureFailedError("Browser returned an empty screenshot", stage="capture")

    try:
        image = Image.open(io.BytesIO(screenshot_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise CaptureFailedError(f"Screenshot is not a valid image: {str(e)}", stage="capture") from e

    width, height = image.size

    if max_dimension and (width > max_dimension or height > max_dimension):
        # Calculate new dimensions maintaining aspect ratio
        if width > height:
            new_width = max_dimension
            new_height = max(1, int(height * (max_dimension / width)))
        else:
            new_height = max_dimension
            new_width = max(1, int(width * (max_dimension / height)))

        image = image.resize((new_width, new_height), Image.Resampling.LANCZOS)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG", optimize=True)
        screenshot_bytes = buffer.getvalue()
        width, height = new_width, new_height

    encoded = base64.b64encode(screenshot_bytes).decode("utf-8")
    return EncodedImage(
        data_uri=DATA_URI_PREFIX + encoded,
        size_bytes=len(screenshot_bytes),
        width=width,
        height=height,
    )
