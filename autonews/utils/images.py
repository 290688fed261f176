"""
Image decoding for autonews.
"""
import io

from PIL import Image, UnidentifiedImageError

from autonews.utils.exceptions import DecodeError


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw image bytes into a displayable PIL image.

    The pixel data is loaded eagerly so the returned image does not keep a
    reference to the source buffer.

    Args:
        data: Raw bytes from an image response

    Returns:
        The decoded image

    Raises:
        DecodeError: If the bytes are empty or not a supported image format
    """
    if not data:
        raise DecodeError("Empty image data")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Unable to decode image: {e}") from e
    return image
