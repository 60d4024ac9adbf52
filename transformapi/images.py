"""
Image helpers: base64 / data-URL encoding and upload validation.
"""

import base64
import io

from PIL import Image

# Pillow format name -> MIME type for the formats the models accept
PIL_MIME_TYPES: dict[str, str] = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
}


def encode_image_b64(image_bytes: bytes) -> str:
    """Encode raw image bytes to a base64 string."""
    return base64.b64encode(image_bytes).decode("utf-8")


def decode_image_b64(data: str) -> bytes:
    """Decode a base64 string back to raw image bytes."""
    return base64.b64decode(data)


def to_data_url(image_bytes: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{encode_image_b64(image_bytes)}"


def extension_for(mime_type: str) -> str:
    """File extension for a MIME type, e.g. image/png -> png. Defaults to png."""
    if "/" not in mime_type:
        return "png"
    subtype = mime_type.split("/", 1)[1].split(";", 1)[0]
    return subtype or "png"


def sniff_mime_type(image_bytes: bytes) -> str:
    """Open the bytes with Pillow and return the image's MIME type.

    Raises ValueError if the bytes are not a readable image.
    """
    # verify() consumes the object, so the format is read first
    try:
        img = Image.open(io.BytesIO(image_bytes))
        fmt = img.format
        img.verify()
    except Exception as e:
        raise ValueError("Uploaded file is not a valid image.") from e

    return PIL_MIME_TYPES.get(fmt or "", Image.MIME.get(fmt or "", "image/png"))
