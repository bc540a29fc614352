"""
Image payload helpers.

업로드 이미지는 raw bytes 또는 data URI(base64) 형태로 들어옵니다.
"""
import base64
import os
import re
from typing import Union

_DATA_URI_PREFIX = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,")

_EXT_MIME = {
    ".png": "image/png",
    ".webp": "image/webp",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


def clean_base64(b64: str) -> str:
    """Strip a `data:image/...;base64,` prefix if present."""
    return _DATA_URI_PREFIX.sub("", b64)


def decode_image_payload(payload: Union[str, bytes]) -> bytes:
    """Raw bytes pass through; base64 strings (with or without data URI prefix) are decoded."""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    return base64.b64decode(clean_base64(payload))


def guess_mime_type(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    return _EXT_MIME.get(ext, "image/jpeg")


def to_data_uri(data: Union[str, bytes], mime_type: str = "image/png") -> str:
    """Inline image data from the backend → `data:<mime>;base64,...`."""
    if isinstance(data, (bytes, bytearray)):
        data = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{mime_type};base64,{data}"


def data_uri_to_bytes(uri: str) -> bytes:
    """Inverse of to_data_uri, used when saving results to disk."""
    _, _, payload = uri.partition(";base64,")
    return base64.b64decode(payload)
