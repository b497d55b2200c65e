"""
Signature Module

Decodes the receiver signature captured for cash disbursements.
The client sends the drawn canvas as a data URL
(``data:image/png;base64,...``) or as bare base64.
"""

import base64
import binascii
import re
from dataclasses import dataclass

from ..exceptions import SignatureError

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"

_DATA_URL = re.compile(r"^data:(?P<mime>image/[a-z+.-]+);base64,(?P<data>.*)$", re.DOTALL)


@dataclass
class SignatureImage:
    """Decoded signature image."""

    mime_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _sniff_mime(content: bytes) -> str | None:
    if content.startswith(PNG_MAGIC):
        return "image/png"
    if content.startswith(JPEG_MAGIC):
        return "image/jpeg"
    return None


def decode_signature(value: str | None, max_bytes: int = 512000) -> SignatureImage:
    """Decode and check a signature image.

    Args:
        value: Data URL or bare base64 string
        max_bytes: Largest accepted decoded size

    Returns:
        SignatureImage

    Raises:
        SignatureError: If the value is empty, not base64, not a PNG/JPEG
            image or larger than max_bytes
    """
    if not value or not value.strip():
        raise SignatureError("Digital signature is MANDATORY for cash payments.")

    payload = value.strip()
    declared_mime = None
    match = _DATA_URL.match(payload)
    if match:
        declared_mime = match.group("mime")
        payload = match.group("data")
    elif payload.startswith("data:"):
        raise SignatureError("Signature must be a base64-encoded image")

    try:
        content = base64.b64decode(re.sub(r"\s+", "", payload), validate=True)
    except (binascii.Error, ValueError) as e:
        raise SignatureError("Signature is not valid base64") from e

    mime_type = _sniff_mime(content)
    if mime_type is None:
        raise SignatureError("Signature must be a PNG or JPEG image")
    if declared_mime and declared_mime != mime_type:
        raise SignatureError(f"Signature declared as {declared_mime} but contains {mime_type}")
    if len(content) > max_bytes:
        raise SignatureError(f"Signature image exceeds {max_bytes} bytes")

    return SignatureImage(mime_type=mime_type, content=content)
