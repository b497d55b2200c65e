"""
Tests for cash signature decoding
"""

import base64

import pytest

from trh_finance.exceptions import SignatureError
from trh_finance.workflow import decode_signature

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


class TestDecodeSignature:
    """Tests for decode_signature."""

    def test_png_data_url(self, signature_png, signature_data_url):
        image = decode_signature(signature_data_url)

        assert image.mime_type == "image/png"
        assert image.content == signature_png
        assert image.size == len(signature_png)
        assert image.to_data_url() == signature_data_url

    def test_bare_base64_jpeg(self):
        image = decode_signature(base64.b64encode(JPEG_BYTES).decode("ascii"))

        assert image.mime_type == "image/jpeg"

    def test_line_breaks_are_ignored(self, signature_png):
        encoded = base64.b64encode(signature_png).decode("ascii")
        wrapped = "\n".join(encoded[i:i + 20] for i in range(0, len(encoded), 20))

        assert decode_signature(wrapped).content == signature_png

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value):
        with pytest.raises(SignatureError, match="MANDATORY"):
            decode_signature(value)

    def test_not_base64(self):
        with pytest.raises(SignatureError, match="base64"):
            decode_signature("data:image/png;base64,not*base64!")

    def test_not_an_image(self):
        encoded = base64.b64encode(b"hello world").decode("ascii")

        with pytest.raises(SignatureError, match="PNG or JPEG"):
            decode_signature(encoded)

    def test_declared_type_mismatch(self):
        encoded = base64.b64encode(JPEG_BYTES).decode("ascii")

        with pytest.raises(SignatureError, match="declared"):
            decode_signature(f"data:image/png;base64,{encoded}")

    def test_too_large(self, signature_data_url):
        with pytest.raises(SignatureError, match="exceeds"):
            decode_signature(signature_data_url, max_bytes=16)
