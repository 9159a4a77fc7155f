"""
Reversible text codec applied to payloads before storage.

Payloads are stored as standard, padded base64 of their UTF-8 bytes. The
encoded form is plain printable ASCII without line breaks, so it survives
line-oriented readers and catalog services unchanged.
"""
import base64
import binascii
import re

from .errors import DecodeError

_WHITESPACE = re.compile(r"\s+")


def encode(text: str) -> str:
    """Encode `text` into its base64 storage representation."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode(encoded: str) -> str:
    """
    Decode a value produced by `encode`.

    Line breaks and surrounding whitespace are ignored so content written with
    wrapped base64 or a trailing newline still decodes.

    Raises:
        DecodeError: if the value is not valid base64 or not UTF-8 text.
    """
    compact = _WHITESPACE.sub("", encoded)
    try:
        raw = base64.b64decode(compact, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid encoded payload: {e}") from e
