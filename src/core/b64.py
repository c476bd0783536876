"""
Base64 Encoding Helpers

The URL-safe form is unpadded everywhere in textseal: signatures and
envelopes are printed, pasted and used in filenames.
"""

import base64
import binascii
from enum import Enum

from .exceptions import UnknownAlgorithmError
from .reader import read_all


class Base64Format(Enum):
    """Supported base64 alphabets."""
    STANDARD = "standard"
    URLSAFE = "urlsafe"

    @classmethod
    def parse(cls, token: str) -> "Base64Format":
        try:
            return cls(token.lower())
        except ValueError:
            raise UnknownAlgorithmError(token, [f.value for f in cls]) from None


def urlsafe_encode(data: bytes) -> str:
    """Encode with the URL-safe alphabet and strip padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def urlsafe_decode(text: str) -> bytes:
    """
    Decode unpadded URL-safe base64. Surrounding whitespace is ignored.

    Raises:
        ValueError: text contains characters outside the URL-safe alphabet
            (including '+', '/' and '=' padding) or has an impossible length
    """
    text = text.strip()
    if any(c in "+/=" for c in text):
        raise ValueError("Invalid URL-safe base64: '+', '/' and '=' are not allowed")
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid URL-safe base64: {e}") from e


def encode_input(locator: str, fmt: Base64Format, allow_literal: bool = True) -> str:
    """Base64-encode the bytes behind an input locator."""
    data = read_all(locator, allow_literal=allow_literal)
    if fmt == Base64Format.URLSAFE:
        return urlsafe_encode(data)
    return base64.b64encode(data).decode("ascii")


def decode_input(locator: str, fmt: Base64Format, allow_literal: bool = True) -> bytes:
    """Decode base64 text behind an input locator; surrounding whitespace is ignored."""
    text = read_all(locator, allow_literal=allow_literal).decode("utf-8", errors="replace").strip()
    if fmt == Base64Format.URLSAFE:
        return urlsafe_decode(text)
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64: {e}") from e
