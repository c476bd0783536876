"""
textseal - Core Module

Shared plumbing for the sealing layer: input resolution, errors,
password generation, base64 helpers, configuration and logging.
"""

from .exceptions import (
    TextSealError,
    SourceReadError,
    MalformedKeyError,
    UnknownAlgorithmError,
    MalformedInputError,
    MalformedSignatureError,
    MalformedEnvelopeError,
    AuthenticationFailedError,
    UnsupportedOperationError,
)
from .reader import read_input, read_all
from .genpass import generate_password
from .b64 import Base64Format, urlsafe_encode, urlsafe_decode, encode_input, decode_input
from .config import Settings
from .log import configure_logging

__all__ = [
    "TextSealError",
    "SourceReadError",
    "MalformedKeyError",
    "UnknownAlgorithmError",
    "MalformedInputError",
    "MalformedSignatureError",
    "MalformedEnvelopeError",
    "AuthenticationFailedError",
    "UnsupportedOperationError",
    "read_input",
    "read_all",
    "generate_password",
    "Base64Format",
    "urlsafe_encode",
    "urlsafe_decode",
    "encode_input",
    "decode_input",
    "Settings",
    "configure_logging",
]
