"""
Authenticated Text Encryption

ChaCha20-Poly1305 with a fresh 96-bit nonce per call. The ciphertext and
nonce travel together in a text envelope:

    urlsafe_b64_nopad( {"encrypt_data": [..bytes..], "nonce": [..12 bytes..]} )

The JSON record stores bytes as integer arrays, one element per byte.
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated, BinaryIO, Callable, List, Optional

import structlog
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.b64 import urlsafe_decode, urlsafe_encode
from core.exceptions import AuthenticationFailedError, MalformedEnvelopeError

from .formats import EncryptFormat
from .keys import AeadKey, RandomSource

logger = structlog.get_logger()

NONCE_SIZE = 12

ByteValue = Annotated[int, Field(ge=0, le=255)]


class EnvelopeRecord(BaseModel):
    """Structured record inside the text envelope."""
    model_config = ConfigDict(frozen=True, strict=True)

    encrypt_data: List[ByteValue]
    nonce: List[ByteValue]

    @field_validator("nonce")
    @classmethod
    def _nonce_length(cls, value: List[int]) -> List[int]:
        if len(value) != NONCE_SIZE:
            raise ValueError(f"nonce must be {NONCE_SIZE} bytes, got {len(value)}")
        return value


@dataclass(frozen=True)
class Envelope:
    """Ciphertext (with tag) and the nonce it was sealed under."""
    ciphertext: bytes
    nonce: bytes

    def __post_init__(self):
        if len(self.nonce) != NONCE_SIZE:
            raise MalformedEnvelopeError(
                f"Envelope nonce must be {NONCE_SIZE} bytes, got {len(self.nonce)}"
            )

    def to_text(self) -> str:
        record = EnvelopeRecord(encrypt_data=list(self.ciphertext), nonce=list(self.nonce))
        return urlsafe_encode(record.model_dump_json().encode("utf-8"))

    @classmethod
    def from_text(cls, text: str) -> "Envelope":
        """
        Parse an envelope from its text form.

        Raises:
            MalformedEnvelopeError: bad base64, bad record, or wrong nonce length
        """
        try:
            raw = urlsafe_decode(text)
        except ValueError as e:
            raise MalformedEnvelopeError(f"Envelope is not valid base64: {e}") from e
        try:
            record = EnvelopeRecord.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedEnvelopeError(
                f"Envelope record is malformed: {e.error_count()} error(s)"
            ) from e
        return cls(ciphertext=bytes(record.encrypt_data), nonce=bytes(record.nonce))


class TextCipher(ABC):
    """Abstract base class for text ciphers."""

    @property
    @abstractmethod
    def algorithm(self) -> EncryptFormat:
        pass

    @abstractmethod
    def encrypt(self, reader: BinaryIO) -> bytes:
        """Encrypt the full contents of reader; returns envelope text as bytes."""
        pass

    @abstractmethod
    def decrypt(self, reader: BinaryIO) -> bytes:
        """Decrypt envelope text read from reader; returns plaintext."""
        pass


class ChaCha20Cipher(TextCipher):
    """ChaCha20-Poly1305 text cipher."""

    def __init__(self, key: AeadKey, random_source: Optional[RandomSource] = None):
        self._aead = ChaCha20Poly1305(key.key)
        self._random_source: Callable[[int], bytes] = random_source or secrets.token_bytes

    @property
    def algorithm(self) -> EncryptFormat:
        return EncryptFormat.CHACHA20POLY1305

    def seal(self, plaintext: bytes) -> Envelope:
        nonce = self._random_source(NONCE_SIZE)
        ciphertext = self._aead.encrypt(nonce, plaintext, None)
        return Envelope(ciphertext=ciphertext, nonce=nonce)

    def unseal(self, envelope: Envelope) -> bytes:
        try:
            return self._aead.decrypt(envelope.nonce, envelope.ciphertext, None)
        except InvalidTag:
            logger.warning("decryption_failed", algorithm=self.algorithm.value)
            raise AuthenticationFailedError(
                "Ciphertext failed authentication (tampered data or wrong key)"
            ) from None

    def encrypt(self, reader: BinaryIO) -> bytes:
        envelope = self.seal(reader.read())
        return envelope.to_text().encode("ascii")

    def decrypt(self, reader: BinaryIO) -> bytes:
        try:
            text = reader.read().decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedEnvelopeError(f"Envelope is not UTF-8 text: {e.reason}") from e
        return self.unseal(Envelope.from_text(text.strip()))
