"""
Text Signing Implementation

Supports:
- BLAKE3 keyed digest - shared-secret integrity tag (32 bytes)
- Ed25519 - asymmetric signature (64 bytes)

Inputs are read fully into memory before hashing or signing.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod
from typing import BinaryIO

import blake3
import structlog
from cryptography.exceptions import InvalidSignature

from core.b64 import urlsafe_decode, urlsafe_encode
from core.exceptions import MalformedSignatureError

from .formats import SignFormat
from .keys import DigestKey, SigningKeyPair, VerifyingKey

logger = structlog.get_logger()

DIGEST_SIZE = 32
ED25519_SIGNATURE_SIZE = 64


class TextSigner(ABC):
    """Abstract base class for text signers."""

    @property
    @abstractmethod
    def algorithm(self) -> SignFormat:
        """Get the signing format."""
        pass

    @abstractmethod
    def sign(self, reader: BinaryIO) -> bytes:
        """Sign the full contents of reader and return raw signature bytes."""
        pass

    def sign_b64(self, reader: BinaryIO) -> str:
        """Sign and return the URL-safe, unpadded base64 signature."""
        return urlsafe_encode(self.sign(reader))


class TextVerifier(ABC):
    """Abstract base class for text verifiers."""

    @property
    @abstractmethod
    def algorithm(self) -> SignFormat:
        """Get the signing format."""
        pass

    @abstractmethod
    def verify(self, reader: BinaryIO, signature: bytes) -> bool:
        """Return True if signature matches the full contents of reader."""
        pass

    def verify_b64(self, reader: BinaryIO, signature_b64: str) -> bool:
        """Verify a URL-safe base64 signature."""
        try:
            signature = urlsafe_decode(signature_b64)
        except ValueError as e:
            raise MalformedSignatureError(f"Failed to decode signature: {e}") from e
        return self.verify(reader, signature)


class Blake3Signer(TextSigner, TextVerifier):
    """Keyed BLAKE3 digest; the same key signs and verifies."""

    def __init__(self, key: DigestKey):
        self._key = key

    @property
    def algorithm(self) -> SignFormat:
        return SignFormat.BLAKE3

    def _digest(self, data: bytes) -> bytes:
        return blake3.blake3(data, key=self._key.key).digest(DIGEST_SIZE)

    def sign(self, reader: BinaryIO) -> bytes:
        return self._digest(reader.read())

    def verify(self, reader: BinaryIO, signature: bytes) -> bool:
        expected = self._digest(reader.read())
        # compare_digest is False for differing lengths too
        valid = hmac.compare_digest(expected, bytes(signature))
        if not valid:
            logger.info("verification_failed", algorithm=self.algorithm.value)
        return valid


class Ed25519Signer(TextSigner):
    """Ed25519 signer using the cryptography library."""

    def __init__(self, keypair: SigningKeyPair):
        self._private_key = keypair.to_private_key()
        self._key_id = hashlib.sha256(keypair.public_key).hexdigest()[:16]

    @property
    def algorithm(self) -> SignFormat:
        return SignFormat.ED25519

    @property
    def key_id(self) -> str:
        return self._key_id

    def sign(self, reader: BinaryIO) -> bytes:
        signature = self._private_key.sign(reader.read())
        logger.debug("text_signed", algorithm=self.algorithm.value, key_id=self._key_id)
        return signature


class Ed25519Verifier(TextVerifier):
    """Ed25519 verifier holding only the public key."""

    def __init__(self, key: VerifyingKey):
        self._public_key = key.to_public_key()
        self._key_id = hashlib.sha256(key.public_key).hexdigest()[:16]

    @property
    def algorithm(self) -> SignFormat:
        return SignFormat.ED25519

    @property
    def key_id(self) -> str:
        return self._key_id

    def verify(self, reader: BinaryIO, signature: bytes) -> bool:
        if len(signature) != ED25519_SIGNATURE_SIZE:
            raise MalformedSignatureError(
                f"Ed25519 signature must be {ED25519_SIGNATURE_SIZE} bytes, got {len(signature)}"
            )
        data = reader.read()
        try:
            self._public_key.verify(bytes(signature), data)
            return True
        except InvalidSignature:
            logger.info("verification_failed", algorithm=self.algorithm.value, key_id=self._key_id)
            return False
