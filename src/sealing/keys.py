"""
Key Material and Key Store

Loads raw key bytes from files, adapts them into the fixed-size material each
algorithm needs, and generates fresh keys. Key objects are immutable and
live only as long as the operation that loaded them; nothing is cached.
"""

import random
import secrets
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

import structlog
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from nacl.bindings import crypto_core_ed25519_is_valid_point

from core.exceptions import MalformedKeyError, SourceReadError, UnsupportedOperationError
from core.genpass import generate_password

logger = structlog.get_logger()

KEY_SIZE = 32

RandomSource = Callable[[int], bytes]


class KeyKind(Enum):
    """Shapes of key material."""
    DIGEST = "digest"
    SIGNING = "signing"
    VERIFYING = "verifying"
    AEAD = "aead"


def _truncate(data: bytes, kind: KeyKind, strict: bool) -> bytes:
    if len(data) < KEY_SIZE:
        raise MalformedKeyError(
            f"{kind.value} key needs {KEY_SIZE} bytes, got {len(data)}"
        )
    if strict and len(data) != KEY_SIZE:
        raise MalformedKeyError(
            f"{kind.value} key must be exactly {KEY_SIZE} bytes, got {len(data)}"
        )
    return bytes(data[:KEY_SIZE])


def _require_exact(data: bytes, kind: KeyKind) -> bytes:
    if len(data) != KEY_SIZE:
        raise MalformedKeyError(
            f"{kind.value} key must be exactly {KEY_SIZE} bytes, got {len(data)}"
        )
    return bytes(data)


@dataclass(frozen=True)
class DigestKey:
    """32-byte secret for keyed hashing."""
    key: bytes

    def __post_init__(self):
        _require_exact(self.key, KeyKind.DIGEST)

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> "DigestKey":
        # Longer buffers are cut to the first 32 bytes unless strict
        return cls(_truncate(data, KeyKind.DIGEST, strict))

    def __repr__(self) -> str:
        return "DigestKey(<redacted>)"


@dataclass(frozen=True)
class AeadKey:
    """32-byte secret for authenticated encryption."""
    key: bytes

    def __post_init__(self):
        _require_exact(self.key, KeyKind.AEAD)

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> "AeadKey":
        return cls(_truncate(data, KeyKind.AEAD, strict))

    def __repr__(self) -> str:
        return "AeadKey(<redacted>)"


@dataclass(frozen=True)
class VerifyingKey:
    """Ed25519 public key, held alone for verification."""
    public_key: bytes

    def __post_init__(self):
        _require_exact(self.public_key, KeyKind.VERIFYING)
        # cryptography does not decompress the point until verify
        if not crypto_core_ed25519_is_valid_point(bytes(self.public_key)):
            raise MalformedKeyError("Invalid Ed25519 public key: not a valid curve point")

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = True) -> "VerifyingKey":
        return cls(bytes(data))

    def to_public_key(self) -> ed25519.Ed25519PublicKey:
        return ed25519.Ed25519PublicKey.from_public_bytes(self.public_key)


@dataclass(frozen=True)
class SigningKeyPair:
    """Ed25519 private key with its derived public half."""
    private_key: bytes
    public_key: bytes

    def __post_init__(self):
        _require_exact(self.private_key, KeyKind.SIGNING)
        _require_exact(self.public_key, KeyKind.VERIFYING)

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = True) -> "SigningKeyPair":
        private_bytes = _require_exact(data, KeyKind.SIGNING)
        try:
            private_key = ed25519.Ed25519PrivateKey.from_private_bytes(private_bytes)
        except ValueError as e:
            raise MalformedKeyError(f"Invalid Ed25519 private key: {e}") from e
        public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return cls(private_key=private_bytes, public_key=public_bytes)

    @classmethod
    def generate(cls, random_source: RandomSource) -> "SigningKeyPair":
        """Derive a keypair from 32 fresh bytes of the given random source."""
        return cls.from_bytes(random_source(KEY_SIZE))

    @property
    def verifying_key(self) -> VerifyingKey:
        return VerifyingKey(self.public_key)

    def to_private_key(self) -> ed25519.Ed25519PrivateKey:
        return ed25519.Ed25519PrivateKey.from_private_bytes(self.private_key)

    def __repr__(self) -> str:
        return f"SigningKeyPair(public_key={self.public_key.hex()}, private_key=<redacted>)"


KeyMaterial = Union[DigestKey, SigningKeyPair, VerifyingKey, AeadKey]

_ADAPTERS = {
    KeyKind.DIGEST: DigestKey.from_bytes,
    KeyKind.SIGNING: SigningKeyPair.from_bytes,
    KeyKind.VERIFYING: VerifyingKey.from_bytes,
    KeyKind.AEAD: AeadKey.from_bytes,
}


class KeyStore:
    """
    Loads and generates key material.

    Randomness is injected so tests can substitute deterministic sources:
    - random_source(n) -> n bytes, used for Ed25519 keypairs
    - rng, a random.Random used by the password generator for digest keys
    """

    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        rng: Optional[random.Random] = None,
    ):
        self._random_source = random_source or secrets.token_bytes
        self._rng = rng or secrets.SystemRandom()

    @property
    def random_source(self) -> RandomSource:
        return self._random_source

    def read(self, locator: Union[str, Path]) -> bytes:
        """Read all bytes of a key file."""
        path = Path(locator)
        try:
            return path.read_bytes()
        except OSError as e:
            raise SourceReadError(str(locator), e.strerror or str(e)) from e

    def load(self, locator: Union[str, Path], kind: KeyKind, strict: bool = False) -> KeyMaterial:
        """
        Load key material of the given kind from a file.

        Raises:
            SourceReadError: the key file cannot be read
            MalformedKeyError: the bytes do not fit the key kind
        """
        data = self.read(locator)
        material = _ADAPTERS[kind](data, strict=strict)
        logger.debug("key_loaded", kind=kind.value, size=len(data))
        return material

    def generate(self, kind: KeyKind) -> List[bytes]:
        """
        Generate fresh raw key buffers.

        Returns [secret] for digest keys and [private, public] for signing
        keys. Other kinds are loaded from files only.
        """
        if kind == KeyKind.DIGEST:
            password = generate_password(KEY_SIZE, rng=self._rng)
            logger.info("key_generated", kind=kind.value)
            return [password.encode("ascii")]

        if kind == KeyKind.SIGNING:
            keypair = SigningKeyPair.generate(self._random_source)
            logger.info("key_generated", kind=kind.value, public_key=keypair.public_key.hex()[:16])
            return [keypair.private_key, keypair.public_key]

        raise UnsupportedOperationError(f"Key generation is not supported for {kind.value} keys")

    def write(self, output_dir: Union[str, Path], names: List[str], keys: List[bytes]) -> List[Path]:
        """Write raw key buffers into an existing directory, one file per name."""
        directory = Path(output_dir)
        if not directory.is_dir():
            raise FileNotFoundError(f"Output directory does not exist: {directory}")
        if len(names) != len(keys):
            raise ValueError(f"Expected {len(names)} keys, got {len(keys)}")

        written = []
        for name, key in zip(names, keys):
            path = directory / name
            path.write_bytes(key)
            written.append(path)
        logger.info("keys_written", directory=str(directory), files=names)
        return written
