"""
Sealing Primitives for textseal

Supports:
- BLAKE3 keyed digest - shared-secret integrity tags
- Ed25519 - asymmetric signatures
- ChaCha20-Poly1305 - authenticated encryption with a text envelope
"""

from .formats import SignFormat, EncryptFormat, parse_format
from .keys import (
    KeyKind,
    KeyStore,
    DigestKey,
    SigningKeyPair,
    VerifyingKey,
    AeadKey,
)
from .signer import (
    TextSigner,
    TextVerifier,
    Blake3Signer,
    Ed25519Signer,
    Ed25519Verifier,
)
from .cipher import Envelope, TextCipher, ChaCha20Cipher
from .registry import (
    SIGN_ALGORITHMS,
    CIPHER_ALGORITHMS,
    load_signer,
    load_verifier,
    load_cipher,
    available_formats,
)

__all__ = [
    "SignFormat",
    "EncryptFormat",
    "parse_format",
    "KeyKind",
    "KeyStore",
    "DigestKey",
    "SigningKeyPair",
    "VerifyingKey",
    "AeadKey",
    "TextSigner",
    "TextVerifier",
    "Blake3Signer",
    "Ed25519Signer",
    "Ed25519Verifier",
    "Envelope",
    "TextCipher",
    "ChaCha20Cipher",
    "SIGN_ALGORITHMS",
    "CIPHER_ALGORITHMS",
    "load_signer",
    "load_verifier",
    "load_cipher",
    "available_formats",
]
