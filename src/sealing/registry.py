"""
Algorithm Registry

Maps each format identifier to its key kinds and engine factories. This is
the only place a new algorithm is wired in: add a format member, an engine,
and an entry here.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .cipher import ChaCha20Cipher, TextCipher
from .formats import EncryptFormat, SignFormat
from .keys import KeyKind, KeyMaterial, KeyStore
from .signer import Blake3Signer, Ed25519Signer, Ed25519Verifier, TextSigner, TextVerifier

Locator = Union[str, Path]


@dataclass(frozen=True)
class SignAlgorithm:
    """Registry entry for a signing format."""
    format: SignFormat
    signing_key: KeyKind
    verifying_key: KeyKind
    signer_factory: Callable[[KeyMaterial], TextSigner]
    verifier_factory: Callable[[KeyMaterial], TextVerifier]
    key_files: tuple  # file names for generated keys, in generate() order


@dataclass(frozen=True)
class CipherAlgorithm:
    """Registry entry for an authenticated encryption format."""
    format: EncryptFormat
    key_kind: KeyKind
    cipher_factory: Callable[..., TextCipher]


SIGN_ALGORITHMS: Dict[SignFormat, SignAlgorithm] = {
    SignFormat.BLAKE3: SignAlgorithm(
        format=SignFormat.BLAKE3,
        signing_key=KeyKind.DIGEST,
        verifying_key=KeyKind.DIGEST,
        signer_factory=Blake3Signer,
        verifier_factory=Blake3Signer,
        key_files=("blake3.txt",),
    ),
    SignFormat.ED25519: SignAlgorithm(
        format=SignFormat.ED25519,
        signing_key=KeyKind.SIGNING,
        verifying_key=KeyKind.VERIFYING,
        signer_factory=Ed25519Signer,
        verifier_factory=Ed25519Verifier,
        key_files=("ed25519.sk", "ed25519.pk"),
    ),
}

CIPHER_ALGORITHMS: Dict[EncryptFormat, CipherAlgorithm] = {
    EncryptFormat.CHACHA20POLY1305: CipherAlgorithm(
        format=EncryptFormat.CHACHA20POLY1305,
        key_kind=KeyKind.AEAD,
        cipher_factory=ChaCha20Cipher,
    ),
}


def _as_sign_format(fmt: Union[str, SignFormat]) -> SignFormat:
    return fmt if isinstance(fmt, SignFormat) else SignFormat.parse(fmt)


def _as_encrypt_format(fmt: Union[str, EncryptFormat]) -> EncryptFormat:
    return fmt if isinstance(fmt, EncryptFormat) else EncryptFormat.parse(fmt)


def get_sign_algorithm(fmt: Union[str, SignFormat]) -> SignAlgorithm:
    """Resolve a signing format token or member to its registry entry."""
    return SIGN_ALGORITHMS[_as_sign_format(fmt)]


def get_cipher_algorithm(fmt: Union[str, EncryptFormat]) -> CipherAlgorithm:
    """Resolve an encryption format token or member to its registry entry."""
    return CIPHER_ALGORITHMS[_as_encrypt_format(fmt)]


def load_signer(
    fmt: Union[str, SignFormat],
    key: Locator,
    key_store: Optional[KeyStore] = None,
) -> TextSigner:
    """
    Build a signer for a format from a key file.

    The format is parsed before the key file is opened.
    """
    algorithm = get_sign_algorithm(fmt)
    key_store = key_store or KeyStore()
    return algorithm.signer_factory(key_store.load(key, algorithm.signing_key))


def load_verifier(
    fmt: Union[str, SignFormat],
    key: Locator,
    key_store: Optional[KeyStore] = None,
) -> TextVerifier:
    """Build a verifier for a format from a key file."""
    algorithm = get_sign_algorithm(fmt)
    key_store = key_store or KeyStore()
    return algorithm.verifier_factory(key_store.load(key, algorithm.verifying_key))


def load_cipher(
    fmt: Union[str, EncryptFormat],
    key: Locator,
    key_store: Optional[KeyStore] = None,
    random_source: Optional[Callable[[int], bytes]] = None,
) -> TextCipher:
    """
    Build a cipher for a format from a key file.

    Nonces come from random_source, or from the key store's source if omitted.
    """
    algorithm = get_cipher_algorithm(fmt)
    key_store = key_store or KeyStore()
    return algorithm.cipher_factory(
        key_store.load(key, algorithm.key_kind),
        random_source=random_source or key_store.random_source,
    )


def available_formats() -> Dict[str, List[str]]:
    """List supported format tokens per family."""
    return {
        "sign": [f.value for f in SIGN_ALGORITHMS],
        "encrypt": [f.value for f in CIPHER_ALGORITHMS],
    }
