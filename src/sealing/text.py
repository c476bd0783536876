"""
Text Operations

The operations front ends call. Each takes an input locator (see
core.reader), a key file, and a format token, and runs in this order:
format → key → input → engine. A bad format token is therefore reported
before any file is opened.
"""

from pathlib import Path
from typing import List, Optional, Union

import structlog

from core.reader import read_input

from .formats import EncryptFormat, SignFormat
from .keys import KeyStore
from .registry import get_sign_algorithm, load_cipher, load_signer, load_verifier

logger = structlog.get_logger()


def sign(
    input: str,
    key: Union[str, Path],
    fmt: Union[str, SignFormat] = SignFormat.BLAKE3,
    allow_literal: bool = True,
    key_store: Optional[KeyStore] = None,
) -> bytes:
    """Sign the input and return raw signature bytes."""
    signer = load_signer(fmt, key, key_store)
    with read_input(input, allow_literal=allow_literal) as reader:
        signature = signer.sign(reader)
    logger.info("text_signed", algorithm=signer.algorithm.value, size=len(signature))
    return signature


def verify(
    input: str,
    key: Union[str, Path],
    signature: str,
    fmt: Union[str, SignFormat] = SignFormat.BLAKE3,
    allow_literal: bool = True,
    key_store: Optional[KeyStore] = None,
) -> bool:
    """
    Verify a URL-safe base64 signature over the input.

    Returns False for a well-formed signature that does not match; raises
    MalformedSignatureError for one that cannot be decoded or has an
    impossible length.
    """
    verifier = load_verifier(fmt, key, key_store)
    with read_input(input, allow_literal=allow_literal) as reader:
        valid = verifier.verify_b64(reader, signature)
    logger.info("text_verified", algorithm=verifier.algorithm.value, valid=valid)
    return valid


def generate_keys(
    fmt: Union[str, SignFormat] = SignFormat.BLAKE3,
    key_store: Optional[KeyStore] = None,
) -> List[bytes]:
    """Generate raw key buffers for a signing format: [secret] or [private, public]."""
    algorithm = get_sign_algorithm(fmt)
    key_store = key_store or KeyStore()
    return key_store.generate(algorithm.signing_key)


def write_keys(
    fmt: Union[str, SignFormat],
    output_dir: Union[str, Path],
    keys: List[bytes],
    key_store: Optional[KeyStore] = None,
) -> List[Path]:
    """Write generated keys under their conventional file names."""
    algorithm = get_sign_algorithm(fmt)
    key_store = key_store or KeyStore()
    return key_store.write(output_dir, list(algorithm.key_files), keys)


def encrypt(
    input: str,
    key: Union[str, Path],
    fmt: Union[str, EncryptFormat] = EncryptFormat.CHACHA20POLY1305,
    allow_literal: bool = True,
    key_store: Optional[KeyStore] = None,
) -> bytes:
    """Encrypt the input and return the text envelope as ASCII bytes."""
    cipher = load_cipher(fmt, key, key_store)
    with read_input(input, allow_literal=allow_literal) as reader:
        envelope = cipher.encrypt(reader)
    logger.info("text_encrypted", algorithm=cipher.algorithm.value)
    return envelope


def decrypt(
    input: str,
    key: Union[str, Path],
    fmt: Union[str, EncryptFormat] = EncryptFormat.CHACHA20POLY1305,
    allow_literal: bool = True,
    key_store: Optional[KeyStore] = None,
) -> bytes:
    """Decrypt a text envelope read from the input and return the plaintext."""
    cipher = load_cipher(fmt, key, key_store)
    with read_input(input, allow_literal=allow_literal) as reader:
        plaintext = cipher.decrypt(reader)
    logger.info("text_decrypted", algorithm=cipher.algorithm.value)
    return plaintext
