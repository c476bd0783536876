"""
Pytest Configuration and Fixtures
"""

import os
import sys
import pytest
import structlog

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

# Set test environment
os.environ["API_KEY"] = "test-key-12345"
os.environ.pop("TEXTSEAL_STRICT_INPUT", None)

from sealing.keys import KeyKind, KeyStore  # noqa: E402


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def key_dir(tmp_path):
    """Directory holding key files for a test."""
    directory = tmp_path / "keys"
    directory.mkdir()
    return directory


@pytest.fixture
def blake3_key_file(key_dir):
    """Digest key of 32 bytes of 0x01."""
    path = key_dir / "blake3.txt"
    path.write_bytes(b"\x01" * 32)
    return path


@pytest.fixture
def ed25519_key_files(key_dir):
    """Freshly generated Ed25519 keypair as (private_path, public_path)."""
    private_key, public_key = KeyStore().generate(KeyKind.SIGNING)
    sk = key_dir / "ed25519.sk"
    pk = key_dir / "ed25519.pk"
    sk.write_bytes(private_key)
    pk.write_bytes(public_key)
    return sk, pk


@pytest.fixture
def aead_key_file(key_dir):
    """Random 32-byte ChaCha20-Poly1305 key."""
    path = key_dir / "chacha.key"
    path.write_bytes(os.urandom(32))
    return path


@pytest.fixture
def message_file(tmp_path):
    """A file containing a short message."""
    path = tmp_path / "message.txt"
    path.write_bytes(b"hello textseal\n")
    return path
