"""
Tests for Algorithm Identifiers and the Registry
"""

import pytest

from core.exceptions import UnknownAlgorithmError
from sealing.cipher import ChaCha20Cipher
from sealing.formats import EncryptFormat, SignFormat, parse_format
from sealing.keys import KeyKind
from sealing.registry import (
    CIPHER_ALGORITHMS,
    SIGN_ALGORITHMS,
    available_formats,
    get_cipher_algorithm,
    get_sign_algorithm,
    load_cipher,
    load_signer,
    load_verifier,
)
from sealing.signer import Blake3Signer, Ed25519Signer, Ed25519Verifier


class TestFormatParsing:
    """Test format tokens."""

    @pytest.mark.parametrize("token", ["blake3", "Blake3", "BLAKE3", " blake3 "])
    def test_case_insensitive(self, token):
        assert SignFormat.parse(token) == SignFormat.BLAKE3

    def test_ed25519(self):
        assert SignFormat.parse("Ed25519") == SignFormat.ED25519

    def test_encrypt_token(self):
        assert EncryptFormat.parse("ChaCha20Poly1305") == EncryptFormat.CHACHA20POLY1305

    def test_unknown_lists_valid_tokens(self):
        """The error names the token and every valid one."""
        with pytest.raises(UnknownAlgorithmError) as excinfo:
            SignFormat.parse("sha1")
        message = str(excinfo.value)
        assert "sha1" in message
        assert "blake3" in message
        assert "ed25519" in message

    def test_unknown_is_value_error(self):
        """Callers catching ValueError also see unknown formats."""
        with pytest.raises(ValueError):
            EncryptFormat.parse("aes-gcm")

    def test_families_are_separate(self):
        """A signing token is not an encryption format."""
        with pytest.raises(UnknownAlgorithmError):
            EncryptFormat.parse("blake3")

    def test_parse_any_family(self):
        assert parse_format("ED25519") == SignFormat.ED25519
        assert parse_format("chacha20poly1305") == EncryptFormat.CHACHA20POLY1305

    def test_parse_any_family_unknown(self):
        with pytest.raises(UnknownAlgorithmError) as excinfo:
            parse_format("rot13")
        assert "chacha20poly1305" in str(excinfo.value)

    def test_str_is_token(self):
        assert str(SignFormat.ED25519) == "ed25519"


class TestRegistry:
    """Test registry entries and loaders."""

    def test_every_format_registered(self):
        assert set(SIGN_ALGORITHMS) == set(SignFormat)
        assert set(CIPHER_ALGORITHMS) == set(EncryptFormat)

    def test_key_kinds(self):
        blake3 = get_sign_algorithm("blake3")
        assert blake3.signing_key == blake3.verifying_key == KeyKind.DIGEST
        ed25519 = get_sign_algorithm(SignFormat.ED25519)
        assert ed25519.signing_key == KeyKind.SIGNING
        assert ed25519.verifying_key == KeyKind.VERIFYING
        assert get_cipher_algorithm("chacha20poly1305").key_kind == KeyKind.AEAD

    def test_key_file_names(self):
        assert get_sign_algorithm("blake3").key_files == ("blake3.txt",)
        assert get_sign_algorithm("ed25519").key_files == ("ed25519.sk", "ed25519.pk")

    def test_available_formats(self):
        assert available_formats() == {
            "sign": ["blake3", "ed25519"],
            "encrypt": ["chacha20poly1305"],
        }

    def test_load_blake3(self, blake3_key_file):
        assert isinstance(load_signer("blake3", blake3_key_file), Blake3Signer)
        assert isinstance(load_verifier("blake3", blake3_key_file), Blake3Signer)

    def test_load_ed25519(self, ed25519_key_files):
        sk, pk = ed25519_key_files
        assert isinstance(load_signer("ed25519", sk), Ed25519Signer)
        assert isinstance(load_verifier("ed25519", pk), Ed25519Verifier)

    def test_load_cipher(self, aead_key_file):
        assert isinstance(load_cipher("chacha20poly1305", aead_key_file), ChaCha20Cipher)

    def test_unknown_format_before_key(self, tmp_path):
        """An unknown format is reported even when the key file is missing."""
        missing = tmp_path / "never-opened.key"
        with pytest.raises(UnknownAlgorithmError):
            load_signer("sha1", missing)
        with pytest.raises(UnknownAlgorithmError):
            load_cipher("aes", missing)
