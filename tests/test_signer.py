"""
Tests for Text Signing

Tests the BLAKE3 keyed digest and Ed25519 signatures.
"""

import io

import blake3
import pytest

from core.exceptions import MalformedSignatureError
from sealing.keys import DigestKey, SigningKeyPair, VerifyingKey
from sealing.formats import SignFormat
from sealing.signer import Blake3Signer, Ed25519Signer, Ed25519Verifier

RFC8032_SECRET = bytes.fromhex(
    "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
)
RFC8032_EMPTY_SIGNATURE = bytes.fromhex(
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555"
    "fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)
# BLAKE3 test_vectors.json, keyed_hash for input_len 0
BLAKE3_VECTOR_KEY = b"whats the Elvish word for friend"
BLAKE3_VECTOR_EMPTY_TAG = bytes.fromhex(
    "92b2b75604ed3c761f9d6f62392c8a9227ad0ea3f09573e783f1498a4ed60d26"
)


def stream(data: bytes) -> io.BytesIO:
    return io.BytesIO(data)


class TestBlake3Signer:
    """Test the keyed digest."""

    def setup_method(self):
        self.key = DigestKey(b"\x01" * 32)
        self.signer = Blake3Signer(self.key)

    def test_algorithm(self):
        assert self.signer.algorithm == SignFormat.BLAKE3

    def test_tag_is_32_bytes(self):
        assert len(self.signer.sign(stream(b"message"))) == 32

    def test_empty_input_is_deterministic(self):
        """The empty message has a fixed tag under a fixed key."""
        first = self.signer.sign(stream(b""))
        second = Blake3Signer(DigestKey(b"\x01" * 32)).sign(stream(b""))
        assert len(first) == 32
        assert first == second

    def test_empty_input_golden_value(self):
        """Keyed tag of the empty message matches the BLAKE3 reference vector."""
        signer = Blake3Signer(DigestKey(BLAKE3_VECTOR_KEY))
        assert signer.sign(stream(b"")) == BLAKE3_VECTOR_EMPTY_TAG

    def test_matches_keyed_blake3(self):
        """The tag is the standard BLAKE3 keyed hash."""
        expected = blake3.blake3(b"hello", key=b"\x01" * 32).digest()
        assert self.signer.sign(stream(b"hello")) == expected

    def test_sign_and_verify(self):
        """A tag verifies against the same key and message."""
        tag = self.signer.sign(stream(b"payload"))
        assert self.signer.verify(stream(b"payload"), tag) is True

    def test_wrong_data_fails(self):
        tag = self.signer.sign(stream(b"payload"))
        assert self.signer.verify(stream(b"payl0ad"), tag) is False

    def test_wrong_key_fails(self):
        tag = self.signer.sign(stream(b"payload"))
        other = Blake3Signer(DigestKey(b"\x02" * 32))
        assert other.verify(stream(b"payload"), tag) is False

    def test_wrong_length_tag_is_mismatch(self):
        """A truncated tag is a mismatch, not a partial match."""
        tag = self.signer.sign(stream(b"payload"))
        assert self.signer.verify(stream(b"payload"), tag[:16]) is False
        assert self.signer.verify(stream(b"payload"), tag + b"\x00") is False

    def test_base64_sign_verify(self):
        """Test base64 convenience methods."""
        sig_b64 = self.signer.sign_b64(stream(b"test message"))
        assert "=" not in sig_b64
        assert self.signer.verify_b64(stream(b"test message"), sig_b64) is True

    def test_undecodable_signature_raises(self):
        with pytest.raises(MalformedSignatureError):
            self.signer.verify_b64(stream(b"test"), "!!not-base64!!")


class TestEd25519:
    """Test Ed25519 signing and verification."""

    def setup_method(self):
        self.keypair = SigningKeyPair.from_bytes(RFC8032_SECRET)
        self.signer = Ed25519Signer(self.keypair)
        self.verifier = Ed25519Verifier(self.keypair.verifying_key)

    def test_rfc8032_vector(self):
        """Empty message signature matches RFC 8032 test 1."""
        assert self.signer.sign(stream(b"")) == RFC8032_EMPTY_SIGNATURE

    def test_signature_is_64_bytes_and_deterministic(self):
        first = self.signer.sign(stream(b"data"))
        second = self.signer.sign(stream(b"data"))
        assert len(first) == 64
        assert first == second

    def test_sign_and_verify(self):
        """Signature should verify correctly."""
        signature = self.signer.sign(stream(b"test message to sign"))
        assert self.verifier.verify(stream(b"test message to sign"), signature) is True

    def test_wrong_data_fails_verification(self):
        """Wrong data should fail verification."""
        signature = self.signer.sign(stream(b"original message"))
        assert self.verifier.verify(stream(b"different message"), signature) is False

    def test_other_public_key_fails(self):
        """Verification with an unrelated public key returns False."""
        signature = self.signer.sign(stream(b"message"))
        other = SigningKeyPair.from_bytes(b"\x42" * 32)
        assert Ed25519Verifier(other.verifying_key).verify(stream(b"message"), signature) is False

    def test_tampered_signature_fails(self):
        """Tampered signature should fail."""
        signature = bytearray(self.signer.sign(stream(b"test message")))
        signature[10] ^= 0xFF
        assert self.verifier.verify(stream(b"test message"), bytes(signature)) is False

    def test_non_canonical_s_rejected(self):
        """Adding the group order to S gives a malleated signature that is refused."""
        signature = self.signer.sign(stream(b"test message"))
        order = 2 ** 252 + 27742317777372353535851937790883648493
        s = int.from_bytes(signature[32:], "little") + order
        malleated = signature[:32] + s.to_bytes(32, "little")
        assert self.verifier.verify(stream(b"test message"), malleated) is False

    @pytest.mark.parametrize("size", [0, 32, 63, 65])
    def test_wrong_length_signature_raises(self, size):
        """Impossible signature lengths are malformed input, not a False result."""
        with pytest.raises(MalformedSignatureError):
            self.verifier.verify(stream(b"message"), b"\x00" * size)

    def test_base64_round_trip(self):
        sig_b64 = self.signer.sign_b64(stream(b"hello"))
        assert self.verifier.verify_b64(stream(b"hello"), sig_b64) is True

    def test_key_id(self):
        """Signer and verifier share a key id derived from the public key."""
        assert self.signer.key_id == self.verifier.key_id
        assert len(self.signer.key_id) == 16

    def test_verifying_key_alone(self):
        """A verifier needs only the public bytes."""
        verifier = Ed25519Verifier(VerifyingKey(self.keypair.public_key))
        signature = self.signer.sign(stream(b"x"))
        assert verifier.verify(stream(b"x"), signature) is True
