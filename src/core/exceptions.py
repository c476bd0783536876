"""
Error Types for textseal

Every failure the sealing layer can report derives from TextSealError so
front ends can catch one type. A verification mismatch is NOT an error:
verifiers return False for a well-formed signature that does not match.
"""


class TextSealError(Exception):
    """Base class for all textseal failures."""


class SourceReadError(TextSealError):
    """An input or key source exists but could not be read."""

    def __init__(self, locator: str, reason: str):
        self.locator = locator
        self.reason = reason
        super().__init__(f"Cannot read {locator!r}: {reason}")


class MalformedKeyError(TextSealError):
    """Key bytes have the wrong length or an invalid encoding."""


class UnknownAlgorithmError(TextSealError, ValueError):
    """A format token does not name a supported algorithm."""

    def __init__(self, token: str, valid_tokens):
        self.token = token
        self.valid_tokens = list(valid_tokens)
        super().__init__(
            f"Unsupported format {token!r}. Valid formats: {', '.join(self.valid_tokens)}"
        )


class MalformedInputError(TextSealError):
    """Caller-supplied signature or envelope cannot be parsed."""


class MalformedSignatureError(MalformedInputError):
    # wrong length or bad text encoding
    pass


class MalformedEnvelopeError(MalformedInputError):
    # bad text encoding, bad record, or wrong nonce length
    pass


class AuthenticationFailedError(TextSealError):
    """Ciphertext failed its authentication tag check (tampered or wrong key)."""


class UnsupportedOperationError(TextSealError):
    """The selected algorithm does not support the requested operation."""
