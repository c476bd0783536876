"""
Algorithm Identifiers

User-facing format tokens, parsed case-insensitively. Unknown tokens are
rejected here, before any key or input is touched.
"""

from enum import Enum
from typing import List, Union

from core.exceptions import UnknownAlgorithmError


class _FormatEnum(Enum):

    @classmethod
    def tokens(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, token: str):
        """Parse a format token, ignoring case."""
        try:
            return cls(token.strip().lower())
        except (ValueError, AttributeError):
            raise UnknownAlgorithmError(str(token), cls.tokens()) from None

    def __str__(self) -> str:
        return self.value


class SignFormat(_FormatEnum):
    """Signing formats."""
    BLAKE3 = "blake3"  # keyed digest
    ED25519 = "ed25519"  # asymmetric signature


class EncryptFormat(_FormatEnum):
    """Authenticated encryption formats."""
    CHACHA20POLY1305 = "chacha20poly1305"


AlgorithmIdentifier = Union[SignFormat, EncryptFormat]


def parse_format(token: str) -> AlgorithmIdentifier:
    """Parse a token naming any supported signing or encryption format."""
    for family in (SignFormat, EncryptFormat):
        try:
            return family.parse(token)
        except UnknownAlgorithmError:
            continue
    raise UnknownAlgorithmError(str(token), SignFormat.tokens() + EncryptFormat.tokens())
