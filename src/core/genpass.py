"""
Random Password Generation

Printable passwords drawn from up to four character classes. Glyphs that are
easy to confuse (0/O, 1/l/I) are left out of the alphabets. Each requested
class appears at least once.

Also used as the source of BLAKE3 digest keys.
"""

import random
import secrets
from typing import List, Optional

UPPER = "ABCDEFGHJKLMNPQRSTUVWXYZ"
LOWER = "abcdefghijkmnopqrstuvwxyz"
NUMBER = "123456789"
SYMBOL = "!@#$%^&*_"

DEFAULT_LENGTH = 16


def generate_password(
    length: int = DEFAULT_LENGTH,
    uppercase: bool = True,
    lowercase: bool = True,
    number: bool = True,
    symbol: bool = True,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Generate a password of exactly `length` characters.

    Args:
        length: Number of characters
        uppercase, lowercase, number, symbol: Character classes to draw from
        rng: Random generator (defaults to the OS-backed SystemRandom)

    Raises:
        ValueError: no class selected, or length too short to fit one
            character from every selected class
    """
    rng = rng or secrets.SystemRandom()

    classes = [
        alphabet
        for alphabet, wanted in (
            (UPPER, uppercase),
            (LOWER, lowercase),
            (NUMBER, number),
            (SYMBOL, symbol),
        )
        if wanted
    ]
    if not classes:
        raise ValueError("At least one character class must be enabled")
    if length < len(classes):
        raise ValueError(
            f"Length {length} is too short for {len(classes)} character classes"
        )

    # One guaranteed pick per class, the rest from the combined alphabet
    password: List[str] = [rng.choice(alphabet) for alphabet in classes]
    pool = "".join(classes)
    password.extend(rng.choice(pool) for _ in range(length - len(password)))

    rng.shuffle(password)
    return "".join(password)
