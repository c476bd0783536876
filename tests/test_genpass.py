"""
Tests for Password Generation
"""

import random

import pytest

from core.genpass import LOWER, NUMBER, SYMBOL, UPPER, generate_password


class TestGeneratePassword:
    """Test the password generator."""

    def test_default_length(self):
        """Default password is 16 characters."""
        assert len(generate_password()) == 16

    @pytest.mark.parametrize("length", [4, 8, 32, 64])
    def test_exact_length(self, length):
        """Output has exactly the requested length."""
        assert len(generate_password(length)) == length

    def test_every_class_present(self):
        """Each requested class appears at least once, even at minimum length."""
        for seed in range(50):
            password = generate_password(4, rng=random.Random(seed))
            assert any(c in UPPER for c in password)
            assert any(c in LOWER for c in password)
            assert any(c in NUMBER for c in password)
            assert any(c in SYMBOL for c in password)

    def test_only_requested_classes(self):
        """Disabled classes never appear."""
        password = generate_password(64, uppercase=False, symbol=False)
        allowed = set(LOWER + NUMBER)
        assert set(password) <= allowed

    def test_ambiguous_characters_excluded(self):
        """Easily confused glyphs are not used."""
        password = generate_password(256)
        assert not set(password) & set("0O1lI")

    def test_deterministic_with_seeded_rng(self):
        """A seeded generator gives reproducible output."""
        assert generate_password(20, rng=random.Random(7)) == generate_password(20, rng=random.Random(7))

    def test_no_classes_rejected(self):
        """At least one class is required."""
        with pytest.raises(ValueError):
            generate_password(16, uppercase=False, lowercase=False, number=False, symbol=False)

    def test_length_shorter_than_classes_rejected(self):
        """Length must fit one character of every class."""
        with pytest.raises(ValueError):
            generate_password(3)
