"""Tests for random FITID generation."""

import random
import string

import pytest

from dofx.utils.token_generator import FitIdGenerator


class TestFitIdGenerator:
    """Test cases for FitIdGenerator"""

    def test_default_length_and_alphabet(self):
        generator = FitIdGenerator(seed=7)
        allowed = set(string.ascii_letters + string.digits)

        for _ in range(50):
            token = generator.generate()
            assert len(token) == 9
            assert set(token) <= allowed

    def test_injected_rng_is_used(self):
        first = FitIdGenerator(rng=random.Random(99))
        second = FitIdGenerator(rng=random.Random(99))
        assert [first.generate() for _ in range(3)] == [second.generate() for _ in range(3)]

    def test_successive_tokens_differ(self):
        generator = FitIdGenerator(seed=3)
        assert generator.generate() != generator.generate()

    def test_custom_length_and_alphabet(self):
        generator = FitIdGenerator(length=4, alphabet="ab", seed=1)
        token = generator()
        assert len(token) == 4
        assert set(token) <= {"a", "b"}

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            FitIdGenerator(length=0)
        with pytest.raises(ValueError):
            FitIdGenerator(alphabet="")
