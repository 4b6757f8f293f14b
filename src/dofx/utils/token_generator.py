"""Random FITID token generation."""

import random
from typing import Optional

from ..models.core import DEFAULT_FITID_ALPHABET, DEFAULT_FITID_LENGTH


class FitIdGenerator:
    """Generates fixed-length random identifiers.

    Each character is drawn uniformly and independently from the alphabet.
    Generated tokens are not checked against identifiers already present in
    a file.
    """

    def __init__(self,
                 length: int = DEFAULT_FITID_LENGTH,
                 alphabet: str = DEFAULT_FITID_ALPHABET,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        """
        Args:
            length: Number of characters per token
            alphabet: Characters to draw from
            seed: Seed for a new private random source (ignored if rng is given)
            rng: Random source to use instead of creating one
        """
        if length <= 0:
            raise ValueError("Token length must be positive")
        if not alphabet:
            raise ValueError("Token alphabet cannot be empty")

        self.length = length
        self.alphabet = alphabet
        self.rng = rng if rng is not None else random.Random(seed)

    def generate(self) -> str:
        return ''.join(self.rng.choice(self.alphabet) for _ in range(self.length))

    __call__ = generate
