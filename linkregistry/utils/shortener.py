"""Shortcode generation utility

This module provides helpers for drawing random Base62 shortcodes and for
validating caller-supplied ones. Uniqueness is not a concern here; the
Registry retries draws until it finds a free code.

Functions:
    generate_shortcode(rng, length=6) -> str:
        Draw a shortcode uniformly from the Base62 alphabet.
    is_valid_shortcode(shortcode) -> bool:
        Check that a shortcode is 1-20 Base62 characters.

Example:
    >>> import random
    >>> from linkregistry.utils import generate_shortcode, is_valid_shortcode
    >>> len(generate_shortcode(random.Random(42)))
    6
    >>> is_valid_shortcode('abc123')
    True
"""

import re
import random
import string

from linkregistry.constants import Shortcode


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

SHORTCODE_PATTERN = re.compile(rf'[A-Za-z0-9]{{{Shortcode.MIN_LENGTH},{Shortcode.MAX_LENGTH}}}')


def generate_shortcode(rng: random.Random, length: int = Shortcode.DEFAULT_LENGTH) -> str:
    """Draw a random shortcode from the Base62 alphabet.

    Every position is drawn independently and uniformly, so a 6-character
    code collides with one specific existing code with probability 1/62^6.

    Args:
        rng (random.Random):
            Random source. Inject a seeded `random.Random` for deterministic
            output, or `random.SystemRandom` in production.

        length (int, optional):
            Number of characters. Defaults to 6.

    Returns:
        str: A shortcode made of [a-zA-Z0-9] characters.

    Raises:
        ValueError: If `length` is outside 1-20.
    """
    if not Shortcode.MIN_LENGTH <= length <= Shortcode.MAX_LENGTH:
        raise ValueError(
            f'Shortcode length must be between {Shortcode.MIN_LENGTH} and {Shortcode.MAX_LENGTH} (given value: {length}).'
        )
    return ''.join(rng.choice(ALPHABET) for _ in range(length))


def is_valid_shortcode(shortcode: object) -> bool:
    """True if `shortcode` is a string of 1-20 Base62 characters."""
    return isinstance(shortcode, str) and SHORTCODE_PATTERN.fullmatch(shortcode) is not None
