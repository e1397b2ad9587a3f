"""
Collision-resistant ordering keys.

Wraps the base-62 positions from fractional_indexing in an envelope so that two
writers generating a key in the same gap without coordinating almost never
produce the same key:

    <subkey> '0' <32 random characters>

The subkey carries the ordering. The random suffix only breaks ties, with
61**32 possible values per subkey. The suffix alphabet has no '0', so a full
key never ends in '0' and can itself be used as a fractional_indexing bound.

Keys of 33 characters or fewer are treated as bare subkeys. These come from
lists that were ordered before the suffix layer existed.
"""

import logging
import secrets
from typing import Optional

from fractional_indexing import generate_position_between

logger = logging.getLogger(__name__)

SUFFIX_LENGTH = 32
SEPARATOR = "0"
SUFFIX_ALPHABET = "123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
ENVELOPE_LENGTH = len(SEPARATOR) + SUFFIX_LENGTH  # 33


class InvalidBoundOrderError(ValueError):
    """Raised when a lower bound does not sort strictly before the upper bound."""

    def __init__(self, lower: str, upper: str):
        self.lower = lower
        self.upper = upper
        super().__init__(f"Invalid bound order: '{lower}' must be < '{upper}'")


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    """Return ``length`` characters drawn uniformly from SUFFIX_ALPHABET."""
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def subkey(key: Optional[str]) -> Optional[str]:
    """
    Strip the separator and random suffix from a key.

    Examples:
        >>> subkey(None) is None
        True
        >>> subkey('V')
        'V'
        >>> subkey('V0' + 'a' * 32)
        'V'
        >>> subkey('V0G0' + 'a' * 32)
        'V0G'
    """
    if key is None:
        return None
    if len(key) <= ENVELOPE_LENGTH:
        # No suffix layer yet
        return key
    return key[:-ENVELOPE_LENGTH]


def generate_between(a: Optional[str], b: Optional[str]) -> str:
    """
    Generate a key that sorts strictly between a and b.

    Either bound may be None to leave that side open. Keys passed in should
    have been generated by this function (or be bare fractional_indexing
    positions from before the suffix layer).

    Args:
        a: Lower bound, or None
        b: Upper bound, or None

    Returns:
        A new key with a < key < b

    Raises:
        InvalidBoundOrderError: If both bounds are given and a >= b
        ValueError: If a bound is not a valid position
    """
    if a is not None and b is not None and a >= b:
        raise InvalidBoundOrderError(a, b)

    a_subkey = subkey(a)
    b_subkey = subkey(b)

    if a_subkey is None and b_subkey is None:
        base = generate_position_between(None, None)
    elif a_subkey is None:
        base = generate_position_between(None, b_subkey)
    elif b_subkey is None:
        base = generate_position_between(a_subkey, None)
    elif a_subkey == b_subkey:
        # Subkey collision: only the suffixes tell a and b apart
        logger.debug(f"Subkey collision on '{a_subkey}', generating between full keys")
        base = generate_position_between(a, b)
    elif a_subkey > b_subkey:
        # Happens when a bare subkey sits just below a suffixed key sharing its
        # prefix, e.g. a='V0G' and b='V0' + suffix
        logger.debug(f"Subkeys '{a_subkey}' > '{b_subkey}', generating between full keys")
        base = generate_position_between(a, b)
    else:
        base = generate_position_between(a_subkey, b_subkey)

    if a is not None and base + SEPARATOR <= a:
        # base extended a's subkey with '0', so a's own suffix would decide
        # the comparison. Only the full keys can order this gap.
        logger.debug(f"Base '{base}' for gap ('{a}', '{b}') sorts below lower bound, using full keys")
        base = generate_position_between(a, b)

    return base + SEPARATOR + random_suffix()
