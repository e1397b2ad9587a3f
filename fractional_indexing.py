"""
Fractional Indexing for CRDT-compatible list ordering.

Uses base-62 strings (0-9, A-Z, a-z) with lexicographic ordering to allow
insertions between any two positions without renumbering existing items.
Each position is read as a base-62 fraction in [0, 1), so 'V' is roughly 0.5
and 'V0' would be the same value as 'V'. Positions therefore never end in '0'.

Generated positions are never a prefix of the upper bound they were generated
under, so digits can be appended to a generated position without it crossing
that bound (key_codec relies on this when it adds a random suffix).

Requires COLLATE "C" on the database column to ensure byte-order sorting,
which gives predictable order: 0-9 < A-Z < a-z.
"""

from typing import Optional

# Base-62 alphabet: digits, uppercase, lowercase (requires COLLATE "C" in PostgreSQL)
# Sorted by ASCII byte value: 0-9 (48-57), A-Z (65-90), a-z (97-122)
ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
BASE = len(ALPHABET)  # 62
MIDPOINT = BASE // 2  # 31, which is 'V'
START_CHAR = "V"  # Start in the middle to leave room for insertions before
ZERO = ALPHABET[0]

_DIGIT_VALUES = {c: i for i, c in enumerate(ALPHABET)}


def _char_to_int(c: str) -> int:
    """Convert alphabet character to integer (0-61)."""
    return _DIGIT_VALUES[c]


def _int_to_char(i: int) -> str:
    """Convert integer (0-61) to alphabet character."""
    return ALPHABET[i]


def validate_position(position: str) -> bool:
    """Check if a position string is valid."""
    if not position or not isinstance(position, str):
        return False
    return all(c in _DIGIT_VALUES for c in position)


def _check_position(position: str, name: str) -> None:
    if not validate_position(position):
        raise ValueError(f"Invalid position for {name}: {position!r}")
    if position.endswith(ZERO):
        # 'x0' sorts after 'x' but has the same value, nothing fits between them
        raise ValueError(f"Invalid position for {name}: {position!r} ends with '{ZERO}'")


def generate_append_position(last_position: Optional[str]) -> str:
    """
    Generate a position for appending to the end of a list.

    Simply increments the last character, extending if needed.

    Examples:
        >>> generate_append_position(None)
        'V'
        >>> generate_append_position('V')
        'W'
        >>> generate_append_position('z')
        'zV'
    """
    if last_position is None or last_position == "":
        return START_CHAR

    _check_position(last_position, "last_position")

    last_val = _char_to_int(last_position[-1])

    if last_val < BASE - 1:
        return last_position[:-1] + _int_to_char(last_val + 1)

    # Last character is 'z', extend with midpoint (not '0')
    # e.g., 'z' -> 'zV' allows inserting 'z1'-'zU' before it
    return last_position + _int_to_char(MIDPOINT)


def generate_position_between(
    before: Optional[str],
    after: Optional[str]
) -> str:
    """
    Generate a position between two existing positions.

    Finds the midpoint of the two fractions. If the positions are adjacent,
    extends with the midpoint char.

    Examples:
        >>> generate_position_between(None, 'V')
        'G'
        >>> generate_position_between('V', 'X')
        'W'
        >>> generate_position_between('V', 'W')
        'VV'

    Raises:
        ValueError: If a position is malformed or before >= after
    """
    if before is not None:
        _check_position(before, "before")
    if after is not None:
        _check_position(after, "after")

    if before is None and after is None:
        return START_CHAR

    if after is None:
        return generate_append_position(before)

    if before is not None and before >= after:
        raise ValueError(f"Invalid ordering: before='{before}' must be < after='{after}'")

    return _midpoint(before or "", after)


def _midpoint(before: str, after: Optional[str]) -> str:
    """
    Find the shortest position strictly between two fractions.

    ``before`` may be empty (meaning 0) and ``after`` may be None (meaning 1).
    Neither may end in '0'.

    Examples:
        _midpoint('', 'V') -> 'G'
        _midpoint('V', 'W') -> 'VV'
        _midpoint('', '1') -> '0V'  (nothing fits between 0 and '1' at this level)
        _midpoint('VV', 'VW') -> 'VVV'
    """
    if after is not None:
        # Skip the shared prefix, reading missing 'before' digits as '0'
        n = 0
        while (before[n] if n < len(before) else ZERO) == after[n]:
            n += 1
        if n > 0:
            return after[:n] + _midpoint(before[n:], after[n:])

    before_val = _char_to_int(before[0]) if before else 0
    after_val = _char_to_int(after[0]) if after is not None else BASE

    if after_val - before_val > 1:
        # Round half up so the start of an empty list lands on 'V'
        return _int_to_char((before_val + after_val + 1) // 2)

    # Adjacent digits: keep before's digit and go one level deeper with no upper
    # bound. The result differs from 'after' at this digit, so it is never a
    # prefix of 'after'.
    return _int_to_char(before_val) + _midpoint(before[1:], None)
