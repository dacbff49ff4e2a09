"""Scope key generation.

A scope key is the short random token that ties one HTML fragment to its
rewritten stylesheet: it is written into the marker attribute of every
element and into the guard selector of every rule.

Keys are drawn from a random.Random-compatible source. They are not
cryptographically secure: with the default 6 characters over 36 symbols
there are 36**6 (about 2.18e9) keys, and collisions between fragments on
one page are possible though unlikely. No collision detection is done.

Python 3.13+.
"""

import logging
import random
import re
from typing import Protocol

from scopecss.constants import SCOPE_KEY_ALPHABET, SCOPE_KEY_LENGTH

__all__ = [
    "RandomSource",
    "generate_scope_key",
    "is_valid_scope_key",
    "validate_scope_attribute",
    "validate_scope_key",
]

logger = logging.getLogger(__name__)

# Keys end up inside a double-quoted CSS string and an HTML attribute value,
# so only characters that need no escaping in either are accepted.
_SCOPE_KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class RandomSource(Protocol):
    """Anything with random.Random's choice() method."""

    def choice(self, seq: str) -> str: ...  # pragma: no cover


def generate_scope_key(
    rng: RandomSource | None = None,
    *,
    length: int = SCOPE_KEY_LENGTH,
    alphabet: str = SCOPE_KEY_ALPHABET,
) -> str:
    """Generate a random scope key.

    Each character is drawn independently and uniformly from alphabet.

    Args:
        rng: Random source (default: the process-wide random module).
             Pass random.Random(seed) for deterministic keys.
        length: Number of characters (default: 6)
        alphabet: Characters to draw from (default: a-z and 0-9)

    Returns:
        New scope key

    Raises:
        ValueError: If length is less than 1 or alphabet is empty

    Example:
        >>> import random
        >>> key = generate_scope_key(random.Random(42))
        >>> len(key)
        6
    """
    if length < 1:
        msg = f"Scope key length must be >= 1, got {length}"
        raise ValueError(msg)
    if not alphabet:
        msg = "Scope key alphabet must not be empty"
        raise ValueError(msg)

    source: RandomSource = rng if rng is not None else random  # type: ignore[assignment]
    key = "".join(source.choice(alphabet) for _ in range(length))
    logger.debug("Generated scope key %r", key)
    return key


def is_valid_scope_key(value: object) -> bool:
    """Check that value can be embedded as a scope key without escaping.

    Valid keys are non-empty strings of ASCII letters, digits, "-" and "_".

    Example:
        >>> is_valid_scope_key("abc123")
        True
        >>> is_valid_scope_key('a"b')
        False
    """
    return isinstance(value, str) and _SCOPE_KEY_PATTERN.fullmatch(value) is not None


def validate_scope_key(key: str) -> str:
    """Return key unchanged, or raise ValueError if it is not a valid scope key."""
    if not is_valid_scope_key(key):
        msg = f"Invalid scope key {key!r}: expected ASCII letters, digits, '-' or '_'"
        raise ValueError(msg)
    return key


# Marker attribute names are written unquoted into the guard selector.
_ATTRIBUTE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")


def validate_scope_attribute(attribute: str) -> str:
    """Return attribute unchanged, or raise ValueError if it cannot be a marker attribute.

    Accepted names are plain CSS identifiers that are also HTML attribute
    names: "data-scope", "data-v", "scope_id".
    """
    if not isinstance(attribute, str) or _ATTRIBUTE_NAME_PATTERN.fullmatch(attribute) is None:
        msg = f"Invalid scope attribute name {attribute!r}"
        raise ValueError(msg)
    return attribute
