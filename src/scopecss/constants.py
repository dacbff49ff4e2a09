"""Shared constants for scopecss.

Centralized configuration used across the syntax and scoping packages.
Placing constants here avoids circular imports and provides a single
source of truth. Every constant can be overridden per call through the
keyword-only parameters of the public functions and classes.

Constants are grouped by domain:
- Scoping: marker attribute and key format
- Depth limits: Recursion protection for parsing/traversal/serialization
- Input limits: DoS prevention via size constraints

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Scoping
    "SCOPE_ATTRIBUTE",
    "SCOPE_KEY_LENGTH",
    "SCOPE_KEY_ALPHABET",
    "STYLE_OPEN_TAG",
    "STYLE_CLOSE_TAG",
    # Depth limits
    "MAX_DEPTH",
    # Input limits
    "MAX_SOURCE_SIZE",
]

# ============================================================================
# SCOPING
# ============================================================================

# Marker attribute set on every element and matched by the guard selector.
SCOPE_ATTRIBUTE: str = "data-scope"

# Scope keys are 6 characters over 36 symbols: 36**6 ~ 2.18e9 distinct keys.
# Keys are not cryptographically secure and collisions are possible.
SCOPE_KEY_LENGTH: int = 6

# Lowercase letters and digits only, so keys are safe inside CSS strings
# and HTML attribute values without escaping.
SCOPE_KEY_ALPHABET: str = "abcdefghijklmnopqrstuvwxyz0123456789"

# Style container wrapped around the rewritten CSS in composed output.
STYLE_OPEN_TAG: str = "<style>"
STYLE_CLOSE_TAG: str = "</style>"

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Unified maximum depth for recursion protection.
# Used by: selector parser (nested :is()/:not()), at-rule nesting,
# visitor/transformer traversal, serializer.
# Real stylesheets rarely nest more than a handful of levels.
MAX_DEPTH: int = 100

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum CSS source size in characters (10 MB).
# Prevents DoS attacks via unbounded memory allocation from huge stylesheets.
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024
