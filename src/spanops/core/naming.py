"""Database name generation for isolated test runs.

Spanner database ids are limited to 30 characters and may not end with a
hyphen. Names are built from a fixed prefix and a slice of a random UUID so
concurrent runs never share a database.
"""

from __future__ import annotations

import re
import uuid

DEFAULT_PREFIX = "r2dbc-"
MAX_DATABASE_NAME_LENGTH = 30

# The first 23 characters of a canonical UUID end on a hex digit
# (8-4-4-4 groups), never on a separator.
_SUFFIX_LENGTH = 23

_DATABASE_NAME_RE = re.compile(r"^[a-z][a-z0-9_-]*[a-z0-9]$")


def validate_database_name(name: str) -> str:
    """
    Check a database id against Spanner naming rules and return it.

    Rules: 2-30 characters, starts with a lowercase letter, only lowercase
    letters, digits, ``_`` and ``-``, and does not end with ``_`` or ``-``.

    Raises:
        ValueError: If the name violates any rule.
    """
    if len(name) > MAX_DATABASE_NAME_LENGTH:
        raise ValueError(
            f"Database name {name!r} is longer than "
            f"{MAX_DATABASE_NAME_LENGTH} characters."
        )
    if not _DATABASE_NAME_RE.match(name):
        raise ValueError(
            f"Database name {name!r} must start with a lowercase letter, "
            "use only [a-z0-9_-] and not end with '-' or '_'."
        )
    return name


def generate_database_name(prefix: str = DEFAULT_PREFIX) -> str:
    """
    Return a unique database name: ``prefix`` plus 23 random UUID characters.

    With the default prefix the result is 29 characters long.

    Raises:
        ValueError: If the prefix makes the name invalid (too long, bad
            leading character or characters outside ``[a-z0-9_-]``).
    """
    suffix = str(uuid.uuid4())[:_SUFFIX_LENGTH]
    return validate_database_name(f"{prefix}{suffix}")
