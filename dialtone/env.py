# dialtone/env.py
"""Environment lookups used by ClientOptions.from_env() and the test suite."""

from __future__ import annotations

import os


def read_env(name: str) -> str | None:
    """
    Return the value of environment variable *name* with surrounding
    whitespace removed, or None when it is not set.
    """
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip()
