"""
Environment snapshots.

Each process() call reads from one immutable copy of its key/value source,
so scanning keys for list indices and looking up single keys see the same
view. Snapshots can be taken from os.environ, a .env file or any stream of
KEY=VALUE lines (parsed with python-dotenv).
"""

import os
import re
from collections.abc import Iterator, Mapping
from typing import IO

from dotenv import dotenv_values, find_dotenv

from envbind.errors import MalformedIndexError

_INDEX = re.compile(r"([0-9]+)(_|$)")
_DIGITS = set("0123456789")


class EnvSnapshot(Mapping):
    """Read-only mapping of environment keys to string values."""

    def __init__(self, values: Mapping[str, str | None] | None = None):
        # dotenv yields None for bare keys without "="
        self._values = {k: v for k, v in (values or {}).items() if v is not None}

    @classmethod
    def from_environ(cls) -> "EnvSnapshot":
        return cls(os.environ)

    @classmethod
    def from_dotenv(cls, path: str | os.PathLike | None = None) -> "EnvSnapshot":
        """Snapshot a .env file; searches upward from the cwd when no path is given."""
        if path is None:
            path = find_dotenv(usecwd=True)
        return cls(dotenv_values(path, interpolate=False))

    @classmethod
    def from_stream(cls, stream: IO[str]) -> "EnvSnapshot":
        return cls(dotenv_values(stream=stream, interpolate=False))

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EnvSnapshot({len(self._values)} keys)"

    def lookup(self, key: str) -> tuple[str, bool]:
        if key in self._values:
            return self._values[key], True
        return "", False

    def indices(self, prefix: str) -> set[int]:
        """
        Distinct list indices found under prefix.

        PREFIX_0, PREFIX_0_HOST and PREFIX_12_PORT count; PREFIX_HOST does
        not belong to the list. PREFIX_1X is malformed.
        """
        head = f"{prefix}_"
        found: set[int] = set()
        for key in self._values:
            if not key.startswith(head):
                continue
            rest = key[len(head):]
            if rest[:1] not in _DIGITS:
                continue
            m = _INDEX.match(rest)
            if m is None:
                raise MalformedIndexError(prefix, key=key)
            found.add(int(m.group(1)))
        return found


def snapshot(env: Mapping[str, str] | None = None) -> EnvSnapshot:
    """Freeze env (os.environ when None) for one traversal."""
    if isinstance(env, EnvSnapshot):
        return env
    if env is None:
        return EnvSnapshot.from_environ()
    return EnvSnapshot(env)
