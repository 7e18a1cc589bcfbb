from __future__ import annotations

"""
Node Identifier Generation.

Issues identifiers that are unique for the lifetime of a session: a
monotonic counter guarantees distinctness within one generator, a random
suffix keeps ids from colliding with ids restored from a snapshot, and an
explicit reservation set closes the remaining gap.
"""

import itertools
import secrets
import string
import threading
from typing import Iterable, Set

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


class IdGenerator:
    """
    Session-scoped factory of unique node ids.

    Ids are never reissued, including ids of deleted nodes and ids that
    were handed to reserve() after a snapshot restore.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._issued: Set[str] = set()
        self._lock = threading.Lock()

    def __call__(self) -> str:
        return self.new_id()

    def new_id(self) -> str:
        """
        Generate a fresh identifier.

        Returns:
            str: '<counter base36><9 random base36 chars>'.
        """
        with self._lock:
            while True:
                suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
                candidate = f"{_to_base36(next(self._counter))}{suffix}"
                if candidate not in self._issued:
                    self._issued.add(candidate)
                    return candidate

    def reserve(self, ids: Iterable[str]) -> None:
        """Mark externally created ids as taken."""
        with self._lock:
            self._issued.update(ids)

    def is_issued(self, node_id: str) -> bool:
        return node_id in self._issued
