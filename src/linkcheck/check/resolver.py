"""Inheritance-aware member lookup."""

from __future__ import annotations

from linkcheck.check.store import FactStore
from linkcheck.classfile.member import Member


class LinkResolver:
    """Answers whether a member is reachable from a class through its supers.

    The search is depth-first in recorded edge order. A class already visited
    during one lookup counts as a miss, so cyclic or diamond-shaped
    hierarchies terminate. Each lookup starts with a fresh visited set.
    """

    def __init__(self, store: FactStore) -> None:
        self._store = store

    def resolve(self, to_class: str, member: Member) -> bool:
        visited: set[str] = set()
        # Explicit stack; supers pushed reversed so the first recorded edge
        # is explored first, matching a recursive search.
        stack = [to_class]
        while stack:
            clazz = stack.pop()
            if clazz in visited:
                continue
            visited.add(clazz)
            if self._store.provides(clazz, member):
                return True
            stack.extend(reversed(self._store.supers(clazz)))
        return False
