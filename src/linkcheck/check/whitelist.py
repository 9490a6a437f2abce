"""Prefix-based exemptions from reporting."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from linkcheck.check.store import UseFact


def is_whitelisted(name: str, prefixes: Iterable[str]) -> bool:
    """True if ``name`` equals a prefix or lies under it as a path segment.

    ``a/b`` matches ``a/b`` and ``a/b/c`` but not ``a/bc``.
    """
    for prefix in prefixes:
        if name == prefix or name.startswith(prefix + "/"):
            return True
    return False


@dataclass(frozen=True, slots=True)
class Whitelist:
    from_prefixes: tuple[str, ...] = ()
    to_prefixes: tuple[str, ...] = ()

    @classmethod
    def of(cls, from_prefixes: Iterable[str] = (), to_prefixes: Iterable[str] = ()) -> Whitelist:
        return cls(tuple(from_prefixes), tuple(to_prefixes))

    def exempts(self, use: UseFact) -> bool:
        return is_whitelisted(use.from_class, self.from_prefixes) or is_whitelisted(
            use.to_class, self.to_prefixes
        )
