"""The fact ledger shared by extraction, closure and resolution.

FactStore accumulates provide facts, inherit edges and use facts and tracks
per-class resolution state:

- ``found``: a self-provide was recorded (or closure gave up looking)
- ``missing``: referenced by an inherit edge or use while not found
- ``checked``: found via a checked unit (subset of found)

``found`` and ``missing`` never overlap, and a name never goes back to
missing once found. Nothing is ever removed from the fact sets.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from linkcheck.classfile.member import Member


@dataclass(frozen=True, slots=True)
class UseFact:
    """``from_class`` references ``member`` as declared on (or inherited by) ``to_class``."""

    from_class: str
    to_class: str
    member: Member


class FactStore:
    """Write-accumulate, read-many ledger of facts for one run."""

    def __init__(self) -> None:
        self._provides: set[tuple[str, Member]] = set()
        # dicts used as insertion-ordered sets
        self._supers: dict[str, dict[str, None]] = {}
        self._uses: dict[UseFact, None] = {}
        self._found: set[str] = set()
        self._checked: set[str] = set()
        self._missing: dict[str, None] = {}

    # -- recording ---------------------------------------------------------

    def record_provide(self, clazz: str, member: Member, *, checked: bool = False) -> None:
        if member.is_self:
            self._missing.pop(clazz, None)
            self._found.add(clazz)
            if checked:
                self._checked.add(clazz)
        self._provides.add((clazz, member))

    def record_inherit(self, clazz: str, super_class: str | None) -> None:
        if super_class is None:
            # Root type (java/lang/Object, module-info)
            return
        self._mark_referenced(super_class)
        self._supers.setdefault(clazz, {})[super_class] = None

    def record_use(self, from_class: str, to_class: str, member: Member) -> None:
        self._mark_referenced(to_class)
        self._uses[UseFact(from_class, to_class, member)] = None

    def _mark_referenced(self, clazz: str) -> None:
        if clazz not in self._found:
            self._missing[clazz] = None

    def take_missing(self) -> str | None:
        """Remove one missing name, mark it found and return it.

        Returns None when nothing is missing.
        """
        if not self._missing:
            return None
        clazz = next(iter(self._missing))
        del self._missing[clazz]
        self._found.add(clazz)
        return clazz

    # -- sinks -------------------------------------------------------------

    def checked_sink(self) -> CheckedSink:
        return CheckedSink(self)

    def library_sink(self) -> LibrarySink:
        return LibrarySink(self)

    # -- queries -----------------------------------------------------------

    def provides(self, clazz: str, member: Member) -> bool:
        return (clazz, member) in self._provides

    def supers(self, clazz: str) -> tuple[str, ...]:
        """Immediate superclass and interfaces, in recording order."""
        return tuple(self._supers.get(clazz, ()))

    @property
    def uses(self) -> Iterator[UseFact]:
        return iter(self._uses)

    @property
    def use_count(self) -> int:
        return len(self._uses)

    @property
    def provide_count(self) -> int:
        return len(self._provides)

    @property
    def found(self) -> frozenset[str]:
        return frozenset(self._found)

    @property
    def missing(self) -> frozenset[str]:
        return frozenset(self._missing)

    @property
    def checked(self) -> frozenset[str]:
        return frozenset(self._checked)

    def is_found(self, clazz: str) -> bool:
        return clazz in self._found

    def is_missing(self, clazz: str) -> bool:
        return clazz in self._missing

    def is_checked(self, clazz: str) -> bool:
        return clazz in self._checked

    def has_missing(self) -> bool:
        return bool(self._missing)


class CheckedSink:
    """Sink for classes under verification: every fact is kept."""

    def __init__(self, store: FactStore) -> None:
        self._store = store

    def on_provides(self, clazz: str, member: Member) -> None:
        self._store.record_provide(clazz, member, checked=True)

    def on_inherits(self, clazz: str, super_class: str | None) -> None:
        self._store.record_inherit(clazz, super_class)

    def on_uses(self, from_class: str, to_class: str, member: Member) -> None:
        self._store.record_use(from_class, to_class, member)


class LibrarySink:
    """Sink for trusted classes: structure is kept, uses are dropped."""

    def __init__(self, store: FactStore) -> None:
        self._store = store

    def on_provides(self, clazz: str, member: Member) -> None:
        self._store.record_provide(clazz, member)

    def on_inherits(self, clazz: str, super_class: str | None) -> None:
        self._store.record_inherit(clazz, super_class)

    def on_uses(self, from_class: str, to_class: str, member: Member) -> None:
        pass
