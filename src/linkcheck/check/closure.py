"""Fixpoint closure over referenced-but-undeclared classes.

After every explicit input has been extracted, some referenced names were
never declared by any input. ClosureResolver drains that missing set: array
classes are synthesized as subclasses of ``java/lang/Object``, everything
else is looked up on the ambient classpath and read as a library class,
which may in turn reference further missing names.

A class the classpath cannot provide is left found-but-empty. That is not an
error by itself; it only surfaces if a use fact needs a member from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from linkcheck.check.store import FactStore
from linkcheck.classfile.descriptors import OBJECT_CLASS, is_array_name
from linkcheck.classfile.extractor import FactExtractor
from linkcheck.classfile.member import Member
from linkcheck.core.logging import get_logger

log = get_logger("closure")

CLASS_SUFFIX = ".class"


class ClassLookup(Protocol):
    """Locates class file bytes by resource name (``java/lang/Object.class``)."""

    def find(self, resource: str) -> bytes | None: ...


@dataclass
class ClosureStats:
    """Statistics from a closure run."""

    loaded: int = 0
    arrays: int = 0
    not_found: int = 0

    @property
    def total(self) -> int:
        return self.loaded + self.arrays + self.not_found


class ClosureResolver:
    """Drains a FactStore's missing set until it is empty.

    Every iteration moves exactly one name from missing to found, and found
    names never return to missing, so the loop runs at most once per distinct
    referenced name.
    """

    def __init__(self, store: FactStore, lookup: ClassLookup) -> None:
        self._store = store
        self._lookup = lookup
        self._library_sink = store.library_sink()
        self._extractor = FactExtractor(self._library_sink)

    def run(self) -> ClosureStats:
        stats = ClosureStats()
        while (clazz := self._store.take_missing()) is not None:
            if is_array_name(clazz):
                log.debug("closure.array", clazz=clazz)
                self._library_sink.on_provides(clazz, Member.self_())
                self._library_sink.on_inherits(clazz, OBJECT_CLASS)
                stats.arrays += 1
                continue

            resource = clazz + CLASS_SUFFIX
            data = self._lookup.find(resource)
            if data is None:
                log.debug("closure.not_found", clazz=clazz)
                stats.not_found += 1
                continue

            log.debug("closure.lookup", clazz=clazz, size=len(data))
            self._extractor.read_class(data, origin=f"classpath:{resource}")
            stats.loaded += 1

        log.info(
            "closure.complete",
            loaded=stats.loaded,
            arrays=stats.arrays,
            not_found=stats.not_found,
        )
        return stats
