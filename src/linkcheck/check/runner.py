"""Link check orchestration.

Phases, strictly in order:

1. Extraction: checked and library inputs are read into one FactStore.
2. Closure: missing classes are pulled from the ambient classpath.
3. Resolution: every use fact is whitelisted or resolved; failures become
   :class:`LinkError` entries in the report.

Resolution never raises for unresolved references. Only malformed class
files and bad inputs abort a run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from linkcheck.check.closure import ClassLookup, ClosureResolver, ClosureStats
from linkcheck.check.resolver import LinkResolver
from linkcheck.check.store import FactStore
from linkcheck.check.whitelist import Whitelist
from linkcheck.classfile.extractor import FactExtractor
from linkcheck.classfile.member import Member
from linkcheck.core.errors import InternalError
from linkcheck.core.formatting import count_label
from linkcheck.core.logging import get_logger
from linkcheck.inputs.archives import is_archive, iter_units

log = get_logger("runner")


@dataclass
class CheckStats:
    """Counters reported in the summary line."""

    jars: int = 0
    classes: int = 0
    refs: int = 0
    whitelisted: int = 0
    errors: int = 0

    @property
    def exit_code(self) -> int:
        return 1 if self.errors > 0 else 0

    def to_dict(self) -> dict[str, int]:
        return {
            "jars": self.jars,
            "classes": self.classes,
            "refs": self.refs,
            "whitelisted": self.whitelisted,
            "errors": self.errors,
        }

    def __str__(self) -> str:
        parts = [
            count_label(self.jars, "jar(s)"),
            count_label(self.classes, "class(es)"),
            count_label(self.refs, "reference(s)"),
            count_label(self.whitelisted, "whitelisted", optional=True),
            count_label(self.errors, "error(s)", optional=True),
        ]
        return ", ".join(p for p in parts if p is not None)


@dataclass(frozen=True, slots=True)
class LinkError:
    """A use fact whose member is absent along the target's whole hierarchy."""

    from_class: str
    to_class: str
    member: Member

    @property
    def message(self) -> str:
        return f"{self.from_class} uses {self.member} in {self.to_class} which is not present!"

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_class,
            "to": self.to_class,
            "member": self.member.to_dict(),
            "message": self.message,
        }


@dataclass
class CheckReport:
    stats: CheckStats
    errors: list[LinkError] = field(default_factory=list)
    closure: ClosureStats | None = None

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def exit_code(self) -> int:
        return self.stats.exit_code

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ok": self.ok,
            "stats": self.stats.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
        }
        if self.closure is not None:
            data["closure"] = {
                "loaded": self.closure.loaded,
                "arrays": self.closure.arrays,
                "not_found": self.closure.not_found,
            }
        return data


class _NoClasspath:
    def find(self, resource: str) -> bytes | None:  # noqa: ARG002
        return None


class LinkChecker:
    """One link-check run over a set of checked and library classes.

    Usage::

        checker = LinkChecker(lookup=classpath, whitelist=Whitelist.of(["com/vendor"]))
        checker.check_path(Path("build/app.jar"))
        checker.lib_path(Path("lib/dep.jar"))
        report = checker.resolve()
    """

    def __init__(
        self,
        lookup: ClassLookup | None = None,
        whitelist: Whitelist | None = None,
    ) -> None:
        self._store = FactStore()
        self._lookup: ClassLookup = lookup if lookup is not None else _NoClasspath()
        self._whitelist = whitelist or Whitelist()
        self._checked = FactExtractor(self._store.checked_sink())
        self._library = FactExtractor(self._store.library_sink())
        self._stats = CheckStats()
        self._closure: ClosureStats | None = None

    @property
    def store(self) -> FactStore:
        return self._store

    @property
    def stats(self) -> CheckStats:
        """Input counters. Reference counts live on each returned report."""
        return self._stats

    def _ensure_open(self) -> None:
        if self._closure is not None:
            raise InternalError.unexpected("inputs added after closure completed")

    # -- extraction --------------------------------------------------------

    def check_unit(self, data: bytes, origin: str = "<bytes>") -> str:
        """Read one class under verification. Returns its internal name."""
        self._ensure_open()
        self._stats.classes += 1
        return self._checked.read_class(data, origin)

    def lib_unit(self, data: bytes, origin: str = "<bytes>") -> str:
        """Read one trusted library class. Returns its internal name."""
        self._ensure_open()
        self._stats.classes += 1
        return self._library.read_class(data, origin)

    def check_path(self, path: Path) -> None:
        self._read_path(path, self.check_unit, "check")

    def lib_path(self, path: Path) -> None:
        self._read_path(path, self.lib_unit, "lib")

    def _read_path(self, path: Path, read: Callable[[bytes, str], str], role: str) -> None:
        self._ensure_open()
        if is_archive(path):
            self._stats.jars += 1
        count = 0
        for unit in iter_units(path):
            read(unit.data, unit.origin)
            count += 1
        log.info("input.read", role=role, path=str(path), classes=count)

    # -- closure and resolution --------------------------------------------

    def complete_missing(self) -> ClosureStats:
        """Resolve missing classes against the classpath. Runs at most once."""
        if self._closure is None:
            log.info("closure.start", missing=len(self._store.missing))
            self._closure = ClosureResolver(self._store, self._lookup).run()
        return self._closure

    def resolve(self) -> CheckReport:
        """Run the resolution pass over every recorded use fact."""
        closure = self.complete_missing()
        resolver = LinkResolver(self._store)
        stats = replace(self._stats, refs=0, whitelisted=0, errors=0)
        errors: list[LinkError] = []

        for use in self._store.uses:
            stats.refs += 1
            if self._whitelist.exempts(use):
                stats.whitelisted += 1
                continue
            if not resolver.resolve(use.to_class, use.member):
                errors.append(LinkError(use.from_class, use.to_class, use.member))
                stats.errors += 1

        log.info("resolve.complete", **stats.to_dict())
        return CheckReport(stats=stats, errors=errors, closure=closure)


@dataclass
class CheckRequest:
    """Everything one CLI invocation asks to check."""

    checks: list[Path] = field(default_factory=list)
    libs: list[Path] = field(default_factory=list)
    whitelist_from: list[str] = field(default_factory=list)
    whitelist_to: list[str] = field(default_factory=list)


def run_check(request: CheckRequest, lookup: ClassLookup | None = None) -> CheckReport:
    """Extract all inputs, close over missing classes and resolve.

    Raises:
        ClassFormatError: On a malformed class file.
        InputError: On a missing or unintelligible input path.
    """
    checker = LinkChecker(
        lookup=lookup,
        whitelist=Whitelist.of(request.whitelist_from, request.whitelist_to),
    )
    for path in request.checks:
        checker.check_path(path)
    for path in request.libs:
        checker.lib_path(path)
    return checker.resolve()
