"""Ambient classpath lookup.

Classes referenced by the inputs but declared by none of them are looked up
here by resource name (``java/lang/Object.class``). Entries are searched in
order and the first hit wins, like a JVM system class loader:

- a directory holding ``<package>/<Name>.class`` files
- a ``.jar``/``.zip`` archive
- a JDK ``.jmod`` file (classes live under ``classes/``)

Missing or unreadable entries are skipped with a warning, as the JVM does.
"""

from __future__ import annotations

import zipfile
import zlib
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

from linkcheck.core.logging import get_logger

if TYPE_CHECKING:
    from linkcheck.config.models import CheckConfig

log = get_logger("classpath")

JMOD_CLASSES_PREFIX = "classes/"


class _DirectoryEntry:
    def __init__(self, root: Path) -> None:
        self.root = root

    def find(self, resource: str) -> bytes | None:
        candidate = self.root / resource
        if candidate.is_file():
            return candidate.read_bytes()
        return None

    def close(self) -> None:
        pass


class _ArchiveEntry:
    """Lazily opened archive; the name index is built on first lookup."""

    def __init__(self, path: Path, prefix: str = "") -> None:
        self.path = path
        self.prefix = prefix
        self._zip: zipfile.ZipFile | None = None
        self._names: frozenset[str] | None = None
        self._broken = False

    def _open(self) -> zipfile.ZipFile | None:
        if self._zip is None and not self._broken:
            try:
                self._zip = zipfile.ZipFile(self.path)
                self._names = frozenset(self._zip.namelist())
            except (zipfile.BadZipFile, OSError) as e:
                log.warning("classpath.bad_archive", path=str(self.path), error=str(e))
                self._broken = True
        return self._zip

    def find(self, resource: str) -> bytes | None:
        zf = self._open()
        if zf is None or self._names is None:
            return None
        name = self.prefix + resource
        if name not in self._names:
            return None
        try:
            return zf.read(name)
        except (zipfile.BadZipFile, zlib.error, OSError) as e:
            log.warning("classpath.bad_entry", path=str(self.path), entry=name, error=str(e))
            return None

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None


def _make_entry(path: Path) -> _DirectoryEntry | _ArchiveEntry | None:
    if path.is_dir():
        return _DirectoryEntry(path)
    if not path.is_file():
        log.warning("classpath.missing_entry", path=str(path))
        return None
    if path.suffix == ".jmod":
        return _ArchiveEntry(path, JMOD_CLASSES_PREFIX)
    return _ArchiveEntry(path)


def jdk_entries(java_home: Path) -> list[Path]:
    """Runtime class locations of a JDK installation.

    JDK 9+ ships ``jmods/*.jmod``; older JDKs keep ``rt.jar`` and friends in
    ``jre/lib`` (JDK) or ``lib`` (JRE).
    """
    jmods = java_home / "jmods"
    if jmods.is_dir():
        return sorted(jmods.glob("*.jmod"))
    for lib in (java_home / "jre" / "lib", java_home / "lib"):
        if (lib / "rt.jar").is_file():
            return sorted(lib.glob("*.jar"))
    log.warning("classpath.no_jdk_runtime", java_home=str(java_home))
    return []


class Classpath:
    """Ordered class lookup over directories and archives.

    Usage::

        with Classpath.from_config(config.check) as classpath:
            data = classpath.find("java/lang/String.class")
    """

    def __init__(self, paths: Iterable[Path] = ()) -> None:
        self._paths = [Path(p) for p in paths]
        self._entries = [e for e in (_make_entry(p) for p in self._paths) if e is not None]

    @classmethod
    def from_config(cls, config: CheckConfig) -> Classpath:
        paths = [Path(p).expanduser() for p in config.classpath]
        if config.java_home:
            paths.extend(jdk_entries(Path(config.java_home).expanduser()))
        return cls(paths)

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def find(self, resource: str) -> bytes | None:
        for entry in self._entries:
            data = entry.find(resource)
            if data is not None:
                return data
        return None

    def close(self) -> None:
        for entry in self._entries:
            entry.close()

    def __enter__(self) -> Classpath:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
