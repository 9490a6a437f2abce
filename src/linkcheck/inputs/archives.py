"""Turn --check / --lib arguments into class file byte streams."""

from __future__ import annotations

import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from linkcheck.core.errors import InputError
from linkcheck.core.formatting import compress_path
from linkcheck.core.progress import progress

CLASS_SUFFIX = ".class"
ARCHIVE_SUFFIXES = (".jar", ".zip")


@dataclass(frozen=True, slots=True)
class ClassUnit:
    """One compiled class and where it came from."""

    origin: str
    data: bytes


def is_archive(path: Path) -> bool:
    return path.suffix.lower() in ARCHIVE_SUFFIXES


def is_class_file(path: Path) -> bool:
    return path.suffix.lower() == CLASS_SUFFIX


def iter_units(path: Path) -> Iterator[ClassUnit]:
    """Yield every class file an input path contains.

    - ``.jar``/``.zip``: each ``*.class`` entry, in archive order. Entry names
      are matched exactly, as a class loader would; suffixes of paths on disk
      ignore case.
    - ``.class``: the file itself
    - directory: every ``*.class`` below it, sorted by path

    Raises:
        InputError: If the path does not exist, is of an unknown kind, or is
            an unreadable archive.
    """
    if not path.exists():
        raise InputError.not_found(str(path))

    if path.is_dir():
        for class_file in sorted(path.rglob("*")):
            if is_class_file(class_file) and class_file.is_file():
                yield ClassUnit(str(class_file), class_file.read_bytes())
        return

    if is_archive(path):
        yield from _iter_archive(path)
        return

    if is_class_file(path):
        yield ClassUnit(str(path), path.read_bytes())
        return

    raise InputError.unrecognized_path(str(path))


def _iter_archive(path: Path) -> Iterator[ClassUnit]:
    try:
        zf = zipfile.ZipFile(path)
    except (zipfile.BadZipFile, OSError) as e:
        raise InputError.bad_archive(str(path), str(e)) from e

    with zf:
        entries = [
            info
            for info in zf.infolist()
            if not info.is_dir() and info.filename.endswith(CLASS_SUFFIX)
        ]
        for info in progress(entries, desc=compress_path(str(path)), unit="classes"):
            try:
                data = zf.read(info)
            except (zipfile.BadZipFile, zlib.error, OSError) as e:
                raise InputError.bad_archive(str(path), f"{info.filename}: {e}") from e
            yield ClassUnit(f"{path}!/{info.filename}", data)
