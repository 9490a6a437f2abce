"""Tests for ambient classpath lookup."""

from __future__ import annotations

import zipfile
from pathlib import Path

from linkcheck.config.models import CheckConfig
from linkcheck.inputs.classpath import Classpath, jdk_entries


def _zip(path: Path, entries: dict[str, bytes]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return path


class TestClasspath:
    """Ordered lookup across entry kinds."""

    def test_given_directory_entry_when_found_then_bytes_returned(self, tmp_path: Path) -> None:
        # Given
        target = tmp_path / "classes" / "a" / "A.class"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"dir-A")

        # When
        with Classpath([tmp_path / "classes"]) as classpath:
            # Then
            assert classpath.find("a/A.class") == b"dir-A"
            assert classpath.find("a/B.class") is None

    def test_given_jar_entry_when_found_then_bytes_returned(self, tmp_path: Path) -> None:
        jar = _zip(tmp_path / "lib.jar", {"a/A.class": b"jar-A"})
        with Classpath([jar]) as classpath:
            assert classpath.find("a/A.class") == b"jar-A"

    def test_given_jmod_entry_when_found_then_classes_prefix_applied(self, tmp_path: Path) -> None:
        """jmod files keep classes under classes/."""
        jmod = _zip(
            tmp_path / "java.base.jmod",
            {"classes/java/lang/Object.class": b"jmod-Object", "lib/libjava.so": b""},
        )
        with Classpath([jmod]) as classpath:
            assert classpath.find("java/lang/Object.class") == b"jmod-Object"
            assert classpath.find("lib/libjava.so") is None

    def test_given_duplicate_class_when_found_then_first_entry_wins(self, tmp_path: Path) -> None:
        first = _zip(tmp_path / "first.jar", {"a/A.class": b"first"})
        second = _zip(tmp_path / "second.jar", {"a/A.class": b"second"})
        with Classpath([first, second]) as classpath:
            assert classpath.find("a/A.class") == b"first"

    def test_given_missing_and_broken_entries_when_found_then_skipped(self, tmp_path: Path) -> None:
        """Unusable entries are skipped rather than failing the run."""
        broken = tmp_path / "broken.jar"
        broken.write_bytes(b"not a zip")
        good = _zip(tmp_path / "good.jar", {"a/A.class": b"good"})

        with Classpath([tmp_path / "missing.jar", broken, good]) as classpath:
            assert classpath.find("a/A.class") == b"good"
            assert classpath.find("a/B.class") is None

    def test_given_config_when_built_then_classpath_then_jdk(self, tmp_path: Path) -> None:
        """Configured entries come before the JDK runtime."""
        jar = _zip(tmp_path / "lib.jar", {"java/lang/Object.class": b"shadow"})
        java_home = tmp_path / "jdk"
        _zip(java_home / "jmods" / "java.base.jmod", {"classes/java/lang/Object.class": b"real"})

        config = CheckConfig(classpath=[str(jar)], java_home=str(java_home))
        with Classpath.from_config(config) as classpath:
            assert classpath.paths == [jar, java_home / "jmods" / "java.base.jmod"]
            assert classpath.find("java/lang/Object.class") == b"shadow"


class TestJdkEntries:
    """Locating JDK runtime classes."""

    def test_given_modular_jdk_when_listed_then_sorted_jmods(self, tmp_path: Path) -> None:
        for name in ("java.sql", "java.base"):
            _zip(tmp_path / "jmods" / f"{name}.jmod", {})
        assert [p.name for p in jdk_entries(tmp_path)] == ["java.base.jmod", "java.sql.jmod"]

    def test_given_legacy_jdk_when_listed_then_jre_lib_jars(self, tmp_path: Path) -> None:
        for name in ("rt", "jce"):
            _zip(tmp_path / "jre" / "lib" / f"{name}.jar", {})
        assert [p.name for p in jdk_entries(tmp_path)] == ["jce.jar", "rt.jar"]

    def test_given_legacy_jre_when_listed_then_lib_jars(self, tmp_path: Path) -> None:
        _zip(tmp_path / "lib" / "rt.jar", {})
        assert [p.name for p in jdk_entries(tmp_path)] == ["rt.jar"]

    def test_given_empty_dir_when_listed_then_nothing(self, tmp_path: Path) -> None:
        assert jdk_entries(tmp_path) == []
