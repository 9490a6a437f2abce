"""Find checked and library jars from a build artifacts tree.

Layout::

    <artifacts_dir>/weak/<package>/strong/<dependency>/jars/*.jar

Jars of the ``<package>`` directory itself are checked; jars of every other
dependency directory are libraries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from linkcheck.core.errors import InputError
from linkcheck.core.logging import get_logger

log = get_logger("discovery")


@dataclass
class DiscoveredArtifacts:
    checks: list[Path] = field(default_factory=list)
    libs: list[Path] = field(default_factory=list)


def discover_artifacts(artifacts_dir: Path, package: str) -> DiscoveredArtifacts:
    """Partition the jars under ``artifacts_dir`` for ``package``.

    Raises:
        InputError: If the package's ``strong`` directory does not exist.
    """
    strong = artifacts_dir / "weak" / package / "strong"
    if not strong.is_dir():
        raise InputError.not_found(str(strong))

    result = DiscoveredArtifacts()
    for package_dir in sorted(strong.iterdir()):
        jars_dir = package_dir / "jars"
        if not jars_dir.is_dir():
            continue
        for jar in sorted(jars_dir.iterdir()):
            if not (jar.is_file() and jar.name.endswith(".jar")):
                continue
            if package_dir.name == package:
                result.checks.append(jar)
            else:
                result.libs.append(jar)

    log.info(
        "discovery.complete",
        package=package,
        checks=len(result.checks),
        libs=len(result.libs),
    )
    return result
