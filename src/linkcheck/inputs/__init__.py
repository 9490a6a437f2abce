"""Input acquisition: archives, the ambient classpath and artifact discovery."""

from linkcheck.inputs.archives import ClassUnit, is_archive, iter_units
from linkcheck.inputs.classpath import Classpath, jdk_entries
from linkcheck.inputs.discovery import DiscoveredArtifacts, discover_artifacts

__all__ = [
    "ClassUnit",
    "Classpath",
    "DiscoveredArtifacts",
    "discover_artifacts",
    "is_archive",
    "iter_units",
    "jdk_entries",
]
