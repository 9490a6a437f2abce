"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI flags)
2. Environment variables (LINKCHECK__SECTION__KEY)
3. Project YAML (linkcheck.yaml, or --config FILE)
4. Global YAML (~/.config/linkcheck/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    LINKCHECK__<SECTION>__<KEY>=<VALUE>

Examples:
    LINKCHECK__LOGGING__LEVEL=DEBUG
    LINKCHECK__CHECK__JAVA_HOME=/usr/lib/jvm/java-17
    LINKCHECK__DISCOVERY__ARTIFACTS_DIR=/build/artifacts
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LINKCHECK__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every classpath lookup.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CheckConfig(BaseModel):
    """What to trust and where to look up referenced classes.

    Env vars:
        LINKCHECK__CHECK__JAVA_HOME: JDK whose runtime classes form the ambient classpath
        LINKCHECK__CHECK__CLASSPATH: JSON list of directories/jars/jmods
    """

    whitelist_from: list[str] = Field(
        default_factory=list,
        description="Never report references made from classes under these prefixes.",
    )
    whitelist_to: list[str] = Field(
        default_factory=list,
        description="Never report references to classes under these prefixes.",
    )
    classpath: list[str] = Field(
        default_factory=list,
        description="Ambient classpath searched for classes that no input declares. "
        "Entries are directories, jars, or JDK .jmod files.",
    )
    java_home: str | None = Field(
        default=None,
        description="JDK installation whose runtime classes are appended to the classpath.",
    )

    @field_validator("whitelist_from", "whitelist_to")
    @classmethod
    def normalize_prefixes(cls, v: list[str]) -> list[str]:
        normalized = []
        for prefix in v:
            prefix = prefix.strip().replace(".", "/").rstrip("/")
            if not prefix:
                raise ValueError("Whitelist prefixes must not be empty")
            normalized.append(prefix)
        return normalized


class DiscoveryConfig(BaseModel):
    """Artifact-directory convention discovery.

    Env vars:
        LINKCHECK__DISCOVERY__ARTIFACTS_DIR: Root holding weak/<package>/strong/...
    """

    artifacts_dir: str | None = Field(
        default=None,
        description="Root of the build artifacts tree used by --qbtDefaults.",
    )


class LinkCheckConfig(BaseModel):
    """Root configuration for linkcheck.

    All settings can be configured via:
    1. Environment variables: LINKCHECK__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
