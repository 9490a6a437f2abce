"""Config module exports."""

from linkcheck.config.loader import load_config
from linkcheck.config.models import (
    CheckConfig,
    DiscoveryConfig,
    LinkCheckConfig,
    LoggingConfig,
)

__all__ = [
    "load_config",
    "CheckConfig",
    "DiscoveryConfig",
    "LinkCheckConfig",
    "LoggingConfig",
]
