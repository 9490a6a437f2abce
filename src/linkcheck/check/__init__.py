"""Fact store, closure and resolution."""

from linkcheck.check.closure import ClassLookup, ClosureResolver, ClosureStats
from linkcheck.check.resolver import LinkResolver
from linkcheck.check.runner import (
    CheckReport,
    CheckRequest,
    CheckStats,
    LinkChecker,
    LinkError,
    run_check,
)
from linkcheck.check.store import CheckedSink, FactStore, LibrarySink, UseFact
from linkcheck.check.whitelist import Whitelist, is_whitelisted

__all__ = [
    "CheckReport",
    "CheckRequest",
    "CheckStats",
    "CheckedSink",
    "ClassLookup",
    "ClosureResolver",
    "ClosureStats",
    "FactStore",
    "LibrarySink",
    "LinkChecker",
    "LinkError",
    "LinkResolver",
    "UseFact",
    "Whitelist",
    "is_whitelisted",
    "run_check",
]
