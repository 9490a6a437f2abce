"""linkcheck - link-integrity checking for compiled JVM classes."""

__version__ = "0.1.0"
