"""Semaphore server runtime configuration."""

__version__ = "2.8.0"
