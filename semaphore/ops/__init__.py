"""Operational tooling for Semaphore."""
