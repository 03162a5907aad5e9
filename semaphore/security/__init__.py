"""Security primitives used by the Semaphore server."""

from .cookie import DEFAULT_MAX_AGE, SecureCookie, generate_random_key

__all__ = ["DEFAULT_MAX_AGE", "SecureCookie", "generate_random_key"]
