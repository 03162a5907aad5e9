"""Signed and optionally encrypted cookie values."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Callable
import hashlib
import hmac
import json
import secrets
import time
from typing import Any, Final

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from semaphore.errors import CookieError

DEFAULT_MAX_AGE: Final[int] = 86400 * 30
_NONCE_BYTES: Final[int] = 12
_TAG_BYTES: Final[int] = 16
_BLOCK_KEY_LENGTHS: Final[tuple[int, ...]] = (16, 24, 32)
_SEPARATOR: Final[bytes] = b"|"


def generate_random_key(length: int = 32) -> bytes:
    return secrets.token_bytes(length)


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data)


def _b64decode(data: bytes) -> bytes:
    try:
        return base64.urlsafe_b64decode(data)
    except (ValueError, binascii.Error) as exc:
        raise CookieError("the value is not valid base64") from exc


class SecureCookie:
    """Authenticate (and, with a block key, encrypt) cookie payloads.

    Tokens are ``base64(timestamp|payload|mac)`` where the MAC is an
    HMAC-SHA256 over the cookie name, timestamp and payload.  When a block
    key is configured the JSON payload is sealed with AES-GCM first, using the
    cookie name as associated data.

    Construction never fails.  A missing hash key or a block key of the wrong
    size is recorded in :attr:`error` and raised on first use.
    """

    def __init__(
        self,
        hash_key: bytes,
        block_key: bytes | None = None,
        *,
        max_age: int = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._hash_key = bytes(hash_key)
        self._block_key = bytes(block_key) if block_key else None
        self._cipher: AESGCM | None = None
        self._clock = clock
        self.max_age = max_age
        self.error: str | None = None

        if not self._hash_key:
            self.error = "hash key is not set"
        elif self._block_key is not None:
            if len(self._block_key) not in _BLOCK_KEY_LENGTHS:
                self.error = f"invalid block key length: {len(self._block_key)}"
            else:
                self._cipher = AESGCM(self._block_key)

    @property
    def can_encrypt(self) -> bool:
        return self._block_key is not None

    def _ensure_usable(self) -> None:
        if self.error is not None:
            raise CookieError(self.error)

    def _mac(self, name: str, timestamp: bytes, payload: bytes) -> bytes:
        message = _SEPARATOR.join((name.encode("utf-8"), timestamp, payload))
        return hmac.new(self._hash_key, message, hashlib.sha256).digest()

    def encode(self, name: str, value: Any) -> str:
        self._ensure_usable()
        payload = json.dumps(value, separators=(",", ":")).encode("utf-8")
        if self._cipher is not None:
            nonce = secrets.token_bytes(_NONCE_BYTES)
            payload = nonce + self._cipher.encrypt(nonce, payload, name.encode("utf-8"))
        payload = _b64encode(payload)
        timestamp = str(int(self._clock())).encode("ascii")
        mac = self._mac(name, timestamp, payload)
        token = _SEPARATOR.join((timestamp, payload, _b64encode(mac)))
        return _b64encode(token).decode("ascii")

    def decode(self, name: str, token: str) -> Any:
        self._ensure_usable()
        try:
            raw = _b64decode(token.encode("ascii"))
        except UnicodeEncodeError as exc:
            raise CookieError("the value is not valid base64") from exc

        parts = raw.split(_SEPARATOR)
        if len(parts) != 3:
            raise CookieError("the value is not valid")
        timestamp, payload, encoded_mac = parts

        expected = self._mac(name, timestamp, payload)
        if not hmac.compare_digest(_b64decode(encoded_mac), expected):
            raise CookieError("the value is not valid")

        try:
            issued_at = int(timestamp)
        except ValueError as exc:
            raise CookieError("invalid timestamp") from exc
        now = int(self._clock())
        if self.max_age > 0 and issued_at < now - self.max_age:
            raise CookieError("expired timestamp")

        data = _b64decode(payload)
        if self._cipher is not None:
            # Values signed before a block key was configured are too short.
            if len(data) < _NONCE_BYTES + _TAG_BYTES:
                raise CookieError("the value could not be decrypted")
            nonce, sealed = data[:_NONCE_BYTES], data[_NONCE_BYTES:]
            try:
                data = self._cipher.decrypt(nonce, sealed, name.encode("utf-8"))
            except (InvalidTag, ValueError) as exc:
                raise CookieError("the value could not be decrypted") from exc

        try:
            return json.loads(data)
        except ValueError as exc:
            raise CookieError("the value is not valid JSON") from exc


__all__ = ["DEFAULT_MAX_AGE", "SecureCookie", "generate_random_key"]
