"""Derive the cookie authenticator and public web host from the document."""

from __future__ import annotations

import base64
import binascii
from enum import Enum
import re
from urllib.parse import ParseResult, urlparse

from semaphore.config.document import ConfigType
from semaphore.errors import MalformedSecretError
from semaphore.logging import get_logger
from semaphore.security.cookie import SecureCookie

logger = get_logger(__name__)

# A "%" not followed by two hex digits, or an ASCII control character.
_INVALID_URL_TEXT = re.compile(r"%(?![0-9A-Fa-f]{2})|[\x00-\x1f\x7f]")


class SecretDecodePolicy(str, Enum):
    """How to treat a cookie secret that is not valid base64."""

    LENIENT = "lenient"
    STRICT = "strict"


DEFAULT_SECRET_POLICY = SecretDecodePolicy.LENIENT


def decode_secret(
    value: str,
    *,
    field: str,
    policy: SecretDecodePolicy = DEFAULT_SECRET_POLICY,
) -> bytes:
    """Decode a standard base64 secret.

    Under the lenient policy a malformed value decodes to empty bytes, so a
    broken ``cookie_encryption`` silently disables encryption and a broken
    ``cookie_hash`` leaves the authenticator unusable.  The strict policy
    raises :class:`MalformedSecretError` instead.
    """

    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        if policy is SecretDecodePolicy.STRICT:
            raise MalformedSecretError(field) from exc
        logger.warning(
            "Ignoring malformed %s; treating it as empty",
            field,
            extra={"event": "config.secret.malformed", "field": field},
        )
        return b""


def parse_web_host(web_host: str) -> ParseResult | None:
    """Return the parsed public URL, or ``None`` when it is unusable.

    Broken percent-escapes and control characters count as parse errors.
    """

    if _INVALID_URL_TEXT.search(web_host):
        return None
    try:
        parsed = urlparse(web_host)
    except ValueError:
        return None
    if not parsed.geturl():
        return None
    return parsed


def provision_secrets(
    conf: ConfigType,
    *,
    policy: SecretDecodePolicy = DEFAULT_SECRET_POLICY,
) -> tuple[SecureCookie, ParseResult | None]:
    hash_key = decode_secret(conf.cookie_hash, field="cookie_hash", policy=policy)
    encryption_key = b""
    if conf.cookie_encryption:
        encryption_key = decode_secret(
            conf.cookie_encryption, field="cookie_encryption", policy=policy
        )

    cookie = SecureCookie(hash_key, encryption_key or None)
    if cookie.error is not None:
        logger.warning(
            "Cookie authenticator is not usable: %s",
            cookie.error,
            extra={"event": "config.cookie.unusable"},
        )

    web_host_url = parse_web_host(conf.web_host)
    return cookie, web_host_url


__all__ = [
    "DEFAULT_SECRET_POLICY",
    "SecretDecodePolicy",
    "decode_secret",
    "parse_web_host",
    "provision_secrets",
]
