"""Shared-key HMAC-SHA256 signatures over raw request bodies."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

KeyLike = Union[str, bytes]


def _key_bytes(key: KeyLike) -> bytes:
    return key.encode("utf-8") if isinstance(key, str) else key


def sign_body(key: KeyLike, body: bytes) -> str:
    """Base64 encoded HMAC-SHA256 of ``body``, as sent in ``Authorization``."""
    digest = hmac.new(_key_bytes(key), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def signature_matches(key: KeyLike, body: bytes, signature: Optional[str]) -> bool:
    if not signature or not _key_bytes(key):
        return False
    expected = sign_body(key, body)
    # Header values arrive latin-1 decoded; compare bytes so non-ASCII never raises.
    valid = hmac.compare_digest(expected.encode("ascii"), signature.strip().encode("latin-1", "replace"))
    if not valid:
        logger.warning("HMAC SHA256 signature does not match", extra={"reason": "bad signature"})
    return valid


def firmware_key_declaration(key: KeyLike) -> str:
    """Render the key as a C array declaration for station firmware."""
    data = _key_bytes(key)
    values = ", ".join(str(byte) for byte in data)
    return (
        f"#define HMAC_KEY_LENGTH {len(data)}\n"
        f"static uint8_t hmac_key[HMAC_KEY_LENGTH] = {{{values}}};"
    )
