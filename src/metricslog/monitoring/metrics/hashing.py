"""Privacy hashes for names that must not appear in clear in the legacy encoding."""

from __future__ import annotations

import base64
import hashlib


def hash_name(value: str) -> str:
    """Hash ``value`` one way.

    The hash is the first eight bytes of the MD5 digest of the UTF-8 text,
    base64 encoded.
    """
    digest = hashlib.md5(value.encode("utf-8"), usedforsecurity=False).digest()[:8]
    return base64.b64encode(digest).decode("ascii")


__all__ = ["hash_name"]
