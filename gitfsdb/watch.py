"""Digests used for poll-based change detection.

Tree nodes compare listing digests to spot entries appearing or vanishing on
disk; the database compares git output digests to spot status changes.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

DIGEST_SIZE = 20


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def build_listing_digest(paths: Iterable[str]) -> bytes:
    """Digest a directory listing given as the entry paths in listing order."""
    digest = hashlib.blake2b(digest_size=DIGEST_SIZE)
    for path in paths:
        _update_digest(digest, path)
    return digest.digest()


def build_text_digest(raw: bytes) -> bytes:
    """Digest raw command output."""
    return hashlib.blake2b(raw, digest_size=DIGEST_SIZE).digest()


__all__ = [
    "DIGEST_SIZE",
    "build_listing_digest",
    "build_text_digest",
]
