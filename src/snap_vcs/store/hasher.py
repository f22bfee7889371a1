"""
Content fingerprinting for snapshots.

A fingerprint is the hex-encoded SHA-1 digest of the concatenated byte
content of every tracked file. SHA-1 keeps fingerprints compatible with
snapshot directories written by earlier versions of the tool; it is used
for integrity and deduplication only, not for any security property.
"""

from __future__ import annotations

import hashlib
import re
from typing import Iterable

ALGORITHM = "sha1"

_FINGERPRINT_RE = re.compile(r"[0-9a-f]{40}")


def fingerprint(data: bytes) -> str:
    """Return the hex digest of ``data``.

    >>> fingerprint(b"hello")
    'aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d'
    """
    return fingerprint_chunks([data])


def fingerprint_chunks(chunks: Iterable[bytes]) -> str:
    """Return the digest of the concatenation of ``chunks``.

    Equivalent to ``fingerprint(b"".join(chunks))`` but never holds the
    whole concatenation in memory.
    """
    digest = hashlib.new(ALGORITHM)
    for chunk in chunks:
        digest.update(chunk)
    return digest.hexdigest()


def is_fingerprint(value: str) -> bool:
    """Return True if ``value`` is syntactically a fingerprint."""
    return bool(_FINGERPRINT_RE.fullmatch(value or ""))


EMPTY_FINGERPRINT = fingerprint(b"")
