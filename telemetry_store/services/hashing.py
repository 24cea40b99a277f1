"""
Content fingerprints used as the deduplication key
"""

import hashlib


def fingerprint(canonical: str | bytes) -> str:
    """SHA-256 hex digest of the canonical payload (UTF-8 for text)."""
    if isinstance(canonical, str):
        canonical = canonical.encode("utf-8")
    return hashlib.sha256(canonical).hexdigest()
