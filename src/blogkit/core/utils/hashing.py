"""SHA-256 content hashing for post change detection"""

import hashlib
import json
from typing import Any


def sha256(content: str) -> str:
    """Return hex-encoded SHA-256 hash of content (64 chars, matches String(64) column)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def sha256_json(data: Any) -> str:
    """Hash a JSON-serializable value with stable key order."""
    return sha256(json.dumps(data, sort_keys=True, default=str, ensure_ascii=False))
