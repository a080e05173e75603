import base64
import hashlib
from typing import Iterable


def hash_id(parts: Iterable[str]) -> str:
    """
    Stable id for an ordered sequence of string parts.

    SHA-256 over the UTF-8 bytes of each part in order, URL-safe base64
    without padding (43 characters).
    """
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.encode("utf-8"))
    return base64.urlsafe_b64encode(digest.digest()).rstrip(b"=").decode("ascii")
