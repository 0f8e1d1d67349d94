"""GitHub webhook signature verification."""

import hashlib
import hmac
import string
from typing import Mapping, Optional


# prefix -> (digest, hex length)
SIGNATURE_FORMS = {
    "sha256=": (hashlib.sha256, 64),
    "sha1=": (hashlib.sha1, 40),
}

SIGNATURE_256_HEADER = "X-Hub-Signature-256"
SIGNATURE_HEADER = "X-Hub-Signature"


def verify_github_signature(secret: Optional[str], body: bytes, signature: Optional[str]) -> bool:
    """Check ``signature`` (``sha1=<hex>`` or ``sha256=<hex>``) against ``body``.

    Malformed signatures and an empty secret never verify.
    """
    if not secret or not signature:
        return False

    for prefix, (digest, length) in SIGNATURE_FORMS.items():
        if not signature.startswith(prefix):
            continue

        received = signature[len(prefix):]
        if len(received) != length or not all(c in string.hexdigits for c in received):
            return False

        expected = hmac.new(secret.encode(), body, digest).hexdigest()
        return hmac.compare_digest(expected, received.lower())

    return False


def github_signature(headers: Mapping[str, str]) -> Optional[str]:
    """Pick the strongest signature header present."""
    for name in (SIGNATURE_256_HEADER, SIGNATURE_HEADER):
        value = headers.get(name)
        if value:
            return value
    return None


def verify_github_request(secret: Optional[str], headers: Mapping[str, str], body: bytes) -> bool:
    return verify_github_signature(secret, body, github_signature(headers))
