"""
Request signer for private endpoints.

API-Sign = base64(HMAC-SHA512(base64decode(secret), path + SHA256(nonce + postdata)))
"""

import base64
import hashlib
import hmac
import time
from typing import Any, Mapping, Optional

from buzzex.core.config import decode_secret
from buzzex.transport.encoding import encode_params


def sign(path: str, params: Mapping[str, Any], secret: str, nonce: int) -> str:
    """
    Compute the message signature for a private request.

    Args:
        path: URL path, e.g. '/api/v1/trading/getinfo'
        params: Request parameters, encoded in iteration order
        secret: Base64-encoded API secret
        nonce: Request nonce

    Returns:
        Base64-encoded HMAC-SHA512 digest
    """
    message = encode_params(params)
    hash_digest = hashlib.sha256((str(nonce) + message).encode("utf-8")).digest()
    secret_bytes = decode_secret(secret)
    hmac_digest = hmac.new(secret_bytes, path.encode("utf-8") + hash_digest, hashlib.sha512).digest()
    return base64.b64encode(hmac_digest).decode("ascii")


def current_microseconds() -> int:
    return time.time_ns() // 1000


class NonceGenerator:
    """
    Strictly increasing microsecond nonces.

    Only monotonic within one generator; two clients sharing a key must be
    serialised by the caller.
    """

    def __init__(self):
        self._last: Optional[int] = None

    def next(self) -> int:
        nonce = current_microseconds()
        if self._last is not None and nonce <= self._last:
            nonce = self._last + 1
        self._last = nonce
        return nonce

    @property
    def last(self) -> Optional[int]:
        return self._last
