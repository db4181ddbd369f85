# slackmud/signature.py
"""
Verifies that webhook requests were signed by Slack.

Slack signs each request with HMAC-SHA256 over "v0:{timestamp}:{raw body}"
using the app's signing secret and sends the result as "v0=<hexdigest>".
"""
import hashlib
import hmac
import logging
import time
from typing import Callable, Optional, Union

import config
from .errors import Unauthorized

log = logging.getLogger(__name__)

TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"


class SignatureVerifier:
    """Pure validation gate run before a request body is parsed."""

    def __init__(self, signing_secret: str,
                 max_skew_seconds: int = config.SIGNATURE_MAX_SKEW_SECONDS,
                 version: str = config.SIGNATURE_VERSION,
                 clock: Callable[[], float] = time.time):
        self.signing_secret = signing_secret.encode(config.ENCODING)
        self.max_skew_seconds = max_skew_seconds
        self.version = version
        self.clock = clock

    def sign(self, body: Union[bytes, str], timestamp: Union[int, str]) -> str:
        if isinstance(body, str):
            body = body.encode(config.ENCODING)
        base = f"{self.version}:{timestamp}:".encode(config.ENCODING) + body
        digest = hmac.new(self.signing_secret, base, hashlib.sha256).hexdigest()
        return f"{self.version}={digest}"

    def verify(self, body: bytes, timestamp: Optional[str], signature: Optional[str]) -> None:
        """Raises Unauthorized unless the signature is fresh and matches the body."""
        if not timestamp:
            raise Unauthorized("Missing request timestamp")
        try:
            ts = int(timestamp)
        except (TypeError, ValueError):
            raise Unauthorized("Unparseable request timestamp")

        if abs(self.clock() - ts) > self.max_skew_seconds:
            log.warning("Rejected request with stale timestamp %s", timestamp)
            raise Unauthorized("Stale request timestamp")

        if not signature:
            raise Unauthorized("Missing request signature")

        expected = self.sign(body, timestamp)
        if not hmac.compare_digest(expected.encode(config.ENCODING), signature.encode(config.ENCODING)):
            log.warning("Rejected request with invalid signature.")
            raise Unauthorized("Signature mismatch")
