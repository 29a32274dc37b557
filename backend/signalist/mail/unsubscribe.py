from __future__ import annotations

import hashlib
import hmac
import time
from urllib.parse import urlencode, urljoin

from signalist.config.settings import settings
from signalist.errors import ConfigurationError


def _secret() -> bytes:
    secret = settings.email_unsub_secret
    if not secret:
        raise ConfigurationError("EMAIL_UNSUB_SECRET must be set.")
    return secret.encode("utf-8")


def sign(email: str, timestamp: str) -> str:
    return hmac.new(_secret(), f"{email}|{timestamp}".encode("utf-8"), hashlib.sha256).hexdigest()


def verify(email: str, timestamp: str, signature: str) -> bool:
    return hmac.compare_digest(sign(email, timestamp).encode("ascii"), signature.encode("utf-8"))


def make_unsubscribe_url(email: str, timestamp: str | None = None) -> str:
    timestamp = timestamp or str(int(time.time() * 1000))
    query = urlencode({"email": email, "t": timestamp, "sig": sign(email, timestamp)})
    return f"{urljoin(settings.base_url, '/api/email/unsubscribe')}?{query}"
