"""Shared Access Signature tokens for the Service Bus REST API."""
from __future__ import annotations

import base64
import hashlib
import hmac
import time
from urllib.parse import quote

TOKEN_TTL_S = 3600
TOKEN_FORMAT = "SharedAccessSignature sig={sig}&se={se}&skn={skn}&sr={sr}"


def encode_resource(uri: str) -> str:
    # lower-cased again after encoding; the service compares against this exact form
    return quote(uri.lower(), safe="").lower()


def generate_sas_token(uri: str, key_name: str, key_value: str, *, now: float | None = None) -> str:
    """Return an ``Authorization`` header value scoped to ``uri``.

    The token expires ``TOKEN_TTL_S`` seconds after ``now`` (defaults to the
    current wall-clock time). A new token is produced on every call.
    """
    expires = int(time.time() if now is None else now) + TOKEN_TTL_S
    target = encode_resource(uri)
    to_sign = f"{target}\n{expires}"
    digest = hmac.new(key_value.encode("utf-8"), to_sign.encode("utf-8"), hashlib.sha256).digest()
    sig = quote(base64.b64encode(digest).decode("ascii"), safe="")
    return TOKEN_FORMAT.format(sig=sig, se=expires, skn=key_name, sr=target)
