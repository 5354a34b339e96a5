"""Request signing for authenticated P2PB2B endpoints.

Every private call carries three headers:

- `X-TXC-APIKEY`: the public API key
- `X-TXC-PAYLOAD`: base64 of the exact request body bytes
- `X-TXC-SIGNATURE`: hex HMAC-SHA512 of the base64 payload string, keyed by the secret

The signature is computed over the base64 string, not over the raw JSON.
"""
import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Dict

HEADER_API_KEY = "X-TXC-APIKEY"
HEADER_PAYLOAD = "X-TXC-PAYLOAD"
HEADER_SIGNATURE = "X-TXC-SIGNATURE"


@dataclass(frozen=True)
class Credentials:
    api_key: str
    api_secret: str

    def __repr__(self) -> str:
        return f"Credentials(api_key={self.api_key!r}, api_secret='***')"


def encode_payload(body: bytes) -> str:
    return base64.b64encode(body).decode("ascii")


def sign_payload(payload: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("ascii"), hashlib.sha512).hexdigest()


class Signer:
    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def headers(self, body: bytes) -> Dict[str, str]:
        """Return the authentication headers for a serialized request body."""
        payload = encode_payload(body)
        return {
            HEADER_API_KEY: self.credentials.api_key,
            HEADER_PAYLOAD: payload,
            HEADER_SIGNATURE: sign_payload(payload, self.credentials.api_secret),
        }


__all__ = [
    "Credentials",
    "Signer",
    "encode_payload",
    "sign_payload",
    "HEADER_API_KEY",
    "HEADER_PAYLOAD",
    "HEADER_SIGNATURE",
]
