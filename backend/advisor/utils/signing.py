"""Catalog request signer.

The affiliate catalog authenticates each request with four headers. The
signature is RSA PKCS#1 v1.5 / SHA-256 over
``"{consumer_id}\\n{timestamp_ms}\\n{key_version}\\n"``, base64-encoded.

The catalog client never imports this module; it receives a signer as an
opaque header provider.
"""

from __future__ import annotations

import base64
import time
from collections.abc import Callable

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey


class CatalogSigner:
    def __init__(
        self,
        consumer_id: str,
        key_version: str,
        private_key_pem: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.consumer_id = consumer_id
        self.key_version = key_version
        self._clock = clock
        self._private_key = self._load_private_key(private_key_pem)

    @staticmethod
    def _load_private_key(pem: str) -> RSAPrivateKey:
        try:
            key = serialization.load_pem_private_key(pem.encode(), password=None)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Failed to load catalog private key: {e}") from e
        if not isinstance(key, RSAPrivateKey):
            raise ValueError("Catalog private key must be an RSA key")
        return key

    def string_to_sign(self, timestamp_ms: int) -> str:
        return f"{self.consumer_id}\n{timestamp_ms}\n{self.key_version}\n"

    def sign(self, timestamp_ms: int) -> str:
        signature = self._private_key.sign(
            self.string_to_sign(timestamp_ms).encode(),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
        return base64.b64encode(signature).decode()

    def __call__(self) -> dict[str, str]:
        timestamp_ms = round(self._clock() * 1000)
        return {
            "WM_CONSUMER.ID": self.consumer_id,
            "WM_CONSUMER.INTIMESTAMP": str(timestamp_ms),
            "WM_SEC.KEY_VERSION": self.key_version,
            "WM_SEC.AUTH_SIGNATURE": self.sign(timestamp_ms),
        }
