"""Request signing for the CloudStack API.

The management server authenticates every call by an HMAC-SHA1 signature
over a canonical form of the query string:

1. The command parameters are merged with ``command``, ``response=json``
   and ``apiKey``.
2. Keys are sorted and values are percent-encoded (``+`` for spaces).
3. The joined string is lower-cased and ``+`` is replaced with ``%20``.
4. The base64 digest of that canonical string, percent-encoded, is sent as
   ``signature`` next to the original-case query string.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote_plus


@dataclass(frozen=True)
class Credentials:
    """API credentials and management server endpoint.

    Example:
        ```python
        credentials = Credentials(
            api_key="...",
            secret_key="...",
            endpoint="https://cloud.example.com/client/api",
        )
        ```

    Attributes:
        api_key: API key of the account owning the cluster.
        secret_key: Secret key used to sign requests.
        endpoint: Full URL of the API endpoint.
    """

    api_key: str = field(repr=False)  # Never log keys
    secret_key: str = field(repr=False)
    endpoint: str


@dataclass(frozen=True)
class SignedQuery:
    """Query string ready to be sent, with the signature it carries."""

    query: str
    canonical: str
    signature: str


class RequestSigner:
    """Builds signed query strings for API commands.

    Signing is deterministic: the same command and parameter set produce
    the same query string regardless of the mapping's insertion order.
    """

    def __init__(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def sign(self, command: str, params: Mapping[str, str] | None = None) -> SignedQuery:
        """Encode and sign a command.

        Args:
            command: API command name, e.g. ``listKubernetesClusters``.
            params: Command parameters. Keys must be unique.

        Returns:
            SignedQuery with the query string to transmit.
        """
        merged = dict(params or {})
        merged["command"] = command
        merged["response"] = "json"
        merged["apiKey"] = self._credentials.api_key

        encoded = encode_params(merged)
        canonical = canonicalize(encoded)
        signature = compute_signature(canonical, self._credentials.secret_key)
        query = f"{encoded}&signature={quote_plus(signature, safe='')}"
        return SignedQuery(query=query, canonical=canonical, signature=signature)


def encode_params(params: Mapping[str, str]) -> str:
    """Join parameters as ``key=value`` pairs in sorted key order."""
    return "&".join(f"{key}={quote_plus(str(params[key]), safe='')}" for key in sorted(params))


def canonicalize(encoded: str) -> str:
    """Return the form of an encoded query string that gets signed."""
    return encoded.lower().replace("+", "%20")


def compute_signature(canonical: str, secret_key: str) -> str:
    """Base64 HMAC-SHA1 of the canonical query string."""
    digest = hmac.new(secret_key.encode(), canonical.encode(), hashlib.sha1).digest()
    return base64.b64encode(digest).decode()
