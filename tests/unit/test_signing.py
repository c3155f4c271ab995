"""Tests for request signing."""

from __future__ import annotations

import base64
import hashlib
import hmac
from urllib.parse import parse_qs, quote_plus

from cks.auth import Credentials, RequestSigner, canonicalize, encode_params


def _signer() -> RequestSigner:
    return RequestSigner(
        Credentials(api_key="AbCdEf", secret_key="s3cr3t", endpoint="https://x/client/api")
    )


class TestEncodeParams:
    """Test parameter encoding."""

    def test_keys_are_sorted_ordinally(self) -> None:
        """Uppercase keys sort before lowercase ones."""
        assert encode_params({"b": "1", "a": "2", "Z": "3"}) == "Z=3&a=2&b=1"

    def test_values_are_percent_encoded(self) -> None:
        """Spaces become '+' and reserved characters are escaped."""
        assert encode_params({"name": "a b/c=d"}) == "name=a+b%2Fc%3Dd"

    def test_unreserved_characters_are_kept(self) -> None:
        """Unreserved characters pass through unchanged."""
        assert encode_params({"id": "Ab-9_.~"}) == "id=Ab-9_.~"


class TestCanonicalize:
    """Test the canonical form used for signing."""

    def test_lowercases_and_replaces_plus(self) -> None:
        """Canonical form is lower case with %20 for spaces."""
        assert canonicalize("Name=A+B&apiKey=XyZ") == "name=a%20b&apikey=xyz"


class TestRequestSigner:
    """Test RequestSigner."""

    def test_adds_fixed_parameters(self) -> None:
        """command, response and apiKey are always present."""
        signed = _signer().sign("listKubernetesClusters", {"id": "C1"})
        params = parse_qs(signed.query)

        assert params["command"] == ["listKubernetesClusters"]
        assert params["response"] == ["json"]
        assert params["apiKey"] == ["AbCdEf"]
        assert params["id"] == ["C1"]
        assert params["signature"] == [signed.signature]

    def test_signing_ignores_insertion_order(self) -> None:
        """Same parameters in any order give identical output."""
        signer = _signer()
        first = signer.sign("scaleKubernetesCluster", {"id": "C1", "size": "3", "name": "x"})
        second = signer.sign("scaleKubernetesCluster", {"name": "x", "size": "3", "id": "C1"})

        assert first == second

    def test_query_keeps_original_case(self) -> None:
        """The transmitted query is not lower-cased, only the signed form is."""
        signed = _signer().sign("listKubernetesClusters", {"name": "My Cluster"})

        assert "command=listKubernetesClusters" in signed.query
        assert "apiKey=AbCdEf" in signed.query
        assert "name=My+Cluster" in signed.query
        assert signed.canonical == signed.canonical.lower()
        assert "+" not in signed.canonical
        assert "name=my%20cluster" in signed.canonical

    def test_signature_is_hmac_sha1_of_canonical_form(self) -> None:
        """Signature is base64 HMAC-SHA1 over the canonical string."""
        signed = _signer().sign("listKubernetesClusters", {"id": "C1"})

        expected_canonical = "apikey=abcdef&command=listkubernetesclusters&id=c1&response=json"
        digest = hmac.new(b"s3cr3t", expected_canonical.encode(), hashlib.sha1).digest()
        expected = base64.b64encode(digest).decode()

        assert signed.canonical == expected_canonical
        assert signed.signature == expected
        assert signed.query.endswith(f"&signature={quote_plus(expected, safe='')}")

    def test_signature_depends_on_secret(self) -> None:
        """A different secret gives a different signature."""
        other = RequestSigner(
            Credentials(api_key="AbCdEf", secret_key="other", endpoint="https://x/client/api")
        )
        params = {"id": "C1"}

        assert other.sign("listKubernetesClusters", params).signature != (
            _signer().sign("listKubernetesClusters", params).signature
        )

    def test_credentials_repr_hides_keys(self) -> None:
        """Keys never show up in repr."""
        text = repr(Credentials(api_key="AbCdEf", secret_key="s3cr3t", endpoint="https://x"))

        assert "AbCdEf" not in text
        assert "s3cr3t" not in text
