"""Unit tests for HEAD-then-GET manifest resolution."""

import pytest

from conftest import DIGEST_A, FakeManifestClient
from imagecheck.core.resolver import NOT_FOUND, resolve
from imagecheck.registry.base import RegistryAuthError, RegistryError, RegistryNotFoundError, RequestOptions, is_not_found
from imagecheck.registry.reference import parse_repository

REF = parse_repository("ghcr.io/org/app").tag("latest")
KEY = str(REF)


class TestIsNotFound:
    """Tests for the not-found predicate."""

    def test_not_found_error(self):
        assert is_not_found(RegistryNotFoundError("x"))

    def test_status_code_404(self):
        assert is_not_found(RegistryError("gone", status_code=404))

    def test_other_status(self):
        assert not is_not_found(RegistryError("boom", status_code=500))
        assert not is_not_found(RegistryAuthError())

    def test_no_status(self):
        assert not is_not_found(RegistryError("connection refused"))

    def test_message_is_not_inspected(self):
        """Test classification uses the status code, not the message."""
        assert not is_not_found(RegistryError("404 not found"))

    def test_foreign_errors(self):
        assert not is_not_found(ValueError("not found"))


class TestResolve:
    """Tests for resolve."""

    def test_head_success(self):
        """Test a successful HEAD never issues a GET."""
        client = FakeManifestClient(manifests={KEY: DIGEST_A})
        result = resolve(client, REF, RequestOptions())
        assert result.found is True
        assert result.digest == DIGEST_A
        assert client.verbs_for(KEY) == ["HEAD"]

    def test_head_not_found_is_authoritative(self):
        """Test a HEAD not-found is a negative result without a GET."""
        client = FakeManifestClient()
        result = resolve(client, REF, RequestOptions())
        assert result == NOT_FOUND
        assert client.verbs_for(KEY) == ["HEAD"]

    def test_head_error_falls_back_to_get(self):
        """Test HEAD failures other than not-found fall back to GET."""
        client = FakeManifestClient(
            manifests={KEY: DIGEST_A},
            head_errors={KEY: RegistryError("method not allowed", status_code=405)},
        )
        result = resolve(client, REF, RequestOptions())
        assert result.found is True
        assert result.digest == DIGEST_A
        assert client.verbs_for(KEY) == ["HEAD", "GET"]

    def test_head_transport_error_falls_back_to_get(self):
        client = FakeManifestClient(
            manifests={KEY: DIGEST_A},
            head_errors={KEY: RegistryError("connection reset")},
        )
        assert resolve(client, REF, RequestOptions()).digest == DIGEST_A

    def test_get_not_found(self):
        """Test a GET not-found after a failed HEAD is a negative result."""
        client = FakeManifestClient(head_errors={KEY: RegistryError("bad gateway", status_code=502)})
        result = resolve(client, REF, RequestOptions())
        assert result == NOT_FOUND
        assert client.verbs_for(KEY) == ["HEAD", "GET"]

    def test_get_error_propagates(self):
        """Test any other GET failure is a hard error."""
        get_error = RegistryAuthError("denied", status_code=403)
        client = FakeManifestClient(
            head_errors={KEY: RegistryError("bad gateway", status_code=502)},
            get_errors={KEY: get_error},
        )
        with pytest.raises(RegistryAuthError) as exc_info:
            resolve(client, REF, RequestOptions())
        assert exc_info.value is get_error

    def test_options_are_forwarded(self, linux_amd64):
        """Test credentials and platform reach the client."""
        client = FakeManifestClient(manifests={KEY: DIGEST_A})
        options = RequestOptions(platform=linux_amd64)
        resolve(client, REF, options)
        assert client.calls[0][2] is options
