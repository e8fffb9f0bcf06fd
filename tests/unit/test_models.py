"""Unit tests for request models."""

import pytest
from pydantic import ValidationError

from conftest import DIGEST_A, DIGEST_B
from imagecheck.models.common import ErrorReport
from imagecheck.models.source import CheckRequest, RegistryMirror, Source, Version


class TestSource:
    """Tests for Source model."""

    def test_defaults(self):
        source = Source(repository="nginx")
        assert source.tag is None
        assert source.tag_or_default() == "latest"
        assert source.username == ""
        assert source.registry_mirror is None
        assert source.uses_ecr is False
        assert source.debug is False
        assert source.insecure is False

    def test_explicit_tag(self):
        assert Source(repository="nginx", tag="1.27").tag_or_default() == "1.27"

    def test_uses_ecr_requires_full_triple(self):
        assert Source(
            repository="app", aws_access_key_id="a", aws_secret_access_key="b", aws_region="c"
        ).uses_ecr
        assert not Source(repository="app", aws_access_key_id="a", aws_secret_access_key="b").uses_ecr

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            Source(repository="nginx", tags=["x"])

    def test_frozen(self):
        source = Source(repository="nginx")
        with pytest.raises(ValidationError):
            source.repository = "alpine"


class TestVersion:
    """Tests for Version model."""

    def test_equality_by_digest(self):
        assert Version(digest=DIGEST_A) == Version(digest=DIGEST_A)
        assert Version(digest=DIGEST_A) != Version(digest=DIGEST_B)

    def test_equality_is_exact(self):
        assert Version(digest=DIGEST_A) != Version(digest=DIGEST_A.upper())

    def test_str(self):
        assert str(Version(digest=DIGEST_A)) == DIGEST_A

    def test_immutable(self):
        version = Version(digest=DIGEST_A)
        with pytest.raises(ValidationError):
            version.digest = DIGEST_B


class TestCheckRequest:
    """Tests for CheckRequest model."""

    def test_optional_version(self):
        request = CheckRequest(source=Source(repository="nginx"))
        assert request.version is None

    def test_with_mirror(self):
        request = CheckRequest(
            source=Source(repository="nginx", registry_mirror=RegistryMirror(host="mirror")),
            version=Version(digest=DIGEST_A),
        )
        assert request.source.registry_mirror.username == ""


class TestErrorReport:
    """Tests for ErrorReport model."""

    def test_str(self):
        report = ErrorReport(code="INVALID_SOURCE", message="bad repository")
        assert str(report) == "[INVALID_SOURCE] bad repository"
        assert report.details == {}
