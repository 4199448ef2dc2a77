"""
Release models — what a module is published as, where, and how it's signed.

Signing and publish secrets are held as ``SecretStr`` so they render
as ``**********`` in reprs, logs, and ``model_dump()`` output. The raw
value is only read at the process-invocation boundary.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr

SNAPSHOT_SUFFIX = "-SNAPSHOT"


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ModuleIdentity(BaseModel):
    """A module's declared identity (e.g. ``kona-crypto``)."""

    model_config = ConfigDict(frozen=True)

    name: str


class PublishMetadata(BaseModel):
    """Human-readable metadata attached to a published module."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    source_url: str
    license_name: str
    license_url: str


class VersionString(BaseModel):
    """A project version, classified as pre-release or final."""

    model_config = ConfigDict(frozen=True)

    raw: str

    @property
    def is_prerelease(self) -> bool:
        return self.raw.endswith(SNAPSHOT_SUFFIX)

    def __str__(self) -> str:
        return self.raw


class RepositoryTarget(BaseModel):
    """A destination repository for published artifacts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["snapshot", "release"]
    name: str
    url: str


class RepositorySet(BaseModel):
    """The two candidate destinations (OSSRH by default)."""

    model_config = ConfigDict(frozen=True)

    name: str = "ossrh"
    snapshot_url: str = "https://oss.sonatype.org/content/repositories/snapshots"
    release_url: str = "https://oss.sonatype.org/service/local/staging/deploy/maven2"


class SigningParameters(BaseModel):
    """Keystore settings for the jar signer.

    No ``keystore_path`` means signing is switched off, not misconfigured.
    """

    model_config = ConfigDict(frozen=True)

    keystore_type: str = "PKCS12"
    keystore_path: str | None = None
    store_password: SecretStr = SecretStr("")
    key_password: SecretStr = SecretStr("")
    alias: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.keystore_path)


class Credentials(BaseModel):
    """Publish-destination authentication."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr


class SignResult(BaseModel):
    """Outcome of a signing attempt.

    Signing never raises; the caller reads ``status`` and decides
    whether a failure blocks publication.
    """

    artifact: str
    status: Literal["signed", "skipped", "failed"]
    cause: str = ""
    duration_ms: int = 0
    finished_at: str = Field(default_factory=_now_iso)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Signed, or deliberately not attempted."""
        return self.status != "failed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def signed(cls, artifact: str, **kwargs: Any) -> SignResult:
        return cls(artifact=artifact, status="signed", **kwargs)

    @classmethod
    def skipped(cls, artifact: str, reason: str = "", **kwargs: Any) -> SignResult:
        return cls(artifact=artifact, status="skipped", cause=reason, **kwargs)

    @classmethod
    def failure(cls, artifact: str, cause: str, **kwargs: Any) -> SignResult:
        return cls(artifact=artifact, status="failed", cause=cause, **kwargs)
