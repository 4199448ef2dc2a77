"""
Release use case — metadata, signing, and destination for each module.

Per module: resolve publish metadata → sign the jar (best effort) →
pick snapshot/release repository. With ``publish=True`` the run then
requires credentials and writes one publication descriptor per module
for the uploader to consume.

Missing credentials at publish time is the one fatal condition: it
raises ``PublishError``. Everything else is reported on the result.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from konabuild.core.models.build import BuildConfig
from konabuild.core.models.release import (
    Credentials,
    ModuleIdentity,
    PublishMetadata,
    RepositoryTarget,
    SignResult,
    VersionString,
)
from konabuild.core.services import module_metadata
from konabuild.core.services.publish_target import resolve_target
from konabuild.core.services.signing import default_artifact, default_signer, sign

logger = logging.getLogger(__name__)

PUBLICATIONS_DIR = "publications"


class PublishError(Exception):
    """Raised when publishing cannot proceed (no credentials)."""


@dataclass
class ModuleRelease:
    """Release state of a single module."""

    module: str
    artifact: str
    metadata: PublishMetadata
    signature: SignResult
    target: RepositoryTarget
    descriptor: str | None = None
    published: bool = False

    def to_dict(self) -> dict:
        return {
            "module": self.module,
            "artifact": self.artifact,
            "metadata": self.metadata.model_dump(mode="json"),
            "signature": {
                "status": self.signature.status,
                "cause": self.signature.cause,
            },
            "target": self.target.model_dump(mode="json"),
            "descriptor": self.descriptor,
            "published": self.published,
        }


@dataclass
class ReleaseResult:
    """Result of a release run."""

    version: str = ""
    target: RepositoryTarget | None = None
    modules: list[ModuleRelease] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "version": self.version,
            "target": self.target.model_dump(mode="json") if self.target else None,
            "modules": [m.to_dict() for m in self.modules],
            "errors": self.errors,
        }


def require_credentials(credentials: Credentials | None) -> Credentials:
    """Return publish credentials or fail the release."""
    if credentials is None:
        raise PublishError(
            "Publish credentials are missing. Set ossrhUsername and ossrhPassword "
            "(e.g. KONA_OSSRH_USERNAME / KONA_OSSRH_PASSWORD)."
        )
    return credentials


def write_descriptor(
    release: ModuleRelease,
    version: VersionString,
    credentials: Credentials,
    out_dir: Path,
) -> Path:
    """Write the publication descriptor for one module.

    The descriptor carries the username but never the password; the
    uploader reads the password from its own environment.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{release.module}.json"
    payload = {
        "module": release.module,
        "version": version.raw,
        "artifact": release.artifact,
        "signed": release.signature.status == "signed",
        "repository": release.target.model_dump(mode="json"),
        "username": credentials.username,
        "pom": release.metadata.model_dump(mode="json"),
    }
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote publication descriptor %s", path)
    return path


def run_release(
    config: BuildConfig,
    modules: list[str] | None = None,
    *,
    publish: bool = False,
    require_signature: bool = False,
    signer: str | None = None,
) -> ReleaseResult:
    """Prepare (and optionally publish) release artifacts.

    Args:
        config: Build configuration.
        modules: Module names to release. None = all configured modules.
        publish: Require credentials and write publication descriptors.
        require_signature: Withhold modules whose signing failed.
        signer: jarsigner override (default: from ``config.java_home``).

    Returns:
        ReleaseResult with per-module outcomes.

    Raises:
        PublishError: If ``publish`` is set and credentials are missing.
    """
    version = config.project.version_string
    target = resolve_target(version, config.repositories)
    result = ReleaseResult(version=version.raw, target=target)

    names = list(modules) if modules else list(config.project.modules)
    if not names:
        result.errors.append("No modules to release.")
        return result

    signer = signer or default_signer(config.java_home)
    build_dir = Path(config.root) / config.build_dir

    logger.info(
        "Releasing %d modules at %s → %s (%s)",
        len(names),
        version,
        target.name,
        target.kind,
    )

    for name in names:
        identity = ModuleIdentity(name=name)
        artifact = default_artifact(build_dir, name, version.raw)
        result.modules.append(
            ModuleRelease(
                module=name,
                artifact=str(artifact),
                metadata=module_metadata.resolve(identity),
                signature=sign(artifact, config.signing, signer=signer),
                target=target,
            )
        )

    if not publish:
        return result

    credentials = require_credentials(config.credentials)
    out_dir = build_dir / PUBLICATIONS_DIR

    for release in result.modules:
        if release.signature.failed:
            message = f"{release.module}: signing failed ({release.signature.cause})"
            if require_signature:
                result.errors.append(message)
                continue
            logger.warning("%s; publishing unsigned", message)

        release.descriptor = str(write_descriptor(release, version, credentials, out_dir))
        release.published = True

    return result
