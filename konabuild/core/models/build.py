"""
Build config model — the immutable settings threaded through the pipeline.

Built once by ``konabuild.core.config.loader.load_config`` and passed
explicitly to each step; nothing reads global properties afterwards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from konabuild.core.models.release import (
    Credentials,
    ModuleIdentity,
    RepositorySet,
    SigningParameters,
    VersionString,
)

DEFAULT_INTEROP_TOOL = "babassl"


class ProjectInfo(BaseModel):
    """The multi-module project being built."""

    model_config = ConfigDict(frozen=True)

    name: str = "kona"
    version: str = "0.0.1-SNAPSHOT"
    modules: tuple[str, ...] = ()

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value: object) -> object:
        # YAML reads an unquoted ``1.0`` as a float
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @property
    def version_string(self) -> VersionString:
        return VersionString(raw=self.version)

    def identities(self) -> list[ModuleIdentity]:
        return [ModuleIdentity(name=name) for name in self.modules]


class BuildConfig(BaseModel):
    """Everything the probe, selector, signer, and publisher need."""

    model_config = ConfigDict(frozen=True)

    root: str = "."
    project: ProjectInfo = Field(default_factory=ProjectInfo)
    interop_tool_path: str = DEFAULT_INTEROP_TOOL
    signing: SigningParameters = Field(default_factory=SigningParameters)
    credentials: Credentials | None = None
    repositories: RepositorySet = Field(default_factory=RepositorySet)
    java_home: str | None = None
    build_dir: str = "build"
    reports_dir: str = "build/test-results/test"
