"""
Domain models — Pydantic types for konabuild.

All models are re-exported here for convenient access:

    from konabuild.core.models import ProbeResult, TestFilter, SignResult
"""

from konabuild.core.models.build import BuildConfig, ProjectInfo
from konabuild.core.models.platform import HostPlatform
from konabuild.core.models.probe import ProbeResult, ProbeStatus
from konabuild.core.models.release import (
    SNAPSHOT_SUFFIX,
    Credentials,
    ModuleIdentity,
    PublishMetadata,
    RepositorySet,
    RepositoryTarget,
    SigningParameters,
    SignResult,
    VersionString,
)
from konabuild.core.models.test_filter import TestFilter, TestPattern

__all__ = [
    "SNAPSHOT_SUFFIX",
    # build.py
    "BuildConfig",
    "Credentials",
    # platform.py
    "HostPlatform",
    # release.py
    "ModuleIdentity",
    # probe.py
    "ProbeResult",
    "ProbeStatus",
    "ProjectInfo",
    "PublishMetadata",
    "RepositorySet",
    "RepositoryTarget",
    "SignResult",
    "SigningParameters",
    # test_filter.py
    "TestFilter",
    "TestPattern",
    "VersionString",
]
