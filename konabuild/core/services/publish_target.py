"""
Publish target — snapshot or release repository for a version.
"""

from __future__ import annotations

from konabuild.core.models.release import RepositorySet, RepositoryTarget, VersionString


def resolve_target(
    version: VersionString,
    repositories: RepositorySet | None = None,
) -> RepositoryTarget:
    """Snapshot repository for ``-SNAPSHOT`` versions, release otherwise."""
    repositories = repositories or RepositorySet()
    if version.is_prerelease:
        return RepositoryTarget(
            kind="snapshot",
            name=repositories.name,
            url=repositories.snapshot_url,
        )
    return RepositoryTarget(
        kind="release",
        name=repositories.name,
        url=repositories.release_url,
    )
