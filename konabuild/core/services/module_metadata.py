"""
Module metadata — publish title/description per provider module.

The module name is classified by substring against a short ordered
category list; the first hit wins, anything else gets the generic
provider text. Pure and total.
"""

from __future__ import annotations

from konabuild.core.models.release import ModuleIdentity, PublishMetadata

SOURCE_TREE_URL = "https://github.com/Tencent/TencentKonaSMSuite/tree/master"
LICENSE_NAME = "GNU GPL v2.0 license with classpath exception"
LICENSE_URL = "https://github.com/Tencent/TencentKonaSMSuite/blob/master/LICENSE.txt"

# (category token, title, description) — order matters
MODULE_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    (
        "crypto",
        "Tencent Kona Crypto Provider",
        "A Java security provider for supporting ShangMi algorithms SM2, SM3 and SM4.",
    ),
    (
        "pkix",
        "Tencent Kona PKIX Provider",
        "A Java security provider for supporting ShangMi algorithms in public key infrastructure",
    ),
    (
        "ssl",
        "Tencent Kona SSL Provider",
        "A Java security provider for supporting protocols TLCP, TLS 1.3 (RFC 8998) and TLS 1.2",
    ),
)

FALLBACK_TITLE = "Tencent Kona Provider"
FALLBACK_DESCRIPTION = "A Java security provider for supporting ShangMi features"


def classify(name: str) -> tuple[str, str]:
    """Title and description for a module name."""
    for token, title, description in MODULE_CATEGORIES:
        if token in name:
            return title, description
    return FALLBACK_TITLE, FALLBACK_DESCRIPTION


def resolve(identity: ModuleIdentity) -> PublishMetadata:
    """Full publish metadata for a module."""
    title, description = classify(identity.name)
    return PublishMetadata(
        title=title,
        description=description,
        source_url=f"{SOURCE_TREE_URL}/{identity.name}",
        license_name=LICENSE_NAME,
        license_url=LICENSE_URL,
    )
