"""
Configuration loader — reads kona-build.yml and runtime properties.

Runtime properties keep the names the module builds already use
(``test.babassl.path``, ``ks.path``, ``ossrhPassword``, ...). They are
resolved in precedence order:

    -D overrides  >  KONA_* env vars  >  ``properties:`` in kona-build.yml

The result is a single frozen ``BuildConfig``. Secrets go straight into
``SecretStr`` fields and are never logged.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import SecretStr, ValidationError

from konabuild.core.models.build import DEFAULT_INTEROP_TOOL, BuildConfig, ProjectInfo
from konabuild.core.models.release import Credentials, RepositorySet, SigningParameters

logger = logging.getLogger(__name__)

# Default config filename
BUILD_CONFIG_FILE = "kona-build.yml"

# ── Runtime property names ──────────────────────────────────────

PROP_INTEROP_TOOL = "test.babassl.path"
PROP_KS_TYPE = "ks.type"
PROP_KS_PATH = "ks.path"
PROP_KS_STOREPASS = "ks.storepass"
PROP_KS_KEYPASS = "ks.keypass"
PROP_KS_ALIAS = "ks.alias"
PROP_OSSRH_USERNAME = "ossrhUsername"
PROP_OSSRH_PASSWORD = "ossrhPassword"

KNOWN_PROPERTIES = (
    PROP_INTEROP_TOOL,
    PROP_KS_TYPE,
    PROP_KS_PATH,
    PROP_KS_STOREPASS,
    PROP_KS_KEYPASS,
    PROP_KS_ALIAS,
    PROP_OSSRH_USERNAME,
    PROP_OSSRH_PASSWORD,
)

ENV_PREFIX = "KONA_"


class ConfigError(Exception):
    """Raised when build configuration is invalid or unreadable."""


def env_var_name(prop: str) -> str:
    """Environment variable carrying a runtime property.

    ``ks.storepass`` → ``KONA_KS_STOREPASS``,
    ``ossrhPassword`` → ``KONA_OSSRH_PASSWORD``.
    """
    snake = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", prop)
    return ENV_PREFIX + re.sub(r"[^A-Za-z0-9]+", "_", snake).upper()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for kona-build.yml starting from the given directory, walking up."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / BUILD_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def parse_overrides(pairs: list[str] | tuple[str, ...]) -> dict[str, str]:
    """Parse ``key=value`` strings from ``-D`` options.

    Raises:
        ConfigError: If an entry has no ``=`` or an empty key.
    """
    overrides: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"Invalid property override (expected key=value): {key or pair!r}")
        overrides[key] = value
    return overrides


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading build config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def resolve_properties(
    file_props: Mapping[str, Any] | None = None,
    overrides: Mapping[str, str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Merge runtime properties from all three sources."""
    environ = os.environ if environ is None else environ
    props: dict[str, str] = {}

    for key, value in (file_props or {}).items():
        if value is None:
            continue
        props[str(key)] = str(value)

    for prop in KNOWN_PROPERTIES:
        value = environ.get(env_var_name(prop))
        if value is not None:
            props[prop] = value

    props.update(overrides or {})

    unknown = sorted(set(props) - set(KNOWN_PROPERTIES))
    if unknown:
        logger.warning("Ignoring unknown properties: %s", ", ".join(unknown))

    return props


def _build_credentials(props: Mapping[str, str]) -> Credentials | None:
    username = props.get(PROP_OSSRH_USERNAME)
    password = props.get(PROP_OSSRH_PASSWORD)
    if username and password:
        return Credentials(username=username, password=SecretStr(password))
    if username or password:
        logger.warning(
            "Incomplete publish credentials: both %s and %s are required",
            PROP_OSSRH_USERNAME,
            PROP_OSSRH_PASSWORD,
        )
    return None


def _build_signing(props: Mapping[str, str]) -> SigningParameters:
    return SigningParameters(
        keystore_type=props.get(PROP_KS_TYPE) or "PKCS12",
        keystore_path=props.get(PROP_KS_PATH) or None,
        store_password=SecretStr(props.get(PROP_KS_STOREPASS, "")),
        key_password=SecretStr(props.get(PROP_KS_KEYPASS, "")),
        alias=props.get(PROP_KS_ALIAS, ""),
    )


def load_config(
    path: Path | None = None,
    overrides: Mapping[str, str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> BuildConfig:
    """Load and validate the build configuration.

    Args:
        path: Explicit path to kona-build.yml. If None, searches upward;
            when nothing is found the defaults are used.
        overrides: ``-D`` property overrides (highest precedence).
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Frozen BuildConfig.

    Raises:
        ConfigError: If the file is unreadable or invalid.
    """
    environ = os.environ if environ is None else environ

    if path is None:
        path = find_config_file()

    data: dict[str, Any] = {}
    root = Path.cwd()
    if path is not None:
        data = _read_yaml(path)
        root = path.parent.resolve()
    else:
        logger.debug("No %s found, using defaults", BUILD_CONFIG_FILE)

    file_props = data.get("properties") or {}
    if not isinstance(file_props, dict):
        raise ConfigError("'properties' must be a mapping of property names to values")

    props = resolve_properties(file_props, overrides, environ)

    try:
        project = ProjectInfo.model_validate(data.get("project") or {})
        repositories = RepositorySet.model_validate(data.get("publishing") or {})
        config = BuildConfig(
            root=str(root),
            project=project,
            interop_tool_path=props.get(PROP_INTEROP_TOOL) or DEFAULT_INTEROP_TOOL,
            signing=_build_signing(props),
            credentials=_build_credentials(props),
            repositories=repositories,
            java_home=data.get("java_home") or environ.get("JAVA_HOME") or None,
            build_dir=data.get("build_dir", "build"),
            reports_dir=data.get("reports_dir", "build/test-results/test"),
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid build configuration: {e}") from e

    logger.info(
        "Loaded build config for '%s' %s with %d modules",
        config.project.name,
        config.project.version,
        len(config.project.modules),
    )
    return config
