"""
Shared test fixtures and configuration.
"""

import logging
import stat
import textwrap
from pathlib import Path

import pytest

from konabuild.core.config.loader import KNOWN_PROPERTIES, env_var_name


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host's KONA_* / JAVA_HOME settings out of every test."""
    for prop in KNOWN_PROPERTIES:
        monkeypatch.delenv(env_var_name(prop), raising=False)
    for name in ("JAVA_HOME", "KONA_LOG_LEVEL", "KONA_LOG_FILE", "KONA_LOG_FILE_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo ``setup_logging`` calls made by CLI and logging tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def build_yml(tmp_path: Path) -> Path:
    """Create a kona-build.yml for a three-module project."""
    content = textwrap.dedent("""\
        project:
          name: kona
          version: 1.0.9-SNAPSHOT
          modules:
            - kona-crypto
            - kona-pkix
            - kona-ssl
        publishing:
          name: ossrh
        properties:
          test.babassl.path: /opt/babassl/bin/babassl
          ks.type: JKS
    """)
    path = tmp_path / "kona-build.yml"
    path.write_text(content)
    return path


@pytest.fixture
def make_tool(tmp_path: Path):
    """Factory for small executable shell scripts standing in for BabaSSL."""

    def _make(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make

