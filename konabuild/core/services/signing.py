"""
Jar signing — best-effort ``jarsigner`` invocation.

Security invariants:
- Passwords cross the process boundary as argv only.
- Any command or output shown in logs or results has password
  values replaced by ``******``.
- No keystore path → nothing is spawned, result is ``skipped``.

The call blocks until the signer exits; no timeout is imposed.
``subprocess.run`` kills and reaps the child if this process is
interrupted while waiting.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import subprocess
import time
from collections.abc import Sequence
from pathlib import Path

from konabuild.core.models.release import SigningParameters, SignResult

logger = logging.getLogger(__name__)

REDACTED = "******"
SECRET_FLAGS = ("-storepass", "-keypass")
SIGNER_LOCALE_FLAG = "-J-Duser.language=en_US"


def default_signer(java_home: str | None = None) -> str:
    """Locate ``jarsigner`` under a JDK home, or fall back to PATH."""
    if not java_home:
        return "jarsigner"
    home = Path(java_home)
    # JDK 8 reports java.home as <JAVA_HOME>/jre
    if home.name == "jre":
        home = home.parent
    exe = "jarsigner.exe" if os.name == "nt" else "jarsigner"
    return str(home / "bin" / exe)


def default_artifact(build_dir: str | Path, module: str, version: str) -> Path:
    """The main jar a module build leaves in ``<build>/libs``."""
    return Path(build_dir) / "libs" / f"{module}-{version}.jar"


def build_command(signer: str, artifact: str, params: SigningParameters) -> list[str]:
    """Full jarsigner argv, secrets included. Never log this directly."""
    return [
        signer,
        SIGNER_LOCALE_FLAG,
        "-storetype", params.keystore_type,
        "-keystore", params.keystore_path or "",
        "-storepass", params.store_password.get_secret_value(),
        "-keypass", params.key_password.get_secret_value(),
        artifact,
        params.alias,
    ]


def redact_command(command: Sequence[str]) -> list[str]:
    """Copy of ``command`` with the value after each password flag masked."""
    redacted = list(command)
    for i, part in enumerate(redacted[:-1]):
        if part in SECRET_FLAGS:
            redacted[i + 1] = REDACTED
    return redacted


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in redact_command(command))


def _scrub(text: str, params: SigningParameters) -> str:
    """Mask password values appearing as whole tokens in signer output.

    Words joined by ``.`` or ``-`` (``kona-1.0.1.jar``) count as one token.
    """
    for secret in (params.store_password, params.key_password):
        value = secret.get_secret_value()
        if value:
            token = rf"(?<!\w)(?<!\w[.-]){re.escape(value)}(?!\w)(?![.-]\w)"
            text = re.sub(token, REDACTED, text)
    return text


def sign(
    artifact: str | Path,
    params: SigningParameters,
    signer: str = "jarsigner",
) -> SignResult:
    """Sign ``artifact`` in place with ``jarsigner``.

    Args:
        artifact: Path of the jar to sign.
        params: Keystore settings. Signing is skipped without a keystore path.
        signer: jarsigner executable.

    Returns:
        SignResult — ``signed``, ``skipped`` or ``failed``. Never raises
        for signer failures; the caller decides whether they block release.
    """
    artifact = str(artifact)

    if not params.enabled:
        logger.info("Signing skipped for %s: no keystore configured (ks.path)", artifact)
        return SignResult.skipped(artifact, reason="no keystore configured")

    command = build_command(signer, artifact, params)
    display = format_command(command)
    logger.debug("Signing: %s", display)

    start = time.monotonic()
    try:
        result = subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        cause = _scrub(f"Cannot launch signer {signer}: {e}", params)
        logger.error("Signing failed for %s: %s", artifact, cause)
        return SignResult.failure(artifact, cause, metadata={"command": display})

    elapsed_ms = int((time.monotonic() - start) * 1000)

    if result.returncode != 0:
        detail = _scrub((result.stderr or result.stdout or "").strip(), params)
        cause = f"Signer exited with code {result.returncode}"
        logger.error("Signing failed for %s: %s", artifact, cause)
        return SignResult.failure(
            artifact,
            cause,
            duration_ms=elapsed_ms,
            metadata={
                "command": display,
                "return_code": result.returncode,
                "output": detail[-2000:],
            },
        )

    logger.info("Signed %s (%d ms)", artifact, elapsed_ms)
    return SignResult.signed(
        artifact,
        duration_ms=elapsed_ms,
        metadata={"command": display, "return_code": 0},
    )
