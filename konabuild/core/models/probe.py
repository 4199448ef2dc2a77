"""
Probe result — outcome of checking for the interoperability tool.

The probe keeps the reason a tool is unusable (missing, unhealthy,
hung) for diagnostics, while the test policy only looks at
``available``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

ProbeStatus = Literal["ok", "non_zero_exit", "timed_out", "launch_failed"]


class ProbeResult(BaseModel):
    """Immutable result of one tool probe."""

    model_config = ConfigDict(frozen=True)

    status: ProbeStatus
    resolved_path: str
    exit_code: int | None = None
    cause: str = ""

    @property
    def available(self) -> bool:
        """Whether the tool answered the diagnostic command cleanly."""
        return self.status == "ok"

    @classmethod
    def ok(cls, resolved_path: str) -> ProbeResult:
        return cls(status="ok", resolved_path=resolved_path, exit_code=0)

    @classmethod
    def unavailable(
        cls,
        status: ProbeStatus,
        resolved_path: str,
        cause: str,
        exit_code: int | None = None,
    ) -> ProbeResult:
        return cls(
            status=status,
            resolved_path=resolved_path,
            exit_code=exit_code,
            cause=cause,
        )
