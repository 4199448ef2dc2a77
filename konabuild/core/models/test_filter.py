"""
Test filter — include/exclude patterns handed to the test runtime.

Patterns are globs matched against fully qualified test class names
(``com.tencent.kona.crypto.provider.SM2CipherTest``). ``*`` matches
any run of characters, dots included. Exclusion always wins: a name
matched by any exclude pattern never runs.
"""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PatternKind = Literal["include", "exclude"]


class TestPattern(BaseModel):
    """A single include or exclude rule."""

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True)

    kind: PatternKind
    pattern: str

    def matches(self, name: str) -> bool:
        return fnmatchcase(name, self.pattern)

    @classmethod
    def include(cls, pattern: str) -> TestPattern:
        return cls(kind="include", pattern=pattern)

    @classmethod
    def exclude(cls, pattern: str) -> TestPattern:
        return cls(kind="exclude", pattern=pattern)


class TestFilter(BaseModel):
    """Ordered pattern set plus runtime properties for the test runtime."""

    __test__ = False

    model_config = ConfigDict(frozen=True)

    patterns: tuple[TestPattern, ...] = ()
    system_properties: dict[str, str] = Field(default_factory=dict)

    @property
    def includes(self) -> list[str]:
        return [p.pattern for p in self.patterns if p.kind == "include"]

    @property
    def excludes(self) -> list[str]:
        return [p.pattern for p in self.patterns if p.kind == "exclude"]

    def matches(self, name: str) -> bool:
        """Whether a test with this name would run.

        With no include patterns every name is a candidate.
        """
        if any(p.matches(name) for p in self.patterns if p.kind == "exclude"):
            return False
        includes = [p for p in self.patterns if p.kind == "include"]
        if not includes:
            return True
        return any(p.matches(name) for p in includes)

    def select(self, names: Iterable[str]) -> list[str]:
        """Names that would run, in input order."""
        return [name for name in names if self.matches(name)]

    def to_dict(self) -> dict:
        return {
            "include": self.includes,
            "exclude": self.excludes,
            "system_properties": dict(self.system_properties),
        }
