# SPDX-License-Identifier: MIT
"""Data models produced by binary discovery and environment preparation."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .versioning import Version


class InstallKind(str, Enum):
    """Provenance of a discovered installation."""

    DIRECT = "direct"
    USER_LOCAL = "user-local"
    VERSION_MANAGER = "version-manager"
    BUNDLED = "bundled"


class ProbeStatus(str, Enum):
    """Outcome of probing one candidate location."""

    FOUND = "found"
    MISSING = "missing"
    UNUSABLE = "unusable"


class Installation(BaseModel):
    """One discovered copy of the target executable."""

    model_config = ConfigDict(frozen=True)

    executable_path: str
    version: Version | None = None
    install_kind: InstallKind
    source: str = "system"

    def describe(self) -> str:
        version = str(self.version) if self.version is not None else "unknown version"
        return f"{self.executable_path} ({version}, {self.install_kind.value} via {self.source})"


class ProbeResult(BaseModel):
    """Diagnostic record for a single probed location."""

    model_config = ConfigDict(frozen=True)

    candidate: str
    source: str
    install_kind: InstallKind
    status: ProbeStatus
    installation: Installation | None = None
    detail: str | None = None


class ExecutionEnvironment(BaseModel):
    """Executable ready for launch together with its process environment."""

    model_config = ConfigDict(validate_assignment=True)

    executable_path: str
    env: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_parts(
        cls,
        *,
        executable_path: str,
        env: Mapping[str, str] | None,
    ) -> "ExecutionEnvironment":
        return cls(
            executable_path=executable_path,
            env={str(k): str(v) for k, v in (env or {}).items()},
        )

    @property
    def search_path(self) -> str:
        return self.env.get("PATH", "")

    def argv(self, *args: str) -> list[str]:
        """Return the argument vector for launching the executable with *args*."""

        return [self.executable_path, *args]


__all__ = [
    "ExecutionEnvironment",
    "InstallKind",
    "Installation",
    "ProbeResult",
    "ProbeStatus",
]
