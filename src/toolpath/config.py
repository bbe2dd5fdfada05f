# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for binary discovery."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from packaging.version import InvalidVersion
from packaging.version import Version as PackagingVersion
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_BINARY_NAME: Final[str] = "claude"
DEFAULT_VERSION_TIMEOUT: Final[float] = 5.0
DEFAULT_SYSTEM_DIRS: Final[tuple[str, ...]] = ("/usr/local/bin", "/usr/bin", "/bin")
DEFAULT_PACKAGE_MANAGER_DIRS: Final[tuple[str, ...]] = (
    "/opt/homebrew/bin",
    "/home/linuxbrew/.linuxbrew/bin",
)

ENV_PREFIX: Final[str] = "TOOLPATH_"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class ResolverSettings(BaseModel):
    """Settings controlling where and how the target executable is probed."""

    model_config = ConfigDict(validate_assignment=True)

    binary_name: str = DEFAULT_BINARY_NAME
    version_args: tuple[str, ...] = ("--version",)
    version_timeout: float = Field(default=DEFAULT_VERSION_TIMEOUT, gt=0)
    system_dirs: tuple[str, ...] = DEFAULT_SYSTEM_DIRS
    package_manager_dirs: tuple[str, ...] = DEFAULT_PACKAGE_MANAGER_DIRS
    extra_dirs: tuple[str, ...] = ()
    explicit_path: str | None = None
    minimum_version: str | None = None
    include_path_lookup: bool = True

    @field_validator("binary_name")
    @classmethod
    def _check_binary_name(cls, value: str) -> str:
        name = value.strip()
        if not name or "/" in name or (os.sep != "/" and os.sep in name):
            raise ValueError("binary_name must be a bare executable name")
        return name

    @field_validator("minimum_version")
    @classmethod
    def _check_minimum_version(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            PackagingVersion(value)
        except InvalidVersion as exc:
            raise ValueError(f"invalid minimum_version '{value}'") from exc
        return value


def _split_dirs(value: str) -> tuple[str, ...]:
    return tuple(entry for entry in value.split(os.pathsep) if entry)


def settings_from_environ(
    environ: Mapping[str, str] | None = None,
    *,
    base: ResolverSettings | None = None,
) -> ResolverSettings:
    """Return settings overlaid with ``TOOLPATH_*`` environment variables.

    Args:
        environ: Environment mapping to read; defaults to :data:`os.environ`.
        base: Settings providing defaults for unset variables.

    Returns:
        ResolverSettings: Validated settings.

    Raises:
        ConfigError: A variable holds an invalid value.
    """

    source = os.environ if environ is None else environ
    updates: dict[str, object] = {}
    if binary := source.get(f"{ENV_PREFIX}BINARY"):
        updates["binary_name"] = binary
    if timeout := source.get(f"{ENV_PREFIX}VERSION_TIMEOUT"):
        updates["version_timeout"] = timeout
    if extra := source.get(f"{ENV_PREFIX}EXTRA_DIRS"):
        updates["extra_dirs"] = _split_dirs(extra)
    if explicit := source.get(f"{ENV_PREFIX}EXPLICIT_PATH"):
        updates["explicit_path"] = explicit
    if minimum := source.get(f"{ENV_PREFIX}MINIMUM_VERSION"):
        updates["minimum_version"] = minimum

    payload = (base or ResolverSettings()).model_dump()
    payload.update(updates)
    try:
        return ResolverSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "ConfigError",
    "DEFAULT_BINARY_NAME",
    "DEFAULT_PACKAGE_MANAGER_DIRS",
    "DEFAULT_SYSTEM_DIRS",
    "ENV_PREFIX",
    "ResolverSettings",
    "settings_from_environ",
]
