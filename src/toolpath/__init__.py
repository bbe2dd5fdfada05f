# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate installed copies of a command-line tool and prepare its ``PATH``."""

from __future__ import annotations

from importlib import metadata

from .config import ConfigError, ResolverSettings, settings_from_environ
from .models import ExecutionEnvironment, InstallKind, Installation, ProbeResult, ProbeStatus
from .path_set import (
    add_if_missing,
    contains_directory,
    deduplicate,
    enhance_for_common_locations,
    ensure_on_process_path,
    inherited_search_path,
)
from .resolver import BinaryResolver, InstallationNotFoundError
from .versioning import Version, parse_version

try:
    __version__ = metadata.version("toolpath")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "BinaryResolver",
    "ConfigError",
    "ExecutionEnvironment",
    "InstallKind",
    "Installation",
    "InstallationNotFoundError",
    "ProbeResult",
    "ProbeStatus",
    "ResolverSettings",
    "Version",
    "__version__",
    "add_if_missing",
    "contains_directory",
    "deduplicate",
    "enhance_for_common_locations",
    "ensure_on_process_path",
    "inherited_search_path",
    "parse_version",
    "settings_from_environ",
]
