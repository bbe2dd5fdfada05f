# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Conventional install locations probed for the target executable."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from packaging.version import InvalidVersion
from packaging.version import Version as PackagingVersion

from .config import DEFAULT_PACKAGE_MANAGER_DIRS, ResolverSettings
from .models import InstallKind

NVM_BIN_VARIABLE: Final[str] = "NVM_BIN"
NVM_DIRNAME: Final[str] = ".nvm"
NVM_NODE_VERSIONS: Final[tuple[str, ...]] = ("versions", "node")

_VERSION_MANAGER_MARKERS: Final[frozenset[str]] = frozenset(
    {".nvm", ".fnm", ".volta", ".asdf", ".nodenv", ".nodebrew"}
)
_USER_PACKAGE_DIRS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("npm", (".npm-global", "bin")),
    ("yarn", (".yarn", "bin")),
    ("bun", (".bun", "bin")),
    ("npm", ("node_modules", ".bin")),
)
_USER_LOCAL_DIRS: Final[tuple[tuple[str, ...], ...]] = ((".local", "bin"), ("bin",))


@dataclass(frozen=True, slots=True)
class ProbeLocation:
    """Candidate executable path together with its provenance."""

    path: Path
    install_kind: InstallKind
    source: str


def candidate_names(binary_name: str) -> tuple[str, ...]:
    """Return executable file names to look for, including ``.exe`` on Windows."""

    if os.name != "nt" or binary_name.lower().endswith(".exe"):
        return (binary_name,)
    return (binary_name, f"{binary_name}.exe")


def nvm_version_bin_dirs(home: Path) -> list[Path]:
    """Return ``~/.nvm/versions/node/*/bin`` directories, newest node first."""

    root = home.joinpath(NVM_DIRNAME, *NVM_NODE_VERSIONS)
    try:
        entries = [entry for entry in root.iterdir() if entry.is_dir()]
    except OSError:
        return []
    versioned: list[tuple[PackagingVersion, str, Path]] = []
    unversioned: list[Path] = []
    for entry in entries:
        try:
            versioned.append((PackagingVersion(entry.name), entry.name, entry))
        except InvalidVersion:
            unversioned.append(entry)
    versioned.sort(key=lambda item: (item[0], item[1]), reverse=True)
    unversioned.sort(key=lambda entry: entry.name)
    ordered = [entry for _version, _name, entry in versioned] + unversioned
    return [entry / "bin" for entry in ordered]


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def classify_install_kind(
    executable_path: str | Path,
    *,
    home: Path,
    settings: ResolverSettings | None = None,
) -> InstallKind:
    """Infer the provenance of *executable_path* from where it lives."""

    settings = settings or ResolverSettings()
    path = Path(executable_path)
    if _VERSION_MANAGER_MARKERS.intersection(path.parts):
        return InstallKind.VERSION_MANAGER
    bundle_root = home / f".{settings.binary_name}"
    if _is_within(path, bundle_root):
        return InstallKind.BUNDLED
    for directory in settings.package_manager_dirs:
        if _is_within(path, Path(directory).parent):
            return InstallKind.BUNDLED
    for _label, parts in _USER_PACKAGE_DIRS:
        if _is_within(path, home.joinpath(*parts)):
            return InstallKind.BUNDLED
    if _is_within(path, home):
        return InstallKind.USER_LOCAL
    return InstallKind.DIRECT


def _expand(
    directories: Iterable[Path],
    names: tuple[str, ...],
    kind: InstallKind,
    source: str,
) -> list[ProbeLocation]:
    return [
        ProbeLocation(path=directory / name, install_kind=kind, source=source)
        for directory in directories
        for name in names
    ]


def default_probe_locations(
    settings: ResolverSettings,
    *,
    home: Path,
    environ: Mapping[str, str],
) -> tuple[ProbeLocation, ...]:
    """Return the ordered probe locations for ``settings.binary_name``.

    The order is the selection tie-break precedence: earlier locations win
    among candidates reporting the same version.

    Args:
        settings: Resolver settings naming the binary and extra directories.
        home: Home directory used for user-relative locations.
        environ: Inherited environment, read for ``NVM_BIN`` and ``PATH``.

    Returns:
        tuple[ProbeLocation, ...]: Candidate executables in precedence order.
    """

    names = candidate_names(settings.binary_name)
    locations: list[ProbeLocation] = []

    if settings.explicit_path:
        explicit = Path(settings.explicit_path).expanduser()
        kind = classify_install_kind(explicit, home=home, settings=settings)
        locations.append(ProbeLocation(path=explicit, install_kind=kind, source="explicit"))

    locations.extend(
        _expand((Path(d) for d in settings.system_dirs), names, InstallKind.DIRECT, "system")
    )
    locations.extend(
        _expand((home.joinpath(*parts) for parts in _USER_LOCAL_DIRS), names, InstallKind.USER_LOCAL, "user-local")
    )

    nvm_dirs: list[Path] = []
    if nvm_bin := environ.get(NVM_BIN_VARIABLE):
        nvm_dirs.append(Path(nvm_bin))
    nvm_dirs.append(home / NVM_DIRNAME / "current" / "bin")
    nvm_dirs.extend(nvm_version_bin_dirs(home))
    locations.extend(_expand(nvm_dirs, names, InstallKind.VERSION_MANAGER, "nvm"))

    locations.extend(
        _expand([home / f".{settings.binary_name}" / "local"], names, InstallKind.BUNDLED, "bundled")
    )
    locations.extend(
        _expand((Path(d) for d in settings.package_manager_dirs), names, InstallKind.BUNDLED, "homebrew")
    )
    for label, parts in _USER_PACKAGE_DIRS:
        locations.extend(_expand([home.joinpath(*parts)], names, InstallKind.BUNDLED, label))

    for directory in settings.extra_dirs:
        extra = Path(directory).expanduser()
        kind = classify_install_kind(extra / settings.binary_name, home=home, settings=settings)
        locations.extend(_expand([extra], names, kind, "extra"))

    if settings.include_path_lookup:
        found = shutil.which(settings.binary_name, path=environ.get("PATH", ""))
        if found:
            kind = classify_install_kind(found, home=home, settings=settings)
            locations.append(ProbeLocation(path=Path(found), install_kind=kind, source="path-lookup"))

    return tuple(locations)


def _resolved(path: Path) -> Path | None:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return None


def _version_manager_bin(path: Path) -> str | None:
    parts = path.parts
    for index in range(len(parts) - 3):
        if parts[index] in _VERSION_MANAGER_MARKERS and parts[index + 1 : index + 3] == NVM_NODE_VERSIONS:
            return str(Path(*parts[: index + 4]) / "bin")
    return None


def companion_directories(
    executable_path: str | Path,
    *,
    package_manager_dirs: Iterable[str] | None = None,
) -> list[str]:
    """Return directories a launched executable needs on its search path.

    The executable's own directory always comes first. When the executable,
    or the file it links to, lives in a node version-manager tree, that
    tree's ``bin`` directory follows so the matching ``node`` runtime is
    found. A file under a package-manager prefix such as ``/opt/homebrew``
    adds that prefix's ``bin`` directory last.

    Args:
        executable_path: Absolute path of the executable.
        package_manager_dirs: Package-manager ``bin`` directories; defaults
            to :data:`~toolpath.config.DEFAULT_PACKAGE_MANAGER_DIRS`.

    Returns:
        list[str]: Directories in the order they should appear on ``PATH``.
    """

    path = Path(executable_path)
    if package_manager_dirs is None:
        package_manager_dirs = DEFAULT_PACKAGE_MANAGER_DIRS
    prefix_bins = [Path(directory) for directory in package_manager_dirs]
    views = [path]
    resolved = _resolved(path)
    if resolved is not None and resolved != path:
        views.append(resolved)

    directories = [str(path.parent)]
    for view in views:
        runtime_bin = _version_manager_bin(view)
        if runtime_bin is not None:
            if runtime_bin not in directories:
                directories.append(runtime_bin)
            break
    for view in views:
        for prefix_bin in prefix_bins:
            if _is_within(view, prefix_bin.parent) and str(prefix_bin) not in directories:
                directories.append(str(prefix_bin))
    return directories


__all__ = [
    "NVM_BIN_VARIABLE",
    "ProbeLocation",
    "candidate_names",
    "classify_install_kind",
    "companion_directories",
    "default_probe_locations",
    "nvm_version_bin_dirs",
]
