# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discover installed copies of an executable and prepare launch environments."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path

from .config import ResolverSettings
from .locations import (
    ProbeLocation,
    classify_install_kind,
    companion_directories,
    default_probe_locations,
)
from .models import ExecutionEnvironment, Installation, ProbeResult, ProbeStatus
from .path_set import PATH_VARIABLE, add_if_missing, deduplicate, normalize_segment
from .versioning import Version, VersionResolver

LOGGER = logging.getLogger(__name__)

_NO_VERSION = Version(0, 0, 0)


class InstallationNotFoundError(RuntimeError):
    """Raised when no usable installation of the executable exists."""

    def __init__(self, binary_name: str, probed: Sequence[ProbeResult]) -> None:
        super().__init__(
            f"No usable '{binary_name}' installation found after probing {len(probed)} location(s)",
        )
        self.binary_name = binary_name
        self.probed = tuple(probed)


def _absolute_executable(executable: str, search_path: str) -> str | None:
    """Return *executable* as an absolute path, or ``None`` when it cannot be found.

    Bare names are looked up on *search_path*; other relative paths are
    taken relative to the working directory.
    """

    if os.path.isabs(executable):
        return executable
    if os.path.dirname(executable):
        return str(Path(executable).absolute())
    found = shutil.which(executable, path=search_path) if search_path else None
    return str(Path(found).absolute()) if found else None


class BinaryResolver:
    """Locate, rank and prepare installations of a single executable.

    The resolver keeps no state between calls: every discovery pass re-probes
    the filesystem and the inherited environment is read when a method runs.
    Discovery spawns one short-lived process per candidate and blocks; async
    callers should run it in a worker thread.
    """

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        home: Path | None = None,
        versions: VersionResolver | None = None,
    ) -> None:
        self.settings = settings or ResolverSettings()
        self._environ_override = environ
        self._home_override = home
        self._versions = versions or VersionResolver(timeout=self.settings.version_timeout)

    def _environ(self) -> Mapping[str, str]:
        return os.environ if self._environ_override is None else self._environ_override

    def _home(self, environ: Mapping[str, str]) -> Path:
        if self._home_override is not None:
            return self._home_override
        home = environ.get("HOME")
        return Path(home) if home else Path.home()

    def probe_plan(self) -> tuple[ProbeLocation, ...]:
        """Return the ordered locations the next discovery pass will probe."""

        environ = self._environ()
        return default_probe_locations(self.settings, home=self._home(environ), environ=environ)

    def probe_locations(self) -> list[ProbeResult]:
        """Probe every location and report found, missing and unusable ones.

        Locations that resolve to a file already probed earlier in the pass are
        skipped, so each physical executable appears once.
        """

        return list(self._iter_probes())

    def _iter_probes(self) -> Iterator[ProbeResult]:
        seen: set[str] = set()
        for location in self.probe_plan():
            identity = normalize_segment(str(location.path))
            if identity in seen:
                LOGGER.debug("Skipping %s: already probed as %s", location.path, identity)
                continue
            seen.add(identity)
            yield self._probe(location)

    def _probe(self, location: ProbeLocation) -> ProbeResult:
        path = location.path if location.path.is_absolute() else location.path.absolute()
        candidate = str(path)

        def _result(status: ProbeStatus, detail: str | None = None) -> ProbeResult:
            return ProbeResult(
                candidate=candidate,
                source=location.source,
                install_kind=location.install_kind,
                status=status,
                detail=detail,
            )

        try:
            info = path.stat()
        except (FileNotFoundError, NotADirectoryError):
            LOGGER.debug("No %s at %s", self.settings.binary_name, candidate)
            return _result(ProbeStatus.MISSING)
        except OSError as exc:
            LOGGER.warning("Cannot inspect %s: %s", candidate, exc)
            return _result(ProbeStatus.UNUSABLE, str(exc))

        if not stat.S_ISREG(info.st_mode):
            LOGGER.warning("Ignoring %s: not a regular file", candidate)
            return _result(ProbeStatus.UNUSABLE, "not a regular file")
        if not os.access(path, os.X_OK):
            LOGGER.warning("Ignoring %s: not executable", candidate)
            return _result(ProbeStatus.UNUSABLE, "not executable")

        env = self.build_execution_environment(candidate).env
        try:
            version = self._versions.capture(candidate, self.settings.version_args, env=env)
        except OSError as exc:
            LOGGER.warning("Cannot run %s: %s", candidate, exc)
            return _result(ProbeStatus.UNUSABLE, str(exc))

        installation = Installation(
            executable_path=candidate,
            version=version,
            install_kind=location.install_kind,
            source=location.source,
        )
        LOGGER.debug("Found %s", installation.describe())
        return ProbeResult(
            candidate=candidate,
            source=location.source,
            install_kind=location.install_kind,
            status=ProbeStatus.FOUND,
            installation=installation,
        )

    def iter_installations(self) -> Iterator[Installation]:
        """Lazily yield usable installations in probe order."""

        for result in self._iter_probes():
            if result.installation is not None:
                yield result.installation

    def discover_installations(self) -> list[Installation]:
        """Return all usable installations in probe order.

        Candidates whose version cannot be determined are included with
        ``version=None``. An empty list means nothing usable was found.
        """

        return list(self.iter_installations())

    def select_best(self, installations: Sequence[Installation]) -> Installation | None:
        """Choose the preferred installation deterministically.

        The highest version wins; installations without a version rank below
        any versioned one. Ties go to the earliest entry in *installations*.
        When ``minimum_version`` is configured, older or unversioned entries
        are not eligible.
        """

        minimum = self.settings.minimum_version
        ranked = [
            (index, installation)
            for index, installation in enumerate(installations)
            if minimum is None or self._versions.is_compatible(installation.version, minimum)
        ]
        if not ranked:
            return None
        _, best = max(
            ranked,
            key=lambda item: (
                item[1].version is not None,
                item[1].version or _NO_VERSION,
                -item[0],
            ),
        )
        return best

    def find_installation(self) -> Installation | None:
        """Discover installations and return the preferred one, if any."""

        best = self.select_best(self.discover_installations())
        if best is None:
            LOGGER.info("No usable %s installation found", self.settings.binary_name)
        else:
            LOGGER.info("Selected %s", best.describe())
        return best

    def require_installation(self) -> Installation:
        """Return the preferred installation or raise :class:`InstallationNotFoundError`."""

        results = self.probe_locations()
        installations = [result.installation for result in results if result.installation is not None]
        best = self.select_best(installations)
        if best is None:
            raise InstallationNotFoundError(self.settings.binary_name, results)
        LOGGER.info("Selected %s", best.describe())
        return best

    def classify(self, executable_path: str | Path) -> Installation:
        """Describe a caller-supplied executable without probing its version."""

        environ = self._environ()
        kind = classify_install_kind(executable_path, home=self._home(environ), settings=self.settings)
        return Installation(executable_path=str(executable_path), install_kind=kind, source="caller")

    def build_execution_environment(self, executable_path: str | Path) -> ExecutionEnvironment:
        """Return the executable with the environment it should be launched with.

        The inherited environment is copied and only ``PATH`` is changed: the
        executable's directory and its companion directories are added when
        missing and the result is deduplicated, so applying this repeatedly
        never grows ``PATH``. Relative paths are made absolute first and bare
        names are looked up on the inherited ``PATH``, so no relative segment
        is ever inserted.

        Args:
            executable_path: Executable discovered by the resolver or supplied
                by the caller.

        Returns:
            ExecutionEnvironment: Executable path and complete environment.

        Raises:
            ValueError: *executable_path* is empty.
        """

        executable = str(executable_path)
        if not executable:
            raise ValueError("executable_path must not be empty")

        env = dict(self._environ())
        search_path = env.get(PATH_VARIABLE, "")
        located = _absolute_executable(executable, search_path)
        if located is None:
            LOGGER.warning("Cannot locate %s on PATH; no directories added", executable)
            companions: list[str] = []
        else:
            executable = located
            companions = companion_directories(
                located,
                package_manager_dirs=self.settings.package_manager_dirs,
            )
        for directory in reversed(companions):
            search_path = add_if_missing(search_path, directory)
        env[PATH_VARIABLE] = deduplicate(search_path)
        return ExecutionEnvironment.from_parts(executable_path=executable, env=env)

    def prepare(self) -> ExecutionEnvironment | None:
        """Return a launch environment for the preferred installation, if any."""

        best = self.find_installation()
        if best is None:
            return None
        return self.build_execution_environment(best.executable_path)


__all__ = ["BinaryResolver", "InstallationNotFoundError"]
