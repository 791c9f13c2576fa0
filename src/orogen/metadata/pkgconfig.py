# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Package metadata lookup through pkg-config ``.pc`` files.

A package is found by name in the directories of a search path, the same way
``pkg-config`` does it: ``<dir>/<name>.pc``. The default search path is
``PKG_CONFIG_PATH`` followed by ``PKG_CONFIG_LIBDIR`` or, when that variable
is not set, the system directories.

Installed oroGen artifacts publish extra variables in their ``.pc`` file:

* ``type_registry``: path to the exported type registry of a toolkit;
* ``deffile``: path to (or literal text of) a project description;
* ``project_name``: name of the project that installed the package.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import sysconfig
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

PC_SUFFIX = ".pc"


class PackageNotFound(LookupError):
    """Raised when no ``.pc`` file exists for a package name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"package '{name}' not found in the pkg-config search path")


class PcFileError(ValueError):
    """Raised when a ``.pc`` file cannot be parsed."""


@dataclass(frozen=True)
class PackageInfo:
    """Parsed content of one ``.pc`` file.

    Attributes:
        name: The name the package was looked up with.
        path: Path of the ``.pc`` file.
        variables: Variable definitions, with ``${var}`` references expanded.
        fields: Keyword fields (``Name``, ``Version``, ``Libs``, ...), expanded.
    """

    name: str
    path: Path
    variables: dict[str, str] = field(default_factory=dict)
    fields: dict[str, str] = field(default_factory=dict)

    def variable(self, key: str) -> str | None:
        return self.variables.get(key)

    @property
    def version(self) -> str | None:
        return self.fields.get("Version")

    @property
    def cflags(self) -> list[str]:
        return shlex.split(self.fields.get("Cflags", ""))

    @property
    def libs(self) -> list[str]:
        return shlex.split(self.fields.get("Libs", ""))

    @property
    def requires(self) -> list[str]:
        """Names of the packages listed in ``Requires``, version constraints dropped."""
        raw = self.fields.get("Requires", "")
        names: list[str] = []
        for token in re.split(r"[,\s]+", raw):
            if not token or token[0] in "<>=!" or token[0].isdigit():
                continue
            names.append(token)
        return names

    @property
    def type_registry(self) -> Path | None:
        value = self.variables.get("type_registry")
        return Path(value) if value else None

    @property
    def deffile(self) -> str | None:
        return self.variables.get("deffile")

    @property
    def project_name(self) -> str | None:
        return self.variables.get("project_name")


class MetadataResolver(Protocol):
    """Query-by-name service returning package metadata."""

    def lookup(self, name: str) -> PackageInfo: ...

    def has_package(self, name: str) -> bool: ...


class PkgConfigResolver:
    """Resolves package names to :class:`PackageInfo` by reading ``.pc`` files.

    Args:
        search_path: Directories to search, in order. When omitted, the
            environment is read at each lookup (see :func:`default_search_path`).
    """

    def __init__(self, search_path: list[Path] | None = None) -> None:
        self._search_path = list(search_path) if search_path is not None else None

    @property
    def search_path(self) -> list[Path]:
        if self._search_path is not None:
            return list(self._search_path)
        return default_search_path()

    def find(self, name: str) -> Path | None:
        """Return the path of the ``.pc`` file for *name*, or None."""
        for directory in self.search_path:
            candidate = directory / (name + PC_SUFFIX)
            if candidate.is_file():
                return candidate
        return None

    def has_package(self, name: str) -> bool:
        return self.find(name) is not None

    def lookup(self, name: str) -> PackageInfo:
        """Load the metadata of package *name*.

        Raises:
            PackageNotFound: If no ``.pc`` file for *name* is on the search path.
            PcFileError: If the file exists but cannot be read or parsed.
        """
        path = self.find(name)
        if path is None:
            logger.debug("pkg-config: %s not found", name)
            raise PackageNotFound(name)
        logger.debug("pkg-config: %s -> %s", name, path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PcFileError(f"Cannot read '{path}': {exc}") from exc
        variables, fields = parse_pc(text, source_label=str(path))
        return PackageInfo(name=name, path=path, variables=variables, fields=fields)


def default_search_path() -> list[Path]:
    """Return the search path pkg-config would use in this environment.

    The directories of ``PKG_CONFIG_PATH`` come first. They are followed by
    those of ``PKG_CONFIG_LIBDIR`` if it is set (even empty), and by
    :func:`system_search_path` otherwise.
    """
    result = _split_env("PKG_CONFIG_PATH")
    if "PKG_CONFIG_LIBDIR" in os.environ:
        result.extend(_split_env("PKG_CONFIG_LIBDIR"))
    else:
        result.extend(system_search_path())
    return result


def system_search_path() -> list[Path]:
    """Return the directories a stock pkg-config searches by default."""
    result = [Path("/usr/local/lib/pkgconfig"), Path("/usr/local/share/pkgconfig")]
    multiarch = sysconfig.get_config_var("MULTIARCH")
    if multiarch:
        result.append(Path("/usr/lib") / multiarch / "pkgconfig")
    result += [Path("/usr/lib64/pkgconfig"), Path("/usr/lib/pkgconfig"), Path("/usr/share/pkgconfig")]
    return result


def parse_pc(text: str, source_label: str = "<string>") -> tuple[dict[str, str], dict[str, str]]:
    """Parse the content of a ``.pc`` file.

    Args:
        text: Raw file content.
        source_label: Label used in error messages.

    Returns:
        A ``(variables, fields)`` pair, both with references expanded.

    Raises:
        PcFileError: On a malformed line or an undefined/cyclic variable reference.
    """
    raw_vars: dict[str, str] = {}
    raw_fields: dict[str, str] = {}
    for lineno, line in enumerate(_logical_lines(text), start=1):
        match = _LINE_RE.match(line)
        if match is None:
            raise PcFileError(f"{source_label}:{lineno}: cannot parse line {line!r}")
        key, sep, value = match.group(1), match.group(2), match.group(3).strip()
        if sep == "=":
            raw_vars[key] = value
        else:
            raw_fields[key] = value

    variables: dict[str, str] = {}
    for key in raw_vars:
        variables[key] = _expand(raw_vars[key], raw_vars, variables, source_label, (key,))
    fields = {key: _expand(value, raw_vars, variables, source_label, ()) for key, value in raw_fields.items()}
    return variables, fields


# ################
# Implementation
# ################

_LINE_RE = re.compile(r"^([A-Za-z0-9_.]+)\s*([:=])(.*)$")
_VAR_REF_RE = re.compile(r"\$\{([A-Za-z0-9_.]+)\}")


def _split_env(var: str) -> list[Path]:
    raw = os.environ.get(var, "")
    return [Path(entry) for entry in raw.split(os.pathsep) if entry]


def _logical_lines(text: str) -> list[str]:
    """Strip comments and blank lines, joining backslash continuations."""
    lines: list[str] = []
    pending = ""
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].rstrip()
        if line.endswith("\\"):
            pending += line[:-1]
            continue
        line = (pending + line).strip()
        pending = ""
        if line:
            lines.append(line)
    if pending.strip():
        lines.append(pending.strip())
    return lines


def _expand(
    value: str,
    raw_vars: dict[str, str],
    done: dict[str, str],
    source_label: str,
    stack: tuple[str, ...],
) -> str:
    def replace(match: re.Match[str]) -> str:
        ref = match.group(1)
        if ref in done:
            return done[ref]
        if ref not in raw_vars:
            raise PcFileError(f"{source_label}: undefined variable '{ref}'")
        if ref in stack:
            raise PcFileError(f"{source_label}: variable '{ref}' refers to itself")
        done[ref] = _expand(raw_vars[ref], raw_vars, done, source_label, (*stack, ref))
        return done[ref]

    return _VAR_REF_RE.sub(replace, value)
