# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-session cache of loaded toolkits and external projects.

A project description may reference the same external project or toolkit
many times, directly and through other imports. The cache makes the first
reference load it and every later one return the very same handle, so that
metadata is queried once and registries are never merged twice from
different copies.

Project loads are recursive (a loaded project may import others). Names whose
load is in progress are tracked so that an import cycle is reported instead
of recursing forever.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from orogen.errors import CircularDependencyError, MalformedProjectError, NotAvailableError
from orogen.metadata.pkgconfig import PackageInfo, PackageNotFound, PcFileError
from orogen.project.toolkit import ImportedToolkit
from orogen.typesystem.exchange import TYPELIST_SUFFIX, read_registry, read_typelist
from orogen.typesystem.types import normalize_typename

if TYPE_CHECKING:
    from orogen.config import GenerationContext
    from orogen.project.imported import ImportedProject

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Builds a project handle from its name, package metadata and description
# (a path to a description file or the literal description text).
ProjectFactory = Callable[[str, PackageInfo, str], "ImportedProject"]


class ExternalProjectCache:
    """Memoizes toolkit and external project loads, keyed by name.

    Args:
        context: Generation context providing the target and the metadata resolver.
    """

    def __init__(self, context: GenerationContext) -> None:
        self.context = context
        self.toolkits: dict[str, ImportedToolkit] = {}
        self.projects: dict[str, ImportedProject] = {}
        self._in_progress: list[str] = []

    def resolve_toolkit(self, name: str) -> ImportedToolkit:
        """Return the toolkit *name*, loading it on first request.

        The toolkit is described by the package ``<name>-toolkit-<target>``,
        whose ``type_registry`` variable names the exported registry file.
        The list of exported types is read from ``<name>.typelist`` in the
        same directory.

        Raises:
            NotAvailableError: If the package or one of its files cannot be found.
            MalformedProjectError: If the registry file cannot be decoded.
        """
        cached = self.toolkits.get(name)
        if cached is not None:
            logger.debug("Toolkit '%s' already loaded", name)
            return cached

        pkg = self._lookup("toolkit", name, [self.context.toolkit_package(name)])
        registry_path = pkg.type_registry
        if registry_path is None:
            raise NotAvailableError(
                "toolkit", name, f"package '{pkg.name}' does not declare a type_registry variable"
            )
        typelist_path = registry_path.parent / (name + TYPELIST_SUFFIX)
        try:
            registry = read_registry(registry_path)
            typelist = read_typelist(typelist_path)
        except OSError as exc:
            raise NotAvailableError("toolkit", name, f"cannot read the files of toolkit '{name}': {exc}") from exc
        except (KeyError, ValueError) as exc:
            raise MalformedProjectError(
                f"invalid type registry for toolkit '{name}' in '{registry_path}': {exc}"
            ) from exc

        exported = tuple(normalize_typename(type_name) for type_name in typelist)
        toolkit = ImportedToolkit(name=name, pkg=pkg, registry=registry.freeze(), typelist=exported)
        self.toolkits[name] = toolkit
        logger.info("Loaded toolkit '%s' (%d types) from %s", name, len(registry), registry_path)
        return toolkit

    def project_description(self, name: str) -> tuple[PackageInfo, str]:
        """Return the package metadata and the description of project *name*.

        ``orogen-project-<name>`` is tried first, then ``<name>-tasks-<target>``.
        The description is the package's ``deffile`` variable: either a path to
        a description file or the description text itself.

        Raises:
            NotAvailableError: If neither package exists.
            MalformedProjectError: If the package has no ``deffile`` variable.
        """
        keys = [self.context.project_package(name), self.context.tasks_package(name)]
        pkg = self._lookup("task library", name, keys)
        description = pkg.deffile
        if not description:
            raise MalformedProjectError(f"package '{pkg.name}' does not declare a deffile variable")
        return pkg, description

    def resolve_project(self, name: str, factory: ProjectFactory) -> ImportedProject:
        """Return the external project *name*, loading it on first request.

        Args:
            name: Name of the project.
            factory: Called once, on a cache miss, to build and evaluate the handle.

        Raises:
            CircularDependencyError: If *name* is already being loaded.
            NotAvailableError: If no package describes the project.
        """
        cached = self.projects.get(name)
        if cached is not None:
            logger.debug("Project '%s' already loaded", name)
            return cached

        if name in self._in_progress:
            start = self._in_progress.index(name)
            raise CircularDependencyError([*self._in_progress[start:], name])

        pkg, description = self.project_description(name)
        self._in_progress.append(name)
        try:
            project = factory(name, pkg, description)
        finally:
            self._in_progress.pop()

        self.projects[name] = project
        return project

    def in_progress(self) -> list[str]:
        """Names of the projects currently being loaded, outermost first."""
        return list(self._in_progress)

    # ################
    # Implementation
    # ################

    def _lookup(self, kind: str, name: str, keys: list[str]) -> PackageInfo:
        """Return the metadata of the first package of *keys* that exists."""
        for key in keys:
            try:
                return self.context.resolver.lookup(key)
            except PackageNotFound:
                continue
            except PcFileError as exc:
                raise NotAvailableError(kind, name, f"invalid metadata for {kind} '{name}': {exc}") from exc
        raise NotAvailableError(kind, name)
