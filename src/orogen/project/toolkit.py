# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Toolkits: packaged sets of exported type definitions.

An :class:`ImportedToolkit` is an installed toolkit loaded by name. A
:class:`Toolkit` holds the types a project defines for itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from orogen.errors import TypeNotFoundError
from orogen.metadata.pkgconfig import PackageInfo
from orogen.model.entities import BuildDependency
from orogen.typesystem.registry import TypeRegistry
from orogen.typesystem.types import TypeDef, dependencies_of, normalize_references, normalize_typename

if TYPE_CHECKING:
    from orogen.project.project import Project

# ###############
# Public Interface
# ###############


@dataclass(frozen=True, eq=False)
class ImportedToolkit:
    """An installed toolkit, as loaded from its package metadata.

    Attributes:
        name: Toolkit name (the name of the project that exports it).
        pkg: Package metadata of ``<name>-toolkit-<target>``.
        registry: The toolkit's frozen type registry.
        typelist: Names of the types the toolkit exports.
    """

    name: str
    pkg: PackageInfo
    registry: TypeRegistry
    typelist: tuple[str, ...]

    def includes(self, type_name: str) -> bool:
        """Return True if the toolkit exports *type_name*."""
        return normalize_typename(type_name) in self.typelist


class Toolkit:
    """The type definitions a project exports itself.

    Definitions are registered in the owning project's registry; the toolkit
    only keeps track of which names it defines, in declaration order.
    """

    def __init__(self, project: Project) -> None:
        self.project = project
        self._type_names: list[str] = []

    @property
    def name(self) -> str | None:
        return self.project.name

    @property
    def type_names(self) -> list[str]:
        return list(self._type_names)

    def includes(self, type_name: str) -> bool:
        return normalize_typename(type_name) in self._type_names

    def add_type(self, type_def: TypeDef) -> None:
        """Define a new type in the project's registry.

        Every type *type_def* refers to must already be known.

        Raises:
            TypeNotFoundError: If a referenced type is not registered.
            TypeConflictError: If a different definition with this name exists.
        """
        registry = self.project.registry
        type_def = normalize_references(type_def)
        for dep in dependencies_of(type_def):
            if not registry.includes(dep):
                raise TypeNotFoundError(dep)
        stored = registry.add(type_def)
        if stored.name not in self._type_names:
            self._type_names.append(stored.name)

    def dependencies(self) -> list[BuildDependency]:
        """Return the build dependencies of the toolkit library.

        Every library the project uses is needed to compile the toolkit, and
        linked only when it was declared as a toolkit library. Every imported
        toolkit is a full dependency. With CORBA enabled, the CORBA transport
        of every imported toolkit is added as well.
        """
        project = self.project
        context = project.context
        linked = {pkg.name for pkg in project.toolkit_libraries}

        result: list[BuildDependency] = []
        for pkg in project.used_libraries:
            result.append(BuildDependency(var_name=pkg.name, pkg_name=pkg.name, link=pkg.name in linked))
        for tk in project.used_toolkits:
            result.append(BuildDependency(var_name=f"{tk.name}_TOOLKIT", pkg_name=context.toolkit_package(tk.name)))
            if project.corba_enabled:
                result.append(
                    BuildDependency(
                        var_name=f"{tk.name}_TRANSPORT_CORBA",
                        pkg_name=context.corba_transport_package(tk.name),
                        corba=True,
                    )
                )
        return result
