# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Handles on external projects loaded from their installed description."""

from __future__ import annotations

from orogen.errors import MalformedProjectError
from orogen.metadata.pkgconfig import PackageInfo
from orogen.project.project import Project

# ###############
# Public Interface
# ###############


class ImportedProject(Project):
    """An external project, evaluated from its installed description.

    The handle shares the generation context and the load cache of the
    project that imported it, so nested imports go through the same cache.
    Once its description has been evaluated the handle is frozen.

    Args:
        main_project: The project that triggered the load.
        name: The name the project was requested under.
        pkg: Package metadata the description was found through.
    """

    def __init__(self, main_project: Project, name: str, pkg: PackageInfo) -> None:
        super().__init__(main_project.context, cache=main_project.cache)
        self.pkg = pkg
        self._name = name

    def set_name(self, new_name: str) -> None:
        """Accept the name statement of the description only if it matches."""
        self._check_mutable()
        if new_name != self._name:
            raise MalformedProjectError(
                f"package '{self.pkg.name}' was expected to describe project '{self._name}', "
                f"but its description is named '{new_name}'"
            )

    def __repr__(self) -> str:
        return f"ImportedProject({self._name!r}, tasks={[t.name for t in self.self_tasks]!r})"
