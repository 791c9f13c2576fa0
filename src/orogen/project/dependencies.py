# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Build dependencies of a project's task library.

The computation is a pure function of the fully resolved project: it must run
after every import of the description has been processed. Its output is
sorted by variable name, so it does not depend on declaration order or on
set iteration order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from orogen.model.entities import BuildDependency, TaskContext

if TYPE_CHECKING:
    from orogen.project.imported import ImportedProject
    from orogen.project.project import Project

# ###############
# Public Interface
# ###############


def used_toolkits_of(project: Project) -> list[str]:
    """Names of the imported toolkits whose types the project's own tasks use, sorted."""
    referenced = {name for task in project.self_tasks for name in task.type_names()}
    return sorted(tk.name for tk in project.used_toolkits if any(tk.includes(name) for name in referenced))


def used_task_libraries_of(project: Project) -> list[ImportedProject]:
    """External projects defining an ancestor of one of the project's own tasks.

    Superclass chains are followed across task libraries, so a library that is
    only reached through another one's task hierarchy is included as well.
    The result is sorted by project name.
    """
    tasks_by_name: dict[str, TaskContext] = {t.name: t for t in project.tasks}
    for lib in project.cache.projects.values():
        for task in lib.tasks:
            tasks_by_name.setdefault(task.name, task)

    result: dict[str, ImportedProject] = {}
    for task in project.self_tasks:
        seen: set[str] = {task.name}
        parent_name = task.superclass
        while parent_name is not None and parent_name not in seen:
            seen.add(parent_name)
            parent = tasks_by_name.get(parent_name)
            if parent is None:
                break
            owner = parent.project_name
            if owner is not None and owner != project.name and owner in project.cache.projects:
                result.setdefault(owner, project.cache.projects[owner])
            parent_name = parent.superclass
    return [result[name] for name in sorted(result)]


def compute_build_dependencies(project: Project) -> list[BuildDependency]:
    """Return the build dependencies of the project's task library.

    1. Toolkits used by the project's own tasks become ``<name>_TOOLKIT``
       dependencies on ``<name>-toolkit-<target>``.
    2. Libraries declared with ``using_library`` are used verbatim.
    3. Task libraries defining an ancestor of one of the tasks become
       ``<name>_TASKLIB`` dependencies on ``<name>-tasks-<target>``.
    4. If the project defines its own toolkit, the toolkit's dependencies are
       added for compilation only (``link=False``), except the CORBA ones and
       the ones whose variable name is already present.

    Every dependency of steps 1-3 is needed both to compile and to link.
    Duplicates (by variable name) keep their first occurrence.

    Returns:
        The dependencies, sorted by variable name.
    """
    context = project.context

    result: list[BuildDependency] = []
    for name in used_toolkits_of(project):
        result.append(BuildDependency(var_name=f"{name}_TOOLKIT", pkg_name=context.toolkit_package(name)))
    for pkg in project.used_libraries:
        result.append(BuildDependency(var_name=pkg.name, pkg_name=pkg.name))
    for lib in used_task_libraries_of(project):
        result.append(BuildDependency(var_name=f"{lib.name}_TASKLIB", pkg_name=context.tasks_package(lib.name)))

    var_names = {dep.var_name for dep in result}
    if project.toolkit is not None:
        for dep in project.toolkit.dependencies():
            if dep.corba or dep.var_name in var_names:
                continue
            result.append(dep.model_copy(update={"link": False}))
            var_names.add(dep.var_name)

    unique: dict[str, BuildDependency] = {}
    for dep in result:
        unique.setdefault(dep.var_name, dep)
    return [unique[name] for name in sorted(unique)]
