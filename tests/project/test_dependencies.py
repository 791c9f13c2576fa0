# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for build dependency aggregation."""

from __future__ import annotations

from conftest import InstallTree, compound
from orogen.config import GenerationContext
from orogen.model import Argument, BuildDependency, Operation, Port
from orogen.project import Project, compute_build_dependencies, used_task_libraries_of, used_toolkits_of

# ###############
# Helpers
# ###############

CAMERA = """\
- name: camera
- task_context: Driver
"""

VIEWER = """\
- name: viewer
- using_task_library: camera
- task_context:
    name: Display
    superclass: camera::Driver
"""


def _named(context: GenerationContext, name: str = "nav") -> Project:
    project = Project(context)
    project.set_name(name)
    return project


def _sensors(install: InstallTree) -> None:
    install.toolkit("sensors", [compound("/sensors/Reading", ("value", "/double"))])


def _pairs(deps: list[BuildDependency]) -> list[tuple[str, str]]:
    return [(dep.var_name, dep.pkg_name) for dep in deps]


# ###############
# Reference scenario
# ###############


def test_library_and_toolkit_used_by_a_task(install: InstallTree, context: GenerationContext) -> None:
    """A used library and a toolkit referenced by a task give two full dependencies."""
    install.library("opencv")
    _sensors(install)
    project = _named(context)
    project.using_library("opencv")
    project.using_toolkit("sensors")
    project.task_context("Planner", input_ports=[Port(name="reading", type_name="/sensors/Reading")])

    deps = project.tasklib_dependencies()

    assert deps == [
        BuildDependency(var_name="OPENCV", pkg_name="opencv", link=True, compile=True),
        BuildDependency(var_name="SENSORS_TOOLKIT", pkg_name="sensors-toolkit-gnulinux", link=True, compile=True),
    ]


def test_output_is_deterministic(install: InstallTree, context: GenerationContext) -> None:
    """Two calls on the same project return identical output."""
    for name in ("zlib", "opencv", "eigen"):
        install.library(name)
    _sensors(install)
    project = _named(context)
    for name in ("zlib", "opencv", "eigen"):
        project.using_library(name)
    project.using_toolkit("sensors")
    project.task_context("Planner", output_ports=[Port(name="out", type_name="/sensors/Reading")])

    first = compute_build_dependencies(project)
    second = compute_build_dependencies(project)
    assert [d.model_dump_json() for d in first] == [d.model_dump_json() for d in second]
    assert [d.var_name for d in first] == ["EIGEN", "OPENCV", "SENSORS_TOOLKIT", "ZLIB"]


def test_output_does_not_depend_on_declaration_order(install: InstallTree, context: GenerationContext) -> None:
    """Libraries declared in any order produce the same list."""
    for name in ("zlib", "opencv"):
        install.library(name)
    a = _named(context, "a")
    a.using_library("zlib")
    a.using_library("opencv")
    b = _named(context, "b")
    b.using_library("opencv")
    b.using_library("zlib")
    assert compute_build_dependencies(a) == compute_build_dependencies(b)


def test_project_without_dependencies(context: GenerationContext) -> None:
    """A project that uses nothing has no build dependency."""
    project = _named(context)
    project.task_context("Idle")
    assert compute_build_dependencies(project) == []


# ###############
# Toolkits used by tasks
# ###############


def test_unreferenced_toolkit_is_not_a_dependency(install: InstallTree, context: GenerationContext) -> None:
    """Importing a toolkit whose types no task uses adds nothing."""
    _sensors(install)
    project = _named(context)
    project.using_toolkit("sensors")
    project.task_context("Planner", properties=[Port(name="speed", type_name="/double")])
    assert used_toolkits_of(project) == []
    assert compute_build_dependencies(project) == []


def test_toolkit_used_by_an_operation(install: InstallTree, context: GenerationContext) -> None:
    """Operation signatures count as type references."""
    _sensors(install)
    project = _named(context)
    project.using_toolkit("sensors")
    project.task_context(
        "Planner",
        operations=[Operation(name="feed", arguments=[Argument(name="r", type_name="sensors::Reading")])],
    )
    assert used_toolkits_of(project) == ["sensors"]


def test_typelist_in_cxx_notation_still_matches(install: InstallTree, context: GenerationContext) -> None:
    """Exported names written as C++ scopes match the registry names used by tasks."""
    install.toolkit("sensors", [compound("/sensors/Reading", ("value", "/double"))], exported=["sensors::Reading"])
    project = _named(context)
    project.using_toolkit("sensors")
    project.task_context("Planner", input_ports=[Port(name="reading", type_name="/sensors/Reading")])
    assert _pairs(project.tasklib_dependencies()) == [("SENSORS_TOOLKIT", "sensors-toolkit-gnulinux")]


# ###############
# Task libraries
# ###############


def test_task_library_of_a_superclass(install: InstallTree, context: GenerationContext) -> None:
    """Deriving from an imported task makes its library a dependency."""
    install.project("camera", CAMERA)
    project = _named(context)
    project.using_task_library("camera")
    project.task_context("Tracker", superclass="camera::Driver")

    assert _pairs(compute_build_dependencies(project)) == [("CAMERA_TASKLIB", "camera-tasks-gnulinux")]


def test_task_libraries_are_followed_through_superclass_chain(
    install: InstallTree, context: GenerationContext
) -> None:
    """Ancestors defined in nested libraries are found as well."""
    install.project("camera", CAMERA)
    install.project("viewer", VIEWER)
    project = _named(context)
    project.using_task_library("viewer")
    project.task_context("Overlay", superclass="viewer::Display")

    assert [lib.name for lib in used_task_libraries_of(project)] == ["camera", "viewer"]
    assert _pairs(compute_build_dependencies(project)) == [
        ("CAMERA_TASKLIB", "camera-tasks-gnulinux"),
        ("VIEWER_TASKLIB", "viewer-tasks-gnulinux"),
    ]


def test_unused_task_library_is_not_a_dependency(install: InstallTree, context: GenerationContext) -> None:
    """Importing a library without deriving from its tasks adds nothing."""
    install.project("camera", CAMERA)
    project = _named(context)
    project.using_task_library("camera")
    project.task_context("Standalone")
    assert compute_build_dependencies(project) == []


# ###############
# Toolkit dependencies
# ###############


def test_toolkit_dependencies_are_compile_only(install: InstallTree, context: GenerationContext) -> None:
    """The project toolkit's own dependencies are folded in without linking."""
    _sensors(install)
    project = _named(context)
    project.using_toolkit("sensors")
    project.define_type(compound("/nav/Waypoint", ("reading", "/sensors/Reading")))
    project.task_context("Planner")

    deps = compute_build_dependencies(project)
    assert deps == [
        BuildDependency(var_name="SENSORS_TOOLKIT", pkg_name="sensors-toolkit-gnulinux", link=False),
    ]


def test_local_library_wins_over_toolkit_record(install: InstallTree, context: GenerationContext) -> None:
    """A library used locally keeps its own facets when the toolkit declares it too."""
    install.library("foo")
    project = _named(context)
    project.using_library("foo", toolkit=False)
    project.define_type(compound("/nav/Waypoint", ("x", "/double")))
    project.task_context("Planner")

    assert project.toolkit is not None
    toolkit_deps = project.toolkit.dependencies()
    assert toolkit_deps == [BuildDependency(var_name="FOO", pkg_name="foo", link=False)]

    deps = compute_build_dependencies(project)
    assert deps == [BuildDependency(var_name="FOO", pkg_name="foo", link=True, compile=True)]


def test_locally_used_toolkit_wins_over_toolkit_record(install: InstallTree, context: GenerationContext) -> None:
    """A toolkit referenced by a task keeps link=True even when the project toolkit needs it too."""
    _sensors(install)
    project = _named(context)
    project.using_toolkit("sensors")
    project.define_type(compound("/nav/Waypoint", ("reading", "/sensors/Reading")))
    project.task_context("Planner", input_ports=[Port(name="in", type_name="/sensors/Reading")])

    deps = compute_build_dependencies(project)
    assert deps == [BuildDependency(var_name="SENSORS_TOOLKIT", pkg_name="sensors-toolkit-gnulinux")]


def test_corba_transport_records_are_skipped(install: InstallTree, context: GenerationContext) -> None:
    """CORBA transports belong to the toolkit only."""
    _sensors(install)
    project = _named(context)
    project.enable_corba()
    project.using_toolkit("sensors")
    project.define_type(compound("/nav/Waypoint", ("reading", "/sensors/Reading")))

    assert project.toolkit is not None
    corba = [dep for dep in project.toolkit.dependencies() if dep.corba]
    assert _pairs(corba) == [("SENSORS_TRANSPORT_CORBA", "sensors-transport-corba-gnulinux")]
    assert all(not dep.corba for dep in compute_build_dependencies(project))


def test_toolkit_library_is_linked_into_toolkit(install: InstallTree, context: GenerationContext) -> None:
    """Libraries declared for the toolkit are linked into it."""
    install.library("eigen")
    project = _named(context)
    project.using_library("eigen")
    project.define_type(compound("/nav/Waypoint", ("x", "/double")))
    assert project.toolkit is not None
    assert project.toolkit.dependencies() == [BuildDependency(var_name="EIGEN", pkg_name="eigen", link=True)]
