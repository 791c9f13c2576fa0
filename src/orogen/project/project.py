# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""The project model: one instance per component description.

Statements of a description are calls to :class:`Project` methods, made in
textual order by the description loader. Imports are resolved as they are
declared: ``using_toolkit`` merges the toolkit's types into the project
registry, ``using_task_library`` makes the library's task contexts visible and
pulls in every toolkit the library depends on.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from orogen.config import GenerationContext, default_context
from orogen.errors import (
    DuplicateTaskError,
    FrozenProjectError,
    MalformedProjectError,
    NamespaceConflictError,
    NotAvailableError,
    TaskNotFoundError,
)
from orogen.metadata.pkgconfig import PackageInfo, PackageNotFound, PcFileError
from orogen.model.entities import BuildDependency, Operation, Port, TaskContext
from orogen.project.cache import ExternalProjectCache
from orogen.project.toolkit import ImportedToolkit, Toolkit
from orogen.typesystem.registry import TypeRegistry
from orogen.typesystem.types import TypeDef, normalize_typename

if TYPE_CHECKING:
    from orogen.project.imported import ImportedProject

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_TASK_SUPERCLASS = "RTT::TaskContext"


class Project:
    """A component project: its tasks, types, libraries and imports.

    Args:
        context: Generation context. Defaults to the process-wide context.
        cache: Cache of loaded toolkits and projects. Imported projects share
            the cache of the project that loads them.
    """

    def __init__(
        self,
        context: GenerationContext | None = None,
        *,
        cache: ExternalProjectCache | None = None,
    ) -> None:
        self.context = context if context is not None else default_context()
        self.cache = cache if cache is not None else ExternalProjectCache(self.context)
        self.deffile: Path | None = None

        self._name: str | None = None
        self._version = "0.0"
        self._corba: bool | None = None
        self._extended_states: bool | None = None
        self._frozen = False

        # All task contexts visible in this project, and the ones it defines.
        self.tasks: list[TaskContext] = list(self.context.standard_tasks)
        self.self_tasks: list[TaskContext] = []

        self.used_libraries: list[PackageInfo] = []
        self.toolkit_libraries: list[PackageInfo] = []
        self.used_toolkits: list[ImportedToolkit] = []
        self.used_task_libraries: list[ImportedProject] = []
        self.toolkit: Toolkit | None = None

        self.registry = TypeRegistry()
        self.registry.merge(self.context.baseline_registry)

    # -------- identity and settings --------

    @property
    def name(self) -> str | None:
        return self._name

    def set_name(self, new_name: str) -> None:
        """Set the project name. Validation is deferred to :meth:`prepare_generation`."""
        self._check_mutable()
        if not isinstance(new_name, str) or not new_name:
            raise MalformedProjectError("the project name must be a non-empty string")
        self._name = new_name

    @property
    def version(self) -> str:
        return self._version

    def set_version(self, version: str) -> None:
        self._check_mutable()
        version = str(version)
        if not version[:1].isdigit():
            raise MalformedProjectError(f"version strings must start with a number (had: {version})")
        self._version = version

    @property
    def corba_enabled(self) -> bool:
        """Per-project CORBA setting, falling back to the context default."""
        return self.context.corba if self._corba is None else self._corba

    def enable_corba(self) -> None:
        self._check_mutable()
        self._corba = True

    def disable_corba(self) -> None:
        self._check_mutable()
        self._corba = False

    @property
    def extended_states(self) -> bool:
        """Per-project extended state setting, falling back to the context default."""
        return self.context.extended_states if self._extended_states is None else self._extended_states

    @extended_states.setter
    def extended_states(self, value: bool) -> None:
        self._check_mutable()
        self._extended_states = bool(value)

    @property
    def base_dir(self) -> Path | None:
        """Directory of the description file, if the project was loaded from one."""
        return self.deffile.parent if self.deffile is not None else None

    @property
    def has_toolkit(self) -> bool:
        """True if the project defines types of its own."""
        return self.toolkit is not None

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------- native libraries --------

    def using_library(self, name: str, *, toolkit: bool = True) -> PackageInfo:
        """Make the project build-depend on the pkg-config package *name*.

        The library is linked to the task library and, unless *toolkit* is
        False, to the project's own toolkit too.

        Raises:
            NotAvailableError: If no package named *name* exists.
        """
        self._check_mutable()
        pkg = next((p for p in self.used_libraries if p.name == name), None)
        if pkg is None:
            try:
                pkg = self.context.resolver.lookup(name)
            except (PackageNotFound, PcFileError) as exc:
                raise NotAvailableError("library", name) from exc
            self.used_libraries.append(pkg)
        if toolkit and all(p.name != name for p in self.toolkit_libraries):
            self.toolkit_libraries.append(pkg)
        return pkg

    # -------- toolkits --------

    def using_toolkit(self, name: str) -> ImportedToolkit:
        """Import the installed toolkit *name* and merge its types.

        Importing a toolkit that is already imported returns the same handle.

        Raises:
            NotAvailableError: If the toolkit is not installed.
            TypeConflictError: If one of its types differs from a known one.
        """
        self._check_mutable()
        for tk in self.used_toolkits:
            if tk.name == name:
                return tk

        toolkit = self.cache.resolve_toolkit(name)
        self.registry.merge(toolkit.registry)
        self.used_toolkits.append(toolkit)
        logger.info("%s: using toolkit '%s'", self._label(), name)
        return toolkit

    def toolkit_available(self, name: str) -> bool:
        """Return True if an installed toolkit *name* can be found."""
        return self.context.resolver.has_package(self.context.toolkit_package(name))

    def import_types_from(self, name: str) -> ImportedToolkit:
        """Import the types of another project through its installed toolkit.

        Raises:
            NotAvailableError: If *name* has no installed toolkit.
        """
        if not self.toolkit_available(name):
            raise NotAvailableError(
                "toolkit",
                name,
                f"no toolkit named '{name}' is available (importing types from headers is not supported)",
            )
        return self.using_toolkit(name)

    def define_type(self, type_def: TypeDef) -> None:
        """Define a type in the project's own toolkit, creating the toolkit if needed."""
        self._check_mutable()
        if self.toolkit is None:
            self.toolkit = Toolkit(self)
        self.toolkit.add_type(type_def)

    # -------- task libraries --------

    def using_task_library(self, name: str) -> ImportedProject:
        """Make the task contexts of project *name* available in this project.

        The library's tasks become visible as ``name::Task``. The library's
        own toolkit, and every toolkit it imports, are imported as well.
        Importing a library that is already imported returns the same handle.

        Raises:
            NotAvailableError: If the project cannot be found.
            MalformedProjectError: If it defines no task context.
            DuplicateTaskError: If one of its tasks is already visible.
            CircularDependencyError: If the import is part of a cycle.
        """
        self._check_mutable()
        for lib in self.used_task_libraries:
            if lib.name == name:
                return lib

        tasklib = self.load_task_library(name)
        known = {t.name for t in self.tasks}
        for task in tasklib.self_tasks:
            if task.name in known:
                raise DuplicateTaskError(task.name, origin=name)

        # Types first: a conflicting toolkit must not leave the tasks registered.
        if tasklib.has_toolkit:
            self.using_toolkit(tasklib.name)
        for tk in tasklib.used_toolkits:
            self.using_toolkit(tk.name)

        self.tasks.extend(tasklib.self_tasks)
        self.used_task_libraries.append(tasklib)
        logger.info("%s: using task library '%s'", self._label(), name)
        return tasklib

    def load_orogen_project(self, name: str) -> ImportedProject:
        """Load the project *name* through the shared cache."""
        return self.cache.resolve_project(name, self._build_imported_project)

    def load_task_library(self, name: str) -> ImportedProject:
        """Load the project *name*, requiring that it defines task contexts.

        Raises:
            MalformedProjectError: If the project defines no task context.
        """
        tasklib = self.load_orogen_project(name)
        if not tasklib.self_tasks:
            raise MalformedProjectError(f"{name} is an oroGen project, but it defines no task library")
        return tasklib

    def tasklib_used_task_libraries(self) -> list[ImportedProject]:
        """The task libraries the project's own tasks depend on, sorted by name."""
        from orogen.project.dependencies import used_task_libraries_of

        return used_task_libraries_of(self)

    def tasklib_dependencies(self) -> list[BuildDependency]:
        """The build dependencies of the project's task library."""
        from orogen.project.dependencies import compute_build_dependencies

        return compute_build_dependencies(self)

    # -------- task contexts --------

    def task_context(
        self,
        name: str,
        *,
        superclass: str | None = None,
        doc: str | None = None,
        properties: Iterable[Port] = (),
        input_ports: Iterable[Port] = (),
        output_ports: Iterable[Port] = (),
        operations: Iterable[Operation] = (),
    ) -> TaskContext:
        """Define the task context ``<project>::<name>``.

        Every type the task refers to must be known to the registry. The
        superclass defaults to ``RTT::TaskContext`` when that task is visible.

        Raises:
            MalformedProjectError: If the project has no name yet.
            DuplicateTaskError: If a task with this name is already visible.
            NamespaceConflictError: If a type namespace has the same name.
            TaskNotFoundError: If the superclass is unknown.
            TypeNotFoundError: If a referenced type is unknown.
        """
        self._check_mutable()
        if self._name is None:
            raise MalformedProjectError(f"the project name must be set before defining task context '{name}'")
        if self.has_task_context(name):
            raise DuplicateTaskError(f"{self._name}::{name}")
        if self.has_namespace(name):
            raise NamespaceConflictError(name)

        if superclass is not None:
            parent_name: str | None = self.find_task_context(superclass).name
        elif self.has_task_context(DEFAULT_TASK_SUPERCLASS):
            parent_name = DEFAULT_TASK_SUPERCLASS
        else:
            parent_name = None

        task = TaskContext(
            name=f"{self._name}::{name}",
            project_name=self._name,
            superclass=parent_name,
            doc=doc,
            properties=[self._resolve_port(p) for p in properties],
            input_ports=[self._resolve_port(p) for p in input_ports],
            output_ports=[self._resolve_port(p) for p in output_ports],
            operations=[self._resolve_operation(op) for op in operations],
            extended_state_support=self.extended_states,
        )
        self.tasks.append(task)
        self.self_tasks.append(task)
        return task

    def find_task_context(self, name: str) -> TaskContext:
        """Return the visible task context called *name*.

        Local tasks can be named without the project prefix; imported ones
        must be fully qualified (``other::Task``).

        Raises:
            TaskNotFoundError: If no such task is visible.
        """
        task = self._lookup_task(name)
        if task is None:
            raise TaskNotFoundError(name)
        return task

    def has_task_context(self, name: str) -> bool:
        return self._lookup_task(name) is not None

    def has_namespace(self, name: str) -> bool:
        """Return True if the registry holds a type in the namespace *name*."""
        namespace = normalize_typename(name)
        if not namespace.endswith("/"):
            namespace += "/"
        return namespace in self.registry.namespaces()

    # -------- types --------

    def find_type(self, name: str) -> TypeDef:
        """Return the registry definition of *name* (``a::B`` or ``/a/B``).

        Raises:
            TypeNotFoundError: If the type is unknown.
        """
        return self.registry.get(name)

    def imported_type(self, name: str) -> bool:
        """Return True if *name* comes from the baseline or an imported toolkit."""
        return self.context.baseline_registry.includes(name) or any(tk.includes(name) for tk in self.used_toolkits)

    # -------- generation --------

    def validate_name(self) -> None:
        """Check the project name.

        Raises:
            MalformedProjectError: If the name is missing or not a lowercase identifier.
        """
        if self._name is None:
            raise MalformedProjectError("you must set a name for this project")
        if not _NAME_RE.fullmatch(self._name):
            raise MalformedProjectError(
                f"invalid name '{self._name}': names must be all lowercase, can contain "
                "alphanumeric characters and underscores and start with a letter"
            )

    def prepare_generation(self) -> Project:
        """Validate the project and freeze it for code generation."""
        self.validate_name()
        self._frozen = True
        return self

    def freeze(self) -> None:
        self._frozen = True

    # ################
    # Implementation
    # ################

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenProjectError(f"project '{self._name}' can no longer be modified")

    def _label(self) -> str:
        return self._name or "<unnamed project>"

    def _lookup_task(self, name: str) -> TaskContext | None:
        for task in self.tasks:
            if task.name == name:
                return task
        if self._name is not None:
            qualified = f"{self._name}::{name}"
            for task in self.tasks:
                if task.name == qualified:
                    return task
        return None

    def _resolve_port(self, port: Port) -> Port:
        type_def = self.find_type(port.type_name)
        return port.model_copy(update={"type_name": type_def.name})

    def _resolve_operation(self, op: Operation) -> Operation:
        return_type = self.find_type(op.return_type).name if op.return_type is not None else None
        arguments = [
            arg.model_copy(update={"type_name": self.find_type(arg.type_name).name}) for arg in op.arguments
        ]
        return op.model_copy(update={"return_type": return_type, "arguments": arguments})

    def _build_imported_project(self, name: str, pkg: PackageInfo, description: str) -> ImportedProject:
        from orogen.loader.description import load_description
        from orogen.project.imported import ImportedProject

        tasklib = ImportedProject(self, name, pkg)
        path = _description_file(description)
        if path is not None:
            logger.info("Loading project '%s' from %s", name, path)
            tasklib.deffile = path
            text = path.read_text(encoding="utf-8")
            label = str(path)
        else:
            logger.info("Loading project '%s' from the description of package '%s'", name, pkg.name)
            tasklib.deffile = Path(f"{name}.orogen")
            text = description
            label = f"{pkg.name}:deffile"
        load_description(tasklib, text, source_label=label)
        tasklib.freeze()
        return tasklib


_NAME_RE = re.compile(r"[a-z][a-z0-9_]*")


def _description_file(description: str) -> Path | None:
    """Return *description* as a path if it names an existing file."""
    if "\n" in description:
        return None
    try:
        path = Path(description)
        return path if path.is_file() else None
    except OSError:
        return None
