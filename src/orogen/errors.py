# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error hierarchy shared by the project model and its loaders.

Every failure aborts the generation run. Nothing here is retried: resolution
is deterministic given the environment.
"""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class OrogenError(Exception):
    """Base class for all errors raised while resolving a project."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(OrogenError):
    """Raised when a generation configuration file is invalid or cannot be loaded."""


class NotAvailableError(OrogenError):
    """A named library, toolkit, task library or type cannot be resolved.

    Attributes:
        kind: What was requested (``"library"``, ``"toolkit"``, ...).
        name: The requested name.
    """

    def __init__(self, kind: str, name: str, message: str | None = None) -> None:
        self.kind = kind
        self.name = name
        super().__init__(message or f"no {kind} named '{name}' is available")


class TypeNotFoundError(NotAvailableError):
    """A type name is not defined in the project's registry."""

    def __init__(self, name: str) -> None:
        super().__init__("type", name, f"type '{name}' is not defined in this project's registry")


class TaskNotFoundError(NotAvailableError):
    """No visible task context has the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__("task context", name, f"cannot find a task context model named '{name}'")


class ConflictError(OrogenError):
    """Two definitions claim the same name."""


class TypeConflictError(ConflictError):
    """Two registries hold distinct definitions of the same type."""

    def __init__(self, type_name: str, detail: str | None = None) -> None:
        self.type_name = type_name
        message = f"type definition mismatch for '{type_name}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class DuplicateTaskError(ConflictError):
    """A task context with this fully-qualified name is already visible."""

    def __init__(self, task_name: str, origin: str | None = None) -> None:
        self.task_name = task_name
        message = f"there is already a task context named '{task_name}'"
        if origin:
            message += f" (defined in '{origin}')"
        super().__init__(message)


class NamespaceConflictError(ConflictError):
    """A declared task name collides with a type namespace."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"there is already a namespace called '{name}', this is not supported")


class MalformedProjectError(OrogenError):
    """A project description is structurally invalid."""


class DescriptionError(MalformedProjectError):
    """A description document cannot be evaluated."""


class FrozenProjectError(MalformedProjectError):
    """A declaration was attempted on a project that can no longer change."""


class CircularDependencyError(OrogenError):
    """A project or toolkit transitively imports itself.

    Attributes:
        chain: The import chain, ending with the repeated name.
    """

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__(f"circular project dependency: {' -> '.join(self.chain)}")
