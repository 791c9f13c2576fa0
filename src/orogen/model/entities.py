# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Task contexts and build dependency records."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class Port(BaseModel):
    """A typed property or data port of a task context."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str
    doc: str | None = None


class Argument(BaseModel):
    """A typed argument of an operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str


class Operation(BaseModel):
    """A callable operation exposed by a task context."""

    model_config = ConfigDict(frozen=True)

    name: str
    return_type: str | None = None
    arguments: list[Argument] = _Field(default_factory=list)
    doc: str | None = None


class TaskContext(BaseModel):
    """A task context model: the interface definition of one component task.

    ``name`` is fully qualified (``project::Task``); ``project_name`` is the
    project that declared it, or None for the framework's standard tasks.
    """

    name: str
    project_name: str | None = None
    superclass: str | None = None
    doc: str | None = None
    properties: list[Port] = _Field(default_factory=list)
    input_ports: list[Port] = _Field(default_factory=list)
    output_ports: list[Port] = _Field(default_factory=list)
    operations: list[Operation] = _Field(default_factory=list)
    extended_state_support: bool = False

    @property
    def basename(self) -> str:
        return self.name.rsplit("::", 1)[-1]

    def type_names(self) -> list[str]:
        """Return every type name this task refers to, in declaration order, without duplicates."""
        names: list[str] = []
        for port in (*self.properties, *self.input_ports, *self.output_ports):
            names.append(port.type_name)
        for op in self.operations:
            if op.return_type is not None:
                names.append(op.return_type)
            names.extend(arg.type_name for arg in op.arguments)
        return list(dict.fromkeys(names))


class BuildDependency(BaseModel):
    """A normalized build requirement on one package.

    Attributes:
        var_name: Symbolic variable name used by the build system. Uppercased
            at construction, with every character outside ``[A-Za-z0-9_]``
            replaced by ``_``.
        pkg_name: Package identifier passed to pkg-config.
        corba: The dependency belongs to the CORBA transport layer.
        compile: The package is needed at compile time.
        link: The package must be linked.
    """

    model_config = ConfigDict(frozen=True)

    var_name: str
    pkg_name: str
    corba: bool = False
    compile: bool = True
    link: bool = True

    @field_validator("var_name")
    @classmethod
    def _normalize_var_name(cls, value: str) -> str:
        return _VAR_NAME_RE.sub("_", value).upper()


# ################
# Implementation
# ################

_VAR_NAME_RE = re.compile(r"[^A-Za-z0-9_]")
