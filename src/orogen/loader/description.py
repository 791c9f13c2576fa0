# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML front-end for project descriptions.

A description is a YAML sequence of statements. Each statement is a mapping
with exactly one key, the statement keyword, and is applied to the target
project in textual order::

    - name: nav
    - using_library: opencv
    - using_toolkit: sensors
    - using_task_library: camera
    - types:
        - {kind: compound, name: /nav/Waypoint, fields: [{name: x, type_name: /double}]}
    - task_context:
        name: Planner
        superclass: camera::Driver
        properties:
          - {name: goal, type: /nav/Waypoint}
        output_ports:
          - {name: path, type: /std/vector</double>}

Order matters: a type must be imported or defined before a task refers to it.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from orogen.config import GenerationContext
from orogen.errors import DescriptionError
from orogen.model.entities import Argument, Operation, Port, TaskContext
from orogen.project.project import Project
from orogen.typesystem.types import TypeDef

# ###############
# Public Interface
# ###############

DESCRIPTION_SUFFIX = ".orogen"


def load_project(path: Path, context: GenerationContext | None = None) -> Project:
    """Create a project from the description file at *path*.

    Raises:
        DescriptionError: If the file cannot be read or is malformed.
        OrogenError: Any resolution error raised by a statement.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptionError(f"Cannot read description file '{path}': {exc}") from exc

    project = Project(context)
    project.deffile = path.resolve()
    return load_description(project, text, source_label=str(path))


def load_description(target: Project, text: str, source_label: str = "<string>") -> Project:
    """Evaluate description *text* on *target*, statement by statement.

    Returns:
        *target*, for chaining.

    Raises:
        DescriptionError: If the document is malformed.
        OrogenError: Any resolution error raised by a statement.
    """
    for location, keyword, value in _statements(text, source_label):
        handler = _STATEMENTS.get(keyword)
        if handler is None:
            raise DescriptionError(f"{location}: unknown statement '{keyword}'")
        handler(target, value, location)
    return target


def read_standard_tasks(path: Path) -> list[TaskContext]:
    """Read a file of framework task contexts.

    Only ``task_context`` statements are allowed, with fully-qualified names.
    Types are not checked: the tasks belong to no project.
    """
    text = path.read_text(encoding="utf-8")
    tasks: list[TaskContext] = []
    for location, keyword, value in _statements(text, str(path)):
        if keyword != "task_context":
            raise DescriptionError(f"{location}: only task_context statements are allowed here")
        parsed = _parse_task_context(value, location)
        tasks.append(
            TaskContext(
                name=parsed["name"],
                superclass=parsed["superclass"],
                doc=parsed["doc"],
                properties=parsed["properties"],
                input_ports=parsed["input_ports"],
                output_ports=parsed["output_ports"],
                operations=parsed["operations"],
            )
        )
    return tasks


# ################
# Implementation
# ################

_TYPE_DEF_ADAPTER: TypeAdapter[TypeDef] = TypeAdapter(TypeDef)


def _statements(text: str, source_label: str) -> list[tuple[str, str, Any]]:
    """Split a description into ``(location, keyword, value)`` triples."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DescriptionError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise DescriptionError(f"{source_label}: a description must be a YAML sequence of statements")

    result: list[tuple[str, str, Any]] = []
    for index, entry in enumerate(data):
        location = f"{source_label}: statement[{index}]"
        if isinstance(entry, str):
            # Bare keywords such as `- enable_corba`.
            result.append((location, entry, None))
            continue
        if not isinstance(entry, dict) or len(entry) != 1:
            raise DescriptionError(f"{location} must be a mapping with exactly one key")
        ((keyword, value),) = entry.items()
        if not isinstance(keyword, str):
            raise DescriptionError(f"{location}: statement keyword must be a string")
        result.append((location, keyword, value))
    return result


def _names(value: Any, location: str, keyword: str) -> list[str]:
    """Accept a single name or a list of names."""
    items = value if isinstance(value, list) else [value]
    for item in items:
        if not isinstance(item, str) or not item:
            raise DescriptionError(f"{location}: '{keyword}' expects a name or a list of names")
    return items


def _require_string(mapping: dict[str, Any], key: str, location: str) -> str:
    if key not in mapping:
        raise DescriptionError(f"{location}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str) or not value:
        raise DescriptionError(f"{location}: '{key}' must be a non-empty string")
    return value


def _optional_string(mapping: dict[str, Any], key: str, location: str) -> str | None:
    value = mapping.get(key)
    if value is not None and not isinstance(value, str):
        raise DescriptionError(f"{location}: '{key}' must be a string")
    return value


def _parse_ports(value: Any, location: str, key: str) -> list[Port]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DescriptionError(f"{location}: '{key}' must be a list")
    ports: list[Port] = []
    for index, entry in enumerate(value):
        entry_location = f"{location}.{key}[{index}]"
        if not isinstance(entry, dict):
            raise DescriptionError(f"{entry_location} must be a mapping")
        ports.append(
            Port(
                name=_require_string(entry, "name", entry_location),
                type_name=_require_string(entry, "type", entry_location),
                doc=_optional_string(entry, "doc", entry_location),
            )
        )
    return ports


def _parse_operations(value: Any, location: str) -> list[Operation]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DescriptionError(f"{location}: 'operations' must be a list")
    operations: list[Operation] = []
    for index, entry in enumerate(value):
        entry_location = f"{location}.operations[{index}]"
        if not isinstance(entry, dict):
            raise DescriptionError(f"{entry_location} must be a mapping")
        arguments = [
            Argument(name=port.name, type_name=port.type_name)
            for port in _parse_ports(entry.get("arguments"), entry_location, "arguments")
        ]
        operations.append(
            Operation(
                name=_require_string(entry, "name", entry_location),
                return_type=_optional_string(entry, "return", entry_location),
                arguments=arguments,
                doc=_optional_string(entry, "doc", entry_location),
            )
        )
    return operations


def _parse_task_context(value: Any, location: str) -> dict[str, Any]:
    if isinstance(value, str):
        value = {"name": value}
    if not isinstance(value, dict):
        raise DescriptionError(f"{location}: 'task_context' must be a name or a mapping")
    unknown = sorted(set(value) - _TASK_KEYS)
    if unknown:
        raise DescriptionError(f"{location}: unknown task_context field(s): {', '.join(unknown)}")
    return {
        "name": _require_string(value, "name", location),
        "superclass": _optional_string(value, "superclass", location),
        "doc": _optional_string(value, "doc", location),
        "properties": _parse_ports(value.get("properties"), location, "properties"),
        "input_ports": _parse_ports(value.get("input_ports"), location, "input_ports"),
        "output_ports": _parse_ports(value.get("output_ports"), location, "output_ports"),
        "operations": _parse_operations(value.get("operations"), location),
    }


_TASK_KEYS = {"name", "superclass", "doc", "properties", "input_ports", "output_ports", "operations"}


# -------- statement handlers --------


def _stmt_name(target: Project, value: Any, location: str) -> None:
    if not isinstance(value, str):
        raise DescriptionError(f"{location}: 'name' must be a string")
    target.set_name(value)


def _stmt_version(target: Project, value: Any, location: str) -> None:
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise DescriptionError(f"{location}: 'version' must be a string")
    target.set_version(str(value))


def _stmt_using_library(target: Project, value: Any, location: str) -> None:
    items = value if isinstance(value, list) else [value]
    for item in items:
        if isinstance(item, str):
            target.using_library(item)
        elif isinstance(item, dict):
            name = _require_string(item, "name", location)
            link_toolkit = item.get("toolkit", True)
            if not isinstance(link_toolkit, bool):
                raise DescriptionError(f"{location}: 'toolkit' must be true or false")
            target.using_library(name, toolkit=link_toolkit)
        else:
            raise DescriptionError(f"{location}: 'using_library' expects a name or a {{name, toolkit}} mapping")


def _stmt_using_toolkit(target: Project, value: Any, location: str) -> None:
    for name in _names(value, location, "using_toolkit"):
        target.using_toolkit(name)


def _stmt_import_types_from(target: Project, value: Any, location: str) -> None:
    for name in _names(value, location, "import_types_from"):
        target.import_types_from(name)


def _stmt_using_task_library(target: Project, value: Any, location: str) -> None:
    for name in _names(value, location, "using_task_library"):
        target.using_task_library(name)


def _stmt_types(target: Project, value: Any, location: str) -> None:
    if not isinstance(value, list):
        raise DescriptionError(f"{location}: 'types' must be a list of type definitions")
    for index, entry in enumerate(value):
        try:
            type_def = _TYPE_DEF_ADAPTER.validate_python(entry)
        except ValidationError as exc:
            raise DescriptionError(f"{location}.types[{index}]: invalid type definition: {exc}") from exc
        target.define_type(type_def)


def _stmt_task_context(target: Project, value: Any, location: str) -> None:
    parsed = _parse_task_context(value, location)
    target.task_context(
        parsed["name"],
        superclass=parsed["superclass"],
        doc=parsed["doc"],
        properties=parsed["properties"],
        input_ports=parsed["input_ports"],
        output_ports=parsed["output_ports"],
        operations=parsed["operations"],
    )


def _stmt_enable_corba(target: Project, value: Any, location: str) -> None:
    target.enable_corba()


def _stmt_disable_corba(target: Project, value: Any, location: str) -> None:
    target.disable_corba()


def _stmt_extended_states(target: Project, value: Any, location: str) -> None:
    if value is None:
        value = True
    if not isinstance(value, bool):
        raise DescriptionError(f"{location}: 'extended_states' must be true or false")
    target.extended_states = value


_STATEMENTS: dict[str, Callable[[Project, Any, str], None]] = {
    "name": _stmt_name,
    "version": _stmt_version,
    "using_library": _stmt_using_library,
    "using_toolkit": _stmt_using_toolkit,
    "import_types_from": _stmt_import_types_from,
    "using_task_library": _stmt_using_task_library,
    "types": _stmt_types,
    "task_context": _stmt_task_context,
    "enable_corba": _stmt_enable_corba,
    "disable_corba": _stmt_disable_corba,
    "extended_states": _stmt_extended_states,
}
