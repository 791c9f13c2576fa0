# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type definitions stored in a type registry."""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class NumericCategory(Enum):
    """Categories of numeric types."""

    SINT = "sint"
    UINT = "uint"
    FLOAT = "float"


class NumericType(BaseModel):
    """A fixed-size integer or floating-point type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["numeric"] = "numeric"
    name: str
    category: NumericCategory
    size: int


class Field(BaseModel):
    """A named field of a compound type, with its byte offset."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str
    offset: int = 0


class CompoundType(BaseModel):
    """A structure made of ordered fields."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["compound"] = "compound"
    name: str
    size: int = 0
    fields: tuple[Field, ...] = ()


class EnumType(BaseModel):
    """An enumeration, as symbol to value pairs."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    name: str
    values: tuple[tuple[str, int], ...] = ()


class ContainerType(BaseModel):
    """A variable-size container such as ``/std/vector``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["container"] = "container"
    name: str
    container: str
    element_type: str


class ArrayType(BaseModel):
    """A fixed-size array."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["array"] = "array"
    name: str
    element_type: str
    length: int


class OpaqueType(BaseModel):
    """A type whose layout is not known to the registry."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["opaque"] = "opaque"
    name: str
    size: int = 0


# A registry entry. The `kind` discriminator selects the concrete model.
TypeDef = Annotated[
    NumericType | CompoundType | EnumType | ContainerType | ArrayType | OpaqueType,
    _Field(discriminator="kind"),
]


def normalize_typename(name: str) -> str:
    """Return the canonical registry form of a type name.

    C++ scope separators are turned into slashes and a leading slash is
    added, so ``base::Time`` and ``/base/Time`` name the same type.
    """
    name = name.strip().replace("::", "/")
    name = _MULTI_SLASH_RE.sub("/", name)
    if not name.startswith("/"):
        name = "/" + name
    return name


def normalize_references(type_def: TypeDef) -> TypeDef:
    """Return *type_def* with its own name and every referenced name normalized."""
    update: dict[str, object] = {"name": normalize_typename(type_def.name)}
    if isinstance(type_def, CompoundType):
        update["fields"] = tuple(
            f.model_copy(update={"type_name": normalize_typename(f.type_name)}) for f in type_def.fields
        )
    elif isinstance(type_def, ContainerType):
        update["container"] = normalize_typename(type_def.container)
        update["element_type"] = normalize_typename(type_def.element_type)
    elif isinstance(type_def, ArrayType):
        update["element_type"] = normalize_typename(type_def.element_type)
    return type_def.model_copy(update=update)


def namespace_of(name: str) -> str:
    """Return the namespace of a normalized type name, with a trailing slash.

    ``/geometry/Point`` lives in ``/geometry/``; ``/int`` lives in ``/``.
    """
    return name[: name.rindex("/") + 1]


def dependencies_of(type_def: TypeDef) -> list[str]:
    """Return the names of the types *type_def* directly refers to."""
    if isinstance(type_def, CompoundType):
        return [f.type_name for f in type_def.fields]
    if isinstance(type_def, (ContainerType, ArrayType)):
        return [type_def.element_type]
    return []


# ################
# Implementation
# ################

_MULTI_SLASH_RE = re.compile(r"/{2,}")
