# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type definitions, the type registry and its exchange format."""

from orogen.typesystem.exchange import (
    REGISTRY_SUFFIX,
    TYPELIST_SUFFIX,
    deserialize,
    read_registry,
    read_typelist,
    serialize,
    write_registry,
    write_typelist,
)
from orogen.typesystem.registry import FrozenRegistryError, TypeRegistry, canonical_form
from orogen.typesystem.types import (
    ArrayType,
    CompoundType,
    ContainerType,
    EnumType,
    Field,
    NumericCategory,
    NumericType,
    OpaqueType,
    TypeDef,
    dependencies_of,
    namespace_of,
    normalize_references,
    normalize_typename,
)

__all__ = [
    # Types
    "NumericCategory",
    "NumericType",
    "Field",
    "CompoundType",
    "EnumType",
    "ContainerType",
    "ArrayType",
    "OpaqueType",
    "TypeDef",
    "normalize_references",
    "normalize_typename",
    "namespace_of",
    "dependencies_of",
    # Registry
    "TypeRegistry",
    "FrozenRegistryError",
    "canonical_form",
    # Exchange format
    "REGISTRY_SUFFIX",
    "TYPELIST_SUFFIX",
    "serialize",
    "deserialize",
    "read_registry",
    "write_registry",
    "read_typelist",
    "write_typelist",
]
