# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization of type registries and exported type lists.

Registries are stored as compact JSON files. The format is versioned so
future schema changes can be detected. A type list is a plain text file
holding one exported type name per line.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from orogen.typesystem.registry import TypeRegistry
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
)

# ###############
# Public Interface
# ###############

REGISTRY_FORMAT_VERSION = "1"
REGISTRY_SUFFIX = ".tlb"
TYPELIST_SUFFIX = ".typelist"


def serialize(registry: TypeRegistry) -> str:
    """Serialize a registry to a compact JSON string, types sorted by name."""
    obj = {
        "v": REGISTRY_FORMAT_VERSION,
        "types": [type_to_dict(t) for t in registry.types()],
    }
    return json.dumps(obj, separators=(",", ":"))


def deserialize(data: str) -> TypeRegistry:
    """Deserialize a registry from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        A new, mutable :class:`TypeRegistry`.

    Raises:
        ValueError: If the format version is not recognised or an entry is invalid.
    """
    obj = json.loads(data)
    version = obj.get("v")
    if version != REGISTRY_FORMAT_VERSION:
        raise ValueError(f"Unsupported registry format version: {version!r}")
    registry = TypeRegistry()
    for entry in obj.get("types", []):
        registry.add(type_from_dict(entry))
    return registry


def write_registry(registry: TypeRegistry, path: Path) -> None:
    """Write *registry* to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(registry), encoding="utf-8")


def read_registry(path: Path) -> TypeRegistry:
    """Read and deserialize a registry from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


def write_typelist(names: list[str], path: Path) -> None:
    """Write exported type names to *path*, one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{name}\n" for name in names), encoding="utf-8")


def read_typelist(path: Path) -> list[str]:
    """Read exported type names from *path*, skipping blank lines."""
    text = path.read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def type_to_dict(type_def: TypeDef) -> dict[str, Any]:
    """Encode a type definition as a tagged dict."""
    if isinstance(type_def, NumericType):
        return {
            "k": "numeric",
            "n": type_def.name,
            "c": type_def.category.value,
            "s": type_def.size,
        }
    if isinstance(type_def, CompoundType):
        return {
            "k": "compound",
            "n": type_def.name,
            "s": type_def.size,
            "f": [_field_to_dict(f) for f in type_def.fields],
        }
    if isinstance(type_def, EnumType):
        return {"k": "enum", "n": type_def.name, "vals": [[sym, val] for sym, val in type_def.values]}
    if isinstance(type_def, ContainerType):
        return {"k": "container", "n": type_def.name, "c": type_def.container, "e": type_def.element_type}
    if isinstance(type_def, ArrayType):
        return {"k": "array", "n": type_def.name, "e": type_def.element_type, "l": type_def.length}
    # OpaqueType is the only remaining variant.
    assert isinstance(type_def, OpaqueType)
    return {"k": "opaque", "n": type_def.name, "s": type_def.size}


def type_from_dict(obj: dict[str, Any]) -> TypeDef:
    """Decode a type definition from a tagged dict."""
    kind = obj["k"]
    if kind == "numeric":
        return NumericType(name=obj["n"], category=NumericCategory(obj["c"]), size=obj["s"])
    if kind == "compound":
        return CompoundType(
            name=obj["n"],
            size=obj.get("s", 0),
            fields=tuple(_field_from_dict(f) for f in obj.get("f", [])),
        )
    if kind == "enum":
        return EnumType(name=obj["n"], values=tuple((sym, val) for sym, val in obj.get("vals", [])))
    if kind == "container":
        return ContainerType(name=obj["n"], container=obj["c"], element_type=obj["e"])
    if kind == "array":
        return ArrayType(name=obj["n"], element_type=obj["e"], length=obj["l"])
    if kind == "opaque":
        return OpaqueType(name=obj["n"], size=obj.get("s", 0))
    raise ValueError(f"Unknown type kind: {kind!r}")


# ################
# Implementation
# ################


def _field_to_dict(f: Field) -> dict[str, Any]:
    return {"n": f.name, "t": f.type_name, "o": f.offset}


def _field_from_dict(obj: dict[str, Any]) -> Field:
    return Field(name=obj["n"], type_name=obj["t"], offset=obj.get("o", 0))
