# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""In-memory type registry with conflict-checked merging."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator

from orogen.errors import TypeConflictError, TypeNotFoundError
from orogen.typesystem.types import TypeDef, namespace_of, normalize_references, normalize_typename

# ###############
# Public Interface
# ###############


class FrozenRegistryError(RuntimeError):
    """Raised when a frozen registry is modified."""


class TypeRegistry:
    """A set of type definitions keyed by normalized type name.

    The registry never holds two distinct definitions under the same name:
    adding or merging a definition that differs from the one already
    registered raises :class:`~orogen.errors.TypeConflictError`. Adding an
    identical definition again is a no-op.
    """

    def __init__(self, types: Iterable[TypeDef] = ()) -> None:
        self._types: dict[str, TypeDef] = {}
        self._frozen = False
        for type_def in types:
            self.add(type_def)

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[TypeDef]:
        return iter(self.types())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.includes(name)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> TypeRegistry:
        """Make the registry read-only and return it."""
        self._frozen = True
        return self

    def add(self, type_def: TypeDef) -> TypeDef:
        """Register one definition and return the stored one.

        The definition is stored with its name and the names it refers to
        normalized. Adding an identical definition again returns the
        definition already registered.

        Raises:
            TypeConflictError: If a different definition has the same name.
            FrozenRegistryError: If the registry is frozen.
        """
        self._check_mutable()
        type_def = normalize_references(type_def)
        existing = self._types.get(type_def.name)
        if existing is not None:
            if canonical_form(existing) != canonical_form(type_def):
                raise TypeConflictError(
                    type_def.name,
                    f"{canonical_form(existing)} != {canonical_form(type_def)}",
                )
            return existing
        self._types[type_def.name] = type_def
        return type_def

    def merge(self, other: TypeRegistry) -> None:
        """Merge every definition of *other* into this registry.

        The merge is all-or-nothing: every definition is checked against
        this registry before anything is added.

        Raises:
            TypeConflictError: On the first conflicting definition, in name order.
        """
        self._check_mutable()
        for type_def in other.types():
            existing = self._types.get(type_def.name)
            if existing is not None and canonical_form(existing) != canonical_form(type_def):
                raise TypeConflictError(
                    type_def.name,
                    f"{canonical_form(existing)} != {canonical_form(type_def)}",
                )
        for type_def in other.types():
            self._types.setdefault(type_def.name, type_def)

    def get(self, name: str) -> TypeDef:
        """Return the definition of *name* (normalized first).

        Raises:
            TypeNotFoundError: If no such type is registered.
        """
        typename = normalize_typename(name)
        try:
            return self._types[typename]
        except KeyError:
            raise TypeNotFoundError(typename) from None

    def includes(self, name: str) -> bool:
        return normalize_typename(name) in self._types

    def names(self) -> list[str]:
        """Return all registered type names, sorted."""
        return sorted(self._types)

    def types(self) -> list[TypeDef]:
        """Return all registered definitions, sorted by name."""
        return [self._types[name] for name in sorted(self._types)]

    def namespaces(self) -> set[str]:
        """Return every namespace (and enclosing namespace) that holds a type."""
        result: set[str] = set()
        for name in self._types:
            ns = namespace_of(name)
            while ns != "/":
                result.add(ns)
                ns = namespace_of(ns[:-1])
        return result

    def copy(self) -> TypeRegistry:
        """Return a mutable copy of this registry."""
        result = TypeRegistry()
        result._types = dict(self._types)
        return result

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenRegistryError("cannot modify a frozen type registry")


def canonical_form(type_def: TypeDef) -> str:
    """Return the exact serialized form of one definition.

    Two definitions are the same type iff their canonical forms are equal.
    """
    return json.dumps(type_def.model_dump(mode="json"), separators=(",", ":"), sort_keys=True)
