# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures: a throw-away installation tree with pkg-config files."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import pytest

from orogen.config import GenerationContext
from orogen.metadata.pkgconfig import PackageInfo, PkgConfigResolver
from orogen.typesystem.exchange import write_registry, write_typelist
from orogen.typesystem.registry import TypeRegistry
from orogen.typesystem.types import CompoundType, Field, TypeDef

# ###############
# Helpers
# ###############


class InstallTree:
    """Writes installed packages (libraries, toolkits, projects) under *root*."""

    def __init__(self, root: Path, target: str = "gnulinux") -> None:
        self.root = root
        self.target = target
        self.pkgconfig_dir = root / "lib" / "pkgconfig"
        self.pkgconfig_dir.mkdir(parents=True, exist_ok=True)

    def write_pc(self, key: str, variables: dict[str, str] | None = None, fields: dict[str, str] | None = None) -> Path:
        lines = [f"prefix={self.root}"]
        lines += [f"{name}={value}" for name, value in (variables or {}).items()]
        lines.append("")
        all_fields = {"Name": key, "Description": f"{key} package", "Version": "1.0"}
        all_fields.update(fields or {})
        lines += [f"{name}: {value}" for name, value in all_fields.items()]
        path = self.pkgconfig_dir / f"{key}.pc"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    def library(self, name: str) -> Path:
        return self.write_pc(name, fields={"Libs": f"-L${{prefix}}/lib -l{name}", "Cflags": "-I${prefix}/include"})

    def toolkit(self, name: str, types: list[TypeDef], exported: list[str] | None = None) -> Path:
        share = self.root / "share" / "orogen" / name
        write_registry(TypeRegistry(types), share / f"{name}.tlb")
        write_typelist(exported if exported is not None else [t.name for t in types], share / f"{name}.typelist")
        return self.write_pc(
            f"{name}-toolkit-{self.target}",
            variables={"type_registry": f"${{prefix}}/share/orogen/{name}/{name}.tlb", "project_name": name},
        )

    def project(self, name: str, description: str, *, literal: bool = False, key: str | None = None) -> Path:
        if literal:
            deffile = description
        else:
            path = self.root / "share" / "orogen" / f"{name}.orogen"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(description, encoding="utf-8")
            deffile = str(path)
        return self.write_pc(key or f"orogen-project-{name}", variables={"deffile": deffile, "project_name": name})


class CountingResolver(PkgConfigResolver):
    """A pkg-config resolver that records how often each key is looked up."""

    def __init__(self, search_path: list[Path]) -> None:
        super().__init__(search_path)
        self.lookups: Counter[str] = Counter()

    def lookup(self, name: str) -> PackageInfo:
        self.lookups[name] += 1
        return super().lookup(name)


def compound(name: str, *fields: tuple[str, str]) -> CompoundType:
    """Build a compound type from ``(field_name, type_name)`` pairs."""
    offset = 0
    result = []
    for field_name, type_name in fields:
        result.append(Field(name=field_name, type_name=type_name, offset=offset))
        offset += 8
    return CompoundType(name=name, size=offset, fields=tuple(result))


# ###############
# Fixtures
# ###############


@pytest.fixture
def install(tmp_path: Path) -> InstallTree:
    return InstallTree(tmp_path / "install")


@pytest.fixture
def resolver(install: InstallTree) -> CountingResolver:
    return CountingResolver([install.pkgconfig_dir])


@pytest.fixture
def context(resolver: CountingResolver) -> GenerationContext:
    return GenerationContext(target="gnulinux", resolver=resolver)
