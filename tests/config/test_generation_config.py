# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the generation configuration and context."""

from pathlib import Path

import pytest

from orogen.config import (
    DEFAULT_TARGET,
    TARGET_ENV_VAR,
    GenerationConfig,
    GenerationContext,
    default_context,
    load_generation_config,
    set_default_context,
)
from orogen.errors import ConfigError
from orogen.metadata import PkgConfigResolver
from orogen.typesystem import FrozenRegistryError, NumericCategory, NumericType

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a generation config file and return its path."""
    config_file = tmp_path / ".orogen.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Configuration file
# ###############


def test_full_config(tmp_path: Path) -> None:
    """Every known key is parsed into the matching attribute."""
    content = """\
target: xenomai
corba: true
extended-states: true
pkg-config-path:
  - install/lib/pkgconfig
"""
    config = load_generation_config(_write_config(tmp_path, content))

    assert config.target == "xenomai"
    assert config.corba is True
    assert config.extended_states is True
    assert config.pkg_config_path == ["install/lib/pkgconfig"]


def test_empty_config_yields_defaults(tmp_path: Path) -> None:
    """An empty file is a valid configuration with every default."""
    config = load_generation_config(_write_config(tmp_path, ""))
    assert config == GenerationConfig()


def test_missing_config_file_raises(tmp_path: Path) -> None:
    """A missing file raises ConfigError naming the file."""
    with pytest.raises(ConfigError, match="not found"):
        load_generation_config(tmp_path / "absent.yaml")


def test_unknown_key_raises(tmp_path: Path) -> None:
    """Misspelled keys are rejected instead of silently ignored."""
    with pytest.raises(ConfigError, match="unknown configuration key"):
        load_generation_config(_write_config(tmp_path, "corab: true\n"))


def test_non_mapping_raises(tmp_path: Path) -> None:
    """The document root must be a mapping."""
    with pytest.raises(ConfigError, match="must be a YAML mapping"):
        load_generation_config(_write_config(tmp_path, "- corba\n"))


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    """Syntax errors are reported as ConfigError."""
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_generation_config(_write_config(tmp_path, "target: [unclosed\n"))


def test_non_bool_flag_raises(tmp_path: Path) -> None:
    """Boolean keys only accept true or false."""
    with pytest.raises(ConfigError, match="'corba' must be true or false"):
        load_generation_config(_write_config(tmp_path, "corba: yes please\n"))


def test_pkg_config_path_must_be_list(tmp_path: Path) -> None:
    """A scalar pkg-config-path is rejected."""
    with pytest.raises(ConfigError, match="pkg-config-path"):
        load_generation_config(_write_config(tmp_path, "pkg-config-path: lib/pkgconfig\n"))


# ###############
# Generation context
# ###############


def test_target_defaults_to_gnulinux(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an explicit target or environment variable, gnulinux is used."""
    monkeypatch.delenv(TARGET_ENV_VAR, raising=False)
    assert GenerationContext().target == DEFAULT_TARGET


def test_target_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """OROCOS_TARGET is consulted when no target was given."""
    monkeypatch.setenv(TARGET_ENV_VAR, "xenomai")
    context = GenerationContext()
    assert context.target == "xenomai"
    assert context.toolkit_package("base") == "base-toolkit-xenomai"


def test_explicit_target_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    """An explicit target overrides the environment."""
    monkeypatch.setenv(TARGET_ENV_VAR, "xenomai")
    context = GenerationContext(target="macosx")
    assert context.target == "macosx"
    context.target = None
    assert context.target == "xenomai"


def test_package_keys() -> None:
    """Lookup keys follow the installed naming scheme."""
    context = GenerationContext(target="gnulinux")
    assert context.toolkit_package("base") == "base-toolkit-gnulinux"
    assert context.tasks_package("nav") == "nav-tasks-gnulinux"
    assert context.project_package("nav") == "orogen-project-nav"
    assert context.corba_transport_package("base") == "base-transport-corba-gnulinux"


def test_baseline_registry_is_loaded_once_and_frozen() -> None:
    """The bundled baseline holds the framework types and cannot be modified."""
    context = GenerationContext()
    registry = context.baseline_registry
    assert registry is context.baseline_registry
    assert registry.frozen
    assert "/double" in registry
    assert "/std/string" in registry
    with pytest.raises(FrozenRegistryError):
        registry.add(NumericType(name="/extra", category=NumericCategory.SINT, size=2))


def test_without_baseline_registry() -> None:
    """A context may be built with an empty baseline."""
    context = GenerationContext(baseline_registry_path=None)
    assert len(context.baseline_registry) == 0


def test_standard_tasks_are_loaded() -> None:
    """The framework task contexts are available through the context."""
    names = [task.name for task in GenerationContext().standard_tasks]
    assert "RTT::TaskContext" in names
    assert "OCL::ReportingComponent" in names


def test_from_config_resolves_search_path_relative_to_base_dir(tmp_path: Path) -> None:
    """Configured pkg-config directories are resolved against the config file location."""
    config = GenerationConfig(target="xenomai", corba=True, pkg_config_path=["lib/pkgconfig"])
    context = GenerationContext.from_config(config, tmp_path)

    assert context.target == "xenomai"
    assert context.corba is True
    assert isinstance(context.resolver, PkgConfigResolver)
    assert context.resolver.search_path[0] == (tmp_path / "lib" / "pkgconfig").resolve()


def test_default_context_is_shared() -> None:
    """default_context returns the same instance until it is replaced."""
    custom = GenerationContext(target="xenomai")
    set_default_context(custom)
    try:
        assert default_context() is custom
    finally:
        set_default_context(None)
    assert default_context() is not custom
    set_default_context(None)
