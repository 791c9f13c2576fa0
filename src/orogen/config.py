# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generation configuration and the shared generation context.

A :class:`GenerationContext` carries everything that is process-wide in a
generation run: the target platform, the CORBA and extended-state defaults,
the package metadata resolver, and the baseline type registry and standard
task contexts. The baseline is loaded lazily, once, on first use and is
read-only afterwards, so one context can be shared by any number of projects.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from orogen.errors import ConfigError
from orogen.metadata.pkgconfig import MetadataResolver, PkgConfigResolver, default_search_path
from orogen.typesystem.exchange import read_registry
from orogen.typesystem.registry import TypeRegistry

if TYPE_CHECKING:
    from orogen.model.entities import TaskContext

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_TARGET = "gnulinux"
TARGET_ENV_VAR = "OROCOS_TARGET"
CONFIG_FILE_NAME = ".orogen.yaml"

DATA_DIR = Path(__file__).parent / "data"
BASELINE_REGISTRY_PATH = DATA_DIR / "rtt.tlb"
STANDARD_TASKS_PATHS = (DATA_DIR / "rtt.orogen", DATA_DIR / "ocl.orogen")


@dataclass
class GenerationConfig:
    """The parsed content of a generation configuration file.

    Attributes:
        target: Target platform, or None to use the environment/default.
        corba: Whether CORBA transports are enabled by default.
        extended_states: Whether task contexts get extended state support by default.
        pkg_config_path: Extra pkg-config directories, relative to the config file.
    """

    target: str | None = None
    corba: bool = False
    extended_states: bool = False
    pkg_config_path: list[str] = field(default_factory=list)


def load_generation_config(path: Path) -> GenerationConfig:
    """Load and parse a generation configuration file.

    Args:
        path: Path to the ``.orogen.yaml`` file.

    Returns:
        A GenerationConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file: {exc}") from exc

    return _parse_generation_config(text, source_label=str(path))


class GenerationContext:
    """Process-wide settings and shared read-only state for generation.

    Args:
        target: Explicit target platform. When None, :attr:`target` falls back
            to the ``OROCOS_TARGET`` environment variable, then ``gnulinux``.
        corba: Default for :attr:`Project.corba_enabled`.
        extended_states: Default for :attr:`Project.extended_states`.
        resolver: Package metadata resolver. Defaults to a
            :class:`PkgConfigResolver` on ``PKG_CONFIG_PATH``.
        baseline_registry_path: Registry file holding the framework types.
        standard_tasks_paths: Description files of the framework task contexts.
    """

    def __init__(
        self,
        *,
        target: str | None = None,
        corba: bool = False,
        extended_states: bool = False,
        resolver: MetadataResolver | None = None,
        baseline_registry_path: Path | None = BASELINE_REGISTRY_PATH,
        standard_tasks_paths: tuple[Path, ...] = STANDARD_TASKS_PATHS,
    ) -> None:
        self._target = target
        self.corba = corba
        self.extended_states = extended_states
        self.resolver: MetadataResolver = resolver if resolver is not None else PkgConfigResolver()
        self._baseline_registry_path = baseline_registry_path
        self._standard_tasks_paths = tuple(standard_tasks_paths)
        self._baseline_registry: TypeRegistry | None = None
        self._standard_tasks: tuple[TaskContext, ...] | None = None

    @classmethod
    def from_config(cls, config: GenerationConfig, base_dir: Path) -> GenerationContext:
        """Build a context from a parsed configuration file located in *base_dir*."""
        resolver = PkgConfigResolver()
        if config.pkg_config_path:
            extra = [(base_dir / entry).resolve() for entry in config.pkg_config_path]
            resolver = PkgConfigResolver(extra + default_search_path())
        return cls(
            target=config.target,
            corba=config.corba,
            extended_states=config.extended_states,
            resolver=resolver,
        )

    @property
    def target(self) -> str:
        """The target platform, read anew on every access."""
        if self._target:
            return self._target
        user_target = os.environ.get(TARGET_ENV_VAR)
        if user_target:
            return user_target
        return DEFAULT_TARGET

    @target.setter
    def target(self, value: str | None) -> None:
        self._target = value

    @property
    def baseline_registry(self) -> TypeRegistry:
        """The frozen registry of framework types every project starts with."""
        if self._baseline_registry is None:
            if self._baseline_registry_path is None:
                registry = TypeRegistry()
            else:
                logger.debug("Loading baseline registry from %s", self._baseline_registry_path)
                registry = read_registry(self._baseline_registry_path)
            self._baseline_registry = registry.freeze()
        return self._baseline_registry

    @property
    def standard_tasks(self) -> tuple[TaskContext, ...]:
        """The framework task contexts visible in every project."""
        if self._standard_tasks is None:
            from orogen.loader.description import read_standard_tasks

            tasks: list[TaskContext] = []
            for path in self._standard_tasks_paths:
                tasks.extend(read_standard_tasks(path))
            self._standard_tasks = tuple(tasks)
        return self._standard_tasks

    def toolkit_package(self, name: str) -> str:
        return f"{name}-toolkit-{self.target}"

    def tasks_package(self, name: str) -> str:
        return f"{name}-tasks-{self.target}"

    def project_package(self, name: str) -> str:
        return f"orogen-project-{name}"

    def corba_transport_package(self, name: str) -> str:
        return f"{name}-transport-corba-{self.target}"


def default_context() -> GenerationContext:
    """Return the process-wide context, creating it on first use."""
    global _default_context
    if _default_context is None:
        _default_context = GenerationContext()
    return _default_context


def set_default_context(context: GenerationContext | None) -> None:
    """Replace the process-wide context (None resets it)."""
    global _default_context
    _default_context = context


# ################
# Implementation
# ################

_default_context: GenerationContext | None = None


def _parse_generation_config(text: str, source_label: str = "<string>") -> GenerationConfig:
    """Parse configuration YAML text into a GenerationConfig.

    An empty document yields the defaults.

    Raises:
        ConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return GenerationConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown configuration key(s): {', '.join(unknown)}")

    target = _optional_string(data, "target", source_label)
    corba = _optional_bool(data, "corba", source_label)
    extended_states = _optional_bool(data, "extended-states", source_label)

    pkg_config_path: list[str] = []
    if "pkg-config-path" in data:
        raw = data["pkg-config-path"]
        if not isinstance(raw, list) or not all(isinstance(entry, str) for entry in raw):
            raise ConfigError(f"{source_label}: 'pkg-config-path' must be a list of strings")
        pkg_config_path = list(raw)

    return GenerationConfig(
        target=target,
        corba=corba,
        extended_states=extended_states,
        pkg_config_path=pkg_config_path,
    )


_KNOWN_KEYS = {"target", "corba", "extended-states", "pkg-config-path"}


def _optional_string(mapping: dict[str, object], key: str, source_label: str) -> str | None:
    if key not in mapping or mapping[key] is None:
        return None
    value = mapping[key]
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{source_label}: '{key}' must be a non-empty string")
    return value


def _optional_bool(mapping: dict[str, object], key: str, source_label: str) -> bool:
    value = mapping.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"{source_label}: '{key}' must be true or false")
    return value
