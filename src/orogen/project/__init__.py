# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project model: imports, caches, toolkits and build dependencies."""

from orogen.project.cache import ExternalProjectCache
from orogen.project.dependencies import (
    compute_build_dependencies,
    used_task_libraries_of,
    used_toolkits_of,
)
from orogen.project.imported import ImportedProject
from orogen.project.project import DEFAULT_TASK_SUPERCLASS, Project
from orogen.project.toolkit import ImportedToolkit, Toolkit

__all__ = [
    "DEFAULT_TASK_SUPERCLASS",
    "ExternalProjectCache",
    "ImportedProject",
    "ImportedToolkit",
    "Project",
    "Toolkit",
    "compute_build_dependencies",
    "used_task_libraries_of",
    "used_toolkits_of",
]
