# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic model for oroGen projects (task contexts, build dependencies)."""

from orogen.model.entities import (
    Argument,
    BuildDependency,
    Operation,
    Port,
    TaskContext,
)

__all__ = [
    "Argument",
    "BuildDependency",
    "Operation",
    "Port",
    "TaskContext",
]
