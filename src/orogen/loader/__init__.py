# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Description front-end: evaluates YAML project descriptions."""

from orogen.loader.description import (
    DESCRIPTION_SUFFIX,
    load_description,
    load_project,
    read_standard_tasks,
)

__all__ = [
    "DESCRIPTION_SUFFIX",
    "load_description",
    "load_project",
    "read_standard_tasks",
]
