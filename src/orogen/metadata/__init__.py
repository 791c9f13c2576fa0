# Copyright 2026 oroGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Package metadata lookup (pkg-config)."""

from orogen.metadata.pkgconfig import (
    MetadataResolver,
    PackageInfo,
    PackageNotFound,
    PcFileError,
    PkgConfigResolver,
    default_search_path,
    parse_pc,
    system_search_path,
)

__all__ = [
    "MetadataResolver",
    "PackageInfo",
    "PackageNotFound",
    "PcFileError",
    "PkgConfigResolver",
    "default_search_path",
    "parse_pc",
    "system_search_path",
]
