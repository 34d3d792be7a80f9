# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Build configuration for mpresolve."""

from mpresolve.workspace.config import (
    CONFIG_FILE_NAME,
    PLATFORMS,
    BuildConfig,
    ConfigError,
    TargetPlatform,
    load_build_config,
)

__all__ = [
    "BuildConfig",
    "CONFIG_FILE_NAME",
    "ConfigError",
    "PLATFORMS",
    "TargetPlatform",
    "load_build_config",
]
