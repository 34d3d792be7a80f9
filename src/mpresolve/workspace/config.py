# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the mpresolve build configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".mpresolve.yaml"


class ConfigError(Exception):
    """Raised when a build configuration file is invalid or cannot be loaded."""


@dataclass(frozen=True)
class TargetPlatform:
    """File extensions and module conventions of one mini-program platform.

    Attributes:
        name: Short platform identifier (``wx``, ``swan``, ``tt``, ``my``).
        template_extension: Extension of generated markup files.
        filter_extension: Extension of generated filter modules.
        esm_filters: Whether filter modules use ``import``/``export default``
            instead of ``require``/``module.exports``.
    """

    name: str
    template_extension: str
    filter_extension: str
    esm_filters: bool = False

    @property
    def merges_page_markup(self) -> bool:
        """Whether page markup is appended to the root component's output file."""
        return self.name == "my"


PLATFORMS: dict[str, TargetPlatform] = {
    "wx": TargetPlatform(name="wx", template_extension="wxml", filter_extension="wxs"),
    "swan": TargetPlatform(name="swan", template_extension="swan", filter_extension="filter.js"),
    "tt": TargetPlatform(name="tt", template_extension="ttml", filter_extension="sjs"),
    "my": TargetPlatform(name="my", template_extension="axml", filter_extension="sjs", esm_filters=True),
}


@dataclass
class BuildConfig:
    """The parsed configuration of one build.

    Attributes:
        project_root: Absolute root that output paths are computed against.
        output_directory: Absolute directory generated files are written to.
        platform: Target platform conventions.
        entries: Entry output name (``app``, ``pages/index/main``) to the
            absolute path of its source file.
        poll_interval: Seconds between readiness re-checks, or ``None`` to
            wait purely on state-change notifications.
        aliases: Request prefix to absolute directory, for module resolution.
    """

    project_root: Path
    output_directory: Path
    platform: TargetPlatform
    entries: dict[str, Path] = field(default_factory=dict)
    poll_interval: float | None = None
    aliases: dict[str, Path] = field(default_factory=dict)


def load_build_config(path: Path) -> BuildConfig:
    """Load and parse a build configuration file.

    Relative paths in the file are interpreted against the file's directory.

    Args:
        path: Path to the ``.mpresolve.yaml`` file.

    Returns:
        A BuildConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Build config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read build config file: {exc}") from exc

    return _parse_build_config(text, base_dir=path.parent.resolve(), source_label=str(path))


# ################
# Implementation
# ################


def _parse_build_config(text: str, base_dir: Path, source_label: str = "<string>") -> BuildConfig:
    """Parse build config YAML text into a BuildConfig.

    Raises:
        ConfigError: If the YAML is invalid or required fields are missing.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: build config must be a YAML mapping")

    project_root = (base_dir / _optional_string(data, "project-root", source_label, ".")).resolve()
    output_directory = (project_root / _require_string(data, "output-directory", source_label)).resolve()
    platform = _parse_platform(data, source_label)

    entries: dict[str, Path] = {}
    for name, src in _optional_mapping(data, "entries", source_label).items():
        entries[name] = (project_root / src).resolve()

    aliases: dict[str, Path] = {}
    for prefix, target in _optional_mapping(data, "aliases", source_label).items():
        aliases[prefix] = (project_root / target).resolve()

    poll_interval: float | None = None
    if "poll-interval-ms" in data:
        raw = data["poll-interval-ms"]
        if isinstance(raw, bool) or not isinstance(raw, int | float) or raw <= 0:
            raise ConfigError(f"{source_label}: 'poll-interval-ms' must be a positive number")
        poll_interval = raw / 1000

    return BuildConfig(
        project_root=project_root,
        output_directory=output_directory,
        platform=platform,
        entries=entries,
        poll_interval=poll_interval,
        aliases=aliases,
    )


def _parse_platform(data: dict[str, object], source_label: str) -> TargetPlatform:
    """Look up the platform preset and apply any extension overrides."""
    name = _optional_string(data, "platform", source_label, "wx")
    if name not in PLATFORMS:
        known = ", ".join(sorted(PLATFORMS))
        raise ConfigError(f"{source_label}: unknown platform '{name}' (expected one of: {known})")
    platform = PLATFORMS[name]

    if "template-extension" in data:
        platform = replace(platform, template_extension=_require_string(data, "template-extension", source_label))
    if "filter-extension" in data:
        platform = replace(platform, filter_extension=_require_string(data, "filter-extension", source_label))
    return platform


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising ConfigError if missing."""
    if key not in mapping:
        raise ConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_string(mapping: dict[str, object], key: str, source_label: str, default: str) -> str:
    if key not in mapping:
        return default
    return _require_string(mapping, key, source_label)


def _optional_mapping(mapping: dict[str, object], key: str, source_label: str) -> dict[str, str]:
    """Extract an optional string-to-string mapping field."""
    value = mapping.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{source_label}: '{key}' must be a mapping")
    for k, v in value.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise ConfigError(f"{source_label}: '{key}' entries must map strings to strings")
    return value
