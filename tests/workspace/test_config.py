# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the build configuration module."""

from pathlib import Path

import pytest

from mpresolve.workspace import (
    PLATFORMS,
    BuildConfig,
    ConfigError,
    load_build_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a build config file and return its path."""
    config_file = tmp_path / ".mpresolve.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_minimal_config(tmp_path: Path) -> None:
    """A config with only output-directory uses the defaults for everything else."""
    config = load_build_config(_write_config(tmp_path, "output-directory: dist\n"))

    assert isinstance(config, BuildConfig)
    assert config.project_root == tmp_path.resolve()
    assert config.output_directory == (tmp_path / "dist").resolve()
    assert config.platform == PLATFORMS["wx"]
    assert config.entries == {}
    assert config.aliases == {}
    assert config.poll_interval is None


def test_full_config(tmp_path: Path) -> None:
    content = """\
project-root: src
output-directory: ../dist
platform: my
poll-interval-ms: 20
entries:
  app: main.js
  pages/index/main: pages/index/main.js
aliases:
  "@": .
"""
    config = load_build_config(_write_config(tmp_path, content))

    src = (tmp_path / "src").resolve()
    assert config.project_root == src
    assert config.output_directory == (tmp_path / "dist").resolve()
    assert config.platform.name == "my"
    assert config.platform.template_extension == "axml"
    assert config.platform.esm_filters
    assert config.poll_interval == pytest.approx(0.02)
    assert config.entries == {"app": src / "main.js", "pages/index/main": src / "pages" / "index" / "main.js"}
    assert config.aliases == {"@": src}


def test_extension_overrides(tmp_path: Path) -> None:
    content = """\
output-directory: dist
platform: swan
template-extension: swan.xml
filter-extension: sjs
"""
    config = load_build_config(_write_config(tmp_path, content))

    assert config.platform.name == "swan"
    assert config.platform.template_extension == "swan.xml"
    assert config.platform.filter_extension == "sjs"
    assert PLATFORMS["swan"].filter_extension == "filter.js"


@pytest.mark.parametrize("name", sorted(PLATFORMS))
def test_every_platform_is_accepted(tmp_path: Path, name: str) -> None:
    config = load_build_config(_write_config(tmp_path, f"output-directory: dist\nplatform: {name}\n"))
    assert config.platform is PLATFORMS[name]


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_build_config(tmp_path / ".mpresolve.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_build_config(_write_config(tmp_path, "output-directory: [unclosed\n"))


def test_not_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="must be a YAML mapping"):
        load_build_config(_write_config(tmp_path, "- a\n- b\n"))


def test_missing_output_directory(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="missing required field 'output-directory'"):
        load_build_config(_write_config(tmp_path, "platform: wx\n"))


def test_unknown_platform(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="unknown platform 'qq'"):
        load_build_config(_write_config(tmp_path, "output-directory: dist\nplatform: qq\n"))


@pytest.mark.parametrize("value", ["0", "-5", "fast", "true"])
def test_invalid_poll_interval(tmp_path: Path, value: str) -> None:
    with pytest.raises(ConfigError, match="'poll-interval-ms' must be a positive number"):
        load_build_config(_write_config(tmp_path, f"output-directory: dist\npoll-interval-ms: {value}\n"))


def test_entries_must_be_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="'entries' must be a mapping"):
        load_build_config(_write_config(tmp_path, "output-directory: dist\nentries:\n  - main.js\n"))


def test_entry_values_must_be_strings(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="'entries' entries must map strings to strings"):
        load_build_config(_write_config(tmp_path, "output-directory: dist\nentries:\n  app: 3\n"))


def test_output_directory_must_be_a_string(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="'output-directory' must be a string"):
        load_build_config(_write_config(tmp_path, "output-directory: 42\n"))
