# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Naming of units and of the files generated for them."""

from __future__ import annotations

import hashlib
import posixpath
import re
from dataclasses import dataclass
from pathlib import Path

from mpresolve.compiler.interfaces import ResolutionError
from mpresolve.model.records import PageType, UnitTarget
from mpresolve.workspace.config import TargetPlatform

# ###############
# Public Interface
# ###############

APP_ENTRY = "app"


@dataclass(frozen=True)
class OutputLocation:
    """A generated file and the name it is referenced by.

    Attributes:
        file_path: Output path relative to the output directory, ``/``-separated,
            without a leading slash.
        name: Template or module name derived from the source file.
    """

    file_path: str
    name: str

    @property
    def absolute(self) -> str:
        """The path as referenced from inside the mini-program (leading ``/``)."""
        return "/" + self.file_path


def normalize_component_name(name: str) -> str:
    """Convert a camelCase or PascalCase component name to kebab-case.

    ``"MyHeader"`` and ``"myHeader"`` both become ``"my-header"``; names that
    are already kebab-case are returned unchanged.
    """
    return _UPPER_RE.sub(lambda m: ("-" if m.start() else "") + m.group(0).lower(), name)


def resolve_target(resource_path: Path, entries: dict[str, Path]) -> UnitTarget:
    """Classify *resource_path* against the entry table.

    The entry named ``app`` is the application; every other entry is a page;
    anything that is not an entry is a plain component.
    """
    for name, entry in entries.items():
        if entry == resource_path:
            page_type = PageType.APP if name == APP_ENTRY else PageType.PAGE
            return UnitTarget(page_type=page_type, src=name)
    return UnitTarget(page_type=PageType.COMPONENT)


def component_output(project_root: Path, file: Path, platform: TargetPlatform) -> OutputLocation:
    """Return where the markup generated for *file* is written."""
    rel = _relative_stem(project_root, file)
    return OutputLocation(file_path=f"{rel}.{platform.template_extension}", name=_unit_name(rel))


def filter_output(project_root: Path, file: Path, platform: TargetPlatform) -> OutputLocation:
    """Return where the filter module generated for *file* is written."""
    rel = _relative_stem(project_root, file)
    return OutputLocation(file_path=f"{rel}.{platform.filter_extension}", name=_unit_name(rel))


def relative_module_path(from_file: str, to_file: str) -> str:
    """Return the ``./``- or ``../``-prefixed path of *to_file* as seen from *from_file*."""
    rel_dir = posixpath.relpath(posixpath.dirname(to_file) or ".", posixpath.dirname(from_file) or ".")
    rel = posixpath.join(rel_dir, posixpath.basename(to_file))
    return rel if rel.startswith("../") else "./" + posixpath.normpath(rel)


# ################
# Implementation
# ################

_UPPER_RE = re.compile(r"[A-Z]")
_NON_WORD_RE = re.compile(r"\W")


def _relative_stem(project_root: Path, file: Path) -> str:
    """Return *file* relative to *project_root*, ``/``-separated, without its suffix."""
    try:
        rel = file.relative_to(project_root)
    except ValueError:
        raise ResolutionError(f"'{file}' is outside the project root '{project_root}'") from None
    return rel.with_suffix("").as_posix()


def _unit_name(rel_stem: str) -> str:
    """Return a template-safe unique name: sanitized file stem plus a short path hash."""
    stem = _NON_WORD_RE.sub("_", posixpath.basename(rel_stem))
    digest = hashlib.sha1(rel_stem.encode("utf-8")).hexdigest()[:8]
    return f"{stem}${digest}"
