# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Markup the core generates itself: page wrappers and the shared slots file."""

from __future__ import annotations

from mpresolve.model.records import ComponentTarget
from mpresolve.workspace.config import TargetPlatform

# ###############
# Public Interface
# ###############

SLOTS_STEM = "components/slots"
SLOTS_NAME = "slots"


def page_markup(name: str, file_path: str) -> str:
    """Return the page file that imports and instantiates the page's root component."""
    return f"<import src=\"{file_path}\" />\n<template is=\"{name}\" data=\"{{{{ ...$root['0'], $root }}}}\" />\n"


def slots_target(platform: TargetPlatform) -> ComponentTarget:
    """Return the component entry every template gets for the shared slots file."""
    return ComponentTarget(src=f"/{SLOTS_STEM}.{platform.template_extension}", name=SLOTS_NAME)


class SlotCollector:
    """Gathers slot templates hoisted out of component markup across a compile pass.

    Slots are keyed by name, so re-rendering a component replaces its slots.
    """

    def __init__(self) -> None:
        self._slots: dict[str, str] = {}
        self._imports: dict[str, None] = {}

    def add(self, slots: dict[str, str], import_code: str) -> None:
        self._slots.update(slots)
        for line in import_code.splitlines():
            line = line.strip()
            # The slots file must not import itself.
            if line and SLOTS_STEM not in line:
                self._imports[line] = None

    def render(self) -> str:
        """Return the slots file content, or an empty string when nothing was collected."""
        parts = list(self._imports) + list(self._slots.values())
        return "\n".join(parts).strip()

    def output_path(self, platform: TargetPlatform) -> str:
        return f"{SLOTS_STEM}.{platform.template_extension}"
