# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of component requests to concrete component targets."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from mpresolve.compiler.interfaces import ModuleResolver, ResolutionError
from mpresolve.compiler.paths import normalize_component_name
from mpresolve.model.records import ComponentTarget

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

ComponentLocator = Callable[[Path], ComponentTarget]


async def resolve_components(
    requests: dict[str, tuple[Path, str]],
    resolver: ModuleResolver,
    locate: ComponentLocator,
) -> dict[str, ComponentTarget]:
    """Resolve every component request concurrently.

    Args:
        requests: Component name to ``(context directory, module request)``.
        resolver: Maps a request to the component's source file.
        locate: Maps a component source file to its output target.

    Returns:
        Normalized component name to target, in the order of *requests*.
        Requests that cannot be resolved are logged and left out.
    """
    names = list(requests)
    targets = await asyncio.gather(*(_resolve_one(name, *requests[name], resolver, locate) for name in names))
    resolved = zip(names, targets, strict=True)
    return {normalize_component_name(name): target for name, target in resolved if target is not None}


def in_context(context: Path, requests: dict[str, str]) -> dict[str, tuple[Path, str]]:
    """Pair every request in *requests* with the same *context* directory."""
    return {name: (context, request) for name, request in requests.items()}


# ################
# Implementation
# ################


async def _resolve_one(
    name: str,
    context: Path,
    request: str,
    resolver: ModuleResolver,
    locate: ComponentLocator,
) -> ComponentTarget | None:
    try:
        path = await resolver.resolve(context, request)
        return locate(path)
    except (ResolutionError, OSError) as exc:
        logger.warning("Skipping component '%s' ('%s' from '%s'): %s", name, request, context, exc)
        return None
