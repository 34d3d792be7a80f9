# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""A file-system module resolver for hosts that do not bring their own.

Supports the request forms single-file component projects commonly use:

* relative requests (``./header``, ``../mixins/format``), resolved against
  the requesting file's directory,
* absolute paths,
* aliased requests (``@/components/header`` with alias ``@`` → ``src``),
* bare package requests (``some-ui/button``), searched in ``node_modules``
  directories from the context upwards.

A request that does not name an existing file is retried with each known
extension appended, then as a directory containing an ``index`` file.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from mpresolve.compiler.interfaces import ResolutionError

# ###############
# Public Interface
# ###############

DEFAULT_EXTENSIONS = (".vue", ".js", ".ts", ".json")


class FileSystemResolver:
    """Resolve module requests by probing the file system.

    Args:
        aliases: Request prefix to the directory it stands for.
        extensions: Extensions tried, in order, when a request omits one.
    """

    def __init__(
        self,
        aliases: dict[str, Path] | None = None,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
    ) -> None:
        self._aliases = dict(aliases or {})
        self._extensions = extensions

    async def resolve(self, context: Path, request: str) -> Path:
        """Return the absolute file *request* refers to from *context*.

        The file system is probed in a worker thread.

        Raises:
            ResolutionError: If no candidate file exists.
        """
        found = await asyncio.to_thread(self._lookup, context, request)
        if found is not None:
            return found
        raise ResolutionError(f"Cannot resolve '{request}' from '{context}'")

    # ################
    # Implementation
    # ################

    def _lookup(self, context: Path, request: str) -> Path | None:
        for base in self._candidates(context, request):
            found = self._probe(base)
            if found is not None:
                return found.resolve()
        return None

    def _candidates(self, context: Path, request: str) -> list[Path]:
        """Return the paths *request* may denote, most specific first."""
        for prefix, target in self._aliases.items():
            if request == prefix:
                return [target]
            if request.startswith(prefix + "/"):
                return [target / request[len(prefix) + 1 :]]
        path = Path(request)
        if path.is_absolute():
            return [path]
        if request.startswith("."):
            return [context / request]
        return [directory / "node_modules" / request for directory in (context, *context.parents)]

    def _probe(self, base: Path) -> Path | None:
        """Return the first existing file for *base*, trying extensions and index files."""
        if base.is_file():
            return base
        for ext in self._extensions:
            candidate = base.with_name(base.name + ext)
            if candidate.is_file():
                return candidate
        if base.is_dir():
            for ext in self._extensions:
                candidate = base / f"index{ext}"
                if candidate.is_file():
                    return candidate
        return None
