# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Default output and diagnostics sinks."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger("mpresolve.diagnostics")

# ###############
# Public Interface
# ###############


class DirectoryOutputSink:
    """Writes generated files below an output directory, creating parents as needed."""

    def __init__(self, output_directory: Path) -> None:
        self.output_directory = output_directory

    def emit(self, path: str, content: str) -> None:
        target = self.output_directory / path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


class LoggingDiagnostics:
    """Reports diagnostics through the ``mpresolve.diagnostics`` logger."""

    def warn(self, text: str) -> None:
        logger.warning(text)

    def error(self, text: str) -> None:
        logger.error(text)
