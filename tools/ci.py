#!/usr/bin/env python3
# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Local checks for mpresolve before pushing.

Runs ruff over sources and tests, the resolution test suite with coverage,
and a wheel build.  Name steps on the command line (``format``, ``lint``,
``tests``, ``build``) to run only those.
"""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, tuple[str, list[str]]] = {
    "format": ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    "lint": ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    "tests": ("Tests", ["uv", "run", "pytest", "--cov=mpresolve", "--cov-report=term-missing"]),
    "build": ("Build", ["uv", "build", "--wheel"]),
}


def main(argv: list[str]) -> int:
    """Run the selected steps, or all of them, and print a summary."""
    unknown = [key for key in argv if key not in STEPS]
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(unknown)}; choose from {', '.join(STEPS)}"))
        return 2

    selected = argv or list(STEPS)
    outcomes = [_run_step(*STEPS[key]) for key in selected]

    _banner("Summary")
    for title, passed, elapsed in outcomes:
        paint = chalk.green if passed else chalk.red
        print(paint(f"  {'PASS' if passed else 'FAIL'}  {title} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in outcomes) else 1


# ################
# Implementation
# ################


def _run_step(title: str, cmd: list[str]) -> tuple[str, bool, float]:
    _banner(title)
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=Path(__file__).resolve().parent.parent)
    return title, proc.returncode == 0, time.monotonic() - start


def _banner(title: str) -> None:
    rule = chalk.blue("=" * 60)
    print(f"\n{rule}\n{chalk.blue(title)}\n{rule}")


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
