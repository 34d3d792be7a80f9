# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Waiting for build state to converge.

Resolution of a unit's dependencies and generation of its markup run as
separate coroutines that never hand each other a future.  Instead, the
consumer waits until a predicate over shared build state holds.  Every state
change calls :meth:`ReadinessGate.notify`, which wakes all waiters so they
re-evaluate their predicates; an optional poll interval adds a fixed-timer
re-check on top of that.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

# ###############
# Public Interface
# ###############


class ReadinessGate:
    """Lets coroutines wait until a condition over build state becomes true.

    Args:
        poll_interval: Seconds between unconditional re-checks of a waiting
            predicate, or ``None`` to rely on :meth:`notify` alone.
    """

    def __init__(self, poll_interval: float | None = None) -> None:
        self._poll_interval = poll_interval
        self._changed = asyncio.Event()

    @property
    def poll_interval(self) -> float | None:
        return self._poll_interval

    def notify(self) -> None:
        """Wake every waiter so it re-evaluates its predicate."""
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    async def wait(self, predicate: Callable[[], bool]) -> None:
        """Return once *predicate* is true.

        The predicate is checked immediately, so a condition that already
        holds returns without suspending.  There is no timeout: a predicate
        that never becomes true keeps the caller waiting until it is cancelled.
        """
        while not predicate():
            changed = self._changed
            if self._poll_interval is None:
                await changed.wait()
                continue
            try:
                await asyncio.wait_for(changed.wait(), self._poll_interval)
            except TimeoutError:
                continue
