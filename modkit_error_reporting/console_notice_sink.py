# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Console notice sink for hosts without an interactive chat surface."""

import logging
import time
from collections.abc import Callable

from .notice_sink import NoticeSink
from .stack_trace import strip_color_codes

logger = logging.getLogger(__name__)


class ConsoleNoticeSink(NoticeSink):
    """Writes notices to the console through Python's logging system.

    Clickable notices are numbered; ``activate(number)`` runs the callback
    as long as the notice has not expired.
    """

    def __init__(self, logger_name: str | None = None, clock: Callable[[], float] = time.monotonic):
        """Initialize console notice sink.

        Args:
            logger_name: Optional logger name to use (defaults to module logger)
            clock: Monotonic time source used for notice expiry
        """
        self.logger = logging.getLogger(logger_name) if logger_name else logger
        self._clock = clock
        self._pending: dict[int, tuple[Callable[[], None], float]] = {}
        self._next_number = 1

    def notice(self, text: str) -> None:
        self.logger.warning(strip_color_codes(text))

    def clickable_notice(self, text: str, on_activate: Callable[[], None], expire_after: float) -> None:
        now = self._clock()
        for expired in [n for n, (_, deadline) in self._pending.items() if now >= deadline]:
            del self._pending[expired]

        number = self._next_number
        self._next_number += 1
        self._pending[number] = (on_activate, now + expire_after)
        self.logger.warning(f"{strip_color_codes(text)} [#{number}]")

    def activate(self, number: int) -> bool:
        """Run the callback of clickable notice ``number``.

        Returns:
            True if the callback ran, False if unknown or expired
        """
        entry = self._pending.get(number)
        if entry is None:
            return False
        on_activate, deadline = entry
        if self._clock() >= deadline:
            del self._pending[number]
            return False
        on_activate()
        return True
