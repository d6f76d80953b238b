# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Time-limited set used to suppress repeated reports from the same site."""

import time
from collections.abc import Callable, Hashable


class TimeLimitedSet:
    """Set whose entries expire a fixed time after they were last added.

    Expiry is lazy: an entry is only discarded when it is looked up after
    its deadline. The set is not thread-safe; callers hold their own lock.
    """

    def __init__(self, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        """Initialize the set.

        Args:
            window_seconds: Lifetime of an entry in seconds
            clock: Monotonic time source returning seconds
        """
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")
        self.window_seconds = window_seconds
        self._clock = clock
        self._expiry: dict[Hashable, float] = {}

    def __contains__(self, key: Hashable) -> bool:
        deadline = self._expiry.get(key)
        if deadline is None:
            return False
        if self._clock() >= deadline:
            del self._expiry[key]
            return False
        return True

    def __len__(self) -> int:
        return len(self._expiry)

    def add(self, key: Hashable) -> None:
        """Insert the key, or refresh its deadline to now + window."""
        self._expiry[key] = self._clock() + self.window_seconds

    def add_if_absent(self, key: Hashable) -> bool:
        """Insert the key unless it is already active.

        Returns:
            True if the key was inserted, False if it was still active
        """
        if key in self:
            return False
        self.add(key)
        return True

    def clear(self) -> None:
        self._expiry.clear()
