# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Abstract interface for user-facing session notices."""

from abc import ABC, abstractmethod
from collections.abc import Callable


class NoticeSink(ABC):
    """Surface short messages to the user's active session (e.g. game chat)."""

    @abstractmethod
    def notice(self, text: str) -> None:
        """Show a plain notice.

        Args:
            text: Notice text
        """
        pass

    @abstractmethod
    def clickable_notice(self, text: str, on_activate: Callable[[], None], expire_after: float) -> None:
        """Show a notice the user can activate.

        Args:
            text: Notice text
            on_activate: Callback run when the user activates the notice
            expire_after: Seconds after which activation has no effect
        """
        pass
