# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Abstract clipboard interface."""

from abc import ABC, abstractmethod


class Clipboard(ABC):
    """Destination for copied report text."""

    @abstractmethod
    def copy(self, text: str) -> None:
        """Place text on the clipboard.

        Args:
            text: Text to copy
        """
        pass
