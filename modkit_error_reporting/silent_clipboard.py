# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""In-memory clipboard for testing."""

from .clipboard import Clipboard


class SilentClipboard(Clipboard):
    """Clipboard that remembers every copied text."""

    def __init__(self):
        self.history: list[str] = []

    def copy(self, text: str) -> None:
        self.history.append(text)

    @property
    def contents(self) -> str | None:
        return self.history[-1] if self.history else None
