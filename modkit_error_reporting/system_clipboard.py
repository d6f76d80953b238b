# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Clipboard backed by the operating system clipboard through pyperclip."""

import pyperclip

from .clipboard import Clipboard


class SystemClipboard(Clipboard):
    """Copies report text to the desktop clipboard.

    pyperclip picks the platform mechanism (pbcopy, the Win32 clipboard API,
    wl-copy, xclip or xsel). A missing mechanism surfaces as
    ``pyperclip.PyperclipException``, which the error manager logs.
    """

    def copy(self, text: str) -> None:
        pyperclip.copy(text)
