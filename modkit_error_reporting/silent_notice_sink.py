# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Silent notice sink that records notices in memory for testing."""

from collections.abc import Callable
from dataclasses import dataclass

from .notice_sink import NoticeSink


@dataclass
class RecordedNotice:
    text: str
    on_activate: Callable[[], None] | None = None
    expire_after: float | None = None

    @property
    def clickable(self) -> bool:
        return self.on_activate is not None

    def activate(self) -> None:
        if self.on_activate is None:
            raise ValueError(f"Notice is not clickable: {self.text!r}")
        self.on_activate()


class SilentNoticeSink(NoticeSink):
    """Notice sink that stores notices instead of showing them."""

    def __init__(self):
        self.notices: list[RecordedNotice] = []

    def notice(self, text: str) -> None:
        self.notices.append(RecordedNotice(text=text))

    def clickable_notice(self, text: str, on_activate: Callable[[], None], expire_after: float) -> None:
        self.notices.append(RecordedNotice(text=text, on_activate=on_activate, expire_after=expire_after))

    @property
    def clickable_notices(self) -> list[RecordedNotice]:
        return [n for n in self.notices if n.clickable]

    def texts(self) -> list[str]:
        return [n.text for n in self.notices]

    def clear(self) -> None:
        self.notices.clear()
