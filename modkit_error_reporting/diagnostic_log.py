# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Diagnostic log interface: where every fault ends up, seen or not."""

from abc import ABC, abstractmethod


class DiagnosticLog(ABC):
    """Sink for the two kinds of entries the error manager writes.

    ``write_fault`` receives every reported fault, including repeats that
    were suppressed from the user. ``write_internal_failure`` receives
    failures of the reporting machinery itself.
    """

    @abstractmethod
    def write_fault(
        self,
        message: str,
        trace: str,
        *,
        kind: str,
        type_name: str,
        origin: str | None = None,
        suppressed: bool = False,
        error: BaseException | None = None,
    ) -> None:
        """Write a fault with its rendered cause chain.

        Args:
            message: Human-readable fault message
            trace: Full stack trace text
            kind: Fault kind value (``GenericError`` or ``ExplicitReport``)
            type_name: Type shown in the outermost "Caused by" header
            origin: ``file:line`` of the innermost frame, if known
            suppressed: True when the user was not notified because of a recent repeat
            error: Originating exception, if any
        """

    @abstractmethod
    def write_internal_failure(self, action: str, error: BaseException) -> None:
        """Record that reporting itself failed.

        Args:
            action: What the manager was doing, e.g. "sending a notice"
            error: The exception that interrupted it
        """
