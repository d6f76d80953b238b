# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""In-memory diagnostic log for tests."""

from dataclasses import dataclass

from .diagnostic_log import DiagnosticLog


@dataclass
class LoggedFault:
    message: str
    trace: str
    kind: str
    type_name: str
    origin: str | None
    suppressed: bool
    error: BaseException | None


@dataclass
class LoggedFailure:
    action: str
    error: BaseException


class SilentDiagnosticLog(DiagnosticLog):
    """Keeps faults and internal failures in lists instead of writing them."""

    def __init__(self):
        self.faults: list[LoggedFault] = []
        self.internal_failures: list[LoggedFailure] = []

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
        self.faults.append(LoggedFault(message, trace, kind, type_name, origin, suppressed, error))

    def write_internal_failure(self, action: str, error: BaseException) -> None:
        self.internal_failures.append(LoggedFailure(action, error))

    def failed_actions(self) -> list[str]:
        return [failure.action for failure in self.internal_failures]

    def clear(self) -> None:
        self.faults.clear()
        self.internal_failures.clear()
