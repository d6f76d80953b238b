# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Stdout diagnostic log with structured JSON output."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .diagnostic_log import DiagnosticLog

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class StdoutDiagnosticLog(DiagnosticLog):
    """Writes one JSON line per entry to stdout.

    New faults and internal failures are written at ERROR. Suppressed
    repeats are written at INFO, so a WARNING threshold keeps only the
    first occurrence of each origin site. Entries are also relayed to the
    stdlib logger ``name`` so handlers and caplog see them.
    """

    def __init__(self, level: str = "INFO", name: str = "modkit.errors"):
        """Initialize stdout diagnostic log.

        Args:
            level: Lowest level written (DEBUG, INFO, WARNING, ERROR)
            name: Logger name written into each entry and used for the relay
        """
        self.level = level.upper()
        if self.level not in LEVELS:
            raise ValueError(f"Invalid log level: {level}. Must be one of {list(LEVELS)}")
        self.name = name
        self._relay = logging.getLogger(name)

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
        level = "INFO" if suppressed else "ERROR"
        fields = {
            "kind": kind,
            "type": type_name,
            "origin": origin,
            "suppressed": suppressed,
            "trace": trace,
        }
        self._emit(level, "fault", message, fields, relay_text=f"{message}\n{trace}")

    def write_internal_failure(self, action: str, error: BaseException) -> None:
        message = f"Error reporting failed while {action}: {error}"
        fields = {"action": action, "error_type": type(error).__name__}
        self._emit("ERROR", "internal_failure", message, fields, relay_text=message)

    def _emit(self, level: str, event: str, message: str, fields: dict[str, Any], relay_text: str) -> None:
        if LEVELS[level] < LEVELS[self.level]:
            return

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.name,
            "event": event,
            "message": message,
            event: fields,
        }
        try:
            print(json.dumps(entry, default=str), file=sys.stdout, flush=True)
        except (TypeError, ValueError) as e:
            print(f"{level}: {message} (JSON serialization failed: {e})", file=sys.stderr, flush=True)

        self._relay.log(LEVELS[level], relay_text, extra={"diagnostic_event": event, "diagnostic_fields": fields})
