# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Exceptions raised by the error reporting library."""


class ErrorReportingError(Exception):
    """Base class for errors raised by modkit_error_reporting."""


class ExplicitFailure(ErrorReportingError):
    """Raised by ``ErrorManager.fail`` after the failure has been reported.

    Callers never see control return from ``fail``; this exception unwinds
    the current operation instead.
    """

    def __init__(self, message: str, report_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.report_id = report_id
