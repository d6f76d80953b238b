# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Sentry-backed diagnostic log.

Requires the optional ``sentry`` extra (``pip install modkit-error-reporting[sentry]``).
"""

from .diagnostic_log import DiagnosticLog

_INSTALL_HINT = "sentry-sdk is not installed. Install it with: pip install sentry-sdk"


class SentryDiagnosticLog(DiagnosticLog):
    """Diagnostic log that forwards new faults and reporter failures to Sentry."""

    def __init__(self, dsn: str | None = None, environment: str | None = None):
        """Initialize Sentry diagnostic log.

        Args:
            dsn: Sentry DSN (Data Source Name) for the project
            environment: Environment name (production, staging, development)
        """
        self.dsn = dsn
        self.environment = environment
        self._initialized = False

        if dsn:
            self._initialize_sentry()

    def _initialize_sentry(self) -> None:
        try:
            import sentry_sdk
        except ImportError as exc:
            raise ImportError(_INSTALL_HINT) from exc

        sentry_sdk.init(dsn=self.dsn, environment=self.environment)
        self._initialized = True

    def _sdk(self):
        if not self._initialized:
            raise RuntimeError("Sentry diagnostic log not initialized with a valid DSN")

        import sentry_sdk

        return sentry_sdk

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
        sentry_sdk = self._sdk()

        # repeats already reached Sentry once; keep them as breadcrumbs for later events
        if suppressed:
            sentry_sdk.add_breadcrumb(category="fault", message=message, level="info", data={"origin": origin})
            return

        with sentry_sdk.new_scope() as scope:
            scope.set_tag("fault_kind", kind)
            scope.set_tag("fault_type", type_name)
            if origin:
                scope.set_tag("fault_origin", origin)
            scope.set_context("fault", {"message": message, "trace": trace})
            if error is not None:
                sentry_sdk.capture_exception(error)
            else:
                sentry_sdk.capture_message(f"{message}\n{trace}", level="error")

    def write_internal_failure(self, action: str, error: BaseException) -> None:
        sentry_sdk = self._sdk()

        with sentry_sdk.new_scope() as scope:
            scope.set_tag("reporter_action", action)
            sentry_sdk.capture_exception(error)
