# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""ModKit Error Reporting.

Deduplicated, copy-to-clipboard error reports for client-side mod features.

Example:
    >>> from modkit_error_reporting import ErrorManagerConfig, create_error_manager
    >>> from modkit_error_reporting import StaticHostSession
    >>>
    >>> manager = create_error_manager(
    ...     ErrorManagerConfig(log_type="silent", notice_type="silent", clipboard_type="silent"),
    ...     session=StaticHostSession(active=True),
    ... )
    >>> report_id = manager.log_error_state_with_data(
    ...     "Could not read the visitor offer",
    ...     "offer lore is empty",
    ...     {"visitor": "Jacob"},
    ... )
    >>> manager.copy_report(report_id)
    True
"""

from collections.abc import Callable
from typing import Any, TypeVar

from .clipboard import Clipboard
from .config import ErrorManagerConfig
from .diagnostic_log import DiagnosticLog
from .error_manager import ErrorManager, Report, ReportOptions
from .errors import ErrorReportingError, ExplicitFailure
from .faults import Fault, FaultKind, Frame
from .guard import dispatch, guarded_handler, post_and_catch
from .host_session import HostSession, StaticHostSession
from .notice_sink import NoticeSink
from .stack_trace import StackTraceRules, render_extra_data, render_stack_trace

__version__ = "0.1.0"

T = TypeVar("T")


def _require_config(config: object) -> ErrorManagerConfig:
    if not isinstance(config, ErrorManagerConfig):
        raise TypeError("config must be ErrorManagerConfig")
    return config


def _build_stdout_log(config: ErrorManagerConfig) -> DiagnosticLog:
    from .stdout_diagnostic_log import StdoutDiagnosticLog

    return StdoutDiagnosticLog(level=_require_config(config).log_level, name="modkit.errors")


def _build_silent_log(config: ErrorManagerConfig) -> DiagnosticLog:
    from .silent_diagnostic_log import SilentDiagnosticLog

    _require_config(config)
    return SilentDiagnosticLog()


def _build_sentry_log(config: ErrorManagerConfig) -> DiagnosticLog:
    from .sentry_diagnostic_log import SentryDiagnosticLog

    config = _require_config(config)
    if not config.sentry_dsn:
        raise ValueError("sentry diagnostic log requires sentry_dsn")
    return SentryDiagnosticLog(dsn=config.sentry_dsn, environment=config.sentry_environment)


def _build_console_notices(config: ErrorManagerConfig) -> NoticeSink:
    from .console_notice_sink import ConsoleNoticeSink

    _require_config(config)
    return ConsoleNoticeSink()


def _build_silent_notices(config: ErrorManagerConfig) -> NoticeSink:
    from .silent_notice_sink import SilentNoticeSink

    _require_config(config)
    return SilentNoticeSink()


def _build_system_clipboard(config: ErrorManagerConfig) -> Clipboard:
    from .system_clipboard import SystemClipboard

    _require_config(config)
    return SystemClipboard()


def _build_silent_clipboard(config: ErrorManagerConfig) -> Clipboard:
    from .silent_clipboard import SilentClipboard

    _require_config(config)
    return SilentClipboard()


def _build_driver(component: str, config: object, setting: str, builders: dict[str, Callable[[Any], T]]) -> T:
    if config is None:
        raise ValueError(f"{component} config is required")
    driver = str(getattr(config, setting)).lower()
    builder = builders.get(driver)
    if builder is None:
        raise ValueError(f"Unknown {component} driver: {driver}. Supported drivers: {', '.join(sorted(builders))}")
    return builder(config)


def create_diagnostic_log(config: ErrorManagerConfig) -> DiagnosticLog:
    """Create the diagnostic log selected by ``config.log_type``.

    Raises:
        ValueError: If config is missing or log_type is not recognized.
    """
    return _build_driver(
        "diagnostic_log",
        config,
        "log_type",
        {"stdout": _build_stdout_log, "silent": _build_silent_log, "sentry": _build_sentry_log},
    )


def create_notice_sink(config: ErrorManagerConfig) -> NoticeSink:
    """Create the notice sink selected by ``config.notice_type``."""
    return _build_driver(
        "notice_sink",
        config,
        "notice_type",
        {"console": _build_console_notices, "silent": _build_silent_notices},
    )


def create_clipboard(config: ErrorManagerConfig) -> Clipboard:
    """Create the clipboard selected by ``config.clipboard_type``."""
    return _build_driver(
        "clipboard",
        config,
        "clipboard_type",
        {"system": _build_system_clipboard, "silent": _build_silent_clipboard},
    )


def create_error_manager(
    config: ErrorManagerConfig | None = None,
    session: HostSession | None = None,
) -> ErrorManager:
    """Create an error manager with drivers chosen by configuration.

    Args:
        config: Settings; defaults to ``ErrorManagerConfig.from_env()``
        session: Host session queries; defaults to an active session whose
            debug flag comes from ``config.debug_build``

    Returns:
        ErrorManager instance

    Raises:
        ValueError: If a driver type is not recognized
    """
    config = config or ErrorManagerConfig.from_env()
    return ErrorManager(
        log=create_diagnostic_log(config),
        notices=create_notice_sink(config),
        clipboard=create_clipboard(config),
        session=session or StaticHostSession(active=True, debug_build=config.debug_build),
        product=config.product,
        version=config.version,
        support_channel=config.support_channel,
        suppression_window=config.suppression_window_seconds,
        notice_expiry=config.notice_expiry_seconds,
        max_reports=config.max_reports,
        rules=config.rules,
    )


__all__ = [
    # Version
    "__version__",
    # Error manager
    "ErrorManager",
    "ErrorManagerConfig",
    "Report",
    "ReportOptions",
    "create_error_manager",
    # Faults
    "Fault",
    "FaultKind",
    "Frame",
    "ErrorReportingError",
    "ExplicitFailure",
    # Rendering
    "StackTraceRules",
    "render_extra_data",
    "render_stack_trace",
    # Guarded handlers
    "dispatch",
    "guarded_handler",
    "post_and_catch",
    # Collaborators
    "Clipboard",
    "DiagnosticLog",
    "HostSession",
    "NoticeSink",
    "StaticHostSession",
    "create_clipboard",
    "create_diagnostic_log",
    "create_notice_sink",
]
