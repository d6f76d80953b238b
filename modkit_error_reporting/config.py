# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Configuration for the error manager and its drivers."""

import os
from dataclasses import dataclass, field

from .error_manager import DEFAULT_NOTICE_EXPIRY_SECONDS, DEFAULT_SUPPRESSION_WINDOW_SECONDS
from .stack_trace import StackTraceRules

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _default(value: str | None, env_var: str, fallback: str) -> str:
    """Helper to pick an explicit value, then env var, then fallback."""
    return (value or os.getenv(env_var) or fallback)


def _parse_float(raw: str, env_var: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{env_var} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{env_var} must be positive, got {raw!r}")
    return value


def _parse_bool(raw: str, env_var: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{env_var} must be a boolean, got {raw!r}")


@dataclass
class ErrorManagerConfig:
    """Settings for ``create_error_manager``.

    Attributes:
        product: Product name shown in reports and notices
        version: Product version shown in reports and notices
        support_channel: Where users are asked to send copied reports
        suppression_window_seconds: Duplicate suppression window (default: 600 = 10 minutes)
        notice_expiry_seconds: Lifetime of a clickable notice (default: 60)
        max_reports: Bound on stored reports; None keeps every report
        log_type: Diagnostic log driver (stdout, silent, sentry)
        log_level: Level for the stdout diagnostic log
        notice_type: Notice sink driver (console, silent)
        clipboard_type: Clipboard driver (system, silent)
        sentry_dsn: DSN for the sentry diagnostic log
        sentry_environment: Environment name reported to Sentry
        debug_build: Whether this is a debug/beta build
        rules: Condensed stack trace rules
    """

    product: str = "ModKit"
    version: str = "0.1.0"
    support_channel: str = "the ModKit Discord"
    suppression_window_seconds: float = DEFAULT_SUPPRESSION_WINDOW_SECONDS
    notice_expiry_seconds: float = DEFAULT_NOTICE_EXPIRY_SECONDS
    max_reports: int | None = None
    log_type: str = "stdout"
    log_level: str = "INFO"
    notice_type: str = "console"
    clipboard_type: str = "system"
    sentry_dsn: str | None = None
    sentry_environment: str | None = None
    debug_build: bool = False
    rules: StackTraceRules = field(default_factory=StackTraceRules)

    @classmethod
    def from_env(
        cls,
        product: str | None = None,
        version: str | None = None,
        log_type: str | None = None,
        notice_type: str | None = None,
        clipboard_type: str | None = None,
    ) -> "ErrorManagerConfig":
        """Build a config from explicit values, then environment variables, then defaults.

        Raises:
            ValueError: If a numeric or boolean variable cannot be parsed
        """
        window_var = "ERROR_REPORTING_SUPPRESSION_WINDOW_SECONDS"
        expiry_var = "ERROR_REPORTING_NOTICE_EXPIRY_SECONDS"
        max_var = "ERROR_REPORTING_MAX_REPORTS"
        debug_var = "ERROR_REPORTING_DEBUG_BUILD"

        max_reports_raw = os.getenv(max_var)
        max_reports = None
        if max_reports_raw:
            try:
                max_reports = int(max_reports_raw)
            except ValueError as exc:
                raise ValueError(f"{max_var} must be an integer, got {max_reports_raw!r}") from exc
            if max_reports <= 0:
                raise ValueError(f"{max_var} must be positive, got {max_reports_raw!r}")

        return cls(
            product=_default(product, "ERROR_REPORTING_PRODUCT", "ModKit"),
            version=_default(version, "ERROR_REPORTING_VERSION", "0.1.0"),
            support_channel=_default(None, "ERROR_REPORTING_SUPPORT_CHANNEL", "the ModKit Discord"),
            suppression_window_seconds=_parse_float(
                _default(None, window_var, str(DEFAULT_SUPPRESSION_WINDOW_SECONDS)), window_var
            ),
            notice_expiry_seconds=_parse_float(
                _default(None, expiry_var, str(DEFAULT_NOTICE_EXPIRY_SECONDS)), expiry_var
            ),
            max_reports=max_reports,
            log_type=_default(log_type, "ERROR_REPORTING_LOG_TYPE", "stdout").lower(),
            log_level=_default(None, "ERROR_REPORTING_LOG_LEVEL", "INFO").upper(),
            notice_type=_default(notice_type, "ERROR_REPORTING_NOTICE_TYPE", "console").lower(),
            clipboard_type=_default(clipboard_type, "ERROR_REPORTING_CLIPBOARD_TYPE", "system").lower(),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
            sentry_environment=os.getenv("SENTRY_ENVIRONMENT") or None,
            debug_build=_parse_bool(os.getenv(debug_var, "false"), debug_var),
        )
