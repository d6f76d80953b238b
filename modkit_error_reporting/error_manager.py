# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Error manager: deduplicated, copyable error reports for feature code."""

import logging
import secrets
import string
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, NoReturn

from .clipboard import Clipboard
from .diagnostic_log import DiagnosticLog
from .errors import ExplicitFailure
from .faults import Fault, FaultKind, frames_from_stack, qualified_type_name
from .host_session import HostSession
from .notice_sink import NoticeSink
from .recurrence_cache import TimeLimitedSet
from .stack_trace import (
    NO_STACK_TRACE,
    StackTraceRules,
    render_extra_data,
    render_stack_trace,
    strip_color_codes,
)

logger = logging.getLogger(__name__)

DEFAULT_SUPPRESSION_WINDOW_SECONDS = 600.0
DEFAULT_NOTICE_EXPIRY_SECONDS = 60.0
REPORT_ID_LENGTH = 16

_ID_ALPHABET = string.ascii_letters + string.digits

Context = Mapping[str, Any] | Iterable[tuple[str, Any]] | None


@dataclass(frozen=True)
class ReportOptions:
    """Per-call reporting switches.

    Attributes:
        suppress_duplicates: Skip faults whose origin site was reported recently
        include_stack_trace: Render stack traces into the report texts
        debug_build_only: Report only when running a debug build
    """

    suppress_duplicates: bool = True
    include_stack_trace: bool = True
    debug_build_only: bool = False


@dataclass(frozen=True)
class Report:
    id: str
    short_text: str
    full_text: str


def generate_report_id(length: int = REPORT_ID_LENGTH) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


class ErrorManager:
    """Turns faults into user notices and copyable report texts.

    A fault is always written to the diagnostic log. The user sees at most
    one notice per origin site within the suppression window, and only while
    a session is active. The notice copies the short report, or the full one
    while the modifier key is held, to the clipboard.

    Example:
        >>> manager = ErrorManager(log, notices, clipboard, session)
        >>> try:
        ...     parse_profile(data)
        ... except ValueError as e:
        ...     manager.log_error_with_data(e, "Failed to read profile", {"profile": name})
    """

    def __init__(
        self,
        log: DiagnosticLog,
        notices: NoticeSink,
        clipboard: Clipboard,
        session: HostSession,
        *,
        product: str = "ModKit",
        version: str = "0.1.0",
        support_channel: str = "the ModKit Discord",
        suppression_window: float = DEFAULT_SUPPRESSION_WINDOW_SECONDS,
        notice_expiry: float = DEFAULT_NOTICE_EXPIRY_SECONDS,
        max_reports: int | None = None,
        rules: StackTraceRules | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the error manager.

        Args:
            log: Diagnostic log every fault is written to
            notices: Sink for user-facing notices
            clipboard: Destination for copied reports
            session: Host build/session queries
            product: Product name shown in reports and notices
            version: Product version shown in reports and notices
            support_channel: Where users are asked to send copied reports
            suppression_window: Seconds during which a repeated origin site is silent
            notice_expiry: Seconds a clickable notice stays active
            max_reports: Keep at most this many reports (None keeps all)
            rules: Condensed stack trace rules
            clock: Monotonic time source
        """
        if max_reports is not None and max_reports <= 0:
            raise ValueError(f"max_reports must be positive, got {max_reports}")

        self.log = log
        self.notices = notices
        self.clipboard = clipboard
        self.session = session
        self.product = product
        self.version = version
        self.support_channel = support_channel
        self.notice_expiry = notice_expiry
        self.max_reports = max_reports
        self.rules = rules or StackTraceRules()

        self._lock = threading.Lock()
        self._recent = TimeLimitedSet(suppression_window, clock=clock)
        self._reports: OrderedDict[str, str] = OrderedDict()
        self._full_reports: dict[str, str] = {}

    @property
    def report_count(self) -> int:
        with self._lock:
            return len(self._reports)

    def reset_suppression_cache(self) -> None:
        """Forget every recently reported origin site."""
        with self._lock:
            self._recent.clear()

    def report(self, fault: Fault, options: ReportOptions | None = None) -> str | None:
        """Report a fault.

        Args:
            fault: Fault to report
            options: Reporting switches (defaults to ``ReportOptions()``)

        Returns:
            The new report id, or None when no report was created
        """
        options = options or ReportOptions()

        try:
            if (options.debug_build_only or fault.debug_build_only) and not self.session.is_debug_build():
                return None
        except Exception as e:
            self._log_internal_failure(e, "checking the build mode")
            return None

        suppressed = False
        if options.suppress_duplicates:
            with self._lock:
                suppressed = not self._recent.add_if_absent(fault.recurrence_key)

        try:
            return self._report(fault, options, suppressed)
        except Exception as e:
            self._log_internal_failure(e, "reporting a fault")
            return None

    def _report(self, fault: Fault, options: ReportOptions, suppressed: bool) -> str | None:
        full_trace = "\n".join(render_stack_trace(fault, full=True, rules=self.rules))
        self._write_fault(fault, full_trace, suppressed)
        if suppressed:
            return None

        if not self.session.has_active_session():
            return None

        if options.include_stack_trace and not fault.no_stack_trace:
            stack_trace = "\n".join(render_stack_trace(fault, full=False, rules=self.rules))
            full_stack_trace = full_trace
        else:
            stack_trace = NO_STACK_TRACE
            full_stack_trace = NO_STACK_TRACE

        extra_data = render_extra_data(fault.extra_context)
        raw_message = strip_color_codes(fault.message)
        short_text = f"```\n{self.product} {self.version}: {raw_message}\n \n{stack_trace}\n{extra_data}```"
        full_text = (
            f"```\n{self.product} {self.version}: {raw_message}\n(full stack trace)\n \n"
            f"{full_stack_trace}\n{extra_data}```"
        )
        report_id = self._store(short_text, full_text)

        self.notices.clickable_notice(
            f"§c[{self.product}-{self.version}]: {fault.message}§c. "
            "Click here to copy the error into the clipboard.",
            on_activate=lambda: self.copy_report(report_id, full=self.session.is_modifier_key_down()),
            expire_after=self.notice_expiry,
        )
        return report_id

    def _store(self, short_text: str, full_text: str) -> str:
        with self._lock:
            report_id = generate_report_id()
            while report_id in self._reports:
                report_id = generate_report_id()
            self._reports[report_id] = short_text
            self._full_reports[report_id] = full_text
            if self.max_reports is not None:
                while len(self._reports) > self.max_reports:
                    oldest, _ = self._reports.popitem(last=False)
                    self._full_reports.pop(oldest, None)
        return report_id

    def _write_fault(self, fault: Fault, full_trace: str, suppressed: bool) -> None:
        origin = fault.origin_site
        try:
            self.log.write_fault(
                fault.message,
                full_trace,
                kind=fault.kind.value,
                type_name=fault.type_name,
                origin=f"{origin[0]}:{origin[1]}" if origin else None,
                suppressed=suppressed,
                error=fault.exception,
            )
        except Exception as e:
            logger.error(f"Failed to write fault to diagnostic log: {e}")
            logger.error(f"{fault.message}\n{full_trace}")

    def _log_internal_failure(self, error: Exception, action: str) -> None:
        try:
            self.log.write_internal_failure(action, error)
        except Exception:
            logger.exception(f"Error reporting failed while {action}")

    def get_report(self, report_id: str) -> Report | None:
        """Look up both texts of a report.

        Returns:
            The report, or None if the id is unknown
        """
        with self._lock:
            short_text = self._reports.get(report_id)
            full_text = self._full_reports.get(report_id)
        if short_text is None or full_text is None:
            return None
        return Report(id=report_id, short_text=short_text, full_text=full_text)

    def copy_report(self, report_id: str, full: bool = False) -> bool:
        """Copy a stored report to the clipboard and confirm with a notice.

        Args:
            report_id: Id handed out by ``report``
            full: Copy the full report instead of the short one

        Returns:
            True if the report was found and copied
        """
        with self._lock:
            text = (self._full_reports if full else self._reports).get(report_id)

        if text is None:
            self._notice("Error id not found!")
            return False

        name = "Full error" if full else "Error"
        try:
            self.clipboard.copy(text)
        except Exception as e:
            self._log_internal_failure(e, "copying a report to the clipboard")
            self._notice(f"§c{name} could not be copied into the clipboard: {e}")
            return False

        self._notice(f"{name} copied into the clipboard, please report it on {self.support_channel}!")
        return True

    def _notice(self, text: str) -> None:
        try:
            self.notices.notice(text)
        except Exception as e:
            self._log_internal_failure(e, "sending a notice")

    def log_error_with_data(
        self,
        error: BaseException,
        message: str,
        context: Context = None,
        *,
        ignore_error_cache: bool = False,
        no_stack_trace: bool = False,
        debug_build_only: bool = False,
    ) -> str | None:
        """Report a caught exception with a human-readable message.

        Args:
            error: The caught exception
            message: Message shown to the user
            context: Ordered extra data appended to the report
            ignore_error_cache: Report even if the origin site was reported recently
            no_stack_trace: Leave stack traces out of the report texts
            debug_build_only: Report only on debug builds

        Returns:
            The new report id, or None when no report was created
        """
        try:
            fault = Fault.from_exception(error, message, context)
            if not fault.frames:
                # never raised, so the traceback is empty; use where it was reported from
                fault.frames = frames_from_stack(1)
        except Exception as e:
            self._log_internal_failure(e, "building a fault from an exception")
            return None
        return self.report(
            fault,
            ReportOptions(
                suppress_duplicates=not ignore_error_cache,
                include_stack_trace=not no_stack_trace,
                debug_build_only=debug_build_only,
            ),
        )

    def log_error_state_with_data(
        self,
        user_message: str,
        internal_message: str,
        context: Context = None,
        *,
        ignore_error_cache: bool = False,
        no_stack_trace: bool = False,
        debug_build_only: bool = False,
    ) -> str | None:
        """Report an unexpected state that has no exception attached.

        Args:
            user_message: Message shown to the user
            internal_message: Message shown in the stack trace header
            context: Ordered extra data appended to the report
            ignore_error_cache: Report even if the origin site was reported recently
            no_stack_trace: Leave stack traces out of the report texts
            debug_build_only: Report only on debug builds

        Returns:
            The new report id, or None when no report was created
        """
        try:
            fault = Fault.from_stack(
                user_message,
                detail=internal_message,
                context=context,
                kind=FaultKind.GENERIC_ERROR,
                skip=1,
            )
        except Exception as e:
            self._log_internal_failure(e, "building a fault from the call stack")
            return None
        return self.report(
            fault,
            ReportOptions(
                suppress_duplicates=not ignore_error_cache,
                include_stack_trace=not no_stack_trace,
                debug_build_only=debug_build_only,
            ),
        )

    def fail(self, message: str, **context: Any) -> NoReturn:
        """Report ``message`` and abort the current operation.

        Args:
            message: What went wrong
            **context: Extra data appended to the report, in order

        Raises:
            ExplicitFailure: Always
        """
        report_id = None
        try:
            fault = Fault.from_stack(
                message,
                context=context,
                kind=FaultKind.EXPLICIT_REPORT,
                type_name=qualified_type_name(ExplicitFailure),
                skip=1,
            )
        except Exception as e:
            self._log_internal_failure(e, "building a fault from the call stack")
        else:
            report_id = self.report(fault)
        raise ExplicitFailure(message, report_id=report_id)
