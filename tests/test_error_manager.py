# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Tests for ErrorManager."""

import string
import threading
from unittest.mock import patch

import pytest

from modkit_error_reporting import (
    ErrorManager,
    ExplicitFailure,
    Fault,
    Frame,
    NoticeSink,
    ReportOptions,
    StaticHostSession,
)
from modkit_error_reporting.clipboard import Clipboard
from modkit_error_reporting.silent_diagnostic_log import SilentDiagnosticLog


def site_fault(message="Failed to read visitor offer", line=42, **kwargs):
    return Fault(
        message=message,
        type_name="RuntimeError",
        frames=[
            Frame("features.garden.visitor_warning", "VisitorRewardWarning.check", "/mod/visitor_warning.py", line),
            Frame("__main__", "main", "/mod/run.py", 5),
        ],
        **kwargs,
    )


class FailingNoticeSink(NoticeSink):
    def notice(self, text):
        raise RuntimeError("chat unavailable")

    def clickable_notice(self, text, on_activate, expire_after):
        raise RuntimeError("chat unavailable")


class FailingClipboard(Clipboard):
    def copy(self, text):
        raise RuntimeError("no display")


class UnprintableError(Exception):
    def __str__(self):
        raise RuntimeError("broken __str__")


class FailingLog(SilentDiagnosticLog):
    def write_fault(self, message, trace, **kwargs):
        raise OSError("disk full")


class TestReport:
    """Tests for ErrorManager.report."""

    def test_report_creates_notice_and_texts(self, manager, notices):
        """Test the normal path: one clickable notice and two stored texts."""
        report_id = manager.report(site_fault())

        assert report_id is not None
        assert len(notices.clickable_notices) == 1
        notice = notices.clickable_notices[0]
        assert notice.text == (
            "§c[ModKit-1.2.3]: Failed to read visitor offer§c. "
            "Click here to copy the error into the clipboard."
        )
        assert notice.expire_after == 60.0

        report = manager.get_report(report_id)
        assert report.short_text == (
            "```\nModKit 1.2.3: Failed to read visitor offer\n \n"
            "Caused by RuntimeError: Failed to read visitor offer\n"
            "\tat features.garden.visitor_warning.VisitorRewardWarning.check(visitor_warning.py:42)\n"
            "\tat __main__.main(run.py:5)\n```"
        )
        assert report.full_text.startswith(
            "```\nModKit 1.2.3: Failed to read visitor offer\n(full stack trace)\n \nCaused by RuntimeError"
        )

    def test_report_id_format(self, manager):
        report_id = manager.report(site_fault())

        assert len(report_id) == 16
        assert set(report_id) <= set(string.ascii_letters + string.digits)

    def test_fault_is_logged(self, manager, log):
        manager.report(site_fault())

        assert len(log.faults) == 1
        entry = log.faults[0]
        assert entry.message == "Failed to read visitor offer"
        assert entry.trace.startswith("Caused by RuntimeError: Failed to read visitor offer\n")
        assert entry.kind == "GenericError"
        assert entry.type_name == "RuntimeError"
        assert entry.origin == "visitor_warning.py:42"
        assert entry.suppressed is False

    def test_extra_data_is_appended(self, manager):
        fault = site_fault(extra_context=[("items", ["a", "b"]), ("k", "x")])

        report = manager.get_report(manager.report(fault))

        suffix = "\nExtra data:\nitems: \n - 'a'\n - 'b'\n\nk: 'x'\n```"
        assert report.short_text.endswith(suffix)
        assert report.full_text.endswith(suffix)

    def test_color_codes_are_stripped_from_texts(self, manager, notices):
        report = manager.get_report(manager.report(site_fault(message="§eBad §cvisitor")))

        assert "ModKit 1.2.3: Bad visitor\n" in report.short_text
        assert "§eBad §cvisitor" in notices.clickable_notices[0].text

    def test_without_stack_trace(self, manager):
        """Test that both texts use the placeholder when stack traces are off."""
        report_id = manager.report(site_fault(), ReportOptions(include_stack_trace=False))
        report = manager.get_report(report_id)

        assert "<no stack trace>" in report.short_text
        assert "<no stack trace>" in report.full_text
        assert "Caused by" not in report.short_text
        assert "Caused by" not in report.full_text

    def test_fault_no_stack_trace_flag(self, manager):
        report = manager.get_report(manager.report(site_fault(no_stack_trace=True)))

        assert "<no stack trace>" in report.short_text

    def test_no_active_session_logs_only(self, manager, log, notices, session):
        """Test that a fault without a connected user is logged but not shown."""
        session.active = False

        assert manager.report(site_fault()) is None
        assert notices.notices == []
        assert manager.report_count == 0
        assert len(log.faults) == 1


class TestSuppression:
    """Tests for duplicate suppression."""

    def test_same_site_within_window_is_suppressed(self, manager, notices, clock):
        first = manager.report(site_fault())
        clock.advance(599)
        second = manager.report(site_fault(message="different text, same site"))

        assert first is not None
        assert second is None
        assert len(notices.notices) == 1
        assert manager.report_count == 1

    def test_suppressed_fault_is_still_logged(self, manager, log):
        manager.report(site_fault())
        manager.report(site_fault())

        assert [entry.suppressed for entry in log.faults] == [False, True]

    def test_same_site_after_window_is_reported(self, manager, notices, clock):
        first = manager.report(site_fault())
        clock.advance(601)
        second = manager.report(site_fault())

        assert first is not None
        assert second is not None
        assert first != second
        assert len(notices.notices) == 2

    def test_different_sites_are_independent(self, manager):
        assert manager.report(site_fault(line=42)) is not None
        assert manager.report(site_fault(line=43)) is not None

    def test_faults_without_frames_key_on_message(self, manager):
        assert manager.report(Fault(message="Hypixel API error")) is not None
        assert manager.report(Fault(message="Hypixel API error")) is None
        assert manager.report(Fault(message="Mojang API error")) is not None

    def test_suppression_can_be_disabled(self, manager):
        options = ReportOptions(suppress_duplicates=False)

        assert manager.report(site_fault(), options) is not None
        assert manager.report(site_fault(), options) is not None

    def test_reset_suppression_cache(self, manager):
        manager.report(site_fault())
        manager.reset_suppression_cache()

        assert manager.report(site_fault()) is not None

    def test_concurrent_reports_from_one_site(self, manager, notices):
        """Test that only one of many simultaneous reports passes suppression."""
        barrier = threading.Barrier(8)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            report_id = manager.report(site_fault())
            with results_lock:
                results.append(report_id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len([r for r in results if r is not None]) == 1
        assert len(notices.notices) == 1


class TestDebugBuildOnly:
    """Tests for debug-build-only reports."""

    def test_skipped_on_release_build(self, manager, log, notices):
        result = manager.report(site_fault(), ReportOptions(debug_build_only=True))

        assert result is None
        assert log.faults == []
        assert notices.notices == []

    def test_reported_on_debug_build(self, manager, log, notices, session):
        session.debug_build = True

        result = manager.report(site_fault(), ReportOptions(debug_build_only=True))

        assert result is not None
        assert len(log.faults) == 1
        assert len(notices.notices) == 1

    def test_fault_flag(self, manager, log):
        assert manager.report(site_fault(debug_build_only=True)) is None
        assert log.faults == []


class TestCopyReport:
    """Tests for copying reports to the clipboard."""

    def test_short_round_trip(self, manager, clipboard, notices):
        report_id = manager.report(site_fault())

        assert manager.copy_report(report_id, full=False) is True
        assert clipboard.contents == manager.get_report(report_id).short_text
        assert notices.texts()[-1] == (
            "Error copied into the clipboard, please report it on the ModKit Discord!"
        )

    def test_full_round_trip(self, manager, clipboard, notices):
        report_id = manager.report(site_fault())

        assert manager.copy_report(report_id, full=True) is True
        assert clipboard.contents == manager.get_report(report_id).full_text
        assert notices.texts()[-1].startswith("Full error copied into the clipboard")

    def test_unknown_id(self, manager, clipboard, notices):
        assert manager.copy_report("doesnotexist0000") is False
        assert clipboard.contents is None
        assert notices.texts() == ["Error id not found!"]

    def test_notice_activation_copies_short_report(self, manager, clipboard, notices):
        report_id = manager.report(site_fault())

        notices.clickable_notices[0].activate()

        assert clipboard.contents == manager.get_report(report_id).short_text

    def test_notice_activation_with_modifier_copies_full_report(self, manager, clipboard, notices, session):
        report_id = manager.report(site_fault())
        session.modifier_down = True

        notices.clickable_notices[0].activate()

        assert clipboard.contents == manager.get_report(report_id).full_text

    def test_max_reports_evicts_oldest(self, log, notices, clipboard, session, clock):
        manager = ErrorManager(log, notices, clipboard, session, max_reports=2, clock=clock)

        ids = [manager.report(Fault(message=f"error {i}")) for i in range(3)]

        assert manager.get_report(ids[0]) is None
        assert manager.copy_report(ids[0]) is False
        assert manager.get_report(ids[1]) is not None
        assert manager.get_report(ids[2]) is not None
        assert manager.report_count == 2

    def test_invalid_max_reports(self, log, notices, clipboard, session):
        with pytest.raises(ValueError, match="max_reports must be positive"):
            ErrorManager(log, notices, clipboard, session, max_reports=0)


class TestInternalFailures:
    """Tests that the manager never raises its own failures."""

    def test_notice_failure_is_swallowed(self, log, clipboard, session, clock):
        manager = ErrorManager(log, FailingNoticeSink(), clipboard, session, clock=clock)

        assert manager.report(site_fault()) is None
        assert log.failed_actions() == ["reporting a fault"]
        assert isinstance(log.internal_failures[0].error, RuntimeError)

    def test_clipboard_failure_is_swallowed(self, log, notices, session, clock):
        manager = ErrorManager(log, notices, FailingClipboard(), session, clock=clock)
        report_id = manager.report(site_fault())

        assert manager.copy_report(report_id) is False
        assert log.failed_actions() == ["copying a report to the clipboard"]

    def test_clipboard_failure_is_not_confirmed(self, log, notices, session, clock):
        """Test that the user is told the copy failed instead of asked to report it."""
        manager = ErrorManager(log, notices, FailingClipboard(), session, clock=clock)
        report_id = manager.report(site_fault())

        manager.copy_report(report_id, full=True)

        assert notices.texts()[-1] == "§cFull error could not be copied into the clipboard: no display"
        assert not any("please report it" in text for text in notices.texts())

    def test_unprintable_exception_is_reported(self, manager, log, notices):
        error = UnprintableError()

        report_id = manager.log_error_with_data(error, "Failed to parse chat line")

        assert report_id is not None
        assert log.internal_failures == []
        report = manager.get_report(report_id)
        assert "UnprintableError: <unprintable UnprintableError object>" in report.short_text

    def test_long_cause_chain_does_not_overflow(self, manager, log):
        error = ValueError("level 0")
        for level in range(1, 3000):
            wrapper = RuntimeError(f"level {level}")
            wrapper.__cause__ = error
            error = wrapper

        report_id = manager.log_error_with_data(error, "Deeply wrapped failure")

        assert report_id is not None
        assert log.failed_actions() == []
        assert "Caused by ValueError: level 0" in manager.get_report(report_id).full_text

    def test_fault_building_failure_is_swallowed(self, manager, log, notices):
        with patch("modkit_error_reporting.error_manager.Fault.from_exception", side_effect=RuntimeError("boom")):
            result = manager.log_error_with_data(ValueError("x"), "Broken")

        assert result is None
        assert log.failed_actions() == ["building a fault from an exception"]
        assert notices.notices == []

    def test_state_fault_building_failure_is_swallowed(self, manager, log):
        with patch("modkit_error_reporting.error_manager.Fault.from_stack", side_effect=RuntimeError("boom")):
            result = manager.log_error_state_with_data("Broken", "no frames")

        assert result is None
        assert log.failed_actions() == ["building a fault from the call stack"]

    def test_fail_still_raises_when_fault_cannot_be_built(self, manager, log):
        with patch("modkit_error_reporting.error_manager.Fault.from_stack", side_effect=RuntimeError("boom")):
            with pytest.raises(ExplicitFailure) as exc_info:
                manager.fail("Unknown egg type")

        assert exc_info.value.report_id is None
        assert log.failed_actions() == ["building a fault from the call stack"]

    def test_log_failure_does_not_block_report(self, notices, clipboard, session, clock, caplog):
        manager = ErrorManager(FailingLog(), notices, clipboard, session, clock=clock)

        assert manager.report(site_fault()) is not None
        assert "Failed to write fault to diagnostic log: disk full" in caplog.text


class TestConvenienceEntryPoints:
    """Tests for fail, log_error_with_data and log_error_state_with_data."""

    def test_fail_reports_and_raises(self, manager, notices):
        with pytest.raises(ExplicitFailure) as exc_info:
            manager.fail("Visitor offer missing", visitor="Jacob", items=["Wheat", "Carrot"])

        error = exc_info.value
        assert error.message == "Visitor offer missing"
        report = manager.get_report(error.report_id)
        assert "Caused by modkit_error_reporting.errors.ExplicitFailure: Visitor offer missing" in report.short_text
        assert "test_error_manager.py" in report.short_text
        assert "visitor: 'Jacob'\nitems: \n - 'Wheat'\n - 'Carrot'\n" in report.short_text
        assert len(notices.clickable_notices) == 1

    def test_fail_from_same_line_is_suppressed(self, manager):
        def lookup():
            manager.fail("Unknown egg type")

        with pytest.raises(ExplicitFailure) as first:
            lookup()
        with pytest.raises(ExplicitFailure) as second:
            lookup()

        assert first.value.report_id is not None
        assert second.value.report_id is None

    def test_log_error_with_data(self, manager, notices):
        try:
            int("not a number")
        except ValueError as e:
            report_id = manager.log_error_with_data(e, "Hypixel API error", {"apiName": "Hypixel API"})

        report = manager.get_report(report_id)
        assert "ModKit 1.2.3: Hypixel API error" in report.short_text
        assert "Caused by ValueError: invalid literal for int()" in report.short_text
        assert "apiName: 'Hypixel API'" in report.short_text

    def test_log_error_with_data_flags(self, manager):
        error = ValueError("x")

        report_id = manager.log_error_with_data(error, "first", no_stack_trace=True)
        again = manager.log_error_with_data(error, "second", ignore_error_cache=True)
        skipped = manager.log_error_with_data(error, "third", ignore_error_cache=True, debug_build_only=True)

        assert "<no stack trace>" in manager.get_report(report_id).short_text
        assert again is not None
        assert skipped is None

    def test_unraised_exception_uses_reporting_site(self, manager):
        report_id = manager.log_error_with_data(ValueError("never raised"), "Bad state")

        assert "test_error_manager.py" in manager.get_report(report_id).full_text

    def test_log_error_state_with_data(self, manager, notices):
        report_id = manager.log_error_state_with_data(
            "Could not detect the dungeon step",
            "no matching chat line",
            [("line", "§eThe BLOOD DOOR has been opened!")],
        )

        report = manager.get_report(report_id)
        assert "ModKit 1.2.3: Could not detect the dungeon step" in report.short_text
        assert "Caused by RuntimeError: no matching chat line" in report.short_text
        assert "Could not detect the dungeon step" in notices.clickable_notices[0].text


def test_session_defaults():
    session = StaticHostSession()

    assert session.has_active_session() is True
    assert session.is_debug_build() is False
    assert session.is_modifier_key_down() is False
