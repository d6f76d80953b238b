# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Shared fixtures for modkit_error_reporting tests."""

import pytest

from modkit_error_reporting import ErrorManager, StaticHostSession
from modkit_error_reporting.silent_clipboard import SilentClipboard
from modkit_error_reporting.silent_diagnostic_log import SilentDiagnosticLog
from modkit_error_reporting.silent_notice_sink import SilentNoticeSink


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def log():
    return SilentDiagnosticLog()


@pytest.fixture
def notices():
    return SilentNoticeSink()


@pytest.fixture
def clipboard():
    return SilentClipboard()


@pytest.fixture
def session():
    return StaticHostSession(active=True, debug_build=False)


@pytest.fixture
def manager(log, notices, clipboard, session, clock):
    return ErrorManager(
        log,
        notices,
        clipboard,
        session,
        product="ModKit",
        version="1.2.3",
        clock=clock,
    )
