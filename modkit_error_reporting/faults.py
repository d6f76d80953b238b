# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Fault model: a structured failure record built from exceptions or call stacks."""

import os
import sys
import traceback
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import FrameType, TracebackType
from typing import Any


class FaultKind(str, Enum):
    """How a fault came into existence."""

    GENERIC_ERROR = "GenericError"
    EXPLICIT_REPORT = "ExplicitReport"


@dataclass(frozen=True)
class Frame:
    """A single stack frame in JVM-like notation."""

    module: str
    function: str
    filename: str
    lineno: int

    @property
    def basename(self) -> str:
        return os.path.basename(self.filename) if self.filename else "<unknown>"

    def __str__(self) -> str:
        return f"{self.module}.{self.function}({self.basename}:{self.lineno})"


def _frame_from(frame: FrameType, lineno: int) -> Frame:
    code = frame.f_code
    return Frame(
        module=frame.f_globals.get("__name__", "<unknown>"),
        function=getattr(code, "co_qualname", code.co_name),
        filename=code.co_filename,
        lineno=lineno,
    )


def frames_from_traceback(tb: TracebackType | None) -> list[Frame]:
    """Return traceback frames ordered innermost (raise site) first."""
    frames = [_frame_from(frame, lineno) for frame, lineno in traceback.walk_tb(tb)]
    frames.reverse()
    return frames


def frames_from_stack(skip: int = 0) -> list[Frame]:
    """Return the current call stack, innermost first.

    Args:
        skip: Number of frames above the caller to leave out
    """
    start = sys._getframe(skip + 1)
    return [_frame_from(frame, lineno) for frame, lineno in traceback.walk_stack(start)]


def qualified_type_name(exc_type: type) -> str:
    module = exc_type.__module__
    if module in (None, "builtins", "__builtin__"):
        return exc_type.__qualname__
    return f"{module}.{exc_type.__qualname__}"


def exception_text(error: BaseException) -> str:
    """Return ``str(error)``, or a placeholder when the exception cannot be printed."""
    try:
        return str(error)
    except Exception:
        return f"<unprintable {type(error).__name__} object>"


def _parent_exception(error: BaseException) -> BaseException | None:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def normalize_context(
    context: Mapping[str, Any] | Iterable[tuple[str, Any]] | None,
) -> list[tuple[str, Any]]:
    """Turn a mapping or a sequence of pairs into an ordered list of pairs."""
    if context is None:
        return []
    if isinstance(context, Mapping):
        return list(context.items())
    return [(str(label), value) for label, value in context]


@dataclass(eq=False)
class Fault:
    """A failure event with its cause chain, origin trace and context.

    Faults compare by identity so that cycle detection over cause chains
    never confuses two distinct faults carrying the same text.
    """

    message: str
    kind: FaultKind = FaultKind.GENERIC_ERROR
    type_name: str = "Exception"
    detail: str | None = None
    cause: "Fault | None" = None
    frames: list[Frame] = field(default_factory=list)
    extra_context: list[tuple[str, Any]] = field(default_factory=list)
    no_stack_trace: bool = False
    debug_build_only: bool = False
    exception: BaseException | None = None

    @property
    def header_text(self) -> str:
        return self.detail if self.detail is not None else self.message

    @property
    def origin_site(self) -> tuple[str, int] | None:
        if not self.frames:
            return None
        first = self.frames[0]
        return first.basename, first.lineno

    @property
    def recurrence_key(self) -> tuple[str, int]:
        return self.origin_site or (self.message, 0)

    def causes(self) -> Iterable["Fault"]:
        """Yield this fault and its causes, stopping before any revisited fault."""
        seen: set[int] = set()
        current: Fault | None = self
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            yield current
            current = current.cause

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        message: str | None = None,
        context: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        kind: FaultKind = FaultKind.GENERIC_ERROR,
    ) -> "Fault":
        """Build a fault from an exception and its ``__cause__``/``__context__`` chain.

        Args:
            exc: The exception to wrap
            message: Human-readable message; defaults to the exception text
            context: Ordered extra data (mapping or label/value pairs)
            kind: Fault kind for the outermost fault

        Returns:
            Fault whose cause chain mirrors the exception chain, cycles included
        """
        converted: dict[int, Fault] = {}
        chain: list[tuple[Fault, BaseException]] = []

        error: BaseException | None = exc
        while error is not None and id(error) not in converted:
            text = exception_text(error)
            fault = cls(
                message=text,
                type_name=qualified_type_name(type(error)),
                detail=text,
                frames=frames_from_traceback(error.__traceback__),
                exception=error,
            )
            converted[id(error)] = fault
            chain.append((fault, error))
            error = _parent_exception(error)

        # a parent is either the next link or, for a cycle, an earlier one
        for fault, error in chain:
            parent = _parent_exception(error)
            if parent is not None:
                fault.cause = converted[id(parent)]

        fault = chain[0][0]
        if message is not None:
            fault.message = message
        fault.kind = kind
        fault.extra_context = normalize_context(context)
        return fault

    @classmethod
    def from_stack(
        cls,
        message: str,
        detail: str | None = None,
        context: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        kind: FaultKind = FaultKind.EXPLICIT_REPORT,
        type_name: str = "RuntimeError",
        skip: int = 0,
    ) -> "Fault":
        """Build a fault whose trace is the caller's stack.

        Args:
            message: Human-readable message
            detail: Internal message shown in the stack header
            context: Ordered extra data
            kind: Fault kind
            type_name: Name shown in the "Caused by" header
            skip: Extra frames above the caller to leave out
        """
        return cls(
            message=message,
            kind=kind,
            type_name=type_name,
            detail=detail if detail is not None else message,
            frames=frames_from_stack(skip + 1),
            extra_context=normalize_context(context),
        )
