# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Stack trace sanitization and report text rendering.

Condensed traces rewrite noisy module prefixes, drop host plumbing frames
and stop at the first frame that marks the boundary between mod code and
the host. Full traces keep every frame as-is.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .faults import Fault

NO_STACK_TRACE = "<no stack trace>"
INFINITE_CAUSES = "<Infinite recurring causes>"

DEFAULT_REPLACE: tuple[tuple[str, str], ...] = (
    ("modkit_error_reporting.", "MER."),
    ("concurrent.futures.", "CF."),
    ("asyncio.", "AIO."),
    ("importlib.", "IL."),
)

DEFAULT_IGNORED: tuple[str, ...] = (
    "at threading.",
    "at concurrent.futures.",
    "at asyncio.",
    "at selectors.",
    "at socket.",
    "at ssl.",
    "at http.client.",
    "at urllib3.",
    "at requests.",
    "at importlib.",
    "at functools.",
    "at contextlib.",
    "at modkit_error_reporting.error_manager.",
    "at modkit_error_reporting.guard.post_and_catch",
)

DEFAULT_BREAK_AFTER: tuple[str, ...] = (
    "at __main__.",
    "at runpy._run_code",
    "at code.InteractiveInterpreter.runcode",
    "at modkit_error_reporting.guard.dispatch",
)

_COLOR_CODE = re.compile(r"(?i)§[0-9a-fk-or]")


@dataclass(frozen=True)
class StackTraceRules:
    """Substring rules applied to frames in condensed mode.

    Attributes:
        replace: Ordered (prefix, alias) substitutions for displayed frames
        ignored: Frames containing any of these are dropped
        break_after: A frame containing any of these is kept and ends the trace
    """

    replace: tuple[tuple[str, str], ...] = field(default=DEFAULT_REPLACE)
    ignored: tuple[str, ...] = field(default=DEFAULT_IGNORED)
    break_after: tuple[str, ...] = field(default=DEFAULT_BREAK_AFTER)

    def rewrite(self, text: str) -> str:
        for old, new in self.replace:
            text = text.replace(old, new)
        return text

    def is_ignored(self, text: str) -> bool:
        return any(marker in text for marker in self.ignored)

    def is_boundary(self, text: str) -> bool:
        return any(marker in text for marker in self.break_after)


def _frame_lines(fault: Fault) -> list[str]:
    return [f"\tat {frame}" for frame in fault.frames]


def render_stack_trace(
    fault: Fault,
    full: bool,
    rules: StackTraceRules | None = None,
) -> list[str]:
    """Render a fault and its cause chain as lines of text.

    Args:
        fault: Outermost fault
        full: Emit every frame unchanged when True; condense otherwise
        rules: Condensing rules (defaults to ``StackTraceRules()``)

    Returns:
        Lines ordered outermost fault first
    """
    rules = rules or StackTraceRules()
    lines: list[str] = []
    visited: set[int] = set()
    parent_lines: list[str] = []
    current: Fault | None = fault

    while current is not None:
        if id(current) in visited:
            lines.append(INFINITE_CAUSES)
            break
        visited.add(id(current))

        lines.append(f"Caused by {current.type_name}: {current.header_text}")
        own_lines = _frame_lines(current)
        if full:
            lines.extend(own_lines)
        else:
            lines.extend(_condense(own_lines, parent_lines, rules))

        parent_lines = own_lines
        current = current.cause

    return lines


def _condense(
    frame_lines: list[str],
    parent_lines: list[str],
    rules: StackTraceRules,
) -> list[str]:
    parent = set(parent_lines)
    condensed = []
    for text in frame_lines:
        # frames shared with the enclosing trace were already shown there
        if text in parent:
            break
        visual = rules.rewrite(text)
        if rules.is_boundary(text):
            condensed.append(visual)
            break
        if rules.is_ignored(text):
            continue
        condensed.append(visual)
    return condensed


def is_sequence_value(value: Any) -> bool:
    """True for values rendered one element per line in extra data."""
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Iterable)


def render_context_entry(label: str, value: Any) -> str:
    """Render one extra-data entry.

    >>> render_context_entry("k", "x")
    "k: 'x'"
    >>> render_context_entry("items", ["a", "b"])
    "items: \\n - 'a'\\n - 'b'\\n"
    """
    if is_sequence_value(value):
        elements = "".join(f" - '{element}'\n" for element in value)
        return f"{label}: \n{elements}"
    return f"{label}: '{value}'"


def render_extra_data(extra_context: Iterable[tuple[str, Any]]) -> str:
    entries = [render_context_entry(label, value) + "\n" for label, value in extra_context]
    if not entries:
        return ""
    return "\nExtra data:\n" + "".join(entries)


def strip_color_codes(text: str) -> str:
    """Remove section-sign formatting codes such as ``§c``."""
    return _COLOR_CODE.sub("", text)
