# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Queries the error manager makes against the running host."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class HostSession(ABC):
    """Build and session state of the host the mod runs in."""

    @abstractmethod
    def has_active_session(self) -> bool:
        """Return True while a user is connected and can see notices."""
        pass

    @abstractmethod
    def is_debug_build(self) -> bool:
        """Return True for debug or beta builds."""
        pass

    def is_modifier_key_down(self) -> bool:
        """Return True while the user holds the modifier that selects full reports."""
        return False


@dataclass
class StaticHostSession(HostSession):
    """Host session with fixed answers, for headless use and tests."""

    active: bool = True
    debug_build: bool = False
    modifier_down: bool = False

    def has_active_session(self) -> bool:
        return self.active

    def is_debug_build(self) -> bool:
        return self.debug_build

    def is_modifier_key_down(self) -> bool:
        return self.modifier_down
