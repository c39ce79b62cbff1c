"""
Operation mode and control enablement state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = ["ControlStates", "OperationMode", "OperationState"]


OperationMode = Literal["single", "benchmark"]


@dataclass(frozen=True)
class ControlStates:
    """
    Enablement of the user-facing controls for the current operation state.

    :cvar prompt_enabled: Whether the prompt may be edited
    :cvar generate_enabled: Whether a single generation may be started
    :cvar benchmark_enabled: Whether a benchmark may be started
    """

    prompt_enabled: bool
    generate_enabled: bool
    benchmark_enabled: bool


@dataclass
class OperationState:
    """
    Tracks the selected operation mode and whether an operation is running.

    The first selected mode is kept for the life of the state: the other mode's
    control stays disabled, and the selected one is disabled only while active.

    Example:
    ::
        state = OperationState(capability_present=True)
        state.begin("single")
        state.controls().generate_enabled  # False while active
        state.end()
    """

    mode: OperationMode | None = None
    active: bool = False
    capability_present: bool = True

    def begin(self, mode: OperationMode):
        """
        Select the operation mode and mark an operation as running.

        :param mode: Mode of the operation being started
        """
        self.mode = mode
        self.active = True

    def end(self):
        """Mark the running operation as finished."""
        self.active = False

    def controls(self) -> ControlStates:
        """
        :return: Enablement of the prompt and the two operation controls
        """
        prompt_enabled = not self.active and self.capability_present

        if not self.capability_present:
            return ControlStates(prompt_enabled, False, False)

        if self.mode == "single":
            return ControlStates(prompt_enabled, not self.active, False)

        if self.mode == "benchmark":
            return ControlStates(prompt_enabled, False, not self.active)

        return ControlStates(prompt_enabled, True, True)
