"""
Step models - committed attempt steps and the pending-step draft.

A Step never changes once committed. Behaviours only mutate a PendingStep;
the attempt freezes it with build() when the behaviour returns KEEP.
"""

from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class StepState(str, Enum):
    """State tag carried by every step."""

    ACTIVE = "active"
    INVALID = "invalid"
    PENDING_GRADE = "pending_grade"
    NEEDS_GRADING = "needs_grading"
    GRADED_RIGHT = "graded_right"
    GRADED_PARTIAL = "graded_partial"
    GRADED_WRONG = "graded_wrong"

    def is_active(self) -> bool:
        """Learner may still change the response."""
        return self in (StepState.ACTIVE, StepState.INVALID)

    def is_finished(self) -> bool:
        return self in (
            StepState.NEEDS_GRADING,
            StepState.GRADED_RIGHT,
            StepState.GRADED_PARTIAL,
            StepState.GRADED_WRONG,
        )

    @classmethod
    def graded_state_for_fraction(cls, fraction: float) -> "StepState":
        if fraction < 0.000001:
            return cls.GRADED_WRONG
        if fraction > 0.999999:
            return cls.GRADED_RIGHT
        return cls.GRADED_PARTIAL


class ProcessResult(str, Enum):
    """What the host should do with a pending step after processing."""

    KEEP = "keep"
    DISCARD = "discard"


class Step(BaseModel):
    """One committed transition in an attempt's history."""

    model_config = ConfigDict(frozen=True)

    state: StepState
    behaviour_vars: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    qt_data: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    fraction: Optional[float] = None
    response_summary: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("behaviour_vars", "qt_data", mode="after")
    @classmethod
    def freeze_maps(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("behaviour_vars", "qt_data")
    def serialize_maps(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)

    def has_behaviour_var(self, name: str) -> bool:
        return name in self.behaviour_vars

    def get_behaviour_var(self, name: str, default: Any = None) -> Any:
        return self.behaviour_vars.get(name, default)

    def get_qt_var(self, name: str, default: Any = None) -> Any:
        return self.qt_data.get(name, default)


class PendingStep:
    """
    Mutable draft of the next step.

    The host fills qt_data/behaviour_vars from the submitted form (or the
    grading-result event); the behaviour then sets state, fraction and
    summary. build() produces the immutable Step.
    """

    def __init__(
        self,
        qt_data: Optional[Dict[str, Any]] = None,
        behaviour_vars: Optional[Dict[str, Any]] = None,
    ):
        self._qt_data: Dict[str, Any] = dict(qt_data or {})
        self._behaviour_vars: Dict[str, Any] = dict(behaviour_vars or {})
        self._state: Optional[StepState] = None
        self._fraction: Optional[float] = None
        self._response_summary: Optional[str] = None

    @property
    def qt_data(self) -> Dict[str, Any]:
        return self._qt_data

    @property
    def behaviour_vars(self) -> Dict[str, Any]:
        return self._behaviour_vars

    def get_state(self) -> Optional[StepState]:
        return self._state

    def set_state(self, state: StepState) -> None:
        self._state = state

    def get_fraction(self) -> Optional[float]:
        return self._fraction

    def set_fraction(self, fraction: Optional[float]) -> None:
        self._fraction = fraction

    def has_behaviour_var(self, name: str) -> bool:
        return name in self._behaviour_vars

    def get_behaviour_var(self, name: str, default: Any = None) -> Any:
        return self._behaviour_vars.get(name, default)

    def set_behaviour_var(self, name: str, value: Any) -> None:
        self._behaviour_vars[name] = value

    def get_qt_var(self, name: str, default: Any = None) -> Any:
        return self._qt_data.get(name, default)

    def get_new_response_summary(self) -> Optional[str]:
        return self._response_summary

    def set_new_response_summary(self, summary: Optional[str]) -> None:
        self._response_summary = summary

    def build(self) -> Step:
        """Freeze the draft. The state must have been set by the behaviour."""
        if self._state is None:
            raise ValueError("Pending step has no state; behaviour did not process it")
        return Step(
            state=self._state,
            behaviour_vars=dict(self._behaviour_vars),
            qt_data=dict(self._qt_data),
            fraction=self._fraction,
            response_summary=self._response_summary,
        )

    def __repr__(self) -> str:
        state = self._state.value if self._state else None
        return f"<PendingStep state={state} vars={sorted(self._behaviour_vars)}>"
