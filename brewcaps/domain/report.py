from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from brewcaps.domain.capabilities import CapabilityResult
from brewcaps.domain.errors import CapabilityExecutionFailure


class OperationState(str, Enum):
    """States a single ``operate`` call moves through."""
    IDLE = "idle"
    DESCRIBING = "describing"
    BREWING = "brewing"
    BREW_FAILED = "brew_failed"
    INVOKING_OPTIONAL = "invoking_optional"
    DONE = "done"


TERMINAL_STATES = frozenset({OperationState.BREW_FAILED, OperationState.DONE})


class CapabilityOutcome(BaseModel):
    capability_id: str
    ok: bool
    elapsed: float = 0.0
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: CapabilityResult) -> "CapabilityOutcome":
        return cls(
            capability_id=result.capability_id,
            ok=result.ok,
            elapsed=result.elapsed,
            message=result.message,
            error=result.error,
        )


class OperationReport(BaseModel):
    make: str
    model: str
    description: List[str] = Field(default_factory=list)
    brew: Optional[CapabilityOutcome] = None
    optional: List[CapabilityOutcome] = Field(default_factory=list)
    state: OperationState = OperationState.IDLE
    transitions: List[OperationState] = Field(default_factory=lambda: [OperationState.IDLE])

    def advance(self, state: OperationState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Operation already finished in state '{self.state.value}'")
        self.state = state
        self.transitions.append(state)

    @property
    def ok(self) -> bool:
        return self.brew is not None and self.brew.ok and not self.failures

    @property
    def failures(self) -> List[CapabilityOutcome]:
        return [outcome for outcome in self.optional if not outcome.ok]

    def raise_for_status(self) -> None:
        """Raise if brewing failed. Optional failures stay in the report."""
        if self.brew is not None and not self.brew.ok:
            raise CapabilityExecutionFailure(self.brew.capability_id, self.brew.error or "unknown error")
