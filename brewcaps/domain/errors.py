"""
Error taxonomy for device construction and capability invocation.
"""
from __future__ import annotations

from typing import Iterable, Optional


class BrewcapsError(Exception):
    """Base class for every error raised by brewcaps."""
    pass


class InvalidDeviceConfiguration(BrewcapsError, ValueError):
    """Raised when a device or bundle would violate the mandatory-brew invariant."""
    pass


class UnknownDeviceKind(BrewcapsError, KeyError):
    """Raised by the factory when asked for a bundle that was never registered."""

    def __init__(self, kind: str, available: Iterable[str] = ()) -> None:
        self.kind = kind
        self.available = sorted(available)
        super().__init__(kind)

    def __str__(self) -> str:
        return f"Unknown device kind '{self.kind}'. Available: {self.available}"


class CapabilityNotSupported(BrewcapsError):
    """Raised when a capability is invoked on a device that does not declare it."""

    def __init__(self, capability_id: str, make: Optional[str] = None, model: Optional[str] = None) -> None:
        self.capability_id = capability_id
        self.make = make
        self.model = model
        device = " ".join(part for part in (make, model) if part) or "device"
        super().__init__(f"{device} does not support '{capability_id}'")


class CapabilityExecutionFailure(BrewcapsError):
    """Raised when a capability ran but did not complete."""

    def __init__(self, capability_id: str, reason: str) -> None:
        self.capability_id = capability_id
        self.reason = reason
        super().__init__(f"{capability_id} failed: {reason}")
