from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from brewcaps.domain.capabilities import BREW, Capability, CapabilityResult
from brewcaps.domain.errors import (
    CapabilityExecutionFailure,
    CapabilityNotSupported,
    InvalidDeviceConfiguration,
)


@dataclass(frozen=True)
class Device:
    """
    Identity of one coffee machine plus the capabilities it carries.

    The capability mapping keeps registration order and is read-only. A device
    always carries ``brew``; anything else is optional and is looked up by id.
    """
    make: str
    model: str
    capabilities: Mapping[str, Capability] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.make or not self.make.strip():
            raise InvalidDeviceConfiguration("Device requires a non-empty make.")
        if not self.model or not self.model.strip():
            raise InvalidDeviceConfiguration("Device requires a non-empty model.")
        if BREW not in self.capabilities:
            raise InvalidDeviceConfiguration(f"{self.make} {self.model} must support '{BREW}'.")
        for capability_id, capability in self.capabilities.items():
            if getattr(capability, "capability_id", None) != capability_id:
                raise InvalidDeviceConfiguration(f"Capability registered as '{capability_id}' is {capability!r}.")
        object.__setattr__(self, "capabilities", MappingProxyType(dict(self.capabilities)))

    @property
    def capability_ids(self) -> tuple[str, ...]:
        return tuple(self.capabilities)

    @property
    def optional_capability_ids(self) -> tuple[str, ...]:
        return tuple(cid for cid in self.capabilities if cid != BREW)

    def supports(self, capability_id: str) -> bool:
        return capability_id in self.capabilities

    def identity(self) -> str:
        return f"{self.make} {self.model}"

    def describe(self) -> list[str]:
        lines = [f"Coffee machine: {self.identity()}"]
        lines.extend(capability.describe() for capability in self.capabilities.values())
        return lines

    async def invoke(self, capability_id: str, timeout: Optional[float] = None) -> CapabilityResult:
        """
        Run one capability and report how it went.

        Args:
            capability_id: The capability to run.
            timeout: Optional deadline in seconds for this invocation.

        Returns:
            A ``CapabilityResult``. Anything the capability raises, deadline
            overruns included, comes back as a failed result; cancellation
            still propagates.

        Raises:
            CapabilityNotSupported: If the device does not declare the capability.
        """
        capability = self.capabilities.get(capability_id)
        if capability is None:
            raise CapabilityNotSupported(capability_id, self.make, self.model)

        started = time.monotonic()
        try:
            if timeout is not None:
                message = await asyncio.wait_for(capability.run(), timeout=timeout)
            else:
                message = await capability.run()
        except CapabilityExecutionFailure as exc:
            return CapabilityResult(capability_id, ok=False, elapsed=time.monotonic() - started, error=exc.reason)
        except asyncio.TimeoutError:
            return CapabilityResult(
                capability_id,
                ok=False,
                elapsed=time.monotonic() - started,
                error=f"timed out after {timeout}s",
            )
        except Exception as exc:
            return CapabilityResult(
                capability_id,
                ok=False,
                elapsed=time.monotonic() - started,
                error=f"{type(exc).__name__}: {exc}",
            )
        return CapabilityResult(capability_id, ok=True, elapsed=time.monotonic() - started, message=message)

    def __hash__(self) -> int:
        return hash((self.make, self.model, self.capability_ids))


def new_device(make: str, model: str, capabilities: Iterable[Capability]) -> Device:
    """
    Build a device from capability instances, keeping their order.

    Raises:
        InvalidDeviceConfiguration: If ``brew`` is missing, an id repeats, or
            make/model is blank.
    """
    mapping: dict[str, Capability] = {}
    for capability in capabilities:
        if not isinstance(capability, Capability):
            raise InvalidDeviceConfiguration(f"Not a capability: {capability!r}")
        if capability.capability_id in mapping:
            raise InvalidDeviceConfiguration(f"Duplicate capability '{capability.capability_id}'.")
        mapping[capability.capability_id] = capability
    return Device(make=make, model=model, capabilities=mapping)
