"""
Capabilities a coffee machine may carry.

Every behavior is a ``Capability`` subclass registered under a string id. A
device only ever refers to capabilities by that id, so adding a module (for
example a firmware updater for WiFi machines) means registering one more class
and nothing else.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from brewcaps.domain.errors import CapabilityExecutionFailure, InvalidDeviceConfiguration

BREW = "brew"
GRIND = "grind"
REORDER = "reorder"
FIRMWARE_UPDATE = "firmware_update"

CAPABILITY_TYPES: dict[str, type["Capability"]] = {}


@dataclass(frozen=True)
class CapabilityResult:
    """
    Outcome of a single capability invocation.

    Attributes:
        capability_id: The id of the capability that was invoked.
        ok: Whether the capability completed.
        elapsed: Seconds spent in the invocation, simulated delay included.
        message: What the capability reported on success.
        error: The failure reason when ``ok`` is false.
    """
    capability_id: str
    ok: bool
    elapsed: float = 0.0
    message: Optional[str] = None
    error: Optional[str] = None

    def raise_for_status(self) -> None:
        if not self.ok:
            raise CapabilityExecutionFailure(self.capability_id, self.error or "unknown error")


class Capability:
    """
    A named, independently invocable behavior.

    Subclasses set ``capability_id`` and ``description`` and implement
    ``perform``. ``run`` wraps ``perform`` with the simulated delay and fault.
    """
    capability_id: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def __init__(self, delay: float = 0.0, fault: Optional[str] = None, label: Optional[str] = None) -> None:
        if delay < 0:
            raise InvalidDeviceConfiguration(f"{self.capability_id}: delay must be non-negative")
        self.delay = float(delay)
        self.fault = fault
        self.label = label

    async def run(self) -> Optional[str]:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fault:
            raise CapabilityExecutionFailure(self.capability_id, self.fault)
        return self.perform()

    def perform(self) -> Optional[str]:
        raise NotImplementedError

    def describe(self) -> str:
        return self.label or self.description

    def options(self) -> dict[str, Any]:
        return {"delay": self.delay, "fault": self.fault, "label": self.label}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.capability_id!r})"


def register_capability(cls: type[Capability]) -> type[Capability]:
    """Class decorator adding a capability type to the registry."""
    if not cls.capability_id:
        raise ValueError(f"{cls.__name__} does not define capability_id")
    CAPABILITY_TYPES[cls.capability_id] = cls
    return cls


def get_capability_type(capability_id: str) -> type[Capability]:
    try:
        return CAPABILITY_TYPES[capability_id]
    except KeyError:
        raise InvalidDeviceConfiguration(
            f"Unknown capability '{capability_id}'. Available: {sorted(CAPABILITY_TYPES)}"
        ) from None


def build_capability(capability_id: str, **options: Any) -> Capability:
    cls = get_capability_type(capability_id)
    try:
        return cls(**options)
    except TypeError as exc:
        raise InvalidDeviceConfiguration(f"Bad options for '{capability_id}': {exc}") from exc


@register_capability
class BrewCapability(Capability):
    capability_id = BREW
    description = "Brews coffee"

    def __init__(self, beverage: str = "coffee", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.beverage = beverage

    def perform(self) -> str:
        return f"Brewed {self.beverage}"

    def options(self) -> dict[str, Any]:
        return {**super().options(), "beverage": self.beverage}


@register_capability
class GrindCapability(Capability):
    capability_id = GRIND
    description = "Grinds fresh beans with the built-in grinder"

    def __init__(self, coarseness: str = "medium", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.coarseness = coarseness

    def perform(self) -> str:
        return f"Ground beans ({self.coarseness})"

    def options(self) -> dict[str, Any]:
        return {**super().options(), "coarseness": self.coarseness}


@register_capability
class ReorderCapability(Capability):
    """
    Reorders supplies through the WiFi module.

    Orders are only recorded on the instance; nothing leaves the process.
    """
    capability_id = REORDER
    description = "Reorders coffee supplies over WiFi"

    def __init__(self, item: str = "coffee beans", quantity: int = 1, account_id: Optional[str] = None,
                 **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if quantity < 1:
            raise InvalidDeviceConfiguration("reorder: quantity must be at least 1")
        self.item = item
        self.quantity = quantity
        self.account_id = account_id
        self.orders: list[dict[str, Any]] = []

    def perform(self) -> str:
        self.orders.append({"item": self.item, "quantity": self.quantity, "account_id": self.account_id})
        return f"Reordered {self.quantity} x {self.item}"

    def options(self) -> dict[str, Any]:
        return {**super().options(), "item": self.item, "quantity": self.quantity, "account_id": self.account_id}


@register_capability
class FirmwareUpdateCapability(Capability):
    capability_id = FIRMWARE_UPDATE
    description = "Updates the WiFi module firmware"

    def __init__(self, version: str = "latest", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.version = version
        self.installed: Optional[str] = None

    def perform(self) -> str:
        self.installed = self.version
        return f"Firmware updated to {self.version}"

    def options(self) -> dict[str, Any]:
        return {**super().options(), "version": self.version}
