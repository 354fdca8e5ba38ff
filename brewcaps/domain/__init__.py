"""
This package defines the core domain model for brewcaps: capabilities, the
immutable ``Device`` that carries them, the factory that builds devices from
named bundles, and the controller that operates any device.
"""
from brewcaps.domain.capabilities import (
    BREW,
    GRIND,
    REORDER,
    FIRMWARE_UPDATE,
    Capability,
    CapabilityResult,
    register_capability,
)
from brewcaps.domain.controller import DeviceController
from brewcaps.domain.device import Device, new_device
from brewcaps.domain.errors import (
    BrewcapsError,
    CapabilityExecutionFailure,
    CapabilityNotSupported,
    InvalidDeviceConfiguration,
    UnknownDeviceKind,
)
from brewcaps.domain.factory import DeviceFactory, create_device
from brewcaps.domain.report import CapabilityOutcome, OperationReport, OperationState

__all__ = [
    "BREW",
    "GRIND",
    "REORDER",
    "FIRMWARE_UPDATE",
    "Capability",
    "CapabilityResult",
    "register_capability",
    "DeviceController",
    "Device",
    "new_device",
    "BrewcapsError",
    "CapabilityExecutionFailure",
    "CapabilityNotSupported",
    "InvalidDeviceConfiguration",
    "UnknownDeviceKind",
    "DeviceFactory",
    "create_device",
    "CapabilityOutcome",
    "OperationReport",
    "OperationState",
]
