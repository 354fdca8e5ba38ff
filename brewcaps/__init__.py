from brewcaps.config import Settings, get_settings
from brewcaps.domain import (
    Capability,
    Device,
    DeviceController,
    DeviceFactory,
    OperationReport,
    create_device,
    new_device,
    register_capability,
)
from brewcaps.bundles import get_bundles
from importlib.metadata import PackageNotFoundError, version

__all__ = [
    "Capability",
    "Device",
    "DeviceController",
    "DeviceFactory",
    "OperationReport",
    "Settings",
    "create_device",
    "get_bundles",
    "get_settings",
    "new_device",
    "register_capability",
]

try:
    __version__ = version("brewcaps")
except PackageNotFoundError:
    __version__ = "0.0.0"
