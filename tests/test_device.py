"""Tests for the Device descriptor."""
import asyncio

import pytest

from brewcaps.domain.capabilities import (
    BREW,
    GRIND,
    REORDER,
    BrewCapability,
    GrindCapability,
    ReorderCapability,
)
from brewcaps.domain.device import Device, new_device
from brewcaps.domain.errors import CapabilityNotSupported, InvalidDeviceConfiguration


def _grinder():
    return new_device("Breville", "Barista Express", [BrewCapability(), GrindCapability()])


def test_new_device_keeps_registration_order():
    device = new_device("Acme", "X9", [BrewCapability(), ReorderCapability(), GrindCapability()])
    assert device.capability_ids == (BREW, REORDER, GRIND)
    assert device.optional_capability_ids == (REORDER, GRIND)


def test_brew_need_not_be_first():
    device = new_device("Acme", "X9", [GrindCapability(), BrewCapability()])
    assert device.capability_ids == (GRIND, BREW)
    assert device.optional_capability_ids == (GRIND,)


def test_missing_brew_rejected():
    with pytest.raises(InvalidDeviceConfiguration):
        new_device("Acme", "Grinder Only", [GrindCapability()])


def test_duplicate_capability_rejected():
    with pytest.raises(InvalidDeviceConfiguration):
        new_device("Acme", "X1", [BrewCapability(), BrewCapability()])


def test_non_capability_rejected():
    with pytest.raises(InvalidDeviceConfiguration):
        new_device("Acme", "X1", [BrewCapability(), "grind"])


@pytest.mark.parametrize("make, model", [("", "X1"), ("Acme", "  ")])
def test_blank_identity_rejected(make, model):
    with pytest.raises(InvalidDeviceConfiguration):
        new_device(make, model, [BrewCapability()])


def test_mismatched_mapping_key_rejected():
    with pytest.raises(InvalidDeviceConfiguration):
        Device("Acme", "X1", {BREW: GrindCapability()})


def test_supports():
    device = _grinder()
    assert device.supports(BREW)
    assert device.supports(GRIND)
    assert not device.supports(REORDER)


def test_describe_identity_first_then_capabilities_in_order():
    device = new_device("Acme", "X9", [BrewCapability(), ReorderCapability(), GrindCapability()])
    assert device.describe() == [
        "Coffee machine: Acme X9",
        "Brews coffee",
        "Reorders coffee supplies over WiFi",
        "Grinds fresh beans with the built-in grinder",
    ]


def test_device_is_immutable():
    device = _grinder()
    with pytest.raises(AttributeError):
        device.make = "Other"
    with pytest.raises(TypeError):
        device.capabilities[REORDER] = ReorderCapability()


def test_device_does_not_share_callers_mapping():
    caps = {BREW: BrewCapability()}
    device = Device("Acme", "X1", caps)
    caps[GRIND] = GrindCapability()
    assert not device.supports(GRIND)


def test_invoke_success_reports_elapsed():
    device = _grinder()
    result = asyncio.run(device.invoke(GRIND))
    assert result.ok
    assert result.capability_id == GRIND
    assert result.message == "Ground beans (medium)"
    assert result.elapsed >= 0.0
    assert result.error is None


def test_invoke_simulated_delay_is_counted():
    device = new_device("Acme", "Slow", [BrewCapability(delay=0.05)])
    result = asyncio.run(device.invoke(BREW))
    assert result.ok
    assert result.elapsed >= 0.04


def test_invoke_fault_is_failed_result():
    device = new_device("Acme", "X1", [BrewCapability(fault="boiler cold")])
    result = asyncio.run(device.invoke(BREW))
    assert not result.ok
    assert result.error == "boiler cold"


def test_invoke_unsupported_raises():
    device = _grinder()
    with pytest.raises(CapabilityNotSupported) as excinfo:
        asyncio.run(device.invoke(REORDER))
    assert excinfo.value.capability_id == REORDER
    assert "Breville Barista Express" in str(excinfo.value)


def test_invoke_timeout_is_failed_result():
    device = new_device("Acme", "Slow", [BrewCapability(delay=1.0)])
    result = asyncio.run(device.invoke(BREW, timeout=0.01))
    assert not result.ok
    assert "timed out" in result.error


def test_devices_are_hashable():
    device = _grinder()
    assert device in {device}


class StalledGrinder(GrindCapability):
    def perform(self):
        raise OSError("motor stalled")


def test_invoke_unexpected_error_is_failed_result():
    device = new_device("Acme", "X1", [BrewCapability(), StalledGrinder()])
    result = asyncio.run(device.invoke(GRIND))
    assert not result.ok
    assert result.error == "OSError: motor stalled"


def test_invoke_cancellation_propagates():
    device = new_device("Acme", "Slow", [BrewCapability(delay=1.0)])

    async def cancel_midway():
        task = asyncio.ensure_future(device.invoke(BREW))
        await asyncio.sleep(0.01)
        task.cancel()
        await task

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(cancel_midway())
