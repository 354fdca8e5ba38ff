"""
Runs the standard usage sequence against any device.

The controller never asks what kind of machine it holds. It describes the
device, brews, then walks the remaining capabilities in registration order.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from brewcaps.config import Settings, get_settings
from brewcaps.domain.capabilities import BREW
from brewcaps.domain.device import Device
from brewcaps.domain.report import CapabilityOutcome, OperationReport, OperationState
from brewcaps.logging import create_logger, ring_buffer


class DeviceController:
    """
    Operates devices and records what happened.

    Without an explicit ``logger`` every controller writes to the shared
    ``brewcaps.controller`` logger, so ``events()`` then mixes runs from all
    such controllers and the first one created fixes the ring size. Pass a
    logger from ``create_logger`` with a unique name to keep runs apart.
    """

    def __init__(self, settings: Optional[Settings] = None, logger: Optional[logging.Logger] = None):
        self.settings = settings or get_settings()
        self.logger = logger or create_logger("brewcaps.controller", self.settings.log_ring_size)

    def log(self, event: str, details: Optional[dict] = None, level: int = logging.INFO) -> None:
        self.logger.log(level, event, extra={"details": details or {}})

    def events(self, event: Optional[str] = None) -> List[Dict]:
        handler = ring_buffer(self.logger)
        return handler.get_events(event) if handler else []

    async def _invoke(self, device: Device, capability_id: str) -> CapabilityOutcome:
        result = await device.invoke(capability_id, timeout=self.settings.capability_timeout)
        outcome = CapabilityOutcome.from_result(result)
        if outcome.ok:
            details = {"capability": capability_id, "elapsed": outcome.elapsed, "message": outcome.message}
            details.update(device.capabilities[capability_id].options())
            self.log("capability_ok", details)
        else:
            self.log("capability_failed", {"capability": capability_id, "error": outcome.error},
                     level=logging.WARNING)
        return outcome

    async def operate(self, device: Device) -> OperationReport:
        """
        Describe the device, brew, then run every optional capability.

        A failed brew ends the operation in ``brew_failed`` without touching
        optional capabilities. A failed optional capability is recorded and
        the rest still run.

        Returns:
            The ``OperationReport`` for this call.
        """
        report = OperationReport(make=device.make, model=device.model)

        report.advance(OperationState.DESCRIBING)
        report.description = device.describe()
        self.log("device_described", {"device": device.identity(), "lines": report.description})

        report.advance(OperationState.BREWING)
        report.brew = await self._invoke(device, BREW)
        if not report.brew.ok:
            report.advance(OperationState.BREW_FAILED)
            self.log("operate_aborted", {"device": device.identity(), "error": report.brew.error},
                     level=logging.ERROR)
            return report

        report.advance(OperationState.INVOKING_OPTIONAL)
        for capability_id in device.optional_capability_ids:
            report.optional.append(await self._invoke(device, capability_id))

        report.advance(OperationState.DONE)
        self.log("operate_done", {
            "device": device.identity(),
            "optional": [outcome.capability_id for outcome in report.optional],
            "failures": [outcome.capability_id for outcome in report.failures],
        })
        return report

    def operate_sync(self, device: Device) -> OperationReport:
        return asyncio.run(self.operate(device))
