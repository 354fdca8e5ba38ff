import logging
import uuid

import pytest

from brewcaps.config import Settings
from brewcaps.domain import DeviceController, DeviceFactory
from brewcaps.domain.capabilities import BrewCapability, GrindCapability, ReorderCapability
from brewcaps.logging import create_logger


class Recorder:
    def __init__(self):
        self.calls = []


def recording(cls):
    """Subclass a capability so every completed run is appended to a shared recorder."""

    class Recording(cls):
        def __init__(self, recorder: Recorder, **kwargs):
            super().__init__(**kwargs)
            self.recorder = recorder

        async def run(self):
            self.recorder.calls.append(self.capability_id)
            return await super().run()

    Recording.__name__ = f"Recording{cls.__name__}"
    return Recording


RecordingBrew = recording(BrewCapability)
RecordingGrind = recording(GrindCapability)
RecordingReorder = recording(ReorderCapability)


@pytest.fixture
def settings():
    return Settings(delay_scale=0.0)


@pytest.fixture
def factory(settings):
    return DeviceFactory(settings=settings)


@pytest.fixture
def logger():
    name = f"brewcaps.test.{uuid.uuid4().hex}"
    yield create_logger(name, ring_size=50)
    logging.getLogger(name).handlers.clear()


@pytest.fixture
def controller(settings, logger):
    return DeviceController(settings=settings, logger=logger)


@pytest.fixture
def recorder():
    return Recorder()
