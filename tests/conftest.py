"""Shared fakes: camera, detector, voice and remote services."""

import asyncio
import random
from datetime import datetime

import numpy as np
import pytest
import pytest_asyncio

from marvin.brain.orchestrator import build_assistant
from marvin.bus.messages import Detection
from marvin.config import Settings
from marvin.services.errors import ServiceError
from marvin.services.weather import WeatherReport
from marvin.storage.kv import MemoryStore

FIXED_NOW = datetime(2026, 10, 19, 15, 4, 5)


def gray_frame(level: int = 120, h: int = 48, w: int = 64):
    return np.full((h, w, 3), level, dtype=np.uint8)


class FakeVoice:
    def __init__(self, events):
        self.events = events

    async def speak(self, text):
        self.events.append(("speak", text))
        await asyncio.sleep(0)
        self.events.append(("spoken", text))


class FakeCamera:
    def __init__(self, frame=None, error=None):
        self.frame = gray_frame() if frame is None else frame
        self.error = error
        self.opened = 0
        self.released = 0
        self.is_open = False

    def open(self):
        if self.error is not None:
            raise self.error
        self.opened += 1
        self.is_open = True

    def read(self):
        return self.frame.copy() if self.is_open else None

    def release(self):
        if self.is_open:
            self.released += 1
        self.is_open = False


class FakeDetector:
    def __init__(self, detections=None, failures: int = 0):
        self.detections = detections or []
        self.failures = failures
        self.calls = 0

    def detect(self, frame):
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("model busy")
        return list(self.detections)


class FakeLLM:
    def __init__(self, answer="LLM says hi", error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    def ask(self, message):
        self.calls.append(message)
        if self.error is not None:
            raise self.error
        return self.answer


class FakeEncyclopedia:
    def __init__(self, extracts=None):
        self.extracts = extracts or {}
        self.calls = []

    def summary(self, topic):
        self.calls.append(topic)
        if topic not in self.extracts:
            raise ServiceError("encyclopedia", f"no extract for {topic!r}")
        return self.extracts[topic]


class FakeWeather:
    def __init__(self, report=None, error=None):
        self.report = report or WeatherReport("Sunny", "+25°C", "↗10km/h")
        self.error = error
        self.calls = []

    def current(self, location):
        self.calls.append(location)
        if self.error is not None:
            raise self.error
        return self.report


class FakeNews:
    def __init__(self, title="Markets rally", error=None):
        self.title = title
        self.error = error
        self.calls = 0

    def latest_headline(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.title


class FakeTranslator:
    def __init__(self, result="सुप्रभात", error=None):
        self.result = result
        self.error = error
        self.calls = []

    def translate(self, text, code, source_code="en"):
        self.calls.append((text, code))
        if self.error is not None:
            raise self.error
        return self.result


def detection(label="person", confidence=0.9, bbox=(10, 10, 20, 30)):
    return Detection(label=label, confidence=confidence, bbox=bbox)


@pytest.fixture
def events():
    return []


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def fakes():
    return {
        "camera": FakeCamera(),
        "detector": FakeDetector([detection("person"), detection("cup", 0.55)]),
        "llm": FakeLLM(),
        "encyclopedia": FakeEncyclopedia({"photosynthesis": "Photosynthesis is how plants make food."}),
        "weather": FakeWeather(),
        "news": FakeNews(),
        "translator": FakeTranslator(),
    }


@pytest.fixture
def make_assistant(events, store, fakes):
    """Assistant wired to the fakes above, with fast loop timings."""

    def make():
        a = build_assistant(
            Settings(disable_yolo=True),
            voice=FakeVoice(events),
            store=store,
            camera=fakes["camera"],
            detector=fakes["detector"],
            llm=fakes["llm"],
            encyclopedia=fakes["encyclopedia"],
            weather=fakes["weather"],
            news=fakes["news"],
            translator=fakes["translator"],
            open_url=lambda url: events.append(("open", url)),
            clock=lambda: FIXED_NOW,
            rng=random.Random(7),
            shutdown_delay=0.01,
        )
        a.perception.frame_interval = 0.001
        a.perception.retry_delay = 0.001
        a.perception.emotion_interval = 0.01
        return a

    return make


@pytest_asyncio.fixture
async def assistant(make_assistant):
    a = make_assistant()
    yield a
    await a.close()
