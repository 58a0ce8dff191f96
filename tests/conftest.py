"""Shared test fixtures"""

import numpy as np
import pytest

from sahay.agent import SahayAgent
from sahay.exceptions import CameraPermissionError
from sahay.knowledge import KnowledgeStore
from sahay.matcher import AdviceMatcher
from sahay.services import CameraService, TranscriptionService

SAMPLE_DATA = {
    "emergency": {
        "cpr": {"brief": ["Call 112", "Push hard and fast"], "detailed": ["Kneel beside the person"]},
        "contactsHyderabad": [{"name": "Police", "number": "100"}, {"name": "Ambulance", "number": "108"}],
    },
    "health": {
        "generalTips": ["Drink water"],
        "symptoms": [
            {"keywords": ["chest pain"], "advice": "Call emergency services"},
            {"keywords": ["fever", "temperature"], "advice": "Rest and hydrate"},
            {"keywords": ["headache"], "advice": "Rest in a dark room"},
        ],
    },
    "plants": {
        "diseases": [
            {"name": "Powdery Mildew", "signs": "white powder on leaves", "care": "Spray neem oil"},
            {"name": "Root Rot", "signs": "soft brown roots", "care": "Water less"},
        ],
    },
    "women": {
        "pcodPcos": ["Exercise regularly", "Eat low-GI food"],
        "menstrualCare": ["Use a warm compress"],
        "wellness": ["Sleep well"],
    },
}


class FakeTranscriber(TranscriptionService):
    """Returns a fixed transcript, or raises the given error"""

    def __init__(self, text="I have a fever", error=None):
        self.text = text
        self.error = error
        self.calls = 0
        self.saw_recording = None
        self.agent = None

    def transcribe(self):
        self.calls += 1
        if self.agent is not None:
            self.saw_recording = self.agent.recording
        if self.error is not None:
            raise self.error
        return self.text


class FakeCamera(CameraService):
    """Serves one pre-built frame"""

    def __init__(self, frame=None, deny=False):
        self.frame = frame if frame is not None else np.zeros((4, 4, 3), dtype=np.uint8)
        self.deny = deny
        self.active = False
        self.stops = 0

    @property
    def is_active(self):
        return self.active

    def start(self):
        if self.deny:
            raise CameraPermissionError("denied")
        self.active = True

    def capture(self):
        if not self.active:
            raise CameraPermissionError("not started")
        return self.frame

    def stop(self):
        self.stops += 1
        self.active = False


@pytest.fixture
def store():
    """KnowledgeStore over the small sample datasets."""
    return KnowledgeStore(SAMPLE_DATA)


@pytest.fixture
def empty_store():
    return KnowledgeStore()


@pytest.fixture
def matcher(store):
    return AdviceMatcher(store)


@pytest.fixture
def green_frame():
    frame = np.zeros((10, 10, 3), dtype=np.uint8)
    frame[..., 1] = 255
    return frame


@pytest.fixture
def red_frame():
    frame = np.zeros((10, 10, 3), dtype=np.uint8)
    frame[..., 0] = 255
    return frame


@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def camera(green_frame):
    return FakeCamera(green_frame)


@pytest.fixture
def agent(store, transcriber, camera):
    """SahayAgent wired to sample data and fake services."""
    agent = SahayAgent(store=store, transcriber=transcriber, camera=camera)
    transcriber.agent = agent
    return agent


