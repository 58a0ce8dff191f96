"""Main Sahay agent: the context object every front-end action goes through"""

import logging
from typing import List, Optional

from PIL import UnidentifiedImageError

from . import responses
from .classifier import classify, classify_image
from .exceptions import (
    CameraPermissionError,
    CapabilityUnavailableError,
    InvalidChoiceError,
    TranscriptionError,
)
from .knowledge import DatasetLoader, KnowledgeStore
from .matcher import AdviceMatcher
from .responses import AdviceCard
from .services import CameraService, OpenCVCamera, SpeechTranscriber, TranscriptionService

logger = logging.getLogger(__name__)

MODES = ("text", "voice", "image")


class SahayAgent:
    """
    Holds the knowledge store, matcher, capability services and UI state.

    State:
      mode       exactly one of text / voice / image
      recording  True only while a transcription is running
      category   last browsed category, or None
    """

    def __init__(self, store: Optional[KnowledgeStore] = None,
                 loader: Optional[DatasetLoader] = None,
                 transcriber: Optional[TranscriptionService] = None,
                 camera: Optional[CameraService] = None):
        logger.info("Initializing Sahay agent...")
        self.store = store if store is not None else KnowledgeStore.load(loader)
        self.matcher = AdviceMatcher(self.store)

        # Built on first use; construction fails when the hardware library is missing
        self._transcriber = transcriber
        self._camera = camera

        self.mode = "text"
        self.recording = False
        self.category: Optional[str] = None

    # ── Mode handling ────────────────────────────────────────────────────────

    def set_mode(self, mode: str):
        if mode not in MODES:
            raise InvalidChoiceError(f"Unknown input mode {mode!r}; expected one of {', '.join(MODES)}")
        if self.mode == "image" and mode != "image":
            self.stop_camera()
        self.mode = mode
        logger.debug(f"Input mode set to {mode}")

    # ── Emergency and browsing ───────────────────────────────────────────────

    def cpr(self) -> List[AdviceCard]:
        return responses.cpr_cards(self.store)

    def contacts(self) -> AdviceCard:
        return responses.contacts_card(self.store)

    def select_category(self, category: str) -> AdviceCard:
        card = responses.category_card(self.store, category)
        self.category = category
        return card

    # ── Text ─────────────────────────────────────────────────────────────────

    def submit(self, text: str) -> Optional[AdviceCard]:
        """Search the knowledge base; blank input is ignored and returns None"""
        content = (text or "").strip()
        if not content:
            return None
        results = self.matcher.search(content)
        return responses.search_card(results)

    # ── Voice ────────────────────────────────────────────────────────────────

    def _get_transcriber(self) -> TranscriptionService:
        if self._transcriber is None:
            self._transcriber = SpeechTranscriber()
        return self._transcriber

    def start_voice(self):
        """
        Record and transcribe one utterance.
        Returns the transcript, None if a recording is already running,
        or an AdviceCard explaining why voice input is not possible.
        """
        if self.recording:
            return None
        self.set_mode("voice")
        try:
            transcriber = self._get_transcriber()
        except CapabilityUnavailableError as e:
            logger.info(str(e))
            return responses.unsupported_card("voice")

        self.recording = True
        try:
            return transcriber.transcribe()
        except CapabilityUnavailableError as e:
            logger.info(str(e))
            return responses.unsupported_card("voice")
        except TranscriptionError as e:
            logger.warning(f"Transcription failed: {e}")
            return responses.transcription_failed_card(str(e))
        finally:
            self.recording = False

    # ── Image ────────────────────────────────────────────────────────────────

    def _get_camera(self) -> CameraService:
        if self._camera is None:
            self._camera = OpenCVCamera()
        return self._camera

    @property
    def camera_active(self) -> bool:
        return self._camera is not None and self._camera.is_active

    def start_camera(self) -> Optional[AdviceCard]:
        """Open the camera; returns a card only when that is not possible"""
        self.set_mode("image")
        try:
            self._get_camera().start()
        except CapabilityUnavailableError as e:
            logger.info(str(e))
            return responses.unsupported_card("camera")
        except CameraPermissionError as e:
            logger.warning(str(e))
            return responses.permission_card()
        return None

    def capture_and_identify(self, frame=None) -> AdviceCard:
        """Classify a given RGB frame, or grab one from the running camera"""
        if frame is None:
            if not self.camera_active:
                card = self.start_camera()
                if card is not None:
                    return card
            try:
                frame = self._camera.capture()
            except CameraPermissionError as e:
                logger.warning(str(e))
                return responses.permission_card()
        return responses.image_card(self.store, classify(frame))

    def identify_image(self, path) -> AdviceCard:
        """Classify an image file"""
        self.set_mode("image")
        try:
            is_plant = classify_image(path)
        except (OSError, UnidentifiedImageError) as e:
            logger.warning(f"Could not read image {path}: {e}")
            return responses.image_error_card(str(e))
        return responses.image_card(self.store, is_plant)

    def stop_camera(self):
        if self._camera is not None:
            self._camera.stop()

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def close(self):
        """Release the camera stream"""
        self.stop_camera()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def get_statistics(self):
        return self.store.get_statistics()

    def get_greeting(self) -> str:
        stats = self.get_statistics()
        return (
            "Namaste! I can help with emergencies, health, plants and women's health.\n"
            f"Offline knowledge: {stats['symptoms']} symptoms, {stats['diseases']} plant diseases, "
            f"{stats['contacts']} emergency contacts.\n"
            "Type a question, or 'help' for commands."
        )
