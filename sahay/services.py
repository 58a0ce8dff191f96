"""Speech and camera capabilities behind small swappable interfaces"""

import logging
from typing import Optional

import numpy as np

from . import config
from .exceptions import CameraPermissionError, CapabilityUnavailableError, TranscriptionError

# Optional hardware libraries; absence is reported as an unsupported capability
try:
    import speech_recognition as sr
except ImportError:
    sr = None

try:
    import cv2
except ImportError:
    cv2 = None

logger = logging.getLogger(__name__)


# ── Transcription ────────────────────────────────────────────────────────────
class TranscriptionService:
    """Turns one utterance into text. Runs to completion or raises; no cancellation."""

    def transcribe(self) -> str:
        raise NotImplementedError


class SpeechTranscriber(TranscriptionService):
    """
    SpeechRecognition-backed transcriber.
    Listens on the default microphone, or reads an audio file when one is given.
    """

    def __init__(self, audio_file: Optional[str] = None, language: str = config.SPEECH_LANGUAGE):
        if sr is None:
            raise CapabilityUnavailableError("voice", "SpeechRecognition is not installed")
        self.audio_file = audio_file
        self.language = language
        self.recognizer = sr.Recognizer()

    def _record(self):
        if self.audio_file:
            try:
                with sr.AudioFile(self.audio_file) as source:
                    return self.recognizer.record(source)
            except (OSError, ValueError, EOFError) as e:
                # AudioFile raises ValueError for anything that is not WAV, AIFF or FLAC
                raise TranscriptionError(f"Could not read audio file {self.audio_file}: {e}") from e
        try:
            microphone = sr.Microphone()
        except (AttributeError, OSError) as e:
            # sr.Microphone needs PyAudio and an input device
            raise CapabilityUnavailableError("voice", f"no microphone available ({e})") from e
        with microphone as source:
            logger.info(f"Listening for up to {config.SPEECH_LISTEN_TIMEOUT}s...")
            return self.recognizer.listen(
                source,
                timeout=config.SPEECH_LISTEN_TIMEOUT,
                phrase_time_limit=config.SPEECH_PHRASE_LIMIT,
            )

    def transcribe(self) -> str:
        try:
            audio = self._record()
        except sr.WaitTimeoutError as e:
            raise TranscriptionError("No speech detected") from e
        try:
            text = self.recognizer.recognize_google(audio, language=self.language)
        except sr.UnknownValueError as e:
            raise TranscriptionError("Speech was not intelligible") from e
        except sr.RequestError as e:
            raise TranscriptionError(f"Recognition service unavailable: {e}") from e
        logger.debug(f"Transcribed: {text!r}")
        return text


# ── Camera ───────────────────────────────────────────────────────────────────
class CameraService:
    """A camera stream that must be released when no longer needed"""

    @property
    def is_active(self) -> bool:
        raise NotImplementedError

    def start(self):
        raise NotImplementedError

    def capture(self) -> np.ndarray:
        """One RGB frame as an ``H x W x 3`` uint8 array"""
        raise NotImplementedError

    def stop(self):
        raise NotImplementedError

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *_):
        self.stop()


class OpenCVCamera(CameraService):
    """OpenCV VideoCapture camera"""

    def __init__(self, index: int = config.CAMERA_INDEX):
        if cv2 is None:
            raise CapabilityUnavailableError("camera", "opencv-python is not installed")
        self.index = index
        self._capture = None

    @property
    def is_active(self) -> bool:
        return self._capture is not None

    def start(self):
        if self._capture is not None:
            return
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            raise CameraPermissionError(f"Camera {self.index} could not be opened")
        self._capture = capture
        logger.info(f"Camera {self.index} started")

    def capture(self) -> np.ndarray:
        if self._capture is None:
            raise CameraPermissionError("Camera has not been started")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraPermissionError(f"Camera {self.index} returned no frame")
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def stop(self):
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
        logger.info(f"Camera {self.index} released")
