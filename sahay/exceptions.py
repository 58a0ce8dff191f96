"""
Exception hierarchy for Sahay.

Everything raised by the package descends from ``SahayError`` so the
front end can catch the whole family with a single except clause.
"""


class SahayError(Exception):
    """Base exception for all Sahay errors."""


class DatasetError(SahayError):
    """Raised by a loader when a topic dataset cannot be retrieved or parsed."""

    def __init__(self, topic: str, reason: str):
        self.topic = topic
        self.reason = reason
        super().__init__(f"Could not load '{topic}' dataset: {reason}")


class EmptyQueryError(SahayError, ValueError):
    """Raised when a search is attempted with blank input."""


class InvalidChoiceError(SahayError, ValueError):
    """Raised for an unknown input mode or browse category."""


class CapabilityUnavailableError(SahayError):
    """Raised when speech or camera support is missing on this machine."""

    def __init__(self, feature: str, reason: str = ""):
        self.feature = feature
        self.reason = reason
        msg = f"{feature} is not supported here"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CameraPermissionError(SahayError):
    """Raised when the camera exists but cannot be opened."""


class TranscriptionError(SahayError):
    """Raised when speech could not be turned into text."""
