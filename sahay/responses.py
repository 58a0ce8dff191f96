"""Advice card generation: what the user sees for every action"""

import logging
from typing import Dict, List, Optional, Sequence, Union

from . import config
from .exceptions import InvalidChoiceError
from .knowledge import KnowledgeStore
from .matcher import MatchResult

logger = logging.getLogger(__name__)

INFO = "info"
WARN = "warn"

CATEGORIES = ("medical", "plant", "women")

CONTACT_TAGS = ["112", "100", "108", "101", "102", "1091", "1098"]

NO_MATCH_HINT = (
    "I couldn't find an exact match. Try adding more detail like symptom duration, "
    "severity, or affected plant part."
)
NOT_IDENTIFIED_HINT = (
    "No strong plant features detected. Try better lighting, closer focus, "
    "or provide text description."
)


class AdviceCard:
    """A titled block of advice with tags and an optional confidence badge"""

    def __init__(self, title: str, content: Union[str, Sequence[str]],
                 tags: Optional[List[str]] = None, type: str = INFO,
                 confidence: Optional[int] = None):
        self.title = title
        self.content = content if isinstance(content, str) else list(content)
        self.tags = list(tags or [])
        self.type = type
        self.confidence = confidence

    @property
    def lines(self) -> List[str]:
        """Content as a list of lines, whether it was given as text or as a list"""
        if isinstance(self.content, str):
            return [self.content]
        return self.content

    def to_dict(self) -> Dict:
        return {
            "title": self.title,
            "content": self.content,
            "tags": self.tags,
            "type": self.type,
            "confidence": self.confidence,
        }

    def __repr__(self):
        return f"AdviceCard(title={self.title!r}, type={self.type!r}, lines={len(self.lines)})"


# ── Emergency ────────────────────────────────────────────────────────────────
def cpr_cards(store: KnowledgeStore) -> List[AdviceCard]:
    """Brief CPR steps first, then the detailed guide"""
    return [
        AdviceCard(
            "CPR — Brief Steps",
            store.cpr_brief(),
            tags=["Emergency", "CPR", "Immediate Action"],
            type=WARN,
            confidence=config.CPR_BRIEF_CONFIDENCE,
        ),
        AdviceCard(
            "CPR — Detailed Guide",
            store.cpr_detailed(),
            tags=["CPR", "Detailed"],
            type=INFO,
            confidence=config.CPR_DETAILED_CONFIDENCE,
        ),
    ]


def contacts_card(store: KnowledgeStore) -> AdviceCard:
    lines = [f"{c.get('name', '')}: {c.get('number', '')}" for c in store.contacts()]
    return AdviceCard("Emergency Contacts — Hyderabad / India", lines, tags=CONTACT_TAGS)


# ── Category browsing ────────────────────────────────────────────────────────
def category_card(store: KnowledgeStore, category: str) -> AdviceCard:
    """Everything the store holds for one browse category"""
    if category == "medical":
        return AdviceCard("General Medical Guidance", store.general_tips(), tags=["Medical", "General"])

    if category == "plant":
        lines = [
            f"{d.get('name', '')} — {d.get('signs', '')}. Care: {d.get('care', '')}"
            for d in store.diseases()
        ]
        return AdviceCard("Common Plant Diseases & Care", lines, tags=["Plants", "Care"])

    if category == "women":
        lines = [
            "PCOD/PCOS:", *store.pcos_advice(),
            "",
            "Menstrual Care:", *store.menstrual_care(),
            "",
            "Wellness:", *store.wellness(),
        ]
        return AdviceCard(
            "Women's Health — PCOD/PCOS & Menstrual Care",
            lines,
            tags=["Women", "PCOS", "Menstrual"],
        )

    raise InvalidChoiceError(f"Unknown category {category!r}; expected one of {', '.join(CATEGORIES)}")


# ── Search and image results ─────────────────────────────────────────────────
def search_card(results: Sequence[MatchResult]) -> AdviceCard:
    if not results:
        return AdviceCard("No Direct Match", NO_MATCH_HINT, tags=["Hint"], type=INFO)
    return AdviceCard(
        "AI Advice (Offline Knowledge Base)",
        [f"{r.area} — {r.advice}" for r in results],
        tags=["Offline", "KB"],
        confidence=config.SEARCH_CONFIDENCE,
    )


def image_card(store: KnowledgeStore, is_plant: bool) -> AdviceCard:
    if not is_plant:
        return AdviceCard("Could Not Identify", NOT_IDENTIFIED_HINT, tags=["Image"], type=INFO)
    lines = ["Detected plant-like image (heuristic)."]
    lines.extend(
        f"{d.get('name', '')}: {d.get('signs', '')}. Care: {d.get('care', '')}"
        for d in store.diseases()
    )
    return AdviceCard("Plant Identified (Offline Heuristic)", lines, tags=["Image", "Plants"])


# ── Capability messages ──────────────────────────────────────────────────────
def unsupported_card(feature: str) -> AdviceCard:
    if feature == "voice":
        return AdviceCard(
            "Voice Not Supported",
            "Speech recognition is not available on this machine. Please use text input.",
            tags=["Voice"],
            type=INFO,
        )
    return AdviceCard(
        "Camera Not Supported",
        "No usable camera was found. Provide an image file or a text description instead.",
        tags=["Camera"],
        type=INFO,
    )


def permission_card() -> AdviceCard:
    return AdviceCard(
        "Camera Permission Needed",
        "Allow camera access in your system or app permissions.",
        tags=["Camera"],
        type=WARN,
    )


def transcription_failed_card(reason: str = "") -> AdviceCard:
    text = "Could not understand the recording. Please try again or type your question."
    if reason:
        text = f"{text} ({reason})"
    return AdviceCard("Voice Not Recognised", text, tags=["Voice"], type=INFO)


def image_error_card(reason: str) -> AdviceCard:
    return AdviceCard("Image Not Readable", f"Could not open the image: {reason}", tags=["Image"], type=WARN)
