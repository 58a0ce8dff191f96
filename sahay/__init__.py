"""Sahay — offline emergency, health, plant and women's health advice"""

__version__ = "0.1.0"
__author__ = "Sahay Contributors"
__powered_by__ = "Offline Knowledge Base"

from .agent import SahayAgent
from .classifier import classify, classify_image, green_ratio
from .knowledge import (
    DatasetLoader,
    DirectoryDatasetLoader,
    EmbeddedDatasetLoader,
    FallbackDatasetLoader,
    HttpDatasetLoader,
    KnowledgeStore,
    build_loader,
)
from .matcher import AdviceMatcher, MatchResult

__all__ = [
    "SahayAgent",
    "AdviceMatcher",
    "MatchResult",
    "KnowledgeStore",
    "DatasetLoader",
    "HttpDatasetLoader",
    "DirectoryDatasetLoader",
    "EmbeddedDatasetLoader",
    "FallbackDatasetLoader",
    "build_loader",
    "classify",
    "classify_image",
    "green_ratio",
]
