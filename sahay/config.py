"""Configuration module for Sahay"""

import os
from pathlib import Path

# Base directories
PACKAGE_DIR = Path(__file__).resolve().parent
EMBEDDED_DATA_DIR = PACKAGE_DIR / "data"

# Knowledge base topics, in load order
TOPICS = ("emergency", "health", "plants", "women")

# Dataset sources (primary fetch, then embedded fallback)
DATA_URL = os.environ.get("SAHAY_DATA_URL") or None
DATA_DIR = os.environ.get("SAHAY_DATA_DIR") or None
REQUEST_TIMEOUT = 5  # seconds
USER_AGENT = "Sahay/0.1 (+offline advice assistant)"
LOAD_WORKERS = len(TOPICS)

# Image heuristic settings
GREEN_MARGIN = 15  # per-channel margin on the 0-255 scale
GREEN_RATIO_THRESHOLD = 0.25  # strictly greater than this is plant-like

# Card confidence badges
CPR_BRIEF_CONFIDENCE = 98
CPR_DETAILED_CONFIDENCE = 96
SEARCH_CONFIDENCE = 87

# Speech settings
SPEECH_LANGUAGE = "en-IN"
SPEECH_LISTEN_TIMEOUT = 6  # seconds
SPEECH_PHRASE_LIMIT = 6  # seconds

# Camera settings
CAMERA_INDEX = 0

# CLI settings
CLI_PROMPT = "You"
CLI_ASSISTANT = "Sahay"
CLI_WIDTH = 80
