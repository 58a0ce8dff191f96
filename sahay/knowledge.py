"""Knowledge store module: loads the four offline topic datasets once and serves them read-only"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from collections.abc import Mapping
from typing import Dict, Optional, Tuple

import requests
from requests.exceptions import RequestException

from . import config
from .exceptions import DatasetError

logger = logging.getLogger(__name__)

_EMPTY: Mapping = MappingProxyType({})


def _freeze(value):
    """Recursively turn dicts into read-only mappings and lists into tuples"""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _parse(topic: str, text: str) -> Dict:
    """Parse dataset JSON text; blank text counts as an empty dataset"""
    if not text or not text.strip():
        return {}
    try:
        data = json.loads(text)
    except ValueError as e:
        raise DatasetError(topic, f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise DatasetError(topic, f"expected an object, got {type(data).__name__}")
    return data


# ── Loaders ──────────────────────────────────────────────────────────────────
class DatasetLoader:
    """Retrieves one topic dataset. Implementations raise DatasetError on failure."""

    name = "base"

    def load(self, topic: str) -> Dict:
        raise NotImplementedError


class HttpDatasetLoader(DatasetLoader):
    """Fetches ``<base_url>/<topic>.json`` over HTTP"""

    name = "http"

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = config.REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.USER_AGENT})

    def load(self, topic: str) -> Dict:
        url = f"{self.base_url}/{topic}.json"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except RequestException as e:
            raise DatasetError(topic, f"fetch failed for {url}: {e}") from e
        return _parse(topic, response.text)


class DirectoryDatasetLoader(DatasetLoader):
    """Reads ``<directory>/<topic>.json`` from disk"""

    name = "directory"

    def __init__(self, directory):
        self.directory = Path(directory)

    def load(self, topic: str) -> Dict:
        path = self.directory / f"{topic}.json"
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DatasetError(topic, str(e)) from e
        return _parse(topic, text)


class EmbeddedDatasetLoader(DirectoryDatasetLoader):
    """Reads the JSON shipped inside the package; a missing file is an empty dataset"""

    name = "embedded"

    def __init__(self, directory=None):
        super().__init__(directory or config.EMBEDDED_DATA_DIR)

    def load(self, topic: str) -> Dict:
        if not (self.directory / f"{topic}.json").exists():
            logger.debug(f"No embedded data for '{topic}', using empty dataset")
            return {}
        return super().load(topic)


class FallbackDatasetLoader(DatasetLoader):
    """Tries the primary loader, then the fallback, then gives up with an empty dataset"""

    name = "fallback"

    def __init__(self, primary: DatasetLoader, fallback: DatasetLoader):
        self.primary = primary
        self.fallback = fallback

    def load(self, topic: str) -> Dict:
        try:
            return self.primary.load(topic)
        except DatasetError as e:
            logger.warning(f"{e}; falling back to {self.fallback.name} data")
        try:
            return self.fallback.load(topic)
        except DatasetError as e:
            logger.warning(f"{e}; using empty dataset")
            return {}


def build_loader(data_url: Optional[str] = None, data_dir: Optional[str] = None) -> DatasetLoader:
    """
    Pick the loader chain at startup.
    A URL wins over a directory; both fall back to the embedded package data.
    """
    data_url = data_url or config.DATA_URL
    data_dir = data_dir or config.DATA_DIR
    embedded = EmbeddedDatasetLoader()
    if data_url:
        return FallbackDatasetLoader(HttpDatasetLoader(data_url), embedded)
    if data_dir:
        return FallbackDatasetLoader(DirectoryDatasetLoader(data_dir), embedded)
    return embedded


# ── Store ────────────────────────────────────────────────────────────────────
class KnowledgeStore:
    """
    In-memory collection of the topic datasets.
    Populated once and never mutated; absent fields read as empty collections.
    """

    def __init__(self, datasets: Optional[Mapping[str, Mapping]] = None):
        datasets = datasets or {}
        self._datasets = MappingProxyType({
            topic: _freeze(dict(datasets.get(topic) or {})) for topic in config.TOPICS
        })

    @classmethod
    def load(cls, loader: Optional[DatasetLoader] = None) -> "KnowledgeStore":
        """Load every topic concurrently and build the store once all have finished"""
        loader = loader or build_loader()

        def _safe_load(topic: str) -> Dict:
            try:
                data = loader.load(topic)
            except DatasetError as e:
                logger.warning(f"{e}; using empty dataset")
                return {}
            except Exception as e:
                name = getattr(loader, "name", type(loader).__name__)
                logger.warning(f"Loader {name} failed on '{topic}': {e!r}; using empty dataset")
                return {}
            if not isinstance(data, Mapping):
                return {}
            return data

        with ThreadPoolExecutor(max_workers=config.LOAD_WORKERS) as pool:
            results = list(pool.map(_safe_load, config.TOPICS))

        datasets = dict(zip(config.TOPICS, results))
        logger.info(
            "Loaded knowledge base: "
            + ", ".join(f"{t}={'ok' if d else 'empty'}" for t, d in datasets.items())
        )
        return cls(datasets)

    def get(self, topic: str) -> Mapping:
        """Dataset for a topic name, or an empty mapping if unknown or unavailable"""
        return self._datasets.get(topic, _EMPTY)

    def _list(self, topic: str, *path: str) -> Tuple:
        node = self.get(topic)
        for key in path:
            if not isinstance(node, Mapping):
                return ()
            node = node.get(key)
            if node is None:
                return ()
        return node if isinstance(node, tuple) else ()

    def _records(self, topic: str, *path: str) -> Tuple[Mapping, ...]:
        return tuple(r for r in self._list(topic, *path) if isinstance(r, Mapping))

    # Emergency
    def cpr_brief(self) -> Tuple[str, ...]:
        return self._list("emergency", "cpr", "brief")

    def cpr_detailed(self) -> Tuple[str, ...]:
        return self._list("emergency", "cpr", "detailed")

    def contacts(self) -> Tuple[Mapping, ...]:
        return self._records("emergency", "contactsHyderabad")

    # Health
    def general_tips(self) -> Tuple[str, ...]:
        return self._list("health", "generalTips")

    def symptoms(self) -> Tuple[Mapping, ...]:
        return self._records("health", "symptoms")

    # Plants
    def diseases(self) -> Tuple[Mapping, ...]:
        return self._records("plants", "diseases")

    # Women
    def pcos_advice(self) -> Tuple[str, ...]:
        return self._list("women", "pcodPcos")

    def menstrual_care(self) -> Tuple[str, ...]:
        return self._list("women", "menstrualCare")

    def wellness(self) -> Tuple[str, ...]:
        return self._list("women", "wellness")

    def get_statistics(self) -> Dict:
        """Record counts per collection"""
        return {
            "cpr_steps": len(self.cpr_brief()) + len(self.cpr_detailed()),
            "contacts": len(self.contacts()),
            "symptoms": len(self.symptoms()),
            "diseases": len(self.diseases()),
            "women_entries": len(self.pcos_advice()) + len(self.menstrual_care()) + len(self.wellness()),
        }
