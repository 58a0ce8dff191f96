import json

import pytest
import requests

from sahay import config
from sahay.exceptions import DatasetError
from sahay.knowledge import (
    DatasetLoader,
    DirectoryDatasetLoader,
    EmbeddedDatasetLoader,
    FallbackDatasetLoader,
    HttpDatasetLoader,
    KnowledgeStore,
    build_loader,
)

from conftest import SAMPLE_DATA


class FakeResponse:
    def __init__(self, text="", status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.headers = {}
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        result = self.responses.get(url)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return FakeResponse(status=404)
        return result


class DictLoader(DatasetLoader):
    name = "dict"

    def __init__(self, data, fail=()):
        self.data = data
        self.fail = set(fail)
        self.calls = []

    def load(self, topic):
        self.calls.append(topic)
        if topic in self.fail:
            raise DatasetError(topic, "boom")
        return self.data.get(topic, {})


class TestKnowledgeStore:
    def test_accessors(self, store):
        assert store.cpr_brief() == ("Call 112", "Push hard and fast")
        assert store.cpr_detailed() == ("Kneel beside the person",)
        assert [c["number"] for c in store.contacts()] == ["100", "108"]
        assert store.general_tips() == ("Drink water",)
        assert len(store.symptoms()) == 3
        assert [d["name"] for d in store.diseases()] == ["Powdery Mildew", "Root Rot"]
        assert store.pcos_advice() == ("Exercise regularly", "Eat low-GI food")
        assert store.menstrual_care() == ("Use a warm compress",)
        assert store.wellness() == ("Sleep well",)

    def test_missing_fields_are_empty(self, empty_store):
        assert empty_store.cpr_brief() == ()
        assert empty_store.contacts() == ()
        assert empty_store.symptoms() == ()
        assert empty_store.diseases() == ()
        assert empty_store.pcos_advice() == ()

    def test_wrong_shape_is_empty(self):
        store = KnowledgeStore({"emergency": {"cpr": "not a mapping"}, "plants": {"diseases": "nope"}})
        assert store.cpr_brief() == ()
        assert store.diseases() == ()

    def test_get_unknown_topic(self, store):
        assert dict(store.get("astrology")) == {}

    def test_datasets_are_read_only(self, store):
        with pytest.raises(TypeError):
            store.get("health")["generalTips"] = []
        with pytest.raises(AttributeError):
            store.general_tips().append("x")

    def test_source_data_changes_do_not_leak(self):
        data = json.loads(json.dumps(SAMPLE_DATA))
        store = KnowledgeStore(data)
        data["women"]["pcodPcos"].append("late addition")
        assert len(store.pcos_advice()) == 2

    def test_statistics(self, store):
        stats = store.get_statistics()
        assert stats["symptoms"] == 3
        assert stats["diseases"] == 2
        assert stats["contacts"] == 2
        assert stats["women_entries"] == 4

    def test_load_uses_every_topic_once(self):
        loader = DictLoader(SAMPLE_DATA)
        store = KnowledgeStore.load(loader)
        assert sorted(loader.calls) == sorted(config.TOPICS)
        assert store.symptoms()[0]["advice"] == "Call emergency services"

    def test_load_failure_degrades_to_empty(self):
        store = KnowledgeStore.load(DictLoader(SAMPLE_DATA, fail={"health"}))
        assert store.symptoms() == ()
        assert len(store.diseases()) == 2

    def test_unexpected_loader_error_degrades_to_empty(self, caplog):
        class BrokenLoader(DictLoader):
            def load(self, topic):
                if topic == "women":
                    raise RuntimeError("disk on fire")
                return super().load(topic)

        store = KnowledgeStore.load(BrokenLoader(SAMPLE_DATA))
        assert store.pcos_advice() == ()
        assert len(store.symptoms()) == 3
        assert "disk on fire" in caplog.text

    def test_undecodable_directory_file_falls_back_to_embedded(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "DATA_URL", None)
        (tmp_path / "health.json").write_bytes(b'{"generalTips": ["\xff\xfe bad"]}')
        store = KnowledgeStore.load(build_loader(data_dir=str(tmp_path)))
        assert store.general_tips() == KnowledgeStore.load(EmbeddedDatasetLoader()).general_tips()
        assert len(store.general_tips()) > 0


class TestLoaders:
    def test_directory_loader(self, tmp_path):
        (tmp_path / "plants.json").write_text(json.dumps(SAMPLE_DATA["plants"]), encoding="utf-8")
        data = DirectoryDatasetLoader(tmp_path).load("plants")
        assert data["diseases"][1]["name"] == "Root Rot"

    def test_directory_loader_missing_file(self, tmp_path):
        with pytest.raises(DatasetError):
            DirectoryDatasetLoader(tmp_path).load("plants")

    def test_invalid_json(self, tmp_path):
        (tmp_path / "women.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(DatasetError):
            DirectoryDatasetLoader(tmp_path).load("women")

    def test_non_object_json(self, tmp_path):
        (tmp_path / "women.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(DatasetError):
            DirectoryDatasetLoader(tmp_path).load("women")

    def test_undecodable_bytes(self, tmp_path):
        (tmp_path / "health.json").write_bytes(b'{"generalTips": ["\xff\xfe bad"]}')
        with pytest.raises(DatasetError):
            DirectoryDatasetLoader(tmp_path).load("health")

    def test_blank_file_is_empty_dataset(self, tmp_path):
        (tmp_path / "women.json").write_text("  ", encoding="utf-8")
        assert DirectoryDatasetLoader(tmp_path).load("women") == {}

    def test_embedded_data_ships_with_package(self):
        loader = EmbeddedDatasetLoader()
        for topic in config.TOPICS:
            assert loader.load(topic), topic

    def test_embedded_missing_file_is_empty(self, tmp_path):
        assert EmbeddedDatasetLoader(tmp_path).load("health") == {}

    def test_http_loader(self):
        session = FakeSession({
            "http://kb.local/data/health.json": FakeResponse(json.dumps(SAMPLE_DATA["health"])),
        })
        loader = HttpDatasetLoader("http://kb.local/data/", session=session)
        assert loader.load("health")["generalTips"] == ["Drink water"]
        assert session.urls == ["http://kb.local/data/health.json"]
        assert "User-Agent" in session.headers

    def test_http_loader_status_error(self):
        loader = HttpDatasetLoader("http://kb.local", session=FakeSession({}))
        with pytest.raises(DatasetError):
            loader.load("health")

    def test_http_loader_connection_error(self):
        session = FakeSession({"http://kb.local/health.json": requests.ConnectionError("down")})
        with pytest.raises(DatasetError):
            HttpDatasetLoader("http://kb.local", session=session).load("health")

    def test_fallback_used_on_primary_failure(self):
        primary = DictLoader({}, fail={"plants"})
        fallback = DictLoader(SAMPLE_DATA)
        data = FallbackDatasetLoader(primary, fallback).load("plants")
        assert data == SAMPLE_DATA["plants"]
        assert fallback.calls == ["plants"]

    def test_fallback_not_used_on_success(self):
        fallback = DictLoader(SAMPLE_DATA)
        FallbackDatasetLoader(DictLoader(SAMPLE_DATA), fallback).load("women")
        assert fallback.calls == []

    def test_both_fail_gives_empty(self, caplog):
        loader = FallbackDatasetLoader(DictLoader({}, fail={"women"}), DictLoader({}, fail={"women"}))
        assert loader.load("women") == {}
        assert "using empty dataset" in caplog.text


class TestBuildLoader:
    def test_default_is_embedded(self, monkeypatch):
        monkeypatch.setattr(config, "DATA_URL", None)
        monkeypatch.setattr(config, "DATA_DIR", None)
        assert isinstance(build_loader(), EmbeddedDatasetLoader)

    def test_url_wins(self, tmp_path):
        loader = build_loader("http://kb.local", str(tmp_path))
        assert isinstance(loader, FallbackDatasetLoader)
        assert isinstance(loader.primary, HttpDatasetLoader)
        assert isinstance(loader.fallback, EmbeddedDatasetLoader)

    def test_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "DATA_URL", None)
        loader = build_loader(data_dir=str(tmp_path))
        assert isinstance(loader.primary, DirectoryDatasetLoader)
        assert loader.primary.directory == tmp_path
