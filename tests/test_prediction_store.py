"""Tests for the in-memory and JSON-file prediction stores."""

import json
import os
from datetime import timedelta

import numpy as np
import pytest

from data.prediction_store import (
    InMemoryPredictionStore,
    JsonFilePredictionStore,
    PredictionStore,
    open_store,
)
from models.prediction import OdourPrediction, PredictionGeometry


def _prediction(site_id, source_id, valid_from, hours=1.0, peak=2.0):
    return OdourPrediction(
        site_id=site_id,
        source_id=source_id,
        valid_from=valid_from,
        valid_to=valid_from + timedelta(hours=hours),
        geometry=PredictionGeometry(
            coordinates=np.array([[10.0, 10.0], [20.0, 12.0], [20.0, 8.0]]),
        ),
        peak_intensity=peak,
        model_version="plume-v2",
    )


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryPredictionStore()
    return JsonFilePredictionStore(str(tmp_path / "predictions.json"))


class TestStoreContract:
    """Behaviour shared by every PredictionStore implementation."""

    def test_is_prediction_store(self, store):
        assert isinstance(store, PredictionStore)

    def test_empty(self, store, now):
        assert store.list_predictions("site-1") == []
        assert store.list_current("site-1", now) == []
        assert store.delete_expired("site-1", now) == 0

    def test_replace_and_list(self, store, now):
        batch = [_prediction("site-1", "a", now), _prediction("site-1", "b", now)]
        stored = store.replace_current("site-1", batch)
        assert len(stored) == 2
        assert sorted(p.source_id for p in store.list_predictions("site-1")) == ["a", "b"]

    def test_replace_supersedes_same_source(self, store, now):
        store.replace_current("site-1", [_prediction("site-1", "a", now, peak=1.0)])
        later = now + timedelta(minutes=5)
        store.replace_current("site-1", [_prediction("site-1", "a", later, peak=3.0)])
        rows = store.list_predictions("site-1")
        assert len(rows) == 1
        assert rows[0].peak_intensity == 3.0

    def test_replace_keeps_other_sources(self, store, now):
        store.replace_current("site-1", [_prediction("site-1", "a", now)])
        store.replace_current("site-1", [_prediction("site-1", "b", now)])
        assert sorted(p.source_id for p in store.list_predictions("site-1")) == ["a", "b"]

    def test_replace_rejects_foreign_site(self, store, now):
        with pytest.raises(ValueError, match="site"):
            store.replace_current("site-1", [_prediction("site-2", "a", now)])
        assert store.list_predictions("site-1") == []
        assert store.list_predictions("site-2") == []

    def test_delete_expired_strictly_before_now(self, store, now):
        store.replace_current("site-1", [
            _prediction("site-1", "expired", now - timedelta(hours=3)),
            _prediction("site-1", "boundary", now - timedelta(hours=1)),
            _prediction("site-1", "current", now),
        ])
        assert store.delete_expired("site-1", now) == 1
        assert sorted(p.source_id for p in store.list_predictions("site-1")) == ["boundary", "current"]

    def test_delete_expired_scoped_to_site(self, store, now):
        old = now - timedelta(hours=3)
        store.replace_current("site-1", [_prediction("site-1", "a", old)])
        store.replace_current("site-2", [_prediction("site-2", "a", old)])
        assert store.delete_expired("site-1", now) == 1
        assert len(store.list_predictions("site-2")) == 1

    def test_list_current_window(self, store, now):
        store.replace_current("site-1", [
            _prediction("site-1", "past", now - timedelta(hours=2)),
            _prediction("site-1", "now", now),
            _prediction("site-1", "future", now + timedelta(hours=2)),
        ])
        assert [p.source_id for p in store.list_current("site-1", now)] == ["now"]

    def test_list_current_newest_first(self, store, now):
        store.replace_current("site-1", [
            _prediction("site-1", "older", now - timedelta(minutes=30)),
            _prediction("site-1", "newer", now - timedelta(minutes=10)),
        ])
        assert [p.source_id for p in store.list_current("site-1", now)] == ["newer", "older"]


class TestPredictionWindow:
    """Validity window checks shared by listing and expiry."""

    def test_current_inside_window(self, now):
        pred = _prediction("site-1", "a", now)
        assert pred.is_current(now)
        assert pred.is_current(now + timedelta(minutes=59))
        assert not pred.is_current(now - timedelta(seconds=1))

    def test_window_end_is_neither_current_nor_expired(self, now):
        pred = _prediction("site-1", "a", now)
        end = now + timedelta(hours=1)
        assert not pred.is_current(end)
        assert not pred.is_expired(end)

    def test_expired_after_end(self, now):
        pred = _prediction("site-1", "a", now)
        assert pred.is_expired(now + timedelta(hours=1, seconds=1))
        assert not pred.is_expired(now)

    def test_store_deletes_what_is_expired(self, store, now):
        batch = [
            _prediction("site-1", "a", now - timedelta(hours=2)),
            _prediction("site-1", "b", now - timedelta(hours=1)),
        ]
        store.replace_current("site-1", batch)
        removed = store.delete_expired("site-1", now)
        assert removed == sum(p.is_expired(now) for p in batch) == 1
        assert [p.source_id for p in store.list_predictions("site-1")] == ["b"]

    def test_empty_window_rejected(self, now):
        with pytest.raises(ValueError, match="valid_to"):
            _prediction("site-1", "a", now, hours=0)


class TestJsonFilePredictionStore:
    def test_file_created_on_write(self, tmp_path, now):
        path = tmp_path / "preds.json"
        store = JsonFilePredictionStore(str(path))
        assert not path.exists()
        store.replace_current("site-1", [_prediction("site-1", "a", now)])
        data = json.loads(path.read_text())
        assert data[0]["source_id"] == "a"
        assert data[0]["geometry"]["coordinates"][0] == {"x": 10.0, "y": 10.0}

    def test_survives_reopen(self, tmp_path, now):
        path = str(tmp_path / "preds.json")
        JsonFilePredictionStore(path).replace_current("site-1", [_prediction("site-1", "a", now)])
        rows = JsonFilePredictionStore(path).list_predictions("site-1")
        assert len(rows) == 1
        assert rows[0].valid_from == now
        np.testing.assert_allclose(rows[0].geometry.coordinates[1], [20.0, 12.0])

    def test_no_temp_files_left(self, tmp_path, now):
        store = JsonFilePredictionStore(str(tmp_path / "preds.json"))
        store.replace_current("site-1", [_prediction("site-1", "a", now)])
        assert os.listdir(tmp_path) == ["preds.json"]

    def test_failed_write_keeps_previous_file(self, tmp_path, now, monkeypatch):
        path = tmp_path / "preds.json"
        store = JsonFilePredictionStore(str(path))
        store.replace_current("site-1", [_prediction("site-1", "a", now)])
        before = path.read_text()

        def boom(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr("data.prediction_store.os.replace", boom)
        with pytest.raises(OSError):
            store.replace_current("site-1", [_prediction("site-1", "b", now)])
        assert path.read_text() == before
        assert os.listdir(tmp_path) == ["preds.json"]

    def test_rejects_non_array_file(self, tmp_path):
        path = tmp_path / "preds.json"
        path.write_text('{"not": "a list"}')
        with pytest.raises(ValueError, match="JSON array"):
            JsonFilePredictionStore(str(path)).list_predictions("site-1")


class TestOpenStore:
    def test_memory_by_default(self):
        assert isinstance(open_store(), InMemoryPredictionStore)

    def test_json_with_path(self, tmp_path):
        store = open_store(str(tmp_path / "p.json"))
        assert isinstance(store, JsonFilePredictionStore)
