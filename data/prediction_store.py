"""
Prediction stores.

A PredictionStore persists odour predictions per site.  The lifecycle
manager needs three things from it: bulk deletion of expired rows, an
atomic batch write, and a query for what is current.

``replace_current`` removes the site's earlier predictions for every source
in the batch and inserts the batch in one step, so repeated generation runs
leave exactly one current prediction per source and a failed write leaves
the previous batch untouched.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from models.prediction import OdourPrediction
from predictions.serialization import prediction_from_record, prediction_to_record

logger = logging.getLogger(__name__)


class PredictionStore(ABC):
    """Abstract base class for prediction persistence."""

    @abstractmethod
    def delete_expired(self, site_id: str, now: datetime) -> int:
        """Delete every prediction for ``site_id`` whose ``valid_to`` is before ``now``.

        Returns:
            Number of predictions removed.
        """
        ...

    @abstractmethod
    def replace_current(self, site_id: str, predictions: List[OdourPrediction]) -> List[OdourPrediction]:
        """Atomically supersede the site's predictions for the batch's sources.

        Returns:
            The stored predictions.
        """
        ...

    @abstractmethod
    def list_predictions(self, site_id: str) -> List[OdourPrediction]:
        """Return every stored prediction for ``site_id``."""
        ...

    def list_current(self, site_id: str, at: datetime) -> List[OdourPrediction]:
        """Predictions whose validity window contains ``at``, newest first."""
        current = [p for p in self.list_predictions(site_id) if p.is_current(at)]
        current.sort(key=lambda p: p.valid_from, reverse=True)
        return current


def _supersede(
    existing: List[OdourPrediction],
    site_id: str,
    predictions: List[OdourPrediction],
) -> List[OdourPrediction]:
    """Return ``existing`` minus this site's rows for the batch's sources, plus the batch."""
    for p in predictions:
        if p.site_id != site_id:
            raise ValueError(f"Prediction for site '{p.site_id}' in batch for site '{site_id}'")
    replaced_sources = {p.source_id for p in predictions}
    kept = [
        p for p in existing
        if not (p.site_id == site_id and p.source_id in replaced_sources)
    ]
    return kept + list(predictions)


class InMemoryPredictionStore(PredictionStore):
    """Process-local store; a lock serializes writers so each batch applies whole."""

    def __init__(self):
        self._predictions: List[OdourPrediction] = []
        self._lock = threading.Lock()

    def delete_expired(self, site_id: str, now: datetime) -> int:
        with self._lock:
            before = len(self._predictions)
            self._predictions = [
                p for p in self._predictions
                if not (p.site_id == site_id and p.is_expired(now))
            ]
            return before - len(self._predictions)

    def replace_current(self, site_id: str, predictions: List[OdourPrediction]) -> List[OdourPrediction]:
        with self._lock:
            self._predictions = _supersede(self._predictions, site_id, predictions)
        return list(predictions)

    def list_predictions(self, site_id: str) -> List[OdourPrediction]:
        with self._lock:
            return [p for p in self._predictions if p.site_id == site_id]


class JsonFilePredictionStore(PredictionStore):
    """Store predictions as a JSON array of artifact records in a single file.

    Every write goes to a temporary file in the same directory followed by
    ``os.replace``, so readers see either the old or the new file.

    Args:
        path: Location of the JSON file.  Created on first write.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> List[OdourPrediction]:
        if not os.path.exists(self.path):
            return []
        with open(self.path) as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Prediction file must contain a JSON array: {self.path}")
        return [prediction_from_record(r) for r in data]

    def _write(self, predictions: List[OdourPrediction]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".predictions-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump([prediction_to_record(p) for p in predictions], f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def delete_expired(self, site_id: str, now: datetime) -> int:
        with self._lock:
            existing = self._read()
            kept = [p for p in existing if not (p.site_id == site_id and p.is_expired(now))]
            removed = len(existing) - len(kept)
            if removed:
                self._write(kept)
            return removed

    def replace_current(self, site_id: str, predictions: List[OdourPrediction]) -> List[OdourPrediction]:
        with self._lock:
            self._write(_supersede(self._read(), site_id, predictions))
        logger.debug("Wrote %d predictions for site %s to %s", len(predictions), site_id, self.path)
        return list(predictions)

    def list_predictions(self, site_id: str) -> List[OdourPrediction]:
        with self._lock:
            return [p for p in self._read() if p.site_id == site_id]


def open_store(path: Optional[str] = None) -> PredictionStore:
    """JSON file store at ``path``, or an in-memory store when no path is given."""
    return JsonFilePredictionStore(path) if path else InMemoryPredictionStore()
