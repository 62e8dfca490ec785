"""
Abstract site data provider for pluggable data sources.

Allows swapping mock data for the live datastore without changing the
prediction engine.  Providers only read; predictions are written through a
PredictionStore (see ``data.prediction_store``).
"""

import copy
import json
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from data.sources import EmissionSource, source_from_record
from data.weather import WeatherObservation, latest_observation, weather_from_record


class SiteDataProvider(ABC):
    """Abstract base class for emission-source and weather lookups.

    **Immutability contract:** All methods return *fresh* objects.  Callers
    may keep or mutate them without affecting the provider.
    """

    @abstractmethod
    def get_emission_sources(self, site_id: str) -> List[EmissionSource]:
        """Return every emission source registered for ``site_id`` (may be empty)."""
        ...

    @abstractmethod
    def get_weather_history(self, site_id: str, limit: Optional[int] = None) -> List[WeatherObservation]:
        """Return weather snapshots for ``site_id``, newest first.

        Args:
            site_id: Site identifier.
            limit: Maximum number of snapshots to return (None = all).
        """
        ...

    def get_latest_weather(self, site_id: str) -> Optional[WeatherObservation]:
        """Return the single most recent snapshot, or None if the site has none."""
        return latest_observation(self.get_weather_history(site_id, limit=1))


class MockSiteDataProvider(SiteDataProvider):
    """Wraps the demo site in data/mock_data.py."""

    def get_emission_sources(self, site_id: str) -> List[EmissionSource]:
        from data.mock_data import get_emission_sources
        return get_emission_sources(site_id)

    def get_weather_history(self, site_id: str, limit: Optional[int] = None) -> List[WeatherObservation]:
        from data.mock_data import get_weather_history
        history = get_weather_history(site_id)
        return history if limit is None else history[:limit]


class FileSiteDataProvider(SiteDataProvider):
    """Load emission sources and weather snapshots from JSON files on disk.

    Args:
        sources_path: JSON array of ``odour_sources`` rows
            (``id``, ``site_id``, ``geometry``, optional ``name``, ``base_intensity``).
        weather_path: JSON array of ``weather_snapshots`` rows
            (``site_id``, ``recorded_at``, optional wind fields).

    Raises:
        ValueError: If required keys are missing or the file is not a JSON array.
        FileNotFoundError: If either file does not exist.
    """

    _REQUIRED_SOURCE_KEYS = {"id", "site_id", "geometry"}
    _REQUIRED_WEATHER_KEYS = {"site_id", "recorded_at"}

    def __init__(self, sources_path: str, weather_path: str):
        self._sources = self._load_sources(sources_path)
        self._weather = self._load_weather(weather_path)

    # -- loaders with validation ------------------------------------------

    @staticmethod
    def _load_array(path: str, kind: str) -> List[dict]:
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{kind} file must contain a JSON array: {path}")
        return data

    @classmethod
    def _load_sources(cls, path: str) -> List[dict]:
        data = cls._load_array(path, "Sources")
        for i, src in enumerate(data):
            missing = cls._REQUIRED_SOURCE_KEYS - set(src.keys())
            if missing:
                raise ValueError(f"Source #{i} missing required keys {missing} in {path}")
        return data

    @classmethod
    def _load_weather(cls, path: str) -> List[dict]:
        data = cls._load_array(path, "Weather")
        for i, row in enumerate(data):
            missing = cls._REQUIRED_WEATHER_KEYS - set(row.keys())
            if missing:
                raise ValueError(f"Weather snapshot #{i} missing required keys {missing} in {path}")
            if row.get("wind_speed_mps") is not None and row["wind_speed_mps"] < 0:
                raise ValueError(f"Weather snapshot #{i} has negative wind speed in {path}")
        return data

    # -- SiteDataProvider interface ---------------------------------------

    def get_emission_sources(self, site_id: str) -> List[EmissionSource]:
        return [
            source_from_record(copy.deepcopy(row))
            for row in self._sources
            if str(row["site_id"]) == site_id
        ]

    def get_weather_history(self, site_id: str, limit: Optional[int] = None) -> List[WeatherObservation]:
        observations = [
            weather_from_record(row)
            for row in self._weather
            if str(row["site_id"]) == site_id
        ]
        observations.sort(key=lambda o: o.recorded_at, reverse=True)
        return observations if limit is None else observations[:limit]

    def site_ids(self) -> Dict[str, int]:
        """Map of site id -> number of sources, for CLI listings."""
        counts: Dict[str, int] = {}
        for row in self._sources:
            sid = str(row["site_id"])
            counts[sid] = counts.get(sid, 0) + 1
        return counts
