from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from conjugator.core.courses import DEFAULT_DATA_SOURCE

logger = logging.getLogger(__name__)

T = TypeVar("T")

SETTINGS_FILE = Path.home() / ".conjugator" / "settings.json"
DATA_SOURCES_KEY = "dataSources"
SELECTED_DATA_SOURCE_KEY = "selectedDataSource"


def encode_list(values: Iterable[Any]) -> str:
    """Store a list as one comma-joined string."""
    return ",".join(str(value) for value in values)


def decode_list(stored: str, convert: Callable[[str], T] = str) -> List[T]:
    """Inverse of :func:`encode_list`; elements that fail ``convert`` are dropped."""
    values: List[T] = []
    for item in stored.split(","):
        if not item.strip():
            continue
        try:
            values.append(convert(item))
        except (TypeError, ValueError):
            logger.debug("Dropping unparseable stored value %r", item)
    return values


class SettingsStore:
    """Configured course data sources and the selected one.

    File: ~/.conjugator/settings.json unless another path is given. Nothing is
    read until :meth:`load` is called.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or SETTINGS_FILE
        self._data_sources: List[str] = [DEFAULT_DATA_SOURCE]
        self._selected_data_source = DEFAULT_DATA_SOURCE

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def data_sources(self) -> List[str]:
        return list(self._data_sources)

    @property
    def selected_data_source(self) -> str:
        return self._selected_data_source

    def add_data_source(self, data_source: str) -> None:
        data_source = data_source.strip()
        if not data_source or "," in data_source:
            raise ValueError(f"Invalid data source: {data_source!r}")
        if data_source not in self._data_sources:
            self._data_sources.append(data_source)
            self.save()

    def remove_data_source(self, data_source: str) -> None:
        if data_source not in self._data_sources:
            return
        self._data_sources.remove(data_source)
        if self._selected_data_source == data_source:
            self._selected_data_source = self._data_sources[0] if self._data_sources else ""
        self.save()

    def select_data_source(self, data_source: str) -> None:
        if data_source not in self._data_sources:
            raise KeyError(data_source)
        self._selected_data_source = data_source
        self.save()

    def load(self) -> None:
        """Read settings from disk, keeping defaults for anything missing or unreadable."""
        if not self._file_path.exists():
            return
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load settings from %s: %s", self._file_path, e)
            return
        if not isinstance(payload, dict):
            logger.warning("Ignoring settings in %s: expected a JSON object", self._file_path)
            return

        stored_sources = payload.get(DATA_SOURCES_KEY)
        if isinstance(stored_sources, str):
            self._data_sources = decode_list(stored_sources)
        selected = payload.get(SELECTED_DATA_SOURCE_KEY)
        if isinstance(selected, str):
            self._selected_data_source = selected

    def save(self) -> None:
        payload: Dict[str, str] = {
            DATA_SOURCES_KEY: encode_list(self._data_sources),
            SELECTED_DATA_SOURCE_KEY: self._selected_data_source,
        }
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self._file_path, e)
