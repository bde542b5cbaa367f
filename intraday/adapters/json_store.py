"""
File-backed trade history.
"""
import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError

from intraday.core.history import HistoryStoreError, TradeHistoryStore
from intraday.types import TradeLogEntry

__all__ = ["JsonHistoryStore"]

log = logging.getLogger(__name__)


class JsonHistoryStore(TradeHistoryStore):
    """
    Keeps the whole history in one JSON array on disk.

    The file is read once on construction and rewritten on every append.
    A missing file is an empty history; an unreadable one is an error.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._entries = self._load()

    def _load(self) -> List[TradeLogEntry]:
        if not self.path.exists():
            log.debug(f"No history file at {self.path}, starting empty.")
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise HistoryStoreError(f"History file {self.path} must contain a JSON array.")
            entries = [TradeLogEntry.model_validate(item) for item in raw]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise HistoryStoreError(f"Could not read trade history from {self.path}: {e}") from e
        log.info(f"Loaded {len(entries)} trade log entries from {self.path}")
        return entries

    def _save(self, entries: List[TradeLogEntry]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = [entry.model_dump(mode="json") for entry in entries]
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise HistoryStoreError(f"Could not write trade history to {self.path}: {e}") from e

    # impure
    def append(self, entry: TradeLogEntry) -> None:
        # Memory only changes once the file write succeeded.
        entries = self._entries + [entry]
        self._save(entries)
        self._entries = entries

    def list(self) -> List[TradeLogEntry]:
        return self._entries.copy()

    # impure
    def clear(self) -> None:
        self._entries = []
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise HistoryStoreError(f"Could not clear trade history at {self.path}: {e}") from e
        log.info(f"Cleared trade history at {self.path}")
