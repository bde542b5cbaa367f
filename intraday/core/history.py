from abc import ABC, abstractmethod
from typing import List

from intraday.types import TradeLogEntry

__all__ = ["TradeHistoryStore", "InMemoryHistoryStore", "HistoryStoreError"]


class HistoryStoreError(Exception):
    """Raised when the trade history cannot be read or written."""


class TradeHistoryStore(ABC):
    """Append-only log of completed simulations, oldest first."""

    @abstractmethod
    def append(self, entry: TradeLogEntry) -> None:
        pass

    @abstractmethod
    def list(self) -> List[TradeLogEntry]:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemoryHistoryStore(TradeHistoryStore):
    def __init__(self) -> None:
        self._entries: List[TradeLogEntry] = []

    def append(self, entry: TradeLogEntry) -> None:
        self._entries.append(entry)

    def list(self) -> List[TradeLogEntry]:
        return self._entries.copy()

    def clear(self) -> None:
        self._entries = []
