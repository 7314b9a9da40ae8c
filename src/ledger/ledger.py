"""
Ledger — отображение digest → LedgerEntry

Ключи уникальны. Порядок вставки не несёт смысла (используется только
для стабильного вывода). Повторная вставка того же digest заменяет запись
(last write wins): одна транзакция никогда не учитывается дважды.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Optional

from src.core.domain.ledger_entry import LedgerEntry


logger = logging.getLogger(__name__)


class Ledger(Mapping[str, LedgerEntry]):
    """Ledger валидированных вкладов, ключ — digest."""

    def __init__(self, entries: Optional[Mapping[str, LedgerEntry]] = None):
        self._entries: dict[str, LedgerEntry] = {}
        if entries:
            for entry in entries.values():
                self.insert(entry)

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    def __getitem__(self, digest: str) -> LedgerEntry:
        return self._entries[digest]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Ledger({len(self._entries)} entries)"

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def insert(self, entry: LedgerEntry) -> bool:
        """
        Вставка записи по digest.

        Returns:
            True если digest уже присутствовал (запись заменена)
        """
        replaced = entry.digest in self._entries
        if replaced:
            logger.debug("Digest %s re-inserted, previous entry replaced", entry.digest)
        self._entries[entry.digest] = entry
        return replaced

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def filter_by_time_range(
        self,
        start_time_ms: Optional[int] = None,
        end_time_ms: Optional[int] = None,
    ) -> "Ledger":
        """
        Записи внутри окна [start_time_ms, end_time_ms] (включительно).

        None на любой границе — граница отсутствует.
        """
        return Ledger({
            digest: entry
            for digest, entry in self._entries.items()
            if (start_time_ms is None or entry.timestamp_ms >= start_time_ms)
            and (end_time_ms is None or entry.timestamp_ms <= end_time_ms)
        })

    def sort_by_timestamp(self) -> list[LedgerEntry]:
        """Записи по возрастанию timestamp (digest — tie-breaker)."""
        return sorted(self._entries.values(), key=lambda e: (e.timestamp_ms, e.digest))

    def sort_by_amount(self) -> list[LedgerEntry]:
        """Записи по убыванию amount (digest — tie-breaker)."""
        return sorted(self._entries.values(), key=lambda e: (-e.amount, e.digest))

    def senders(self) -> dict[str, list[str]]:
        """Отправитель → список его digest."""
        by_sender: dict[str, list[str]] = {}
        for entry in self._entries.values():
            by_sender.setdefault(entry.sender, []).append(entry.digest)
        return by_sender

    def repeated_senders(self) -> dict[str, list[str]]:
        """Отправители, встречающиеся под несколькими digest."""
        return {
            sender: digests
            for sender, digests in self.senders().items()
            if len(digests) > 1
        }
