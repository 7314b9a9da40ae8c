"""
JSON reports — файлы для ручной проверки до funding

В output_dir записываются четыре файла:
- <prefix>.json                      — ledger (digest → запись)
- <prefix>-order-by-timestamp.json   — ledger по возрастанию timestamp
- <prefix>-order-by-amount.json      — ledger по убыванию amount
- <prefix>-aggregated.json           — [{affectedAddress, amount}]

Все суммы и timestamp пишутся строками: потребители на JS не теряют точность.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from src.core.domain.ledger_entry import AggregatedContribution, LedgerEntry
from src.core.math.amounts import format_sui
from src.ledger.ledger import Ledger


logger = logging.getLogger(__name__)

ORDER_BY_TIMESTAMP_SUFFIX = "-order-by-timestamp"
ORDER_BY_AMOUNT_SUFFIX = "-order-by-amount"
AGGREGATED_SUFFIX = "-aggregated"


def entry_to_report(entry: LedgerEntry) -> dict[str, str]:
    """Запись ledger в формате отчёта (camelCase, суммы строками)."""
    dumped = entry.model_dump(mode="json")
    return {
        "sender": dumped["sender"],
        "digest": dumped["digest"],
        "amount": dumped["amount"],
        "amountFormatted": format_sui(entry.amount),
        "timestampMs": dumped["timestamp_ms"],
    }


def entries_by_digest(entries: Iterable[LedgerEntry]) -> dict[str, dict[str, str]]:
    """digest → запись отчёта, порядок entries сохраняется."""
    return {entry.digest: entry_to_report(entry) for entry in entries}


def contributions_to_report(contributions: Iterable[AggregatedContribution]) -> list[dict[str, str]]:
    return [
        {"affectedAddress": c.address, "amount": c.model_dump(mode="json")["amount"]}
        for c in contributions
    ]


def save_json(data: Any, output_dir: Path, name: str) -> Path:
    """Запись data в output_dir/name.json (indent=2)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{name}.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    logger.info("Report saved: %s", path)
    return path


def save_reports(
    ledger: Ledger,
    contributions: Iterable[AggregatedContribution],
    output_dir: Path,
    prefix: str,
) -> list[Path]:
    """
    Запись всех четырёх отчётов.

    Returns:
        Пути записанных файлов в порядке: aggregated, ledger, by timestamp, by amount
    """
    output_dir = Path(output_dir)
    return [
        save_json(contributions_to_report(contributions), output_dir, prefix + AGGREGATED_SUFFIX),
        save_json(entries_by_digest(ledger.values()), output_dir, prefix),
        save_json(
            entries_by_digest(ledger.sort_by_timestamp()),
            output_dir,
            prefix + ORDER_BY_TIMESTAMP_SUFFIX,
        ),
        save_json(
            entries_by_digest(ledger.sort_by_amount()),
            output_dir,
            prefix + ORDER_BY_AMOUNT_SUFFIX,
        ),
    ]
