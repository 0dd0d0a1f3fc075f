"""CSV ledger importer.

Expected header (order free, case-insensitive):

    id,date,type,asset,shares,price,currency

`type` accepts buy/sell/subscribe/redeem or 买入/卖出/申购/赎回; `asset`
accepts registered ids, their display names, or Cash/现金. For cash rows
the amount goes in `price` and `shares` may be blank.
"""

import csv
import dataclasses
from pathlib import Path

from ..core.exceptions import InvalidTransactionError, PortfolioReturnsError
from ..core.models import Transaction
from ..core.registry import resolve_asset
from .base import BaseImporter, ImportResult

REQUIRED_COLUMNS = ("date", "type", "asset", "price", "currency")


class CsvLedgerImporter(BaseImporter):
    SOURCE_PREFIX = "csv"

    def _run_import(self, path: Path, result: ImportResult) -> None:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            header = [c.strip().lower() for c in (reader.fieldnames or [])]
            missing = [c for c in REQUIRED_COLUMNS if c not in header]
            if missing:
                raise InvalidTransactionError(
                    f"{path.name}: missing column(s) {', '.join(missing)}"
                )
            seen_ids: set[int] = set()
            for raw in reader:
                lineno = reader.line_num
                row = {k.strip().lower(): (v or "").strip() for k, v in raw.items() if k is not None}
                if not any(row.values()):
                    continue
                try:
                    tx = self._parse_row(row, seen_ids)
                except PortfolioReturnsError as e:
                    if self.strict:
                        raise
                    result.warnings.append(f"Line {lineno}: {e}, skipped")
                    result.rows_skipped += 1
                    continue
                seen_ids.add(tx.id)
                result.transactions.append(tx)

    def _parse_row(self, row: dict, seen_ids: set[int]) -> Transaction:
        raw_id = row.get("id", "")
        try:
            tx_id = int(raw_id) if raw_id else max(seen_ids, default=0) + 1
        except ValueError:
            raise InvalidTransactionError(f"id is not an integer: {raw_id!r}") from None
        if tx_id in seen_ids:
            raise InvalidTransactionError(f"duplicate id {tx_id}")

        tx = Transaction(
            id=tx_id,
            transaction_date=row["date"],
            transaction_type=row["type"],
            asset=row["asset"],
            shares=row.get("shares") or "0",
            price=row["price"] or "0",
            currency=row["currency"],
        )
        asset = resolve_asset(tx.asset, self.assets)
        if asset != tx.asset:
            tx = dataclasses.replace(tx, asset=asset)
        return tx
