"""
Failure log for price syncs.

Every symbol that no provider could price is appended to a CSV file with
the exchange it was requested for and each provider's error, so the run
can be reviewed and the symbols retried with `--retry-failed`.
"""
import csv
import os
from datetime import datetime
from dataclasses import dataclass
from typing import List, Sequence, Tuple

HEADER = ["Timestamp", "Symbol", "Exchange", "Ticker", "Reasons"]

# Provider errors are joined into the single Reasons column
REASON_SEPARATOR = " | "


@dataclass
class FailedSync:
    timestamp: str
    symbol: str
    exchange: str
    ticker: str
    reasons: List[str]


class ErrorLogger:

    def __init__(self, output_dir: str, filename: str = "price_sync_errors.csv"):
        self.output_dir = output_dir
        self.filepath = os.path.join(output_dir, filename)

    def _write_header(self, mode: str) -> None:
        os.makedirs(self.output_dir, exist_ok=True)
        with open(self.filepath, mode, newline='', encoding='utf-8') as f:
            csv.writer(f).writerow(HEADER)

    def log_failure(self, symbol: str, exchange: str, ticker: str, reasons: Sequence[str]) -> None:
        if not os.path.exists(self.filepath):
            self._write_header('w')

        flat = [" ".join(r.split()) for r in reasons if r and r.strip()]
        with open(self.filepath, 'a', newline='', encoding='utf-8') as f:
            csv.writer(f).writerow([
                datetime.now().isoformat(timespec="seconds"), symbol, exchange, ticker,
                REASON_SEPARATOR.join(flat) or "No providers configured",
            ])

    def get_failures(self) -> List[FailedSync]:
        if not os.path.exists(self.filepath):
            return []

        with open(self.filepath, 'r', encoding='utf-8') as f:
            return [
                FailedSync(
                    timestamp=row.get("Timestamp", ""),
                    symbol=row.get("Symbol", ""),
                    exchange=row.get("Exchange", ""),
                    ticker=row.get("Ticker", ""),
                    reasons=[r for r in (row.get("Reasons") or "").split(REASON_SEPARATOR) if r],
                )
                for row in csv.DictReader(f)
            ]

    def retry_targets(self) -> List[Tuple[str, str]]:
        """ Distinct (symbol, exchange) pairs from the log, oldest failure first. """
        seen = []
        for failure in self.get_failures():
            pair = (failure.symbol, failure.exchange)
            if pair not in seen:
                seen.append(pair)
        return seen

    def clear_log(self) -> None:
        if os.path.exists(self.filepath):
            self._write_header('w')
