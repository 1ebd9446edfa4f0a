import io
import os
import csv
import sys
import hashlib
import argparse
import logging
from typing import List, Optional, Sequence

from py_ledger.config_loader import load_config
from py_ledger.domain import Transaction
from py_ledger.sanitize import sanitize_record
from py_ledger.store import LedgerStore

"""
###############################################################################
# Ledger CSV Import / Export
# Import replaces every stored transaction. Headers must match exactly.
###############################################################################
"""

COLUMNS = [
    "Stock Symbol", "Company Name", "ISIN Code", "Owner", "Action", "Quantity",
    "Transaction Price", "Brokerage", "Stamp Duty", "Transaction Charges",
    "Broker", "Exchange", "Transaction Date",
]

# CSV header -> persisted record key
COLUMN_TO_RECORD = {
    "Stock Symbol": "stock_symbol",
    "Company Name": "company_name",
    "ISIN Code": "isin_code",
    "Owner": "owner",
    "Action": "action",
    "Quantity": "quantity",
    "Transaction Price": "transaction_price",
    "Brokerage": "brokerage",
    "Stamp Duty": "stamp_duty",
    "Transaction Charges": "transaction_charges",
    "Broker": "broker",
    "Exchange": "exchange",
    "Transaction Date": "transaction_date",
}

SAMPLE_CSV = (
    ",".join(COLUMNS) + "\n"
    "AAPL,Apple Inc.,US0378331005,Family,Buy,10,150.00,5.00,1.00,0.50,Fidelity,NASDAQ,2023-01-15\n"
    "GOOGL,Alphabet Inc.,US02079K3059,Family,Buy,5,100.00,4.50,0.90,0.50,Fidelity,NASDAQ,2023-02-20\n"
)


class CsvFormatError(ValueError):
    pass


def generate_hash(data_string: str) -> str:
    """Generate deterministic MD5 hash."""
    return hashlib.md5(data_string.encode("utf-8")).hexdigest()


def check_header(header: Sequence[str]) -> None:
    cleaned = [h.strip() for h in header]
    if cleaned == COLUMNS:
        return
    missing = [c for c in COLUMNS if c not in cleaned]
    unexpected = [c for c in cleaned if c not in COLUMNS]
    details = []
    if missing:
        details.append(f"missing: {', '.join(missing)}")
    if unexpected:
        details.append(f"unexpected: {', '.join(unexpected)}")
    if not details:
        details.append("columns out of order")
    raise CsvFormatError(f"CSV headers must exactly match the sample file ({'; '.join(details)})")


def parse_transactions_csv(text: str) -> List[Transaction]:
    """
    Parses ledger CSV text into sanitized transactions.
    Ids are content hashes; repeated identical rows get a running suffix.
    """
    # Strip a UTF-8 BOM left by spreadsheet exports
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        raise CsvFormatError("CSV file is empty")
    check_header(header)

    transactions = []
    seen_ids = set()
    for line_no, row in enumerate(reader, start=2):
        if not row or all(not cell.strip() for cell in row):
            continue
        if len(row) != len(COLUMNS):
            logging.warning(f"Skipping line {line_no}: expected {len(COLUMNS)} fields, got {len(row)}")
            continue

        record = {COLUMN_TO_RECORD[col]: val.strip() for col, val in zip(COLUMNS, row)}
        tx_id = generate_hash(",".join(row))
        suffix = 1
        base_id = tx_id
        while tx_id in seen_ids:
            tx_id = f"{base_id}-{suffix}"
            suffix += 1
        seen_ids.add(tx_id)
        record["id"] = tx_id

        transactions.append(sanitize_record(record))

    return transactions


def _fmt_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


def export_transactions_csv(transactions: Sequence[Transaction]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(COLUMNS)
    for t in transactions:
        writer.writerow([
            t.stock_id, t.company_name, t.isin_code, t.owner, t.action.value,
            _fmt_number(t.quantity), _fmt_number(t.transaction_price),
            _fmt_number(t.brokerage), _fmt_number(t.stamp_duty), _fmt_number(t.transaction_charges),
            t.broker, t.exchange,
            t.transaction_date.strftime("%Y-%m-%d") if t.transaction_date else "",
        ])
    return output.getvalue()


def import_file(filepath: str, store: LedgerStore) -> int:
    with open(filepath, "r", encoding="utf-8-sig") as f:
        transactions = parse_transactions_csv(f.read())
    store.replace_all(transactions)
    return len(transactions)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    parser = argparse.ArgumentParser(description="Ledger CSV import/export")
    parser.add_argument("command", choices=["import", "export", "sample"])
    parser.add_argument("file", help="CSV file to read (import) or write (export, sample)")
    parser.add_argument("--config", help="Path to ledger.json")
    parser.add_argument("--data-dir", help="Override the ledger data directory")
    args = parser.parse_args(argv)

    if args.command == "sample":
        with open(args.file, "w", encoding="utf-8", newline="") as f:
            f.write(SAMPLE_CSV)
        logging.info(f"Sample file written to {args.file}")
        return 0

    config = load_config(args.config)
    store = LedgerStore(args.data_dir or config.data_dir, user_email=config.user_email)

    if args.command == "import":
        if not os.path.exists(args.file):
            logging.error(f"File not found: {args.file}")
            return 1
        try:
            count = import_file(args.file, store)
        except CsvFormatError as e:
            logging.error(str(e))
            return 1
        logging.info(f"Imported {count} transactions from {args.file} (existing data replaced)")
        return 0

    with open(args.file, "w", encoding="utf-8", newline="") as f:
        f.write(export_transactions_csv(store.load_transactions()))
    logging.info(f"Exported transactions to {args.file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
