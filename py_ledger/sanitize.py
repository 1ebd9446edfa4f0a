"""
Store boundary sanitization.

Raw rows coming out of the ledger backend (JSON files, CSV imports) are
loosely typed. Everything is coerced here, once, so the valuation engine
only ever sees typed Transaction objects with numeric fields.
"""
import logging
import math
from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional

from .domain import Transaction, TransactionAction

UNKNOWN = "Unknown"


def to_number(value: Any) -> float:
    """ Numeric coercion with 0.0 fallback for anything unparseable or NaN. """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return 0.0
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(num):
        return 0.0
    return num


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Normalises a timestamp to a naive UTC datetime.
    Bare dates mean midnight. Returns None when the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time())
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            try:
                dt = datetime.strptime(raw, "%Y/%m/%d")
            except ValueError:
                return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def to_text(*values: Any, default: str = "") -> str:
    """ First non-blank value as a trimmed string; numbers from JSON rows become text. """
    for value in values:
        if value is None or isinstance(value, bool):
            continue
        text = str(value).strip()
        if text:
            return text
    return default


def normalize_symbol(value: Any) -> str:
    return str(value or "").upper().strip()


def parse_action(value: Any) -> TransactionAction:
    # Anything mentioning "sell" is a Sell, everything else a Buy
    if value is not None and "sell" in str(value).lower():
        return TransactionAction.SELL
    return TransactionAction.BUY


def sanitize_record(raw: Mapping[str, Any]) -> Transaction:
    """
    Maps one persisted row (snake_case keys) to a typed Transaction.
    Missing or malformed fields are defaulted, never rejected.
    """
    symbol_raw = raw.get("stock_symbol") or ""
    raw_date = raw.get("transaction_date")
    tx_date = parse_datetime(raw_date)
    if tx_date is None and raw_date:
        logging.warning(f"Unparseable transaction date '{raw_date}' for id {raw.get('id')}")

    return Transaction(
        id=raw.get("id", ""),
        stock_id=normalize_symbol(symbol_raw),
        company_name=to_text(raw.get("company_name"), symbol_raw, default=UNKNOWN),
        isin_code=to_text(raw.get("isin_code")),
        owner=to_text(raw.get("owner"), default=UNKNOWN),
        action=parse_action(raw.get("action")),
        quantity=abs(to_number(raw.get("quantity"))),
        transaction_price=to_number(raw.get("transaction_price")),
        brokerage=to_number(raw.get("brokerage")),
        stamp_duty=to_number(raw.get("stamp_duty")),
        transaction_charges=to_number(raw.get("transaction_charges")),
        exchange=to_text(raw.get("exchange")),
        broker=to_text(raw.get("broker")),
        transaction_date=tx_date,
        user_email=to_text(raw.get("user_email")) or None,
    )
