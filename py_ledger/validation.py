from typing import Any, Iterable, Mapping, Optional

from .domain import Transaction, TransactionAction
from .sanitize import normalize_symbol, parse_datetime


class TransactionValidationError(ValueError):
    pass


REQUIRED_FIELDS = [
    "stock_id", "company_name", "isin_code", "quantity",
    "transaction_price", "transaction_date", "broker", "exchange",
]

CHARGE_FIELDS = ["brokerage", "stamp_duty", "transaction_charges"]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_float(value: Any, field_name: str) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise TransactionValidationError(f"'{field_name}' must be a number, got {value!r}")
    if num != num:
        raise TransactionValidationError(f"'{field_name}' must be a number, got NaN")
    return num


def validate_transaction_input(data: Mapping[str, Any], transaction_id: Any = "",
                               user_email: Optional[str] = None) -> Transaction:
    """
    Entry-time checks for the add/edit transaction form.

    Args:
        data: Field values keyed like Transaction attributes. Charges default to 0.
        transaction_id: Id to stamp on the result (empty for new entries).
        user_email: Who recorded the entry.

    Returns:
        Transaction with an upper-cased symbol and a parsed date.

    Raises:
        TransactionValidationError: Missing fields, non-numeric values,
            non-positive quantity, or negative price/charges.
    """
    missing = [f for f in REQUIRED_FIELDS if _is_blank(data.get(f))]
    if missing:
        raise TransactionValidationError(f"Please fill out all required fields: {', '.join(missing)}")

    quantity = _parse_float(data["quantity"], "quantity")
    price = _parse_float(data["transaction_price"], "transaction_price")
    charges = {}
    for f in CHARGE_FIELDS:
        raw = data.get(f)
        charges[f] = 0.0 if _is_blank(raw) else _parse_float(raw, f)

    if quantity <= 0 or price < 0 or any(v < 0 for v in charges.values()):
        raise TransactionValidationError("Quantity must be positive. Price and charges cannot be negative.")

    tx_date = parse_datetime(data["transaction_date"])
    if tx_date is None:
        raise TransactionValidationError(f"Invalid transaction date: {data['transaction_date']!r}")

    action = data.get("action", TransactionAction.BUY)
    if not isinstance(action, TransactionAction):
        try:
            action = TransactionAction(str(action).strip().capitalize())
        except ValueError:
            raise TransactionValidationError(f"Unknown action: {action!r}")

    return Transaction(
        id=transaction_id,
        stock_id=normalize_symbol(data["stock_id"]),
        company_name=str(data["company_name"]).strip(),
        isin_code=str(data["isin_code"]).strip(),
        owner=str(data.get("owner") or "").strip(),
        action=action,
        quantity=quantity,
        transaction_price=price,
        brokerage=charges["brokerage"],
        stamp_duty=charges["stamp_duty"],
        transaction_charges=charges["transaction_charges"],
        exchange=str(data["exchange"]).strip(),
        broker=str(data["broker"]).strip(),
        transaction_date=tx_date,
        user_email=user_email,
    )


def validate_owner_name(name: str, existing: Iterable[str], current: Optional[str] = None) -> str:
    """
    Trims and checks an owner name for add/rename.
    Uniqueness is case-insensitive; renaming to a different casing of itself is allowed.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise TransactionValidationError("Owner name cannot be empty.")

    lowered = trimmed.lower()
    if current is not None and lowered == current.lower():
        return trimmed
    if any(o.lower() == lowered for o in existing):
        raise TransactionValidationError("This owner name already exists.")
    return trimmed
