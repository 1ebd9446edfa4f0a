from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union, Dict, Any
from datetime import date, datetime

# --- Constants ---
ALL_OWNERS = "All Owners"

# Net quantity at or below this is treated as fully divested
DIVESTED_EPSILON = 0.0001

# --- Enums ---
class TransactionAction(Enum):
    BUY = "Buy"
    SELL = "Sell"

# --- Domain Data Classes (Input) ---

@dataclass(frozen=True)
class Transaction:
    id: Union[str, int]
    stock_id: str
    company_name: str
    isin_code: str
    owner: str
    action: TransactionAction
    quantity: float
    transaction_price: float
    brokerage: float = 0.0
    stamp_duty: float = 0.0
    transaction_charges: float = 0.0
    exchange: str = ""
    broker: str = ""
    transaction_date: Optional[datetime] = None
    user_email: Optional[str] = None

    @property
    def total_charges(self) -> float:
        return self.brokerage + self.stamp_duty + self.transaction_charges

    @property
    def gross_amount(self) -> float:
        return self.quantity * self.transaction_price

    def to_record(self) -> Dict[str, Any]:
        """ Persisted row layout (snake_case columns as stored by the ledger backend). """
        return {
            "id": self.id,
            "stock_symbol": self.stock_id,
            "company_name": self.company_name,
            "isin_code": self.isin_code,
            "owner": self.owner,
            "action": self.action.value,
            "quantity": self.quantity,
            "transaction_price": self.transaction_price,
            "brokerage": self.brokerage,
            "stamp_duty": self.stamp_duty,
            "transaction_charges": self.transaction_charges,
            "exchange": self.exchange,
            "broker": self.broker,
            "transaction_date": self.transaction_date.isoformat() if self.transaction_date else "",
            "user_email": self.user_email,
        }

@dataclass(frozen=True)
class ValuationFilters:
    """
    Explicit filter parameters for one valuation run.
    Dates may be date/datetime objects or ISO strings; empty means no bound.
    A non-empty bound that cannot be parsed raises ValueError.
    """
    owner: str = ALL_OWNERS
    start_date: Union[date, datetime, str, None] = None
    end_date: Union[date, datetime, str, None] = None
    search: str = ""

    def __post_init__(self):
        from .sanitize import parse_datetime
        for name in ("start_date", "end_date"):
            value = getattr(self, name)
            if isinstance(value, str) and not value.strip():
                continue
            if value is not None and parse_datetime(value) is None:
                raise ValueError(f"Invalid {name}: {value!r}")

# --- Domain Data Classes (Output) ---

@dataclass
class Stock:
    id: str
    company_name: str
    current_price: float = 0.0  # 0 means "NOT SET"

    @property
    def has_price(self) -> bool:
        return self.current_price != 0

@dataclass
class CalculatedStock:
    stock: Stock
    transactions: List[Transaction]
    quantity: float
    investment: float
    current_value: float
    p_and_l: float
    first_transaction_date: Optional[datetime]
    avg_annual_return: float = 0.0
    recommendation: str = "Hold"

    @property
    def stock_id(self) -> str:
        return self.stock.id

@dataclass
class PortfolioSummary:
    total_investment: float = 0.0
    current_value: float = 0.0
    total_p_and_l: float = 0.0
    avg_annual_return: float = 0.0  # Placeholder, never computed

@dataclass
class AccumulationResult:
    quantity: float
    cost_basis: float
    first_transaction_date: Optional[datetime] = None
    transactions_processed: int = 0

    @property
    def investment(self) -> float:
        return self.cost_basis if self.quantity > 0 else 0.0
