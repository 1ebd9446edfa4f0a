from typing import Iterable, Optional
from datetime import datetime
from .domain import Transaction, TransactionAction, AccumulationResult

class CostBasisAccumulator:
    """
    Running weighted-average-cost state for a single stock.

    Transactions must be fed in ascending date order. Buys capitalise their
    charges into the cost basis; Sells remove cost at the current average
    cost per share and their own charges are dropped. Overselling is not
    checked, so quantity can go negative.
    """

    def __init__(self):
        self.quantity: float = 0.0
        self.cost_basis: float = 0.0
        self.first_transaction_date: Optional[datetime] = None
        self.transactions_processed: int = 0

    @property
    def average_cost(self) -> float:
        return self.cost_basis / self.quantity if self.quantity > 0 else 0.0

    def process_transaction(self, t: Transaction) -> None:
        if self.transactions_processed == 0:
            self.first_transaction_date = t.transaction_date
        self.transactions_processed += 1

        if t.action == TransactionAction.BUY:
            self.cost_basis += t.quantity * t.transaction_price + t.total_charges
            self.quantity += t.quantity
        else:
            avg = self.average_cost
            self.cost_basis -= avg * t.quantity
            self.quantity -= t.quantity

    def result(self) -> AccumulationResult:
        return AccumulationResult(
            quantity=self.quantity,
            cost_basis=self.cost_basis,
            first_transaction_date=self.first_transaction_date,
            transactions_processed=self.transactions_processed
        )


def accumulate(transactions: Iterable[Transaction]) -> AccumulationResult:
    """ Replays an already sorted transaction sequence for one stock. """
    acc = CostBasisAccumulator()
    for t in transactions:
        acc.process_transaction(t)
    return acc.result()
