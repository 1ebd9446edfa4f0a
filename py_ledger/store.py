import json
import os
import shutil
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .domain import Transaction
from .sanitize import normalize_symbol, sanitize_record
from .validation import TransactionValidationError, validate_owner_name, validate_transaction_input

TransactionId = Union[str, int]


class LedgerStoreError(Exception):
    pass


class TransactionNotFoundError(LedgerStoreError):
    pass


class OwnerError(LedgerStoreError):
    pass


class LedgerStore:
    """
    JSON-file backed transaction store and owner set.

    transactions.json holds a list of raw rows (Transaction.to_record layout),
    owners.json a list of names. Every read sanitizes; every write is atomic.
    """

    def __init__(self, data_dir: str, user_email: Optional[str] = None,
                 transactions_file: str = "transactions.json", owners_file: str = "owners.json"):
        self.data_dir = data_dir
        self.user_email = user_email
        self.transactions_path = os.path.join(data_dir, transactions_file)
        self.owners_path = os.path.join(data_dir, owners_file)

    # --- File helpers ---

    def _read_json(self, path: str) -> Optional[Any]:
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logging.warning(f"Store corruption detected in {path}: {e}")
            self._backup_corrupt_file(path)
            return None
        except OSError as e:
            logging.error(f"Failed to read {path}: {e}")
            raise LedgerStoreError(f"Failed to read {path}: {e}") from e

    def _write_json(self, path: str, data: Any) -> None:
        tmp_path = path + ".tmp"
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError) as e:
            logging.error(f"Failed to write {path}: {e}")
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
            raise LedgerStoreError(f"Failed to write {path}: {e}") from e

    def _backup_corrupt_file(self, path: str) -> None:
        try:
            backup_path = path + ".corrupt"
            shutil.move(path, backup_path)
            logging.info(f"Moved corrupt file to {backup_path}")
        except OSError as e:
            logging.error(f"Failed to backup corrupt file {path}: {e}")

    def _load_records(self) -> List[Dict[str, Any]]:
        data = self._read_json(self.transactions_path)
        if not isinstance(data, list):
            return []
        return [r for r in data if isinstance(r, dict)]

    def _save_records(self, records: List[Dict[str, Any]]) -> None:
        self._write_json(self.transactions_path, records)

    # --- Transactions ---

    def load_transactions(self) -> List[Transaction]:
        """ All transactions, sanitized, newest first. """
        transactions = [sanitize_record(r) for r in self._load_records()]
        dated = [t for t in transactions if t.transaction_date is not None]
        undated = [t for t in transactions if t.transaction_date is None]
        dated.sort(key=lambda t: t.transaction_date, reverse=True)
        return dated + undated

    def save_transaction(self, data: Mapping[str, Any], transaction_id: Optional[TransactionId] = None) -> Transaction:
        """ Validates and upserts one transaction. A new id is assigned when none is given. """
        tx = validate_transaction_input(
            data, transaction_id=transaction_id or uuid.uuid4().hex, user_email=self.user_email
        )
        owners = self.load_owners()
        if owners and tx.owner not in owners:
            raise OwnerError(f"Unknown owner '{tx.owner}'")

        records = self._load_records()
        record = tx.to_record()
        for i, r in enumerate(records):
            if transaction_id is not None and str(r.get("id")) == str(transaction_id):
                records[i] = record
                logging.info(f"Updated transaction {transaction_id} ({tx.stock_id})")
                break
        else:
            records.append(record)
            logging.info(f"Added transaction {tx.id} ({tx.action.value} {tx.quantity} {tx.stock_id})")

        self._save_records(records)
        return tx

    def delete_transaction(self, transaction_id: TransactionId) -> None:
        records = self._load_records()
        kept = [r for r in records if str(r.get("id")) != str(transaction_id)]
        if len(kept) == len(records):
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        self._save_records(kept)
        logging.info(f"Deleted transaction {transaction_id}")

    def bulk_reassign_owner(self, stock_id: str, new_owner: str) -> int:
        """ Sets owner on every transaction of one symbol. Returns the number of rows changed. """
        if new_owner not in self.load_owners():
            raise OwnerError(f"Unknown owner '{new_owner}'")

        symbol = normalize_symbol(stock_id)
        records = self._load_records()
        count = 0
        for r in records:
            if normalize_symbol(r.get("stock_symbol")) == symbol:
                r["owner"] = new_owner
                count += 1
        self._save_records(records)
        logging.info(f"Reassigned {count} {symbol} transactions to {new_owner}")
        return count

    def replace_all(self, transactions: Sequence[Transaction]) -> None:
        """ Full replacement, used by CSV import. """
        self._save_records([t.to_record() for t in transactions])
        logging.info(f"Replaced ledger with {len(transactions)} transactions")

    # --- Owners ---

    def load_owners(self) -> List[str]:
        data = self._read_json(self.owners_path)
        if not isinstance(data, list):
            return []
        return [str(o) for o in data]

    def _save_owners(self, owners: List[str]) -> None:
        self._write_json(self.owners_path, owners)

    def add_owner(self, name: str) -> str:
        owners = self.load_owners()
        try:
            trimmed = validate_owner_name(name, owners)
        except TransactionValidationError as e:
            raise OwnerError(str(e)) from e
        owners.append(trimmed)
        self._save_owners(owners)
        logging.info(f"Added owner {trimmed}")
        return trimmed

    def rename_owner(self, old_name: str, new_name: str) -> str:
        """ Renames an owner and cascades the new name to its transactions. """
        owners = self.load_owners()
        if old_name not in owners:
            raise OwnerError(f"Unknown owner '{old_name}'")
        try:
            trimmed = validate_owner_name(new_name, owners, current=old_name)
        except TransactionValidationError as e:
            raise OwnerError(str(e)) from e

        self._save_owners([trimmed if o == old_name else o for o in owners])

        records = self._load_records()
        for r in records:
            if r.get("owner") == old_name:
                r["owner"] = trimmed
        self._save_records(records)
        logging.info(f"Renamed owner {old_name} -> {trimmed}")
        return trimmed

    def delete_owner(self, name: str) -> None:
        owners = self.load_owners()
        if name not in owners:
            raise OwnerError(f"Unknown owner '{name}'")
        if any(r.get("owner") == name for r in self._load_records()):
            raise OwnerError(
                f'Cannot delete "{name}" because they are associated with existing transactions. '
                "Please reassign or delete the transactions first."
            )
        self._save_owners([o for o in owners if o != name])
        logging.info(f"Deleted owner {name}")

    def ensure_owners(self, names: Sequence[str]) -> None:
        """ Seeds the owner set with configured defaults if it is empty. """
        if self.load_owners() or not names:
            return
        self._save_owners([n.strip() for n in names if n and n.strip()])
