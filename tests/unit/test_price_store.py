import json
import math
from unittest.mock import patch

import pytest

from py_ledger.price_store import PriceStore, PriceStoreError
from py_ledger.store import LedgerStoreError


def test_absent_price_is_zero(tmp_path):
    store = PriceStore(str(tmp_path / "prices.json"))
    assert store.get_price("AAPL") == 0.0
    assert store.get_prices() == {}


def test_update_persists_upper_case(tmp_path):
    path = tmp_path / "prices.json"
    PriceStore(str(path)).update_price("infy", 1550.25)

    assert json.loads(path.read_text()) == {"INFY": 1550.25}
    assert PriceStore(str(path)).get_price("INFY") == 1550.25


@pytest.mark.parametrize("bad", [-1.0, math.nan, None])
def test_invalid_price_rejected(tmp_path, bad):
    store = PriceStore(str(tmp_path / "prices.json"))
    with pytest.raises(ValueError):
        store.update_price("AAPL", bad)


def test_get_prices_returns_copy(tmp_path):
    store = PriceStore(str(tmp_path / "prices.json"))
    store.update_price("AAPL", 10.0)
    store.get_prices()["AAPL"] = 99.0
    assert store.get_price("AAPL") == 10.0


def test_garbage_file_means_no_prices(tmp_path):
    path = tmp_path / "prices.json"
    path.write_text("[1, 2]")
    assert PriceStore(str(path)).get_prices() == {}
    assert (tmp_path / "prices.json.corrupt").exists()


def test_corrupt_file_backed_up_before_write(tmp_path):
    path = tmp_path / "prices.json"
    path.write_text('{"AAPL": 160.0, "INFY": 15')

    store = PriceStore(str(path))
    assert store.get_prices() == {}
    store.update_price("TCS", 3000)

    assert json.loads(path.read_text()) == {"TCS": 3000.0}
    assert (tmp_path / "prices.json.corrupt").read_text() == '{"AAPL": 160.0, "INFY": 15'


def test_write_failure_raises_store_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = PriceStore(str(blocker / "prices.json"))

    with pytest.raises(PriceStoreError):
        store.update_price("AAPL", 10.0)
    assert store.get_prices() == {}


def test_temp_file_removed_on_failed_replace(tmp_path):
    path = tmp_path / "prices.json"
    store = PriceStore(str(path))

    with patch('py_ledger.price_store.os.replace', side_effect=OSError("disk full")):
        with pytest.raises(PriceStoreError, match="disk full"):
            store.update_price("AAPL", 10.0)
    assert not (tmp_path / "prices.json.tmp").exists()
    assert not path.exists()


def test_unreadable_path_raises_store_error(tmp_path):
    path = tmp_path / "prices.json"
    path.mkdir()
    with pytest.raises(LedgerStoreError):
        PriceStore(str(path)).get_prices()
