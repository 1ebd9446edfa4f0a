import json
import os

from py_datafetcher.types import ProviderType
from py_ledger.config_loader import CONFIG_ENV_VAR, load_config, resolve_config_path


def test_missing_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config(str(tmp_path / "absent.json"))

    assert config.currency == "INR"
    assert config.exchange_suffixes == {"NSE": ".NS", "BSE": ".BO"}
    assert [p.name for p in config.providers] == [ProviderType.YAHOO]
    assert os.path.isdir(config.data_dir)


def test_values_from_file(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({
        "data_dir": str(tmp_path / "data"),
        "currency": "usd",
        "user_email": "me@example.com",
        "default_owners": ["Family"],
        "ticker_map": {"m&m": "M&M.NS"},
        "providers": {"yahoo": {"priority": 2}},
    }))
    config = load_config(str(path))

    assert config.currency == "USD"
    assert config.user_email == "me@example.com"
    assert config.default_owners == ["Family"]
    assert config.ticker_map == {"M&M": "M&M.NS"}
    assert config.providers[0].priority == 2
    assert config.prices_path == os.path.join(str(tmp_path / "data"), "prices.json")


def test_unsupported_currency_and_unknown_provider(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({
        "data_dir": str(tmp_path / "data"),
        "currency": "GBP",
        "providers": {"gemini": {"api_key": "x"}},
    }))
    config = load_config(str(path))

    assert config.currency == "INR"
    assert [p.name for p in config.providers] == [ProviderType.YAHOO]


def test_broken_file_falls_back(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "ledger.json"
    path.write_text("{broken")
    assert load_config(str(path)).currency == "INR"


def test_env_override(monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, "/etc/ledger.json")
    assert resolve_config_path() == "/etc/ledger.json"
    assert resolve_config_path("other.json") == "other.json"
