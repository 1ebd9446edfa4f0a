"""
Integration tests for the CSV import/export CLI.
"""
import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

from py_csv_parser.csv_parser import COLUMNS, SAMPLE_CSV, main
from py_ledger.store import LedgerStore


class TestCsvCli(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.data_dir = os.path.join(self.test_dir, "ledger")
        self.config_file = os.path.join(self.test_dir, "ledger.json")
        with open(self.config_file, "w") as f:
            json.dump({"data_dir": self.data_dir}, f)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _run(self, *args):
        argv = ["run_csv_parser.py"] + list(args) + ["--config", self.config_file]
        with patch.object(sys, 'argv', argv):
            return main()

    def test_sample_import_export_cycle(self):
        sample = os.path.join(self.test_dir, "sample.csv")
        exported = os.path.join(self.test_dir, "export.csv")

        self.assertEqual(self._run("sample", sample), 0)
        self.assertEqual(self._run("import", sample), 0)

        stored = LedgerStore(self.data_dir).load_transactions()
        self.assertEqual([t.stock_id for t in stored], ["GOOGL", "AAPL"])

        self.assertEqual(self._run("export", exported), 0)
        with open(exported) as f:
            lines = f.read().splitlines()
        self.assertEqual(lines[0], ",".join(COLUMNS))
        self.assertEqual(lines[1:], [
            "GOOGL,Alphabet Inc.,US02079K3059,Family,Buy,5,100,4.5,0.9,0.5,Fidelity,NASDAQ,2023-02-20",
            "AAPL,Apple Inc.,US0378331005,Family,Buy,10,150,5,1,0.5,Fidelity,NASDAQ,2023-01-15",
        ])

    def test_import_replaces_existing(self):
        first = os.path.join(self.test_dir, "first.csv")
        with open(first, "w") as f:
            f.write(SAMPLE_CSV)
        self.assertEqual(self._run("import", first), 0)

        second = os.path.join(self.test_dir, "second.csv")
        with open(second, "w") as f:
            f.write(",".join(COLUMNS) + "\nINFY,Infosys,X,Family,Buy,2,1500,0,0,0,Zerodha,NSE,2023-03-01\n")
        self.assertEqual(self._run("import", second), 0)

        stored = LedgerStore(self.data_dir).load_transactions()
        self.assertEqual([t.stock_id for t in stored], ["INFY"])

    def test_bad_header_keeps_data(self):
        good = os.path.join(self.test_dir, "good.csv")
        with open(good, "w") as f:
            f.write(SAMPLE_CSV)
        self._run("import", good)

        bad = os.path.join(self.test_dir, "bad.csv")
        with open(bad, "w") as f:
            f.write("Symbol,Qty\nAAPL,1\n")
        self.assertEqual(self._run("import", bad), 1)
        self.assertEqual(len(LedgerStore(self.data_dir).load_transactions()), 2)

    def test_missing_file(self):
        self.assertEqual(self._run("import", os.path.join(self.test_dir, "nope.csv")), 1)


if __name__ == '__main__':
    unittest.main()
