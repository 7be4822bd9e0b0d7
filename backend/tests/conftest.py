import os

import pytest

os.environ.setdefault("MEDLEDGER_FILE", ":memory:")

from ledger import Ledger  # noqa: E402
from medrecords import RecordContract, RecordStore  # noqa: E402
from medrecords.errors import LedgerError  # noqa: E402


class SpyLedger(Ledger):
    """In-memory ledger that records every call made against it."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def get(self, key):
        self.calls.append(("get", key))
        return super().get(key)

    def put(self, key, value):
        self.calls.append(("put", key))
        return super().put(key, value)

    def range_scan(self, start, end):
        self.calls.append(("range_scan", start, end))
        return super().range_scan(start, end)


class FailingIterator:
    """Yields ``entries`` and raises LedgerError on the ``fail_on``-th next()."""

    def __init__(self, entries, fail_on):
        self.entries = list(entries)
        self.fail_on = fail_on
        self.next_calls = 0
        self.close_calls = 0

    def has_next(self):
        return self.next_calls < len(self.entries)

    def next(self):
        self.next_calls += 1
        if self.next_calls == self.fail_on:
            raise LedgerError(f"simulated failure on next #{self.next_calls}")
        return self.entries[self.next_calls - 1]

    def close(self):
        self.close_calls += 1


class FailingLedger:
    def __init__(self, iterator=None, open_error=None, get_error=None, put_error=None):
        self.iterator = iterator
        self.open_error = open_error
        self.get_error = get_error
        self.put_error = put_error
        self.puts = []

    def get(self, key):
        if self.get_error:
            raise self.get_error
        return b""

    def put(self, key, value):
        if self.put_error:
            raise self.put_error
        self.puts.append((key, value))

    def range_scan(self, start, end):
        if self.open_error:
            raise self.open_error
        return self.iterator


@pytest.fixture
def ledger():
    return SpyLedger()


@pytest.fixture
def store(ledger):
    return RecordStore(ledger)


@pytest.fixture
def contract(store):
    return RecordContract(store)


@pytest.fixture
def app(ledger):
    from app import create_app

    flask_app = create_app(ledger)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
