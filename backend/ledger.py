# backend/ledger.py
import logging
import os
import pathlib
import time
from bisect import bisect_left
from typing import Any, Dict, List, Optional, Tuple, Union

from medrecords.digest import sha256_hex
from medrecords.errors import LedgerError
from medrecords.utils import b64d, b64e, dumps, loads

logger = logging.getLogger(__name__)

LEDGER_FILE = pathlib.Path(__file__).parent / "ledger.jsonl"


class RangeIterator:
    """Iterator over a snapshot of ``(key, value)`` pairs in key order.

    States: open (has_next true), exhausted, closed. Closing is idempotent;
    calling next() once exhausted or closed raises LedgerError.
    """

    def __init__(self, entries: List[Tuple[str, bytes]]):
        self._entries = entries
        self._pos = 0
        self.closed = False

    def has_next(self) -> bool:
        return not self.closed and self._pos < len(self._entries)

    def next(self) -> Tuple[str, bytes]:
        if self.closed:
            raise LedgerError("range iterator is closed")
        if self._pos >= len(self._entries):
            raise LedgerError("range iterator is exhausted")
        item = self._entries[self._pos]
        self._pos += 1
        return item

    def close(self):
        self.closed = True
        self._entries = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class Ledger:
    """Ordered key-value ledger.

    With a ``path`` every put is appended to a JSONL event log (one PUT event
    per line, hashed into a ``txId``) and the log is replayed on open.
    Without a path the ledger lives in memory only.
    """

    def __init__(self, path: Optional[Union[str, pathlib.Path]] = None):
        self.path = pathlib.Path(path) if path else None
        self._state: Dict[str, bytes] = {}
        self._keys: List[str] = []
        self._events: List[Dict[str, Any]] = []
        if self.path is not None:
            self._replay()

    @classmethod
    def from_env(cls) -> "Ledger":
        target = os.environ.get("MEDLEDGER_FILE", str(LEDGER_FILE))
        if target == ":memory:":
            return cls()
        return cls(target)

    # -------------------- log --------------------

    def _replay(self):
        if not self.path.exists():
            return
        for n, line in enumerate(self.path.read_text(encoding="utf-8").splitlines(), 1):
            if not line.strip():
                continue
            try:
                ev = loads(line)
                value = b64d(ev["value"])
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                raise LedgerError(f"corrupt ledger log {self.path} line {n}: {exc}") from exc
            if ev.get("type") != "PUT":
                continue
            self._apply(ev["key"], value)
            self._events.append(ev)
        logger.info("Replayed %d ledger events from %s", len(self._events), self.path)

    def _append(self, event: Dict[str, Any]) -> Dict[str, Any]:
        ev = {"ts": int(time.time()), **event}
        ev["txId"] = sha256_hex(dumps(ev))
        if self.path is not None:
            os.makedirs(self.path.parent, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(dumps(ev) + "\n")
        self._events.append(ev)
        return ev

    def _apply(self, key: str, value: bytes):
        if key not in self._state:
            self._keys.insert(bisect_left(self._keys, key), key)
        self._state[key] = value

    # -------------------- key-value interface --------------------

    def get(self, key: str) -> bytes:
        if not key:
            raise LedgerError("key must not be empty")
        return self._state.get(key, b"")

    def put(self, key: str, value: bytes) -> Dict[str, Any]:
        if not key:
            raise LedgerError("key must not be empty")
        if not isinstance(value, (bytes, bytearray)):
            raise LedgerError(f"value for {key} must be bytes, not {type(value).__name__}")
        ev = self._append({"type": "PUT", "key": key, "value": b64e(bytes(value))})
        self._apply(key, bytes(value))
        return ev

    def range_scan(self, start: str, end: str) -> RangeIterator:
        """Keys in the half-open interval [start, end), lexicographic order."""
        if not start or not end:
            raise LedgerError("range bounds must not be empty")
        lo = bisect_left(self._keys, start)
        hi = bisect_left(self._keys, end)
        return RangeIterator([(k, self._state[k]) for k in self._keys[lo:hi]])

    # -------------------- inspection --------------------

    def history(self, key: str) -> List[Dict[str, Any]]:
        return [ev for ev in self._events if ev.get("key") == key]

    def events(self) -> List[Dict[str, Any]]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._keys)


__all__ = ["LEDGER_FILE", "Ledger", "RangeIterator"]
