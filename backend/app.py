import logging
import os
import time
from typing import Any, Dict, List, Optional

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS

from ledger import Ledger
from medrecords import RecordContract, RecordStore, try_decode
from medrecords.store import SCAN_END_KEY, SCAN_START_KEY
from medrecords.utils import b64d

logger = logging.getLogger("medledger")

SCAN_START = os.environ.get("MEDLEDGER_SCAN_START", SCAN_START_KEY)
SCAN_END = os.environ.get("MEDLEDGER_SCAN_END", SCAN_END_KEY)
LOG_LEVEL = os.environ.get("MEDLEDGER_LOG_LEVEL", "INFO")


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

# -------------------- request helpers --------------------

def get_json_body() -> Dict[str, Any]:
    if request.is_json:
        obj = request.get_json(silent=True)
        if isinstance(obj, dict):
            return obj
    return {}

def _bad_request(msg: str):
    return jsonify({"ok": False, "error": msg}), 400

def _contract() -> RecordContract:
    return current_app.extensions["medledger.contract"]

# ========== METRICS: latency per route and per contract function ==========

def _metrics() -> Dict[str, Dict[str, List[float]]]:
    return current_app.extensions["medledger.metrics"]

def _record_latency(section: str, key: str, ms: float):
    _metrics()[section].setdefault(key, []).append(ms)

def _percentile(vals: List[float], p: float) -> Optional[float]:
    if not vals:
        return None
    s = sorted(vals)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    return s[f] + (s[c] - s[f]) * (k - f)

def _agg(vals: List[float]) -> Dict[str, Any]:
    if not vals:
        return {"count": 0, "avg_ms": None, "p50_ms": None, "p95_ms": None, "max_ms": None}
    return {
        "count": len(vals),
        "avg_ms": sum(vals) / len(vals),
        "p50_ms": _percentile(vals, 0.50),
        "p95_ms": _percentile(vals, 0.95),
        "max_ms": max(vals),
    }

def measure(route_key: str):
    def deco(fn):
        def wrapper(*a, **kw):
            t0 = time.perf_counter()
            try:
                return fn(*a, **kw)
            finally:
                _record_latency("requests", route_key, (time.perf_counter() - t0) * 1000.0)
        wrapper.__name__ = fn.__name__
        return wrapper
    return deco

# -------------------- routes --------------------

def invoke():
    b = get_json_body()
    function = b.get("function")
    if not isinstance(function, str) or not function.strip():
        return _bad_request("missing field: function")
    args = b.get("args")
    if args is None:
        args = []
    if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
        return _bad_request("args must be a list of strings")

    t0 = time.perf_counter()
    resp = _contract().invoke(function, args)
    _record_latency("functions", function if resp.ok else f"{function}:error",
                    (time.perf_counter() - t0) * 1000.0)

    if not resp.ok:
        return jsonify({"ok": False, "error": resp.message}), resp.status
    return (resp.payload, 200, {"Content-Type": "application/json; charset=utf-8"})

def metrics():
    m = _metrics()
    return jsonify({
        "ok": True,
        "requests": {k: _agg(v) for k, v in m["requests"].items()},
        "functions": {k: _agg(v) for k, v in m["functions"].items()},
    })

def ledger_view():
    """Event log of the ledger with each stored value decoded where possible."""
    out = []
    for ev in current_app.extensions["medledger.ledger"].events():
        raw = b64d(ev["value"])
        record, err = try_decode(raw)
        out.append({
            "txId": ev["txId"],
            "ts": ev["ts"],
            "key": ev["key"],
            "record": record.as_dict() if record is not None else None,
            "error": err or None,
        })
    return jsonify({"ok": True, "events": out})

def health():
    return jsonify({"ok": True})

# -------------------- factory --------------------

def create_app(ledger: Optional[Ledger] = None) -> Flask:
    configure_logging()
    if ledger is None:
        ledger = Ledger.from_env()
    store = RecordStore(ledger, scan_start=SCAN_START, scan_end=SCAN_END)
    contract = RecordContract(store)

    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*"}})
    app.extensions["medledger.ledger"] = ledger
    app.extensions["medledger.contract"] = contract
    app.extensions["medledger.metrics"] = {"requests": {}, "functions": {}}

    app.add_url_rule("/api/invoke", view_func=measure("/api/invoke")(invoke), methods=["POST"])
    app.add_url_rule("/api/metrics", view_func=measure("/api/metrics")(metrics), methods=["GET"])
    app.add_url_rule("/api/debug/ledgerview", view_func=measure("/api/debug/ledgerview")(ledger_view),
                     methods=["GET"])
    app.add_url_rule("/api/health", view_func=health, methods=["GET"])

    contract.init()
    logger.info("record contract ready: %s", ", ".join(contract.functions()))
    return app

# -------------------- MAIN --------------------

if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=8000, debug=True)
