import json


def _invoke(client, function, *args):
    return client.post("/api/invoke", json={"function": function, "args": list(args)})


def test_health(client):
    assert client.get("/api/health").get_json() == {"ok": True}


def test_create_and_query_record(client):
    r = _invoke(client, "createRecord", "REC42", "Ada", "House", "Checkup", "120")
    assert r.status_code == 200
    assert r.data == b""

    r = _invoke(client, "queryRecord", "REC42")
    assert r.status_code == 200
    assert r.get_json() == {"patient": "Ada", "doctor": "House", "procedure": "Checkup", "cost": "120"}


def test_init_ledger_then_query_all(client):
    assert _invoke(client, "initLedger").status_code == 200

    r = _invoke(client, "queryAllRecords")
    assert r.status_code == 200
    assert r.content_type.startswith("application/json")
    items = json.loads(r.data)
    assert len(items) == 12
    assert {"Key", "Record"} == set(items[3])


def test_args_may_be_omitted(client):
    r = client.post("/api/invoke", json={"function": "queryAllRecords"})

    assert r.status_code == 200
    assert r.data == b"[]"


def test_contract_error_envelope(client):
    r = _invoke(client, "queryRecord")

    assert r.status_code == 500
    assert r.get_json() == {"ok": False, "error": "Incorrect number of arguments. Expecting 1"}

    r = _invoke(client, "fly")
    assert r.status_code == 500
    assert r.get_json()["error"] == "Invalid Smart Contract function name."


def test_bad_request_bodies(client):
    assert client.post("/api/invoke", json={}).status_code == 400
    assert client.post("/api/invoke", data="not json").status_code == 400
    r = client.post("/api/invoke", json={})
    assert r.get_json()["error"] == "missing field: function"
    r = client.post("/api/invoke", json={"function": "queryRecord", "args": [1]})
    assert r.status_code == 400
    assert r.get_json()["ok"] is False
    assert r.get_json()["error"] == "args must be a list of strings"


def test_metrics_count_functions(client):
    _invoke(client, "createRecord", "REC1", "a", "b", "c", "d")
    _invoke(client, "queryRecord", "REC1")
    _invoke(client, "queryRecord")

    m = client.get("/api/metrics").get_json()
    assert m["functions"]["createRecord"]["count"] == 1
    assert m["functions"]["queryRecord"]["count"] == 1
    assert m["functions"]["queryRecord:error"]["count"] == 1
    assert m["requests"]["/api/invoke"]["count"] == 3


def test_ledger_view(client, ledger):
    _invoke(client, "createRecord", "REC1", "a", "b", "c", "d")
    ledger.put("REC2", b"junk")

    events = client.get("/api/debug/ledgerview").get_json()["events"]
    assert [e["key"] for e in events] == ["REC1", "REC2"]
    assert events[0]["record"] == {"patient": "a", "doctor": "b", "procedure": "c", "cost": "d"}
    assert events[1]["record"] is None
    assert events[1]["error"]


def test_cors_headers(client):
    r = client.get("/api/health", headers={"Origin": "http://example.org"})

    assert r.headers.get("Access-Control-Allow-Origin") == "*"


def test_create_app_configures_logging(monkeypatch, ledger):
    import app as app_module

    calls = []
    monkeypatch.setattr(app_module.logging, "basicConfig", lambda **kw: calls.append(kw))
    app_module.create_app(ledger)

    assert len(calls) == 1
    assert "level" in calls[0]
