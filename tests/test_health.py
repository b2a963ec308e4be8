import threading

from tx_vault.core.observability import increment_metric, metrics_snapshot


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "is running" in r.json()["message"]


def test_metrics_count_transactions(client):
    before = client.get("/_metrics").json()["transactions_created_total"]
    client.post("/tx/encrypt", json={"partyId": "m", "payload": {"a": 1}})
    after = client.get("/_metrics").json()
    assert after["transactions_created_total"] == before + 1
    assert after["requests_total"] >= 2


def test_concurrent_metric_increments_are_not_lost():
    name = "test_concurrent_counter"
    start = metrics_snapshot().get(name, 0.0)

    def worker():
        for _ in range(1000):
            increment_metric(name)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert metrics_snapshot()[name] == start + 8000
