"""Tests for the live report WebSocket feeds."""


def test_report_feed_rejects_unknown_report(client):
    with client.websocket_connect("/ws/reports/nonexistent-report") as ws:
        data = ws.receive_json()
        assert data["type"] == "error"
        assert "not found" in data["message"].lower()


def test_report_feed_answers_ping(client):
    report_id = client.post(
        "/api/reports", json={"animal_type": "dog", "condition": "limping", "location": "MG Road"}
    ).json()["report"]["id"]

    with client.websocket_connect(f"/ws/reports/{report_id}") as ws:
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}


def test_all_reports_feed_answers_ping(client):
    with client.websocket_connect("/ws/reports") as ws:
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}


def test_feed_reports_invalid_json(client):
    with client.websocket_connect("/ws/reports") as ws:
        ws.send_text("not json")
        data = ws.receive_json()
        assert data == {"type": "error", "message": "Invalid JSON"}
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}
