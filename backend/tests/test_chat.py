"""
Test the chat RPC procedures over HTTP.

Runs the real app with the controller swapped for one backed by the
in-memory store in echo mode.
"""
import json
import logging
from datetime import datetime, timezone


def test_send_returns_both_messages(client, store):
    """chat.send persists the prompt and the echoed reply."""
    response = client.post(
        "/api/trpc/chat.send",
        json={"modelTag": "gemini-1.5-flash-latest", "prompt": "hello", "userId": "user-1"},
    )

    assert response.status_code == 200
    data = response.json()["result"]["data"]
    assert data["userMessage"]["role"] == "user"
    assert data["userMessage"]["content"] == "hello"
    assert data["userMessage"]["user_id"] == "user-1"
    assert data["aiMessage"]["role"] == "assistant"
    assert data["aiMessage"]["content"] == 'You said: "hello"'
    assert data["aiMessage"]["model_tag"] == "gemini-1.5-flash-latest"
    assert len(store.messages) == 2


def test_send_rejects_empty_prompt_without_writing(client, store):
    response = client.post(
        "/api/trpc/chat.send",
        json={"modelTag": "m", "prompt": "", "userId": "user-1"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Error"
    assert body["details"]["errors"][0]["loc"] == ["prompt"]
    assert store.insert_calls == []


def test_send_rejects_missing_and_mistyped_fields(client, store):
    missing = client.post("/api/trpc/chat.send", json={"modelTag": "m", "prompt": "hi"})
    mistyped = client.post(
        "/api/trpc/chat.send", json={"modelTag": "m", "prompt": 42, "userId": "u"}
    )

    assert missing.status_code == 400
    assert mistyped.status_code == 400
    assert store.insert_calls == []


def test_send_accepts_whitespace_only_prompt(client, store):
    """Only empty strings are invalid; whitespace is stored as sent."""
    response = client.post(
        "/api/trpc/chat.send",
        json={"modelTag": "m", "prompt": "   ", "userId": "user-1"},
    )

    assert response.status_code == 200
    data = response.json()["result"]["data"]
    assert data["userMessage"]["content"] == "   "
    assert data["aiMessage"]["content"] == 'You said: "   "'
    assert len(store.messages) == 2


def test_request_log_omits_prompt_text(client, caplog):
    caplog.set_level(logging.INFO, logger="src.middleware.request_logging")

    response = client.post(
        "/api/trpc/chat.send",
        json={"modelTag": "m", "prompt": "my private question", "userId": "user-1"},
    )

    assert response.status_code == 200
    messages = [r.getMessage() for r in caplog.records]
    assert not any("my private question" in m for m in messages)
    request_log = next(json.loads(m) for m in messages if '"type": "request"' in m)
    assert request_log["body"]["prompt"] == "***REDACTED***"
    assert request_log["user_id"] == "user-1"


def test_send_rejects_non_json_body(client, store):
    response = client.post(
        "/api/trpc/chat.send",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Input is not valid JSON"
    assert store.insert_calls == []


def test_send_reports_user_write_failure(client, store):
    store.fail_insert_role = "user"

    response = client.post(
        "/api/trpc/chat.send",
        json={"modelTag": "m", "prompt": "hi", "userId": "user-1"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Storage Error", "message": "user message write failed"}
    assert [c["role"] for c in store.insert_calls] == ["user"]


def test_send_reports_assistant_write_failure(client, store):
    store.fail_insert_role = "assistant"

    response = client.post(
        "/api/trpc/chat.send",
        json={"modelTag": "m", "prompt": "hi", "userId": "user-1"},
    )

    assert response.status_code == 500
    assert response.json()["message"] == "assistant message write failed"

    history = client.get("/api/trpc/chat.history", params={"userId": "user-1"})
    messages = history.json()["result"]["data"]
    assert [m["role"] for m in messages] == ["user"]


def test_history_with_json_input_filters_by_tag(client):
    for tag, prompt in (("a", "first"), ("b", "second"), ("a", "third")):
        client.post(
            "/api/trpc/chat.send",
            json={"modelTag": tag, "prompt": prompt, "userId": "user-1"},
        )

    response = client.get(
        "/api/trpc/chat.history",
        params={"input": json.dumps({"userId": "user-1", "modelTag": "a"})},
    )

    assert response.status_code == 200
    messages = response.json()["result"]["data"]
    assert len(messages) == 4
    assert {m["model_tag"] for m in messages} == {"a"}
    assert [m["content"] for m in messages if m["role"] == "user"] == ["first", "third"]


def test_history_with_plain_params_and_empty_tag(client):
    client.post("/api/trpc/chat.send", json={"modelTag": "a", "prompt": "x", "userId": "u"})
    client.post("/api/trpc/chat.send", json={"modelTag": "b", "prompt": "y", "userId": "u"})

    response = client.get("/api/trpc/chat.history", params={"userId": "u", "modelTag": ""})

    assert response.status_code == 200
    assert len(response.json()["result"]["data"]) == 4


def test_history_requires_user_id(client):
    response = client.get("/api/trpc/chat.history")

    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"


def test_history_read_failure(client, store):
    store.fail_reads = True

    response = client.get("/api/trpc/chat.history", params={"userId": "u"})

    assert response.status_code == 500
    assert response.json()["message"] == "failed to fetch chat history"


def test_models_listed_oldest_first(client, store):
    store.add_model("newer", "Newer", datetime(2025, 3, 1, tzinfo=timezone.utc))
    store.add_model("older", "Older", datetime(2025, 1, 1, tzinfo=timezone.utc))

    response = client.get("/api/trpc/models.getAvailable")

    assert response.status_code == 200
    assert [m["tag"] for m in response.json()["result"]["data"]] == ["older", "newer"]


def test_models_read_failure(client, store):
    store.fail_reads = True

    response = client.get("/api/trpc/models.getAvailable")

    assert response.status_code == 500
    assert response.json() == {"error": "Storage Error", "message": "failed to fetch models"}


def test_health_reports_echo_mode(client):
    basic = client.get("/api/health")
    detailed = client.get("/api/health/detailed")

    assert basic.status_code == 200
    assert basic.json()["status"] == "ok"
    assert detailed.json()["services"] == {"storage": "not_configured", "generation": "echo"}
    assert detailed.json()["status"] == "degraded"


def test_responses_carry_process_time_header(client):
    response = client.get("/api/trpc/models.getAvailable")

    assert "x-process-time" in response.headers
