from __future__ import annotations

import asyncio

import httpx
import pytest

from assistant import repository
from core import db, gemini


@pytest.fixture
def saved_chats(monkeypatch):
    saved = []

    async def fake_insert_chat(user_id, *, prompt, response):
        saved.append((user_id, prompt, response))

    monkeypatch.setattr(repository, "insert_chat", fake_insert_chat)
    return saved


@pytest.fixture
def gemini_reply(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    prompts = []

    def install(reply):
        async def fake_generate_text(**kwargs):
            prompts.append(kwargs["prompt"])
            if isinstance(reply, Exception):
                raise reply
            return reply

        monkeypatch.setattr(gemini, "generate_text", fake_generate_text)
        return prompts

    return install


def test_chat_requires_message(client, auth_headers):
    resp = client.post("/api/gemini/chat", headers=auth_headers, json={"message": "  "})

    assert resp.status_code == 400


def test_chat_without_api_key(client, auth_headers):
    resp = client.post("/api/gemini/chat", headers=auth_headers, json={"message": "hi"})

    assert resp.status_code == 500
    assert resp.json()["error"] == "GEMINI_API_KEY not configured"


def test_chat_answers_and_saves(client, auth_headers, gemini_reply, saved_chats):
    prompts = gemini_reply("Visit Byblos.")

    resp = client.post(
        "/api/gemini/chat",
        headers=auth_headers,
        json={"message": "Where to go?", "placesContext": "\nKnown places: Byblos"},
    )

    assert resp.json() == {"success": True, "response": "Visit Byblos."}
    assert saved_chats == [(7, "Where to go?", "Visit Byblos.")]
    assert "Known places: Byblos" in prompts[0]
    assert prompts[0].endswith("User question: Where to go?")


def test_chat_falls_back_when_gemini_returns_no_text(client, auth_headers, gemini_reply, saved_chats):
    gemini_reply(None)

    body = client.post("/api/gemini/chat", headers=auth_headers, json={"message": "hi"}).json()

    assert body["response"].startswith("Sorry")


def test_chat_survives_history_save_failure(client, auth_headers, gemini_reply, monkeypatch):
    gemini_reply("Hello!")

    async def failing_insert_chat(user_id, *, prompt, response):
        raise db.DatabaseError("disk full")

    monkeypatch.setattr(repository, "insert_chat", failing_insert_chat)

    resp = client.post("/api/gemini/chat", headers=auth_headers, json={"message": "hi"})

    assert resp.status_code == 200
    assert resp.json()["response"] == "Hello!"


def test_chat_upstream_error(client, auth_headers, gemini_reply, saved_chats):
    gemini_reply(gemini.GeminiError("Gemini API Error: quota exceeded"))

    resp = client.post("/api/gemini/chat", headers=auth_headers, json={"message": "hi"})

    assert resp.status_code == 502
    assert resp.json()["message"] == "Gemini API Error: quota exceeded"
    assert saved_chats == []


def test_history_pagination(client, auth_headers, monkeypatch):
    async def fake_count(user_id):
        return 21

    async def fake_list(user_id, *, limit, offset):
        return [{"id": 1, "prompt": "hi", "response": "hello", "created_at": None}]

    monkeypatch.setattr(repository, "count_chats", fake_count)
    monkeypatch.setattr(repository, "list_chats", fake_list)

    body = client.get("/api/gemini/history", headers=auth_headers).json()

    assert body["pagination"] == {"page": 1, "limit": 20, "totalChats": 21, "totalPages": 2}


def test_delete_missing_chat(client, auth_headers, monkeypatch):
    async def fake_delete(chat_id, *, user_id):
        return False

    monkeypatch.setattr(repository, "delete_chat", fake_delete)

    assert client.delete("/api/gemini/history/42", headers=auth_headers).status_code == 404


def _mock_transport(handler):
    real_client = httpx.AsyncClient

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    return factory


def test_generate_text_parses_first_candidate(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "Ahlan!"}]}}]})

    monkeypatch.setattr(gemini.httpx, "AsyncClient", _mock_transport(handler))

    text = asyncio.run(gemini.generate_text(api_key="k", model="gemini-2.5-flash", prompt="hi"))

    assert text == "Ahlan!"
    assert "/v1/models/gemini-2.5-flash:generateContent" in seen["url"]
    assert "key=k" in seen["url"]


def test_generate_text_surfaces_api_error_message(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Resource has been exhausted"}})

    monkeypatch.setattr(gemini.httpx, "AsyncClient", _mock_transport(handler))

    with pytest.raises(gemini.GeminiError, match="Resource has been exhausted"):
        asyncio.run(gemini.generate_text(api_key="k", model="m", prompt="hi"))


def test_generate_text_rejects_non_json_body(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>upstream proxy error</html>")

    monkeypatch.setattr(gemini.httpx, "AsyncClient", _mock_transport(handler))

    with pytest.raises(gemini.GeminiError, match="invalid JSON"):
        asyncio.run(gemini.generate_text(api_key="k", model="m", prompt="hi"))


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": ["not-a-dict"]},
        {"candidates": [{"content": "text"}]},
        {"candidates": [{"content": {"parts": [None]}}]},
    ],
)
def test_generate_text_treats_malformed_candidates_as_no_text(monkeypatch, body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    monkeypatch.setattr(gemini.httpx, "AsyncClient", _mock_transport(handler))

    assert asyncio.run(gemini.generate_text(api_key="k", model="m", prompt="hi")) is None


def test_chat_reports_malformed_gemini_body_as_upstream_error(client, auth_headers, monkeypatch, saved_chats):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["unexpected"])

    monkeypatch.setattr(gemini.httpx, "AsyncClient", _mock_transport(handler))

    resp = client.post("/api/gemini/chat", headers=auth_headers, json={"message": "hi"})

    assert resp.status_code == 502
    assert resp.json()["success"] is False
    assert saved_chats == []
