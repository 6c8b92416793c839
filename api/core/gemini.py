"""
Gemini HTTP client helpers.

Used endpoint:
- POST /v1/models/{model}:generateContent
    -> {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
"""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


# Gemini failures are explicit and separable from other runtime errors.
class GeminiError(RuntimeError):
    pass


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:500]
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return "API request failed"


def _candidate_text(data: Any) -> str | None:
    if not isinstance(data, dict):
        raise GeminiError("Gemini returned a non-object response.")
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text.strip() else None


async def generate_text(
    *,
    api_key: str,
    model: str,
    prompt: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout_s: float = 60.0,
    temperature: float | None = None,
    max_output_tokens: int | None = None,
) -> str | None:
    """
    Run one single-turn generation. Returns None when Gemini answers without text.
    """
    if not api_key:
        raise GeminiError("GEMINI_API_KEY is not configured.")
    model = (model or "").strip()
    if not model:
        raise GeminiError("Gemini model name is empty.")

    payload: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
    generation_config: dict[str, Any] = {}
    if temperature is not None:
        generation_config["temperature"] = float(temperature)
    if max_output_tokens is not None:
        generation_config["maxOutputTokens"] = int(max_output_tokens)
    if generation_config:
        payload["generationConfig"] = generation_config

    try:
        async with httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout_s) as client:
            resp = await client.post(
                f"/v1/models/{model}:generateContent",
                params={"key": api_key},
                json=payload,
            )
    except httpx.HTTPError as exc:
        raise GeminiError(f"Gemini request failed: {exc}") from exc

    if resp.status_code != 200:
        raise GeminiError(f"Gemini API Error: {_error_message(resp)}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise GeminiError("Gemini returned invalid JSON.") from exc
    return _candidate_text(data)
