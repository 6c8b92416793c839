"""
Prompt builders for the travel assistant.
"""

from __future__ import annotations


def system_prompt(places_context: str | None = None) -> str:
    return (
        "You are a helpful Lebanon tourism assistant. "
        "Help users discover places to visit, eat, and stay in Lebanon. "
        "Be friendly, concise, and informative."
        f"{places_context or ''}"
    )


def chat_prompt(message: str, places_context: str | None = None) -> str:
    return f"{system_prompt(places_context)}\n\nUser question: {message}"
