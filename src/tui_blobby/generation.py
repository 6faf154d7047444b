"""Starter-plan generation through the Gemini text-generation API."""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from typing import Any

import requests

from tui_blobby.models import (
    DEFAULT_COLORS,
    EventCategory,
    EventType,
    TimelineEvent,
    add_days,
    format_date,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "description": {"type": "STRING"},
            "daysOffsetFromDue": {
                "type": "NUMBER",
                "description": "Number of days relative to due date. Negative for before birth, positive for after.",
            },
            "category": {"type": "STRING", "enum": [c.value for c in EventCategory]},
        },
        "required": ["title", "description", "daysOffsetFromDue", "category"],
    },
}


class GenerationError(Exception):
    """Raised when starter events cannot be generated."""


def get_api_key() -> str | None:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def build_prompt(due_date: date) -> str:
    due = format_date(due_date)
    return (
        f"I am expecting a baby on {due}.\n"
        "I need a structured timeline of key pregnancy milestones, medical checkups, "
        "necessary to-dos, and interesting facts.\n"
        "Focus on the period from 3 months before the due date to 6 months after birth.\n"
        "\n"
        "Based on general literature and medical guidelines:\n"
        "1. Identify critical developmental milestones for the baby.\n"
        "2. Suggest logistical to-dos (e.g., pack hospital bag, buy car seat).\n"
        "3. Suggest standard medical appointments (e.g., glucose test, 2-month vaccines).\n"
        "4. Provide interesting developmental facts "
        '(e.g., "Baby is the size of a lemon", "Baby can hear sounds").\n'
        "\n"
        f"Return a list of specific events with dates calculated relative to the due date ({due})."
    )


def build_request_body(due_date: date) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": build_prompt(due_date)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def _extract_text(payload: dict[str, Any]) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as e:
        raise GenerationError("Generation response has no content") from e
    return "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict))


def events_from_items(items: list[Any], due_date: date) -> list[TimelineEvent]:
    """Turn generated items into events dated relative to *due_date*.

    Unknown categories become OTHER; items without a usable offset are skipped.
    """
    events: list[TimelineEvent] = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Skipping generated item that is not an object: %r", item)
            continue
        try:
            offset = int(round(float(item["daysOffsetFromDue"])))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping generated item without a day offset: %r", item)
            continue
        try:
            category = EventCategory(str(item.get("category", "")))
        except ValueError:
            category = EventCategory.OTHER
        events.append(
            TimelineEvent(
                title=str(item.get("title", "")),
                description=str(item.get("description", "")),
                date=add_days(due_date, offset),
                category=category,
                color=DEFAULT_COLORS[category],
                is_completed=False,
                type=EventType.STANDARD,
            )
        )
    return events


def parse_response(payload: dict[str, Any], due_date: date) -> list[TimelineEvent]:
    text = _extract_text(payload) or "[]"
    try:
        items = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError("Generation response is not valid JSON") from e
    if not isinstance(items, list):
        raise GenerationError("Generation response is not a list of events")
    return events_from_items(items, due_date)


def generate_timeline_content(
    due_date: date,
    api_key: str | None = None,
    model: str = DEFAULT_MODEL,
    endpoint: str = DEFAULT_ENDPOINT,
    timeout: float = 60,
    session: requests.Session | None = None,
) -> list[TimelineEvent]:
    """Ask the model for a starter plan around *due_date*.

    Blocking; callers in the UI run it in a worker thread.
    """
    key = api_key or get_api_key()
    if not key:
        raise GenerationError("No API key configured (set GEMINI_API_KEY)")

    url = f"{endpoint.rstrip('/')}/{model}:generateContent"
    http = session or requests.Session()
    logger.info("Requesting starter plan for due date %s from %s", due_date, model)
    try:
        response = http.post(
            url,
            json=build_request_body(due_date),
            headers={"x-goog-api-key": key},
            timeout=timeout,
        )
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        raise GenerationError(f"Generation request failed: {e}") from e
    except ValueError as e:
        raise GenerationError("Generation response is not valid JSON") from e

    events = parse_response(payload, due_date)
    logger.info("Generated %d events", len(events))
    return events
