# app/llm.py
import os
import logging
from typing import List, Optional, Sequence
from dotenv import load_dotenv
from openai import OpenAI

from app.schemas import ParkStatus, RecommendationRecord

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("RIDE_WIZARD_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

# Load .env file if present
load_dotenv()

api_key = os.getenv("OPENAI_API_KEY")
if api_key:
    _client = OpenAI(api_key=api_key)
else:  # pragma: no cover - exercised indirectly in tests without API key
    _client = None
    logger.warning("OPENAI_API_KEY not set; generate_summary will return the static summary")

DEFAULT_MODEL = os.getenv("RIDE_WIZARD_SUMMARY_MODEL") or "gpt-4o-mini"

DEFAULT_OPEN_SUMMARY = (
    "Here are the rides that best match where you are and what you care about right now. "
    "Wait times change quickly, so check the list again before you walk over."
)
DEFAULT_CLOSED_SUMMARY = (
    "The park is closed right now, so wait times are unavailable. "
    "These are the closest attractions to help you plan your next visit."
)
NO_MATCHES_SUMMARY = "No rides matched your current location and preferences."

SYSTEM_PROMPT = """You are Yen Sid, a friendly theme-park guide.
Write 2-4 short sentences recommending what to ride next.
Use ONLY the rides, waits and distances provided; never invent rides or numbers.
If the park is closed, frame the list as planning advice for the next visit.
Mention weather or a ticketed event only when it is provided.
Plain text only, no lists or markdown.
"""

USER_TEMPLATE = """Park: {park}
Park status: {status}
Weather: {weather}
Ticketed event: {event}
Visitor is in: {land}
Priority: {priority}

Ranked rides:
{rides}
"""


def default_summary(is_open: bool, has_results: bool = True) -> str:
    if not has_results:
        return NO_MATCHES_SUMMARY
    return DEFAULT_OPEN_SUMMARY if is_open else DEFAULT_CLOSED_SUMMARY


def _format_rides(records: Sequence[RecommendationRecord], is_open: bool) -> str:
    lines: List[str] = []
    for i, r in enumerate(records, 1):
        if is_open:
            lines.append(f"{i}. {r.name} - {r.listed_wait_minutes} min wait, {r.distance_meters} m away")
        else:
            lines.append(f"{i}. {r.name} - {r.distance_meters} m away")
    return "\n".join(lines)


def generate_summary(
    park_name: str,
    status: ParkStatus,
    records: Sequence[RecommendationRecord],
    *,
    land: str,
    priority: str,
    weather: Optional[str] = None,
    model: str = DEFAULT_MODEL,
) -> str:
    """Ask the hosted model for a short narrative over the ranked list.

    Falls back to a static summary when no client is configured, there is
    nothing to describe, or the model answers with blank text. API errors are
    left for the caller to handle.
    """
    is_open = status.is_open
    if not records:
        return default_summary(is_open, has_results=False)

    if _client is None:
        logger.info("Skipping LLM summary (missing client or API key)")
        return default_summary(is_open)

    event = status.active_event.description if status.active_event else None
    user_prompt = USER_TEMPLATE.format(
        park=park_name,
        status=status.human_message or status.state,
        weather=weather or "unknown",
        event=event or "none",
        land=land,
        priority=priority,
        rides=_format_rides(records, is_open),
    )

    logger.info("Invoking LLM model %s for a %d-ride summary", model, len(records))
    resp = _client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ],
        temperature=0.4,
        max_tokens=200,
    )

    text = (resp.choices[0].message.content or "").strip()
    if not text:
        logger.warning("LLM returned an empty summary; using the static summary")
        return default_summary(is_open)
    return text
