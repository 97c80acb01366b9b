import json
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from models import ActivityLevel
from .config import OPENAI_API_KEY, OPENAI_MODEL

logger = logging.getLogger(__name__)


def _prompt(description: str) -> str:
    levels = "\n".join(
        f"- {level.label} ({level.multiplier}): {level.description}"
        for level in ActivityLevel
    )
    return (
        "Analyze the following description of someone's weekly physical activity "
        "and map it to the most appropriate standard activity level.\n\n"
        f'Description: "{description}"\n\n'
        f"Available levels:\n{levels}\n\n"
        'Reply strictly with a JSON object: {"value": <one of the multipliers>, '
        '"reasoning": <short explanation>}.'
    )


def classify_activity(description: str, client: Optional[OpenAI] = None) -> Optional[ActivityLevel]:
    """
    Suggest an activity level for a free-text description.
    Any numeric reply is snapped to the nearest permitted multiplier;
    None when there is nothing to classify or the call fails.
    """
    if not description or not description.strip():
        return None

    if client is None:
        if not OPENAI_API_KEY:
            logger.error("OPENAI_API_KEY is not set, activity advisor disabled")
            return None
        client = OpenAI(api_key=OPENAI_API_KEY)

    try:
        resp = client.chat.completions.create(
            model=OPENAI_MODEL,
            messages=[
                {"role": "system", "content": "You are a fitness assistant. Always answer with JSON."},
                {"role": "user", "content": _prompt(description.strip())},
            ],
            max_tokens=200,
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        logger.error("Activity classification failed: %s", e)
        return None

    text = resp.choices[0].message.content
    if not text:
        return None

    try:
        value = float(json.loads(text)["value"])
    except (ValueError, KeyError, TypeError) as e:
        logger.error("Malformed activity classification %r: %s", text[:200], e)
        return None

    level = ActivityLevel.nearest(value)
    logger.info("Activity %r classified as %s", description[:60], level.name)
    return level
