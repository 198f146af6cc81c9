# =============================================================================
# core/services/content_service.py - Jokes & Fun Facts
# =============================================================================
# The kiosk shows one kid-friendly joke and one "Did you know" fact. Each is
# generated by the chat model in JSON mode and kept for an hour.
#
# Anything that goes wrong (no API key, API error, bad JSON, missing keys)
# falls back to a random entry from the built-in lists, so this never
# raises.
# =============================================================================

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Callable

from lib.llm import complete_json
from lib.utils import ApplicationError, utc_now

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = timedelta(hours=1)

FACT_TOPICS = ["science", "animals", "nature", "space", "history", "ocean", "dinosaurs", "weather"]

FALLBACK_JOKES = [
    {"setup": "Why don't scientists trust atoms?", "punchline": "Because they make up everything!"},
    {"setup": "What do you call a fish without eyes?", "punchline": "A fsh!"},
    {"setup": "Why did the math book look so sad?", "punchline": "Because it had too many problems."},
    {"setup": "What do you call a bear with no teeth?", "punchline": "A gummy bear!"},
    {"setup": "What do you call a dinosaur that crashes their car?", "punchline": "Tyrannosaurus Wrecks!"},
    {"setup": "Why did the scarecrow win an award?", "punchline": "He was outstanding in his field!"},
    {"setup": "What do you call a sleeping dinosaur?", "punchline": "A dino-snore!"},
    {"setup": "Why don't eggs tell jokes?", "punchline": "They'd crack each other up!"},
    {"setup": "What did the ocean say to the beach?", "punchline": "Nothing, it just waved!"},
    {"setup": "What do you call a fake noodle?", "punchline": "An impasta!"},
    {"setup": "Why did the bicycle fall over?", "punchline": "Because it was two-tired!"},
    {"setup": "Why did the cookie go to the doctor?", "punchline": "Because it felt crummy!"},
    {"setup": "What do you call a dog that does magic?", "punchline": "A Labracadabrador!"},
    {"setup": "What do you call a train carrying bubblegum?", "punchline": "A chew-chew train!"},
    {"setup": "Why are ghosts bad at lying?", "punchline": "Because you can see right through them!"},
]

FALLBACK_FACTS = [
    {"fact": "Did you know honey never spoils? Archaeologists have found 3,000-year-old honey in Egyptian tombs that was still good to eat!", "topic": "science"},
    {"fact": "Did you know octopuses have three hearts? Two pump blood to the gills, and one pumps it to the rest of the body.", "topic": "animals"},
    {"fact": "Did you know the shortest war in history lasted only 38 minutes? It was between Britain and Zanzibar in 1896.", "topic": "history"},
    {"fact": "Did you know a group of flamingos is called a 'flamboyance'?", "topic": "animals"},
    {"fact": "Did you know a day on Venus is longer than its year? It takes 243 Earth days to rotate but only 225 to orbit the sun!", "topic": "space"},
    {"fact": "Did you know butterflies taste with their feet?", "topic": "animals"},
    {"fact": "Did you know lightning strikes Earth about 8 million times per day?", "topic": "weather"},
    {"fact": "Did you know a cloud can weigh over a million pounds? They float because the water droplets are spread out!", "topic": "weather"},
    {"fact": "Did you know the ocean produces over half of the world's oxygen? Tiny phytoplankton are the heroes!", "topic": "ocean"},
    {"fact": "Did you know T-Rex lived closer in time to us than to Stegosaurus?", "topic": "dinosaurs"},
    {"fact": "Did you know sea otters hold hands while sleeping so they don't drift apart?", "topic": "animals"},
    {"fact": "Did you know rainbows are actually full circles? We only see half because the ground gets in the way!", "topic": "weather"},
    {"fact": "Did you know sharks have been around longer than trees?", "topic": "animals"},
]

JOKE_PROMPT = (
    "Generate a single family-friendly joke for kids. Vary between silly jokes for "
    "younger kids and slightly cleverer wordplay for older kids.\n\n"
    'Return JSON in this exact format: {"setup": "the setup", "punchline": "the punchline"}'
)

FACT_PROMPT = (
    'Generate one fascinating fun fact about {topic} for kids. Start with "Did you know" '
    "and make it engaging and educational. Keep it under 50 words.\n\n"
    'Return JSON in this exact format: {{"fact": "Did you know...", "topic": "{topic}"}}'
)

SYSTEM_PROMPT = "You write short, accurate, family-friendly content for children. Reply with JSON only."

# name -> {"item": dict, "expires_at": datetime}
_cache: dict[str, dict[str, Any]] = {}


def _generate(
    prompt: str,
    required: tuple[str, ...],
    fallbacks: list[dict[str, str]],
    defaults: dict[str, str] | None = None,
) -> dict[str, str]:
    """Ask the model for JSON with `required` keys, else pick a fallback."""
    try:
        data = complete_json(SYSTEM_PROMPT, prompt, max_tokens=200)
    except ApplicationError as e:
        logger.warning(f"Content generation failed, using fallback: {e.message}")
        return dict(random.choice(fallbacks))

    item = {**(defaults or {}), **{k: v for k, v in data.items() if isinstance(v, str)}}
    if not all(item.get(key) for key in required):
        logger.warning(f"Generated content missing {required}, using fallback")
        return dict(random.choice(fallbacks))

    return {key: item[key] for key in (*required, *(defaults or {}))}


def generate_joke() -> dict[str, str]:
    return _generate(JOKE_PROMPT, ("setup", "punchline"), FALLBACK_JOKES)


def generate_fun_fact() -> dict[str, str]:
    topic = random.choice(FACT_TOPICS)
    return _generate(FACT_PROMPT.format(topic=topic), ("fact",), FALLBACK_FACTS, defaults={"topic": topic})


class ContentService:
    """Service for the kiosk's hourly joke and fun fact."""

    @staticmethod
    def _get(name: str, generator: Callable[[], dict[str, str]], now: datetime) -> dict[str, Any]:
        entry = _cache.get(name)
        if entry is None or now >= entry["expires_at"]:
            item = generator()
            entry = {
                "item": {**item, "generated_at": now.isoformat()},
                "expires_at": now + REFRESH_INTERVAL,
            }
            _cache[name] = entry
        return entry

    @staticmethod
    def get_content(now: datetime | None = None) -> dict[str, Any]:
        """
        Current joke and fun fact with their next refresh times.

        Each is regenerated independently once its hour is up.
        """
        now = now or utc_now()
        joke = ContentService._get("joke", generate_joke, now)
        fact = ContentService._get("fun_fact", generate_fun_fact, now)

        return {
            "joke": joke["item"],
            "fun_fact": fact["item"],
            "joke_next_refresh": joke["expires_at"].isoformat(),
            "fact_next_refresh": fact["expires_at"].isoformat(),
        }

    @staticmethod
    def clear_cache() -> None:
        _cache.clear()
