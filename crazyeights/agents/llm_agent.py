"""LLM agent using the OpenAI client against OpenAI-compatible providers."""

import json
import logging
import os
import re
import time
from typing import Optional

from openai import OpenAI

from crazyeights.agents.base import fallback_action
from crazyeights.engine import Action, Card, DrawCard, PlayCard, PlayerView

logger = logging.getLogger(__name__)

OPENROUTER_BASE = "https://openrouter.ai/api/v1"
GROQ_BASE = "https://api.groq.com/openai/v1"
OLLAMA_BASE = "http://localhost:11434/v1"
HUGGINGFACE_BASE = "https://router.huggingface.co/v1"

MAX_ATTEMPTS = 3


def _format_player_view(pv: PlayerView, player_id: str) -> str:
    """Format player view as text for the LLM."""
    others = [pid for pid in pv.players if pid != player_id]
    lines = [
        "=== Your hand ===",
        " ".join(str(c) for c in pv.hand or []) or "(empty)",
        "",
        "=== Top card on the pile ===",
        str(pv.top_of_pile) if pv.top_of_pile else "None",
        "",
        "=== Other players (in turn order) ===",
        ", ".join(others) or "None",
        "",
        "=== Cards left in the deck ===",
        str(pv.num_cards_in_deck),
        "",
        "=== Current player ===",
        pv.turn or "None",
    ]
    return "\n".join(lines)


def _format_legal_actions(actions: list[Action]) -> str:
    """Format legal actions as text."""
    options = []
    for i, a in enumerate(actions):
        if isinstance(a, DrawCard):
            options.append(f"{i}: DRAW")
        else:
            options.append(f"{i}: PLAY {a.card}")
    return "\n".join(options)


def _index_from(data: object, actions: list[Action]) -> Action | None:
    if isinstance(data, dict) and isinstance(data.get("action_index"), int):
        idx = data["action_index"]
        if 0 <= idx < len(actions):
            return actions[idx]
        logger.warning("action_index %d out of range (0-%d)", idx, len(actions) - 1)
    return None


def _parse_action_response(response: str, actions: list[Action]) -> Action | None:
    """Parse LLM response into an Action."""
    # 1. A JSON object, strict first, then with single quotes swapped
    json_match = re.search(r"(\{.*?\})", response, re.DOTALL)
    if json_match:
        json_str = json_match.group(1)
        for candidate in (json_str, json_str.replace("'", '"')):
            try:
                action = _index_from(json.loads(candidate), actions)
            except json.JSONDecodeError:
                continue
            if action is not None:
                return action

    # 2. "action_index": N with any quoting
    match = re.search(r'["\']?action_index["\']?\s*:\s*(\d+)', response, re.IGNORECASE)
    if match:
        action = _index_from({"action_index": int(match.group(1))}, actions)
        if action is not None:
            return action

    # 3. A card named as it is listed, e.g. "PLAY red_3"
    for color, number in re.findall(r"\b(red|green|yellow|blue)[_ ]([1-9])\b", response, re.IGNORECASE):
        card = Card.parse(f"{color}_{number}")
        for a in actions:
            if isinstance(a, PlayCard) and a.card == card:
                return a

    # 4. The word DRAW
    if "DRAW" in response.upper():
        for a in actions:
            if isinstance(a, DrawCard):
                return a

    # 5. Any standalone number
    cleaned = re.sub(r"[{}\[\]\"'.,:]", " ", response)
    for word in cleaned.split():
        if word.isdigit() and int(word) < len(actions):
            return actions[int(word)]

    return None


class LLMAgent:
    """Agent that asks an LLM to choose actions."""

    def __init__(
        self,
        provider: str = "openrouter",
        model: str = "openai/gpt-4o-mini",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        rate_limit: Optional[float] = None,
    ):
        if provider == "openrouter":
            base_url = OPENROUTER_BASE
            key = api_key or os.environ.get("OPENROUTER_API_KEY")
        elif provider == "groq":
            base_url = GROQ_BASE
            key = api_key or os.environ.get("GROQ_API_KEY")
        elif provider == "ollama":
            base_url = os.environ.get("OLLAMA_BASE_URL", OLLAMA_BASE)
            key = "ollama"
        elif provider == "huggingface":
            base_url = HUGGINGFACE_BASE
            key = api_key or os.environ.get("HUGGINGFACE_API_KEY")
        else:
            raise ValueError(f"Unknown provider: {provider}")

        if not key:
            raise ValueError(f"API key required for {provider}. Set {provider.upper()}_API_KEY or pass api_key.")

        self._client = OpenAI(api_key=key, base_url=base_url)
        self._model = model
        self._timeout = timeout
        self._provider = provider
        self._rate_limit = rate_limit  # requests per minute
        self._request_history: list[float] = []

        logger.info(
            "[%s] provider=%s base_url=%s timeout=%ss rate_limit=%s rpm",
            self.name, provider, base_url, timeout, rate_limit or "None",
        )

    @property
    def name(self) -> str:
        return f"llm-{self._model}"

    def _wait_for_rate_limit(self) -> None:
        """Block if rate limit is exceeded."""
        if not self._rate_limit:
            return

        now = time.time()
        self._request_history = [t for t in self._request_history if now - t < 60.0]

        if len(self._request_history) >= self._rate_limit:
            wait_time = 60.0 - (now - self._request_history[0])
            if wait_time > 0:
                logger.info("[%s] Rate limit reached, waiting %.2fs", self.name, wait_time)
                time.sleep(wait_time)

        self._request_history.append(time.time())

    def _prompt(self, player_view: PlayerView, legal_actions: list[Action], player_id: str) -> str:
        return f"""You are playing Crazy Eights.
Objective: be the first to empty your hand. A card can be played if it matches the top card on the pile by color (red, green, yellow, blue) or by number (1-9). If you cannot or do not want to play, draw one card.

{_format_player_view(player_view, player_id)}

=== Legal actions ===
{_format_legal_actions(legal_actions)}

INSTRUCTIONS:
Select the best action to win the game.
Respond with a JSON object containing the index of your chosen action.
Example: {{"action_index": 0}}
"""

    def get_action(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        if not legal_actions:
            return None

        prompt = self._prompt(player_view, legal_actions, player_id)
        kwargs = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "timeout": self._timeout,
        }
        # JSON mode only where the provider is known to support it
        if "gpt-4" in self._model or "gpt-3.5" in self._model or self._provider == "groq":
            kwargs["response_format"] = {"type": "json_object"}

        for attempt in range(1, MAX_ATTEMPTS + 1):
            self._wait_for_rate_limit()
            start_time = time.time()
            try:
                resp = self._client.chat.completions.create(**kwargs)
            except Exception as e:
                logger.warning(
                    "[%s] Error on attempt %d after %.2fs: %s: %s",
                    self.name, attempt, time.time() - start_time, type(e).__name__, e,
                )
                continue

            try:
                content = resp.choices[0].message.content or ""
            except (IndexError, AttributeError) as e:
                logger.warning(
                    "[%s] Malformed response on attempt %d: %s: %s",
                    self.name, attempt, type(e).__name__, e,
                )
                continue
            logger.debug("[%s] Response in %.2fs: %s", self.name, time.time() - start_time, content)
            action = _parse_action_response(content, legal_actions)
            if action is not None:
                return action
            logger.warning("[%s] Could not parse an action from: %r", self.name, content)

        logger.warning("[%s] All retries failed, falling back", self.name)
        return fallback_action(legal_actions)
