"""Random agent - plays any matching card, draws otherwise."""

import logging
import random
from typing import Optional

from crazyeights.engine import Action, PlayCard, PlayerView

logger = logging.getLogger(__name__)


class RandomAgent:
    """Agent that picks uniformly among playable cards."""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        self._name = name
        self._rng = random.Random(seed)

    @property
    def name(self) -> str:
        return self._name

    def get_action(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        if not legal_actions:
            return None

        # Prefer playing over drawing so the game makes progress
        plays = [a for a in legal_actions if isinstance(a, PlayCard)]
        choice = self._rng.choice(plays or legal_actions)
        logger.debug("[%s] %s chose %s", self.name, player_id, choice)
        return choice
