"""Tournament - run many games and aggregate results."""

import logging
import random
from collections import Counter
from typing import Any

from crazyeights.orchestration.game_runner import GameRunner

logger = logging.getLogger(__name__)


def run_tournament(
    agents: dict[str, Any],
    num_games: int = 100,
    seed: int | None = None,
    max_turns: int = 1000,
) -> dict[str, int]:
    """Play ``num_games`` games between the same agents.

    Seating order alternates between join order and its reverse. The first
    player is picked at random by the engine on every start anyway.

    Returns:
        Dict mapping player_id to number of wins. Stalled games count for
        nobody.
    """
    player_ids = list(agents)
    wins: Counter[str] = Counter({pid: 0 for pid in player_ids})
    stalled = 0

    rng = random.Random(seed)
    for g in range(num_games):
        order = player_ids if g % 2 == 0 else list(reversed(player_ids))
        runner = GameRunner(
            {pid: agents[pid] for pid in order},
            seed=rng.randint(0, 2**31 - 1),
            max_turns=max_turns,
        )
        result = runner.run()
        if result.winner:
            wins[result.winner] += 1
        elif result.stalled:
            stalled += 1

    logger.info("Tournament of %d games done, %d stalled", num_games, stalled)
    return dict(wins)
