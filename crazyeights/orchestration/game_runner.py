"""Single game runner.

Plays the role of the host: it owns the GameState, serializes every call
into the engine and hands each agent only its own PlayerView.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from crazyeights.agents.base import fallback_action
from crazyeights.engine import (
    GameConfig,
    GameState,
    apply_action,
    check_invariants,
    get_legal_actions,
    initialize,
    join,
    project,
    start,
)

if TYPE_CHECKING:
    from crazyeights.agents.base import AgentProtocol

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Result of a completed game."""

    winner: Optional[str]
    num_turns: int
    player_ids: tuple[str, ...]
    stalled: bool = False  # deck ran out with nothing playable


class GameRunner:
    """Runs a single game to completion."""

    def __init__(
        self,
        agents: dict[str, "AgentProtocol"],
        seed: Optional[int] = None,
        max_turns: int = 1000,
    ):
        self._agents = agents
        self._seed = seed
        self._max_turns = max_turns
        self.state: Optional[GameState] = None

    def _setup(self) -> GameState:
        state = initialize(GameConfig(seed=self._seed))
        for pid in self._agents:
            resp = join(state, pid)
            if not resp.is_ok:
                raise ValueError(f"{pid} could not join: {resp.message}")
        resp = start(state, next(iter(self._agents)))
        if not resp.is_ok:
            raise ValueError(f"Game could not start: {resp.message}")
        return state

    def run(self) -> GameResult:
        """Run the game and return the result."""
        state = self._setup()
        self.state = state
        num_turns = 0
        stalled = False

        while state.winner is None and num_turns < self._max_turns:
            pid = state.current_player().id
            legal = get_legal_actions(state, pid)
            if not legal:
                stalled = True
                logger.info("No legal moves for %s with an empty deck, stopping", pid)
                break

            action = self._agents[pid].get_action(project(state, pid), legal, pid)
            if action is None or action not in legal:
                action = fallback_action(legal)

            resp = apply_action(state, pid, action)
            if not resp.is_ok:
                raise RuntimeError(f"Legal action {action} rejected for {pid}: {resp.message}")
            check_invariants(state)
            num_turns += 1

        logger.info("Game finished after %d turns, winner=%s", num_turns, state.winner)
        return GameResult(
            winner=state.winner,
            num_turns=num_turns,
            player_ids=tuple(self._agents),
            stalled=stalled,
        )
