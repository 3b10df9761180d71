"""Game orchestration."""

from crazyeights.orchestration.game_runner import GameResult, GameRunner
from crazyeights.orchestration.tournament import run_tournament

__all__ = ["GameResult", "GameRunner", "run_tournament"]
