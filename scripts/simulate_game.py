"""Simulate a game with random agents and print each player's final view."""

import logging

from crazyeights.agents import RandomAgent
from crazyeights.engine import project
from crazyeights.orchestration.game_runner import GameRunner


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    agents = {f"p{i}": RandomAgent(f"Bot{i}", seed=i) for i in range(1, 5)}

    runner = GameRunner(agents, seed=42)
    result = runner.run()

    print(f"Game finished! Winner: {result.winner}")
    print(f"Turns: {result.num_turns}")
    for pid in result.player_ids:
        view = project(runner.state, pid)
        print(f"{pid}: {' '.join(str(c) for c in view.hand)}")


if __name__ == "__main__":
    main()
