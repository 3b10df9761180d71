"""CLI entry point."""

from __future__ import annotations

import logging
import os
from typing import Optional

import typer
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="Crazy Eights with random and LLM agents")


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get("CRAZYEIGHTS_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_agents(
    agent_specs: str,
    llm_provider: str,
    llm_model: str,
    seed: Optional[int],
) -> dict[str, "AgentProtocol"]:
    from crazyeights.agents import AgentProtocol, LLMAgent, RandomAgent

    parts = [s.strip().lower() for s in agent_specs.split(",") if s.strip()]
    agents: dict[str, AgentProtocol] = {}
    for i, part in enumerate(parts):
        pid = f"player_{i}"
        kind, _, model = part.partition(":")
        if kind == "llm":
            agents[pid] = LLMAgent(provider=llm_provider, model=model or llm_model)
        elif kind == "random":
            agents[pid] = RandomAgent(name=f"Random_{i}", seed=None if seed is None else seed + i)
        else:
            raise typer.BadParameter(f"Unknown agent type: {kind}. Use 'llm' or 'random'.")
    if len(agents) < 2:
        raise typer.BadParameter("At least two agents are needed.")
    return agents


@app.command()
def play(
    agents: str = typer.Option(
        "random,random",
        "--agents",
        "-a",
        help="Comma-separated: random, llm, or llm:model_name (e.g. llm:gpt-4o,random)",
    ),
    llm_provider: str = typer.Option(
        "openrouter",
        "--llm-provider",
        "-p",
        help="LLM provider: openrouter, groq, ollama or huggingface",
    ),
    llm_model: str = typer.Option(
        "openai/gpt-4o-mini",
        "--llm-model",
        "-m",
        help="Model name (e.g. openai/gpt-4o-mini, meta-llama/llama-3-8b-instruct)",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every move"),
) -> None:
    """Run a single game."""
    from crazyeights.orchestration.game_runner import GameRunner

    _configure_logging(verbose)
    agent_map = _parse_agents(agents, llm_provider, llm_model, seed)
    result = GameRunner(agent_map, seed=seed).run()
    if result.stalled:
        typer.echo("Winner: None (deck ran out)")
    else:
        typer.echo(f"Winner: {result.winner or 'None (turn limit)'}")
    typer.echo(f"Turns: {result.num_turns}")


@app.command()
def tournament(
    agents: str = typer.Option(
        "random,random",
        "--agents",
        "-a",
        help="Comma-separated agent types or llm:model_name",
    ),
    games: int = typer.Option(100, "--games", "-g", help="Number of games"),
    llm_provider: str = typer.Option(
        "openrouter",
        "--llm-provider",
        "-p",
        help="LLM provider: openrouter, groq, ollama or huggingface",
    ),
    llm_model: str = typer.Option(
        "openai/gpt-4o-mini",
        "--llm-model",
        "-m",
        help="Model name",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every move"),
) -> None:
    """Run a tournament."""
    from crazyeights.orchestration.tournament import run_tournament

    _configure_logging(verbose)
    agent_map = _parse_agents(agents, llm_provider, llm_model, seed)
    wins = run_tournament(agent_map, num_games=games, seed=seed)
    typer.echo("Tournament results:")
    for pid, w in sorted(wins.items(), key=lambda x: -x[1]):
        typer.echo(f"  {pid}: {w} wins")


if __name__ == "__main__":
    app()
