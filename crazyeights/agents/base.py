"""What the game runner expects from a player agent."""

from typing import Protocol, runtime_checkable

from crazyeights.engine import Action, DrawCard, PlayerView


@runtime_checkable
class AgentProtocol(Protocol):
    """A seat at the table.

    Agents only ever see a PlayerView, never the full GameState.
    """

    @property
    def name(self) -> str:
        ...

    def get_action(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        """Pick one of ``legal_actions``. Returning None means draw."""
        ...


def fallback_action(legal_actions: list[Action]) -> Action | None:
    """Draw if drawing is legal, otherwise take the first legal action."""
    for action in legal_actions:
        if isinstance(action, DrawCard):
            return action
    return legal_actions[0] if legal_actions else None
