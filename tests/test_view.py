"""Unit tests for per-player views."""

import copy

from crazyeights.engine import (
    GameConfig,
    PlayerView,
    initialize,
    join,
    project,
    start,
)


def _started(seed: int = 5):
    state = initialize(GameConfig(seed=seed))
    for uid in ("a", "b", "c"):
        join(state, uid)
    start(state, "a")
    return state


def test_view_before_start() -> None:
    state = initialize(GameConfig(seed=1))
    join(state, "a")
    view = project(state, "a")
    assert view == PlayerView(
        players=["a"],
        hand=[],
        top_of_pile=None,
        turn=None,
        winner=None,
        num_cards_in_deck=36,
    )


def test_view_shows_own_hand_only() -> None:
    state = _started()
    view = project(state, "b")
    assert view.players == ["a", "b", "c"]
    assert view.hand == state.players[1].hand
    assert view.top_of_pile == state.pile[0]
    assert view.turn == state.players[state.turn].id
    assert view.winner is None
    assert view.num_cards_in_deck == len(state.deck)

    exposed = set(vars(view))
    assert exposed == {"players", "hand", "top_of_pile", "turn", "winner", "num_cards_in_deck"}


def test_view_for_non_participant() -> None:
    state = _started()
    view = project(state, "spectator")
    assert view.hand is None
    assert view.players == ["a", "b", "c"]


def test_view_hand_is_a_copy() -> None:
    state = _started()
    view = project(state, "a")
    view.hand.clear()
    assert len(state.players[0].hand) == 4


def test_project_is_side_effect_free() -> None:
    state = _started()
    before = copy.deepcopy(state)
    for uid in ("a", "b", "c", "spectator"):
        project(state, uid)
        project(state, uid)
    assert state == before
