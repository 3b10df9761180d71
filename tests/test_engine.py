"""Unit tests for the game engine."""

import copy
from collections import Counter

import pytest
from crazyeights.engine import (
    DECK_SIZE,
    Card,
    Color,
    DrawCard,
    ErrorKind,
    GameConfig,
    GameState,
    GameStatus,
    InvariantViolation,
    PlayCard,
    Player,
    Response,
    apply_action,
    check_invariants,
    create_deck,
    draw,
    full_deck,
    get_legal_actions,
    initialize,
    join,
    play,
    start,
)


def _state(hands: dict, top: Card, turn: int = 0, deck_size=None) -> GameState:
    """Build an in-progress game with fixed hands; unused cards go to the deck."""
    used = Counter([top])
    for hand in hands.values():
        used.update(hand)
    deck = [c for c in full_deck() if c not in used]
    if deck_size is not None:
        # Park the surplus under the top card so all 36 cards stay in play
        pile = [top] + deck[deck_size:]
        deck = deck[:deck_size]
    else:
        pile = [top]
    return GameState(
        status=GameStatus.IN_PROGRESS,
        players=[Player(id=pid, hand=list(hand)) for pid, hand in hands.items()],
        deck=deck,
        pile=pile,
        turn=turn,
    )


def _lobby(*user_ids: str, seed: int = 0) -> GameState:
    state = initialize(GameConfig(seed=seed))
    for uid in user_ids:
        assert join(state, uid).is_ok
    return state


R1, R2, R5 = Card(Color.RED, 1), Card(Color.RED, 2), Card(Color.RED, 5)
G5, G7, B3, B7, Y9 = (
    Card(Color.GREEN, 5),
    Card(Color.GREEN, 7),
    Card(Color.BLUE, 3),
    Card(Color.BLUE, 7),
    Card(Color.YELLOW, 9),
)


def test_card_validation() -> None:
    with pytest.raises(ValueError, match="Invalid card number"):
        Card(Color.RED, 0)
    with pytest.raises(ValueError, match="Invalid card number"):
        Card(Color.RED, 10)
    with pytest.raises(ValueError, match="Invalid card color"):
        Card("purple", 3)
    with pytest.raises(ValueError, match="Invalid card number"):
        Card(Color.RED, 5.0)
    with pytest.raises(ValueError, match="Invalid card number"):
        Card(Color.RED, True)


def test_card_equality_and_match() -> None:
    assert Card(Color.RED, 5) == R5
    assert R5.matches(R1)
    assert R5.matches(G5)
    assert not R5.matches(B7)


def test_card_parse() -> None:
    assert Card.parse("red_5") == R5
    assert Card.parse(str(Y9)) == Y9
    with pytest.raises(ValueError):
        Card.parse("red_10")
    with pytest.raises(ValueError):
        Card.parse("pink_1")


def test_create_deck_size() -> None:
    deck = create_deck(GameConfig(seed=42).make_rng())
    assert len(deck) == DECK_SIZE == 36
    assert Counter(deck) == Counter(full_deck())


def test_create_deck_reproducible() -> None:
    assert initialize(GameConfig(seed=123)).deck == initialize(GameConfig(seed=123)).deck
    assert initialize(GameConfig(seed=1)).deck != initialize(GameConfig(seed=2)).deck


def test_initialize() -> None:
    state = initialize(GameConfig(seed=7))
    assert state.status == GameStatus.INITIALIZED
    assert state.players == []
    assert state.pile == []
    assert state.turn is None
    assert state.winner is None
    check_invariants(state)


def test_join_duplicate() -> None:
    state = _lobby("a")
    resp = join(state, "a")
    assert not resp.is_ok
    assert resp.kind == ErrorKind.DUPLICATE_JOIN
    assert resp.message == "Already joined the game!"
    assert [p.id for p in state.players] == ["a"]


def test_join_after_start_rejected() -> None:
    state = _lobby("a", "b")
    assert start(state, "a").is_ok
    resp = join(state, "c")
    assert resp.kind == ErrorKind.ALREADY_STARTED
    assert len(state.players) == 2


def test_start_single_player() -> None:
    state = _lobby("a")
    before = copy.deepcopy(state)
    resp = start(state, "a")
    assert resp.kind == ErrorKind.NOT_ENOUGH_PLAYERS
    assert resp.message == "Not enough players to start game!"
    assert state == before


@pytest.mark.parametrize("num_players", [2, 3, 5, 8])
def test_start_deals_fairly(num_players: int) -> None:
    state = _lobby(*[f"p{i}" for i in range(num_players)], seed=num_players)
    assert start(state, "p0").is_ok
    assert state.status == GameStatus.IN_PROGRESS
    assert all(len(p.hand) == 4 for p in state.players)
    assert len(state.pile) == 1
    assert len(state.deck) == DECK_SIZE - 4 * num_players - 1
    assert 0 <= state.turn < num_players
    check_invariants(state)


def test_start_deals_from_deck_head() -> None:
    state = _lobby("a", "b", seed=3)
    deck = list(state.deck)
    assert start(state, "a").is_ok
    assert state.players[0].hand == deck[:4]
    assert state.players[1].hand == deck[4:8]
    assert state.pile == [deck[8]]
    assert state.deck == deck[9:]


def test_start_first_turn_is_seeded() -> None:
    turns = set()
    for seed in range(30):
        state = _lobby("a", "b", "c", seed=seed)
        start(state, "a")
        turns.add(state.turn)
    assert turns == {0, 1, 2}

    again = _lobby("a", "b", "c", seed=11)
    start(again, "a")
    state = _lobby("a", "b", "c", seed=11)
    start(state, "a")
    assert again.turn == state.turn


def test_start_too_many_players() -> None:
    state = _lobby(*[f"p{i}" for i in range(9)])
    before = copy.deepcopy(state)
    resp = start(state, "p0")
    assert resp.kind == ErrorKind.TOO_MANY_PLAYERS
    assert state == before


def test_start_twice() -> None:
    state = _lobby("a", "b")
    assert start(state, "a").is_ok
    before = copy.deepcopy(state)
    resp = start(state, "b")
    assert resp.kind == ErrorKind.ALREADY_STARTED
    assert state == before


def test_play_and_draw_before_start() -> None:
    state = _lobby("a", "b")
    assert play(state, "a", PlayCard(card=R1)).kind == ErrorKind.NOT_STARTED
    assert draw(state, "a").message == "Game has not started yet!"


def test_play_matching_card_advances_turn() -> None:
    state = _state({"a": [R1, B3, Y9], "b": [G7, B7]}, top=R5)
    resp = play(state, "a", PlayCard(card=R1))
    assert resp.is_ok
    assert state.pile[0] == R1
    assert len(state.pile) == 2
    assert state.players[0].hand == [B3, Y9]
    assert state.turn == 1
    check_invariants(state)


def test_play_matches_by_number() -> None:
    state = _state({"a": [G5, B3], "b": [G7]}, top=R5)
    assert play(state, "a", PlayCard(card=G5)).is_ok


def test_play_not_your_turn() -> None:
    state = _state({"a": [R1, B3], "b": [R2, B7]}, top=R5)
    before = copy.deepcopy(state)
    resp = play(state, "b", PlayCard(card=R2))
    assert resp.kind == ErrorKind.NOT_YOUR_TURN
    assert resp.message == "Not your turn!"
    assert state == before


def test_play_by_user_who_never_joined() -> None:
    state = _state({"a": [R1, B3], "b": [R2, B7]}, top=R5)
    assert play(state, "mallory", PlayCard(card=R1)).kind == ErrorKind.NOT_YOUR_TURN


def test_play_card_not_in_hand() -> None:
    state = _state({"a": [R1, B3], "b": [R2, B7]}, top=R5)
    before = copy.deepcopy(state)
    resp = play(state, "a", PlayCard(card=R2))
    assert resp.kind == ErrorKind.CARD_NOT_IN_HAND
    assert resp.message == "You don't have this card!"
    assert state == before


def test_play_no_match() -> None:
    state = _state({"a": [R1, B3], "b": [R2, B7]}, top=R5)
    before = copy.deepcopy(state)
    resp = play(state, "a", PlayCard(card=B3))
    assert resp.kind == ErrorKind.NO_MATCH
    assert resp.message == "Card doesn't match the last card on the pile!"
    assert state == before


def test_play_removes_one_duplicate() -> None:
    # Duplicates cannot come out of a real deck, but hand removal is by value
    state = _state({"a": [B3, B3, Y9], "b": [G7]}, top=B7)
    assert play(state, "a", PlayCard(card=B3)).is_ok
    assert state.players[0].hand == [B3, Y9]


def test_play_last_card_wins() -> None:
    state = _state({"a": [R1], "b": [G7, B7]}, top=R5)
    resp = play(state, "a", PlayCard(card=R1))
    assert resp.is_ok
    assert state.status == GameStatus.OVER
    assert state.winner == "a"
    assert state.turn == 0
    check_invariants(state)

    before = copy.deepcopy(state)
    assert play(state, "a", PlayCard(card=R1)).kind == ErrorKind.GAME_OVER
    assert draw(state, "a").message == "Game Over!"
    assert start(state, "a").message == "Game is over! Create a new lobby"
    assert join(state, "c").kind == ErrorKind.GAME_OVER
    assert state == before


def test_draw_advances_turn() -> None:
    state = _state({"a": [R1, B3], "b": [G7]}, top=Y9)
    top_of_deck = state.deck[0]
    resp = draw(state, "a", DrawCard())
    assert resp.is_ok
    assert state.players[0].hand == [R1, B3, top_of_deck]
    assert state.turn == 1
    check_invariants(state)


def test_draw_not_your_turn() -> None:
    state = _state({"a": [R1, B3], "b": [G7]}, top=Y9)
    before = copy.deepcopy(state)
    assert draw(state, "b").kind == ErrorKind.NOT_YOUR_TURN
    assert state == before


def test_draw_empty_deck() -> None:
    state = _state({"a": [R1, B3], "b": [G7]}, top=Y9, deck_size=0)
    before = copy.deepcopy(state)
    resp = draw(state, "a")
    assert resp.kind == ErrorKind.DECK_EMPTY
    assert resp.message == "Deck is empty!"
    assert state == before


def test_two_player_scenario() -> None:
    # b holds nothing red and no 1, and the deck is down to one card
    b_hand = [B7, Card(Color.BLUE, 9), Card(Color.YELLOW, 3), Card(Color.GREEN, 4)]
    state = _state({"a": [R1, B3, Y9, G7], "b": b_hand}, top=R5, deck_size=1)
    check_invariants(state)
    pile_size = len(state.pile)

    assert play(state, "a", PlayCard(card=R1)).is_ok
    assert len(state.pile) == pile_size + 1
    assert len(state.players[0].hand) == 3
    assert state.players[state.turn].id == "b"

    before = copy.deepcopy(state)
    assert play(state, "b", PlayCard(card=B7)).kind == ErrorKind.NO_MATCH
    assert state == before

    assert draw(state, "b").is_ok
    assert draw(state, "b").message == "Deck is empty!"
    check_invariants(state)


def test_turn_wraps_around() -> None:
    state = _state({"a": [R1], "b": [R2], "c": [B3]}, top=R5, turn=2)
    assert draw(state, "c").is_ok
    assert state.turn == 0


def test_get_legal_actions() -> None:
    state = _state({"a": [R1, B3, G5], "b": [G7]}, top=R5)
    actions = get_legal_actions(state, "a")
    assert PlayCard(card=R1) in actions
    assert PlayCard(card=G5) in actions
    assert PlayCard(card=B3) not in actions
    assert DrawCard() in actions
    assert get_legal_actions(state, "b") == []


def test_get_legal_actions_empty_deck() -> None:
    state = _state({"a": [B3], "b": [G7]}, top=R5, deck_size=0)
    assert get_legal_actions(state, "a") == []


def test_apply_action_dispatch() -> None:
    state = _state({"a": [R1, B3], "b": [G7]}, top=R5)
    assert apply_action(state, "a", PlayCard(card=R1)).is_ok
    assert apply_action(state, "b", DrawCard()).is_ok
    with pytest.raises(TypeError):
        apply_action(state, "a", "draw")


def test_check_invariants_detects_lost_card() -> None:
    state = _lobby("a", "b")
    start(state, "a")
    state.deck.pop()
    with pytest.raises(InvariantViolation, match="conservation"):
        check_invariants(state)


def test_check_invariants_detects_winner_mismatch() -> None:
    state = _lobby("a", "b")
    start(state, "a")
    state.winner = "a"
    with pytest.raises(InvariantViolation):
        check_invariants(state)


@pytest.mark.parametrize("seed", range(10))
def test_deck_conservation_over_random_play(seed: int) -> None:
    state = _lobby("a", "b", "c", seed=seed)
    start(state, "b")
    for _ in range(200):
        if state.status == GameStatus.OVER:
            break
        pid = state.players[state.turn].id
        legal = get_legal_actions(state, pid)
        if not legal:
            break
        old_turn = state.turn
        assert apply_action(state, pid, legal[0]).is_ok
        check_invariants(state)
        if state.status != GameStatus.OVER:
            assert state.turn == (old_turn + 1) % 3


def test_operations_return_responses() -> None:
    state = initialize(GameConfig(seed=2))
    assert isinstance(join(state, "a"), Response)
    assert isinstance(start(state, "a"), Response)
    assert [op.__name__ for op in (join, start, play, draw)] == ["join", "start", "play", "draw"]
