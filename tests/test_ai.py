"""Tests for the ClassicXO minimax AI."""

import pytest

from classicxo.ai import MinimaxAI, choose_move
from classicxo.game import (
    EMPTY,
    OutcomeKind,
    available_moves,
    check_outcome,
    other_player,
)


def board(text):
    return [EMPTY if c == "." else c for c in text]


def exact_value(cells, engine, to_move):
    """Plain minimax without pruning, used as a reference."""
    outcome = check_outcome(cells)
    if outcome.kind is OutcomeKind.WIN:
        return 10 if outcome.winner == engine else -10
    if outcome.kind is OutcomeKind.DRAW:
        return 0
    scores = []
    for i in available_moves(cells):
        cells[i] = to_move
        scores.append(exact_value(cells, engine, other_player(to_move)))
        cells[i] = EMPTY
    return max(scores) if to_move == engine else min(scores)


def test_ai_prefers_win_over_block():
    assert choose_move(board("XX.OO...."), "X", "O") == 2


def test_ai_blocks_when_no_win():
    assert choose_move(board("...OO...."), "X", "O") == 5


def test_ai_takes_win_regardless_of_threats():
    # O completes 2-5-8 even though X threatens 6.
    assert choose_move(board("X.OX.O..."), "O", "X") == 8


def test_ai_blocks_diagonal():
    assert choose_move(board("X.O.O...."), "X", "O") == 6


def test_ai_does_not_mutate_caller_board():
    cells = board("X...O....")
    snapshot = list(cells)
    choose_move(cells, "X", "O")
    assert cells == snapshot


def test_empty_board_opens_corner_or_center():
    ai = MinimaxAI(player="X")
    move = ai.choose([EMPTY] * 9)
    assert move in (0, 2, 4, 6, 8)
    assert ai.choose([EMPTY] * 9) == move


def test_ai_accepts_tuple_board():
    assert choose_move(tuple(board("XX.OO....")), "X", "O") == 2


def test_default_opponent_is_complement():
    assert MinimaxAI(player="O").opponent == "X"


@pytest.mark.parametrize(
    "text",
    ["XOXXOOOXX", "XXXOO....", "O..O..O.X"],
)
def test_terminal_board_is_rejected(text):
    with pytest.raises(ValueError):
        choose_move(board(text), "X", "O")


@pytest.mark.parametrize(
    "cells, engine, opponent",
    [
        ([EMPTY] * 8, "X", "O"),
        ([EMPTY] * 8 + ["Z"], "X", "O"),
        ([EMPTY] * 9, "X", "X"),
        ([EMPTY] * 9, "X", "Q"),
    ],
)
def test_malformed_input_is_rejected(cells, engine, opponent):
    with pytest.raises(ValueError):
        choose_move(cells, engine, opponent)


@pytest.mark.parametrize(
    "text, engine",
    [
        ("X........", "O"),
        ("....X....", "O"),
        (".X.......", "O"),
        ("X...O...X", "O"),
        ("X....O...", "X"),
        (".X..O....", "X"),
    ],
)
def test_pruned_search_matches_plain_minimax(text, engine):
    cells = board(text)
    opponent = other_player(engine)
    ai = MinimaxAI(player=engine)
    move, score = ai._best_move(list(cells))
    assert score == exact_value(list(cells), engine, engine)
    cells[move] = engine
    assert exact_value(cells, engine, opponent) == score


def test_self_play_is_always_a_draw():
    players = {"X": MinimaxAI(player="X"), "O": MinimaxAI(player="O")}
    cells = [EMPTY] * 9
    to_move = "X"
    while not check_outcome(cells).is_terminal:
        move = players[to_move].choose(cells)
        assert cells[move] == EMPTY
        cells[move] = to_move
        to_move = other_player(to_move)
    assert check_outcome(cells).kind is OutcomeKind.DRAW


def _assert_never_loses(cells, ai, to_move):
    outcome = check_outcome(cells)
    if outcome.is_terminal:
        assert outcome.winner != ai.opponent, "".join(cells)
        return
    if to_move == ai.player:
        move = ai.choose(cells)
        cells[move] = ai.player
        _assert_never_loses(cells, ai, ai.opponent)
        cells[move] = EMPTY
        return
    for i in available_moves(cells):
        cells[i] = to_move
        _assert_never_loses(cells, ai, ai.player)
        cells[i] = EMPTY


def test_never_loses_moving_second():
    ai = MinimaxAI(player="O")
    _assert_never_loses([EMPTY] * 9, ai, "X")


def test_never_loses_moving_first():
    ai = MinimaxAI(player="X")
    _assert_never_loses([EMPTY] * 9, ai, "X")
