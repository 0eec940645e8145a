"""Exhaustive minimax with alpha-beta pruning for ClassicXO."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import logging
import math

from .game import (
    EMPTY,
    WIN_SCORE,
    WINNING_LINES,
    Player,
    check_outcome,
    evaluate,
    other_player,
    validate_board,
    validate_markers,
)

logger = logging.getLogger(__name__)

NO_MOVE = -1


@dataclass
class MinimaxAI:
    """Unbeatable computer player.

    Move selection, in priority order:
      1. complete one of our own lines if a single cell is missing;
      2. block the opponent's line if a single cell is missing;
      3. full alpha-beta search to the end of the game.

    Steps 1 and 2 are exact fast paths: the search would pick the same
    cells, they just get there without building a tree.

    - MinimaxAI(player="O")
    - choose(cells) -> cell_index
    """

    player: Player
    opponent: Optional[Player] = None
    nodes: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.opponent is None:
            self.opponent = other_player(self.player)
        validate_markers(self.player, self.opponent)

    # ---- public API ----

    def choose(self, cells: Sequence[str]) -> int:
        validate_board(cells)
        if check_outcome(cells).is_terminal:
            raise ValueError("Board is already decided; no move to make")

        # Private working copy; the caller's board is never touched.
        board: List[str] = list(cells)
        self.nodes = 0

        move = self._completing_cell(board, self.player)
        if move is not None:
            logger.debug("%s takes immediate win at %d", self.player, move)
            return move

        move = self._completing_cell(board, self.opponent)
        if move is not None:
            logger.debug("%s blocks %s at %d", self.player, self.opponent, move)
            return move

        move, score = self._best_move(board)
        logger.debug(
            "%s searched %d nodes, plays %d (score %d)",
            self.player,
            self.nodes,
            move,
            score,
        )
        return move

    # ---- fast paths ----

    def _completing_cell(self, board: List[str], player: Player) -> Optional[int]:
        for a, b, c in WINNING_LINES:
            trio = [board[a], board[b], board[c]]
            if trio.count(player) == 2 and trio.count(EMPTY) == 1:
                return (a, b, c)[trio.index(EMPTY)]
        return None

    # ---- core search ----

    def _best_move(self, board: List[str]) -> Tuple[int, float]:
        best_score = -math.inf
        best_move = NO_MOVE
        for i in range(9):
            if board[i] != EMPTY:
                continue
            board[i] = self.player
            try:
                score = self._minimax(board, 0, False, -math.inf, math.inf)
            finally:
                board[i] = EMPTY
            # Strict comparison: the lowest index wins a tie.
            if score > best_score:
                best_score, best_move = score, i
        return best_move, best_score

    def _minimax(
        self,
        board: List[str],
        depth: int,
        maximizing: bool,
        alpha: float,
        beta: float,
    ) -> float:
        self.nodes += 1

        # Terminal: win, loss or full board. Depth does not bias the score.
        score = evaluate(board, self.player, self.opponent)
        if score in (WIN_SCORE, -WIN_SCORE) or EMPTY not in board:
            return score

        if maximizing:
            best = -math.inf
            for i in range(9):
                if board[i] != EMPTY:
                    continue
                board[i] = self.player
                try:
                    best = max(
                        best, self._minimax(board, depth + 1, False, alpha, beta)
                    )
                finally:
                    board[i] = EMPTY
                alpha = max(alpha, best)
                if beta <= alpha:
                    break
            return best

        best = math.inf
        for i in range(9):
            if board[i] != EMPTY:
                continue
            board[i] = self.opponent
            try:
                best = min(
                    best, self._minimax(board, depth + 1, True, alpha, beta)
                )
            finally:
                board[i] = EMPTY
            beta = min(beta, best)
            if beta <= alpha:
                break
        return best


def choose_move(cells: Sequence[str], engine: Player, opponent: Player) -> int:
    """Return the cell ``engine`` should play on ``cells``.

    Raises ``ValueError`` if the board is malformed, already won or full,
    or the markers are not a distinct X/O pair.
    """
    return MinimaxAI(player=engine, opponent=opponent).choose(cells)
