"""Core rules for ClassicXO (3x3 tic-tac-toe)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = " "
PLAYERS: Tuple[Player, Player] = ("X", "O")

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

WIN_SCORE = 10


# ---------- Outcome ----------


class OutcomeKind(str, Enum):
    NONE = "none"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind is not OutcomeKind.NONE


NO_OUTCOME = Outcome(OutcomeKind.NONE)
DRAW = Outcome(OutcomeKind.DRAW)


# ---------- Pure board queries ----------


def other_player(player: Player) -> Player:
    if player not in PLAYERS:
        raise ValueError(f"Unknown marker {player!r}")
    return "O" if player == "X" else "X"


def validate_markers(engine: Player, opponent: Player) -> None:
    if engine not in PLAYERS or opponent not in PLAYERS:
        raise ValueError("Markers must be 'X' or 'O'")
    if engine == opponent:
        raise ValueError("Markers must differ")


def validate_board(cells: Sequence[str]) -> None:
    if len(cells) != 9:
        raise ValueError(f"Board must have 9 cells, got {len(cells)}")
    for c in cells:
        if c != EMPTY and c not in PLAYERS:
            raise ValueError(f"Invalid cell value {c!r}")


def available_moves(cells: Sequence[str]) -> List[int]:
    """Empty cell indices in ascending order."""
    return [i for i, c in enumerate(cells) if c == EMPTY]


def check_outcome(cells: Sequence[str]) -> Outcome:
    """
    Resolve the board: the first fully owned win line decides the winner,
    otherwise a full board is a draw and anything else is still open.
    """
    for line in WINNING_LINES:
        a, b, c = line
        v = cells[a]
        if v != EMPTY and v == cells[b] == cells[c]:
            return Outcome(OutcomeKind.WIN, winner=v, line=line)
    if EMPTY not in cells:
        return DRAW
    return NO_OUTCOME


def evaluate(cells: Sequence[str], engine: Player, opponent: Player) -> int:
    """+10 if ``engine`` has won, -10 if ``opponent`` has, 0 otherwise.

    The score is not scaled by depth: a fast win and a slow win are worth
    the same.
    """
    outcome = check_outcome(cells)
    if outcome.winner == engine:
        return WIN_SCORE
    if outcome.winner == opponent:
        return -WIN_SCORE
    return 0


# ---------- Game session ----------


class GamePhase(str, Enum):
    SYMBOL_SELECTION = "symbol_selection"
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass
class TicTacToeGame:
    """Authoritative board and turn state for one human-vs-computer game.

    The human always moves first, whichever symbol they pick.
    """

    cells: List[str] = field(default_factory=lambda: [EMPTY] * 9)
    player_symbol: Optional[Player] = None
    ai_symbol: Optional[Player] = None
    current_player: Optional[Player] = None
    phase: GamePhase = GamePhase.SYMBOL_SELECTION
    winner: Optional[Player] = None
    winning_line: Optional[Tuple[int, int, int]] = None

    @property
    def drawn(self) -> bool:
        return self.phase is GamePhase.DRAW

    @property
    def finished(self) -> bool:
        return self.phase in (GamePhase.WON, GamePhase.DRAW)

    def choose_symbol(self, symbol: Player) -> None:
        if self.phase is not GamePhase.SYMBOL_SELECTION:
            raise ValueError("Symbol already chosen")
        ai_symbol = other_player(symbol)
        self.player_symbol = symbol
        self.ai_symbol = ai_symbol
        self.current_player = symbol
        self.phase = GamePhase.IN_PROGRESS

    def available_moves(self) -> List[int]:
        if self.phase is not GamePhase.IN_PROGRESS:
            return []
        return available_moves(self.cells)

    def play_move(self, player: Player, idx: int) -> None:
        """Place ``player`` at ``idx``, resolve the outcome and pass the turn."""
        if self.phase is GamePhase.SYMBOL_SELECTION:
            raise ValueError("Choose a symbol first")
        if self.finished:
            raise ValueError("Game already finished")
        if player != self.current_player:
            raise ValueError("It is not this player's turn")
        if not 0 <= idx < 9:
            raise ValueError(f"Cell index {idx} out of range")
        if self.cells[idx] != EMPTY:
            raise ValueError("Cell already occupied")

        self.cells[idx] = player
        self._update_state()
        if not self.finished:
            self.current_player = other_player(player)

    def outcome(self) -> Outcome:
        return check_outcome(self.cells)

    def reset(self) -> None:
        """Clear the board and go back to symbol selection."""
        self.cells = [EMPTY] * 9
        self.player_symbol = None
        self.ai_symbol = None
        self.current_player = None
        self.phase = GamePhase.SYMBOL_SELECTION
        self.winner = None
        self.winning_line = None

    # ---- helpers ----

    def _update_state(self) -> None:
        outcome = check_outcome(self.cells)
        if outcome.kind is OutcomeKind.WIN:
            self.phase = GamePhase.WON
            self.winner = outcome.winner
            self.winning_line = outcome.line
        elif outcome.kind is OutcomeKind.DRAW:
            self.phase = GamePhase.DRAW
