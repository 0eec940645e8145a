"""FastAPI-powered web UI for playing ClassicXO against the computer."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import MinimaxAI
from .game import EMPTY, GamePhase, TicTacToeGame

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and its computer opponent."""

    game: TicTacToeGame
    ai: Optional[MinimaxAI] = None
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="ClassicXO", description="Tic-tac-toe against an unbeatable AI")


AI_THINK_DELAY: Tuple[float, float] = (0.5, 0.5)

Symbol = Literal["X", "O"]


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    player_symbol: Optional[Symbol] = Field(
        default=None,
        alias="playerSymbol",
        description="Symbol for the human; omit to pick it later",
    )


class SymbolRequest(BaseModel):
    symbol: Symbol


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _start(session: GameSession, symbol: str) -> None:
    try:
        session.game.choose_symbol(symbol)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    session.ai = MinimaxAI(player=session.game.ai_symbol)
    logger.info("Human plays %s, computer plays %s", symbol, session.ai.player)


def _create_session(symbol: Optional[str]) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(game=TicTacToeGame())
    if symbol is not None:
        _start(session, symbol)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _log_if_finished(game_id: str, game: TicTacToeGame) -> None:
    if game.phase is GamePhase.WON:
        logger.info("Game %s won by %s", game_id, game.winner)
    elif game.phase is GamePhase.DRAW:
        logger.info("Game %s drawn", game_id)


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if not session.ai:
                return
            game = session.game
            if game.phase is not GamePhase.IN_PROGRESS:
                return
            if game.current_player != session.ai.player:
                return
            cell_index = session.ai.choose(game.cells)
            game.play_move(session.ai.player, cell_index)
            session.move_log.append(
                {"player": session.ai.player, "cellIndex": cell_index}
            )
            _log_if_finished(game_id, game)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "phase": game.phase.value,
            "board": [c if c != EMPTY else "" for c in game.cells],
            "playerSymbol": game.player_symbol,
            "aiSymbol": game.ai_symbol,
            "currentPlayer": game.current_player,
            "winner": game.winner,
            "drawn": game.drawn,
            "winningLine": list(game.winning_line) if game.winning_line else None,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        player = game.player_symbol
        try:
            game.play_move(player, cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "cellIndex": cell_index})
        _log_if_finished(game_id, game)

        should_schedule_ai = (
            session.ai is not None
            and game.phase is GamePhase.IN_PROGRESS
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.player_symbol)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/symbol")
def choose_symbol(game_id: str, request: SymbolRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        _start(session, request.symbol)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        session.game.reset()
        session.ai = None
        session.move_log.clear()
    logger.info("Reset game %s", game_id)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>ClassicXO</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: center;
        background: #f3f4f6;
        color: #1f2937;
      }
      main {
        background: #fff;
        border-radius: 12px;
        box-shadow: 0 10px 25px rgba(0, 0, 0, 0.12);
        padding: 1.5rem;
        width: min(420px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        font-size: 2rem;
      }
      button {
        font: inherit;
        cursor: pointer;
      }
      .choice button,
      #restart {
        padding: 0.75rem 1.5rem;
        margin: 0 0.5rem;
        border: none;
        border-radius: 8px;
        background: #14b8a6;
        color: #fff;
      }
      .choice button:hover,
      #restart:hover {
        background: #0d9488;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.75rem;
        background: #e5e7eb;
        padding: 1rem;
        border-radius: 8px;
      }
      .cell {
        aspect-ratio: 1;
        font-size: 2.25rem;
        font-weight: 700;
        background: #fff;
        border: 2px solid #9ca3af;
        border-radius: 8px;
      }
      .cell:disabled {
        opacity: 0.6;
        cursor: default;
      }
      .cell.win {
        background: #ccfbf1;
      }
      #status {
        min-height: 1.5rem;
        margin: 1rem 0;
        font-weight: 600;
      }
      [hidden] {
        display: none !important;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <section class=\"choice\" id=\"choice\">
        <h2>Choose your symbol</h2>
        <button data-symbol=\"X\">X</button>
        <button data-symbol=\"O\">O</button>
      </section>
      <section id=\"play\" hidden>
        <div class=\"board\" id=\"board\"></div>
        <p id=\"status\"></p>
        <button id=\"restart\" hidden>Restart Game</button>
      </section>
    </main>
    <script>
      const choiceEl = document.getElementById('choice');
      const playEl = document.getElementById('play');
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const restartButton = document.getElementById('restart');
      let gameState = null;
      let pollTimer = null;

      async function api(path, body) {
        const options = body === undefined
          ? {}
          : { method: 'POST', headers: { 'Content-Type': 'application/json' }, body: JSON.stringify(body) };
        const response = await fetch(path, options);
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || 'Request failed');
        }
        return payload;
      }

      function render() {
        const selecting = !gameState || gameState.phase === 'symbol_selection';
        choiceEl.hidden = !selecting;
        playEl.hidden = selecting;
        if (selecting) {
          return;
        }
        const playable = new Set(gameState.availableMoves);
        const myTurn = gameState.currentPlayer === gameState.playerSymbol && !gameState.aiPending;
        const winning = new Set(gameState.winningLine || []);
        boardEl.innerHTML = '';
        gameState.board.forEach((cell, index) => {
          const button = document.createElement('button');
          button.className = 'cell' + (winning.has(index) ? ' win' : '');
          button.textContent = cell;
          button.disabled = !myTurn || !playable.has(index);
          button.addEventListener('click', () => play(index));
          boardEl.appendChild(button);
        });
        if (gameState.phase === 'won') {
          statusEl.textContent = `${gameState.winner} Wins!`;
        } else if (gameState.phase === 'draw') {
          statusEl.textContent = \"It's a Draw!\";
        } else if (myTurn) {
          statusEl.textContent = `Your move (${gameState.playerSymbol})`;
        } else {
          statusEl.textContent = 'Computer is thinking...';
        }
        restartButton.hidden = gameState.phase === 'in_progress';
      }

      function schedulePoll() {
        clearTimeout(pollTimer);
        if (gameState && gameState.aiPending) {
          pollTimer = setTimeout(async () => {
            gameState = await api(`/api/game/${gameState.id}`);
            render();
            schedulePoll();
          }, 200);
        }
      }

      async function start(symbol) {
        gameState = gameState
          ? await api(`/api/game/${gameState.id}/symbol`, { symbol })
          : await api('/api/game', { playerSymbol: symbol });
        render();
      }

      async function play(index) {
        try {
          gameState = await api(`/api/game/${gameState.id}/move`, { cellIndex: index });
        } catch (error) {
          statusEl.textContent = error.message;
          return;
        }
        render();
        schedulePoll();
      }

      async function restart() {
        gameState = await api(`/api/game/${gameState.id}/reset`, {});
        render();
      }

      choiceEl.querySelectorAll('button').forEach((button) => {
        button.addEventListener('click', () => start(button.dataset.symbol));
      });
      restartButton.addEventListener('click', restart);
      render();
    </script>
  </body>
</html>
"""
