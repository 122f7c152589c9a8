"""FastAPI-powered web UI for playing Tic-Tac-Toe in the browser."""

from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import threading

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import MinimaxAI
from .game import (
    GameState,
    IllegalMove,
    Status,
    apply_human_move,
    new_game,
    resolve_ai_turn,
    reset,
    set_ai_mode,
)
from .rules import empty_cells, other_mark

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and its AI opponent."""

    state: GameState
    ai: MinimaxAI
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    # Bumped on every reset so deferred AI moves can spot a replaced game
    epoch: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-Tac-Toe with an unbeatable AI")


AI_THINK_DELAY: float = float(os.environ.get("TICTACTOE_AI_DELAY", "0.5"))


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    ai_mode: bool = Field(default=False, alias="aiMode")


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    index: int = Field(description="Cell index 0-8, row-major")


class AiModeRequest(BaseModel):
    """Request payload for switching AI mode."""

    enabled: bool


def _create_session(ai_mode: bool) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    state = new_game(ai_enabled=ai_mode)
    ai = MinimaxAI(player=state.ai_mark, opponent=other_mark(state.ai_mark))
    session = GameSession(state=state, ai=ai)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s (ai mode %s)", session_id, ai_mode)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str, epoch: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        if session.epoch != epoch:
            logger.info("Dropping stale AI move for game %s", game_id)
            return
        state = session.state
        if not state.ai_pending:
            return
        session.state = resolve_ai_turn(state, session.ai)
        if session.state.move_count > state.move_count:
            session.move_log.append(
                {"player": state.ai_mark, "index": session.state.last_move}
            )


def _status_message(state: GameState) -> Optional[str]:
    if state.outcome.status is Status.WON:
        return f"Congratulations, Winner is {state.outcome.winner}"
    if state.outcome.status is Status.DRAW:
        return "Game was a Draw."
    return None


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = session.state
        playable = not state.outcome.is_terminal and not state.ai_pending
        payload: Dict[str, object] = {
            "id": game_id,
            "board": list(state.board),
            "activeMark": state.active_mark,
            "moveCount": state.move_count,
            "status": state.outcome.status.value,
            "winner": state.outcome.winner,
            "drawn": state.outcome.status is Status.DRAW,
            "aiMode": state.ai_enabled,
            "aiMark": state.ai_mark,
            "aiPending": state.ai_pending,
            "legalMoves": empty_cells(state.board) if playable else [],
            "moveLog": list(session.move_log),
            "message": _status_message(state),
        }
        if session.move_log:
            payload["lastMove"] = session.move_log[-1]
        return payload


def _apply_player_move(
    game_id: str,
    session: GameSession,
    index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        player = session.state.active_mark
        try:
            session.state = apply_human_move(session.state, index)
        except IllegalMove as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "index": index})
        should_schedule_ai = session.state.ai_pending
        epoch = session.epoch

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id, epoch)


def _restart_session(session: GameSession, state: GameState) -> None:
    with session.lock:
        session.epoch += 1
        session.state = state
        session.move_log.clear()


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.ai_mode)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    _restart_session(session, reset(session.state))
    logger.info("Reset game %s", game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/ai-mode")
def toggle_ai_mode(game_id: str, request: AiModeRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _restart_session(session, set_ai_mode(request.enabled))
    logger.info("Game %s ai mode set to %s", game_id, request.enabled)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        flex-direction: column;
        align-items: center;
        justify-content: center;
        background: #548687;
        color: #fff;
      }
      h1 {
        margin: 0 0 1rem;
      }
      .grid {
        display: grid;
        grid-template-columns: repeat(3, 6rem);
        gap: 0.75rem;
      }
      .cell {
        width: 6rem;
        height: 6rem;
        border: none;
        border-radius: 1rem;
        font-size: 3rem;
        font-weight: 700;
        background: #ffffc7;
        color: #b0413e;
        box-shadow: 0 0 1rem rgba(0, 0, 0, 0.3);
        cursor: pointer;
      }
      .cell.o {
        color: #0a0a0a;
      }
      .cell:disabled {
        cursor: default;
      }
      .mode,
      .reset,
      .new-game {
        margin: 1rem 0;
        padding: 0.75rem 1.5rem;
        font-size: 1rem;
        border: none;
        border-radius: 0.5rem;
        color: #fff;
        cursor: pointer;
        background: #191913;
      }
      .mode {
        background: #2196f3;
      }
      .mode.on {
        background: #4caf50;
      }
      .banner {
        display: flex;
        flex-direction: column;
        align-items: center;
        font-size: 2rem;
      }
      .hidden {
        display: none;
      }
    </style>
  </head>
  <body>
    <div class=\"banner hidden\" id=\"banner\">
      <p id=\"message\"></p>
      <button class=\"new-game\" id=\"new-game\">New Game</button>
    </div>
    <button class=\"mode\" id=\"mode\">AI Mode: OFF</button>
    <h1>Tic Tac Toe</h1>
    <div class=\"grid\" id=\"grid\"></div>
    <p id=\"error\"></p>
    <button class=\"reset\" id=\"reset\">Reset Game</button>
    <script>
      const gridEl = document.getElementById('grid');
      const bannerEl = document.getElementById('banner');
      const messageEl = document.getElementById('message');
      const errorEl = document.getElementById('error');
      const modeButton = document.getElementById('mode');
      let gameState = null;
      let aiPollHandle = null;

      const cells = [];
      for (let i = 0; i < 9; i++) {
        const cell = document.createElement('button');
        cell.classList.add('cell');
        cell.addEventListener('click', () => sendMove(i));
        gridEl.appendChild(cell);
        cells.push(cell);
      }

      function stopAiPolling() {
        if (aiPollHandle !== null) {
          clearTimeout(aiPollHandle);
          aiPollHandle = null;
        }
      }

      function ensureAiPolling() {
        if (aiPollHandle !== null) return;
        aiPollHandle = window.setTimeout(pollAiState, 250);
      }

      function render() {
        const legal = new Set(gameState ? gameState.legalMoves : []);
        cells.forEach((cell, i) => {
          const value = gameState ? gameState.board[i] : '';
          cell.textContent = value;
          cell.classList.toggle('o', value === 'O');
          cell.disabled = !legal.has(i);
        });
        const aiMode = gameState && gameState.aiMode;
        modeButton.textContent = aiMode ? 'AI Mode: ON' : 'AI Mode: OFF';
        modeButton.classList.toggle('on', Boolean(aiMode));
        if (gameState && gameState.message) {
          messageEl.textContent = gameState.message;
          bannerEl.classList.remove('hidden');
        } else {
          bannerEl.classList.add('hidden');
        }
      }

      function setState(data) {
        gameState = data;
        errorEl.textContent = '';
        render();
        if (gameState.aiPending) {
          ensureAiPolling();
        } else {
          stopAiPolling();
        }
      }

      async function post(url, body) {
        const response = await fetch(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {}),
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          throw new Error(payload?.detail || 'Request failed');
        }
        return payload;
      }

      async function startGame(aiMode) {
        stopAiPolling();
        setState(await post('/api/game', { aiMode }));
      }

      async function pollAiState() {
        aiPollHandle = null;
        if (!gameState) return;
        try {
          const response = await fetch(`/api/game/${gameState.id}`);
          if (response.ok) {
            setState(await response.json());
          }
        } catch (error) {
          console.error('Polling failed', error);
          ensureAiPolling();
        }
      }

      async function sendMove(index) {
        if (!gameState) return;
        try {
          setState(await post(`/api/game/${gameState.id}/move`, { index }));
        } catch (error) {
          errorEl.textContent = error.message;
        }
      }

      async function resetGame() {
        if (!gameState) return;
        stopAiPolling();
        setState(await post(`/api/game/${gameState.id}/reset`));
      }

      modeButton.addEventListener('click', async () => {
        if (!gameState) return;
        stopAiPolling();
        const enabled = !gameState.aiMode;
        setState(await post(`/api/game/${gameState.id}/ai-mode`, { enabled }));
      });
      document.getElementById('reset').addEventListener('click', resetGame);
      document.getElementById('new-game').addEventListener('click', resetGame);

      startGame(false);
    </script>
  </body>
</html>
"""
