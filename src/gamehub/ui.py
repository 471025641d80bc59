"""FastAPI-powered web UI for the GameHub menu, Tic-Tac-Toe and Memory Match."""

from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .engine import Difficulty
from .game import TicTacToeGame
from .memory import MATCH, MemoryGame, format_time

logger = logging.getLogger(__name__)

BOT_THINK_DELAY = float(os.environ.get("GAMEHUB_BOT_DELAY", "0.3"))
MATCH_DELAY = 0.35
MISMATCH_DELAY = 0.85

GAMES: List[Dict[str, object]] = [
    {
        "key": "tictactoe",
        "title": "Tic-Tac-Toe",
        "subtitle": "Classic X-O",
        "emoji": "🎮",
        "ready": True,
    },
    {
        "key": "memory",
        "title": "Memory Match",
        "subtitle": "Match the cards",
        "emoji": "🧠",
        "ready": True,
    },
    {"key": "reaction", "title": "Reaction Tap", "subtitle": "Tap fast", "emoji": "⚡", "ready": False},
    {"key": "snake", "title": "Snake", "subtitle": "Retro grid", "emoji": "🐍", "ready": False},
]


@dataclass
class TicTacToeSession:
    """Container for an active Tic-Tac-Toe game and its pending bot move."""

    game: TicTacToeGame
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    bot_pending: bool = False
    # Bumped on reset so a bot move scheduled for the old board is dropped.
    generation: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


@dataclass
class MemorySession:
    game: MemoryGame
    settle_pending: bool = False
    generation: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


TICTACTOE_SESSIONS: Dict[str, TicTacToeSession] = {}
MEMORY_SESSIONS: Dict[str, MemorySession] = {}
app = FastAPI(title="GameHub", description="Casual games played in the browser")


class NewTicTacToeRequest(BaseModel):
    """Request payload for starting a new Tic-Tac-Toe session."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty = Difficulty.HARD
    vs_bot: bool = Field(default=True, alias="vsBot")


class MoveRequest(BaseModel):
    cell: int = Field(ge=0, le=8)


class DifficultyRequest(BaseModel):
    """Set a difficulty, or cycle to the next one when omitted."""

    difficulty: Optional[Difficulty] = None


class VsBotRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vs_bot: bool = Field(alias="vsBot")


class ResetRequest(BaseModel):
    scores: bool = False


class NewMemoryRequest(BaseModel):
    difficulty: Difficulty = Difficulty.MEDIUM


class RestartMemoryRequest(BaseModel):
    """Restart with a new deck; keeps the current difficulty when omitted."""

    difficulty: Optional[Difficulty] = None


class FlipRequest(BaseModel):
    index: int = Field(ge=0)


# ---------- Tic-Tac-Toe ----------


def _get_tictactoe(game_id: str) -> TicTacToeSession:
    try:
        return TICTACTOE_SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_bot_turn(game_id: str, generation: int) -> None:
    session = TICTACTOE_SESSIONS.get(game_id)
    if not session:
        return
    time.sleep(max(0.0, BOT_THINK_DELAY))
    with session.lock:
        if session.generation != generation:
            return
        try:
            game = session.game
            if not game.bot_should_move():
                return
            player = game.turn
            cell = game.play_bot_move()
            if cell is None:
                return
            session.move_log.append({"player": player, "cell": cell})
            logger.info(
                "bot %s played %d in game %s (%s)",
                player,
                cell,
                game_id,
                game.difficulty.value,
            )
        finally:
            session.bot_pending = False


def _serialize_tictactoe(game_id: str, session: TicTacToeSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        result = game.result
        state: Dict[str, object] = {
            "id": game_id,
            "board": [c if c in ("X", "O") else "" for c in game.board],
            "turn": game.turn,
            "difficulty": game.difficulty.value,
            "vsBot": game.vs_bot,
            "status": result.status,
            "winner": result.winner,
            "winningLine": result.line,
            "winningCells": list(result.cells) if result.cells else None,
            "scores": game.scores(),
            "botPending": session.bot_pending,
            "moveLog": list(session.move_log),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: TicTacToeSession,
    cell: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_bot = False
    with session.lock:
        game = session.game
        if game.result.finished:
            raise HTTPException(status_code=400, detail="Game already finished")
        if session.bot_pending or game.bot_should_move():
            raise HTTPException(status_code=400, detail="Bot is completing its move")

        player = game.turn
        try:
            game.play(cell)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        session.move_log.append({"player": player, "cell": cell})

        should_schedule_bot = game.bot_should_move()
        if should_schedule_bot:
            session.bot_pending = True
        generation = session.generation

    if should_schedule_bot and background_tasks is not None:
        background_tasks.add_task(_run_bot_turn, game_id, generation)


@app.get("/api/games")
def list_games() -> List[Dict[str, object]]:
    return GAMES


@app.post("/api/tictactoe")
def create_tictactoe(request: NewTicTacToeRequest) -> Dict[str, object]:
    game = TicTacToeGame(difficulty=request.difficulty, vs_bot=request.vs_bot)
    game_id = uuid.uuid4().hex
    session = TicTacToeSession(game=game)
    TICTACTOE_SESSIONS[game_id] = session
    logger.info(
        "new tic-tac-toe game %s (difficulty=%s, vs_bot=%s)",
        game_id,
        game.difficulty.value,
        game.vs_bot,
    )
    return _serialize_tictactoe(game_id, session)


@app.get("/api/tictactoe/{game_id}")
def get_tictactoe(game_id: str) -> Dict[str, object]:
    session = _get_tictactoe(game_id)
    return _serialize_tictactoe(game_id, session)


@app.post("/api/tictactoe/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_tictactoe(game_id)
    _apply_player_move(game_id, session, request.cell, background_tasks)
    return _serialize_tictactoe(game_id, session)


@app.post("/api/tictactoe/{game_id}/difficulty")
def change_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_tictactoe(game_id)
    with session.lock:
        if request.difficulty is None:
            session.game.cycle_difficulty()
        else:
            session.game.set_difficulty(request.difficulty)
    return _serialize_tictactoe(game_id, session)


@app.post("/api/tictactoe/{game_id}/vs-bot")
def toggle_vs_bot(
    game_id: str, request: VsBotRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_tictactoe(game_id)
    with session.lock:
        session.game.set_vs_bot(request.vs_bot)
        # Switching the bot on while it is O's turn hands the move to the bot.
        if not session.bot_pending and session.game.bot_should_move():
            session.bot_pending = True
            background_tasks.add_task(_run_bot_turn, game_id, session.generation)
    return _serialize_tictactoe(game_id, session)


@app.post("/api/tictactoe/{game_id}/reset")
def reset_tictactoe(game_id: str, request: ResetRequest) -> Dict[str, object]:
    session = _get_tictactoe(game_id)
    with session.lock:
        if request.scores:
            session.game.reset_all()
        else:
            session.game.reset_board()
        session.move_log.clear()
        session.bot_pending = False
        session.generation += 1
    return _serialize_tictactoe(game_id, session)


# ---------- Memory Match ----------


def _get_memory(game_id: str) -> MemorySession:
    try:
        return MEMORY_SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_settle(game_id: str, generation: int, delay: float) -> None:
    session = MEMORY_SESSIONS.get(game_id)
    if not session:
        return
    time.sleep(max(0.0, delay))
    with session.lock:
        if session.generation != generation:
            return
        try:
            session.game.settle()
        finally:
            session.settle_pending = False


def _serialize_memory(game_id: str, session: MemorySession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        config = game.config
        cards = []
        for index, card in enumerate(game.deck):
            face_up = game.is_face_up(index)
            cards.append(
                {
                    "id": card.id,
                    "symbol": card.symbol if face_up else None,
                    "faceUp": face_up,
                    "matched": card.matched,
                }
            )
        elapsed = game.elapsed_seconds
        return {
            "id": game_id,
            "difficulty": game.difficulty.value,
            "rows": config.rows,
            "cols": config.cols,
            "cards": cards,
            "moves": game.moves,
            "elapsed": elapsed,
            "elapsedText": format_time(elapsed),
            "locked": game.locked,
            "finished": game.all_matched,
        }


@app.post("/api/memory")
def create_memory(request: NewMemoryRequest) -> Dict[str, object]:
    game_id = uuid.uuid4().hex
    session = MemorySession(game=MemoryGame(difficulty=request.difficulty))
    MEMORY_SESSIONS[game_id] = session
    logger.info("new memory game %s (difficulty=%s)", game_id, request.difficulty.value)
    return _serialize_memory(game_id, session)


@app.get("/api/memory/{game_id}")
def get_memory(game_id: str) -> Dict[str, object]:
    session = _get_memory(game_id)
    return _serialize_memory(game_id, session)


@app.post("/api/memory/{game_id}/flip")
def flip_card(
    game_id: str, request: FlipRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_memory(game_id)
    with session.lock:
        try:
            session.game.flip(request.index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        outcome = session.game.pending_outcome
        if outcome and not session.settle_pending:
            session.settle_pending = True
            delay = MATCH_DELAY if outcome == MATCH else MISMATCH_DELAY
            background_tasks.add_task(_run_settle, game_id, session.generation, delay)
    return _serialize_memory(game_id, session)


@app.post("/api/memory/{game_id}/new")
def restart_memory(game_id: str, request: RestartMemoryRequest) -> Dict[str, object]:
    session = _get_memory(game_id)
    with session.lock:
        session.game.new_game(request.difficulty)
        session.settle_pending = False
        session.generation += 1
    return _serialize_memory(game_id, session)


@app.post("/api/memory/{game_id}/difficulty")
def change_memory_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_memory(game_id)
    with session.lock:
        if request.difficulty is None:
            session.game.cycle_difficulty()
        else:
            session.game.new_game(request.difficulty)
        session.settle_pending = False
        session.generation += 1
    return _serialize_memory(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>GameHub</title>
    <style>
      :root {
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        background: #f6f7fb;
        color: #111827;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem;
      }
      @media (prefers-color-scheme: dark) {
        body { background: #0b0f14; color: #e5e7eb; }
        .card, .cell, .mem { background: #111827; border-color: #1f2937; }
      }
      main { width: min(420px, 100%); }
      h1 { text-align: center; }
      .menu { display: grid; grid-template-columns: 1fr 1fr; gap: 0.75rem; }
      .card {
        background: white;
        border: 1px solid #e5e7eb;
        border-radius: 16px;
        padding: 1rem;
        text-align: center;
        cursor: pointer;
      }
      .card.soon { opacity: 0.6; cursor: default; }
      .emoji { font-size: 2rem; }
      .board { display: grid; grid-template-columns: repeat(3, 1fr); gap: 4px; margin: 1rem 0; }
      .cell {
        aspect-ratio: 1;
        font-size: 2.5rem;
        font-weight: 800;
        border: 1px solid #e5e7eb;
        background: white;
        border-radius: 8px;
      }
      .cell.win { background: #fde68a; }
      .mem-board { display: grid; gap: 8px; margin: 1rem 0; }
      .mem {
        aspect-ratio: 1;
        font-size: 1.8rem;
        border: 1px solid #e5e7eb;
        background: #e9eef7;
        border-radius: 10px;
      }
      .mem.up { background: #fefefe; }
      .mem.matched { background: #ddf7e7; }
      .row { display: flex; justify-content: space-between; align-items: center; gap: 0.5rem; }
      button.pill { border-radius: 999px; padding: 0.4rem 0.9rem; border: 1px solid #e5e7eb; }
      .hidden { display: none; }
    </style>
  </head>
  <body>
    <main>
      <section id=\"home\">
        <h1>Pick a game</h1>
        <div class=\"menu\" id=\"menu\"></div>
      </section>

      <section id=\"tictactoe\" class=\"hidden\">
        <div class=\"row\">
          <button class=\"pill\" data-back>&larr; Back</button>
          <label><input type=\"checkbox\" id=\"vs-bot\" checked /> VS Bot</label>
          <button class=\"pill\" id=\"ttt-difficulty\">Hard</button>
        </div>
        <p class=\"row\" id=\"ttt-scores\"></p>
        <div class=\"board\" id=\"ttt-board\"></div>
        <p id=\"ttt-status\"></p>
        <div class=\"row\">
          <button class=\"pill\" id=\"ttt-again\">Play again</button>
          <button class=\"pill\" id=\"ttt-reset\">Reset score</button>
        </div>
      </section>

      <section id=\"memory\" class=\"hidden\">
        <div class=\"row\">
          <button class=\"pill\" data-back>&larr; Back</button>
          <button class=\"pill\" id=\"mem-difficulty\">Medium</button>
          <span id=\"mem-stats\"></span>
        </div>
        <div class=\"mem-board\" id=\"mem-board\"></div>
        <p id=\"mem-status\"></p>
        <button class=\"pill\" id=\"mem-again\">Play again</button>
      </section>
    </main>
    <script>
      let ttt = null;
      let mem = null;
      let timer = null;

      async function api(path, body) {
        const options = body === undefined
          ? {}
          : { method: 'POST', headers: { 'Content-Type': 'application/json' }, body: JSON.stringify(body) };
        const response = await fetch(path, options);
        const payload = await response.json();
        if (!response.ok) throw new Error(payload.detail || 'Request failed');
        return payload;
      }

      function show(id) {
        for (const section of document.querySelectorAll('main > section')) {
          section.classList.toggle('hidden', section.id !== id);
        }
        clearInterval(timer);
      }

      async function loadMenu() {
        const games = await api('/api/games');
        const menu = document.getElementById('menu');
        menu.innerHTML = '';
        for (const game of games) {
          const card = document.createElement('div');
          card.className = 'card' + (game.ready ? '' : ' soon');
          card.innerHTML = `<div class=\"emoji\">${game.emoji}</div><strong>${game.title}</strong><div>${game.ready ? game.subtitle : 'Coming soon'}</div>`;
          if (game.ready) card.onclick = () => (game.key === 'tictactoe' ? openTicTacToe() : openMemory());
          menu.appendChild(card);
        }
      }

      function renderTicTacToe() {
        const board = document.getElementById('ttt-board');
        board.innerHTML = '';
        ttt.board.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell' + (ttt.winningCells && ttt.winningCells.includes(index) ? ' win' : '');
          cell.textContent = value;
          cell.onclick = () => playCell(index);
          board.appendChild(cell);
        });
        document.getElementById('ttt-difficulty').textContent = ttt.difficulty;
        document.getElementById('vs-bot').checked = ttt.vsBot;
        document.getElementById('ttt-scores').textContent =
          `X: ${ttt.scores.X}  Draw: ${ttt.scores.draw}  O: ${ttt.scores.O}`;
        const status = document.getElementById('ttt-status');
        if (ttt.status === 'win') status.textContent = `Winner: ${ttt.winner}`;
        else if (ttt.status === 'draw') status.textContent = 'Draw';
        else status.textContent = ttt.botPending ? 'Bot is thinking…' : `Turn: ${ttt.turn}`;
        if (ttt.botPending) setTimeout(refreshTicTacToe, 200);
      }

      async function refreshTicTacToe() {
        ttt = await api(`/api/tictactoe/${ttt.id}`);
        renderTicTacToe();
      }

      async function openTicTacToe() {
        show('tictactoe');
        if (!ttt) ttt = await api('/api/tictactoe', { difficulty: 'Hard', vsBot: true });
        renderTicTacToe();
      }

      async function playCell(index) {
        if (!ttt || ttt.board[index] || ttt.status !== 'in_progress' || ttt.botPending) return;
        try {
          ttt = await api(`/api/tictactoe/${ttt.id}/move`, { cell: index });
        } catch (error) {
          return;
        }
        renderTicTacToe();
      }

      function renderMemory() {
        const board = document.getElementById('mem-board');
        board.style.gridTemplateColumns = `repeat(${mem.cols}, 1fr)`;
        board.innerHTML = '';
        mem.cards.forEach((card, index) => {
          const button = document.createElement('button');
          button.className = 'mem' + (card.faceUp ? ' up' : '') + (card.matched ? ' matched' : '');
          button.textContent = card.faceUp ? card.symbol : '';
          button.onclick = () => flipCard(index);
          board.appendChild(button);
        });
        document.getElementById('mem-difficulty').textContent = mem.difficulty;
        document.getElementById('mem-stats').textContent = `Moves ${mem.moves} • ${mem.elapsedText}`;
        document.getElementById('mem-status').textContent = mem.finished
          ? `Done! ${mem.moves} moves • ${mem.elapsedText}`
          : 'Match every pair of cards.';
      }

      async function refreshMemory() {
        mem = await api(`/api/memory/${mem.id}`);
        renderMemory();
      }

      async function openMemory() {
        show('memory');
        if (!mem) mem = await api('/api/memory', { difficulty: 'Medium' });
        renderMemory();
        timer = setInterval(() => { if (!mem.finished) refreshMemory(); }, 1000);
      }

      async function flipCard(index) {
        mem = await api(`/api/memory/${mem.id}/flip`, { index });
        renderMemory();
        if (mem.cards.filter((card) => card.faceUp && !card.matched).length === 2) {
          setTimeout(refreshMemory, mem.locked ? 900 : 400);
        }
      }

      document.querySelectorAll('[data-back]').forEach((button) => {
        button.onclick = () => show('home');
      });
      document.getElementById('ttt-difficulty').onclick = async () => {
        ttt = await api(`/api/tictactoe/${ttt.id}/difficulty`, {});
        renderTicTacToe();
      };
      document.getElementById('vs-bot').onchange = async (event) => {
        ttt = await api(`/api/tictactoe/${ttt.id}/vs-bot`, { vsBot: event.target.checked });
        renderTicTacToe();
      };
      document.getElementById('ttt-again').onclick = async () => {
        ttt = await api(`/api/tictactoe/${ttt.id}/reset`, { scores: false });
        renderTicTacToe();
      };
      document.getElementById('ttt-reset').onclick = async () => {
        ttt = await api(`/api/tictactoe/${ttt.id}/reset`, { scores: true });
        renderTicTacToe();
      };
      document.getElementById('mem-difficulty').onclick = async () => {
        mem = await api(`/api/memory/${mem.id}/difficulty`, {});
        renderMemory();
      };
      document.getElementById('mem-again').onclick = async () => {
        mem = await api(`/api/memory/${mem.id}/new`, {});
        renderMemory();
      };

      loadMenu();
    </script>
  </body>
</html>
"""
