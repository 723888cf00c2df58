"""
FastAPI backend for the Pachisi board.
Provides REST endpoints the browser front end calls to roll, select and move pieces.
Games live in memory for the lifetime of the process.
"""

import os
import random
import threading
import traceback
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pachisi.config import DEFAULT_VARIANT_ID
from pachisi.engine.state import GameState
from pachisi.engine.actions import roll_dice as roll_dice_action, move_piece, pass_turn
from pachisi.engine.definitions import VariantDefinition, list_variants, load_variant
from pachisi.engine.dice import make_random_source, roll_dice
from pachisi.engine.reducer import dispatch, ActionResult
from pachisi.engine.queries import (
    can_move,
    find_piece,
    get_available_action_types,
    get_game_summary,
    get_pending_dice,
    get_selectable_pieces,
)
from pachisi.engine.utils import initialize_game_state, get_piece

app = FastAPI(
    title="Pachisi API",
    description="Backend API for the Pachisi board - turn, dice and move state machine",
    version="1.0.0",
)

# CORS configuration for frontend
_DEFAULT_ORIGINS = "http://localhost:5173,http://localhost:8080,http://localhost:3000"
CORS_ORIGINS = [
    o.strip() for o in os.environ.get("PACHISI_CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


def _env_seed() -> int | None:
    raw = os.environ.get("PACHISI_RNG_SEED")
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        print(f"[config] ignoring non-integer PACHISI_RNG_SEED={raw!r}", flush=True)
        return None


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers and full traceback so the frontend can read the error."""
    tb = traceback.format_exc()
    traceback.print_exc()
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "traceback": tb},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# In-memory game sessions: game_id -> state
games: dict[str, GameState] = {}

# Per-game random source and variant; key = game_id
game_rngs: dict[str, random.Random] = {}
game_variants: dict[str, VariantDefinition] = {}

# Mutating endpoints run in the threadpool; read -> dispatch -> save holds this per game
game_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


# ===== Pydantic Models =====

class CreateGameRequest(BaseModel):
    """Omitted game_id = random uuid. Omitted variant_id = pachisi.config.DEFAULT_VARIANT_ID."""
    game_id: str | None = None
    variant_id: str | None = None
    seed: int | None = None


class MoveRequest(BaseModel):
    player: int
    piece_index: int
    die_value: int


class PassRequest(BaseModel):
    player: int


# ===== Helper Functions =====

def get_game(game_id: str) -> GameState:
    """Get game state; raise 404 if not found."""
    state = games.get(game_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return state


def get_variant(game_id: str) -> VariantDefinition:
    variant = game_variants.get(game_id)
    if variant is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return variant


def get_game_lock(game_id: str) -> threading.Lock:
    """Lock serializing state changes for one game; raise 404 if the game is unknown."""
    get_game(game_id)
    with _locks_guard:
        return game_locks.setdefault(game_id, threading.Lock())


def save_game(game_id: str, state: GameState) -> None:
    games[game_id] = state


def state_for_response(state: GameState) -> dict[str, Any]:
    """State dict including the computed summary for the UI."""
    out = state.to_dict()
    out["summary"] = get_game_summary(state)
    return out


def _apply(game_id: str, result: ActionResult) -> dict[str, Any]:
    """Store an accepted result, or turn a declined one into 409."""
    if not result.accepted:
        raise HTTPException(status_code=409, detail=result.reason)
    save_game(game_id, result.state)
    return {
        "state": state_for_response(result.state),
        "events": [e.to_dict() for e in result.events],
    }


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Pachisi API", "version": "1.0.0"}


@app.get("/variants")
def get_variants():
    """List available variants (id, display_name, dice_count). Use variant_id in POST /games."""
    return {"variants": list_variants(), "default": DEFAULT_VARIANT_ID}


@app.post("/games")
def create_game(request: CreateGameRequest):
    """Create a new in-memory game. Returns game_id and the initial state."""
    game_id = request.game_id or str(uuid.uuid4())
    if game_id in games:
        raise HTTPException(status_code=400, detail=f"Game {game_id} already exists")
    try:
        variant = load_variant(request.variant_id)
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    seed = request.seed if request.seed is not None else _env_seed()
    state = initialize_game_state(variant)
    games[game_id] = state
    game_rngs[game_id] = make_random_source(seed)
    game_variants[game_id] = variant
    return {
        "game_id": game_id,
        "variant": variant.to_dict(),
        "state": state_for_response(state),
    }


@app.get("/games/{game_id}")
def get_game_state(game_id: str):
    """Get current game state and the variant it is played with."""
    state = get_game(game_id)
    return {
        "game_id": game_id,
        "variant": get_variant(game_id).to_dict(),
        "state": state_for_response(state),
    }


@app.delete("/games/{game_id}")
def delete_game(game_id: str):
    """Drop a game session."""
    get_game(game_id)
    games.pop(game_id, None)
    game_rngs.pop(game_id, None)
    game_variants.pop(game_id, None)
    game_locks.pop(game_id, None)
    return {"deleted": game_id}


@app.get("/games/{game_id}/available-actions")
def get_available_actions(game_id: str):
    """Get available actions for the current player."""
    state = get_game(game_id)
    return {
        "current_player": state.current_player,
        "actions": get_available_action_types(state),
        "selectable_pieces": get_selectable_pieces(state),
        "dice_values": get_pending_dice(state),
    }


@app.post("/games/{game_id}/roll")
def do_roll(game_id: str):
    """Roll the dice for the current player. Declined (409) if they already rolled this turn."""
    with get_game_lock(game_id):
        state = get_game(game_id)
        variant = get_variant(game_id)
        # Checked before drawing so a declined roll does not advance the random source
        if state.has_rolled:
            raise HTTPException(status_code=409, detail="Dice already rolled this turn")
        values = roll_dice(game_rngs[game_id], variant.dice_count)
        action = roll_dice_action(state.current_player, values)
        out = _apply(game_id, dispatch(state, action, variant))
    out["dice_values"] = values
    return out


@app.post("/games/{game_id}/move")
def do_move(game_id: str, request: MoveRequest):
    """Move a piece with one pending die value."""
    with get_game_lock(game_id):
        state = get_game(game_id)
        variant = get_variant(game_id)
        action = move_piece(request.player, request.piece_index, request.die_value)
        return _apply(game_id, dispatch(state, action, variant))


@app.post("/games/{game_id}/pass")
def do_pass(game_id: str, request: PassRequest):
    """Give up the rest of the turn."""
    with get_game_lock(game_id):
        state = get_game(game_id)
        variant = get_variant(game_id)
        return _apply(game_id, dispatch(state, pass_turn(request.player), variant))


@app.get("/games/{game_id}/pieces/{piece_id}")
def lookup_piece(game_id: str, piece_id: str):
    """
    Resolve a clicked piece identifier. Unknown identifiers are not an error:
    the response has found=false so the UI can ignore the click.
    """
    state = get_game(game_id)
    ref = find_piece(state, piece_id)
    if ref is None:
        return {"found": False, "piece_id": piece_id, "can_move": False}
    piece = get_piece(state, ref.player, ref.slot)
    return {
        "found": True,
        **ref.to_dict(),
        "position": piece.position.to_dict(),
        "can_move": can_move(state, piece_id),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
