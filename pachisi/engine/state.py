"""
Game state representation.
The reducer never mutates an input state; it works on a copy and returns it.
Includes JSON serialization so the API can ship state to the browser.
"""

import json
from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

from pachisi.engine import NUM_PLAYERS, PLAYER_COLORS, PLAYER_COLOR_HEX


def _float(v: Any, default: float) -> float:
    try:
        return float(v) if v is not None else default
    except (TypeError, ValueError):
        return default


def _int(v: Any, default: int) -> int:
    try:
        return int(v) if v is not None else default
    except (TypeError, ValueError):
        return default


def _bool(v: Any, default: bool) -> bool:
    if isinstance(v, str):
        text = v.strip().lower()
        if text in ("true", "1", "yes"):
            return True
        if text in ("false", "0", "no", ""):
            return False
        return default
    if v is None:
        return default
    return bool(v)


def make_piece_id(owner: int, slot: int) -> str:
    """Stable opaque identifier for a piece, e.g. "red_0"."""
    return f"{PLAYER_COLORS[owner]}_{slot}"


@dataclass
class Position:
    """Continuous 2D board coordinate. y maps to the board's depth axis in the renderer."""
    x: float
    y: float

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Position":
        if not isinstance(data, dict):
            data = {}
        return cls(x=_float(data.get("x"), 0.0), y=_float(data.get("y"), 0.0))


@dataclass
class Piece:
    """A single piece. Owner and slot never change; only position moves."""
    piece_id: str  # e.g. "red_0"
    owner: int  # Seat index of the owning player (0-3)
    slot: int  # Piece slot index within the owner's pieces (0-3)
    position: Position

    def to_dict(self) -> dict[str, Any]:
        return {
            "piece_id": self.piece_id,
            "owner": self.owner,
            "slot": self.slot,
            "position": self.position.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Piece":
        if not isinstance(data, dict):
            data = {}
        owner = _int(data.get("owner"), 0)
        slot = _int(data.get("slot"), 0)
        return cls(
            piece_id=str(data.get("piece_id") or make_piece_id(owner, slot)),
            owner=owner,
            slot=slot,
            position=Position.from_dict(data.get("position")),
        )


@dataclass
class PlayerState:
    """A seat at the table. color_id is also the seat index."""
    color_id: int
    color_name: str  # "red", "green", "blue", "yellow"
    pieces: list[Piece] = field(default_factory=list)
    color_hex: str = ""  # Display color, e.g. "#ff0000"

    def to_dict(self) -> dict[str, Any]:
        return {
            "color_id": self.color_id,
            "color_name": self.color_name,
            "color_hex": self.color_hex,
            "pieces": [p.to_dict() for p in self.pieces],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlayerState":
        if not isinstance(data, dict):
            data = {}
        color_id = _int(data.get("color_id"), 0)
        pieces_raw = data.get("pieces") or []
        if not isinstance(pieces_raw, list):
            pieces_raw = []
        known_seat = 0 <= color_id < len(PLAYER_COLORS)
        default_name = PLAYER_COLORS[color_id] if known_seat else ""
        default_hex = PLAYER_COLOR_HEX[color_id] if known_seat else ""
        return cls(
            color_id=color_id,
            color_name=str(data.get("color_name") or default_name),
            pieces=[Piece.from_dict(p) for p in pieces_raw if isinstance(p, dict)],
            color_hex=str(data.get("color_hex") or default_hex),
        )


@dataclass
class PieceRef:
    """Resolved location of a piece: (player, slot) plus its identifier."""
    player: int
    slot: int
    piece_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"player": self.player, "slot": self.slot, "piece_id": self.piece_id}


def build_piece_index(players: list[PlayerState]) -> dict[str, tuple[int, int]]:
    """Map every piece_id to its (player, slot) pair."""
    index: dict[str, tuple[int, int]] = {}
    for player_idx, player in enumerate(players):
        for slot, piece in enumerate(player.pieces):
            index[piece.piece_id] = (player_idx, slot)
    return index


@dataclass
class GameState:
    """Complete game state."""
    variant_id: str
    players: list[PlayerState]
    current_player: int = 0  # Seat index of the player whose turn it is
    # Pending dice for this turn, in roll order; consumed values are removed
    dice_values: list[int] = field(default_factory=list)
    # True from an accepted roll until the turn ends
    has_rolled: bool = False
    # Starts at 1; increments each time play wraps back to seat 0
    turn_number: int = 1
    # piece_id -> (player, slot); built from players, never recomputed by callers
    piece_index: dict[str, tuple[int, int]] = field(default_factory=dict)

    def __post_init__(self):
        if not self.piece_index:
            self.piece_index = build_piece_index(self.players)

    @property
    def moves_remaining(self) -> int:
        """Dice values not yet consumed this turn. Always len(dice_values)."""
        return len(self.dice_values)

    @property
    def current_player_state(self) -> PlayerState:
        return self.players[self.current_player]

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    # ===== Serialization Methods =====

    def to_dict(self) -> dict[str, Any]:
        """Convert GameState to a dictionary for JSON serialization."""
        return {
            "variant_id": self.variant_id,
            "players": [p.to_dict() for p in self.players],
            "current_player": self.current_player,
            "dice_values": list(self.dice_values),
            "moves_remaining": self.moves_remaining,
            "has_rolled": self.has_rolled,
            "turn_number": self.turn_number,
            "piece_index": {pid: list(ref) for pid, ref in self.piece_index.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        """Create GameState from a dictionary. moves_remaining is derived, so it is not read back."""
        if not isinstance(data, dict):
            data = {}
        players_raw = data.get("players") or []
        if not isinstance(players_raw, list):
            players_raw = []
        dice_raw = data.get("dice_values") or []
        if not isinstance(dice_raw, list):
            dice_raw = []
        current = _int(data.get("current_player"), 0)
        if not 0 <= current < NUM_PLAYERS:
            current = 0
        # piece_index is rebuilt from players so it can never drift from them
        return cls(
            variant_id=str(data.get("variant_id") or ""),
            players=[PlayerState.from_dict(p) for p in players_raw if isinstance(p, dict)],
            current_player=current,
            dice_values=[_int(v, 0) for v in dice_raw],
            has_rolled=_bool(data.get("has_rolled"), False),
            turn_number=_int(data.get("turn_number"), 1),
        )

    def to_json(self, indent: int = 2) -> str:
        """Serialize GameState to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "GameState":
        """Deserialize GameState from a JSON string."""
        return cls.from_dict(json.loads(json_str))
