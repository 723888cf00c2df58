"""
Game events for UI hooks and logging.
Events describe what happened during action processing.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameEvent":
        return cls(type=data["type"], payload=data["payload"])


# ===== Event Type Constants =====

# Dice events
DICE_ROLLED = "dice_rolled"

# Selection events (adapter enables/disables click highlighting)
PIECES_SELECTABLE = "pieces_selectable"
SELECTION_CLEARED = "selection_cleared"

# Movement events
PIECE_MOVED = "piece_moved"

# Turn events
TURN_ENDED = "turn_ended"
TURN_CHANGED = "turn_changed"


# ===== Event Factory Functions =====

def dice_rolled(player: int, dice_values: list[int]) -> GameEvent:
    return GameEvent(DICE_ROLLED, {
        "player": player,
        "dice_values": list(dice_values),
    })


def pieces_selectable(player: int, piece_ids: list[str]) -> GameEvent:
    """Emitted after a roll: these pieces may now be clicked."""
    return GameEvent(PIECES_SELECTABLE, {
        "player": player,
        "piece_ids": piece_ids,
    })


def selection_cleared(player: int, piece_ids: list[str]) -> GameEvent:
    """Emitted when the outgoing player's pieces stop being selectable."""
    return GameEvent(SELECTION_CLEARED, {
        "player": player,
        "piece_ids": piece_ids,
    })


def piece_moved(
    player: int,
    piece_index: int,
    piece_id: str,
    die_value: int,
    from_position: dict[str, float],
    to_position: dict[str, float],
    dice_values: list[int],
) -> GameEvent:
    return GameEvent(PIECE_MOVED, {
        "player": player,
        "piece_index": piece_index,
        "piece_id": piece_id,
        "die_value": die_value,
        "from": from_position,
        "to": to_position,
        "dice_values": list(dice_values),  # Remaining after this move
        "moves_remaining": len(dice_values),
    })


def turn_ended(turn_number: int, player: int, reason: str) -> GameEvent:
    return GameEvent(TURN_ENDED, {
        "turn_number": turn_number,
        "player": player,
        "reason": reason,  # "dice_used" or "passed"
    })


def turn_changed(turn_number: int, old_player: int, new_player: int) -> GameEvent:
    return GameEvent(TURN_CHANGED, {
        "turn_number": turn_number,
        "old_player": old_player,
        "current_player": new_player,
    })
