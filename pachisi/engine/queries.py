"""
Query functions for UI integration.
These functions help the UI understand what actions are available
without mutating game state.
"""

from dataclasses import dataclass
from typing import Any

from pachisi.engine import PIECES_PER_PLAYER
from pachisi.engine.state import GameState, PieceRef
from pachisi.engine.actions import Action
from pachisi.engine.definitions import VariantDefinition
from pachisi.engine.dice import is_valid_face


ACTION_TYPES = ["roll_dice", "move_piece", "pass_turn"]


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ===== Action Validation =====

def validate_action(
    state: GameState,
    action: Action,
    variant: VariantDefinition,
) -> ValidationResult:
    """
    Validate an action without applying it.
    Returns ValidationResult with valid=True or valid=False with error message.
    """
    # Ownership gate comes first so a wrong player is declined regardless of dice state
    if action.player != state.current_player:
        return ValidationResult(
            False,
            f"Not player {action.player}'s turn. Current player: {state.current_player}"
        )

    if action.type == "roll_dice":
        return _validate_roll(state, action, variant)
    if action.type == "move_piece":
        return _validate_move(state, action)
    if action.type == "pass_turn":
        return ValidationResult(True)

    return ValidationResult(
        False,
        f"Unknown action type: {action.type}. Allowed: {ACTION_TYPES}"
    )


def _validate_roll(
    state: GameState,
    action: Action,
    variant: VariantDefinition,
) -> ValidationResult:
    """Validate a roll_dice action."""
    if state.has_rolled:
        return ValidationResult(False, "Dice already rolled this turn")

    values = action.payload.get("dice_values")
    if not isinstance(values, list) or len(values) != variant.dice_count:
        return ValidationResult(
            False,
            f"Expected {variant.dice_count} dice values for variant '{variant.id}', got {values!r}"
        )
    for v in values:
        if not is_valid_face(v):
            return ValidationResult(False, f"Invalid die value: {v!r}")
    return ValidationResult(True)


def _validate_move(state: GameState, action: Action) -> ValidationResult:
    """Validate a move_piece action."""
    piece_index = action.payload.get("piece_index")
    if (
        not isinstance(piece_index, int)
        or isinstance(piece_index, bool)
        or not 0 <= piece_index < PIECES_PER_PLAYER
    ):
        return ValidationResult(
            False,
            f"Invalid piece index: {piece_index!r}. Must be 0-{PIECES_PER_PLAYER - 1}"
        )

    if not state.has_rolled or state.moves_remaining <= 0:
        return ValidationResult(False, "Roll the dice before moving")

    die_value = action.payload.get("die_value")
    if not is_valid_face(die_value) or die_value not in state.dice_values:
        return ValidationResult(
            False,
            f"Die value {die_value!r} is not pending. Pending: {state.dice_values}"
        )
    return ValidationResult(True)


# ===== Piece Lookup =====

def find_piece(state: GameState, piece_id: Any) -> PieceRef | None:
    """
    Resolve an opaque piece identifier (from the adapter's hit-testing) to (player, slot).
    Returns None when the identifier is not a piece, e.g. the user clicked the board.
    """
    if not isinstance(piece_id, str):
        return None
    ref = state.piece_index.get(piece_id)
    if ref is None:
        return None
    player, slot = ref
    return PieceRef(player=player, slot=slot, piece_id=piece_id)


def can_move(state: GameState, piece_id: Any) -> bool:
    """
    True iff dice are rolled, at least one die is pending and the piece belongs to the current player.
    Unknown identifiers answer False.
    """
    if not state.has_rolled or state.moves_remaining <= 0:
        return False
    ref = find_piece(state, piece_id)
    if ref is None:
        return False
    return ref.player == state.current_player


# ===== Query Functions =====

def get_available_action_types(state: GameState) -> list[str]:
    """Get action types the current player may take right now."""
    if not state.has_rolled:
        return ["roll_dice", "pass_turn"]
    if state.moves_remaining > 0:
        return ["move_piece", "pass_turn"]
    return ["pass_turn"]


def get_selectable_pieces(state: GameState) -> list[str]:
    """piece_ids the adapter should highlight (empty until the current player rolls)."""
    if not state.has_rolled or state.moves_remaining <= 0:
        return []
    return [p.piece_id for p in state.current_player_state.pieces]


def get_pending_dice(state: GameState) -> list[int]:
    """Dice values that can still be spent this turn."""
    return list(state.dice_values)


def get_game_summary(state: GameState) -> dict[str, Any]:
    """
    Get a summary of the current game state for UI display.
    """
    current = state.current_player_state
    return {
        "turn_number": state.turn_number,
        "current_player": state.current_player,
        "current_color": current.color_name,
        "current_color_hex": current.color_hex,
        "has_rolled": state.has_rolled,
        "dice_values": get_pending_dice(state),
        "moves_remaining": state.moves_remaining,
        "selectable_pieces": get_selectable_pieces(state),
        "available_actions": get_available_action_types(state),
    }
