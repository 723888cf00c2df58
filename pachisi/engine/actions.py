"""
Action definitions for the game.
Actions are immutable, deterministic instructions.
"""

from dataclasses import dataclass


@dataclass
class Action:
    """Base action class. All actions have a type, acting player, and payload."""
    type: str  # "roll_dice", "move_piece", "pass_turn"
    player: int  # Seat index of the player performing the action
    payload: dict  # Action-specific data


def roll_dice(player: int, dice_values: list[int]) -> Action:
    """
    Record a dice roll for the current player.

    dice_values must be drawn before the action is built (see engine.dice.roll_dice),
    so applying the action is deterministic and replayable. The number of values
    must match the variant's dice_count.

    Example: roll_dice(0, [3, 5])
    """
    return Action(
        type="roll_dice",
        player=player,
        payload={"dice_values": list(dice_values)},
    )


def move_piece(
    player: int,
    piece_index: int,  # Slot of the piece within the player's pieces (0-3)
    die_value: int,  # Must be one of the pending dice values
) -> Action:
    """
    Move one of the player's pieces using one pending die value.
    The die value is consumed; when none remain the turn passes automatically.

    Example: move_piece(0, 1, 5)
    """
    return Action(
        type="move_piece",
        player=player,
        payload={"piece_index": piece_index, "die_value": die_value},
    )


def pass_turn(player: int) -> Action:
    """Give up the rest of the turn (unused dice are discarded) and advance to the next player."""
    return Action(
        type="pass_turn",
        player=player,
        payload={},
    )
