"""
Utility functions for the game engine.
"""

from pachisi.engine import NUM_PLAYERS, PIECES_PER_PLAYER, PLAYER_COLORS, PLAYER_COLOR_HEX
from pachisi.engine.state import GameState, PlayerState, Piece, Position, make_piece_id
from pachisi.engine.definitions import VariantDefinition, load_variant


def start_position(variant: VariantDefinition, owner: int, slot: int) -> Position:
    """
    Deterministic starting square for a piece.
    Slots fill the owner's corner as a 2x2 block: slot % 2 picks the column, slot // 2 the row.
    """
    corner_x, corner_y = variant.start_corners[owner]
    return Position(
        x=corner_x + (slot % 2) * variant.slot_spacing,
        y=corner_y + (slot // 2) * variant.slot_spacing,
    )


def initialize_game_state(variant: VariantDefinition | None = None) -> GameState:
    """
    Create an initial game state: four players, four pieces each at their start squares,
    player 0 to act, nothing rolled.

    Args:
        variant: Variant definition; loads the configured default when omitted.
    """
    if variant is None:
        variant = load_variant()

    players = []
    for owner in range(NUM_PLAYERS):
        pieces = [
            Piece(
                piece_id=make_piece_id(owner, slot),
                owner=owner,
                slot=slot,
                position=start_position(variant, owner, slot),
            )
            for slot in range(PIECES_PER_PLAYER)
        ]
        players.append(PlayerState(
            color_id=owner,
            color_name=PLAYER_COLORS[owner],
            color_hex=PLAYER_COLOR_HEX[owner],
            pieces=pieces,
        ))

    return GameState(variant_id=variant.id, players=players)


def get_piece(state: GameState, player: int, slot: int) -> Piece | None:
    """Return the piece at (player, slot), or None when either index is out of range."""
    if not 0 <= player < len(state.players):
        return None
    pieces = state.players[player].pieces
    if not 0 <= slot < len(pieces):
        return None
    return pieces[slot]


def print_game_state(state: GameState, verbose: bool = False):
    """
    Pretty-print the current game state.

    Args:
        state: Current game state
        verbose: If True, show every piece position (otherwise only the current player's)
    """
    current = state.players[state.current_player]
    print(f"\n{'='*60}")
    print(
        f"Turn {state.turn_number} | Player {state.current_player + 1} ({current.color_name}) | "
        f"Dice: {state.dice_values or '-'} | Moves left: {state.moves_remaining}")
    print(f"{'='*60}")

    for player in state.players:
        if not verbose and player.color_id != state.current_player:
            continue
        print(f"\n{player.color_name.capitalize()}")
        for piece in player.pieces:
            print(f"  - {piece.piece_id}: ({piece.position.x:.2f}, {piece.position.y:.2f})")
    print()
