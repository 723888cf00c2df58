"""
Main entry point for the Pachisi game engine.
Demonstrates core functionality with a simple scripted scenario.
"""

from pachisi.engine.definitions import load_variant
from pachisi.engine.actions import roll_dice as roll_action, move_piece, pass_turn
from pachisi.engine.dice import ScriptedDice, roll_dice
from pachisi.engine.queries import can_move, find_piece
from pachisi.engine.reducer import apply_action, dispatch, replay_from_actions, ActionDeclined
from pachisi.engine.utils import initialize_game_state, print_game_state


def main():
    print("Pachisi Game Engine - turn, dice and move state machine")
    print("=" * 60)

    variant = load_variant("two_dice")
    state = initialize_game_state(variant)

    print("\n[INITIAL STATE]")
    print_game_state(state, verbose=True)

    # ===== SCENARIO 1: roll, move twice, turn auto-advances =====
    print("\n[SCENARIO 1: Full turn with scripted dice 3 and 5]")
    dice = ScriptedDice([3, 5])
    values = roll_dice(dice, variant.dice_count)
    state, events = apply_action(state, roll_action(0, values), variant)
    print(f"✓ Rolled {values}")
    print(f"  Events: {[e.type for e in events]}")
    print(f"  can_move('red_0') = {can_move(state, 'red_0')}, can_move('green_0') = {can_move(state, 'green_0')}")

    # ===== SCENARIO 2: declined actions leave state untouched =====
    print("\n[SCENARIO 2: Declined actions]")
    for label, action in [
        ("roll again", roll_action(0, [1, 1])),
        ("move with die 4 (not rolled)", move_piece(0, 0, 4)),
        ("move as player 1", move_piece(1, 0, 3)),
        ("move piece 7", move_piece(0, 7, 3)),
    ]:
        result = dispatch(state, action, variant)
        print(f"✗ {label}: {result.reason}")

    state, events = apply_action(state, move_piece(0, 0, 3), variant)
    print(f"\n✓ Moved red_0 with 3. Dice left: {state.dice_values}")
    state, events = apply_action(state, move_piece(0, 1, 5), variant)
    print(f"✓ Moved red_1 with 5. Events: {[e.type for e in events]}")
    print(f"  Current player is now {state.current_player}")
    print_game_state(state)

    # ===== SCENARIO 3: piece lookup =====
    print("\n[SCENARIO 3: Piece lookup]")
    for piece_id in ["blue_2", "board"]:
        ref = find_piece(state, piece_id)
        print(f"  {piece_id!r} -> {ref.to_dict() if ref else None}")

    # ===== SCENARIO 4: replay =====
    print("\n[SCENARIO 4: Replay an action log]")
    log = [
        roll_action(0, [3, 5]),
        move_piece(0, 0, 3),
        move_piece(0, 1, 5),
        roll_action(1, [6, 6]),
        pass_turn(1),
    ]
    try:
        replayed, all_events = replay_from_actions(initialize_game_state(variant), log, variant)
        print(f"✓ Replayed {len(log)} actions, {len(all_events)} events. Current player: {replayed.current_player}")
    except ActionDeclined as e:
        print(f"✗ Replay failed: {e}")


if __name__ == "__main__":
    main()
