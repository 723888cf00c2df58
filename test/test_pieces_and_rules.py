"""
Piece data model, lookup, selection predicate and pluggable advance rules.
"""

import pytest

from pachisi.engine.definitions import load_variant, list_variants, VariantDefinition
from pachisi.engine.actions import roll_dice, move_piece, pass_turn
from pachisi.engine.dice import ScriptedDice, roll_dice as draw_dice, make_random_source
from pachisi.engine.movement import get_advance_rule, register_advance_rule, ADVANCE_RULES
from pachisi.engine.queries import can_move, find_piece, get_selectable_pieces, get_game_summary
from pachisi.engine.reducer import apply_action
from pachisi.engine.state import Position
from pachisi.engine.utils import initialize_game_state, get_piece, start_position


def test_start_positions_fill_each_corner_as_a_block():
    variant = load_variant("two_dice")
    state = initialize_game_state(variant)
    red = [(p.position.x, p.position.y) for p in state.players[0].pieces]
    assert red == [(-3.5, -3.5), (-3.0, -3.5), (-3.5, -3.0), (-3.0, -3.0)]
    green_0 = state.players[1].pieces[0].position
    assert (green_0.x, green_0.y) == (3.0, -3.5)
    yellow_3 = state.players[3].pieces[3].position
    assert (yellow_3.x, yellow_3.y) == (-3.0, 3.5)


def test_start_positions_are_deterministic():
    variant = load_variant("single_die")
    assert start_position(variant, 2, 1) == Position(4.5, 4.0)
    a = initialize_game_state(variant).to_dict()
    b = initialize_game_state(variant).to_dict()
    assert a == b


def test_piece_ids_and_owners():
    state = initialize_game_state(load_variant("two_dice"))
    for player_idx, player in enumerate(state.players):
        assert player.color_id == player_idx
        for slot, piece in enumerate(player.pieces):
            assert piece.owner == player_idx
            assert piece.slot == slot
    assert [p.color_name for p in state.players] == ["red", "green", "blue", "yellow"]
    assert [p.color_hex for p in state.players] == ["#ff0000", "#00ff00", "#0000ff", "#ffff00"]
    assert len(state.piece_index) == 16


def test_find_piece_resolves_identifier():
    state = initialize_game_state(load_variant("two_dice"))
    ref = find_piece(state, "blue_2")
    assert (ref.player, ref.slot, ref.piece_id) == (2, 2, "blue_2")


@pytest.mark.parametrize("piece_id", ["board", "red_4", "", None, 7])
def test_find_piece_returns_none_for_non_pieces(piece_id):
    state = initialize_game_state(load_variant("two_dice"))
    assert find_piece(state, piece_id) is None


def test_get_piece_bounds():
    state = initialize_game_state(load_variant("two_dice"))
    assert get_piece(state, 1, 3).piece_id == "green_3"
    assert get_piece(state, 4, 0) is None
    assert get_piece(state, 0, -1) is None


def test_can_move_only_after_roll_and_for_current_player():
    variant = load_variant("two_dice")
    state = initialize_game_state(variant)
    assert can_move(state, "red_0") is False
    assert get_selectable_pieces(state) == []

    state, _ = apply_action(state, roll_dice(0, [3, 5]), variant)
    assert can_move(state, "red_0") is True
    assert can_move(state, "green_0") is False
    assert can_move(state, "board") is False
    assert get_selectable_pieces(state) == ["red_0", "red_1", "red_2", "red_3"]

    state, _ = apply_action(state, move_piece(0, 0, 3), variant)
    state, _ = apply_action(state, move_piece(0, 0, 5), variant)
    assert can_move(state, "red_0") is False
    assert can_move(state, "green_0") is False


def test_custom_advance_rule_overrides_variant_rule():
    variant = load_variant("two_dice")
    state = initialize_game_state(variant)
    state, _ = apply_action(state, roll_dice(0, [2, 4]), variant)

    def to_origin(piece, die_value, variant):
        return Position(0.0, float(die_value))

    state, _ = apply_action(state, move_piece(0, 3, 4), variant, advance_rule=to_origin)
    piece = state.players[0].pieces[3]
    assert (piece.position.x, piece.position.y) == (0.0, 4.0)
    assert state.dice_values == [2]


def test_named_rule_from_variant_is_used():
    register_advance_rule("one_step_x", lambda piece, die, v: Position(piece.position.x + 1, piece.position.y))
    try:
        variant = VariantDefinition.from_dict({**load_variant("two_dice").to_dict(), "advance_rule": "one_step_x"})
        state = initialize_game_state(variant)
        state, _ = apply_action(state, roll_dice(0, [6, 6]), variant)
        state, _ = apply_action(state, move_piece(0, 0, 6), variant)
        piece = state.players[0].pieces[0]
        assert (piece.position.x, piece.position.y) == (-2.5, -3.5)
    finally:
        ADVANCE_RULES.pop("one_step_x", None)


def test_stay_put_rule_consumes_die_without_moving():
    variant = load_variant("two_dice")
    state = initialize_game_state(variant)
    state, _ = apply_action(state, roll_dice(0, [1, 2]), variant)
    state, _ = apply_action(state, move_piece(0, 0, 1), variant, advance_rule=get_advance_rule("stay_put"))
    piece = state.players[0].pieces[0]
    assert (piece.position.x, piece.position.y) == (-3.5, -3.5)
    assert state.dice_values == [2]


def test_unknown_advance_rule_raises():
    with pytest.raises(ValueError):
        get_advance_rule("pachisi_track")


def test_variants_on_disk():
    ids = {v["id"] for v in list_variants()}
    assert {"two_dice", "single_die"} <= ids
    assert load_variant().id == "two_dice"
    with pytest.raises(FileNotFoundError):
        load_variant("nope")
    with pytest.raises(FileNotFoundError):
        load_variant("../config")


def test_variant_manifest_needs_four_corners():
    data = load_variant("two_dice").to_dict()
    data["start_corners"] = data["start_corners"][:3]
    with pytest.raises(ValueError):
        VariantDefinition.from_dict(data)


def test_scripted_dice_and_seeded_source():
    dice = ScriptedDice([5, 1])
    assert draw_dice(dice, 2) == [5, 1]
    with pytest.raises(IndexError):
        draw_dice(dice, 1)

    a = draw_dice(make_random_source(42), 20)
    b = draw_dice(make_random_source(42), 20)
    assert a == b
    assert all(1 <= v <= 6 for v in a)


def test_game_summary():
    variant = load_variant("two_dice")
    state = initialize_game_state(variant)
    summary = get_game_summary(state)
    assert summary["current_color"] == "red"
    assert summary["current_color_hex"] == "#ff0000"
    assert summary["available_actions"] == ["roll_dice", "pass_turn"]
    state, _ = apply_action(state, roll_dice(0, [3, 5]), variant)
    summary = get_game_summary(state)
    assert summary["available_actions"] == ["move_piece", "pass_turn"]
    assert summary["moves_remaining"] == 2


def test_summary_color_follows_current_player():
    variant = load_variant("two_dice")
    state, _ = apply_action(initialize_game_state(variant), pass_turn(0), variant)
    summary = get_game_summary(state)
    assert summary["current_color"] == "green"
    assert summary["current_color_hex"] == "#00ff00"
