"""
Main game reducer.
Applies actions to state, enforcing rules and producing new state.
Returns (new_state, events) where events describe what happened.
"""

from dataclasses import dataclass, field

from pachisi.engine import NUM_PLAYERS
from pachisi.engine.state import GameState
from pachisi.engine.actions import Action
from pachisi.engine.definitions import VariantDefinition
from pachisi.engine.movement import PositionAdvanceRule, get_advance_rule
from pachisi.engine.queries import validate_action
from pachisi.engine.events import (
    GameEvent,
    dice_rolled,
    pieces_selectable,
    selection_cleared,
    piece_moved,
    turn_ended,
    turn_changed,
)


class ActionDeclined(ValueError):
    """
    Raised when an action's preconditions are not met.
    A declined action is a normal outcome: the input state is left untouched.
    """


@dataclass
class ActionResult:
    """Outcome of dispatch(). On decline, state is the unchanged input state and events is empty."""
    accepted: bool
    state: GameState
    events: list[GameEvent] = field(default_factory=list)
    reason: str | None = None

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "state": self.state.to_dict(),
            "events": [e.to_dict() for e in self.events],
            "reason": self.reason,
        }


def _resolve_rule(
    variant: VariantDefinition,
    advance_rule: PositionAdvanceRule | None,
) -> PositionAdvanceRule:
    if advance_rule is not None:
        return advance_rule
    return get_advance_rule(variant.advance_rule)


def apply_action(
    state: GameState,
    action: Action,
    variant: VariantDefinition,
    advance_rule: PositionAdvanceRule | None = None,
) -> tuple[GameState, list[GameEvent]]:
    """
    Apply a single action to the current state, returning new state and events.

    Validates:
    - Action player matches current_player
    - Action preconditions (see queries.validate_action)

    Args:
        state: Current game state (not modified)
        action: Action to apply
        variant: Variant definition (dice count, step size, advance rule name)
        advance_rule: Overrides the variant's named rule when given

    Returns:
        Tuple of (new_state, events) where events describe what happened

    Raises:
        ActionDeclined: if any precondition fails
    """
    validation = validate_action(state, action, variant)
    if not validation.valid:
        raise ActionDeclined(validation.error)

    new_state = state.copy()
    events: list[GameEvent] = []

    if action.type == "roll_dice":
        new_state, evts = _handle_roll_dice(new_state, action)
        events.extend(evts)

    elif action.type == "move_piece":
        rule = _resolve_rule(variant, advance_rule)
        new_state, evts = _handle_move_piece(new_state, action, variant, rule)
        events.extend(evts)

    elif action.type == "pass_turn":
        new_state, evts = _advance_turn(new_state, reason="passed")
        events.extend(evts)

    else:
        raise ValueError(f"Unknown action type: {action.type}")

    return new_state, events


def dispatch(
    state: GameState,
    action: Action,
    variant: VariantDefinition,
    advance_rule: PositionAdvanceRule | None = None,
) -> ActionResult:
    """
    Command-dispatch entry point for adapters.
    Like apply_action, but a declined action comes back as ActionResult(accepted=False)
    carrying the reason instead of raising.
    """
    try:
        new_state, events = apply_action(state, action, variant, advance_rule)
    except ActionDeclined as e:
        return ActionResult(accepted=False, state=state, reason=str(e))
    return ActionResult(accepted=True, state=new_state, events=events)


def _handle_roll_dice(
    state: GameState,
    action: Action,
) -> tuple[GameState, list[GameEvent]]:
    """
    Record the rolled dice and open the current player's pieces for selection.
    Piece positions are not touched.
    """
    values = list(action.payload["dice_values"])
    state.dice_values = values
    state.has_rolled = True

    player = state.current_player
    piece_ids = [p.piece_id for p in state.players[player].pieces]
    return state, [
        dice_rolled(player, values),
        pieces_selectable(player, piece_ids),
    ]


def _handle_move_piece(
    state: GameState,
    action: Action,
    variant: VariantDefinition,
    rule: PositionAdvanceRule,
) -> tuple[GameState, list[GameEvent]]:
    """
    Move a piece with one pending die value.
    The die is consumed (first matching instance); when no dice remain the turn advances.
    """
    events: list[GameEvent] = []
    player = action.player
    piece_index = action.payload["piece_index"]
    die_value = action.payload["die_value"]

    piece = state.players[player].pieces[piece_index]
    old_position = piece.position.to_dict()
    piece.position = rule(piece, die_value, variant)

    state.dice_values.remove(die_value)

    events.append(piece_moved(
        player,
        piece_index,
        piece.piece_id,
        die_value,
        old_position,
        piece.position.to_dict(),
        state.dice_values,
    ))

    if state.moves_remaining == 0:
        state, evts = _advance_turn(state, reason="dice_used")
        events.extend(evts)

    return state, events


def _advance_turn(state: GameState, reason: str) -> tuple[GameState, list[GameEvent]]:
    """
    End the current player's turn and hand play to the next seat.

    Clears selection for the outgoing player, resets dice bookkeeping and
    increments turn_number when play wraps back to seat 0.
    """
    events: list[GameEvent] = []
    old_player = state.current_player
    outgoing_ids = [p.piece_id for p in state.players[old_player].pieces]

    events.append(selection_cleared(old_player, outgoing_ids))
    events.append(turn_ended(state.turn_number, old_player, reason))

    state.current_player = (old_player + 1) % NUM_PLAYERS
    state.has_rolled = False
    state.dice_values = []
    if state.current_player == 0:
        state.turn_number += 1

    events.append(turn_changed(state.turn_number, old_player, state.current_player))
    return state, events


def advance_turn(state: GameState) -> tuple[GameState, list[GameEvent]]:
    """
    Force the turn to the next player without any precondition (always succeeds).
    Returns a new state; the input is not modified.
    """
    return _advance_turn(state.copy(), reason="passed")


def replay_from_actions(
    initial_state: GameState,
    actions: list[Action],
    variant: VariantDefinition,
    advance_rule: PositionAdvanceRule | None = None,
) -> tuple[GameState, list[GameEvent]]:
    """
    Replay a series of actions from an initial state.
    Event sourcing: state is derived from action log.

    Args:
        initial_state: Starting game state
        actions: List of actions to apply in sequence
        variant: Variant definition
        advance_rule: Optional rule override

    Returns:
        Tuple of (final_state, all_events) after all actions applied

    Raises:
        ActionDeclined: at the first action that is not legal in sequence
    """
    current_state = initial_state.copy()
    all_events: list[GameEvent] = []

    for action in actions:
        current_state, events = apply_action(
            current_state,
            action,
            variant,
            advance_rule,
        )
        all_events.extend(events)

    return current_state, all_events
