"""
Position-advance rules.
A rule maps (piece, die_value, variant) to the piece's next position. The turn and dice
logic never looks inside a rule, so a real board-path rule can replace the placeholder.
"""

from typing import Callable

from pachisi.engine.state import Piece, Position
from pachisi.engine.definitions import VariantDefinition

PositionAdvanceRule = Callable[[Piece, int, VariantDefinition], Position]


def diagonal_advance(piece: Piece, die_value: int, variant: VariantDefinition) -> Position:
    """
    Placeholder rule: displace the piece along the board diagonal by die_value steps.
    Does not follow the Pachisi track.
    """
    offset = die_value * variant.step_size
    return Position(x=piece.position.x + offset, y=piece.position.y + offset)


def stay_put(piece: Piece, die_value: int, variant: VariantDefinition) -> Position:
    """Consume the die without moving the piece."""
    return Position(x=piece.position.x, y=piece.position.y)


ADVANCE_RULES: dict[str, PositionAdvanceRule] = {
    "diagonal": diagonal_advance,
    "stay_put": stay_put,
}


def register_advance_rule(name: str, rule: PositionAdvanceRule) -> None:
    """Make a rule selectable by name from a variant manifest."""
    ADVANCE_RULES[name] = rule


def get_advance_rule(name: str) -> PositionAdvanceRule:
    """Look up a rule by name. Raises ValueError for unknown names."""
    rule = ADVANCE_RULES.get(name)
    if rule is None:
        raise ValueError(
            f"Unknown advance rule '{name}'. Known rules: {', '.join(sorted(ADVANCE_RULES))}"
        )
    return rule
