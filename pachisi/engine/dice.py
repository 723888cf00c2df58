"""
Dice rolling behind an injectable random source.
The reducer never draws randomness itself: rolls are made here and carried in the roll_dice action.
"""

import random
from typing import Protocol

from pachisi.engine import DIE_SIDES


class RandomSource(Protocol):
    """Anything with randint(a, b) inclusive, e.g. random.Random."""

    def randint(self, a: int, b: int) -> int: ...


class ScriptedDice:
    """
    Random source that replays a fixed sequence of faces.
    Used for deterministic tests and replays; raises IndexError when exhausted.
    """

    def __init__(self, faces: list[int]):
        self._faces = list(faces)
        self._pos = 0

    def randint(self, a: int, b: int) -> int:
        if self._pos >= len(self._faces):
            raise IndexError("ScriptedDice ran out of faces")
        face = self._faces[self._pos]
        self._pos += 1
        if not a <= face <= b:
            raise ValueError(f"Scripted face {face} outside [{a}, {b}]")
        return face

    @property
    def remaining(self) -> int:
        return len(self._faces) - self._pos


def make_random_source(seed: int | None = None) -> random.Random:
    """Fresh random source for a game session (seeded for reproducible games)."""
    return random.Random(seed)


def roll_die(source: RandomSource) -> int:
    """Roll one six-sided die."""
    return source.randint(1, DIE_SIDES)


def roll_dice(source: RandomSource, count: int) -> list[int]:
    """Roll count independent six-sided dice."""
    return [roll_die(source) for _ in range(count)]


def is_valid_face(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= DIE_SIDES
