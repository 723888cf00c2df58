"""
Pachisi Game Engine
Core turn/dice/move state machine without web framework or rendering
"""

DIE_SIDES = 6
NUM_PLAYERS = 4
PIECES_PER_PLAYER = 4

# Seat order. A player's seat index doubles as their color id.
PLAYER_COLORS = ("red", "green", "blue", "yellow")
# Display color per seat, same order as PLAYER_COLORS
PLAYER_COLOR_HEX = ("#ff0000", "#00ff00", "#0000ff", "#ffff00")
