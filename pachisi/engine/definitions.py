"""
Static variant definitions.
All variant data lives under data/variants/<variant_id>.json: dice count, start corners,
slot spacing, step size and the name of the position-advance rule.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pachisi.engine import NUM_PLAYERS

DATA_DIR = Path(__file__).parent.parent / "data"
VARIANTS_DIR = DATA_DIR / "variants"

# Variant ids are file stems: letters, digits and underscore only
VARIANT_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_]{1,64}$")


def _default_variant_id() -> str:
    """Single place for default: pachisi.config.DEFAULT_VARIANT_ID."""
    from pachisi.config import DEFAULT_VARIANT_ID
    return DEFAULT_VARIANT_ID


def _variant_path(variant_id: str) -> Path:
    return VARIANTS_DIR / f"{variant_id}.json"


@dataclass
class VariantDefinition:
    """Defines the immutable rule options of a game variant."""
    id: str
    display_name: str
    dice_count: int  # 1 = single-die variant, 2 = two-die variant
    # One (x, y) corner per seat, in seat order
    start_corners: list[tuple[float, float]] = field(default_factory=list)
    slot_spacing: float = 0.5  # Offset between pieces inside a start corner
    step_size: float = 0.5  # Board units per pip for the diagonal rule
    advance_rule: str = "diagonal"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "dice_count": self.dice_count,
            "start_corners": [list(c) for c in self.start_corners],
            "slot_spacing": self.slot_spacing,
            "step_size": self.step_size,
            "advance_rule": self.advance_rule,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VariantDefinition":
        """
        Build a variant from its JSON manifest.
        Raises ValueError when the manifest cannot describe a four-seat game.
        """
        if not isinstance(data, dict):
            raise ValueError("Variant manifest must be an object")
        corners_raw = data.get("start_corners")
        if not isinstance(corners_raw, list) or len(corners_raw) != NUM_PLAYERS:
            raise ValueError(f"Variant needs exactly {NUM_PLAYERS} start corners")
        corners = []
        for c in corners_raw:
            if not isinstance(c, (list, tuple)) or len(c) != 2:
                raise ValueError(f"Invalid start corner: {c!r}")
            corners.append((float(c[0]), float(c[1])))
        dice_count = int(data.get("dice_count", 2))
        if dice_count < 1:
            raise ValueError("dice_count must be at least 1")
        variant_id = str(data.get("id") or "")
        return cls(
            id=variant_id,
            display_name=str(data.get("display_name") or variant_id),
            dice_count=dice_count,
            start_corners=corners,
            slot_spacing=float(data.get("slot_spacing", 0.5)),
            step_size=float(data.get("step_size", 0.5)),
            advance_rule=str(data.get("advance_rule") or "diagonal"),
        )


def list_variants() -> list[dict]:
    """Return [{ id, display_name, dice_count }, ...] for all variants in data/variants/."""
    out = []
    if not VARIANTS_DIR.exists():
        return out
    for path in sorted(VARIANTS_DIR.glob("*.json")):
        try:
            with open(path, "r") as f:
                m = json.load(f)
        except (json.JSONDecodeError, OSError):
            continue
        out.append({
            "id": m.get("id", path.stem),
            "display_name": m.get("display_name", path.stem),
            "dice_count": m.get("dice_count", 2),
        })
    return out


def load_variant(variant_id: str | None = None) -> VariantDefinition:
    """
    Load a variant by id (default from pachisi.config).
    Raises FileNotFoundError if no manifest exists for the id.
    """
    if variant_id is None:
        variant_id = _default_variant_id()
    if not VARIANT_ID_PATTERN.match(variant_id):
        raise FileNotFoundError(f"Variant not found: {variant_id}")
    path = _variant_path(variant_id)
    if not path.exists():
        raise FileNotFoundError(f"Variant not found: {variant_id}")
    with open(path, "r") as f:
        data = json.load(f)
    data.setdefault("id", variant_id)
    return VariantDefinition.from_dict(data)
