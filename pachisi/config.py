"""
Single place for default game configuration.
Change DEFAULT_VARIANT_ID to switch which variant is used when creating a new game (when no variant_id is provided).
"""
# Variant id from data/variants/<id>.json (e.g. "two_dice", "single_die"). This is the default for new games.
DEFAULT_VARIANT_ID = "two_dice"
