"""Human-readable names for the numeric codes stored in a replay.

Values in the replay model are always stored as their raw codes; labels are only consulted when rendering.
"""
from __future__ import annotations

from enum import IntEnum
from functools import lru_cache

from .enums import ActionState, CSSCharacter, Hurtbox, InGameCharacter, LCancel, Stage
from .event import End, Start
from .util import Port

CATEGORIES: dict[str, type[IntEnum]] = {
    "state": ActionState,
    "character": InGameCharacter,
    "css_character": CSSCharacter,
    "stage": Stage,
    "player_type": Start.Player.Type,
    "team": Start.Player.Team,
    "dash_back": Start.Player.UCF.DashBack,
    "shield_drop": Start.Player.UCF.ShieldDrop,
    "end_method": End.Method,
    "hurtbox": Hurtbox,
    "l_cancel": LCancel,
    "port": Port,
}


@lru_cache(maxsize=2048)
def lookup(category: str, code: int) -> str | None:
    """Returns the label for `code`, or None if the category or the code is unknown."""
    enum_type = CATEGORIES.get(category)
    if enum_type is None or isinstance(code, bool) or not isinstance(code, int):
        return None
    try:
        return enum_type(code).name
    except ValueError:
        return None


def annotate(category: str | None, code):
    """Renders `code` as "<code>:<LABEL>" if a label exists, otherwise returns it unchanged."""
    if category is None or code is None:
        return code
    label = lookup(category, int(code)) if isinstance(code, int) else None
    return code if label is None else f"{int(code)}:{label}"
