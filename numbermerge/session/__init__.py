# -*- coding: utf-8 -*-
"""
Game session: state, undo snapshots, persistence and the move control flow.
"""

from .game import NumberMerge, Turn
from .state import SessionState, UndoState, new_session, restore, snapshot
from .storage import SessionStore, state_from_dict, state_to_dict

__all__ = [
    "NumberMerge",
    "Turn",
    "SessionState",
    "UndoState",
    "new_session",
    "restore",
    "snapshot",
    "SessionStore",
    "state_from_dict",
    "state_to_dict",
]
