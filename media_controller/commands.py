from enum import Enum
from typing import Optional, Tuple

from .models import ControlMessage, PlaybackTarget


class Action(str, Enum):
    PLAY = "play"
    PAUSE = "pause"
    BEGIN = "begin"
    NEXT = "next"
    PREV = "prev"
    VOLUME_UP = "volup"
    VOLUME_DOWN = "voldown"
    EXIT = "exit"
    UNKNOWN = "unknown"


# Literal action names accepted on the wire. "unknown" itself is not one of them.
_ACTIONS = {a.value: a for a in Action if a is not Action.UNKNOWN}


def decode_action(name: Optional[str]) -> Action:
    return _ACTIONS.get((name or "").strip(), Action.UNKNOWN)


def decode_message(message: ControlMessage) -> Tuple[Action, Optional[PlaybackTarget]]:
    """
    Maps a control message to its action. Only `play` with both season and
    episode carries a target; a bare `play` means "resume what is loaded".
    """
    action = decode_action(message.action)
    if action is Action.PLAY and message.season and message.episode:
        return action, PlaybackTarget(serie=message.scope, season=message.season, episode=message.episode)
    return action, None
