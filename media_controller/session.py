from typing import Optional

from .models import PlaybackTarget, SessionInfo
from .players.mediaplayerbase import MediaPlayerBase


class Session:
    """
    What is currently loaded. `episode` is only ever set together with
    `serie` and `season`.

    The player is referenced, not owned: the session asks it `is_running()`
    and routes commands through it, nothing more.
    """

    def __init__(self, player: MediaPlayerBase):
        self.player = player
        self.serie: Optional[str] = None
        self.season: Optional[str] = None
        self.episode: Optional[str] = None

    @property
    def target(self) -> Optional[PlaybackTarget]:
        if self.serie is None or self.season is None or self.episode is None:
            return None
        return PlaybackTarget(serie=self.serie, season=self.season, episode=self.episode)

    def set_target(self, target: Optional[PlaybackTarget]):
        if target is None:
            self.serie = self.season = self.episode = None
            return
        self.serie, self.season, self.episode = target.serie, target.season, target.episode

    def is_loaded(self, target: PlaybackTarget) -> bool:
        return self.player.can_send() and self.target == target

    def snapshot(self) -> SessionInfo:
        if self.target is None:
            state = "empty"
        elif self.player.is_running():
            state = "loaded"
        else:
            state = "idle"
        return SessionInfo(
            state=state,
            serie=self.serie,
            season=self.season,
            episode=self.episode,
            player=self.player.get_state(),
        )
