from abc import ABC, abstractmethod
from typing import Optional
from media_controller.models import PlayerInfo


# Transport vocabulary of the remote-control channel, passed through verbatim
PLAY = "play"
PAUSE = "pause"
STOP = "stop"
SEEK_START = "seek 0"
VOLUME_UP = "volup"
VOLUME_DOWN = "voldown"
CLEAR = "clear"


def add_command(path: str) -> str:
    return f"add {path}"


class MediaPlayerBase(ABC):
    """
    Owns one external player process and its line-oriented command channel.
    Callers only ever ask `is_running()`; nobody else touches the process.
    """
    type: str
    unloaded: bool = False
    media_path: Optional[str] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.unload()

    async def unload(self):
        """
        Release the player on shutdown. Subclasses close their channel here.
        """
        await self.stop()
        self.unloaded = True

    @abstractmethod
    def is_running(self) -> bool: ...

    def can_send(self) -> bool:
        """Whether commands can reach the player over its channel."""
        return self.is_running()

    @abstractmethod
    async def start(self, path: str): ...

    @abstractmethod
    async def send(self, *commands: str): ...

    async def ensure_loaded(self, path: str, *then: str) -> list[str]:
        """
        Spawns the player with `path` when its channel is not usable, otherwise queues
        `clear` + `add <path>`. Playback is not started implicitly; pass the
        follow-up commands in `then` to write them in the same batch.

        Returns the commands written to the channel.
        """
        if not self.can_send():
            # also a live process with a dead channel, start() replaces it
            await self.start(path)
            if then:
                await self.send(*then)
            return list(then)
        batch = [CLEAR, add_command(path), *then]
        await self.send(*batch)
        self.media_path = path
        return batch

    async def stop(self):
        if self.is_running():
            await self.send(STOP)

    @abstractmethod
    def get_state(self) -> Optional[PlayerInfo]: ...
