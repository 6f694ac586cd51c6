import asyncio
from contextlib import suppress
from typing import Optional

from media_controller.constants import PLAYER_EXECUTABLE, PLAYER_ARGS, PLAYER_STOP_TIMEOUT
from media_controller.errors import SpawnError, WriteError
from media_controller.models import PlayerInfo
from .mediaplayerbase import MediaPlayerBase, STOP


class VLCMediaPlayer(MediaPlayerBase):
    """
    VLC driven through its `rc` interface: one command per line on stdin.

    The media path is only passed on the command line of a fresh spawn, after
    that everything goes through the pipe (`clear`, `add <path>`, `play` ...).
    """

    def __init__(self, executable: str = PLAYER_EXECUTABLE, args: Optional[list] = None,
                 stop_timeout: float = PLAYER_STOP_TIMEOUT):
        self.type = "vlc"
        self.executable = executable
        self.args = list(PLAYER_ARGS if args is None else args)
        self.stop_timeout = stop_timeout
        self.process: Optional[asyncio.subprocess.Process] = None
        self.media_path: Optional[str] = None
        self._channel_broken = False

    def is_running(self) -> bool:
        return self.process is not None and self.process.returncode is None

    def can_send(self) -> bool:
        return self.is_running() and not self._channel_broken

    async def start(self, path: str):
        await self._replace_previous()

        print(f"🎬 Starting {self.executable} with: {path}")
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *self.args,
                path,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            # FileNotFoundError / PermissionError included
            print(f"❌ Failed to start {self.executable}: {e}")
            raise SpawnError(f"failed to start {self.executable}: {e}") from e

        self.process = process
        self.media_path = path
        self._channel_broken = False
        self.unloaded = False
        print(f"✅ {self.executable} started (pid {process.pid})")
        return process

    async def _replace_previous(self):
        """
        Drops the handle of a previous spawn. A process that is still alive is
        stopped and terminated first, a dead one is only reaped.
        """
        old = self.process
        if old is None:
            return
        self.process = None
        self.media_path = None

        if old.returncode is None:
            print(f"🛑 Replacing running player (pid {old.pid})")
            with suppress(OSError, RuntimeError):
                if old.stdin is not None and not old.stdin.is_closing():
                    old.stdin.write(f"{STOP}\n".encode("utf-8"))
            with suppress(ProcessLookupError):
                old.terminate()
            try:
                await asyncio.wait_for(old.wait(), timeout=self.stop_timeout)
            except asyncio.TimeoutError:
                print("⚠️ Player didn't terminate, killing...")
                with suppress(ProcessLookupError):
                    old.kill()
                await old.wait()
        else:
            print(f"🧹 Previous player exited with code {old.returncode}")

        if old.stdin is not None:
            with suppress(OSError, RuntimeError):
                old.stdin.close()

    async def send(self, *commands: str):
        """
        Writes the commands in order and flushes once. Raises `WriteError` when
        there is no channel (never started, exited, or a previous write broke).
        """
        if not commands:
            return
        if not self.can_send():
            raise WriteError("player channel unavailable")
        stdin = self.process.stdin
        if stdin is None or stdin.is_closing():
            raise WriteError("player channel closed")

        try:
            for command in commands:
                print(f"🎬 VLC CMD: {command}")
                stdin.write(f"{command}\n".encode("utf-8"))
            await stdin.drain()
        except (BrokenPipeError, ConnectionResetError, OSError) as e:
            self._channel_broken = True
            print(f"⚠️ Write to player failed: {e}")
            raise WriteError(f"write to player failed: {e}") from e

    async def unload(self):
        if self.unloaded:
            return
        print(f"🧹 Unloading VLC player for: {self.media_path}")
        try:
            await self.stop()
        except WriteError as e:
            print(f"⚠️ Could not stop player: {e}")
        if self.process is not None and self.process.stdin is not None:
            with suppress(OSError, RuntimeError):
                self.process.stdin.close()
        self.unloaded = True

    def get_state(self) -> PlayerInfo:
        return PlayerInfo(
            running=self.is_running(),
            pid=self.process.pid if self.process else None,
            returncode=self.process.returncode if self.process else None,
            media_path=self.media_path or "",
        )
