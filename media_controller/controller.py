"""
Playback session controller.

Takes decoded control messages one at a time and turns them into session
updates and transport commands for the player. A message is handled
completely (decode, resolve, load, send) before the next one starts.
"""

import asyncio
import os
import signal
from typing import Callable, Optional

from .catalog import EpisodeCatalog
from .commands import Action, decode_message
from .errors import ControllerError, DecodeSkip, NoTarget, NotFound, OutOfRange, SpawnError, WriteError
from .models import ControlMessage, DispatchResult, PlaybackTarget
from .players.mediaplayerbase import PLAY, PAUSE, STOP, SEEK_START, VOLUME_UP, VOLUME_DOWN
from .session import Session


def terminate_self():
    # uvicorn turns SIGTERM into a graceful shutdown (lifespan cleanup runs)
    os.kill(os.getpid(), signal.SIGTERM)


class PlaybackController:
    def __init__(self, session: Session, catalog: EpisodeCatalog,
                 on_exit: Optional[Callable[[], None]] = None):
        self.session = session
        self.catalog = catalog
        self.on_exit = on_exit or terminate_self
        self._lock = asyncio.Lock()

        # Commands that only make sense with a running player
        self._transport = {
            Action.PAUSE: [PAUSE],
            Action.BEGIN: [SEEK_START, PLAY],
            Action.VOLUME_UP: [VOLUME_UP],
            Action.VOLUME_DOWN: [VOLUME_DOWN],
        }

    @property
    def player(self):
        return self.session.player

    async def handle(self, message: ControlMessage) -> DispatchResult:
        async with self._lock:
            action, target = decode_message(message)
            print(f"📨 Message for '{message.scope}': action={message.action!r} "
                  f"season={message.season!r} episode={message.episode!r}")
            result = DispatchResult(action=action.value)

            try:
                await self._dispatch(action, target, result)
            except DecodeSkip as e:
                print(f"⚠️ Unknown action: {message.action!r}")
                result.status, result.error, result.detail = "skipped", e.code, e.message
            except ControllerError as e:
                print(f"❌ {action.value} failed [{e.code}]: {e.message}")
                result.status, result.error, result.detail = "failed", e.code, e.message

            result.session = self.session.snapshot()

        if action is Action.EXIT:
            print("🛑 Shutting down media controller...")
            self.on_exit()
        return result

    async def _dispatch(self, action: Action, target: Optional[PlaybackTarget], result: DispatchResult):
        if action is Action.UNKNOWN:
            raise DecodeSkip("unknown action")

        if action is Action.PLAY:
            if target is None:
                await self._send_if_running(result, PLAY)
            else:
                await self._play_target(target, result)
        elif action is Action.NEXT:
            await self._change_episode(+1, result)
        elif action is Action.PREV:
            await self._change_episode(-1, result)
        elif action is Action.EXIT:
            await self._stop(result)
        else:
            await self._send_if_running(result, *self._transport[action])

    async def _send_if_running(self, result: DispatchResult, *commands: str):
        if not self.player.is_running():
            print("⚠️ No video running")
            result.status, result.detail = "skipped", "no video running"
            return
        await self.player.send(*commands)
        result.commands.extend(commands)

    async def _play_target(self, target: PlaybackTarget, result: DispatchResult):
        if self.session.is_loaded(target):
            await self.player.send(PLAY)
            result.commands.append(PLAY)
            return

        await self._load(await self._resolve(target), target, result)

    async def _resolve(self, target: PlaybackTarget) -> str:
        # directory scans run off the event loop
        entry = await asyncio.to_thread(self.catalog.resolve_episode, target.serie, target.season, target.episode)
        if entry is None:
            raise NotFound(f"no file for {target.serie}/{target.season}/{target.episode}")
        return entry.absolute_path

    async def _change_episode(self, delta: int, result: DispatchResult):
        current = self.session.target
        if current is None:
            raise NoTarget("no episode loaded")

        episodes = await asyncio.to_thread(self.catalog.list_episodes, current.serie, current.season)
        lowered = [e.lower() for e in episodes]
        if current.episode.lower() not in lowered:
            raise NotFound(f"episode {current.episode} not in {current.serie}/{current.season}")

        new_index = lowered.index(current.episode.lower()) + delta
        if new_index < 0 or new_index >= len(episodes):
            raise OutOfRange("no episode in that direction")

        target = PlaybackTarget(serie=current.serie, season=current.season, episode=episodes[new_index])
        await self._load(await self._resolve(target), target, result)

    async def _load(self, path: str, target: PlaybackTarget, result: DispatchResult):
        # The session points at the new target before the player is touched.
        # A failed spawn puts the previous target back.
        previous = self.session.target
        self.session.set_target(target)
        print(f"🎬 Loading {target.serie}/{target.season}/{target.episode}: {path}")
        try:
            written = await self.player.ensure_loaded(path, PLAY)
        except SpawnError:
            self.session.set_target(previous)
            raise
        result.commands.extend(written)
        result.detail = path

    async def _stop(self, result: DispatchResult):
        was_running = self.player.is_running()
        try:
            await self.player.stop()
            if was_running:
                result.commands.append(STOP)
        except WriteError as e:
            # exit goes on regardless
            print(f"⚠️ Could not stop player: {e.message}")
            result.detail = e.message
