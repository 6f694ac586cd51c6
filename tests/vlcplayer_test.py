"""Tests for the VLC process manager."""

from unittest.mock import patch

import asyncio

import pytest

from media_controller.errors import SpawnError, WriteError
from media_controller.players.vlcplayer import VLCMediaPlayer


class FakeStdin:
    def __init__(self, broken: bool = False):
        self.lines: list[str] = []
        self.drains = 0
        self.closed = False
        self.broken = broken

    def write(self, data: bytes) -> None:
        self.lines.append(data.decode("utf-8"))

    async def drain(self) -> None:
        if self.broken:
            raise BrokenPipeError("Broken pipe")
        self.drains += 1

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True


class FakeProcess:
    """Fake asyncio subprocess."""

    _next_pid = 1000

    def __init__(self, alive: bool = True, broken: bool = False):
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.returncode = None if alive else 0
        self.stdin = FakeStdin(broken=broken)
        self.terminated = False
        self.killed = False

    def terminate(self) -> None:
        self.terminated = True
        self.returncode = -15

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode


class FakeExec:
    """Stands in for asyncio.create_subprocess_exec."""

    def __init__(self, *processes, error: Exception = None):
        self.processes = list(processes)
        self.error = error
        self.calls: list[tuple] = []

    async def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        return self.processes.pop(0)


def make_player() -> VLCMediaPlayer:
    return VLCMediaPlayer(executable="vlc", args=["--intf", "rc", "--quiet"], stop_timeout=0.1)


def patched(fake_exec: FakeExec):
    return patch("media_controller.players.vlcplayer.asyncio.create_subprocess_exec", new=fake_exec)


def written(process: FakeProcess) -> list[str]:
    return [line.rstrip("\n") for line in process.stdin.lines]


class TestStart:
    def test_spawns_with_rc_interface_and_path(self):
        proc = FakeProcess()
        fake_exec = FakeExec(proc)
        player = make_player()
        with patched(fake_exec):
            asyncio.run(player.start("/media/show/s1/ep1.mp4"))

        args, kwargs = fake_exec.calls[0]
        assert args == ("vlc", "--intf", "rc", "--quiet", "/media/show/s1/ep1.mp4")
        assert kwargs["stdin"] == asyncio.subprocess.PIPE
        assert player.is_running() is True
        assert player.media_path == "/media/show/s1/ep1.mp4"

    def test_executable_missing_is_spawn_error(self):
        player = make_player()
        with patched(FakeExec(error=FileNotFoundError("vlc"))):
            with pytest.raises(SpawnError):
                asyncio.run(player.start("/media/show/s1/ep1.mp4"))
        assert player.is_running() is False

    def test_permission_denied_is_spawn_error(self):
        player = make_player()
        with patched(FakeExec(error=PermissionError("denied"))):
            with pytest.raises(SpawnError):
                asyncio.run(player.start("/x.mp4"))

    def test_replaces_live_previous_process(self):
        first, second = FakeProcess(), FakeProcess()
        player = make_player()
        with patched(FakeExec(first, second)):
            asyncio.run(player.start("/a.mp4"))
            asyncio.run(player.start("/b.mp4"))

        assert first.terminated is True
        assert "stop" in written(first)
        assert first.stdin.closed is True
        assert player.process is second
        assert player.media_path == "/b.mp4"

    def test_dead_previous_process_only_reaped(self):
        first, second = FakeProcess(), FakeProcess()
        player = make_player()
        with patched(FakeExec(first, second)):
            asyncio.run(player.start("/a.mp4"))
            first.returncode = 0
            assert player.is_running() is False
            asyncio.run(player.start("/b.mp4"))

        assert first.terminated is False
        assert written(first) == []
        assert player.process is second
        assert player.is_running() is True


class TestSend:
    def test_writes_lines_in_order_and_drains_once(self):
        proc = FakeProcess()
        player = make_player()

        async def scenario():
            await player.start("/a.mp4")
            await player.send("clear", "add /b.mp4", "play")

        with patched(FakeExec(proc)):
            asyncio.run(scenario())

        assert proc.stdin.lines == ["clear\n", "add /b.mp4\n", "play\n"]
        assert proc.stdin.drains == 1

    def test_not_started_is_write_error(self):
        with pytest.raises(WriteError):
            asyncio.run(make_player().send("play"))

    def test_exited_process_is_write_error(self):
        proc = FakeProcess()
        player = make_player()
        with patched(FakeExec(proc)):
            asyncio.run(player.start("/a.mp4"))
        proc.returncode = 0
        with pytest.raises(WriteError):
            asyncio.run(player.send("play"))

    def test_broken_pipe_marks_channel_unusable(self):
        proc = FakeProcess(broken=True)
        player = make_player()
        with patched(FakeExec(proc)):
            asyncio.run(player.start("/a.mp4"))
        with pytest.raises(WriteError):
            asyncio.run(player.send("play"))

        proc.stdin.broken = False
        with pytest.raises(WriteError):
            asyncio.run(player.send("pause"))
        assert written(proc) == ["play"]

    def test_new_spawn_resets_broken_channel(self):
        first, second = FakeProcess(broken=True), FakeProcess()
        player = make_player()
        with patched(FakeExec(first, second)):
            asyncio.run(player.start("/a.mp4"))
            with pytest.raises(WriteError):
                asyncio.run(player.send("play"))
            first.returncode = 1
            asyncio.run(player.start("/a.mp4"))
        asyncio.run(player.send("play"))
        assert written(second) == ["play"]


class TestEnsureLoaded:
    def test_not_running_spawns_with_path(self):
        proc = FakeProcess()
        fake_exec = FakeExec(proc)
        player = make_player()
        with patched(fake_exec):
            commands = asyncio.run(player.ensure_loaded("/a.mp4"))

        assert len(fake_exec.calls) == 1
        assert fake_exec.calls[0][0][-1] == "/a.mp4"
        assert commands == []
        assert written(proc) == []

    def test_not_running_then_commands_follow_spawn(self):
        proc = FakeProcess()
        player = make_player()
        with patched(FakeExec(proc)):
            commands = asyncio.run(player.ensure_loaded("/a.mp4", "play"))
        assert commands == ["play"]
        assert written(proc) == ["play"]

    def test_running_clears_and_adds_without_playing(self):
        proc = FakeProcess()
        fake_exec = FakeExec(proc)
        player = make_player()

        async def scenario():
            await player.start("/a.mp4")
            return await player.ensure_loaded("/b.mp4")

        with patched(fake_exec):
            commands = asyncio.run(scenario())

        assert len(fake_exec.calls) == 1
        assert commands == ["clear", "add /b.mp4"]
        assert written(proc) == ["clear", "add /b.mp4"]
        assert player.media_path == "/b.mp4"

    def test_broken_channel_with_live_process_respawns(self):
        first, second = FakeProcess(broken=True), FakeProcess()
        fake_exec = FakeExec(first, second)
        player = make_player()

        async def scenario():
            await player.start("/a.mp4")
            with pytest.raises(WriteError):
                await player.send("play")
            assert player.is_running() is True
            assert player.can_send() is False
            return await player.ensure_loaded("/b.mp4", "play")

        with patched(fake_exec):
            commands = asyncio.run(scenario())

        assert len(fake_exec.calls) == 2
        assert fake_exec.calls[1][0][-1] == "/b.mp4"
        assert first.terminated is True
        assert player.process is second
        assert commands == ["play"]
        assert written(second) == ["play"]


class TestStopAndState:
    def test_stop_sends_stop_without_killing(self):
        proc = FakeProcess()
        player = make_player()

        async def scenario():
            await player.start("/a.mp4")
            await player.stop()

        with patched(FakeExec(proc)):
            asyncio.run(scenario())

        assert written(proc) == ["stop"]
        assert proc.terminated is False
        assert proc.killed is False

    def test_stop_when_not_running_is_noop(self):
        asyncio.run(make_player().stop())

    def test_unload_stops_and_closes_pipe(self):
        proc = FakeProcess()
        player = make_player()

        async def scenario():
            await player.start("/a.mp4")
            await player.unload()

        with patched(FakeExec(proc)):
            asyncio.run(scenario())

        assert written(proc) == ["stop"]
        assert proc.stdin.closed is True
        assert player.unloaded is True

    def test_get_state(self):
        proc = FakeProcess()
        player = make_player()
        assert player.get_state().running is False

        with patched(FakeExec(proc)):
            asyncio.run(player.start("/a.mp4"))

        state = player.get_state()
        assert state.running is True
        assert state.pid == proc.pid
        assert state.media_path == "/a.mp4"


if __name__ == "__main__":
    from testing import run_tests

    run_tests(__file__)
