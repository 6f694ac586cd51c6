"""
Episode catalog.

Reads `<content_root>/<serie>/<season>/` and turns its video files into an
ordered list of episodes. Nothing here ever writes to the content tree.
"""

import re
from pathlib import Path
from typing import List, Optional, Union

from .constants import CONTENT_ROOT, VIDEO_EXTENSIONS
from .models import EpisodeEntry

_NON_DIGITS = re.compile(r"\D")


def numeric_order(name: str) -> int:
    """
    Strips every non-digit and parses what is left, `ep10` -> 10, `s1e02` -> 102.
    Names without digits get 0.
    """
    digits = _NON_DIGITS.sub("", name)
    return int(digits) if digits else 0


def _is_plain_name(value: str) -> bool:
    """A single path component: no separators, not `.` or `..`."""
    return bool(value) and value not in (".", "..") and not any(c in value for c in "/\\\0")


def _split_video_name(file_name: str) -> Optional[str]:
    """Returns the name without extension if it is an allowed video file."""
    stem, dot, ext = file_name.rpartition(".")
    if not dot or not stem or ext.lower() not in VIDEO_EXTENSIONS:
        return None
    return stem


class EpisodeCatalog:
    def __init__(self, content_root: Union[str, Path] = CONTENT_ROOT):
        self.content_root = Path(content_root)

    def season_dir(self, serie: str, season: str) -> Optional[Path]:
        """
        `<content_root>/<serie>/<season>`, or None when either name is not a
        single directory name (separators, `.` and `..` would leave the root).
        """
        if not _is_plain_name(serie) or not _is_plain_name(season):
            print(f"⚠️ Rejected path outside content root: {serie!r}/{season!r}")
            return None
        return self.content_root / serie / season

    def _video_files(self, serie: str, season: str) -> List[Path]:
        directory = self.season_dir(serie, season)
        if directory is None or not directory.is_dir():
            return []
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            print(f"⚠️ Cannot read {directory}: {e}")
            return []
        return [
            p for p in entries
            if p.is_file() and not p.name.startswith(".") and _split_video_name(p.name)
        ]

    def list_entries(self, serie: str, season: str) -> List[EpisodeEntry]:
        """
        One entry per episode id. An id stored in several formats
        (`ep1.mp4`, `ep1.mkv`) is listed once, with the file
        `resolve_episode` would pick.
        """
        files = []
        for path in self._video_files(serie, season):
            name = _split_video_name(path.name)
            files.append((numeric_order(name), name, path.name, path))
        files.sort(key=lambda f: f[:3])

        entries = []
        seen = set()
        for order, name, _, path in files:
            if name.lower() in seen:
                continue
            seen.add(name.lower())
            entries.append(EpisodeEntry(
                display_name=name,
                numeric_order=order,
                absolute_path=str(path.resolve()),
            ))
        return entries

    def list_episodes(self, serie: str, season: str) -> List[str]:
        """
        # List Episodes
        Episode ids of a season in playback order (numeric, then by name).
        An empty list means "no episodes", also for a missing directory.
        """
        return [e.display_name for e in self.list_entries(serie, season)]

    def resolve_episode(self, serie: str, season: str, episode_id: str) -> Optional[EpisodeEntry]:
        """
        # Resolve Episode
        Finds the file for `episode_id`. The name has to start with `<id>.`
        (case-insensitive) so `ep1` never picks `ep10.mp4`. With several
        candidates (same name, other extension) the smallest file name wins.
        """
        if not _is_plain_name(episode_id):
            return None
        prefix = episode_id.lower() + "."
        matches = sorted(
            (p for p in self._video_files(serie, season) if p.name.lower().startswith(prefix)),
            key=lambda p: p.name,
        )
        if not matches:
            return None
        chosen = matches[0]
        if len(matches) > 1:
            print(f"⚠️ {len(matches)} files match '{episode_id}', using {chosen.name}")
        return EpisodeEntry(
            display_name=episode_id,
            numeric_order=numeric_order(episode_id),
            absolute_path=str(chosen.resolve()),
        )
