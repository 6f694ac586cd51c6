import os
from .utils.resource_fetchers import load_config, get_setting
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

VERSION = "0.1.0"

CONFIG_PATH = Path(os.environ.get("MEDIA_CONTROLLER_CONFIG", BASE_DIR / "configs" / "config.yaml"))

config = load_config(CONFIG_PATH)

CONTENT_ROOT = Path(get_setting(config, "content_root", "/media"))
TOPIC_ROOT = get_setting(config, "topic_root", "/media")

PLAYER_EXECUTABLE = get_setting(config, "player.executable", "vlc")
PLAYER_ARGS = list(get_setting(config, "player.args", ["--intf", "rc", "--quiet"]))
PLAYER_STOP_TIMEOUT = float(get_setting(config, "player.stop_timeout", 5))

SERVER_HOST = get_setting(config, "server.host", "0.0.0.0")
SERVER_PORT = int(get_setting(config, "server.port", 8000))

# Lowercase, without the dot
VIDEO_EXTENSIONS = frozenset({"mp4", "mkv", "avi", "mpeg", "mpg", "mov", "webm"})

REQUIRED_EXECUTABLES = [PLAYER_EXECUTABLE]
