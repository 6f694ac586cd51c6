# DATA MODELS ------------------------------------------------------- #
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any, Literal


class CommandPayload(BaseModel):
    """Payload published on a control topic."""
    action: str = Field("", description="One of: play, pause, begin, next, prev, volup, voldown, exit")
    season: Optional[str] = Field(None, description="Season directory name")
    episode: Optional[str] = Field(None, description="Episode identifier, the file name without extension")


class ControlMessage(BaseModel):
    # scope is the serie taken from the routing key
    scope: str
    action: str
    season: Optional[str] = None
    episode: Optional[str] = None


class Delivery(BaseModel):
    topic: str
    payload: Optional[Any] = None


class PlaybackTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    serie: str
    season: str
    episode: str


class EpisodeEntry(BaseModel):
    display_name: str
    numeric_order: int = 0
    absolute_path: str


class PlayerInfo(BaseModel):
    running: bool = False
    pid: Optional[int] = None
    returncode: Optional[int] = None
    media_path: Optional[str] = ""


class SessionInfo(BaseModel):
    state: Literal["empty", "loaded", "idle"] = "empty"
    serie: Optional[str] = None
    season: Optional[str] = None
    episode: Optional[str] = None
    player: PlayerInfo = PlayerInfo()


class DispatchResult(BaseModel):
    action: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    error: Optional[str] = None
    detail: str = ""
    commands: list[str] = []
    session: SessionInfo = SessionInfo()
