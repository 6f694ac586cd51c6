from fastapi import APIRouter, Body, Depends
from fastapi.exceptions import HTTPException

import media_controller.variables as vars

from ..bus import parse_delivery
from ..constants import TOPIC_ROOT
from ..controller import PlaybackController
from ..models import CommandPayload, ControlMessage, Delivery, DispatchResult, EpisodeEntry, SessionInfo


router = APIRouter()


def get_controller() -> PlaybackController:
    if vars.controller is None:
        raise HTTPException(status_code=503, detail="Controller not initialised")
    return vars.controller


@router.post("/media/{serie}", tags=["Control"], summary="Send a command for a serie", response_model=DispatchResult)
async def control_serie(serie: str,
                        payload: CommandPayload = Body(...),
                        controller: PlaybackController = Depends(get_controller)):
    """
    # Control Serie
    Same as publishing `payload` on `/media/{serie}`.

    - `play` with `season` and `episode` loads that episode (spawning the player if needed)
    - `play` alone resumes whatever is loaded
    - `pause`, `begin`, `next`, `prev`, `volup`, `voldown`, `exit`
    """
    message = ControlMessage(scope=serie, action=payload.action, season=payload.season, episode=payload.episode)
    return await controller.handle(message)


@router.post("/publish", tags=["Control"], summary="Deliver a raw topic + payload", response_model=DispatchResult)
async def publish(delivery: Delivery, controller: PlaybackController = Depends(get_controller)):
    """
    # Publish
    Takes a delivery as it would arrive from the message bus. The serie is read
    from the topic, e.g. `/media/advtime`. Deliveries that do not parse are
    rejected with 400 and never reach the controller.
    """
    message = parse_delivery(delivery.topic, delivery.payload, TOPIC_ROOT)
    if message is None:
        raise HTTPException(status_code=400, detail=f"Dropped delivery on topic {delivery.topic!r}")
    return await controller.handle(message)


@router.get("/session", tags=["Control"], summary="Current session", response_model=SessionInfo)
def current_session(controller: PlaybackController = Depends(get_controller)):
    return controller.session.snapshot()


@router.get("/catalog/{serie}/{season}", tags=["Catalog"], summary="Episodes of a season", response_model=list[EpisodeEntry])
def season_catalog(serie: str, season: str, controller: PlaybackController = Depends(get_controller)):
    """
    # Season Catalog
    Episodes in playback order.
    """
    entries = controller.catalog.list_entries(serie, season)
    if not entries:
        raise HTTPException(status_code=404, detail=f"No episodes in {serie}/{season}")
    return entries
