from fastapi import FastAPI
from contextlib import asynccontextmanager

import time
import json

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

import media_controller.variables as vars

from media_controller.routers import control

from media_controller.constants import VERSION, CONTENT_ROOT, TOPIC_ROOT, SERVER_HOST, SERVER_PORT

from media_controller.utils.check_utils import check_dependencies

from media_controller.bus import parse_delivery
from media_controller.catalog import EpisodeCatalog
from media_controller.controller import PlaybackController
from media_controller.models import Delivery
from media_controller.players.vlcplayer import VLCMediaPlayer
from media_controller.session import Session

tags_metadata = [
    {
        "name": "Server Status",
        "description": "Get the status of the server.",
    },
    {
        "name": "Control",
        "description": "Remote playback commands: play, pause, begin, next, prev, volup, voldown, exit",
    },
    {
        "name": "Catalog",
        "description": "Episodes found under the content root.",
    },
]


# --- Lifespan ---


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run this on startup
    check_dependencies()

    player = VLCMediaPlayer()
    vars.controller = PlaybackController(Session(player), EpisodeCatalog(CONTENT_ROOT))
    print(f"✅ Media controller ready, content root: {CONTENT_ROOT}, topics: {TOPIC_ROOT}/#")
    yield

    if vars.controller is not None:
        await vars.controller.player.unload()
        vars.controller = None
    print("🛑 Media controller stopped")

# --- FastAPI App ---
app = FastAPI(
    title="Media Controller",
    description="Receives remote playback commands for a video library and drives a VLC player.",
    version=VERSION,
    openapi_tags=tags_metadata,
    lifespan=lifespan
)

app.include_router(control.router)

start_time = time.monotonic()


# ROUTES ------------------------------------------------------- #
@app.get("/", tags=["Server Status"], summary="Get server status")
def server_status():
    """
    # Get Server Status
    """
    uptime_seconds = time.monotonic() - start_time
    running = vars.controller is not None and vars.controller.player.is_running()
    return {
        "uptime_seconds": round(uptime_seconds, 2),
        "version": VERSION,
        "status": "running",
        "player_status": "running" if running else "stopped"
        }


@app.websocket("/ws/control")
async def websocket_control(websocket: WebSocket):
    """
    Every text frame is one delivery: `{"topic": "/media/<serie>", "payload": {...}}`.
    The reply is the dispatch result, or `{"error": ...}` when the frame is dropped.
    """
    await websocket.accept()
    print("🔌 WebSocket client connected")

    try:
        while True:
            message = await websocket.receive_text()
            print("📨 Received:", message)

            try:
                delivery = Delivery.model_validate_json(message)
            except ValidationError:
                await websocket.send_text(json.dumps({"error": "Invalid delivery"}))
                continue

            control_message = parse_delivery(delivery.topic, delivery.payload, TOPIC_ROOT)
            if control_message is None:
                await websocket.send_text(json.dumps({"error": f"Dropped delivery on topic {delivery.topic!r}"}))
                continue

            if vars.controller is None:
                await websocket.send_text(json.dumps({"error": "Controller not initialised"}))
                continue

            result = await vars.controller.handle(control_message)
            await websocket.send_text(result.model_dump_json())

    except WebSocketDisconnect:
        print("❌ WebSocket client disconnected")


def run():
    import uvicorn
    uvicorn.run("media_controller.main:app", host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    run()
